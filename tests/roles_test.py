import pytest

from awsaiml.errors import ValidationError
from awsaiml.plan import CREATED, REUSED, ROLE_KEY
from awsaiml.roles import output_object_arn, resolve_role

ROLE_ARN = "arn:aws:iam::123456789012:role/shared-textract"


def test_existing_role_is_reused_verbatim() -> None:
    role = resolve_role("docs", "textract", existing_role_arn=ROLE_ARN, input_bucket="docs", output_bucket="out")
    assert role.mode == REUSED
    assert role.effective_arn == ROLE_ARN
    assert role.fragments == ()
    assert role.dependencies == ()
    assert role.declarations({"team": "ml"}) == []


def test_created_role_trusts_only_the_service() -> None:
    role = resolve_role("docs", "textract")
    assert role.mode == CREATED
    assert role.role_name == "docs-textract-role"
    assert role.effective_arn == f"ref:{ROLE_KEY}.arn"
    assert role.trust_policy["Statement"] == [
        {"Effect": "Allow", "Principal": {"Service": "textract.amazonaws.com"}, "Action": "sts:AssumeRole"}
    ]
    # without data locations only the service grant is left
    assert [f.key for f in role.fragments] == ["service"]
    service = role.fragment("service").document["Statement"][0]
    assert service["Action"] == ["textract:*"]
    assert service["Resource"] == "*"


def test_input_bucket_grants_read_and_defaults_write() -> None:
    role = resolve_role("docs", "textract", input_bucket="docs")
    assert [f.key for f in role.fragments] == ["s3_input", "s3_output", "service"]
    read = role.fragment("s3_input").document["Statement"][0]
    assert read["Resource"] == ["arn:aws:s3:::docs", "arn:aws:s3:::docs/*"]
    write = role.fragment("s3_output").document["Statement"][0]
    assert write["Action"] == ["s3:PutObject"]
    assert write["Resource"] == "arn:aws:s3:::docs/*"
    assert write["Condition"] == {"StringEquals": {"s3:x-amz-server-side-encryption": ["AES256", "aws:kms"]}}


def test_output_bucket_is_used_verbatim() -> None:
    role = resolve_role("docs", "textract", input_bucket="docs", output_bucket="results", output_prefix="run")
    write = role.fragment("s3_output").document["Statement"][0]
    assert write["Resource"] == "arn:aws:s3:::results/run/*"


def test_output_bucket_alone_only_writes() -> None:
    role = resolve_role("docs", "rekognition", output_bucket="results")
    assert role.fragment("s3_input") is None
    assert role.fragment("s3_output") is not None


@pytest.mark.parametrize(
    "prefix,expected",
    [
        (None, "arn:aws:s3:::docs/*"),
        ("", "arn:aws:s3:::docs/*"),
        ("out", "arn:aws:s3:::docs/out/*"),
        ("/out/", "arn:aws:s3:::docs/out/*"),
        ("a/b", "arn:aws:s3:::docs/a/b/*"),
    ],
)
def test_output_prefix_appears_once(prefix, expected) -> None:
    assert output_object_arn("docs", None, prefix) == expected


def test_role_name_must_fit_iam_limit() -> None:
    name = "n" * (64 - len("-textract-role"))
    assert resolve_role(name, "textract").role_name == f"{name}-textract-role"
    with pytest.raises(ValidationError) as error:
        resolve_role(name + "n", "textract")
    assert error.value.field == "name"
    # a reused role is never renamed, so the limit does not apply
    assert resolve_role(name + "n", "textract", existing_role_arn=ROLE_ARN).mode == REUSED


def test_stream_kms_and_topic_fragments() -> None:
    video = "arn:aws:kinesisvideo:us-east-1:123456789012:stream/cam/1"
    data = "arn:aws:kinesis:us-east-1:123456789012:stream/out"
    key = "arn:aws:kms:us-east-1:123456789012:key/abc"
    topic = "arn:aws:sns:us-east-1:123456789012:alerts"
    role = resolve_role(
        "cam",
        "rekognition",
        kinesis_video_arns=[video],
        kinesis_data_arns=[data],
        kms_key_arns=[key],
        sns_topic_arns=[topic],
    )
    assert [f.key for f in role.fragments] == ["kinesis", "kms", "sns", "service"]
    video_statement, data_statement = role.fragment("kinesis").document["Statement"]
    assert video_statement["Resource"] == [video]
    assert data_statement["Action"] == ["kinesis:PutRecord", "kinesis:PutRecords"]
    assert role.fragment("kms").document["Statement"][0]["Resource"] == [key]
    assert role.fragment("sns").document["Statement"][0]["Action"] == ["sns:Publish"]


def test_declarations_attach_every_fragment() -> None:
    role = resolve_role("docs", "textract", input_bucket="docs")
    declarations = role.declarations({"team": "ml"})
    assert [d.key for d in declarations] == [
        "iam_role",
        "s3_input_policy",
        "s3_input_policy_attachment",
        "s3_output_policy",
        "s3_output_policy_attachment",
        "service_policy",
        "service_policy_attachment",
    ]
    attachment = declarations[2]
    assert attachment.type == "aws:iam.RolePolicyAttachment"
    assert attachment.args == {"role": "ref:iam_role.name", "policy_arn": "ref:s3_input_policy.arn"}
    assert declarations[1].args["name"] == "docs-textract-s3-input"
    assert declarations[0].args["tags"] == {"team": "ml"}
    assert role.dependencies == (
        "s3_input_policy_attachment",
        "s3_output_policy_attachment",
        "service_policy_attachment",
    )
