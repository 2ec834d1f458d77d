import pytest

from awsaiml import ValidationError, plan_module
from awsaiml.textract import Adapter, RoleOnly

SCENARIO = {
    "name": "inv-adapter",
    "resource_type": "adapter",
    "s3_bucket_name": "docs",
    "adapter_versions": [
        {"version_name": "v1", "dataset_config": {"manifest_s3_object": {"bucket": "train", "name": "m.json"}}}
    ],
}


def test_adapter_with_one_version() -> None:
    plan = plan_module("textract", SCENARIO)
    assert isinstance(plan.variant, Adapter)
    assert len(plan.variant.adapter_versions) == 1

    assert plan.role.created
    read = plan.role.fragment("s3_input").document["Statement"][0]
    assert read["Resource"] == ["arn:aws:s3:::docs", "arn:aws:s3:::docs/*"]
    write = plan.role.fragment("s3_output").document["Statement"][0]
    assert write["Resource"] == "arn:aws:s3:::docs/*"

    adapter = plan.resource("adapter")
    assert adapter.type == "aws-native:textract.Adapter"
    assert adapter.args["adapter_name"] == "inv-adapter"
    assert adapter.args["feature_types"] == ["QUERIES"]
    assert adapter.args["auto_update"] == "DISABLED"
    assert adapter.depends_on == (
        "s3_input_policy_attachment",
        "s3_output_policy_attachment",
        "service_policy_attachment",
    )

    version = plan.resource("adapter_version_v1")
    assert version.args["adapter_id"] == "ref:adapter.adapter_id"
    assert version.args["dataset_config"] == {"manifest_s3_object": {"bucket": "train", "name": "m.json"}}
    assert version.args["output_config"] == {"s3_bucket": "docs", "s3_prefix": ""}
    assert version.depends_on[0] == "adapter"

    assert plan.outputs["adapter_id"] == "ref:adapter.adapter_id"
    assert plan.outputs["adapter_version_arns"] == {"v1": "ref:adapter_version_v1.adapter_version_arn"}
    assert plan.outputs["s3_input_policy_arn"] == "ref:s3_input_policy.arn"


def test_version_output_follows_output_location() -> None:
    plan = plan_module(
        "textract", dict(SCENARIO, output_s3_bucket_name="results", output_key_prefix="adapters")
    )
    assert plan.resource("adapter_version_v1").args["output_config"] == {"s3_bucket": "results", "s3_prefix": "adapters"}
    write = plan.role.fragment("s3_output").document["Statement"][0]
    assert write["Resource"] == "arn:aws:s3:::results/adapters/*"


def test_feature_types_must_be_known() -> None:
    plan = plan_module("textract", dict(SCENARIO, feature_types=["QUERIES", "TABLES"]))
    assert plan.variant.feature_types == ("QUERIES", "TABLES")
    with pytest.raises(ValidationError) as error:
        plan_module("textract", dict(SCENARIO, feature_types=["QUERIES", "HANDWRITING"]))
    assert error.value.field == "feature_types"


def test_auto_update_enum() -> None:
    with pytest.raises(ValidationError):
        plan_module("textract", dict(SCENARIO, auto_update="SOMETIMES"))


@pytest.mark.parametrize(
    "version",
    [
        {"version_name": "v1"},
        {"version_name": "v1", "dataset_config": {"manifest_s3_object": {"bucket": "train"}}},
        {"version_name": "v 1", "dataset_config": {"manifest_s3_object": {"bucket": "train", "name": "m.json"}}},
        {"version_name": "v1", "dataset_config": ["x"]},
        {"version_name": "v1", "dataset_config": {"manifest_s3_object": "s3://train/m.json"}},
        {
            "version_name": "v1",
            "dataset_config": {"manifest_s3_object": {"bucket": "train", "name": "m.json"}},
            "output_config": "out",
        },
        {
            "version_name": "v1",
            "dataset_config": {"manifest_s3_object": {"bucket": "train", "name": "m.json"}},
            "tags": ["team"],
        },
        "v1",
    ],
)
def test_invalid_adapter_versions(version) -> None:
    with pytest.raises(ValidationError):
        plan_module("textract", dict(SCENARIO, adapter_versions=[version]))


def test_version_names_are_unique() -> None:
    with pytest.raises(ValidationError):
        plan_module("textract", dict(SCENARIO, adapter_versions=SCENARIO["adapter_versions"] * 2))


def test_version_needs_an_output_bucket() -> None:
    inputs = dict(SCENARIO)
    del inputs["s3_bucket_name"]
    with pytest.raises(ValidationError):
        plan_module("textract", inputs)


def test_role_only() -> None:
    plan = plan_module(
        "textract",
        {
            "name": "async-jobs",
            "resource_type": "none",
            "s3_bucket_name": "docs",
            "sns_topic_arn": "arn:aws:sns:us-east-1:123456789012:textract-done",
        },
    )
    assert isinstance(plan.variant, RoleOnly)
    assert all(d.type.startswith("aws:iam.") for d in plan.resources)
    assert plan.role.fragment("sns") is not None
    assert plan.outputs["adapter_id"] is None
    assert plan.outputs["iam_role_arn"] == "ref:iam_role.arn"


def test_kms_key_is_granted() -> None:
    key = "arn:aws:kms:us-east-1:123456789012:key/1234"
    plan = plan_module("textract", dict(SCENARIO, kms_key_id=key))
    assert plan.resource("adapter").args["kms_key_id"] == key
    assert plan.role.fragment("kms").document["Statement"][0]["Resource"] == [key]
