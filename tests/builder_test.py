from types import SimpleNamespace

import pulumi
import pulumi_aws as aws
import pytest

ACCOUNT = "123456789012"
EXISTING_ROLE = f"arn:aws:iam::{ACCOUNT}:role/shared-comprehend"


class AIMLMocks(pulumi.runtime.Mocks):
    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        outputs = dict(args.inputs)
        if args.typ == "aws:iam/role:Role":
            outputs["arn"] = f"arn:aws:iam::{ACCOUNT}:role/{args.inputs['name']}"
        elif args.typ == "aws:iam/policy:Policy":
            outputs["arn"] = f"arn:aws:iam::{ACCOUNT}:policy/{args.inputs['name']}"
        else:
            outputs.setdefault("arn", f"arn:aws:mock:us-east-1:{ACCOUNT}:{args.name}")
        return [f"{args.name}_id", outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        return {}


pulumi.runtime.set_mocks(AIMLMocks(), preview=False)

from awsaiml.builder import (  # noqa: E402
    AIMLResourceBuilder,
    accepted_parameters,
    native_tags,
    referenced_keys,
    resolve_value,
    split_type,
)
from awsaiml.config import Config, ModuleConfig  # noqa: E402
from awsaiml.errors import DependencyFailure, InvalidReference, ValidationError  # noqa: E402
from awsaiml.plan import ModulePlan, ResourceDeclaration, RoleResolution  # noqa: E402

CLASSIFIER = ModuleConfig(
    module="comprehend",
    name="tickets",
    args={
        "resource_type": "classifier",
        "s3_bucket_name": "tickets",
        "input_s3_uri": "s3://tickets/train.csv",
        "tags": {"model": "tickets"},
    },
)

GUARDRAIL = ModuleConfig(
    module="bedrock",
    name="chat",
    args={
        "resource_type": "guardrail",
        "sensitive_information_policy_config": {"pii_entities_config": [{"action": "BLOCK", "type": "EMAIL"}]},
    },
)


def config_with(*modules: ModuleConfig) -> Config:
    return Config(
        team="ML",
        service="docai",
        environment="dev",
        region="us-east-1",
        tags={"owner": "ml-platform"},
        modules=list(modules),
    )


def plan_with(*resources: ResourceDeclaration) -> ModulePlan:
    return ModulePlan(
        module="comprehend",
        name="handmade",
        resource_type="classifier",
        role=RoleResolution.not_required(),
        variant=None,
        resources=tuple(resources),
        outputs={},
    )


def test_generate_resource_name() -> None:
    builder = AIMLResourceBuilder(config_with())
    assert builder.generate_resource_name("tickets-iam-role") == "ml-docai-dev-use1-tickets-iam-role"
    assert builder.get_abbreviation("xx-middle-9") == "xx"


def test_split_type() -> None:
    assert split_type("aws-native:textract.Adapter") == ("aws-native", "textract", "Adapter")
    assert split_type("aws:iam.RolePolicyAttachment") == ("aws", "iam", "RolePolicyAttachment")
    assert split_type("kendra.Index") == ("aws", "kendra", "Index")


def test_resolve_value() -> None:
    role = SimpleNamespace(arn="arn:aws:iam::1:role/r", id="r")
    resources = {"iam_role": role}
    assert resolve_value({"a": ["ref:iam_role.arn", "plain"], "b": "ref:iam_role"}, resources) == {
        "a": ["arn:aws:iam::1:role/r", "plain"],
        "b": "r",
    }
    with pytest.raises(InvalidReference):
        resolve_value("ref:missing.arn", resources)
    with pytest.raises(InvalidReference):
        resolve_value("ref:iam_role.nothing", resources)
    assert referenced_keys({"a": ["ref:x.arn", {"b": "ref:y"}], "c": 1}) == {"x", "y"}


def test_accepted_parameters() -> None:
    accepted = accepted_parameters(aws.iam, "Role")
    assert "assume_role_policy" in accepted
    assert "resource_name" not in accepted
    assert "opts" not in accepted


def test_common_parameters() -> None:
    builder = AIMLResourceBuilder(config_with())
    args = builder._apply_common_parameters("aws", {"tags": {"model": "x"}}, {"tags", "name"})
    assert args == {"tags": {"owner": "ml-platform", "model": "x"}}
    args = builder._apply_common_parameters("aws-native", {"tags": {"model": "x"}}, None)
    assert args["tags"] == native_tags({"owner": "ml-platform", "model": "x"})
    assert builder._apply_common_parameters("aws", {"tags": {"model": "x"}, "region": "eu-west-1"}, {"name"}) == {}
    assert builder._apply_common_parameters("aws", {}, {"region"}) == {"region": "us-east-1"}


def test_missing_predecessor_is_a_dependency_failure() -> None:
    builder = AIMLResourceBuilder(config_with())
    plan = plan_with(
        ResourceDeclaration(key="classifier", type="aws:comprehend.DocumentClassifier", depends_on=("iam_role",))
    )
    with pytest.raises(DependencyFailure):
        builder.build_module(plan)


def test_skipped_resource_fails_its_dependents() -> None:
    builder = AIMLResourceBuilder(config_with())
    plan = plan_with(
        ResourceDeclaration(key="ghost", type="aws:comprehend.Ghost"),
        ResourceDeclaration(key="follower", type="aws:iam.Role", depends_on=("ghost",)),
    )
    with pytest.raises(DependencyFailure):
        builder.build_module(plan)


def test_unknown_provider_module_is_skipped() -> None:
    builder = AIMLResourceBuilder(config_with())
    plan = ModulePlan(
        module="textract",
        name="ghosts",
        resource_type="adapter",
        role=RoleResolution.not_required(),
        variant=None,
        resources=(ResourceDeclaration(key="adapter", type="aws:nosuchservice.Adapter"),),
        outputs={"adapter_id": "ref:adapter.adapter_id", "iam_role_arn": None},
    )
    builder.build_module(plan)
    assert builder.skipped["ghosts"] == {"adapter"}
    assert builder.outputs["ghosts"] == {"adapter_id": None, "iam_role_arn": None}


def test_build_rejects_invalid_modules_before_creating_anything() -> None:
    broken = ModuleConfig(module="comprehend", name="broken", args={"resource_type": "summarizer"})
    builder = AIMLResourceBuilder(config_with(GUARDRAIL, broken))
    with pytest.raises(ValidationError):
        builder.build()
    assert builder.resources == {}


@pulumi.runtime.test
def test_created_role_flows_into_the_classifier():
    builder = AIMLResourceBuilder(config_with(CLASSIFIER))
    builder.build()
    assert sorted(builder.resources) == [
        "tickets/classifier",
        "tickets/iam_role",
        "tickets/s3_input_policy",
        "tickets/s3_input_policy_attachment",
        "tickets/s3_output_policy",
        "tickets/s3_output_policy_attachment",
        "tickets/service_policy",
        "tickets/service_policy_attachment",
    ]
    classifier = builder.resources["tickets/classifier"]
    role = builder.resources["tickets/iam_role"]
    outputs = builder.outputs["tickets"]

    def check(args):
        classifier_role, role_arn, exported_arn, tags = args
        assert role_arn == f"arn:aws:iam::{ACCOUNT}:role/tickets-comprehend-role"
        assert classifier_role == role_arn
        assert exported_arn == role_arn
        assert tags == {"owner": "ml-platform", "model": "tickets"}

    return pulumi.Output.all(
        classifier.data_access_role_arn, role.arn, outputs["iam_role_arn"], classifier.tags
    ).apply(check)


@pulumi.runtime.test
def test_existing_role_is_used_as_is():
    module = ModuleConfig(
        module=CLASSIFIER.module, name="shared", args=dict(CLASSIFIER.args, existing_role_arn=EXISTING_ROLE)
    )
    builder = AIMLResourceBuilder(config_with(module))
    builder.build()
    assert sorted(builder.resources) == ["shared/classifier"]
    assert builder.outputs["shared"]["iam_role_arn"] == EXISTING_ROLE
    assert builder.outputs["shared"]["s3_input_policy_arn"] is None

    def check(role_arn):
        assert role_arn == EXISTING_ROLE

    return builder.resources["shared/classifier"].data_access_role_arn.apply(check)


@pulumi.runtime.test
def test_trust_policy_is_rendered_as_json():
    builder = AIMLResourceBuilder(config_with(CLASSIFIER))
    builder.build()
    role = builder.resources["tickets/iam_role"]

    def check(policy):
        assert '"Service": "comprehend.amazonaws.com"' in policy

    return role.assume_role_policy.apply(check)
