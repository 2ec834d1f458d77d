"""Textract: custom query adapters and the service role Textract writes results with."""

import re
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from awsaiml.blocks import compact, repeated_blocks, with_defaults
from awsaiml.inputs import ModuleInputs, check_bucket, kms_key_arns
from awsaiml.modules import ModuleDefinition, register
from awsaiml.plan import ResourceDeclaration, RoleResolution, Variant, ref
from awsaiml.roles import resolve_role

FEATURE_TYPES = ["TABLES", "FORMS", "QUERIES", "SIGNATURES", "LAYOUT"]
AUTO_UPDATE = ["ENABLED", "DISABLED"]
VERSION_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")

OUTPUT_CONFIG_DEFAULTS = {"s3_prefix": ""}


def _adapter_version(inputs: ModuleInputs, value: Any) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise inputs.fail("entries must be mappings", "adapter_versions")
    version_name = value.get("version_name")
    if not isinstance(version_name, str) or not VERSION_NAME.match(version_name):
        raise inputs.fail(f"invalid version_name {version_name!r}", "adapter_versions")
    field = f"adapter_versions.{version_name}"
    dataset_config = inputs.nested_mapping(value.get("dataset_config"), f"{field}.dataset_config")
    manifest = inputs.nested_mapping(dataset_config.get("manifest_s3_object"), f"{field}.dataset_config.manifest_s3_object")
    if not manifest.get("bucket") or not manifest.get("name"):
        raise inputs.fail(
            f"{version_name}: dataset_config.manifest_s3_object needs bucket and name", "adapter_versions"
        )
    check_bucket(manifest["bucket"], inputs.module, "adapter_versions")
    output_config = with_defaults(
        inputs.nested_mapping(value.get("output_config"), f"{field}.output_config"),
        dict(OUTPUT_CONFIG_DEFAULTS, s3_bucket=inputs.get("output_s3_bucket_name") or inputs.get("s3_bucket_name"), s3_prefix=inputs.get("output_key_prefix", "")),
    )
    if not output_config.get("s3_bucket"):
        raise inputs.fail(f"{version_name}: output_config.s3_bucket is required without s3_bucket_name", "adapter_versions")
    version_tags = inputs.nested_mapping(value.get("tags"), f"{field}.tags")
    if not all(isinstance(k, str) and isinstance(v, str) for k, v in version_tags.items()):
        raise inputs.fail("keys and values must be strings", f"{field}.tags")
    return compact(
        {
            "version_name": version_name,
            "dataset_config": {
                "manifest_s3_object": compact(
                    {"bucket": manifest["bucket"], "name": manifest["name"], "version": manifest.get("version")}
                )
            },
            "output_config": output_config,
            "kms_key_id": value.get("kms_key_id"),
            "tags": version_tags or None,
        }
    )


@dataclass(frozen=True)
class Adapter(Variant):
    resource_type: ClassVar[str] = "adapter"

    adapter_name: str
    feature_types: Tuple[str, ...]
    auto_update: str
    description: Optional[str] = None
    kms_key_id: Optional[str] = None
    adapter_versions: Tuple[Dict[str, Any], ...] = ()

    @classmethod
    def from_inputs(cls, inputs: ModuleInputs) -> "Adapter":
        versions = repeated_blocks(inputs.sequence("adapter_versions"), lambda v: _adapter_version(inputs, v))
        names = [v["version_name"] for v in versions]
        if len(set(names)) != len(names):
            raise inputs.fail("version names must be unique", "adapter_versions")
        return cls(
            adapter_name=inputs.string("adapter_name") or inputs.get("name"),
            feature_types=tuple(inputs.subset("feature_types", FEATURE_TYPES, default=["QUERIES"])),
            auto_update=inputs.choice("auto_update", AUTO_UPDATE, default="DISABLED"),
            description=inputs.string("description"),
            kms_key_id=inputs.kms_key("kms_key_id"),
            adapter_versions=tuple(versions),
        )

    def declare(self, name: str, role: RoleResolution, tags: Dict[str, str]) -> List[ResourceDeclaration]:
        resources = [
            ResourceDeclaration(
                key="adapter",
                type="aws-native:textract.Adapter",
                args=compact(
                    {
                        "adapter_name": self.adapter_name,
                        "feature_types": list(self.feature_types),
                        "auto_update": self.auto_update,
                        "description": self.description,
                        "kms_key_id": self.kms_key_id,
                        "tags": dict(tags),
                    }
                ),
                depends_on=role.dependencies,
            )
        ]
        for version in self.adapter_versions:
            args = {k: v for k, v in version.items() if k != "version_name"}
            args["adapter_id"] = ref("adapter", "adapter_id")
            args["tags"] = dict(tags, **args.get("tags", {}))
            resources.append(
                ResourceDeclaration(
                    key=f"adapter_version_{version['version_name']}",
                    type="aws-native:textract.AdapterVersion",
                    args=args,
                    depends_on=("adapter",) + role.dependencies,
                )
            )
        return resources

    def outputs(self) -> Dict[str, Any]:
        return {
            "adapter_id": ref("adapter", "adapter_id"),
            "adapter_arn": ref("adapter", "adapter_arn"),
            "adapter_version_arns": {
                v["version_name"]: ref(f"adapter_version_{v['version_name']}", "adapter_version_arn")
                for v in self.adapter_versions
            },
        }


@dataclass(frozen=True)
class RoleOnly(Variant):
    """No adapter, only the role asynchronous Textract jobs run under."""

    resource_type: ClassVar[str] = "none"

    @classmethod
    def from_inputs(cls, inputs: ModuleInputs) -> "RoleOnly":
        return cls()

    def declare(self, name: str, role: RoleResolution, tags: Dict[str, str]) -> List[ResourceDeclaration]:
        return []


def textract_role(inputs: ModuleInputs, variant: Variant) -> RoleResolution:
    kms_key_id = getattr(variant, "kms_key_id", None)
    sns_topic_arn = inputs.arn("sns_topic_arn", service="sns")
    return resolve_role(
        name=inputs.get("name"),
        service="textract",
        existing_role_arn=inputs.role_arn(),
        input_bucket=inputs.bucket("s3_bucket_name"),
        output_bucket=inputs.bucket("output_s3_bucket_name"),
        output_prefix=inputs.string("output_key_prefix"),
        kms_key_arns=kms_key_arns(kms_key_id),
        sns_topic_arns=[sns_topic_arn] if sns_topic_arn else [],
    )


DEFINITION = register(
    ModuleDefinition(
        module="textract",
        variants={"adapter": Adapter.from_inputs, "none": RoleOnly.from_inputs},
        role=textract_role,
        outputs=("adapter_id", "adapter_arn", "adapter_version_arns"),
    )
)
