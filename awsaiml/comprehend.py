"""Comprehend: custom document classifiers and entity recognizers."""

import re
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from awsaiml.blocks import compact, first, optional_block, repeated_blocks
from awsaiml.inputs import ModuleInputs, check_s3_uri, kms_key_arns
from awsaiml.modules import ModuleDefinition, register
from awsaiml.plan import ResourceDeclaration, RoleResolution, Variant, ref
from awsaiml.roles import VPC_ACTIONS, resolve_role

LANGUAGE_CODES = ["en", "es", "fr", "de", "it", "pt", "ar", "hi", "ja", "ko", "zh", "zh-TW"]
CLASSIFIER_MODES = ["MULTI_CLASS", "MULTI_LABEL"]
DATA_FORMATS = ["COMPREHEND_CSV", "AUGMENTED_MANIFEST"]
INPUT_FORMATS = ["ONE_DOC_PER_LINE", "ONE_DOC_PER_FILE"]
DOCUMENT_TYPES = ["PLAIN_TEXT_DOCUMENT", "SEMI_STRUCTURED_DOCUMENT"]
SPLITS = ["TRAIN", "TEST"]
RESOURCE_NAME = re.compile(r"^[a-zA-Z0-9](-*[a-zA-Z0-9])*$")
ENTITY_TYPE = re.compile(r"^[^\n\r\t,]+$")


@dataclass(frozen=True)
class Common:
    """Fields classifiers and recognizers share."""

    resource_name: str
    language_code: str
    version_name: Optional[str] = None
    volume_kms_key_id: Optional[str] = None
    model_kms_key_id: Optional[str] = None
    vpc_config: Optional[Dict[str, Any]] = None

    @classmethod
    def from_inputs(cls, inputs: ModuleInputs) -> "Common":
        resource_name = inputs.string("resource_name") or inputs.get("name")
        for key, value in (("resource_name", resource_name), ("version_name", inputs.string("version_name"))):
            if value is not None and not RESOURCE_NAME.match(value):
                raise inputs.fail(f"'{value}' may only contain alphanumerics and hyphens", key)
        return cls(
            resource_name=resource_name,
            language_code=inputs.choice("language_code", LANGUAGE_CODES, default="en"),
            version_name=inputs.string("version_name"),
            volume_kms_key_id=inputs.kms_key("volume_kms_key_id"),
            model_kms_key_id=inputs.kms_key("model_kms_key_id"),
            vpc_config=first(optional_block(inputs.mapping("vpc_config"), lambda v: _vpc_config(inputs, v))),
        )

    def args(self, role: RoleResolution, tags: Dict[str, str]) -> Dict[str, Any]:
        return compact(
            {
                "name": self.resource_name,
                "data_access_role_arn": role.effective_arn,
                "language_code": self.language_code,
                "version_name": self.version_name,
                "volume_kms_key_id": self.volume_kms_key_id,
                "model_kms_key_id": self.model_kms_key_id,
                "vpc_config": self.vpc_config,
                "tags": dict(tags),
            }
        )

    def kms_keys(self) -> List[str]:
        return [key for key in (self.volume_kms_key_id, self.model_kms_key_id) if key]


def _vpc_config(inputs: ModuleInputs, value: Dict[str, Any]) -> Dict[str, Any]:
    security_group_ids = value.get("security_group_ids") or []
    subnets = value.get("subnets") or []
    if not security_group_ids or not subnets:
        raise inputs.fail("needs security_group_ids and subnets", "vpc_config")
    return {
        "security_group_ids": inputs.string_list(security_group_ids, "vpc_config.security_group_ids"),
        "subnets": inputs.string_list(subnets, "vpc_config.subnets"),
    }


def _augmented_manifest(inputs: ModuleInputs, value: Any) -> Dict[str, Any]:
    if not isinstance(value, dict) or not value.get("s3_uri") or not value.get("attribute_names"):
        raise inputs.fail("entries need s3_uri and attribute_names", "augmented_manifests")
    check_s3_uri(value["s3_uri"], inputs.module, "augmented_manifests")
    document_type = value.get("document_type", "PLAIN_TEXT_DOCUMENT")
    split = value.get("split", "TRAIN")
    if document_type not in DOCUMENT_TYPES or split not in SPLITS:
        raise inputs.fail(f"invalid document_type {document_type!r} or split {split!r}", "augmented_manifests")
    return compact(
        {
            "s3_uri": value["s3_uri"],
            "attribute_names": inputs.string_list(value["attribute_names"], "augmented_manifests.attribute_names"),
            "annotation_data_s3_uri": value.get("annotation_data_s3_uri"),
            "source_documents_s3_uri": value.get("source_documents_s3_uri"),
            "document_type": document_type,
            "split": split,
        }
    )


def _augmented_manifests(inputs: ModuleInputs, data_format: str) -> List[Dict[str, Any]]:
    manifests = repeated_blocks(inputs.sequence("augmented_manifests"), lambda v: _augmented_manifest(inputs, v))
    if data_format == "AUGMENTED_MANIFEST" and not manifests:
        raise inputs.fail("is required for AUGMENTED_MANIFEST data", "augmented_manifests")
    return manifests


@dataclass(frozen=True)
class Classifier(Variant):
    resource_type: ClassVar[str] = "classifier"

    common: Common
    mode: str
    input_data_config: Dict[str, Any]
    output_data_config: Optional[Dict[str, Any]] = None

    @classmethod
    def from_inputs(cls, inputs: ModuleInputs) -> "Classifier":
        common = Common.from_inputs(inputs)
        mode = inputs.choice("mode", CLASSIFIER_MODES, default="MULTI_CLASS")
        data_format = inputs.choice("data_format", DATA_FORMATS, default="COMPREHEND_CSV")
        label_delimiter = inputs.string("label_delimiter")
        if label_delimiter is not None and mode != "MULTI_LABEL":
            raise inputs.fail("only applies to MULTI_LABEL classifiers", "label_delimiter")
        return cls(
            common=common,
            mode=mode,
            input_data_config=compact(
                {
                    "data_format": data_format,
                    "s3_uri": inputs.s3_uri("input_s3_uri", required=data_format == "COMPREHEND_CSV"),
                    "test_s3_uri": inputs.s3_uri("test_s3_uri"),
                    "label_delimiter": label_delimiter,
                    "augmented_manifests": _augmented_manifests(inputs, data_format) or None,
                }
            ),
            output_data_config=first(
                optional_block(
                    inputs.s3_uri("output_s3_uri"),
                    lambda uri: compact({"s3_uri": uri, "kms_key_id": inputs.kms_key("output_kms_key_id")}),
                )
            ),
        )

    def declare(self, name: str, role: RoleResolution, tags: Dict[str, str]) -> List[ResourceDeclaration]:
        args = self.common.args(role, tags)
        args.update(
            compact(
                {
                    "mode": self.mode,
                    "input_data_config": self.input_data_config,
                    "output_data_config": self.output_data_config,
                }
            )
        )
        return [
            ResourceDeclaration(
                key="classifier",
                type="aws:comprehend.DocumentClassifier",
                args=args,
                depends_on=role.dependencies,
            )
        ]

    def outputs(self) -> Dict[str, Any]:
        return {"classifier_arn": ref("classifier", "arn")}

    def kms_keys(self) -> List[str]:
        keys = self.common.kms_keys()
        if self.output_data_config and self.output_data_config.get("kms_key_id"):
            keys.append(self.output_data_config["kms_key_id"])
        return keys


@dataclass(frozen=True)
class Recognizer(Variant):
    resource_type: ClassVar[str] = "recognizer"

    common: Common
    entity_types: Tuple[str, ...]
    input_data_config: Dict[str, Any]

    @classmethod
    def from_inputs(cls, inputs: ModuleInputs) -> "Recognizer":
        common = Common.from_inputs(inputs)
        entity_types = [e.get("type") if isinstance(e, dict) else e for e in inputs.sequence("entity_types", required=True)]
        for entity_type in entity_types:
            if not isinstance(entity_type, str) or not ENTITY_TYPE.match(entity_type):
                raise inputs.fail(f"invalid entity type {entity_type!r}", "entity_types")
        if len(set(entity_types)) != len(entity_types):
            raise inputs.fail("entity types must be unique", "entity_types")
        data_format = inputs.choice("data_format", DATA_FORMATS, default="COMPREHEND_CSV")
        documents = entity_list = annotations = None
        if data_format == "COMPREHEND_CSV":
            documents = compact(
                {
                    "s3_uri": inputs.s3_uri("documents_s3_uri", required=True),
                    "input_format": inputs.choice("input_format", INPUT_FORMATS),
                    "test_s3_uri": inputs.s3_uri("test_s3_uri"),
                }
            )
            if inputs.exactly_one("entities_s3_uri", "annotations_s3_uri") == "entities_s3_uri":
                entity_list = {"s3_uri": inputs.s3_uri("entities_s3_uri")}
            else:
                annotations = compact(
                    {
                        "s3_uri": inputs.s3_uri("annotations_s3_uri"),
                        "test_s3_uri": inputs.s3_uri("annotations_test_s3_uri"),
                    }
                )
        return cls(
            common=common,
            entity_types=tuple(entity_types),
            input_data_config=compact(
                {
                    "data_format": data_format,
                    "entity_types": [{"type": entity_type} for entity_type in entity_types],
                    "documents": documents,
                    "entity_list": entity_list,
                    "annotations": annotations,
                    "augmented_manifests": _augmented_manifests(inputs, data_format) or None,
                }
            ),
        )

    def declare(self, name: str, role: RoleResolution, tags: Dict[str, str]) -> List[ResourceDeclaration]:
        args = self.common.args(role, tags)
        args["input_data_config"] = self.input_data_config
        return [
            ResourceDeclaration(
                key="recognizer",
                type="aws:comprehend.EntityRecognizer",
                args=args,
                depends_on=role.dependencies,
            )
        ]

    def outputs(self) -> Dict[str, Any]:
        return {"recognizer_arn": ref("recognizer", "arn")}

    def kms_keys(self) -> List[str]:
        return self.common.kms_keys()


def comprehend_role(inputs: ModuleInputs, variant: Variant) -> RoleResolution:
    actions = ["comprehend:*"]
    if variant.common.vpc_config:
        actions += VPC_ACTIONS
    return resolve_role(
        name=inputs.get("name"),
        service="comprehend",
        existing_role_arn=inputs.role_arn(),
        input_bucket=inputs.bucket("s3_bucket_name"),
        output_bucket=inputs.bucket("output_s3_bucket_name"),
        output_prefix=inputs.string("output_key_prefix"),
        service_actions=actions,
        kms_key_arns=kms_key_arns(*variant.kms_keys()),
    )


DEFINITION = register(
    ModuleDefinition(
        module="comprehend",
        variants={"classifier": Classifier.from_inputs, "recognizer": Recognizer.from_inputs},
        role=comprehend_role,
        outputs=("classifier_arn", "recognizer_arn"),
    )
)
