"""Rekognition: face collections, video stream processors and Custom Labels projects."""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional, Tuple

import pulumi

from awsaiml.blocks import compact, first, optional_block, repeated_blocks, with_defaults
from awsaiml.inputs import ModuleInputs, check_bucket, check_choice, kms_key_arns
from awsaiml.modules import ModuleDefinition, register
from awsaiml.plan import ResourceDeclaration, RoleResolution, Variant, ref
from awsaiml.roles import resolve_role

MODULE = "rekognition"

PROJECT_FEATURES = ["CUSTOM_LABELS", "CONTENT_MODERATION"]
AUTO_UPDATE = ["ENABLED", "DISABLED"]
CONNECTED_HOME_LABELS = ["PERSON", "PET", "PACKAGE", "ALL"]

FACE_SEARCH_DEFAULTS = {"face_match_threshold": 80.0, "auto_create": False}
CONNECTED_HOME_DEFAULTS = {"min_confidence": 50.0}
S3_DESTINATION_DEFAULTS = {"s3_key_prefix": ""}
DATA_SHARING_DEFAULTS = {"opt_in": False}


@dataclass(frozen=True)
class Collection(Variant):
    resource_type: ClassVar[str] = "collection"

    collection_id: str

    @property
    def requires_role(self) -> bool:
        return False

    @classmethod
    def from_inputs(cls, inputs: ModuleInputs) -> "Collection":
        return cls(collection_id=inputs.string("collection_id") or inputs.get("name"))

    def declare(self, name: str, role: RoleResolution, tags: Dict[str, str]) -> List[ResourceDeclaration]:
        return [
            ResourceDeclaration(
                key="collection",
                type="aws:rekognition.Collection",
                args={"collection_id": self.collection_id, "tags": dict(tags)},
            )
        ]

    def outputs(self) -> Dict[str, Any]:
        return {"collection_arn": ref("collection", "arn"), "collection_id": self.collection_id}


@dataclass(frozen=True)
class Project(Variant):
    resource_type: ClassVar[str] = "project"

    project_name: str
    feature: str
    auto_update: Optional[str] = None

    @property
    def requires_role(self) -> bool:
        return False

    @classmethod
    def from_inputs(cls, inputs: ModuleInputs) -> "Project":
        feature = inputs.choice("feature", PROJECT_FEATURES, default="CUSTOM_LABELS")
        auto_update = inputs.choice("auto_update", AUTO_UPDATE)
        if auto_update and feature != "CONTENT_MODERATION":
            raise inputs.fail("only applies to CONTENT_MODERATION projects", "auto_update")
        return cls(project_name=inputs.string("project_name") or inputs.get("name"), feature=feature, auto_update=auto_update)

    def project(self, tags: Dict[str, str], depends_on: Tuple[str, ...] = ()) -> ResourceDeclaration:
        return ResourceDeclaration(
            key="project",
            type="aws:rekognition.Project",
            args=compact(
                {"name": self.project_name, "feature": self.feature, "auto_update": self.auto_update, "tags": dict(tags)}
            ),
            depends_on=depends_on,
        )

    def declare(self, name: str, role: RoleResolution, tags: Dict[str, str]) -> List[ResourceDeclaration]:
        return [self.project(tags)]

    def outputs(self) -> Dict[str, Any]:
        return {"project_arn": ref("project", "arn")}


@dataclass(frozen=True)
class CustomLabelsModel(Project):
    """A Custom Labels project plus the role its training jobs read and write data with."""

    resource_type: ClassVar[str] = "custom_labels_model"

    @property
    def requires_role(self) -> bool:
        return True

    @classmethod
    def from_inputs(cls, inputs: ModuleInputs) -> "CustomLabelsModel":
        inputs.bucket("s3_bucket_name", required=True)
        feature = inputs.choice("feature", ["CUSTOM_LABELS"], default="CUSTOM_LABELS")
        return cls(project_name=inputs.string("project_name") or inputs.get("name"), feature=feature)

    def declare(self, name: str, role: RoleResolution, tags: Dict[str, str]) -> List[ResourceDeclaration]:
        return [self.project(tags, role.dependencies)]


def _face_search(inputs: ModuleInputs, value: Any) -> Dict[str, Any]:
    field = "settings.face_search"
    face_search = with_defaults(inputs.nested_mapping(value, field), FACE_SEARCH_DEFAULTS)
    if not isinstance(face_search.get("collection_id"), str) or not face_search["collection_id"]:
        raise inputs.fail("face_search needs a collection_id", field)
    face_search["face_match_threshold"] = _percentage(inputs, face_search["face_match_threshold"], f"{field}.face_match_threshold")
    if not isinstance(face_search["auto_create"], bool):
        raise inputs.fail("must be true or false", f"{field}.auto_create")
    return face_search


def _connected_home(inputs: ModuleInputs, value: Any) -> Dict[str, Any]:
    field = "settings.connected_home"
    connected_home = with_defaults(inputs.nested_mapping(value, field), CONNECTED_HOME_DEFAULTS)
    labels = connected_home.get("labels") or []
    if not labels:
        raise inputs.fail("connected_home needs labels", field)
    for label in inputs.string_list(labels, f"{field}.labels"):
        check_choice(label, CONNECTED_HOME_LABELS, MODULE, f"{field}.labels")
    return {
        "labels": list(labels),
        "min_confidence": _percentage(inputs, connected_home["min_confidence"], f"{field}.min_confidence"),
    }


def _percentage(inputs: ModuleInputs, value: Any, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0 <= value <= 100:
        raise inputs.fail("must be a number between 0 and 100", field)
    return float(value)


def _region_of_interest(inputs: ModuleInputs, value: Any) -> Dict[str, Any]:
    if not isinstance(value, dict) or not (value.get("bounding_box") or value.get("polygons")):
        raise inputs.fail("entries need a bounding_box or polygons", "regions_of_interest")
    return compact({"bounding_box": value.get("bounding_box"), "polygons": value.get("polygons")})


@dataclass(frozen=True)
class StreamProcessor(Variant):
    resource_type: ClassVar[str] = "stream_processor"

    stream_processor_name: str
    kinesis_video_stream_arn: str
    face_search: Optional[Dict[str, Any]] = None
    connected_home: Optional[Dict[str, Any]] = None
    kinesis_data_stream_arn: Optional[str] = None
    s3_destination: Optional[Dict[str, Any]] = None
    sns_topic_arn: Optional[str] = None
    data_sharing_preference: Optional[Dict[str, Any]] = None
    kms_key_id: Optional[str] = None
    regions_of_interest: Tuple[Dict[str, Any], ...] = ()

    @classmethod
    def from_inputs(cls, inputs: ModuleInputs) -> "StreamProcessor":
        settings = inputs.mapping("settings", required=True)
        present = [key for key in ("face_search", "connected_home") if settings.get(key)]
        if len(present) != 1:
            raise inputs.fail("exactly one of face_search, connected_home must be set", "settings")
        s3_destination = first(optional_block(inputs.mapping("s3_destination"), lambda v: _s3_destination(inputs, v)))
        variant = cls(
            stream_processor_name=inputs.string("stream_processor_name") or inputs.get("name"),
            kinesis_video_stream_arn=inputs.arn("kinesis_video_stream_arn", service="kinesisvideo", required=True),
            face_search=first(optional_block(settings.get("face_search"), lambda v: _face_search(inputs, v))),
            connected_home=first(optional_block(settings.get("connected_home"), lambda v: _connected_home(inputs, v))),
            kinesis_data_stream_arn=inputs.arn("kinesis_data_stream_arn", service="kinesis"),
            s3_destination=s3_destination,
            sns_topic_arn=inputs.arn("sns_topic_arn", service="sns"),
            data_sharing_preference=first(
                optional_block(inputs.mapping("data_sharing_preference"), lambda v: with_defaults(v, DATA_SHARING_DEFAULTS))
            ),
            kms_key_id=inputs.kms_key("kms_key_id"),
            regions_of_interest=tuple(
                repeated_blocks(inputs.sequence("regions_of_interest"), lambda v: _region_of_interest(inputs, v))
            ),
        )
        if variant.face_search and not variant.kinesis_data_stream_arn:
            pulumi.log.warn(f"{MODULE} {inputs.get('name')}: face search results need kinesis_data_stream_arn to be delivered")
        if variant.connected_home and not variant.s3_destination:
            pulumi.log.warn(f"{MODULE} {inputs.get('name')}: connected home results need an s3_destination to be delivered")
        return variant

    @property
    def auto_create_collection(self) -> bool:
        return bool(self.face_search and self.face_search["auto_create"])

    def declare(self, name: str, role: RoleResolution, tags: Dict[str, str]) -> List[ResourceDeclaration]:
        resources = []
        depends_on = role.dependencies
        if self.auto_create_collection:
            resources.append(
                ResourceDeclaration(
                    key="collection",
                    type="aws:rekognition.Collection",
                    args={"collection_id": self.face_search["collection_id"], "tags": dict(tags)},
                )
            )
            depends_on = ("collection",) + depends_on
        settings = compact(
            {
                "face_search": first(
                    optional_block(
                        self.face_search,
                        lambda f: {"collection_id": f["collection_id"], "face_match_threshold": f["face_match_threshold"]},
                    )
                ),
                "connected_home": self.connected_home,
            }
        )
        output = compact(
            {
                "kinesis_data_stream": first(optional_block(self.kinesis_data_stream_arn, lambda arn: {"arn": arn})),
                "s3_destination": first(
                    optional_block(self.s3_destination, lambda d: {"bucket": d["bucket"], "key_prefix": d["s3_key_prefix"]})
                ),
            }
        )
        resources.append(
            ResourceDeclaration(
                key="stream_processor",
                type="aws:rekognition.StreamProcessor",
                args=compact(
                    {
                        "name": self.stream_processor_name,
                        "role_arn": role.effective_arn,
                        "input": {"kinesis_video_stream": {"arn": self.kinesis_video_stream_arn}},
                        "output": output or None,
                        "settings": settings,
                        "notification_channel": first(
                            optional_block(self.sns_topic_arn, lambda arn: {"sns_topic_arn": arn})
                        ),
                        "data_sharing_preference": self.data_sharing_preference,
                        "kms_key_id": self.kms_key_id,
                        "regions_of_interests": list(self.regions_of_interest) or None,
                        "tags": dict(tags),
                    }
                ),
                depends_on=depends_on,
            )
        )
        return resources

    def outputs(self) -> Dict[str, Any]:
        outputs = {"stream_processor_arn": ref("stream_processor", "arn")}
        if self.auto_create_collection:
            outputs["collection_arn"] = ref("collection", "arn")
            outputs["collection_id"] = self.face_search["collection_id"]
        return outputs


def _s3_destination(inputs: ModuleInputs, value: Dict[str, Any]) -> Dict[str, Any]:
    if not value.get("bucket"):
        raise inputs.fail("needs a bucket", "s3_destination")
    check_bucket(value["bucket"], MODULE, "s3_destination")
    return with_defaults(value, S3_DESTINATION_DEFAULTS)


def rekognition_role(inputs: ModuleInputs, variant: Variant) -> RoleResolution:
    name = inputs.get("name")
    existing_role_arn = inputs.role_arn()
    if isinstance(variant, StreamProcessor):
        destination = variant.s3_destination or {}
        return resolve_role(
            name=name,
            service="rekognition",
            existing_role_arn=existing_role_arn,
            output_bucket=destination.get("bucket"),
            output_prefix=destination.get("s3_key_prefix"),
            kinesis_video_arns=[variant.kinesis_video_stream_arn],
            kinesis_data_arns=[variant.kinesis_data_stream_arn] if variant.kinesis_data_stream_arn else [],
            kms_key_arns=kms_key_arns(variant.kms_key_id),
            sns_topic_arns=[variant.sns_topic_arn] if variant.sns_topic_arn else [],
        )
    return resolve_role(
        name=name,
        service="rekognition",
        existing_role_arn=existing_role_arn,
        input_bucket=inputs.bucket("s3_bucket_name"),
        output_bucket=inputs.bucket("output_s3_bucket_name"),
        output_prefix=inputs.string("output_key_prefix"),
    )


DEFINITION = register(
    ModuleDefinition(
        module=MODULE,
        variants={
            "collection": Collection.from_inputs,
            "stream_processor": StreamProcessor.from_inputs,
            "project": Project.from_inputs,
            "custom_labels_model": CustomLabelsModel.from_inputs,
        },
        role=rekognition_role,
        outputs=("collection_arn", "collection_id", "stream_processor_arn", "project_arn"),
    )
)
