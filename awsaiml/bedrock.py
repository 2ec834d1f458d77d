"""Bedrock: fine-tuned custom models, guardrails, knowledge bases and invocation logging."""

from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, List, Optional

from awsaiml.blocks import compact, first, optional_block, repeated_blocks, with_defaults
from awsaiml.errors import ValidationError
from awsaiml.inputs import ModuleInputs, check_arn, check_bucket, check_choice, check_s3_uri, kms_key_arns
from awsaiml.modules import ModuleDefinition, register
from awsaiml.plan import ResourceDeclaration, RoleResolution, Variant, ref
from awsaiml.roles import VPC_ACTIONS, resolve_role

MODULE = "bedrock"

CUSTOMIZATION_TYPES = ["FINE_TUNING", "CONTINUED_PRE_TRAINING"]
CONTENT_FILTER_TYPES = ["SEXUAL", "VIOLENCE", "HATE", "INSULTS", "MISCONDUCT", "PROMPT_ATTACK"]
FILTER_STRENGTHS = ["NONE", "LOW", "MEDIUM", "HIGH"]
GROUNDING_FILTER_TYPES = ["GROUNDING", "RELEVANCE"]
SENSITIVE_ACTIONS = ["BLOCK", "ANONYMIZE"]
TOPIC_TYPES = ["DENY"]
MANAGED_WORD_LISTS = ["PROFANITY"]
STORAGE_TYPES = ["OPENSEARCH_SERVERLESS", "PINECONE", "RDS", "REDIS_ENTERPRISE_CLOUD"]
CHUNKING_STRATEGIES = ["FIXED_SIZE", "NONE"]
DATA_DELETION_POLICIES = ["RETAIN", "DELETE"]

DEFAULT_BLOCKED_MESSAGE = "Sorry, the model cannot answer this question."

CONTENT_FILTER_DEFAULTS = {"input_strength": "MEDIUM", "output_strength": "MEDIUM"}
TOPIC_DEFAULTS = {"type": "DENY", "examples": []}
MANAGED_WORD_LIST_DEFAULTS = {"type": "PROFANITY"}
LOGGING_DEFAULTS = {
    "text_data_delivery_enabled": True,
    "image_data_delivery_enabled": True,
    "embedding_data_delivery_enabled": True,
}
LOG_S3_DEFAULTS = {"key_prefix": ""}
FIXED_SIZE_CHUNKING_DEFAULTS = {"max_tokens": 300, "overlap_percentage": 20}

DEFAULT_VECTOR_FIELD = "bedrock-knowledge-base-default-vector"
DEFAULT_TEXT_FIELD = "AMAZON_BEDROCK_TEXT_CHUNK"
DEFAULT_METADATA_FIELD = "AMAZON_BEDROCK_METADATA"

# storage type -> (configuration block, required fields, field mapping defaults)
STORAGE_BACKENDS = {
    "OPENSEARCH_SERVERLESS": (
        "opensearch_serverless_configuration",
        ("collection_arn",),
        {"vector_field": DEFAULT_VECTOR_FIELD, "text_field": DEFAULT_TEXT_FIELD, "metadata_field": DEFAULT_METADATA_FIELD},
    ),
    "PINECONE": (
        "pinecone_configuration",
        ("connection_string", "credentials_secret_arn"),
        {"text_field": DEFAULT_TEXT_FIELD, "metadata_field": DEFAULT_METADATA_FIELD},
    ),
    "RDS": (
        "rds_configuration",
        ("resource_arn", "credentials_secret_arn", "database_name", "table_name"),
        {"primary_key_field": "id", "vector_field": "embedding", "text_field": "chunks", "metadata_field": "metadata"},
    ),
    "REDIS_ENTERPRISE_CLOUD": (
        "redis_enterprise_cloud_configuration",
        ("endpoint", "credentials_secret_arn", "vector_index_name"),
        {"vector_field": DEFAULT_VECTOR_FIELD, "text_field": DEFAULT_TEXT_FIELD, "metadata_field": DEFAULT_METADATA_FIELD},
    ),
}

STORAGE_ACTIONS = {
    "OPENSEARCH_SERVERLESS": ["aoss:APIAccessAll"],
    "PINECONE": ["secretsmanager:GetSecretValue"],
    "RDS": ["rds-data:ExecuteStatement", "rds-data:BatchExecuteStatement", "rds:DescribeDBClusters", "secretsmanager:GetSecretValue"],
    "REDIS_ENTERPRISE_CLOUD": ["secretsmanager:GetSecretValue"],
}


def _fail(message: str, field: Optional[str] = None) -> ValidationError:
    return ValidationError(message, MODULE, field)


def _entries(value: Any, field: str) -> List[Dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise _fail("must be a list of mappings", field)
    return value


def _entry_choice(entry: Dict[str, Any], key: str, allowed: List[str], field: str) -> str:
    return check_choice(entry.get(key), allowed, MODULE, f"{field}.{key}")


@dataclass(frozen=True)
class CustomModel(Variant):
    resource_type: ClassVar[str] = "custom_model"

    custom_model_name: str
    job_name: str
    base_model_identifier: str
    customization_type: str
    training_data_s3_uri: str
    output_s3_uri: str
    hyperparameters: Dict[str, str]
    validation_data_s3_uris: tuple = ()
    custom_model_kms_key_id: Optional[str] = None
    vpc_config: Optional[Dict[str, Any]] = None

    @classmethod
    def from_inputs(cls, inputs: ModuleInputs) -> "CustomModel":
        hyperparameters = inputs.mapping("hyperparameters") or {}
        validators = inputs.sequence("validation_data_s3_uris")
        for uri in validators:
            check_s3_uri(uri, MODULE, "validation_data_s3_uris")
        return cls(
            custom_model_name=inputs.string("custom_model_name") or inputs.get("name"),
            job_name=inputs.string("job_name") or f"{inputs.get('name')}-job",
            base_model_identifier=inputs.string("base_model_identifier", required=True),
            customization_type=inputs.choice("customization_type", CUSTOMIZATION_TYPES, default="FINE_TUNING"),
            training_data_s3_uri=inputs.s3_uri("training_data_s3_uri", required=True),
            output_s3_uri=inputs.s3_uri("output_s3_uri", required=True),
            # the API only takes string values
            hyperparameters={str(k): str(v).lower() if isinstance(v, bool) else str(v) for k, v in hyperparameters.items()},
            validation_data_s3_uris=tuple(validators),
            custom_model_kms_key_id=inputs.kms_key("custom_model_kms_key_id"),
            vpc_config=first(optional_block(inputs.mapping("vpc_config"), lambda v: _custom_model_vpc(inputs, v))),
        )

    def declare(self, name: str, role: RoleResolution, tags: Dict[str, str]) -> List[ResourceDeclaration]:
        args = compact(
            {
                "custom_model_name": self.custom_model_name,
                "job_name": self.job_name,
                "base_model_identifier": self.base_model_identifier,
                "customization_type": self.customization_type,
                "role_arn": role.effective_arn,
                "hyperparameters": dict(self.hyperparameters) or None,
                "training_data_config": {"s3_uri": self.training_data_s3_uri},
                "output_data_config": {"s3_uri": self.output_s3_uri},
                "validation_data_config": first(
                    optional_block(
                        list(self.validation_data_s3_uris),
                        lambda uris: {"validators": repeated_blocks(uris, lambda uri: {"s3_uri": uri})},
                    )
                ),
                "custom_model_kms_key_id": self.custom_model_kms_key_id,
                "vpc_config": self.vpc_config,
                "tags": dict(tags),
            }
        )
        return [
            ResourceDeclaration(
                key="custom_model",
                type="aws:bedrock.CustomModel",
                args=args,
                depends_on=role.dependencies,
            )
        ]

    def outputs(self) -> Dict[str, Any]:
        return {
            "custom_model_arn": ref("custom_model", "custom_model_arn"),
            "custom_model_job_arn": ref("custom_model", "job_arn"),
        }


def _custom_model_vpc(inputs: ModuleInputs, value: Dict[str, Any]) -> Dict[str, Any]:
    if not value.get("security_group_ids") or not value.get("subnet_ids"):
        raise _fail("needs security_group_ids and subnet_ids", "vpc_config")
    return {
        "security_group_ids": inputs.string_list(value["security_group_ids"], "vpc_config.security_group_ids"),
        "subnet_ids": inputs.string_list(value["subnet_ids"], "vpc_config.subnet_ids"),
    }


def _content_policy(value: Dict[str, Any]) -> Dict[str, Any]:
    def build(entry: Dict[str, Any]) -> Dict[str, Any]:
        entry = with_defaults(entry, CONTENT_FILTER_DEFAULTS)
        _entry_choice(entry, "type", CONTENT_FILTER_TYPES, "content_policy_config")
        _entry_choice(entry, "input_strength", FILTER_STRENGTHS, "content_policy_config")
        _entry_choice(entry, "output_strength", FILTER_STRENGTHS, "content_policy_config")
        # prompt attacks are only screened on the way in
        if entry["type"] == "PROMPT_ATTACK":
            entry["output_strength"] = "NONE"
        return {k: entry[k] for k in ("type", "input_strength", "output_strength")}

    return {"filters_configs": repeated_blocks(_entries(value.get("filters_config"), "content_policy_config"), build)}


def _contextual_grounding_policy(value: Dict[str, Any]) -> Dict[str, Any]:
    def build(entry: Dict[str, Any]) -> Dict[str, Any]:
        _entry_choice(entry, "type", GROUNDING_FILTER_TYPES, "contextual_grounding_policy_config")
        threshold = entry.get("threshold")
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)) or not 0 <= threshold < 1:
            raise _fail("threshold must be in [0, 1)", "contextual_grounding_policy_config")
        return {"type": entry["type"], "threshold": float(threshold)}

    return {
        "filters_configs": repeated_blocks(
            _entries(value.get("filters_config"), "contextual_grounding_policy_config"), build
        )
    }


def _sensitive_information_policy(value: Dict[str, Any]) -> Dict[str, Any]:
    field = "sensitive_information_policy_config"

    def pii(entry: Dict[str, Any]) -> Dict[str, Any]:
        _entry_choice(entry, "action", SENSITIVE_ACTIONS, field)
        if not isinstance(entry.get("type"), str) or not entry["type"]:
            raise _fail("pii entities need a type", field)
        return {"action": entry["action"], "type": entry["type"]}

    def regex(entry: Dict[str, Any]) -> Dict[str, Any]:
        _entry_choice(entry, "action", SENSITIVE_ACTIONS, field)
        if not entry.get("name") or not entry.get("pattern"):
            raise _fail("regexes need a name and a pattern", field)
        return compact(
            {
                "action": entry["action"],
                "name": entry["name"],
                "pattern": entry["pattern"],
                "description": entry.get("description"),
            }
        )

    return compact(
        {
            "pii_entities_configs": repeated_blocks(_entries(value.get("pii_entities_config"), field), pii) or None,
            "regexes_configs": repeated_blocks(_entries(value.get("regexes_config"), field), regex) or None,
        }
    )


def _topic_policy(value: Dict[str, Any]) -> Dict[str, Any]:
    def build(entry: Dict[str, Any]) -> Dict[str, Any]:
        entry = with_defaults(entry, TOPIC_DEFAULTS)
        _entry_choice(entry, "type", TOPIC_TYPES, "topic_policy_config")
        if not entry.get("name") or not entry.get("definition"):
            raise _fail("topics need a name and a definition", "topic_policy_config")
        return {
            "name": entry["name"],
            "definition": entry["definition"],
            "examples": list(entry["examples"]),
            "type": entry["type"],
        }

    return {"topics_configs": repeated_blocks(_entries(value.get("topics_config"), "topic_policy_config"), build)}


def _word_policy(value: Dict[str, Any]) -> Dict[str, Any]:
    def managed(entry: Dict[str, Any]) -> Dict[str, Any]:
        entry = with_defaults(entry, MANAGED_WORD_LIST_DEFAULTS)
        return {"type": _entry_choice(entry, "type", MANAGED_WORD_LISTS, "word_policy_config")}

    def word(entry: Dict[str, Any]) -> Dict[str, Any]:
        if not entry.get("text"):
            raise _fail("words need a text", "word_policy_config")
        return {"text": entry["text"]}

    return compact(
        {
            "managed_word_lists_configs": repeated_blocks(
                _entries(value.get("managed_word_lists_config"), "word_policy_config"), managed
            )
            or None,
            "words_configs": repeated_blocks(_entries(value.get("words_config"), "word_policy_config"), word) or None,
        }
    )


GUARDRAIL_POLICIES: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    "content_policy_config": _content_policy,
    "contextual_grounding_policy_config": _contextual_grounding_policy,
    "sensitive_information_policy_config": _sensitive_information_policy,
    "topic_policy_config": _topic_policy,
    "word_policy_config": _word_policy,
}


@dataclass(frozen=True)
class Guardrail(Variant):
    resource_type: ClassVar[str] = "guardrail"

    guardrail_name: str
    blocked_input_messaging: str
    blocked_outputs_messaging: str
    policies: Dict[str, Dict[str, Any]]
    description: Optional[str] = None
    kms_key_arn: Optional[str] = None
    create_version: bool = False

    @property
    def requires_role(self) -> bool:
        return False

    @classmethod
    def from_inputs(cls, inputs: ModuleInputs) -> "Guardrail":
        policies = {}
        for key, build in GUARDRAIL_POLICIES.items():
            block = first(optional_block(inputs.mapping(key), build))
            if block and any(block.values()):
                policies[key] = block
        if not policies:
            raise inputs.fail(f"a guardrail needs at least one of {', '.join(GUARDRAIL_POLICIES)}")
        return cls(
            guardrail_name=inputs.string("guardrail_name") or inputs.get("name"),
            blocked_input_messaging=inputs.string("blocked_input_messaging", DEFAULT_BLOCKED_MESSAGE),
            blocked_outputs_messaging=inputs.string("blocked_outputs_messaging", DEFAULT_BLOCKED_MESSAGE),
            policies=policies,
            description=inputs.string("description"),
            kms_key_arn=inputs.arn("kms_key_arn", service="kms"),
            create_version=inputs.boolean("create_guardrail_version"),
        )

    def declare(self, name: str, role: RoleResolution, tags: Dict[str, str]) -> List[ResourceDeclaration]:
        args = compact(
            {
                "name": self.guardrail_name,
                "blocked_input_messaging": self.blocked_input_messaging,
                "blocked_outputs_messaging": self.blocked_outputs_messaging,
                "description": self.description,
                "kms_key_arn": self.kms_key_arn,
                "tags": dict(tags),
            }
        )
        args.update(self.policies)
        resources = [ResourceDeclaration(key="guardrail", type="aws:bedrock.Guardrail", args=args)]
        if self.create_version:
            resources.append(
                ResourceDeclaration(
                    key="guardrail_version",
                    type="aws:bedrock.GuardrailVersion",
                    args=compact({"guardrail_arn": ref("guardrail", "guardrail_arn"), "description": self.description}),
                    depends_on=("guardrail",),
                )
            )
        return resources

    def outputs(self) -> Dict[str, Any]:
        return {
            "guardrail_id": ref("guardrail", "guardrail_id"),
            "guardrail_arn": ref("guardrail", "guardrail_arn"),
            "guardrail_version": ref("guardrail_version", "version") if self.create_version else ref("guardrail", "version"),
        }


def _storage_configuration(value: Dict[str, Any]) -> Dict[str, Any]:
    storage_type = check_choice(value.get("type"), STORAGE_TYPES, MODULE, "storage_configuration.type")
    block, required, field_defaults = STORAGE_BACKENDS[storage_type]
    config = value.get(block)
    if not isinstance(config, dict):
        raise _fail(f"{storage_type} storage needs {block}", "storage_configuration")
    missing = [key for key in required if not config.get(key)]
    if missing:
        raise _fail(f"{block} is missing {', '.join(missing)}", "storage_configuration")
    for key in ("collection_arn", "resource_arn", "credentials_secret_arn"):
        if config.get(key):
            check_arn(config[key], module=MODULE, field=f"storage_configuration.{block}.{key}")
    expanded = {k: v for k, v in config.items() if k != "field_mapping" and v is not None}
    if storage_type == "OPENSEARCH_SERVERLESS":
        expanded.setdefault("vector_index_name", "bedrock-knowledge-base-default-index")
    expanded["field_mapping"] = with_defaults(config.get("field_mapping"), field_defaults)
    return {"type": storage_type, block: expanded}


def _data_source(inputs: ModuleInputs, value: Dict[str, Any]) -> Dict[str, Any]:
    field = "data_source"
    bucket_arn = value.get("bucket_arn")
    if not bucket_arn:
        raise inputs.fail("needs bucket_arn", field)
    check_arn(bucket_arn, service="s3", module=MODULE, field=f"{field}.bucket_arn")
    inclusion_prefixes = None
    if value.get("inclusion_prefixes") is not None:
        inclusion_prefixes = inputs.string_list(value["inclusion_prefixes"], f"{field}.inclusion_prefixes")
    chunking = None
    strategy = value.get("chunking_strategy")
    if strategy is not None:
        check_choice(strategy, CHUNKING_STRATEGIES, MODULE, f"{field}.chunking_strategy")
        chunking = {"chunking_strategy": strategy}
        if strategy == "FIXED_SIZE":
            chunking["fixed_size_chunking_configuration"] = with_defaults(
                {"max_tokens": value.get("max_tokens"), "overlap_percentage": value.get("overlap_percentage")},
                FIXED_SIZE_CHUNKING_DEFAULTS,
            )
    return compact(
        {
            "name": value.get("name") or f"{inputs.get('name')}-data-source",
            "description": value.get("description"),
            "data_deletion_policy": check_choice(
                value.get("data_deletion_policy", "DELETE"), DATA_DELETION_POLICIES, MODULE, f"{field}.data_deletion_policy"
            ),
            "data_source_configuration": {
                "type": "S3",
                "s3_configuration": compact(
                    {
                        "bucket_arn": bucket_arn,
                        "inclusion_prefixes": inclusion_prefixes or None,
                        "bucket_owner_account_id": value.get("bucket_owner_account_id"),
                    }
                ),
            },
            "server_side_encryption_configuration": first(
                optional_block(value.get("kms_key_arn"), lambda arn: {"kms_key_arn": arn})
            ),
            "vector_ingestion_configuration": first(
                optional_block(chunking, lambda c: {"chunking_configuration": c})
            ),
        }
    )


@dataclass(frozen=True)
class KnowledgeBase(Variant):
    resource_type: ClassVar[str] = "knowledge_base"

    knowledge_base_name: str
    embedding_model_arn: str
    storage_configuration: Dict[str, Any]
    description: Optional[str] = None
    data_source: Optional[Dict[str, Any]] = None

    @classmethod
    def from_inputs(cls, inputs: ModuleInputs) -> "KnowledgeBase":
        return cls(
            knowledge_base_name=inputs.string("knowledge_base_name") or inputs.get("name"),
            embedding_model_arn=inputs.arn("embedding_model_arn", service="bedrock", required=True),
            storage_configuration=_storage_configuration(inputs.mapping("storage_configuration", required=True)),
            description=inputs.string("description"),
            data_source=first(optional_block(inputs.mapping("data_source"), lambda v: _data_source(inputs, v))),
        )

    @property
    def storage_type(self) -> str:
        return self.storage_configuration["type"]

    def declare(self, name: str, role: RoleResolution, tags: Dict[str, str]) -> List[ResourceDeclaration]:
        resources = [
            ResourceDeclaration(
                key="knowledge_base",
                type="aws:bedrock.AgentKnowledgeBase",
                args=compact(
                    {
                        "name": self.knowledge_base_name,
                        "role_arn": role.effective_arn,
                        "description": self.description,
                        "knowledge_base_configuration": {
                            "type": "VECTOR",
                            "vector_knowledge_base_configuration": {"embedding_model_arn": self.embedding_model_arn},
                        },
                        "storage_configuration": self.storage_configuration,
                        "tags": dict(tags),
                    }
                ),
                depends_on=role.dependencies,
            )
        ]
        if self.data_source:
            args = dict(self.data_source)
            args["knowledge_base_id"] = ref("knowledge_base", "id")
            resources.append(
                ResourceDeclaration(
                    key="data_source",
                    type="aws:bedrock.AgentDataSource",
                    args=args,
                    depends_on=("knowledge_base",),
                )
            )
        return resources

    def outputs(self) -> Dict[str, Any]:
        outputs = {
            "knowledge_base_id": ref("knowledge_base", "id"),
            "knowledge_base_arn": ref("knowledge_base", "arn"),
        }
        if self.data_source:
            outputs["data_source_id"] = ref("data_source", "data_source_id")
        return outputs


def _log_s3_config(value: Dict[str, Any], field: str) -> Dict[str, Any]:
    if not value.get("bucket_name"):
        raise _fail("needs bucket_name", field)
    check_bucket(value["bucket_name"], MODULE, field)
    return with_defaults(value, LOG_S3_DEFAULTS)


@dataclass(frozen=True)
class LoggingConfig(Variant):
    resource_type: ClassVar[str] = "logging_config"

    delivery: Dict[str, bool]
    s3_config: Optional[Dict[str, Any]] = None
    cloudwatch_config: Optional[Dict[str, Any]] = None

    @property
    def requires_role(self) -> bool:
        return self.cloudwatch_config is not None

    @classmethod
    def from_inputs(cls, inputs: ModuleInputs) -> "LoggingConfig":
        s3_config = first(optional_block(inputs.mapping("s3_config"), lambda v: _log_s3_config(v, "s3_config")))
        cloudwatch_config = first(optional_block(inputs.mapping("cloudwatch_config"), _cloudwatch_config))
        if not s3_config and not cloudwatch_config:
            raise inputs.fail("needs s3_config, cloudwatch_config or both")
        delivery = {key: inputs.boolean(key, default) for key, default in LOGGING_DEFAULTS.items()}
        return cls(delivery=delivery, s3_config=s3_config, cloudwatch_config=cloudwatch_config)

    def declare(self, name: str, role: RoleResolution, tags: Dict[str, str]) -> List[ResourceDeclaration]:
        cloudwatch_config = None
        if self.cloudwatch_config:
            cloudwatch_config = dict(self.cloudwatch_config, role_arn=role.effective_arn)
        logging_config = dict(self.delivery)
        logging_config.update(compact({"s3_config": self.s3_config, "cloudwatch_config": cloudwatch_config}))
        return [
            ResourceDeclaration(
                key="logging_config",
                type="aws:bedrock.ModelInvocationLoggingConfiguration",
                args={"logging_config": logging_config},
                depends_on=role.dependencies,
            )
        ]

    def outputs(self) -> Dict[str, Any]:
        return {"logging_config_id": ref("logging_config", "id")}


def _cloudwatch_config(value: Dict[str, Any]) -> Dict[str, Any]:
    if not value.get("log_group_name"):
        raise _fail("needs log_group_name", "cloudwatch_config")
    return compact(
        {
            "log_group_name": value["log_group_name"],
            "large_data_delivery_s3_config": first(
                optional_block(
                    value.get("large_data_delivery_s3_config"),
                    lambda v: _log_s3_config(v, "cloudwatch_config.large_data_delivery_s3_config"),
                )
            ),
        }
    )


def bedrock_role(inputs: ModuleInputs, variant: Variant) -> RoleResolution:
    name = inputs.get("name")
    common = dict(name=name, service="bedrock", existing_role_arn=inputs.role_arn())
    if isinstance(variant, LoggingConfig):
        large_data = variant.cloudwatch_config.get("large_data_delivery_s3_config") or {}
        return resolve_role(
            output_bucket=large_data.get("bucket_name"),
            output_prefix=large_data.get("key_prefix"),
            service_actions=["logs:CreateLogStream", "logs:PutLogEvents"],
            **common,
        )
    if isinstance(variant, KnowledgeBase):
        return resolve_role(
            input_bucket=inputs.bucket("s3_bucket_name"),
            service_actions=["bedrock:*"] + STORAGE_ACTIONS[variant.storage_type],
            kms_key_arns=kms_key_arns((variant.data_source or {}).get("kms_key_arn")),
            **common,
        )
    actions = ["bedrock:*"]
    if variant.vpc_config:
        actions += VPC_ACTIONS
    return resolve_role(
        input_bucket=inputs.bucket("s3_bucket_name"),
        output_bucket=inputs.bucket("output_s3_bucket_name"),
        output_prefix=inputs.string("output_key_prefix"),
        service_actions=actions,
        kms_key_arns=kms_key_arns(variant.custom_model_kms_key_id),
        **common,
    )


DEFINITION = register(
    ModuleDefinition(
        module=MODULE,
        variants={
            "custom_model": CustomModel.from_inputs,
            "guardrail": Guardrail.from_inputs,
            "knowledge_base": KnowledgeBase.from_inputs,
            "logging_config": LoggingConfig.from_inputs,
        },
        role=bedrock_role,
        outputs=(
            "custom_model_arn",
            "custom_model_job_arn",
            "guardrail_id",
            "guardrail_arn",
            "guardrail_version",
            "knowledge_base_id",
            "knowledge_base_arn",
            "data_source_id",
            "logging_config_id",
        ),
    )
)
