"""Kendra: an enterprise search index fed by one S3 or web crawler data source."""

import re
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional

from awsaiml.blocks import compact, first, optional_block, with_defaults
from awsaiml.inputs import ModuleInputs, kms_key_arns
from awsaiml.modules import ModuleDefinition, register
from awsaiml.plan import ResourceDeclaration, RoleResolution, Variant, ref
from awsaiml.roles import resolve_role

EDITIONS = ["DEVELOPER_EDITION", "ENTERPRISE_EDITION"]
USER_CONTEXT_POLICIES = ["ATTRIBUTE_FILTER", "USER_TOKEN"]
DATA_SOURCE_TYPES = ["S3", "WEBCRAWLER"]
WEB_CRAWLER_MODES = ["HOST_ONLY", "SUBDOMAINS", "EVERYTHING"]
URL = re.compile(r"^https?://\S+$")

WEB_CRAWLER_DEFAULTS = {
    "crawl_depth": 2,
    "max_links_per_page": 100,
    "max_content_size_per_page_in_mega_bytes": 50,
    "max_urls_per_minute_crawl_rate": 300,
}

SERVICE_ACTIONS = [
    "kendra:*",
    "cloudwatch:PutMetricData",
    "logs:CreateLogGroup",
    "logs:DescribeLogGroups",
    "logs:CreateLogStream",
    "logs:DescribeLogStreams",
    "logs:PutLogEvents",
]


def _s3_configuration(inputs: ModuleInputs) -> Dict[str, Any]:
    return {
        "s3_configuration": compact(
            {
                "bucket_name": inputs.bucket("s3_bucket_name", required=True),
                "inclusion_prefixes": inputs.sequence("inclusion_prefixes") or None,
                "inclusion_patterns": inputs.sequence("inclusion_patterns") or None,
                "exclusion_patterns": inputs.sequence("exclusion_patterns") or None,
                "documents_metadata_configuration": first(
                    optional_block(inputs.string("documents_metadata_s3_prefix"), lambda p: {"s3_prefix": p})
                ),
                "access_control_list_configuration": first(
                    optional_block(inputs.string("access_control_list_key_path"), lambda p: {"key_path": p})
                ),
            }
        )
    }


def _web_crawler_configuration(inputs: ModuleInputs) -> Dict[str, Any]:
    source = inputs.exactly_one("seed_urls", "site_maps")
    urls = inputs.sequence(source)
    for url in urls:
        if not isinstance(url, str) or not URL.match(url):
            raise inputs.fail(f"'{url}' is not an http(s) URL", source)
    if source == "seed_urls":
        url_configuration = {
            "seed_url_configuration": {
                "seed_urls": urls,
                "web_crawler_mode": inputs.choice("web_crawler_mode", WEB_CRAWLER_MODES, default="HOST_ONLY"),
            }
        }
    else:
        url_configuration = {"site_maps_configuration": {"site_maps": urls}}
    limits = with_defaults({key: inputs.number(key) for key in WEB_CRAWLER_DEFAULTS}, WEB_CRAWLER_DEFAULTS)
    if not 0 <= limits["crawl_depth"] <= 10:
        raise inputs.fail("must be between 0 and 10", "crawl_depth")
    configuration = {"urls": url_configuration}
    configuration.update(limits)
    configuration.update(
        compact(
            {
                "url_inclusion_patterns": inputs.sequence("url_inclusion_patterns") or None,
                "url_exclusion_patterns": inputs.sequence("url_exclusion_patterns") or None,
            }
        )
    )
    return {"web_crawler_configuration": configuration}


DATA_SOURCE_CONFIGURATIONS = {
    "S3": _s3_configuration,
    "WEBCRAWLER": _web_crawler_configuration,
}


@dataclass(frozen=True)
class Index(Variant):
    resource_type: ClassVar[str] = "index"

    index_name: str
    edition: str
    data_source_name: str
    data_source_type: str
    data_source_configuration: Dict[str, Any]
    language_code: str
    description: Optional[str] = None
    kms_key_id: Optional[str] = None
    user_context_policy: Optional[str] = None
    capacity_units: Optional[Dict[str, Any]] = None
    schedule: Optional[str] = None

    @classmethod
    def from_inputs(cls, inputs: ModuleInputs) -> "Index":
        index_name = inputs.string("kendra_index_name", required=True)
        data_source_name = inputs.string("kendra_data_source_name", required=True)
        data_source_type = inputs.choice("kendra_data_source_type", DATA_SOURCE_TYPES, required=True)
        inputs.bucket("s3_bucket_name", required=True)
        edition = inputs.choice("edition", EDITIONS, default="DEVELOPER_EDITION")
        capacity_units = inputs.mapping("capacity_units")
        if capacity_units and edition != "ENTERPRISE_EDITION":
            raise inputs.fail("only ENTERPRISE_EDITION indices take capacity units", "capacity_units")
        return cls(
            index_name=index_name,
            edition=edition,
            data_source_name=data_source_name,
            data_source_type=data_source_type,
            data_source_configuration=DATA_SOURCE_CONFIGURATIONS[data_source_type](inputs),
            language_code=inputs.string("language_code", "en"),
            description=inputs.string("description"),
            kms_key_id=inputs.kms_key("kms_key_id"),
            user_context_policy=inputs.choice("user_context_policy", USER_CONTEXT_POLICIES),
            capacity_units=first(
                optional_block(
                    capacity_units,
                    lambda c: with_defaults(c, {"query_capacity_units": 0, "storage_capacity_units": 0}),
                )
            ),
            schedule=inputs.string("schedule"),
        )

    def declare(self, name: str, role: RoleResolution, tags: Dict[str, str]) -> List[ResourceDeclaration]:
        index = ResourceDeclaration(
            key="index",
            type="aws:kendra.Index",
            args=compact(
                {
                    "name": self.index_name,
                    "edition": self.edition,
                    "role_arn": role.effective_arn,
                    "description": self.description,
                    "server_side_encryption_configuration": first(
                        optional_block(self.kms_key_id, lambda k: {"kms_key_id": k})
                    ),
                    "user_context_policy": self.user_context_policy,
                    "capacity_units": self.capacity_units,
                    "tags": dict(tags),
                }
            ),
            depends_on=role.dependencies,
        )
        data_source = ResourceDeclaration(
            key="data_source",
            type="aws:kendra.DataSource",
            args=compact(
                {
                    "index_id": ref("index", "id"),
                    "name": self.data_source_name,
                    "type": self.data_source_type,
                    "role_arn": role.effective_arn,
                    "language_code": self.language_code,
                    "schedule": self.schedule,
                    "configuration": self.data_source_configuration,
                    "tags": dict(tags),
                }
            ),
            depends_on=("index",) + role.dependencies,
        )
        return [index, data_source]

    def outputs(self) -> Dict[str, Any]:
        return {
            "index_id": ref("index", "id"),
            "index_arn": ref("index", "arn"),
            "data_source_id": ref("data_source", "data_source_id"),
            "data_source_arn": ref("data_source", "arn"),
        }


def kendra_role(inputs: ModuleInputs, variant: Variant) -> RoleResolution:
    return resolve_role(
        name=inputs.get("name"),
        service="kendra",
        existing_role_arn=inputs.role_arn(),
        input_bucket=inputs.bucket("s3_bucket_name"),
        service_actions=SERVICE_ACTIONS,
        kms_key_arns=kms_key_arns(variant.kms_key_id),
    )


DEFINITION = register(
    ModuleDefinition(
        module="kendra",
        variants={"index": Index.from_inputs},
        role=kendra_role,
        outputs=("index_id", "index_arn", "data_source_id", "data_source_arn"),
        default_resource_type="index",
    )
)
