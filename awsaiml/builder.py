import inspect
import json
from typing import Any, Dict, List, Optional, Set, Tuple

import pulumi
import pulumi_aws as aws
import pulumi_aws_native as aws_native

from awsaiml.config import Config, plan_config
from awsaiml.errors import DependencyFailure, InvalidReference
from awsaiml.plan import REF_PREFIX, ModulePlan, ResourceDeclaration

AWS_REGION_ABBREVIATIONS = {
    "us-east-1": "use1",
    "us-east-2": "use2",
    "us-west-1": "usw1",
    "us-west-2": "usw2",
    "af-south-1": "afs1",
    "ap-east-1": "ape1",
    "ap-south-1": "aps1",
    "ap-northeast-1": "apne1",
    "ap-northeast-2": "apne2",
    "ap-northeast-3": "apne3",
    "ap-southeast-1": "apse1",
    "ap-southeast-2": "apse2",
    "ca-central-1": "cac1",
    "eu-central-1": "euc1",
    "eu-west-1": "euw1",
    "eu-west-2": "euw2",
    "eu-west-3": "euw3",
    "eu-north-1": "eun1",
    "eu-south-1": "eus1",
    "me-south-1": "mes1",
    "sa-east-1": "sae1",
    "us-gov-east-1": "usge1",
    "us-gov-west-1": "usgw1",
    "cn-north-1": "cnn1",
    "cn-northwest-1": "cnnw1",
}

PROVIDERS = {
    "aws": aws,
    "aws-native": aws_native,
}

# IAM documents are planned as dicts and handed to the provider as JSON
POLICY_DOCUMENT_ARGS = ("assume_role_policy", "policy")


def parse_ref(value: str) -> Tuple[str, str]:
    ref_text = value[len(REF_PREFIX):]
    if "." in ref_text:
        ref_res, ref_attr = ref_text.split(".", 1)
    else:
        ref_res, ref_attr = ref_text, "id"
    return ref_res, ref_attr


def resolve_value(value: Any, resources: Dict[str, Any]) -> Any:
    if isinstance(value, dict):
        return {k: resolve_value(v, resources) for k, v in value.items()}
    elif isinstance(value, list):
        return [resolve_value(item, resources) for item in value]
    elif isinstance(value, str) and value.startswith(REF_PREFIX):
        ref_res, ref_attr = parse_ref(value)
        if ref_res not in resources:
            raise InvalidReference(f"Referenced resource '{ref_res}' not found.")
        attr_val = getattr(resources[ref_res], ref_attr, None)
        if attr_val is None:
            raise InvalidReference(f"Attribute '{ref_attr}' not found on resource '{ref_res}'")
        return attr_val
    else:
        return value


def referenced_keys(value: Any) -> Set[str]:
    if isinstance(value, dict):
        return set().union(*(referenced_keys(v) for v in value.values())) if value else set()
    elif isinstance(value, list):
        return set().union(*(referenced_keys(v) for v in value)) if value else set()
    elif isinstance(value, str) and value.startswith(REF_PREFIX):
        return {parse_ref(value)[0]}
    return set()


def split_type(resource_type: str) -> Tuple[str, str, str]:
    provider, path = resource_type.split(":", 1) if ":" in resource_type else ("aws", resource_type)
    module_name, class_name = path.rsplit(".", 1)
    return provider, module_name, class_name


def accepted_parameters(module: Any, class_name: str) -> Optional[Set[str]]:
    """Keyword arguments a resource accepts, or None when its signature does not say.

    Generated resource classes take `*args, **kwargs`; their `<Class>Args`
    input type carries the real parameter list.
    """
    args_class = getattr(module, f"{class_name}Args", None)
    target = args_class.__init__ if args_class is not None else getattr(module, class_name).__init__
    sig = inspect.signature(target)
    if any(param.kind == param.VAR_KEYWORD for param in sig.parameters.values()):
        return None
    return {k for k in sig.parameters if k not in {"self", "__self__", "resource_name", "opts"}}


def native_tags(tags: Dict[str, str]) -> List[Dict[str, str]]:
    return [{"key": k, "value": v} for k, v in tags.items()]


class AIMLResourceBuilder:
    def __init__(self, config: Config):
        self.config = config
        self.resources: Dict[str, Any] = {}
        self.skipped: Dict[str, Set[str]] = {}
        self.outputs: Dict[str, Dict[str, Any]] = {}
        self.plans: List[ModulePlan] = []

    def get_abbreviation(self, region: str) -> str:
        return AWS_REGION_ABBREVIATIONS.get(region.lower(), region.split("-")[0].lower())

    def generate_resource_name(self, base_name: str) -> str:
        team = (self.config.team or "team").strip().lower()
        service = (self.config.service or "svc").strip().lower()
        env = (self.config.environment or "dev").strip().lower()
        reg_abbr = self.get_abbreviation(self.config.region or "us-east-1")
        return f"{team}-{service}-{env}-{reg_abbr}-{base_name}".lower()

    def _apply_common_parameters(self, provider: str, resolved_args: dict, accepted: Optional[Set[str]]) -> dict:
        if accepted is None or "tags" in accepted:
            resource_tags = dict(self.config.tags)
            resource_tags.update(resolved_args.get("tags") or {})
            if resource_tags:
                resolved_args["tags"] = native_tags(resource_tags) if provider == "aws-native" else resource_tags
            else:
                resolved_args.pop("tags", None)
        else:
            resolved_args.pop("tags", None)
        if accepted is not None and "region" in accepted:
            if "region" not in resolved_args:
                resolved_args["region"] = self.config.region
        else:
            resolved_args.pop("region", None)
        return resolved_args

    def build(self):
        # nothing is declared unless every module plans cleanly
        self.plans = plan_config(self.config)
        for plan in self.plans:
            self.build_module(plan)

    def build_module(self, plan: ModulePlan):
        module_resources: Dict[str, Any] = {}
        skipped: Set[str] = set()
        for declaration in plan.resources:
            resource = self._create(plan, declaration, module_resources, skipped)
            if resource is None:
                skipped.add(declaration.key)
                continue
            module_resources[declaration.key] = resource
            self.resources[f"{plan.name}/{declaration.key}"] = resource
        self.skipped[plan.name] = skipped
        self.outputs[plan.name] = {
            key: None if referenced_keys(value) & skipped else resolve_value(value, module_resources)
            for key, value in plan.outputs.items()
        }

    def _create(self, plan: ModulePlan, declaration: ResourceDeclaration, module_resources: Dict[str, Any], skipped: Set[str]):
        name = f"{plan.name}/{declaration.key}"
        provider, module_name, class_name = split_type(declaration.type)
        module = getattr(PROVIDERS.get(provider), module_name, None)
        if not module:
            pulumi.log.warn(f"{provider} module '{module_name}' not found. Skipping '{name}'.")
            return None
        ResourceClass = getattr(module, class_name, None)
        if ResourceClass is None:
            pulumi.log.warn(f"Resource class '{class_name}' not found in module '{module_name}'. Skipping '{name}'.")
            return None

        for key in declaration.depends_on:
            if key not in module_resources:
                reason = "was skipped" if key in skipped else "is not declared before it"
                raise DependencyFailure(f"'{name}' depends on '{key}', which {reason}", plan.module)
        for key in referenced_keys(declaration.args) & skipped:
            raise DependencyFailure(f"'{name}' references '{key}', which was skipped", plan.module)

        resolved_args = resolve_value(declaration.args, module_resources)
        for arg in POLICY_DOCUMENT_ARGS:
            if isinstance(resolved_args.get(arg), dict):
                resolved_args[arg] = json.dumps(resolved_args[arg])

        accepted = accepted_parameters(module, class_name)
        resolved_args = self._apply_common_parameters(provider, resolved_args, accepted)
        if accepted is not None:
            for arg in sorted(set(resolved_args) - accepted):
                pulumi.log.warn(f"'{declaration.type}' does not accept '{arg}'; dropping it from '{name}'")
                resolved_args.pop(arg)

        opts = None
        if declaration.depends_on:
            opts = pulumi.ResourceOptions(depends_on=[module_resources[key] for key in declaration.depends_on])
        pulumi_name = self.generate_resource_name(f"{plan.name}-{declaration.key.replace('_', '-')}")
        pulumi.log.debug(f"DEBUG for '{name}': final resolved_args => {resolved_args}")
        resource_instance = ResourceClass(pulumi_name, opts=opts, **resolved_args)
        pulumi.log.info(f"Created resource: {pulumi_name} ({declaration.type})")
        return resource_instance
