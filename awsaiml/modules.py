"""
Module registry and the planning entry point.

Planning is all-or-nothing: the resource type and every variant field are
validated before the role is resolved, and nothing is declared unless all
of it succeeds.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import pulumi

from awsaiml.errors import ValidationError
from awsaiml.inputs import ModuleInputs
from awsaiml.plan import CREATED, REUSED, ModulePlan, RoleResolution, Variant

ROLE_OUTPUTS = (
    "iam_role_arn",
    "iam_role_name",
    "s3_input_policy_arn",
    "s3_output_policy_arn",
    "service_policy_arn",
)


@dataclass(frozen=True)
class ModuleDefinition:
    module: str
    variants: Dict[str, Callable[[ModuleInputs], Variant]]
    role: Callable[[ModuleInputs, Variant], RoleResolution]
    outputs: Tuple[str, ...]
    default_resource_type: Optional[str] = None

    @property
    def resource_types(self) -> Tuple[str, ...]:
        return tuple(self.variants)


MODULES: Dict[str, ModuleDefinition] = {}


def register(definition: ModuleDefinition) -> ModuleDefinition:
    MODULES[definition.module] = definition
    return definition


def role_outputs(role: RoleResolution) -> Dict[str, Any]:
    role_name = None
    if role.mode == CREATED:
        role_name = role.role_name
    elif role.mode == REUSED:
        role_name = role.role_arn.rsplit("/", 1)[-1]
    return {
        "iam_role_arn": role.effective_arn,
        "iam_role_name": role_name,
        "s3_input_policy_arn": role.policy_arn("s3_input"),
        "s3_output_policy_arn": role.policy_arn("s3_output"),
        "service_policy_arn": role.policy_arn("service"),
    }


def plan_module(module: str, raw: Mapping[str, Any]) -> ModulePlan:
    definition = MODULES.get(module)
    if definition is None:
        raise ValidationError(f"unknown module '{module}', expected one of {', '.join(sorted(MODULES))}")
    inputs = ModuleInputs(module, raw)
    name = inputs.string("name", required=True)
    resource_type = inputs.choice(
        "resource_type",
        definition.resource_types,
        default=definition.default_resource_type,
        required=definition.default_resource_type is None,
    )
    tags = inputs.tags()
    existing_role_arn = inputs.role_arn()

    variant = definition.variants[resource_type](inputs)
    if variant.requires_role:
        role = definition.role(inputs, variant)
    else:
        if existing_role_arn:
            pulumi.log.warn(f"{module} {name}: {resource_type} takes no service role, ignoring existing_role_arn")
        role = RoleResolution.not_required()

    resources = tuple(role.declarations(tags) + variant.declare(name, role, tags))
    outputs: Dict[str, Any] = {key: None for key in ROLE_OUTPUTS + definition.outputs}
    outputs.update(role_outputs(role))
    outputs.update(variant.outputs())
    pulumi.log.info(f"Planned {module} {name} ({resource_type}): {len(resources)} resources, role {role.mode}")
    return ModulePlan(
        module=module,
        name=name,
        resource_type=resource_type,
        role=role,
        variant=variant,
        resources=resources,
        outputs=outputs,
    )
