"""
Data structures produced by planning a module invocation.

Nothing here talks to the Pulumi engine: a plan is a plain description of
the IAM role decision, the resources to declare, the ordering between them
and the outputs the invocation exposes. The builder turns it into real
resources.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Tuple

CREATED = "created"
REUSED = "reused"
NONE = "none"

ROLE_KEY = "iam_role"
REF_PREFIX = "ref:"


def ref(key: str, attr: str = "id") -> str:
    return f"{REF_PREFIX}{key}.{attr}"


@dataclass(frozen=True)
class ResourceDeclaration:
    key: str
    type: str
    args: Dict[str, Any] = field(default_factory=dict)
    depends_on: Tuple[str, ...] = ()

    @property
    def provider(self) -> str:
        return self.type.split(":", 1)[0]


@dataclass(frozen=True)
class PolicyFragment:
    key: str
    name: str
    description: str
    document: Dict[str, Any]

    @property
    def policy_key(self) -> str:
        return f"{self.key}_policy"

    @property
    def attachment_key(self) -> str:
        return f"{self.key}_policy_attachment"


@dataclass(frozen=True)
class RoleResolution:
    mode: str
    role_arn: Optional[str] = None
    role_name: Optional[str] = None
    service_principal: Optional[str] = None
    trust_policy: Optional[Dict[str, Any]] = None
    fragments: Tuple[PolicyFragment, ...] = ()

    @classmethod
    def reused(cls, role_arn: str) -> "RoleResolution":
        return cls(mode=REUSED, role_arn=role_arn)

    @classmethod
    def not_required(cls) -> "RoleResolution":
        return cls(mode=NONE)

    @property
    def created(self) -> bool:
        return self.mode == CREATED

    @property
    def effective_arn(self) -> Optional[str]:
        if self.mode == REUSED:
            return self.role_arn
        if self.mode == CREATED:
            return ref(ROLE_KEY, "arn")
        return None

    @property
    def dependencies(self) -> Tuple[str, ...]:
        """Attachment keys a role consumer has to wait for. Empty unless the role is ours."""
        if not self.created:
            return ()
        return tuple(fragment.attachment_key for fragment in self.fragments)

    def fragment(self, key: str) -> Optional[PolicyFragment]:
        for fragment in self.fragments:
            if fragment.key == key:
                return fragment
        return None

    def policy_arn(self, key: str) -> Optional[str]:
        fragment = self.fragment(key)
        return ref(fragment.policy_key, "arn") if fragment else None

    def declarations(self, tags: Dict[str, str]) -> List[ResourceDeclaration]:
        if not self.created:
            return []
        resources = [
            ResourceDeclaration(
                key=ROLE_KEY,
                type="aws:iam.Role",
                args={
                    "name": self.role_name,
                    "assume_role_policy": self.trust_policy,
                    "tags": dict(tags),
                },
            )
        ]
        for fragment in self.fragments:
            resources.append(
                ResourceDeclaration(
                    key=fragment.policy_key,
                    type="aws:iam.Policy",
                    args={
                        "name": fragment.name,
                        "description": fragment.description,
                        "policy": fragment.document,
                        "tags": dict(tags),
                    },
                )
            )
            resources.append(
                ResourceDeclaration(
                    key=fragment.attachment_key,
                    type="aws:iam.RolePolicyAttachment",
                    args={
                        "role": ref(ROLE_KEY, "name"),
                        "policy_arn": ref(fragment.policy_key, "arn"),
                    },
                )
            )
        return resources


class Variant:
    """One selectable resource shape of a module, keyed by `resource_type`."""

    resource_type: ClassVar[str] = ""

    @property
    def requires_role(self) -> bool:
        return True

    def declare(self, name: str, role: RoleResolution, tags: Dict[str, str]) -> List[ResourceDeclaration]:
        raise NotImplementedError

    def outputs(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True)
class ModulePlan:
    module: str
    name: str
    resource_type: str
    role: RoleResolution
    variant: Variant
    resources: Tuple[ResourceDeclaration, ...]
    outputs: Dict[str, Any]

    def resource(self, key: str) -> Optional[ResourceDeclaration]:
        for declaration in self.resources:
            if declaration.key == key:
                return declaration
        return None

    def keys(self) -> List[str]:
        return [declaration.key for declaration in self.resources]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "module": self.module,
            "name": self.name,
            "resource_type": self.resource_type,
            "role": _plain(dataclasses.asdict(self.role)),
            "resources": [_plain(dataclasses.asdict(r)) for r in self.resources],
            "outputs": _plain(self.outputs),
        }


def _plain(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value
