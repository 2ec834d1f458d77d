import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from awsaiml.blocks import is_present
from awsaiml.errors import InvalidReference, ValidationError

ARN_PATTERN = re.compile(r"^arn:aws(-cn|-us-gov)?:(?P<service>[a-z0-9-]+):(?P<region>[a-z0-9-]*):(?P<account>\d{12})?:(?P<resource>.+)$")
BUCKET_PATTERN = re.compile(r"^[a-z0-9][a-z0-9.-]{1,61}[a-z0-9]$")
S3_URI_PATTERN = re.compile(r"^s3://(?P<bucket>[^/]+)(/.*)?$")


def check_arn(value: str, service: Optional[str] = None, resource_prefix: Optional[str] = None, module: Optional[str] = None, field: Optional[str] = None) -> str:
    match = ARN_PATTERN.match(value) if isinstance(value, str) else None
    if not match:
        raise InvalidReference(f"'{value}' is not a valid ARN", module, field)
    if service and match.group("service") != service:
        raise InvalidReference(f"'{value}' is not an {service} ARN", module, field)
    if resource_prefix and not match.group("resource").startswith(resource_prefix):
        raise InvalidReference(f"'{value}' does not reference a {resource_prefix.rstrip('/:')}", module, field)
    return value


def check_bucket(value: str, module: Optional[str] = None, field: Optional[str] = None) -> str:
    if not isinstance(value, str) or not BUCKET_PATTERN.match(value) or ".." in value:
        raise InvalidReference(f"'{value}' is not a valid S3 bucket name", module, field)
    return value


def check_s3_uri(value: str, module: Optional[str] = None, field: Optional[str] = None) -> str:
    match = S3_URI_PATTERN.match(value) if isinstance(value, str) else None
    if not match:
        raise InvalidReference(f"'{value}' is not an s3:// URI", module, field)
    check_bucket(match.group("bucket"), module, field)
    return value


class ModuleInputs:
    """Read access to one module invocation's raw input mapping, with validation helpers."""

    def __init__(self, module: str, raw: Mapping[str, Any]):
        self.module = module
        self.raw = dict(raw)

    def __contains__(self, key: str) -> bool:
        return is_present(self.raw.get(key))

    def get(self, key: str, default: Any = None) -> Any:
        value = self.raw.get(key)
        return default if value is None else value

    def fail(self, message: str, field: Optional[str] = None) -> ValidationError:
        return ValidationError(message, self.module, field)

    def require(self, key: str) -> Any:
        if key not in self:
            raise self.fail("is required", key)
        return self.raw[key]

    def string(self, key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
        value = self.require(key) if required else self.get(key, default)
        if value is not None and not isinstance(value, str):
            raise self.fail(f"must be a string, got {type(value).__name__}", key)
        return value

    def boolean(self, key: str, default: bool = False) -> bool:
        value = self.get(key, default)
        if not isinstance(value, bool):
            raise self.fail("must be true or false", key)
        return value

    def number(self, key: str, default: Any = None) -> Any:
        value = self.get(key, default)
        if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
            raise self.fail("must be a number", key)
        return value

    def choice(self, key: str, allowed: Iterable[str], default: Optional[str] = None, required: bool = False) -> Optional[str]:
        value = self.string(key, default, required)
        if value is not None:
            check_choice(value, allowed, self.module, key)
        return value

    def subset(self, key: str, allowed: Iterable[str], default: Optional[List[str]] = None) -> List[str]:
        values = self.sequence(key) or list(default or [])
        for value in values:
            check_choice(value, allowed, self.module, key)
        return values

    def mapping(self, key: str, required: bool = False) -> Optional[Dict[str, Any]]:
        value = self.require(key) if required else self.raw.get(key)
        if value is None:
            return None
        if not isinstance(value, dict):
            raise self.fail("must be a mapping", key)
        return value

    def sequence(self, key: str, required: bool = False) -> List[Any]:
        value = self.require(key) if required else self.raw.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise self.fail("must be a list", key)
        return value

    def nested_mapping(self, value: Any, field: str) -> Dict[str, Any]:
        """A block inside another input; absent blocks read as empty."""
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise self.fail(f"must be a mapping, got {type(value).__name__}", field)
        return value

    def string_list(self, value: Any, field: str) -> List[str]:
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise self.fail("must be a list of strings", field)
        return list(value)

    def tags(self) -> Dict[str, str]:
        value = self.mapping("tags") or {}
        for k, v in value.items():
            if not isinstance(k, str) or not isinstance(v, str):
                raise self.fail("keys and values must be strings", "tags")
        return dict(value)

    def arn(self, key: str, service: Optional[str] = None, resource_prefix: Optional[str] = None, required: bool = False) -> Optional[str]:
        value = self.string(key, required=required)
        if value is None:
            return None
        return check_arn(value, service, resource_prefix, self.module, key)

    def role_arn(self, key: str = "existing_role_arn") -> Optional[str]:
        return self.arn(key, service="iam", resource_prefix="role/")

    def bucket(self, key: str, required: bool = False) -> Optional[str]:
        value = self.string(key, required=required)
        if value is None:
            return None
        return check_bucket(value, self.module, key)

    def s3_uri(self, key: str, required: bool = False) -> Optional[str]:
        value = self.string(key, required=required)
        if value is None:
            return None
        return check_s3_uri(value, self.module, key)

    def kms_key(self, key: str) -> Optional[str]:
        value = self.string(key)
        if value is not None and value.startswith("arn:"):
            check_arn(value, "kms", module=self.module, field=key)
        return value

    def exactly_one(self, *keys: str) -> str:
        present = [key for key in keys if key in self]
        if len(present) != 1:
            raise self.fail(f"exactly one of {', '.join(keys)} must be set, got {len(present)}")
        return present[0]


def check_choice(value: Any, allowed: Iterable[str], module: Optional[str] = None, field: Optional[str] = None) -> Any:
    allowed = list(allowed)
    if value not in allowed:
        raise ValidationError(f"'{value}' is not one of {', '.join(allowed)}", module, field)
    return value


def kms_key_arns(*values: Optional[str]) -> List[str]:
    """KMS keys a service role has to be granted use of. Aliases and bare key ids are left to the key policy."""
    seen: List[str] = []
    for value in values:
        if value and value.startswith("arn:") and value not in seen:
            seen.append(value)
    return seen
