from typing import Optional


class ModuleError(Exception):
    """Base class for everything a module invocation can reject."""

    def __init__(self, message: str, module: Optional[str] = None, field: Optional[str] = None):
        self.module = module
        self.field = field
        prefix = ""
        if module:
            prefix = f"[{module}] "
        if field:
            prefix += f"{field}: "
        super().__init__(f"{prefix}{message}")


class ValidationError(ModuleError):
    """Input violates a documented constraint. Raised before anything is declared."""


class InvalidReference(ModuleError):
    """A supplied ARN, bucket name, S3 URI or `ref:` value is malformed or unknown."""


class DependencyFailure(ModuleError):
    """A declared predecessor resource was not materialized."""
