"""
This module defines the data structures for our configuration and the
YAML loader that fills them.

A configuration names the owning team/service/environment/region (used to
derive Pulumi resource names), global tags, and a list of module
invocations. Each invocation is a flat mapping of the module's inputs.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pulumi
import yaml

from awsaiml.errors import ValidationError
from awsaiml.modules import plan_module
from awsaiml.plan import ModulePlan

REQUIRED_KEYS = ["team", "service", "environment", "region"]
DEFAULT_CONFIG_FILE = "config.yaml"


@dataclass
class ModuleConfig:
    module: str
    name: str
    args: Dict[str, Any] = field(default_factory=dict)

    @property
    def inputs(self) -> Dict[str, Any]:
        return dict(self.args, name=self.name)


@dataclass
class Config:
    team: str
    service: str
    environment: str
    region: str
    tags: Dict[str, str] = field(default_factory=dict)
    modules: List[ModuleConfig] = field(default_factory=list)


def parse_config(config_data: Dict[str, Any]) -> Config:
    if not isinstance(config_data, dict):
        raise ValueError("Configuration must be a mapping")
    # Ensure required keys exist
    for key in REQUIRED_KEYS:
        if key not in config_data:
            raise ValueError(f"Missing required configuration key: {key}")

    modules = []
    for index, entry in enumerate(config_data.get("modules") or []):
        if not isinstance(entry, dict) or "module" not in entry or "name" not in entry:
            raise ValidationError(f"modules[{index}] needs 'module' and 'name'")
        args = {k: v for k, v in entry.items() if k not in ("module", "name")}
        modules.append(ModuleConfig(module=entry["module"], name=entry["name"], args=args))

    return Config(
        team=config_data["team"],
        service=config_data["service"],
        environment=config_data["environment"],
        region=config_data["region"],
        tags=dict(config_data.get("tags") or {}),
        modules=modules,
    )


def load_config(file_path: str) -> Config:
    """Load and validate YAML configuration from the given file path."""
    with open(file_path, "r") as file:
        config_data = yaml.safe_load(file)
    return parse_config(config_data)


def config_file(config: Optional[pulumi.Config] = None) -> str:
    """The configuration file for this stack: project setting `configFile`, else config.yaml."""
    config = config or pulumi.Config()
    return config.get("configFile") or DEFAULT_CONFIG_FILE


def plan_config(config: Config) -> List[ModulePlan]:
    """Plan every invocation before anything is built, so one bad module rejects the whole run."""
    seen = set()
    plans = []
    for module in config.modules:
        if module.name in seen:
            raise ValidationError(f"duplicate module name '{module.name}'", module.module, "name")
        seen.add(module.name)
        plans.append(plan_module(module.module, module.inputs))
    return plans
