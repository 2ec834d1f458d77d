from pathlib import Path

import pytest
import yaml

from awsaiml import ValidationError
from awsaiml.config import Config, ModuleConfig, load_config, parse_config, plan_config

EXAMPLE_CONFIG = Path(__file__).parent.parent / "config.yaml"

BASE = {"team": "ml", "service": "docai", "environment": "dev", "region": "us-east-1"}


def write_config(tmp_path: Path, data: dict) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(data))
    return str(path)


def test_load_config(tmp_path) -> None:
    data = dict(
        BASE,
        tags={"owner": "ml"},
        modules=[{"module": "rekognition", "name": "faces", "resource_type": "collection"}],
    )
    config = load_config(write_config(tmp_path, data))
    assert config == Config(
        team="ml",
        service="docai",
        environment="dev",
        region="us-east-1",
        tags={"owner": "ml"},
        modules=[ModuleConfig(module="rekognition", name="faces", args={"resource_type": "collection"})],
    )
    assert config.modules[0].inputs == {"name": "faces", "resource_type": "collection"}


@pytest.mark.parametrize("missing", ["team", "service", "environment", "region"])
def test_required_keys(missing) -> None:
    data = dict(BASE)
    del data[missing]
    with pytest.raises(ValueError, match=missing):
        parse_config(data)


def test_module_entries_need_module_and_name() -> None:
    with pytest.raises(ValidationError):
        parse_config(dict(BASE, modules=[{"module": "kendra"}]))


def test_plan_config_rejects_duplicate_names() -> None:
    entry = {"module": "rekognition", "name": "faces", "resource_type": "collection"}
    with pytest.raises(ValidationError):
        plan_config(parse_config(dict(BASE, modules=[entry, entry])))


def test_one_bad_module_rejects_everything() -> None:
    modules = [
        {"module": "rekognition", "name": "faces", "resource_type": "collection"},
        {"module": "rekognition", "name": "broken", "resource_type": "vault"},
    ]
    with pytest.raises(ValidationError):
        plan_config(parse_config(dict(BASE, modules=modules)))


def test_example_config_plans() -> None:
    plans = plan_config(load_config(str(EXAMPLE_CONFIG)))
    assert [(p.module, p.resource_type) for p in plans] == [
        ("textract", "adapter"),
        ("comprehend", "classifier"),
        ("bedrock", "guardrail"),
        ("kendra", "index"),
        ("rekognition", "stream_processor"),
    ]
