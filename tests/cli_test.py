import json
from pathlib import Path

import yaml

from awsaiml.cli import main

EXAMPLE_CONFIG = str(Path(__file__).parent.parent / "config.yaml")


def test_plan_as_yaml(capsys) -> None:
    assert main([EXAMPLE_CONFIG]) == 0
    plans = yaml.safe_load(capsys.readouterr().out)
    assert [p["name"] for p in plans] == [
        "invoice-adapter",
        "ticket-classifier",
        "chat-guardrail",
        "docs-search",
        "lobby-faces",
    ]
    guardrail = plans[2]
    assert guardrail["role"]["mode"] == "none"
    assert [r["key"] for r in guardrail["resources"]] == ["guardrail"]


def test_plan_as_json_for_one_module(capsys) -> None:
    assert main([EXAMPLE_CONFIG, "--module", "docs-search", "--format", "json"]) == 0
    plans = json.loads(capsys.readouterr().out)
    assert len(plans) == 1
    assert plans[0]["outputs"]["index_id"] == "ref:index.id"
    data_source = [r for r in plans[0]["resources"] if r["key"] == "data_source"][0]
    assert data_source["depends_on"][0] == "index"


def test_unknown_module_name(capsys) -> None:
    assert main([EXAMPLE_CONFIG, "--module", "nope"]) == 1
    assert capsys.readouterr().out == ""


def test_invalid_config(tmp_path, capsys) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "team": "ml",
                "service": "docai",
                "environment": "dev",
                "region": "us-east-1",
                "modules": [{"module": "comprehend", "name": "bad", "resource_type": "summarizer"}],
            }
        )
    )
    assert main([str(path)]) == 1
    assert capsys.readouterr().out == ""


def test_missing_file(tmp_path) -> None:
    assert main([str(tmp_path / "absent.yaml")]) == 1
