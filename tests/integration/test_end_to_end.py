from __future__ import annotations

import json
from pathlib import Path

import yaml
from typer.testing import CliRunner

from karp_ops_wiz.cli.main import app


runner = CliRunner()
FIXTURES = Path(__file__).resolve().parents[1] / "fixtures"


def test_cli_generate_yaml():
    result = runner.invoke(
        app,
        [
            "generate",
            "--preset",
            "cost-optimized",
            "--region",
            "us-east-1",
            "--zone",
            "us-east-1a",
            "--feature",
            "consolidation",
            "--set",
            "ttlSecondsAfterEmpty=30",
        ],
    )
    assert result.exit_code == 0, result.output
    provisioner, node_template = list(yaml.safe_load_all(result.stdout))
    assert provisioner["kind"] == "NodePool"
    assert provisioner["spec"]["consolidation"] == {"enabled": True}
    assert provisioner["spec"]["ttlSecondsAfterEmpty"] == 30
    assert provisioner["spec"]["providerRef"]["name"] == node_template["metadata"]["name"]
    keys = [r["key"] for r in provisioner["spec"]["requirements"]]
    assert "topology.kubernetes.io/zone" in keys


def test_cli_generate_json():
    result = runner.invoke(
        app,
        ["generate", "--preset", "performance", "--region", "eu-west-1", "--output", "json"],
    )
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert set(data) == {"provisioner", "nodeTemplate", "summary"}
    assert data["summary"]["region"] == "eu-west-1"
    assert data["nodeTemplate"]["metadata"]["name"] == "performance-nodepool"


def test_cli_generate_strict_unknown_preset_fails():
    result = runner.invoke(
        app,
        ["generate", "--preset", "turbo", "--region", "us-east-1", "--strict-presets"],
    )
    assert result.exit_code == 1


def test_cli_generate_bad_feature_fails():
    result = runner.invoke(
        app,
        ["generate", "--preset", "balanced", "--region", "us-east-1", "-f", "consolidation=maybe"],
    )
    assert result.exit_code == 1


def test_cli_cost_json():
    result = runner.invoke(app, ["cost", str(FIXTURES / "node_snapshot.json"), "--output", "json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["current"]["total"] == 1000.0
    assert data["savings"]["amount"] == 0
    assert data["savings"]["percentage"] == 0


def test_cli_recommend_json():
    result = runner.invoke(
        app,
        [
            "recommend",
            "--nodes",
            str(FIXTURES / "nodes.yaml"),
            "--pods",
            str(FIXTURES / "pods.yaml"),
            "--output",
            "json",
        ],
    )
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["consolidation"][0] == "Consider consolidating 2 pods across fewer nodes"
    assert data["estimatedSavings"]["percentage"] == 34.2


def test_cli_pricing_and_presets():
    result = runner.invoke(app, ["pricing", "us-east-1", "t3.medium", "--output", "json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["onDemand"]["price"] == 0.0416

    result = runner.invoke(app, ["presets", "--output", "json"])
    assert result.exit_code == 0, result.output
    assert "balanced" in json.loads(result.stdout)["presets"]


def test_cli_tables_render():
    for args in (
        ["presets"],
        ["simulate"],
        ["nodes", str(FIXTURES / "nodes.yaml")],
        ["pods", str(FIXTURES / "pods.yaml")],
        ["cost", str(FIXTURES / "nodes.yaml")],
    ):
        result = runner.invoke(app, args)
        assert result.exit_code == 0, result.output


def test_cli_unknown_output_format():
    result = runner.invoke(app, ["simulate", "--output", "xml"])
    assert result.exit_code == 2


def test_cli_missing_inventory_file():
    result = runner.invoke(app, ["cost", str(FIXTURES / "missing.yaml")])
    assert result.exit_code == 1


def test_cli_pricing_bad_price_table(tmp_path, monkeypatch):
    cache = tmp_path / "pricing_cache"
    cache.mkdir()
    (cache / "instance_prices.json").write_text("{oops", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["pricing", "us-east-1", "c5.large"])
    assert result.exit_code == 1
    assert not isinstance(result.exception, ValueError)
    assert "Fatal error:" in result.output


def test_cli_rejects_unknown_log_level():
    result = runner.invoke(app, ["--log-level", "loud", "simulate"])
    assert result.exit_code == 2
    result = runner.invoke(app, ["--log-level", "debug", "simulate", "--output", "json"])
    assert result.exit_code == 0, result.output
