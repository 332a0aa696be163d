from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

import typer
import yaml

from karp_ops_wiz.calculators.cost import DEFAULT_SPOT_UNIT_SAVINGS, DEFAULT_UNIT_COST
from karp_ops_wiz.core.exceptions import InvalidRequest
from karp_ops_wiz.core.orchestrator import WizardConfig, WizardService
from karp_ops_wiz.models.resources import ConfigRequest, NodeInventory, PodInventory
from karp_ops_wiz.output.render import (
    render_cost_table,
    render_json,
    render_manifests,
    render_nodes_table,
    render_pods_table,
    render_presets_table,
    render_pricing_table,
    render_recommendations_table,
    render_simulation_table,
    render_summary,
)
from karp_ops_wiz.parsers.inventory_parser import load_node_inventory, load_pod_inventory
from karp_ops_wiz.presets.catalog import catalog_document
from karp_ops_wiz.pricing.rates import get_pricing


app = typer.Typer(add_completion=False, help="Karpenter configuration wizard and cost advisor")

ENV_PREFIX = "KARP_OPS_WIZ_"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@app.callback()
def main(
    log_level: LogLevel = typer.Option(
        LogLevel.WARNING,
        "--log-level",
        envvar=f"{ENV_PREFIX}LOG_LEVEL",
        case_sensitive=False,
        help="Logging level",
    ),
):
    logging.basicConfig(
        level=log_level.value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _fail(exc: Exception) -> None:
    typer.echo(f"Fatal error: {exc}", err=True)
    raise typer.Exit(code=1)


def _unknown_format(expected: str) -> None:
    typer.echo(f"Unknown output format. Use {expected}.", err=True)
    raise typer.Exit(code=2)


def parse_features(values: Optional[List[str]]) -> Dict[str, bool]:
    """``["consolidation", "spotInterruptionHandling=false"]`` -> toggle map."""
    features: Dict[str, bool] = {}
    for raw in values or []:
        name, sep, flag = raw.partition("=")
        name = name.strip()
        if not name:
            raise InvalidRequest(f"Invalid feature toggle: '{raw}'")
        if not sep:
            features[name] = True
            continue
        lowered = flag.strip().lower()
        if lowered in {"true", "yes", "on", "1"}:
            features[name] = True
        elif lowered in {"false", "no", "off", "0"}:
            features[name] = False
        else:
            raise InvalidRequest(f"Invalid value for feature '{name}': '{flag}'")
    return features


def parse_customizations(values: Optional[List[str]]) -> Dict[str, object]:
    """``["ttlSecondsAfterEmpty=30"]`` -> mapping with YAML-typed values."""
    custom: Dict[str, object] = {}
    for raw in values or []:
        key, sep, value = raw.partition("=")
        if not sep or not key.strip():
            raise InvalidRequest(f"Invalid customization '{raw}', expected KEY=VALUE")
        try:
            custom[key.strip()] = yaml.safe_load(value)
        except yaml.YAMLError:
            custom[key.strip()] = value
    return custom


@app.command("presets")
def presets(
    output: str = typer.Option("table", "--output", case_sensitive=False, help="Output format: table|json"),
):
    """List presets, supported regions and feature toggles."""
    fmt = output.lower()
    if fmt == "table":
        render_presets_table()
    elif fmt == "json":
        typer.echo(render_json(catalog_document()))
    else:
        _unknown_format("table|json")


@app.command("generate")
def generate(
    preset: str = typer.Option(..., "--preset", help="cost-optimized|performance|balanced"),
    region: str = typer.Option(..., "--region", help="AWS region"),
    zone: Optional[str] = typer.Option(None, "--zone", help="Availability zone (optional)"),
    feature: Optional[List[str]] = typer.Option(
        None, "--feature", "-f", help="Feature toggle, NAME or NAME=true|false (repeatable)"
    ),
    customization: Optional[List[str]] = typer.Option(
        None, "--set", help="Customization KEY=VALUE, e.g. ttlSecondsAfterEmpty=30 (repeatable)"
    ),
    strict_presets: bool = typer.Option(
        False,
        "--strict-presets/--no-strict-presets",
        envvar=f"{ENV_PREFIX}STRICT_PRESETS",
        help="Reject unknown presets instead of falling back to 'balanced'",
    ),
    output: str = typer.Option("yaml", "--output", case_sensitive=False, help="Output format: yaml|json"),
    show_summary: bool = typer.Option(
        False, "--summary/--no-summary", help="Print apply instructions to stderr"
    ),
):
    """Generate a Karpenter NodePool and EC2NodeClass from a preset."""
    fmt = output.lower()
    if fmt not in {"yaml", "json"}:
        _unknown_format("yaml|json")
    try:
        req = ConfigRequest(
            preset=preset,
            region=region,
            zone=zone,
            features=parse_features(feature),
            customizations=parse_customizations(customization),
        )
        result = WizardService(WizardConfig(strict_presets=strict_presets)).generate_config(req)
    except Exception as exc:  # noqa: BLE001
        _fail(exc)

    if fmt == "yaml":
        typer.echo(render_manifests(result), nl=False)
    else:
        typer.echo(render_json(result))
    if show_summary:
        render_summary(result)


@app.command("cost")
def cost(
    files: List[Path] = typer.Argument(..., help="Node listings (kubectl get nodes -o yaml) or snapshots"),
    unit_cost: float = typer.Option(
        DEFAULT_UNIT_COST,
        "--unit-cost",
        envvar=f"{ENV_PREFIX}UNIT_COST",
        help="Assumed cost per on-demand node",
    ),
    spot_unit_savings: float = typer.Option(
        DEFAULT_SPOT_UNIT_SAVINGS,
        "--spot-unit-savings",
        envvar=f"{ENV_PREFIX}SPOT_UNIT_SAVINGS",
        help="Assumed saving per spot node",
    ),
    output: str = typer.Option("table", "--output", case_sensitive=False, help="Output format: table|json"),
):
    """Estimate current and potential cluster cost from a node inventory."""
    try:
        inventory = load_node_inventory([str(p) for p in files])
        service = WizardService(
            WizardConfig(unit_cost=unit_cost, spot_unit_savings=spot_unit_savings)
        )
        analysis = service.estimate_cost(inventory)
    except Exception as exc:  # noqa: BLE001
        _fail(exc)

    fmt = output.lower()
    if fmt == "table":
        render_cost_table(analysis)
    elif fmt == "json":
        typer.echo(render_json(analysis))
    else:
        _unknown_format("table|json")


@app.command("recommend")
def recommend(
    nodes: List[Path] = typer.Option(..., "--nodes", help="Node listing or snapshot (repeatable)"),
    pods: Optional[List[Path]] = typer.Option(None, "--pods", help="Pod listing or snapshot (repeatable)"),
    output: str = typer.Option("table", "--output", case_sensitive=False, help="Output format: table|json"),
):
    """Rebalancing recommendations for the given inventory."""
    try:
        node_inv = load_node_inventory([str(p) for p in nodes])
        pod_inv = load_pod_inventory([str(p) for p in pods]) if pods else PodInventory()
        recs = WizardService().advise(node_inv, pod_inv)
    except Exception as exc:  # noqa: BLE001
        _fail(exc)

    fmt = output.lower()
    if fmt == "table":
        render_recommendations_table(recs)
    elif fmt == "json":
        typer.echo(render_json(recs))
    else:
        _unknown_format("table|json")


@app.command("simulate")
def simulate(
    output: str = typer.Option("table", "--output", case_sensitive=False, help="Output format: table|json"),
):
    """Show the what-if result of a rebalancing run. Nothing is changed."""
    sim = WizardService().simulate()
    fmt = output.lower()
    if fmt == "table":
        render_simulation_table(sim)
    elif fmt == "json":
        typer.echo(render_json(sim))
    else:
        _unknown_format("table|json")


@app.command("pricing")
def pricing(
    region: str = typer.Argument(..., help="AWS region"),
    instance_type: str = typer.Argument(..., help="EC2 instance type, e.g. c6g.large"),
    output: str = typer.Option("table", "--output", case_sensitive=False, help="Output format: table|json"),
):
    """Static on-demand and spot price for an instance type."""
    try:
        quote = get_pricing(region, instance_type)
    except Exception as exc:  # noqa: BLE001
        _fail(exc)
    fmt = output.lower()
    if fmt == "table":
        render_pricing_table(quote)
    elif fmt == "json":
        typer.echo(render_json(quote))
    else:
        _unknown_format("table|json")


@app.command("nodes")
def nodes_cmd(
    files: List[Path] = typer.Argument(..., help="Node listings or snapshots"),
    output: str = typer.Option("table", "--output", case_sensitive=False, help="Output format: table|json"),
):
    """Summarize a node inventory."""
    try:
        inventory: NodeInventory = load_node_inventory([str(p) for p in files])
    except Exception as exc:  # noqa: BLE001
        _fail(exc)
    fmt = output.lower()
    if fmt == "table":
        render_nodes_table(inventory)
    elif fmt == "json":
        typer.echo(render_json(inventory))
    else:
        _unknown_format("table|json")


@app.command("pods")
def pods_cmd(
    files: List[Path] = typer.Argument(..., help="Pod listings or snapshots"),
    output: str = typer.Option("table", "--output", case_sensitive=False, help="Output format: table|json"),
):
    """Summarize a pod inventory."""
    try:
        inventory: PodInventory = load_pod_inventory([str(p) for p in files])
    except Exception as exc:  # noqa: BLE001
        _fail(exc)
    fmt = output.lower()
    if fmt == "table":
        render_pods_table(inventory)
    elif fmt == "json":
        typer.echo(render_json(inventory))
    else:
        _unknown_format("table|json")


if __name__ == "__main__":  # pragma: no cover
    app()
