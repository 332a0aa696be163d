from __future__ import annotations

import json
from typing import Any, Dict

import yaml
from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from karp_ops_wiz.models.resources import NodeInventory, PodInventory
from karp_ops_wiz.models.results import (
    CostAnalysis,
    PricingQuote,
    RebalanceSimulation,
    RebalancingRecommendations,
    SynthesisResult,
)
from karp_ops_wiz.presets.catalog import list_presets


def render_manifests(result: SynthesisResult) -> str:
    """Provisioner and node template as one multi-document YAML stream."""
    return yaml.safe_dump_all(
        [result.provisioner.to_manifest(), result.node_template.to_manifest()],
        sort_keys=False,
        default_flow_style=False,
    )


def render_json(result: BaseModel | Dict[str, Any]) -> str:
    data = result.model_dump(by_alias=True, exclude_none=True) if isinstance(result, BaseModel) else result
    return json.dumps(data, indent=2, sort_keys=True)


def render_presets_table() -> None:
    console = Console()
    table = Table(title="Presets")
    table.add_column("Preset")
    table.add_column("Name")
    table.add_column("Families")
    table.add_column("Spot %", justify="right")
    table.add_column("CPU limit", justify="right")
    table.add_column("Memory limit", justify="right")
    for d in list_presets():
        table.add_row(
            d.preset.value,
            d.display_name,
            ", ".join(d.instance_families),
            str(d.spot_ratio),
            d.cpu_limit,
            d.memory_limit,
        )
    console.print(table)


def render_summary(result: SynthesisResult) -> None:
    console = Console(stderr=True)
    console.print(f"[bold]Preset:[/bold] {result.summary.preset}  [bold]Region:[/bold] {result.summary.region}")
    for line in result.summary.instructions:
        console.print(line)


def render_cost_table(analysis: CostAnalysis) -> None:
    console = Console()

    table = Table(title="Cluster Cost")
    table.add_column("Scenario")
    table.add_column("Total ($)", justify="right")
    table.add_column("On-Demand ($)", justify="right")
    table.add_column("Spot ($)", justify="right")
    for label, b in (("Current", analysis.current), ("Potential", analysis.potential)):
        table.add_row(label, f"{b.total:.2f}", f"{b.ondemand:.2f}", f"{b.spot:.2f}")
    console.print(table)

    console.print(
        f"Savings: ${analysis.savings.amount:.2f} ({analysis.savings.percentage:.1f}%)"
    )
    for rec in analysis.recommendations:
        console.print(f"- {rec}")


def render_recommendations_table(recs: RebalancingRecommendations) -> None:
    console = Console()
    table = Table(title="Rebalancing Recommendations")
    table.add_column("Category")
    table.add_column("Recommendation")
    for category, items in (
        ("Instance type optimization", recs.instance_type_optimization),
        ("Spot instance strategy", recs.spot_instance_strategy),
        ("Consolidation", recs.consolidation),
    ):
        for item in items:
            table.add_row(category, item)
    console.print(table)
    console.print(
        f"Estimated savings: {recs.estimated_savings.monthly}/month "
        f"({recs.estimated_savings.percentage:.1f}%)"
    )


def render_simulation_table(sim: RebalanceSimulation) -> None:
    console = Console()
    table = Table(title=f"Rebalancing Simulation (est. {sim.estimated_time})")
    table.add_column("#", justify="right")
    table.add_column("Action")
    for idx, action in enumerate(sim.actions, start=1):
        table.add_row(str(idx), action)
    console.print(table)
    console.print(f"Savings: {sim.savings.amount} ({sim.savings.percentage:.1f}%)")


def render_pricing_table(quote: PricingQuote) -> None:
    console = Console()
    table = Table(title=f"Pricing: {quote.instance_type} in {quote.region}")
    table.add_column("Option")
    table.add_column("Hourly ($)", justify="right")
    table.add_column("Monthly ($)", justify="right")
    table.add_row("On-Demand", f"{quote.on_demand.price:.4f}", f"{quote.monthly.on_demand:.2f}")
    table.add_row("Spot", f"{quote.spot.price:.4f}", f"{quote.monthly.spot:.2f}")
    table.add_row("Savings", "", f"{quote.monthly.savings:.2f}")
    console.print(table)


def render_nodes_table(inventory: NodeInventory) -> None:
    console = Console()
    table = Table(
        title=f"Nodes ({inventory.total_nodes}: {inventory.spot_nodes} spot, {inventory.on_demand_nodes} on-demand)"
    )
    table.add_column("Name")
    table.add_column("Instance")
    table.add_column("Zone")
    table.add_column("Capacity")
    table.add_column("State")
    table.add_column("CPU", justify="right")
    table.add_column("Mem (GiB)", justify="right")
    for n in inventory.nodes:
        table.add_row(
            n.name,
            n.instance_type,
            n.zone,
            "spot" if n.is_spot else "on-demand",
            n.state,
            str(n.cpu_cores),
            str(n.memory_gb),
        )
    console.print(table)


def render_pods_table(inventory: PodInventory) -> None:
    console = Console()
    table = Table(title=f"Pods ({inventory.total_pods})")
    table.add_column("Name")
    table.add_column("Namespace")
    table.add_column("Node")
    table.add_column("Phase")
    table.add_column("CPU (m)", justify="right")
    table.add_column("Mem (MiB)", justify="right")
    for p in inventory.pods:
        table.add_row(
            p.name,
            p.namespace,
            p.node_name,
            p.status,
            str(p.cpu_request),
            f"{p.memory_request / 1024 ** 2:.0f}",
        )
    console.print(table)
