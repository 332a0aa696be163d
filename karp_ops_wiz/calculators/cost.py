from __future__ import annotations

import logging

from karp_ops_wiz.models.resources import NodeInventory
from karp_ops_wiz.models.results import CostAnalysis, CostBreakdown, Savings


logger = logging.getLogger(__name__)

# Placeholder per-node-hour figures; this estimator is a heuristic, not pricing.
DEFAULT_UNIT_COST = 100.0
DEFAULT_SPOT_UNIT_SAVINGS = 70.0  # ~70% discount on spot

# Assumed capacity split once spot is adopted.
POTENTIAL_ONDEMAND_SHARE = 0.3
POTENTIAL_SPOT_SHARE = 0.7


def estimate_cost(
    inventory: NodeInventory,
    unit_cost: float = DEFAULT_UNIT_COST,
    spot_unit_savings: float = DEFAULT_SPOT_UNIT_SAVINGS,
) -> CostAnalysis:
    current_cost = inventory.on_demand_nodes * float(unit_cost)
    spot_savings = inventory.spot_nodes * float(spot_unit_savings)
    potential_cost = current_cost - spot_savings
    savings = current_cost - potential_cost
    percentage = (savings / current_cost) * 100 if current_cost != 0 else 0.0

    logger.debug(
        "Cost estimate: %d on-demand, %d spot nodes -> current=%.2f potential=%.2f",
        inventory.on_demand_nodes,
        inventory.spot_nodes,
        current_cost,
        potential_cost,
    )

    return CostAnalysis(
        current=CostBreakdown(total=current_cost, ondemand=current_cost, spot=0.0),
        potential=CostBreakdown(
            total=potential_cost,
            ondemand=current_cost * POTENTIAL_ONDEMAND_SHARE,
            spot=current_cost * POTENTIAL_SPOT_SHARE,
        ),
        savings=Savings(amount=savings, percentage=percentage),
        recommendations=[
            f"Consider migrating {inventory.on_demand_nodes} workloads to Spot instances",
            "Enable Karpenter consolidation for better resource utilization",
            "Review instance sizing based on actual resource requirements",
        ],
    )
