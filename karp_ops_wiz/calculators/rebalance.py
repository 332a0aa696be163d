from __future__ import annotations

from karp_ops_wiz.models.resources import NodeInventory, PodInventory
from karp_ops_wiz.models.results import (
    EstimatedSavings,
    RebalanceSimulation,
    RebalancingRecommendations,
    SimulatedSavings,
)


def advise(nodes: NodeInventory, pods: PodInventory) -> RebalancingRecommendations:
    """Static rebalancing guidance; only the pod count comes from the inventory.

    No bin-packing or search is done here.
    """
    return RebalancingRecommendations(
        instance_type_optimization=[
            "Consider migrating from m5.large to c6g.large for better price/performance",
            "Switch compute-intensive workloads to Graviton instances",
        ],
        spot_instance_strategy=[
            "Move batch jobs and non-critical services to Spot instances",
            "Implement Spot instance diversification across multiple families",
        ],
        consolidation=[
            f"Consider consolidating {pods.total_pods} pods across fewer nodes",
            "Enable Karpenter consolidation to automatically resize nodes",
        ],
        estimated_savings=EstimatedSavings(monthly="$892.30", percentage=34.2),
    )


def simulate_rebalancing() -> RebalanceSimulation:
    # What-if only; nothing in the cluster is touched.
    return RebalanceSimulation(
        savings=SimulatedSavings(amount="$245.60", percentage=23.4),
        actions=[
            "Migrate 8 pods from t3.large to c6g.large instances",
            "Consolidate 3 underutilized m5.xlarge nodes",
            "Enable Spot mixing for non-critical workloads",
        ],
        estimated_time="2-3 hours",
    )
