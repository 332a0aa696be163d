from __future__ import annotations

import math

from karp_ops_wiz.calculators.cost import estimate_cost
from karp_ops_wiz.models.resources import NodeInventory


def test_all_on_demand_has_no_savings():
    res = estimate_cost(NodeInventory(total_nodes=10, on_demand_nodes=10, spot_nodes=0))
    assert math.isclose(res.current.total, 1000.0)
    assert res.savings.amount == 0
    assert res.savings.percentage == 0
    assert res.recommendations[0] == "Consider migrating 10 workloads to Spot instances"


def test_zero_on_demand_does_not_divide_by_zero():
    res = estimate_cost(NodeInventory(total_nodes=4, on_demand_nodes=0, spot_nodes=4))
    assert res.current.total == 0
    assert res.savings.percentage == 0
    assert math.isclose(res.savings.amount, 280.0)


def test_mixed_fleet():
    res = estimate_cost(NodeInventory(total_nodes=6, on_demand_nodes=4, spot_nodes=2))
    assert math.isclose(res.current.total, 400.0)
    assert math.isclose(res.potential.total, 260.0)
    assert math.isclose(res.potential.ondemand, 120.0)
    assert math.isclose(res.potential.spot, 280.0)
    assert math.isclose(res.savings.amount, 140.0)
    assert math.isclose(res.savings.percentage, 35.0)
    assert len(res.recommendations) == 3


def test_custom_unit_costs():
    res = estimate_cost(
        NodeInventory(on_demand_nodes=2, spot_nodes=1), unit_cost=50.0, spot_unit_savings=10.0
    )
    assert math.isclose(res.current.total, 100.0)
    assert math.isclose(res.savings.percentage, 10.0)
