from __future__ import annotations

from karp_ops_wiz.synth.requirements import (
    ARCH_KEY,
    CAPACITY_TYPE_KEY,
    INSTANCE_TYPE_KEY,
    REGION_KEY,
    ZONE_KEY,
    compose_node_template_requirements,
    compose_provisioning_requirements,
)


def _by_key(reqs):
    return {r.key: r for r in reqs}


def test_order_and_operator():
    reqs = compose_provisioning_requirements("balanced", "us-east-1", "us-east-1a")
    assert [r.key for r in reqs] == [
        ARCH_KEY,
        ZONE_KEY,
        REGION_KEY,
        CAPACITY_TYPE_KEY,
        INSTANCE_TYPE_KEY,
    ]
    assert all(r.operator == "In" for r in reqs)
    assert all(r.values for r in reqs)
    assert reqs[0].values == ["amd64", "arm64"]


def test_performance_capacity_is_on_demand_only():
    reqs = _by_key(compose_provisioning_requirements("performance", "us-east-1", "us-east-1a"))
    assert reqs[CAPACITY_TYPE_KEY].values == ["on-demand"]


def test_cost_optimized_instance_types():
    reqs = _by_key(compose_provisioning_requirements("cost-optimized", "us-east-1", "us-east-1a"))
    values = reqs[INSTANCE_TYPE_KEY].values
    assert "c6g.large" in values
    assert "t3.medium" in values
    assert "c6i.xlarge" not in values
    assert reqs[CAPACITY_TYPE_KEY].values == ["spot", "on-demand"]


def test_blank_zone_is_omitted():
    for zone in (None, "", "   "):
        keys = [r.key for r in compose_provisioning_requirements("balanced", "eu-west-1", zone)]
        assert ZONE_KEY not in keys
        assert len(keys) == len(set(keys))


def test_unknown_preset_uses_balanced_instance_types():
    unknown = _by_key(compose_provisioning_requirements("turbo", "us-east-1"))
    balanced = _by_key(compose_provisioning_requirements("balanced", "us-east-1"))
    assert unknown[INSTANCE_TYPE_KEY].values == balanced[INSTANCE_TYPE_KEY].values


def test_node_template_requirements_are_fixed():
    reqs = compose_node_template_requirements()
    assert [r.key for r in reqs] == [ARCH_KEY, CAPACITY_TYPE_KEY]
    assert reqs[1].values == ["spot", "on-demand"]
