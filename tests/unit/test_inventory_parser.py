from __future__ import annotations

from pathlib import Path

import pytest

from karp_ops_wiz.core.exceptions import ParseError
from karp_ops_wiz.parsers.inventory_parser import (
    is_spot_node,
    load_node_inventory,
    load_pod_inventory,
)


FIXTURES = Path(__file__).resolve().parents[1] / "fixtures"


def test_node_listing():
    inv = load_node_inventory([str(FIXTURES / "nodes.yaml")])
    assert inv.total_nodes == 3
    assert inv.spot_nodes == 2
    assert inv.on_demand_nodes == 1
    assert inv.total_cpu == 8
    assert inv.total_memory == 16093056 * 1024 + 4 * 1024 ** 3 + 8 * 1024 ** 3

    first, second, third = inv.nodes
    assert first.instance_type == "m5.xlarge"
    assert first.zone == "us-east-1a"
    assert first.state == "Ready"
    assert first.cpu_cores == 4
    assert first.memory_gb == 15
    assert second.is_spot and second.state == "NotReady"
    assert third.instance_type == "unknown"
    assert third.region == "unknown"
    assert third.is_spot
    assert third.cpu_cores == 2


def test_pod_listing():
    inv = load_pod_inventory([str(FIXTURES / "pods.yaml")])
    assert inv.total_pods == 2
    web, batch = inv.pods
    assert web.namespace == "shop"
    assert web.cpu_request == 350
    assert web.memory_request == 576 * 1024 ** 2
    assert web.status == "Running"
    assert batch.namespace == "default"
    assert batch.node_name == ""
    assert batch.cpu_request == 0
    assert inv.total_cpu == 350


def test_precomputed_snapshot_merges_with_listing():
    inv = load_node_inventory(
        [str(FIXTURES / "node_snapshot.json"), str(FIXTURES / "nodes.yaml")]
    )
    assert inv.total_nodes == 13
    assert inv.on_demand_nodes == 11
    assert inv.spot_nodes == 2
    assert len(inv.nodes) == 3


@pytest.mark.parametrize(
    "labels,expected",
    [
        ({"karpenter.sh/capacity-type": "spot"}, True),
        ({"node.kubernetes.io/instance-type-price-type": "spot"}, True),
        ({"spot.amazonaws.com/cn": "spot"}, True),
        ({"karpenter.sh/capacity-type": "on-demand"}, False),
        ({}, False),
    ],
)
def test_spot_detection(labels, expected):
    assert is_spot_node(labels) is expected


def test_missing_file_raises(tmp_path):
    with pytest.raises(ParseError):
        load_node_inventory([str(tmp_path / "nope.yaml")])


def test_invalid_yaml_raises(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("kind: List\nitems: [\n", encoding="utf-8")
    with pytest.raises(ParseError):
        load_pod_inventory([str(bad)])


def test_invalid_snapshot_raises(tmp_path):
    bad = tmp_path / "snap.yaml"
    bad.write_text("totalNodes: -1\n", encoding="utf-8")
    with pytest.raises(ParseError):
        load_node_inventory([str(bad)])
