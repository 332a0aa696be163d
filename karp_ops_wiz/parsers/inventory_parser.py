from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

import yaml
from pydantic import ValidationError

from karp_ops_wiz.core.exceptions import ParseError
from karp_ops_wiz.models.resources import (
    NodeDetails,
    NodeInventory,
    PodDetails,
    PodInventory,
)
from karp_ops_wiz.utils.units import bytes_to_gib, parse_cpu_milli, parse_mem_bytes


logger = logging.getLogger(__name__)

INSTANCE_TYPE_LABEL = "node.kubernetes.io/instance-type"
REGION_LABEL = "topology.kubernetes.io/region"
ZONE_LABEL = "topology.kubernetes.io/zone"

# Any of these set to "spot" marks the node as spot capacity.
SPOT_LABELS = (
    "karpenter.sh/capacity-type",
    "node.kubernetes.io/instance-type-price-type",
    "spot.amazonaws.com/cn",
)

UNKNOWN = "unknown"


def _ensure_list(x: Optional[Iterable]) -> List:
    if not x:
        return []
    return list(x)


def _load_documents(paths: Sequence[str]) -> Iterator[Dict]:
    for p in paths:
        path = Path(p)
        if not path.exists():
            raise ParseError(f"File not found: {path}")
        try:
            with path.open("r", encoding="utf-8") as f:
                docs = list(yaml.safe_load_all(f))
        except yaml.YAMLError as e:
            raise ParseError(f"YAML parse error in {path}: {e}") from e
        for doc in docs:
            if not doc or not isinstance(doc, dict):
                continue
            yield doc


def _expand(doc: Dict) -> Iterator[Dict]:
    """Flatten ``kind: List`` / ``NodeList`` / ``PodList`` documents."""
    if str(doc.get("kind", "")).endswith("List") and "items" in doc:
        for item in _ensure_list(doc.get("items")):
            if isinstance(item, dict):
                yield item
        return
    yield doc


def load_node_inventory(paths: Sequence[str]) -> NodeInventory:
    """Build a node inventory from ``kubectl get nodes -o yaml|json`` dumps.

    Pre-computed snapshots (documents carrying ``nodes``/``totalNodes``) are
    accepted too and merged with any Node objects found.
    """
    details: List[NodeDetails] = []
    total_cpu = 0
    total_memory = 0
    snapshots: List[NodeInventory] = []

    for doc in _load_documents(paths):
        if "kind" not in doc and ("nodes" in doc or "totalNodes" in doc):
            snapshots.append(_validate_snapshot(NodeInventory, doc))
            continue
        for item in _expand(doc):
            if item.get("kind") != "Node":
                continue
            node, cpu_cores, memory_bytes = _parse_node(item)
            details.append(node)
            total_cpu += cpu_cores
            total_memory += memory_bytes

    spot = sum(1 for n in details if n.is_spot)
    inventory = NodeInventory(
        total_nodes=len(details),
        spot_nodes=spot,
        on_demand_nodes=len(details) - spot,
        total_cpu=total_cpu,
        total_memory=total_memory,
        nodes=details,
    )
    for snap in snapshots:
        inventory = NodeInventory(
            total_nodes=inventory.total_nodes + snap.total_nodes,
            spot_nodes=inventory.spot_nodes + snap.spot_nodes,
            on_demand_nodes=inventory.on_demand_nodes + snap.on_demand_nodes,
            total_cpu=inventory.total_cpu + snap.total_cpu,
            total_memory=inventory.total_memory + snap.total_memory,
            nodes=inventory.nodes + snap.nodes,
        )
    logger.info(
        "Loaded %d nodes (%d spot, %d on-demand)",
        inventory.total_nodes,
        inventory.spot_nodes,
        inventory.on_demand_nodes,
    )
    return inventory


def load_pod_inventory(paths: Sequence[str]) -> PodInventory:
    """Build a pod inventory from ``kubectl get pods -o yaml|json`` dumps."""
    details: List[PodDetails] = []
    snapshots: List[PodInventory] = []

    for doc in _load_documents(paths):
        if "kind" not in doc and ("pods" in doc or "totalPods" in doc):
            snapshots.append(_validate_snapshot(PodInventory, doc))
            continue
        for item in _expand(doc):
            if item.get("kind") != "Pod":
                continue
            details.append(_parse_pod(item))

    inventory = PodInventory(
        total_pods=len(details),
        total_cpu=sum(p.cpu_request for p in details),
        total_memory=sum(p.memory_request for p in details),
        pods=details,
    )
    for snap in snapshots:
        inventory = PodInventory(
            total_pods=inventory.total_pods + snap.total_pods,
            total_cpu=inventory.total_cpu + snap.total_cpu,
            total_memory=inventory.total_memory + snap.total_memory,
            pods=inventory.pods + snap.pods,
        )
    logger.info("Loaded %d pods", inventory.total_pods)
    return inventory


def _validate_snapshot(model, doc: Dict):
    try:
        return model.model_validate(doc)
    except ValidationError as e:
        raise ParseError(f"Invalid {model.__name__} snapshot: {e}") from e


def is_spot_node(labels: Dict[str, str]) -> bool:
    return any(labels.get(label) == "spot" for label in SPOT_LABELS)


def _node_state(conditions: List[Dict]) -> str:
    for cond in conditions:
        if cond.get("type") == "Ready":
            return "Ready" if str(cond.get("status")) == "True" else "NotReady"
    if conditions:
        return str(conditions[0].get("type") or UNKNOWN)
    return UNKNOWN


def _parse_node(doc: Dict) -> tuple[NodeDetails, int, int]:
    meta = doc.get("metadata", {}) or {}
    labels = meta.get("labels", {}) or {}
    status = doc.get("status", {}) or {}
    capacity = status.get("capacity", {}) or {}
    name = meta.get("name", "unnamed")

    cpu_cores = 0
    if "cpu" in capacity:
        try:
            cpu_cores = parse_cpu_milli(capacity["cpu"]) // 1000
        except ValueError:
            logger.warning("Node %s: unknown CPU quantity %r, counted as 0", name, capacity["cpu"])
    memory_bytes = 0
    if "memory" in capacity:
        try:
            memory_bytes = parse_mem_bytes(capacity["memory"])
        except ValueError:
            logger.warning(
                "Node %s: unknown memory quantity %r, counted as 0", name, capacity["memory"]
            )

    node = NodeDetails(
        name=name,
        instance_type=labels.get(INSTANCE_TYPE_LABEL, UNKNOWN),
        region=labels.get(REGION_LABEL, UNKNOWN),
        zone=labels.get(ZONE_LABEL, UNKNOWN),
        is_spot=is_spot_node(labels),
        state=_node_state(_ensure_list(status.get("conditions"))),
        cpu_cores=cpu_cores,
        memory_gb=bytes_to_gib(memory_bytes),
    )
    return node, cpu_cores, memory_bytes


def _parse_pod(doc: Dict) -> PodDetails:
    meta = doc.get("metadata", {}) or {}
    spec = doc.get("spec", {}) or {}
    status = doc.get("status", {}) or {}
    name = meta.get("name", "unnamed")

    cpu_milli = 0
    memory_bytes = 0
    # Only regular containers count toward the pod's steady-state requests.
    for c in _ensure_list(spec.get("containers")):
        requests = (c.get("resources", {}) or {}).get("requests", {}) or {}
        if "cpu" in requests:
            try:
                cpu_milli += parse_cpu_milli(requests["cpu"])
            except ValueError:
                logger.warning("Pod %s: unknown CPU quantity %r, skipped", name, requests["cpu"])
        if "memory" in requests:
            try:
                memory_bytes += parse_mem_bytes(requests["memory"])
            except ValueError:
                logger.warning(
                    "Pod %s: unknown memory quantity %r, skipped", name, requests["memory"]
                )

    return PodDetails(
        name=name,
        namespace=meta.get("namespace") or "default",
        node_name=spec.get("nodeName") or "",
        status=status.get("phase") or "",
        cpu_request=cpu_milli,
        memory_request=memory_bytes,
    )
