from __future__ import annotations

from typing import List, Optional

from karp_ops_wiz.models.descriptors import Requirement
from karp_ops_wiz.presets.catalog import CapacityType, Preset, lookup


ARCH_KEY = "kubernetes.io/arch"
ZONE_KEY = "topology.kubernetes.io/zone"
REGION_KEY = "topology.kubernetes.io/region"
CAPACITY_TYPE_KEY = "karpenter.sh/capacity-type"
INSTANCE_TYPE_KEY = "node.kubernetes.io/instance-type"

# Architecture filtering is left to the instance-type list.
ARCHITECTURES = ("amd64", "arm64")


def _requirement(key: str, values) -> Requirement:
    return Requirement(key=key, operator="In", values=list(values))


def compose_provisioning_requirements(
    preset: Preset | str, region: str, zone: Optional[str] = None
) -> List[Requirement]:
    """Ordered scheduling requirements for a provisioning policy.

    Order: architecture, zone, region, capacity type, instance type. The zone
    requirement is left out when ``zone`` is blank.
    """
    definition = lookup(preset)

    requirements = [_requirement(ARCH_KEY, ARCHITECTURES)]
    if zone and zone.strip():
        requirements.append(_requirement(ZONE_KEY, [zone.strip()]))
    requirements.append(_requirement(REGION_KEY, [region]))
    requirements.append(
        _requirement(CAPACITY_TYPE_KEY, [c.value for c in definition.capacity_types])
    )
    requirements.append(_requirement(INSTANCE_TYPE_KEY, definition.instance_types))
    return requirements


def compose_node_template_requirements() -> List[Requirement]:
    # Fixed: the template controls launch mechanics, not instance selection.
    return [
        _requirement(ARCH_KEY, ARCHITECTURES),
        _requirement(CAPACITY_TYPE_KEY, [CapacityType.SPOT.value, CapacityType.ON_DEMAND.value]),
    ]
