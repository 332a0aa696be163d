from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple


logger = logging.getLogger(__name__)


class Preset(str, Enum):
    COST_OPTIMIZED = "cost-optimized"
    PERFORMANCE = "performance"
    BALANCED = "balanced"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Preset":
        """Resolve a preset identifier, falling back to ``balanced``.

        The fallback does not tell an omitted preset apart from a misspelled
        one; use :func:`is_known` when that distinction matters.
        """
        try:
            return cls(value)
        except ValueError:
            logger.debug("Unrecognized preset %r, using %s", value, cls.BALANCED.value)
            return cls.BALANCED


class CapacityType(str, Enum):
    SPOT = "spot"
    ON_DEMAND = "on-demand"


@dataclass(frozen=True, slots=True)
class PresetDefinition:
    preset: Preset
    instance_types: Tuple[str, ...]
    capacity_types: Tuple[CapacityType, ...]  # in order of preference
    cpu_limit: str
    memory_limit: str
    display_name: str
    description: str
    features: Tuple[str, ...]
    instance_families: Tuple[str, ...]
    spot_ratio: int  # percent of capacity expected on spot


_CATALOG: Mapping[Preset, PresetDefinition] = MappingProxyType(
    {
        Preset.COST_OPTIMIZED: PresetDefinition(
            preset=Preset.COST_OPTIMIZED,
            instance_types=(
                "t3.medium", "t3.large", "t3.xlarge",
                "m5.large", "m5.xlarge", "m5.2xlarge",
                "c5.large", "c5.xlarge", "c5.2xlarge",
                "c6g.large", "c6g.xlarge",  # Graviton
            ),
            capacity_types=(CapacityType.SPOT, CapacityType.ON_DEMAND),
            cpu_limit="1000",
            memory_limit="1900Gi",
            display_name="Cost Optimized",
            description="Maximize savings with Spot instances and Graviton processors",
            features=(
                "Prefer Spot instances (up to 90% savings)",
                "Graviton instances (ARM64) for better price/performance",
                "Smaller instance sizes for cost efficiency",
                "Consolidation enabled",
            ),
            instance_families=("t3", "m5", "c5", "c6g"),
            spot_ratio=90,
        ),
        Preset.PERFORMANCE: PresetDefinition(
            preset=Preset.PERFORMANCE,
            instance_types=(
                "c5.xlarge", "c5.2xlarge", "c5.4xlarge",
                "c6i.xlarge", "c6i.2xlarge", "c6i.4xlarge",
                "m5.2xlarge", "m5.4xlarge", "m5.8xlarge",
            ),
            capacity_types=(CapacityType.ON_DEMAND,),
            cpu_limit="2000",
            memory_limit="3800Gi",
            display_name="Performance",
            description="Optimize for compute-intensive workloads",
            features=(
                "On-demand instances for stability",
                "Larger instance sizes",
                "Latest generation processors (C6i, M6i)",
                "Consolidation disabled for consistent performance",
            ),
            instance_families=("c5", "c6i", "m5", "m6i"),
            spot_ratio=0,
        ),
        Preset.BALANCED: PresetDefinition(
            preset=Preset.BALANCED,
            instance_types=(
                "m5.large", "m5.xlarge", "m5.2xlarge",
                "c5.large", "c5.xlarge", "c5.2xlarge",
                "t3.medium", "t3.large", "t3.xlarge",
            ),
            capacity_types=(CapacityType.SPOT, CapacityType.ON_DEMAND),
            cpu_limit="1500",
            memory_limit="2850Gi",
            display_name="Balanced",
            description="Balance cost and performance with mixed instances",
            features=(
                "Mix of Spot and On-demand instances",
                "Moderate instance sizing",
                "General-purpose instance families",
                "Flexible consolidation policies",
            ),
            instance_families=("t3", "m5", "c5"),
            spot_ratio=50,
        ),
    }
)

SUPPORTED_REGIONS: Tuple[str, ...] = (
    "us-east-1", "us-east-2", "us-west-1", "us-west-2",
    "eu-west-1", "eu-west-2", "eu-central-1",
    "ap-southeast-1", "ap-southeast-2", "ap-northeast-1",
)

# feature name -> (description, default)
FEATURE_TOGGLES: Mapping[str, Tuple[str, bool]] = MappingProxyType(
    {
        "consolidation": (
            "Enable node consolidation for better resource utilization",
            False,
        ),
        "spotInterruptionHandling": (
            "Handle spot instance interruptions gracefully",
            True,
        ),
        "nodeTerminationHandler": (
            "Automatic graceful termination handling",
            True,
        ),
    }
)


def is_known(preset: Optional[str]) -> bool:
    return preset in {p.value for p in Preset}


def lookup(preset: Preset | str | None) -> PresetDefinition:
    """Return the definition for ``preset``; unknown identifiers get ``balanced``."""
    if not isinstance(preset, Preset):
        preset = Preset.parse(preset)
    return _CATALOG[preset]


def list_presets() -> List[PresetDefinition]:
    return [_CATALOG[p] for p in Preset]


def catalog_document() -> Dict[str, object]:
    """Preset listing in the shape served to the configuration wizard."""
    return {
        "presets": {
            d.preset.value: {
                "name": d.display_name,
                "description": d.description,
                "features": list(d.features),
                "instanceFamilies": list(d.instance_families),
                "spotRatio": d.spot_ratio,
            }
            for d in list_presets()
        },
        "regions": list(SUPPORTED_REGIONS),
        "features": {
            name: {"description": description, "default": default}
            for name, (description, default) in FEATURE_TOGGLES.items()
        },
    }
