from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


logger = logging.getLogger(__name__)

TTL_AFTER_EMPTY_KEY = "ttlSecondsAfterEmpty"


class _Snapshot(BaseModel):
    # Snapshots arrive as camelCase JSON/YAML; both spellings are accepted.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Customizations(BaseModel):
    """Typed view over the open ``customizations`` mapping of a request.

    Only ``ttlSecondsAfterEmpty`` is recognized. Unknown keys and values that
    are not convertible to a non-negative integer are ignored, not rejected.
    """

    model_config = ConfigDict(populate_by_name=True)

    ttl_seconds_after_empty: Optional[int] = Field(
        default=None, ge=0, alias=TTL_AFTER_EMPTY_KEY
    )

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "Customizations":
        if not raw:
            return cls()
        unknown = sorted(k for k in raw if k != TTL_AFTER_EMPTY_KEY)
        if unknown:
            logger.debug("Ignoring unrecognized customizations: %s", ", ".join(unknown))
        ttl = _as_seconds(raw.get(TTL_AFTER_EMPTY_KEY))
        if ttl is None and raw.get(TTL_AFTER_EMPTY_KEY) is not None:
            logger.debug(
                "Ignoring %s=%r: not a non-negative number",
                TTL_AFTER_EMPTY_KEY,
                raw.get(TTL_AFTER_EMPTY_KEY),
            )
        return cls(ttl_seconds_after_empty=ttl)


def _as_seconds(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number) or number < 0:
        return None
    # truncation toward zero, same as an int() cast of a JSON number
    return int(number)


class ConfigRequest(BaseModel):
    preset: str
    region: str
    zone: Optional[str] = None
    features: Dict[str, bool] = Field(default_factory=dict)
    customizations: Customizations = Field(default_factory=Customizations)

    @field_validator("customizations", mode="before")
    @classmethod
    def _coerce_customizations(cls, value: Any) -> Any:
        if value is None:
            return Customizations()
        if isinstance(value, Customizations):
            return value
        if isinstance(value, Mapping):
            return Customizations.from_mapping(value)
        return value

    def feature(self, name: str) -> bool:
        return self.features.get(name) is True


class NodeDetails(_Snapshot):
    name: str
    instance_type: str = "unknown"
    region: str = "unknown"
    zone: str = "unknown"
    is_spot: bool = False
    state: str = ""
    cpu_cores: int = Field(default=0, ge=0)
    memory_gb: int = Field(default=0, ge=0)


class NodeInventory(_Snapshot):
    total_nodes: int = Field(default=0, ge=0)
    spot_nodes: int = Field(default=0, ge=0)
    on_demand_nodes: int = Field(default=0, ge=0)
    total_cpu: int = Field(default=0, ge=0)  # cores
    total_memory: int = Field(default=0, ge=0)  # bytes
    nodes: List[NodeDetails] = Field(default_factory=list)


class PodDetails(_Snapshot):
    name: str
    namespace: str = "default"
    node_name: str = ""
    status: str = ""
    cpu_request: int = Field(default=0, ge=0)  # milli-cores
    memory_request: int = Field(default=0, ge=0)  # bytes


class PodInventory(_Snapshot):
    total_pods: int = Field(default=0, ge=0)
    total_cpu: int = Field(default=0, ge=0)  # milli-cores
    total_memory: int = Field(default=0, ge=0)  # bytes
    pods: List[PodDetails] = Field(default_factory=list)
