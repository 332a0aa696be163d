from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from karp_ops_wiz.calculators.cost import (
    DEFAULT_SPOT_UNIT_SAVINGS,
    DEFAULT_UNIT_COST,
    estimate_cost as _estimate_cost,
)
from karp_ops_wiz.calculators.rebalance import advise as _advise, simulate_rebalancing
from karp_ops_wiz.core.exceptions import InvalidRequest
from karp_ops_wiz.models.descriptors import NodeTemplateDescriptor, ProvisioningPolicy
from karp_ops_wiz.models.resources import ConfigRequest, NodeInventory, PodInventory
from karp_ops_wiz.models.results import (
    CostAnalysis,
    RebalanceSimulation,
    RebalancingRecommendations,
    SynthesisResult,
)
from karp_ops_wiz.presets.catalog import Preset, is_known
from karp_ops_wiz.synth import descriptors


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WizardConfig:
    unit_cost: float = DEFAULT_UNIT_COST
    spot_unit_savings: float = DEFAULT_SPOT_UNIT_SAVINGS
    # Reject unknown presets instead of falling back to "balanced".
    strict_presets: bool = False


class WizardService:
    """Entry point used by outer surfaces (CLI, HTTP) to reach the core."""

    def __init__(self, cfg: WizardConfig | None = None) -> None:
        self.cfg = cfg or WizardConfig()

    def _check_preset(self, req: ConfigRequest) -> None:
        preset = req.preset.strip()
        # blank presets are rejected by the synthesizer itself
        if not preset or is_known(preset):
            return
        if self.cfg.strict_presets:
            known = ", ".join(p.value for p in Preset)
            raise InvalidRequest(f"Unknown preset '{req.preset}'. Expected one of: {known}")
        logger.warning(
            "Unknown preset '%s'; using '%s' defaults", req.preset, Preset.BALANCED.value
        )

    def synthesize(
        self, req: ConfigRequest
    ) -> Tuple[ProvisioningPolicy, NodeTemplateDescriptor]:
        self._check_preset(req)
        return descriptors.synthesize(req)

    def generate_config(self, req: ConfigRequest) -> SynthesisResult:
        self._check_preset(req)
        return descriptors.generate_config(req)

    def estimate_cost(self, inventory: NodeInventory) -> CostAnalysis:
        return _estimate_cost(
            inventory,
            unit_cost=self.cfg.unit_cost,
            spot_unit_savings=self.cfg.spot_unit_savings,
        )

    def advise(self, nodes: NodeInventory, pods: PodInventory) -> RebalancingRecommendations:
        return _advise(nodes, pods)

    def simulate(self) -> RebalanceSimulation:
        return simulate_rebalancing()
