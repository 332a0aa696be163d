from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from karp_ops_wiz.models.descriptors import NodeTemplateDescriptor, ProvisioningPolicy


class _Result(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CostBreakdown(_Result):
    total: float
    ondemand: float
    spot: float


class Savings(_Result):
    amount: float
    percentage: float


class CostAnalysis(_Result):
    current: CostBreakdown
    potential: CostBreakdown
    savings: Savings
    recommendations: List[str]


class EstimatedSavings(_Result):
    monthly: str
    percentage: float


class RebalancingRecommendations(_Result):
    instance_type_optimization: List[str]
    spot_instance_strategy: List[str]
    consolidation: List[str]
    estimated_savings: EstimatedSavings


class SimulatedSavings(_Result):
    amount: str
    percentage: float


class RebalanceSimulation(_Result):
    savings: SimulatedSavings
    actions: List[str]
    estimated_time: str


class PriceQuote(_Result):
    price: float
    currency: str = "USD"
    unit: str = "per hour"


class SpotPriceQuote(PriceQuote):
    discount: str = "70%"
    interruption_risk: str = "Low-Medium"


class MonthlyPricing(_Result):
    on_demand: float
    spot: float
    savings: float


class PricingQuote(_Result):
    region: str
    instance_type: str
    on_demand: PriceQuote
    spot: SpotPriceQuote
    monthly: MonthlyPricing


class ConfigSummary(_Result):
    preset: str
    region: str
    features: Dict[str, bool] = Field(default_factory=dict)
    instructions: List[str]


class SynthesisResult(_Result):
    provisioner: ProvisioningPolicy
    node_template: NodeTemplateDescriptor
    summary: ConfigSummary
