from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

from karp_ops_wiz.core.exceptions import PricingError
from karp_ops_wiz.models.results import (
    MonthlyPricing,
    PricingQuote,
    PriceQuote,
    SpotPriceQuote,
)


logger = logging.getLogger(__name__)

SPOT_PRICE_FACTOR = 0.3  # ~70% discount for spot
HOURS_PER_MONTH = 24 * 30

# region -> family -> size -> on-demand USD/hour
_DEFAULT_PRICES: Dict[str, Dict[str, Dict[str, float]]] = {
    "us-east-1": {
        "c5": {"large": 0.096, "xlarge": 0.192, "2xlarge": 0.384},
        "m5": {"large": 0.096, "xlarge": 0.192, "2xlarge": 0.384},
        "t3": {"medium": 0.0416, "large": 0.0832, "xlarge": 0.1664},
        "c6g": {"large": 0.0768, "xlarge": 0.1536, "2xlarge": 0.3072},  # Graviton
    },
}


def split_instance_type(instance_type: str) -> Tuple[str, str]:
    """``"c5.large"`` -> ``("c5", "large")``; a missing size is returned as ``""``."""
    family, _, size = instance_type.partition(".")
    return family, size


def get_on_demand_price(
    *, region: str, instance_type: str, cache_path: Optional[Path] = None
) -> float:
    """Static on-demand hourly price; 0.0 when the table has no entry."""
    family, size = split_instance_type(instance_type)
    price = _load_prices(cache_path).get(region, {}).get(family, {}).get(size)
    if price is None:
        logger.debug("No static price for %s in %s", instance_type, region)
        return 0.0
    return float(price)


def get_pricing(
    region: str, instance_type: str, cache_path: Optional[Path] = None
) -> PricingQuote:
    on_demand = get_on_demand_price(
        region=region, instance_type=instance_type, cache_path=cache_path
    )
    spot = on_demand * SPOT_PRICE_FACTOR
    return PricingQuote(
        region=region,
        instance_type=instance_type,
        on_demand=PriceQuote(price=on_demand),
        spot=SpotPriceQuote(price=spot),
        monthly=MonthlyPricing(
            on_demand=on_demand * HOURS_PER_MONTH,
            spot=spot * HOURS_PER_MONTH,
            savings=(on_demand - spot) * HOURS_PER_MONTH,
        ),
    )


def _load_prices(cache_path: Optional[Path] = None) -> Dict[str, Dict[str, Dict[str, float]]]:
    # Prefer an explicit or repo-root price table
    path = cache_path or Path.cwd() / "pricing_cache" / "instance_prices.json"
    if path.exists():
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PricingError(f"Cannot load price table {path}: {e}") from e
    # Fall back to the built-in table
    return _DEFAULT_PRICES
