# arb_monitor/price_source.py
"""
Simulated DEX price source.

Stands in for a live router quote (getAmountsOut): every venue gets the
baseline price plus independent uniform noise. NO network call is made.
"""

import random
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional

from arb_monitor.config import MonitorConfig

PRICE_QUANTUM = Decimal("0.000001")

# venue name -> quote-currency price of one base token
PriceFetcher = Callable[[str], Decimal]


class PriceFetchError(Exception):
    """A venue could not be priced this cycle (live sources only)."""


@dataclass(frozen=True)
class PriceQuote:
    venue: str
    price: Decimal


class SimulatedPriceSource:
    def __init__(
        self,
        baseline_price: Decimal,
        noise_range: Decimal,
        rng: Optional[random.Random] = None,
    ):
        self.baseline_price = Decimal(baseline_price)
        self.noise_range = Decimal(noise_range)
        self.rng = rng or random.Random()

    @classmethod
    def from_config(cls, config: MonitorConfig, rng: Optional[random.Random] = None) -> "SimulatedPriceSource":
        return cls(
            baseline_price=config.simulation.baseline_price,
            noise_range=config.simulation.noise_range,
            rng=rng,
        )

    def fetch_price(self, venue: str) -> Decimal:
        """
        Synthetic price for `venue`, within [baseline, baseline + noise_range].
        Each call draws fresh noise, so two venues are uncorrelated.
        """
        noise = Decimal(repr(self.rng.random())) * self.noise_range
        return (self.baseline_price + noise).quantize(PRICE_QUANTUM)


def fetch_quote(fetch_price: PriceFetcher, venue: str) -> PriceQuote:
    return PriceQuote(venue=venue, price=Decimal(fetch_price(venue)))
