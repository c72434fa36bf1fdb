"""
Polygon Arbitrage Monitor
Simulated cross-DEX price watcher for a single pair (WETH/USDC)

Modules:
- pairs: Token registry
- config: config.json / .env loading
- price_source: Simulated DEX prices
- profit_calculator: Spread and net-profit evaluation
- report: Console report
- main: Polling loop and entry point
"""

__version__ = "0.1.0"

from arb_monitor.config import (
    ConfigurationError,
    DexConfig,
    MonitorConfig,
    load_config,
)
from arb_monitor.price_source import (
    PriceFetchError,
    PriceQuote,
    SimulatedPriceSource,
)
from arb_monitor.profit_calculator import (
    OpportunityResult,
    evaluate_opportunity,
)

__all__ = [
    "ConfigurationError",
    "DexConfig",
    "MonitorConfig",
    "load_config",
    "PriceFetchError",
    "PriceQuote",
    "SimulatedPriceSource",
    "OpportunityResult",
    "evaluate_opportunity",
]
