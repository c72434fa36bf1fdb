# arb_monitor/config.py
"""
Arbitrage Monitor Configuration
Loads config.json (DEX routers, polling interval, gas estimate, threshold)
and the optional .env overrides.
"""

import json
import logging
import os
import threading
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from dotenv import find_dotenv, load_dotenv
from web3 import Web3

from arb_monitor.pairs import DEFAULT_BASE_TOKEN, DEFAULT_QUOTE_TOKEN, get_symbol

logger = logging.getLogger(__name__)

# -----------------------------
# Locations
# -----------------------------
DEFAULT_CONFIG_PATH = "config.json"
CONFIG_PATH_ENV = "ARB_MONITOR_CONFIG"

# -----------------------------
# Defaults for optional fields
# -----------------------------
DEFAULT_TRADE_AMOUNT = Decimal("1")
DEFAULT_BASELINE_PRICE = Decimal("3500")  # USDC per WETH
DEFAULT_NOISE_RANGE = Decimal("10")       # prices land in [3500, 3510)

# Upper bound for money amounts and simulated prices; keeps every value
# representable at 1e-6 within the default 28-digit decimal context
MAX_AMOUNT = Decimal("1e12")

REQUIRED_DEX_COUNT = 2


class ConfigurationError(Exception):
    """Configuration file missing, unreadable, or holding an invalid field."""


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class DexConfig:
    name: str
    router_address: str  # checksummed, not called in simulation


@dataclass(frozen=True)
class SimulationConfig:
    baseline_price: Decimal = DEFAULT_BASELINE_PRICE
    noise_range: Decimal = DEFAULT_NOISE_RANGE


@dataclass(frozen=True)
class MonitorConfig:
    """Immutable monitor settings, loaded once at startup"""
    dexes: Tuple[DexConfig, DexConfig]
    poll_interval_seconds: int
    gas_cost_estimate_usd: Decimal
    min_profit_threshold_usd: Decimal

    base_token: str = DEFAULT_BASE_TOKEN
    quote_token: str = DEFAULT_QUOTE_TOKEN
    fixed_trade_amount: Decimal = DEFAULT_TRADE_AMOUNT
    simulation: SimulationConfig = SimulationConfig()
    rpc_url: Optional[str] = None

    @property
    def base_symbol(self) -> str:
        return get_symbol(self.base_token)

    @property
    def quote_symbol(self) -> str:
        return get_symbol(self.quote_token)

    @property
    def venue_names(self) -> Tuple[str, str]:
        return self.dexes[0].name, self.dexes[1].name


# =============================================================================
# ENVIRONMENT
# =============================================================================

def load_environment(env_path: Union[str, Path, None] = None) -> bool:
    """
    Load a .env file into os.environ (existing variables win).

    An explicit path must exist; without one the nearest .env from the
    working directory is used if there is any.
    """
    if env_path is not None:
        env_path = Path(env_path)
        if not env_path.exists():
            raise ConfigurationError(f".env file not found at {env_path}")
        return load_dotenv(env_path)

    return load_dotenv(find_dotenv(usecwd=True))


def resolve_config_path(cli_path: Optional[str] = None) -> Path:
    """CLI flag, then ARB_MONITOR_CONFIG, then ./config.json"""
    return Path(cli_path or os.getenv(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH)


# =============================================================================
# FIELD PARSERS
# =============================================================================

def _require(data: Dict[str, Any], key: str, source: str) -> Any:
    if key not in data or data[key] is None:
        raise ConfigurationError(f"{source}: missing required field '{key}'")
    return data[key]


def _optional(data: Dict[str, Any], key: str, default: Any) -> Any:
    """Absent and null optional fields both take the default"""
    value = data.get(key)
    return default if value is None else value


def _parse_decimal(value: Any, field_name: str, source: str) -> Decimal:
    # bool is an int subclass; `true` is never a price
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ConfigurationError(
            f"{source}: field '{field_name}' must be a number, got {value!r}"
        )

    try:
        number = Decimal(str(value).strip()) if not isinstance(value, Decimal) else value
    except InvalidOperation:
        raise ConfigurationError(
            f"{source}: field '{field_name}' is not a valid decimal: {value!r}"
        ) from None

    if not number.is_finite():
        raise ConfigurationError(f"{source}: field '{field_name}' must be finite")
    return number


def _parse_amount(value: Any, field_name: str, source: str) -> Decimal:
    number = _parse_decimal(value, field_name, source)
    if abs(number) > MAX_AMOUNT:
        raise ConfigurationError(
            f"{source}: field '{field_name}' must not exceed {MAX_AMOUNT:,f} in size, got {number}"
        )
    return number


def _parse_positive_amount(value: Any, field_name: str, source: str) -> Decimal:
    number = _parse_amount(value, field_name, source)
    if number <= 0:
        raise ConfigurationError(f"{source}: field '{field_name}' must be positive, got {number}")
    return number


def _parse_address(value: Any, field_name: str, source: str) -> str:
    if not isinstance(value, str) or not Web3.is_address(value):
        raise ConfigurationError(
            f"{source}: field '{field_name}' is not a valid address: {value!r}"
        )
    return Web3.to_checksum_address(value)


def _parse_interval(value: Any, source: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(
            f"{source}: field 'poll_interval_seconds' must be a positive integer, got {value!r}"
        )
    # Event.wait() overflows past TIMEOUT_MAX
    if value > threading.TIMEOUT_MAX:
        raise ConfigurationError(
            f"{source}: field 'poll_interval_seconds' must not exceed {int(threading.TIMEOUT_MAX)}, got {value}"
        )
    return value


def _parse_dexes(value: Any, source: str) -> Tuple[DexConfig, DexConfig]:
    if not isinstance(value, list) or len(value) != REQUIRED_DEX_COUNT:
        raise ConfigurationError(
            f"{source}: field 'dexes' must list exactly {REQUIRED_DEX_COUNT} DEXes"
        )

    dexes = []
    for i, entry in enumerate(value):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"{source}: dexes[{i}] must be an object")

        name = _require(entry, "name", f"{source}: dexes[{i}]")
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError(f"{source}: dexes[{i}].name must be a non-empty string")

        router = _parse_address(
            _require(entry, "router_address", f"{source}: dexes[{i}]"),
            f"dexes[{i}].router_address",
            source,
        )
        dexes.append(DexConfig(name=name.strip(), router_address=router))

    if dexes[0].name == dexes[1].name:
        raise ConfigurationError(f"{source}: DEX names must be distinct ('{dexes[0].name}')")

    return dexes[0], dexes[1]


def _parse_tokens(value: Any, source: str) -> Tuple[str, str]:
    if value is None:
        return DEFAULT_BASE_TOKEN, DEFAULT_QUOTE_TOKEN
    if not isinstance(value, dict):
        raise ConfigurationError(f"{source}: field 'tokens' must be an object")

    base = _parse_address(_optional(value, "base", DEFAULT_BASE_TOKEN), "tokens.base", source)
    quote = _parse_address(_optional(value, "quote", DEFAULT_QUOTE_TOKEN), "tokens.quote", source)
    if base == quote:
        raise ConfigurationError(f"{source}: tokens.base and tokens.quote must differ")
    return base, quote


def _parse_simulation(value: Any, source: str) -> SimulationConfig:
    if value is None:
        return SimulationConfig()
    if not isinstance(value, dict):
        raise ConfigurationError(f"{source}: field 'simulation' must be an object")

    baseline = _parse_positive_amount(
        _optional(value, "baseline_price", DEFAULT_BASELINE_PRICE), "simulation.baseline_price", source
    )
    noise = _parse_amount(
        _optional(value, "noise_range", DEFAULT_NOISE_RANGE), "simulation.noise_range", source
    )
    if noise < 0:
        raise ConfigurationError(f"{source}: field 'simulation.noise_range' must not be negative")
    if baseline + noise > MAX_AMOUNT:
        raise ConfigurationError(
            f"{source}: simulated prices up to {baseline + noise} exceed {MAX_AMOUNT:,f}"
        )
    return SimulationConfig(baseline_price=baseline, noise_range=noise)


# =============================================================================
# LOADER
# =============================================================================

def parse_config(data: Any, source: str = "<config>") -> MonitorConfig:
    """Build a MonitorConfig from an already-decoded JSON document"""
    if not isinstance(data, dict):
        raise ConfigurationError(f"{source}: top level must be a JSON object")

    dexes = _parse_dexes(_require(data, "dexes", source), source)
    interval = _parse_interval(_require(data, "poll_interval_seconds", source), source)
    gas_cost = _parse_positive_amount(
        _require(data, "gas_cost_estimate_usd", source), "gas_cost_estimate_usd", source
    )
    threshold = _parse_decimal(
        _require(data, "min_profit_threshold_usd", source), "min_profit_threshold_usd", source
    )

    base_token, quote_token = _parse_tokens(data.get("tokens"), source)
    trade_amount = _parse_positive_amount(
        _optional(data, "fixed_trade_amount", DEFAULT_TRADE_AMOUNT), "fixed_trade_amount", source
    )
    simulation = _parse_simulation(data.get("simulation"), source)

    rpc_url = data.get("rpc_url")
    if rpc_url is not None and not isinstance(rpc_url, str):
        raise ConfigurationError(f"{source}: field 'rpc_url' must be a string")

    return MonitorConfig(
        dexes=dexes,
        poll_interval_seconds=interval,
        gas_cost_estimate_usd=gas_cost,
        min_profit_threshold_usd=threshold,
        base_token=base_token,
        quote_token=quote_token,
        fixed_trade_amount=trade_amount,
        simulation=simulation,
        rpc_url=rpc_url,
    )


def load_config(path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> MonitorConfig:
    """
    Load and validate the JSON configuration file.

    Floats are decoded as Decimal so thresholds keep their written value.
    Raises ConfigurationError on any problem; nothing required is defaulted.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigurationError(f"Config file not found: {path}") from None
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

    try:
        data = json.loads(raw, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path}: invalid JSON ({e})") from e

    config = parse_config(data, source=str(path))
    logger.debug(f"Loaded config from {path}: {config}")
    return config
