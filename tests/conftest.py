import json
import logging
from decimal import Decimal

import pytest

from arb_monitor.config import parse_config

UNISWAP_ROUTER = "0xE592427A0AEce92De3Edee1F18E0157C05861564"
QUICKSWAP_ROUTER = "0xa5E0829CaCEd8fFDD4De3c43696c57F7D7A678ff"


@pytest.fixture
def config_data():
    """Minimal valid config document (required fields only)"""
    return {
        "dexes": [
            {"name": "Uniswap V3", "router_address": UNISWAP_ROUTER},
            {"name": "QuickSwap", "router_address": QUICKSWAP_ROUTER},
        ],
        "poll_interval_seconds": 15,
        "gas_cost_estimate_usd": Decimal("2.00"),
        "min_profit_threshold_usd": Decimal("1.00"),
    }


@pytest.fixture
def monitor_config(config_data):
    return parse_config(config_data)


@pytest.fixture
def write_config(tmp_path):
    def _write(data, name="config.json"):
        path = tmp_path / name
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(json.dumps(data, default=str), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_root_logging():
    """Drop handlers installed by setup_logging() during a test"""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
