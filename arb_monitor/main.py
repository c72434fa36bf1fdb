# arb_monitor/main.py
"""
Arbitrage Monitor Main Loop
Simulated WETH/USDC prices on two Polygon DEXes, checked every poll interval

THIS IS THE ENTRY POINT - Run with: python -m arb_monitor.main
(or the installed `arb-monitor` script)

Nothing here touches the network: prices come from SimulatedPriceSource
unless another price function is injected.
"""

import argparse
import logging
import os
import signal
import sys
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, TextIO

from arb_monitor.config import (
    ConfigurationError,
    MonitorConfig,
    load_config,
    load_environment,
    resolve_config_path,
)
from arb_monitor.price_source import (
    PriceFetcher,
    PriceFetchError,
    SimulatedPriceSource,
    fetch_quote,
)
from arb_monitor.profit_calculator import OpportunityResult, evaluate_opportunity
from arb_monitor.report import report

logger = logging.getLogger(__name__)

# =============================================================================
# LOGGING SETUP
# =============================================================================

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(message)s'
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def setup_logging(level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """
    Log to stderr (stdout carries the price reports) and, when log_dir is
    set, to a daily file in that directory.
    """
    numeric_level = logging.getLevelName(str(level).upper())
    if not isinstance(numeric_level, int):
        raise ConfigurationError(f"Unknown log level: {level!r}")

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.FileHandler(log_path / f"monitor_{datetime.now().strftime('%Y%m%d')}.log")
        )

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, handlers=handlers, force=True)


# =============================================================================
# RUN SUMMARY
# =============================================================================

@dataclass
class MonitorSummary:
    """Counters for a single run() call"""
    iterations: int = 0
    opportunities: int = 0
    fetch_failures: int = 0

    def record(self, result: Optional[OpportunityResult]) -> None:
        self.iterations += 1
        if result is None:
            self.fetch_failures += 1
        elif result.is_opportunity:
            self.opportunities += 1

    def get_summary(self) -> str:
        return (
            f"\n{'='*60}\n"
            f"📊 MONITOR STATISTICS\n"
            f"{'='*60}\n"
            f"Cycles: {self.iterations}\n"
            f"Opportunities: {self.opportunities}\n"
            f"Price fetch failures: {self.fetch_failures}\n"
            f"{'='*60}\n"
        )


# =============================================================================
# MONITOR
# =============================================================================

class ArbitrageMonitor:
    """
    Single-state polling loop: quote both DEXes, evaluate, report, wait.

    The wait is the only place a stop request is noticed, so a cycle that
    has started always finishes.
    """

    def __init__(
        self,
        config: MonitorConfig,
        fetch_price: Optional[PriceFetcher] = None,
        stream: Optional[TextIO] = None,
        stop_event: Optional[threading.Event] = None,
    ):
        self.config = config
        self.fetch_price = fetch_price or SimulatedPriceSource.from_config(config).fetch_price
        self.stream = stream or sys.stdout
        self.stop_event = stop_event or threading.Event()
        self._previous_handlers = {}

    # -------------------------------------------------------------------------
    # Shutdown
    # -------------------------------------------------------------------------

    def install_signal_handlers(self) -> None:
        """SIGINT/SIGTERM request a stop after the current cycle"""
        for signum in (signal.SIGINT, signal.SIGTERM):
            self._previous_handlers[signum] = signal.signal(signum, self._handle_shutdown)

    def restore_signal_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers = {}

    def _handle_shutdown(self, signum, frame):
        logger.info(f"🛑 Shutdown signal received ({signal.Signals(signum).name})...")
        self.stop()

    def stop(self) -> None:
        self.stop_event.set()

    # -------------------------------------------------------------------------
    # Cycle
    # -------------------------------------------------------------------------

    def run_cycle(self) -> Optional[OpportunityResult]:
        """
        One polling tick. Returns the evaluation, or None when a venue
        could not be priced (the tick is skipped).
        """
        venue_a, venue_b = self.config.venue_names

        try:
            quote_a = fetch_quote(self.fetch_price, venue_a)
            quote_b = fetch_quote(self.fetch_price, venue_b)
        except PriceFetchError as e:
            logger.warning(f"Price fetch failed: {e}")
            self.stream.write("Error fetching prices from one or more DEXes.\n")
            self.stream.flush()
            return None

        result = evaluate_opportunity(
            quote_a,
            quote_b,
            gas_cost_usd=self.config.gas_cost_estimate_usd,
            min_profit_usd=self.config.min_profit_threshold_usd,
        )

        logger.debug(
            f"{quote_a.venue}={quote_a.price} {quote_b.venue}={quote_b.price} "
            f"spread={result.spread} net={result.net_profit} "
            f"opportunity={result.is_opportunity}"
        )

        report(
            result,
            self.stream,
            base_symbol=self.config.base_symbol,
            quote_symbol=self.config.quote_symbol,
            trade_amount=self.config.fixed_trade_amount,
        )
        return result

    def run(self, max_iterations: Optional[int] = None) -> MonitorSummary:
        """
        Main loop. Runs until stopped, or for max_iterations cycles when given
        (no wait after the last one).
        """
        if max_iterations is not None and max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")

        config = self.config
        venue_a, venue_b = config.venue_names

        logger.info("=" * 60)
        logger.info("🚀 ARBITRAGE MONITOR STARTING")
        logger.info(f"Pair: {config.base_symbol}/{config.quote_symbol} | DEXes: {venue_a} vs {venue_b}")
        logger.info(
            f"Gas estimate: ${config.gas_cost_estimate_usd} | "
            f"Min profit: ${config.min_profit_threshold_usd} | "
            f"Interval: {config.poll_interval_seconds}s"
        )
        logger.info("=" * 60)

        summary = MonitorSummary()

        try:
            while True:
                summary.record(self.run_cycle())

                if max_iterations is not None and summary.iterations >= max_iterations:
                    break

                if self.stop_event.wait(config.poll_interval_seconds):
                    logger.info("Stop requested, leaving polling loop")
                    break

        except KeyboardInterrupt:
            logger.info("Keyboard interrupt received")

        finally:
            logger.info(summary.get_summary())
            logger.info("Monitor stopped.")

        return summary


# =============================================================================
# ENTRY POINT
# =============================================================================

def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Polygon Arbitrage Monitor (simulated prices)")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the JSON config (default: $ARB_MONITOR_CONFIG or ./config.json)",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help=".env file to load first (default: nearest .env, if any)",
    )

    runs = parser.add_mutually_exclusive_group()
    runs.add_argument(
        "--iterations",
        type=_positive_int,
        default=None,
        help="Stop after N cycles (default: run until interrupted)",
    )
    runs.add_argument(
        "--once",
        dest="iterations",
        action="store_const",
        const=1,
        help="Run a single cycle and exit",
    )

    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: $LOG_LEVEL or INFO)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit code"""
    args = parse_args(argv)

    try:
        load_environment(args.env_file)
        setup_logging(args.log_level or os.getenv("LOG_LEVEL", "INFO"), os.getenv("LOG_DIR"))

        print("Starting Polygon Arbitrage Bot...")
        config = load_config(resolve_config_path(args.config))

    except ConfigurationError as e:
        logger.error(f"❌ Configuration error: {e}")
        return 1

    print("Bot configured. Monitoring prices...")

    monitor = ArbitrageMonitor(config)
    monitor.install_signal_handlers()
    try:
        monitor.run(max_iterations=args.iterations)
    finally:
        monitor.restore_signal_handlers()

    return 0


if __name__ == "__main__":
    sys.exit(main())
