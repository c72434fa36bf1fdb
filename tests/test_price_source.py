import random
from decimal import Decimal

from arb_monitor.price_source import PriceQuote, SimulatedPriceSource, fetch_quote


def test_prices_stay_in_range():
    source = SimulatedPriceSource(Decimal("3500"), Decimal("10"), rng=random.Random(7))
    prices = [source.fetch_price("QuickSwap") for _ in range(500)]

    assert all(Decimal("3500") <= p <= Decimal("3510") for p in prices)
    assert all(isinstance(p, Decimal) for p in prices)
    assert len(set(prices)) > 1


def test_venues_are_perturbed_independently():
    source = SimulatedPriceSource(Decimal("3500"), Decimal("10"), rng=random.Random(1))
    pairs = [(source.fetch_price("Uniswap V3"), source.fetch_price("QuickSwap")) for _ in range(50)]

    assert any(a != b for a, b in pairs)


def test_seeded_rng_is_reproducible():
    a = SimulatedPriceSource(Decimal("3500"), Decimal("10"), rng=random.Random(42))
    b = SimulatedPriceSource(Decimal("3500"), Decimal("10"), rng=random.Random(42))

    assert [a.fetch_price("x") for _ in range(5)] == [b.fetch_price("x") for _ in range(5)]


def test_zero_noise_returns_baseline():
    source = SimulatedPriceSource(Decimal("1800.5"), Decimal("0"))
    assert source.fetch_price("QuickSwap") == Decimal("1800.5")


def test_from_config_uses_simulation_settings(monitor_config):
    source = SimulatedPriceSource.from_config(monitor_config, rng=random.Random(3))

    assert source.baseline_price == monitor_config.simulation.baseline_price
    assert source.noise_range == monitor_config.simulation.noise_range


def test_fetch_quote_wraps_price_function():
    quote = fetch_quote(lambda venue: Decimal("3505.12"), "Uniswap V3")
    assert quote == PriceQuote("Uniswap V3", Decimal("3505.12"))
