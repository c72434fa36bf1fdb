# arb_monitor/report.py
"""Console report for one evaluation cycle"""

import sys
from decimal import Decimal
from typing import TextIO

from arb_monitor.profit_calculator import OpportunityResult

CENT = Decimal("0.01")


def _usd(value: Decimal) -> str:
    return f"{value.quantize(CENT):.2f}"


def format_report(
    result: OpportunityResult,
    base_symbol: str = "WETH",
    quote_symbol: str = "USDC",
    trade_amount: Decimal = Decimal("1"),
) -> str:
    """Format an OpportunityResult for the console (rounded to cents here only)"""
    lines = [
        f"{result.quote_a.venue}: 1 {base_symbol} = {_usd(result.quote_a.price)} {quote_symbol}",
        f"{result.quote_b.venue}: 1 {base_symbol} = {_usd(result.quote_b.price)} {quote_symbol}",
        f"Price Difference: {_usd(result.spread)} {quote_symbol} per {base_symbol}",
        f"Simulated Net Profit: ${_usd(result.net_profit)}",
    ]

    if result.is_opportunity:
        buy, sell = result.buy_quote, result.sell_quote
        lines += [
            "🚀 ARBITRAGE OPPORTUNITY DETECTED!",
            f"   Buy  {trade_amount} {base_symbol} on {buy.venue} for ${_usd(buy.price * trade_amount)}",
            f"   Sell {trade_amount} {base_symbol} on {sell.venue} for ${_usd(sell.price * trade_amount)}",
            f"   Estimated Profit: ${_usd(result.trade_profit(trade_amount))}",
        ]
    else:
        lines.append("No significant opportunity found.")

    return "\n".join(lines) + "\n\n"


def report(result: OpportunityResult, stream: TextIO = None, **kwargs) -> None:
    """Write the formatted report to `stream` (stdout by default)"""
    stream = stream or sys.stdout
    stream.write(format_report(result, **kwargs))
    stream.flush()
