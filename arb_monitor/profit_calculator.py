# arb_monitor/profit_calculator.py
"""
Opportunity Evaluator
Spread between two DEX quotes, net of a flat gas estimate, against a threshold
"""

from dataclasses import dataclass
from decimal import Decimal

from arb_monitor.price_source import PriceQuote


@dataclass(frozen=True)
class OpportunityResult:
    """One cycle's evaluation; never persisted"""
    quote_a: PriceQuote
    quote_b: PriceQuote

    spread: Decimal
    net_profit: Decimal
    gas_cost: Decimal

    threshold: Decimal
    is_opportunity: bool

    @property
    def buy_quote(self) -> PriceQuote:
        """Cheaper venue (ties go to quote_b)"""
        return self.quote_a if self.quote_a.price < self.quote_b.price else self.quote_b

    @property
    def sell_quote(self) -> PriceQuote:
        """Dearer venue (ties go to quote_a)"""
        return self.quote_b if self.buy_quote is self.quote_a else self.quote_a

    def trade_profit(self, trade_amount: Decimal) -> Decimal:
        """Profit of buying and selling `trade_amount` base tokens, gas paid once"""
        return self.spread * trade_amount - self.gas_cost


def evaluate_opportunity(
    quote_a: PriceQuote,
    quote_b: PriceQuote,
    gas_cost_usd: Decimal,
    min_profit_usd: Decimal,
) -> OpportunityResult:
    """
    spread     = |price_a - price_b|
    net_profit = spread - gas_cost_usd
    actionable = net_profit >= min_profit_usd

    Exact Decimal arithmetic; rounding happens only when reporting.
    """
    spread = abs(quote_a.price - quote_b.price)
    net_profit = spread - gas_cost_usd

    # equal prices never trade, whatever the threshold
    is_opportunity = spread > 0 and net_profit >= min_profit_usd

    return OpportunityResult(
        quote_a=quote_a,
        quote_b=quote_b,
        spread=spread,
        net_profit=net_profit,
        gas_cost=gas_cost_usd,
        threshold=min_profit_usd,
        is_opportunity=is_opportunity,
    )
