"""
Kelly Criterion for Binary Markets

Optimal stake for buying YES shares in a prediction market. A share bought
at price m pays 1 if the event happens, so the net odds are b = (1 - m) / m.
"""

import math
from dataclasses import dataclass

from fincalc.calculations.errors import InvalidRange

PRICE_FLOOR = 0.01
PRICE_CEILING = 0.99


@dataclass(frozen=True)
class KellyResult:
    """Kelly stake and its fractional variants."""

    fraction: float
    full_bet: float
    half_bet: float
    quarter_bet: float
    odds: float
    edge: float  # true probability minus price, in percentage points
    has_edge: bool
    expected_growth_rate: float  # per-bet log growth at the full Kelly stake


def clamp_probability(value: float) -> float:
    """Keep a price or probability inside [0.01, 0.99]."""
    return min(PRICE_CEILING, max(PRICE_FLOOR, value))


def kelly(bankroll: float, market_price: float, true_probability: float) -> KellyResult:
    """
    Size a YES position with the Kelly criterion.

    f* = (b * p - q) / b, which for a binary share reduces to
    (p - m) / (1 - m). With no edge (f* <= 0) every stake is zero. The
    expected log growth g = p ln(1 + f* b) + q ln(1 - f*) is reported only
    for 0 < f* < 1.

    Args:
        bankroll: Capital available
        market_price: Price of a YES share, clamped into [0.01, 0.99]
        true_probability: Your probability estimate, clamped likewise

    Returns:
        KellyResult

    Raises:
        InvalidRange: If the bankroll is negative
    """
    if bankroll < 0:
        raise InvalidRange("bankroll must be >= 0")

    price = clamp_probability(market_price)
    p = clamp_probability(true_probability)
    q = 1 - p
    b = (1 - price) / price

    # Same as (b * p - q) / b, but exactly zero when p == price
    fraction = (p - price) / (1 - price)
    has_edge = fraction > 0

    full_bet = fraction * bankroll if has_edge else 0.0

    growth = 0.0
    if 0 < fraction < 1:
        growth = p * math.log(1 + fraction * b) + q * math.log(1 - fraction)

    return KellyResult(
        fraction=fraction,
        full_bet=full_bet,
        half_bet=full_bet / 2,
        quarter_bet=full_bet / 4,
        odds=b,
        edge=(p - price) * 100,
        has_edge=has_edge,
        expected_growth_rate=growth,
    )
