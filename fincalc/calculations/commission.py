"""
Commission Calculations

Flat-rate and tiered (marginal band) sales commission.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from fincalc.calculations.errors import InvalidRange


@dataclass(frozen=True)
class Tier:
    """A commission band. ``max`` is None for the final, uncapped band."""

    rate: float  # percentage
    max: Optional[float] = None


@dataclass(frozen=True)
class CommissionResult:
    """Commission earned plus any base salary."""

    commission: float
    base_salary: float
    total_compensation: float
    effective_rate: float  # commission as a percentage of sales


def validate_tiers(tiers: Sequence[Tier]) -> None:
    """
    Check that tiers form a usable ladder.

    Every tier but the last needs an upper bound, bounds may not decrease,
    and the last tier must be uncapped.

    Raises:
        InvalidRange: If the ladder is malformed
    """
    if not tiers:
        raise InvalidRange("At least one tier is required")
    if tiers[-1].max is not None:
        raise InvalidRange("The last tier must be uncapped")

    previous = 0.0
    for index, tier in enumerate(tiers[:-1], start=1):
        if tier.max is None:
            raise InvalidRange(f"Tier {index} needs an upper bound")
        if tier.max < previous:
            raise InvalidRange(
                f"Tier {index} bound {tier.max} is below the previous bound {previous}"
            )
        previous = tier.max


def compute_tiered_commission(sales: float, tiers: List[Tier]) -> float:
    """
    Commission on ``sales`` with each band paid at its own rate.

    Sales falling exactly on a bound belong to the lower tier. For tiers
    (25,000 @ 3%), (50,000 @ 5%), (uncapped @ 7%), sales of 60,000 earn
    750 + 1,250 + 700 = 2,700.

    Raises:
        InvalidRange: If sales are negative or the tiers are malformed
    """
    if sales < 0:
        raise InvalidRange("sales must be >= 0")
    validate_tiers(tiers)

    commission = 0.0
    floor = 0.0
    for tier in tiers:
        if tier.max is None or sales <= tier.max:
            return commission + (sales - floor) * tier.rate / 100
        commission += (tier.max - floor) * tier.rate / 100
        floor = tier.max
    return commission


def calculate_commission(
    sales: float,
    rate_pct: float = 0.0,
    tiers: Optional[List[Tier]] = None,
    base_salary: float = 0.0,
) -> CommissionResult:
    """Total compensation under a flat rate, or tiers when given."""
    if sales < 0:
        raise InvalidRange("sales must be >= 0")

    if tiers:
        commission = compute_tiered_commission(sales, tiers)
    else:
        commission = sales * rate_pct / 100

    return CommissionResult(
        commission=commission,
        base_salary=base_salary,
        total_compensation=base_salary + commission,
        effective_rate=commission / sales * 100 if sales > 0 else 0.0,
    )
