"""
Compound Growth Calculations

Lump sum plus periodic contributions growing under discrete or continuous
compounding. Used by the compound interest and investment calculators.
"""

import math
from dataclasses import dataclass, field
from typing import List

from fincalc.calculations.errors import DomainError, InvalidRange
from fincalc.calculations.models import (
    Compounding,
    Continuous,
    ScheduleEntry,
    Timing,
    YearSummary,
)

MAX_GROWTH_PERIODS = 36500  # 100 years of daily periods


@dataclass(frozen=True)
class GrowthProjection:
    """Ending position of a growth projection and its period schedule."""

    ending_balance: float
    total_contributions: float
    total_interest: float
    schedule: List[ScheduleEntry] = field(default_factory=list)


def total_periods(periods_per_year: int, total_years: float) -> int:
    """
    Number of whole periods covering ``total_years``.

    Fractional horizons round up. The product is rounded to 9 places first so
    that a years+months horizon such as 1 + 1/12 does not spill into an extra
    period through float error.

    Horizons longer than ``MAX_GROWTH_PERIODS`` periods raise InvalidRange.
    """
    periods = math.ceil(round(periods_per_year * total_years, 9))
    if periods <= 0:
        raise InvalidRange("Projection must cover at least one period")
    if periods > MAX_GROWTH_PERIODS:
        raise InvalidRange(f"Projection is limited to {MAX_GROWTH_PERIODS} periods")
    return periods


def period_growth_rate(
    annual_rate_pct: float, periods_per_year: int, compounding: Compounding
) -> float:
    """
    Growth rate for one schedule period.

    When the compounding frequency differs from the schedule frequency the
    equivalent rate is used, so a monthly schedule under quarterly compounding
    earns (1 + r/4)^(4/12) - 1 per month.
    """
    rate = annual_rate_pct / 100
    try:
        if isinstance(compounding, Continuous):
            return math.exp(rate / periods_per_year) - 1
        n = compounding.periods_per_year
        if n == periods_per_year:
            return rate / n
        return (1 + rate / n) ** (n / periods_per_year) - 1
    except OverflowError as exc:
        raise DomainError("Rate is too large to compound") from exc


def project_growth(
    principal: float,
    contribution_per_period: float,
    annual_rate_pct: float,
    periods_per_year: int,
    total_years: float,
    timing: Timing,
    compounding: Compounding,
) -> GrowthProjection:
    """
    Project a balance forward period by period.

    With END timing each period earns interest and then receives its
    contribution; with BEGINNING timing the contribution lands first and
    earns interest for the period. A zero rate accumulates contributions
    linearly.

    Args:
        principal: Starting balance
        contribution_per_period: Amount added every period
        annual_rate_pct: Nominal annual rate as a percentage
        periods_per_year: Schedule (contribution) periods per year
        total_years: Horizon in years; fractional horizons round up to a whole
            period
        timing: When contributions land
        compounding: Discrete or continuous compounding

    Returns:
        GrowthProjection with one schedule row per period

    Raises:
        InvalidRange: If the horizon covers no periods or more than
            ``MAX_GROWTH_PERIODS``
        DomainError: If the balance grows past the float range
    """
    if periods_per_year <= 0:
        raise InvalidRange("periods_per_year must be positive")
    periods = total_periods(periods_per_year, total_years)
    growth_rate = (
        period_growth_rate(annual_rate_pct, periods_per_year, compounding)
        if annual_rate_pct != 0
        else 0.0
    )

    balance = float(principal)
    contributed = 0.0
    earned = 0.0
    schedule = []

    for period in range(1, periods + 1):
        if timing == Timing.BEGINNING:
            balance += contribution_per_period
        interest = balance * growth_rate
        balance += interest
        if timing == Timing.END:
            balance += contribution_per_period
        if not math.isfinite(balance):
            raise DomainError(f"Balance overflows in period {period}")

        contributed += contribution_per_period
        earned += interest
        schedule.append(
            ScheduleEntry(
                period=period,
                contribution=contribution_per_period,
                interest=interest,
                ending_balance=balance,
            )
        )

    return GrowthProjection(
        ending_balance=balance,
        total_contributions=contributed,
        total_interest=earned,
        schedule=schedule,
    )


def continuous_future_value(
    principal: float,
    annual_contribution: float,
    annual_rate_pct: float,
    years: float,
    timing: Timing = Timing.END,
) -> float:
    """
    Closed-form future value under continuous compounding.

    FV = P * e^(rt) + PMT * (e^(rt) - 1) / r, where PMT is the yearly
    contribution. Contributions at the start of each year earn one extra
    year of growth (factor e^r). A zero rate gives P + PMT * t.
    """
    if years < 0:
        raise InvalidRange("years must be >= 0")
    rate = annual_rate_pct / 100
    if rate == 0:
        return principal + annual_contribution * years

    try:
        growth = math.exp(rate * years)
        annuity = annual_contribution * (growth - 1) / rate
        if timing == Timing.BEGINNING:
            annuity *= math.exp(rate)
    except OverflowError as exc:
        raise DomainError("Future value is too large to represent") from exc
    value = principal * growth + annuity
    if not math.isfinite(value):
        raise DomainError("Future value is too large to represent")
    return value


def effective_annual_rate(annual_rate_pct: float, compounding: Compounding) -> float:
    """Effective annual rate as a percentage."""
    rate = annual_rate_pct / 100
    try:
        if isinstance(compounding, Continuous):
            return (math.exp(rate) - 1) * 100
        n = compounding.periods_per_year
        return ((1 + rate / n) ** n - 1) * 100
    except OverflowError as exc:
        raise DomainError("Rate is too large to compound") from exc


def doubling_time(annual_rate_pct: float, compounding: Compounding) -> float:
    """Years for a lump sum to double."""
    if annual_rate_pct <= 0:
        raise InvalidRange("A balance only doubles at a positive rate")
    rate = annual_rate_pct / 100
    if isinstance(compounding, Continuous):
        return math.log(2) / rate
    n = compounding.periods_per_year
    return math.log(2) / (n * math.log(1 + rate / n))


def rule_of_72(annual_rate_pct: float) -> float:
    """Rule-of-thumb doubling time."""
    if annual_rate_pct <= 0:
        raise InvalidRange("A balance only doubles at a positive rate")
    return 72 / annual_rate_pct


def summarize_by_year(
    schedule: List[ScheduleEntry], periods_per_year: int, opening_balance: float
) -> List[YearSummary]:
    """
    Roll a period schedule up into years.

    A trailing partial year (when the horizon is not a whole number of years)
    gets its own row.

    Args:
        schedule: Period rows in order
        periods_per_year: Number of schedule rows that make up one year
        opening_balance: Balance before the first period

    Returns:
        One summary per (possibly partial) year
    """
    if periods_per_year <= 0:
        raise InvalidRange("periods_per_year must be positive")

    years = []
    balance = opening_balance
    for start in range(0, len(schedule), periods_per_year):
        rows = schedule[start : start + periods_per_year]
        years.append(
            YearSummary(
                year=start // periods_per_year + 1,
                starting_balance=balance,
                contributions=sum(row.contribution for row in rows),
                interest=sum(row.interest for row in rows),
                ending_balance=rows[-1].ending_balance,
            )
        )
        balance = rows[-1].ending_balance
    return years
