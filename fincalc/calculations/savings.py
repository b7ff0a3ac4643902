"""
Savings Product Calculations

Certificate of deposit accumulation and a Roth IRA versus taxable account
comparison.
"""

import math
from dataclasses import dataclass, field
from typing import List

from fincalc.calculations.errors import InvalidRange
from fincalc.calculations.models import Compounding, Continuous, ScheduleEntry

ROTH_BASE_LIMIT = 7000.0
ROTH_CATCH_UP = 1000.0
ROTH_CATCH_UP_AGE = 50


@dataclass(frozen=True)
class CDResult:
    """CD value at maturity."""

    end_balance: float  # after tax when a marginal tax rate is given
    total_interest: float  # after tax when a marginal tax rate is given
    principal: float
    tax_paid: float
    effective_rate: float  # annualized percentage yield
    monthly_interest_avg: float
    total_months: int
    schedule: List[ScheduleEntry] = field(default_factory=list)


@dataclass(frozen=True)
class RothComparison:
    """Roth IRA balance next to a taxable account funded the same way."""

    roth_balance: float
    taxable_balance: float
    total_contributions: float
    roth_earnings: float
    taxable_earnings: float
    total_tax_paid: float
    advantage: float
    years: int


def _cd_monthly_factors(annual_rate_pct: float, compounding: Compounding):
    """Return (months per credit, growth per credit) for the monthly schedule."""
    rate = annual_rate_pct / 100
    if isinstance(compounding, Continuous):
        return 1, math.exp(rate / 12) - 1
    n = compounding.periods_per_year
    if n <= 12 and 12 % n == 0:
        return 12 // n, rate / n
    # More than monthly: fold the sub-month compounding into each month
    return 1, (1 + rate / n) ** (n / 12) - 1


def project_cd(
    deposit: float,
    annual_rate_pct: float,
    total_months: int,
    compounding: Compounding,
    marginal_tax_rate_pct: float = 0.0,
) -> CDResult:
    """
    Grow a single CD deposit to maturity.

    The maturity value uses the closed form over the exact term. The monthly
    schedule credits interest only in months that close a compounding period.

    Args:
        deposit: Initial deposit
        annual_rate_pct: Stated annual rate as a percentage
        total_months: Term in months
        compounding: Compounding frequency
        marginal_tax_rate_pct: Tax on interest as a percentage, 0 for none

    Returns:
        CDResult

    Raises:
        InvalidRange: If the deposit or term is not positive
    """
    if deposit <= 0:
        raise InvalidRange("deposit must be positive")
    if total_months <= 0:
        raise InvalidRange("total_months must be positive")

    rate = annual_rate_pct / 100
    years = total_months / 12
    if isinstance(compounding, Continuous):
        gross = deposit * math.exp(rate * years)
    else:
        n = compounding.periods_per_year
        gross = deposit * (1 + rate / n) ** (n * years)

    interest = gross - deposit
    tax = interest * marginal_tax_rate_pct / 100 if marginal_tax_rate_pct > 0 else 0.0

    months_per_credit, credit_rate = _cd_monthly_factors(annual_rate_pct, compounding)
    balance = float(deposit)
    schedule = []
    for month in range(1, total_months + 1):
        credited = balance * credit_rate if month % months_per_credit == 0 else 0.0
        balance += credited
        schedule.append(
            ScheduleEntry(
                period=month,
                contribution=deposit if month == 1 else 0.0,
                interest=credited,
                ending_balance=balance,
            )
        )

    return CDResult(
        end_balance=gross - tax,
        total_interest=interest - tax,
        principal=deposit,
        tax_paid=tax,
        effective_rate=((gross / deposit) ** (1 / years) - 1) * 100,
        monthly_interest_avg=interest / total_months,
        total_months=total_months,
        schedule=schedule,
    )


def roth_contribution_limit(
    age: int,
    base_limit: float = ROTH_BASE_LIMIT,
    catch_up: float = ROTH_CATCH_UP,
) -> float:
    """Annual contribution limit, including the catch-up allowance at 50+."""
    if age >= ROTH_CATCH_UP_AGE:
        return base_limit + catch_up
    return base_limit


def compare_roth_vs_taxable(
    current_balance: float,
    annual_contribution: float,
    annual_return_pct: float,
    years: int,
    marginal_tax_rate_pct: float,
) -> RothComparison:
    """
    Compare tax-free Roth growth with a taxable account.

    Both accounts grow once a year and receive the contribution at year end.
    The taxable account pays tax on each year's gain at the marginal rate.

    Raises:
        InvalidRange: If ``years`` is not positive
    """
    if years <= 0:
        raise InvalidRange("years must be positive")

    rate = annual_return_pct / 100
    tax_rate = marginal_tax_rate_pct / 100

    roth = float(current_balance)
    taxable = float(current_balance)
    contributions = float(current_balance)
    tax_paid = 0.0

    for _ in range(years):
        roth = roth * (1 + rate) + annual_contribution

        gain = taxable * rate
        tax = gain * tax_rate
        tax_paid += tax
        taxable += gain - tax + annual_contribution

        contributions += annual_contribution

    return RothComparison(
        roth_balance=roth,
        taxable_balance=taxable,
        total_contributions=contributions,
        roth_earnings=roth - contributions,
        taxable_earnings=taxable - contributions,
        total_tax_paid=tax_paid,
        advantage=roth - taxable,
        years=years,
    )
