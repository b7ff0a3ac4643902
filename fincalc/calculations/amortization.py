"""
Debt Payoff Calculations

Month-by-month payoff simulation for a fixed payment, and the closed-form
payment required to clear a balance in a given number of months. Rates are
annual percentages (e.g., 18.5 for 18.5% APR), compounded monthly.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from fincalc.calculations.errors import InvalidRange, Unpayable
from fincalc.calculations.models import ScheduleEntry

logger = logging.getLogger(__name__)

MAX_PAYOFF_MONTHS = 600  # 50 years
PAYOFF_TOLERANCE = 0.01
MINIMUM_PAYMENT_FLOOR = 15.0
MINIMUM_PAYMENT_PERCENT = 1.0


@dataclass(frozen=True)
class PayoffResult:
    """Outcome of paying down a balance."""

    months_to_payoff: int
    monthly_payment: float
    total_interest: float
    total_paid: float
    schedule: List[ScheduleEntry] = field(default_factory=list)

    @property
    def years_to_payoff(self) -> float:
        return self.months_to_payoff / 12


def _monthly_rate(annual_rate_pct: float) -> float:
    return annual_rate_pct / 100 / 12


def _check_debt(balance: float, annual_rate_pct: float) -> None:
    if balance < 0:
        raise InvalidRange("balance must be >= 0")
    if annual_rate_pct < 0:
        raise InvalidRange("annual rate must be >= 0")


def simulate_payoff(
    balance: float,
    annual_rate_pct: float,
    payment: float,
    max_months: int = MAX_PAYOFF_MONTHS,
) -> PayoffResult:
    """
    Pay a balance down with a fixed monthly payment.

    Each month interest accrues on the remaining balance and the rest of the
    payment reduces principal. The last payment only covers what is left.

    Args:
        balance: Starting balance
        annual_rate_pct: APR as a percentage
        payment: Fixed monthly payment
        max_months: Iteration cap

    Returns:
        PayoffResult with one schedule row per month

    Raises:
        Unpayable: If the payment does not exceed the monthly interest, or the
            balance is not cleared within ``max_months``
        InvalidRange: If balance or rate is negative
    """
    _check_debt(balance, annual_rate_pct)
    monthly_rate = _monthly_rate(annual_rate_pct)

    remaining = float(balance)
    months = 0
    total_interest = 0.0
    total_paid = 0.0
    schedule = []

    while remaining > PAYOFF_TOLERANCE:
        if months >= max_months:
            logger.debug("Balance %.2f left after %d months", remaining, months)
            raise Unpayable(f"Balance is not paid off within {max_months} months")

        interest = remaining * monthly_rate
        principal = payment - interest
        if principal <= 0:
            raise Unpayable("Payment does not cover the monthly interest")

        if principal >= remaining:
            # Final month: pay only what is owed
            paid = remaining + interest
            remaining = 0.0
        else:
            paid = payment
            remaining -= principal

        months += 1
        total_interest += interest
        total_paid += paid
        schedule.append(
            ScheduleEntry(
                period=months,
                contribution=paid,
                interest=interest,
                ending_balance=remaining,
            )
        )

    return PayoffResult(
        months_to_payoff=months,
        monthly_payment=payment,
        total_interest=total_interest,
        total_paid=total_paid,
        schedule=schedule,
    )


def solve_required_payment(
    balance: float, annual_rate_pct: float, total_months: int
) -> float:
    """
    Calculate the monthly payment that clears a balance in ``total_months``.

    payment = B * r * (1 + r)^n / ((1 + r)^n - 1), or B / n when r is zero.

    Raises:
        InvalidRange: If ``total_months`` is not positive
    """
    _check_debt(balance, annual_rate_pct)
    if total_months <= 0:
        raise InvalidRange("total_months must be positive")

    monthly_rate = _monthly_rate(annual_rate_pct)
    if monthly_rate == 0:
        return balance / total_months

    growth = (1 + monthly_rate) ** total_months
    return balance * monthly_rate * growth / (growth - 1)


def payoff_over_term(
    balance: float, annual_rate_pct: float, total_months: int
) -> PayoffResult:
    """Payoff totals when paying the required payment for a fixed term."""
    payment = solve_required_payment(balance, annual_rate_pct, total_months)
    monthly_rate = _monthly_rate(annual_rate_pct)

    remaining = float(balance)
    total_interest = 0.0
    schedule = []
    for month in range(1, total_months + 1):
        interest = remaining * monthly_rate
        remaining -= payment - interest
        total_interest += interest
        schedule.append(
            ScheduleEntry(
                period=month,
                contribution=payment,
                interest=interest,
                ending_balance=max(0.0, remaining),
            )
        )

    return PayoffResult(
        months_to_payoff=total_months,
        monthly_payment=payment,
        total_interest=total_interest,
        total_paid=payment * total_months,
        schedule=schedule,
    )


def minimum_payment(balance: float, annual_rate_pct: float) -> float:
    """Typical card minimum: 1% of the balance plus interest, at least $15."""
    _check_debt(balance, annual_rate_pct)
    percent_part = balance * MINIMUM_PAYMENT_PERCENT / 100
    return max(MINIMUM_PAYMENT_FLOOR, percent_part + balance * _monthly_rate(annual_rate_pct))


def preset_payment(balance: float, annual_rate_pct: float, percent: float) -> float:
    """Monthly interest plus ``percent`` of the balance toward principal."""
    _check_debt(balance, annual_rate_pct)
    if percent <= 0:
        raise InvalidRange("percent must be positive")
    return balance * _monthly_rate(annual_rate_pct) + balance * percent / 100


def payoff_date(months: int, start: Optional[date] = None) -> date:
    """Date the last payment lands, ``months`` after ``start`` (default today)."""
    if start is None:
        start = date.today()
    return start + relativedelta(months=months)
