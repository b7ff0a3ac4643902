"""
Debt Consolidation Comparison

Compares paying several debts as they stand against rolling them into one
consolidation loan with an optional origination fee.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from fincalc.calculations.amortization import (
    MAX_PAYOFF_MONTHS,
    simulate_payoff,
    solve_required_payment,
)
from fincalc.calculations.errors import InvalidRange, Unpayable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Debt:
    """An existing debt and what is being paid on it each month."""

    balance: float
    monthly_payment: float
    annual_rate_pct: float
    name: str = ""


@dataclass(frozen=True)
class ConsolidationResult:
    """Side-by-side view of the current debts and the consolidation loan."""

    current_total_debt: float
    current_monthly_payment: float
    current_total_interest: float
    current_payoff_months: int
    current_weighted_apr: float
    consolidation_monthly_payment: float
    consolidation_total_interest: float
    consolidation_payoff_months: int
    consolidation_real_apr: float
    loan_fee: float
    monthly_savings: float
    total_interest_savings: float
    time_savings_months: int
    is_worthwhile: bool
    unpayable_debts: List[str] = field(default_factory=list)


def loan_fee_amount(loan_amount: float, fee: float, fee_is_percent: bool) -> float:
    """Origination fee in dollars, given either a flat amount or a percentage."""
    if fee < 0:
        raise InvalidRange("loan fee must be >= 0")
    if fee_is_percent:
        return loan_amount * fee / 100
    return fee


def compare_consolidation(
    debts: List[Debt],
    loan_amount: float,
    loan_rate_pct: float,
    term_months: int,
    loan_fee: float = 0.0,
    fee_is_percent: bool = False,
) -> ConsolidationResult:
    """
    Compare current debts against a single consolidation loan.

    Debts without a positive balance, payment and rate are skipped. A debt
    whose payment never clears it is counted at the payoff cap and reported
    in ``unpayable_debts``.

    Args:
        debts: Existing debts
        loan_amount: Consolidation loan principal
        loan_rate_pct: Consolidation loan APR as a percentage
        term_months: Consolidation loan term
        loan_fee: Flat fee, or percentage of ``loan_amount`` if
            ``fee_is_percent``
        fee_is_percent: Interpret ``loan_fee`` as a percentage

    Returns:
        ConsolidationResult

    Raises:
        InvalidRange: If the loan amount is not positive or the term is not
            positive
    """
    if loan_amount <= 0:
        raise InvalidRange("loan_amount must be positive")
    if term_months <= 0:
        raise InvalidRange("term_months must be positive")

    fee = loan_fee_amount(loan_amount, loan_fee, fee_is_percent)

    valid = [
        d
        for d in debts
        if d.balance > 0 and d.monthly_payment > 0 and d.annual_rate_pct > 0
    ]

    total_debt = sum(d.balance for d in valid)
    total_payment = sum(d.monthly_payment for d in valid)
    weighted_apr = (
        sum(d.balance * d.annual_rate_pct for d in valid) / total_debt
        if total_debt > 0
        else 0.0
    )

    current_interest = 0.0
    current_months = 0
    unpayable = []
    for index, debt in enumerate(valid):
        try:
            payoff = simulate_payoff(debt.balance, debt.annual_rate_pct, debt.monthly_payment)
        except Unpayable:
            label = debt.name or f"debt {index + 1}"
            logger.debug("%s cannot be paid off at %.2f/month", label, debt.monthly_payment)
            unpayable.append(label)
            current_months = MAX_PAYOFF_MONTHS
            continue
        current_interest += payoff.total_interest
        current_months = max(current_months, payoff.months_to_payoff)

    loan_payment = solve_required_payment(loan_amount, loan_rate_pct, term_months)
    loan_total_paid = loan_payment * term_months
    loan_interest = loan_total_paid - loan_amount

    if fee > 0:
        real_apr = (loan_total_paid + fee - loan_amount) / loan_amount / (term_months / 12) * 100
    else:
        real_apr = loan_rate_pct

    monthly_savings = total_payment - loan_payment

    return ConsolidationResult(
        current_total_debt=total_debt,
        current_monthly_payment=total_payment,
        current_total_interest=current_interest,
        current_payoff_months=current_months,
        current_weighted_apr=weighted_apr,
        consolidation_monthly_payment=loan_payment,
        consolidation_total_interest=loan_interest,
        consolidation_payoff_months=term_months,
        consolidation_real_apr=real_apr,
        loan_fee=fee,
        monthly_savings=monthly_savings,
        total_interest_savings=current_interest - (loan_interest + fee),
        time_savings_months=current_months - term_months,
        is_worthwhile=real_apr < weighted_apr and monthly_savings > 0,
        unpayable_debts=unpayable,
    )
