"""
Sales Tax Calculations

The three ways to read after = before * (1 + rate / 100): add tax to a price,
back tax out of a total, or find the rate that links two prices.
"""

from dataclasses import dataclass

from fincalc.calculations.errors import InvalidRange


@dataclass(frozen=True)
class TaxBreakdown:
    before_tax: float
    tax_rate: float  # percentage
    tax_amount: float
    after_tax: float


def add_tax(before: float, rate_pct: float) -> TaxBreakdown:
    """Price including tax."""
    tax = before * rate_pct / 100
    return TaxBreakdown(
        before_tax=before, tax_rate=rate_pct, tax_amount=tax, after_tax=before + tax
    )


def remove_tax(after: float, rate_pct: float) -> TaxBreakdown:
    """Price before tax, from a tax-inclusive total."""
    if rate_pct == -100:
        raise InvalidRange("A -100% rate leaves no price to recover")
    before = after / (1 + rate_pct / 100)
    return TaxBreakdown(
        before_tax=before, tax_rate=rate_pct, tax_amount=after - before, after_tax=after
    )


def find_rate(before: float, after: float) -> TaxBreakdown:
    """Tax rate implied by a before-tax and after-tax price."""
    if before == 0:
        raise InvalidRange("Cannot find a rate from a zero before-tax price")
    tax = after - before
    return TaxBreakdown(
        before_tax=before, tax_rate=tax / before * 100, tax_amount=tax, after_tax=after
    )
