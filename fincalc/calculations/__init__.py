"""
Financial Formula Engine

Pure calculation modules behind the calculator pages. Every function takes
already-parsed numbers and either returns a complete result or raises a
CalculationError.
"""

from fincalc.calculations import (
    amortization,
    commission,
    consolidation,
    growth,
    kelly,
    sales_tax,
    savings,
    tvm,
)
from fincalc.calculations.errors import (
    CalculationError,
    DidNotConverge,
    DomainError,
    InvalidRange,
    Unpayable,
)

__all__ = [
    "amortization",
    "commission",
    "consolidation",
    "growth",
    "kelly",
    "sales_tax",
    "savings",
    "tvm",
    "CalculationError",
    "DidNotConverge",
    "DomainError",
    "InvalidRange",
    "Unpayable",
]
