"""
Calculation Errors

Failure conditions raised by the formula engine. Every error is local to a
single call and deterministic, so nothing here is worth retrying.
"""


class CalculationError(ValueError):
    """Base class for calculations that have no numeric answer."""


class Unpayable(CalculationError):
    """The payment never amortizes the debt within the iteration cap."""


class DomainError(CalculationError):
    """A formula was evaluated outside its mathematical domain."""


class DidNotConverge(CalculationError):
    """An iterative solver could not make progress toward a root."""


class InvalidRange(CalculationError):
    """An input lies outside the range a formula is defined for."""
