"""
Shared value types for the calculators.
"""

import enum
from dataclasses import dataclass
from typing import Union

from fincalc.calculations.errors import InvalidRange


class Timing(str, enum.Enum):
    """When in each period a payment or contribution lands."""

    BEGINNING = "beginning"
    END = "end"


@dataclass(frozen=True)
class Discrete:
    """Interest compounded a fixed number of times per year."""

    periods_per_year: int

    def __post_init__(self):
        if self.periods_per_year <= 0:
            raise InvalidRange("periods_per_year must be positive")


@dataclass(frozen=True)
class Continuous:
    """Interest compounded continuously."""


Compounding = Union[Discrete, Continuous]

ANNUALLY = Discrete(1)
SEMIANNUALLY = Discrete(2)
QUARTERLY = Discrete(4)
MONTHLY = Discrete(12)
SEMIMONTHLY = Discrete(24)
BIWEEKLY = Discrete(26)
WEEKLY = Discrete(52)
DAILY = Discrete(365)
CONTINUOUSLY = Continuous()

COMPOUNDING_BY_NAME = {
    "annually": ANNUALLY,
    "semiannually": SEMIANNUALLY,
    "quarterly": QUARTERLY,
    "monthly": MONTHLY,
    "semimonthly": SEMIMONTHLY,
    "biweekly": BIWEEKLY,
    "weekly": WEEKLY,
    "daily": DAILY,
    "continuously": CONTINUOUSLY,
}


@dataclass(frozen=True)
class ScheduleEntry:
    """One payment or compounding period."""

    period: int
    contribution: float  # payment made or deposit added this period
    interest: float
    ending_balance: float


@dataclass(frozen=True)
class YearSummary:
    """Totals for one year of a schedule."""

    year: int
    starting_balance: float
    contributions: float
    interest: float
    ending_balance: float
