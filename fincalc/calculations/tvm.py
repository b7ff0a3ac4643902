"""
Time Value of Money Solver

Financial-calculator style solver: given four of N, I/Y, PV, PMT and FV,
solve for the fifth. Cash flows follow the usual sign convention (money paid
out is negative, money received is positive), so every solution satisfies

    PV * (1 + r)^N + PMT * adj * ((1 + r)^N - 1) / r + FV = 0

where r is the periodic rate and adj is (1 + r) for payments at the
beginning of each period, 1 otherwise.
"""

import enum
import logging
import math
from dataclasses import dataclass
from typing import Optional

from fincalc.calculations.errors import DidNotConverge, DomainError, InvalidRange
from fincalc.calculations.models import Timing

logger = logging.getLogger(__name__)

MAX_NEWTON_ITERATIONS = 100
NEWTON_TOLERANCE = 1e-6
NEWTON_DELTA = 1e-5
DEFAULT_RATE_GUESS = 0.05


class TVMTarget(str, enum.Enum):
    """The unknown to solve for."""

    FV = "FV"
    PV = "PV"
    PMT = "PMT"
    N = "N"
    IY = "IY"


@dataclass(frozen=True)
class TVMInputs:
    """Known values. The field matching the target is ignored."""

    n: Optional[float] = None
    iy: Optional[float] = None  # annual rate as a percentage
    pv: Optional[float] = None
    pmt: Optional[float] = None
    fv: Optional[float] = None
    payments_per_year: int = 12
    compounds_per_year: int = 12


@dataclass(frozen=True)
class RateSolution:
    """Periodic rate found by Newton-Raphson."""

    rate: float
    iterations: int
    converged: bool


@dataclass(frozen=True)
class TVMResult:
    """The solved value together with the completed set of five values."""

    target: TVMTarget
    value: float
    n: float
    iy: float
    pv: float
    pmt: float
    fv: float
    total_payments: float
    total_interest: float
    converged: bool = True
    iterations: int = 0


def periodic_rate(annual_rate_pct: float, payments_per_year: int, compounds_per_year: int) -> float:
    """Convert an annual I/Y into the rate per payment period."""
    if payments_per_year <= 0 or compounds_per_year <= 0:
        raise InvalidRange("payments and compounds per year must be positive")
    nominal = annual_rate_pct / 100
    if payments_per_year == compounds_per_year:
        rate = nominal / payments_per_year
    else:
        rate = (1 + nominal / compounds_per_year) ** (compounds_per_year / payments_per_year) - 1
    if rate <= -1:
        raise InvalidRange("Rate must be greater than -100% per period")
    return rate


def annual_rate(rate: float, payments_per_year: int, compounds_per_year: int) -> float:
    """Inverse of :func:`periodic_rate`, as a percentage."""
    if payments_per_year == compounds_per_year:
        return rate * payments_per_year * 100
    return compounds_per_year * ((1 + rate) ** (payments_per_year / compounds_per_year) - 1) * 100


def _adjustment(rate: float, timing: Timing) -> float:
    return 1 + rate if timing == Timing.BEGINNING else 1.0


def _annuity_factor(rate: float, n: float) -> float:
    if rate == 0:
        return n
    return ((1 + rate) ** n - 1) / rate


def future_value(n: float, rate: float, pv: float, pmt: float, timing: Timing = Timing.END) -> float:
    """FV for a periodic rate."""
    return -(pv * (1 + rate) ** n + pmt * _adjustment(rate, timing) * _annuity_factor(rate, n))


def present_value(n: float, rate: float, pmt: float, fv: float, timing: Timing = Timing.END) -> float:
    """PV for a periodic rate."""
    annuity = pmt * _adjustment(rate, timing) * _annuity_factor(rate, n)
    return -(fv + annuity) / (1 + rate) ** n


def payment(n: float, rate: float, pv: float, fv: float, timing: Timing = Timing.END) -> float:
    """
    PMT for a periodic rate.

    Raises:
        InvalidRange: If ``n`` is not positive
    """
    if n <= 0:
        raise InvalidRange("Number of periods must be positive")
    growth = (1 + rate) ** n
    return -(fv + pv * growth) / (_adjustment(rate, timing) * _annuity_factor(rate, n))


def number_of_periods(rate: float, pv: float, pmt: float, fv: float, timing: Timing = Timing.END) -> float:
    """
    Solve N by logarithms.

    N = ln[(PMT' - FV * r) / (PMT' + PV * r)] / ln(1 + r), with PMT' the
    timing-adjusted payment. At a zero rate N = -(PV + FV) / PMT'.

    Raises:
        DomainError: If the cash flows can never balance (the logarithm's
            argument is not positive, or there is no payment at a zero rate)
    """
    adjusted = pmt * _adjustment(rate, timing)

    if rate == 0:
        if adjusted == 0:
            raise DomainError("No payment to solve N with at a zero rate")
        return -(pv + fv) / adjusted

    numerator = adjusted - fv * rate
    denominator = adjusted + pv * rate
    if denominator == 0 or numerator / denominator <= 0:
        raise DomainError(
            "PV, PMT and FV cannot balance at this rate; check their signs"
        )
    return math.log(numerator / denominator) / math.log(1 + rate)


def interest_rate(
    n: float,
    pv: float,
    pmt: float,
    fv: float,
    timing: Timing = Timing.END,
    guess: float = DEFAULT_RATE_GUESS,
    tolerance: float = NEWTON_TOLERANCE,
    max_iterations: int = MAX_NEWTON_ITERATIONS,
) -> RateSolution:
    """
    Solve the periodic rate with Newton-Raphson.

    Each step evaluates FV at the current guess, compares it with the target
    FV, and moves the guess by error / derivative, where the derivative is a
    forward difference over ``NEWTON_DELTA``. Running out of iterations is not
    an error: the last guess comes back with ``converged=False``.

    Args:
        n: Number of periods
        pv: Present value
        pmt: Payment per period
        fv: Target future value
        timing: Payment timing
        guess: Starting periodic rate
        tolerance: Largest acceptable FV error
        max_iterations: Iteration cap

    Returns:
        RateSolution

    Raises:
        InvalidRange: If ``n`` is not positive
        DidNotConverge: If the iteration breaks down (flat derivative, rate at
            or below -100%, or overflow)
    """
    if n <= 0:
        raise InvalidRange("Number of periods must be positive")

    rate = guess
    for iteration in range(max_iterations):
        if rate <= -1:
            raise DidNotConverge(f"Rate guess fell to {rate:.4f} after {iteration} steps")
        try:
            calculated = future_value(n, rate, pv, pmt, timing)
            error = calculated - fv
            if abs(error) < tolerance:
                logger.debug("Rate %.8f found after %d iterations", rate, iteration)
                return RateSolution(rate=rate, iterations=iteration, converged=True)

            shifted = future_value(n, rate + NEWTON_DELTA, pv, pmt, timing)
        except OverflowError as exc:
            raise DidNotConverge(f"Rate guess {rate:.4f} overflowed") from exc

        derivative = (shifted - calculated) / NEWTON_DELTA
        if derivative == 0 or not math.isfinite(derivative):
            raise DidNotConverge("Derivative vanished; no rate solves these values")
        rate -= error / derivative

    logger.warning(
        "Rate solver stopped after %d iterations without meeting tolerance", max_iterations
    )
    return RateSolution(rate=rate, iterations=max_iterations, converged=False)


def _require(inputs: TVMInputs, target: TVMTarget) -> None:
    missing = [
        name
        for name in ("n", "iy", "pv", "pmt", "fv")
        if name != target.value.lower() and getattr(inputs, name) is None
    ]
    if missing:
        raise InvalidRange(f"Missing values for {', '.join(missing)}")


def solve(inputs: TVMInputs, target: TVMTarget, timing: Timing = Timing.END) -> TVMResult:
    """
    Solve for ``target`` from the other four values.

    Args:
        inputs: Known values; I/Y is an annual percentage
        target: Value to solve for
        timing: Payments at the beginning or end of each period

    Returns:
        TVMResult with all five values filled in

    Raises:
        InvalidRange: If a known value is missing or out of range
        DomainError: If N has no solution, or the result overflows
        DidNotConverge: If the rate iteration breaks down
    """
    target = TVMTarget(target)
    _require(inputs, target)
    py, cy = inputs.payments_per_year, inputs.compounds_per_year

    n, pv, pmt, fv = inputs.n, inputs.pv, inputs.pmt, inputs.fv
    converged, iterations = True, 0

    if target == TVMTarget.IY:
        solution = interest_rate(n, pv, pmt, fv, timing)
        rate = solution.rate
        converged, iterations = solution.converged, solution.iterations
        iy = annual_rate(rate, py, cy)
        value = iy
    else:
        iy = inputs.iy
        try:
            rate = periodic_rate(iy, py, cy)
            if target == TVMTarget.FV:
                fv = value = future_value(n, rate, pv, pmt, timing)
            elif target == TVMTarget.PV:
                pv = value = present_value(n, rate, pmt, fv, timing)
            elif target == TVMTarget.PMT:
                pmt = value = payment(n, rate, pv, fv, timing)
            else:
                n = value = number_of_periods(rate, pv, pmt, fv, timing)
        except OverflowError as exc:
            raise DomainError(
                f"Growth over {n} periods overflows; cannot solve {target.value}"
            ) from exc
        if not math.isfinite(value):
            raise DomainError(f"{target.value} is too large to represent")

    return TVMResult(
        target=target,
        value=value,
        n=n,
        iy=iy,
        pv=pv,
        pmt=pmt,
        fv=fv,
        total_payments=abs(pmt) * n,
        total_interest=abs(fv + pv + pmt * n),
        converged=converged,
        iterations=iterations,
    )
