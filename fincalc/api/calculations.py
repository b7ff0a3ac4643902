"""
Financial calculation API endpoints.

These endpoints accept already-parsed inputs and return calculated results.
Field defaults match the defaults shown on each calculator page. Inputs the
engine cannot compute come back as 400 with the reason in ``detail``.
"""

from dataclasses import asdict
from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

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
from fincalc.calculations.models import COMPOUNDING_BY_NAME, Continuous, Timing

router = APIRouter()

CompoundingName = Literal[
    "annually",
    "semiannually",
    "quarterly",
    "monthly",
    "semimonthly",
    "biweekly",
    "weekly",
    "daily",
    "continuously",
]


def _schedule_rows(schedule) -> List[dict]:
    return [asdict(row) for row in schedule]


# Credit card payoff


class PayoffInput(BaseModel):
    """Input for paying off a balance with a fixed monthly payment."""

    balance: float = 5000
    annual_rate: float = 18.5
    monthly_payment: float = 150
    start_date: Optional[date] = None


class TermPayoffInput(BaseModel):
    """Input for paying off a balance within a set timeframe."""

    balance: float = 5000
    annual_rate: float = 18.5
    payoff_years: int = 3
    payoff_months: int = 0
    start_date: Optional[date] = None


class PayoffResponse(BaseModel):
    """Response with payoff totals."""

    months_to_payoff: int
    years_to_payoff: float
    monthly_payment: float
    minimum_payment: float
    total_interest: float
    total_paid: float
    payoff_date: date
    schedule: List[dict]


def _payoff_response(result, balance: float, annual_rate: float, start: Optional[date]) -> PayoffResponse:
    return PayoffResponse(
        months_to_payoff=result.months_to_payoff,
        years_to_payoff=result.years_to_payoff,
        monthly_payment=result.monthly_payment,
        minimum_payment=amortization.minimum_payment(balance, annual_rate),
        total_interest=result.total_interest,
        total_paid=result.total_paid,
        payoff_date=amortization.payoff_date(result.months_to_payoff, start),
        schedule=_schedule_rows(result.schedule),
    )


@router.post("/credit-card/payoff", response_model=PayoffResponse)
async def calculate_payoff(inputs: PayoffInput):
    """
    Months and interest to clear a balance at a fixed payment.

    Payments below the card minimum (1% of the balance plus a month of
    interest, at least $15) are rejected before simulating.
    """
    try:
        floor = amortization.minimum_payment(inputs.balance, inputs.annual_rate)
        if inputs.monthly_payment < floor:
            raise HTTPException(
                status_code=400,
                detail=(
                    f"Payment is below the minimum of {floor:.2f} "
                    "(1% of the balance plus interest)"
                ),
            )
        result = amortization.simulate_payoff(
            inputs.balance, inputs.annual_rate, inputs.monthly_payment
        )
        return _payoff_response(result, inputs.balance, inputs.annual_rate, inputs.start_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/credit-card/required-payment", response_model=PayoffResponse)
async def calculate_required_payment(inputs: TermPayoffInput):
    """Monthly payment needed to clear a balance within a timeframe."""
    total_months = inputs.payoff_years * 12 + inputs.payoff_months
    try:
        result = amortization.payoff_over_term(inputs.balance, inputs.annual_rate, total_months)
        return _payoff_response(result, inputs.balance, inputs.annual_rate, inputs.start_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# Debt consolidation


class DebtInput(BaseModel):
    name: str = ""
    balance: float
    monthly_payment: float
    interest_rate: float


class ConsolidationInput(BaseModel):
    """Input for comparing current debts with a consolidation loan."""

    debts: List[DebtInput] = Field(
        default_factory=lambda: [
            DebtInput(name="Credit Card 1", balance=8000, monthly_payment=200, interest_rate=18.99),
            DebtInput(name="Credit Card 2", balance=5000, monthly_payment=150, interest_rate=21.99),
            DebtInput(name="Personal Loan", balance=12000, monthly_payment=350, interest_rate=14.5),
        ]
    )
    loan_amount: float = 25000
    loan_interest_rate: float = 9.5
    loan_term_years: int = 5
    loan_term_months: int = 0
    loan_fee: float = 3.0
    fee_is_percent: bool = True


@router.post("/debt-consolidation")
async def calculate_consolidation(inputs: ConsolidationInput):
    """Compare current debts against a single consolidation loan."""
    debts = [
        consolidation.Debt(
            balance=d.balance,
            monthly_payment=d.monthly_payment,
            annual_rate_pct=d.interest_rate,
            name=d.name,
        )
        for d in inputs.debts
    ]
    try:
        result = consolidation.compare_consolidation(
            debts,
            loan_amount=inputs.loan_amount,
            loan_rate_pct=inputs.loan_interest_rate,
            term_months=inputs.loan_term_years * 12 + inputs.loan_term_months,
            loan_fee=inputs.loan_fee,
            fee_is_percent=inputs.fee_is_percent,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return asdict(result)


# Compound interest and investment growth


class CompoundInterestInput(BaseModel):
    """Input for the compound interest calculator."""

    principal: float = 10000
    monthly_contribution: float = 200
    annual_rate: float = 5
    years: float = 10
    compounding: CompoundingName = "monthly"
    contributions_per_year: int = Field(default=12, gt=0)


class GrowthResponse(BaseModel):
    """Response with a growth projection."""

    future_value: float
    total_principal: float
    total_contributions: float
    total_interest: float
    effective_annual_rate: float
    doubling_time: Optional[float] = None
    rule_of_72: Optional[float] = None
    yearly_schedule: List[dict]


def _schedule_frequency(compounding) -> int:
    # Continuous growth is tabulated monthly
    if isinstance(compounding, Continuous):
        return 12
    return compounding.periods_per_year


@router.post("/compound-interest", response_model=GrowthResponse)
async def calculate_compound_interest(inputs: CompoundInterestInput):
    """Grow a principal with regular contributions."""
    compounding = COMPOUNDING_BY_NAME[inputs.compounding]
    periods_per_year = _schedule_frequency(compounding)
    per_period = inputs.monthly_contribution * inputs.contributions_per_year / periods_per_year

    try:
        projection = growth.project_growth(
            principal=inputs.principal,
            contribution_per_period=per_period,
            annual_rate_pct=inputs.annual_rate,
            periods_per_year=periods_per_year,
            total_years=inputs.years,
            timing=Timing.BEGINNING,
            compounding=compounding,
        )
        future_value = projection.ending_balance
        total_contributions = projection.total_contributions
        total_interest = projection.total_interest
        if isinstance(compounding, Continuous):
            # Totals come from the closed form; the schedule only feeds the yearly table
            annual_contribution = inputs.monthly_contribution * inputs.contributions_per_year
            future_value = growth.continuous_future_value(
                inputs.principal, annual_contribution, inputs.annual_rate, inputs.years
            )
            total_contributions = annual_contribution * inputs.years
            total_interest = future_value - inputs.principal - total_contributions
        effective_rate = growth.effective_annual_rate(inputs.annual_rate, compounding)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    doubling = rule = None
    if inputs.annual_rate > 0:
        doubling = growth.doubling_time(inputs.annual_rate, compounding)
        rule = growth.rule_of_72(inputs.annual_rate)

    return GrowthResponse(
        future_value=future_value,
        total_principal=inputs.principal,
        total_contributions=total_contributions,
        total_interest=total_interest,
        effective_annual_rate=effective_rate,
        doubling_time=doubling,
        rule_of_72=rule,
        yearly_schedule=_schedule_rows(
            growth.summarize_by_year(projection.schedule, periods_per_year, inputs.principal)
        ),
    )


class InvestmentInput(BaseModel):
    """Input for the investment calculator."""

    starting_amount: float = 20000
    contribution: float = 1000
    contribution_frequency: Literal["monthly", "annually"] = "monthly"
    years: float = 10
    return_rate: float = 6
    compounding: CompoundingName = "annually"
    contribution_timing: Timing = Timing.END


@router.post("/investment", response_model=GrowthResponse)
async def calculate_investment(inputs: InvestmentInput):
    """Project an investment with periodic contributions."""
    compounding = COMPOUNDING_BY_NAME[inputs.compounding]
    periods_per_year = _schedule_frequency(compounding)
    per_year = 12 if inputs.contribution_frequency == "monthly" else 1
    per_period = inputs.contribution * per_year / periods_per_year

    try:
        projection = growth.project_growth(
            principal=inputs.starting_amount,
            contribution_per_period=per_period,
            annual_rate_pct=inputs.return_rate,
            periods_per_year=periods_per_year,
            total_years=inputs.years,
            timing=inputs.contribution_timing,
            compounding=compounding,
        )
        effective_rate = growth.effective_annual_rate(inputs.return_rate, compounding)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return GrowthResponse(
        future_value=projection.ending_balance,
        total_principal=inputs.starting_amount,
        total_contributions=projection.total_contributions,
        total_interest=projection.total_interest,
        effective_annual_rate=effective_rate,
        yearly_schedule=_schedule_rows(
            growth.summarize_by_year(projection.schedule, periods_per_year, inputs.starting_amount)
        ),
    )


# Savings products


class CDInput(BaseModel):
    """Input for the CD calculator."""

    initial_deposit: float = 10000
    interest_rate: float = 4.89
    deposit_years: int = 3
    deposit_months: int = 0
    compounding: CompoundingName = "monthly"
    marginal_tax_rate: float = 0


@router.post("/cd")
async def calculate_cd(inputs: CDInput):
    """Value of a CD at maturity."""
    try:
        result = savings.project_cd(
            deposit=inputs.initial_deposit,
            annual_rate_pct=inputs.interest_rate,
            total_months=inputs.deposit_years * 12 + inputs.deposit_months,
            compounding=COMPOUNDING_BY_NAME[inputs.compounding],
            marginal_tax_rate_pct=inputs.marginal_tax_rate,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return asdict(result)


class RothIRAInput(BaseModel):
    """Input for the Roth IRA calculator."""

    current_balance: float = 0
    annual_contribution: float = 7000
    expected_return: float = 8
    current_age: int = 30
    retirement_age: int = 65
    marginal_tax_rate: float = 22
    maximize_contributions: bool = False


@router.post("/roth-ira")
async def calculate_roth_ira(inputs: RothIRAInput):
    """Compare a Roth IRA with a taxable account."""
    if inputs.current_age >= inputs.retirement_age:
        raise HTTPException(
            status_code=400, detail="Retirement age must be after current age"
        )

    contribution = inputs.annual_contribution
    if inputs.maximize_contributions:
        contribution = savings.roth_contribution_limit(inputs.current_age)

    try:
        result = savings.compare_roth_vs_taxable(
            current_balance=inputs.current_balance,
            annual_contribution=contribution,
            annual_return_pct=inputs.expected_return,
            years=inputs.retirement_age - inputs.current_age,
            marginal_tax_rate_pct=inputs.marginal_tax_rate,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {**asdict(result), "annual_contribution": contribution}


# Time value of money


class TVMInput(BaseModel):
    """Input for the finance (TVM) calculator. The target field is ignored."""

    target: tvm.TVMTarget = tvm.TVMTarget.FV
    n: Optional[float] = 120
    iy: Optional[float] = 6
    pv: Optional[float] = 100000
    pmt: Optional[float] = 500
    fv: Optional[float] = 0
    payments_per_year: int = Field(default=12, gt=0)
    compounds_per_year: int = Field(default=12, gt=0)
    timing: Timing = Timing.END


@router.post("/tvm")
async def calculate_tvm(inputs: TVMInput):
    """Solve for the missing one of N, I/Y, PV, PMT and FV."""
    known = tvm.TVMInputs(
        n=inputs.n,
        iy=inputs.iy,
        pv=inputs.pv,
        pmt=inputs.pmt,
        fv=inputs.fv,
        payments_per_year=inputs.payments_per_year,
        compounds_per_year=inputs.compounds_per_year,
    )
    try:
        result = tvm.solve(known, inputs.target, inputs.timing)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return asdict(result)


# Commission


class TierInput(BaseModel):
    rate: float
    max: Optional[float] = None


class CommissionInput(BaseModel):
    """Input for the commission calculator."""

    sales: float = 50000
    commission_rate: float = 5
    tiers: Optional[List[TierInput]] = None
    has_base_salary: bool = False
    base_salary: float = 30000


@router.post("/commission")
async def calculate_commission(inputs: CommissionInput):
    """Commission and total compensation."""
    tiers = None
    if inputs.tiers:
        tiers = [commission.Tier(rate=t.rate, max=t.max) for t in inputs.tiers]
    try:
        result = commission.calculate_commission(
            inputs.sales,
            rate_pct=inputs.commission_rate,
            tiers=tiers,
            base_salary=inputs.base_salary if inputs.has_base_salary else 0,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return asdict(result)


# Kelly criterion


class KellyInput(BaseModel):
    """Input for the prediction market Kelly calculator."""

    bankroll: float = 10000
    market_price: float = 0.60
    true_probability: float = 0.70


@router.post("/kelly")
async def calculate_kelly(inputs: KellyInput):
    """Optimal position size for a binary market."""
    try:
        result = kelly.kelly(inputs.bankroll, inputs.market_price, inputs.true_probability)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return asdict(result)


# Sales tax


class SalesTaxInput(BaseModel):
    """Input for the sales tax calculator."""

    mode: Literal["add_tax", "remove_tax", "find_rate"] = "add_tax"
    before_tax: float = 100
    tax_rate: float = 7.5
    after_tax: float = 0


@router.post("/sales-tax")
async def calculate_sales_tax(inputs: SalesTaxInput):
    """Add tax, remove tax, or find the rate."""
    try:
        if inputs.mode == "add_tax":
            result = sales_tax.add_tax(inputs.before_tax, inputs.tax_rate)
        elif inputs.mode == "remove_tax":
            result = sales_tax.remove_tax(inputs.after_tax, inputs.tax_rate)
        else:
            result = sales_tax.find_rate(inputs.before_tax, inputs.after_tax)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return asdict(result)
