"""Schedule routes: the primary API entry point."""

from fastapi import APIRouter, HTTPException

from morty.api.schemas import (
    AmortizationEntryResponse,
    LoanParametersSchema,
    MonthlyPaymentResponse,
    ScheduleResponse,
    TotalsResponse,
    YearlySummaryResponse,
    money,
)
from morty.data.url_state import encode_params
from morty.engine.debt import yearly_breakdown
from morty.engine.loan import financed_amount
from morty.engine.mortgage import compute_schedule
from morty.engine.validation import validate_parameters
from morty.models.loan import LoanParameters

router = APIRouter(prefix="/api/v1", tags=["schedule"])


def build_schedule_response(params: LoanParameters) -> ScheduleResponse:
    """Run the engine and convert its result to the API response."""
    try:
        validate_parameters(params)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = compute_schedule(params)

    schedule = [
        AmortizationEntryResponse(
            period=e.period,
            date=e.date,
            payment=money(e.payment),
            interest=money(e.interest),
            principal=money(e.principal),
            extra_principal=money(e.extra_principal),
            mortgage_insurance=money(e.mortgage_insurance),
            balance=money(e.balance),
            cumulative_interest=money(e.cumulative_interest),
            cumulative_principal=money(e.cumulative_principal),
            ltv=money(e.ltv),
        )
        for e in result.schedule
    ]

    yearly = [
        YearlySummaryResponse(
            year=y["year"],
            principal=money(y["principal"]),
            interest=money(y["interest"]),
            mortgage_insurance=money(y["mortgage_insurance"]),
            ending_balance=money(y["ending_balance"]),
        )
        for y in yearly_breakdown(result.schedule)
    ]

    t = result.totals
    totals = TotalsResponse(
        principal=money(t.principal),
        interest=money(t.interest),
        mortgage_insurance=money(t.mortgage_insurance),
        taxes=money(t.taxes),
        insurance=money(t.insurance),
        hoa=money(t.hoa),
        months_to_payoff=t.months_to_payoff,
        total_cost=money(t.total_cost),
        interest_savings=money(t.interest_savings),
    )

    return ScheduleResponse(
        loan_amount=money(financed_amount(params)),
        monthly_payment=MonthlyPaymentResponse(
            mortgage_only=money(result.monthly_payment.mortgage_only),
            with_escrow=money(result.monthly_payment.with_escrow),
        ),
        totals=totals,
        payoff_date=result.payoff_date,
        pmi_stop_period=result.pmi_stop_period,
        schedule=schedule,
        yearly=yearly,
        share_query=encode_params(params),
    )


@router.post("/schedule", response_model=ScheduleResponse)
async def calculate_schedule(req: LoanParametersSchema):
    """Loan parameters -> amortization schedule, totals and payoff date."""
    return build_schedule_response(req.to_params())
