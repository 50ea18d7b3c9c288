"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, Field

from morty.config import settings
from morty.models.loan import (
    DownPaymentAmount,
    DownPaymentPercent,
    ExtraPayments,
    FixedMonthlyInsurance,
    LoanParameters,
    MAX_TERM_MONTHS,
    MortgageInsurance,
    NoInsurance,
    OneTimeExtra,
    RateBasedInsurance,
)

TWO_PLACES = Decimal("0.01")

NonNegative = Annotated[Decimal, Field(ge=0)]


def money(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, ROUND_HALF_UP)


def _first_of_month() -> date:
    return date.today().replace(day=1)


# ---- Loan parameters (request + round-trip) ----

class DownPaymentAmountSchema(BaseModel):
    kind: Literal["amount"] = "amount"
    value: NonNegative


class DownPaymentPercentSchema(BaseModel):
    kind: Literal["percent"] = "percent"
    value: Annotated[Decimal, Field(ge=0, le=100)]


DownPayment = Annotated[
    DownPaymentAmountSchema | DownPaymentPercentSchema, Field(discriminator="kind")
]


class MortgageInsuranceSchema(BaseModel):
    mode: Literal["rate", "fixed", "none"] = "none"
    annual_rate_percent: NonNegative | None = Field(None, description="Used when mode is 'rate'")
    monthly_amount: NonNegative | None = Field(None, description="Used when mode is 'fixed'")
    cancel_at_ltv_percent: NonNegative = settings.default_pmi_cancel_ltv_percent


class OneTimeExtraSchema(BaseModel):
    year_month: date = Field(..., description="Any day within the target month")
    amount: NonNegative


class ExtraPaymentsSchema(BaseModel):
    monthly: NonNegative = Decimal("0")
    annual_month: int = Field(12, ge=1, le=12)
    annual_amount: NonNegative = Decimal("0")
    one_time: list[OneTimeExtraSchema] = Field(default_factory=list)


class LoanParametersSchema(BaseModel):
    price: NonNegative
    down_payment: DownPayment | None = None
    term_months: int = Field(settings.default_term_years * 12, ge=0, le=MAX_TERM_MONTHS)
    annual_rate_percent: NonNegative = Decimal("0")
    start: date = Field(default_factory=_first_of_month)
    annual_taxes: NonNegative = Decimal("0")
    annual_insurance: NonNegative = Decimal("0")
    monthly_hoa: NonNegative = Decimal("0")
    include_escrow: bool = False
    mortgage_insurance: MortgageInsuranceSchema = Field(default_factory=MortgageInsuranceSchema)
    extra_payments: ExtraPaymentsSchema = Field(default_factory=ExtraPaymentsSchema)
    currency: str = settings.default_currency
    locale: str = settings.default_locale

    def to_params(self) -> LoanParameters:
        dp = self.down_payment
        if isinstance(dp, DownPaymentAmountSchema):
            down_payment = DownPaymentAmount(dp.value)
        elif isinstance(dp, DownPaymentPercentSchema):
            down_payment = DownPaymentPercent(dp.value)
        else:
            down_payment = None

        mi = self.mortgage_insurance
        if mi.mode == "rate":
            mode = RateBasedInsurance(mi.annual_rate_percent or Decimal("0"))
        elif mi.mode == "fixed":
            mode = FixedMonthlyInsurance(mi.monthly_amount or Decimal("0"))
        else:
            mode = NoInsurance()

        ex = self.extra_payments
        return LoanParameters(
            price=self.price,
            down_payment=down_payment,
            term_months=self.term_months,
            annual_rate_percent=self.annual_rate_percent,
            start=self.start,
            annual_taxes=self.annual_taxes,
            annual_insurance=self.annual_insurance,
            monthly_hoa=self.monthly_hoa,
            include_escrow=self.include_escrow,
            mortgage_insurance=MortgageInsurance(
                mode=mode, cancel_at_ltv_percent=mi.cancel_at_ltv_percent
            ),
            extra_payments=ExtraPayments(
                monthly=ex.monthly,
                annual_month=ex.annual_month,
                annual_amount=ex.annual_amount,
                one_time=tuple(OneTimeExtra(e.year_month, e.amount) for e in ex.one_time),
            ),
            currency=self.currency,
            locale=self.locale,
        )

    @classmethod
    def from_params(cls, params: LoanParameters) -> "LoanParametersSchema":
        dp = params.down_payment
        if isinstance(dp, DownPaymentAmount):
            down_payment = DownPaymentAmountSchema(value=dp.amount)
        elif isinstance(dp, DownPaymentPercent):
            down_payment = DownPaymentPercentSchema(value=dp.percent)
        else:
            down_payment = None

        mi = params.mortgage_insurance
        if isinstance(mi.mode, RateBasedInsurance):
            insurance = MortgageInsuranceSchema(
                mode="rate", annual_rate_percent=mi.mode.annual_rate_percent,
                cancel_at_ltv_percent=mi.cancel_at_ltv_percent,
            )
        elif isinstance(mi.mode, FixedMonthlyInsurance):
            insurance = MortgageInsuranceSchema(
                mode="fixed", monthly_amount=mi.mode.monthly_amount,
                cancel_at_ltv_percent=mi.cancel_at_ltv_percent,
            )
        else:
            insurance = MortgageInsuranceSchema(cancel_at_ltv_percent=mi.cancel_at_ltv_percent)

        ex = params.extra_payments
        return cls(
            price=params.price,
            down_payment=down_payment,
            term_months=params.term_months,
            annual_rate_percent=params.annual_rate_percent,
            start=params.start,
            annual_taxes=params.annual_taxes,
            annual_insurance=params.annual_insurance,
            monthly_hoa=params.monthly_hoa,
            include_escrow=params.include_escrow,
            mortgage_insurance=insurance,
            extra_payments=ExtraPaymentsSchema(
                monthly=ex.monthly,
                annual_month=ex.annual_month,
                annual_amount=ex.annual_amount,
                one_time=[
                    OneTimeExtraSchema(year_month=e.year_month, amount=e.amount)
                    for e in ex.one_time
                ],
            ),
            currency=params.currency,
            locale=params.locale,
        )


class ShareDecodeRequest(BaseModel):
    query: str = Field(..., description="Query string or full share URL")


class ScenarioCreate(BaseModel):
    params: LoanParametersSchema
    title: str = ""
    address: str = ""
    notes: str = ""
    image_url: str = ""
    listing_url: str = ""


class ScenarioUpdate(BaseModel):
    params: LoanParametersSchema
    title: str | None = None
    address: str | None = None
    notes: str | None = None
    image_url: str | None = None
    listing_url: str | None = None


# ---- Response schemas ----

class AmortizationEntryResponse(BaseModel):
    period: int
    date: date
    payment: Decimal
    interest: Decimal
    principal: Decimal
    extra_principal: Decimal
    mortgage_insurance: Decimal
    balance: Decimal
    cumulative_interest: Decimal
    cumulative_principal: Decimal
    ltv: Decimal


class TotalsResponse(BaseModel):
    principal: Decimal
    interest: Decimal
    mortgage_insurance: Decimal
    taxes: Decimal
    insurance: Decimal
    hoa: Decimal
    months_to_payoff: int
    total_cost: Decimal
    interest_savings: Decimal


class MonthlyPaymentResponse(BaseModel):
    mortgage_only: Decimal
    with_escrow: Decimal


class YearlySummaryResponse(BaseModel):
    year: int
    principal: Decimal
    interest: Decimal
    mortgage_insurance: Decimal
    ending_balance: Decimal


class ScheduleResponse(BaseModel):
    loan_amount: Decimal
    monthly_payment: MonthlyPaymentResponse
    totals: TotalsResponse
    payoff_date: date
    pmi_stop_period: int | None = None
    schedule: list[AmortizationEntryResponse]
    yearly: list[YearlySummaryResponse]
    share_query: str


class ShareEncodeResponse(BaseModel):
    query: str


class ScenarioResponse(BaseModel):
    id: UUID
    saved_at: datetime
    title: str
    display_title: str
    address: str
    notes: str
    image_url: str
    listing_url: str
    params: LoanParametersSchema
