"""Input checks callers run before handing parameters to the engine.

The engine itself assumes finite inputs and clamps the rest.
"""

from decimal import Decimal

from morty.models.loan import (
    DownPaymentAmount,
    DownPaymentPercent,
    FixedMonthlyInsurance,
    LoanParameters,
    MAX_TERM_MONTHS,
    RateBasedInsurance,
)


def _check(problems: list[str], name: str, value: Decimal) -> None:
    if not value.is_finite():
        problems.append(f"{name} must be a finite number")
    elif value < 0:
        problems.append(f"{name} must not be negative")


def validate_parameters(params: LoanParameters) -> None:
    """Raise ValueError listing every non-finite, negative or out-of-range input."""
    problems: list[str] = []

    _check(problems, "price", params.price)
    _check(problems, "annual_rate_percent", params.annual_rate_percent)
    _check(problems, "annual_taxes", params.annual_taxes)
    _check(problems, "annual_insurance", params.annual_insurance)
    _check(problems, "monthly_hoa", params.monthly_hoa)
    if not 0 <= params.term_months <= MAX_TERM_MONTHS:
        problems.append(f"term_months must be between 0 and {MAX_TERM_MONTHS}")

    dp = params.down_payment
    if isinstance(dp, DownPaymentAmount):
        _check(problems, "down_payment.amount", dp.amount)
    elif isinstance(dp, DownPaymentPercent):
        _check(problems, "down_payment.percent", dp.percent)
        if dp.percent.is_finite() and dp.percent > 100:
            problems.append("down_payment.percent must not exceed 100")

    mi = params.mortgage_insurance
    _check(problems, "mortgage_insurance.cancel_at_ltv_percent", mi.cancel_at_ltv_percent)
    if isinstance(mi.mode, RateBasedInsurance):
        _check(problems, "mortgage_insurance.annual_rate_percent", mi.mode.annual_rate_percent)
    elif isinstance(mi.mode, FixedMonthlyInsurance):
        _check(problems, "mortgage_insurance.monthly_amount", mi.mode.monthly_amount)

    extras = params.extra_payments
    _check(problems, "extra_payments.monthly", extras.monthly)
    _check(problems, "extra_payments.annual_amount", extras.annual_amount)
    if not 1 <= extras.annual_month <= 12:
        problems.append("extra_payments.annual_month must be between 1 and 12")
    for i, extra in enumerate(extras.one_time):
        _check(problems, f"extra_payments.one_time[{i}].amount", extra.amount)

    if problems:
        raise ValueError("Invalid loan parameters: " + "; ".join(problems))
