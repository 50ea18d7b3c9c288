"""JSON-safe dict form of LoanParameters.

Decimals travel as strings so nothing is lost to float rounding, and months
as "YYYY-MM".
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from morty.models.loan import (
    DownPaymentAmount,
    DownPaymentPercent,
    ExtraPayments,
    FixedMonthlyInsurance,
    LoanParameters,
    MortgageInsurance,
    NoInsurance,
    OneTimeExtra,
    RateBasedInsurance,
)


def format_year_month(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def parse_year_month(raw: str) -> date:
    """Parse "YYYY-MM" (a trailing "-DD" is tolerated and ignored)."""
    try:
        parts = str(raw).strip().split("-")
        return date(int(parts[0]), int(parts[1]), 1)
    except (IndexError, ValueError) as e:
        raise ValueError(f"Invalid year-month: {raw!r}") from e


def parse_decimal(raw: Any, name: str = "value") -> Decimal:
    try:
        return Decimal(str(raw).strip())
    except InvalidOperation as e:
        raise ValueError(f"Invalid number for {name}: {raw!r}") from e


def params_to_dict(params: LoanParameters) -> dict[str, Any]:
    dp = params.down_payment
    if isinstance(dp, DownPaymentAmount):
        down_payment = {"kind": "amount", "value": str(dp.amount)}
    elif isinstance(dp, DownPaymentPercent):
        down_payment = {"kind": "percent", "value": str(dp.percent)}
    else:
        down_payment = None

    mode = params.mortgage_insurance.mode
    if isinstance(mode, RateBasedInsurance):
        pmi = {"mode": "rate", "value": str(mode.annual_rate_percent)}
    elif isinstance(mode, FixedMonthlyInsurance):
        pmi = {"mode": "fixed", "value": str(mode.monthly_amount)}
    else:
        pmi = {"mode": "none"}
    pmi["cancel_at_ltv_percent"] = str(params.mortgage_insurance.cancel_at_ltv_percent)

    extras = params.extra_payments
    return {
        "price": str(params.price),
        "down_payment": down_payment,
        "term_months": params.term_months,
        "annual_rate_percent": str(params.annual_rate_percent),
        "start": format_year_month(params.start),
        "annual_taxes": str(params.annual_taxes),
        "annual_insurance": str(params.annual_insurance),
        "monthly_hoa": str(params.monthly_hoa),
        "include_escrow": params.include_escrow,
        "mortgage_insurance": pmi,
        "extra_payments": {
            "monthly": str(extras.monthly),
            "annual_month": extras.annual_month,
            "annual_amount": str(extras.annual_amount),
            "one_time": [
                {"year_month": format_year_month(e.year_month), "amount": str(e.amount)}
                for e in extras.one_time
            ],
        },
        "currency": params.currency,
        "locale": params.locale,
    }


def _down_payment_from_dict(data: dict | None):
    if not data:
        return None
    kind = data.get("kind")
    value = parse_decimal(data.get("value"), "down_payment")
    if kind == "amount":
        return DownPaymentAmount(value)
    if kind == "percent":
        return DownPaymentPercent(value)
    raise ValueError(f"Unknown down payment kind: {kind!r}")


def _insurance_from_dict(data: dict | None) -> MortgageInsurance:
    if not data:
        return MortgageInsurance()
    mode_name = data.get("mode", "none")
    if mode_name == "rate":
        mode = RateBasedInsurance(parse_decimal(data.get("value"), "mortgage_insurance"))
    elif mode_name == "fixed":
        mode = FixedMonthlyInsurance(parse_decimal(data.get("value"), "mortgage_insurance"))
    elif mode_name == "none":
        mode = NoInsurance()
    else:
        raise ValueError(f"Unknown mortgage insurance mode: {mode_name!r}")
    return MortgageInsurance(
        mode=mode,
        cancel_at_ltv_percent=parse_decimal(
            data.get("cancel_at_ltv_percent", "80"), "cancel_at_ltv_percent"
        ),
    )


def _extras_from_dict(data: dict | None) -> ExtraPayments:
    if not data:
        return ExtraPayments()
    return ExtraPayments(
        monthly=parse_decimal(data.get("monthly", "0"), "extra_payments.monthly"),
        annual_month=int(data.get("annual_month", 12)),
        annual_amount=parse_decimal(data.get("annual_amount", "0"), "extra_payments.annual_amount"),
        one_time=tuple(
            OneTimeExtra(
                year_month=parse_year_month(item["year_month"]),
                amount=parse_decimal(item["amount"], "extra_payments.one_time"),
            )
            for item in data.get("one_time", [])
        ),
    )


def params_from_dict(data: dict[str, Any]) -> LoanParameters:
    """Inverse of params_to_dict. Raises ValueError on malformed data."""
    try:
        return LoanParameters(
            price=parse_decimal(data["price"], "price"),
            down_payment=_down_payment_from_dict(data.get("down_payment")),
            term_months=int(data.get("term_months", 360)),
            annual_rate_percent=parse_decimal(data.get("annual_rate_percent", "0"), "annual_rate_percent"),
            start=parse_year_month(data["start"]),
            annual_taxes=parse_decimal(data.get("annual_taxes", "0"), "annual_taxes"),
            annual_insurance=parse_decimal(data.get("annual_insurance", "0"), "annual_insurance"),
            monthly_hoa=parse_decimal(data.get("monthly_hoa", "0"), "monthly_hoa"),
            include_escrow=bool(data.get("include_escrow", False)),
            mortgage_insurance=_insurance_from_dict(data.get("mortgage_insurance")),
            extra_payments=_extras_from_dict(data.get("extra_payments")),
            currency=data.get("currency", "USD"),
            locale=data.get("locale", "en-US"),
        )
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed loan parameters: {e}") from e
