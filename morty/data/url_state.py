"""Query-string form of LoanParameters for shareable links.

Flat keys for scalars, dotted keys for the annual extra pair and indexed keys
for one-time extras:

    price=450000&down_payment_percent=20&term_months=360&...
    &extra_annual.month=12&extra_annual.amount=5000
    &extra_one_time[0].year_month=2026-03&extra_one_time[0].amount=10000
"""

import logging
import re
from urllib.parse import parse_qsl, urlencode, urlsplit

from morty.data.serialization import format_year_month, parse_decimal, parse_year_month
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

logger = logging.getLogger(__name__)

_ONE_TIME_KEY = re.compile(r"^extra_one_time\[(\d+)\]\.(year_month|amount)$")


def encode_params(params: LoanParameters) -> str:
    pairs: list[tuple[str, str]] = [("price", str(params.price))]

    dp = params.down_payment
    if isinstance(dp, DownPaymentAmount):
        pairs.append(("down_payment_amount", str(dp.amount)))
    elif isinstance(dp, DownPaymentPercent):
        pairs.append(("down_payment_percent", str(dp.percent)))

    pairs += [
        ("term_months", str(params.term_months)),
        ("annual_rate_percent", str(params.annual_rate_percent)),
        ("start", format_year_month(params.start)),
        ("annual_taxes", str(params.annual_taxes)),
        ("annual_insurance", str(params.annual_insurance)),
        ("monthly_hoa", str(params.monthly_hoa)),
        ("include_escrow", "true" if params.include_escrow else "false"),
    ]

    mi = params.mortgage_insurance
    if isinstance(mi.mode, RateBasedInsurance):
        pairs += [("pmi_mode", "rate"), ("pmi_annual_rate_percent", str(mi.mode.annual_rate_percent))]
    elif isinstance(mi.mode, FixedMonthlyInsurance):
        pairs += [("pmi_mode", "fixed"), ("pmi_monthly_amount", str(mi.mode.monthly_amount))]
    else:
        pairs.append(("pmi_mode", "none"))
    pairs.append(("pmi_cancel_at_ltv_percent", str(mi.cancel_at_ltv_percent)))

    extras = params.extra_payments
    pairs += [
        ("extra_monthly", str(extras.monthly)),
        ("extra_annual.month", str(extras.annual_month)),
        ("extra_annual.amount", str(extras.annual_amount)),
    ]
    for i, extra in enumerate(extras.one_time):
        pairs.append((f"extra_one_time[{i}].year_month", format_year_month(extra.year_month)))
        pairs.append((f"extra_one_time[{i}].amount", str(extra.amount)))

    pairs += [("currency", params.currency), ("locale", params.locale)]
    return urlencode(pairs)


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("true", "1", "yes", "on"):
        return True
    if value in ("false", "0", "no", "off", ""):
        return False
    raise ValueError(f"Invalid boolean: {raw!r}")


def decode_params(query: str) -> LoanParameters:
    """Rebuild LoanParameters from a query string or a full share URL.

    Raises ValueError when required keys are missing or values don't parse.
    """
    if "?" in query:
        query = urlsplit(query).query

    values: dict[str, str] = {}
    one_time: dict[int, dict[str, str]] = {}
    for key, value in parse_qsl(query, keep_blank_values=True):
        match = _ONE_TIME_KEY.match(key)
        if match:
            one_time.setdefault(int(match.group(1)), {})[match.group(2)] = value
        else:
            values[key] = value

    if "price" not in values:
        raise ValueError("Share link is missing 'price'")

    if "down_payment_amount" in values and "down_payment_percent" in values:
        raise ValueError("Share link sets both down_payment_amount and down_payment_percent")
    down_payment = None
    if "down_payment_amount" in values:
        down_payment = DownPaymentAmount(parse_decimal(values["down_payment_amount"], "down_payment_amount"))
    elif "down_payment_percent" in values:
        down_payment = DownPaymentPercent(parse_decimal(values["down_payment_percent"], "down_payment_percent"))

    if "term_months" in values:
        term_months = int(values["term_months"])
    elif "term_years" in values:
        term_months = int(values["term_years"]) * 12
    else:
        term_months = 360

    pmi_mode = values.get("pmi_mode", "none")
    if pmi_mode == "rate":
        mode = RateBasedInsurance(parse_decimal(values.get("pmi_annual_rate_percent", "0"), "pmi_annual_rate_percent"))
    elif pmi_mode == "fixed":
        mode = FixedMonthlyInsurance(parse_decimal(values.get("pmi_monthly_amount", "0"), "pmi_monthly_amount"))
    elif pmi_mode == "none":
        mode = NoInsurance()
    else:
        raise ValueError(f"Unknown pmi_mode: {pmi_mode!r}")

    extras_one_time = []
    for index in sorted(one_time):
        item = one_time[index]
        if "year_month" not in item or "amount" not in item:
            raise ValueError(f"Incomplete one-time extra at index {index}")
        extras_one_time.append(OneTimeExtra(
            year_month=parse_year_month(item["year_month"]),
            amount=parse_decimal(item["amount"], f"extra_one_time[{index}].amount"),
        ))

    kwargs = {}
    if "start" in values:
        kwargs["start"] = parse_year_month(values["start"])

    params = LoanParameters(
        price=parse_decimal(values["price"], "price"),
        down_payment=down_payment,
        term_months=term_months,
        annual_rate_percent=parse_decimal(values.get("annual_rate_percent", "0"), "annual_rate_percent"),
        annual_taxes=parse_decimal(values.get("annual_taxes", "0"), "annual_taxes"),
        annual_insurance=parse_decimal(values.get("annual_insurance", "0"), "annual_insurance"),
        monthly_hoa=parse_decimal(values.get("monthly_hoa", "0"), "monthly_hoa"),
        include_escrow=_parse_bool(values.get("include_escrow", "false")),
        mortgage_insurance=MortgageInsurance(
            mode=mode,
            cancel_at_ltv_percent=parse_decimal(values.get("pmi_cancel_at_ltv_percent", "80"), "pmi_cancel_at_ltv_percent"),
        ),
        extra_payments=ExtraPayments(
            monthly=parse_decimal(values.get("extra_monthly", "0"), "extra_monthly"),
            annual_month=int(values.get("extra_annual.month", "12")),
            annual_amount=parse_decimal(values.get("extra_annual.amount", "0"), "extra_annual.amount"),
            one_time=tuple(extras_one_time),
        ),
        currency=values.get("currency", "USD"),
        locale=values.get("locale", "en-US"),
        **kwargs,
    )
    logger.debug("Decoded share link: %d one-time extras", len(extras_one_time))
    return params
