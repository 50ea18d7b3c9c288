"""Private mortgage insurance accrual and LTV-based cancellation."""

from decimal import Decimal

from morty.models.loan import (
    FixedMonthlyInsurance,
    MortgageInsurance,
    RateBasedInsurance,
)


def monthly_pmi(config: MortgageInsurance, balance: Decimal) -> Decimal:
    """PMI for one month, before any cancellation is considered.

    Rate-based PMI is charged on the balance at the start of the month.
    """
    mode = config.mode
    if isinstance(mode, FixedMonthlyInsurance):
        return mode.monthly_amount
    if isinstance(mode, RateBasedInsurance):
        return mode.annual_rate_percent / 100 * balance / 12
    return Decimal("0")


def should_cancel(ltv: Decimal, config: MortgageInsurance) -> bool:
    """PMI drops once LTV is at or below the cancellation threshold."""
    return ltv <= config.cancel_at_ltv_percent
