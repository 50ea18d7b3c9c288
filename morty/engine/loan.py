"""Loan amount normalization: price + down payment -> financed amount."""

from decimal import Decimal

from morty.models.loan import DownPaymentAmount, DownPaymentPercent, LoanParameters

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def financed_amount(params: LoanParameters) -> Decimal:
    """Amount borrowed after the down payment. Clamps at zero, never raises."""
    price = max(ZERO, params.price)
    dp = params.down_payment

    if isinstance(dp, DownPaymentAmount):
        return max(ZERO, price - dp.amount)
    if isinstance(dp, DownPaymentPercent):
        return max(ZERO, price * (1 - dp.percent / HUNDRED))
    return price


def loan_to_value(balance: Decimal, price: Decimal) -> Decimal:
    """Remaining balance as a percent of the original price."""
    if price <= 0:
        return ZERO
    return balance / price * HUNDRED
