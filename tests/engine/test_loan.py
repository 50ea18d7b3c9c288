from datetime import date
from decimal import Decimal

from morty.engine.loan import financed_amount, loan_to_value
from morty.models.loan import DownPaymentAmount, DownPaymentPercent, LoanParameters


def _params(**kwargs) -> LoanParameters:
    return LoanParameters(price=Decimal("500000"), start=date(2025, 1, 1), **kwargs)


class TestFinancedAmount:
    def test_down_payment_amount(self):
        assert financed_amount(_params(down_payment=DownPaymentAmount(Decimal("100000")))) == Decimal("400000")

    def test_down_payment_percent(self):
        assert financed_amount(_params(down_payment=DownPaymentPercent(Decimal("20")))) == Decimal("400000")

    def test_no_down_payment(self):
        assert financed_amount(_params()) == Decimal("500000")

    def test_amount_above_price_clamps(self):
        assert financed_amount(_params(down_payment=DownPaymentAmount(Decimal("600000")))) == 0

    def test_percent_above_hundred_clamps(self):
        assert financed_amount(_params(down_payment=DownPaymentPercent(Decimal("120")))) == 0

    def test_negative_price_clamps(self):
        params = LoanParameters(price=Decimal("-1"), start=date(2025, 1, 1))
        assert financed_amount(params) == 0


class TestLoanToValue:
    def test_ratio_as_percent(self):
        assert loan_to_value(Decimal("400000"), Decimal("500000")) == Decimal("80")

    def test_zero_price(self):
        assert loan_to_value(Decimal("400000"), Decimal("0")) == 0


class TestLoanParameters:
    def test_start_pinned_to_first_of_month(self):
        params = LoanParameters(price=Decimal("1"), start=date(2025, 3, 15))
        assert params.start == date(2025, 3, 1)

    def test_from_years(self):
        params = LoanParameters.from_years(Decimal("300000"), 15)
        assert params.term_months == 180
        assert params.term_years == 15

    def test_monthly_escrow(self):
        params = _params(
            annual_taxes=Decimal("4800"),
            annual_insurance=Decimal("1500"),
            monthly_hoa=Decimal("100"),
        )
        assert params.monthly_escrow == Decimal("625")
