"""Canonical test fixtures used across engine, data and API tests.

Fixture: $450K home, 20% down, 6.5% rate, 30yr fixed, first payment Jan 2025.
"""

from datetime import date
from decimal import Decimal

import pytest

from morty.data.scenario_store import ScenarioStore
from morty.models.loan import (
    DownPaymentPercent,
    ExtraPayments,
    FixedMonthlyInsurance,
    LoanParameters,
    MortgageInsurance,
    OneTimeExtra,
    RateBasedInsurance,
)


@pytest.fixture
def canonical_params() -> LoanParameters:
    """$450K purchase, 20% down, no PMI, no extras."""
    return LoanParameters(
        price=Decimal("450000"),
        down_payment=DownPaymentPercent(Decimal("20")),
        term_months=360,
        annual_rate_percent=Decimal("6.5"),
        start=date(2025, 1, 1),
        annual_taxes=Decimal("4800"),
        annual_insurance=Decimal("1500"),
        monthly_hoa=Decimal("0"),
    )


@pytest.fixture
def low_down_params() -> LoanParameters:
    """$500K purchase, 5% down, rate-based PMI at 0.6%/yr dropping at 80% LTV."""
    return LoanParameters(
        price=Decimal("500000"),
        down_payment=DownPaymentPercent(Decimal("5")),
        term_months=360,
        annual_rate_percent=Decimal("6.5"),
        start=date(2025, 1, 1),
        mortgage_insurance=MortgageInsurance(
            mode=RateBasedInsurance(Decimal("0.6")),
            cancel_at_ltv_percent=Decimal("80"),
        ),
    )


@pytest.fixture
def full_params() -> LoanParameters:
    """Every field set to something other than its default."""
    return LoanParameters(
        price=Decimal("612500.50"),
        down_payment=DownPaymentPercent(Decimal("12.5")),
        term_months=180,
        annual_rate_percent=Decimal("5.875"),
        start=date(2026, 3, 1),
        annual_taxes=Decimal("7200"),
        annual_insurance=Decimal("1850.25"),
        monthly_hoa=Decimal("275"),
        include_escrow=True,
        mortgage_insurance=MortgageInsurance(
            mode=FixedMonthlyInsurance(Decimal("145.10")),
            cancel_at_ltv_percent=Decimal("78"),
        ),
        extra_payments=ExtraPayments(
            monthly=Decimal("150"),
            annual_month=4,
            annual_amount=Decimal("3000"),
            one_time=(
                OneTimeExtra(date(2026, 6, 1), Decimal("10000")),
                OneTimeExtra(date(2027, 1, 1), Decimal("2500.75")),
                OneTimeExtra(date(2026, 6, 1), Decimal("500")),
            ),
        ),
        currency="EUR",
        locale="de-DE",
    )


@pytest.fixture
def tmp_db(tmp_path):
    return str(tmp_path / "test_scenarios.db")


@pytest.fixture
def store(tmp_db):
    return ScenarioStore(tmp_db)
