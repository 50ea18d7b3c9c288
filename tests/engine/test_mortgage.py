"""Tests for the top-level mortgage calculation."""

from dataclasses import replace
from datetime import date
from decimal import Decimal

from morty.engine.debt import amortization_schedule
from morty.engine.mortgage import baseline_interest, compute_schedule
from morty.models.loan import ExtraPayments, LoanParameters, OneTimeExtra

TOLERANCE = Decimal("0.000001")


class TestComputeSchedule:
    def test_canonical_loan(self, canonical_params):
        result = compute_schedule(canonical_params)
        assert len(result.schedule) == 360
        assert result.schedule[-1].balance == 0
        assert abs(result.monthly_payment.mortgage_only - Decimal("2275.44")) < Decimal("0.01")
        assert result.payoff_date == date(2054, 12, 1)

    def test_totals(self, canonical_params):
        result = compute_schedule(canonical_params)
        t = result.totals
        assert t.months_to_payoff == 360
        assert abs(t.principal - Decimal("360000")) < TOLERANCE
        assert t.taxes == Decimal("144000")  # 4800/yr * 30
        assert t.insurance == Decimal("45000")  # 1500/yr * 30
        assert t.hoa == 0
        assert t.mortgage_insurance == 0
        assert t.total_cost == t.principal + t.interest + t.mortgage_insurance + t.taxes + t.insurance + t.hoa

    def test_interest_plus_principal_equals_payments(self, canonical_params):
        result = compute_schedule(canonical_params)
        paid = sum(e.principal + e.interest for e in result.schedule)
        assert abs(paid - (result.totals.principal + result.totals.interest)) < TOLERANCE

    def test_no_extras_no_savings(self, canonical_params):
        result = compute_schedule(canonical_params)
        assert result.totals.interest_savings == 0

    def test_vanishing_rate(self):
        params = LoanParameters(
            price=Decimal("400000"), term_months=360,
            annual_rate_percent=Decimal("1E-27"), start=date(2025, 1, 1),
        )
        result = compute_schedule(params)
        assert len(result.schedule) == 360
        assert result.schedule[-1].balance == 0
        assert result.monthly_payment.mortgage_only.quantize(Decimal("0.01")) == Decimal("1111.11")

    def test_extras_produce_savings(self, canonical_params):
        params = replace(canonical_params, extra_payments=ExtraPayments(
            monthly=Decimal("300"),
            annual_month=12,
            annual_amount=Decimal("2000"),
            one_time=(OneTimeExtra(date(2026, 6, 1), Decimal("15000")),),
        ))
        result = compute_schedule(params)
        baseline = compute_schedule(canonical_params)

        assert result.totals.months_to_payoff < 360
        assert result.totals.interest_savings > 0
        assert abs(
            result.totals.interest_savings - (baseline.totals.interest - result.totals.interest)
        ) < TOLERANCE
        assert result.payoff_date < baseline.payoff_date

    def test_escrow_included(self, canonical_params):
        params = replace(canonical_params, include_escrow=True, monthly_hoa=Decimal("100"))
        result = compute_schedule(params)
        mp = result.monthly_payment
        # (4800 + 1500) / 12 + 100
        assert mp.with_escrow - mp.mortgage_only == Decimal("625")

    def test_escrow_excluded(self, canonical_params):
        result = compute_schedule(canonical_params)
        assert result.monthly_payment.with_escrow == result.monthly_payment.mortgage_only

    def test_pmi_totals_and_stop(self, low_down_params):
        result = compute_schedule(low_down_params)
        assert result.totals.mortgage_insurance == sum(e.mortgage_insurance for e in result.schedule)
        assert result.totals.mortgage_insurance > 0
        assert result.pmi_stop_period is not None

    def test_pure_function(self, canonical_params):
        assert compute_schedule(canonical_params) == compute_schedule(canonical_params)


class TestDegenerateLoans:
    def test_nothing_financed(self):
        params = LoanParameters(price=Decimal("0"), start=date(2025, 5, 1), annual_taxes=Decimal("1200"))
        result = compute_schedule(params)
        assert result.schedule == []
        assert result.totals.months_to_payoff == 0
        assert result.totals.total_cost == 0
        assert result.totals.taxes == 0
        assert result.payoff_date == date(2025, 5, 1)
        assert result.pmi_stop_period is None

    def test_zero_term(self, canonical_params):
        result = compute_schedule(replace(canonical_params, term_months=0))
        assert result.schedule == []
        assert result.monthly_payment.mortgage_only == 0
        assert result.payoff_date == canonical_params.start

    def test_zero_rate(self):
        params = LoanParameters(price=Decimal("400000"), term_months=360, start=date(2025, 1, 1))
        result = compute_schedule(params)
        assert result.monthly_payment.mortgage_only.quantize(Decimal("0.01")) == Decimal("1111.11")
        assert result.totals.interest == 0
        assert result.totals.interest_savings == 0


class TestBaselineInterest:
    def test_ignores_extras(self, canonical_params):
        with_extras = replace(canonical_params, extra_payments=ExtraPayments(monthly=Decimal("1000")))
        assert baseline_interest(with_extras) == amortization_schedule(canonical_params).total_interest
