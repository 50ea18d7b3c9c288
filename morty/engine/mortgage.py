"""Top-level mortgage calculation: schedule + lifetime totals.

Orchestrates: normalize loan -> payment -> schedule -> baseline schedule
without extras -> totals.
"""

from dataclasses import replace
from decimal import Decimal

from morty.engine.debt import amortization_schedule
from morty.models.loan import ExtraPayments, LoanParameters
from morty.models.results import MonthlyPayment, MortgageResult, MortgageTotals

ZERO = Decimal("0")


def baseline_interest(params: LoanParameters) -> Decimal:
    """Lifetime interest for the same loan with every extra payment removed."""
    if params.extra_payments.is_empty:
        return amortization_schedule(params).total_interest
    no_extras = replace(params, extra_payments=ExtraPayments())
    return amortization_schedule(no_extras).total_interest


def compute_schedule(params: LoanParameters) -> MortgageResult:
    """Full amortization result for one parameter snapshot.

    Degenerate loans (nothing financed, or no term) come back as an empty
    schedule with zero totals rather than an error.
    """
    schedule = amortization_schedule(params)
    entries = schedule.entries
    months = len(entries)

    pmi_total = sum((e.mortgage_insurance for e in entries), ZERO)
    taxes = params.annual_taxes / 12 * months
    insurance = params.annual_insurance / 12 * months
    hoa = params.monthly_hoa * months

    interest_savings = max(ZERO, baseline_interest(params) - schedule.total_interest)

    totals = MortgageTotals(
        principal=schedule.total_principal,
        interest=schedule.total_interest,
        mortgage_insurance=pmi_total,
        taxes=taxes,
        insurance=insurance,
        hoa=hoa,
        months_to_payoff=months,
        total_cost=(
            schedule.total_principal + schedule.total_interest
            + pmi_total + taxes + insurance + hoa
        ),
        interest_savings=interest_savings,
    )

    base = schedule.monthly_payment
    with_escrow = base + params.monthly_escrow if params.include_escrow else base

    return MortgageResult(
        schedule=entries,
        totals=totals,
        monthly_payment=MonthlyPayment(mortgage_only=base, with_escrow=with_escrow),
        payoff_date=entries[-1].date if entries else params.start,
        pmi_stop_period=schedule.pmi_stop_period,
    )
