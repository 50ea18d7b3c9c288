"""Amortization schedule computation.

Pure functions: Decimal in, dataclass out. No I/O. Values are kept at full
Decimal precision; rounding to cents is left to whoever displays them.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, localcontext

from morty.engine.loan import financed_amount, loan_to_value
from morty.engine.pmi import monthly_pmi, should_cancel
from morty.models.loan import LoanParameters
from morty.models.results import AmortizationEntry

ZERO = Decimal("0")
MAX_EXTRA_DIGITS = 100


@dataclass(frozen=True)
class AmortizationSchedule:
    entries: list[AmortizationEntry]
    monthly_payment: Decimal
    total_interest: Decimal
    total_principal: Decimal
    pmi_stop_period: int | None = None
    loan_amount: Decimal = ZERO


def monthly_rate(annual_rate_percent: Decimal) -> Decimal:
    return annual_rate_percent / 100 / 12


def monthly_payment(principal: Decimal, rate: Decimal, months: int) -> Decimal:
    """Fixed monthly P&I payment for a fully amortizing loan.

    Args:
        principal: Loan amount
        rate: Periodic (monthly) rate, e.g. Decimal("0.005") for 6%/yr
        months: Number of payments
    """
    if principal <= 0 or months <= 0:
        return ZERO
    if rate == 0:
        return principal / months

    # M = P * [r(1+r)^n] / [(1+r)^n - 1]
    # (1+r)^n - 1 needs as many extra digits as r has leading zeros
    with localcontext() as ctx:
        ctx.prec += min(MAX_EXTRA_DIGITS, max(0, -rate.adjusted()))
        factor = (1 + rate) ** months
        if factor == 1:
            return principal / months
        return principal * (rate * factor) / (factor - 1)


def add_months(d: date, months: int) -> date:
    """First day of the month `months` after `d`."""
    total = d.year * 12 + (d.month - 1) + months
    return date(total // 12, total % 12 + 1, 1)


def amortization_schedule(params: LoanParameters) -> AmortizationSchedule:
    """Month-by-month schedule with extra principal and PMI.

    Stops after the period that brings the balance to zero, or after
    `term_months` periods, whichever comes first.
    """
    principal = financed_amount(params)
    n_periods = params.term_months
    r = monthly_rate(params.annual_rate_percent)
    pmt = monthly_payment(principal, r, n_periods)

    extras = params.extra_payments
    one_time = extras.one_time_by_month()
    pmi_config = params.mortgage_insurance

    entries: list[AmortizationEntry] = []
    balance = principal
    total_interest = ZERO
    total_principal = ZERO
    pmi_cancelled = False
    pmi_charged = False
    pmi_stop_period: int | None = None
    current = params.start

    if principal <= 0 or n_periods <= 0:
        return AmortizationSchedule(
            entries=entries,
            monthly_payment=pmt,
            total_interest=total_interest,
            total_principal=total_principal,
            loan_amount=principal,
        )

    for period in range(1, n_periods + 1):
        interest = balance * r
        scheduled = min(pmt - interest, balance)

        # Final payment adjustment: whatever rounding residue is left gets paid
        if period == n_periods:
            scheduled = balance

        extra = extras.monthly
        if current.month == extras.annual_month:
            extra += extras.annual_amount
        extra += one_time.get((current.year, current.month), ZERO)

        # Extra beyond the remaining balance is dropped, not carried forward
        if scheduled + extra >= balance:
            principal_paid = balance
            extra_applied = max(ZERO, balance - scheduled)
        else:
            principal_paid = scheduled + extra
            extra_applied = extra

        # PMI is measured on the balance before this month's principal
        ltv = loan_to_value(balance, params.price)
        if not pmi_cancelled and should_cancel(ltv, pmi_config):
            pmi_cancelled = True
        if pmi_cancelled:
            pmi = ZERO
            if pmi_charged and pmi_stop_period is None:
                pmi_stop_period = period
        else:
            pmi = monthly_pmi(pmi_config, balance)
            if pmi > 0:
                pmi_charged = True

        balance = max(ZERO, balance - principal_paid)
        total_interest += interest
        total_principal += principal_paid

        entries.append(AmortizationEntry(
            period=period,
            date=current,
            payment=pmt,
            interest=interest,
            principal=principal_paid,
            extra_principal=extra_applied,
            mortgage_insurance=pmi,
            balance=balance,
            cumulative_interest=total_interest,
            cumulative_principal=total_principal,
            ltv=ltv,
        ))

        current = add_months(current, 1)
        if balance <= 0:
            break

    return AmortizationSchedule(
        entries=entries,
        monthly_payment=pmt,
        total_interest=total_interest,
        total_principal=total_principal,
        pmi_stop_period=pmi_stop_period,
        loan_amount=principal,
    )


def yearly_breakdown(entries: list[AmortizationEntry]) -> list[dict]:
    """Aggregate a schedule by calendar year.

    Returns list of dicts with keys: year, principal, interest,
    mortgage_insurance, ending_balance
    """
    yearly: list[dict] = []
    for entry in entries:
        if not yearly or yearly[-1]["year"] != entry.date.year:
            yearly.append({
                "year": entry.date.year,
                "principal": ZERO,
                "interest": ZERO,
                "mortgage_insurance": ZERO,
                "ending_balance": entry.balance,
            })
        row = yearly[-1]
        row["principal"] += entry.principal
        row["interest"] += entry.interest
        row["mortgage_insurance"] += entry.mortgage_insurance
        row["ending_balance"] = entry.balance

    return yearly
