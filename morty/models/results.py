from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class AmortizationEntry:
    period: int  # 1-based
    date: date
    payment: Decimal  # Scheduled P&I payment
    interest: Decimal
    principal: Decimal  # Scheduled + extra actually applied
    extra_principal: Decimal
    mortgage_insurance: Decimal
    balance: Decimal  # After this period's principal
    cumulative_interest: Decimal
    cumulative_principal: Decimal
    ltv: Decimal  # Percent, measured on the balance before this period's payment


@dataclass
class MortgageTotals:
    principal: Decimal = Decimal("0")
    interest: Decimal = Decimal("0")
    mortgage_insurance: Decimal = Decimal("0")
    taxes: Decimal = Decimal("0")
    insurance: Decimal = Decimal("0")  # Homeowner's insurance
    hoa: Decimal = Decimal("0")
    months_to_payoff: int = 0
    total_cost: Decimal = Decimal("0")
    interest_savings: Decimal = Decimal("0")  # Versus the same loan with no extras


@dataclass
class MonthlyPayment:
    mortgage_only: Decimal = Decimal("0")
    with_escrow: Decimal = Decimal("0")


@dataclass
class MortgageResult:
    schedule: list[AmortizationEntry] = field(default_factory=list)
    totals: MortgageTotals = field(default_factory=MortgageTotals)
    monthly_payment: MonthlyPayment = field(default_factory=MonthlyPayment)
    payoff_date: date | None = None
    pmi_stop_period: int | None = None  # First period PMI was dropped, if ever
