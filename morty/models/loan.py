from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

MAX_TERM_MONTHS = 600  # 50 years


@dataclass(frozen=True)
class DownPaymentAmount:
    amount: Decimal  # Dollars paid at closing


@dataclass(frozen=True)
class DownPaymentPercent:
    percent: Decimal  # e.g. Decimal("20") for 20% of price


DownPayment = DownPaymentAmount | DownPaymentPercent


@dataclass(frozen=True)
class RateBasedInsurance:
    """PMI charged as an annual percentage of the current balance."""
    annual_rate_percent: Decimal  # e.g. Decimal("0.6") for 0.6%/yr


@dataclass(frozen=True)
class FixedMonthlyInsurance:
    monthly_amount: Decimal


@dataclass(frozen=True)
class NoInsurance:
    pass


InsuranceMode = RateBasedInsurance | FixedMonthlyInsurance | NoInsurance


@dataclass(frozen=True)
class MortgageInsurance:
    mode: InsuranceMode = field(default_factory=NoInsurance)
    cancel_at_ltv_percent: Decimal = Decimal("80")  # Dropped for good once LTV <= this


@dataclass(frozen=True)
class OneTimeExtra:
    year_month: date  # Day is ignored, only year + month are matched
    amount: Decimal


@dataclass(frozen=True)
class ExtraPayments:
    monthly: Decimal = Decimal("0")
    annual_month: int = 12  # Calendar month (1-12) the annual extra lands in
    annual_amount: Decimal = Decimal("0")
    one_time: tuple[OneTimeExtra, ...] = ()

    @property
    def is_empty(self) -> bool:
        return (
            self.monthly == 0
            and self.annual_amount == 0
            and all(extra.amount == 0 for extra in self.one_time)
        )

    def one_time_by_month(self) -> dict[tuple[int, int], Decimal]:
        """Accumulate one-time extras by (year, month). Same-month entries sum."""
        totals: dict[tuple[int, int], Decimal] = {}
        for extra in self.one_time:
            key = (extra.year_month.year, extra.year_month.month)
            totals[key] = totals.get(key, Decimal("0")) + extra.amount
        return totals


@dataclass(frozen=True)
class LoanParameters:
    # Purchase
    price: Decimal
    down_payment: DownPayment | None = None  # None = 100% financed

    # Financing
    term_months: int = 360
    annual_rate_percent: Decimal = Decimal("0")  # e.g. Decimal("6.5")
    start: date = field(default_factory=lambda: date.today().replace(day=1))

    # Recurring costs (escrow)
    annual_taxes: Decimal = Decimal("0")
    annual_insurance: Decimal = Decimal("0")  # Homeowner's insurance, not PMI
    monthly_hoa: Decimal = Decimal("0")
    include_escrow: bool = False

    mortgage_insurance: MortgageInsurance = field(default_factory=MortgageInsurance)
    extra_payments: ExtraPayments = field(default_factory=ExtraPayments)

    # Display hints, never used in the math
    currency: str = "USD"
    locale: str = "en-US"

    def __post_init__(self) -> None:
        if self.start.day != 1:
            object.__setattr__(self, "start", self.start.replace(day=1))

    @classmethod
    def from_years(cls, price: Decimal, term_years: int, **kwargs) -> "LoanParameters":
        return cls(price=price, term_months=term_years * 12, **kwargs)

    @property
    def term_years(self) -> int:
        return self.term_months // 12

    @property
    def monthly_escrow(self) -> Decimal:
        return (self.annual_taxes + self.annual_insurance) / 12 + self.monthly_hoa
