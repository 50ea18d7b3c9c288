"""CLI for the mortgage calculator.

Usage:
    python -m morty.cli --price 450000 --down-percent 20 --rate 6.5 --term-years 30
    python -m morty.cli --price 450000 --down-percent 5 --rate 6.5 --pmi-rate 0.6 --schedule
    python -m morty.cli --price 450000 --rate 6.5 --extra-monthly 200 --extra-once 2026-06:10000 --yearly
    python -m morty.cli --from-url "price=450000&down_payment_percent=20&annual_rate_percent=6.5"
    python -m morty.cli --price 450000 --rate 6.5 --save "Maple St" --address "12 Maple St"
    python -m morty.cli --list
"""

import argparse
import logging
import sys
from datetime import date
from decimal import Decimal
from uuid import UUID

from morty.config import settings
from morty.data.scenario_store import ScenarioStorageError, ScenarioStore
from morty.data.serialization import parse_decimal, parse_year_month
from morty.data.url_state import decode_params, encode_params
from morty.engine.debt import yearly_breakdown
from morty.engine.loan import financed_amount
from morty.engine.mortgage import compute_schedule
from morty.engine.validation import validate_parameters
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
from morty.models.results import MortgageResult

logger = logging.getLogger(__name__)


def _dollar(v) -> str:
    return f"${float(v):,.0f}"


def _cents(v) -> str:
    return f"${float(v):,.2f}"


def _header(title: str) -> None:
    print(f"\n{'=' * 64}")
    print(f"  {title}")
    print(f"{'=' * 64}")


def _one_time_extra(raw: str) -> OneTimeExtra:
    """argparse type for YYYY-MM:AMOUNT."""
    try:
        month, amount = raw.split(":", 1)
        return OneTimeExtra(parse_year_month(month), parse_decimal(amount, "extra"))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM:AMOUNT, got {raw!r}") from e


def _decimal_arg(raw: str) -> Decimal:
    try:
        return parse_decimal(raw)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _month_arg(raw: str) -> date:
    try:
        return parse_year_month(raw)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


# ── Report sections ──────────────────────────────────────────────────────────

def print_summary(params: LoanParameters, result: MortgageResult) -> None:
    _header("Loan Summary")
    print(f"  Price:                {_dollar(params.price)}")
    print(f"  Loan Amount:          {_dollar(financed_amount(params))}")
    print(f"  Rate / Term:          {float(params.annual_rate_percent):.3f}% / {params.term_months} months")
    print(f"  Monthly P&I:          {_cents(result.monthly_payment.mortgage_only)}")
    if params.include_escrow:
        print(f"  Monthly w/ Escrow:    {_cents(result.monthly_payment.with_escrow)}")
    print(f"  Payoff Date:          {result.payoff_date:%b %Y}")

    t = result.totals
    _header("Lifetime Totals")
    print(f"  Principal:            {_dollar(t.principal)}")
    print(f"  Interest:             {_dollar(t.interest)}")
    print(f"  PMI:                  {_dollar(t.mortgage_insurance)}")
    print(f"  Taxes:                {_dollar(t.taxes)}")
    print(f"  Insurance:            {_dollar(t.insurance)}")
    print(f"  HOA:                  {_dollar(t.hoa)}")
    print(f"  Total Cost:           {_dollar(t.total_cost)}")
    print(f"  Months to Payoff:     {t.months_to_payoff}")
    if t.interest_savings > 0:
        print(f"  Interest Saved:       {_dollar(t.interest_savings)}")
    if result.pmi_stop_period is not None:
        print(f"  PMI Drops Off:        month {result.pmi_stop_period}")
    print()


def print_schedule(result: MortgageResult) -> None:
    _header("Amortization Schedule")
    print(f"  {'#':>4}  {'Month':<8} {'Interest':>11} {'Principal':>11} {'Extra':>10} {'PMI':>8} {'Balance':>13}")
    for e in result.schedule:
        print(
            f"  {e.period:>4}  {e.date:%Y-%m}  {_cents(e.interest):>11} {_cents(e.principal):>11}"
            f" {_cents(e.extra_principal):>10} {_cents(e.mortgage_insurance):>8} {_cents(e.balance):>13}"
        )
    print()


def print_yearly(result: MortgageResult) -> None:
    _header("By Year")
    print(f"  {'Year':<6} {'Principal':>12} {'Interest':>12} {'PMI':>10} {'Balance':>13}")
    for y in yearly_breakdown(result.schedule):
        print(
            f"  {y['year']:<6} {_dollar(y['principal']):>12} {_dollar(y['interest']):>12}"
            f" {_dollar(y['mortgage_insurance']):>10} {_dollar(y['ending_balance']):>13}"
        )
    print()


def print_scenarios(store: ScenarioStore) -> None:
    scenarios = store.list_all()
    _header(f"Saved Scenarios ({len(scenarios)})")
    for s in scenarios:
        print(f"  {s.id}  {s.saved_at:%Y-%m-%d %H:%M}  {s.display_title}  ({_dollar(s.params.price)})")
    print()


# ── Argument handling ────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fixed-rate mortgage amortization calculator")

    loan = parser.add_argument_group("loan")
    loan.add_argument("--price", type=_decimal_arg, help="Property price")
    down = loan.add_mutually_exclusive_group()
    down.add_argument("--down-percent", type=_decimal_arg, help="Down payment as percent of price")
    down.add_argument("--down-amount", type=_decimal_arg, help="Down payment in dollars")
    loan.add_argument("--term-years", type=int, default=settings.default_term_years,
                      help=f"Loan term in years (default: {settings.default_term_years})")
    loan.add_argument("--rate", type=_decimal_arg, default=Decimal("0"), help="Annual rate in percent, e.g. 6.5")
    loan.add_argument("--start", type=_month_arg, default=date.today().replace(day=1),
                      help="First payment month, YYYY-MM (default: this month)")

    costs = parser.add_argument_group("costs")
    costs.add_argument("--taxes", type=_decimal_arg, default=Decimal("0"), help="Annual property taxes")
    costs.add_argument("--insurance", type=_decimal_arg, default=Decimal("0"), help="Annual homeowner's insurance")
    costs.add_argument("--hoa", type=_decimal_arg, default=Decimal("0"), help="Monthly HOA dues")
    costs.add_argument("--escrow", action="store_true", help="Include escrow in the monthly payment")
    pmi = costs.add_mutually_exclusive_group()
    pmi.add_argument("--pmi-rate", type=_decimal_arg, help="PMI annual rate in percent of balance")
    pmi.add_argument("--pmi-fixed", type=_decimal_arg, help="PMI fixed monthly amount")
    costs.add_argument("--pmi-cancel-ltv", type=_decimal_arg, default=settings.default_pmi_cancel_ltv_percent,
                       help="LTV percent at which PMI is dropped")

    extras = parser.add_argument_group("extra principal")
    extras.add_argument("--extra-monthly", type=_decimal_arg, default=Decimal("0"))
    extras.add_argument("--extra-annual", type=_decimal_arg, default=Decimal("0"), help="Extra paid once a year")
    extras.add_argument("--extra-annual-month", type=int, default=12, help="Calendar month for --extra-annual")
    extras.add_argument("--extra-once", type=_one_time_extra, action="append", default=[],
                        metavar="YYYY-MM:AMOUNT", help="One-time extra payment (repeatable)")

    output = parser.add_argument_group("output")
    output.add_argument("--from-url", metavar="QUERY", help="Load parameters from a share link")
    output.add_argument("--schedule", action="store_true", help="Print the full monthly schedule")
    output.add_argument("--yearly", action="store_true", help="Print totals by calendar year")
    output.add_argument("--share", action="store_true", help="Print a shareable query string")

    saved = parser.add_argument_group("saved scenarios")
    saved.add_argument("--db", default=settings.scenario_db_path, help="SQLite database path")
    saved.add_argument("--save", metavar="TITLE", help="Save these parameters under TITLE")
    saved.add_argument("--address", default="", help="Address stored with --save")
    saved.add_argument("--notes", default="", help="Notes stored with --save")
    saved.add_argument("--list", action="store_true", help="List saved scenarios")
    saved.add_argument("--load", type=UUID, metavar="ID", help="Calculate a saved scenario")
    saved.add_argument("--delete", type=UUID, metavar="ID", help="Delete a saved scenario")

    return parser


def params_from_args(args: argparse.Namespace) -> LoanParameters:
    if args.down_percent is not None:
        down_payment = DownPaymentPercent(args.down_percent)
    elif args.down_amount is not None:
        down_payment = DownPaymentAmount(args.down_amount)
    else:
        down_payment = None

    if args.pmi_rate is not None:
        mode = RateBasedInsurance(args.pmi_rate)
    elif args.pmi_fixed is not None:
        mode = FixedMonthlyInsurance(args.pmi_fixed)
    else:
        mode = NoInsurance()

    return LoanParameters.from_years(
        price=args.price,
        term_years=args.term_years,
        down_payment=down_payment,
        annual_rate_percent=args.rate,
        start=args.start,
        annual_taxes=args.taxes,
        annual_insurance=args.insurance,
        monthly_hoa=args.hoa,
        include_escrow=args.escrow,
        mortgage_insurance=MortgageInsurance(mode=mode, cancel_at_ltv_percent=args.pmi_cancel_ltv),
        extra_payments=ExtraPayments(
            monthly=args.extra_monthly,
            annual_month=args.extra_annual_month,
            annual_amount=args.extra_annual,
            one_time=tuple(args.extra_once),
        ),
        currency=settings.default_currency,
        locale=settings.default_locale,
    )


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)
    store = None

    try:
        if args.list or args.delete or args.load or args.save:
            store = ScenarioStore(args.db)

        if args.list:
            print_scenarios(store)
            return 0

        if args.delete:
            if not store.delete(args.delete):
                print(f"No saved scenario {args.delete}", file=sys.stderr)
                return 1
            print(f"Deleted {args.delete}")
            return 0

        if args.load:
            scenario = store.get(args.load)
            if scenario is None:
                print(f"No saved scenario {args.load}", file=sys.stderr)
                return 1
            params = scenario.params
            _header(scenario.display_title)
            if scenario.address:
                print(f"  {scenario.address}")
        elif args.from_url:
            params = decode_params(args.from_url)
        elif args.price is not None:
            params = params_from_args(args)
        else:
            parser.error("--price is required (unless using --from-url, --load or --list)")

        validate_parameters(params)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except ScenarioStorageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    result = compute_schedule(params)
    print_summary(params, result)
    if args.yearly:
        print_yearly(result)
    if args.schedule:
        print_schedule(result)
    if args.share:
        print(f"  Share: ?{encode_params(params)}\n")

    if args.save:
        try:
            scenario = store.save(params, title=args.save, address=args.address, notes=args.notes)
        except ScenarioStorageError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"  Saved as {scenario.id}\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
