"""Command line entry point for the vegetable shop ledger.

Prints a party's ledger statement or the bill history, runs the balance
reconciliation, closes a day, or exports ledger and credit reports to CSV.
"""

import sys
import logging
import asyncio
import argparse
from datetime import datetime
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from veg_ledger.app import LedgerApp
from veg_ledger.config import EXPORT_DATE_FORMAT, PAYMENT_METHODS, STORE_DATE_FORMAT
from veg_ledger.mocks import InMemoryRecordStore
from veg_ledger.models.schemas import PartyType, TransactionType
from veg_ledger.services.export_service import (
    CREDIT_COLUMNS,
    LEDGER_COLUMNS,
    credit_export_rows,
    ledger_export_rows,
    write_csv,
)
from veg_ledger.services.reconciliation_service import find_bill_number_collisions
from veg_ledger.utils.parsing import format_amount


def _parse_day(value):
    if not value:
        return None
    try:
        return datetime.strptime(value, STORE_DATE_FORMAT).date()
    except ValueError:
        logger.error(f"Invalid date format: {value}. Should be YYYY-MM-DD")
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Vegetable shop ledger")
    parser.add_argument("--test", action="store_true", help="Use the test collection prefix")
    parser.add_argument("--mock", action="store_true", help="Use an empty in-memory store instead of Firestore")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ledger = subparsers.add_parser("ledger", help="Print the ledger statement of one party")
    ledger.add_argument("--type", choices=[t.value for t in PartyType], default=PartyType.SUPPLIER.value)
    ledger.add_argument("--party", required=True, help="Party name (case-insensitive)")
    ledger.add_argument("--from", dest="date_from", help="First day in YYYY-MM-DD format")
    ledger.add_argument("--to", dest="date_to", help="Last day in YYYY-MM-DD format (default: today)")
    ledger.add_argument("--csv", help="Also write the statement to this CSV file")

    history = subparsers.add_parser("history", help="Print bills grouped from the transaction log")
    history.add_argument("--type", choices=[t.value for t in TransactionType])
    history.add_argument("--search", default="", help="Party name or bill number")
    history.add_argument("--date", help="Only bills of this day (YYYY-MM-DD)")
    history.add_argument("--payment", choices=PAYMENT_METHODS, help="Only bills paid with this method")

    reconcile = subparsers.add_parser("reconcile", help="Compare balance summaries with the log")
    reconcile.add_argument("--repair", action="store_true", help="Rewrite due amounts that break due = total - paid")

    close_day = subparsers.add_parser("close-day", help="Save the daily account summary of one day")
    close_day.add_argument("--date", help="Day to close (default: today)")

    export = subparsers.add_parser("export", help="Write outstanding credits to CSV")
    export.add_argument("--type", choices=[t.value for t in PartyType], default=PartyType.CUSTOMER.value)
    export.add_argument("path", help="Destination CSV file")

    return parser


async def run_ledger(app: LedgerApp, args) -> int:
    party_type = PartyType(args.type)
    party = app.store.find_party_by_name(party_type, args.party)
    if party is None:
        logger.error(f"{party_type.value} '{args.party}' not found")
        return 1

    report = app.ledger(party_type, party.id, _parse_day(args.date_from), _parse_day(args.date_to))
    print(f"Ledger of {party.name}")
    for day in report.rows:
        methods = f" ({', '.join(day.payment_methods)})" if day.payment_methods else ""
        print(f"{day.date.strftime(EXPORT_DATE_FORMAT)}  opening {format_amount(day.opening)}  "
              f"billed {format_amount(day.purchases)}  paid {format_amount(day.credit)}{methods}  "
              f"closing {format_amount(day.closing)}")
    print(f"Opening {format_amount(report.opening_balance)}  billed {format_amount(report.total_purchases)}  "
          f"paid {format_amount(report.total_credit)}  closing {format_amount(report.closing_balance)}")

    if args.csv:
        write_csv(ledger_export_rows(report), args.csv, LEDGER_COLUMNS)
    return 0


async def run_history(app: LedgerApp, args) -> int:
    bills = app.history(
        transaction_type=TransactionType(args.type) if args.type else None,
        search=args.search,
        on_date=_parse_day(args.date),
        payment_method=args.payment,
    )
    for bill in bills:
        number = f"#{bill.bill_number}" if bill.bill_number is not None else "payment"
        print(f"{bill.date.isoformat()}  {bill.type.value:<8} {number:<8} {bill.party:<30} "
              f"{bill.payment:<8} {format_amount(bill.total_amount)}")
        for item in bill.items:
            print(f"    {item.name} x {item.quantity:g} @ {format_amount(item.price)} = {format_amount(item.total)}")
    logger.info(f"Listed {len(bills)} bills")
    return 0


async def run_reconcile(app: LedgerApp, args) -> int:
    drifts = app.reconciliation.run()
    for drift in drifts:
        print(f"{drift.party_type.value} {drift.party_name}: due {format_amount(drift.due_amount)}, "
              f"unexplained {format_amount(drift.ghost_balance)}, "
              f"off by {format_amount(drift.invariant_gap)} from total - paid")

    for day, bill_number, parties in find_bill_number_collisions(app.store.transactions):
        print(f"Bill #{bill_number} on {day.isoformat()} used by more than one bill: {', '.join(parties)}")

    if args.repair and drifts:
        repaired = await app.reconciliation.repair_invariant(drifts)
        logger.info(f"Repaired {repaired} balance summaries")
    return 0


async def run_close_day(app: LedgerApp, args) -> int:
    day = _parse_day(args.date) or datetime.now().date()
    summary = await app.daily_summaries.close_day(app.store.transactions, day)
    print(f"{day.isoformat()}: sales {format_amount(summary.total_sales)}, "
          f"purchases {format_amount(summary.total_purchases)}, bills {summary.bill_count}")
    return 0


async def run_export(app: LedgerApp, args) -> int:
    rows = credit_export_rows(app.store.payment_details(PartyType(args.type)))
    write_csv(rows, args.path, CREDIT_COLUMNS)
    return 0


COMMANDS = {
    "ledger": run_ledger,
    "history": run_history,
    "reconcile": run_reconcile,
    "close-day": run_close_day,
    "export": run_export,
}


async def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    dao = InMemoryRecordStore() if args.mock else None
    app = LedgerApp(dao=dao, is_test=args.test)
    logger.info(f"Running '{args.command}' against {'in-memory store' if args.mock else 'Firestore'}")

    await app.start(live=False)
    return await COMMANDS[args.command](app, args)


def cli():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
