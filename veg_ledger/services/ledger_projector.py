"""
Running-balance ledger for one party, derived from the transaction log.

Nothing here touches the record store. The projector folds the log into
day rows on every call, so the same inputs always give the same report.
"""

import logging
from collections import OrderedDict
from datetime import date
from typing import Iterable, List, Optional, Tuple

from veg_ledger.models.reports import LedgerDay, LedgerReport
from veg_ledger.models.schemas import Party, PaymentDetail, Transaction, TransactionType

logger = logging.getLogger(__name__)


def _signed(transaction: Transaction) -> float:
    """Billed amounts raise the balance, payments lower it."""
    if transaction.is_billed:
        return transaction.amount
    if transaction.type == TransactionType.PAYMENT:
        return -transaction.amount
    return 0.0


def party_transactions(transactions: Iterable[Transaction], party_name: str) -> List[Transaction]:
    """Sale, Purchase and Payment entries of one party (name compared case-insensitively)."""
    wanted = (party_name or "").strip().lower()
    return [
        t for t in transactions
        if (t.party or "").strip().lower() == wanted
        and t.type in (TransactionType.SALE, TransactionType.PURCHASE, TransactionType.PAYMENT)
    ]


def log_totals(transactions: Iterable[Transaction]) -> Tuple[float, float]:
    """(billed, paid) summed over the given entries."""
    billed = 0.0
    paid = 0.0
    for t in transactions:
        if t.is_billed:
            billed += t.amount
        elif t.type == TransactionType.PAYMENT:
            paid += t.amount
    return billed, paid


def initial_adjustment(due_amount: float, transactions: Iterable[Transaction]) -> float:
    """
    Balance that predates the transaction log.

    current due - (all-time billed - all-time paid); zero when the log fully
    explains the stored due amount.
    """
    billed, paid = log_totals(transactions)
    return due_amount - (billed - paid)


def opening_balance(transactions: Iterable[Transaction], date_from: Optional[date], anchor: float) -> float:
    """Fold the anchor through every entry dated strictly before date_from."""
    if date_from is None:
        return anchor
    balance = anchor
    for t in transactions:
        if t.date < date_from:
            balance += _signed(t)
    return balance


def project_ledger(
    transactions: Iterable[Transaction],
    party: Optional[Party],
    payment_detail: Optional[PaymentDetail],
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    today: Optional[date] = None,
) -> LedgerReport:
    """
    Build the day-by-day ledger of one party for [date_from, date_to].

    Args:
        transactions: The full transaction log, in any order
        party: Party the ledger is for
        payment_detail: The party's balance summary (its due amount anchors history)
        date_from: First day of the period; None means from the beginning
        date_to: Last day of the period; None means through today
        today: Override for the current day

    Returns:
        LedgerReport with rows newest first and period totals
    """
    if party is None or payment_detail is None:
        return LedgerReport(date_from=date_from, date_to=date_to)

    date_to = date_to or today or date.today()
    entries = party_transactions(transactions, party.name)

    anchor = initial_adjustment(payment_detail.due_amount, entries)
    period_opening = opening_balance(entries, date_from, anchor)

    in_period = [
        t for t in entries
        if (date_from is None or t.date >= date_from) and t.date <= date_to
    ]

    # Group by calendar day, oldest first
    days: "OrderedDict[date, LedgerDay]" = OrderedDict()
    for t in sorted(in_period, key=lambda t: (t.date, t.created_at or "")):
        day = days.setdefault(t.date, LedgerDay(date=t.date))
        day.transactions.append(t)
        if t.is_billed:
            day.purchases += t.amount
        elif t.type == TransactionType.PAYMENT:
            day.credit += t.amount
            if t.payment and t.payment not in day.payment_methods:
                day.payment_methods.append(t.payment)

    balance = period_opening
    total_purchases = 0.0
    total_credit = 0.0
    for day in days.values():
        day.opening = balance
        day.closing = balance + day.purchases - day.credit
        balance = day.closing
        total_purchases += day.purchases
        total_credit += day.credit

    return LedgerReport(
        rows=list(reversed(days.values())),
        opening_balance=period_opening,
        total_purchases=total_purchases,
        total_credit=total_credit,
        closing_balance=balance,
        date_from=date_from,
        date_to=date_to,
    )
