"""Rebuild bills from the flat transaction log for the history view."""

from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from veg_ledger.models.reports import BillGroup, BillItem
from veg_ledger.models.schemas import Transaction, TransactionType


def bill_key(transaction: Transaction) -> Tuple:
    """Payments stand alone; line items share (date, bill number)."""
    if transaction.type == TransactionType.PAYMENT:
        return ("payment", transaction.id)
    return (transaction.type.value, transaction.date, transaction.bill_number or 0)


def group_bills(
    transactions: Iterable[Transaction],
    transaction_type: Optional[TransactionType] = None,
    search: str = "",
    on_date: Optional[date] = None,
    payment_method: Optional[str] = None,
) -> List[BillGroup]:
    """
    Group log entries into bills, newest first.

    Args:
        transactions: Log entries in any order
        transaction_type: Keep only this type (None keeps all)
        search: Substring of the party name or the bill number
        on_date: Keep only bills of this calendar day
        payment_method: Keep only bills paid this way

    Returns:
        Bills sorted by date then bill number, both descending
    """
    groups: Dict[Tuple, BillGroup] = {}

    for t in transactions:
        if transaction_type is not None and t.type != transaction_type:
            continue
        key = bill_key(t)
        group = groups.get(key)
        if group is None:
            group = groups[key] = BillGroup(
                key=key,
                date=t.date,
                party=t.party,
                type=t.type,
                payment=t.payment,
                bill_number=None if t.type == TransactionType.PAYMENT else (t.bill_number or 0),
            )
        group.total_amount += t.amount
        if t.type != TransactionType.PAYMENT:
            group.items.append(BillItem(
                name=t.item,
                quantity=t.quantity or 0.0,
                price=t.price or 0.0,
                total=t.amount,
            ))

    needle = (search or "").strip().lower()
    results = []
    for group in groups.values():
        if on_date is not None and group.date != on_date:
            continue
        if payment_method and group.payment != payment_method:
            continue
        if needle and needle not in group.party.lower() and needle not in str(group.bill_number or ""):
            continue
        results.append(group)

    results.sort(key=lambda g: (g.date, g.bill_number or 0), reverse=True)
    return results
