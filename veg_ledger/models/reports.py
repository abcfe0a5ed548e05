"""Read-side results derived from the transaction log."""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

from veg_ledger.models.schemas import PartyType, Transaction, TransactionType


@dataclass
class LedgerDay:
    date: date
    opening: float = 0.0
    purchases: float = 0.0  # Billed on this day (Sale or Purchase)
    credit: float = 0.0  # Paid on this day
    payment_methods: List[str] = field(default_factory=list)
    closing: float = 0.0
    transactions: List[Transaction] = field(default_factory=list)


@dataclass
class LedgerReport:
    rows: List[LedgerDay] = field(default_factory=list)  # Newest first
    opening_balance: float = 0.0
    total_purchases: float = 0.0
    total_credit: float = 0.0
    closing_balance: float = 0.0
    date_from: Optional[date] = None
    date_to: Optional[date] = None


@dataclass
class BillItem:
    name: str
    quantity: float = 0.0
    price: float = 0.0
    total: float = 0.0


@dataclass
class BillGroup:
    """A bill (line items sharing date and bill number) or a lone payment."""
    key: Tuple
    date: date
    party: str
    type: TransactionType
    payment: str
    bill_number: Optional[int] = None
    total_amount: float = 0.0
    items: List[BillItem] = field(default_factory=list)


@dataclass
class BalanceDrift:
    party_type: PartyType
    party_id: str
    party_name: str
    total_amount: float
    paid_amount: float
    due_amount: float
    billed_in_log: float
    paid_in_log: float

    @property
    def ghost_balance(self) -> float:
        """Part of the due amount the transaction log does not explain."""
        return self.due_amount - (self.billed_in_log - self.paid_in_log)

    @property
    def invariant_gap(self) -> float:
        """Difference between the stored due amount and total minus paid."""
        return self.due_amount - (self.total_amount - self.paid_amount)
