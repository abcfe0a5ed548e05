"""
Data models for the ledger's Firestore collections.

Master data (suppliers, customers, products), the transaction log, and the
per-party balance summaries kept alongside it.
"""
from datetime import datetime, date
from typing import Optional, Dict, Any
from dataclasses import dataclass, field, fields
from uuid import uuid4
import enum

from veg_ledger.config import (
    WALK_IN_CODE,
    CREDIT_PAYMENT_METHOD,
    DEFAULT_PAYMENT_METHOD,
)
from veg_ledger.utils.parsing import parse_date, parse_amount


# Enums
class TransactionType(str, enum.Enum):
    SALE = "Sale"
    PURCHASE = "Purchase"
    PAYMENT = "Payment"


class PartyType(str, enum.Enum):
    SUPPLIER = "Supplier"
    CUSTOMER = "Customer"


def _new_id() -> str:
    return str(uuid4())


def _utc_timestamp() -> str:
    return datetime.utcnow().isoformat()


def _known_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys the dataclass does not declare (e.g. document_id)."""
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


def _required_date(value: Any) -> date:
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"Unreadable date: {value!r}")
    return parsed


# Master data
@dataclass
class Party:
    id: str = field(default_factory=_new_id)
    name: str = ""
    contact: str = ""
    address: str = ""
    code: str = ""

    @property
    def is_walk_in(self) -> bool:
        return False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        party = cls(**_known_fields(cls, data))
        party.code = party.code or ""
        return party


@dataclass
class Supplier(Party):
    pass


@dataclass
class Customer(Party):
    @property
    def is_walk_in(self) -> bool:
        """Codes are unique per party type, so only a customer can be the walk-in."""
        return self.code == WALK_IN_CODE


@dataclass
class Product:
    id: str = field(default_factory=_new_id)
    item_code: str = ""  # Unique, compared case-insensitively
    name: str = ""
    rate1: float = 0.0
    rate2: float = 0.0
    rate3: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        product = cls(**_known_fields(cls, data))
        for rate in ("rate1", "rate2", "rate3"):
            setattr(product, rate, parse_amount(getattr(product, rate)) or 0.0)
        return product


# Transaction log
@dataclass
class Transaction:
    """One line of the transaction log. Never updated once written."""
    id: str = field(default_factory=_new_id)
    date: date = field(default_factory=date.today)
    party: str = ""  # Party name, not id
    type: TransactionType = TransactionType.SALE
    item: str = ""
    amount: float = 0.0
    payment: str = DEFAULT_PAYMENT_METHOD
    quantity: Optional[float] = None
    price: Optional[float] = None
    bill_number: Optional[int] = None  # Restarts at 1 every calendar day
    debit: Optional[float] = None  # Customer payments
    credit: Optional[float] = None  # Supplier payments
    created_at: str = field(default_factory=_utc_timestamp)

    @property
    def is_billed(self) -> bool:
        return self.type in (TransactionType.SALE, TransactionType.PURCHASE)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        values = _known_fields(cls, data)
        values["date"] = _required_date(values.get("date"))
        values["type"] = TransactionType(values.get("type", TransactionType.SALE))
        values["amount"] = parse_amount(values.get("amount")) or 0.0
        if values.get("bill_number") is not None:
            values["bill_number"] = int(values["bill_number"])
        if isinstance(values.get("created_at"), datetime):
            values["created_at"] = values["created_at"].isoformat()
        return cls(**values)


# Balance summaries
@dataclass
class PaymentDetail:
    """Running totals for one party; the document id is the party id."""
    id: str = ""
    party_id: str = ""
    party_name: str = ""
    total_amount: float = 0.0
    paid_amount: float = 0.0
    due_amount: float = 0.0
    payment_method: str = CREDIT_PAYMENT_METHOD
    code: Optional[str] = None  # Filled in from the party registry when read

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PaymentDetail":
        detail = cls(**_known_fields(cls, data))
        detail.total_amount = parse_amount(detail.total_amount) or 0.0
        detail.paid_amount = parse_amount(detail.paid_amount) or 0.0
        detail.due_amount = parse_amount(detail.due_amount) or 0.0
        detail.id = detail.id or detail.party_id
        return detail


@dataclass
class DailyAccountSummary:
    date: date = field(default_factory=date.today)
    total_sales: float = 0.0
    total_purchases: float = 0.0
    payments_received: float = 0.0  # From customers
    payments_made: float = 0.0  # To suppliers
    bill_count: int = 0
    sales_by_method: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DailyAccountSummary":
        values = _known_fields(cls, data)
        values["date"] = _required_date(values.get("date"))
        return cls(**values)


# Writer inputs
@dataclass
class LineItem:
    """One row of a sale or purchase cart."""
    date: date
    item: str
    quantity: float = 0.0
    price: float = 0.0
    amount: Optional[float] = None  # Defaults to quantity * price

    @property
    def total(self) -> float:
        if self.amount is not None:
            return self.amount
        return self.quantity * self.price


@dataclass
class PartyDetails:
    name: str
    contact: str = ""
    address: str = ""
