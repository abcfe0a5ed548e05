"""Dataclass models for ledger records and reports."""

from veg_ledger.models.schemas import (
    TransactionType, PartyType,
    Party, Supplier, Customer, Product,
    Transaction, PaymentDetail, DailyAccountSummary,
    LineItem, PartyDetails,
)
from veg_ledger.models.reports import (
    LedgerDay, LedgerReport, BillItem, BillGroup, BalanceDrift,
)

__all__ = [
    "TransactionType", "PartyType",
    "Party", "Supplier", "Customer", "Product",
    "Transaction", "PaymentDetail", "DailyAccountSummary",
    "LineItem", "PartyDetails",
    "LedgerDay", "LedgerReport", "BillItem", "BillGroup", "BalanceDrift",
]
