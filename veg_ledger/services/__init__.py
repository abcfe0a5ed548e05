"""Services package: in-memory store, write paths and read-side projections."""

from veg_ledger.services.ledger_store import LedgerStore
from veg_ledger.services.transaction_writer import TransactionWriter
from veg_ledger.services.party_service import PartyService
from veg_ledger.services.product_service import ProductService
from veg_ledger.services.daily_summary_service import DailySummaryService, build_daily_summary
from veg_ledger.services.reconciliation_service import (
    ReconciliationService, reconcile_balances, find_bill_number_collisions,
)
from veg_ledger.services.ledger_projector import project_ledger
from veg_ledger.services.bill_history import group_bills

__all__ = [
    "LedgerStore",
    "TransactionWriter",
    "PartyService",
    "ProductService",
    "DailySummaryService",
    "build_daily_summary",
    "ReconciliationService",
    "reconcile_balances",
    "find_bill_number_collisions",
    "project_ledger",
    "group_bills",
]
