"""Repository package for record store operations."""

from veg_ledger.repositories.base import RecordStore, WriteOp, to_document
from veg_ledger.repositories.firestore_dao import FirestoreDAO
from veg_ledger.repositories.party_repository import PartyRepository
from veg_ledger.repositories.transaction_repository import TransactionRepository
from veg_ledger.repositories.product_repository import ProductRepository
from veg_ledger.repositories.daily_summary_repository import DailySummaryRepository

__all__ = [
    "RecordStore",
    "WriteOp",
    "to_document",
    "FirestoreDAO",
    "PartyRepository",
    "TransactionRepository",
    "ProductRepository",
    "DailySummaryRepository",
]
