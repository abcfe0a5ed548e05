"""
In-memory view of every ledger collection.

One LedgerStore is built per process or session and handed to the services
that need it. It never mutates its own state after a write: the cached lists
are replaced only when the record store delivers a new snapshot (or when
load() re-reads everything).
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Callable, Dict, List, Optional

from veg_ledger.config import (
    SUPPLIERS_COLLECTION,
    CUSTOMERS_COLLECTION,
    SUPPLIER_PAYMENTS_COLLECTION,
    CUSTOMER_PAYMENTS_COLLECTION,
    TRANSACTIONS_COLLECTION,
    PRODUCTS_COLLECTION,
    DAILY_SUMMARIES_COLLECTION,
    WALK_IN_NAME,
)
from veg_ledger.models.schemas import (
    Customer, DailyAccountSummary, Party, PartyType, PaymentDetail, Product, Supplier, Transaction,
)
from veg_ledger.repositories.base import RecordStore

logger = logging.getLogger(__name__)


def _normalize(name: str) -> str:
    return (name or "").strip().lower()


def _sort_key(transaction: Transaction):
    return (transaction.date, transaction.bill_number or 0, transaction.created_at or "")


class LedgerStore:
    """Holds suppliers, customers, summaries, products and the transaction log."""

    def __init__(self, dao: RecordStore):
        """
        Initialize an empty store.

        Args:
            dao: Record store to load from and subscribe to
        """
        self.dao = dao
        self._records: Dict[str, list] = {
            SUPPLIERS_COLLECTION: [],
            CUSTOMERS_COLLECTION: [],
            SUPPLIER_PAYMENTS_COLLECTION: [],
            CUSTOMER_PAYMENTS_COLLECTION: [],
            TRANSACTIONS_COLLECTION: [],
            PRODUCTS_COLLECTION: [],
            DAILY_SUMMARIES_COLLECTION: [],
        }
        self._converters: Dict[str, Callable] = {
            SUPPLIERS_COLLECTION: Supplier.from_dict,
            CUSTOMERS_COLLECTION: Customer.from_dict,
            SUPPLIER_PAYMENTS_COLLECTION: PaymentDetail.from_dict,
            CUSTOMER_PAYMENTS_COLLECTION: PaymentDetail.from_dict,
            TRANSACTIONS_COLLECTION: Transaction.from_dict,
            PRODUCTS_COLLECTION: Product.from_dict,
            DAILY_SUMMARIES_COLLECTION: DailyAccountSummary.from_dict,
        }
        self._unsubscribers: List[Callable[[], None]] = []
        self.loaded = False

    def _replace(self, collection: str, documents: List[dict]) -> None:
        """Swap in a fresh snapshot; documents that fail to convert are skipped."""
        convert = self._converters[collection]
        records = []
        for document in documents:
            try:
                records.append(convert(document))
            except Exception as e:
                logger.error(f"Error converting {collection} document {document.get('id')}: {str(e)}")
        # Rebinding the list keeps readers on other threads consistent
        self._records[collection] = records
        logger.debug(f"Snapshot of {collection}: {len(records)} records")

    async def load(self) -> None:
        """Read every collection once."""
        for collection in self._records:
            documents = await self.dao.query_documents(collection)
            self._replace(collection, documents)
        self.loaded = True
        logger.info(f"Loaded ledger store: {len(self._records[TRANSACTIONS_COLLECTION])} transactions")

    def start(self) -> None:
        """Keep every collection current through store subscriptions."""
        if self._unsubscribers:
            return
        for collection in self._records:
            self._unsubscribers.append(
                self.dao.subscribe(collection, lambda docs, name=collection: self._replace(name, docs))
            )
        self.loaded = True
        logger.info("Ledger store subscribed to all collections")

    def stop(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        logger.info("Ledger store unsubscribed")

    # Read views
    @property
    def transactions(self) -> List[Transaction]:
        """Newest day first, then highest bill number, then latest write."""
        return sorted(self._records[TRANSACTIONS_COLLECTION], key=_sort_key, reverse=True)

    @property
    def suppliers(self) -> List[Supplier]:
        return list(self._records[SUPPLIERS_COLLECTION])

    @property
    def customers(self) -> List[Customer]:
        return list(self._records[CUSTOMERS_COLLECTION])

    @property
    def products(self) -> List[Product]:
        return list(self._records[PRODUCTS_COLLECTION])

    @property
    def daily_summaries(self) -> List[DailyAccountSummary]:
        return list(self._records[DAILY_SUMMARIES_COLLECTION])

    @property
    def supplier_payments(self) -> List[PaymentDetail]:
        return self._annotated(self._records[SUPPLIER_PAYMENTS_COLLECTION], self.suppliers)

    @property
    def customer_payments(self) -> List[PaymentDetail]:
        return self._annotated(self._records[CUSTOMER_PAYMENTS_COLLECTION], self.customers)

    @staticmethod
    def _annotated(details: List[PaymentDetail], parties: List[Party]) -> List[PaymentDetail]:
        """Attach the party code; the walk-in customer always reports nothing due."""
        by_id = {party.id: party for party in parties}
        annotated = []
        for detail in details:
            party = by_id.get(detail.party_id)
            view = replace(detail, code=party.code if party else None)
            if party is not None and party.is_walk_in:
                view.due_amount = 0.0
            annotated.append(view)
        return annotated

    def parties(self, party_type: PartyType) -> List[Party]:
        return self.suppliers if PartyType(party_type) == PartyType.SUPPLIER else self.customers

    def payment_details(self, party_type: PartyType) -> List[PaymentDetail]:
        if PartyType(party_type) == PartyType.SUPPLIER:
            return self.supplier_payments
        return self.customer_payments

    # Lookups
    def get_party(self, party_type: PartyType, party_id: str) -> Optional[Party]:
        return next((p for p in self.parties(party_type) if p.id == party_id), None)

    def find_party_by_name(self, party_type: PartyType, name: str) -> Optional[Party]:
        """Case-insensitive name match."""
        wanted = _normalize(name)
        return next((p for p in self.parties(party_type) if _normalize(p.name) == wanted), None)

    def get_payment_detail(self, party_type: PartyType, party_id: str) -> Optional[PaymentDetail]:
        return next((d for d in self.payment_details(party_type) if d.party_id == party_id), None)

    def walk_in_customers(self) -> List[Customer]:
        """Customers named like the walk-in customer, in store order."""
        wanted = _normalize(WALK_IN_NAME)
        return [c for c in self.customers if _normalize(c.name) == wanted]

    def transactions_on(self, day: date) -> List[Transaction]:
        return [t for t in self._records[TRANSACTIONS_COLLECTION] if t.date == day]

    def max_bill_number(self, day: date) -> int:
        """Highest bill number used on a calendar day, 0 when none."""
        return max((t.bill_number or 0 for t in self.transactions_on(day)), default=0)
