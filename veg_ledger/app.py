"""Wiring of the record store, the in-memory store and the services."""

import logging
from datetime import date
from typing import List, Optional

from veg_ledger.config import TEST_COLLECTION_PREFIX
from veg_ledger.models.reports import BillGroup, LedgerReport
from veg_ledger.models.schemas import PartyType, TransactionType
from veg_ledger.repositories import (
    DailySummaryRepository,
    FirestoreDAO,
    PartyRepository,
    ProductRepository,
    RecordStore,
    TransactionRepository,
)
from veg_ledger.services import (
    DailySummaryService,
    LedgerStore,
    PartyService,
    ProductService,
    ReconciliationService,
    TransactionWriter,
    group_bills,
    project_ledger,
)

logger = logging.getLogger(__name__)


class LedgerApp:
    """
    One instance per process or session.

    Owns the LedgerStore and hands it to every service; nothing else holds
    ledger state.
    """

    def __init__(self, dao: Optional[RecordStore] = None, is_test: bool = False):
        """
        Build the object graph.

        Args:
            dao: Record store to use (defaults to Firestore)
            is_test: If True, use the test collection prefix for Firestore
        """
        self.dao = dao or FirestoreDAO(collection_prefix=TEST_COLLECTION_PREFIX if is_test else None)
        self.store = LedgerStore(self.dao)

        self.party_repo = PartyRepository(self.dao)
        self.transaction_repo = TransactionRepository(self.dao)
        self.product_repo = ProductRepository(self.dao)
        self.summary_repo = DailySummaryRepository(self.dao)

        self.writer = TransactionWriter(self.store, self.transaction_repo, self.party_repo)
        self.parties = PartyService(self.store, self.party_repo)
        self.products = ProductService(self.store, self.product_repo)
        self.daily_summaries = DailySummaryService(self.summary_repo)
        self.reconciliation = ReconciliationService(self.store, self.party_repo)

    async def start(self, live: bool = True) -> None:
        """Load every collection, then keep it current unless live is False."""
        await self.store.load()
        if live:
            self.store.start()

    def stop(self) -> None:
        self.store.stop()

    def ledger(self, party_type: PartyType, party_id: str, date_from: Optional[date] = None,
               date_to: Optional[date] = None) -> LedgerReport:
        """Ledger statement of one party for a period."""
        return project_ledger(
            self.store.transactions,
            self.store.get_party(party_type, party_id),
            self.store.get_payment_detail(party_type, party_id),
            date_from=date_from,
            date_to=date_to,
        )

    def history(self, transaction_type: Optional[TransactionType] = None, search: str = "",
                on_date: Optional[date] = None, payment_method: Optional[str] = None) -> List[BillGroup]:
        return group_bills(self.store.transactions, transaction_type, search, on_date, payment_method)
