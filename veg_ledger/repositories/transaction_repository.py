"""Repository for the transaction log."""

import logging
from datetime import date
from typing import List

from veg_ledger.config import BILL_COUNTERS_COLLECTION, TRANSACTIONS_COLLECTION
from veg_ledger.models.schemas import Transaction
from veg_ledger.repositories.base import RecordStore, WriteOp

logger = logging.getLogger(__name__)


class TransactionRepository:
    """Repository for transaction log entries. Entries are append-only."""

    def __init__(self, dao: RecordStore):
        """Initialize with a record store."""
        self.dao = dao

    def new_transaction_id(self) -> str:
        return self.dao.new_document_id(TRANSACTIONS_COLLECTION)

    def build_create_op(self, transaction: Transaction) -> WriteOp:
        return WriteOp.set(TRANSACTIONS_COLLECTION, transaction.id, transaction)

    async def commit(self, ops: List[WriteOp]) -> None:
        """Commit log entries and related writes as one batch."""
        await self.dao.commit_batch(ops)

    async def append_with_bill_number(self, day: date, known_max: int, build_ops) -> int:
        """
        Claim the next bill number of a day and commit the ops built for it.

        Args:
            day: Calendar day the bill belongs to
            known_max: Highest bill number of the day visible to the caller
            build_ops: Callable receiving the bill number and returning the writes

        Returns:
            The bill number the writes were committed under
        """
        return await self.dao.commit_with_counter(
            BILL_COUNTERS_COLLECTION, day.isoformat(), known_max, build_ops
        )
