"""Repository for per-day account summaries."""

import logging
from datetime import date
from typing import Optional

from veg_ledger.config import DAILY_SUMMARIES_COLLECTION
from veg_ledger.models.schemas import DailyAccountSummary
from veg_ledger.repositories.base import RecordStore

logger = logging.getLogger(__name__)


class DailySummaryRepository:
    """Summaries are keyed by their ISO date and saved with merge semantics."""

    def __init__(self, dao: RecordStore):
        self.dao = dao

    async def save(self, summary: DailyAccountSummary) -> str:
        document_id = summary.date.isoformat()
        await self.dao.add_document(DAILY_SUMMARIES_COLLECTION, document_id, summary, merge=True)
        logger.info(f"Saved daily summary for {document_id}")
        return document_id

    async def get(self, day: date) -> Optional[DailyAccountSummary]:
        document = await self.dao.get_document(DAILY_SUMMARIES_COLLECTION, day.isoformat())
        if not document:
            return None
        return DailyAccountSummary.from_dict(document)
