"""Per-day account summaries built from the transaction log."""

import logging
from datetime import date
from typing import Iterable

from veg_ledger.models.schemas import DailyAccountSummary, Transaction, TransactionType
from veg_ledger.repositories.daily_summary_repository import DailySummaryRepository

logger = logging.getLogger(__name__)


def build_daily_summary(transactions: Iterable[Transaction], day: date) -> DailyAccountSummary:
    """
    Totals for one calendar day.

    Payments with a debit came from customers, those with a credit went to
    suppliers.
    """
    summary = DailyAccountSummary(date=day)
    bills = set()
    for t in transactions:
        if t.date != day:
            continue
        if t.type == TransactionType.SALE:
            summary.total_sales += t.amount
            summary.sales_by_method[t.payment] = summary.sales_by_method.get(t.payment, 0.0) + t.amount
            bills.add((t.type, t.bill_number))
        elif t.type == TransactionType.PURCHASE:
            summary.total_purchases += t.amount
            bills.add((t.type, t.bill_number))
        elif t.type == TransactionType.PAYMENT:
            if t.credit:
                summary.payments_made += t.amount
            else:
                summary.payments_received += t.amount
    summary.bill_count = len(bills)
    return summary


class DailySummaryService:

    def __init__(self, summary_repo: DailySummaryRepository):
        self.summary_repo = summary_repo

    async def save_daily_summary(self, summary: DailyAccountSummary) -> str:
        """Merge the summary into the day's document."""
        return await self.summary_repo.save(summary)

    async def close_day(self, transactions: Iterable[Transaction], day: date) -> DailyAccountSummary:
        """Build and save the summary of one day."""
        summary = build_daily_summary(transactions, day)
        await self.save_daily_summary(summary)
        logger.info(f"Closed {day.isoformat()}: sales {summary.total_sales:.2f}, purchases {summary.total_purchases:.2f}")
        return summary
