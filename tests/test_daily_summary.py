"""
Tests for per-day account summaries
"""

import pytest
from datetime import date

from veg_ledger.models.schemas import LineItem, PartyDetails, PartyType, TransactionType
from veg_ledger.services.daily_summary_service import build_daily_summary

DAY = date(2024, 5, 10)


@pytest.mark.asyncio
async def test_close_day(app, dao, seed_party):
    seed_party(PartyType.SUPPLIER, "SUP001", "Hari", total=1000, paid=0)
    await app.writer.add_transaction([LineItem(date=DAY, item="Tomato", quantity=10, price=30)],
                                     PartyDetails(name="Venkatesh"), TransactionType.SALE, "Cash")
    await app.writer.add_transaction([LineItem(date=DAY, item="Onion", quantity=5, price=40)],
                                     PartyDetails(name="Anbu Retail"), TransactionType.SALE, "Credit")
    await app.writer.add_transaction([LineItem(date=DAY, item="Potato", quantity=20, price=20)],
                                     PartyDetails(name="Hari"), TransactionType.PURCHASE, "Credit")
    await app.writer.add_payment("SUP001", "Hari", PartyType.SUPPLIER, 250, "NEFT", on_date=DAY)
    await app.writer.add_transaction([LineItem(date=date(2024, 5, 11), item="Carrot", quantity=1, price=50)],
                                     PartyDetails(name="Venkatesh"), TransactionType.SALE, "Cash")

    summary = await app.daily_summaries.close_day(app.store.transactions, DAY)

    assert summary.total_sales == 500
    assert summary.sales_by_method == {"Cash": 300, "Credit": 200}
    assert summary.total_purchases == 400
    assert summary.payments_received == 300
    assert summary.payments_made == 250
    assert summary.bill_count == 3

    assert dao.collections["daily_summaries"][DAY.isoformat()]["total_sales"] == 500
    assert app.store.daily_summaries[0].date == DAY


def test_empty_day():
    summary = build_daily_summary([], DAY)

    assert summary.date == DAY
    assert summary.total_sales == 0
    assert summary.bill_count == 0


@pytest.mark.asyncio
async def test_saved_summary_reads_back(app):
    summary = build_daily_summary([], DAY)
    summary.total_sales = 1250
    summary.sales_by_method = {"UPI/Digital": 1250}

    await app.daily_summaries.save_daily_summary(summary)

    assert await app.summary_repo.get(DAY) == summary
    assert await app.summary_repo.get(date(2024, 5, 11)) is None
