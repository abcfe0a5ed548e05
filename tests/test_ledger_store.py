"""
Tests for the in-memory ledger store
"""

import pytest
from datetime import date

from veg_ledger.app import LedgerApp
from veg_ledger.models.schemas import PartyType, Transaction, TransactionType


def entry(id, day, bill, created_at="2024-05-01T08:00:00", type=TransactionType.SALE):
    return Transaction(id=id, date=day, party="Venkatesh", type=type, item="Tomato",
                       amount=10, bill_number=bill, created_at=created_at)


@pytest.mark.asyncio
async def test_load_reads_every_collection(dao, seed_party):
    seed_party(PartyType.SUPPLIER, "SUP001", "Hari", total=1000, paid=0)
    app = LedgerApp(dao=dao)

    await app.start(live=False)

    assert app.store.loaded
    assert [s.name for s in app.store.suppliers] == ["Hari"]
    assert app.store.get_payment_detail(PartyType.SUPPLIER, "SUP001").due_amount == 1000


@pytest.mark.asyncio
async def test_stop_ends_updates(app, dao, seed_party):
    app.stop()

    seed_party(PartyType.SUPPLIER, "SUP001", "Hari")

    assert app.store.suppliers == []


def test_transactions_newest_first(app, dao):
    dao.seed("transactions", [
        entry("a", date(2024, 5, 1), 1),
        entry("b", date(2024, 5, 2), 1),
        entry("c", date(2024, 5, 1), 2),
    ])

    assert [t.id for t in app.store.transactions] == ["b", "c", "a"]
    assert app.store.max_bill_number(date(2024, 5, 1)) == 2
    assert app.store.max_bill_number(date(2024, 5, 3)) == 0


def test_unreadable_documents_are_skipped(app, dao):
    dao.seed("transactions", [
        {"id": "ok", "date": "2024-05-01", "party": "Hari", "type": "Purchase", "amount": 10},
        {"id": "bad", "date": "2024-05-01", "party": "Hari", "type": "Refund", "amount": 10},
    ])

    assert [t.id for t in app.store.transactions] == ["ok"]


def test_documents_with_unreadable_dates_are_skipped(app, dao):
    dao.seed("transactions", [
        {"id": "ok", "date": "2024-05-01", "party": "Hari", "type": "Purchase", "amount": 10, "bill_number": 1},
        {"id": "bad", "date": "not-a-date", "party": "Hari", "type": "Purchase", "amount": 10, "bill_number": 7},
    ])

    assert [t.id for t in app.store.transactions] == ["ok"]
    assert app.store.max_bill_number(date.today()) == 0


def test_find_party_by_name_ignores_case_and_spaces(app, seed_party):
    seed_party(PartyType.CUSTOMER, "CUS002", "Suresh Kumar")

    assert app.store.find_party_by_name(PartyType.CUSTOMER, "  suresh KUMAR ").id == "CUS002"
    assert app.store.find_party_by_name(PartyType.SUPPLIER, "Suresh Kumar") is None
