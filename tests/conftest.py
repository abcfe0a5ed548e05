"""
Shared fixtures: an in-memory record store and a LedgerApp wired to it.
"""

import pytest

from veg_ledger.app import LedgerApp
from veg_ledger.mocks import InMemoryRecordStore
from veg_ledger.models.schemas import Customer, PartyType, PaymentDetail, Supplier
from veg_ledger.repositories.party_repository import party_collection, payment_collection


@pytest.fixture
def dao():
    """Empty in-memory record store."""
    return InMemoryRecordStore()


@pytest.fixture
def app(dao):
    """LedgerApp whose store follows every commit through subscriptions."""
    ledger_app = LedgerApp(dao=dao)
    ledger_app.store.start()
    yield ledger_app
    ledger_app.stop()


@pytest.fixture
def seed_party(dao):
    """Seed a party and, unless total is None, its balance summary."""
    def _seed(party_type, party_id, name, total=0.0, paid=0.0, due=None, code=""):
        cls = Supplier if party_type == PartyType.SUPPLIER else Customer
        party = cls(id=party_id, name=name, contact="9876543210", address="Koyambedu, Chennai", code=code)
        dao.seed(party_collection(party_type), [party])
        if total is not None:
            dao.seed(payment_collection(party_type), [PaymentDetail(
                id=party_id,
                party_id=party_id,
                party_name=name,
                total_amount=total,
                paid_amount=paid,
                due_amount=total - paid if due is None else due,
            )])
        return party
    return _seed
