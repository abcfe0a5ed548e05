"""
Unit tests for the in-memory record store
"""

import pytest

from veg_ledger.errors import RecordStoreError
from veg_ledger.mocks import InMemoryRecordStore
from veg_ledger.models.schemas import Product
from veg_ledger.repositories.base import WriteOp


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.mark.asyncio
async def test_batch_is_all_or_nothing(store):
    ops = [
        WriteOp.set("products", "P001", Product(id="P001", item_code="VEG001", name="Tomato")),
        WriteOp.update("products", "missing", {"rate1": 10}),
    ]

    with pytest.raises(RecordStoreError) as exc:
        await store.commit_batch(ops)

    assert exc.value.path == "products/missing"
    assert store.collections["products"] == {}


@pytest.mark.asyncio
async def test_outage_rejects_writes(store):
    store.fail_writes = True

    with pytest.raises(RecordStoreError):
        await store.add_document("products", "P001", {"id": "P001"})
    with pytest.raises(RecordStoreError):
        await store.commit_with_counter("bill_counters", "2024-05-10", 0, lambda n: [])

    assert store.commit_count == 0


@pytest.mark.asyncio
async def test_subscription_follows_commits(store):
    snapshots = []
    unsubscribe = store.subscribe("products", snapshots.append)

    await store.add_document("products", "P001", {"id": "P001", "name": "Tomato"})
    unsubscribe()
    await store.add_document("products", "P002", {"id": "P002", "name": "Onion"})

    assert snapshots == [[], [{"id": "P001", "name": "Tomato"}]]


@pytest.mark.asyncio
async def test_counter_respects_floor(store):
    first = await store.commit_with_counter("bill_counters", "2024-05-10", 4, lambda n: [])
    second = await store.commit_with_counter("bill_counters", "2024-05-10", 0, lambda n: [])
    other_day = await store.commit_with_counter("bill_counters", "2024-05-11", 0, lambda n: [])

    assert (first, second, other_day) == (5, 6, 1)


@pytest.mark.asyncio
async def test_counter_ops_use_claimed_value(store):
    value = await store.commit_with_counter(
        "bill_counters", "2024-05-10", 0,
        lambda n: [WriteOp.set("transactions", "t1", {"id": "t1", "bill_number": n})]
    )

    assert store.collections["transactions"]["t1"]["bill_number"] == value == 1


@pytest.mark.asyncio
async def test_query_filters_order_and_limit(store):
    store.seed("transactions", [
        {"id": "a", "date": "2024-05-01", "amount": 30},
        {"id": "b", "date": "2024-05-02", "amount": 10},
        {"id": "c", "date": "2024-05-02", "amount": 20},
    ])

    same_day = await store.query_documents("transactions", filters=[("date", "==", "2024-05-02")])
    top = await store.query_documents("transactions", order_by="amount", desc=True, limit=2)

    assert {doc["id"] for doc in same_day} == {"b", "c"}
    assert [doc["id"] for doc in top] == ["a", "c"]


@pytest.mark.asyncio
async def test_merge_set_and_delete(store):
    await store.add_document("daily_summaries", "2024-05-10", {"date": "2024-05-10", "total_sales": 10})
    await store.add_document("daily_summaries", "2024-05-10", {"bill_count": 2}, merge=True)

    assert await store.get_document("daily_summaries", "2024-05-10") == {
        "date": "2024-05-10", "total_sales": 10, "bill_count": 2,
    }

    await store.delete_document("daily_summaries", "2024-05-10")
    assert await store.get_document("daily_summaries", "2024-05-10") is None
