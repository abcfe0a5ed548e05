"""
Tests for supplier and customer maintenance
"""

import pytest

from veg_ledger.config import WALK_IN_CODE, WALK_IN_NAME
from veg_ledger.errors import RecordStoreError, ValidationError
from veg_ledger.models.schemas import Customer, PartyType, Supplier


@pytest.mark.asyncio
async def test_add_party_creates_empty_summary(app):
    supplier = await app.parties.add_party(PartyType.SUPPLIER, "Hari", "9876543210", "Koyambedu, Chennai", "H1")

    assert app.store.get_party(PartyType.SUPPLIER, supplier.id) == supplier
    detail = app.store.get_payment_detail(PartyType.SUPPLIER, supplier.id)
    assert (detail.total_amount, detail.paid_amount, detail.due_amount) == (0, 0, 0)
    assert detail.payment_method == "Credit"
    assert detail.code == "H1"


@pytest.mark.asyncio
async def test_duplicate_name_or_code_is_rejected(app, dao, seed_party):
    seed_party(PartyType.SUPPLIER, "SUP001", "Hari", code="H1")
    commits = dao.commit_count

    with pytest.raises(ValidationError):
        await app.parties.add_party(PartyType.SUPPLIER, " hari ")
    with pytest.raises(ValidationError):
        await app.parties.add_party(PartyType.SUPPLIER, "Asif", code="H1")
    with pytest.raises(ValidationError):
        await app.parties.add_party(PartyType.SUPPLIER, "   ")

    assert dao.commit_count == commits


@pytest.mark.asyncio
async def test_same_code_allowed_across_party_types(app, seed_party):
    seed_party(PartyType.SUPPLIER, "SUP001", "Hari", code="H1")

    customer = await app.parties.add_party(PartyType.CUSTOMER, "Hari Stores", code="H1")

    assert customer.code == "H1"


@pytest.mark.asyncio
async def test_update_party_mirrors_name_into_summary(app, seed_party):
    seed_party(PartyType.CUSTOMER, "CUS003", "Anbu Retail", total=8400, paid=5000)

    updated = await app.parties.update_party(
        PartyType.CUSTOMER, Customer(id="CUS003", name="Anbu Retail Mart", contact="9123456782", code="AR")
    )

    assert updated is True
    assert app.store.get_party(PartyType.CUSTOMER, "CUS003").name == "Anbu Retail Mart"
    detail = app.store.get_payment_detail(PartyType.CUSTOMER, "CUS003")
    assert detail.party_name == "Anbu Retail Mart"
    assert detail.code == "AR"
    assert detail.due_amount == 3400


@pytest.mark.asyncio
async def test_update_missing_party_is_a_no_op(app, dao):
    assert await app.parties.update_party(PartyType.SUPPLIER, Supplier(id="gone", name="Nobody")) is False
    assert dao.commit_count == 0


@pytest.mark.asyncio
async def test_correct_balance_back_solves_paid(app, seed_party):
    seed_party(PartyType.SUPPLIER, "SUP001", "Hari", total=800, paid=500)

    assert await app.parties.correct_balance(PartyType.SUPPLIER, "SUP001", 100) is True

    detail = app.store.get_payment_detail(PartyType.SUPPLIER, "SUP001")
    assert (detail.total_amount, detail.paid_amount, detail.due_amount) == (800, 700, 100)


@pytest.mark.asyncio
async def test_correct_balance_skips_walk_in(app, dao, seed_party):
    seed_party(PartyType.CUSTOMER, "CUS000", WALK_IN_NAME, total=100, paid=100, code=WALK_IN_CODE)
    commits = dao.commit_count

    assert await app.parties.correct_balance(PartyType.CUSTOMER, "CUS000", 50) is False
    assert dao.commit_count == commits


@pytest.mark.asyncio
async def test_correct_balance_applies_to_supplier_with_walk_in_code(app, seed_party):
    seed_party(PartyType.SUPPLIER, "SUP000", "Murugan Farms", total=1000, paid=0, code=WALK_IN_CODE)

    assert await app.parties.correct_balance(PartyType.SUPPLIER, "SUP000", 600) is True

    detail = app.store.get_payment_detail(PartyType.SUPPLIER, "SUP000")
    assert (detail.paid_amount, detail.due_amount) == (400, 600)


@pytest.mark.asyncio
async def test_update_party_with_balance(app, seed_party):
    seed_party(PartyType.SUPPLIER, "SUP005", "Ajith", total=1000, paid=922)

    saved = await app.parties.update_party_with_balance(
        PartyType.SUPPLIER, Supplier(id="SUP005", name="Ajith", contact="9876543214"), 0
    )

    assert saved is True
    assert app.store.get_payment_detail(PartyType.SUPPLIER, "SUP005").due_amount == 0
    assert app.store.get_party(PartyType.SUPPLIER, "SUP005").contact == "9876543214"


@pytest.mark.asyncio
async def test_delete_party_removes_summary(app, seed_party):
    seed_party(PartyType.SUPPLIER, "SUP006", "Surya", total=500, paid=408)

    await app.parties.delete_party(PartyType.SUPPLIER, "SUP006")

    assert app.store.get_party(PartyType.SUPPLIER, "SUP006") is None
    assert app.store.get_payment_detail(PartyType.SUPPLIER, "SUP006") is None


@pytest.mark.asyncio
async def test_ensure_walk_in_creates_one(app):
    customer = await app.parties.ensure_walk_in_customer()
    again = await app.parties.ensure_walk_in_customer()

    assert customer.code == WALK_IN_CODE
    assert again.id == customer.id
    assert len(app.store.walk_in_customers()) == 1


@pytest.mark.asyncio
async def test_ensure_walk_in_deletes_duplicates(app, seed_party):
    seed_party(PartyType.CUSTOMER, "CUS000", WALK_IN_NAME, code=WALK_IN_CODE)
    seed_party(PartyType.CUSTOMER, "CUS999", WALK_IN_NAME)

    kept = await app.parties.ensure_walk_in_customer()

    assert len(app.store.walk_in_customers()) == 1
    assert app.store.walk_in_customers()[0].id == kept.id


@pytest.mark.asyncio
async def test_duplicate_cleanup_failure_is_only_logged(app, dao, seed_party):
    seed_party(PartyType.CUSTOMER, "CUS000", WALK_IN_NAME, code=WALK_IN_CODE)
    seed_party(PartyType.CUSTOMER, "CUS999", WALK_IN_NAME)
    dao.fail_writes = True

    kept = await app.parties.ensure_walk_in_customer()

    assert kept.id in {"CUS000", "CUS999"}
    assert len(app.store.walk_in_customers()) == 2


@pytest.mark.asyncio
async def test_store_failure_propagates(app, dao):
    dao.fail_writes = True

    with pytest.raises(RecordStoreError):
        await app.parties.add_party(PartyType.CUSTOMER, "Suresh Kumar")
