"""
Tests for the product catalog
"""

import pytest
from dataclasses import replace

from veg_ledger.errors import ValidationError
from veg_ledger.models.schemas import Product


@pytest.mark.asyncio
async def test_add_and_update_product(app):
    tomato = await app.products.add_product("VEG001", "Tomato", 30, 28, 25)

    assert app.store.products == [tomato]

    assert await app.products.update_product(replace(tomato, rate1=32)) is True
    assert app.store.products[0].rate1 == 32


@pytest.mark.asyncio
async def test_item_code_is_unique_regardless_of_case(app):
    await app.products.add_product("VEG001", "Tomato")

    with pytest.raises(ValidationError):
        await app.products.add_product("veg001", "Cherry Tomato")
    with pytest.raises(ValidationError):
        await app.products.add_product("", "Nameless")


@pytest.mark.asyncio
async def test_update_cannot_take_another_code(app):
    await app.products.add_product("VEG001", "Tomato")
    onion = await app.products.add_product("VEG002", "Onion")

    with pytest.raises(ValidationError):
        await app.products.update_product(replace(onion, item_code="VEG001"))


@pytest.mark.asyncio
async def test_update_missing_product(app, dao):
    assert await app.products.update_product(Product(id="gone", item_code="VEG009")) is False
    assert dao.commit_count == 0


@pytest.mark.asyncio
async def test_delete_product(app):
    cabbage = await app.products.add_product("VEG005", "Cabbage", 20, 18, 15)

    await app.products.delete_product(cabbage.id)

    assert app.store.products == []
