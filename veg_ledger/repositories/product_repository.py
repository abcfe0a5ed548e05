"""Repository for the product catalog."""

import logging

from veg_ledger.config import PRODUCTS_COLLECTION
from veg_ledger.models.schemas import Product
from veg_ledger.repositories.base import RecordStore

logger = logging.getLogger(__name__)


class ProductRepository:

    def __init__(self, dao: RecordStore):
        self.dao = dao

    def new_product_id(self) -> str:
        return self.dao.new_document_id(PRODUCTS_COLLECTION)

    async def create(self, product: Product) -> str:
        await self.dao.add_document(PRODUCTS_COLLECTION, product.id, product)
        logger.info(f"Created product {product.item_code} ({product.id})")
        return product.id

    async def update(self, product: Product) -> None:
        await self.dao.update_document(PRODUCTS_COLLECTION, product.id, {
            "item_code": product.item_code,
            "name": product.name,
            "rate1": product.rate1,
            "rate2": product.rate2,
            "rate3": product.rate3,
        })

    async def delete(self, product_id: str) -> None:
        await self.dao.delete_document(PRODUCTS_COLLECTION, product_id)
