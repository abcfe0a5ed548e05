"""Service layer for the product catalog."""

import logging
from typing import Optional

from veg_ledger.errors import ValidationError
from veg_ledger.models.schemas import Product
from veg_ledger.repositories.product_repository import ProductRepository
from veg_ledger.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)


class ProductService:
    """Catalog maintenance; item codes are unique regardless of case."""

    def __init__(self, store: LedgerStore, product_repo: ProductRepository):
        self.store = store
        self.product_repo = product_repo

    def _check_item_code_free(self, item_code: str, exclude_id: Optional[str] = None) -> None:
        wanted = (item_code or "").lower()
        for product in self.store.products:
            if product.item_code.lower() == wanted and product.id != exclude_id:
                raise ValidationError("Product with this code already exists.")

    async def add_product(self, item_code: str, name: str, rate1: float = 0.0,
                          rate2: float = 0.0, rate3: float = 0.0) -> Product:
        if not item_code:
            raise ValidationError("Product code is required.")
        self._check_item_code_free(item_code)
        product = Product(
            id=self.product_repo.new_product_id(),
            item_code=item_code,
            name=name,
            rate1=rate1,
            rate2=rate2,
            rate3=rate3,
        )
        await self.product_repo.create(product)
        return product

    async def update_product(self, product: Product) -> bool:
        """Returns False when the product no longer exists."""
        if not any(p.id == product.id for p in self.store.products):
            logger.warning(f"Product {product.id} not found; update skipped")
            return False
        self._check_item_code_free(product.item_code, exclude_id=product.id)
        await self.product_repo.update(product)
        return True

    async def delete_product(self, product_id: str) -> None:
        await self.product_repo.delete(product_id)
