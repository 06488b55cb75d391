# product_api/repository.py
"""Product persistence.

``ProductRepository`` is the contract the HTTP layer talks to;
``SqlAlchemyProductRepository`` implements it on top of a single
``AsyncSession`` that lives for the duration of one request. Every write
commits on its own, so each call is one unit of work.
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from .exceptions import ProductNotFoundError
from .models import Product

logger = logging.getLogger(__name__)

# sortBy values understood by get_all; anything else keeps primary-key order
SORT_COLUMNS = {
    "price": Product.price,
    "name": Product.name,
}


class ProductRepository(ABC):

    @abstractmethod
    async def get_all(self, name: Optional[str] = None, sort_by: Optional[str] = None) -> List[Product]:
        """Return all products, optionally filtered by a name substring and sorted."""

    @abstractmethod
    async def get_by_id(self, product_id: int) -> Optional[Product]:
        """Return the product with this id, or None."""

    @abstractmethod
    async def add(self, product: Product) -> Product:
        """Persist a new product; the passed object receives its id."""

    @abstractmethod
    async def update(self, product: Product) -> Product:
        """Persist changes made to a product loaded from this repository."""

    @abstractmethod
    async def delete(self, product_id: int) -> bool:
        """Remove the product; False if there was nothing to remove."""


class SqlAlchemyProductRepository(ProductRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_all(self, name: Optional[str] = None, sort_by: Optional[str] = None) -> List[Product]:
        stmt = select(Product)
        if name:
            # autoescape: % and _ in the filter are literal characters
            stmt = stmt.where(Product.name.contains(name, autoescape=True))

        sort_column = SORT_COLUMNS.get(sort_by) if sort_by else None
        if sort_column is not None:
            stmt = stmt.order_by(sort_column.asc(), Product.id.asc())
        else:
            stmt = stmt.order_by(Product.id.asc())

        result = await self.session.execute(stmt)
        products = list(result.scalars().all())
        logger.debug("get_all(name=%r, sort_by=%r) -> %d rows", name, sort_by, len(products))
        return products

    async def get_by_id(self, product_id: int) -> Optional[Product]:
        return await self.session.get(Product, product_id)

    async def add(self, product: Product) -> Product:
        self.session.add(product)
        await self.session.commit()
        await self.session.refresh(product)
        logger.info("Created product id=%s", product.id)
        return product

    async def update(self, product: Product) -> Product:
        # read before commit: a rollback expires the instance
        product_id = product.id
        self.session.add(product)
        try:
            await self.session.commit()
        except StaleDataError:
            # the row was deleted after it was loaded
            await self.session.rollback()
            logger.warning("Product id=%s disappeared before update", product_id)
            raise ProductNotFoundError(product_id)
        logger.info("Updated product id=%s", product_id)
        return product

    async def delete(self, product_id: int) -> bool:
        product = await self.session.get(Product, product_id)
        if product is None:
            return False
        await self.session.delete(product)
        await self.session.commit()
        logger.info("Deleted product id=%s", product_id)
        return True
