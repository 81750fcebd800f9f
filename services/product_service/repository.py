from typing import Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Product


class ProductRepository:

    @staticmethod
    async def create_product(db: AsyncSession, product: Product):
        db.add(product)
        await db.commit()
        await db.refresh(product)
        return product

    @staticmethod
    async def list_products(
        db: AsyncSession,
        type_id: Optional[int] = None,
        country_id: Optional[int] = None,
        skip_ids: Iterable[int] = (),
        limit: Optional[int] = None,
        offset: int = 0,
        random: bool = False,
    ):
        """Returns ``(count, rows)`` for one page of the catalog."""
        conditions = []
        if type_id:
            conditions.append(Product.type_id == type_id)
        if country_id:
            conditions.append(Product.country_id == country_id)
        skip_ids = list(skip_ids)
        if skip_ids:
            conditions.append(Product.id.not_in(skip_ids))

        count = await db.scalar(select(func.count(Product.id)).where(*conditions))

        query = select(Product).where(*conditions)
        if random:
            query = query.order_by(func.random())
        else:
            query = query.order_by(Product.created_at.desc(), Product.id.desc())
        if limit:
            query = query.limit(limit).offset(offset)
        result = await db.execute(query)
        return count, result.scalars().all()

    @staticmethod
    async def get_product_by_id(db: AsyncSession, product_id: int):
        result = await db.execute(select(Product).where(Product.id == product_id))
        return result.scalars().first()

    @staticmethod
    async def get_product_by_alias(db: AsyncSession, alias: str):
        result = await db.execute(select(Product).where(Product.alias == alias))
        return result.scalars().first()

    @staticmethod
    async def get_prices(db: AsyncSession, product_ids: Iterable[int]) -> dict[int, int]:
        """Authoritative prices for the given ids, fetched in one query."""
        result = await db.execute(
            select(Product.id, Product.price).where(Product.id.in_(list(product_ids)))
        )
        return {product_id: price for product_id, price in result.all()}

    @staticmethod
    async def update_product(db: AsyncSession, product: Product):
        db.add(product)
        await db.commit()
        await db.refresh(product)
        return product

    @staticmethod
    async def delete_product(db: AsyncSession, product: Product):
        await db.delete(product)
        await db.commit()
