from typing import Optional, Type as ModelClass

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Country, Type


class LookupRepository:
    """Shared queries for the name-only lookup tables (types, countries)."""

    def __init__(self, model: ModelClass):
        self.model = model

    async def create(self, db: AsyncSession, name: str):
        entry = self.model(name=name)
        db.add(entry)
        await db.commit()
        await db.refresh(entry)
        return entry

    async def get_all(self, db: AsyncSession, ids: Optional[list[int]] = None):
        query = select(self.model).order_by(self.model.id)
        if ids is not None:
            query = query.where(self.model.id.in_(ids))
        result = await db.execute(query)
        return result.scalars().all()

    async def get_by_id(self, db: AsyncSession, entry_id: int):
        result = await db.execute(select(self.model).where(self.model.id == entry_id))
        return result.scalars().first()

    async def get_by_name(self, db: AsyncSession, name: str):
        result = await db.execute(
            select(self.model).where(func.lower(self.model.name) == name.lower())
        )
        return result.scalars().first()

    @staticmethod
    async def get_referenced_ids(db: AsyncSession, column) -> list[int]:
        """Distinct non-null values of a product foreign-key column."""
        result = await db.execute(select(distinct(column)).where(column.is_not(None)))
        return list(result.scalars().all())


TypeRepository = LookupRepository(Type)
CountryRepository = LookupRepository(Country)
