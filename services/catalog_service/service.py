from typing import Optional, Union

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import ConflictError, ValidationError
from .repository import CountryRepository, LookupRepository, TypeRepository

logger = structlog.get_logger(__name__)


class LookupService:
    def __init__(self, repository: LookupRepository, label: str):
        self.repository = repository
        self.label = label

    async def create(self, db: AsyncSession, name: str):
        name = (name or "").strip()
        if not name:
            raise ValidationError(f"The {self.label} name is not specified")
        try:
            entry = await self.repository.create(db, name)
        except IntegrityError:
            await db.rollback()
            raise ConflictError(f"The {self.label} '{name}' already exists")
        logger.info(f"{self.label}_created", id=entry.id, name=entry.name)
        return entry

    async def list_entries(self, db: AsyncSession, involved_column=None):
        """All entries, or only those referenced by at least one product."""
        if involved_column is not None:
            ids = await LookupRepository.get_referenced_ids(db, involved_column)
            # with no products yet the full list is returned
            if ids:
                return await self.repository.get_all(db, ids)
        return await self.repository.get_all(db)

    async def resolve_id(self, db: AsyncSession, ref: Union[int, str, None]) -> Optional[int]:
        """Accepts an id or a case-insensitive name and returns the existing id.

        Returns None when ``ref`` is absent or nothing matches.
        """
        if ref is None or isinstance(ref, bool):
            return None
        if isinstance(ref, str):
            ref = ref.strip()
            if not ref:
                return None
            if ref.isdigit():
                ref = int(ref)
        if isinstance(ref, int):
            entry = await self.repository.get_by_id(db, ref) if ref > 0 else None
        else:
            entry = await self.repository.get_by_name(db, ref)
        return entry.id if entry else None


TypeService = LookupService(TypeRepository, "type")
CountryService = LookupService(CountryRepository, "country")
