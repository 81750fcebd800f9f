from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.settings import ALIAS_MAX_ATTEMPTS, ALIAS_MAX_LENGTH
from shared.errors import ConflictError
from shared.observability import shop_alias_collisions_total
from .models import Product
from .slug import to_slug

logger = structlog.get_logger(__name__)


async def alias_taken(db: AsyncSession, alias: str, exclude_id: Optional[int] = None) -> bool:
    query = select(Product.id).where(Product.alias == alias)
    if exclude_id is not None:
        query = query.where(Product.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.scalar() is not None


def suffixed(base: str, counter: int, max_len: int) -> str:
    suffix = f"-{counter}"
    if max_len <= len(suffix):
        raise ValueError(f"Alias length {max_len} leaves no room for the suffix {suffix!r}")
    head = base[: max_len - len(suffix)].rstrip("-")
    return f"{head}{suffix}"


async def generate_unique_alias(
    db: AsyncSession,
    base: str,
    max_len: int = ALIAS_MAX_LENGTH,
    exclude_id: Optional[int] = None,
    max_attempts: int = ALIAS_MAX_ATTEMPTS,
) -> str:
    """Returns the slug of ``base``, suffixed with ``-2``, ``-3``... until unused.

    Probes run on ``db`` so pending rows of the same unit of work are seen.
    This is only a pre-check: the UNIQUE constraint on ``products.alias``
    decides concurrent races.
    """
    slug = to_slug(base, max_len)
    candidate = slug
    counter = 1

    while await alias_taken(db, candidate, exclude_id):
        shop_alias_collisions_total.inc()
        counter += 1
        if counter > max_attempts:
            logger.warning("alias_attempts_exhausted", base=slug, attempts=max_attempts)
            raise ConflictError(f"Could not generate a unique alias for '{slug}'")
        candidate = suffixed(slug, counter, max_len)

    if candidate != slug:
        logger.info("alias_deduplicated", base=slug, alias=candidate)
    return candidate
