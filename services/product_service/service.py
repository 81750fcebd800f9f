from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import ConflictError, NotFoundError, ValidationError
from services.catalog_service.service import CountryService, TypeService
from .alias import generate_unique_alias
from .models import Product
from .repository import ProductRepository
from .schemas import ProductCreate, ProductUpdate

logger = structlog.get_logger(__name__)

DEFAULT_PAGE_SIZE = 6


def _provided(value: Optional[str]) -> bool:
    """Optional text fields treat both None and the empty string as absent."""
    return value is not None and value.strip() != ""


def _ref_provided(ref) -> bool:
    if isinstance(ref, str):
        return _provided(ref)
    return ref is not None


class ProductService:

    @staticmethod
    async def _commit(db: AsyncSession, product: Product, create: bool):
        name, alias = product.name, product.alias
        try:
            if create:
                return await ProductRepository.create_product(db, product)
            return await ProductRepository.update_product(db, product)
        except IntegrityError:
            # Lost a race on the UNIQUE alias constraint
            await db.rollback()
            logger.warning("product_unique_violation", name=name, alias=alias)
            raise ConflictError("A product with this alias already exists")

    @staticmethod
    async def create_product(db: AsyncSession, data: ProductCreate):
        if not _provided(data.name):
            raise ValidationError("Product name not specified")

        type_id = await TypeService.resolve_id(db, data.type)
        if not type_id:
            raise ValidationError(f"The specified type was not found ({data.type}).")

        country_id = await CountryService.resolve_id(db, data.country)
        if not country_id:
            raise ValidationError(f"The specified country was not found ({data.country}).")

        base = data.alias if _provided(data.alias) else data.name
        product = Product(
            name=data.name.strip(),
            alias=await generate_unique_alias(db, base),
            type_id=type_id,
            country_id=country_id,
            price=data.price,
        )
        if _provided(data.description):
            product.description = data.description

        product = await ProductService._commit(db, product, create=True)
        logger.info("product_created", id=product.id, alias=product.alias)
        return product

    @staticmethod
    async def update_product(db: AsyncSession, product_id: int, data: ProductUpdate):
        product = await ProductService.get_product_by_id(db, product_id)
        fields = data.model_fields_set

        # Renaming never touches the alias; only an explicit alias does
        if _provided(data.name):
            product.name = data.name.strip()
        if _provided(data.alias):
            product.alias = await generate_unique_alias(db, data.alias, exclude_id=product.id)
        if _provided(data.description):
            product.description = data.description
        if _ref_provided(data.type):
            type_id = await TypeService.resolve_id(db, data.type)
            if not type_id:
                raise ValidationError(f"The specified type ({data.type}) was not found")
            product.type_id = type_id
        if _ref_provided(data.country):
            country_id = await CountryService.resolve_id(db, data.country)
            if not country_id:
                raise ValidationError(f"The specified country ({data.country}) was not found")
            product.country_id = country_id
        if "price" in fields:
            product.price = data.price or 0
        if data.clear_image and product.image:
            product.image = None

        product = await ProductService._commit(db, product, create=False)
        logger.info("product_updated", id=product.id, fields=sorted(fields))
        return product

    @staticmethod
    async def list_products(
        db: AsyncSession,
        type_ref=None,
        country_ref=None,
        page: int = 1,
        limit: int = 0,
        skip: Optional[str] = None,
        random: bool = False,
    ):
        page = page if page and page > 0 else 1
        limit = limit if limit and limit > 0 else 0
        if not limit and page > 1:
            limit = DEFAULT_PAGE_SIZE

        skip_ids = [int(part) for part in (skip or "").split(",") if part.strip().isdigit() and int(part) > 0]

        count, rows = await ProductRepository.list_products(
            db,
            type_id=await TypeService.resolve_id(db, type_ref),
            country_id=await CountryService.resolve_id(db, country_ref),
            skip_ids=skip_ids,
            limit=limit or None,
            offset=(page - 1) * limit,
            random=random,
        )
        return {"count": count, "rows": rows}

    @staticmethod
    async def get_product_by_id(db: AsyncSession, product_id: int):
        product = await ProductRepository.get_product_by_id(db, product_id)
        if not product:
            raise NotFoundError(f"No product found with the specified ID ({product_id})")
        return product

    @staticmethod
    async def get_product_by_alias(db: AsyncSession, alias: str):
        alias = alias.strip().lower()
        if not alias:
            raise NotFoundError("Not valid alias")
        product = await ProductRepository.get_product_by_alias(db, alias)
        if not product:
            raise NotFoundError(f"No product found with the specified alias ({alias})")
        return product

    @staticmethod
    async def delete_product(db: AsyncSession, product_id: int):
        product = await ProductService.get_product_by_id(db, product_id)
        try:
            await ProductRepository.delete_product(db, product)
        except IntegrityError:
            await db.rollback()
            raise ConflictError(f"Product with ID {product_id} is referenced by existing orders")
        logger.info("product_deleted", id=product_id)
        return {"deleted": "deleted"}
