from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security.dependencies import get_current_user
from .schemas import (
    ProductCreate,
    ProductDetailResponse,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)
from .service import ProductService

router = APIRouter(prefix="/shop", tags=["Shop"])


@router.post("", response_model=ProductResponse)
async def create_product(
    product: ProductCreate,
    db: AsyncSession = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return await ProductService.create_product(db, product)


@router.get("", response_model=ProductListResponse)
async def list_products(
    type: Optional[str] = Query(default=None),
    country: Optional[str] = Query(default=None),
    page: int = Query(default=1),
    limit: int = Query(default=0),
    skip: Optional[str] = Query(default=None),
    random: bool = Query(default=False),
    db: AsyncSession = Depends(get_db),
):
    return await ProductService.list_products(
        db, type_ref=type, country_ref=country, page=page, limit=limit, skip=skip, random=random
    )


@router.get("/alias/{alias}", response_model=ProductDetailResponse)
async def get_product_by_alias(alias: str, db: AsyncSession = Depends(get_db)):
    return await ProductService.get_product_by_alias(db, alias)


@router.get("/{product_id}", response_model=ProductDetailResponse)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    return await ProductService.get_product_by_id(db, product_id)


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    payload: ProductUpdate,
    db: AsyncSession = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return await ProductService.update_product(db, product_id, payload)


@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return await ProductService.delete_product(db, product_id)
