from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from services.product_service.models import Product
from .schemas import LookupCreate, LookupResponse
from .service import CountryService, TypeService

type_router = APIRouter(prefix="/type", tags=["Types"])
country_router = APIRouter(prefix="/country", tags=["Countries"])


@type_router.post("", response_model=LookupResponse)
async def create_type(payload: LookupCreate, db: AsyncSession = Depends(get_db)):
    return await TypeService.create(db, payload.name)


@type_router.get("", response_model=list[LookupResponse])
async def list_types(involved: bool = False, db: AsyncSession = Depends(get_db)):
    return await TypeService.list_entries(db, Product.type_id if involved else None)


@country_router.post("", response_model=LookupResponse)
async def create_country(payload: LookupCreate, db: AsyncSession = Depends(get_db)):
    return await CountryService.create(db, payload.name)


@country_router.get("", response_model=list[LookupResponse])
async def list_countries(involved: bool = False, db: AsyncSession = Depends(get_db)):
    return await CountryService.list_entries(db, Product.country_id if involved else None)
