from typing import Optional, Union

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from shared.config.database import INTEGER_MAX
from services.catalog_service.schemas import LookupResponse


class ProductCreate(BaseModel):
    name: str = ""
    type: Union[int, str, None] = None
    country: Union[int, str, None] = None
    price: int = Field(default=0, ge=0, le=INTEGER_MAX)
    description: Optional[str] = None
    alias: Optional[str] = None


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    type: Union[int, str, None] = None
    country: Union[int, str, None] = None
    price: Optional[int] = Field(default=None, ge=0, le=INTEGER_MAX)
    description: Optional[str] = None
    alias: Optional[str] = None
    # request key kept from the storefront client
    clear_image: bool = Field(default=False, alias="clearImg")

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ProductResponse(BaseModel):
    id: int
    name: str
    alias: str
    type_id: int
    country_id: int
    price: int
    description: Optional[str] = None
    image: Optional[str] = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class ProductDetailResponse(ProductResponse):
    type: Optional[LookupResponse] = None
    country: Optional[LookupResponse] = None


class ProductListResponse(BaseModel):
    count: int
    rows: list[ProductDetailResponse]
