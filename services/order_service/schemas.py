from typing import Optional, Union

from pydantic import BaseModel, FiniteFloat, field_validator
from pydantic.alias_generators import to_camel

from services.catalog_service.schemas import LookupResponse

# JSON integers stay ints so large totals compare exactly
Number = Union[int, FiniteFloat]


class LineItemRequest(BaseModel):
    product_id: int
    count: Number

    class Config:
        alias_generator = to_camel
        extra = "forbid"
        strict = True


class OrderSubmission(BaseModel):
    """Shape of ``POST /order``; strict so no value is silently coerced."""

    name: str
    phone: str
    email: str
    address: str
    comment: Optional[str] = None
    total_price: Number
    products: list[LineItemRequest]

    class Config:
        alias_generator = to_camel
        extra = "forbid"
        strict = True

    @field_validator("comment", mode="before")
    @classmethod
    def comment_is_text_when_sent(cls, value):
        # absent means no comment; an explicit null is malformed
        if value is None:
            raise ValueError("comment must be a string")
        return value


class OrderStatusUpdate(BaseModel):
    id: Union[int, str, None] = None
    status: Optional[str] = None


class OrderResponse(BaseModel):
    id: int
    name: str
    email: str
    address: Optional[str] = None
    phone: str
    comment: Optional[str] = None
    status: str
    total_price: int

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class OrderedProductResponse(BaseModel):
    id: int
    name: str
    alias: str
    price: int
    image: Optional[str] = None
    type: Optional[LookupResponse] = None
    country: Optional[LookupResponse] = None
    count: int


class OrderDetailResponse(OrderResponse):
    products: list[OrderedProductResponse] = []

    @classmethod
    def from_order(cls, order) -> "OrderDetailResponse":
        products = []
        for item in order.items:
            product = item.product
            if product is None:
                continue
            products.append(OrderedProductResponse(
                id=product.id,
                name=product.name,
                alias=product.alias,
                price=product.price,
                image=product.image,
                type=LookupResponse.model_validate(product.type) if product.type else None,
                country=LookupResponse.model_validate(product.country) if product.country else None,
                count=item.count,
            ))
        base = OrderResponse.model_validate(order)
        return cls(**base.model_dump(), products=products)


class OrderListResponse(BaseModel):
    count: int
    rows: list[OrderDetailResponse]
