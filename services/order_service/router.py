from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.config.settings import ORDER_RATE_LIMIT
from shared.errors import ValidationError
from shared.security import get_current_user, limiter
from .schemas import OrderListResponse, OrderResponse, OrderStatusUpdate
from .service import OrderService
from .validation import SHAPE_ERROR

router = APIRouter(prefix="/order", tags=["Orders"])


@router.post("", response_model=OrderResponse)
@limiter.limit(ORDER_RATE_LIMIT)
async def create_order(request: Request, db: AsyncSession = Depends(get_db)):
    # The raw body goes through the intake's own shape validation
    try:
        raw = await request.json()
    except ValueError:
        raise ValidationError(SHAPE_ERROR)
    return await OrderService.create_order(db, raw)


@router.put("", response_model=OrderResponse)
async def update_order_status(
    payload: OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return await OrderService.update_status(db, payload)


@router.get("", response_model=OrderListResponse)
async def list_orders(
    page: int = Query(default=1),
    limit: int = Query(default=0),
    db: AsyncSession = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return await OrderService.list_orders(db, page=page, limit=limit)
