from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import NotFoundError, ValidationError
from .intake import IntakeContext, build_order_intake
from .models import OrderStatus
from .repository import OrderRepository
from .schemas import OrderDetailResponse, OrderStatusUpdate

logger = structlog.get_logger(__name__)

_STATUSES = {status.value for status in OrderStatus}


def _parse_order_id(value) -> int:
    if isinstance(value, bool):
        raise ValidationError("Not valid ID.")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or value <= 0:
        raise ValidationError("Not valid ID.")
    return value


class OrderService:
    intake = build_order_intake()

    @staticmethod
    async def create_order(db: AsyncSession, raw: Any):
        return await OrderService.intake.execute(IntakeContext(db=db, raw=raw))

    @staticmethod
    async def update_status(db: AsyncSession, data: OrderStatusUpdate):
        order_id = _parse_order_id(data.id)
        status = (data.status or "").strip()
        if not status or status not in _STATUSES:
            raise ValidationError("Not valid status")

        order = await OrderRepository.get_order(db, order_id)
        if not order:
            raise NotFoundError(f"Order with ID {order_id} not found", status_code=400)

        # Any status may replace any other; no transition rules are enforced
        previous = order.status
        order = await OrderRepository.update_status(db, order, status)
        logger.info("order_status_changed", order_id=order.id, previous=previous, status=status)
        return order

    @staticmethod
    async def list_orders(db: AsyncSession, page: int = 1, limit: int = 0):
        page = page if page and page > 0 else 1
        limit = limit if limit and limit > 0 else 0
        count, orders = await OrderRepository.list_orders(
            db, limit=limit or None, offset=(page - 1) * limit
        )
        return {"count": count, "rows": [OrderDetailResponse.from_order(order) for order in orders]}
