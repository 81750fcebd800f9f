from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from .models import Order

class OrderRepository:
    @staticmethod
    async def get_order(db: AsyncSession, order_id: int):
        result = await db.execute(select(Order).where(Order.id == order_id))
        return result.scalars().first()

    @staticmethod
    async def list_orders(db: AsyncSession, limit: Optional[int] = None, offset: int = 0):
        count = await db.scalar(select(func.count(Order.id)))
        query = select(Order).order_by(Order.id.desc())
        if limit:
            query = query.limit(limit).offset(offset)
        result = await db.execute(query)
        return count, result.scalars().all()

    @staticmethod
    async def update_status(db: AsyncSession, order: Order, status: str):
        order.status = status
        await db.commit()
        await db.refresh(order)
        return order
