import enum
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import INTEGER_MAX
from shared.observability import (
    shop_order_intake_duration_seconds,
    shop_order_rejections_total,
    shop_order_submissions_total,
)
from services.product_service.repository import ProductRepository
from .models import Order, OrderProduct, OrderStatus
from .pricing import reconcile
from .schemas import OrderSubmission
from .validation import check_line_items, validate_fields, validate_shape

logger = structlog.get_logger(__name__)


class IntakeState(str, enum.Enum):
    RECEIVED = "RECEIVED"
    SHAPE_VALIDATED = "SHAPE_VALIDATED"
    FIELD_VALIDATED = "FIELD_VALIDATED"
    PRODUCTS_RESOLVED = "PRODUCTS_RESOLVED"
    PRICE_RECONCILED = "PRICE_RECONCILED"
    PERSISTED = "PERSISTED"
    REJECTED = "REJECTED"


@dataclass
class IntakeContext:
    db: AsyncSession
    raw: Any
    state: IntakeState = IntakeState.RECEIVED
    submission: Optional[OrderSubmission] = None
    prices: dict[int, int] = field(default_factory=dict)
    total_price: Optional[int] = None
    order: Optional[Order] = None


class IntakeStep:
    def __init__(self, name, action, reaches: IntakeState):
        self.name = name
        self.action = action
        self.reaches = reaches


class OrderIntake:
    """Runs the intake steps in order; any failure rejects the whole submission.

    Nothing is committed before the last step, so rolling back the session is
    the only compensation needed.
    """

    def __init__(self):
        self.steps: list[IntakeStep] = []

    def add_step(self, name: str, action: Callable[[IntakeContext], Awaitable[None]], reaches: IntakeState):
        """Builder pattern to add a step and the state it leads to."""
        self.steps.append(IntakeStep(name, action, reaches))
        return self

    async def execute(self, ctx: IntakeContext) -> Order:
        started = time.perf_counter()
        step = None
        try:
            for step in self.steps:
                await step.action(ctx)
                ctx.state = step.reaches
        except Exception as e:
            failed_at = step.name if step else "start"
            ctx.state = IntakeState.REJECTED
            await ctx.db.rollback()
            logger.info("order_rejected", step=failed_at, reason=str(e))
            shop_order_rejections_total.labels(step=failed_at).inc()
            shop_order_submissions_total.labels(status="rejected").inc()
            raise
        finally:
            shop_order_intake_duration_seconds.observe(time.perf_counter() - started)

        shop_order_submissions_total.labels(status="accepted").inc()
        logger.info("order_accepted", order_id=ctx.order.id, total_price=ctx.total_price)
        return ctx.order


# --- STEPS ---

async def validate_submission_shape(ctx: IntakeContext):
    ctx.submission = validate_shape(ctx.raw)


async def validate_submission_fields(ctx: IntakeContext):
    validate_fields(ctx.submission)


async def resolve_products(ctx: IntakeContext):
    # Structural problems are rejected before the catalog is queried
    product_ids = check_line_items(ctx.submission.products)
    # ids outside the key range cannot exist; reconciliation reports them as missing
    storable = [product_id for product_id in product_ids if 0 < product_id <= INTEGER_MAX]
    ctx.prices = await ProductRepository.get_prices(ctx.db, storable) if storable else {}


async def reconcile_price(ctx: IntakeContext):
    ctx.total_price = reconcile(ctx.submission.products, ctx.prices, ctx.submission.total_price)


async def persist_order(ctx: IntakeContext):
    data = ctx.submission
    order = Order(
        name=data.name.strip(),
        phone=data.phone.strip(),
        email=data.email.strip(),
        address=data.address.strip(),
        comment=data.comment.strip() if data.comment is not None else None,
        status=OrderStatus.NEW.value,
        total_price=ctx.total_price,
        items=[OrderProduct(product_id=item.product_id, count=int(item.count)) for item in data.products],
    )
    ctx.db.add(order)
    # One commit for the order row and every line item
    await ctx.db.commit()
    await ctx.db.refresh(order)
    ctx.order = order


# --- BUILDER FACTORY ---

def build_order_intake() -> OrderIntake:
    intake = OrderIntake()
    intake.add_step("validate_shape", validate_submission_shape, IntakeState.SHAPE_VALIDATED)
    intake.add_step("validate_fields", validate_submission_fields, IntakeState.FIELD_VALIDATED)
    intake.add_step("resolve_products", resolve_products, IntakeState.PRODUCTS_RESOLVED)
    intake.add_step("reconcile_price", reconcile_price, IntakeState.PRICE_RECONCILED)
    intake.add_step("persist_order", persist_order, IntakeState.PERSISTED)
    return intake
