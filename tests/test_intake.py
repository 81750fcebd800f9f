"""Tests for the order intake pipeline against a real session."""
import pytest
from prometheus_client import REGISTRY
from sqlalchemy import event, func, select

from shared.errors import NotFoundError, PriceMismatchError, ValidationError
from services.order_service import intake as intake_module
from services.order_service.intake import IntakeContext, IntakeState, build_order_intake
from services.order_service.models import Order, OrderProduct


def submission(catalog, **overrides) -> dict:
    data = {
        "name": "  Jane Doe ",
        "phone": "+1234567890",
        "email": "j@x.com",
        "address": "123 Main Street ",
        "totalPrice": 30,
        "products": [
            {"productId": catalog["apple_id"], "count": 2},
            {"productId": catalog["pear_id"], "count": 1},
        ],
    }
    data.update(overrides)
    return data


async def order_rows(session_factory) -> tuple[int, int]:
    async with session_factory() as session:
        orders = await session.scalar(select(func.count(Order.id)))
        items = await session.scalar(select(func.count(OrderProduct.id)))
    return orders, items


def rejections(step: str) -> float:
    return REGISTRY.get_sample_value("shop_order_rejections_total", {"step": step}) or 0.0


class TestOrderIntake:

    async def test_accepted_order_is_persisted(self, db, catalog, session_factory):
        ctx = IntakeContext(db=db, raw=submission(catalog))

        order = await build_order_intake().execute(ctx)

        assert ctx.state == IntakeState.PERSISTED
        assert order.id is not None
        assert order.status == "NEW"
        assert order.total_price == 30
        assert order.name == "Jane Doe"
        assert order.address == "123 Main Street"
        assert order.comment is None
        assert await order_rows(session_factory) == (1, 2)

    async def test_line_items_keep_counts(self, db, catalog, session_factory):
        await build_order_intake().execute(IntakeContext(db=db, raw=submission(catalog)))

        async with session_factory() as session:
            result = await session.execute(select(OrderProduct).order_by(OrderProduct.id))
            items = [(item.product_id, item.count) for item in result.scalars().all()]

        assert items == [(catalog["apple_id"], 2), (catalog["pear_id"], 1)]

    async def test_price_mismatch_writes_nothing(self, db, catalog, session_factory):
        before = rejections("reconcile_price")
        ctx = IntakeContext(db=db, raw=submission(catalog, totalPrice=25))

        with pytest.raises(PriceMismatchError):
            await build_order_intake().execute(ctx)

        assert ctx.state == IntakeState.REJECTED
        assert await order_rows(session_factory) == (0, 0)
        assert rejections("reconcile_price") == before + 1

    async def test_unknown_product_is_rejected(self, db, catalog, session_factory):
        raw = submission(catalog, totalPrice=10, products=[{"productId": 999, "count": 1}])

        with pytest.raises(NotFoundError, match="Product with ID 999 not found"):
            await build_order_intake().execute(IntakeContext(db=db, raw=raw))

        assert await order_rows(session_factory) == (0, 0)

    async def test_duplicates_rejected_before_catalog_lookup(self, db, catalog, monkeypatch):
        calls = []

        async def recording_get_prices(session, ids):
            calls.append(ids)
            return {}

        monkeypatch.setattr(intake_module.ProductRepository, "get_prices", staticmethod(recording_get_prices))
        apple = catalog["apple_id"]
        raw = submission(catalog, products=[{"productId": apple, "count": 1}, {"productId": apple, "count": 2}])
        ctx = IntakeContext(db=db, raw=raw)

        with pytest.raises(ValidationError, match="There are duplicates in the list of products"):
            await build_order_intake().execute(ctx)

        assert calls == []
        assert ctx.state == IntakeState.REJECTED

    async def test_shape_failure_stops_at_first_step(self, db):
        ctx = IntakeContext(db=db, raw=["not", "an", "object"])

        with pytest.raises(ValidationError, match="Received not valid data"):
            await build_order_intake().execute(ctx)

        assert ctx.state == IntakeState.REJECTED
        assert ctx.submission is None

    async def test_failed_line_item_insert_leaves_no_order(self, db, catalog, session_factory):
        def explode(mapper, connection, target):
            raise RuntimeError("disk full")

        event.listen(OrderProduct, "before_insert", explode)
        try:
            with pytest.raises(RuntimeError):
                await build_order_intake().execute(IntakeContext(db=db, raw=submission(catalog)))
        finally:
            event.remove(OrderProduct, "before_insert", explode)

        assert await order_rows(session_factory) == (0, 0)

    async def test_steps_run_in_order(self, db, catalog):
        reached = []
        pipeline = build_order_intake()
        for step in pipeline.steps:
            original = step.action

            async def tracking(ctx, original=original, name=step.name):
                reached.append(name)
                await original(ctx)

            step.action = tracking

        await pipeline.execute(IntakeContext(db=db, raw=submission(catalog)))

        assert reached == [
            "validate_shape",
            "validate_fields",
            "resolve_products",
            "reconcile_price",
            "persist_order",
        ]

    async def test_out_of_range_product_id_is_reported_missing(self, db, catalog, session_factory):
        raw = submission(catalog, totalPrice=10, products=[{"productId": 2**64, "count": 1}])
        ctx = IntakeContext(db=db, raw=raw)

        with pytest.raises(NotFoundError, match=f"Product with ID {2**64} not found"):
            await build_order_intake().execute(ctx)

        assert ctx.state == IntakeState.REJECTED
        assert await order_rows(session_factory) == (0, 0)
