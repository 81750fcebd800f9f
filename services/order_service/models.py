import enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from shared.config.database import Base
from services.product_service.models import Product  # noqa: F401 relationship target


class OrderStatus(str, enum.Enum):
    NEW = "NEW"
    IN_PROCESS = "IN_PROCESS"
    EXECUTED = "EXECUTED"
    REJECTED = "REJECTED"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    address = Column(String(255), nullable=True)
    phone = Column(String(64), nullable=False)
    comment = Column(String(255), nullable=True)
    status = Column(String(16), nullable=False, default=OrderStatus.NEW.value) # NEW, IN_PROCESS, EXECUTED, REJECTED
    total_price = Column(Integer, nullable=False) # accepted only after reconciliation
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Line items are written in the same flush as the order row
    items = relationship(
        "OrderProduct",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderProduct.id",
    )


class OrderProduct(Base):
    __tablename__ = "order_products"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    count = Column(Integer, nullable=False, default=1)

    order = relationship("Order", back_populates="items")
    product = relationship("Product", lazy="selectin")
