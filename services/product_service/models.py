from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from shared.config.database import Base
from shared.config.settings import ALIAS_MAX_LENGTH
from services.catalog_service.models import Country, Type  # noqa: F401 relationship targets


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    # The UNIQUE constraint is what settles concurrent alias races
    alias = Column(String(ALIAS_MAX_LENGTH), unique=True, nullable=False, index=True)
    type_id = Column(Integer, ForeignKey("types.id"), nullable=False)
    country_id = Column(Integer, ForeignKey("countries.id"), nullable=False)
    price = Column(Integer, nullable=False, default=0)
    description = Column(String, nullable=True)
    image = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    type = relationship("Type", lazy="selectin")
    country = relationship("Country", lazy="selectin")
