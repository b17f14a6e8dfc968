from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, Boolean, func, true

from models.base import Base
from constants.catalog import PRODUCT


class Article(Base):
    """
    Catalog article with soft delete support (is_active).
    """
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    code = Column(String(50), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    article_type = Column(String(20), nullable=False, default=PRODUCT, server_default=PRODUCT)
    unit_price = Column(Numeric(14, 2), nullable=False, default=0, server_default="0")
    quantity_on_hand = Column(Numeric(14, 4), nullable=False, default=0, server_default="0")
    is_active = Column(Boolean, nullable=False, default=True, server_default=true(), index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
