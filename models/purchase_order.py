from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Numeric, ForeignKey, func
from sqlalchemy.orm import relationship

from models.base import Base
from constants.catalog import PRODUCT
from constants.statuses import ORDER_PENDING, UNPAID


class PurchaseOrder(Base):
    """
    Purchase order header.
    Totals are computed from the lines when the order is created; `status` and
    `payment_status` are kept in sync by the receiving and payment services.
    """
    __tablename__ = "purchase_orders"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    supplier_id = Column(Integer, ForeignKey("third_parties.id", ondelete="RESTRICT"), nullable=False, index=True)
    order_date = Column(Date, nullable=False)
    delivery_date = Column(Date, nullable=True)
    payment_terms = Column(String(255), nullable=True)
    shipping_method = Column(String(255), nullable=True)
    delivery_location = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)

    status = Column(String(32), nullable=False, default=ORDER_PENDING, server_default=ORDER_PENDING, index=True)
    payment_status = Column(String(32), nullable=False, default=UNPAID, server_default=UNPAID, index=True)

    subtotal = Column(Numeric(14, 2), nullable=False, default=0, server_default="0")
    taxes = Column(Numeric(14, 2), nullable=False, default=0, server_default="0")
    total = Column(Numeric(14, 2), nullable=False, default=0, server_default="0")

    # Opaque actor identity (audit only)
    created_by = Column(String(100), nullable=True)
    created_by_name = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    supplier = relationship("ThirdParty", lazy="joined")
    lines = relationship(
        "PurchaseOrderLine",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PurchaseOrderLine.position",
        lazy="selectin",
    )


class PurchaseOrderLine(Base):
    __tablename__ = "purchase_order_lines"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    order_id = Column(Integer, ForeignKey("purchase_orders.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0, server_default="0")
    line_type = Column(String(20), nullable=False, default=PRODUCT, server_default=PRODUCT)  # Product|Service
    article_id = Column(Integer, ForeignKey("articles.id", ondelete="RESTRICT"), nullable=True, index=True)
    description = Column(Text, nullable=True)
    quantity = Column(Numeric(14, 4), nullable=False)
    unit_cost = Column(Numeric(14, 2), nullable=False)
    taxes = Column(Numeric(14, 2), nullable=False, default=0, server_default="0")
    line_total = Column(Numeric(14, 2), nullable=False)

    order = relationship("PurchaseOrder", back_populates="lines")
    article = relationship("Article", lazy="joined")
