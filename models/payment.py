from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Numeric, ForeignKey, func

from models.base import Base


class PurchaseOrderPayment(Base):
    """
    One payment applied to a purchase order. Rows are append-only; the order's
    balance is always recomputed from the full set.
    """
    __tablename__ = "purchase_order_payments"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    order_id = Column(Integer, ForeignKey("purchase_orders.id", ondelete="RESTRICT"), nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    paid_on = Column(Date, nullable=False, index=True)
    method = Column(String(100), nullable=True)
    reference = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    actor_id = Column(String(100), nullable=True)
    actor_name = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
