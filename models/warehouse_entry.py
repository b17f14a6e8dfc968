from sqlalchemy import Column, Integer, Text, Date, DateTime, Numeric, ForeignKey, func
from sqlalchemy.orm import relationship

from models.base import Base


class WarehouseEntry(Base):
    """
    Goods received into a warehouse against a purchase order.
    Each line is bound to the order line it fulfils when the entry is recorded.
    """
    __tablename__ = "warehouse_entries"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    order_id = Column(Integer, ForeignKey("purchase_orders.id", ondelete="RESTRICT"), nullable=False, index=True)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id", ondelete="RESTRICT"), nullable=False, index=True)
    entry_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    warehouse = relationship("Warehouse", lazy="joined")
    lines = relationship(
        "WarehouseEntryLine",
        back_populates="entry",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="WarehouseEntryLine.id",
        lazy="selectin",
    )


class WarehouseEntryLine(Base):
    __tablename__ = "warehouse_entry_lines"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    entry_id = Column(Integer, ForeignKey("warehouse_entries.id", ondelete="CASCADE"), nullable=False, index=True)
    order_line_id = Column(Integer, ForeignKey("purchase_order_lines.id", ondelete="RESTRICT"), nullable=False, index=True)
    article_id = Column(Integer, ForeignKey("articles.id", ondelete="RESTRICT"), nullable=True, index=True)
    quantity = Column(Numeric(14, 4), nullable=False)
    unit_cost = Column(Numeric(14, 2), nullable=False, default=0, server_default="0")

    entry = relationship("WarehouseEntry", back_populates="lines")
