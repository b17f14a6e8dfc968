from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Numeric, ForeignKey, func
from sqlalchemy.orm import relationship

from models.base import Base
from constants.catalog import PRODUCT
from constants.statuses import INVOICE_PENDING


class Invoice(Base):
    """
    Invoice issued to a client. Totals come from the lines; `amount_pending`
    is the receivable balance the aging report buckets.
    """
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    folio = Column(String(50), nullable=False, unique=True, index=True)
    client_id = Column(Integer, ForeignKey("third_parties.id", ondelete="RESTRICT"), nullable=False, index=True)
    issue_date = Column(Date, nullable=False, index=True)
    due_date = Column(Date, nullable=True, index=True)
    payment_terms = Column(String(255), nullable=True)
    subtotal = Column(Numeric(14, 2), nullable=False, default=0, server_default="0")
    taxes = Column(Numeric(14, 2), nullable=False, default=0, server_default="0")
    total = Column(Numeric(14, 2), nullable=False)
    amount_pending = Column(Numeric(14, 2), nullable=False)
    status = Column(String(32), nullable=False, default=INVOICE_PENDING, server_default=INVOICE_PENDING, index=True)
    notes = Column(Text, nullable=True)

    created_by = Column(String(100), nullable=True)
    created_by_name = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    client = relationship("ThirdParty", lazy="joined")
    lines = relationship(
        "InvoiceLine",
        back_populates="invoice",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="InvoiceLine.position",
        lazy="selectin",
    )


class InvoiceLine(Base):
    __tablename__ = "invoice_lines"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0, server_default="0")
    line_type = Column(String(20), nullable=False, default=PRODUCT, server_default=PRODUCT)  # Product|Service
    article_id = Column(Integer, ForeignKey("articles.id", ondelete="RESTRICT"), nullable=True, index=True)
    description = Column(Text, nullable=True)
    quantity = Column(Numeric(14, 4), nullable=False)
    unit_price = Column(Numeric(14, 2), nullable=False)
    taxes = Column(Numeric(14, 2), nullable=False, default=0, server_default="0")
    line_total = Column(Numeric(14, 2), nullable=False)

    invoice = relationship("Invoice", back_populates="lines")
    article = relationship("Article", lazy="joined")


class InvoicePayment(Base):
    __tablename__ = "invoice_payments"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="RESTRICT"), nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    paid_on = Column(Date, nullable=False)
    method = Column(String(100), nullable=True)
    reference = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    actor_id = Column(String(100), nullable=True)
    actor_name = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
