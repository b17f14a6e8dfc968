from sqlalchemy import Column, Integer, String, DateTime, Boolean, func, true

from models.base import Base


class ThirdParty(Base):
    """
    Business partner: client, supplier or both.
    `relation` decides whether it may appear on invoices and/or purchase orders.
    """
    __tablename__ = "third_parties"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    tax_id = Column(String(50), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    relation = Column(String(20), nullable=False, index=True)  # client|supplier|both
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true(), index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
