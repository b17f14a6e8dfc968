from sqlalchemy import Column, Integer, String, DateTime, func, UniqueConstraint

from models.base import Base


class Admin(Base):
    """
    Panel administrator.
    - Unique email
    - Stores only a bcrypt password hash (never plaintext)
    """

    __tablename__ = "admins"
    __table_args__ = (
        UniqueConstraint("email", name="uq_admins_email"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    email = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
