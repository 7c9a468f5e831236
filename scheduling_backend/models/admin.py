"""Admin model definitions."""

from sqlalchemy import Column, ForeignKey, String

from scheduling_backend.database import Base
from scheduling_backend.models.mixins import IdentifierMixin, TimestampMixin


class Admin(IdentifierMixin, TimestampMixin, Base):
    """Company administrator, always backed by an existing user account."""
    __tablename__ = "admins"

    user_id = Column(String, ForeignKey("users.id"), index=True)
    name = Column(String)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    phone = Column(String)
    company_id = Column(String, index=True)
