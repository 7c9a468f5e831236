"""User model definitions."""

from sqlalchemy import Boolean, Column, String

from scheduling_backend.database import Base
from scheduling_backend.models.mixins import IdentifierMixin, TimestampMixin


class User(IdentifierMixin, TimestampMixin, Base):
    """A customer who books appointments; superusers are flagged users."""
    __tablename__ = "users"

    name = Column(String)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    phone = Column(String)
    company_id = Column(String, index=True)
    email_verified = Column(Boolean, default=False, nullable=False)
    phone_verified = Column(Boolean, default=False, nullable=False)
    is_superuser = Column(Boolean, default=False, nullable=False)
