"""Manager model definitions."""

from sqlalchemy import Column, String

from scheduling_backend.database import Base
from scheduling_backend.models.mixins import IdentifierMixin, TimestampMixin


class Manager(IdentifierMixin, TimestampMixin, Base):
    __tablename__ = "managers"

    name = Column(String)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    phone = Column(String)
    company_id = Column(String, index=True)
