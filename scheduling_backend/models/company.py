"""Company model definitions."""

from sqlalchemy import JSON, Column, Integer, String

from scheduling_backend.database import Base
from scheduling_backend.models.mixins import IdentifierMixin, TimestampMixin


class Company(IdentifierMixin, TimestampMixin, Base):
    __tablename__ = "companies"

    name = Column(String, unique=True, index=True, nullable=False)
    admin_id = Column(String, index=True)
    admin_name = Column(String)
    address = Column(String)
    phone = Column(String)
    services = Column(JSON, default=list, nullable=False)
    managers_number = Column(Integer, default=0, nullable=False)
    providers_number = Column(Integer, default=0, nullable=False)
