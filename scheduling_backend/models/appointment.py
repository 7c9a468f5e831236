"""Appointment model definitions."""

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, String

from scheduling_backend.database import Base
from scheduling_backend.models.mixins import IdentifierMixin, TimestampMixin


class Appointment(IdentifierMixin, TimestampMixin, Base):
    """An appointment entered directly by a customer, outside generated slots."""
    __tablename__ = "appointments"

    customer_email = Column(String, index=True)
    customer_name = Column(String)
    provider_email = Column(String, index=True)
    provider_name = Column(String)
    company_id = Column(String, index=True)
    services = Column(JSON, default=list, nullable=False)
    date = Column(Date)
    start_time = Column(DateTime)
    end_time = Column(DateTime)
    active = Column(Boolean, default=True, nullable=False)
    notes = Column(String)
