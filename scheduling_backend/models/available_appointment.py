"""Generated appointment slots."""

from sqlalchemy import Boolean, Column, Date, DateTime, Index, String

from scheduling_backend.database import Base
from scheduling_backend.models.mixins import IdentifierMixin, TimestampMixin


class AvailableAppointment(IdentifierMixin, TimestampMixin, Base):
    """A bookable interval for one provider; active=False means still open."""
    __tablename__ = "available_appointments"
    __table_args__ = (
        Index("idx_available_provider_start", "provider_id", "start_time"),
        Index("idx_available_active_start", "active", "start_time"),
    )

    provider_id = Column(String, nullable=False)
    company_id = Column(String, index=True)
    date = Column(Date, nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    active = Column(Boolean, default=False, nullable=False)
    customer_id = Column(String, index=True)
    customer_email = Column(String)
    customer_name = Column(String)
    notes = Column(String)
