"""Priced service offered by a provider."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from scheduling_backend.database import Base
from scheduling_backend.models.mixins import IdentifierMixin


class Service(IdentifierMixin, Base):
    __tablename__ = "services"

    service_name = Column(String, nullable=False)
    provider_id = Column(String, index=True, nullable=False)
    price = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
