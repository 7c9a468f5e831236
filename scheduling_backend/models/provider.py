"""Provider model definitions."""

from sqlalchemy import JSON, Column, String

from scheduling_backend.database import Base
from scheduling_backend.models.mixins import IdentifierMixin, TimestampMixin


class Provider(IdentifierMixin, TimestampMixin, Base):
    """Offers services on behalf of a company and owns appointment slots."""
    __tablename__ = "providers"

    name = Column(String)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    phone = Column(String)
    company_id = Column(String, index=True)
    services = Column(JSON, default=list, nullable=False)
