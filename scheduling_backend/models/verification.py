"""Email verification codes."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String

from scheduling_backend.database import Base
from scheduling_backend.models.mixins import IdentifierMixin


class Verification(IdentifierMixin, Base):
    __tablename__ = "verifications"

    user_id = Column(String, index=True, nullable=False)
    email = Column(String, nullable=False)
    email_code = Column(String, nullable=False)
    email_verified = Column(Boolean, default=False, nullable=False)
    email_verified_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
