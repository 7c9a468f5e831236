"""Column helpers shared by every table."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String


def new_id() -> str:
    return uuid.uuid4().hex


class IdentifierMixin:
    id = Column(String(32), primary_key=True, default=new_id)


class TimestampMixin:
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)
