from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text

from taskboard.domain.timeutil import utcnow

from .db import Base


class KeyValueModel(Base):
    __tablename__ = "kv_entries"

    key = Column(String(200), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
