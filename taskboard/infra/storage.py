from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from .models import KeyValueModel

logger = logging.getLogger(__name__)

SESSION_KEY = "user"
THEME_KEY = "theme"


def tasks_key(user_id: str) -> str:
    return f"tasks_{user_id}"


class KeyValueStore:
    """String blobs keyed by name, the local equivalent of browser storage."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        with self._session_factory() as session:
            entry = session.get(KeyValueModel, key)
            return entry.value if entry else None

    def set(self, key: str, value: str) -> None:
        with self._session_factory() as session:
            entry = session.get(KeyValueModel, key)
            if entry:
                entry.value = value
            else:
                session.add(KeyValueModel(key=key, value=value))
            session.commit()
        logger.debug("Stored %s (%d bytes)", key, len(value))

    def remove(self, key: str) -> None:
        with self._session_factory() as session:
            entry = session.get(KeyValueModel, key)
            if not entry:
                return
            session.delete(entry)
            session.commit()
        logger.debug("Removed %s", key)

    def keys(self) -> list[str]:
        with self._session_factory() as session:
            stmt = select(KeyValueModel.key).order_by(KeyValueModel.key.asc())
            return list(session.scalars(stmt))
