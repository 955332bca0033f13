from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from taskboard.infra.db import build_engine, build_session_factory, init_db
from taskboard.infra.storage import KeyValueStore


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str, str]] = []

    def notify(self, title: str, description: str, variant: str = "default") -> None:
        self.messages.append((title, description, variant))

    @property
    def titles(self) -> list[str]:
        return [title for title, _, _ in self.messages]


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class SequentialIds:
    def __init__(self, prefix: str = "task") -> None:
        self._prefix = prefix
        self._next = 1

    def __call__(self) -> str:
        value = f"{self._prefix}-{self._next}"
        self._next += 1
        return value


@pytest.fixture()
def storage() -> KeyValueStore:
    engine = build_engine("sqlite://")
    init_db(engine)
    return KeyValueStore(build_session_factory(engine))


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc))


@pytest.fixture()
def ids() -> SequentialIds:
    return SequentialIds()
