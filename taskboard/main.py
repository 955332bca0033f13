from __future__ import annotations

import logging

from taskboard.config import SETTINGS
from taskboard.infra.db import build_engine, build_session_factory, init_db
from taskboard.infra.logging import setup_logging
from taskboard.infra.storage import KeyValueStore
from taskboard.services.app_state import AppState
from taskboard.services.derivation import completion_percentage, upcoming_tasks

logger = logging.getLogger(__name__)


def build_app_state(database_url: str, auth_delay: float = SETTINGS.auth_delay_sec) -> AppState:
    engine = build_engine(database_url)
    init_db(engine)
    storage = KeyValueStore(build_session_factory(engine))
    return AppState(storage, auth_delay=auth_delay)


def main() -> None:
    setup_logging()
    try:
        state = build_app_state(SETTINGS.database_url)
    except Exception as exc:  # noqa: BLE001
        logger.error("DB error: %s", exc)
        raise SystemExit(1) from exc

    state.start()
    if not state.auth.state.is_authenticated:
        logger.info("No active session, theme %s", state.theme.theme.value)
        return

    stats = state.tasks.stats
    logger.info(
        "%s: %d tasks, %d%% complete, %d pending, %d high priority, %d due soon",
        state.auth.user.name,
        stats.total_tasks,
        completion_percentage(stats),
        stats.pending_tasks,
        stats.high_priority_tasks,
        stats.due_soon_tasks,
    )
    for task in upcoming_tasks(state.tasks.filtered_tasks, SETTINGS.upcoming_limit):
        logger.info("Upcoming %s %s [%s]", task.due_date.isoformat(), task.title, task.priority.value)


if __name__ == "__main__":
    main()
