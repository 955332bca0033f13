from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Optional

from taskboard.domain.entities import DashboardStats, TaskDraft, TaskEntity, UserEntity
from taskboard.domain.enums import PriorityLevel, TaskStatus
from taskboard.domain.errors import NotAuthenticated, StorageCorrupt
from taskboard.domain.filters import TaskFilters
from taskboard.domain.timeutil import as_utc, utcnow
from taskboard.infra.codec import decode_tasks, encode_tasks
from taskboard.infra.storage import KeyValueStore, tasks_key

from .derivation import compute_stats, filter_tasks
from .notifications import LoggingNotifier, Notifier

logger = logging.getLogger(__name__)


def _new_task_id() -> str:
    return str(uuid.uuid4())


def _check_title(title: str) -> None:
    if not title.strip():
        raise ValueError("Task title must not be empty")


def sample_tasks(
    user_id: str,
    now: datetime,
    id_factory: Callable[[], str] = _new_task_id,
) -> list[TaskEntity]:
    tomorrow = now + timedelta(days=1)
    next_week = now + timedelta(days=7)
    yesterday = now - timedelta(days=1)
    return [
        TaskEntity(
            id=id_factory(),
            title="Complete Project Proposal",
            description="Finish the draft and send it to the client for review",
            due_date=tomorrow,
            priority=PriorityLevel.HIGH,
            status=TaskStatus.PENDING,
            created_at=now,
            user_id=user_id,
        ),
        TaskEntity(
            id=id_factory(),
            title="Weekly Team Meeting",
            description="Discuss project progress and next steps",
            due_date=tomorrow,
            priority=PriorityLevel.MEDIUM,
            status=TaskStatus.PENDING,
            created_at=now,
            user_id=user_id,
        ),
        TaskEntity(
            id=id_factory(),
            title="Review Budget Reports",
            description="Analyze Q2 expenses and prepare summary",
            due_date=next_week,
            priority=PriorityLevel.MEDIUM,
            status=TaskStatus.PENDING,
            created_at=now,
            user_id=user_id,
        ),
        TaskEntity(
            id=id_factory(),
            title="Update Website Content",
            description="Replace outdated information on the company website",
            due_date=yesterday,
            priority=PriorityLevel.LOW,
            status=TaskStatus.COMPLETED,
            created_at=now - timedelta(days=7),
            updated_at=now,
            user_id=user_id,
        ),
    ]


class TaskService:
    def __init__(
        self,
        storage: KeyValueStore,
        notifier: Notifier | None = None,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = _new_task_id,
    ) -> None:
        self._storage = storage
        self._notifier = notifier or LoggingNotifier()
        self._clock = clock
        self._id_factory = id_factory
        self._user: Optional[UserEntity] = None
        self._tasks: list[TaskEntity] = []
        self.filters = TaskFilters()

    @property
    def tasks(self) -> list[TaskEntity]:
        return list(self._tasks)

    @property
    def filtered_tasks(self) -> list[TaskEntity]:
        return filter_tasks(self._tasks, self.filters)

    @property
    def stats(self) -> DashboardStats:
        return compute_stats(self._tasks, self._now())

    def set_filters(self, filters: TaskFilters) -> None:
        self.filters = filters

    def clear_filters(self) -> None:
        self.filters = TaskFilters()

    def switch_user(self, user: Optional[UserEntity]) -> list[TaskEntity]:
        self._user = user
        if user is None:
            self._tasks = []
            return []

        key = tasks_key(user.id)
        raw = self._storage.get(key)
        tasks: list[TaskEntity] | None = None
        if raw is not None:
            try:
                tasks = decode_tasks(key, raw)
            except StorageCorrupt as exc:
                logger.warning("Discarding stored tasks: %s", exc)
                self._storage.remove(key)

        if tasks is None:
            tasks = sample_tasks(user.id, self._now(), self._id_factory)
            self._storage.set(key, encode_tasks(tasks))
            logger.info("Seeded %d sample tasks for user %s", len(tasks), user.id)

        self._tasks = tasks
        return self.tasks

    def get_task(self, task_id: str) -> TaskEntity | None:
        return next((t for t in self._tasks if t.id == task_id), None)

    def add_task(self, draft: TaskDraft) -> TaskEntity | None:
        _check_title(draft.title)
        try:
            user = self._require_user()
        except NotAuthenticated:
            logger.warning("Ignoring add_task without an authenticated user")
            return None

        task = TaskEntity(
            id=self._id_factory(),
            title=draft.title,
            description=draft.description,
            due_date=as_utc(draft.due_date),
            priority=draft.priority,
            status=draft.status,
            created_at=self._now(),
            user_id=user.id,
        )
        self._tasks = [*self._tasks, task]
        self._persist(user)
        logger.info("Created task %s", task.id)
        self._notifier.notify("Task created", "Your task has been created successfully")
        return task

    def update_task(self, task: TaskEntity) -> TaskEntity | None:
        _check_title(task.title)
        try:
            user = self._require_user()
        except NotAuthenticated:
            logger.warning("Ignoring update_task without an authenticated user")
            return None

        current = self.get_task(task.id)
        if not current:
            return None
        # id, user_id and created_at belong to the stored task
        updated = replace(
            current,
            title=task.title,
            description=task.description,
            due_date=as_utc(task.due_date),
            priority=task.priority,
            status=task.status,
            updated_at=self._now(),
        )
        self._replace(updated)
        self._persist(user)
        logger.info("Updated task %s", updated.id)
        self._notifier.notify("Task updated", "Your task has been updated successfully")
        return updated

    def delete_task(self, task_id: str) -> None:
        try:
            user = self._require_user()
        except NotAuthenticated:
            logger.warning("Ignoring delete_task without an authenticated user")
            return

        if not self.get_task(task_id):
            return
        self._tasks = [t for t in self._tasks if t.id != task_id]
        self._persist(user)
        logger.info("Deleted task %s", task_id)
        self._notifier.notify("Task deleted", "Your task has been deleted")

    def toggle_task_status(self, task_id: str) -> TaskEntity | None:
        try:
            user = self._require_user()
        except NotAuthenticated:
            logger.warning("Ignoring toggle_task_status without an authenticated user")
            return None

        current = self.get_task(task_id)
        if not current:
            return None
        status = TaskStatus.PENDING if current.status == TaskStatus.COMPLETED else TaskStatus.COMPLETED
        updated = replace(current, status=status, updated_at=self._now())
        self._replace(updated)
        self._persist(user)
        logger.debug("Task %s is now %s", task_id, status.value)
        return updated

    def _now(self) -> datetime:
        return as_utc(self._clock())

    def _require_user(self) -> UserEntity:
        if self._user is None:
            raise NotAuthenticated()
        return self._user

    def _replace(self, updated: TaskEntity) -> None:
        self._tasks = [updated if t.id == updated.id else t for t in self._tasks]

    def _persist(self, user: UserEntity) -> None:
        self._storage.set(tasks_key(user.id), encode_tasks(self._tasks))
