"""Read-only views over a task list: filtering, dashboard counters, chart data.

Everything here is recomputed from scratch on each call; task lists are
personal-sized, so there is no caching.
"""
from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable

from taskboard.domain.entities import DashboardStats, TaskEntity
from taskboard.domain.enums import PriorityLevel, TaskStatus
from taskboard.domain.filters import TaskFilters
from taskboard.domain.timeutil import as_utc

DUE_SOON_WINDOW = timedelta(hours=24)


def filter_tasks(tasks: Iterable[TaskEntity], filters: TaskFilters) -> list[TaskEntity]:
    filtered = list(tasks)

    if filters.status:
        filtered = [t for t in filtered if t.status == filters.status]

    if filters.priority:
        filtered = [t for t in filtered if t.priority == filters.priority]

    if filters.date_range:
        start, end = filters.date_range.start, filters.date_range.end
        filtered = [t for t in filtered if start <= t.due_date <= end]

    if filters.search_query:
        query = filters.search_query.lower()
        filtered = [
            t for t in filtered
            if query in t.title.lower()
            or (t.description and query in t.description.lower())
        ]

    # sorted() is stable, equal due dates keep their list order
    return sorted(filtered, key=lambda t: t.due_date)


def is_due_soon(task: TaskEntity, now: datetime) -> bool:
    if task.status == TaskStatus.COMPLETED:
        return False
    return now <= task.due_date <= now + DUE_SOON_WINDOW


def is_past_due(task: TaskEntity, now: datetime) -> bool:
    return task.due_date < now


def compute_stats(tasks: Iterable[TaskEntity], now: datetime) -> DashboardStats:
    tasks = list(tasks)
    now = as_utc(now)
    return DashboardStats(
        total_tasks=len(tasks),
        completed_tasks=sum(1 for t in tasks if t.status == TaskStatus.COMPLETED),
        pending_tasks=sum(1 for t in tasks if t.status == TaskStatus.PENDING),
        high_priority_tasks=sum(1 for t in tasks if t.priority == PriorityLevel.HIGH),
        due_soon_tasks=sum(1 for t in tasks if is_due_soon(t, now)),
    )


def completion_percentage(stats: DashboardStats) -> int:
    if stats.total_tasks == 0:
        return 0
    return round(stats.completed_tasks / stats.total_tasks * 100)


def upcoming_tasks(tasks: Iterable[TaskEntity], limit: int = 5) -> list[TaskEntity]:
    pending = [t for t in tasks if t.status == TaskStatus.PENDING]
    return sorted(pending, key=lambda t: t.due_date)[:limit]


def priority_breakdown(tasks: Iterable[TaskEntity]) -> dict[PriorityLevel, int]:
    counts = Counter(t.priority for t in tasks)
    return {level: counts[level] for level in PriorityLevel if counts[level] > 0}


def status_breakdown(tasks: Iterable[TaskEntity]) -> dict[TaskStatus, int]:
    counts = Counter(t.status for t in tasks)
    ordered = (TaskStatus.COMPLETED, TaskStatus.PENDING)
    return {status: counts[status] for status in ordered if counts[status] > 0}
