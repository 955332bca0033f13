from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .enums import PriorityLevel, TaskStatus


@dataclass(frozen=True)
class UserEntity:
    id: str
    name: str
    email: str
    avatar: Optional[str] = None


@dataclass(frozen=True)
class TaskEntity:
    id: str
    title: str
    due_date: datetime
    priority: PriorityLevel
    status: TaskStatus
    created_at: datetime
    user_id: str
    description: Optional[str] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class TaskDraft:
    """Caller-supplied fields of a task that does not exist yet."""

    title: str
    due_date: datetime
    priority: PriorityLevel = PriorityLevel.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    description: Optional[str] = None


@dataclass(frozen=True)
class DashboardStats:
    total_tasks: int = 0
    completed_tasks: int = 0
    pending_tasks: int = 0
    high_priority_tasks: int = 0
    due_soon_tasks: int = 0
