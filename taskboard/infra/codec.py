from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

from taskboard.domain.entities import TaskEntity, UserEntity
from taskboard.domain.enums import PriorityLevel, TaskStatus
from taskboard.domain.errors import StorageCorrupt
from taskboard.domain.timeutil import as_utc


def _format_ts(value: datetime) -> str:
    return value.isoformat()


def _parse_ts(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"expected ISO timestamp, got {type(value).__name__}")
    return as_utc(datetime.fromisoformat(value))


def _require_str(record: dict, field: str) -> str:
    value = record.get(field)
    if not isinstance(value, str):
        raise ValueError(f"missing or non-string field {field!r}")
    return value


def _optional_str(record: dict, field: str) -> Optional[str]:
    value = record.get(field)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"non-string field {field!r}")
    return value


def _user_to_record(user: UserEntity) -> dict:
    record = {"id": user.id, "name": user.name, "email": user.email}
    if user.avatar is not None:
        record["avatar"] = user.avatar
    return record


def _user_from_record(record: Any) -> UserEntity:
    if not isinstance(record, dict):
        raise ValueError("user record is not an object")
    return UserEntity(
        id=_require_str(record, "id"),
        name=_require_str(record, "name"),
        email=_require_str(record, "email"),
        avatar=_optional_str(record, "avatar"),
    )


def _task_to_record(task: TaskEntity) -> dict:
    record = {
        "id": task.id,
        "title": task.title,
        "dueDate": _format_ts(task.due_date),
        "priority": task.priority.value,
        "status": task.status.value,
        "createdAt": _format_ts(task.created_at),
        "userId": task.user_id,
    }
    if task.description is not None:
        record["description"] = task.description
    if task.updated_at is not None:
        record["updatedAt"] = _format_ts(task.updated_at)
    return record


def _task_from_record(record: Any) -> TaskEntity:
    if not isinstance(record, dict):
        raise ValueError("task record is not an object")
    updated_at = record.get("updatedAt")
    return TaskEntity(
        id=_require_str(record, "id"),
        title=_require_str(record, "title"),
        description=_optional_str(record, "description"),
        due_date=_parse_ts(record.get("dueDate")),
        priority=PriorityLevel(record.get("priority")),
        status=TaskStatus(record.get("status")),
        created_at=_parse_ts(record.get("createdAt")),
        updated_at=_parse_ts(updated_at) if updated_at is not None else None,
        user_id=_require_str(record, "userId"),
    )


def encode_user(user: UserEntity) -> str:
    return json.dumps(_user_to_record(user))


def decode_user(key: str, raw: str) -> UserEntity:
    try:
        return _user_from_record(json.loads(raw))
    except (TypeError, ValueError) as exc:
        raise StorageCorrupt(key, str(exc)) from exc


def encode_tasks(tasks: list[TaskEntity]) -> str:
    return json.dumps([_task_to_record(task) for task in tasks])


def decode_tasks(key: str, raw: str) -> list[TaskEntity]:
    try:
        records = json.loads(raw)
        if not isinstance(records, list):
            raise ValueError("task blob is not a list")
        return [_task_from_record(record) for record in records]
    except (TypeError, ValueError) as exc:
        raise StorageCorrupt(key, str(exc)) from exc
