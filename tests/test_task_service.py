from __future__ import annotations

import json
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from taskboard.domain.entities import TaskDraft, UserEntity
from taskboard.domain.enums import PriorityLevel, TaskStatus
from taskboard.domain.filters import DateRange, TaskFilters
from taskboard.infra.codec import decode_tasks
from taskboard.infra.storage import tasks_key
from taskboard.services.task_service import TaskService

DEMO = UserEntity(id="1", name="Demo User", email="demo@example.com")
ADMIN = UserEntity(id="2", name="Admin User", email="admin@example.com")


@pytest.fixture()
def service(storage, notifier, clock, ids) -> TaskService:
    service = TaskService(storage, notifier, clock=clock, id_factory=ids)
    service.switch_user(DEMO)
    return service


def _draft(title: str = "Write report", days: int = 2) -> TaskDraft:
    return TaskDraft(
        title=title,
        description="Quarterly numbers",
        due_date=datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc) + timedelta(days=days),
        priority=PriorityLevel.HIGH,
    )


def test_first_login_seeds_and_persists_sample_tasks(storage, clock, ids) -> None:
    service = TaskService(storage, clock=clock, id_factory=ids)

    tasks = service.switch_user(DEMO)

    assert [t.title for t in tasks] == [
        "Complete Project Proposal",
        "Weekly Team Meeting",
        "Review Budget Reports",
        "Update Website Content",
    ]
    assert all(t.user_id == DEMO.id for t in tasks)
    stored = decode_tasks("k", storage.get(tasks_key(DEMO.id)))
    assert stored == tasks


def test_seed_is_not_repeated_on_reload(storage, clock, ids) -> None:
    first = TaskService(storage, clock=clock, id_factory=ids).switch_user(DEMO)

    second = TaskService(storage, clock=clock, id_factory=ids).switch_user(DEMO)

    assert [t.id for t in second] == [t.id for t in first]


def test_switch_user_loads_that_users_blob(service) -> None:
    service.add_task(_draft("Demo only"))

    admin_tasks = service.switch_user(ADMIN)

    assert all(t.user_id == ADMIN.id for t in admin_tasks)
    assert "Demo only" not in [t.title for t in admin_tasks]
    assert "Demo only" in [t.title for t in service.switch_user(DEMO)]


def test_corrupt_task_blob_is_replaced_by_seed(storage, clock) -> None:
    storage.set(tasks_key(DEMO.id), "{not json")
    service = TaskService(storage, clock=clock)

    tasks = service.switch_user(DEMO)

    assert len(tasks) == 4
    assert json.loads(storage.get(tasks_key(DEMO.id)))[0]["title"] == "Complete Project Proposal"


def test_add_task_assigns_generated_fields(service, clock, notifier) -> None:
    before = service.tasks
    draft = _draft()

    task = service.add_task(draft)

    assert service.tasks == [*before, task]
    assert task.id not in [t.id for t in before]
    assert task.created_at == clock.now
    assert task.user_id == DEMO.id
    assert (task.title, task.description, task.due_date, task.priority, task.status) == (
        draft.title,
        draft.description,
        draft.due_date,
        draft.priority,
        draft.status,
    )
    assert notifier.titles[-1] == "Task created"


def test_add_then_delete_restores_list(service, storage) -> None:
    before = service.tasks
    task = service.add_task(_draft())

    service.delete_task(task.id)

    assert service.tasks == before
    assert decode_tasks("k", storage.get(tasks_key(DEMO.id))) == before


def test_delete_missing_task_is_noop(service, notifier) -> None:
    before = service.tasks

    service.delete_task("missing")

    assert service.tasks == before
    assert "Task deleted" not in notifier.titles


def test_delete_last_task_persists_empty_list(service, storage) -> None:
    for task in service.tasks:
        service.delete_task(task.id)

    assert service.tasks == []
    assert json.loads(storage.get(tasks_key(DEMO.id))) == []


def test_update_task_keeps_identity_fields(service, clock) -> None:
    original = service.tasks[0]
    clock.advance(hours=1)
    edited = replace(
        original,
        title="Send Project Proposal",
        priority=PriorityLevel.LOW,
        user_id="someone-else",
        created_at=clock.now + timedelta(days=3),
    )

    updated = service.update_task(edited)

    assert updated.title == "Send Project Proposal"
    assert updated.priority == PriorityLevel.LOW
    assert updated.id == original.id
    assert updated.user_id == DEMO.id
    assert updated.created_at == original.created_at
    assert updated.updated_at == clock.now
    assert service.get_task(original.id) == updated


def test_update_unknown_task_is_noop(service) -> None:
    ghost = replace(service.tasks[0], id="ghost", title="Ghost")

    assert service.update_task(ghost) is None
    assert service.get_task("ghost") is None


def test_empty_title_is_rejected(service) -> None:
    with pytest.raises(ValueError):
        service.add_task(_draft(title="   "))


def test_toggle_twice_restores_status(service, clock) -> None:
    task = service.tasks[0]

    toggled = service.toggle_task_status(task.id)
    assert toggled.status == TaskStatus.COMPLETED
    assert toggled.updated_at == clock.now

    clock.advance(minutes=5)
    restored = service.toggle_task_status(task.id)

    assert restored.status == task.status
    assert restored.updated_at == clock.now


def test_toggle_missing_task_is_noop(service) -> None:
    before = service.tasks

    assert service.toggle_task_status("missing") is None
    assert service.tasks == before


def test_mutations_without_user_are_ignored(storage, notifier) -> None:
    service = TaskService(storage, notifier)
    task = service.add_task(_draft())

    assert task is None
    assert service.tasks == []
    assert service.toggle_task_status("x") is None
    service.delete_task("x")
    assert storage.keys() == []
    assert notifier.messages == []


def test_filtered_tasks_follow_filters(service) -> None:
    service.set_filters(TaskFilters(search_query="budget"))
    assert [t.title for t in service.filtered_tasks] == ["Review Budget Reports"]

    service.clear_filters()
    assert len(service.filtered_tasks) == len(service.tasks)


def test_stats_reflect_seeded_tasks(service) -> None:
    stats = service.stats

    assert stats.total_tasks == 4
    assert stats.completed_tasks == 1
    assert stats.pending_tasks == 3
    assert stats.high_priority_tasks == 1
    assert stats.due_soon_tasks == 2


def test_naive_due_date_is_stored_as_utc(service) -> None:
    task = service.add_task(TaskDraft(title="Call bank", due_date=datetime(2026, 3, 10, 11, 0)))

    assert task.due_date == datetime(2026, 3, 10, 11, 0, tzinfo=timezone.utc)
    assert service.stats.due_soon_tasks == 3
    assert service.filtered_tasks[0].title == "Update Website Content"
    assert service.filtered_tasks[1] == task


def test_naive_due_date_on_update_is_stored_as_utc(service) -> None:
    original = service.tasks[0]

    updated = service.update_task(replace(original, due_date=datetime(2026, 3, 12, 9, 0)))

    assert updated.due_date == datetime(2026, 3, 12, 9, 0, tzinfo=timezone.utc)
    assert service.stats.total_tasks == 4


def test_naive_date_range_filters_against_aware_tasks(service) -> None:
    service.set_filters(TaskFilters(date_range=DateRange(datetime(2026, 3, 11), datetime(2026, 3, 12))))

    assert [t.title for t in service.filtered_tasks] == [
        "Complete Project Proposal",
        "Weekly Team Meeting",
    ]
