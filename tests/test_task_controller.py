# tests/test_task_controller.py

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from unitrack.tasks.task_controller import TaskController
from unitrack.tasks.task_models import FilterMode, Priority
from unitrack.tasks.task_store import TaskStore

from .fakes import FixedClock, InMemoryStorage, make_fields


def test_create_prepends_and_persists(controller: TaskController, store: TaskStore, storage) -> None:
    first = controller.create(make_fields(title="first"))
    second = controller.create(make_fields(title="second"))

    assert first.changed and first.persisted
    assert first.task is not None and second.task is not None
    assert first.task.completed is False
    assert first.task.created_at == datetime(2024, 6, 1, 12, 0, tzinfo=UTC)
    assert [t.title for t in store.get_all()] == ["second", "first"]
    assert len(storage.writes) == 2


def test_ids_are_unique_and_increasing_under_a_frozen_clock(controller: TaskController) -> None:
    ids = [controller.create(make_fields(title=f"t{i}")).task.id for i in range(5)]
    assert len(set(ids)) == 5
    assert ids == sorted(ids)
    assert ids[0] == int(datetime(2024, 6, 1, 12, 0, tzinfo=UTC).timestamp() * 1000)


def test_deleted_ids_are_not_reissued(controller: TaskController) -> None:
    a = controller.create(make_fields()).task.id
    b = controller.create(make_fields()).task.id
    controller.delete(b)
    c = controller.create(make_fields()).task.id
    assert c not in (a, b)
    assert c > b


def test_ids_follow_existing_data_after_reload(storage: InMemoryStorage) -> None:
    store = TaskStore(storage)
    store.load()
    early = TaskController(store, clock=FixedClock(datetime(2030, 1, 1, tzinfo=UTC)))
    kept = early.create(make_fields()).task.id

    # Clock went backwards (e.g. system time changed): ids must still not collide.
    reloaded = TaskStore(storage)
    reloaded.load()
    later = TaskController(reloaded, clock=FixedClock(datetime(2024, 1, 1, tzinfo=UTC)))
    assert later.create(make_fields()).task.id == kept + 1


def test_create_rejects_empty_title() -> None:
    with pytest.raises(ValueError):
        make_fields(title="   ")


def test_commit_edit_replaces_exactly_the_five_fields(controller: TaskController, store: TaskStore) -> None:
    created = controller.create(make_fields()).task
    controller.toggle_completion(created.id)
    controller.create(make_fields(title="other"))

    assert controller.begin_edit(created.id) == store.find_by_id(created.id)
    assert controller.editing_task_id == created.id

    new_fields = make_fields(
        title="Essay v2",
        subject="Philosophy",
        date=date(2099, 2, 2),
        priority=Priority.LOW,
        description="longer",
    )
    outcome = controller.commit_edit(created.id, new_fields)
    updated = outcome.task

    assert outcome.changed and outcome.persisted
    assert controller.editing_task_id is None
    assert updated.id == created.id
    assert updated.created_at == created.created_at
    assert updated.completed is True
    assert (updated.title, updated.subject, updated.date, updated.priority, updated.description) == (
        "Essay v2",
        "Philosophy",
        date(2099, 2, 2),
        Priority.LOW,
        "longer",
    )
    # position unchanged
    assert [t.id for t in store.get_all()][1] == created.id


def test_commit_edit_on_unknown_id_leaves_store_unchanged(controller: TaskController, store: TaskStore, storage) -> None:
    controller.create(make_fields())
    before = store.get_all()
    writes = len(storage.writes)

    outcome = controller.commit_edit(12345, make_fields(title="ghost"))

    assert outcome.changed is False
    assert outcome.task is None
    assert store.get_all() == before
    assert len(storage.writes) == writes
    assert controller.editing_task_id is None


def test_toggle_twice_restores_the_task(controller: TaskController, store: TaskStore) -> None:
    created = controller.create(
        make_fields(title="Essay", subject="Lit", date="2099-01-01", priority="high")
    ).task

    assert controller.toggle_completion(created.id).task.completed is True
    assert controller.toggle_completion(created.id).task.completed is False
    assert store.find_by_id(created.id) == created


def test_toggle_unknown_id_is_noop(controller: TaskController, storage) -> None:
    outcome = controller.toggle_completion(5)
    assert outcome.changed is False
    assert storage.writes == []


def test_begin_edit_unknown_id_stays_idle(controller: TaskController) -> None:
    assert controller.begin_edit(5) is None
    assert controller.editing_task_id is None
    assert controller.is_editing is False


def test_delete_is_idempotent_and_clears_edit_state(controller: TaskController, store: TaskStore) -> None:
    keep = controller.create(make_fields(title="keep")).task
    gone = controller.create(make_fields(title="gone")).task
    controller.begin_edit(gone.id)

    first = controller.delete(gone.id)
    second = controller.delete(gone.id)

    assert first.changed and first.task == gone
    assert second.changed is False
    assert [t.id for t in store.get_all()] == [keep.id]
    assert controller.editing_task_id is None


def test_operations_on_other_ids_keep_edit_state(controller: TaskController) -> None:
    x = controller.create(make_fields(title="x")).task
    y = controller.create(make_fields(title="y")).task
    controller.begin_edit(x.id)

    controller.create(make_fields(title="z"))
    controller.toggle_completion(y.id)
    controller.delete(y.id)

    assert controller.editing_task_id == x.id


def test_cancel_edit(controller: TaskController, store: TaskStore) -> None:
    task = controller.create(make_fields()).task
    controller.begin_edit(task.id)
    controller.cancel_edit()
    assert controller.editing_task_id is None
    assert store.find_by_id(task.id) == task


def test_submit_creates_when_idle_and_commits_when_editing(controller: TaskController, store: TaskStore) -> None:
    created = controller.submit(make_fields(title="new")).task
    assert len(store) == 1

    controller.begin_edit(created.id)
    edited = controller.submit(make_fields(title="renamed")).task

    assert edited.id == created.id
    assert len(store) == 1
    assert store.find_by_id(created.id).title == "renamed"
    assert controller.is_editing is False


def test_failed_write_is_reported_and_memory_stays_consistent(clock: FixedClock) -> None:
    store = TaskStore(InMemoryStorage(fail_writes=True))
    store.load()
    controller = TaskController(store, clock=clock)

    outcome = controller.create(make_fields())

    assert outcome.changed is True
    assert outcome.persisted is False
    assert store.find_by_id(outcome.task.id) == outcome.task


def test_read_only_views(controller: TaskController) -> None:
    old = controller.create(make_fields(title="old", date="2024-01-01")).task
    controller.create(make_fields(title="future", priority="low"))
    done = controller.create(make_fields(title="done", date="2024-01-01")).task
    controller.toggle_completion(done.id)

    today = date(2024, 6, 1)
    assert [t.id for t in controller.tasks(FilterMode.OVERDUE, today)] == [old.id]
    stats = controller.stats(today)
    assert (stats.total, stats.pending, stats.completed, stats.overdue) == (3, 2, 1, 1)


def test_persist_then_load_on_a_fresh_instance(controller: TaskController, store: TaskStore, storage) -> None:
    controller.create(make_fields(title="a", description="notes"))
    b = controller.create(make_fields(title="b", priority="medium")).task
    controller.toggle_completion(b.id)

    fresh = TaskStore(storage)
    fresh.load()
    assert fresh.get_all() == store.get_all()


def test_created_at_round_trips_with_a_sub_millisecond_clock(storage: InMemoryStorage) -> None:
    store = TaskStore(storage)
    store.load()
    clock = FixedClock(datetime(2024, 6, 1, 12, 0, 0, 123456, tzinfo=UTC))
    controller = TaskController(store, clock=clock)

    task = controller.create(make_fields()).task
    assert task.created_at == datetime(2024, 6, 1, 12, 0, 0, 123000, tzinfo=UTC)

    fresh = TaskStore(storage)
    fresh.load()
    assert fresh.get_all() == store.get_all()
