# tests/test_ordering.py

from __future__ import annotations

from taskflow.tasks.ordering import assign_initial_order, compute_restore_order, sort_tasks

from .fakes import make_task


def test_assign_initial_order_starts_at_one_and_appends() -> None:
    assert assign_initial_order([]) == 1
    tasks = [make_task("a", 3), make_task("b", 1), make_task("c", 7)]
    assert assign_initial_order(tasks) == 8


def test_restore_reclaims_free_original_slot() -> None:
    active = [make_task("b", 2), make_task("c", 3)]
    deleted = make_task("a", 1, original_order=1, deleted=True)
    assert compute_restore_order(active, deleted) == 1


def test_restore_appends_when_slot_taken_or_missing() -> None:
    active = [make_task("b", 1), make_task("c", 2)]
    taken = make_task("a", 1, original_order=1, deleted=True)
    assert compute_restore_order(active, taken) == 3

    no_slot = make_task("d", 5, original_order=None, deleted=True)
    assert compute_restore_order(active, no_slot) == 3
    assert compute_restore_order([], no_slot) == 1


def test_restore_order_does_not_mutate_inputs() -> None:
    active = [make_task("b", 2)]
    deleted = make_task("a", 1, original_order=1, deleted=True)
    compute_restore_order(active, deleted)
    assert [t.id for t in active] == ["b"]
    assert deleted.order == 1
    assert deleted.original_order == 1


def test_sort_tasks_is_stable_and_returns_new_list() -> None:
    tasks = [make_task("x", 2), make_task("y", 1), make_task("z", 2)]
    out = sort_tasks(tasks)
    assert [t.id for t in out] == ["y", "x", "z"]
    assert [t.id for t in tasks] == ["x", "y", "z"]
    assert out is not tasks
