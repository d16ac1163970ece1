"""Tests for drop placement and column ordering rules."""
from conftest import make_task

from taskboard.models import TaskStatus
from taskboard.ordering import (
    Placement,
    as_column,
    column_tail,
    insert_at,
    move_to,
    partition_columns,
    resolve_drop,
    sort_for_display,
)

TODO = TaskStatus.TODO
IN_PROGRESS = TaskStatus.IN_PROGRESS
DONE = TaskStatus.DONE


def _state(tasks):
    return {t.id: (t.status, t.order) for t in tasks}


def test_as_column_accepts_status_names():
    assert as_column("IN_PROGRESS") is IN_PROGRESS
    assert as_column(DONE) is DONE
    assert as_column("some-task-id") is None
    assert as_column(None) is None


def test_drop_on_empty_column_places_at_zero():
    tasks = [make_task("a", TODO, 0)]
    assert resolve_drop(tasks, "a", "DONE") == Placement(DONE, 0)


def test_drop_on_column_appends_after_max_order():
    tasks = [
        make_task("a", TODO, 0),
        make_task("b", IN_PROGRESS, 3),
        make_task("c", IN_PROGRESS, 7),
    ]
    assert resolve_drop(tasks, "a", IN_PROGRESS) == Placement(IN_PROGRESS, 8)


def test_column_tail_ignores_the_moved_task():
    tasks = [make_task("a", IN_PROGRESS, 5), make_task("b", IN_PROGRESS, 2)]
    assert column_tail(tasks, IN_PROGRESS, exclude_id="a") == 3
    assert column_tail(tasks, DONE) == 0


def test_drop_on_task_in_other_column_takes_its_slot():
    tasks = [make_task("a", TODO, 4), make_task("b", DONE, 2)]
    assert resolve_drop(tasks, "a", "b") == Placement(DONE, 2)


def test_drop_on_task_in_same_column_is_noop():
    tasks = [make_task("a", TODO, 0), make_task("b", TODO, 1)]
    assert resolve_drop(tasks, "a", "b") is None


def test_drop_uses_origin_status_when_given():
    # The hover already moved "a" next to "b"; the drop still counts as a move
    tasks = [make_task("a", DONE, 2), make_task("b", DONE, 2)]
    assert resolve_drop(tasks, "a", "b") is None
    assert resolve_drop(tasks, "a", "b", origin_status=TODO) == Placement(DONE, 2)


def test_drop_on_unknown_target_or_itself_is_noop():
    tasks = [make_task("a", TODO, 0)]
    assert resolve_drop(tasks, "a", "missing") is None
    assert resolve_drop(tasks, "a", "a") is None
    assert resolve_drop(tasks, "a", None) is None
    assert resolve_drop(tasks, "missing", TODO) is None


def test_hover_recomputation_is_idempotent():
    tasks = [make_task("a", TODO, 0), make_task("b", IN_PROGRESS, 0), make_task("c", IN_PROGRESS, 1)]

    for target in ("c", IN_PROGRESS):
        once = tasks
        placement = resolve_drop(once, "a", target)
        once = move_to(once, "a", placement)
        again = resolve_drop(once, "a", target)
        if again is not None:
            assert again == placement
            assert _state(move_to(once, "a", again)) == _state(once)


def test_move_to_only_changes_moved_task():
    tasks = [make_task("a", TODO, 0), make_task("b", DONE, 0)]
    moved = move_to(tasks, "a", Placement(DONE, 0))
    assert _state(moved) == {"a": (DONE, 0), "b": (DONE, 0)}
    # Input list is left untouched
    assert _state(tasks) == {"a": (TODO, 0), "b": (DONE, 0)}


def test_insert_at_shifts_peers_at_or_after_position():
    tasks = [
        make_task("a", TODO, 0),
        make_task("b", TODO, 1),
        make_task("c", TODO, 2),
        make_task("x", DONE, 0),
        make_task("y", IN_PROGRESS, 0),
    ]
    result = insert_at(tasks, "x", Placement(TODO, 1))
    assert _state(result) == {
        "a": (TODO, 0),
        "x": (TODO, 1),
        "b": (TODO, 2),
        "c": (TODO, 3),
        "y": (IN_PROGRESS, 0),
    }


def test_partition_columns_sorts_and_tolerates_duplicates():
    tasks = [
        make_task("c", TODO, 2),
        make_task("a", TODO, 0),
        make_task("d", DONE, 1),
        make_task("b1", IN_PROGRESS, 0),
        make_task("b2", IN_PROGRESS, 0),
    ]
    columns = partition_columns(tasks)
    assert list(columns) == [TODO, IN_PROGRESS, DONE]
    assert [t.id for t in columns[TODO]] == ["a", "c"]
    assert [t.id for t in columns[IN_PROGRESS]] == ["b1", "b2"]
    assert [t.id for t in columns[DONE]] == ["d"]


def test_sort_for_display_flattens_columns_in_board_order():
    tasks = [make_task("d", DONE, 0), make_task("t1", TODO, 1), make_task("p", IN_PROGRESS, 0), make_task("t0", TODO, 0)]
    assert [t.id for t in sort_for_display(tasks)] == ["t0", "t1", "p", "d"]
