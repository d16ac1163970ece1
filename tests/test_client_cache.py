"""Tests for the query cache, optimistic mutations, forms and notifications."""
import asyncio
from datetime import date, datetime

import pytest

from taskboard.client import NotificationCenter, OptimisticMutation, QueryCache, TaskForm, normalize_due_date
from taskboard.errors import NotFound, ValidationFailed
from taskboard.models import Priority


class SlowLoader:
    """Loader whose responses are released by the test."""

    def __init__(self):
        self.calls = 0
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.result = ["server"]

    async def __call__(self):
        self.calls += 1
        self.started.set()
        await self.release.wait()
        return list(self.result)


@pytest.mark.asyncio
async def test_fetch_stores_data_and_joins_inflight():
    loader = SlowLoader()
    cache = QueryCache(loader)
    assert cache.get_data() is None

    first = asyncio.ensure_future(cache.fetch())
    second = asyncio.ensure_future(cache.fetch())
    await loader.started.wait()
    assert cache.is_fetching
    loader.release.set()

    assert await first == ["server"]
    assert await second == ["server"]
    assert loader.calls == 1
    assert cache.get_data() == ["server"]
    assert not cache.is_fetching


@pytest.mark.asyncio
async def test_cancelled_fetch_does_not_overwrite_patched_data():
    loader = SlowLoader()
    cache = QueryCache(loader)
    cache.set_data(["old"])

    pending = asyncio.ensure_future(cache.fetch())
    await loader.started.wait()

    mutation = OptimisticMutation(cache)
    await mutation.begin(lambda items: items + ["patched"])
    # The cancelled fetch resolves quietly instead of raising
    await pending

    loader.release.set()
    await asyncio.sleep(0)
    assert cache.get_data() == ["old", "patched"]
    assert mutation.snapshot == ["old"]


@pytest.mark.asyncio
async def test_rollback_restores_snapshot_exactly():
    cache = QueryCache(SlowLoader())
    cache.set_data(["a", "b"])

    async def failing():
        raise NotFound("Task not found")

    mutation = OptimisticMutation(cache)
    with pytest.raises(NotFound):
        await mutation.run(lambda items: list(reversed(items)), failing)

    assert cache.get_data() == ["a", "b"]
    assert not mutation.active


@pytest.mark.asyncio
async def test_commit_refetches_canonical_list():
    loader = SlowLoader()
    loader.release.set()
    loader.result = ["canonical"]
    cache = QueryCache(loader)
    cache.set_data(["a"])

    async def succeed():
        return "saved"

    result = await OptimisticMutation(cache).run(lambda items: items + ["speculative"], succeed)
    assert result == "saved"
    assert cache.get_data() == ["canonical"]


def test_due_date_is_pinned_to_noon():
    assert normalize_due_date(date(2024, 3, 9)) == datetime(2024, 3, 9, 12, 0)
    assert normalize_due_date(datetime(2024, 3, 9, 23, 59, 59, 999)) == datetime(2024, 3, 9, 12, 0)
    assert normalize_due_date(None) is None


def test_task_form_builds_inputs():
    form = TaskForm(title=" Report ", description="", category="work", due_date=date(2024, 1, 2))
    form.toggle_tag("t1")
    form.toggle_tag("t2")
    form.toggle_tag("t1")

    created = form.to_create()
    assert created.title == "Report"
    assert created.tag_ids == ["t2"]
    assert created.category == "work"
    assert "description" not in created.model_fields_set
    assert created.due_date == datetime(2024, 1, 2)

    update = form.to_update()
    assert update.due_date == datetime(2024, 1, 2, 12, 0)
    assert update.priority is Priority.MEDIUM


def test_task_form_rejects_blank_title():
    with pytest.raises(ValidationFailed) as excinfo:
        TaskForm(title="  ").to_create()
    assert "Title is required" in excinfo.value.message


def test_notifications_keep_most_recent():
    center = NotificationCenter(limit=2)
    assert center.latest is None
    center.success("one")
    center.error("two")
    center.success("three")
    assert [n.message for n in center.items] == ["two", "three"]
    assert center.latest.level == "success"
    center.clear()
    assert center.items == []


@pytest.mark.asyncio
async def test_cancel_quiets_every_joined_fetch_and_later_fetches_still_work():
    loader = SlowLoader()
    cache = QueryCache(loader)
    cache.set_data(["old"])

    waiters = [asyncio.ensure_future(cache.fetch()) for _ in range(3)]
    await loader.started.wait()
    await cache.cancel()

    assert await asyncio.gather(*waiters) == [["old"]] * 3
    assert not cache.is_fetching

    loader.release.set()
    assert await cache.fetch() == ["server"]
    assert cache.get_data() == ["server"]


@pytest.mark.asyncio
async def test_rollback_on_any_mutation_failure():
    cache = QueryCache(SlowLoader())
    cache.set_data(["a"])

    async def broken():
        raise ValueError("bad body")

    with pytest.raises(ValueError):
        await OptimisticMutation(cache).run(lambda items: items + ["b"], broken)
    assert cache.get_data() == ["a"]
