"""
Unit tests for the BoardStore implementation.

Tests cover board and task lifecycle, search and filtering, copy semantics
and concurrent access through the single lock.
"""

import asyncio

import pytest

from taskboard.core.board_store import (
    BoardStore,
    get_board_store,
    initialize_store,
    reset_store,
    seed_demo_data,
)
from taskboard.core.models import TaskCounts, TaskFilter


@pytest.fixture
def fresh_store():
    """Create a fresh store instance for each test."""
    return BoardStore()


class TestBoards:
    """Test board operations."""

    @pytest.mark.asyncio
    async def test_create_assigns_sequential_ids(self, fresh_store):
        first = await fresh_store.create_board("One")
        second = await fresh_store.create_board("Two", "second board")

        assert (first.id, second.id) == (1, 2)
        assert second.description == "second board"

    @pytest.mark.asyncio
    async def test_ids_are_not_reused_after_delete(self, fresh_store):
        board = await fresh_store.create_board("One")
        await fresh_store.delete_board(board.id)

        replacement = await fresh_store.create_board("Two")

        assert replacement.id == 2

    @pytest.mark.asyncio
    async def test_get_missing_board_returns_none(self, fresh_store):
        assert await fresh_store.get_board(42) is None

    @pytest.mark.asyncio
    async def test_returned_board_is_a_copy(self, fresh_store):
        board = await fresh_store.create_board("Original")
        board.name = "Mutated outside the store"

        stored = await fresh_store.get_board(board.id)

        assert stored.name == "Original"

    @pytest.mark.asyncio
    async def test_list_boards_search_is_case_insensitive(self, fresh_store):
        await fresh_store.create_board("Groceries", "Weekly shop")
        await fresh_store.create_board("Work", "Quarterly GROCERY budget")
        await fresh_store.create_board("Garden")

        names = [b.name for b in await fresh_store.list_boards("grocer")]

        assert names == ["Groceries", "Work"]
        assert len(await fresh_store.list_boards()) == 3

    @pytest.mark.asyncio
    async def test_update_board(self, fresh_store):
        board = await fresh_store.create_board("Old", "old description")

        updated = await fresh_store.update_board(board.id, "New", "")

        assert updated.name == "New"
        assert updated.description == ""
        assert await fresh_store.update_board(99, "Nope") is None

    @pytest.mark.asyncio
    async def test_delete_board_removes_its_tasks(self, fresh_store):
        doomed = await fresh_store.create_board("Doomed")
        kept = await fresh_store.create_board("Kept")
        await fresh_store.create_task(doomed.id, "gone")
        survivor = await fresh_store.create_task(kept.id, "stays")

        assert await fresh_store.delete_board(doomed.id) is True
        assert await fresh_store.delete_board(doomed.id) is False

        stats = await fresh_store.stats()
        assert stats == {"boards": 1, "tasks": 1, "tasks_done": 0}
        assert await fresh_store.get_task(kept.id, survivor.id) is not None


class TestTasks:
    """Test task operations."""

    @pytest.mark.asyncio
    async def test_create_task_requires_existing_board(self, fresh_store):
        assert await fresh_store.create_task(7, "orphan") is None

    @pytest.mark.asyncio
    async def test_task_only_visible_through_its_board(self, fresh_store):
        home = await fresh_store.create_board("Home")
        work = await fresh_store.create_board("Work")
        task = await fresh_store.create_task(home.id, "Dishes")

        assert await fresh_store.get_task(home.id, task.id) is not None
        assert await fresh_store.get_task(work.id, task.id) is None
        assert await fresh_store.toggle_task(work.id, task.id) is None
        assert await fresh_store.delete_task(work.id, task.id) is False

    @pytest.mark.asyncio
    async def test_toggle_flips_done_and_stamps_update(self, fresh_store):
        board = await fresh_store.create_board("Home")
        task = await fresh_store.create_task(board.id, "Dishes")
        assert task.done is False
        assert task.updated_at is None

        toggled = await fresh_store.toggle_task(board.id, task.id)
        assert toggled.done is True
        assert toggled.updated_at is not None

        toggled_back = await fresh_store.toggle_task(board.id, task.id)
        assert toggled_back.done is False

    @pytest.mark.asyncio
    async def test_update_task_title(self, fresh_store):
        board = await fresh_store.create_board("Home")
        task = await fresh_store.create_task(board.id, "Dishes")

        updated = await fresh_store.update_task(board.id, task.id, "Laundry")

        assert updated.title == "Laundry"
        assert (await fresh_store.get_task(board.id, task.id)).title == "Laundry"

    @pytest.mark.asyncio
    async def test_list_tasks_filters_and_searches(self, fresh_store):
        board = await fresh_store.create_board("Home")
        dishes = await fresh_store.create_task(board.id, "Wash dishes")
        await fresh_store.create_task(board.id, "Dry dishes")
        await fresh_store.create_task(board.id, "Vacuum")
        await fresh_store.toggle_task(board.id, dishes.id)

        done = await fresh_store.list_tasks(board.id, task_filter=TaskFilter.DONE)
        active = await fresh_store.list_tasks(board.id, task_filter=TaskFilter.ACTIVE)
        searched = await fresh_store.list_tasks(board.id, "DISHES", TaskFilter.ACTIVE)

        assert [t.title for t in done] == ["Wash dishes"]
        assert [t.title for t in active] == ["Dry dishes", "Vacuum"]
        assert [t.title for t in searched] == ["Dry dishes"]

    @pytest.mark.asyncio
    async def test_clear_completed_and_counts(self, fresh_store):
        board = await fresh_store.create_board("Home")
        for title in ("a", "b", "c"):
            task = await fresh_store.create_task(board.id, title)
        await fresh_store.toggle_task(board.id, task.id)

        assert await fresh_store.count_tasks(board.id) == TaskCounts(total=3, done=1)
        assert await fresh_store.clear_completed(board.id) == 1
        assert await fresh_store.clear_completed(board.id) == 0

        counts = await fresh_store.count_tasks(board.id)
        assert counts.total == 2
        assert counts.remaining == 2

    @pytest.mark.asyncio
    async def test_concurrent_creates_get_unique_ids(self, fresh_store):
        board = await fresh_store.create_board("Busy")

        tasks = await asyncio.gather(
            *(fresh_store.create_task(board.id, f"task {i}") for i in range(50))
        )

        assert len({t.id for t in tasks}) == 50
        assert (await fresh_store.count_tasks(board.id)).total == 50


class TestGlobalStore:
    """Test the module-level store helpers."""

    def test_get_before_initialize_raises(self):
        reset_store()
        with pytest.raises(RuntimeError, match="not initialized"):
            get_board_store()

    def test_initialize_replaces_store(self):
        first = initialize_store()
        second = initialize_store()

        assert first is not second
        assert get_board_store() is second

    @pytest.mark.asyncio
    async def test_seed_demo_data(self, fresh_store):
        await seed_demo_data(fresh_store)

        boards = await fresh_store.list_boards()
        assert len(boards) == 1
        assert await fresh_store.count_tasks(boards[0].id) == TaskCounts(total=3, done=1)
