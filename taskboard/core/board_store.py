"""
In-memory board and task store.

All mutable application state lives in a single ``BoardStore`` instance and
every operation runs under one ``asyncio.Lock``, so requests never observe a
half-applied change. State is ephemeral and disappears with the process.
"""

import asyncio
from datetime import datetime
from typing import Any

import structlog

from taskboard.core.models import Board, Task, TaskCounts, TaskFilter

logger = structlog.get_logger(__name__)


def _matches(query: str | None, *fields: str) -> bool:
    if not query:
        return True
    needle = query.strip().casefold()
    return any(needle in value.casefold() for value in fields)


class BoardStore:
    """
    Owner of all boards and tasks.

    Records handed out are copies; callers change state only through the
    store's methods. Identifiers are sequential and never reused.

    Example:
        >>> store = BoardStore()
        >>> board = await store.create_board("Chores", "Around the house")
        >>> task = await store.create_task(board.id, "Water plants")
        >>> await store.toggle_task(board.id, task.id)
        >>> (await store.count_tasks(board.id)).remaining
        0
    """

    def __init__(self) -> None:
        self._boards: dict[int, Board] = {}
        self._tasks: dict[int, Task] = {}
        self._next_board_id = 1
        self._next_task_id = 1
        self._lock = asyncio.Lock()

        logger.info("BoardStore initialized")

    # ------------------------------------------------------------------
    # Boards
    # ------------------------------------------------------------------

    async def create_board(self, name: str, description: str = "") -> Board:
        """
        Create a new board.

        Args:
            name: Display name (already validated)
            description: Optional free text

        Returns:
            A copy of the stored board
        """
        async with self._lock:
            board = Board(id=self._next_board_id, name=name, description=description)
            self._boards[board.id] = board
            self._next_board_id += 1

            logger.debug("Board created", board_id=board.id, name=name)
            return board.copy()

    async def get_board(self, board_id: int) -> Board | None:
        async with self._lock:
            board = self._boards.get(board_id)
            return board.copy() if board else None

    async def list_boards(self, query: str | None = None) -> list[Board]:
        """
        List boards ordered by id.

        Args:
            query: Case-insensitive text matched against name and description

        Returns:
            Copies of the matching boards
        """
        async with self._lock:
            return [
                board.copy()
                for board in sorted(self._boards.values(), key=lambda b: b.id)
                if _matches(query, board.name, board.description)
            ]

    async def update_board(
        self, board_id: int, name: str, description: str = ""
    ) -> Board | None:
        async with self._lock:
            board = self._boards.get(board_id)
            if board is None:
                return None

            board.name = name
            board.description = description

            logger.debug("Board updated", board_id=board_id)
            return board.copy()

    async def delete_board(self, board_id: int) -> bool:
        """
        Delete a board together with all of its tasks.

        Returns:
            True if the board existed, False otherwise
        """
        async with self._lock:
            if board_id not in self._boards:
                return False

            del self._boards[board_id]
            orphaned = [t.id for t in self._tasks.values() if t.board_id == board_id]
            for task_id in orphaned:
                del self._tasks[task_id]

            logger.debug("Board deleted", board_id=board_id, tasks_removed=len(orphaned))
            return True

    async def board_count(self) -> int:
        async with self._lock:
            return len(self._boards)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def create_task(self, board_id: int, title: str) -> Task | None:
        """
        Add a task to a board.

        Returns:
            A copy of the new task, or None when the board does not exist
        """
        async with self._lock:
            if board_id not in self._boards:
                return None

            task = Task(id=self._next_task_id, board_id=board_id, title=title)
            self._tasks[task.id] = task
            self._next_task_id += 1

            logger.debug("Task created", board_id=board_id, task_id=task.id)
            return task.copy()

    async def get_task(self, board_id: int, task_id: int) -> Task | None:
        async with self._lock:
            task = self._find_task(board_id, task_id)
            return task.copy() if task else None

    async def list_tasks(
        self,
        board_id: int,
        query: str | None = None,
        task_filter: TaskFilter = TaskFilter.ALL,
    ) -> list[Task]:
        """
        List a board's tasks ordered by id.

        Args:
            board_id: Board whose tasks to list
            query: Case-insensitive text matched against the title
            task_filter: Restrict to active or completed tasks

        Returns:
            Copies of the matching tasks (empty for an unknown board)
        """
        async with self._lock:
            return [
                task.copy()
                for task in sorted(self._tasks.values(), key=lambda t: t.id)
                if task.board_id == board_id
                and task_filter.matches(task.done)
                and _matches(query, task.title)
            ]

    async def update_task(self, board_id: int, task_id: int, title: str) -> Task | None:
        async with self._lock:
            task = self._find_task(board_id, task_id)
            if task is None:
                return None

            task.title = title
            task.updated_at = datetime.now()

            logger.debug("Task updated", board_id=board_id, task_id=task_id)
            return task.copy()

    async def toggle_task(self, board_id: int, task_id: int) -> Task | None:
        """Flip a task between active and done."""
        async with self._lock:
            task = self._find_task(board_id, task_id)
            if task is None:
                return None

            task.done = not task.done
            task.updated_at = datetime.now()

            logger.debug("Task toggled", board_id=board_id, task_id=task_id, done=task.done)
            return task.copy()

    async def delete_task(self, board_id: int, task_id: int) -> bool:
        async with self._lock:
            if self._find_task(board_id, task_id) is None:
                return False

            del self._tasks[task_id]
            logger.debug("Task deleted", board_id=board_id, task_id=task_id)
            return True

    async def clear_completed(self, board_id: int) -> int:
        """
        Remove every completed task of a board.

        Returns:
            Number of tasks removed
        """
        async with self._lock:
            finished = [
                t.id for t in self._tasks.values() if t.board_id == board_id and t.done
            ]
            for task_id in finished:
                del self._tasks[task_id]

            if finished:
                logger.info("Completed tasks cleared", board_id=board_id, removed=len(finished))
            return len(finished)

    async def count_tasks(self, board_id: int) -> TaskCounts:
        async with self._lock:
            tasks = [t for t in self._tasks.values() if t.board_id == board_id]
            return TaskCounts(total=len(tasks), done=sum(1 for t in tasks if t.done))

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    async def stats(self) -> dict[str, Any]:
        """
        Get store statistics for health reporting.

        Returns:
            Dictionary with board and task totals
        """
        async with self._lock:
            done = sum(1 for t in self._tasks.values() if t.done)
            return {
                "boards": len(self._boards),
                "tasks": len(self._tasks),
                "tasks_done": done,
            }

    def _find_task(self, board_id: int, task_id: int) -> Task | None:
        """Look up a task only through the board that owns it. Caller holds the lock."""
        task = self._tasks.get(task_id)
        if task is None or task.board_id != board_id:
            return None
        return task


async def seed_demo_data(store: BoardStore) -> None:
    """Populate a store with an example board."""
    board = await store.create_board(
        "Getting started", "An example board created on startup"
    )
    for title in ("Create a board", "Add a few tasks", "Tick one off"):
        await store.create_task(board.id, title)
    first = (await store.list_tasks(board.id))[0]
    await store.toggle_task(board.id, first.id)


# Global store instance (initialized once at startup)
_board_store: BoardStore | None = None


def get_board_store() -> BoardStore:
    """
    Get the global board store instance.

    Returns:
        The global board store instance

    Raises:
        RuntimeError: If store not initialized
    """
    if _board_store is None:
        raise RuntimeError("Board store not initialized. Call initialize_store() first.")
    return _board_store


def initialize_store() -> BoardStore:
    """Initialize the global board store, replacing any previous one."""
    global _board_store
    _board_store = BoardStore()
    logger.info("Global board store initialized")
    return _board_store


def reset_store() -> None:
    """Reset the global store (for testing)."""
    global _board_store
    _board_store = None
