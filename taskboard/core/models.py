"""Board and task domain models."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum


class TaskFilter(str, Enum):
    """Which tasks of a board to show."""

    ALL = "all"
    ACTIVE = "active"
    DONE = "done"

    def matches(self, done: bool) -> bool:
        if self is TaskFilter.ACTIVE:
            return not done
        if self is TaskFilter.DONE:
            return done
        return True


@dataclass
class Board:
    """A named collection of tasks."""

    id: int
    name: str
    description: str = ""
    created_at: datetime = field(default_factory=datetime.now)

    def copy(self) -> "Board":
        return replace(self)


@dataclass
class Task:
    """A single to-do item belonging to one board."""

    id: int
    board_id: int
    title: str
    done: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime | None = None

    def copy(self) -> "Task":
        return replace(self)


@dataclass(frozen=True)
class TaskCounts:
    """Task totals shown in a board's counter."""

    total: int = 0
    done: int = 0

    @property
    def remaining(self) -> int:
        return self.total - self.done
