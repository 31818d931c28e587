"""Units of work for the thread pool: single tasks and task groups."""

from __future__ import annotations

from typing import Any, Callable, Iterator, List, Optional

from .config import MAX_BLOCK_TTL

TaskFunction = Callable[[], Any]
FinishedCallback = Callable[[Optional[BaseException]], Any]


class Task:
    """A callable with a priority; tasks with a higher priority sort first."""

    __slots__ = ("func", "priority")

    def __init__(self, func: TaskFunction, priority: int = 0) -> None:
        self.func = func
        self.priority = priority

    def __call__(self) -> Any:
        return self.func()

    def __lt__(self, other: "Task") -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        return self.priority > other.priority

    def __repr__(self) -> str:
        return f"Task({self.func!r}, priority={self.priority})"


class TaskGroup:
    """A batch of functions submitted together, with a shared time limit.

    ``ttl`` is in milliseconds. ``on_finished`` is called once the group has
    run, with ``None`` on success or the error that ended it.
    """

    def __init__(
        self,
        task: Optional[TaskFunction] = None,
        ttl: int = MAX_BLOCK_TTL,
        on_finished: Optional[FinishedCallback] = None,
    ) -> None:
        self._tasks: List[TaskFunction] = []
        self.ttl = ttl
        self.on_finished = on_finished
        if task is not None:
            self.add_task(task)

    def add_task(self, task: TaskFunction) -> "TaskGroup":
        """Append ``task`` to the group."""
        self._tasks.append(task)
        return self

    def set_ttl(self, ttl: int) -> "TaskGroup":
        """Set the longest time, in milliseconds, the group may take."""
        self.ttl = ttl
        return self

    def set_on_finished(self, on_finished: Optional[FinishedCallback]) -> "TaskGroup":
        """Set the callback run after the group finishes."""
        self.on_finished = on_finished
        return self

    def clear(self) -> None:
        """Remove every task from the group."""
        self._tasks.clear()

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[TaskFunction]:
        return iter(list(self._tasks))