"""Thread-safe queues and a spin lock used by the thread pool."""

from __future__ import annotations

import heapq
import itertools
import threading
import time
from collections import deque
from typing import Any, Deque, Generic, List, Optional, Tuple, TypeVar

from .config import DEFAULT_RINGBUFFER_SIZE
from .utils import CGraphError

T = TypeVar("T")


class SpinLock:
    """A lock taken by busy-waiting rather than sleeping."""

    def __init__(self) -> None:
        self._flag = threading.Lock()

    def lock(self) -> None:
        """Spin until the lock is taken."""
        while not self._flag.acquire(blocking=False):
            time.sleep(0)

    def unlock(self) -> None:
        """Release the lock."""
        self._flag.release()

    def try_lock(self) -> bool:
        """Take the lock if it is free; return whether it was taken."""
        return self._flag.acquire(blocking=False)

    def __enter__(self) -> "SpinLock":
        self.lock()
        return self

    def __exit__(self, *args: Any) -> None:
        self.unlock()


class AtomicQueue(Generic[T]):
    """A FIFO queue; the ``try_`` methods give up if the queue is busy or empty."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._items: Deque[T] = deque()

    def push(self, value: T) -> None:
        """Append ``value`` and wake one waiting consumer."""
        with self._cond:
            self._items.append(value)
            self._cond.notify()

    def wait_pop(self) -> T:
        """Block until an item is available and return it."""
        with self._cond:
            self._cond.wait_for(lambda: bool(self._items))
            return self._items.popleft()

    def try_pop(self) -> Optional[T]:
        """Return the oldest item, or ``None`` if none could be taken."""
        if not self._cond.acquire(blocking=False):
            return None
        try:
            return self._items.popleft() if self._items else None
        finally:
            self._cond.release()

    def try_pop_batch(self, max_size: int) -> List[T]:
        """Return up to ``max_size`` of the oldest items."""
        if not self._cond.acquire(blocking=False):
            return []
        try:
            count = min(max(max_size, 0), len(self._items))
            return [self._items.popleft() for _ in range(count)]
        finally:
            self._cond.release()

    def empty(self) -> bool:
        """Whether the queue holds no items."""
        with self._cond:
            return not self._items


class AtomicPriorityQueue(Generic[T]):
    """A queue that yields higher-priority items first, FIFO among equals."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._heap: List[Tuple[int, int, T]] = []
        self._counter = itertools.count()

    def push(self, value: T, priority: int = 0) -> None:
        """Add ``value`` with the given ``priority``."""
        with self._lock:
            heapq.heappush(self._heap, (-priority, next(self._counter), value))

    def try_pop(self) -> Optional[T]:
        """Return the highest-priority item, or ``None`` if none could be taken."""
        if not self._lock.acquire(blocking=False):
            return None
        try:
            return heapq.heappop(self._heap)[2] if self._heap else None
        finally:
            self._lock.release()

    def try_pop_batch(self, max_size: int) -> List[T]:
        """Return up to ``max_size`` items in priority order."""
        if not self._lock.acquire(blocking=False):
            return []
        try:
            count = min(max(max_size, 0), len(self._heap))
            return [heapq.heappop(self._heap)[2] for _ in range(count)]
        finally:
            self._lock.release()

    def empty(self) -> bool:
        """Whether the queue holds no items."""
        with self._lock:
            return not self._heap


class AtomicRingBufferQueue(Generic[T]):
    """A bounded ring buffer; one slot stays free, so it holds ``capacity - 1`` items."""

    def __init__(self, capacity: int = DEFAULT_RINGBUFFER_SIZE) -> None:
        self._check_capacity(capacity)
        self._lock = threading.Lock()
        self._push_cv = threading.Condition(self._lock)
        self._pop_cv = threading.Condition(self._lock)
        self._capacity = capacity
        self._buffer: List[Optional[T]] = [None] * capacity
        self._head = 0
        self._tail = 0

    @staticmethod
    def _check_capacity(capacity: int) -> None:
        if capacity < 2:
            raise ValueError("ring buffer capacity must be at least 2")

    @property
    def capacity(self) -> int:
        return self._capacity

    def _is_full(self) -> bool:
        return self._head == (self._tail + 1) % self._capacity

    def _is_empty(self) -> bool:
        return self._head == self._tail

    def _drain(self) -> List[T]:
        items: List[T] = []
        while not self._is_empty():
            items.append(self._buffer[self._head])  # type: ignore[arg-type]
            self._head = (self._head + 1) % self._capacity
        return items

    def set_capacity(self, size: int) -> "AtomicRingBufferQueue[T]":
        """Resize the buffer, keeping the items it holds in order."""
        self._check_capacity(size)
        with self._lock:
            items = self._drain()
            if len(items) > size - 1:
                raise ValueError("ring buffer holds more items than the new capacity")
            self._capacity = size
            self._buffer = [None] * size
            self._buffer[: len(items)] = items
            self._head = 0
            self._tail = len(items)
            self._push_cv.notify_all()
        return self

    def push(self, value: T) -> None:
        """Write ``value``, blocking while the buffer is full."""
        with self._lock:
            self._push_cv.wait_for(lambda: not self._is_full())
            self._buffer[self._tail] = value
            self._tail = (self._tail + 1) % self._capacity
            self._pop_cv.notify()

    def wait_pop(self, timeout: float) -> T:
        """Return the oldest item, waiting up to ``timeout`` milliseconds.

        Raises :class:`CGraphError` if nothing arrives in time.
        """
        with self._lock:
            if not self._pop_cv.wait_for(lambda: not self._is_empty(), timeout / 1000):
                raise CGraphError("receive message timeout.")
            value = self._buffer[self._head]
            self._buffer[self._head] = None
            self._head = (self._head + 1) % self._capacity
            self._push_cv.notify()
        return value  # type: ignore[return-value]

    def clear(self) -> None:
        """Drop every item."""
        with self._lock:
            self._buffer = [None] * self._capacity
            self._head = 0
            self._tail = 0
            self._push_cv.notify_all()

    def __len__(self) -> int:
        with self._lock:
            return (self._tail - self._head) % self._capacity


class WorkStealingQueue(Generic[T]):
    """A deque whose owner works from the front while others steal from the back."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._deque: Deque[T] = deque()

    def push(self, task: T) -> None:
        """Put ``task`` at the front."""
        while not self._lock.acquire(blocking=False):
            time.sleep(0)
        try:
            self._deque.appendleft(task)
        finally:
            self._lock.release()

    def _take(self, from_front: bool, max_size: int) -> List[T]:
        if not self._lock.acquire(blocking=False):
            return []
        try:
            count = min(max(max_size, 0), len(self._deque))
            pop = self._deque.popleft if from_front else self._deque.pop
            return [pop() for _ in range(count)]
        finally:
            self._lock.release()

    def try_pop(self) -> Optional[T]:
        """Take the newest task from the front, or ``None``."""
        taken = self._take(True, 1)
        return taken[0] if taken else None

    def try_pop_batch(self, max_size: int) -> List[T]:
        """Take up to ``max_size`` tasks from the front."""
        return self._take(True, max_size)

    def try_steal(self) -> Optional[T]:
        """Take the oldest task from the back, or ``None``."""
        taken = self._take(False, 1)
        return taken[0] if taken else None

    def try_steal_batch(self, max_size: int) -> List[T]:
        """Take up to ``max_size`` tasks from the back."""
        return self._take(False, max_size)

    def __len__(self) -> int:
        with self._lock:
            return len(self._deque)