"""A work-stealing thread pool with helper threads and task groups."""

from __future__ import annotations

import threading
from concurrent.futures import Future, wait
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

from .config import (
    DEFAULT_TASK_STRATEGY,
    LONG_TIME_TASK_STRATEGY,
    MAX_BLOCK_TTL,
    SECONDARY_THREAD_COMMON_ID,
    ThreadPoolConfig,
)
from .queues import AtomicPriorityQueue, AtomicQueue
from .task import FinishedCallback, Task, TaskGroup
from .threads import PrimaryThread, SecondaryThread
from .utils import CGraphError


def _bind(func: Callable[[], Any], future: Future) -> Callable[[], None]:
    def runner() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = func()
        except BaseException as error:  # handed to whoever waits on the future
            future.set_exception(error)
        else:
            future.set_result(result)

    return runner


class ThreadPool:
    """Runs submitted functions on primary threads, growing helper threads on demand.

    Primary threads each own a work-stealing queue; secondary threads serve the
    shared queues and, when monitoring is enabled, are added while the pool is
    busy and released once idle long enough.
    """

    def __init__(self, auto_init: bool = True, config: Optional[ThreadPoolConfig] = None) -> None:
        self._config = replace(config) if config is not None else ThreadPoolConfig()
        self._is_init = False
        self._lock = threading.RLock()
        self._index_lock = threading.Lock()
        self._cur_index = 0
        self._task_queue: AtomicQueue = AtomicQueue()
        self._priority_task_queue: AtomicPriorityQueue = AtomicPriorityQueue()
        self._primary_threads: List[PrimaryThread] = []
        self._secondary_threads: List[SecondaryThread] = []
        self._thread_record: Dict[int, int] = {}
        self._monitor_thread: Optional[threading.Thread] = None
        self._monitor_stop = threading.Event()
        if auto_init:
            self.init()

    # ---- state ------------------------------------------------------------

    @property
    def is_init(self) -> bool:
        """Whether the pool's threads are running."""
        return self._is_init

    @property
    def config(self) -> ThreadPoolConfig:
        """A copy of the pool's settings."""
        return replace(self._config)

    @property
    def secondary_thread_count(self) -> int:
        """How many helper threads are alive."""
        with self._lock:
            return len(self._secondary_threads)

    def set_config(self, config: ThreadPoolConfig) -> None:
        """Replace the settings; only allowed before :meth:`init`."""
        if self._is_init:
            raise CGraphError("init status is not suitable")
        self._config = replace(config)

    # ---- lifecycle --------------------------------------------------------

    def init(self) -> None:
        """Start the primary threads, the initial helper threads and the monitor."""
        with self._lock:
            if self._is_init:
                return
            self._thread_record.clear()
            self._primary_threads.clear()
            for index in range(self._config.default_thread_size):
                thread = PrimaryThread(index, self._task_queue, self._primary_threads, self._config)
                thread.init()
                if thread.thread is not None and thread.thread.ident is not None:
                    self._thread_record[thread.thread.ident] = index
                self._primary_threads.append(thread)

            self._create_secondary_thread(self._config.secondary_thread_size)
            self._is_init = True

            if self._config.monitor_enable:
                self._monitor_stop.clear()
                self._monitor_thread = threading.Thread(target=self._monitor, daemon=True)
                self._monitor_thread.start()

    def destroy(self) -> None:
        """Stop every thread of the pool; does nothing if it is not running."""
        if not self._is_init:
            return
        self._stop_monitor()
        with self._lock:
            if not self._is_init:
                return
            for thread in self._primary_threads:
                thread.destroy()
            self._primary_threads.clear()
            for thread in self._secondary_threads:
                thread.destroy()
            self._secondary_threads.clear()
            self._thread_record.clear()
            self._is_init = False

    def _stop_monitor(self) -> None:
        self._monitor_stop.set()
        monitor = self._monitor_thread
        self._monitor_thread = None
        if monitor is not None and monitor is not threading.current_thread():
            monitor.join()

    def __enter__(self) -> "ThreadPool":
        self.init()
        return self

    def __exit__(self, *args: Any) -> None:
        self.destroy()

    # ---- submitting ---------------------------------------------------------

    def _dispatch(self, orig_index: int) -> int:
        if orig_index != DEFAULT_TASK_STRATEGY:
            return orig_index
        with self._index_lock:
            real_index = self._cur_index
            self._cur_index += 1
            if self._cur_index >= self._config.max_thread_size or self._cur_index < 0:
                self._cur_index = 0
        return real_index

    def commit(self, func: Callable[[], Any], index: int = DEFAULT_TASK_STRATEGY) -> Future:
        """Queue ``func`` and return a future for its result.

        ``index`` picks a primary thread; the default spreads tasks round robin,
        and :data:`LONG_TIME_TASK_STRATEGY` leaves the task to helper threads.
        """
        if not self._is_init:
            raise CGraphError("init status is not suitable")
        future: Future = Future()
        real_index = self._dispatch(index)
        primaries = self._primary_threads
        if 0 <= real_index < self._config.default_thread_size and real_index < len(primaries):
            primaries[real_index].work_stealing_queue.push(Task(_bind(func, future)))
        elif real_index == LONG_TIME_TASK_STRATEGY:
            task = Task(_bind(func, future), LONG_TIME_TASK_STRATEGY)
            self._priority_task_queue.push(task, LONG_TIME_TASK_STRATEGY)
        else:
            self._task_queue.push(Task(_bind(func, future)))
        return future

    def commit_with_priority(self, func: Callable[[], Any], priority: int) -> Future:
        """Queue ``func`` for helper threads; higher priorities run first."""
        if not self._is_init:
            raise CGraphError("init status is not suitable")
        future: Future = Future()
        with self._lock:
            if not self._secondary_threads:
                self._create_secondary_thread(1)
        self._priority_task_queue.push(Task(_bind(func, future), priority), priority)
        return future

    def submit(self, task_group: TaskGroup, ttl: int = MAX_BLOCK_TTL) -> None:
        """Run every task of the group and wait for them.

        The wait lasts at most the smaller of the group's ttl and ``ttl``, in
        milliseconds. The group's ``on_finished`` receives ``None`` or the
        timeout error, which is then raised. Errors raised by tasks are ignored.
        """
        if not self._is_init:
            raise CGraphError("init status is not suitable")
        futures = [self.commit(task) for task in task_group]
        timeout = max(min(task_group.ttl, ttl), 0) / 1000
        _, not_done = wait(futures, timeout=timeout)
        error = CGraphError("thread status timeout") if not_done else None
        if task_group.on_finished is not None:
            task_group.on_finished(error)
        if error is not None:
            raise error

    def submit_task(
        self,
        func: Callable[[], Any],
        ttl: int = MAX_BLOCK_TTL,
        on_finished: Optional[FinishedCallback] = None,
    ) -> None:
        """Run a single function as a task group of one."""
        self.submit(TaskGroup(func, ttl, on_finished))

    def thread_num(self, tid: Optional[int] = None) -> int:
        """Return the primary index of thread ``tid`` (default: the caller), or -1."""
        ident = threading.get_ident() if tid is None else tid
        return self._thread_record.get(ident, SECONDARY_THREAD_COMMON_ID)

    # ---- helpers ------------------------------------------------------------

    def _create_secondary_thread(self, size: int) -> None:
        with self._lock:
            left = (
                self._config.max_thread_size
                - self._config.default_thread_size
                - len(self._secondary_threads)
            )
            for _ in range(min(size, left)):
                thread = SecondaryThread(self._task_queue, self._priority_task_queue, self._config)
                thread.init()
                self._secondary_threads.append(thread)

    def _monitor(self) -> None:
        while self._config.monitor_enable and not self._monitor_stop.wait(self._config.monitor_span):
            busy = all(thread.is_running for thread in list(self._primary_threads))
            if busy or not self._priority_task_queue.empty():
                self._create_secondary_thread(1)

            with self._lock:
                expired = [thread for thread in self._secondary_threads if thread.freeze()]
                self._secondary_threads[:] = [
                    thread for thread in self._secondary_threads if thread not in expired
                ]
            for thread in expired:
                thread.destroy()