"""Worker threads of the thread pool: primary threads that steal work, secondary helpers."""

from __future__ import annotations

import os
import sys
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Sequence

from .config import (
    CPU_NUM,
    SECONDARY_THREAD_COMMON_ID,
    THREAD_MAX_PRIORITY,
    THREAD_MIN_PRIORITY,
    THREAD_SCHED_FIFO,
    THREAD_SCHED_OTHER,
    THREAD_SCHED_RR,
    THREAD_TYPE_PRIMARY,
    THREAD_TYPE_SECONDARY,
    ThreadPoolConfig,
)
from .queues import AtomicPriorityQueue, AtomicQueue, WorkStealingQueue
from .utils import CGraphError, echo

TaskLike = Callable[[], Any]

_IDLE_WAIT = 0.0005  # seconds a worker rests when it found nothing to do


def calc_policy(policy: int) -> int:
    """Return ``policy`` if it is OTHER, RR or FIFO; otherwise OTHER."""
    if policy in (THREAD_SCHED_OTHER, THREAD_SCHED_RR, THREAD_SCHED_FIFO):
        return policy
    return THREAD_SCHED_OTHER


def calc_priority(priority: int) -> int:
    """Return ``priority`` if it lies within the allowed range; otherwise the minimum."""
    if THREAD_MIN_PRIORITY <= priority <= THREAD_MAX_PRIORITY:
        return priority
    return THREAD_MIN_PRIORITY


def _require(value: Any) -> None:
    if value is None:
        raise CGraphError("input is nullptr")


class ThreadBase(ABC):
    """Common state and task handling of pool worker threads."""

    thread_type = 0

    def __init__(
        self,
        pool_task_queue: AtomicQueue,
        config: ThreadPoolConfig,
        pool_priority_task_queue: Optional[AtomicPriorityQueue] = None,
    ) -> None:
        _require(pool_task_queue)
        _require(config)
        self.pool_task_queue = pool_task_queue
        self.pool_priority_task_queue = pool_priority_task_queue
        self.config = config
        self.is_init = False
        self.is_running = False
        self.total_task_num = 0
        self.thread: Optional[threading.Thread] = None
        self._stop = threading.Event()

    # ---- lifecycle -------------------------------------------------------

    def _assert_init(self, expected: bool) -> None:
        if self.is_init != expected:
            raise CGraphError("init status is not suitable")

    def _start(self) -> None:
        self._stop.clear()
        self.is_init = True
        self.thread = threading.Thread(target=self._bootstrap, daemon=True)
        self.thread.start()

    def _bootstrap(self) -> None:
        self._apply_sched_param()
        self._apply_affinity()
        try:
            self.run()
        except CGraphError as error:
            echo("warning : thread stopped, error info is [%s]", str(error))

    def _reset(self) -> None:
        self._stop.set()
        thread = self.thread
        if thread is not None and thread.is_alive() and thread is not threading.current_thread():
            thread.join()
        self.thread = None
        self.is_init = False
        self.is_running = False
        self.total_task_num = 0

    def destroy(self) -> None:
        """Stop the worker loop and wait for the thread to end."""
        self._assert_init(True)
        self._reset()

    @abstractmethod
    def run(self) -> None:
        """Body of the worker thread."""

    @abstractmethod
    def process_task(self) -> bool:
        """Fetch and run one task; return whether one was run."""

    @abstractmethod
    def process_tasks(self) -> bool:
        """Fetch and run a batch of tasks; return whether any were run."""

    def _loop_process(self) -> None:
        step = self.process_tasks if self.config.batch_task_enable else self.process_task
        while not self._stop.is_set():
            try:
                ran = step()
            except Exception as error:  # keep the worker alive after a failing task
                echo("warning : task raised [%s]", repr(error))
                continue
            if not ran:
                self._stop.wait(_IDLE_WAIT)

    # ---- running ----------------------------------------------------------

    def run_task(self, task: TaskLike) -> None:
        """Run a single task, tracking the running state and the task count."""
        self.is_running = True
        try:
            task()
        finally:
            self.total_task_num += 1
            self.is_running = False

    def run_tasks(self, tasks: Sequence[TaskLike]) -> None:
        """Run the tasks in order, tracking the running state and the task count."""
        self.is_running = True
        try:
            for task in tasks:
                task()
        finally:
            self.total_task_num += len(tasks)
            self.is_running = False

    def pop_pool_task(self) -> Optional[TaskLike]:
        """Take one task from the pool queue; secondary threads also try the priority queue."""
        task = self.pool_task_queue.try_pop()
        if (
            task is None
            and self.thread_type == THREAD_TYPE_SECONDARY
            and self.pool_priority_task_queue is not None
        ):
            task = self.pool_priority_task_queue.try_pop()
        return task

    def pop_pool_tasks(self) -> List[TaskLike]:
        """Take a batch from the pool queue; secondary threads fall back to one priority task."""
        tasks = self.pool_task_queue.try_pop_batch(self.config.max_pool_batch_size)
        if (
            not tasks
            and self.thread_type == THREAD_TYPE_SECONDARY
            and self.pool_priority_task_queue is not None
        ):
            tasks = self.pool_priority_task_queue.try_pop_batch(1)
        return tasks

    # ---- scheduling -------------------------------------------------------

    def _sched_settings(self) -> tuple[int, int]:
        if self.thread_type == THREAD_TYPE_PRIMARY:
            return self.config.primary_thread_policy, self.config.primary_thread_priority
        if self.thread_type == THREAD_TYPE_SECONDARY:
            return self.config.secondary_thread_policy, self.config.secondary_thread_priority
        return THREAD_SCHED_OTHER, THREAD_MIN_PRIORITY

    def _apply_sched_param(self) -> None:
        if not hasattr(os, "sched_setscheduler") or not hasattr(os, "sched_param"):
            return
        policy, priority = self._sched_settings()
        try:
            os.sched_setscheduler(0, calc_policy(policy), os.sched_param(calc_priority(priority)))
        except OSError as error:
            echo("warning : set thread sched param failed, error code is [%d]", error.errno or -1)

    def _affinity_index(self) -> int:
        return -1

    def _apply_affinity(self) -> None:
        index = self._affinity_index()
        if (
            not sys.platform.startswith("linux")
            or not hasattr(os, "sched_setaffinity")
            or not self.config.bind_cpu_enable
            or CPU_NUM == 0
            or index < 0
        ):
            return
        try:
            os.sched_setaffinity(0, {index % CPU_NUM})
        except OSError as error:
            echo("warning : set thread affinity failed, error code is [%d]", error.errno or -1)


class PrimaryThread(ThreadBase):
    """A core worker with its own work-stealing queue; steals from its neighbours."""

    thread_type = THREAD_TYPE_PRIMARY

    def __init__(
        self,
        index: int,
        pool_task_queue: AtomicQueue,
        pool_threads: List[Optional["PrimaryThread"]],
        config: ThreadPoolConfig,
    ) -> None:
        _require(pool_threads)
        super().__init__(pool_task_queue, config)
        self.index = index if index is not None else SECONDARY_THREAD_COMMON_ID
        self.pool_threads = pool_threads
        self.work_stealing_queue: WorkStealingQueue = WorkStealingQueue()

    def init(self) -> None:
        """Start the worker thread."""
        self._assert_init(False)
        self._start()

    def _affinity_index(self) -> int:
        return self.index

    def run(self) -> None:
        """Process tasks until destroyed."""
        self._assert_init(True)
        _require(self.pool_threads)
        if any(thread is None for thread in self.pool_threads):
            raise CGraphError("primary thread is null")
        self._loop_process()

    def process_task(self) -> bool:
        task = self.pop_task()
        if task is None:
            task = self.pop_pool_task()
        if task is None:
            task = self.steal_task()
        if task is None:
            return False
        self.run_task(task)
        return True

    def process_tasks(self) -> bool:
        tasks = self.pop_tasks() or self.pop_pool_tasks() or self.steal_tasks()
        if not tasks:
            return False
        self.run_tasks(tasks)
        return True

    def pop_task(self) -> Optional[TaskLike]:
        """Take the newest task from this thread's own queue."""
        return self.work_stealing_queue.try_pop()

    def pop_tasks(self) -> List[TaskLike]:
        """Take a batch from this thread's own queue."""
        return self.work_stealing_queue.try_pop_batch(self.config.max_local_batch_size)

    def _neighbours(self) -> List["PrimaryThread"]:
        size = self.config.default_thread_size
        if len(self.pool_threads) < size:
            return []
        neighbours = []
        for offset in range(self.config.calc_steal_range()):
            thread = self.pool_threads[(self.index + offset + 1) % size]
            if thread is not None:
                neighbours.append(thread)
        return neighbours

    def steal_task(self) -> Optional[TaskLike]:
        """Steal the oldest task from the nearest neighbour that has one."""
        for thread in self._neighbours():
            task = thread.work_stealing_queue.try_steal()
            if task is not None:
                return task
        return None

    def steal_tasks(self) -> List[TaskLike]:
        """Steal a batch from the nearest neighbour that has any."""
        for thread in self._neighbours():
            tasks = thread.work_stealing_queue.try_steal_batch(self.config.max_steal_batch_size)
            if tasks:
                return tasks
        return []


class SecondaryThread(ThreadBase):
    """A helper worker that serves the pool queues and expires when idle."""

    thread_type = THREAD_TYPE_SECONDARY

    def __init__(
        self,
        pool_task_queue: AtomicQueue,
        pool_priority_task_queue: AtomicPriorityQueue,
        config: ThreadPoolConfig,
    ) -> None:
        _require(pool_priority_task_queue)
        super().__init__(pool_task_queue, config, pool_priority_task_queue)
        self.cur_ttl = 0

    def init(self) -> None:
        """Start the worker thread with a full time-to-live."""
        self._assert_init(False)
        self.cur_ttl = self.config.secondary_thread_ttl
        self._start()

    def run(self) -> None:
        """Process tasks until destroyed."""
        self._assert_init(True)
        self._loop_process()

    def process_task(self) -> bool:
        task = self.pop_pool_task()
        if task is None:
            return False
        self.run_task(task)
        return True

    def process_tasks(self) -> bool:
        tasks = self.pop_pool_tasks()
        if not tasks:
            return False
        self.run_tasks(tasks)
        return True

    def freeze(self) -> bool:
        """Update the time-to-live and return whether this thread should be released."""
        if self.is_running:
            self.cur_ttl = min(self.cur_ttl + 1, self.config.secondary_thread_ttl)
        else:
            self.cur_ttl -= 1
        return self.cur_ttl <= 0