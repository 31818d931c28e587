import threading

import pytest

from cgutils.config import DEFAULT_RINGBUFFER_SIZE
from cgutils.queues import (
    AtomicPriorityQueue,
    AtomicQueue,
    AtomicRingBufferQueue,
    SpinLock,
    WorkStealingQueue,
)
from cgutils.utils import CGraphError


def test_spin_lock_try_lock():
    lock = SpinLock()
    assert lock.try_lock() is True
    assert lock.try_lock() is False
    lock.unlock()
    assert lock.try_lock() is True
    lock.unlock()


def test_spin_lock_context_manager_holds_lock():
    lock = SpinLock()
    with lock:
        assert lock.try_lock() is False
    assert lock.try_lock() is True
    lock.unlock()


def test_atomic_queue_is_fifo():
    queue = AtomicQueue()
    assert queue.empty() is True
    for item in ["a", "b", "c"]:
        queue.push(item)
    assert queue.empty() is False
    assert [queue.try_pop(), queue.try_pop(), queue.try_pop()] == ["a", "b", "c"]
    assert queue.try_pop() is None


def test_atomic_queue_batch():
    queue = AtomicQueue()
    for item in range(5):
        queue.push(item)
    assert queue.try_pop_batch(2) == [0, 1]
    assert queue.try_pop_batch(10) == [2, 3, 4]
    assert queue.try_pop_batch(3) == []


def test_atomic_queue_wait_pop_receives_from_other_thread():
    queue = AtomicQueue()
    producer = threading.Timer(0.05, queue.push, args=("item",))
    producer.start()
    assert queue.wait_pop() == "item"
    producer.join(timeout=2)
    assert queue.empty() is True


def test_priority_queue_order():
    queue = AtomicPriorityQueue()
    queue.push("low", -101)
    queue.push("first-zero", 0)
    queue.push("high", 50)
    queue.push("second-zero", 0)
    assert queue.try_pop() == "high"
    assert queue.try_pop_batch(3) == ["first-zero", "second-zero", "low"]
    assert queue.empty() is True
    assert queue.try_pop() is None


def test_ring_buffer_default_capacity():
    assert AtomicRingBufferQueue().capacity == DEFAULT_RINGBUFFER_SIZE


def test_ring_buffer_fifo_and_len():
    ring = AtomicRingBufferQueue(4)
    for item in ["x", "y", "z"]:
        ring.push(item)
    assert len(ring) == 3
    assert [ring.wait_pop(100) for _ in range(3)] == ["x", "y", "z"]
    assert len(ring) == 0


def test_ring_buffer_timeout_raises():
    ring = AtomicRingBufferQueue(4)
    with pytest.raises(CGraphError, match="timeout"):
        ring.wait_pop(20)


def test_ring_buffer_push_blocks_when_full():
    ring = AtomicRingBufferQueue(2)
    ring.push("first")
    done = threading.Event()

    def producer():
        ring.push("second")
        done.set()

    thread = threading.Thread(target=producer)
    thread.start()
    assert done.wait(0.1) is False
    assert ring.wait_pop(100) == "first"
    assert done.wait(2) is True
    thread.join(timeout=2)
    assert ring.wait_pop(100) == "second"


def test_ring_buffer_set_capacity_keeps_items():
    ring = AtomicRingBufferQueue(3)
    ring.push("a")
    ring.push("b")
    assert ring.set_capacity(8) is ring
    assert ring.capacity == 8
    assert [ring.wait_pop(100), ring.wait_pop(100)] == ["a", "b"]


def test_ring_buffer_rejects_small_capacity():
    with pytest.raises(ValueError):
        AtomicRingBufferQueue(1)
    ring = AtomicRingBufferQueue(4)
    for item in range(3):
        ring.push(item)
    with pytest.raises(ValueError):
        ring.set_capacity(2)


def test_ring_buffer_clear():
    ring = AtomicRingBufferQueue(4)
    ring.push("a")
    ring.clear()
    assert len(ring) == 0
    with pytest.raises(CGraphError):
        ring.wait_pop(10)


def test_work_stealing_pop_from_front_steal_from_back():
    queue = WorkStealingQueue()
    for item in ["t1", "t2", "t3"]:
        queue.push(item)
    assert queue.try_pop() == "t3"
    assert queue.try_steal() == "t1"
    assert queue.try_pop() == "t2"
    assert queue.try_pop() is None
    assert queue.try_steal() is None


def test_work_stealing_batches():
    queue = WorkStealingQueue()
    for item in range(6):
        queue.push(item)
    assert queue.try_pop_batch(2) == [5, 4]
    assert queue.try_steal_batch(2) == [0, 1]
    assert len(queue) == 2
    assert queue.try_steal_batch(10) == [2, 3]
    assert queue.try_pop_batch(1) == []