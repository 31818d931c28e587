import threading

import pytest

from cgutils.singleton import Singleton, SingletonType
from cgutils.utils import CGraphError


class Resource:
    created = 0

    def __init__(self):
        type(self).created += 1
        self.events = []

    def init(self):
        self.events.append("init")

    def destroy(self):
        self.events.append("destroy")


@pytest.fixture(autouse=True)
def reset_counter():
    Resource.created = 0


def test_hungry_creates_at_construction():
    single = Singleton(Resource)
    assert Resource.created == 1
    first = single.get()
    assert single.get() is first
    assert Resource.created == 1


def test_lazy_creates_on_first_get():
    single = Singleton(Resource, SingletonType.LAZY)
    assert Resource.created == 0
    first = single.get()
    assert isinstance(first, Resource)
    assert single.get() is first
    assert Resource.created == 1


def test_auto_init_calls_init():
    single = Singleton(Resource, SingletonType.LAZY, auto_init=True)
    assert Resource.created == 1
    assert single.get().events == ["init"]


def test_init_and_destroy_forwarded():
    single = Singleton(Resource)
    single.init()
    single.destroy()
    assert single.get().events == ["init", "destroy"]


def test_object_without_hooks():
    single = Singleton(list)
    single.init()
    single.destroy()
    assert single.get() == []


def test_clear_hungry_leaves_empty():
    single = Singleton(Resource)
    single.clear()
    assert single.get() is None
    with pytest.raises(CGraphError):
        single.init()


def test_clear_lazy_recreates():
    single = Singleton(Resource, SingletonType.LAZY)
    first = single.get()
    single.clear()
    second = single.get()
    assert second is not first
    assert Resource.created == 2


def test_lazy_get_is_thread_safe():
    single = Singleton(Resource, SingletonType.LAZY)
    results = []
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        results.append(single.get())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(results) == 8
    assert all(item is results[0] for item in results)
    assert Resource.created == 1