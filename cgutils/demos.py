"""Walk-throughs of the thread pool, LRU cache, trie, timer and distance helpers."""

from __future__ import annotations

import argparse
import functools
import re
import time
from concurrent.futures import wait
from typing import Dict, List, Optional, Sequence, Tuple

from .config import ThreadPoolConfig
from .distance import Distance, DistanceCalculator, EuclideanDistance
from .lru import Lru
from .pool import ThreadPool
from .rand import generate
from .task import TaskGroup
from .timer import Timer
from .trie import Trie
from .utils import CGraphError, echo

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def add(i: int, j: int) -> int:
    """Return ``i + j``."""
    return i + j


def minus_by_5(i: float) -> float:
    """Return ``i - 5``."""
    return i - 5.0


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


class MyFunction:
    """A small object whose methods are handed to the thread pool."""

    def __init__(self, power: int = 2) -> None:
        self.power = power

    def pow2(self, text: str) -> str:
        """Raise the integer at the start of ``text`` to this object's power."""
        result = 1
        base = _atoi(text)
        for _ in range(self.power):
            result *= base
        return "multiply result is : " + str(result)

    @staticmethod
    def divide(i: int, j: int) -> int:
        """Divide, truncating toward zero; dividing by zero gives 0."""
        if j == 0:
            return 0
        quotient = abs(i) // abs(j)
        return quotient if (i >= 0) == (j >= 0) else -quotient


class MyDistance(Distance):
    """Sum of twice each element of ``v1`` plus half each element of ``v2``."""

    def calc(self, v1: Sequence[float], v2: Sequence[float]) -> float:
        return sum(a * 2 + b / 2 for a, b in zip(v1, v2))


def tutorial_threadpool_1(pool: ThreadPool) -> List[object]:
    """Commit plain functions, bound functions and methods; return their results."""
    i, j = 6, 3
    text = "5"
    mf = MyFunction()

    r1 = pool.commit(lambda: add(i, j))
    r2 = pool.commit(functools.partial(minus_by_5, 8.5))
    r3 = pool.commit(functools.partial(mf.pow2, text))
    r4 = pool.commit(lambda: MyFunction.divide(i, j))

    results = [future.result() for future in (r1, r2, r3, r4)]
    for result in results:
        print(result)
    return results


def tutorial_threadpool_2(pool: ThreadPool) -> Optional[CGraphError]:
    """Submit a task group with a 2500 ms limit; return the error it ended with, if any."""
    i, j, k = 1, 2, 3
    group = TaskGroup()
    group.add_task(lambda: echo("Hello, CGraph."))

    def sleep_one() -> None:
        result = i + j
        time.sleep(1)
        echo("sleep for 1 second, [%d] + [%d] = [%d], run success.", i, j, result)

    def sleep_two() -> int:
        result = i - j + k
        time.sleep(2)
        echo("sleep for 2 second, [%d] - [%d] + [%d] = [%d], run success.", i, j, k, result)
        return result

    group.add_task(sleep_one)
    group.add_task(sleep_two)

    error: Optional[CGraphError] = None
    try:
        pool.submit(group, 2500)
    except CGraphError as exc:
        error = exc
    echo("task group run status is [%d].", 0 if error is None else -1)
    return error


def tutorial_threadpool_3(pool: ThreadPool) -> Tuple[List[int], List[int], List[int]]:
    """Print 0..99 by single submits, a task group and commits; return what each printed."""
    size = 100
    submitted: List[int] = []
    grouped: List[int] = []
    committed: List[int] = []

    def show(target: List[int], value: int) -> None:
        target.append(value)
        print(value, end=" ", flush=True)

    echo("thread pool task submit version : ")
    for value in range(size):
        pool.submit_task(functools.partial(show, submitted, value))
    print("\r")

    echo("thread pool task group submit version : ")
    group = TaskGroup()
    for value in range(size):
        group.add_task(functools.partial(show, grouped, value))
    pool.submit(group)
    print("\r")

    echo("thread pool task commit version : ")
    futures = [pool.commit(functools.partial(show, committed, value)) for value in range(size)]
    wait(futures)
    print("\r")

    return submitted, grouped, committed


def tutorial_lru() -> Dict[int, Optional[str]]:
    """Fill a three-entry cache with five values and look up keys 5 and 6."""
    lru: Lru[int, str] = Lru(3)
    for key, value in ((1, "one"), (2, "two"), (3, "three"), (4, "four"), (5, "five")):
        lru.put(key, value)

    found: Dict[int, Optional[str]] = {}
    for key in (5, 6):
        value = lru.get(key)
        found[key] = value
        if value is not None:
            echo("key = %d, value is : [%s]", key, value)
        else:
            echo("[%d] no get value", key)
    return found


def tutorial_trie() -> List[bool]:
    """Insert, find, erase and re-insert words; return each lookup result."""
    trie = Trie()
    for word in ("hello", "help", "cgraph"):
        trie.insert(word)

    results: List[bool] = []
    results.append(trie.find("hello"))
    echo("find [hello] result is : [%i]", results[-1])
    results.append(trie.find("cgraph"))
    echo("find [cgraph] result is : [%i]", results[-1])

    trie.erase("hello")
    results.append(trie.find("hello"))
    echo("eraser [hello], then find it, result is : [%i]", results[-1])

    trie.insert("hello")
    results.append(trie.find("hello"))
    echo("insert [hello] again, then find it, result is : [%i]", results[-1])
    return results


def tutorial_timer() -> int:
    """Run a one-second timer for 5.5 seconds; return how many times it fired."""
    ticks: List[int] = []

    def hello() -> None:
        ticks.append(1)
        echo("Hello, CGraph")

    with Timer() as timer:
        timer.start(1000, hello)
        time.sleep(5.5)
    return len(ticks)


def tutorial_distance() -> Tuple[float, float, float]:
    """Compare two random 16-dimensional vectors with the Euclidean and custom distances."""
    dim = 16
    vec1 = generate(dim, 0.0, 1.0)
    vec2 = generate(dim, 0.0, 1.0)

    euclidean = DistanceCalculator(EuclideanDistance()).calculate(vec1, vec2)
    print(f"UDistanceEuclidean distance result is : {euclidean}")

    mine = DistanceCalculator(MyDistance())
    forward = mine.calculate(vec1, vec2)
    print(f"MyDistance distance vec1 -> vec2 result is : {forward}")
    backward = mine.calculate(vec2, vec1)
    print(f"MyDistance distance vec2 -> vec1 result is : {backward}")
    return euclidean, forward, backward


def _run_threadpool() -> None:
    with ThreadPool(True, ThreadPoolConfig()) as pool:
        echo("======== tutorial_threadpool_1 begin. ========")
        tutorial_threadpool_1(pool)
        echo("======== tutorial_threadpool_2 begin. ========")
        tutorial_threadpool_2(pool)
        echo("======== tutorial_threadpool_3 begin. ========")
        tutorial_threadpool_3(pool)


_DEMOS = {
    "threadpool": _run_threadpool,
    "lru": tutorial_lru,
    "trie": tutorial_trie,
    "timer": tutorial_timer,
    "distance": tutorial_distance,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the named demos, or all of them when none is named."""
    parser = argparse.ArgumentParser(prog="cgutils-demos", description=__doc__)
    parser.add_argument("demos", nargs="*", choices=sorted(_DEMOS), metavar="demo",
                        help="one of: " + ", ".join(sorted(_DEMOS)))
    args = parser.parse_args(argv)
    for name in args.demos or list(_DEMOS):
        _DEMOS[name]()
    return 0