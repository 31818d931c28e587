# cgutils

A small toolkit of concurrency and data-structure utilities. It needs nothing
outside the standard library.

- `cgutils.pool.ThreadPool`: a thread pool with a work-stealing queue per
  primary thread, a shared pool queue, a priority queue served by secondary
  threads, and (with monitoring enabled) secondary threads that are added
  while the pool is busy and released once idle.
- `cgutils.task.Task` and `cgutils.task.TaskGroup`: a callable with a priority,
  and a batch of callables with a time limit and an optional completion
  callback.
- `cgutils.queues`: `AtomicQueue`, `AtomicPriorityQueue`,
  `AtomicRingBufferQueue`, `WorkStealingQueue` and `SpinLock`.
- `cgutils.threads`: the pool's worker threads, `PrimaryThread` and
  `SecondaryThread`, plus `calc_policy` and `calc_priority`.
- `cgutils.config.ThreadPoolConfig`: pool settings and their default constants.
- `cgutils.lru.Lru`: a fixed-capacity least-recently-used cache.
- `cgutils.trie.Trie`: a prefix tree of strings.
- `cgutils.timer.Timer`: calls a function every given number of milliseconds
  on a background thread.
- `cgutils.singleton.Singleton` with `SingletonType.LAZY` / `SingletonType.HUNGRY`:
  holds exactly one instance built from a factory.
- `cgutils.serial_unique_array.SerialUniqueArray`: insertion-ordered collection
  that ignores repeats.
- `cgutils.rand`: `generate`, `generate_matrix` and `generate_session`.
- `cgutils.distance`: `EuclideanDistance`, `CosineDistance`, the `Distance`
  base class and `DistanceCalculator`.
- `cgutils.utils`: `echo`, `container_sum`, `container_multiply`, `max_of`,
  `sum_of` and the package error type `CGraphError`.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Thread pool

```python
from cgutils.pool import ThreadPool
from cgutils.task import TaskGroup

with ThreadPool() as pool:
    future = pool.commit(lambda: 6 + 3)   # a concurrent.futures.Future
    print(future.result())                # 9

    group = TaskGroup(lambda: print("Hello"))
    group.add_task(lambda: print("World"))
    pool.submit(group, 2500)              # waits at most 2500 ms
```

`submit` waits for at most the smaller of the group's own ttl and the ttl
passed in, in milliseconds. If any task has not finished by then it raises
`cgutils.utils.CGraphError("thread status timeout")`. The group's
`on_finished` callback, if set, is called first with `None` or that error.
Exceptions raised by the tasks themselves do not fail `submit`.

`submit_task(func, ttl, on_finished)` does the same for a single function.
`commit_with_priority(func, priority)` queues work for the secondary threads,
starting one if there is none; higher priorities run first.

Settings are given with `ThreadPoolConfig` and can only be changed before the
pool is initialised; `set_config` on a running pool raises `CGraphError`:

```python
from cgutils.config import ThreadPoolConfig
from cgutils.pool import ThreadPool

config = ThreadPoolConfig(default_thread_size=4, max_thread_size=4)
pool = ThreadPool(auto_init=True, config=config)
pool.destroy()
```

## LRU cache

```python
from cgutils.lru import Lru

lru = Lru(3)
for key, value in [(1, "one"), (2, "two"), (3, "three"), (4, "four")]:
    lru.put(key, value)
lru.get(1, None)   # None: evicted
lru.get(4, None)   # "four"
len(lru)           # 3
```

## Trie

```python
from cgutils.trie import Trie

trie = Trie()
trie.insert("hello")
"hello" in trie     # True
trie.erase("hello")
trie.find("hello")  # False
```

## Timer

```python
import time
from cgutils.timer import Timer

with Timer() as timer:
    timer.start(1000, lambda: print("tick"))   # every 1000 ms
    time.sleep(3.5)
```

Leaving the `with` block stops the timer and waits for its thread.

## Ring buffer

```python
from cgutils.queues import AtomicRingBufferQueue

ring = AtomicRingBufferQueue(4)   # holds up to 3 items
ring.push("a")
ring.wait_pop(100)                # "a"; raises CGraphError after 100 ms if empty
```

## Distances

```python
from cgutils.distance import DistanceCalculator, EuclideanDistance

calc = DistanceCalculator(EuclideanDistance(), need_check=True)
calc.calculate([0.0, 0.0], [3.0, 4.0])                # 5.0
calc.calculate_batch([0.0, 0.0], [[3.0, 4.0], [0.0, 1.0]])   # [5.0, 1.0]
```

With `need_check=True`, vectors that are empty or (for the Euclidean
distance) of different lengths raise `CGraphError`.

## Demo

`cgutils-demo` walks through the thread pool, the LRU cache, the trie, the
timer and the distance calculators. Name demos to run only those:

```
cgutils-demo
cgutils-demo lru trie distance
```

The available names are `threadpool`, `lru`, `trie`, `timer` and `distance`.