"""Work-stealing thread pool, task groups, thread-safe queues, LRU cache, trie, timer and vector distances."""

__version__ = "0.1.0"

__all__ = [
    "config",
    "demos",
    "distance",
    "lru",
    "pool",
    "queues",
    "rand",
    "serial_unique_array",
    "singleton",
    "task",
    "threads",
    "timer",
    "trie",
    "utils",
]