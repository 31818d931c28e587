"""Uniform random vectors and session identifiers."""

from __future__ import annotations

import random
from typing import List

REAL_RANDOM = 0
"""Seed value that asks for a fresh, unpredictable generator."""

UNKNOWN = "unknown"

_SESSION_MIN = 100000
_SESSION_MAX = 999999


def _engine(seed: int) -> random.Random:
    return random.Random() if seed == REAL_RANDOM else random.Random(seed)


def generate(
    dim: int,
    min_value: float = 0.0,
    max_value: float = 1.0,
    seed: int = REAL_RANDOM,
) -> List[float]:
    """Return ``dim`` floats drawn uniformly from ``[min_value, max_value)``.

    A ``seed`` of :data:`REAL_RANDOM` gives unpredictable values; any other
    seed gives the same values on every call.
    """
    engine = _engine(seed)
    return [engine.uniform(min_value, max_value) for _ in range(dim)]


def generate_matrix(
    height: int,
    column: int,
    min_value: float = 0.0,
    max_value: float = 1.0,
    seed: int = REAL_RANDOM,
) -> List[List[float]]:
    """Return a ``height`` x ``column`` matrix of uniform random floats."""
    engine = _engine(seed)
    return [
        [engine.uniform(min_value, max_value) for _ in range(column)]
        for _ in range(height)
    ]


def generate_session(key: str = UNKNOWN, size: int = 3) -> str:
    """Return ``a-b-...-key`` where each of the ``size`` parts is a six-digit number."""
    parts = (str(int(value)) for value in generate(size, _SESSION_MIN, _SESSION_MAX))
    return "".join(f"{part}-" for part in parts) + key