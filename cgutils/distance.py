"""Vector distances and a calculator that optionally validates its input."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from .utils import CGraphError


class Distance(ABC):
    """A distance between two vectors."""

    @abstractmethod
    def calc(self, v1: Sequence[float], v2: Sequence[float]) -> float:
        """Return the distance from ``v1`` to ``v2``."""

    def check(self, v1: Optional[Sequence[float]], v2: Optional[Sequence[float]]) -> None:
        """Raise :class:`CGraphError` when the vectors cannot be compared."""
        if v1 is None or v2 is None:
            raise CGraphError("input is nullptr")
        if len(v1) * len(v2) == 0:
            raise CGraphError("input dim error")

    def normalize(self, v: Sequence[float]) -> List[float]:
        """Return ``v`` scaled to unit length."""
        norm = math.sqrt(sum(x * x for x in v))
        if norm == 0:
            raise CGraphError("cannot normalize a zero vector")
        factor = 1 / norm
        return [x * factor for x in v]


class EuclideanDistance(Distance):
    """Euclidean distance, or its square when ``need_sqrt`` is false."""

    def __init__(self, need_sqrt: bool = True) -> None:
        self.need_sqrt = need_sqrt

    def calc(self, v1: Sequence[float], v2: Sequence[float]) -> float:
        result = sum((a - b) ** 2 for a, b in zip(v1, v2))
        return math.sqrt(result) if self.need_sqrt else result

    def check(self, v1: Optional[Sequence[float]], v2: Optional[Sequence[float]]) -> None:
        if v1 is None or v2 is None:
            raise CGraphError("input is nullptr")
        if len(v1) != len(v2) or len(v1) * len(v2) == 0:
            raise CGraphError("euclidean distance dim error")


class CosineDistance(Distance):
    """Cosine of the angle between two vectors."""

    def calc(self, v1: Sequence[float], v2: Sequence[float]) -> float:
        dot = norm1 = norm2 = 0.0
        for a, b in zip(v1, v2):
            dot += a * b
            norm1 += a * a
            norm2 += b * b
        denominator = math.sqrt(norm1) * math.sqrt(norm2)
        if denominator == 0:
            return math.nan
        return dot / denominator


class DistanceCalculator:
    """Runs a :class:`Distance`, checking input first when ``need_check`` is set."""

    def __init__(self, distance: Distance, need_check: bool = False) -> None:
        self.distance = distance
        self.need_check = need_check

    def calculate(self, v1: Sequence[float], v2: Sequence[float]) -> float:
        """Return the distance between ``v1`` and ``v2``."""
        if self.need_check:
            self.distance.check(v1, v2)
        return self.distance.calc(v1, v2)

    def calculate_batch(
        self, query: Sequence[float], nodes: Sequence[Sequence[float]]
    ) -> List[float]:
        """Return the distance from ``query`` to each of ``nodes``, in order."""
        return [self.calculate(query, node) for node in nodes]

    def normalize(self, v: Sequence[float]) -> List[float]:
        """Return ``v`` normalized by the underlying distance."""
        if self.need_check:
            self.distance.check(v, v)
        return self.distance.normalize(v)