"""An insertion-ordered collection that ignores repeated values."""

from __future__ import annotations

from typing import Generic, Hashable, Iterator, List, TypeVar

T = TypeVar("T", bound=Hashable)


class SerialUniqueArray(Generic[T]):
    """Keeps the first occurrence of each value, in insertion order."""

    def __init__(self) -> None:
        self._seen: set[T] = set()
        self._items: List[T] = []

    def unique_add(self, value: T) -> None:
        """Append ``value`` unless it is already present."""
        if value not in self._seen:
            self._seen.add(value)
            self._items.append(value)

    def unique_array(self) -> List[T]:
        """Return a copy of the stored values in insertion order."""
        return list(self._items)

    def clear(self) -> None:
        """Remove every value."""
        self._seen.clear()
        self._items.clear()

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)