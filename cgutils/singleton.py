"""A holder that lazily or eagerly creates exactly one instance."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar

from .utils import CGraphError

T = TypeVar("T")


class SingletonType(Enum):
    LAZY = 0
    HUNGRY = 1


class Singleton(Generic[T]):
    """Creates one instance from ``factory`` and hands it out on every ``get``.

    A hungry singleton builds its instance at construction; a lazy one on the
    first ``get``. With ``auto_init`` the instance is built and initialised at once.
    """

    def __init__(
        self,
        factory: Callable[[], T],
        kind: SingletonType = SingletonType.HUNGRY,
        auto_init: bool = False,
    ) -> None:
        self._factory = factory
        self._kind = kind
        self._handle: Optional[T] = None
        self._lock = threading.Lock()
        if kind is SingletonType.HUNGRY or auto_init:
            self._create()
        if auto_init:
            self.init()

    def _create(self) -> None:
        if self._handle is None:
            with self._lock:
                if self._handle is None:
                    self._handle = self._factory()

    def get(self) -> Optional[T]:
        """Return the instance, creating it first when the singleton is lazy."""
        if self._kind is SingletonType.LAZY:
            self._create()
        return self._handle

    def _call_hook(self, name: str) -> None:
        handle = self.get()
        if handle is None:
            raise CGraphError("singleton handle is empty")
        hook = getattr(handle, name, None)
        if callable(hook):
            hook()

    def init(self) -> None:
        """Call the instance's ``init`` method if it has one."""
        self._call_hook("init")

    def destroy(self) -> None:
        """Call the instance's ``destroy`` method if it has one."""
        self._call_hook("destroy")

    def clear(self) -> None:
        """Drop the held instance."""
        with self._lock:
            self._handle = None