"""Small shared helpers: console echo, container folds and the package error type."""

from __future__ import annotations

import functools
import operator
import threading
from datetime import datetime
from typing import Any, Iterable, TypeVar

T = TypeVar("T")

_echo_lock = threading.Lock()


class CGraphError(Exception):
    """Raised when an operation of this package cannot be carried out."""


def echo(fmt: str, *args: Any) -> str:
    """Print a timestamped ``[CGraph]`` line built from a printf-style format.

    The printed line, without the trailing newline, is returned.
    """
    message = fmt % args if args else fmt
    now = datetime.now()
    stamp = now.strftime("%Y-%m-%d %H:%M:%S") + f".{now.microsecond // 1000:03d}"
    line = f"[CGraph] [{stamp}] {message}"
    with _echo_lock:
        print(line, flush=True)
    return line


def container_sum(container: Iterable[T]) -> T:
    """Add up every element of ``container``, starting from 0."""
    result: Any = 0
    for value in container:
        result += value
    return result


def container_multiply(container: Iterable[T]) -> T:
    """Multiply every element of ``container``, starting from 1."""
    result: Any = 1
    for value in container:
        result *= value
    return result


def max_of(value: T, *args: T) -> T:
    """Return the largest of the given values."""
    return functools.reduce(lambda acc, item: item if acc < item else acc, args, value)


def sum_of(value: T, *args: T) -> T:
    """Return ``value + args[0] + ...``, folded from the right."""
    values = (value, *args)
    return functools.reduce(lambda acc, item: operator.add(item, acc), reversed(values[:-1]), values[-1])