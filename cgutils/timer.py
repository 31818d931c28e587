"""A timer that calls a task repeatedly on a background thread."""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional


class Timer:
    """Calls a task every ``interval`` milliseconds until stopped."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None

    @property
    def running(self) -> bool:
        """Whether the timer has been started and not yet stopped."""
        return self._thread is not None

    @staticmethod
    def _loop(seconds: float, task: Callable[[], Any], stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            if not stop_event.wait(seconds) and not stop_event.is_set():
                task()

    def start(self, interval: float, task: Callable[[], Any]) -> None:
        """Begin calling ``task`` every ``interval`` ms; ignored while already running."""
        with self._lock:
            if self._thread is not None:
                return
            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._loop, args=(interval / 1000, task, stop_event), daemon=True
            )
            self._stop_event = stop_event
            self._thread = thread
            thread.start()

    def stop(self) -> None:
        """Stop the timer and wait for its thread to finish."""
        with self._lock:
            thread, stop_event = self._thread, self._stop_event
            self._thread = None
            self._stop_event = None
        if thread is None or stop_event is None:
            return
        stop_event.set()
        if thread is not threading.current_thread():
            thread.join()

    def __enter__(self) -> "Timer":
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()