"""Cancelable trailing-edge debouncer."""

import threading
from typing import Any, Callable

DEFAULT_WAIT = 0.2


class Debouncer:
    """Coalesce bursts of calls into one call after ``wait`` seconds of quiet.

    Each ``__call__`` restarts the timer with the latest arguments. The
    wrapped function runs on the timer thread.
    """

    def __init__(self, func: Callable[..., Any], wait: float = DEFAULT_WAIT):
        self.func = func
        self.wait = wait
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._pending: tuple[tuple, dict] | None = None

    def __call__(self, *args, **kwargs) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = (args, kwargs)
            self._timer = threading.Timer(self.wait, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _take(self) -> tuple[tuple, dict] | None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            pending, self._pending = self._pending, None
            return pending

    def _fire(self) -> None:
        pending = self._take()
        if pending is not None:
            args, kwargs = pending
            self.func(*args, **kwargs)

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        self._take()

    def flush(self) -> Any:
        """Run the pending call now and return its result."""
        pending = self._take()
        if pending is None:
            return None
        args, kwargs = pending
        return self.func(*args, **kwargs)


def debounce(wait: float = DEFAULT_WAIT):
    """Decorator form of :class:`Debouncer`."""

    def decorator(func):
        return Debouncer(func, wait)

    return decorator


__all__ = ["Debouncer", "debounce", "DEFAULT_WAIT"]
