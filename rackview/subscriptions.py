"""Listener registration with guaranteed release.

Every place that attaches a callback to an event source hands back a
:class:`Subscription`. Closing it (explicitly, through ``with``, or through an
``ExitStack`` owned by a longer-lived object) detaches the callback exactly
once, however the owning scope is left.
"""

from __future__ import annotations

import warnings
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class Subscription:
    """Handle for one registered listener.

    Parameters
    ----------
    release : callable
        Called once to detach the listener.
    name : str, optional
        Debug label shown in ``repr``.
    """

    __slots__ = ("_release", "_name")

    def __init__(self, release: Callable[[], Any], *, name: str = "") -> None:
        self._release: Optional[Callable[[], Any]] = release
        self._name = name

    @property
    def closed(self) -> bool:
        """Return ``True`` once the listener has been detached."""
        return self._release is None

    def close(self) -> None:
        """Detach the listener. Calling this again is a no-op."""
        release, self._release = self._release, None
        if release is not None:
            release()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"Subscription({self._name!r}, {state})"


class EventSource(Generic[T]):
    """Ordered set of listeners for one kind of event.

    Listeners run in registration order. An exception raised by one listener
    is reported as a warning and does not stop the others.
    """

    def __init__(self, name: str) -> None:
        self._name = str(name)
        self._listeners: dict[int, Callable[[T], Any]] = {}
        self._next_key = 0

    def __len__(self) -> int:
        return len(self._listeners)

    def subscribe(self, callback: Callable[[T], Any]) -> Subscription:
        """Register ``callback`` and return the handle that removes it."""
        if not callable(callback):
            raise TypeError(f"{self._name} listener must be callable, got {type(callback).__name__}")
        key = self._next_key
        self._next_key += 1
        self._listeners[key] = callback
        return Subscription(lambda: self._listeners.pop(key, None), name=self._name)

    def emit(self, event: T) -> None:
        """Deliver ``event`` to every current listener."""
        for key, callback in list(self._listeners.items()):
            try:
                callback(event)
            except Exception as e:
                warnings.warn(f"{self._name} listener {key} failed: {e}")


__all__ = ["EventSource", "Subscription"]
