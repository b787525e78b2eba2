"""
Disposable event subscriptions.

Every ``on(...)`` call in pyqt-graphviews returns a Subscription handle instead
of requiring a matching ``off(...)`` call with the same arguments. Widgets keep
their handles in a SubscriptionSet and release all of them on teardown, so
registration and deregistration always happen in matched pairs.

Usage:
    self._subscriptions = SubscriptionSet()

    def mount(self):
        self._subscriptions.add(selection.on("node", self._on_select_node))
        self._subscriptions.add(system.on("hierarchy", self._on_update))

    def unmount(self):
        self._subscriptions.dispose_all()
"""

import itertools
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

_id_counter = itertools.count(1)


def unique_id(prefix: str = "id") -> str:
    """Return a process-lifetime unique token. Tokens are never reused."""
    return f"{prefix}-{next(_id_counter)}"


class Subscription:
    """Handle for a single registered callback.

    Disposing twice is a no-op. Can be used as a context manager for
    subscriptions that only live for the duration of a block.
    """

    def __init__(self, release: Callable[[], None], description: str = ""):
        self._release: Optional[Callable[[], None]] = release
        self.description = description

    @property
    def active(self) -> bool:
        return self._release is not None

    def dispose(self) -> None:
        release, self._release = self._release, None
        if release is not None:
            release()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    def __repr__(self) -> str:
        state = "active" if self.active else "disposed"
        return f"Subscription({self.description!r}, {state})"


class SubscriptionSet:
    """Owner-held collection of subscriptions released together."""

    def __init__(self):
        self._handles: List[Subscription] = []

    def add(self, subscription: Subscription) -> Subscription:
        self._handles.append(subscription)
        return subscription

    def dispose_all(self) -> int:
        """Dispose every held subscription. Returns the number released."""
        handles, self._handles = self._handles, []
        for handle in reversed(handles):
            handle.dispose()
        return len(handles)

    def __len__(self) -> int:
        return len(self._handles)

    def __bool__(self) -> bool:
        return bool(self._handles)

    def __enter__(self) -> "SubscriptionSet":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose_all()


class EventEmitter:
    """
    Minimal typed-by-name event emitter.

    Listeners are called synchronously in registration order. The listener list
    is copied before dispatch, so a listener may dispose its own (or another)
    subscription while an event is being delivered. Exceptions raised by a
    listener propagate to the code that emitted the event.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Callable[[Any], None]]] = defaultdict(list)

    def on(self, event_type: str, callback: Callable[[Any], None]) -> Subscription:
        entry = _Listener(callback)
        self._listeners[event_type].append(entry)

        def release():
            listeners = self._listeners.get(event_type)
            if listeners and entry in listeners:
                listeners.remove(entry)

        return Subscription(release, f"{type(self).__name__}:{event_type}")

    def emit(self, event_type: str, payload: Any = None) -> None:
        listeners = self._listeners.get(event_type)
        if not listeners:
            return
        for entry in list(listeners):
            # skip listeners disposed earlier in this same dispatch
            if entry in self._listeners[event_type]:
                entry.callback(payload)

    def listener_count(self, event_type: Optional[str] = None) -> int:
        if event_type is not None:
            return len(self._listeners.get(event_type, ()))
        return sum(len(listeners) for listeners in self._listeners.values())


class _Listener:
    """Wraps a callback so the same function can be registered twice."""

    __slots__ = ("callback",)

    def __init__(self, callback: Callable[[Any], None]):
        self.callback = callback
