"""Two-phase visual pulse scheduled on the Qt event loop."""

from typing import Callable, Optional
from PyQt6.QtCore import QTimer


class DeferredPulse:
    """
    Apply a state now, clear it as a deferred task.

    The clear handler runs on a later turn of the event loop (zero delay by
    default), so observers always see the order apply -> clear even though
    both are requested from the same handler.

    Usage:
        self._pulse = DeferredPulse(
            apply=lambda: self._set_flash(True),
            clear=lambda: self._set_flash(False),
        )

        def on_event_fired(self):
            self._pulse.fire()
    """

    def __init__(self, apply: Callable[[], None], clear: Callable[[], None], delay_ms: int = 0):
        self._apply = apply
        self._clear = clear
        self._delay_ms = delay_ms
        self._timer: Optional[QTimer] = None

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def fire(self, delay_ms: Optional[int] = None):
        """Apply the pulse state and schedule its removal. Restarts a pending pulse."""
        if self._timer is not None:
            self._timer.stop()

        self._apply()

        self._timer = QTimer()
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._finish)
        self._timer.start(self._delay_ms if delay_ms is None else delay_ms)

    def cancel(self):
        """Drop a pending clear without running it."""
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def force(self):
        """Run a pending clear immediately."""
        if self._timer is not None:
            self._finish()

    def _finish(self):
        if self._timer is not None:
            self._timer.stop()
            self._timer = None
        self._clear()
