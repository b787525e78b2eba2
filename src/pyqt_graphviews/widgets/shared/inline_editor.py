"""Single-line overlay editor that reports commit or cancel exactly once."""

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import QLineEdit


class InlineEditor(QLineEdit):
    """QLineEdit overlay used for click-to-edit.

    Enter/Return and focus loss emit ``committed`` with the text; Escape emits
    ``cancelled``. After either signal the editor goes quiet, so tearing it
    down (which moves focus away) cannot produce a second outcome.
    """

    committed = pyqtSignal(str)
    cancelled = pyqtSignal()

    def __init__(self, text: str = "", parent=None):
        super().__init__(text, parent)
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    def commit(self):
        if not self._finished:
            self._finished = True
            self.committed.emit(self.text())

    def cancel(self):
        if not self._finished:
            self._finished = True
            self.cancelled.emit()

    def keyPressEvent(self, event):
        key = event.key()
        if key == Qt.Key.Key_Escape:
            self.cancel()
            event.accept()
            return
        if key in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
            self.commit()
            event.accept()
            return
        super().keyPressEvent(event)

    def focusOutEvent(self, event):
        super().focusOutEvent(event)
        self.commit()
