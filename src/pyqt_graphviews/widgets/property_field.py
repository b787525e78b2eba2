"""
Direct-manipulation editor for a single property cell.

PropertyField binds to one PropertyCell (optionally one index of a vector
value) and implements the interaction protocol:

    pointer:   IDLE -> ARMED -> DRAGGING -> IDLE   (number cells without options)
    keyboard:  IDLE -> EDITING -> IDLE             (number and string cells)
    immediate: event cells fire, boolean cells toggle, option cells open a picker

The cell is the single source of truth. The widget never stores a value it
wrote; it re-reads the cell whenever the cell announces "value" or "change".
All numeric rules (formatting, parsing, drag speed, snapping, clamping) live
in pyqt_graphviews.core.value_format.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from PyQt6.QtCore import QPoint, Qt
from PyQt6.QtWidgets import QFrame, QLabel, QMenu, QWidget

from pyqt_graphviews.core import DeferredPulse, MissingBindingError, SubscriptionError, SubscriptionSet
from pyqt_graphviews.core import value_format
from pyqt_graphviews.protocols import PropertyCell, get_view_config
from pyqt_graphviews.theming import ColorScheme, StyleSheetGenerator
from pyqt_graphviews.theming.style_generator import (
    PROPERTY_FIELD_BAR_NAME,
    PROPERTY_FIELD_BUTTON_NAME,
    PROPERTY_FIELD_CONTENT_NAME,
    PROPERTY_FIELD_EDITOR_NAME,
    PROPERTY_FIELD_OBJECT_NAME,
)

from .shared.inline_editor import InlineEditor

logger = logging.getLogger(__name__)


class InteractionState(Enum):
    IDLE = "idle"
    ARMED = "armed"
    DRAGGING = "dragging"
    EDITING = "editing"


@dataclass(frozen=True)
class FieldPresentation:
    """Metadata-derived presentation of a field, recomputed on every "change"."""
    is_event: bool
    is_option: bool
    is_input: bool
    is_linked: bool
    has_bar: bool
    tooltip: str


def present_cell(cell: PropertyCell, index: Optional[int] = None) -> FieldPresentation:
    schema = cell.schema
    is_event = bool(schema.event) or cell.type == "event"
    is_input = cell.is_input()
    is_linked = cell.has_in_links(index) if is_input else cell.has_out_links(index)
    suffix = f"[{index}]" if index is not None else ""
    return FieldPresentation(
        is_event=is_event,
        is_option=bool(schema.options),
        is_input=is_input,
        is_linked=is_linked,
        has_bar=not is_event and value_format.has_bar(schema),
        tooltip=f"{cell}{suffix}",
    )


class PropertyField(QWidget):
    """
    Click/drag/edit widget bound to a PropertyCell.

    Usage:
        field = PropertyField(component.properties["opacity"])
        layout.addWidget(field)   # subscribes when shown

        # vector cells: one field per component
        for i in range(3):
            layout.addWidget(PropertyField(position, index=i))
    """

    def __init__(self, cell: Optional[PropertyCell], index: Optional[int] = None,
                 color_scheme: Optional[ColorScheme] = None, parent=None):
        if cell is None:
            raise MissingBindingError("PropertyField requires a property cell to bind to")

        super().__init__(parent)
        self._cell = cell
        self._index = index
        self._color_scheme = color_scheme or ColorScheme()

        self._state = InteractionState.IDLE
        self._value: Any = None
        self._text = ""
        self._bar_percent: Optional[float] = None
        self._presentation: Optional[FieldPresentation] = None

        self._pressed = False
        self._anchor: Tuple[float, float] = (0.0, 0.0)
        self._baseline = 0.0
        self._drag_written = False
        self._grabbed = False

        self._editor: Optional[InlineEditor] = None
        self._option_menu: Optional[QMenu] = None
        self._flashing = False
        self._pulse = DeferredPulse(
            apply=lambda: self._set_flash(True),
            clear=lambda: self._set_flash(False),
            delay_ms=get_view_config().flash_delay_ms,
        )
        self._subscriptions = SubscriptionSet()

        self._setup_ui()
        self.refresh_metadata()

    def _setup_ui(self):
        self.setObjectName(PROPERTY_FIELD_OBJECT_NAME)
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMinimumHeight(20)

        # bar is created first so the text label paints on top of it
        self._bar = QFrame(self)
        self._bar.setObjectName(PROPERTY_FIELD_BAR_NAME)
        self._bar.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)

        self._content = QLabel(self)
        self._content.setObjectName(PROPERTY_FIELD_CONTENT_NAME)
        self._content.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)

        self._button = QFrame(self)
        self._button.setObjectName(PROPERTY_FIELD_BUTTON_NAME)
        self._button.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)

        self.setStyleSheet(StyleSheetGenerator(self._color_scheme).generate_property_field_style())

    # --- Accessors --------------------------------------------------------

    @property
    def cell(self) -> PropertyCell:
        return self._cell

    @property
    def index(self) -> Optional[int]:
        return self._index

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def value(self) -> Any:
        """Last value read from the cell (the indexed component for vectors)."""
        return self._value

    @property
    def text(self) -> str:
        return self._text

    @property
    def bar_percent(self) -> Optional[float]:
        """Bar fill in percent, None when the field has no bar."""
        return self._bar_percent

    @property
    def presentation(self) -> FieldPresentation:
        return self._presentation

    @property
    def is_flashing(self) -> bool:
        return self._flashing

    @property
    def editor(self) -> Optional[InlineEditor]:
        return self._editor

    @property
    def option_menu(self) -> Optional[QMenu]:
        return self._option_menu

    # --- Lifecycle --------------------------------------------------------

    @property
    def is_mounted(self) -> bool:
        return bool(self._subscriptions)

    def mount(self) -> None:
        if self.is_mounted:
            raise SubscriptionError(f"{type(self).__name__} is already mounted")
        self._subscriptions.add(self._cell.on("value", self._on_cell_value))
        self._subscriptions.add(self._cell.on("change", self._on_cell_change))
        self.refresh_metadata()

    def unmount(self) -> None:
        # leaving the view is a loss of focus: only Escape discards an edit
        self.stop_editing(commit=True)
        self.cancel_drag()
        self._pulse.force()
        self._subscriptions.dispose_all()

    def showEvent(self, event):
        super().showEvent(event)
        if not self.is_mounted:
            self.mount()

    def hideEvent(self, event):
        if self.is_mounted:
            self.unmount()
        super().hideEvent(event)

    # --- Display ----------------------------------------------------------

    def _on_cell_value(self, value) -> None:
        self.refresh_display()

    def _on_cell_change(self, cell) -> None:
        self.refresh_metadata()

    def refresh_metadata(self) -> None:
        """Re-derive presentation flags from the cell's schema and link state."""
        presentation = present_cell(self._cell, self._index)
        self._presentation = presentation

        self.setProperty("io", "input" if presentation.is_input else "output")
        self.setProperty("linked", presentation.is_linked)
        self.setProperty("event", presentation.is_event)
        self.setProperty("option", presentation.is_option)
        self.setToolTip(presentation.tooltip)

        self._button.setHidden(not presentation.is_event)
        self._content.setHidden(presentation.is_event)
        self._bar.setHidden(not presentation.has_bar)

        self._repolish()
        self.refresh_display()

    def refresh_display(self) -> None:
        """Re-read the cell value and update text and bar."""
        presentation = self._presentation
        cell = self._cell

        if presentation.is_event:
            if cell.changed:
                self._pulse.fire()
            return

        value = self._read()
        self._value = value
        schema = cell.schema
        option_text = cell.option_text() if schema.options else None
        self._text = value_format.display_text(cell.type, value, schema, option_text)
        self._content.setText(self._text)

        if presentation.has_bar and cell.type == "number":
            self._bar_percent = value_format.bar_percent(value, schema)
        else:
            self._bar_percent = None
        self._layout_children()

    def _set_flash(self, on: bool) -> None:
        self._flashing = on
        self.setProperty("flash", on)
        self._repolish()

    def _repolish(self) -> None:
        for widget in (self, self._content, self._bar, self._button):
            widget.style().unpolish(widget)
            widget.style().polish(widget)
        self.update()

    def _layout_children(self) -> None:
        rect = self.rect()
        self._content.setGeometry(rect)
        self._button.setGeometry(rect)
        if self._editor is not None:
            self._editor.setGeometry(rect)
        if self._bar_percent is not None:
            width = int(round(rect.width() * self._bar_percent / 100.0))
            self._bar.setGeometry(rect.x(), rect.y(), width, rect.height())

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._layout_children()

    # --- Cell access ------------------------------------------------------

    def _read(self) -> Any:
        value = self._cell.value
        if self._index is not None:
            return value[self._index]
        return value

    def _write(self, value: Any) -> None:
        if self._index is not None:
            # no partial writes: the whole vector goes back to the cell
            vector = list(self._cell.value)
            vector[self._index] = value
            self._cell.set_value(vector)
        else:
            self._cell.set_value(value)

    def _set_state(self, state: InteractionState) -> None:
        if state is not self._state:
            logger.debug(f"PropertyField {self._cell}: {self._state.value} -> {state.value}")
            self._state = state

    # --- Pointer protocol -------------------------------------------------

    def _is_draggable(self) -> bool:
        return (
            self._cell.type == "number"
            and not self._cell.schema.options
            and not self._presentation.is_event
        )

    def press(self, x: float, y: float) -> None:
        """Primary pointer down at widget coordinates (x, y)."""
        if self._state is not InteractionState.IDLE:
            return
        if self._is_draggable():
            self._anchor = (x, y)
            self._drag_written = False
            self._set_state(InteractionState.ARMED)

    def move(self, x: float, y: float, precise: bool = False, coarse: bool = False) -> None:
        """Pointer moved while pressed. precise/coarse scale drag speed by 0.1/10."""
        if self._state is InteractionState.ARMED:
            dx = x - self._anchor[0]
            dy = y - self._anchor[1]
            if not value_format.exceeds_drag_threshold(dx, dy):
                return
            self._begin_drag(x, y)

        if self._state is not InteractionState.DRAGGING:
            return

        schema = self._cell.schema
        speed = value_format.drag_speed(schema, self.width(), precise=precise, coarse=coarse)
        value = value_format.drag_value(
            self._baseline, x - self._anchor[0], y - self._anchor[1], speed, schema
        )
        self._drag_written = True
        self._write(value)

    def _begin_drag(self, x: float, y: float) -> None:
        # re-anchor on the current value so the threshold distance is not applied
        self._anchor = (x, y)
        self._baseline = self._read()
        if self.isVisible():
            self.grabMouse()
            self._grabbed = True
        self._set_state(InteractionState.DRAGGING)
        logger.debug(f"PropertyField {self._cell}: drag from baseline {self._baseline}")

    def release(self) -> None:
        """Primary pointer up. A finished drag swallows the click."""
        state = self._state
        if state is InteractionState.DRAGGING:
            self._end_drag()
            return
        if state is InteractionState.ARMED:
            self._set_state(InteractionState.IDLE)
        if state is not InteractionState.EDITING:
            self.click()

    def cancel_drag(self) -> None:
        """Abort an armed or dragging pointer; the cell ends at its pre-drag value."""
        if self._state is InteractionState.DRAGGING:
            if self._drag_written:
                self._write(self._baseline)
            self._end_drag()
        elif self._state is InteractionState.ARMED:
            self._set_state(InteractionState.IDLE)

    def _end_drag(self) -> None:
        if self._grabbed:
            self.releaseMouse()
            self._grabbed = False
        self._drag_written = False
        self._set_state(InteractionState.IDLE)

    # --- Click dispatch ---------------------------------------------------

    def click(self, x: Optional[float] = None) -> None:
        """Activate the field: fire, pick, toggle or start editing."""
        cell = self._cell
        if self._presentation.is_event:
            cell.trigger()
            return
        if self._state is not InteractionState.IDLE:
            return

        if cell.schema.options:
            self.open_option_picker(x)
            return

        if cell.type in ("number", "string"):
            self.start_editing()
        elif cell.type == "boolean":
            self._write(not self._read())

    def open_option_picker(self, x: Optional[float] = None) -> QMenu:
        options = self._cell.schema.options
        current = self._cell.validated_value()

        menu = QMenu(self)
        for i, label in enumerate(options):
            action = menu.addAction(label)
            action.setCheckable(True)
            action.setChecked(i == current)
            action.triggered.connect(lambda checked=False, i=i: self.select_option(i))
        menu.aboutToHide.connect(self._on_option_menu_hidden)
        self._option_menu = menu

        if x is None:
            x = self.width()
        menu.popup(self.mapToGlobal(QPoint(int(x), self.height())))
        return menu

    def select_option(self, index: int) -> None:
        logger.debug(f"PropertyField {self._cell}: option {index} selected")
        self._write(index)
        if self._option_menu is not None:
            self._option_menu.close()

    def _on_option_menu_hidden(self):
        menu, self._option_menu = self._option_menu, None
        if menu is not None:
            menu.deleteLater()

    def reset(self) -> None:
        """Restore the cell's default value."""
        logger.debug(f"PropertyField {self._cell}: reset")
        self._cell.reset()

    # --- Inline editing ---------------------------------------------------

    def start_editing(self) -> None:
        if self._state is not InteractionState.IDLE:
            return

        text = value_format.edit_text(self._cell.type, self._read(), self._cell.schema)
        editor = InlineEditor(text, self)
        editor.setObjectName(PROPERTY_FIELD_EDITOR_NAME)
        editor.setGeometry(self.rect())
        editor.committed.connect(lambda _text: self.stop_editing(commit=True))
        editor.cancelled.connect(lambda: self.stop_editing(commit=False))
        self._editor = editor
        self._set_state(InteractionState.EDITING)
        self.setProperty("editing", True)
        self._repolish()

        editor.show()
        editor.setFocus()
        editor.selectAll()

    def stop_editing(self, commit: bool) -> None:
        editor = self._editor
        if editor is None:
            return
        self._editor = None
        text = editor.text()

        # silence the editor before focus moves away from it
        editor.blockSignals(True)
        editor.hide()
        editor.deleteLater()
        self._set_state(InteractionState.IDLE)
        self.setProperty("editing", False)
        self._repolish()

        if commit:
            value = value_format.parse_edit_text(self._cell.type, text, self._cell.schema)
            logger.debug(f"PropertyField {self._cell}: commit {text!r} -> {value!r}")
            self._write(value)
        else:
            logger.debug(f"PropertyField {self._cell}: edit cancelled")
            self.refresh_display()

    # --- Qt events --------------------------------------------------------

    def mousePressEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        pos = event.position()
        self._pressed = True
        self.press(pos.x(), pos.y())
        event.accept()

    def mouseMoveEvent(self, event):
        if self._state in (InteractionState.ARMED, InteractionState.DRAGGING):
            pos = event.position()
            modifiers = event.modifiers()
            self.move(
                pos.x(), pos.y(),
                precise=bool(modifiers & Qt.KeyboardModifier.ControlModifier),
                coarse=bool(modifiers & Qt.KeyboardModifier.ShiftModifier),
            )
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton or not self._pressed:
            super().mouseReleaseEvent(event)
            return
        self._pressed = False
        if self._state is InteractionState.DRAGGING:
            self.release()
        elif self.rect().contains(event.position().toPoint()):
            self.release()
        else:
            # released outside the field without dragging: no click
            self.cancel_drag()
        event.accept()

    def keyPressEvent(self, event):
        key = event.key()
        if key == Qt.Key.Key_Escape and self._state in (InteractionState.ARMED, InteractionState.DRAGGING):
            self._pressed = False
            self.cancel_drag()
            event.accept()
            return
        if key in (Qt.Key.Key_Return, Qt.Key.Key_Enter, Qt.Key.Key_Space) and self._state is InteractionState.IDLE:
            self.click()
            event.accept()
            return
        super().keyPressEvent(event)

    def contextMenuEvent(self, event):
        self.reset()
        event.accept()
