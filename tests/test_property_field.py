"""Tests for the property field widget."""

import math

import pytest
from PyQt6.QtCore import QEvent, QPoint, Qt
from PyQt6.QtGui import QContextMenuEvent, QKeyEvent


def make_field(cell, index=None, width=100):
    from pyqt_graphviews.widgets import PropertyField

    field = PropertyField(cell, index=index)
    field.resize(width, 20)
    field.mount()
    return field


def number_cell(preset=2.0, **schema_kwargs):
    from pyqt_graphviews.model import Property
    from pyqt_graphviews.protocols import PropertySchema

    return Property("amount", preset=preset, schema=PropertySchema(**schema_kwargs))


def key_event(key):
    return QKeyEvent(QEvent.Type.KeyPress, key, Qt.KeyboardModifier.NoModifier)


def value_events(cell):
    events = []
    cell.on("value", events.append)
    return events


def test_missing_cell_raises(qapp):
    """Test a field cannot be built without a cell."""
    from pyqt_graphviews.core import MissingBindingError
    from pyqt_graphviews.widgets import PropertyField

    with pytest.raises(MissingBindingError):
        PropertyField(None)


def test_display_and_refresh_on_value(qapp):
    """Test the field shows the formatted value and follows writes."""
    cell = number_cell(preset=1.5)
    field = make_field(cell)
    assert field.text == "1.50"

    cell.set_value(3)
    assert field.text == "3.00"


def test_mount_twice_raises_and_unmount_stops_updates(qapp):
    """Test lifecycle symmetry."""
    from pyqt_graphviews.core import SubscriptionError

    cell = number_cell()
    field = make_field(cell)
    with pytest.raises(SubscriptionError):
        field.mount()

    field.unmount()
    assert not field.is_mounted
    cell.set_value(9)
    assert field.text == "2.00"


def test_small_pointer_motion_never_writes(qapp):
    """Test motion within the 2px threshold leaves the field armed."""
    from pyqt_graphviews.widgets import InteractionState

    cell = number_cell(min=0, max=10, step=1)
    field = make_field(cell)
    writes = value_events(cell)

    field.press(10, 10)
    assert field.state is InteractionState.ARMED
    field.move(11, 10)
    field.move(11, 11)
    field.move(10, 8)
    assert field.state is InteractionState.ARMED
    assert writes == []


def test_drag_steps_and_swallows_click(qapp):
    """Test a drag across half the width moves half the range, snapped to step."""
    from pyqt_graphviews.widgets import InteractionState

    cell = number_cell(preset=2.0, min=0, max=10, step=1)
    field = make_field(cell, width=100)

    field.press(10, 10)
    field.move(13, 10)
    assert field.state is InteractionState.DRAGGING

    field.move(63, 10)
    assert cell.value == math.floor(2.0 + 5)
    assert field.text == "7.00"

    field.release()
    assert field.state is InteractionState.IDLE
    assert field.editor is None


def test_drag_clamps_and_modifiers(qapp):
    """Test drags clamp to bounds and modifiers scale the speed."""
    cell = number_cell(preset=5.0, min=0, max=10)
    field = make_field(cell, width=100)

    field.press(0, 0)
    field.move(3, 0)
    field.move(13, 0, precise=True)
    assert cell.value == pytest.approx(5.1)

    field.move(13, 0, coarse=True)
    assert cell.value == 10
    field.release()


def test_escape_during_drag_restores_value(qapp):
    """Test Escape cancels a drag and leaves the pre-drag value."""
    from pyqt_graphviews.widgets import InteractionState

    cell = number_cell(preset=2.0, min=0, max=10, step=1)
    field = make_field(cell)

    field.press(10, 10)
    field.move(13, 10)
    field.move(63, 10)
    assert cell.value == 7

    field.keyPressEvent(key_event(Qt.Key.Key_Escape))
    assert cell.value == 2.0
    assert field.state is InteractionState.IDLE
    assert field.editor is None


def test_click_starts_editing_and_commit(qapp):
    """Test click opens the inline editor and Enter commits rounded, clamped text."""
    from pyqt_graphviews.widgets import InteractionState

    cell = number_cell(preset=2.0, min=0, max=10, precision=1)
    field = make_field(cell)

    field.press(5, 5)
    field.release()
    assert field.state is InteractionState.EDITING
    editor = field.editor
    assert editor.text() == "2.0"
    assert field.property("editing") is True

    editor.setText("3.25")
    editor.keyPressEvent(key_event(Qt.Key.Key_Return))
    assert cell.value == pytest.approx(3.3)
    assert field.property("editing") is False
    assert field.state is InteractionState.IDLE
    assert field.editor is None


def test_commit_is_idempotent(qapp):
    """Test a second commit (e.g. focus loss after Enter) writes nothing."""
    cell = number_cell()
    field = make_field(cell)
    writes = value_events(cell)

    field.start_editing()
    editor = field.editor
    editor.setText("4")
    editor.commit()
    editor.commit()
    field.stop_editing(commit=True)

    assert writes == [4.0]


def test_escape_in_editor_keeps_value(qapp):
    """Test Escape discards the edit."""
    cell = number_cell(preset=2.0)
    field = make_field(cell)
    writes = value_events(cell)

    field.click()
    field.editor.setText("99")
    field.editor.keyPressEvent(key_event(Qt.Key.Key_Escape))

    assert writes == []
    assert cell.value == 2.0
    assert field.text == "2.00"


@pytest.mark.parametrize("text,expected,shown", [
    ("inf", math.inf, "inf"),
    ("-INF", -math.inf, "-inf"),
])
def test_infinite_commit_has_empty_bar(qapp, text, expected, shown):
    """Test inf commits bypass bounds and render with a 0% bar."""
    cell = number_cell(preset=5.0, min=0, max=10, bar=True)
    field = make_field(cell)
    assert field.bar_percent == 50.0

    field.start_editing()
    field.editor.setText(text)
    field.editor.commit()

    assert cell.value == expected
    assert field.text == shown
    assert field.bar_percent == 0.0


def test_string_edit(qapp):
    """Test string cells edit their text verbatim."""
    from pyqt_graphviews.model import Property

    cell = Property("label", type="string", preset="hello")
    field = make_field(cell)
    assert field.text == "hello"

    field.click()
    field.editor.setText("world")
    field.editor.commit()
    assert cell.value == "world"


def test_string_cells_do_not_drag(qapp):
    """Test only plain number cells arm on press."""
    from pyqt_graphviews.model import Property
    from pyqt_graphviews.widgets import InteractionState

    field = make_field(Property("label", type="string", preset="x"))
    field.press(0, 0)
    assert field.state is InteractionState.IDLE


def test_boolean_click_toggles(qapp):
    """Test boolean cells toggle on click."""
    from pyqt_graphviews.model import Property

    cell = Property("visible", type="boolean", preset=False)
    field = make_field(cell)
    assert field.text == "false"

    field.press(1, 1)
    field.release()
    assert cell.value is True
    assert field.text == "true"


def test_object_cells_display_str(qapp):
    """Test object cells show str() of the value and do not edit."""
    from pyqt_graphviews.model import Property
    from pyqt_graphviews.widgets import InteractionState

    cell = Property("data", type="object", preset={"k": 1})
    field = make_field(cell)
    assert field.text == "{'k': 1}"

    field.click()
    assert field.state is InteractionState.IDLE
    assert field.editor is None


def test_option_picker(qapp):
    """Test option cells show the label and write the chosen index."""
    cell = number_cell(preset=1, options=["low", "mid", "high"])
    field = make_field(cell)
    assert field.text == "mid"
    assert field.presentation.is_option

    field.press(1, 1)
    assert field.option_menu is None  # option cells never arm
    field.release()

    menu = field.option_menu
    actions = menu.actions()
    assert [a.text() for a in actions] == ["low", "mid", "high"]
    assert [a.isChecked() for a in actions] == [False, True, False]

    actions[2].trigger()
    assert cell.value == 2
    assert field.text == "high"


def test_event_trigger_flashes_then_clears(qapp):
    """Test event cells fire on click and flash until the next loop turn."""
    from PyQt6.QtTest import QTest
    from pyqt_graphviews.model import Property

    cell = Property("fire", type="event")
    field = make_field(cell)
    fired = value_events(cell)
    assert field.presentation.is_event
    assert not field.is_flashing

    field.click()
    assert len(fired) == 1
    assert field.is_flashing
    assert field.property("flash") is True

    QTest.qWait(20)
    assert not field.is_flashing


def test_external_trigger_also_flashes(qapp):
    """Test the flash follows the cell, not the click."""
    from pyqt_graphviews.model import Property

    cell = Property("fire", type="event")
    field = make_field(cell)
    cell.trigger()
    assert field.is_flashing


def test_context_menu_resets(qapp):
    """Test the secondary action restores the default value."""
    cell = number_cell(preset=2.0)
    field = make_field(cell)
    cell.set_value(8.0)

    field.contextMenuEvent(QContextMenuEvent(QContextMenuEvent.Reason.Mouse, QPoint(1, 1)))
    assert cell.value == 2.0
    assert field.text == "2.00"


def test_vector_index_binding(qapp):
    """Test an indexed field reads and writes one component of a vector."""
    from pyqt_graphviews.model import Property

    cell = Property("position", preset=[1.0, 2.0, 3.0])
    field = make_field(cell, index=1)
    assert field.text == "2.00"
    assert field.toolTip() == "position [number][1]"

    field.start_editing()
    field.editor.setText("5")
    field.editor.commit()

    assert cell.value == [1.0, 5.0, 3.0]
    assert cell.schema.preset == [1.0, 2.0, 3.0]


def test_vector_drag_writes_whole_vector(qapp):
    """Test dragging an indexed field replaces the vector."""
    from pyqt_graphviews.model import Property
    from pyqt_graphviews.protocols import PropertySchema

    cell = Property("position", preset=[0.0, 0.0], schema=PropertySchema(speed=1.0))
    field = make_field(cell, index=0)

    field.press(0, 0)
    field.move(3, 0)
    field.move(7, 0)
    field.release()
    assert cell.value == [4.0, 0.0]


def test_link_and_io_metadata(qapp):
    """Test linked and output flags follow the cell's change events."""
    from pyqt_graphviews.model import Property

    cell = Property("position", preset=[0.0, 0.0])
    first = make_field(cell, index=0)
    second = make_field(cell, index=1)
    assert first.property("io") == "input"
    assert first.property("linked") is False

    cell.add_in_link(1)
    assert not first.presentation.is_linked
    assert second.presentation.is_linked
    assert second.property("linked") is True

    output = Property("result", is_input=False, preset=0.0)
    out_field = make_field(output)
    assert out_field.property("io") == "output"
    output.add_out_link()
    assert out_field.presentation.is_linked


def test_schema_change_shows_bar(qapp):
    """Test a schema replacement re-derives the bar."""
    from pyqt_graphviews.protocols import PropertySchema

    cell = number_cell(preset=2.5)
    field = make_field(cell)
    assert field.bar_percent is None

    cell.set_schema(PropertySchema(min=0, max=10, bar=True, preset=2.5))
    assert field.presentation.has_bar
    assert field.bar_percent == 25.0


def test_keyboard_activation(qapp):
    """Test Enter on a focused idle field activates it."""
    from pyqt_graphviews.widgets import InteractionState

    field = make_field(number_cell())
    field.keyPressEvent(key_event(Qt.Key.Key_Return))
    assert field.state is InteractionState.EDITING
    field.stop_editing(commit=False)
    assert field.state is InteractionState.IDLE


def test_recommitting_same_text_does_not_drift(qapp):
    """Test two edit sessions committing the same text land on the same value."""
    cell = number_cell(preset=0.0, min=0, max=10, precision=2)
    field = make_field(cell)

    results = []
    for _ in range(2):
        field.start_editing()
        field.editor.setText("3.14159")
        field.editor.commit()
        results.append(cell.value)

    assert results[0] == results[1] == pytest.approx(3.14)


def test_drag_start_on_decimal_step_keeps_value(qapp):
    """Test crossing the drag threshold does not move a value already on a step."""
    cell = number_cell(preset=0.7, min=0, max=1, step=0.1)
    field = make_field(cell)

    field.press(0, 0)
    field.move(3, 0)
    assert cell.value == 0.7
    field.release()


def test_hide_while_editing_commits(qapp):
    """Test hiding the field keeps the typed text, like a focus loss."""
    from pyqt_graphviews.widgets import InteractionState, PropertyField

    cell = number_cell(preset=1.0)
    field = PropertyField(cell)
    field.show()
    assert field.is_mounted

    field.click()
    field.editor.setText("4")
    field.hide()

    assert cell.value == 4.0
    assert field.state is InteractionState.IDLE
    assert not field.is_mounted


def test_focus_moving_to_sibling_commits(qapp):
    """Test the inline editor commits when focus moves to another widget."""
    from PyQt6.QtGui import QFocusEvent
    from PyQt6.QtTest import QTest
    from PyQt6.QtWidgets import QApplication, QLineEdit, QVBoxLayout, QWidget
    from pyqt_graphviews.widgets import InteractionState, PropertyField

    cell = number_cell(preset=1.0, min=0, max=10, precision=1)
    window = QWidget()
    layout = QVBoxLayout(window)
    field = PropertyField(cell)
    sibling = QLineEdit()
    layout.addWidget(field)
    layout.addWidget(sibling)
    window.show()
    QTest.qWaitForWindowExposed(window)

    field.click()
    editor = field.editor
    editor.setText("6.789")
    sibling.setFocus()
    # offscreen windows may never gain focus; a second focus-out is ignored
    QApplication.sendEvent(editor, QFocusEvent(QEvent.Type.FocusOut, Qt.FocusReason.TabFocusReason))

    assert cell.value == pytest.approx(6.8)
    assert field.state is InteractionState.IDLE
    assert field.editor is None
    window.close()
