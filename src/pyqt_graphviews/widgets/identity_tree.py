"""
Identity-keyed tree view for arbitrary hierarchies.

IdentityTree renders a hierarchy described by pluggable hooks and owns the
expansion state, keyed by each entity's identity rather than by object
reference. The tree never observes its data source: owners call invalidate()
when the shape may have changed, and set_selected() when only one row's
selected flag changed.

Rendering is a clear-and-rebuild of QTreeWidgetItems from a TreeRow snapshot
produced by build_rows(), which is a pure function and can be inspected
directly.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Generic, Hashable, List, Optional, Sequence, Set, TypeVar

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QBrush, QFont
from PyQt6.QtWidgets import QAbstractItemView, QTreeWidget, QTreeWidgetItem

from pyqt_graphviews.protocols import get_view_config
from pyqt_graphviews.theming import ColorScheme

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Custom data roles for tree items
ENTITY_ROLE = Qt.ItemDataRole.UserRole + 1
KEY_ROLE = Qt.ItemDataRole.UserRole + 2
ROW_CLASS_ROLE = Qt.ItemDataRole.UserRole + 3


@dataclass(frozen=True)
class RowHeader:
    """Renderable header of a row."""
    text: str
    bold: bool = False
    tooltip: str = ""


@dataclass
class TreeHooks(Generic[T]):
    """The four hooks describing a hierarchy, plus an optional selection query.

    Attributes:
        identity: Stable key for an entity, used for expansion/selection state
        children: Ordered children, or None for a leaf (no toggle affordance)
        row_class: Classification string of a row (e.g. "node", "component")
        header: What the row displays
        is_selected: Initial selected flag for a row when the tree is rebuilt
    """

    identity: Callable[[T], Hashable]
    children: Callable[[T], Optional[Sequence[T]]]
    row_class: Callable[[T], str]
    header: Callable[[T], RowHeader]
    is_selected: Callable[[T], bool] = lambda entity: False


@dataclass
class TreeRow:
    """One rendered row. ``children`` is empty unless the row is expanded."""
    key: Hashable
    entity: Any
    row_class: str
    header: RowHeader
    expandable: bool
    expanded: bool
    selected: bool
    children: List["TreeRow"] = field(default_factory=list)

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()


def build_rows(root: Any, hooks: TreeHooks, expanded: Set[Hashable]) -> TreeRow:
    """Build the row snapshot for root. Children are visited only for expanded rows."""
    key = hooks.identity(root)
    children = hooks.children(root)
    is_expanded = children is not None and key in expanded
    row = TreeRow(
        key=key,
        entity=root,
        row_class=hooks.row_class(root),
        header=hooks.header(root),
        expandable=children is not None,
        expanded=is_expanded,
        selected=hooks.is_selected(root),
    )
    if is_expanded:
        row.children = [build_rows(child, hooks, expanded) for child in children]
    return row


class IdentityTree(QTreeWidget):
    """
    Tree widget driven by TreeHooks.

    Clicking within the toggle margin at a row's left edge toggles that row's
    expansion; clicking elsewhere emits row_clicked. The tree holds no
    selection semantics of its own: owners decide what a click means and
    push the selected flag back with set_selected().
    """

    row_clicked = pyqtSignal(object, object)  # entity, Qt.KeyboardModifier
    row_double_clicked = pyqtSignal(object)  # entity
    background_clicked = pyqtSignal()

    def __init__(self, hooks: TreeHooks, root: Any = None,
                 color_scheme: Optional[ColorScheme] = None, parent=None):
        super().__init__(parent)
        self._hooks = hooks
        self._root = root
        self._color_scheme = color_scheme or ColorScheme()
        self._expanded: Set[Hashable] = set()
        self._rows: Dict[Hashable, TreeRow] = {}
        self._items: Dict[Hashable, QTreeWidgetItem] = {}

        self.setHeaderHidden(True)
        self.setColumnCount(1)
        self.setRootIsDecorated(True)
        # Expansion is owned by this widget, not by Qt's branch handling
        self.setItemsExpandable(False)
        self.setExpandsOnDoubleClick(False)
        self.setSelectionMode(QAbstractItemView.SelectionMode.NoSelection)

        self.invalidate()

    # --- State ------------------------------------------------------------

    @property
    def hooks(self) -> TreeHooks:
        return self._hooks

    @property
    def root(self) -> Any:
        return self._root

    @root.setter
    def root(self, root: Any) -> None:
        self._root = root
        self.invalidate()

    @property
    def expanded_keys(self) -> FrozenSet[Hashable]:
        return frozenset(self._expanded)

    @property
    def root_row(self) -> Optional[TreeRow]:
        if self._root is None:
            return None
        return self._rows.get(self._hooks.identity(self._root))

    def row_for(self, entity: Any) -> Optional[TreeRow]:
        return self._rows.get(self._hooks.identity(entity))

    def visible_rows(self) -> List[TreeRow]:
        root_row = self.root_row
        return list(root_row.walk()) if root_row else []

    def is_expanded(self, entity: Any) -> bool:
        return self._hooks.identity(entity) in self._expanded

    def set_expanded(self, entity: Any, expanded: bool) -> None:
        key = self._hooks.identity(entity)
        if expanded:
            self._expanded.add(key)
        else:
            self._expanded.discard(key)
        self.invalidate()

    def toggle_expanded(self, entity: Any) -> None:
        self.set_expanded(entity, not self.is_expanded(entity))

    def is_row_selected(self, entity: Any) -> bool:
        row = self.row_for(entity)
        return row.selected if row else False

    def set_selected(self, entity: Any, selected: bool) -> None:
        """Update one row's selected flag without rebuilding the tree."""
        key = self._hooks.identity(entity)
        row = self._rows.get(key)
        if row is None:
            return
        row.selected = selected
        self._apply_selected(self._items[key], row)

    # --- Rendering --------------------------------------------------------

    def invalidate(self) -> None:
        """Rebuild all rows from the hooks."""
        self.clear()
        self._rows = {}
        self._items = {}
        if self._root is None:
            return

        root_row = build_rows(self._root, self._hooks, self._expanded)
        item = self._create_item(root_row)
        self.addTopLevelItem(item)
        self._expand_items(root_row)
        logger.debug(f"IdentityTree rebuilt: {len(self._rows)} rows")

    def _create_item(self, row: TreeRow) -> QTreeWidgetItem:
        item = QTreeWidgetItem([row.header.text])
        item.setData(0, ENTITY_ROLE, row.entity)
        item.setData(0, KEY_ROLE, row.key)
        item.setData(0, ROW_CLASS_ROLE, row.row_class)
        if row.header.tooltip:
            item.setToolTip(0, row.header.tooltip)
        if row.header.bold:
            font = QFont(item.font(0))
            font.setBold(True)
            item.setFont(0, font)
        # collapsed rows have no child items, so force the indicator on
        if not row.expandable:
            policy = QTreeWidgetItem.ChildIndicatorPolicy.DontShowIndicator
        elif row.expanded:
            policy = QTreeWidgetItem.ChildIndicatorPolicy.DontShowIndicatorWhenChildless
        else:
            policy = QTreeWidgetItem.ChildIndicatorPolicy.ShowIndicator
        item.setChildIndicatorPolicy(policy)
        self._apply_selected(item, row)

        self._rows[row.key] = row
        self._items[row.key] = item
        for child in row.children:
            item.addChild(self._create_item(child))
        return item

    def _expand_items(self, row: TreeRow) -> None:
        # setExpanded only takes effect once the item is attached to the tree
        if row.expanded:
            self._items[row.key].setExpanded(True)
            for child in row.children:
                self._expand_items(child)

    def _apply_selected(self, item: QTreeWidgetItem, row: TreeRow) -> None:
        cs = self._color_scheme
        if row.selected:
            item.setBackground(0, QBrush(cs.to_qcolor(cs.selection_bg)))
            item.setForeground(0, QBrush(cs.to_qcolor(cs.readable_text_on(cs.selection_bg))))
            return

        item.setData(0, Qt.ItemDataRole.BackgroundRole, None)
        if row.header.bold:
            # emphasized rows keep the accent colour when not selected
            item.setForeground(0, QBrush(cs.to_qcolor(cs.text_accent)))
        else:
            item.setData(0, Qt.ItemDataRole.ForegroundRole, None)

    # --- Interaction ------------------------------------------------------

    def is_toggle_hit(self, x_offset: float) -> bool:
        """True if a horizontal offset from a row's left edge lands in the toggle margin."""
        return x_offset < get_view_config().toggle_margin_px

    def handle_row_press(self, entity: Any, x_offset: float,
                         modifiers: Qt.KeyboardModifier = Qt.KeyboardModifier.NoModifier) -> None:
        row = self.row_for(entity)
        if self.is_toggle_hit(x_offset):
            if row is not None and row.expandable:
                self.toggle_expanded(entity)
            return
        self.row_clicked.emit(entity, modifiers)

    def mousePressEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return

        pos = event.position().toPoint()
        item = self.itemAt(pos)
        event.accept()
        self.setFocus()
        if item is None:
            self.background_clicked.emit()
            return

        rect = self.visualItemRect(item)
        self.handle_row_press(item.data(0, ENTITY_ROLE), pos.x() - rect.left(), event.modifiers())

    def mouseDoubleClickEvent(self, event):
        item = self.itemAt(event.position().toPoint())
        event.accept()
        if item is not None:
            self.row_double_clicked.emit(item.data(0, ENTITY_ROLE))
