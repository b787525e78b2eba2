"""
Hierarchy view of the active (sub)graph with selection synchronization.

HierarchyTree binds an IdentityTree to a SelectionManager and to the object
graph's structural events. Rows are HierarchyEntity values, a tagged union
over graph roots, nodes and components; every hook switches on ``kind``.

Synchronization:
    selection "node"/"component"     -> set_selected() on the affected row only
    selection "active-graph"         -> swap the root (full rebuild)
    system "node"/"component"/"hierarchy" -> full rebuild

Subscriptions are acquired in mount() and released together in unmount().
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from pyqt_graphviews.core import SubscriptionError, SubscriptionSet, unique_id
from pyqt_graphviews.protocols import (
    BASE_NODE_TYPE,
    ActiveGraphEvent,
    ComponentEvent,
    HierarchyComponent,
    HierarchyGraph,
    HierarchyNode,
    NodeEvent,
    SelectionManager,
    get_view_config,
)
from pyqt_graphviews.theming import ColorScheme, StyleSheetGenerator
from pyqt_graphviews.theming.style_generator import HIERARCHY_HEADER_NAME, HIERARCHY_TREE_NAME

from .identity_tree import IdentityTree, RowHeader, TreeHooks

logger = logging.getLogger(__name__)


class EntityKind(Enum):
    GRAPH = "graph"
    NODE = "node"
    COMPONENT = "component"


@dataclass(frozen=True)
class HierarchyEntity:
    """A row of the hierarchy: the kind tag plus the object it stands for."""
    kind: EntityKind
    target: Any

    @classmethod
    def graph(cls, graph: HierarchyGraph) -> "HierarchyEntity":
        return cls(EntityKind.GRAPH, graph)

    @classmethod
    def node(cls, node: HierarchyNode) -> "HierarchyEntity":
        return cls(EntityKind.NODE, node)

    @classmethod
    def component(cls, component: HierarchyComponent) -> "HierarchyEntity":
        return cls(EntityKind.COMPONENT, component)


def node_label(node: HierarchyNode) -> str:
    """Name, falling back to type; non-generic types are suffixed in brackets."""
    if node.type == BASE_NODE_TYPE:
        return node.name or node.type
    return f"{node.name} [{node.type}]" if node.name else node.type


def component_label(component: HierarchyComponent) -> str:
    return f"{component.name} [{component.type}]" if component.name else component.type


def graph_label(graph: HierarchyGraph) -> str:
    owner = graph.parent
    return owner.type if owner is not None else get_view_config().root_label


def active_graph_title(graph: HierarchyGraph) -> str:
    """Header title: the owning component's name (or type), else the root label."""
    owner = graph.parent
    if owner is None:
        return get_view_config().root_label
    return owner.name or owner.type


class HierarchyTree(IdentityTree):
    """
    IdentityTree over the selection manager's active graph.

    Graph-root rows share one synthetic identity per tree instance, so the
    root's fold state follows "whatever graph is active" rather than a
    particular graph object.
    """

    def __init__(self, selection: SelectionManager, color_scheme: Optional[ColorScheme] = None, parent=None):
        hooks = TreeHooks(
            identity=self._identity,
            children=self._children,
            row_class=self._row_class,
            header=self._header,
            is_selected=self._is_selected,
        )
        super().__init__(hooks, root=None, color_scheme=color_scheme, parent=parent)
        self.setObjectName(HIERARCHY_TREE_NAME)

        self._selection = selection
        self._root_id = unique_id("graph-root")
        self._subscriptions = SubscriptionSet()

        self.row_clicked.connect(self._on_row_clicked)
        self.row_double_clicked.connect(self._on_row_double_clicked)

        # the root row starts unfolded
        self._expanded.add(self._root_id)
        self.root = HierarchyEntity.graph(selection.active_graph)

    @property
    def selection(self) -> SelectionManager:
        return self._selection

    @property
    def root_identity(self) -> str:
        return self._root_id

    # --- Lifecycle --------------------------------------------------------

    @property
    def is_mounted(self) -> bool:
        return bool(self._subscriptions)

    def mount(self) -> None:
        if self.is_mounted:
            raise SubscriptionError(f"{type(self).__name__} is already mounted")

        selection = self._selection
        system = selection.system
        add = self._subscriptions.add

        add(selection.on("node", self._on_select_node))
        add(selection.on("component", self._on_select_component))
        add(selection.on("active-graph", self._on_active_graph))
        add(system.on("node", self._on_update))
        add(system.on("component", self._on_update))
        add(system.on("hierarchy", self._on_update))
        logger.debug(f"HierarchyTree mounted with {len(self._subscriptions)} subscriptions")

        # catch up with anything that changed while unmounted
        self.root = HierarchyEntity.graph(selection.active_graph)

    def unmount(self) -> None:
        released = self._subscriptions.dispose_all()
        logger.debug(f"HierarchyTree unmounted, released {released} subscriptions")

    # --- Hooks ------------------------------------------------------------

    def _identity(self, entity: HierarchyEntity):
        if entity.kind is EntityKind.GRAPH:
            return self._root_id
        return entity.target.id

    def _children(self, entity: HierarchyEntity) -> Optional[List[HierarchyEntity]]:
        if entity.kind is EntityKind.NODE:
            node = entity.target
            children = [HierarchyEntity.component(c) for c in node.components]
            child_nodes = node.child_nodes()
            if child_nodes is not None:
                children.extend(HierarchyEntity.node(n) for n in child_nodes)
            return children

        if entity.kind is EntityKind.GRAPH:
            return [HierarchyEntity.node(n) for n in entity.target.root_nodes()]

        return None

    def _row_class(self, entity: HierarchyEntity) -> str:
        return entity.kind.value

    def _header(self, entity: HierarchyEntity) -> RowHeader:
        target = entity.target
        if entity.kind is EntityKind.COMPONENT:
            return RowHeader(component_label(target), bold=target.inner_graph is not None)
        if entity.kind is EntityKind.NODE:
            return RowHeader(node_label(target))
        return RowHeader(graph_label(target))

    def _is_selected(self, entity: HierarchyEntity) -> bool:
        if entity.kind is EntityKind.NODE:
            return self._selection.is_node_selected(entity.target)
        if entity.kind is EntityKind.COMPONENT:
            return self._selection.is_component_selected(entity.target)
        return False

    # --- Row interaction --------------------------------------------------

    def _on_row_clicked(self, entity: HierarchyEntity, modifiers) -> None:
        additive = bool(modifiers & Qt.KeyboardModifier.ControlModifier)
        if entity.kind is EntityKind.NODE:
            self._selection.select_node(entity.target, additive)
        elif entity.kind is EntityKind.COMPONENT:
            self._selection.select_component(entity.target, additive)

    def _on_row_double_clicked(self, entity: HierarchyEntity) -> None:
        if entity.kind is EntityKind.COMPONENT and entity.target.inner_graph is not None:
            self._selection.active_graph = entity.target.inner_graph

    # --- Event handlers ---------------------------------------------------

    def _on_select_node(self, event: NodeEvent) -> None:
        self.set_selected(HierarchyEntity.node(event.node), event.add)

    def _on_select_component(self, event: ComponentEvent) -> None:
        self.set_selected(HierarchyEntity.component(event.component), event.add)

    def _on_active_graph(self, event: ActiveGraphEvent) -> None:
        self.root = HierarchyEntity.graph(self._selection.active_graph)

    def _on_update(self, event) -> None:
        self.invalidate()


class HierarchyTreeView(QWidget):
    """
    Header chrome plus HierarchyTree.

    The header shows the active graph's title and "down"/"up" buttons for
    drilling into a selected graph component or back to the parent graph.
    Clicking empty space clears the selection.

    Usage:
        view = HierarchyTreeView(selection)
        view.mount()      # or simply show() it
        ...
        view.unmount()    # or hide()/close() it
    """

    def __init__(self, selection: SelectionManager, color_scheme: Optional[ColorScheme] = None, parent=None):
        super().__init__(parent)
        self._selection = selection
        self._color_scheme = color_scheme or ColorScheme()
        self._subscriptions = SubscriptionSet()

        self._setup_ui()
        self.refresh_header()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self._header = QWidget()
        self._header.setObjectName(HIERARCHY_HEADER_NAME)
        header_layout = QHBoxLayout(self._header)
        header_layout.setContentsMargins(4, 2, 4, 2)
        header_layout.setSpacing(4)

        self._title_label = QLabel()
        header_layout.addWidget(self._title_label, 1)

        self._down_button = QPushButton("down")
        self._down_button.setToolTip("Enter the selected subgraph")
        self._down_button.clicked.connect(self._on_click_down)
        header_layout.addWidget(self._down_button)

        self._up_button = QPushButton("up")
        self._up_button.setToolTip("Return to the parent graph")
        self._up_button.clicked.connect(self._on_click_up)
        header_layout.addWidget(self._up_button)

        layout.addWidget(self._header)

        self._tree = HierarchyTree(self._selection, color_scheme=self._color_scheme)
        self._tree.background_clicked.connect(self._on_click_background)
        layout.addWidget(self._tree, 1)

        self.setStyleSheet(StyleSheetGenerator(self._color_scheme).generate_hierarchy_view_style())

    @property
    def tree(self) -> HierarchyTree:
        return self._tree

    @property
    def title_label(self) -> QLabel:
        return self._title_label

    @property
    def up_button(self) -> QPushButton:
        return self._up_button

    @property
    def down_button(self) -> QPushButton:
        return self._down_button

    # --- Lifecycle --------------------------------------------------------

    @property
    def is_mounted(self) -> bool:
        return bool(self._subscriptions)

    def mount(self) -> None:
        if self.is_mounted:
            raise SubscriptionError(f"{type(self).__name__} is already mounted")

        self._subscriptions.add(self._selection.on("component", self._on_select_component))
        self._subscriptions.add(self._selection.on("active-graph", self._on_active_graph))
        self._tree.mount()
        self.refresh_header()

    def unmount(self) -> None:
        self._tree.unmount()
        self._subscriptions.dispose_all()

    def showEvent(self, event):
        super().showEvent(event)
        if not self.is_mounted:
            self.mount()

    def hideEvent(self, event):
        if self.is_mounted:
            self.unmount()
        super().hideEvent(event)

    # --- Header -----------------------------------------------------------

    def refresh_header(self) -> None:
        selection = self._selection
        self._title_label.setText(active_graph_title(selection.active_graph))
        # setHidden rather than setVisible: works before the view is shown
        self._down_button.setHidden(not selection.has_child_graph())
        self._up_button.setHidden(not selection.has_parent_graph())

    def _on_click_up(self):
        self._selection.activate_parent_graph()

    def _on_click_down(self):
        self._selection.activate_child_graph()

    def _on_click_background(self):
        self._selection.clear_selection()

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self._selection.clear_selection()
            event.accept()
            return
        super().mousePressEvent(event)

    def _on_select_component(self, event: ComponentEvent) -> None:
        if event.component.inner_graph is not None:
            self.refresh_header()

    def _on_active_graph(self, event: ActiveGraphEvent) -> None:
        self.refresh_header()
