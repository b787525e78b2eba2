"""In-memory selection manager with subgraph navigation."""

import logging
from typing import Any, Callable, List, Optional

from pyqt_graphviews.core.subscriptions import EventEmitter, Subscription, SubscriptionSet
from pyqt_graphviews.protocols.graph_contracts import (
    ActiveGraphEvent,
    ComponentEvent,
    NodeEvent,
    SelectionManager,
)
from .graph import Component, Graph, Node, System

logger = logging.getLogger(__name__)


class Selection(SelectionManager):
    """
    Tracks selected nodes and components and the active (drilled-into) graph.

    Emits one event per membership change:
        "node"          NodeEvent(node, add)
        "component"     ComponentEvent(component, add)
        "active-graph"  ActiveGraphEvent(previous, next)

    Exclusive selection replaces both sets; additive selection toggles the
    clicked entity. Entities removed from the system are deselected.
    """

    def __init__(self, system: System):
        self._system = system
        self._emitter = EventEmitter()
        self._active_graph: Graph = system.graph
        self._nodes: List[Node] = []
        self._components: List[Component] = []

        self._subscriptions = SubscriptionSet()
        self._subscriptions.add(system.on("node", self._on_system_node))
        self._subscriptions.add(system.on("component", self._on_system_component))

    def dispose(self) -> None:
        self._subscriptions.dispose_all()

    def on(self, event_type: str, callback: Callable[[Any], None]) -> Subscription:
        return self._emitter.on(event_type, callback)

    @property
    def system(self) -> System:
        return self._system

    @property
    def selected_nodes(self) -> tuple:
        return tuple(self._nodes)

    @property
    def selected_components(self) -> tuple:
        return tuple(self._components)

    # --- Active graph -----------------------------------------------------

    @property
    def active_graph(self) -> Graph:
        return self._active_graph

    @active_graph.setter
    def active_graph(self, graph: Graph) -> None:
        if graph is self._active_graph:
            return
        previous = self._active_graph
        self.clear_selection()
        self._active_graph = graph
        logger.debug(f"Active graph changed: {previous!r} -> {graph!r}")
        self._emitter.emit("active-graph", ActiveGraphEvent(previous, graph))

    def has_parent_graph(self) -> bool:
        return self._active_graph.parent is not None

    def has_child_graph(self) -> bool:
        return self._selected_child_graph() is not None

    def activate_parent_graph(self) -> None:
        owner = self._active_graph.parent
        if owner is not None:
            self.active_graph = owner.node.graph

    def activate_child_graph(self) -> None:
        graph = self._selected_child_graph()
        if graph is not None:
            self.active_graph = graph

    def _selected_child_graph(self) -> Optional[Graph]:
        for component in self._components:
            inner = component.inner_graph
            if inner is not None and component.node.graph is self._active_graph:
                return inner
        return None

    # --- Membership -------------------------------------------------------

    def is_node_selected(self, node: Node) -> bool:
        return node in self._nodes

    def is_component_selected(self, component: Component) -> bool:
        return component in self._components

    def select_node(self, node: Node, additive: bool = False) -> None:
        if additive:
            if node in self._nodes:
                self._remove_node(node)
            else:
                self._add_node(node)
            return

        if self._nodes == [node] and not self._components:
            return
        self._clear(keep_node=node)
        if node not in self._nodes:
            self._add_node(node)

    def select_component(self, component: Component, additive: bool = False) -> None:
        if additive:
            if component in self._components:
                self._remove_component(component)
            else:
                self._add_component(component)
            return

        if self._components == [component] and not self._nodes:
            return
        self._clear(keep_component=component)
        if component not in self._components:
            self._add_component(component)

    def clear_selection(self) -> None:
        self._clear()

    def _clear(self, keep_node: Optional[Node] = None, keep_component: Optional[Component] = None) -> None:
        for node in list(self._nodes):
            if node is not keep_node:
                self._remove_node(node)
        for component in list(self._components):
            if component is not keep_component:
                self._remove_component(component)

    def _add_node(self, node: Node) -> None:
        self._nodes.append(node)
        self._emitter.emit("node", NodeEvent(node, True))

    def _remove_node(self, node: Node) -> None:
        self._nodes.remove(node)
        self._emitter.emit("node", NodeEvent(node, False))

    def _add_component(self, component: Component) -> None:
        self._components.append(component)
        self._emitter.emit("component", ComponentEvent(component, True))

    def _remove_component(self, component: Component) -> None:
        self._components.remove(component)
        self._emitter.emit("component", ComponentEvent(component, False))

    # --- Structural cleanup -----------------------------------------------

    def _on_system_node(self, event: NodeEvent) -> None:
        if not event.add and event.node in self._nodes:
            self._remove_node(event.node)

    def _on_system_component(self, event: ComponentEvent) -> None:
        if not event.add and event.component in self._components:
            self._remove_component(event.component)
