"""
In-memory object graph: system, graphs, nodes and components.

A System owns the top-level Graph and announces every structural change:
    "node"       NodeEvent       node created/removed in any graph
    "component"  ComponentEvent  component attached/detached on any node
    "hierarchy"  HierarchyEvent  parent/child link added/removed
GraphComponents own an inner Graph, which is how subgraphs nest.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Type

from pyqt_graphviews.core.subscriptions import EventEmitter, Subscription, unique_id
from pyqt_graphviews.protocols.graph_contracts import (
    ComponentEvent,
    HierarchyComponent,
    HierarchyEvent,
    HierarchyGraph,
    HierarchyNode,
    BASE_NODE_TYPE,
    NodeEvent,
    ObjectGraph,
)
from .property import Property

logger = logging.getLogger(__name__)


class System(ObjectGraph):
    """Root of the object graph and source of structural events."""

    def __init__(self):
        self._emitter = EventEmitter()
        self.graph = Graph(self)

    def on(self, event_type: str, callback: Callable[[Any], None]) -> Subscription:
        return self._emitter.on(event_type, callback)

    def emit(self, event_type: str, payload: Any) -> None:
        self._emitter.emit(event_type, payload)


class Graph(HierarchyGraph):
    """A set of nodes; nested graphs are owned by a GraphComponent."""

    def __init__(self, system: System, parent: Optional["GraphComponent"] = None):
        self.system = system
        self._parent = parent
        self.nodes: List[Node] = []

    def __repr__(self) -> str:
        owner = self._parent.name or self._parent.type if self._parent else "System"
        return f"Graph({owner}, nodes={len(self.nodes)})"

    @property
    def parent(self) -> Optional["GraphComponent"]:
        return self._parent

    def create_node(self, name: str = "", type: str = BASE_NODE_TYPE, hierarchy: bool = True) -> "Node":
        node = Node(self, name=name, type=type, hierarchy=hierarchy)
        self.nodes.append(node)
        logger.debug(f"Created node {node.id} ({node.name or node.type})")
        self.system.emit("node", NodeEvent(node, True))
        return node

    def remove_node(self, node: "Node") -> None:
        if node not in self.nodes:
            raise ValueError(f"{node!r} does not belong to {self!r}")

        if node.parent is not None:
            node.parent.remove_child(node)
        for child in list(node.children):
            node.remove_child(child)
        for component in list(node.components):
            node.remove_component(component)

        self.nodes.remove(node)
        self.system.emit("node", NodeEvent(node, False))

    def root_nodes(self) -> List["Node"]:
        return [node for node in self.nodes if node.parent is None]


class Component(HierarchyComponent):
    """A named bundle of properties attached to a node."""

    def __init__(self, node: "Node", name: str = "", type: str = "Component"):
        self.id = unique_id("component")
        self.node = node
        self.name = name
        self.type = type
        self.properties: Dict[str, Property] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id}, {self.name or self.type})"

    @property
    def inner_graph(self) -> Optional[Graph]:
        return None

    def add_property(self, prop: Property) -> Property:
        self.properties[prop.name] = prop
        return prop


class GraphComponent(Component):
    """Component owning a nested subgraph (drill-down target)."""

    def __init__(self, node: "Node", name: str = "", type: str = "Graph"):
        super().__init__(node, name=name, type=type)
        self._inner_graph = Graph(node.graph.system, parent=self)

    @property
    def inner_graph(self) -> Graph:
        return self._inner_graph


class Node(HierarchyNode):
    """A node owning components and, optionally, structural children."""

    def __init__(self, graph: Graph, name: str = "", type: str = BASE_NODE_TYPE, hierarchy: bool = True):
        self.id = unique_id("node")
        self.graph = graph
        self.name = name
        self.type = type
        self.has_hierarchy = hierarchy
        self.parent: Optional[Node] = None
        self.children: List[Node] = []
        self._components: List[Component] = []

    def __repr__(self) -> str:
        return f"Node({self.id}, {self.name or self.type})"

    @property
    def components(self) -> List[Component]:
        return list(self._components)

    def child_nodes(self) -> Optional[List["Node"]]:
        if not self.has_hierarchy:
            return None
        return list(self.children)

    def create_component(self, component_class: Type[Component] = Component, **kwargs) -> Component:
        component = component_class(self, **kwargs)
        self._components.append(component)
        self.graph.system.emit("component", ComponentEvent(component, True))
        return component

    def remove_component(self, component: Component) -> None:
        self._components.remove(component)
        self.graph.system.emit("component", ComponentEvent(component, False))

    def add_child(self, child: "Node") -> None:
        if not (self.has_hierarchy and child.has_hierarchy):
            raise ValueError(f"{self!r} and {child!r} must both participate in the hierarchy")
        if child.graph is not self.graph:
            raise ValueError(f"{child!r} belongs to a different graph than {self!r}")
        if child.parent is not None:
            raise ValueError(f"{child!r} already has parent {child.parent!r}")
        if child is self or child._is_ancestor_of(self):
            raise ValueError(f"Linking {child!r} under {self!r} would create a cycle")

        child.parent = self
        self.children.append(child)
        self.graph.system.emit("hierarchy", HierarchyEvent(self, child, True))

    def remove_child(self, child: "Node") -> None:
        if child.parent is not self:
            raise ValueError(f"{child!r} is not a child of {self!r}")
        child.parent = None
        self.children.remove(child)
        self.graph.system.emit("hierarchy", HierarchyEvent(self, child, False))

    def _is_ancestor_of(self, node: "Node") -> bool:
        current = node.parent
        while current is not None:
            if current is self:
                return True
            current = current.parent
        return False
