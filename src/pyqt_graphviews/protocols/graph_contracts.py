"""
ABC contracts for the object graph the widgets bind to.

The widgets never own the graph, its properties, or the selection. They only
read from them, subscribe to their events and call their mutation methods.
These ABCs spell out that surface so an incomplete implementation fails at
instantiation instead of deep inside a paint or click handler.

Event names:
    PropertyCell:      "value" (value written), "change" (schema/link metadata)
    SelectionManager:  "node" (NodeEvent), "component" (ComponentEvent),
                       "active-graph" (ActiveGraphEvent)
    ObjectGraph:       "node" (NodeEvent), "component" (ComponentEvent),
                       "hierarchy" (HierarchyEvent)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

from pyqt_graphviews.core.subscriptions import Subscription


class EventSource(ABC):
    """ABC for anything widgets can subscribe to."""

    @abstractmethod
    def on(self, event_type: str, callback: Callable[[Any], None]) -> Subscription:
        """Register callback for event_type and return its disposable handle."""
        pass


# ---------------------------------------------------------------------------
# Event payloads
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NodeEvent:
    node: "HierarchyNode"
    add: bool


@dataclass(frozen=True)
class ComponentEvent:
    component: "HierarchyComponent"
    add: bool


@dataclass(frozen=True)
class HierarchyEvent:
    parent: "HierarchyNode"
    child: "HierarchyNode"
    add: bool


@dataclass(frozen=True)
class ActiveGraphEvent:
    previous: Optional["HierarchyGraph"]
    next: Optional["HierarchyGraph"]


# ---------------------------------------------------------------------------
# Property cells
# ---------------------------------------------------------------------------

PROPERTY_TYPES = ("number", "string", "boolean", "object", "event")

# Generic node type; nodes of this type show their name without a type suffix
BASE_NODE_TYPE = "Node"


@dataclass
class PropertySchema:
    """Metadata describing how a property value is bounded and presented.

    Attributes:
        min, max: Optional numeric bounds
        step: Drag values snap down to multiples of step
        precision: Display/commit precision in digits
        speed: Explicit drag speed (value units per pixel)
        bar: Show a proportional bar between min and max
        options: Option labels; the value is the selected index
        event: The property is a trigger, not a value holder
        preset: Default value restored by reset()
    """

    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    precision: Optional[int] = None
    speed: Optional[float] = None
    bar: Optional[bool] = None
    options: Optional[List[str]] = None
    event: bool = False
    preset: Any = None


class PropertyCell(EventSource):
    """Named, typed, schema-described value holder."""

    @property
    @abstractmethod
    def type(self) -> str:
        """One of PROPERTY_TYPES."""
        pass

    @property
    @abstractmethod
    def schema(self) -> PropertySchema:
        pass

    @property
    @abstractmethod
    def value(self) -> Any:
        """Scalar value, or an indexable vector for multi-component cells."""
        pass

    @property
    @abstractmethod
    def changed(self) -> bool:
        """True while the last write/trigger is being delivered to listeners."""
        pass

    @abstractmethod
    def set_value(self, value: Any) -> None:
        pass

    @abstractmethod
    def trigger(self) -> None:
        """Fire an event-type cell, or re-announce the current value."""
        pass

    @abstractmethod
    def reset(self) -> None:
        """Restore the schema default."""
        pass

    @abstractmethod
    def is_input(self) -> bool:
        pass

    @abstractmethod
    def has_in_links(self, index: Optional[int] = None) -> bool:
        pass

    @abstractmethod
    def has_out_links(self, index: Optional[int] = None) -> bool:
        pass

    @abstractmethod
    def validated_value(self) -> Any:
        """Current value coerced into the schema (e.g. a valid option index)."""
        pass

    @abstractmethod
    def option_text(self) -> str:
        """Label of the currently selected option."""
        pass


# ---------------------------------------------------------------------------
# Hierarchy entities
# ---------------------------------------------------------------------------

class HierarchyComponent(ABC):
    """A component attached to a node."""

    id: str
    name: str
    type: str

    @property
    @abstractmethod
    def inner_graph(self) -> Optional["HierarchyGraph"]:
        """Nested subgraph owned by this component, None for plain components."""
        pass


class HierarchyNode(ABC):
    """A node: owns components and optionally participates in parent/child structure."""

    id: str
    name: str
    type: str

    @property
    @abstractmethod
    def components(self) -> Sequence[HierarchyComponent]:
        pass

    @abstractmethod
    def child_nodes(self) -> Optional[Sequence["HierarchyNode"]]:
        """Structural children, or None if the node has no hierarchy."""
        pass


class HierarchyGraph(ABC):
    """A (sub)graph whose root nodes form the top of a hierarchy view."""

    @property
    @abstractmethod
    def parent(self) -> Optional[HierarchyComponent]:
        """Component owning this graph, None for the top-level graph."""
        pass

    @abstractmethod
    def root_nodes(self) -> Sequence[HierarchyNode]:
        """Nodes of this graph with no structural parent inside it."""
        pass


class ObjectGraph(EventSource):
    """The system emitting structural change events."""


class SelectionManager(EventSource):
    """Authority over selected nodes/components and the active subgraph."""

    @property
    @abstractmethod
    def active_graph(self) -> HierarchyGraph:
        pass

    @active_graph.setter
    @abstractmethod
    def active_graph(self, graph: HierarchyGraph) -> None:
        pass

    @property
    @abstractmethod
    def system(self) -> ObjectGraph:
        pass

    @abstractmethod
    def select_node(self, node: HierarchyNode, additive: bool = False) -> None:
        pass

    @abstractmethod
    def select_component(self, component: HierarchyComponent, additive: bool = False) -> None:
        pass

    @abstractmethod
    def clear_selection(self) -> None:
        pass

    @abstractmethod
    def is_node_selected(self, node: HierarchyNode) -> bool:
        pass

    @abstractmethod
    def is_component_selected(self, component: HierarchyComponent) -> bool:
        pass

    @abstractmethod
    def has_parent_graph(self) -> bool:
        pass

    @abstractmethod
    def has_child_graph(self) -> bool:
        pass

    @abstractmethod
    def activate_parent_graph(self) -> None:
        pass

    @abstractmethod
    def activate_child_graph(self) -> None:
        pass
