"""
Contracts and configuration.

ABC-based contracts for the external object graph, property cells and
selection manager, plus the global view configuration.
"""

from .graph_contracts import (
    EventSource,
    NodeEvent,
    ComponentEvent,
    HierarchyEvent,
    ActiveGraphEvent,
    PROPERTY_TYPES,
    BASE_NODE_TYPE,
    PropertySchema,
    PropertyCell,
    HierarchyComponent,
    HierarchyNode,
    HierarchyGraph,
    ObjectGraph,
    SelectionManager,
)
from .view_config import ViewConfig, set_view_config, get_view_config

__all__ = [
    "EventSource",
    "NodeEvent",
    "ComponentEvent",
    "HierarchyEvent",
    "ActiveGraphEvent",
    "PROPERTY_TYPES",
    "BASE_NODE_TYPE",
    "PropertySchema",
    "PropertyCell",
    "HierarchyComponent",
    "HierarchyNode",
    "HierarchyGraph",
    "ObjectGraph",
    "SelectionManager",
    "ViewConfig",
    "set_view_config",
    "get_view_config",
]
