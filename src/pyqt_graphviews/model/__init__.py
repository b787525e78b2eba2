"""
Reference object graph.

In-memory implementations of the contracts in pyqt_graphviews.protocols,
for applications without their own scene graph and for tests.
"""

from .property import Property
from .graph import BASE_NODE_TYPE, System, Graph, Node, Component, GraphComponent
from .selection import Selection

__all__ = [
    "Property",
    "BASE_NODE_TYPE",
    "System",
    "Graph",
    "Node",
    "Component",
    "GraphComponent",
    "Selection",
]
