"""
pyqt-graphviews: view bindings between PyQt6 widgets and an object graph.

Widgets that observe an external graph of nodes, components and typed
properties, render it, and forward user intent back as mutations. The
graph stays the single source of truth; widgets subscribe on mount and
release everything on unmount.

Architecture:
- Core: subscription handles, deferred pulse, value formatting and drag math
- Protocols: ABC contracts for cells, graphs and selection, plus ViewConfig
- Model: in-memory reference implementation of the contracts
- Theming: ColorScheme and stylesheet generation
- Widgets: IdentityTree, HierarchyTreeView, PropertyField

Key Features:
- Fold state keyed by entity identity, surviving full rebuilds
- Selection highlight updated per row, without rebuilding
- Drag-to-scrub numbers with precise/coarse modifiers and step snapping
- Inline editing, option picker, event trigger flash, reset to default
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
