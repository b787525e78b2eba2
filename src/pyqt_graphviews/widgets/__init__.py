"""
View-layer widgets.

IdentityTree keeps fold state by entity identity across rebuilds,
HierarchyTreeView binds it to a selection manager, and PropertyField
edits a single property cell by click, drag or inline text.
"""

from .identity_tree import IdentityTree, TreeHooks, TreeRow, RowHeader, build_rows
from .hierarchy_tree_view import HierarchyTree, HierarchyTreeView, HierarchyEntity, EntityKind
from .property_field import PropertyField, InteractionState, FieldPresentation, present_cell

__all__ = [
    "IdentityTree",
    "TreeHooks",
    "TreeRow",
    "RowHeader",
    "build_rows",
    "HierarchyTree",
    "HierarchyTreeView",
    "HierarchyEntity",
    "EntityKind",
    "PropertyField",
    "InteractionState",
    "FieldPresentation",
    "present_cell",
]
