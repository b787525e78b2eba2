"""Shared building blocks for the graph view widgets."""

from .inline_editor import InlineEditor

__all__ = ["InlineEditor"]
