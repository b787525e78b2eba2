"""
Theming and styling.

Colour schemes and stylesheet generation for the graph view widgets.
"""

from .color_scheme import ColorScheme
from .style_generator import StyleSheetGenerator

__all__ = [
    "ColorScheme",
    "StyleSheetGenerator",
]
