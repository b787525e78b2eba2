"""
QStyleSheet generator for graph view widgets.

Builds stylesheets from a ColorScheme. Property field state is exposed as Qt
dynamic properties (``io``, ``linked``, ``event``, ``option``, ``flash``,
``editing``) so presentation changes only need a re-polish, never a
stylesheet rebuild.
"""

import logging
from .color_scheme import ColorScheme

logger = logging.getLogger(__name__)

PROPERTY_FIELD_OBJECT_NAME = "propertyField"
PROPERTY_FIELD_CONTENT_NAME = "propertyFieldContent"
PROPERTY_FIELD_BAR_NAME = "propertyFieldBar"
PROPERTY_FIELD_BUTTON_NAME = "propertyFieldButton"
PROPERTY_FIELD_EDITOR_NAME = "propertyFieldEditor"
HIERARCHY_HEADER_NAME = "hierarchyHeader"
HIERARCHY_TREE_NAME = "hierarchyTree"


class StyleSheetGenerator:
    """Generates QStyleSheet strings from a ColorScheme."""

    def __init__(self, color_scheme: ColorScheme):
        self.color_scheme = color_scheme

    def update_color_scheme(self, color_scheme: ColorScheme):
        self.color_scheme = color_scheme

    def generate_property_field_style(self) -> str:
        """
        Generate QStyleSheet for PropertyField and its child elements.

        Returns:
            str: Stylesheet scoped by object name
        """
        cs = self.color_scheme
        field = f"QWidget#{PROPERTY_FIELD_OBJECT_NAME}"
        return f"""
            {field} {{
                background-color: {cs.to_hex(cs.input_bg)};
                border: 1px solid {cs.to_hex(cs.border_color)};
                border-radius: 2px;
            }}
            {field}:focus {{
                border: 1px solid {cs.to_hex(cs.input_focus_border)};
            }}
            {field} QLabel#{PROPERTY_FIELD_CONTENT_NAME} {{
                color: {cs.to_hex(cs.text_primary)};
                background: transparent;
                padding: 0 4px;
            }}
            {field}[io="output"] QLabel#{PROPERTY_FIELD_CONTENT_NAME} {{
                color: {cs.to_hex(cs.text_disabled)};
            }}
            {field}[option="true"] QLabel#{PROPERTY_FIELD_CONTENT_NAME} {{
                color: {cs.to_hex(cs.option_text)};
            }}
            {field}[linked="true"] QLabel#{PROPERTY_FIELD_CONTENT_NAME} {{
                color: {cs.to_hex(cs.linked_text)};
                font-style: italic;
            }}
            {field} QFrame#{PROPERTY_FIELD_BAR_NAME} {{
                background-color: {cs.to_hex(cs.bar_fill)};
                border: none;
            }}
            {field} QFrame#{PROPERTY_FIELD_BUTTON_NAME} {{
                background-color: {cs.to_hex(cs.button_normal_bg)};
                border: none;
            }}
            {field}[editing="true"] QLabel#{PROPERTY_FIELD_CONTENT_NAME} {{
                color: transparent;
            }}
            {field}[flash="true"] QFrame#{PROPERTY_FIELD_BUTTON_NAME} {{
                background-color: {cs.to_hex(cs.event_flash_bg)};
            }}
            {field} QLineEdit#{PROPERTY_FIELD_EDITOR_NAME} {{
                background-color: {cs.to_hex(cs.panel_bg)};
                color: {cs.to_hex(cs.input_text)};
                border: 1px solid {cs.to_hex(cs.input_border)};
                padding: 0 3px;
            }}
        """

    def generate_hierarchy_view_style(self) -> str:
        """
        Generate QStyleSheet for HierarchyTreeView (header chrome and tree).

        Returns:
            str: Stylesheet scoped by object name
        """
        cs = self.color_scheme
        return f"""
            QWidget#{HIERARCHY_HEADER_NAME} {{
                background-color: {cs.to_hex(cs.window_bg)};
            }}
            QWidget#{HIERARCHY_HEADER_NAME} QLabel {{
                color: {cs.to_hex(cs.text_secondary)};
                font-weight: bold;
            }}
            QWidget#{HIERARCHY_HEADER_NAME} QPushButton {{
                background-color: {cs.to_hex(cs.button_normal_bg)};
                color: {cs.to_hex(cs.button_text)};
                border: none;
                padding: 2px 8px;
            }}
            QWidget#{HIERARCHY_HEADER_NAME} QPushButton:hover {{
                background-color: {cs.to_hex(cs.button_hover_bg)};
            }}
            QTreeWidget#{HIERARCHY_TREE_NAME} {{
                background-color: {cs.to_hex(cs.panel_bg)};
                color: {cs.to_hex(cs.text_primary)};
                border: none;
            }}
            QTreeWidget#{HIERARCHY_TREE_NAME}::item:hover {{
                background-color: {cs.to_hex(cs.hover_bg)};
            }}
        """
