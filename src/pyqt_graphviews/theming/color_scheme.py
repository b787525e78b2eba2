"""
PyQt6 Color Scheme for graph view widgets.

Semantic colour names for the hierarchy tree and property fields, with
dark/light variants, JSON overrides, and WCAG contrast helpers used to pick
readable text over selection highlights and bar fills.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

from PyQt6.QtGui import QColor
from wcag_contrast_ratio.contrast import rgb as wcag_rgb

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]


@dataclass
class ColorScheme:
    """
    Colour scheme with semantic colour names.

    Dark is the default variant; create_light_theme() returns the light one.
    """

    # ========== BASE UI ==========

    window_bg: RGB = (43, 43, 43)          # #2b2b2b - Header/chrome background
    panel_bg: RGB = (30, 30, 30)           # #1e1e1e - Tree and field background
    border_color: RGB = (85, 85, 85)       # #555555 - Field borders

    # ========== TEXT ==========

    text_primary: RGB = (255, 255, 255)    # #ffffff - Row and field text
    text_secondary: RGB = (204, 204, 204)  # #cccccc - Header text
    text_accent: RGB = (0, 170, 255)       # #00aaff - Bold tree rows (graph components)
    text_disabled: RGB = (102, 102, 102)   # #666666 - Output (read-only) fields

    # ========== INTERACTIVE ==========

    button_normal_bg: RGB = (64, 64, 64)   # #404040 - Header buttons, event buttons
    button_hover_bg: RGB = (80, 80, 80)    # #505050 - Hover state
    button_text: RGB = (255, 255, 255)     # #ffffff - Button text
    input_bg: RGB = (64, 64, 64)           # #404040 - Property field background
    input_border: RGB = (102, 102, 102)    # #666666 - Inline editor border
    input_text: RGB = (255, 255, 255)      # #ffffff - Inline editor text
    input_focus_border: RGB = (0, 170, 255)  # #00aaff - Focused field border

    # ========== SELECTION ==========

    selection_bg: RGB = (0, 120, 212)      # #0078d4 - Selected rows
    hover_bg: RGB = (51, 51, 51)           # #333333 - Hovered rows

    # ========== PROPERTY STATE ==========

    bar_fill: RGB = (0, 90, 160)           # #005aa0 - Proportional bar
    linked_text: RGB = (255, 170, 0)       # #ffaa00 - Value driven by a link
    option_text: RGB = (156, 220, 254)     # #9cdcfe - Option picker fields
    event_flash_bg: RGB = (0, 170, 255)    # #00aaff - Event button pulse

    def to_qcolor(self, color_tuple: RGB) -> QColor:
        """Convert RGB tuple to QColor object."""
        return QColor(*color_tuple)

    def to_hex(self, color_tuple: RGB) -> str:
        """Convert RGB tuple to hex colour string (e.g. "#ff0000")."""
        r, g, b = color_tuple[:3]
        return f"#{r:02x}{g:02x}{b:02x}"

    @classmethod
    def create_dark_theme(cls) -> "ColorScheme":
        """Dark variant (the default values)."""
        return cls()

    @classmethod
    def create_light_theme(cls) -> "ColorScheme":
        """Light variant with colours adjusted for light backgrounds."""
        return cls(
            window_bg=(245, 245, 245),
            panel_bg=(255, 255, 255),
            border_color=(180, 180, 180),
            text_primary=(0, 0, 0),
            text_secondary=(80, 80, 80),
            text_accent=(0, 100, 200),
            text_disabled=(160, 160, 160),
            button_normal_bg=(230, 230, 230),
            button_hover_bg=(210, 210, 210),
            button_text=(0, 0, 0),
            input_bg=(240, 240, 240),
            input_border=(180, 180, 180),
            input_text=(0, 0, 0),
            input_focus_border=(0, 100, 200),
            selection_bg=(0, 120, 215),
            hover_bg=(235, 235, 235),
            bar_fill=(170, 205, 240),
            linked_text=(200, 100, 0),
            option_text=(0, 80, 150),
            event_flash_bg=(0, 100, 200),
        )

    @classmethod
    def load_color_scheme_from_config(cls, config_path: Optional[str] = None) -> "ColorScheme":
        """Load colour overrides from a JSON file; defaults when missing or invalid."""
        if config_path and Path(config_path).exists():
            try:
                with open(config_path, "r") as f:
                    config = json.load(f)

                known = cls.__dataclass_fields__
                scheme_kwargs = {
                    key: tuple(value)
                    for key, value in config.items()
                    if key in known and isinstance(value, list) and len(value) >= 3
                }
                return cls(**scheme_kwargs)

            except (OSError, ValueError) as e:
                logger.warning(f"Failed to load color scheme from {config_path}: {e}")

        return cls()

    def contrast_ratio(self, foreground: RGB, background: RGB) -> float:
        """WCAG contrast ratio between two RGB colours."""
        fg = tuple(c / 255.0 for c in foreground[:3])
        bg = tuple(c / 255.0 for c in background[:3])
        return wcag_rgb(fg, bg)

    def validate_wcag_contrast(self, foreground: RGB, background: RGB, min_ratio: float = 4.5) -> bool:
        """True if foreground over background meets min_ratio (4.5 = AA normal text)."""
        return self.contrast_ratio(foreground, background) >= min_ratio

    def readable_text_on(self, background: RGB) -> RGB:
        """Pick whichever of the primary text colour, black or white reads best on background."""
        candidates = (self.text_primary, (0, 0, 0), (255, 255, 255))
        return max(candidates, key=lambda color: self.contrast_ratio(color, background))

    def get_color_dict(self) -> Dict[str, RGB]:
        """All colours as a name -> RGB dictionary."""
        return {
            name: getattr(self, name)
            for name in self.__dataclass_fields__
            if isinstance(getattr(self, name), tuple)
        }

    def save_to_json(self, config_path: str) -> None:
        """Write the colour dictionary as JSON."""
        json_dict = {k: list(v) for k, v in self.get_color_dict().items()}
        with open(config_path, "w") as f:
            json.dump(json_dict, f, indent=2, sort_keys=True)
        logger.info(f"Color scheme saved to {config_path}")
