"""Base configuration for graph view widgets.

Applications override tuning values by installing their own ViewConfig.
Widgets read the active config at use time, never at import time.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ViewConfig:
    """Tuning knobs shared by the tree and property field widgets.

    Attributes:
        toggle_margin_px: Width of the expand/collapse hit area at a row's left edge
        drag_threshold: L1 pointer distance that turns a press into a drag
        default_precision: Digits shown for numbers without a schema precision
        default_edit_precision: Digits seeded into the inline editor
        default_speed: Drag speed when neither schema speed nor bounds are known
        precise_factor: Speed multiplier while the precise modifier (Ctrl) is held
        coarse_factor: Speed multiplier while the coarse modifier (Shift) is held
        flash_delay_ms: Delay before an event button's flash state is cleared
        root_label: Label used for the top-level graph
    """

    toggle_margin_px: int = 30
    drag_threshold: float = 2
    default_precision: int = 2
    default_edit_precision: int = 5
    default_speed: float = 0.1
    precise_factor: float = 0.1
    coarse_factor: float = 10
    flash_delay_ms: int = 0
    root_label: str = "System"


# Global config instance (set by application)
_view_config: Optional[ViewConfig] = None


def set_view_config(config: Optional[ViewConfig]) -> None:
    """Install the global view configuration. ``None`` restores defaults."""
    global _view_config
    _view_config = config


def get_view_config() -> ViewConfig:
    """Return the installed ViewConfig, or a default one if none is set."""
    if _view_config is None:
        return ViewConfig()
    return _view_config
