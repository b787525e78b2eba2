"""
Formatting, parsing and drag arithmetic for property values.

Pure functions with no Qt dependency. PropertyField delegates every
value transformation here so the numeric rules can be tested directly.
"""

import logging
import math
import re
from decimal import Decimal
from typing import Any, Optional, TYPE_CHECKING

from pyqt_graphviews.protocols.view_config import get_view_config

if TYPE_CHECKING:
    from pyqt_graphviews.protocols.graph_contracts import PropertySchema

logger = logging.getLogger(__name__)

# Leading float literal, same leniency as a prefix parse ("12abc" -> 12)
_STEP_TOLERANCE = 1e-9

_FLOAT_PREFIX = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")


def is_finite(value: Any) -> bool:
    try:
        return math.isfinite(value)
    except TypeError:
        return False


def format_non_finite(value: float) -> str:
    return "-inf" if value == -math.inf else "inf"


def format_number(value: float, precision: int) -> str:
    """Fixed-point text for finite numbers, ``inf``/``-inf`` otherwise."""
    if not is_finite(value):
        return format_non_finite(value)
    return f"{value:.{precision}f}"


def scale_limit(value: float, min_value: float, max_value: float,
                target_min: float, target_max: float) -> float:
    """Linearly map value from [min, max] to [target_min, target_max], clamped."""
    span = max_value - min_value
    if span == 0:
        return target_min
    scaled = target_min + (value - min_value) / span * (target_max - target_min)
    low, high = min(target_min, target_max), max(target_min, target_max)
    return min(max(scaled, low), high)


def has_bar(schema: "PropertySchema") -> bool:
    """A proportional bar needs bounds, the bar flag and no option list."""
    return (
        not schema.options
        and schema.min is not None
        and schema.max is not None
        and bool(schema.bar)
    )


def bar_percent(value: Any, schema: "PropertySchema") -> float:
    """Fill percentage of the bar indicator; 0 for non-finite values."""
    if not is_finite(value):
        return 0.0
    return scale_limit(value, schema.min, schema.max, 0.0, 100.0)


def display_text(cell_type: str, value: Any, schema: "PropertySchema",
                 option_text: Optional[str] = None) -> str:
    """Text shown by an idle property field."""
    if cell_type == "number":
        if schema.options:
            return option_text or ""
        precision = schema.precision
        if precision is None:
            precision = get_view_config().default_precision
        return format_number(value, precision)

    if cell_type == "boolean":
        return "true" if value else "false"

    if cell_type == "string":
        return "" if value is None else value

    if cell_type == "object":
        return str(value)

    logger.debug(f"No display format for property type {cell_type!r}")
    return ""


def edit_text(cell_type: str, value: Any, schema: "PropertySchema") -> str:
    """Text seeded into the inline editor."""
    if cell_type == "number":
        precision = schema.precision
        if precision is None:
            precision = get_view_config().default_edit_precision
        return format_number(value, precision)
    return "" if value is None else str(value)


def parse_float(text: str) -> float:
    """Parse the leading float literal of text. Invalid input yields 0.

    Literals too large for a float (``1e999``) parse to +/-infinity.
    """
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        return 0.0
    return float(match.group(1))


def round_to_precision(value: float, precision: int) -> float:
    """Round to precision digits, halves rounding up."""
    factor = 10 ** precision
    return math.floor(value * factor + 0.5) / factor


def clamp(value: float, schema: "PropertySchema") -> float:
    if schema.min is not None:
        value = max(value, schema.min)
    if schema.max is not None:
        value = min(value, schema.max)
    return value


def parse_edit_text(cell_type: str, text: str, schema: "PropertySchema") -> Any:
    """Convert committed editor text into a value for the cell.

    Numbers: any case of ``inf`` gives +/-infinity (sign from a leading minus),
    otherwise a lenient float parse defaulting to 0, rounded to the schema
    precision and clamped to the schema bounds. Other types pass text through.
    """
    if cell_type != "number":
        return text

    if "inf" in text.lower():
        return -math.inf if text.lstrip().startswith("-") else math.inf

    value = parse_float(text)
    if schema.precision is not None and is_finite(value):
        value = round_to_precision(value, schema.precision)
    return clamp(value, schema)


def exceeds_drag_threshold(dx: float, dy: float, threshold: Optional[float] = None) -> bool:
    """True once the L1 distance from the press point passes the threshold."""
    if threshold is None:
        threshold = get_view_config().drag_threshold
    return abs(dx) + abs(dy) > threshold


def drag_speed(schema: "PropertySchema", width: float,
               precise: bool = False, coarse: bool = False) -> float:
    """Value units per pixel of pointer travel."""
    config = get_view_config()
    speed = config.default_speed
    if schema.speed:
        speed = schema.speed
    elif schema.min is not None and schema.max is not None and width > 0:
        speed = (schema.max - schema.min) / width

    if precise:
        speed *= config.precise_factor
    if coarse:
        speed *= config.coarse_factor
    return speed


def drag_value(baseline: float, dx: float, dy: float, speed: float,
               schema: "PropertySchema") -> float:
    """Value for a drag offset: rightwards and upwards increase the value.

    The raw value is floored to a multiple of step, then clamped to min and max.
    """
    value = baseline + (dx - dy) * speed
    if schema.step and is_finite(value):
        value = snap_to_step(value, schema.step)
    return clamp(value, schema)


def snap_to_step(value: float, step: float) -> float:
    """Floor value to a multiple of step.

    Quotients within float noise of a whole number count as that number, so
    0.7 with step 0.1 stays 0.7. The result is rounded to the step's decimals.
    """
    quotient = value / step
    nearest = round(quotient)
    if math.isclose(quotient, nearest, rel_tol=0.0, abs_tol=_STEP_TOLERANCE):
        multiple = nearest
    else:
        multiple = math.floor(quotient)
    return round(multiple * step, _decimal_places(step))


def _decimal_places(step: float) -> int:
    exponent = Decimal(repr(step)).as_tuple().exponent
    return max(-exponent, 0)
