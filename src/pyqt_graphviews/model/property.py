"""In-memory property cell."""

import copy
import dataclasses
import logging
from collections import Counter
from typing import Any, Callable, Optional

from pyqt_graphviews.core.subscriptions import EventEmitter, Subscription
from pyqt_graphviews.protocols.graph_contracts import PROPERTY_TYPES, PropertyCell, PropertySchema

logger = logging.getLogger(__name__)

# Preset used when neither the caller nor the schema provides one
_TYPE_DEFAULTS = {"number": 0.0, "string": "", "boolean": False}


class Property(PropertyCell):
    """
    Typed value holder with a schema and two notification channels.

    ``"value"`` fires after every write or trigger with the new value.
    ``"change"`` fires when the schema or the link state changes.

    Vector values are plain lists; writers replace the whole list via
    set_value() and readers index into it.
    """

    def __init__(
        self,
        name: str,
        type: str = "number",
        preset: Any = None,
        schema: Optional[PropertySchema] = None,
        is_input: bool = True,
    ):
        if type not in PROPERTY_TYPES:
            raise ValueError(f"Unknown property type {type!r}, expected one of {PROPERTY_TYPES}")

        self.name = name
        self._type = type
        # callers may pass one schema template to several cells
        self._schema = dataclasses.replace(schema) if schema is not None else PropertySchema()
        if type == "event":
            self._schema.event = True
        if preset is not None:
            self._schema.preset = preset
        elif self._schema.preset is None:
            self._schema.preset = _TYPE_DEFAULTS.get(type)
        self._is_input = is_input
        self._value = copy.copy(self._schema.preset)
        self._changed = False
        self._in_links: Counter = Counter()
        self._out_links: Counter = Counter()
        self._emitter = EventEmitter()

    def __str__(self) -> str:
        return f"{self.name} [{self._type}]"

    def __repr__(self) -> str:
        return f"Property({self.name!r}, {self._type!r}, value={self._value!r})"

    # --- PropertyCell -----------------------------------------------------

    def on(self, event_type: str, callback: Callable[[Any], None]) -> Subscription:
        return self._emitter.on(event_type, callback)

    @property
    def type(self) -> str:
        return self._type

    @property
    def schema(self) -> PropertySchema:
        return self._schema

    @property
    def value(self) -> Any:
        return self._value

    @property
    def changed(self) -> bool:
        return self._changed

    def set_value(self, value: Any) -> None:
        self._value = value
        self._announce()

    def trigger(self) -> None:
        self._announce()

    def reset(self) -> None:
        logger.debug(f"Resetting {self} to preset {self._schema.preset!r}")
        self.set_value(copy.copy(self._schema.preset))

    def is_input(self) -> bool:
        return self._is_input

    def has_in_links(self, index: Optional[int] = None) -> bool:
        return self._has_links(self._in_links, index)

    def has_out_links(self, index: Optional[int] = None) -> bool:
        return self._has_links(self._out_links, index)

    def validated_value(self) -> Any:
        value = self._value
        options = self._schema.options
        if options:
            try:
                index = int(value)
            except (TypeError, ValueError):
                index = 0
            return min(max(index, 0), len(options) - 1)
        if self._type == "number" and isinstance(value, (int, float)):
            if self._schema.min is not None:
                value = max(value, self._schema.min)
            if self._schema.max is not None:
                value = min(value, self._schema.max)
        return value

    def option_text(self) -> str:
        options = self._schema.options
        if not options:
            return ""
        return options[self.validated_value()]

    # --- Metadata ---------------------------------------------------------

    def set_schema(self, schema: PropertySchema) -> None:
        self._schema = schema
        self._emitter.emit("change", self)

    def add_in_link(self, index: Optional[int] = None) -> None:
        self._in_links[index] += 1
        self._emitter.emit("change", self)

    def remove_in_link(self, index: Optional[int] = None) -> None:
        self._remove_link(self._in_links, index)

    def add_out_link(self, index: Optional[int] = None) -> None:
        self._out_links[index] += 1
        self._emitter.emit("change", self)

    def remove_out_link(self, index: Optional[int] = None) -> None:
        self._remove_link(self._out_links, index)

    # --- Internals --------------------------------------------------------

    def _announce(self) -> None:
        self._changed = True
        try:
            self._emitter.emit("value", self._value)
        finally:
            self._changed = False

    def _remove_link(self, links: Counter, index: Optional[int]) -> None:
        if links[index] <= 0:
            raise ValueError(f"{self} has no link at index {index!r} to remove")
        links[index] -= 1
        if links[index] == 0:
            del links[index]
        self._emitter.emit("change", self)

    @staticmethod
    def _has_links(links: Counter, index: Optional[int]) -> bool:
        # whole-property links count for every index
        if links[None] > 0:
            return True
        if index is None:
            return any(count > 0 for count in links.values())
        return links[index] > 0
