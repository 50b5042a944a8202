"""Low-level text emission for JSON output."""

import datetime
import decimal
import math
import uuid
from dataclasses import dataclass
from typing import Any

from ._errors import ShapeMismatchError
from ._errors import UnsupportedTypeError
from ._options import DEFAULT_OPTIONS
from ._options import SerializerOptions

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

# Control characters without a short escape
_CONTROL_LIMIT = 0x20


def escape_string(s: str) -> str:
    """Escapes ``s`` for use between double quotes."""
    result = []
    for char in s:
        if char in _ESCAPES:
            result.append(_ESCAPES[char])
        elif ord(char) < _CONTROL_LIMIT:
            result.append(f"\\u{ord(char):04x}")
        else:
            result.append(char)
    return "".join(result)


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return repr(value)


def primitive_text(value: Any) -> str:  # noqa: PLR0911
    """Returns the invariant, unquoted string form of a primitive value."""
    if value is True:
        return "true"
    elif value is False:
        return "false"
    elif isinstance(value, str):
        return value
    elif isinstance(value, int):
        return str(int(value))
    elif isinstance(value, float):
        return _format_float(value)
    elif isinstance(value, decimal.Decimal):
        return str(value)
    elif isinstance(value, datetime.date):
        # Also covers datetime, a date subclass
        return value.isoformat()
    elif isinstance(value, uuid.UUID):
        return str(value)
    else:
        msg = f"Object of type {type(value).__name__} is not a primitive"
        raise UnsupportedTypeError(msg)


def format_primitive(value: Any) -> str:
    """Formats a primitive as JSON, quoting strings, timestamps and UUIDs."""
    text = primitive_text(value)
    # UUIDs are quoted too, as json.dumps-compatible output requires
    if isinstance(value, str | datetime.date | uuid.UUID):
        return f'"{escape_string(text)}"'
    return text


@dataclass
class _Frame:
    """An open object or array and how many items it holds so far."""

    is_array: bool
    count: int = 0


class JsonWriter:
    """
    Append-only JSON text buffer with indentation state.

    Exposes structural emission operations; the caller is responsible for
    calling :meth:`write_comma` between items. In pretty-print mode every
    property and array element starts on its own line, indented by
    ``indent_size`` spaces per nesting level.
    """

    def __init__(self, options: SerializerOptions = DEFAULT_OPTIONS) -> None:
        self.options = options
        self._parts: list[str] = []
        self._frames: list[_Frame] = []
        self._level = 0

    @property
    def pretty(self) -> bool:
        return self.options.pretty_print

    def _pad(self) -> None:
        self._parts.append(" " * (self.options.indent_size * self._level))

    def _begin_item(self) -> None:
        if not self._frames:
            return
        frame = self._frames[-1]
        if self.pretty:
            if frame.count == 0:
                self._parts.append("\n")
            self._pad()
        frame.count += 1

    def _before_value(self) -> None:
        # Values inside objects follow their property name on the same line
        if self._frames and self._frames[-1].is_array:
            self._begin_item()

    def _open(self, bracket: str, is_array: bool) -> None:
        self._before_value()
        self._parts.append(bracket)
        self._frames.append(_Frame(is_array))
        self._level += 1

    def _close(self, bracket: str, is_array: bool) -> None:
        if not self._frames or self._frames[-1].is_array != is_array:
            raise ShapeMismatchError(f"Unbalanced '{bracket}' in writer")
        frame = self._frames.pop()
        self._level -= 1
        # Empty containers stay {} or [], as json.dumps(indent=n) writes them
        if self.pretty and frame.count:
            self._parts.append("\n")
            self._pad()
        self._parts.append(bracket)

    def write_start_object(self) -> None:
        self._open("{", is_array=False)

    def write_end_object(self) -> None:
        self._close("}", is_array=False)

    def write_start_array(self) -> None:
        self._open("[", is_array=True)

    def write_end_array(self) -> None:
        self._close("]", is_array=True)

    def write_property_name(self, name: str) -> None:
        self._begin_item()
        separator = ": " if self.pretty else ":"
        self._parts.append(f'"{escape_string(name)}"{separator}')

    def write_primitive(self, value: Any) -> None:
        self._before_value()
        self._parts.append(format_primitive(value))

    def write_null(self) -> None:
        self._before_value()
        self._parts.append("null")

    def write_comma(self) -> None:
        self._parts.append(",\n" if self.pretty else ",")

    def get_json(self) -> str:
        return "".join(self._parts)
