"""
Type model for type-directed decoding.

Classifies type hints into shapes (primitive, record, sequence, mapping,
dynamic), unwraps nullable and ``Annotated`` wrappers, and holds the fixed,
locale-invariant parsing rule for every primitive kind.
"""

import collections
import collections.abc
import dataclasses
import datetime
import decimal
import inspect
import math
import re
import struct
import types
import typing
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Annotated
from typing import Any
from typing import Union

PrimitiveParser = Callable[[str], Any]

_NONE_TYPE = type(None)


@dataclass(frozen=True)
class IntWidth:
    """Marks an ``int`` as a fixed-width, range-checked integer."""

    bits: int
    signed: bool = True

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        if self.signed:
            return (1 << (self.bits - 1)) - 1
        return (1 << self.bits) - 1


@dataclass(frozen=True)
class FloatWidth:
    """Marks a ``float`` with its storage width (32 or 64 bits)."""

    bits: int = 64


Int8 = Annotated[int, IntWidth(8)]
Int16 = Annotated[int, IntWidth(16)]
Int32 = Annotated[int, IntWidth(32)]
Int64 = Annotated[int, IntWidth(64)]
Int128 = Annotated[int, IntWidth(128)]
UInt8 = Annotated[int, IntWidth(8, signed=False)]
UInt16 = Annotated[int, IntWidth(16, signed=False)]
UInt32 = Annotated[int, IntWidth(32, signed=False)]
UInt64 = Annotated[int, IntWidth(64, signed=False)]
UInt128 = Annotated[int, IntWidth(128, signed=False)]
Float32 = Annotated[float, FloatWidth(32)]
Float64 = Annotated[float, FloatWidth(64)]


class Shape(Enum):
    """Structural category selecting the encode/decode strategy."""

    NULL = "null"
    PRIMITIVE = "primitive"
    RECORD = "record"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    DYNAMIC = "dynamic"


# Scalar runtime types written verbatim by the writer (bool is an int)
PRIMITIVE_TYPES: tuple[type, ...] = (
    str,
    bool,
    int,
    float,
    decimal.Decimal,
    uuid.UUID,
    datetime.datetime,
    datetime.date,
)

_MAPPING_ORIGINS = frozenset(
    {
        dict,
        collections.OrderedDict,
        collections.abc.Mapping,
        collections.abc.MutableMapping,
    }
)

_SEQUENCE_ORIGINS = frozenset(
    {
        list,
        tuple,
        set,
        frozenset,
        collections.abc.Sequence,
        collections.abc.MutableSequence,
        collections.abc.Set,
        collections.abc.MutableSet,
        collections.abc.Collection,
        collections.abc.Iterable,
    }
)

_SEQUENCE_FACTORIES: dict[Any, Callable[[list[Any]], Any]] = {
    tuple: tuple,
    set: set,
    collections.abc.MutableSet: set,
    frozenset: frozenset,
    collections.abc.Set: frozenset,
}

# ASCII digits only, surrounding whitespace tolerated
_INT_PATTERN = re.compile(r"\s*[+-]?[0-9]+\s*")
_FLOAT_PATTERN = re.compile(
    r"\s*[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?\s*"
)
_FLOAT_CONSTANTS = {
    "NaN": math.nan,
    "Infinity": math.inf,
    "-Infinity": -math.inf,
}


def strip_annotated(tp: Any) -> tuple[Any, tuple[Any, ...]]:
    """Splits ``Annotated[T, *meta]`` into ``(T, meta)``."""
    if typing.get_origin(tp) is Annotated:
        base, *metadata = typing.get_args(tp)
        return base, tuple(metadata)
    return tp, ()


def _is_union(tp: Any) -> bool:
    return typing.get_origin(tp) in (Union, types.UnionType)


def accepts_null(tp: Any) -> bool:
    """Returns True when a null literal is a legal value for ``tp``."""
    base, _ = strip_annotated(tp)
    if base in (Any, object, None, _NONE_TYPE):
        return True
    return _is_union(base) and _NONE_TYPE in typing.get_args(base)


def unwrap_optional(tp: Any) -> Any | None:
    """Returns ``T`` for a one-level nullable ``T | None``, else None."""
    base, _ = strip_annotated(tp)
    if not _is_union(base):
        return None
    members = [arg for arg in typing.get_args(base) if arg is not _NONE_TYPE]
    if len(members) == 1 and len(members) < len(typing.get_args(base)):
        return members[0]
    return None


def is_record_type(tp: Any) -> bool:
    """Returns True for dataclasses and classes with annotated attributes."""
    if not isinstance(tp, type) or tp in PRIMITIVE_TYPES:
        return False
    if dataclasses.is_dataclass(tp):
        return True
    if issubclass(tp, (collections.abc.Mapping, collections.abc.Iterable)):
        return False
    return any(
        not name.startswith("_")
        for klass in tp.__mro__
        for name in inspect.get_annotations(klass)
    )


def shape_of(tp: Any) -> Shape | None:
    """
    Classifies a target type hint by shape.

    Nullable wrappers must be unwrapped by the caller. Returns None for types
    outside the supported universe.
    """
    base, _ = strip_annotated(tp)
    if base in (Any, object):
        return Shape.DYNAMIC
    if base in (None, _NONE_TYPE):
        return Shape.NULL
    if primitive_parser(tp) is not None:
        return Shape.PRIMITIVE

    origin = typing.get_origin(base) or base
    if origin in _MAPPING_ORIGINS:
        return Shape.MAPPING
    if origin in _SEQUENCE_ORIGINS:
        return Shape.SEQUENCE
    if is_record_type(base):
        return Shape.RECORD
    return None


def mapping_types(tp: Any) -> tuple[Any, Any]:
    """Returns the ``(key, value)`` type hints of a mapping type."""
    base, _ = strip_annotated(tp)
    args = typing.get_args(base)
    if len(args) == 2:
        return args[0], args[1]
    return Any, Any


def mapping_factory(tp: Any) -> Callable[[], Any]:
    base, _ = strip_annotated(tp)
    origin = typing.get_origin(base) or base
    if origin is collections.OrderedDict:
        return collections.OrderedDict
    return dict


def sequence_item_type(tp: Any, index: int) -> Any:
    """Returns the element type hint for position ``index`` of a sequence."""
    base, _ = strip_annotated(tp)
    args = typing.get_args(base)
    if not args:
        return Any
    origin = typing.get_origin(base)
    if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
        # Fixed-length tuple: one type per position
        return args[index] if index < len(args) else Any
    return args[0]


def sequence_factory(tp: Any) -> Callable[[list[Any]], Any]:
    """Returns the constructor turning decoded items into the target type."""
    base, _ = strip_annotated(tp)
    origin = typing.get_origin(base) or base
    return _SEQUENCE_FACTORIES.get(origin, list)


def _parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"String {text!r} is not a valid boolean")


def _parse_int(text: str, width: IntWidth | None = None) -> int:
    if not _INT_PATTERN.fullmatch(text):
        raise ValueError(f"Invalid integer literal {text!r}")
    value = int(text)
    if width is not None and not width.min_value <= value <= width.max_value:
        kind = f"{'' if width.signed else 'u'}int{width.bits}"
        raise OverflowError(f"Value {value} is out of range for {kind}")
    return value


def _parse_float(text: str, width: FloatWidth | None = None) -> float:
    stripped = text.strip()
    if stripped in _FLOAT_CONSTANTS:
        value = _FLOAT_CONSTANTS[stripped]
    elif _FLOAT_PATTERN.fullmatch(text):
        value = float(stripped)
    else:
        raise ValueError(f"Invalid number literal {text!r}")

    if width is not None and width.bits == 32 and math.isfinite(value):
        try:
            return struct.unpack("f", struct.pack("f", value))[0]
        except OverflowError:
            return math.copysign(math.inf, value)
    return value


def _parse_decimal(text: str) -> decimal.Decimal:
    if text.strip() in _FLOAT_CONSTANTS:
        return decimal.Decimal(text.strip())
    if not _FLOAT_PATTERN.fullmatch(text):
        raise ValueError(f"Invalid decimal literal {text!r}")
    return decimal.Decimal(text.strip())


def _parse_uuid(text: str) -> uuid.UUID:
    return uuid.UUID(text.strip())


def _parse_datetime(text: str) -> datetime.datetime:
    return datetime.datetime.fromisoformat(text.strip())


def _parse_date(text: str) -> datetime.date:
    return datetime.date.fromisoformat(text.strip())


def _parse_str(text: str) -> str:
    return text


_PRIMITIVE_PARSERS: dict[Any, PrimitiveParser] = {
    str: _parse_str,
    bool: _parse_bool,
    int: _parse_int,
    float: _parse_float,
    decimal.Decimal: _parse_decimal,
    uuid.UUID: _parse_uuid,
    datetime.datetime: _parse_datetime,
    datetime.date: _parse_date,
}


def primitive_parser(tp: Any) -> PrimitiveParser | None:
    """Looks up the parsing rule for a primitive target, honoring widths."""
    base, metadata = strip_annotated(tp)
    try:
        parser = _PRIMITIVE_PARSERS.get(base)
    except TypeError:
        # Unhashable hint, e.g. a parameterized generic with list arguments
        return None
    if parser is None:
        return None

    for marker in metadata:
        if base is int and isinstance(marker, IntWidth):
            return lambda text: _parse_int(text, marker)
        if base is float and isinstance(marker, FloatWidth):
            return lambda text: _parse_float(text, marker)
    return parser


def infer_literal(text: str) -> Any:
    """Decodes an unquoted literal with no target type to guide it."""
    stripped = text.strip()
    if stripped == "null":
        return None
    if stripped in ("true", "false"):
        return stripped == "true"
    if _INT_PATTERN.fullmatch(text):
        return int(stripped)
    return _parse_float(text)


def zero_value(tp: Any) -> Any:
    """
    Returns the default-initialized value of ``tp``.

    Used for record fields a document leaves out when the field declares no
    default of its own. Records have no zero value and yield None.
    """
    if accepts_null(tp):
        return None
    base, _ = strip_annotated(tp)
    shape = shape_of(base)
    if shape is Shape.PRIMITIVE:
        zeros: dict[Any, Any] = {
            str: "",
            bool: False,
            int: 0,
            float: 0.0,
            decimal.Decimal: decimal.Decimal(0),
            uuid.UUID: uuid.UUID(int=0),
            datetime.datetime: datetime.datetime.min,
            datetime.date: datetime.date.min,
        }
        return zeros[base]
    if shape is Shape.MAPPING:
        return mapping_factory(base)()
    if shape is Shape.SEQUENCE:
        return sequence_factory(base)([])
    return None


__all__ = [
    "Float32",
    "Float64",
    "FloatWidth",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Int128",
    "IntWidth",
    "PRIMITIVE_TYPES",
    "Shape",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "UInt128",
    "accepts_null",
    "infer_literal",
    "is_record_type",
    "mapping_factory",
    "mapping_types",
    "primitive_parser",
    "sequence_factory",
    "sequence_item_type",
    "shape_of",
    "strip_annotated",
    "unwrap_optional",
    "zero_value",
]
