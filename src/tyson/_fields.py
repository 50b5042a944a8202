"""
Field map resolution.

Turns a record type into an ordered table of property descriptors, applying
exclusion and explicit-name markers before falling back to the configured
case policy. The table also acts as the record's builder during decoding.
"""

import dataclasses
import functools
import inspect
import logging
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from typing import ClassVar

from ._casing import CasePolicy
from ._casing import convert_case
from ._errors import UnsupportedTypeError
from ._types import is_record_type
from ._types import strip_annotated
from ._types import zero_value

logger = logging.getLogger(__name__)

JSON_NAME_KEY = "json_name"
JSON_IGNORE_KEY = "json_ignore"


@dataclass(frozen=True)
class JsonIgnore:
    """Excludes a field from both encoding and decoding.

    Used as ``Annotated[T, JsonIgnore()]``.
    """


@dataclass(frozen=True)
class JsonPropertyName:
    """Overrides the JSON key of a field, whatever the case policy.

    Used as ``Annotated[T, JsonPropertyName("key")]``.
    """

    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str):
            raise TypeError("name must be a string")


def json_field(
    *, name: str | None = None, ignore: bool = False, **kwargs: Any
) -> Any:
    """
    Declares a dataclass field carrying JSON markers.

    Accepts every keyword of :func:`dataclasses.field`; ``name`` and
    ``ignore`` are stored in the field metadata.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    if name is not None:
        metadata[JSON_NAME_KEY] = name
    if ignore:
        metadata[JSON_IGNORE_KEY] = True
    return dataclasses.field(metadata=metadata, **kwargs)


@dataclass(frozen=True)
class PropertyDescriptor:
    """One field of a record and the JSON key it maps to."""

    source_name: str
    json_name: str
    field_type: Any
    excluded: bool = False
    default: Callable[[], Any] | None = None
    init: bool = True


@dataclass(frozen=True)
class FieldMap:
    """
    Resolved, ordered correspondence between a type's fields and JSON keys.

    Doubles as the builder for the type: :meth:`build` produces an instance
    from decoded values, filling in defaults for anything left out.
    """

    cls: type
    properties: tuple[PropertyDescriptor, ...]
    by_json_name: dict[str, PropertyDescriptor] = dataclasses.field(
        compare=False, repr=False
    )

    @property
    def included(self) -> tuple[PropertyDescriptor, ...]:
        return tuple(p for p in self.properties if not p.excluded)

    def lookup(self, json_name: str) -> PropertyDescriptor | None:
        return self.by_json_name.get(json_name)

    def build(self, values: dict[str, Any]) -> Any:
        """Constructs an instance from ``source_name -> value`` pairs."""
        if dataclasses.is_dataclass(self.cls):
            return self._build_dataclass(values)

        instance = self.cls()
        for prop in self.properties:
            if prop.source_name in values:
                setattr(instance, prop.source_name, values[prop.source_name])
            elif prop.default is None:
                zero = zero_value(prop.field_type)
                setattr(instance, prop.source_name, zero)
        return instance

    def _build_dataclass(self, values: dict[str, Any]) -> Any:
        kwargs: dict[str, Any] = {}
        late: dict[str, Any] = {}

        for prop in self.properties:
            if prop.source_name in values:
                value = values[prop.source_name]
            elif prop.default is None:
                value = zero_value(prop.field_type)
            else:
                continue

            if prop.init:
                kwargs[prop.source_name] = value
            else:
                late[prop.source_name] = value

        instance = self.cls(**kwargs)
        for name, value in late.items():
            # Works for frozen dataclasses too
            object.__setattr__(instance, name, value)
        return instance


def _markers(hint: Any, metadata: Any) -> tuple[bool, str | None]:
    """Collects ``(excluded, explicit_name)`` from metadata and Annotated."""
    excluded = bool(metadata.get(JSON_IGNORE_KEY, False))
    explicit = metadata.get(JSON_NAME_KEY)

    _, annotations = strip_annotated(hint)
    for marker in annotations:
        if isinstance(marker, JsonIgnore) or marker is JsonIgnore:
            excluded = True
        elif isinstance(marker, JsonPropertyName):
            explicit = marker.name
    return excluded, explicit


def _constant(value: Any) -> Callable[[], Any]:
    return lambda: value


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as e:
        msg = f"Cannot resolve type hints of {cls.__name__}: {e}"
        raise UnsupportedTypeError(msg) from e


def _dataclass_fields(
    cls: type, hints: dict[str, Any]
) -> list[tuple[str, Any, Any, Callable[[], Any] | None, bool]]:
    result = []
    for f in dataclasses.fields(cls):
        default: Callable[[], Any] | None = None
        if f.default is not dataclasses.MISSING:
            default = _constant(f.default)
        elif f.default_factory is not dataclasses.MISSING:
            default = f.default_factory
        hint = hints.get(f.name, f.type)
        result.append((f.name, hint, f.metadata, default, f.init))
    return result


def _annotated_fields(
    cls: type, hints: dict[str, Any]
) -> list[tuple[str, Any, Any, Callable[[], Any] | None, bool]]:
    result = []
    seen: set[str] = set()
    # Base classes first, so inherited fields keep their declaration order
    for klass in reversed(cls.__mro__):
        for name in inspect.get_annotations(klass):
            if name in seen:
                continue
            seen.add(name)
            hint = hints.get(name, Any)
            if typing.get_origin(hint) is ClassVar or hint is ClassVar:
                continue
            default = None
            if hasattr(cls, name):
                default = functools.partial(getattr, cls, name)
            result.append((name, hint, {}, default, True))
    return result


@functools.lru_cache(maxsize=None)
def resolve_fields(cls: type, case_policy: CasePolicy) -> FieldMap:
    """
    Resolves the field map of a record type for one case policy.

    Public fields are listed in declaration order. Excluded fields are kept
    in the table, flagged, and never looked up by JSON name. An explicit name
    always wins over the case policy.
    """
    if not is_record_type(cls):
        msg = f"Type {getattr(cls, '__name__', cls)!r} is not a record type"
        raise UnsupportedTypeError(msg)

    hints = _type_hints(cls)
    if dataclasses.is_dataclass(cls):
        raw_fields = _dataclass_fields(cls, hints)
    else:
        raw_fields = _annotated_fields(cls, hints)

    properties: list[PropertyDescriptor] = []
    by_json_name: dict[str, PropertyDescriptor] = {}
    for name, hint, metadata, default, init in raw_fields:
        if name.startswith("_"):
            continue

        excluded, explicit = _markers(hint, metadata)
        if explicit is not None:
            json_name = explicit
        else:
            json_name = convert_case(name, case_policy)
        prop = PropertyDescriptor(
            source_name=name,
            json_name=json_name,
            field_type=hint,
            excluded=excluded,
            default=default,
            init=init,
        )
        properties.append(prop)
        if excluded:
            continue

        if json_name in by_json_name:
            other = by_json_name[json_name].source_name
            msg = (
                f"Fields {other!r} and {name!r} of {cls.__name__} both map "
                f"to JSON key {json_name!r}"
            )
            raise UnsupportedTypeError(msg)
        by_json_name[json_name] = prop

    logger.debug(
        "Resolved %d fields (%d excluded) for %s under %s",
        len(properties),
        len(properties) - len(by_json_name),
        cls.__name__,
        case_policy.name,
    )
    return FieldMap(cls, tuple(properties), by_json_name)
