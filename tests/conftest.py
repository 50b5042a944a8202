"""
Pytest configuration and shared fixtures for tyson tests.

Provides the record types used across the suite and immutable test case
containers for table-driven tests.
"""

import datetime
import uuid
from dataclasses import dataclass
from dataclasses import field
from decimal import Decimal
from typing import Annotated
from typing import Any

import pytest

from tyson import CasePolicy
from tyson import JsonIgnore
from tyson import JsonPropertyName
from tyson import SerializerOptions


@dataclass(frozen=True)
class JsonTestCase:
    """
    Immutable container for JSON test case data.

    Holds test input, the target type and the expected result.
    """

    description: str
    input_data: str
    target: Any = Any
    expected_output: Any = None


@dataclass
class Easy:
    AEasyInt: int = 5
    AEasyString: str = "AA"
    AEasyBool: bool = True
    AEasyNull: int | None = None


@dataclass
class DictStruct:
    DPr: dict[int, dict[str, str]] = field(
        default_factory=lambda: {
            1: {"k1": "v1", "k2": "v2"},
            2: {"k1": "v2", "k2": "v1"},
        }
    )


@dataclass
class Inner:
    Dec: Decimal = Decimal("10.51")


@dataclass
class Everything:
    """Record exercising every field feature at once."""

    LInt: list[int] = field(default_factory=lambda: [1, 3, 5, 77])
    Ignored: Annotated[str, JsonIgnore()] = "not ignored"
    NotNamey: Annotated[float, JsonPropertyName("namey")] = 6.9
    InnerStruct: Inner = field(default_factory=Inner)
    GuidishceAaaa: uuid.UUID = uuid.UUID(
        "6f9619ff-8b86-d011-b42d-00cf4fc964ff"
    )
    DTi: datetime.datetime = datetime.datetime(2024, 1, 15, 10, 30)
    NullInt: int | None = None


@pytest.fixture
def snake_options() -> SerializerOptions:
    return SerializerOptions(case_policy=CasePolicy.SNAKE_CASE)


@pytest.fixture
def typed_json_cases() -> list[JsonTestCase]:
    """
    Provides documents paired with a target type and the expected value.

    Covers every primitive kind and the basic container shapes.
    """
    return [
        JsonTestCase("int", "42", int, 42),
        JsonTestCase("negative int", "-17", int, -17),
        JsonTestCase("float", "3.14", float, 3.14),
        JsonTestCase("float exponent", "1e-3", float, 0.001),
        JsonTestCase("bool", "true", bool, True),
        JsonTestCase("bool any case", "False", bool, False),
        JsonTestCase("string", '"hello"', str, "hello"),
        JsonTestCase("empty string", '""', str, ""),
        JsonTestCase("quoted null", '"null"', str, "null"),
        JsonTestCase("decimal", "10.51", Decimal, Decimal("10.51")),
        JsonTestCase(
            "uuid",
            '"6f9619ff-8b86-d011-b42d-00cf4fc964ff"',
            uuid.UUID,
            uuid.UUID("6f9619ff-8b86-d011-b42d-00cf4fc964ff"),
        ),
        JsonTestCase(
            "datetime",
            '"2024-01-15T10:30:00"',
            datetime.datetime,
            datetime.datetime(2024, 1, 15, 10, 30),
        ),
        JsonTestCase(
            "aware datetime",
            '"2024-01-15T10:30:00+02:00"',
            datetime.datetime,
            datetime.datetime(
                2024,
                1,
                15,
                10,
                30,
                tzinfo=datetime.timezone(datetime.timedelta(hours=2)),
            ),
        ),
        JsonTestCase(
            "date", '"2024-01-15"', datetime.date, datetime.date(2024, 1, 15)
        ),
        JsonTestCase("optional value", "7", int | None, 7),
        JsonTestCase("optional null", "null", int | None, None),
        JsonTestCase("list", "[1, 2, 3]", list[int], [1, 2, 3]),
        JsonTestCase("empty list", "[]", list[int], []),
        JsonTestCase("tuple", '[1, "a"]', tuple[int, str], (1, "a")),
        JsonTestCase("variadic tuple", "[1,2]", tuple[int, ...], (1, 2)),
        JsonTestCase("set", "[1,2,2]", set[int], {1, 2}),
        JsonTestCase("frozenset", "[3]", frozenset[int], frozenset({3})),
        JsonTestCase(
            "dict", '{"a": 1, "b": 2}', dict[str, int], {"a": 1, "b": 2}
        ),
        JsonTestCase("empty dict", "{}", dict[str, int], {}),
        JsonTestCase(
            "int keys",
            '{"1": "x", "2": "y"}',
            dict[int, str],
            {1: "x", 2: "y"},
        ),
    ]
