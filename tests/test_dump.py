"""
JSON encoding functionality tests.

Validates serialization of records, mappings and sequences, naming policies,
null suppression, pretty printing and proper handling of every primitive
kind.
"""

import datetime
import importlib
import json
import uuid
from dataclasses import dataclass
from decimal import Decimal
from io import StringIO
from typing import Annotated

import pytest

import tyson
from tyson import _profiling

from .conftest import DictStruct
from .conftest import Easy
from .conftest import Everything


def test_dump() -> None:
    """
    Validates dump to file-like object.
    """
    sio = StringIO()
    tyson.dump(Easy(), sio)
    assert sio.getvalue() == tyson.dumps(Easy())


def test_dump_requires_write() -> None:
    with pytest.raises(TypeError):
        tyson.dump({}, object())  # type: ignore[arg-type]


def test_dumps() -> None:
    """
    Validates dumps to string.
    """
    assert tyson.dumps({}) == "{}"
    assert tyson.dumps([]) == "[]"
    assert tyson.dumps(None) == "null"


def test_int_sequence() -> None:
    assert tyson.serialize([1, 3, 5, 77]) == "[1,3,5,77]"


def test_record_camel_case() -> None:
    """
    Validates record keys follow the default camel case policy.
    """
    assert tyson.serialize(Easy()) == (
        '{"aEasyInt":5,"aEasyString":"AA","aEasyBool":true,"aEasyNull":null}'
    )


def test_record_snake_case(snake_options: tyson.SerializerOptions) -> None:
    """
    Validates record keys under the snake case policy.
    """
    expected = (
        '{"a_easy_int":5,"a_easy_string":"AA",'
        '"a_easy_bool":true,"a_easy_null":null}'
    )
    assert tyson.serialize(Easy(), snake_options) == expected


def test_ignore_null_values() -> None:
    """
    Validates null record fields are dropped when ignore_null_values is set.
    """
    options = tyson.SerializerOptions(
        case_policy=tyson.CasePolicy.SNAKE_CASE, ignore_null_values=True
    )
    expected = '{"a_easy_int":5,"a_easy_string":"AA","a_easy_bool":true}'
    assert tyson.serialize(Easy(), options) == expected


def test_ignore_null_values_keeps_mapping_entries() -> None:
    """
    Validates null suppression applies to record fields only.
    """
    text = tyson.dumps({"a": None, "b": [None]}, ignore_null_values=True)
    assert text == '{"a":null,"b":[null]}'


def test_pretty_print() -> None:
    """
    Validates pretty printing with a custom indent size.
    """
    expected = (
        "{\n"
        '  "aEasyInt": 5,\n'
        '  "aEasyString": "AA",\n'
        '  "aEasyBool": true,\n'
        '  "aEasyNull": null\n'
        "}"
    )
    assert tyson.dumps(Easy(), pretty_print=True, indent_size=2) == expected


def test_pretty_print_matches_stdlib() -> None:
    """
    Validates pretty output agrees with json.dumps for plain containers.
    """
    data = {"a": [1, {"b": []}, {}], "c": "x", "d": {"e": [True, None]}}
    for indent in (0, 2, 4):
        text = tyson.dumps(data, pretty_print=True, indent_size=indent)
        assert text == json.dumps(data, indent=indent)


def test_everything_record() -> None:
    """
    Validates exclusion, explicit names and nested records together.
    """
    expected = (
        '{"lInt":[1,3,5,77],"namey":6.9,"innerStruct":{"dec":10.51},'
        '"guidishceAaaa":"6f9619ff-8b86-d011-b42d-00cf4fc964ff",'
        '"dTi":"2024-01-15T10:30:00","nullInt":null}'
    )
    text = tyson.serialize(Everything())
    assert text == expected
    assert "ignored" not in text


def test_nested_mapping_with_int_keys() -> None:
    assert tyson.serialize(DictStruct()) == (
        '{"dPr":{"1":{"k1":"v1","k2":"v2"},"2":{"k1":"v2","k2":"v1"}}}'
    )


def test_encode_primitive_keys() -> None:
    """
    Validates non-string mapping keys are written in their string form.
    """
    assert tyson.dumps({True: 1, 2: "x"}) == '{"true":1,"2":"x"}'
    assert tyson.dumps({1.5: 0, Decimal("2.50"): 1}) == '{"1.5":0,"2.50":1}'
    key = uuid.UUID(int=1)
    assert tyson.dumps({key: 1}) == f'{{"{key}":1}}'


def test_encode_iterables() -> None:
    """
    Validates tuples, sets and generators are written as arrays.
    """
    assert tyson.dumps((1, 2)) == "[1,2]"
    assert tyson.dumps({3}) == "[3]"
    assert tyson.dumps(frozenset()) == "[]"
    assert tyson.dumps(i * i for i in range(3)) == "[0,1,4]"


def test_encode_primitives() -> None:
    """
    Validates the text form of every primitive kind.
    """
    assert tyson.dumps(True) == "true"
    assert tyson.dumps(-7) == "-7"
    assert tyson.dumps(0.1) == "0.1"
    assert tyson.dumps(1e100) == "1e+100"
    assert tyson.dumps(float("nan")) == "NaN"
    assert tyson.dumps(float("-inf")) == "-Infinity"
    assert tyson.dumps(Decimal("10.510")) == "10.510"
    assert tyson.dumps(datetime.date(2024, 1, 15)) == '"2024-01-15"'
    assert tyson.dumps(uuid.UUID(int=0)) == (
        '"00000000-0000-0000-0000-000000000000"'
    )


def test_encode_string_escapes() -> None:
    """
    Validates strings are escaped like the standard library does.
    """
    for value in ['a"b', "back\\slash", "line\nbreak\t", "\x01\x1f", ""]:
        assert tyson.dumps(value) == json.dumps(value)
    assert tyson.dumps("é😀") == '"é😀"'


def test_output_is_valid_json() -> None:
    """
    Validates record output parses with the standard library.
    """
    result = json.loads(tyson.dumps(Everything(), pretty_print=True))
    assert result["lInt"] == [1, 3, 5, 77]
    assert result["namey"] == 6.9
    assert result["innerStruct"] == {"dec": 10.51}
    assert result["nullInt"] is None


def test_encode_plain_annotated_class() -> None:
    """
    Validates classes that are not dataclasses encode their annotated fields.
    """

    class Base:
        Id: int = 1

    class Child(Base):
        Name: str
        _secret: str = "hidden"

        def __init__(self) -> None:
            self.Name = "child"

    assert tyson.dumps(Child()) == '{"id":1,"name":"child"}'


def test_encode_json_field_metadata() -> None:
    """
    Validates markers declared through json_field.
    """

    @dataclass(frozen=True)
    class Tagged:
        Value: int = tyson.json_field(name="v", default=1)
        Cache: dict[str, int] = tyson.json_field(ignore=True, default=None)

    assert tyson.dumps(Tagged()) == '{"v":1}'


def test_unsupported_values() -> None:
    with pytest.raises(tyson.UnsupportedTypeError):
        tyson.dumps(b"bytes")
    with pytest.raises(tyson.UnsupportedTypeError):
        tyson.dumps([1j])


def test_hot_path_stats() -> None:
    """
    Validates profiling statistics are empty unless profiling is enabled.
    """
    tyson.clear_hot_path_stats()
    tyson.dumps([1, 2, 3])
    stats = tyson.get_hot_path_stats()
    if _profiling.PROFILE_HOT_PATHS:
        assert stats["serialize"].call_count == 1
    else:
        assert stats == {}


def test_hot_path_stats_enabled(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Validates profiling records calls and items when TYSON_PROFILE is set.
    """
    monkeypatch.setenv("TYSON_PROFILE", "1")
    profiling = importlib.reload(_profiling)
    try:
        assert profiling.PROFILE_HOT_PATHS
        with profiling.ProfileContext("tokenize", 7):
            pass
        with profiling.ProfileContext("tokenize", 3):
            pass

        entry = profiling.get_hot_path_stats()["tokenize"]
        assert entry.function_name == "tokenize"
        assert entry.call_count == 2
        assert entry.items_processed == 10
        assert entry.total_time_ns >= 0

        profiling.clear_hot_path_stats()
        assert profiling.get_hot_path_stats() == {}
    finally:
        monkeypatch.undo()
        importlib.reload(profiling)


@dataclass
class Secretive:
    Name: str = "n"
    Token: Annotated[str | None, tyson.JsonIgnore()] = None


@pytest.mark.parametrize("ignore_null_values", [False, True])
@pytest.mark.parametrize("token", [None, "t"])
def test_excluded_field_regardless_of_null_setting(
    ignore_null_values: bool, token: str | None
) -> None:
    """
    Validates an excluded field is never written, null or not.
    """
    text = tyson.dumps(
        Secretive(Token=token), ignore_null_values=ignore_null_values
    )
    assert text == '{"name":"n"}'

    result = tyson.deserialize('{"name":"m","token":"x"}', Secretive)
    assert result == Secretive("m", None)
