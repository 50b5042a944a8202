"""
Test data generators for serialization benchmarks.

Creates typed object graphs and plain JSON payloads for performance testing:
- Records of different sizes (single record, order with many line items)
- Plain containers of mixed primitive values
- String-heavy content with escape sequences
"""

import datetime
import json
import random
import string
import uuid
from dataclasses import dataclass
from dataclasses import field
from decimal import Decimal
from typing import Any

# Constants for random data generation
_INT_TYPE = 1
_FLOAT_TYPE = 2
_STRING_TYPE = 3
_BOOL_TYPE = 4
_NULL_TYPE = 5
_ESCAPE_PROBABILITY = 0.3


@dataclass
class Address:
    Street: str = ""
    City: str = ""
    Zip: str = ""
    Country: str = "US"


@dataclass
class Customer:
    Id: int = 0
    Name: str = ""
    Email: str = ""
    Active: bool = True
    Balance: float = 0.0
    ShippingAddress: Address | None = None


@dataclass
class LineItem:
    Sku: str = ""
    Quantity: int = 0
    Price: Decimal = Decimal(0)
    Note: str | None = None


@dataclass
class Order:
    OrderId: uuid.UUID = field(default_factory=uuid.uuid4)
    PlacedAt: datetime.datetime = datetime.datetime(2024, 1, 15, 10, 30)
    Buyer: Customer = field(default_factory=Customer)
    Items: list[LineItem] = field(default_factory=list)
    Totals: dict[str, float] = field(default_factory=dict)


def generate_record(data_type: str) -> tuple[Any, type]:
    """Generates a record instance and its type for the specified size."""
    generators = {
        "small_record": _generate_small_record,
        "large_record": _generate_large_record,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return generators[data_type]()


def generate_test_data(data_type: str) -> str:
    """Generates plain JSON test data based on specified type."""
    generators = {
        "mixed_array": _generate_mixed_array,
        "nested_structure": _generate_nested_structure,
        "string_heavy": _generate_string_heavy,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return json.dumps(generators[data_type]())


def to_plain(value: Any) -> Any:
    """Converts a record graph into JSON-compatible plain containers."""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, datetime.date):
        return value.isoformat()
    if isinstance(value, list):
        return [to_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: to_plain(item) for key, item in value.items()}
    if hasattr(value, "__dataclass_fields__"):
        return {
            name: to_plain(getattr(value, name))
            for name in value.__dataclass_fields__
        }
    return value


def _generate_customer() -> Customer:
    return Customer(
        Id=random.randint(1000000, 9999999),
        Name=f"{_random_string(8)} {_random_string(10)}",
        Email=f"{_random_string(8)}@{_random_string(6)}.com",
        Active=random.choice([True, False]),
        Balance=round(random.uniform(0, 10000), 2),
        ShippingAddress=Address(
            Street=f"{random.randint(1, 9999)} {_random_string(8)} St",
            City=_random_string(12),
            Zip=f"{random.randint(10000, 99999)}",
        ),
    )


def _generate_small_record() -> tuple[Any, type]:
    """Generates a single customer record (< 1KB)."""
    return _generate_customer(), Customer


def _generate_large_record() -> tuple[Any, type]:
    """Generates an order with many line items (> 10KB)."""
    items = [
        LineItem(
            Sku=f"SKU-{i:06d}",
            Quantity=random.randint(1, 20),
            Price=Decimal(f"{random.uniform(1.0, 1000.0):.2f}"),
            Note=random.choice([None, _random_string(20)]),
        )
        for i in range(100)
    ]
    order = Order(
        Buyer=_generate_customer(),
        Items=items,
        Totals={"net": 1234.5, "tax": 98.76, "shipping": 5.0},
    )
    return order, Order


def _generate_mixed_array() -> list[Any]:
    """Generates a large array with mixed data types."""
    array: list[Any] = []

    for i in range(200):
        choice = random.randint(1, 6)
        if choice == _INT_TYPE:
            array.append(random.randint(-1000, 1000))
        elif choice == _FLOAT_TYPE:
            array.append(round(random.uniform(-100.0, 100.0), 3))
        elif choice == _STRING_TYPE:
            array.append(_random_string(random.randint(5, 30)))
        elif choice == _BOOL_TYPE:
            array.append(random.choice([True, False]))
        elif choice == _NULL_TYPE:
            array.append(None)
        else:
            array.append(
                {
                    "index": i,
                    "value": _random_string(10),
                    "score": round(random.uniform(0, 100), 2),
                }
            )

    return array


def _generate_nested_structure() -> dict[str, Any]:
    """Generates deeply nested JSON structure."""

    def create_nested_dict(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"value": _random_string(10)}

        return {
            "level": depth,
            "data": _random_string(15),
            "items": [create_nested_dict(depth - 1) for _ in range(3)],
            "nested": create_nested_dict(depth - 1),
        }

    return create_nested_dict(6)


def _generate_string_heavy() -> dict[str, Any]:
    """Generates strings that need escaping when written."""

    def create_escaped_string() -> str:
        chars = []
        for _ in range(50):
            if random.random() < _ESCAPE_PROBABILITY:
                chars.append(random.choice('"\\/\b\f\n\r\t'))
            else:
                chars.append(
                    random.choice(string.ascii_letters + string.digits + " ")
                )
        return "".join(chars)

    return {
        "strings": [create_escaped_string() for _ in range(100)],
        "mixed_content": {
            f"key_{i}": {
                "description": create_escaped_string(),
                "path": f"C:\\Users\\{_random_string(8)}\\file_{i}.txt",
            }
            for i in range(20)
        },
    }


def _random_string(length: int) -> str:
    """Generates random string of specified length."""
    return "".join(random.choices(string.ascii_letters, k=length))
