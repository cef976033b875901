"""JSON-ready conversion of models and report rows.

Money stays exact: ``Decimal`` values are written as strings, never floats.
"""

from dataclasses import fields, is_dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any


def serialize_value(value: Any) -> Any:
    """Recursively convert a value into JSON-compatible types."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    # datetime is a date subclass
    if isinstance(value, date):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return dataclass_to_dict(value)
    if isinstance(value, dict):
        return {key: serialize_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    return value


def dataclass_to_dict(obj: Any) -> dict:
    """Field-by-field conversion; ``asdict`` would skip ``serialize_value`` on nested values."""
    return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}


def to_dict(obj: Any) -> dict:
    """Top-level record for a sink.

    Objects with an ``as_record()`` method decide their own shape.
    Anything that is neither a dataclass nor a dict is wrapped as
    ``{"value": str(obj)}``.
    """
    if hasattr(obj, "as_record"):
        return obj.as_record()
    if is_dataclass(obj) or isinstance(obj, dict):
        return serialize_value(obj)
    return {"value": str(obj)}
