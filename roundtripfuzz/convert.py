"""Conversion between typed objects and plain wire values.

The plain form (dicts, lists, strings, numbers, booleans, bytes) is what the
codecs hand to ``json`` or ``msgpack``. Conversion is the same for every
codec except for ``bytes``, which textual codecs carry as base64.
"""

import base64
import binascii
import dataclasses
import json
import typing
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from .api import URL, FieldsV1, Quantity, RawExtension, Unknown
from .errors import CodecError
from .generator import optional_arg, type_hints, zero_value

CONTENT_TYPE_JSON = "application/json"

_EMBEDDED = (RawExtension, FieldsV1)


def to_camel(name: str) -> str:
    head, *rest = name.rstrip('_').split('_')
    return head + ''.join(part[:1].upper() + part[1:] for part in rest)


def wire_name(f: dataclasses.Field) -> str:
    return f.metadata.get('json') or to_camel(f.name)


def format_time(dt: datetime) -> str:
    """RFC 3339 in UTC with whole-second precision."""
    dt = dt.astimezone(timezone.utc)
    return (f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
            f"T{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}Z")


def parse_time(text: str) -> datetime:
    return datetime.strptime(text, "%Y-%m-%dT%H:%M:%SZ").replace(tzinfo=timezone.utc)


def dump_embedded(value: Any) -> bytes:
    """Canonical compact JSON bytes for an embedded object."""
    return json.dumps(value, sort_keys=True, separators=(',', ':')).encode('ascii')


def load_embedded(raw: bytes) -> Any:
    try:
        return json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise CodecError(f"embedded object is not valid JSON: {e}") from e


def is_empty(value: Any) -> bool:
    """Go-style omitempty test for non-optional fields."""
    if value is None:
        return True
    if isinstance(value, (bool, int, str, bytes, list, dict)):
        return not value
    if isinstance(value, Enum):
        return value.value in ("", 0)
    if isinstance(value, _EMBEDDED + (Unknown,)):
        return not value.raw
    return False


def to_wire(obj: Any, binary: bool = False) -> Any:
    """Convert an object to its plain wire value."""
    if obj is None or isinstance(obj, (bool, int, str)):
        return obj
    if isinstance(obj, bytes):
        return obj if binary else base64.b64encode(obj).decode('ascii')
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return format_time(obj)
    if isinstance(obj, Quantity):
        return obj.string()
    if isinstance(obj, URL):
        return obj.string()
    if isinstance(obj, _EMBEDDED):
        return load_embedded(obj.raw) if obj.raw else None
    if isinstance(obj, Unknown):
        if not obj.raw:
            return None
        if obj.content_type != CONTENT_TYPE_JSON:
            raise CodecError(f"cannot embed content type {obj.content_type!r}")
        return load_embedded(obj.raw)
    if isinstance(obj, list):
        return [to_wire(item, binary) for item in obj]
    if isinstance(obj, dict):
        for key in obj:
            if not isinstance(key, str):
                raise CodecError(f"map key {key!r} is not a string")
        return {key: to_wire(value, binary) for key, value in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return _struct_to_wire(obj, binary)
    raise CodecError(f"cannot convert {type(obj).__name__} to wire form")


def _struct_to_wire(obj: Any, binary: bool) -> dict:
    hints = type_hints(type(obj))
    out = {}
    for f in dataclasses.fields(obj):
        if f.metadata.get('skip'):
            continue
        value = getattr(obj, f.name)
        if f.metadata.get('inline'):
            out.update(to_wire(value, binary))
            continue
        if optional_arg(hints[f.name]) is not None:
            if value is None:
                continue
        elif is_empty(value):
            continue
        wire_value = to_wire(value, binary)
        if wire_value is not None:
            out[wire_name(f)] = wire_value
    return out


def from_wire(tp: Any, value: Any, binary: bool = False) -> Any:
    """Convert a plain wire value into an instance of ``tp``."""
    inner = optional_arg(tp)
    if inner is not None:
        return None if value is None else from_wire(inner, value, binary)
    if tp is Any:
        return value
    if value is None:
        return zero_value(tp)

    origin = typing.get_origin(tp)
    if origin is list:
        (item_type,) = typing.get_args(tp)
        _expect(value, list, tp)
        return [from_wire(item_type, item, binary) for item in value]
    if origin is dict:
        _, value_type = typing.get_args(tp)
        _expect(value, dict, tp)
        return {key: from_wire(value_type, item, binary) for key, item in value.items()}

    if tp is bool:
        _expect(value, bool, tp)
        return value
    if tp is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise CodecError(f"expected int, got {type(value).__name__}")
        return value
    if tp is str:
        _expect(value, str, tp)
        return value
    if tp is bytes:
        return _bytes_from_wire(value, binary)

    try:
        if isinstance(tp, type) and issubclass(tp, Enum):
            return tp(value)
        if tp is datetime:
            _expect(value, str, tp)
            return parse_time(value)
        if tp is Quantity:
            _expect(value, str, tp)
            return Quantity.parse(value)
        if tp is URL:
            _expect(value, str, tp)
            return URL.parse(value)
    except ValueError as e:
        raise CodecError(f"invalid {tp.__name__} value {value!r}: {e}") from e

    if tp in _EMBEDDED:
        return tp(raw=dump_embedded(value))
    if tp is Unknown:
        return Unknown(raw=dump_embedded(value), content_type=CONTENT_TYPE_JSON)
    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        _expect(value, dict, tp)
        return _struct_from_wire(tp, value, binary)
    raise CodecError(f"cannot convert wire value to {tp!r}")


def _struct_from_wire(cls: type, data: dict, binary: bool) -> Any:
    hints = type_hints(cls)
    kwargs = {}
    for f in dataclasses.fields(cls):
        if f.metadata.get('skip'):
            continue
        if f.metadata.get('inline'):
            kwargs[f.name] = from_wire(hints[f.name], data, binary)
            continue
        name = wire_name(f)
        if name in data:
            kwargs[f.name] = from_wire(hints[f.name], data[name], binary)
    return cls(**kwargs)


def _bytes_from_wire(value: Any, binary: bool) -> bytes:
    if binary:
        _expect(value, bytes, bytes)
        return value
    _expect(value, str, bytes)
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CodecError(f"invalid base64 data: {e}") from e


def _expect(value: Any, kind: type, tp: Any) -> None:
    if not isinstance(value, kind):
        raise CodecError(f"expected {kind.__name__} for {tp!r}, got {type(value).__name__}")
