"""Domain equality and failure diagnostics."""

import dataclasses
import pprint
from typing import Any, List

from .api import Quantity

MAX_DIFF_LINES = 50


def _is_empty_collection(value: Any) -> bool:
    return value is None or (isinstance(value, (list, dict)) and not value)


def semantic_equal(a: Any, b: Any) -> bool:
    """Equality under domain semantics.

    Looser than ``==``: a missing collection equals an empty one, maps
    ignore insertion order and quantities compare by numeric value.
    """
    if _is_empty_collection(a) and _is_empty_collection(b):
        return True
    if isinstance(a, Quantity) and isinstance(b, Quantity):
        return a.equivalent(b)
    if dataclasses.is_dataclass(a) and not isinstance(a, type):
        if type(a) is not type(b):
            return False
        return all(semantic_equal(getattr(a, f.name), getattr(b, f.name))
                   for f in dataclasses.fields(a))
    if isinstance(a, dict) and isinstance(b, dict):
        if a.keys() != b.keys():
            return False
        return all(semantic_equal(a[k], b[k]) for k in a)
    if isinstance(a, list) and isinstance(b, list):
        if len(a) != len(b):
            return False
        return all(semantic_equal(x, y) for x, y in zip(a, b))
    if type(a) is not type(b):
        return False
    return a == b


def object_diff(a: Any, b: Any) -> str:
    """Human-readable list of the paths at which two values differ."""
    lines: List[str] = []
    _diff(a, b, "object", lines)
    if not lines:
        return "<no differences>"
    if len(lines) > MAX_DIFF_LINES:
        dropped = len(lines) - MAX_DIFF_LINES
        lines = lines[:MAX_DIFF_LINES] + [f"... {dropped} more"]
    return "\n".join(lines)


def _diff(a: Any, b: Any, path: str, lines: List[str]) -> None:
    if semantic_equal(a, b):
        return
    if (dataclasses.is_dataclass(a) and not isinstance(a, type)
            and type(a) is type(b) and not isinstance(a, Quantity)):
        for f in dataclasses.fields(a):
            _diff(getattr(a, f.name), getattr(b, f.name), f"{path}.{f.name}", lines)
        return
    if isinstance(a, dict) and isinstance(b, dict):
        for key in a.keys() - b.keys():
            lines.append(f"{path}[{key!r}]: only in A: {a[key]!r}")
        for key in b.keys() - a.keys():
            lines.append(f"{path}[{key!r}]: only in B: {b[key]!r}")
        for key in a.keys() & b.keys():
            _diff(a[key], b[key], f"{path}[{key!r}]", lines)
        return
    if isinstance(a, list) and isinstance(b, list) and len(a) == len(b):
        for i, (x, y) in enumerate(zip(a, b)):
            _diff(x, y, f"{path}[{i}]", lines)
        return
    lines.append(f"{path}:\n  a: {a!r}\n  b: {b!r}")


def dump(obj: Any) -> str:
    return pprint.pformat(obj, width=100)


def hex_dump(data: bytes) -> str:
    """Offset, hex bytes and printable text, 16 bytes per line."""
    lines = []
    for offset in range(0, len(data), 16):
        chunk = data[offset:offset + 16]
        hex_part = ' '.join(f"{b:02x}" for b in chunk[:8])
        if len(chunk) > 8:
            hex_part += '  ' + ' '.join(f"{b:02x}" for b in chunk[8:])
        text = ''.join(chr(b) if 32 <= b < 127 else '.' for b in chunk)
        lines.append(f"{offset:08x}  {hex_part:<49} |{text}|")
    return "\n".join(lines)


def data_as_string(data: bytes) -> str:
    """Encoded bytes for a report; non-JSON data is shown as a hex dump."""
    if data.startswith(b"{"):
        return data.decode('utf-8', errors='replace')
    return "\n" + hex_dump(data)
