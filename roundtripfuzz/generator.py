"""Structural value generation driven by a FuzzCursor."""

import dataclasses
import functools
import logging
import typing
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from .cursor import DEFAULT_MAX_STRING_LEN, FuzzCursor
from .errors import UnsupportedTypeError
from .registry import CustomizerRegistry

logger = logging.getLogger(__name__)

_NONE_TYPE = type(None)


@functools.lru_cache(maxsize=None)
def type_hints(cls: type) -> Dict[str, Any]:
    """Resolved field annotations of a dataclass, cached per class."""
    return typing.get_type_hints(cls)


def optional_arg(tp) -> Optional[Any]:
    """Return X for ``Optional[X]``, else None."""
    if typing.get_origin(tp) is typing.Union:
        args = [a for a in typing.get_args(tp) if a is not _NONE_TYPE]
        if len(args) == 1 and len(typing.get_args(tp)) == 2:
            return args[0]
    return None


def zero_value(tp):
    """The blank in-memory value for a type."""
    if optional_arg(tp) is not None or tp is Any:
        return None
    origin = typing.get_origin(tp)
    if origin is list:
        return []
    if origin is dict:
        return {}
    if isinstance(tp, type):
        if issubclass(tp, Enum):
            return next(iter(tp))
        if tp is datetime:
            return None
        return tp()
    raise UnsupportedTypeError(f"no zero value for {tp!r}")


class Generator:
    """Populates values of arbitrary shape from fuzz input.

    A customizer registered for a type takes full control of values of that
    type; everything else is generated field by field. Exhaustion of the
    cursor propagates as ``CursorExhausted``.
    """

    def __init__(self, cursor: FuzzCursor, registry: Optional[CustomizerRegistry] = None,
                 max_collection_len: int = 10, max_string_len: int = DEFAULT_MAX_STRING_LEN,
                 max_depth: int = 8):
        self.cursor = cursor
        self.registry = registry if registry is not None else CustomizerRegistry()
        self.max_collection_len = max_collection_len
        self.max_string_len = max_string_len
        self.max_depth = max_depth
        self._depth = 0

    @classmethod
    def from_bytes(cls, data: bytes, registry: Optional[CustomizerRegistry] = None,
                   **kwargs) -> 'Generator':
        return cls(FuzzCursor(data), registry, **kwargs)

    # Primitive passthroughs so customizers need only the generator.

    def get_int(self) -> int:
        return self.cursor.get_int()

    def get_bool(self) -> bool:
        return self.cursor.get_bool()

    def get_uint32(self) -> int:
        return self.cursor.get_uint32()

    def get_uint64(self) -> int:
        return self.cursor.get_uint64()

    def get_string(self, max_len: Optional[int] = None) -> str:
        return self.cursor.get_string(self.max_string_len if max_len is None else max_len)

    def get_string_from(self, alphabet: str, max_len: int) -> str:
        return self.cursor.get_string_from(alphabet, max_len)

    # Structured generation

    def generate(self, tp):
        """Generate a value of type ``tp``, honoring customizers."""
        inner = optional_arg(tp)
        if inner is not None:
            if self._depth >= self.max_depth or not self.get_bool():
                return None
            return self.generate(inner)

        customizer = self.registry.get(tp)
        if customizer is not None:
            return customizer(zero_value(tp), self)
        return self._generate_default(tp)

    def fill(self, obj):
        """Populate ``obj``; its own type's customizer applies if registered."""
        customizer = self.registry.get(type(obj))
        if customizer is not None:
            return customizer(obj, self)
        return self.generate_struct(obj)

    def generate_struct(self, obj):
        """Populate a dataclass field by field, skipping its own customizer."""
        if not dataclasses.is_dataclass(obj) or isinstance(obj, type):
            raise UnsupportedTypeError(f"generate_struct needs a dataclass instance, got {obj!r}")
        hints = type_hints(type(obj))
        self._depth += 1
        try:
            for f in dataclasses.fields(obj):
                setattr(obj, f.name, self.generate(hints[f.name]))
        finally:
            self._depth -= 1
        return obj

    def _generate_default(self, tp):
        origin = typing.get_origin(tp)
        if origin is list:
            (item_type,) = typing.get_args(tp)
            return [self.generate(item_type) for _ in range(self._collection_len())]
        if origin is dict:
            key_type, value_type = typing.get_args(tp)
            if key_type is not str:
                raise UnsupportedTypeError(f"map keys must be str, got {key_type!r}")
            result = {}
            for _ in range(self._collection_len()):
                key = self.get_string()
                result[key] = self.generate(value_type)
            return result

        if tp is bool:
            return self.get_bool()
        if tp is int:
            return self.cursor.get_int64()
        if tp is str:
            return self.get_string()
        if tp is bytes:
            return self.cursor.get_bytes(self.get_int() % (self.max_string_len + 1))
        if isinstance(tp, type) and issubclass(tp, Enum):
            members = list(tp)
            return members[self.get_int() % len(members)]
        if isinstance(tp, type) and dataclasses.is_dataclass(tp):
            return self.generate_struct(tp())

        raise UnsupportedTypeError(
            f"no structural generation for {tp!r}; register a customizer for it")

    def _collection_len(self) -> int:
        if self._depth >= self.max_depth:
            return 0
        return self.get_int() % (self.max_collection_len + 1)
