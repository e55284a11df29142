"""Codecs: encode objects to bytes and decode them back.

Every codec writes a self-describing envelope whose ``kind`` and
``apiVersion`` keys are stamped from the scheme. A dual-represented object
that carries no type tag is written without ``apiVersion``; decoding such an
envelope yields the untagged internal form again. ``decode_into`` always
produces the tagged external form.
"""

import dataclasses
import json
from typing import Any, Iterable

import msgpack
from msgpack.exceptions import UnpackException

from .convert import from_wire, to_wire
from .errors import CodecError, NotRegisteredError
from .scheme import GroupVersionKind, Scheme


def _type_meta(obj: Any):
    return getattr(obj, 'type_meta', None)


class Codec:
    """Base codec. Subclasses provide the byte-level dump and load."""

    name = "codec"
    binary = False

    def __init__(self, scheme: Scheme, exclude: Iterable[str] = ()):
        self.scheme = scheme
        self.exclude = frozenset(exclude)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    def _check_supported(self, gvk: GroupVersionKind) -> None:
        if gvk.kind in self.exclude:
            raise NotRegisteredError(f"{gvk.kind} is not registered with the {self.name} codec")

    def encode(self, obj: Any) -> bytes:
        gvk = self.scheme.kind_for(obj)
        self._check_supported(gvk)

        envelope = to_wire(obj, self.binary)
        if not isinstance(envelope, dict):
            raise CodecError(f"{gvk.kind} does not encode to an object")
        envelope['kind'] = gvk.kind
        type_meta = _type_meta(obj)
        untagged = type_meta is None or not type_meta.api_version
        if untagged and self.scheme.is_internal_and_external(obj):
            envelope.pop('apiVersion', None)
        else:
            envelope['apiVersion'] = gvk.api_version
        return self._dump(envelope)

    def decode(self, data: bytes) -> Any:
        envelope = self._load_envelope(data)
        api_version = envelope.get('apiVersion', "")
        gvk = self.scheme.lookup(envelope['kind'], api_version)
        self._check_supported(gvk)

        obj = from_wire(self.scheme.class_for(gvk), envelope, self.binary)
        type_meta = _type_meta(obj)
        if not api_version and type_meta is not None:
            type_meta.kind = ""
            type_meta.api_version = ""
        return obj

    def decode_into(self, data: bytes, target: Any) -> None:
        envelope = self._load_envelope(data)
        gvk = self.scheme.kind_for(target)
        self._check_supported(gvk)
        if envelope['kind'] != gvk.kind:
            raise CodecError(f"cannot decode {envelope['kind']} into {gvk.kind}")

        decoded = from_wire(type(target), envelope, self.binary)
        for f in dataclasses.fields(target):
            setattr(target, f.name, getattr(decoded, f.name))
        type_meta = _type_meta(target)
        if type_meta is not None:
            type_meta.kind = gvk.kind
            type_meta.api_version = gvk.api_version

    def _load_envelope(self, data: bytes) -> dict:
        envelope = self._load(data)
        if not isinstance(envelope, dict):
            raise CodecError("encoded data is not an object")
        kind = envelope.get('kind')
        if not isinstance(kind, str) or not kind:
            raise CodecError("encoded data has no kind")
        api_version = envelope.get('apiVersion', "")
        if not isinstance(api_version, str):
            raise CodecError("apiVersion must be a string")
        return envelope

    def _dump(self, envelope: dict) -> bytes:
        raise NotImplementedError

    def _load(self, data: bytes) -> Any:
        raise NotImplementedError


class JSONCodec(Codec):
    """Textual codec: compact, key-sorted JSON terminated by a newline."""

    name = "json"

    def _dump(self, envelope: dict) -> bytes:
        return json.dumps(envelope, sort_keys=True, separators=(',', ':')).encode('ascii') + b"\n"

    def _load(self, data: bytes) -> Any:
        try:
            return json.loads(data)
        except (ValueError, UnicodeDecodeError) as e:
            raise CodecError(f"invalid JSON: {e}") from e


class MsgpackCodec(Codec):
    """Binary codec backed by msgpack."""

    name = "msgpack"
    binary = True

    def __init__(self, scheme: Scheme, exclude: Iterable[str] = ("Table",)):
        super().__init__(scheme, exclude)

    def _dump(self, envelope: dict) -> bytes:
        try:
            return msgpack.packb(envelope, use_bin_type=True)
        except (TypeError, ValueError, OverflowError) as e:
            raise CodecError(f"cannot pack object: {e}") from e

    def _load(self, data: bytes) -> Any:
        try:
            return msgpack.unpackb(data, raw=False)
        except (UnpackException, ValueError, TypeError) as e:
            raise CodecError(f"invalid msgpack data: {e}") from e


CODECS = {
    JSONCodec.name: JSONCodec,
    MsgpackCodec.name: MsgpackCodec,
}


def new_codec(name: str, scheme: Scheme) -> Codec:
    """Build a codec by name."""
    codec_cls = CODECS.get(name)
    if codec_cls is None:
        available = ', '.join(sorted(CODECS))
        raise ValueError(f"Codec '{name}' not found.\nAvailable: {available}")
    return codec_cls(scheme)


def reference_codec(scheme: Scheme) -> Codec:
    """Codec used to serialize objects embedded in other objects."""
    return JSONCodec(scheme)
