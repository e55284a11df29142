"""Round-trip verification of one object through one codec."""

import copy
import logging
from enum import Enum
from typing import Any

from .codec import Codec
from .config import Outcome, VerificationReport
from .equality import data_as_string, dump, object_diff, semantic_equal
from .errors import InvariantViolation, NotRegisteredError, describe
from .scheme import Scheme, type_accessor

logger = logging.getLogger(__name__)


class Step(Enum):
    """The checks of a round trip, in the order they run"""
    COPY_FIDELITY = 1
    ENCODE = 2
    ENCODE_SIDE_EFFECT = 3
    STABLE_ENCODING = 4
    DECODE = 5
    DECODE_INTO = 6
    TAG_RECONCILE = 7
    DECODE_INTO_EQUAL = 8
    ORIGINAL_UNALTERED = 9


class RoundTrip:
    """Runs the invariant suite for one (object, codec) pair.

    The first failed check raises ``InvariantViolation``; nothing is retried
    because every step is a pure function of its inputs.
    """

    def __init__(self, codec: Codec, obj: Any, scheme: Scheme):
        self.codec = codec
        self.original = obj
        self.scheme = scheme
        self.name = type(obj).__name__

    def run(self) -> VerificationReport:
        original = self.original

        obj = self._deep_copy()
        self._require_equal(Step.COPY_FIDELITY, original, obj, "deep copy altered the object")

        try:
            data = self.codec.encode(obj)
        except NotRegisteredError as e:
            logger.debug("%s: not supported by %s: %s", self.name, self.codec.name, e)
            return self._report(Outcome.UNSUPPORTED)
        except Exception as e:
            raise self._violation(Step.ENCODE, f"encode failed: {describe(e)}",
                                  detail=f"Source:\n{dump(obj)}") from e

        self._require_equal(Step.ENCODE_SIDE_EFFECT, original, obj, "encode altered the object")

        second = self._call(Step.STABLE_ENCODING, self.codec.encode, obj)
        if data != second:
            raise self._violation(
                Step.STABLE_ENCODING, "serialization is not stable",
                detail=f"First:\n{data_as_string(data)}\nSecond:\n{data_as_string(second)}")

        decoded = self._call(Step.DECODE, self.codec.decode, data)
        self._require_equal(Step.DECODE, original, decoded, "decoded object differs from original",
                            detail=self._detail(data, decoded))

        # decode into a fresh zero value instead of letting the codec allocate
        target = type(obj)()
        self._call(Step.DECODE_INTO, self.codec.decode_into, data, target)

        self._reconcile_tags(obj, target)

        self._require_equal(Step.DECODE_INTO_EQUAL, obj, target,
                            "decode into a new object differs from the copy",
                            detail=self._detail(data, target))
        self._require_equal(Step.ORIGINAL_UNALTERED, original, target,
                            "round trip of the copy altered the original")

        logger.debug("%s: round trip through %s upheld", self.name, self.codec.name)
        return self._report(Outcome.UPHELD)

    def _deep_copy(self) -> Any:
        try:
            obj = copy.deepcopy(self.original)
        except Exception as e:
            raise self._violation(Step.COPY_FIDELITY, f"deep copy failed: {describe(e)}") from e
        if obj is self.original:
            raise self._violation(Step.COPY_FIDELITY, "deep copy returned the same object")
        return obj

    def _reconcile_tags(self, obj: Any, target: Any) -> None:
        # Kinds that are internal and external at once decode into their
        # tagged external form; an untagged source means the internal form.
        try:
            if not self.scheme.is_internal_and_external(obj):
                return
            source_meta = type_accessor(obj)
            if source_meta.api_version:
                return
            target_meta = type_accessor(target)
        except TypeError as e:
            raise self._violation(Step.TAG_RECONCILE, describe(e)) from e
        target_meta.kind = ""
        target_meta.api_version = ""

    def _call(self, step: Step, func, *args):
        try:
            return func(*args)
        except Exception as e:
            raise self._violation(step, f"{func.__name__} failed: {describe(e)}",
                                  detail=self._detail(args[0] if isinstance(args[0], bytes) else None)) from e

    def _require_equal(self, step: Step, expected: Any, actual: Any, message: str,
                       detail: str = "") -> None:
        if not semantic_equal(expected, actual):
            raise self._violation(step, message, diff=object_diff(expected, actual), detail=detail)

    def _detail(self, data, result: Any = None) -> str:
        parts = [f"Codec: {self.codec!r}", f"Source:\n{dump(self.original)}"]
        if data is not None:
            parts.append(f"Encoded:\n{data_as_string(data)}")
        if result is not None:
            parts.append(f"Final:\n{dump(result)}")
        return "\n\n".join(parts)

    def _violation(self, step: Step, message: str, diff: str = "", detail: str = "") -> InvariantViolation:
        return InvariantViolation(self.name, self.codec.name, step, message, diff=diff, detail=detail)

    def _report(self, outcome: Outcome) -> VerificationReport:
        return VerificationReport(self.name, self.codec.name, outcome)


def round_trip(codec: Codec, obj: Any, scheme: Scheme) -> VerificationReport:
    """Verify that ``obj`` survives copy, encode and decode through ``codec``."""
    return RoundTrip(codec, obj, scheme).run()
