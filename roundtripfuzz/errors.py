"""Exception types for roundtripfuzz.

Two classes of failure exist. Recoverable ones (``CursorExhausted``,
``NotRegisteredError``) abort only the current fuzz iteration or
(type, codec) pair. ``InvariantViolation`` is fatal and must reach the top
of the iteration untouched.
"""

from typing import Optional


class RoundTripFuzzError(Exception):
    """Base class for library errors that are not invariant violations."""


class CursorExhausted(RoundTripFuzzError):
    """Raised when a value extraction needs more bytes than remain."""

    def __init__(self, needed: int, remaining: int):
        super().__init__(f"not enough bytes: need {needed}, have {remaining}")
        self.needed = needed
        self.remaining = remaining


class NotRegisteredError(RoundTripFuzzError):
    """Raised when a scheme or codec cannot represent a type."""


class CodecError(RoundTripFuzzError):
    """Raised when wire data cannot be decoded into an object."""


class RegistryFrozenError(RoundTripFuzzError):
    """Raised when registering a customizer after setup has finished."""


class EmptyCatalogError(ValueError):
    """Raised when selecting a type from a catalog with no kinds."""


class UnsupportedTypeError(TypeError):
    """Raised when a type has no structural default and no customizer."""


class InvariantViolation(AssertionError):
    """A round-trip invariant failed.

    Carries everything needed to act on the failure without rerunning:
    the type under test, the codec, the failed step and a structural diff.
    """

    def __init__(self, type_name: str, codec_name: str, step, message: str,
                 diff: str = "", detail: str = ""):
        self.type_name = type_name
        self.codec_name = codec_name
        self.step = step
        self.message = message
        self.diff = diff
        self.detail = detail
        super().__init__(self._format())

    def _format(self) -> str:
        step_name = getattr(self.step, 'name', self.step)
        parts = [f"{self.type_name} [{self.codec_name}] {step_name}: {self.message}"]
        if self.diff:
            parts.append(f"diff:\n{self.diff}")
        if self.detail:
            parts.append(self.detail)
        return "\n".join(parts)


def describe(err: Optional[BaseException]) -> str:
    """Short ``Type: message`` rendering used in reports."""
    if err is None:
        return ""
    return f"{type(err).__name__}: {err}"
