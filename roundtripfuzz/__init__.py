"""
roundtripfuzz - Fuzz-Driven Round-Trip Verifier

Derives constrained object instances from fuzz input bytes and checks that
deep copy and every codec preserve them.
"""

from .config import (
    EmptyMapPolicy,
    FuzzConfig,
    Outcome,
    RunSummary,
    VerificationReport,
)
from .errors import (
    CodecError,
    CursorExhausted,
    EmptyCatalogError,
    InvariantViolation,
    NotRegisteredError,
    RegistryFrozenError,
    RoundTripFuzzError,
    UnsupportedTypeError,
)
from .cursor import FuzzCursor
from .generator import Generator
from .registry import CustomizerRegistry
from .scheme import GroupVersion, GroupVersionKind, Scheme, select
from .codec import Codec, JSONCodec, MsgpackCodec, reference_codec
from .customizers import default_registry
from .catalog import build_scheme
from .verifier import Step, round_trip
from .fuzzer import RoundTripFuzzer, default_fuzzer


__version__ = '1.0.0'

__all__ = [
    # Main entry points
    'RoundTripFuzzer',
    'default_fuzzer',
    'round_trip',

    # Configuration
    'FuzzConfig',
    'EmptyMapPolicy',

    # Results
    'Outcome',
    'RunSummary',
    'VerificationReport',
    'Step',

    # Components
    'FuzzCursor',
    'Generator',
    'CustomizerRegistry',
    'default_registry',
    'Scheme',
    'GroupVersion',
    'GroupVersionKind',
    'build_scheme',
    'select',
    'Codec',
    'JSONCodec',
    'MsgpackCodec',
    'reference_codec',

    # Errors
    'RoundTripFuzzError',
    'CursorExhausted',
    'NotRegisteredError',
    'CodecError',
    'RegistryFrozenError',
    'EmptyCatalogError',
    'UnsupportedTypeError',
    'InvariantViolation',
]
