"""Configuration and data classes for roundtripfuzz."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class EmptyMapPolicy(Enum):
    """How generated maps that end up empty are normalized"""
    ABSENT = "absent"
    SENTINEL = "sentinel"


class Outcome(Enum):
    """Non-fatal result of verifying one (type, codec) pair"""
    UPHELD = "upheld"
    UNSUPPORTED = "unsupported"


@dataclass
class FuzzConfig:
    """Configuration for a fuzzing run"""
    iterations: int = 100
    input_size: int = 4096
    seed: Optional[int] = None
    codecs: List[str] = field(default_factory=lambda: ['json', 'msgpack'])
    max_collection_len: int = 10
    max_string_len: int = 64
    max_depth: int = 8
    empty_maps: EmptyMapPolicy = EmptyMapPolicy.ABSENT
    customizers_file: Optional[Path] = None
    verbose: bool = False


@dataclass
class VerificationReport:
    """Outcome for one (type, codec) pair"""
    type_name: str
    codec_name: str
    outcome: Outcome


@dataclass
class RunSummary:
    """Counts accumulated over a batch of fuzz iterations"""
    iterations: int = 0
    skipped: int = 0
    upheld: int = 0
    unsupported: int = 0
