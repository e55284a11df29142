#!/usr/bin/env python3
"""Atheris fuzz target for round-trip verification of every registered kind.

Run with:
  python fuzz/fuzz_roundtrip.py -max_len=8192 corpus/
"""

from __future__ import annotations

import sys

import atheris

with atheris.instrument_imports():
    from roundtripfuzz.config import FuzzConfig
    from roundtripfuzz.fuzzer import default_fuzzer

FUZZER = default_fuzzer(FuzzConfig(verbose=False))


def TestOneInput(data: bytes) -> None:
    """Select a kind from the first byte and verify it through every codec."""
    fdp = atheris.FuzzedDataProvider(data)
    type_to_test = fdp.ConsumeIntInRange(0, 255)
    payload = fdp.ConsumeBytes(fdp.remaining_bytes())

    # InvariantViolation is deliberately not caught: it is the finding.
    FUZZER.external_types(payload, type_to_test)


if __name__ == "__main__":
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()
