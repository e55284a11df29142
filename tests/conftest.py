"""Pytest configuration for the roundtripfuzz test suite.

Hypothesis profiles:
- dev: local development (200 examples)
- ci: CI runs (50 examples, derandomized)

CI=true selects "ci"; HYPOTHESIS_PROFILE overrides.
"""

import os

import pytest
from hypothesis import HealthCheck, Phase, settings

from roundtripfuzz.catalog import build_scheme
from roundtripfuzz.codec import JSONCodec, MsgpackCodec, reference_codec
from roundtripfuzz.customizers import default_registry
from roundtripfuzz.fuzzer import default_fuzzer

settings.register_profile(
    "dev",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
)

settings.register_profile(
    "ci",
    max_examples=50,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
    derandomize=True,
    print_blob=True,
)


def _detect_profile() -> str:
    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci"):
        return explicit
    if os.environ.get("CI") == "true":
        return "ci"
    return "dev"


settings.load_profile(_detect_profile())


@pytest.fixture(scope="session")
def scheme():
    return build_scheme()


@pytest.fixture(scope="session")
def registry(scheme):
    return default_registry(reference_codec(scheme))


@pytest.fixture(scope="session")
def json_codec(scheme):
    return JSONCodec(scheme)


@pytest.fixture(scope="session")
def msgpack_codec(scheme):
    return MsgpackCodec(scheme)


@pytest.fixture(scope="session")
def fuzzer():
    return default_fuzzer()
