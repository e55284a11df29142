"""Fuzz driver: select a kind, generate an instance, verify every codec."""

import logging
import random
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from .catalog import build_scheme, round_trippable_kinds
from .codec import Codec, new_codec, reference_codec
from .config import FuzzConfig, Outcome, RunSummary, VerificationReport
from .cursor import FuzzCursor
from .customizers import default_registry
from .errors import CursorExhausted
from .generator import Generator
from .registry import CustomizerRegistry
from .scheme import GroupVersionKind, Scheme, select, type_accessor
from .verifier import round_trip

logger = logging.getLogger(__name__)


class RoundTripFuzzer:
    """Runs fuzz iterations against a scheme and a set of codecs.

    The scheme and registry are shared read-only between iterations; each
    iteration gets its own cursor and its own instance.
    """

    def __init__(self, scheme: Scheme, codecs: Sequence[Codec], registry: CustomizerRegistry,
                 config: Optional[FuzzConfig] = None):
        self.scheme = scheme
        self.codecs = list(codecs)
        self.registry = registry
        self.config = config or FuzzConfig()
        self.kinds = round_trippable_kinds(scheme)
        self.verbose = self.config.verbose

    def external_types(self, data: bytes, type_to_test: int) -> List[VerificationReport]:
        """Verify one kind, chosen by ``type_to_test``, built from ``data``.

        Returns no reports when the input runs out during generation.
        """
        gvk = select(type_to_test, self.kinds)
        return self.round_trip_of_external_type(data, gvk)

    def round_trip_of_external_type(self, data: bytes, gvk: GroupVersionKind) -> List[VerificationReport]:
        obj = self.scheme.new(gvk)
        type_accessor(obj)

        try:
            obj = self.fuzz_object(data, obj)
        except CursorExhausted as e:
            logger.debug("%s: skipping input: %s", gvk.kind, e)
            return []

        type_meta = type_accessor(obj)
        type_meta.kind = gvk.kind
        type_meta.api_version = gvk.api_version

        return [round_trip(codec, obj, self.scheme) for codec in self.codecs]

    def fuzz_object(self, data: bytes, obj):
        """Populate ``obj`` from ``data`` and blank its type tag."""
        generator = Generator(FuzzCursor(data), self.registry,
                              max_collection_len=self.config.max_collection_len,
                              max_string_len=self.config.max_string_len,
                              max_depth=self.config.max_depth)
        obj = generator.fill(obj)
        type_meta = type_accessor(obj)
        type_meta.kind = ""
        type_meta.api_version = ""
        return obj

    def run(self, inputs: Iterable[Tuple[bytes, int]]) -> RunSummary:
        """Run every (data, type index) input; violations propagate."""
        summary = RunSummary()
        self._log(f"Kinds: {', '.join(gvk.kind for gvk in self.kinds)}")
        self._log(f"Codecs: {', '.join(codec.name for codec in self.codecs)}")

        for data, type_to_test in inputs:
            reports = self.external_types(data, type_to_test)
            summary.iterations += 1
            if not reports:
                summary.skipped += 1
            for report in reports:
                if report.outcome is Outcome.UPHELD:
                    summary.upheld += 1
                else:
                    summary.unsupported += 1

            if self.verbose and summary.iterations % 10 == 0:
                print(f"      Progress: {summary.iterations}", end='\r')

        self._log(f"\nRun complete!")
        self._log(f"  Iterations: {summary.iterations}")
        self._log(f"  Skipped (input exhausted): {summary.skipped}")
        self._log(f"  Upheld: {summary.upheld}")
        self._log(f"  Unsupported: {summary.unsupported}")
        return summary

    def _log(self, message: str) -> None:
        """Log message if verbose mode is enabled."""
        if self.verbose:
            print(message)


def random_inputs(config: FuzzConfig) -> Iterator[Tuple[bytes, int]]:
    """Seeded pseudo-random inputs, reproducible for a given seed."""
    rng = random.Random(config.seed)
    for _ in range(config.iterations):
        data = bytes(rng.getrandbits(8) for _ in range(config.input_size))
        yield data, rng.randrange(256)


def default_fuzzer(config: Optional[FuzzConfig] = None) -> RoundTripFuzzer:
    """Fuzzer over the default catalog, codecs and customizers."""
    config = config or FuzzConfig()
    scheme = build_scheme()

    registry = default_registry(reference_codec(scheme), config.empty_maps, freeze=False)
    if config.customizers_file:
        loaded = registry.load_from_file(config.customizers_file)
        logger.info("loaded %d custom customizers from %s", loaded, config.customizers_file)
    registry.freeze()

    codecs = [new_codec(name, scheme) for name in config.codecs]
    return RoundTripFuzzer(scheme, codecs, registry, config)
