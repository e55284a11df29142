"""End-to-end tests for the fuzz driver over the default catalog."""

from hypothesis import given, strategies as st

from roundtripfuzz.api import OwnerReference
from roundtripfuzz.config import FuzzConfig, Outcome
from roundtripfuzz.equality import semantic_equal
from roundtripfuzz.errors import CursorExhausted
from roundtripfuzz.fuzzer import default_fuzzer, random_inputs


@given(st.binary(max_size=4096), st.integers(min_value=0, max_value=255))
def test_every_kind_round_trips(fuzzer, data, type_to_test):
    reports = fuzzer.external_types(data, type_to_test)
    assert len(reports) in (0, len(fuzzer.codecs))
    for report in reports:
        assert report.outcome in (Outcome.UPHELD, Outcome.UNSUPPORTED)


@given(st.binary(min_size=1, max_size=4096))
def test_generation_is_reproducible(fuzzer, data):
    kind = fuzzer.kinds[data[0] % len(fuzzer.kinds)]
    try:
        first = fuzzer.fuzz_object(data[1:], fuzzer.scheme.new(kind))
    except CursorExhausted:
        return
    second = fuzzer.fuzz_object(data[1:], fuzzer.scheme.new(kind))
    assert semantic_equal(first, second)


def test_exhausted_input_is_skipped(fuzzer):
    assert fuzzer.external_types(b"", 0) == []


def test_table_is_unsupported_by_msgpack(fuzzer):
    index = [gvk.kind for gvk in fuzzer.kinds].index("Table")
    reports = fuzzer.external_types(b"\x00" * 64, index)
    outcomes = {report.codec_name: report.outcome for report in reports}
    assert outcomes == {"json": Outcome.UPHELD, "msgpack": Outcome.UNSUPPORTED}


def test_generated_objects_are_untagged(fuzzer):
    kind = fuzzer.kinds[0]
    obj = fuzzer.fuzz_object(b"\x07" * 4096, fuzzer.scheme.new(kind))
    assert obj.type_meta.kind == ""
    assert obj.type_meta.api_version == ""


def test_run_summary_counts(fuzzer):
    config = FuzzConfig(iterations=5, input_size=1024, seed=1)
    summary = fuzzer.run(random_inputs(config))
    assert summary.iterations == 5
    assert summary.upheld + summary.unsupported == 2 * (summary.iterations - summary.skipped)


def test_random_inputs_are_seeded():
    config = FuzzConfig(iterations=3, input_size=16, seed=42)
    assert list(random_inputs(config)) == list(random_inputs(config))


def test_single_codec():
    fuzzer = default_fuzzer(FuzzConfig(codecs=["json"]))
    assert [codec.name for codec in fuzzer.codecs] == ["json"]
    assert fuzzer.registry.frozen


def test_customizers_file(tmp_path):
    path = tmp_path / "extra.py"
    path.write_text(
        "from roundtripfuzz.api import OwnerReference\n"
        "\n"
        "@register_customizer(OwnerReference)\n"
        "def fuzz_owner(ref, gen):\n"
        "    ref.name = 'owner'\n"
        "    return ref\n"
    )
    fuzzer = default_fuzzer(FuzzConfig(customizers_file=path))
    assert fuzzer.registry.get(OwnerReference) is not None
