"""Tests for the default customizers and the constraints they enforce."""

import json

import pytest
from hypothesis import given, strategies as st

from roundtripfuzz.api import (
    EPOCH, LabelSelector, LabelSelectorOperator, LabelSelectorRequirement, ObjectMeta,
    Quantity, RawExtension, Service, ServiceStatus, TableOptions, TypeMeta, URL,
)
from roundtripfuzz.catalog import SERVING_V1, build_scheme
from roundtripfuzz.codec import reference_codec
from roundtripfuzz.config import EmptyMapPolicy
from roundtripfuzz.customizers import (
    SENTINEL_KEY, SENTINEL_VALUE, fuzz_conditions, generic_customizers, meta_customizers,
    normalize_map,
)
from roundtripfuzz.equality import semantic_equal
from roundtripfuzz.errors import CursorExhausted
from roundtripfuzz.generator import Generator
from roundtripfuzz.registry import CustomizerRegistry

# ObjectMeta whose only label is the blank key
OBJECT_META_BYTES = (
    b"\x00" * 6                 # name .. resource_version
    + b"\x00"                   # generation
    + b"\x00" * 3               # timestamps and grace period absent
    + b"\x01\x01"               # labels present, one entry
    + b"\x00" + b"\x01x"        # "" -> "x"
    + b"\x00" * 4               # annotations .. managed_fields absent
    + b"\x00"                   # resource_version
    + b"\x00\x00"               # uid, name
    + b"\x00" * 8               # creation_timestamp
)

# LabelSelector with neither labels nor expressions before the fix-up
EMPTY_SELECTOR_BYTES = (
    b"\x00\x00"                 # match_labels, match_expressions absent
    + b"\x00"                   # one forced expression
    + b"\x00" * 5               # key name part "0"
    + b"\x00"                   # no key prefix
    + b"\x02"                   # Exists
)


def meta_registry(policy):
    registry = CustomizerRegistry(generic_customizers(reference_codec(build_scheme())))
    registry.update(meta_customizers(policy))
    return registry


def tagged_service(**kwargs):
    return Service(type_meta=TypeMeta("Service", SERVING_V1.string()), **kwargs)


class TestNormalizeMap:
    def test_blank_key_is_dropped(self):
        assert normalize_map({"": "a", "k": "v"}, EmptyMapPolicy.ABSENT) == {"k": "v"}

    def test_empty_map_becomes_absent(self):
        assert normalize_map({}, EmptyMapPolicy.ABSENT) is None
        assert normalize_map(None, EmptyMapPolicy.ABSENT) is None

    def test_empty_map_becomes_sentinel(self):
        assert normalize_map({"": "x"}, EmptyMapPolicy.SENTINEL) == {SENTINEL_KEY: SENTINEL_VALUE}


class TestObjectMeta:
    @pytest.mark.parametrize("policy, expected", [
        (EmptyMapPolicy.ABSENT, None),
        (EmptyMapPolicy.SENTINEL, {SENTINEL_KEY: SENTINEL_VALUE}),
    ])
    def test_blank_label_only_map_survives_round_trip(self, json_codec, policy, expected):
        gen = Generator.from_bytes(OBJECT_META_BYTES, meta_registry(policy))
        meta = gen.generate(ObjectMeta)
        assert gen.cursor.remaining() == 0
        assert meta.labels == expected
        assert meta.creation_timestamp == EPOCH

        decoded = json_codec.decode(json_codec.encode(tagged_service(metadata=meta)))
        assert decoded.metadata.labels == expected

    @given(st.binary(max_size=1024))
    def test_timestamps_have_whole_seconds(self, data):
        try:
            meta = Generator.from_bytes(data, meta_registry(EmptyMapPolicy.ABSENT)).generate(ObjectMeta)
        except CursorExhausted:
            return
        assert meta.creation_timestamp.microsecond == 0
        assert not meta.labels or "" not in meta.labels
        assert meta.owner_references is None or meta.owner_references


class TestLabelSelector:
    def test_empty_selector_gets_an_expression(self, registry):
        selector = Generator.from_bytes(EMPTY_SELECTOR_BYTES, registry).generate(LabelSelector)
        assert selector == LabelSelector(
            match_labels=None,
            match_expressions=[LabelSelectorRequirement(
                key="0", operator=LabelSelectorOperator.EXISTS, values=None)])

    @given(st.binary(max_size=2048))
    def test_selector_is_never_empty(self, registry, data):
        try:
            selector = Generator.from_bytes(data, registry).generate(LabelSelector)
        except CursorExhausted:
            return
        assert selector.match_labels or selector.match_expressions
        if selector.match_expressions:
            keys = [req.key for req in selector.match_expressions]
            assert keys == sorted(keys)
            for req in selector.match_expressions:
                if req.operator in (LabelSelectorOperator.IN, LabelSelectorOperator.NOT_IN):
                    assert req.values and req.values == sorted(req.values)
                else:
                    assert req.values is None


class TestURL:
    def test_separators_in_path_and_query_are_escaped(self, registry):
        data = b"\x00" * 4 + b"\x03a/b" + b"\x04k=v#"
        url = Generator.from_bytes(data, registry).generate(URL)
        assert url.path == "/a%2Fb"
        assert url.query == "k%3Dv%23"
        assert URL.parse(url.string()) == url

    @given(st.binary(max_size=512))
    def test_generated_url_survives_text_form(self, registry, data):
        try:
            url = Generator.from_bytes(data, registry).generate(URL)
        except CursorExhausted:
            return
        assert URL.parse(url.string()) == url


class TestConditions:
    def test_types_are_kept_and_other_fields_replaced(self, json_codec):
        status = ServiceStatus()
        status.initialize_conditions()
        fuzz_conditions(status.conditions, Generator.from_bytes(b"\x05" * 200))

        assert [c.type for c in status.conditions] == ["Ready", "ConfigurationsReady", "RoutesReady"]
        for cond in status.conditions:
            assert cond.status == "fffff"
            assert cond.severity == "fffff"
            assert cond.reason == "fffff"
            assert cond.message == "fffff"
            assert cond.last_transition_time is not None

        decoded = json_codec.decode(json_codec.encode(tagged_service(status=status)))
        assert semantic_equal(decoded.status, status)

    def test_service_status_always_has_known_conditions(self, registry):
        data = b"\x05" * 1024
        status = Generator.from_bytes(data, registry).generate(ServiceStatus)
        assert [c.type for c in status.conditions] == ["Ready", "ConfigurationsReady", "RoutesReady"]


class TestGeneric:
    def test_quantity_is_bounded(self, registry):
        assert Generator.from_bytes(b"\xff", registry).generate(Quantity) == Quantity(255)

    def test_type_meta_stays_blank(self, registry):
        assert Generator.from_bytes(b"", registry).generate(TypeMeta) == TypeMeta()

    def test_table_options_never_set_no_headers(self, registry):
        options = Generator.from_bytes(b"\x01\x02ab", registry).generate(TableOptions)
        assert options == TableOptions(no_headers=False, include_object="ab")

    @given(st.binary(max_size=2048))
    def test_raw_extension_holds_an_encoded_kind(self, registry, data):
        try:
            ext = Generator.from_bytes(data, registry).generate(RawExtension)
        except CursorExhausted:
            return
        assert not ext.raw.endswith(b"\n")
        assert json.loads(ext.raw)["kind"] in ("Status", "APIGroup")
