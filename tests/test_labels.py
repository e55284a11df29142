"""Tests for label and DNS label syntax generators."""

import re

from hypothesis import given, strategies as st

from roundtripfuzz.errors import CursorExhausted
from roundtripfuzz.generator import Generator
from roundtripfuzz.labels import random_dns_label, random_label_key, random_label_part

LABEL_PART = re.compile(r"^([A-Za-z0-9]([-A-Za-z0-9_.]*[A-Za-z0-9])?)?$")
DNS_LABEL = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
DNS = r"[a-z0-9]([-a-z0-9]*[a-z0-9])?"
LABEL_KEY = re.compile(
    r"^(" + DNS + r"(\." + DNS + r"){0,2}/)?[A-Za-z0-9]([-A-Za-z0-9_.]*[A-Za-z0-9])?$")


def test_empty_label_part_when_allowed():
    gen = Generator.from_bytes(b"\x00\x00\x00")
    assert random_label_part(gen, True) == ""


def test_label_part_never_empty_when_required():
    gen = Generator.from_bytes(b"\x00" * 5)
    assert random_label_part(gen, False) == "0"
    assert gen.cursor.remaining() == 0


def test_label_part_middle_reads_increment_then_range():
    # length 3; first middle: increment 1, range 3 (".")
    gen = Generator.from_bytes(b"\x00\x00\x03" + b"\x01\x03" + b"\x00\x00" * 2)
    assert random_label_part(gen, False) == "0.0"


def test_dns_label_middle_reads_range_then_increment():
    # length 3; first middle: range 1 ("a"-"z"), increment 3 ("d")
    gen = Generator.from_bytes(b"\x00\x00\x03" + b"\x01\x03" + b"\x00\x00" * 2)
    assert random_dns_label(gen) == "0d0"


def test_dns_label_zero_length_becomes_two():
    gen = Generator.from_bytes(b"\x00" * 7)
    assert len(random_dns_label(gen)) == 2


@given(st.binary(max_size=256), st.booleans())
def test_label_part_syntax(data, can_be_empty):
    try:
        part = random_label_part(Generator.from_bytes(data), can_be_empty)
    except CursorExhausted:
        return
    assert LABEL_PART.match(part)
    assert len(part) <= 63
    if not can_be_empty:
        assert part


@given(st.binary(max_size=256))
def test_dns_label_syntax(data):
    try:
        label = random_dns_label(Generator.from_bytes(data))
    except CursorExhausted:
        return
    assert DNS_LABEL.match(label)
    assert 1 <= len(label) <= 62


@given(st.binary(max_size=1024))
def test_label_key_syntax(data):
    try:
        key = random_label_key(Generator.from_bytes(data))
    except CursorExhausted:
        return
    assert LABEL_KEY.match(key)
    assert key.count("/") <= 1
