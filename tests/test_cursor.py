"""Tests for FuzzCursor primitive extraction."""

import pytest
from hypothesis import given, strategies as st

from roundtripfuzz.cursor import FuzzCursor
from roundtripfuzz.errors import CursorExhausted


class TestPrimitives:
    def test_get_int_reads_one_byte(self):
        cursor = FuzzCursor(b"\x07\xff")
        assert cursor.get_int() == 7
        assert cursor.get_int() == 255
        assert cursor.remaining() == 0

    def test_get_bool_uses_low_bit(self):
        cursor = FuzzCursor(b"\x02\x03")
        assert cursor.get_bool() is False
        assert cursor.get_bool() is True

    def test_fixed_width_integers_are_big_endian(self):
        cursor = FuzzCursor(b"\x00\x00\x01\x02" + b"\x00" * 7 + b"\x09")
        assert cursor.get_uint32() == 258
        assert cursor.get_uint64() == 9

    def test_get_int64_is_signed(self):
        assert FuzzCursor(b"\xff" * 8).get_int64() == -1

    def test_get_string_is_length_prefixed(self):
        cursor = FuzzCursor(b"\x03abcX")
        assert cursor.get_string() == "abc"
        assert cursor.position == 4

    def test_get_string_length_wraps_at_max_len(self):
        assert FuzzCursor(b"\x05ab").get_string(max_len=2) == "ab"

    def test_get_string_maps_every_byte_to_a_character(self):
        assert FuzzCursor(b"\x02\x00\xff").get_string() == "\x00\xff"

    def test_get_string_from_indexes_alphabet(self):
        assert FuzzCursor(b"\x03\x00\x01\x02").get_string_from("xy", 10) == "xyx"

    def test_get_string_from_rejects_empty_alphabet(self):
        with pytest.raises(ValueError):
            FuzzCursor(b"\x01\x01").get_string_from("", 5)


class TestExhaustion:
    def test_empty_buffer_raises(self):
        with pytest.raises(CursorExhausted):
            FuzzCursor(b"").get_int()

    def test_failed_read_does_not_move_position(self):
        cursor = FuzzCursor(b"\x01\x02\x03")
        with pytest.raises(CursorExhausted):
            cursor.get_uint32()
        assert cursor.position == 0
        assert cursor.get_int() == 1

    def test_short_string_gives_back_length_byte(self):
        cursor = FuzzCursor(b"\x05ab")
        with pytest.raises(CursorExhausted) as exc_info:
            cursor.get_string()
        assert cursor.position == 0
        assert exc_info.value.needed == 6

    @given(st.binary(max_size=64), st.integers(min_value=0, max_value=100))
    def test_never_reads_past_end(self, data, reads):
        cursor = FuzzCursor(data)
        for _ in range(reads):
            try:
                cursor.get_string(8)
            except CursorExhausted:
                break
        assert 0 <= cursor.position <= len(data)
