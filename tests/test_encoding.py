"""Tests for nibble encoding and payload text utilities."""

import pytest

from fp705.exceptions import FrameEncodingError
from fp705.protocol.encoding import (
    decode_payload,
    decode_word,
    encode_payload,
    encode_word,
    params,
)


class TestEncodeWord:
    """Tests for encode_word function."""

    def test_command_code(self):
        """Test encoding the status command code."""
        assert encode_word(0x4A) == b"004:"

    def test_length(self):
        """Test encoding a frame length."""
        assert encode_word(0x002E) == b"002>"

    def test_most_significant_nibble_first(self):
        """Test that nibbles are sent most significant first."""
        assert encode_word(0x1234) == bytes([0x31, 0x32, 0x33, 0x34])

    def test_bounds(self):
        """Test the smallest and largest words."""
        assert encode_word(0) == b"0000"
        assert encode_word(0xFFFF) == b"????"

    @pytest.mark.parametrize("value", [-1, 0x10000])
    def test_out_of_range_raises(self, value):
        """Test that values outside 16 bits are rejected."""
        with pytest.raises(ValueError):
            encode_word(value)


class TestDecodeWord:
    """Tests for decode_word function."""

    def test_decode(self):
        """Test decoding nibble bytes."""
        assert decode_word(b"004:") == 0x4A
        assert decode_word(b"01;?") == 0x01BF

    def test_wrong_size_raises(self):
        """Test that anything but 4 bytes is rejected."""
        with pytest.raises(ValueError):
            decode_word(b"004")

    def test_invalid_nibble_raises(self):
        """Test that bytes outside 0x30-0x3F are rejected."""
        with pytest.raises(ValueError):
            decode_word(b"00@0")


class TestParams:
    """Tests for params function."""

    def test_each_value_followed_by_tab(self):
        """Test that every parameter is terminated by a TAB."""
        assert params("0", "6.00") == "0\t6.00\t"

    def test_empty_values_kept(self):
        """Test that empty parameters still produce a separator."""
        assert params("1", "0000", "1", "") == "1\t0000\t1\t\t"

    def test_no_values(self):
        """Test that no parameters give an empty payload."""
        assert params() == ""


class TestPayload:
    """Tests for payload text encoding."""

    def test_cyrillic_is_single_byte(self):
        """Test that Cyrillic text is encoded as cp1251."""
        assert encode_payload("Хляб") == bytes([0xD5, 0xEB, 0xFF, 0xE1])

    def test_unencodable_raises(self):
        """Test that characters outside cp1251 raise FrameEncodingError."""
        with pytest.raises(FrameEncodingError) as exc_info:
            encode_payload("Tea 中")

        assert exc_info.value.payload == "Tea 中"

    def test_decode(self):
        """Test decoding reply data from cp1251."""
        assert decode_payload(b"\xc4\xe0") == "Да"
