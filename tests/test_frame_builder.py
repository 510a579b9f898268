"""Tests for host frame construction."""

import pytest

from fp705.exceptions import FrameLengthError
from fp705.protocol.checksums import encode_bcc
from fp705.protocol.constants import CommandCode, ProtocolConstants
from fp705.protocol.encoding import encode_word
from fp705.protocol.frame_builder import build_packet, frame_length, next_sequence


class TestFrameLength:
    """Tests for frame_length function."""

    def test_empty_payload(self):
        """Test the declared length of a frame without data."""
        assert frame_length(0) == 42

    def test_counts_payload_bytes(self):
        """Test that every payload byte adds to the length."""
        assert frame_length(7) == 49


class TestNextSequence:
    """Tests for next_sequence function."""

    def test_increments(self):
        """Test normal increment."""
        assert next_sequence(0x20) == 0x21
        assert next_sequence(0xFE) == 0xFF

    def test_wraps_to_start(self):
        """Test that 0xFF wraps to 0x20."""
        assert next_sequence(0xFF) == ProtocolConstants.SEQ_START


class TestBuildPacket:
    """Tests for build_packet function."""

    def test_status_request(self):
        """Test the complete status request frame."""
        frame = build_packet(0x20, CommandCode.READ_STATUS)

        assert frame == bytes.fromhex("01 30 30 32 3a 20 30 30 34 3a 05 30 31 3b 3f 03")

    def test_layout_with_payload(self):
        """Test field positions of a frame with parameters."""
        frame = build_packet(0x21, CommandCode.FISCAL_RECEIPT_TOTAL, "0\t6.00\t")

        assert frame[0] == ProtocolConstants.PREAMBLE
        assert frame[1:5] == encode_word(49)
        assert frame[5] == 0x21
        assert frame[6:10] == b"0035"
        assert frame[10:17] == b"0\t6.00\t"
        assert frame[17] == ProtocolConstants.POSTAMBLE
        assert frame[18:22] == encode_bcc(frame[1:18])
        assert frame[22] == ProtocolConstants.TERMINATOR
        assert len(frame) == 23

    def test_cyrillic_payload_length(self):
        """Test that the length counts encoded bytes, not characters."""
        frame = build_packet(0x20, CommandCode.TEXT_RECEIPT_PRINT_TEXT, "Хляб\t")

        assert frame[1:5] == encode_word(frame_length(5))
        assert frame[10:15] == bytes([0xD5, 0xEB, 0xFF, 0xE1, 0x09])

    @pytest.mark.parametrize("sequence", [0x1F, 0x100])
    def test_sequence_out_of_range_raises(self, sequence):
        """Test that sequence bytes outside 0x20-0xFF are rejected."""
        with pytest.raises(ValueError):
            build_packet(sequence, CommandCode.READ_STATUS)

    def test_too_long_raises(self):
        """Test that a payload overflowing the length field is rejected."""
        with pytest.raises(FrameLengthError) as exc_info:
            build_packet(0x20, CommandCode.TEXT_RECEIPT_PRINT_TEXT, "x" * 70000)

        assert exc_info.value.length == frame_length(70000)

    def test_longest_frame(self):
        """Test that the largest declared length is still accepted."""
        payload_length = ProtocolConstants.MAX_FRAME_LENGTH - frame_length(0)

        frame = build_packet(0x20, CommandCode.TEXT_RECEIPT_PRINT_TEXT, "x" * payload_length)

        assert frame[1:5] == b"????"
