"""Tests for BCC calculation."""

import doctest

from fp705.protocol import checksums
from fp705.protocol.checksums import calculate_bcc, encode_bcc, frame_bcc
from fp705.protocol.constants import CommandCode
from fp705.protocol.frame_builder import build_packet


class TestCalculateBcc:
    """Tests for calculate_bcc function."""

    def test_sum(self):
        """Test that the BCC is the byte sum."""
        assert calculate_bcc(b"\x30\x30\x05") == 0x65

    def test_empty(self):
        """Test that empty data has a zero BCC."""
        assert calculate_bcc(b"") == 0

    def test_keeps_lower_16_bits(self):
        """Test that the sum wraps at 16 bits."""
        # 258 * 0xFF = 0x100FE
        assert calculate_bcc(bytes([0xFF] * 258)) == 0x00FE

    def test_docstring_example(self):
        """Test that the documented example matches the result."""
        assert doctest.testmod(checksums).failed == 0


class TestEncodeBcc:
    """Tests for encode_bcc function."""

    def test_nibble_encoded(self):
        """Test that the BCC is sent as nibble bytes."""
        assert encode_bcc(b"\x30\x30\x05") == b"0065"


class TestFrameBcc:
    """Tests for frame_bcc function."""

    def test_status_request(self):
        """Test the BCC of the status request."""
        assert frame_bcc(0x2A, 0x20, CommandCode.READ_STATUS, b"") == b"01;?"

    def test_payload_change_changes_bcc(self):
        """Test that changing one payload byte changes the BCC."""
        first = frame_bcc(0x2B, 0x20, CommandCode.TEXT_RECEIPT_PRINT_TEXT, b"a")
        second = frame_bcc(0x2B, 0x20, CommandCode.TEXT_RECEIPT_PRINT_TEXT, b"b")

        assert first != second

    def test_matches_checksummed_region(self):
        """Test that the BCC covers the length bytes through the postamble."""
        frame = build_packet(0x25, CommandCode.FISCAL_RECEIPT_TOTAL, "0\t6.00\t")

        assert frame[-5:-1] == encode_bcc(frame[1:-5])
