"""Tests for reply frame parsing."""

import pytest

from fp705.exceptions import FrameError
from fp705.protocol.constants import CommandCode
from fp705.protocol.frame_builder import build_packet
from fp705.protocol.frame_reader import MIN_REPLY_SIZE, parse_response
from fp705.transport.mock import IDLE_STATUS, device_reply, status_bytes

# Reply to the status request: seq 0x20, cmd 0x4A, no data, idle status
STATUS_REPLY = bytes.fromhex(
    "01 30 30 33 33 20 30 30 34 3a 04 80 80 80 80 80 80 80 80 05 30 35 3b 3d 03"
)


class TestParseResponse:
    """Tests for parse_response function."""

    def test_status_reply(self):
        """Test parsing a reply without data."""
        response = parse_response(STATUS_REPLY)

        assert response.sequence == 0x20
        assert response.command == CommandCode.READ_STATUS
        assert response.data == b""
        assert response.status == IDLE_STATUS
        assert response.raw == STATUS_REPLY
        assert len(STATUS_REPLY) == MIN_REPLY_SIZE

    def test_data_and_status(self):
        """Test that data and status are split at the separator."""
        request = build_packet(0x27, CommandCode.READ_DATE_TIME)
        status = status_bytes((2, 0x02))

        response = parse_response(device_reply(request, "18-10-26 10:15:00", status))

        assert response.sequence == 0x27
        assert response.text == "18-10-26 10:15:00"
        assert response.status == status

    def test_values(self):
        """Test splitting reply data into values."""
        request = build_packet(0x20, CommandCode.READ_STATUS)

        response = parse_response(device_reply(request, "0\t1234\t"))

        assert response.values == ["0", "1234"]

    def test_empty_values(self):
        """Test that a reply without data has no values."""
        assert parse_response(STATUS_REPLY).values == []

    def test_bcc_not_checked(self):
        """Test that a wrong BCC does not reject the frame."""
        raw = bytearray(STATUS_REPLY)
        raw[-2] = 0x30

        assert parse_response(raw).command == CommandCode.READ_STATUS

    def test_too_short_raises(self):
        """Test that truncated frames are rejected."""
        with pytest.raises(FrameError):
            parse_response(STATUS_REPLY[:12] + b"\x03")

    @pytest.mark.parametrize(
        "position, value",
        [
            (0, 0x02),    # preamble
            (-1, 0x00),   # terminator
            (19, 0x00),   # postamble
            (10, 0x00),   # separator
            (6, 0x41),    # command nibble
        ],
    )
    def test_malformed_raises(self, position, value):
        """Test that broken framing raises FrameError."""
        raw = bytearray(STATUS_REPLY)
        raw[position] = value

        with pytest.raises(FrameError) as exc_info:
            parse_response(raw)

        assert exc_info.value.raw_frame == bytes(raw)
