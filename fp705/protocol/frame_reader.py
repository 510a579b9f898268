"""
FP705 reply frame parsing.

This module handles parsing of reply frames from the wire format into
structured data. Reply frame format:

    [PRE][LEN x4][SEQ][CMD x4][DATA ...][SEP][STATUS x8][PST][BCC x4][ETX]

- PRE: 0x01
- LEN, CMD, BCC: 16-bit values as nibble bytes (0x30 + nibble)
- SEQ: sequence byte echoed from the request
- DATA: cp1251 text, TAB separated values (may be empty)
- SEP: 0x04
- STATUS: 8 status bytes (see status.py)
- PST: 0x05
- ETX: 0x03

Framing markers are validated; the BCC is not compared. The transport
channel treats a frame that fails to parse the same way as a timeout.
"""

from __future__ import annotations

from dataclasses import dataclass

from fp705.exceptions import FrameError
from fp705.protocol.constants import ProtocolConstants
from fp705.protocol.encoding import decode_payload, decode_word

_HEADER_SIZE = 10
"""PRE + LEN(4) + SEQ + CMD(4)."""

_TRAILER_SIZE = 6
"""PST + BCC(4) + ETX."""

MIN_REPLY_SIZE = _HEADER_SIZE + 1 + ProtocolConstants.STATUS_LENGTH + _TRAILER_SIZE
"""Size of a reply frame without data."""


@dataclass(frozen=True)
class Response:
    """
    A parsed reply frame.

    Attributes:
        raw: Complete raw frame bytes as received.
        data: Reply data bytes (between the header and the separator).
        status: Status bytes (between the separator and the postamble).
        sequence: Sequence byte echoed by the printer.
        command: Command code echoed by the printer.
    """

    raw: bytes
    data: bytes
    status: bytes
    sequence: int
    command: int

    @property
    def text(self) -> str:
        """Reply data decoded from cp1251."""
        return decode_payload(self.data)

    @property
    def values(self) -> list[str]:
        """Reply data split into its TAB separated values."""
        text = self.text
        if not text:
            return []
        return text.rstrip(ProtocolConstants.PARAM_SEPARATOR).split(ProtocolConstants.PARAM_SEPARATOR)

    def __repr__(self) -> str:
        return (
            f"Response(cmd=0x{self.command:02X}, seq=0x{self.sequence:02X}, "
            f"data={len(self.data)} bytes, status={self.status.hex()})"
        )


def parse_response(buffer: bytes | bytearray | memoryview) -> Response:
    """
    Parse a complete reply frame.

    Args:
        buffer: Frame bytes from preamble through terminator.

    Returns:
        The parsed Response.

    Raises:
        FrameError: If the buffer is not a well-formed reply frame.
    """
    raw = bytes(buffer)

    if len(raw) < MIN_REPLY_SIZE:
        raise FrameError(
            f"Reply too short (need {MIN_REPLY_SIZE}, have {len(raw)})",
            raw_frame=raw,
        )

    if raw[0] != ProtocolConstants.PREAMBLE:
        raise FrameError(f"Missing preamble, found 0x{raw[0]:02X}", raw_frame=raw)

    if raw[-1] != ProtocolConstants.TERMINATOR:
        raise FrameError(f"Missing terminator, found 0x{raw[-1]:02X}", raw_frame=raw)

    postamble_pos = len(raw) - _TRAILER_SIZE
    if raw[postamble_pos] != ProtocolConstants.POSTAMBLE:
        raise FrameError(
            f"Missing postamble at position {postamble_pos}, found 0x{raw[postamble_pos]:02X}",
            raw_frame=raw,
        )

    separator_pos = postamble_pos - ProtocolConstants.STATUS_LENGTH - 1
    if raw[separator_pos] != ProtocolConstants.SEPARATOR:
        raise FrameError(
            f"Missing separator at position {separator_pos}, found 0x{raw[separator_pos]:02X}",
            raw_frame=raw,
        )

    try:
        command = decode_word(raw[6:_HEADER_SIZE])
    except ValueError as e:
        raise FrameError(f"Invalid command field: {e}", raw_frame=raw) from e

    return Response(
        raw=raw,
        data=raw[_HEADER_SIZE:separator_pos],
        status=raw[separator_pos + 1:postamble_pos],
        sequence=raw[5],
        command=command,
    )
