"""
FP705 host frame construction.

Host frame format:

    [PRE][LEN x4][SEQ][CMD x4][DATA ...][PST][BCC x4][ETX]

- PRE: 0x01
- LEN: declared length, 32 + 1 + 4 + 4 + len(DATA) + 1, as nibble bytes
- SEQ: sequence byte (0x20-0xFF)
- CMD: command code as nibble bytes
- DATA: cp1251 encoded, TAB separated parameters
- PST: 0x05
- BCC: additive checksum of LEN through PST as nibble bytes
- ETX: 0x03

Reply frames (see frame_reader) carry the same header plus a separator
and the status bytes:

    [PRE][LEN x4][SEQ][CMD x4][DATA ...][SEP][STATUS x8][PST][BCC x4][ETX]
"""

from __future__ import annotations

from fp705.exceptions import FrameLengthError
from fp705.protocol.checksums import encode_bcc, frame_bcc
from fp705.protocol.constants import ProtocolConstants
from fp705.protocol.encoding import encode_payload, encode_word


def frame_length(payload_length: int) -> int:
    """
    Declared length of a host frame carrying `payload_length` data bytes.

    The 32 byte offset is fixed protocol overhead, not derived from the
    visible fields.
    """
    return ProtocolConstants.LENGTH_OFFSET + 1 + 4 + 4 + payload_length + 1


def next_sequence(sequence: int) -> int:
    """Return the sequence byte following `sequence`, wrapping to 0x20."""
    if sequence >= ProtocolConstants.SEQ_MAX:
        return ProtocolConstants.SEQ_START
    return sequence + 1


def build_packet(sequence: int, command: int, data: str = "") -> bytes:
    """
    Build a complete host frame.

    Args:
        sequence: Sequence byte (0x20-0xFF).
        command: Command code.
        data: Parameters text, usually produced by `params()`.

    Returns:
        Complete frame bytes.

    Raises:
        ValueError: If the sequence byte is out of range.
        FrameEncodingError: If `data` cannot be encoded as cp1251.
        FrameLengthError: If the frame is too long for the length field.

    Example:
        >>> build_packet(0x20, 0x4A).hex(" ")
        '01 30 30 32 3a 20 30 30 34 3a 05 30 31 3b 3f 03'
    """
    if not ProtocolConstants.SEQ_START <= sequence <= ProtocolConstants.SEQ_MAX:
        raise ValueError(f"Sequence byte must be 0x20-0xFF, got 0x{sequence:02X}")

    payload = encode_payload(data)
    length = frame_length(len(payload))
    if length > ProtocolConstants.MAX_FRAME_LENGTH:
        raise FrameLengthError(
            f"Frame length {length} exceeds 0x{ProtocolConstants.MAX_FRAME_LENGTH:04X}",
            length=length,
        )

    return (
        bytes([ProtocolConstants.PREAMBLE])
        + encode_word(length)
        + bytes([sequence])
        + encode_word(command)
        + payload
        + bytes([ProtocolConstants.POSTAMBLE])
        + frame_bcc(length, sequence, command, payload)
        + bytes([ProtocolConstants.TERMINATOR])
    )


def build_reply(sequence: int, command: int, data: bytes, status: bytes) -> bytes:
    """
    Build a reply frame as the printer sends it.

    Used by the mock transport to play the device side of an exchange.

    Args:
        sequence: Sequence byte echoed from the request.
        command: Command code echoed from the request.
        data: Reply data bytes.
        status: Status bytes.

    Returns:
        Complete reply frame bytes.
    """
    length = frame_length(len(data)) + 1 + len(status)
    body = (
        encode_word(length)
        + bytes([sequence])
        + encode_word(command)
        + data
        + bytes([ProtocolConstants.SEPARATOR])
        + status
        + bytes([ProtocolConstants.POSTAMBLE])
    )
    return (
        bytes([ProtocolConstants.PREAMBLE])
        + body
        + encode_bcc(body)
        + bytes([ProtocolConstants.TERMINATOR])
    )
