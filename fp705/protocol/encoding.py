"""
Nibble encoding and payload text utilities for the FP705 protocol.

The FP705 protocol transmits 16-bit values (frame length, command code and
BCC) as four bytes, one per nibble, each offset by 0x30. The most
significant nibble is sent first.

For example:
- Length 0x002E is transmitted as b"002>" (0x30, 0x30, 0x32, 0x3E)
- Command 0x4A is transmitted as b"004:" (0x30, 0x30, 0x34, 0x3A)

Text parameters are sent in the cp1251 code page, each one followed by a
TAB separator.
"""

from __future__ import annotations

from fp705.exceptions import FrameEncodingError
from fp705.protocol.constants import ProtocolConstants


def encode_word(value: int) -> bytes:
    """
    Encode a 16-bit value as 4 nibble bytes, most significant nibble first.

    Args:
        value: 16-bit value (0-65535).

    Returns:
        4-byte wire representation.

    Raises:
        ValueError: If value is not in range 0-65535.

    Example:
        >>> encode_word(0x4A)
        b'004:'
    """
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"Word value must be 0-65535, got {value}")

    base = ProtocolConstants.NIBBLE_BASE
    return bytes([
        base + ((value >> 12) & 0x0F),
        base + ((value >> 8) & 0x0F),
        base + ((value >> 4) & 0x0F),
        base + (value & 0x0F),
    ])


def decode_word(data: bytes | bytearray | memoryview) -> int:
    """
    Decode 4 nibble bytes to a 16-bit value.

    Args:
        data: 4 bytes in wire order (most significant nibble first).

    Returns:
        Decoded 16-bit value (0-65535).

    Raises:
        ValueError: If input is not 4 bytes or a byte is outside 0x30-0x3F.

    Example:
        >>> decode_word(b'004:')
        74
    """
    if len(data) != ProtocolConstants.WORD_SIZE:
        raise ValueError(f"Expected 4 nibble bytes, got {len(data)}")

    value = 0
    for byte in data:
        nibble = byte - ProtocolConstants.NIBBLE_BASE
        if not 0 <= nibble <= 0x0F:
            raise ValueError(f"Invalid nibble byte: 0x{byte:02X}")
        value = (value << 4) | nibble
    return value


def params(*values: object) -> str:
    """
    Join command parameters, each followed by a TAB.

    Example:
        >>> params("0", "6.00")
        '0\\t6.00\\t'
    """
    separator = ProtocolConstants.PARAM_SEPARATOR
    return "".join(f"{value}{separator}" for value in values)


def encode_payload(text: str) -> bytes:
    """
    Encode payload text in the printer's code page.

    Args:
        text: Command parameters as text.

    Returns:
        cp1251 encoded bytes.

    Raises:
        FrameEncodingError: If the text has characters outside cp1251.
    """
    try:
        return text.encode(ProtocolConstants.ENCODING)
    except UnicodeEncodeError as e:
        raise FrameEncodingError(
            f"Cannot encode payload as {ProtocolConstants.ENCODING}: "
            f"{e.object[e.start:e.end]!r} at position {e.start}",
            payload=text,
        ) from e


def decode_payload(data: bytes | bytearray) -> str:
    """Decode reply data from the printer's code page."""
    return bytes(data).decode(ProtocolConstants.ENCODING, errors="replace")
