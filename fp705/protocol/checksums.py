"""
16-bit additive BCC calculation.

The FP705 protocol uses a simple additive block check:
- Sum every byte from the first length byte up to and including the
  postamble (preamble and terminator are excluded)
- Keep only the lower 16 bits
- Encode as 4 nibble bytes (0x30 + nibble), most significant first

The BCC is placed after the postamble, before the terminator.
"""

from __future__ import annotations

from fp705.protocol.constants import ProtocolConstants
from fp705.protocol.encoding import encode_word


def calculate_bcc(data: bytes | bytearray | memoryview) -> int:
    """
    Calculate the 16-bit additive BCC over the specified data.

    Args:
        data: Checksummed portion of a frame (length bytes through postamble).

    Returns:
        16-bit BCC value (0-65535).

    Example:
        >>> calculate_bcc(b"\\x30\\x30\\x05")
        101
    """
    return sum(data) & 0xFFFF


def encode_bcc(data: bytes | bytearray | memoryview) -> bytes:
    """
    Calculate the BCC and encode it as 4 nibble bytes.

    Args:
        data: Checksummed portion of a frame.

    Returns:
        4-byte wire representation of the BCC.
    """
    return encode_word(calculate_bcc(data))


def frame_bcc(length: int, sequence: int, command: int, payload: bytes) -> bytes:
    """
    Compute the wire BCC of a host frame from its fields.

    Sums the length bytes, the sequence byte, the command bytes, every
    payload byte and the postamble, in wire order.

    Args:
        length: Declared frame length.
        sequence: Sequence byte.
        command: Command code.
        payload: Encoded payload bytes.

    Returns:
        4-byte wire representation of the BCC.
    """
    checksummed = (
        encode_word(length)
        + bytes([sequence])
        + encode_word(command)
        + payload
        + bytes([ProtocolConstants.POSTAMBLE])
    )
    return encode_bcc(checksummed)
