"""
FP705 status byte decoding.

Every reply carries 8 status bytes. Each byte holds independent flag
bits; bit 7 is always set and bytes 3, 6 and 7 carry no flags that the
driver uses. The mapping from (byte, bit) to a named flag is a table, so
adding a flag is a data change.
"""

from __future__ import annotations

from enum import Flag, auto
from typing import Final

from fp705.protocol.constants import ProtocolConstants


class Status(Flag):
    """
    Printer status flags.

    A Status value is a set of flags: use `in` for membership, iterate
    for the individual flags (in declaration order). The empty value,
    Status(0), means no condition is reported.
    """

    # Byte 0 - General purpose
    SYNTAX_ERROR = auto()
    INVALID_COMMAND = auto()
    CLOCK_NOT_SET = auto()
    PRINTING_MECHANISM_FAILURE = auto()
    GENERAL_ERROR = auto()
    COVER_OPEN = auto()

    # Byte 1 - General purpose
    OVERFLOW = auto()
    COMMAND_NOT_PERMITTED = auto()

    # Byte 2 - Receipt and paper
    END_OF_PAPER = auto()
    NEAR_PAPER_END = auto()
    EJ_FULL = auto()
    FISCAL_RECEIPT_IS_OPEN = auto()
    EJ_NEARLY_FULL = auto()
    NON_FISCAL_RECEIPT_IS_OPEN = auto()

    # Byte 4 - Fiscal memory
    FM_ACCESS_ERROR = auto()
    FM_NEARLY_FULL = auto()
    FM_FULL = auto()
    FM_GENERAL_ERROR = auto()
    FM_NOT_FOUND = auto()

    ERRORS = (
        SYNTAX_ERROR
        | INVALID_COMMAND
        | PRINTING_MECHANISM_FAILURE
        | GENERAL_ERROR
        | COVER_OPEN
        | OVERFLOW
        | COMMAND_NOT_PERMITTED
        | END_OF_PAPER
        | EJ_FULL
        | FM_ACCESS_ERROR
        | FM_FULL
        | FM_GENERAL_ERROR
        | FM_NOT_FOUND
    )
    """Conditions that prevent the printer from completing a command."""

    RECEIPT_OPEN = FISCAL_RECEIPT_IS_OPEN | NON_FISCAL_RECEIPT_IS_OPEN
    """A fiscal or a non-fiscal receipt is open."""


STATUS_TABLE: Final[tuple[tuple[int, int, Status], ...]] = (
    (0, 0x01, Status.SYNTAX_ERROR),
    (0, 0x02, Status.INVALID_COMMAND),
    (0, 0x04, Status.CLOCK_NOT_SET),
    (0, 0x10, Status.PRINTING_MECHANISM_FAILURE),
    (0, 0x20, Status.GENERAL_ERROR),
    (0, 0x40, Status.COVER_OPEN),
    (1, 0x01, Status.OVERFLOW),
    (1, 0x02, Status.COMMAND_NOT_PERMITTED),
    (2, 0x01, Status.END_OF_PAPER),
    (2, 0x02, Status.NEAR_PAPER_END),
    (2, 0x04, Status.EJ_FULL),
    (2, 0x08, Status.FISCAL_RECEIPT_IS_OPEN),
    (2, 0x10, Status.EJ_NEARLY_FULL),
    (2, 0x20, Status.NON_FISCAL_RECEIPT_IS_OPEN),
    (4, 0x01, Status.FM_ACCESS_ERROR),
    (4, 0x08, Status.FM_NEARLY_FULL),
    (4, 0x10, Status.FM_FULL),
    (4, 0x20, Status.FM_GENERAL_ERROR),
    (4, 0x40, Status.FM_NOT_FOUND),
)
"""(byte index, bit mask, flag) rows checked by decode_status."""


def decode_status(status_bytes: bytes | bytearray | memoryview) -> Status:
    """
    Decode raw status bytes into a Status flag set.

    Args:
        status_bytes: The 8 status bytes of a reply.

    Returns:
        The flags whose bits are set; Status(0) when none are.

    Raises:
        ValueError: If fewer than 8 status bytes are given.

    Example:
        >>> decode_status(bytes([0x80, 0x80, 0x88, 0x80, 0x80, 0x80, 0x80, 0x80]))
        <Status.FISCAL_RECEIPT_IS_OPEN: 2048>
    """
    if len(status_bytes) < ProtocolConstants.STATUS_LENGTH:
        raise ValueError(
            f"Expected {ProtocolConstants.STATUS_LENGTH} status bytes, got {len(status_bytes)}"
        )

    result = Status(0)
    for index, mask, flag in STATUS_TABLE:
        if status_bytes[index] & mask:
            result |= flag
    return result
