"""
FP705 protocol command codes and constants.

Based on the Datecs FP-705 / FMP v2 communication protocol description.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Final


class CommandCode(IntEnum):
    """
    FP705 command codes for host-to-printer communication.

    Command codes are 16-bit values sent as 4 nibble bytes. They are
    grouped by function:
    - 0x26-0x2A: Non-fiscal (text) receipts
    - 0x30-0x38: Fiscal receipts
    - 0x3E, 0x4A: Device queries
    - 0x5E, 0x69: Reports
    """

    # ===== Non-fiscal Receipt =====

    TEXT_RECEIPT_OPEN = 0x26
    """Open a non-fiscal receipt (no parameters)."""

    TEXT_RECEIPT_CLOSE = 0x27
    """Close the non-fiscal receipt (no parameters)."""

    TEXT_RECEIPT_PRINT_TEXT = 0x2A
    """Print a free text line in a non-fiscal receipt."""

    # ===== Fiscal Receipt =====

    FISCAL_RECEIPT_OPEN = 0x30
    """Open a fiscal receipt: {OpCode}{OpPwd}{TillNmb}{Invoice}."""

    FISCAL_RECEIPT_PAYMENT = 0x31
    """Register a sale: {PluName}{TaxCd}{Price}{Quantity}{DiscountType}{DiscountValue}{Department}."""

    FISCAL_RECEIPT_TOTAL = 0x35
    """Payments and calculation of the total sum: {PaidMode}{Amount}."""

    FISCAL_RECEIPT_PRINT_TEXT = 0x36
    """Print a free text line in a fiscal receipt."""

    FISCAL_RECEIPT_CLOSE = 0x38
    """Close the fiscal receipt (no parameters)."""

    # ===== Device Queries =====

    READ_DATE_TIME = 0x3E
    """Read the date and time of the device clock."""

    READ_STATUS = 0x4A
    """Read the status bytes."""

    # ===== Reports =====

    FISCAL_MEMORY_REPORT_BY_DATE = 0x5E
    """Fiscal memory report by date: {Type}{Start}{End}."""

    REPORT_OPERATORS = 0x69
    """Operators report: {FirstOper}{LastOper}{Clear}."""


class ProtocolConstants:
    """
    FP705 protocol constants.

    Framing markers, timing defaults and protocol limits used across
    the codec and the transport channel.
    """

    # ===== Frame Markers =====

    PREAMBLE: Final[int] = 0x01
    """Start of a framed message."""

    POSTAMBLE: Final[int] = 0x05
    """End of the checksummed part of a frame."""

    TERMINATOR: Final[int] = 0x03
    """End of a framed message."""

    SEPARATOR: Final[int] = 0x04
    """Separates reply data from the status bytes."""

    NAK: Final[int] = 0x15
    """Single-byte reply: frame rejected, resend it."""

    SYN: Final[int] = 0x16
    """Single-byte reply: device busy, keep waiting."""

    PARAM_SEPARATOR: Final[str] = "\t"
    """Follows every command parameter, including the last one."""

    # ===== Frame Layout =====

    LENGTH_OFFSET: Final[int] = 0x20
    """Fixed overhead added to every declared frame length."""

    NIBBLE_BASE: Final[int] = 0x30
    """Every length, command and BCC nibble is sent as 0x30 + nibble."""

    WORD_SIZE: Final[int] = 4
    """Number of bytes used to send a 16-bit value."""

    MAX_FRAME_LENGTH: Final[int] = 0xFFFF
    """Largest declared length the length field can carry."""

    STATUS_LENGTH: Final[int] = 8
    """Number of status bytes in every reply."""

    ENCODING: Final[str] = "cp1251"
    """Code page of every text payload."""

    # ===== Sequence =====

    SEQ_START: Final[int] = 0x20
    """First sequence byte of every logical operation."""

    SEQ_MAX: Final[int] = 0xFF
    """Largest sequence byte; the counter wraps back to SEQ_START."""

    # ===== Timing Constants (in seconds for Python) =====

    DEFAULT_RECEIVE_TIMEOUT: Final[float] = 0.5
    """Time allowed for a single read before the attempt is abandoned."""

    RETRY_DELAY: Final[float] = 0.05
    """Pause before a frame is resent."""

    MAX_RETRIES: Final[int] = 50
    """Attempts per frame for print, status and clock operations."""

    REPORT_MAX_RETRIES: Final[int] = 3
    """Attempts per frame for report commands (device may never answer)."""

    MAX_SKIPPED_BYTES: Final[int] = 512
    """SYN or noise bytes tolerated while waiting for a reply preamble."""

    # ===== Serial Defaults =====

    DEFAULT_BAUD_RATE: Final[int] = 115200

    # ===== Receipt Defaults =====

    DEFAULT_VAT_GROUP: Final[str] = "1"
    """VAT group used when no fiscal policy matches an item's rate."""

    REPORT_DATE_FORMAT: Final[str] = "%d-%m-%y"
    """Date format of report parameters (DD-MM-YY)."""
