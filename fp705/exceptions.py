"""
Exception hierarchy for fp705.

All exceptions inherit from FP705Error, providing a clean hierarchy
for error handling. The design follows these principles:

1. Protocol errors (malformed frames, unencodable payloads) are distinct
   from link errors (timeouts, I/O failures)
2. A single read timeout is distinct from an exhausted retry budget
3. Printing service errors live alongside the protocol errors so callers
   can catch everything with one except clause
"""

from __future__ import annotations


class FP705Error(Exception):
    """
    Base exception for all fp705 errors.

    All library-specific exceptions inherit from this class, allowing
    callers to catch all fp705 errors with a single except clause.
    """

    pass


class ProtocolError(FP705Error):
    """
    Protocol-level error.

    Raised when the FP705 frame protocol is violated, such as:
    - Invalid reply frame format
    - Payload text that cannot be put on the wire
    """

    pass


class FrameError(ProtocolError):
    """
    Reply frame parsing error.

    Raised when a received frame cannot be parsed, such as:
    - Missing preamble, separator, postamble or terminator
    - Frame shorter than the fixed reply overhead
    - Device rejected the request with NAK

    The transport channel treats this exactly like a read timeout.
    """

    def __init__(self, message: str, *, raw_frame: bytes | None = None) -> None:
        super().__init__(message)
        self.raw_frame = raw_frame

    def __str__(self) -> str:
        base = super().__str__()
        if self.raw_frame:
            display = self.raw_frame[:24].hex(" ")
            if len(self.raw_frame) > 24:
                display += " ..."
            return f"{base} (frame={display})"
        return base


class FrameEncodingError(ProtocolError):
    """
    Payload encoding failure.

    Raised when command parameters contain characters that have no
    representation in the printer's cp1251 code page. This is a caller
    error and is never retried.
    """

    def __init__(self, message: str, *, payload: str | None = None) -> None:
        super().__init__(message)
        self.payload = payload


class FrameLengthError(ProtocolError):
    """
    Frame too long.

    Raised when the payload would push the declared frame length past
    the 16-bit length field. Like FrameEncodingError this is a caller
    error and is never retried.
    """

    def __init__(self, message: str, *, length: int | None = None) -> None:
        super().__init__(message)
        self.length = length


class TimeoutError(FP705Error):  # noqa: A001 - intentionally shadows builtin
    """
    Communication timeout.

    Raised when a single read does not complete within the expected time.
    """

    def __init__(
        self,
        message: str = "Communication timeout",
        *,
        timeout_seconds: float | None = None,
    ) -> None:
        super().__init__(message)
        self.timeout_seconds = timeout_seconds

    def __str__(self) -> str:
        base = super().__str__()
        if self.timeout_seconds is not None:
            return f"{base} (after {self.timeout_seconds:.1f}s)"
        return base


class RequestTimeoutError(TimeoutError):
    """
    Request retries exhausted.

    Raised by the transport channel when the printer has not answered a
    frame after every allowed attempt. The device state is unknown after
    this error.
    """

    def __init__(
        self,
        message: str = "Printer did not answer",
        *,
        attempts: int | None = None,
        command: int | None = None,
    ) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.command = command

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.command is not None:
            parts.append(f"command=0x{self.command:02X}")
        if self.attempts is not None:
            parts.append(f"attempts={self.attempts}")
        return " ".join(parts)


class ConnectionError(FP705Error):  # noqa: A001 - intentionally shadows builtin
    """
    Printer connection error.

    Raised when:
    - The serial port cannot be opened
    - The connection is unexpectedly lost
    """

    pass


class TransportError(FP705Error):
    """
    Transport-level error.

    Raised for low-level transport issues:
    - Serial port errors
    - I/O errors
    - Transport used while closed
    """

    pass


class DeviceNotFoundError(FP705Error):
    """No printer is registered for the requesting source."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"No printer found for source {source!r}")


class ReceiptNotFoundError(FP705Error):
    """The receipt is not known to the receipt repository."""

    def __init__(self, receipt_id: str) -> None:
        self.receipt_id = receipt_id
        super().__init__(f"Receipt {receipt_id!r} is not registered")


class ReceiptAlreadyRegisteredError(FP705Error):
    """A receipt with the same id is already registered."""

    def __init__(self, receipt_id: str) -> None:
        self.receipt_id = receipt_id
        super().__init__(f"Receipt {receipt_id!r} is already registered")
