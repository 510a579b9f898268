"""
fp705 - Python driver for Datecs FP705 fiscal printers.

This library provides async communication with Datecs FP705 family fiscal
printers over a serial link, supporting fiscal and non-fiscal receipts,
operator and fiscal memory reports, and status queries.

Example:
    >>> from fp705 import FP705Printer, Receipt, ReceiptItem
    >>> from fp705.transport import AsyncSerialTransport
    >>>
    >>> async def main():
    ...     transport = AsyncSerialTransport("/dev/ttyUSB0")
    ...     await transport.open()
    ...     async with FP705Printer(transport) as printer:
    ...         receipt = Receipt(
    ...             prefix_lines=["Welcome"],
    ...             items=[ReceiptItem(name="Bread", quantity=2, price=1.5, vat=20)],
    ...             currency="USD",
    ...         )
    ...         response = await printer.print_receipt(receipt)
"""

from fp705.channel import IOChannel, WarningChannel
from fp705.exceptions import (
    ConnectionError,
    DeviceNotFoundError,
    FP705Error,
    FrameEncodingError,
    FrameLengthError,
    FrameError,
    ProtocolError,
    ReceiptAlreadyRegisteredError,
    ReceiptNotFoundError,
    RequestTimeoutError,
    TimeoutError,
    TransportError,
)
from fp705.models.records import (
    FiscalPolicy,
    PeriodType,
    PrintReceiptResponse,
    Receipt,
    ReceiptItem,
    RegisterState,
)
from fp705.printer import FP705Printer, ReceiptPrinter
from fp705.protocol.status import Status
from fp705.transport import AbstractTransport, AsyncSerialTransport

__version__ = "0.1.0"
__all__ = [
    # Printer
    "FP705Printer",
    "ReceiptPrinter",
    # Channels
    "IOChannel",
    "WarningChannel",
    # Models
    "Receipt",
    "ReceiptItem",
    "FiscalPolicy",
    "PeriodType",
    "RegisterState",
    "PrintReceiptResponse",
    "Status",
    # Exceptions
    "FP705Error",
    "ProtocolError",
    "FrameError",
    "FrameEncodingError",
    "FrameLengthError",
    "TimeoutError",
    "RequestTimeoutError",
    "ConnectionError",
    "TransportError",
    "DeviceNotFoundError",
    "ReceiptNotFoundError",
    "ReceiptAlreadyRegisteredError",
    # Transport
    "AbstractTransport",
    "AsyncSerialTransport",
    # Version
    "__version__",
]
