"""
Transport layer for FP705 communication.

This package provides transport implementations for the byte stream to
the printer.

Available transports:
- AsyncSerialTransport: serial port via pyserial-asyncio, with its own reply buffer
- MockTransport: Mock transport for testing without hardware

Example:
    >>> from fp705.transport import AsyncSerialTransport
    >>> async with AsyncSerialTransport("/dev/ttyUSB0") as transport:
    ...     await transport.write(frame_data)
    ...     reply = await transport.read_until()

Testing Example:
    >>> from fp705.transport import MockTransport, device_reply
    >>> mock = MockTransport()
    >>> mock.set_response_callback(lambda frame: device_reply(frame))
"""

from fp705.transport.abc import AbstractTransport
from fp705.transport.mock import IDLE_STATUS, MockTransport, device_reply, status_bytes
from fp705.transport.serial_async import AsyncSerialTransport, ReplyBuffer

__all__ = [
    "AbstractTransport",
    "AsyncSerialTransport",
    "ReplyBuffer",
    "MockTransport",
    "IDLE_STATUS",
    "device_reply",
    "status_bytes",
]
