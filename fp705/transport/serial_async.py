"""
Serial transport for the FP705 using pyserial-asyncio.

The printer is attached over RS-232 or a USB virtual COM port, 115200 8N1
without flow control by default.

Received bytes are collected by a ReplyBuffer protocol instead of an
asyncio StreamReader, so `discard_buffers()` drops everything received
so far, including bytes asyncio already pulled off the port. A late reply
to an earlier frame therefore never reaches the channel.

Example:
    >>> transport = AsyncSerialTransport("/dev/ttyUSB0")
    >>> async with transport:
    ...     await transport.write(build_packet(0x20, CommandCode.READ_STATUS))
    ...     reply = await transport.read_until()
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

import serial
import serial_asyncio

from fp705.exceptions import TimeoutError, TransportError
from fp705.protocol.constants import ProtocolConstants
from fp705.transport.abc import AbstractTransport

logger = logging.getLogger(__name__)


class ReplyBuffer(asyncio.Protocol):
    """
    Collects the bytes the printer sends.

    Readers wait on `data_ready`, which is set whenever bytes arrive or
    the connection is lost.
    """

    def __init__(self) -> None:
        self.buffer = bytearray()
        self.data_ready = asyncio.Event()
        self.connection_closed = asyncio.Event()
        self.transport: asyncio.Transport | None = None

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self.transport = transport  # type: ignore[assignment]

    def data_received(self, data: bytes) -> None:
        self.buffer.extend(data)
        self.data_ready.set()

    def connection_lost(self, exc: Exception | None) -> None:
        if exc is not None:
            logger.warning("Serial connection lost: %s", exc)
        self.connection_closed.set()
        self.data_ready.set()

    def take(self, size: int) -> bytes:
        """Remove and return the first `size` buffered bytes."""
        chunk = bytes(self.buffer[:size])
        del self.buffer[:size]
        return chunk


class AsyncSerialTransport(AbstractTransport):
    """
    FP705 serial port transport.

    Args:
        port: Serial port path or pyserial URL ("/dev/ttyUSB0", "COM3").
        baudrate: Baud rate.
        default_timeout: Read timeout used when a read passes none, in seconds.
    """

    def __init__(
        self,
        port: str,
        baudrate: int = ProtocolConstants.DEFAULT_BAUD_RATE,
        default_timeout: float = ProtocolConstants.DEFAULT_RECEIVE_TIMEOUT,
    ) -> None:
        self._port = port
        self._baudrate = baudrate
        self._default_timeout = default_timeout
        self._protocol: ReplyBuffer | None = None

    @property
    def is_open(self) -> bool:
        return (
            self._protocol is not None
            and self._protocol.transport is not None
            and not self._protocol.connection_closed.is_set()
        )

    @property
    def port_name(self) -> str:
        return self._port

    @property
    def baudrate(self) -> int:
        return self._baudrate

    async def open(self) -> None:
        """
        Open the port with 8N1 settings.

        Raises:
            TransportError: If the port cannot be opened.
        """
        if self.is_open:
            return

        loop = asyncio.get_running_loop()
        try:
            _, protocol = await serial_asyncio.create_serial_connection(
                loop,
                ReplyBuffer,
                self._port,
                baudrate=self._baudrate,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                bytesize=serial.EIGHTBITS,
                xonxoff=False,
                rtscts=False,
            )
        except (OSError, serial.SerialException) as e:
            raise TransportError(f"Failed to open serial port {self._port}: {e}") from e

        self._protocol = protocol
        logger.info("Opened %s at %d baud", self._port, self._baudrate)

    async def close(self) -> None:
        """Close the port. Safe to call multiple times."""
        protocol, self._protocol = self._protocol, None
        if protocol is None or protocol.transport is None:
            return

        protocol.transport.close()
        try:
            await asyncio.wait_for(protocol.connection_closed.wait(), self._default_timeout)
        except asyncio.TimeoutError:
            logger.warning("Serial port %s did not confirm close", self._port)

    async def write(self, data: bytes) -> None:
        """
        Send a frame.

        Raises:
            TransportError: If the port is not open.
        """
        self._ensure_open().transport.write(data)

    async def read_until(
        self,
        terminator: int = ProtocolConstants.TERMINATOR,
        timeout: float | None = None,
    ) -> bytes:
        protocol = self._ensure_open()

        def available() -> int:
            index = protocol.buffer.find(terminator)
            return index + 1 if index >= 0 else 0

        size = await self._wait(available, timeout, f"terminator 0x{terminator:02X}")
        return protocol.take(size)

    async def read(self, size: int, timeout: float | None = None) -> bytes:
        protocol = self._ensure_open()
        if size <= 0:
            return b""

        def available() -> int:
            return size if len(protocol.buffer) >= size else 0

        await self._wait(available, timeout, f"{size} bytes")
        return protocol.take(size)

    async def read_byte(self, timeout: float | None = None) -> int:
        return (await self.read(1, timeout))[0]

    def discard_buffers(self) -> None:
        """Drop received bytes and reset the port's input buffer."""
        if self._protocol is None:
            return

        if self._protocol.buffer:
            logger.debug("Discarding %d received bytes", len(self._protocol.buffer))
        self._protocol.buffer.clear()

        port = getattr(self._protocol.transport, "serial", None)
        if port is not None:
            try:
                port.reset_input_buffer()
            except (OSError, serial.SerialException) as e:
                logger.debug("Could not reset input buffer of %s: %s", self._port, e)

    def _ensure_open(self) -> ReplyBuffer:
        if not self.is_open:
            raise TransportError(f"Serial port {self._port} is not open")
        return self._protocol  # type: ignore[return-value]

    async def _wait(self, available: Callable[[], int], timeout: float | None, what: str) -> int:
        """Wait until `available()` reports a non-zero chunk size."""
        protocol = self._ensure_open()
        effective_timeout = timeout if timeout is not None else self._default_timeout
        loop = asyncio.get_running_loop()
        deadline = loop.time() + effective_timeout

        while True:
            size = available()
            if size:
                return size
            if protocol.connection_closed.is_set():
                raise TransportError(f"Serial port {self._port} closed while waiting for {what}")

            remaining = deadline - loop.time()
            if remaining <= 0:
                raise TimeoutError(f"Timeout waiting for {what}", timeout_seconds=effective_timeout)

            protocol.data_ready.clear()
            try:
                await asyncio.wait_for(protocol.data_ready.wait(), remaining)
            except asyncio.TimeoutError:
                raise TimeoutError(
                    f"Timeout waiting for {what}",
                    timeout_seconds=effective_timeout,
                ) from None

    def __repr__(self) -> str:
        status = "open" if self.is_open else "closed"
        return f"AsyncSerialTransport({self._port!r}, baudrate={self._baudrate}, {status})"
