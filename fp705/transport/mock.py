"""
Mock transport for testing.

This module provides a mock transport implementation that allows testing
the FP705 protocol layer without a printer. Responses can be pre-configured
or generated per written frame using a callback; `device_reply` builds a
well-formed printer reply to a host frame.

Example:
    >>> from fp705.transport import MockTransport, device_reply
    >>> from fp705 import FP705Printer
    >>>
    >>> mock = MockTransport()
    >>> mock.set_response_callback(lambda frame: device_reply(frame))
    >>>
    >>> async with FP705Printer(mock, fiscal_policy=[]) as printer:
    ...     status = await printer.get_status()
"""

from __future__ import annotations

from collections import deque
from typing import Callable, Final

from fp705.exceptions import TimeoutError, TransportError
from fp705.protocol.constants import ProtocolConstants
from fp705.protocol.encoding import decode_word, encode_payload
from fp705.protocol.frame_builder import build_reply
from fp705.transport.abc import AbstractTransport

IDLE_STATUS: Final[bytes] = bytes([0x80] * ProtocolConstants.STATUS_LENGTH)
"""Status bytes of a printer reporting no condition (only bit 7 set)."""


def status_bytes(*flags: tuple[int, int]) -> bytes:
    """
    Build status bytes with the given (byte index, bit mask) pairs set.

    Example:
        >>> status_bytes((2, 0x20)).hex()
        '8080a08080808080'
    """
    result = bytearray(IDLE_STATUS)
    for index, mask in flags:
        result[index] |= mask
    return bytes(result)


def device_reply(
    request: bytes,
    data: str | bytes = b"",
    status: bytes = IDLE_STATUS,
) -> bytes:
    """
    Build the printer's reply to a host frame.

    The reply echoes the request's sequence byte and command code.

    Args:
        request: Host frame as written by the driver.
        data: Reply data (text is encoded as cp1251).
        status: Status bytes to report.

    Returns:
        Complete reply frame bytes.
    """
    if isinstance(data, str):
        data = encode_payload(data)
    sequence = request[5]
    command = decode_word(request[6:10])
    return build_reply(sequence, command, data, status)


class MockTransport(AbstractTransport):
    """
    Mock transport for testing without hardware.

    This transport simulates the printer link by providing pre-configured
    responses. It records all written data for verification in tests.
    A read with no data available raises TimeoutError, like a silent
    printer.

    Attributes:
        written_data: List of all bytes written to the transport.

    Example:
        >>> mock = MockTransport()
        >>> mock.add_response(bytes([0x16, 0x16]))  # SYN, SYN
        >>>
        >>> async with mock:
        ...     await mock.write(b"test")
        ...     response = await mock.read_byte()
        ...     assert response == 0x16
        ...     assert mock.written_data == [b"test"]
    """

    def __init__(
        self,
        port_name: str = "mock://fp705",
        default_timeout: float = ProtocolConstants.DEFAULT_RECEIVE_TIMEOUT,
        *,
        auto_open: bool = True,
    ) -> None:
        """
        Initialize the mock transport.

        Args:
            port_name: Identifier for the mock transport.
            default_timeout: Default timeout for read operations.
            auto_open: Start in the open state, like a stream handed over
                by the caller.
        """
        self._port_name = port_name
        self._default_timeout = default_timeout
        self._is_open = auto_open
        self._responses: deque[bytes] = deque()
        self._written_data: list[bytes] = []
        self._read_buffer = bytearray()
        self._response_callback: Callable[[bytes], bytes | None] | None = None

    @property
    def is_open(self) -> bool:
        """Check if the mock transport is open."""
        return self._is_open

    @property
    def port_name(self) -> str:
        """Get the mock port name."""
        return self._port_name

    @property
    def written_data(self) -> list[bytes]:
        """Get all data written to the transport."""
        return self._written_data.copy()

    @property
    def last_written(self) -> bytes | None:
        """Get the most recently written data."""
        return self._written_data[-1] if self._written_data else None

    def add_response(self, response: bytes) -> None:
        """
        Add a response to the queue.

        Responses are returned in FIFO order on read operations.

        Args:
            response: Bytes to return on next read.
        """
        self._responses.append(response)

    def add_responses(self, *responses: bytes) -> None:
        """
        Add multiple responses to the queue.

        Args:
            *responses: Multiple byte responses to add.
        """
        for response in responses:
            self._responses.append(response)

    def set_response_callback(
        self,
        callback: Callable[[bytes], bytes | None] | None,
    ) -> None:
        """
        Set a callback to dynamically generate responses.

        The callback receives each written frame and returns the bytes the
        printer sends back. If it returns None, nothing is sent (the
        printer stays silent for that frame).

        Args:
            callback: Function that takes written bytes and returns response.
        """
        self._response_callback = callback

    def clear(self) -> None:
        """Clear all written data and pending responses."""
        self._written_data.clear()
        self._responses.clear()
        self._read_buffer.clear()

    def clear_written(self) -> None:
        """Clear only the written data history."""
        self._written_data.clear()

    async def open(self) -> None:
        """Open the mock transport."""
        if self._is_open:
            raise TransportError("Mock transport already open")
        self._is_open = True

    async def close(self) -> None:
        """Close the mock transport."""
        self._is_open = False

    async def write(self, data: bytes) -> None:
        """
        Write data to the mock transport.

        Records the written data and optionally triggers response callback.

        Args:
            data: Bytes to write.

        Raises:
            TransportError: If transport is not open.
        """
        if not self._is_open:
            raise TransportError("Mock transport not open")

        self._written_data.append(bytes(data))

        if self._response_callback:
            response = self._response_callback(bytes(data))
            if response is not None:
                self._read_buffer.extend(response)

    async def read_until(
        self,
        terminator: int = ProtocolConstants.TERMINATOR,
        timeout: float | None = None,
    ) -> bytes:
        """
        Read data until terminator is found.

        Args:
            terminator: Byte to read until.
            timeout: Read timeout (ignored in mock).

        Returns:
            Bytes including terminator.

        Raises:
            TimeoutError: If the terminator is not available.
            TransportError: If transport is not open.
        """
        if not self._is_open:
            raise TransportError("Mock transport not open")

        while terminator not in self._read_buffer and self._responses:
            self._read_buffer.extend(self._responses.popleft())

        if terminator in self._read_buffer:
            idx = self._read_buffer.index(terminator)
            result = bytes(self._read_buffer[:idx + 1])
            del self._read_buffer[:idx + 1]
            return result

        raise TimeoutError("No mock response available", timeout_seconds=self._effective(timeout))

    async def read(self, size: int, timeout: float | None = None) -> bytes:
        """
        Read exact number of bytes.

        Args:
            size: Number of bytes to read.
            timeout: Read timeout (ignored in mock).

        Returns:
            Exactly size bytes.

        Raises:
            TimeoutError: If not enough data available.
            TransportError: If transport is not open.
        """
        if not self._is_open:
            raise TransportError("Mock transport not open")

        while len(self._read_buffer) < size and self._responses:
            self._read_buffer.extend(self._responses.popleft())

        if len(self._read_buffer) < size:
            raise TimeoutError(
                f"Not enough mock data: need {size}, have {len(self._read_buffer)}",
                timeout_seconds=self._effective(timeout),
            )

        result = bytes(self._read_buffer[:size])
        del self._read_buffer[:size]
        return result

    async def read_byte(self, timeout: float | None = None) -> int:
        """
        Read a single byte.

        Args:
            timeout: Read timeout (ignored in mock).

        Returns:
            Single byte value.

        Raises:
            TimeoutError: If no data available.
            TransportError: If transport is not open.
        """
        data = await self.read(1, timeout)
        return data[0]

    def discard_buffers(self) -> None:
        """Discard pending data in buffers."""
        self._read_buffer.clear()

    def assert_written(self, expected: bytes, index: int = -1) -> None:
        """
        Assert that specific data was written.

        Args:
            expected: Expected bytes.
            index: Index in written_data list (-1 for last).

        Raises:
            AssertionError: If data doesn't match.
        """
        if not self._written_data:
            raise AssertionError("No data written to mock transport")

        actual = self._written_data[index]
        if actual != expected:
            raise AssertionError(f"Written data mismatch: expected {expected!r}, got {actual!r}")

    def assert_write_count(self, expected: int) -> None:
        """
        Assert number of write operations.

        Args:
            expected: Expected number of writes.

        Raises:
            AssertionError: If count doesn't match.
        """
        actual = len(self._written_data)
        if actual != expected:
            raise AssertionError(f"Write count mismatch: expected {expected}, got {actual}")

    def _effective(self, timeout: float | None) -> float:
        return timeout if timeout is not None else self._default_timeout
