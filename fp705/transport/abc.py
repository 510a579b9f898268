"""
Byte stream to the printer.

Transports only move bytes: framing, sequencing and retries live in
fp705.channel. Implementations are AsyncSerialTransport for hardware and
MockTransport for tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from fp705.protocol.constants import ProtocolConstants

if TYPE_CHECKING:
    from types import TracebackType


class AbstractTransport(ABC):
    """
    Exclusive byte stream to one FP705.

    Only one printer operation may use a transport at a time. Reads raise
    fp705.exceptions.TimeoutError when nothing arrives in time and
    TransportError when the link is closed or broken.

        async with AsyncSerialTransport("/dev/ttyUSB0") as transport:
            printer = FP705Printer(transport)
    """

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """True while the link can be used."""
        ...

    @property
    @abstractmethod
    def port_name(self) -> str:
        """Port path or other identifier of the link."""
        ...

    @abstractmethod
    async def open(self) -> None:
        """Open the link; raises TransportError on failure."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the link. Closing a closed link does nothing."""
        ...

    @abstractmethod
    async def write(self, data: bytes) -> None:
        """Send one host frame."""
        ...

    @abstractmethod
    async def read_until(
        self,
        terminator: int = ProtocolConstants.TERMINATOR,
        timeout: float | None = None,
    ) -> bytes:
        """
        Read up to and including `terminator` (ETX unless given).

        A None timeout means the transport's default timeout.
        """
        ...

    @abstractmethod
    async def read(self, size: int, timeout: float | None = None) -> bytes:
        """Read exactly `size` bytes."""
        ...

    @abstractmethod
    async def read_byte(self, timeout: float | None = None) -> int:
        """Read one byte; used for the preamble and SYN/NAK control bytes."""
        ...

    @abstractmethod
    def discard_buffers(self) -> None:
        """
        Drop everything received but not yet read.

        Called before every frame is written so a late reply to an earlier
        frame is not mistaken for the next one.
        """
        ...

    async def __aenter__(self) -> AbstractTransport:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
