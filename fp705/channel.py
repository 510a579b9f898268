"""
Request/response channels over an FP705 transport.

IOChannel turns a host frame into exactly one parsed Response, resending
the identical frame when the printer does not answer:

    discard input -> write frame -> wait for PRE (skip SYN / noise, NAK ends the attempt)
                -> read through ETX -> parse -> drop replies to other frames
    timeout or malformed reply -> resend, up to max_retries attempts
    retries exhausted -> RequestTimeoutError

WarningChannel wraps one IOChannel for a single logical operation (a whole
receipt, a report, a status query) and accumulates the status flags the
printer reports along the way.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from fp705.exceptions import FrameError, RequestTimeoutError, TimeoutError
from fp705.protocol.constants import ProtocolConstants
from fp705.protocol.encoding import decode_word
from fp705.protocol.frame_reader import Response, parse_response
from fp705.protocol.status import Status, decode_status

if TYPE_CHECKING:
    from fp705.transport.abc import AbstractTransport

logger = logging.getLogger(__name__)


class IOChannel:
    """
    Retrying request/response exchange over a transport.

    A successfully parsed reply is a successful exchange even when its
    status bytes report an error; only link-level failures are retried.

    Args:
        transport: Open transport to the printer.
        max_retries: Number of attempts per frame before giving up.
        timeout: Timeout of each individual read, in seconds.
        retry_delay: Pause before a frame is resent, in seconds.
    """

    def __init__(
        self,
        transport: AbstractTransport,
        max_retries: int = ProtocolConstants.MAX_RETRIES,
        timeout: float = ProtocolConstants.DEFAULT_RECEIVE_TIMEOUT,
        retry_delay: float = ProtocolConstants.RETRY_DELAY,
    ) -> None:
        if max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {max_retries}")
        self._transport = transport
        self._max_retries = max_retries
        self._timeout = timeout
        self._retry_delay = retry_delay

    @property
    def max_retries(self) -> int:
        """Number of attempts per frame."""
        return self._max_retries

    async def send_packet(self, frame: bytes) -> Response:
        """
        Send a frame and wait for the printer's reply.

        Args:
            frame: Complete host frame.

        Returns:
            The parsed reply.

        Raises:
            RequestTimeoutError: If no valid reply arrived within max_retries attempts.
            TransportError: If the transport fails outright.
        """
        command = decode_word(frame[6:10])
        sequence = frame[5]

        for attempt in range(1, self._max_retries + 1):
            if attempt > 1 and self._retry_delay > 0:
                await asyncio.sleep(self._retry_delay)
            # Leftovers answer an earlier frame
            self._transport.discard_buffers()

            logger.debug(
                "Sending cmd=0x%02X seq=0x%02X (attempt %d/%d): %s",
                command, sequence, attempt, self._max_retries, frame.hex(" "),
            )
            await self._transport.write(frame)

            try:
                response = await self._read_response(sequence, command)
            except TimeoutError as e:
                logger.warning(
                    "No reply to cmd=0x%02X (attempt %d/%d): %s",
                    command, attempt, self._max_retries, e,
                )
                continue
            except FrameError as e:
                logger.warning(
                    "Malformed reply to cmd=0x%02X (attempt %d/%d): %s",
                    command, attempt, self._max_retries, e,
                )
                continue

            logger.debug("Received %r: %s", response, response.raw.hex(" "))
            return response

        logger.error("Printer did not answer cmd=0x%02X after %d attempts", command, self._max_retries)
        raise RequestTimeoutError(attempts=self._max_retries, command=command)

    async def _read_response(self, sequence: int, command: int) -> Response:
        """
        Read the reply to the frame with `sequence` and `command`.

        Replies echoing another sequence byte or command are late answers
        to an earlier frame; they are dropped and reading continues.

        Raises:
            TimeoutError: If a read times out or the printer stays busy too long.
            FrameError: If the printer answers NAK or the frame is malformed.
        """
        while True:
            response = await self._read_frame()
            if response.sequence == sequence and response.command == command:
                return response
            logger.debug(
                "Dropping stale reply %r while waiting for cmd=0x%02X seq=0x%02X",
                response, command, sequence,
            )

    async def _read_frame(self) -> Response:
        skipped = 0
        while True:
            byte = await self._transport.read_byte(self._timeout)
            if byte == ProtocolConstants.PREAMBLE:
                break
            if byte == ProtocolConstants.NAK:
                raise FrameError("Printer rejected the frame (NAK)")

            # SYN while the printer is busy, anything else is line noise
            skipped += 1
            if skipped > ProtocolConstants.MAX_SKIPPED_BYTES:
                raise TimeoutError(
                    f"No reply preamble after {skipped} bytes",
                    timeout_seconds=self._timeout,
                )

        rest = await self._transport.read_until(ProtocolConstants.TERMINATOR, self._timeout)
        return parse_response(bytes([ProtocolConstants.PREAMBLE]) + rest)


class WarningChannel:
    """
    Channel for one logical, multi-packet operation.

    Every reply's status bytes are decoded and the reported flags are
    accumulated as warnings, so the operation can continue and the caller
    still sees every condition the printer raised. RequestTimeoutError
    from the underlying IOChannel is never turned into a warning.

    Args:
        channel: IOChannel used for the exchanges.
        warnings: Initial warnings (empty by default).
    """

    def __init__(self, channel: IOChannel, warnings: Status = Status(0)) -> None:
        self._channel = channel
        self._warnings = warnings

    @property
    def warnings(self) -> Status:
        """Flags reported by the printer so far, in declaration order."""
        return self._warnings

    async def send_packet(self, frame: bytes) -> Response:
        """
        Send a frame and record the reply's status flags.

        Args:
            frame: Complete host frame.

        Returns:
            The parsed reply.

        Raises:
            RequestTimeoutError: If the printer did not answer.
        """
        response = await self._channel.send_packet(frame)

        status = decode_status(response.status)
        new_flags = status & ~self._warnings
        if new_flags:
            logger.debug("Printer reported %s", new_flags)
        self._warnings |= status

        return response
