"""
Datecs FP705 receipt printer driver.

This module provides the high-level printer interface: fiscal and
non-fiscal receipts, reports and device queries.

Every print runs a small state machine on a fresh WarningChannel:

    Recovering -> Open -> Emitting -> Closed

Recovering reads the printer status first and force-closes a receipt left
open by an earlier, aborted run (non-fiscal first, then fiscal), so a
timeout during one print is repaired by the next one.

Operations on one printer must not overlap: the driver keeps no lock and
interleaved frames would corrupt the printer's receipt state.

Example:
    >>> from fp705 import FP705Printer, FiscalPolicy, Receipt, ReceiptItem
    >>> from fp705.transport import AsyncSerialTransport
    >>>
    >>> async def main():
    ...     transport = AsyncSerialTransport("/dev/ttyUSB0")
    ...     await transport.open()
    ...     policy = [FiscalPolicy(vat=20, group="2"), FiscalPolicy(vat=9, group="3")]
    ...     async with FP705Printer(transport, policy) as printer:
    ...         receipt = Receipt(items=[ReceiptItem(name="Bread", quantity=1, price=1.5, vat=9)])
    ...         response = await printer.print_fiscal_receipt(receipt)
    ...         print(response.warnings)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from fp705.channel import IOChannel, WarningChannel
from fp705.exceptions import RequestTimeoutError
from fp705.models.records import (
    FiscalPolicy,
    PeriodType,
    PrintReceiptResponse,
    Receipt,
    RegisterState,
    resolve_vat_group,
)
from fp705.protocol.constants import CommandCode, ProtocolConstants
from fp705.protocol.encoding import params
from fp705.protocol.frame_builder import build_packet, next_sequence
from fp705.protocol.status import Status, decode_status

if TYPE_CHECKING:
    from datetime import datetime
    from types import TracebackType

    from fp705.protocol.frame_reader import Response
    from fp705.transport.abc import AbstractTransport

logger = logging.getLogger(__name__)


class ReceiptPrinter(ABC):
    """Interface of a receipt printer used by the printing service."""

    @abstractmethod
    async def print_receipt(self, receipt: Receipt) -> PrintReceiptResponse:
        """Print a non-fiscal (text) receipt."""
        ...

    @abstractmethod
    async def print_fiscal_receipt(self, receipt: Receipt) -> PrintReceiptResponse:
        """Print a fiscal receipt."""
        ...

    @abstractmethod
    async def report_for_operator(self, operator_id: str, state: RegisterState) -> None:
        """Print the report of one operator."""
        ...

    @abstractmethod
    async def report_for_period(
        self,
        start: datetime,
        end: datetime,
        period_type: PeriodType,
    ) -> None:
        """Print the fiscal memory report for a period."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the printer."""
        ...

    async def __aenter__(self) -> ReceiptPrinter:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()


class FP705Printer(ReceiptPrinter):
    """
    Driver of the Datecs FP705 fiscal printer.

    Args:
        transport: Open transport to the printer.
        fiscal_policy: Ordered VAT rate to VAT group mapping.
        timeout: Timeout of each read, in seconds.
        max_retries: Attempts per frame for print, status and clock operations.
        report_retries: Attempts per frame for report commands.
        retry_delay: Pause before a frame is resent, in seconds.
    """

    def __init__(
        self,
        transport: AbstractTransport,
        fiscal_policy: list[FiscalPolicy] | tuple[FiscalPolicy, ...] = (),
        *,
        timeout: float = ProtocolConstants.DEFAULT_RECEIVE_TIMEOUT,
        max_retries: int = ProtocolConstants.MAX_RETRIES,
        report_retries: int = ProtocolConstants.REPORT_MAX_RETRIES,
        retry_delay: float = ProtocolConstants.RETRY_DELAY,
    ) -> None:
        self._transport = transport
        self._fiscal_policy = tuple(fiscal_policy)
        self._timeout = timeout
        self._max_retries = max_retries
        self._report_retries = report_retries
        self._retry_delay = retry_delay

    @property
    def transport(self) -> AbstractTransport:
        """Get the underlying transport."""
        return self._transport

    @property
    def fiscal_policy(self) -> tuple[FiscalPolicy, ...]:
        """Get the VAT rate to VAT group mapping."""
        return self._fiscal_policy

    async def print_receipt(self, receipt: Receipt) -> PrintReceiptResponse:
        """
        Print a non-fiscal receipt.

        Args:
            receipt: Receipt to print; items are printed as text lines.

        Returns:
            The warnings reported by the printer.

        Raises:
            RequestTimeoutError: If the printer stopped answering.
            FrameEncodingError: If a line cannot be encoded as cp1251.
        """
        channel = self._create_channel(self._max_retries)
        seq = ProtocolConstants.SEQ_START

        await self._finalize_not_completed_operations(seq, channel)

        await channel.send_packet(build_packet(seq, CommandCode.TEXT_RECEIPT_OPEN))
        seq = next_sequence(seq)

        for line in receipt.prefix_lines:
            await channel.send_packet(build_packet(seq, CommandCode.TEXT_RECEIPT_PRINT_TEXT, params(line)))
            seq = next_sequence(seq)

        for item in receipt.items:
            row = f"{item.name} - {item.quantity:.2f} X {item.price:.2f} {receipt.currency}"
            await channel.send_packet(build_packet(seq, CommandCode.TEXT_RECEIPT_PRINT_TEXT, params(row)))
            seq = next_sequence(seq)

        for line in receipt.suffix_lines:
            await channel.send_packet(build_packet(seq, CommandCode.TEXT_RECEIPT_PRINT_TEXT, params(line)))
            seq = next_sequence(seq)

        await self._close_non_fiscal_receipt(seq, channel)

        logger.info("Printed receipt %r with %d items", receipt.receipt_id, len(receipt.items))
        return PrintReceiptResponse(warnings=channel.warnings)

    async def print_fiscal_receipt(self, receipt: Receipt) -> PrintReceiptResponse:
        """
        Print a fiscal receipt.

        Each item is registered under the VAT group resolved from the
        fiscal policy, and the receipt is paid in full (payment type 0)
        before it is closed.

        Args:
            receipt: Receipt to print.

        Returns:
            The warnings reported by the printer.

        Raises:
            RequestTimeoutError: If the printer stopped answering.
            FrameEncodingError: If a line cannot be encoded as cp1251.
        """
        channel = self._create_channel(self._max_retries)
        seq = ProtocolConstants.SEQ_START

        await self._finalize_not_completed_operations(seq, channel)

        # Operator 1, password 0000, till 1, no invoice
        await channel.send_packet(
            build_packet(seq, CommandCode.FISCAL_RECEIPT_OPEN, params("1", "0000", "1", ""))
        )
        seq = next_sequence(seq)

        for line in receipt.prefix_lines:
            await channel.send_packet(build_packet(seq, CommandCode.FISCAL_RECEIPT_PRINT_TEXT, params(line)))
            seq = next_sequence(seq)

        total = 0.0
        for item in receipt.items:
            vat_group = resolve_vat_group(item.vat, self._fiscal_policy)
            data = params(item.name, vat_group, f"{item.price:.2f}", f"{item.quantity:.3f}", "0", "", "0")
            await channel.send_packet(build_packet(seq, CommandCode.FISCAL_RECEIPT_PAYMENT, data))
            seq = next_sequence(seq)
            total += item.price * item.quantity

        for line in receipt.suffix_lines:
            await channel.send_packet(build_packet(seq, CommandCode.FISCAL_RECEIPT_PRINT_TEXT, params(line)))
            seq = next_sequence(seq)

        await self._close_fiscal_receipt(seq, total, channel)

        logger.info("Printed fiscal receipt %r, total %.2f", receipt.receipt_id, total)
        return PrintReceiptResponse(warnings=channel.warnings)

    async def report_for_period(
        self,
        start: datetime,
        end: datetime,
        period_type: PeriodType,
    ) -> None:
        """
        Print the fiscal memory report for a period.

        The printer does not reliably answer this command, so a timeout is
        treated as success.

        Args:
            start: First day of the period.
            end: Last day of the period.
            period_type: SHORT or EXTENDED report.
        """
        date_format = ProtocolConstants.REPORT_DATE_FORMAT
        data = params(period_type.value, start.strftime(date_format), end.strftime(date_format))

        channel = self._create_channel(self._report_retries)
        try:
            response = await channel.send_packet(
                build_packet(ProtocolConstants.SEQ_START, CommandCode.FISCAL_MEMORY_REPORT_BY_DATE, data)
            )
            self._log_response(response)
        except RequestTimeoutError:
            logger.info("Period report sent, printer did not confirm")

    async def report_for_operator(self, operator_id: str, state: RegisterState) -> None:
        """
        Print the report of a single operator.

        The printer does not reliably answer this command, so a timeout is
        treated as success.

        Args:
            operator_id: Operator to report on.
            state: Whether the operator registers are cleared afterwards.
        """
        channel = self._create_channel(self._report_retries)
        try:
            response = await channel.send_packet(
                build_packet(
                    ProtocolConstants.SEQ_START,
                    CommandCode.REPORT_OPERATORS,
                    params(operator_id, operator_id, state.value),
                )
            )
            self._log_response(response)
        except RequestTimeoutError:
            logger.info("Operator report for %s sent, printer did not confirm", operator_id)

    async def get_status(self) -> Status:
        """
        Get the status of the printer.

        Returns:
            The reported flags; an empty Status means the printer is OK.

        Raises:
            RequestTimeoutError: If the printer did not answer.
        """
        channel = self._create_channel(self._max_retries)
        response = await channel.send_packet(build_packet(ProtocolConstants.SEQ_START, CommandCode.READ_STATUS))
        return decode_status(response.status)

    async def get_time(self) -> str:
        """
        Get the current date and time of the printer clock.

        Returns:
            The clock value as reported by the printer.

        Raises:
            RequestTimeoutError: If the printer did not answer.
        """
        channel = self._create_channel(self._max_retries)
        response = await channel.send_packet(build_packet(ProtocolConstants.SEQ_START, CommandCode.READ_DATE_TIME))
        self._log_response(response)
        return response.text

    async def close(self) -> None:
        """Close the transport to the printer."""
        await self._transport.close()

    def _create_channel(self, max_retries: int) -> WarningChannel:
        return WarningChannel(
            IOChannel(
                self._transport,
                max_retries=max_retries,
                timeout=self._timeout,
                retry_delay=self._retry_delay,
            )
        )

    async def _finalize_not_completed_operations(self, seq: int, channel: WarningChannel) -> None:
        """Close receipts left open by an earlier run."""
        current_status = await self.get_status()
        logger.info("Checking for unfinished receipts, printer status: %s", current_status)

        if Status.NON_FISCAL_RECEIPT_IS_OPEN in current_status:
            logger.info("Non-fiscal receipt is open, closing it")
            await self._close_non_fiscal_receipt(seq, channel)
            logger.info("Non-fiscal receipt closed")

        if Status.FISCAL_RECEIPT_IS_OPEN in current_status:
            logger.info("Fiscal receipt is open, closing it")
            await self._close_fiscal_receipt(seq, 0.0, channel)
            logger.info("Fiscal receipt closed")

    async def _close_fiscal_receipt(self, seq: int, total: float, channel: WarningChannel) -> None:
        await channel.send_packet(build_packet(seq, CommandCode.FISCAL_RECEIPT_TOTAL, params("0", f"{total:.2f}")))
        await channel.send_packet(build_packet(seq, CommandCode.FISCAL_RECEIPT_CLOSE))

    async def _close_non_fiscal_receipt(self, seq: int, channel: WarningChannel) -> None:
        await channel.send_packet(build_packet(seq, CommandCode.TEXT_RECEIPT_CLOSE))

    def _log_response(self, response: Response) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Response cmd=0x%02X data=%r status=%s",
                response.command, response.text, decode_status(response.status),
            )

    def __repr__(self) -> str:
        return f"FP705Printer({self._transport!r}, policies={len(self._fiscal_policy)})"
