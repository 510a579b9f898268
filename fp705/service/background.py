"""
Background receipt printing service.

Takes print requests from a PrintQueue one at a time, prints them on the
printer serving the requesting client and records the outcome in a
ReceiptRepository:

    queue.next() -> factory.get_printer(source_ip) -> print -> close printer
        warnings show an open receipt  -> PRINTED
        otherwise / device errors      -> FAILED

Requests are processed strictly one after another, which also serializes
access to each printer.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

from fp705.exceptions import (
    DeviceNotFoundError,
    ProtocolError,
    ReceiptNotFoundError,
    TimeoutError,
    TransportError,
)
from fp705.protocol.status import Status

if TYPE_CHECKING:
    from fp705.printer import ReceiptPrinter
    from fp705.service.printers import PrinterFactory
    from fp705.service.queue import PrintQueue, PrintReceiptRequest
    from fp705.service.repository import ReceiptRepository

logger = logging.getLogger(__name__)


class BackgroundReceiptPrintingService:
    """
    Prints queued receipts in a background task.

    Args:
        repository: Tracks the printing status of receipts.
        factory: Returns the printer for a client address.
        queue: Source of print requests.
    """

    def __init__(
        self,
        repository: ReceiptRepository,
        factory: PrinterFactory,
        queue: PrintQueue,
    ) -> None:
        self._repository = repository
        self._factory = factory
        self._queue = queue
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        """Check if the background task is running."""
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start processing the queue in a background task."""
        if self.is_running:
            return
        logger.info("Starting background printing service")
        self._task = asyncio.create_task(self._run(), name="receipt-printing")

    async def stop(self) -> None:
        """Stop the background task, letting a running print be cancelled."""
        if self._task is None:
            return
        logger.info("Stopping background printing service")
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def process_next(self) -> None:
        """Wait for the next request and print it."""
        request = await self._queue.next()
        await self._print(request)

    async def _run(self) -> None:
        while True:
            try:
                await self.process_next()
            except Exception:
                logger.exception("Unexpected error in background printing service")

    async def _print(self, request: PrintReceiptRequest) -> None:
        receipt = request.receipt
        printer: ReceiptPrinter | None = None

        try:
            printer = self._factory.get_printer(request.source_ip)

            if request.is_fiscal:
                response = await printer.print_fiscal_receipt(receipt)
            else:
                response = await printer.print_receipt(receipt)

            if response.warnings & Status.RECEIPT_OPEN:
                logger.info("Receipt %r printing accepted: %s", receipt.receipt_id, response.warnings)
                self._repository.finish_printing(receipt.receipt_id)
            else:
                logger.warning("Receipt %r printing rejected: %s", receipt.receipt_id, response.warnings)
                self._repository.fail_printing(receipt.receipt_id)

        except ReceiptNotFoundError:
            logger.warning("Receipt %r was not found in the repository", receipt.receipt_id)
        except DeviceNotFoundError:
            logger.warning("No printer found for %s", request.source_ip)
            self._fail(receipt.receipt_id)
        except (TimeoutError, TransportError, ProtocolError) as e:
            logger.warning("Printer failed on receipt %r: %s", receipt.receipt_id, e)
            self._fail(receipt.receipt_id)
        except Exception:
            logger.exception("Unexpected error printing receipt %r", receipt.receipt_id)
            self._fail(receipt.receipt_id)
        finally:
            if printer is not None:
                await self._close(printer)

    async def _close(self, printer: ReceiptPrinter) -> None:
        try:
            await printer.close()
        except Exception:
            logger.exception("Failed to close printer %r", printer)

    def _fail(self, receipt_id: str) -> None:
        try:
            self._repository.fail_printing(receipt_id)
        except ReceiptNotFoundError:
            logger.warning("Receipt %r was not found in the repository", receipt_id)
