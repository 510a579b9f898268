"""
Printer lookup for the printing service.

A PrinterFactory returns the printer serving a client address. The
printing service closes each printer after use, so factories hand out a
fresh driver per request.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable

from fp705.exceptions import DeviceNotFoundError
from fp705.models.records import PrintReceiptResponse, Receipt
from fp705.printer import ReceiptPrinter
from fp705.protocol.status import Status

if TYPE_CHECKING:
    from datetime import datetime

    from fp705.models.records import PeriodType, RegisterState

logger = logging.getLogger(__name__)


class PrinterFactory(ABC):
    """Returns the printer serving a client address."""

    @abstractmethod
    def get_printer(self, source_ip: str) -> ReceiptPrinter:
        """
        Get the printer for `source_ip`.

        Raises:
            DeviceNotFoundError: If no printer serves that address.
        """
        ...


class RegistryPrinterFactory(PrinterFactory):
    """
    Printer factory backed by a registry of printer builders.

    Example:
        >>> factory = RegistryPrinterFactory()
        >>> factory.register("10.0.0.7", lambda: FP705Printer(transport, policies))
    """

    def __init__(self) -> None:
        self._builders: dict[str, Callable[[], ReceiptPrinter]] = {}

    def register(self, source_ip: str, builder: Callable[[], ReceiptPrinter]) -> None:
        """Serve `source_ip` with printers made by `builder`."""
        self._builders[source_ip] = builder

    def get_printer(self, source_ip: str) -> ReceiptPrinter:
        try:
            builder = self._builders[source_ip]
        except KeyError:
            raise DeviceNotFoundError(source_ip) from None
        return builder()


class FakePrinter(ReceiptPrinter):
    """
    Printer that only records what it was asked to print.

    Prints report a NON_FISCAL_RECEIPT_IS_OPEN warning, which the printing
    service reads as an accepted receipt.
    """

    def __init__(self) -> None:
        self.receipts: list[Receipt] = []
        self.fiscal_receipts: list[Receipt] = []
        self.closed = False

    async def print_receipt(self, receipt: Receipt) -> PrintReceiptResponse:
        self.receipts.append(receipt)
        return PrintReceiptResponse(warnings=Status.NON_FISCAL_RECEIPT_IS_OPEN)

    async def print_fiscal_receipt(self, receipt: Receipt) -> PrintReceiptResponse:
        logger.info("Fake fiscal receipt %r: %s", receipt.receipt_id, list(receipt.items))
        self.fiscal_receipts.append(receipt)
        return PrintReceiptResponse(warnings=Status.NON_FISCAL_RECEIPT_IS_OPEN)

    async def report_for_operator(self, operator_id: str, state: RegisterState) -> None:
        pass

    async def report_for_period(self, start: datetime, end: datetime, period_type: PeriodType) -> None:
        pass

    async def close(self) -> None:
        self.closed = True


class FakePrinterFactory(PrinterFactory):
    """Hands out FakePrinters for every address."""

    def __init__(self) -> None:
        self.printers: list[FakePrinter] = []

    def get_printer(self, source_ip: str) -> FakePrinter:
        printer = FakePrinter()
        self.printers.append(printer)
        return printer
