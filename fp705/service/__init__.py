"""
Receipt printing service.

Queues receipts, prints them in the background on the printer serving the
requesting client and tracks their printing status.

Example:
    >>> from fp705.service import (
    ...     BackgroundReceiptPrintingService,
    ...     InMemoryPrintQueue,
    ...     InMemoryReceiptRepository,
    ...     PrintReceiptRequest,
    ...     ReceiptRequest,
    ...     RegistryPrinterFactory,
    ... )
    >>>
    >>> repository = InMemoryReceiptRepository()
    >>> queue = InMemoryPrintQueue()
    >>> service = BackgroundReceiptPrintingService(repository, factory, queue)
    >>> service.start()
    >>> repository.register(ReceiptRequest(receipt, "10.0.0.7", operator_id="1", is_fiscal=True))
    >>> queue.queue(PrintReceiptRequest(receipt, "10.0.0.7", is_fiscal=True))
"""

from fp705.service.background import BackgroundReceiptPrintingService
from fp705.service.printers import (
    FakePrinter,
    FakePrinterFactory,
    PrinterFactory,
    RegistryPrinterFactory,
)
from fp705.service.queue import InMemoryPrintQueue, PrintQueue, PrintReceiptRequest
from fp705.service.repository import (
    InMemoryReceiptRepository,
    PrintingListener,
    PrintStatus,
    ReceiptRepository,
    ReceiptRequest,
)

__all__ = [
    # Service
    "BackgroundReceiptPrintingService",
    # Printers
    "PrinterFactory",
    "RegistryPrinterFactory",
    "FakePrinter",
    "FakePrinterFactory",
    # Queue
    "PrintQueue",
    "InMemoryPrintQueue",
    "PrintReceiptRequest",
    # Repository
    "ReceiptRepository",
    "InMemoryReceiptRepository",
    "ReceiptRequest",
    "PrintingListener",
    "PrintStatus",
]
