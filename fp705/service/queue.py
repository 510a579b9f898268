"""
Queue of receipts waiting to be printed.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Final

from fp705.models.records import Receipt

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE: Final[int] = 50


@dataclass(frozen=True)
class PrintReceiptRequest:
    """
    A receipt queued for printing.

    Attributes:
        receipt: Receipt to print.
        source_ip: Address of the requesting client; selects the printer.
        is_fiscal: Print as a fiscal receipt instead of a text receipt.
    """

    receipt: Receipt
    source_ip: str
    is_fiscal: bool = False


class PrintQueue(ABC):
    """Provides the methods to append to and take from a queue of receipts."""

    @abstractmethod
    async def next(self) -> PrintReceiptRequest:
        """Wait for and return the next request."""
        ...

    @abstractmethod
    def queue(self, request: PrintReceiptRequest) -> bool:
        """
        Queue a request.

        Returns:
            True if the request was queued, False if it was dropped.
        """
        ...


class InMemoryPrintQueue(PrintQueue):
    """
    Bounded in-memory print queue.

    Requests offered while the queue is full are dropped and logged.

    Args:
        maxsize: Number of requests the queue holds.
    """

    def __init__(self, maxsize: int = DEFAULT_QUEUE_SIZE) -> None:
        self._queue: asyncio.Queue[PrintReceiptRequest] = asyncio.Queue(maxsize=maxsize)

    async def next(self) -> PrintReceiptRequest:
        return await self._queue.get()

    def queue(self, request: PrintReceiptRequest) -> bool:
        try:
            self._queue.put_nowait(request)
        except asyncio.QueueFull:
            logger.warning("Print queue is full, dropping receipt %r", request.receipt.receipt_id)
            return False
        return True

    def __len__(self) -> int:
        return self._queue.qsize()
