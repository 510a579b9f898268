"""
Receipt repository: tracks the printing status of registered receipts.

Clients register a ReceiptRequest (the receipt together with the address
it came from and the operator who issued it) before the receipt is
queued; the printing service then moves it to PRINTED or FAILED.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable

from fp705.exceptions import ReceiptAlreadyRegisteredError, ReceiptNotFoundError
from fp705.models.records import Receipt

logger = logging.getLogger(__name__)


class PrintStatus(Enum):
    """Printing state of a registered receipt."""

    PRINTING = auto()
    PRINTED = auto()
    FAILED = auto()


@dataclass(frozen=True)
class ReceiptRequest:
    """
    A receipt as registered by a client.

    Attributes:
        receipt: Receipt to print.
        source_ip: Address of the requesting client.
        operator_id: Operator who issued the receipt.
        is_fiscal: Print as a fiscal receipt.
    """

    receipt: Receipt
    source_ip: str
    operator_id: str
    is_fiscal: bool = False

    @property
    def receipt_id(self) -> str:
        return self.receipt.receipt_id


PrintingListener = Callable[[Receipt, PrintStatus], None]
"""Called with the receipt and its new status when printing ends."""


def log_printing_outcome(receipt: Receipt, status: PrintStatus) -> None:
    logger.info("Receipt %r was processed: %s", receipt.receipt_id, status.name)


class ReceiptRepository(ABC):
    """
    Provides the methods to register receipts and track their printing
    status.
    """

    @abstractmethod
    def register(self, request: ReceiptRequest) -> str:
        """
        Register a receipt request in the PRINTING state.

        Returns:
            The id of the receipt.

        Raises:
            ReceiptAlreadyRegisteredError: If the id is already registered.
        """
        ...

    @abstractmethod
    def get_by_receipt_id(self, receipt_id: str) -> ReceiptRequest | None:
        """Return the registered request of a receipt, or None."""
        ...

    @abstractmethod
    def get_by_operator_id(self, operator_id: str) -> list[ReceiptRequest]:
        """Return the requests issued by an operator, in registration order."""
        ...

    @abstractmethod
    def get_by_source_ip(self, source_ip: str) -> list[ReceiptRequest]:
        """Return the requests sent from an address, in registration order."""
        ...

    @abstractmethod
    def get_status(self, receipt_id: str) -> PrintStatus:
        """
        Return the printing status of a receipt.

        Raises:
            ReceiptNotFoundError: If the receipt is not registered.
        """
        ...

    @abstractmethod
    def get_by_status(self, status: PrintStatus) -> list[Receipt]:
        """Return the receipts in the given status, in registration order."""
        ...

    @abstractmethod
    def finish_printing(self, receipt_id: str) -> Receipt:
        """
        Mark a receipt as PRINTED.

        Raises:
            ReceiptNotFoundError: If the receipt is not registered.
        """
        ...

    @abstractmethod
    def fail_printing(self, receipt_id: str) -> Receipt:
        """
        Mark a receipt as FAILED.

        Raises:
            ReceiptNotFoundError: If the receipt is not registered.
        """
        ...


class InMemoryReceiptRepository(ReceiptRepository):
    """
    Receipt repository kept in process memory.

    Args:
        listener: Notified whenever a receipt is marked PRINTED or FAILED.
    """

    def __init__(self, listener: PrintingListener = log_printing_outcome) -> None:
        self._entries: dict[str, tuple[ReceiptRequest, PrintStatus]] = {}
        self._listener = listener

    def register(self, request: ReceiptRequest) -> str:
        if request.receipt_id in self._entries:
            raise ReceiptAlreadyRegisteredError(request.receipt_id)
        self._entries[request.receipt_id] = (request, PrintStatus.PRINTING)
        return request.receipt_id

    def get_by_receipt_id(self, receipt_id: str) -> ReceiptRequest | None:
        entry = self._entries.get(receipt_id)
        return entry[0] if entry is not None else None

    def get_by_operator_id(self, operator_id: str) -> list[ReceiptRequest]:
        return [request for request, _ in self._entries.values() if request.operator_id == operator_id]

    def get_by_source_ip(self, source_ip: str) -> list[ReceiptRequest]:
        return [request for request, _ in self._entries.values() if request.source_ip == source_ip]

    def get_status(self, receipt_id: str) -> PrintStatus:
        return self._get(receipt_id)[1]

    def get_by_status(self, status: PrintStatus) -> list[Receipt]:
        return [request.receipt for request, current in self._entries.values() if current is status]

    def finish_printing(self, receipt_id: str) -> Receipt:
        return self._set_status(receipt_id, PrintStatus.PRINTED)

    def fail_printing(self, receipt_id: str) -> Receipt:
        return self._set_status(receipt_id, PrintStatus.FAILED)

    def _get(self, receipt_id: str) -> tuple[ReceiptRequest, PrintStatus]:
        try:
            return self._entries[receipt_id]
        except KeyError:
            raise ReceiptNotFoundError(receipt_id) from None

    def _set_status(self, receipt_id: str, status: PrintStatus) -> Receipt:
        request, _ = self._get(receipt_id)
        self._entries[receipt_id] = (request, status)
        self._listener(request.receipt, status)
        return request.receipt
