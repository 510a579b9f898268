"""
Pydantic models for receipts and printer results.

This module defines the data structures exchanged between callers and the
printer driver, implemented as immutable Pydantic models with validation.

Design principles:
- All models are frozen (immutable)
- Sequences are stored as tuples so a receipt cannot change while printing
- Money and quantities are plain floats, formatted only when a frame is built
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fp705.protocol.constants import ProtocolConstants
from fp705.protocol.status import Status


class PeriodType(Enum):
    """Level of detail of a fiscal memory report."""

    SHORT = "0"
    EXTENDED = "1"


class RegisterState(Enum):
    """Operator register state after an operator report."""

    KEEP = "0"
    CLEAR = "1"


class ReceiptItem(BaseModel):
    """
    A sale line of a receipt.

    Example:
        >>> item = ReceiptItem(name="Bread", quantity=2, price=1.5, vat=20)
        >>> item.total
        3.0
    """

    model_config = ConfigDict(frozen=True)

    name: str
    quantity: float = Field(description="Quantity, printed with 3 decimals on fiscal lines; negative for voided lines")
    price: float = Field(description="Unit price, printed with 2 decimals")
    vat: float = Field(ge=0, description="VAT rate used to resolve the VAT group")

    @property
    def total(self) -> float:
        """Line total (price times quantity)."""
        return self.price * self.quantity


class Receipt(BaseModel):
    """
    A receipt to print.

    Prefix lines are printed before the items and suffix lines after them,
    verbatim.

    Example:
        >>> receipt = Receipt(
        ...     prefix_lines=["Welcome"],
        ...     items=[ReceiptItem(name="Bread", quantity=2, price=1.5, vat=20)],
        ...     suffix_lines=["Thank you"],
        ...     currency="USD",
        ... )
    """

    model_config = ConfigDict(frozen=True)

    receipt_id: str = ""
    prefix_lines: tuple[str, ...] = ()
    items: tuple[ReceiptItem, ...] = ()
    suffix_lines: tuple[str, ...] = ()
    currency: str = ""

    @property
    def total(self) -> float:
        """Sum of all line totals."""
        return sum(item.total for item in self.items)


class FiscalPolicy(BaseModel):
    """
    Maps a VAT rate to the printer's VAT group code.

    Policies are used as an ordered list: the first one whose rate matches
    an item wins.
    """

    model_config = ConfigDict(frozen=True)

    vat: float = Field(ge=0)
    group: str = Field(min_length=1)

    @field_validator("group")
    @classmethod
    def _group_is_stripped(cls, value: str) -> str:
        return value.strip()


def resolve_vat_group(vat: float, policies: list[FiscalPolicy] | tuple[FiscalPolicy, ...]) -> str:
    """
    Resolve the VAT group of a rate.

    Args:
        vat: VAT rate of the item.
        policies: Ordered fiscal policies.

    Returns:
        Group of the first matching policy, or the default group "1".

    Example:
        >>> policies = [FiscalPolicy(vat=20, group="2"), FiscalPolicy(vat=9, group="3")]
        >>> resolve_vat_group(9, policies)
        '3'
        >>> resolve_vat_group(5, policies)
        '1'
    """
    for policy in policies:
        if policy.vat == vat:
            return policy.group
    return ProtocolConstants.DEFAULT_VAT_GROUP


@dataclass(frozen=True)
class PrintReceiptResponse:
    """
    Outcome of a print operation.

    Attributes:
        warnings: Every status flag the printer reported while printing.
    """

    warnings: Status = Status(0)

    @property
    def has_errors(self) -> bool:
        """True if any reported flag is an error condition."""
        return bool(self.warnings & Status.ERRORS)

    def __repr__(self) -> str:
        names = ", ".join(flag.name for flag in self.warnings) or "none"
        return f"PrintReceiptResponse(warnings=[{names}])"
