"""
Data models for receipts and printer results.

This module contains the models exchanged with the printer driver:

- Receipts and receipt items
- Fiscal policies (VAT rate to VAT group)
- Report options (period type, register state)
- Print results
"""

from fp705.models.records import (
    FiscalPolicy,
    PeriodType,
    PrintReceiptResponse,
    Receipt,
    ReceiptItem,
    RegisterState,
    resolve_vat_group,
)

__all__ = [
    # Receipts
    "Receipt",
    "ReceiptItem",
    # Fiscal
    "FiscalPolicy",
    "resolve_vat_group",
    # Enums
    "PeriodType",
    "RegisterState",
    # Results
    "PrintReceiptResponse",
]
