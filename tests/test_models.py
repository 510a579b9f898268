"""Tests for receipt models."""

import pytest
from pydantic import ValidationError

from fp705.models.records import (
    FiscalPolicy,
    PrintReceiptResponse,
    Receipt,
    ReceiptItem,
    resolve_vat_group,
)
from fp705.protocol.status import Status


class TestReceiptItem:
    """Tests for ReceiptItem model."""

    def test_total(self):
        """Test the line total."""
        item = ReceiptItem(name="Bread", quantity=2, price=1.5, vat=20)
        assert item.total == 3.0

    def test_voided_line(self):
        """Test that a negative quantity voids a line."""
        item = ReceiptItem(name="Bread", quantity=-1, price=1.5, vat=20)
        assert item.total == -1.5

    def test_negative_vat_rejected(self):
        """Test that VAT rate cannot be negative."""
        with pytest.raises(ValidationError):
            ReceiptItem(name="Bread", quantity=1, price=1.5, vat=-1)

    def test_frozen(self):
        """Test that items are immutable."""
        item = ReceiptItem(name="Bread", quantity=1, price=1.5, vat=20)
        with pytest.raises(ValidationError):
            item.price = 2.0


class TestReceipt:
    """Tests for Receipt model."""

    def test_defaults(self):
        """Test that an empty receipt is valid."""
        receipt = Receipt()
        assert receipt.receipt_id == ""
        assert receipt.items == ()
        assert receipt.total == 0

    def test_lists_stored_as_tuples(self):
        """Test that sequences cannot change after construction."""
        receipt = Receipt(prefix_lines=["a", "b"], suffix_lines=["c"])
        assert receipt.prefix_lines == ("a", "b")
        assert receipt.suffix_lines == ("c",)

    def test_total(self):
        """Test the receipt total."""
        receipt = Receipt(
            items=[
                ReceiptItem(name="Bread", quantity=2, price=1.5, vat=9),
                ReceiptItem(name="Milk", quantity=1, price=3, vat=20),
            ]
        )
        assert receipt.total == pytest.approx(6.0)


class TestFiscalPolicy:
    """Tests for FiscalPolicy model and VAT group resolution."""

    def test_group_stripped(self):
        """Test that whitespace around the group is removed."""
        assert FiscalPolicy(vat=20, group=" 2 ").group == "2"

    def test_empty_group_rejected(self):
        """Test that a group is required."""
        with pytest.raises(ValidationError):
            FiscalPolicy(vat=20, group="")

    def test_first_match_wins(self):
        """Test that the first matching policy is used."""
        policies = [FiscalPolicy(vat=20, group="2"), FiscalPolicy(vat=20, group="4")]
        assert resolve_vat_group(20, policies) == "2"

    def test_default_group(self):
        """Test that unmatched rates fall back to group 1."""
        assert resolve_vat_group(5, [FiscalPolicy(vat=20, group="2")]) == "1"
        assert resolve_vat_group(5, []) == "1"


class TestPrintReceiptResponse:
    """Tests for PrintReceiptResponse."""

    def test_default(self):
        """Test that the default response has no warnings."""
        response = PrintReceiptResponse()
        assert response.warnings == Status(0)
        assert not response.has_errors
        assert repr(response) == "PrintReceiptResponse(warnings=[none])"

    def test_has_errors(self):
        """Test that only error flags count as errors."""
        assert not PrintReceiptResponse(Status.NEAR_PAPER_END).has_errors
        assert PrintReceiptResponse(Status.NEAR_PAPER_END | Status.END_OF_PAPER).has_errors

    def test_repr(self):
        """Test that the representation lists the flags."""
        response = PrintReceiptResponse(Status.COVER_OPEN | Status.NEAR_PAPER_END)
        assert repr(response) == "PrintReceiptResponse(warnings=[COVER_OPEN, NEAR_PAPER_END])"
