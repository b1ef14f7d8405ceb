"""Invoice drafts built from unbilled time entries."""
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from ..api.models import TimeEntry
from ..errors import ValidationError
from ..utils.format_utils import format_qty

DEFAULT_LINE_NAME = "Consulting"
DRAFT_STATUS = 1


class InvoiceLine:
    """One invoice line per time entry."""

    def __init__(self, name: str, description: str, qty: str, amount: str, currency: str):
        self.name = name
        self.description = description
        self.qty = qty
        self.amount = amount
        self.currency = currency

    @classmethod
    def from_entry(cls, entry: TimeEntry, rate: str, currency: str) -> "InvoiceLine":
        return cls(
            name=entry.note or DEFAULT_LINE_NAME,
            description=entry.local_date,
            qty=format_qty(entry.duration),
            amount=rate,
            currency=currency,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": 0,
            "name": self.name,
            "description": self.description,
            "qty": self.qty,
            "unit_cost": {"amount": self.amount, "code": self.currency},
        }


def build_invoice_lines(entries: List[TimeEntry], rate: str, currency: str) -> List[InvoiceLine]:
    return [InvoiceLine.from_entry(entry, rate, currency) for entry in entries]


class InvoiceDraft:
    """An invoice ready to be sent to the API."""

    def __init__(self, client_id: int, entries: List[TimeEntry], rate: str, currency: str,
                 notes: Optional[str] = None, create_date: Optional[date] = None):
        """Initialize an InvoiceDraft.

        Args:
            client_id: Customer the invoice is for
            entries: Unbilled time entries to invoice
            rate: Hourly rate as a decimal string
            currency: Currency code
            notes: Invoice notes (optional)
            create_date: Invoice date (default: today)

        Raises:
            ValidationError: If the rate is not a decimal number
        """
        try:
            self.rate_value = Decimal(rate)
        except InvalidOperation:
            raise ValidationError(f"Invalid rate {rate!r}: expected a decimal amount like 150.00")
        if not self.rate_value.is_finite() or self.rate_value < 0:
            raise ValidationError(f"Invalid rate {rate!r}: expected a non-negative amount")
        self.client_id = client_id
        self.entries = entries
        self.rate = rate
        self.currency = currency
        self.notes = notes
        self.create_date = create_date or date.today()
        self.lines = build_invoice_lines(entries, rate, currency)

    @property
    def total_seconds(self) -> int:
        return sum(e.duration for e in self.entries)

    @property
    def total_hours(self) -> Decimal:
        return Decimal(self.total_seconds) / Decimal(3600)

    @property
    def total_amount(self) -> Decimal:
        return (self.total_hours * self.rate_value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def to_payload(self) -> Dict[str, Any]:
        invoice: Dict[str, Any] = {
            "customerid": self.client_id,
            "create_date": self.create_date.isoformat(),
            "lines": [line.to_dict() for line in self.lines],
            "status": DRAFT_STATUS,
        }
        if self.notes:
            invoice["notes"] = self.notes
        return {"invoice": invoice}
