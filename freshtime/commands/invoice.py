"""The invoice command: bill a client's unbilled time."""
import logging
import sys
from typing import Optional

from ..api import resources
from ..api.client import HttpClient
from ..config import Config
from ..errors import BillingError, ValidationError
from ..reports.invoice import InvoiceDraft
from ..utils.format_utils import format_amount
from .common import connect

logger = logging.getLogger(__name__)

def _print_totals(draft: InvoiceDraft) -> None:
    print(f"Entries:  {len(draft.entries)}")
    print(f"Hours:   {draft.total_hours:.2f}")

def run_invoice(client_id: int, rate: Optional[str] = None, currency: Optional[str] = None,
                notes: Optional[str] = None, dry_run: bool = False, config: Optional[Config] = None,
                client: Optional[HttpClient] = None) -> Optional[InvoiceDraft]:
    """Create a draft invoice from all unbilled billable time of a client.

    Args:
        client_id: Client to invoice
        rate: Hourly rate (default: client_rates in the config)
        currency: Currency code (default: default_currency in the config, else USD)
        notes: Invoice notes (optional)
        dry_run: Only print what would be invoiced
        config: User config (default: loaded from disk)
        client: API client (default: built from the config)

    Returns:
        The invoice draft, or None if there was nothing to invoice
    """
    config, client = connect(config, client)

    entries = resources.list_unbilled_entries(client, config.business_id, client_id)
    if not entries:
        print("No unbilled time entries found for this client.")
        return None

    rate = rate or config.rate_for(client_id)
    if not rate:
        raise ValidationError(
            f"No rate configured for client {client_id}. "
            f"Use --rate <amount> or set client_rates.{client_id} in config."
        )
    currency = currency or config.currency

    draft = InvoiceDraft(client_id, list(entries), rate, currency, notes=notes)

    if dry_run:
        print("Dry run — no invoice created.")
        print()
        _print_totals(draft)
        print(f"Rate:    {rate} {currency}/hr")
        print(f"Total:   {format_amount(draft.total_amount)} {currency}")
        print()
        print("Line items:")
        for line in draft.lines:
            print(f"  {line.description}  {line.qty}h  {line.name}")
        return draft

    invoice = resources.create_invoice(client, config.account_id, draft.to_payload())
    logger.info("Created invoice %d for client %d", invoice.id, client_id)
    link = resources.get_share_link(client, config.account_id, invoice.id) or invoice.client_view_link

    print(f"Invoice #{invoice.number} created (draft).")
    print()
    print(f"ID:       {invoice.id}")
    _print_totals(draft)
    print(f"Total:   {invoice.amount or format_amount(draft.total_amount)} {invoice.currency or currency}")
    if link:
        print(f"Link:    {link}")
    else:
        print("Link:    (share link unavailable — may need invoices:read scope)")

    try:
        marked = resources.mark_entries_billed(client, config.business_id, draft.entries)
    except BillingError as e:
        print(f"Warning: Failed to mark entries as billed — {e}", file=sys.stderr)
    else:
        print(f"Billed:  {len(marked)} entries marked as billed")
    return draft
