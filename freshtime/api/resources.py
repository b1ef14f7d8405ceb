"""Typed access to FreshBooks resources on top of HttpClient."""
import logging
from datetime import date
from typing import Dict, Iterable, List, Optional

from ..errors import ApiError, BillingError, ConfigError, DecodeError, FreshtimeError
from ..utils.date_utils import day_end, day_start
from .client import HttpClient
from .models import (
    ClientRecord, Identity, Invoice, NewTimeEntry, Project, RecordList, Service, TimeEntry,
    parse_records,
)

logger = logging.getLogger(__name__)


def get_identity(client: HttpClient) -> Identity:
    """Get the account and business of the authenticated user.

    Raises:
        ConfigError: If the user has no business membership
        DecodeError: If the response has an unexpected shape
    """
    data = client.get("/auth/api/v1/users/me")
    try:
        identity = Identity.from_me(data)
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(f"Unexpected identity response: {e}") from e
    if identity is None:
        raise ConfigError("No business memberships found on this account.")
    return identity

def list_clients(client: HttpClient, account_id: str) -> Dict[int, str]:
    """Get all clients as a mapping of client id to display name.

    Args:
        client: API client
        account_id: Account id

    Returns:
        Mapping of client id to display name
    """
    raw = client.get_paginated(f"/accounting/account/{account_id}/users/clients", "clients")
    records = parse_records(raw, ClientRecord, "client")
    return {c.id: c.display_name for c in records}

def list_projects(client: HttpClient, business_id: int, client_id: int) -> Dict[int, str]:
    """Get the projects of a client as a mapping of project id to title."""
    raw = client.get_paginated(
        f"/projects/business/{business_id}/projects", "projects",
        {"client_id": str(client_id)},
    )
    return {p.id: p.title for p in parse_records(raw, Project, "project")}

def list_services(client: HttpClient, business_id: int) -> Dict[int, str]:
    """Get the services of a business as a mapping of service id to name."""
    raw = client.get_paginated(f"/comments/business/{business_id}/services", "services")
    return {s.id: s.name for s in parse_records(raw, Service, "service")}

def list_time_entries(client: HttpClient, business_id: int, start: date, end: date) -> RecordList:
    """Get time entries started between two dates, both days included.

    Args:
        client: API client
        business_id: Business id
        start: First day
        end: Last day

    Returns:
        RecordList of TimeEntry
    """
    raw = client.get_paginated(
        f"/timetracking/business/{business_id}/time_entries", "time_entries",
        {"started_from": day_start(start), "started_to": day_end(end)},
    )
    return parse_records(raw, TimeEntry, "time entry")

def list_unbilled_entries(client: HttpClient, business_id: int, client_id: int) -> RecordList:
    """Get billable time entries of a client that are not billed yet."""
    raw = client.get_paginated(
        f"/timetracking/business/{business_id}/time_entries", "time_entries",
        {"client_id": str(client_id), "billed": "false", "billable": "true"},
    )
    return parse_records(raw, TimeEntry, "time entry")

def create_time_entry(client: HttpClient, business_id: int, entry: NewTimeEntry) -> TimeEntry:
    """Create a time entry.

    Raises:
        DecodeError: If the response does not contain the created entry
    """
    data = client.post(f"/timetracking/business/{business_id}/time_entries", entry.to_payload())
    try:
        return TimeEntry(data["time_entry"])
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(f"Unexpected time entry response: {e}") from e

def mark_entries_billed(client: HttpClient, business_id: int, entries: Iterable[TimeEntry]) -> List[int]:
    """Mark time entries as billed, one update per entry.

    Entries already marked stay marked when a later update fails.

    Returns:
        Ids of the entries marked as billed

    Raises:
        BillingError: If an update fails; carries marked and pending ids
    """
    entries = list(entries)
    marked: List[int] = []
    for index, entry in enumerate(entries):
        body = {
            "time_entry": {
                "billed": True,
                "started_at": entry.started_at,
                "is_logged": True,
                "duration": entry.duration,
            }
        }
        try:
            client.put(f"/timetracking/business/{business_id}/time_entries/{entry.id}", body)
        except FreshtimeError as e:
            pending = [remaining.id for remaining in entries[index:]]
            logger.warning("Failed to mark entry %d as billed: %s", entry.id, e)
            raise BillingError(marked, pending, e) from e
        marked.append(entry.id)
    return marked

def create_invoice(client: HttpClient, account_id: str, payload: dict) -> Invoice:
    """Create an invoice.

    Args:
        client: API client
        account_id: Account id
        payload: Request body ``{"invoice": {...}}``

    Returns:
        The created invoice
    """
    data = client.post(f"/accounting/account/{account_id}/invoices/invoices", payload)
    try:
        return Invoice(data["response"]["result"]["invoice"])
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(f"Unexpected invoice response: {e}") from e

def get_share_link(client: HttpClient, account_id: str, invoice_id: int) -> Optional[str]:
    """Get the shareable link of an invoice.

    Returns:
        The link, or None if it is unavailable
    """
    try:
        data = client.get(f"/accounting/account/{account_id}/invoices/invoices/{invoice_id}/share_link")
        link = data["response"]["result"]["share_link"]
    except (ApiError, DecodeError) as e:
        logger.info("Share link unavailable for invoice %d: %s", invoice_id, e)
        return None
    except (KeyError, TypeError):
        logger.info("Share link missing from response for invoice %d", invoice_id)
        return None
    return link if isinstance(link, str) and link else None
