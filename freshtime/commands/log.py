"""The log command: record time after the fact."""
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..api import resources
from ..api.client import HttpClient
from ..api.models import NewTimeEntry, TimeEntry
from ..config import Config
from ..errors import ValidationError
from ..utils.date_utils import utc_timestamp
from ..utils.format_utils import parse_duration
from .common import connect, resolve_ids

def submit_entry(config: Config, client: HttpClient, entry: NewTimeEntry) -> TimeEntry:
    """Create a time entry and print a one-line confirmation."""
    created = resources.create_time_entry(client, config.business_id, entry)
    print(f"Logged {entry.duration / 3600:.2f}h: {entry.note} (entry #{created.id})")
    return created

def run_log(message: str, duration: str, client_id: int = 0, project_id: int = 0, service_id: int = 0,
            billable: bool = True, config: Optional[Config] = None, client: Optional[HttpClient] = None,
            now: Optional[datetime] = None) -> TimeEntry:
    """Log a time entry that ends now.

    Args:
        message: Entry note
        duration: Duration like 2h, 30m or 1h30m
        client_id: Client (default: from .freshtime.json)
        project_id: Project (default: from .freshtime.json)
        service_id: Service (default: from .freshtime.json)
        billable: Whether the entry is billable
        config: User config (default: loaded from disk)
        client: API client (default: built from the config)
        now: End of the entry (default: current time)

    Returns:
        The created time entry
    """
    if not message:
        raise ValidationError("A message is required. Use -m \"what you did\".")
    try:
        seconds = parse_duration(duration)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    client_id, project_id, service_id = resolve_ids(client_id, project_id, service_id)
    config, client = connect(config, client)

    now = now or datetime.now(timezone.utc)
    entry = NewTimeEntry(
        client_id=client_id,
        duration=seconds,
        note=message,
        started_at=utc_timestamp(now - timedelta(seconds=seconds)),
        project_id=project_id,
        service_id=service_id,
        billable=billable,
    )
    return submit_entry(config, client, entry)
