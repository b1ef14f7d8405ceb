"""The start, stop and status commands."""
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from ..api.client import HttpClient
from ..api.models import NewTimeEntry, TimeEntry
from ..config import Config
from ..errors import ValidationError
from ..timer import TimerState, clear_timer, load_timer, save_timer
from ..utils.date_utils import utc_timestamp
from ..utils.format_utils import format_elapsed
from .common import connect, resolve_ids
from .log import submit_entry

logger = logging.getLogger(__name__)

MIN_DURATION = 60

def run_start(message: str = "", client_id: int = 0, project_id: int = 0, service_id: int = 0,
              billable: bool = True, now: Optional[datetime] = None) -> TimerState:
    """Start a local timer.

    Raises:
        ValidationError: If a timer is already running or no client is known
    """
    now = now or datetime.now(timezone.utc)
    existing = load_timer()
    if existing is not None:
        raise ValidationError(
            f"Timer already running (started {format_elapsed(existing.elapsed(now))} ago, "
            f"note: {existing.note!r}). Run `freshtime stop` first."
        )
    client_id, project_id, service_id = resolve_ids(client_id, project_id, service_id)
    state = TimerState(now, client_id, note=message, project_id=project_id,
                       service_id=service_id, billable=billable)
    save_timer(state)
    print(f"Timer started at {now.astimezone().strftime('%H:%M')}.")
    return state

def run_stop(message: Optional[str] = None, config: Optional[Config] = None,
             client: Optional[HttpClient] = None, now: Optional[datetime] = None) -> TimeEntry:
    """Stop the running timer and submit its time as an entry.

    Args:
        message: Replaces the note given at start (optional)
        config: User config (default: loaded from disk)
        client: API client (default: built from the config)
        now: Stop time (default: current time)

    Returns:
        The created time entry
    """
    state = load_timer()
    if state is None:
        raise ValidationError("No timer running. Use `freshtime start` to begin.")
    note = message or state.note

    now = now or datetime.now(timezone.utc)
    seconds = max(round(state.elapsed(now).total_seconds()), MIN_DURATION)

    config, client = connect(config, client)
    entry = NewTimeEntry(
        client_id=state.client_id,
        duration=seconds,
        note=note,
        started_at=utc_timestamp(state.started_at),
        project_id=state.project_id,
        service_id=state.service_id,
        billable=state.billable,
    )
    print("Stopped. ", end="")
    created = submit_entry(config, client, entry)
    try:
        clear_timer()
    except OSError as e:
        logger.warning("Failed to remove timer state: %s", e)
        print(f"Warning: entry logged but timer state was not cleared: {e}", file=sys.stderr)
    return created

def run_status(now: Optional[datetime] = None) -> Optional[TimerState]:
    """Print the running timer, if any."""
    state = load_timer()
    if state is None:
        print("No timer running.")
        return None
    now = now or datetime.now(timezone.utc)
    print(f"Running: {format_elapsed(state.elapsed(now))}")
    if state.note:
        print(f"Note:    {state.note}")
    print(f"Client:  {state.client_id}")
    if state.project_id:
        print(f"Project: {state.project_id}")
    if state.service_id:
        print(f"Service: {state.service_id}")
    if not state.billable:
        print("Billable: no")
    return state
