"""Weekly summary of time entries per client and weekday."""
from collections import defaultdict
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Mapping

from ..api.models import TimeEntry
from ..utils.format_utils import round_hours, seconds_to_hours

WORKDAYS = 5
DAY_HEADERS = ["Mon", "Tue", "Wed", "Thu", "Fri"]


class ClientSummary:
    """Hours of one client for Monday to Friday."""

    def __init__(self, name: str, daily: List[float], total: float):
        self.name = name
        self.daily = daily
        self.total = total

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "daily": list(self.daily), "total": self.total}


class WeeklySummary:
    """Per-client hours for one work week."""

    def __init__(self, week_start: date, week_end: date, clients: List[ClientSummary], grand_total: float):
        self.week_start = week_start
        self.week_end = week_end
        self.clients = clients
        self.grand_total = grand_total

    @property
    def daily_totals(self) -> List[float]:
        """Sum of each weekday column over all clients."""
        return [round_hours(sum(c.daily[i] for c in self.clients)) for i in range(WORKDAYS)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weekStart": self.week_start.isoformat(),
            "weekEnd": self.week_end.isoformat(),
            "clients": [c.to_dict() for c in self.clients],
            "grandTotal": self.grand_total,
        }


def build_summary(entries: Iterable[TimeEntry], client_names: Mapping[int, str], week_start: date) -> WeeklySummary:
    """Group time entries by client and weekday.

    Entries are placed by their local start time (UTC start if no local one).
    Weekend entries and entries whose start cannot be parsed are left out.
    Hours are rounded to 2 decimals per day, again per client total and
    again for the grand total.

    Args:
        entries: Time entries of the week
        client_names: Mapping of client id to display name
        week_start: Monday of the week

    Returns:
        WeeklySummary with clients sorted by name, case-insensitive
    """
    by_client: Dict[int, List[int]] = defaultdict(lambda: [0] * WORKDAYS)
    for entry in entries:
        started = entry.start
        if started is None:
            continue
        day_index = started.weekday()
        if day_index >= WORKDAYS:
            continue
        by_client[entry.client_id][day_index] += entry.duration

    clients = []
    grand_total = 0.0
    for client_id, daily_seconds in by_client.items():
        daily_hours = [seconds_to_hours(s) for s in daily_seconds]
        total = round_hours(sum(daily_hours))
        grand_total += total
        name = client_names.get(client_id) or f"Client #{client_id}"
        clients.append(ClientSummary(name, daily_hours, total))

    clients.sort(key=lambda c: c.name.lower())
    return WeeklySummary(
        week_start=week_start,
        week_end=week_start + timedelta(days=WORKDAYS - 1),
        clients=clients,
        grand_total=round_hours(grand_total),
    )
