"""Records returned by the FreshBooks API.

Each class is built from one raw JSON record. Constructors raise
``KeyError``, ``TypeError`` or ``ValueError`` for records that do not have the
expected shape; listings use :func:`parse_records` to skip those.
"""
import logging
from typing import Any, Callable, Dict, Iterable, Optional, TypeVar

from ..utils.date_utils import parse_entry_datetime

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _int(value: Any, field: str, default: Optional[int] = None) -> int:
    if value is None and default is not None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{field} must be an integer, got {value!r}")
    return value

def _str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{field} must be a string, got {value!r}")
    return value

def _record(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"expected a JSON object, got {type(data).__name__}")
    return data


class RecordList(list):
    """A list of parsed records that remembers how many were skipped."""

    def __init__(self, items: Iterable = (), skipped: int = 0):
        super().__init__(items)
        self.skipped = skipped


def parse_records(records: Iterable[Any], factory: Callable[[Any], T], kind: str) -> RecordList:
    """Parse raw records, dropping the ones that do not fit.

    Args:
        records: Raw JSON records
        factory: Callable building one parsed record
        kind: Record kind used in log messages

    Returns:
        RecordList of parsed records; ``skipped`` holds the number dropped
    """
    parsed = RecordList()
    for raw in records:
        try:
            parsed.append(factory(raw))
        except (KeyError, TypeError, ValueError) as e:
            parsed.skipped += 1
            logger.debug("Skipping malformed %s record: %s", kind, e)
    if parsed.skipped:
        logger.warning("Skipped %d malformed %s record(s)", parsed.skipped, kind)
    return parsed


class TimeEntry:
    """A FreshBooks time entry."""

    def __init__(self, entry_data: Dict[str, Any]):
        """Initialize a TimeEntry.

        Args:
            entry_data: Raw entry data from the time tracking API
        """
        entry_data = _record(entry_data)
        self.raw_data = entry_data
        self.id = _int(entry_data["id"], "id")
        self.client_id = _int(entry_data.get("client_id"), "client_id", default=0)
        self.duration = _int(entry_data.get("duration"), "duration", default=0)
        if self.duration < 0:
            raise ValueError(f"duration must not be negative, got {self.duration}")
        self.started_at = _str(entry_data.get("started_at"), "started_at")
        self.local_started_at = _str(entry_data.get("local_started_at"), "local_started_at")
        self.note = _str(entry_data.get("note"), "note")
        self.billable = bool(entry_data.get("billable"))

    @property
    def local_start(self) -> str:
        """Local start timestamp, falling back to the UTC one."""
        return self.local_started_at or self.started_at

    @property
    def start(self):
        """Parsed start time, or None if it cannot be parsed."""
        return parse_entry_datetime(self.local_start)

    @property
    def local_date(self) -> str:
        """Date part of the local start timestamp."""
        return self.local_start.split("T")[0]

    def __repr__(self) -> str:
        return f"TimeEntry(id={self.id}, client_id={self.client_id}, duration={self.duration})"


class NewTimeEntry:
    """Parameters for creating a time entry."""

    def __init__(self, client_id: int, duration: int, note: str, started_at: str,
                 project_id: int = 0, service_id: int = 0, billable: bool = True):
        self.client_id = client_id
        self.project_id = project_id
        self.service_id = service_id
        self.duration = duration
        self.note = note
        self.billable = billable
        self.started_at = started_at

    def to_payload(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {"client_id": self.client_id}
        if self.project_id:
            entry["project_id"] = self.project_id
        if self.service_id:
            entry["service_id"] = self.service_id
        entry.update({
            "duration": self.duration,
            "note": self.note,
            "billable": self.billable,
            "started_at": self.started_at,
            "is_logged": True,
        })
        return {"time_entry": entry}


class ClientRecord:
    """A FreshBooks client."""

    def __init__(self, data: Dict[str, Any]):
        data = _record(data)
        self.id = _int(data["id"], "id")
        self.organization = _str(data.get("organization"), "organization")
        self.fname = _str(data.get("fname"), "fname")
        self.lname = _str(data.get("lname"), "lname")

    @property
    def display_name(self) -> str:
        """Organization, else "first last", else a placeholder with the id."""
        return (
            self.organization
            or f"{self.fname} {self.lname}".strip()
            or f"Client #{self.id}"
        )


class Project:
    def __init__(self, data: Dict[str, Any]):
        data = _record(data)
        self.id = _int(data["id"], "id")
        self.title = _str(data.get("title"), "title")


class Service:
    def __init__(self, data: Dict[str, Any]):
        data = _record(data)
        self.id = _int(data["id"], "id")
        self.name = _str(data.get("name"), "name")


class Identity:
    """Account and business the authenticated user works in."""

    def __init__(self, account_id: str, business_id: int):
        self.account_id = account_id
        self.business_id = business_id

    @classmethod
    def from_me(cls, data: Dict[str, Any]) -> Optional["Identity"]:
        """Build from the users/me response.

        Returns:
            Identity of the first business membership, or None if there is none
        """
        response = _record(data).get("response") or {}
        memberships = _record(response).get("business_memberships") or []
        if not memberships:
            return None
        business = _record(_record(memberships[0])["business"])
        return cls(
            account_id=_str(business.get("account_id"), "account_id"),
            business_id=_int(business["id"], "id"),
        )


class Invoice:
    """A created invoice."""

    def __init__(self, data: Dict[str, Any]):
        data = _record(data)
        self.id = _int(data["invoiceid"], "invoiceid")
        self.number = _str(data.get("invoice_number"), "invoice_number")
        amount = _record(data.get("amount") or {})
        self.amount = _str(amount.get("amount"), "amount")
        self.currency = _str(amount.get("code"), "code")
        self.status = _str(data.get("v3_status"), "v3_status")
        links = _record(data.get("links") or {})
        self.client_view_link = _str(links.get("client_view"), "client_view") or None
