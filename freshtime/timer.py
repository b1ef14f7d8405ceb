"""Local state for a running timer."""
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import config_dir
from .errors import ConfigError
from .utils.file_utils import read_json, write_json

def timer_path() -> str:
    """Path to the timer state file."""
    return os.path.join(config_dir(), "timer.json")


class TimerState:
    """An in-progress time entry that has not been submitted yet."""

    def __init__(self, started_at: datetime, client_id: int, note: str = "",
                 project_id: int = 0, service_id: int = 0, billable: bool = True):
        self.started_at = started_at
        self.note = note
        self.client_id = client_id
        self.project_id = project_id
        self.service_id = service_id
        self.billable = billable

    def elapsed(self, now: Optional[datetime] = None):
        now = now or datetime.now(timezone.utc)
        return now - self.started_at

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "started_at": self.started_at.isoformat(),
            "note": self.note,
            "client_id": self.client_id,
        }
        if self.project_id:
            data["project_id"] = self.project_id
        if self.service_id:
            data["service_id"] = self.service_id
        data["billable"] = self.billable
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimerState":
        started_at = datetime.fromisoformat(data["started_at"].replace("Z", "+00:00"))
        if started_at.tzinfo is None:
            started_at = started_at.astimezone()
        return cls(
            started_at=started_at,
            note=data.get("note") or "",
            client_id=int(data["client_id"]),
            project_id=int(data.get("project_id") or 0),
            service_id=int(data.get("service_id") or 0),
            billable=bool(data.get("billable", True)),
        )


def load_timer(path: Optional[str] = None) -> Optional[TimerState]:
    """Load the running timer.

    Returns:
        The timer state, or None if no timer is running

    Raises:
        ConfigError: If the state file is corrupt
    """
    path = path or timer_path()
    try:
        data = read_json(path)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        raise ConfigError(f"Corrupt timer state: {e}") from e
    try:
        return TimerState.from_dict(data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ConfigError(f"Corrupt timer state: {e}") from e

def save_timer(state: TimerState, path: Optional[str] = None) -> None:
    """Write the timer state, replacing the whole file."""
    try:
        write_json(path or timer_path(), state.to_dict())
    except OSError as e:
        raise ConfigError(f"Failed to save timer: {e}") from e

def clear_timer(path: Optional[str] = None) -> None:
    """Delete the timer state file."""
    os.remove(path or timer_path())
