"""Configuration for freshtime.

Three sources feed the CLI:

- the user config file (``~/.config/freshtime/config.json``) holding tokens,
  account/business ids, hourly rates and the default currency
- an optional ``.freshtime.json`` in the working directory with default
  client/project/service ids for logging time
- the OAuth application credentials, read from the environment after loading
  a ``.env`` file

Nothing here locks files; concurrent invocations writing the same file are
last-writer-wins.
"""
import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .errors import ConfigError
from .utils.file_utils import read_json, write_json

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILE = ".freshtime.json"
DEFAULT_CURRENCY = "USD"

# --- Environment Setup ---
def load_environment(env_file: Optional[str] = None) -> None:
    """Load environment variables from a .env file if one exists."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

def get_env_var(key: str) -> str:
    """Get a required environment variable.

    Raises:
        ConfigError: If the variable is unset or empty
    """
    value = os.getenv(key)
    if not value:
        raise ConfigError(f"Missing {key}. Set it in your environment or .env file.")
    return value

def config_dir() -> str:
    """Directory holding the user config and timer state."""
    override = os.getenv("FRESHTIME_CONFIG_DIR")
    if override:
        return override
    return os.path.join(os.path.expanduser("~"), ".config", "freshtime")

def config_path() -> str:
    """Path to the user config file."""
    return os.path.join(config_dir(), "config.json")


class Config:
    """User configuration persisted between invocations."""

    def __init__(self, access_token: str, account_id: str = "", business_id: int = 0,
                 refresh_token: Optional[str] = None, client_rates: Optional[Dict[str, str]] = None,
                 default_currency: Optional[str] = None):
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.account_id = account_id
        self.business_id = business_id
        self.client_rates = client_rates or {}
        self.default_currency = default_currency

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        if not isinstance(data, dict):
            raise ConfigError("Invalid config file: expected a JSON object.")
        try:
            return cls(
                access_token=data.get("access_token") or "",
                refresh_token=data.get("refresh_token") or None,
                account_id=str(data.get("account_id") or ""),
                business_id=int(data.get("business_id") or 0),
                client_rates={str(k): str(v) for k, v in (data.get("client_rates") or {}).items()},
                default_currency=data.get("default_currency") or None,
            )
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigError(f"Invalid config file: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"access_token": self.access_token}
        if self.refresh_token:
            data["refresh_token"] = self.refresh_token
        data["account_id"] = self.account_id
        data["business_id"] = self.business_id
        if self.client_rates:
            data["client_rates"] = dict(self.client_rates)
        if self.default_currency:
            data["default_currency"] = self.default_currency
        return data

    def rate_for(self, client_id: int) -> Optional[str]:
        """Configured hourly rate for a client, if any."""
        return self.client_rates.get(str(client_id)) or None

    @property
    def currency(self) -> str:
        return self.default_currency or DEFAULT_CURRENCY


def load_config(path: Optional[str] = None) -> Config:
    """Load the user config.

    Raises:
        ConfigError: If the file is missing or invalid
    """
    path = path or config_path()
    try:
        data = read_json(path)
    except FileNotFoundError:
        raise ConfigError("Config not found. Run `freshtime setup` to configure your token.")
    except (OSError, ValueError) as e:
        raise ConfigError(f"Invalid config file: {e}") from e
    return Config.from_dict(data)

def save_config(config: Config, path: Optional[str] = None) -> None:
    """Write the user config, replacing the whole file."""
    path = path or config_path()
    try:
        write_json(path, config.to_dict())
    except OSError as e:
        raise ConfigError(f"Failed to save config to {path}: {e}") from e
    logger.debug("Saved config to %s", path)


class ProjectConfig:
    """Per-directory defaults for logging time."""

    def __init__(self, client_id: int = 0, project_id: int = 0, service_id: int = 0):
        self.client_id = client_id
        self.project_id = project_id
        self.service_id = service_id

    def to_dict(self) -> Dict[str, int]:
        data = {}
        if self.client_id:
            data["client_id"] = self.client_id
        if self.project_id:
            data["project_id"] = self.project_id
        if self.service_id:
            data["service_id"] = self.service_id
        return data


def load_project_config(directory: Optional[str] = None) -> Optional[ProjectConfig]:
    """Read .freshtime.json from a directory (default: the working directory).

    Returns:
        The project config, or None if the file does not exist

    Raises:
        ConfigError: If the file exists but is invalid
    """
    path = os.path.join(directory or os.getcwd(), PROJECT_CONFIG_FILE)
    try:
        data = read_json(path)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        raise ConfigError(f"Invalid {PROJECT_CONFIG_FILE}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {PROJECT_CONFIG_FILE}: expected a JSON object.")
    try:
        return ProjectConfig(
            client_id=int(data.get("client_id") or 0),
            project_id=int(data.get("project_id") or 0),
            service_id=int(data.get("service_id") or 0),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid {PROJECT_CONFIG_FILE}: {e}") from e

def save_project_config(project_config: ProjectConfig, directory: Optional[str] = None) -> str:
    """Write .freshtime.json and return its path."""
    path = os.path.join(directory or os.getcwd(), PROJECT_CONFIG_FILE)
    try:
        write_json(path, project_config.to_dict())
    except OSError as e:
        raise ConfigError(f"Failed to save {path}: {e}") from e
    return path
