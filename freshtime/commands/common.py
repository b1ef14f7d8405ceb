"""Helpers shared by the CLI commands."""
from typing import Optional, Tuple

from ..api.auth import client_for_config
from ..api.client import HttpClient
from ..config import Config, load_config, load_project_config
from ..errors import ValidationError

NO_CLIENT_MESSAGE = "No client specified. Use --client or run `freshtime init` to create .freshtime.json."

def connect(config: Optional[Config] = None, client: Optional[HttpClient] = None) -> Tuple[Config, HttpClient]:
    """Load the user config and build an API client for it, unless given."""
    config = config or load_config()
    client = client or client_for_config(config)
    return config, client

def resolve_ids(client_id: int = 0, project_id: int = 0, service_id: int = 0) -> Tuple[int, int, int]:
    """Fill unset ids from .freshtime.json in the working directory.

    Raises:
        ValidationError: If no client id is known afterwards
    """
    project_config = load_project_config()
    if project_config is not None:
        client_id = client_id or project_config.client_id
        project_id = project_id or project_config.project_id
        service_id = service_id or project_config.service_id
    if not client_id:
        raise ValidationError(NO_CLIENT_MESSAGE)
    return client_id, project_id, service_id
