"""The init command: write .freshtime.json for the current directory."""
from typing import Callable, Dict, Optional

from ..api import resources
from ..api.client import HttpClient
from ..config import Config, ProjectConfig, save_project_config
from ..errors import ValidationError
from .common import connect

def pick(label: str, options: Dict[int, str], input_fn: Callable[[str], str] = input,
         optional: bool = False) -> int:
    """Ask the user to choose one option by number.

    Args:
        label: What is being chosen, e.g. "client"
        options: Mapping of id to name
        input_fn: Function reading one line of user input
        optional: Allow an empty answer, returning 0

    Returns:
        The chosen id, or 0 if skipped
    """
    if not options:
        if optional:
            return 0
        raise ValidationError(f"No {label}s found.")
    choices = sorted(options.items(), key=lambda item: item[1].lower())
    print(f"Select a {label}:")
    for number, (option_id, name) in enumerate(choices, start=1):
        print(f"  {number}) {name} (ID: {option_id})")
    prompt = f"{label.capitalize()} number" + (" (Enter to skip): " if optional else ": ")
    while True:
        try:
            answer = input_fn(prompt).strip()
        except EOFError:
            raise ValidationError("No selection made.")
        if not answer and optional:
            return 0
        if answer.isdigit() and 1 <= int(answer) <= len(choices):
            return choices[int(answer) - 1][0]
        print(f"Please enter a number between 1 and {len(choices)}.")

def run_init(config: Optional[Config] = None, client: Optional[HttpClient] = None,
             input_fn: Callable[[str], str] = input, directory: Optional[str] = None) -> ProjectConfig:
    """Interactively pick a client, project and service for this directory."""
    config, client = connect(config, client)

    client_id = pick("client", resources.list_clients(client, config.account_id), input_fn)
    project_id = pick("project", resources.list_projects(client, config.business_id, client_id),
                      input_fn, optional=True)
    service_id = pick("service", resources.list_services(client, config.business_id),
                      input_fn, optional=True)

    project_config = ProjectConfig(client_id, project_id, service_id)
    path = save_project_config(project_config, directory)
    print(f"Wrote {path}")
    return project_config
