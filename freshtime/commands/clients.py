"""The clients command."""
from typing import Optional

from tabulate import tabulate

from ..api import resources
from ..api.client import HttpClient
from ..config import Config
from .common import connect

def run_clients(config: Optional[Config] = None, client: Optional[HttpClient] = None) -> None:
    """Print client ids and names sorted by name."""
    config, client = connect(config, client)
    clients = resources.list_clients(client, config.account_id)
    if not clients:
        print("No clients found.")
        return
    rows = sorted(clients.items(), key=lambda item: item[1].lower())
    print(tabulate(rows, headers=["ID", "Name"], tablefmt="simple"))
