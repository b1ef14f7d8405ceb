"""CLI command implementations for freshtime."""

from .account import run_refresh, run_setup
from .clients import run_clients
from .init import run_init
from .invoice import run_invoice
from .log import run_log
from .timer import run_start, run_status, run_stop
from .weekly import run_weekly

__all__ = [
    'run_setup', 'run_refresh', 'run_clients', 'run_init', 'run_invoice',
    'run_log', 'run_start', 'run_stop', 'run_status', 'run_weekly'
]
