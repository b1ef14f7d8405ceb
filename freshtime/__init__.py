"""
freshtime: A CLI tool for tracking time and invoicing clients in FreshBooks.

- Summarizes the work week's hours per client
- Logs time entries directly or through a local start/stop timer
- Creates draft invoices from unbilled time and marks it as billed
- Can be used as a CLI (via `python -m freshtime` or `freshtime` if installed as a package)
"""

__version__ = "0.3.0"
