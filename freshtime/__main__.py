"""Main module for the freshtime package."""
import os
import sys
import logging
import argparse
from typing import List, Optional

from .config import load_environment
from .errors import AuthExpiredError, FreshtimeError
from . import commands

logger = logging.getLogger("freshtime")

# --- Logging Setup ---
def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr.

    Args:
        verbose: Log at DEBUG level instead of LOG_LEVEL (default WARNING)
    """
    level_name = "DEBUG" if verbose else os.getenv("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

# --- CLI Logic ---
def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per action.

    Returns:
        Argument parser
    """
    parser = argparse.ArgumentParser(
        description="Log time and create invoices in FreshBooks from the terminal.",
        epilog="""
Examples:
    # Authorize and write ~/.config/freshtime/config.json
  freshtime setup
    ---
    # Hours per client for the week containing 2026-02-11
  freshtime weekly --week-of 2026-02-11
    ---
    # Log 1.5 hours against the client in .freshtime.json
  freshtime log -m "API review" -d 1h30m
    ---
    # Preview the invoice for client 42 at 150/hr
  freshtime invoice 42 --rate 150 --dry-run

""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        prog="freshtime"
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging on stderr')
    subparsers = parser.add_subparsers(dest='command', metavar='command')
    subparsers.required = True

    setup_parser = subparsers.add_parser('setup', help='Authorize with FreshBooks via OAuth')
    setup_parser.add_argument('--code', help='Authorization code to exchange instead of running the callback server')

    subparsers.add_parser('refresh', help='Refresh the access token')

    weekly_parser = subparsers.add_parser('weekly', help='Show hours per client for a work week')
    weekly_parser.add_argument('--week-of', help='Any date in the week (YYYY-MM-DD, default: today)')
    weekly_parser.add_argument('--json', action='store_true', help='Print the summary as JSON')
    weekly_parser.add_argument('--md', help='Export the summary as markdown to the given file path')
    weekly_parser.add_argument('--overwrite', action='store_true', help='Overwrite the markdown file if it exists')
    weekly_parser.add_argument('--csv', help='Export the summary to CSV (provide filename prefix)')

    subparsers.add_parser('clients', help='List clients')

    invoice_parser = subparsers.add_parser('invoice', help='Create a draft invoice from unbilled time')
    invoice_parser.add_argument('client_id', type=int, help='Client id to invoice')
    invoice_parser.add_argument('--rate', help='Hourly rate (default: client_rates in config)')
    invoice_parser.add_argument('--currency', help='Currency code (default: default_currency in config, else USD)')
    invoice_parser.add_argument('--notes', help='Invoice notes')
    invoice_parser.add_argument('--dry-run', action='store_true', help='Show what would be invoiced without creating anything')

    subparsers.add_parser('init', help='Pick client, project and service for this directory')

    log_parser = subparsers.add_parser('log', help='Log a time entry ending now')
    log_parser.add_argument('-m', '--message', required=True, help='What you worked on')
    log_parser.add_argument('-d', '--duration', required=True, help='Duration, e.g. 2h, 30m, 1h30m')
    _add_entry_arguments(log_parser)

    start_parser = subparsers.add_parser('start', help='Start a timer')
    start_parser.add_argument('-m', '--message', default='', help='What you are working on')
    _add_entry_arguments(start_parser)

    stop_parser = subparsers.add_parser('stop', help='Stop the timer and log the entry')
    stop_parser.add_argument('-m', '--message', help='Replace the note given at start')

    subparsers.add_parser('status', help='Show the running timer')
    return parser

def _add_entry_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--client', type=int, default=0, help='Client id (default: from .freshtime.json)')
    parser.add_argument('--project', type=int, default=0, help='Project id (default: from .freshtime.json)')
    parser.add_argument('--service', type=int, default=0, help='Service id (default: from .freshtime.json)')
    parser.add_argument('--no-billable', action='store_true', help='Mark the entry as not billable')

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments
    """
    return build_parser().parse_args(argv)

def run_command(args: argparse.Namespace) -> None:
    """Dispatch parsed arguments to the matching command."""
    if args.command == 'setup':
        commands.run_setup(code=args.code)
    elif args.command == 'refresh':
        commands.run_refresh()
    elif args.command == 'weekly':
        commands.run_weekly(
            week_of=args.week_of, output_format='json' if args.json else 'table',
            md_path=args.md, overwrite=args.overwrite, csv_prefix=args.csv,
        )
    elif args.command == 'clients':
        commands.run_clients()
    elif args.command == 'invoice':
        commands.run_invoice(
            args.client_id, rate=args.rate, currency=args.currency,
            notes=args.notes, dry_run=args.dry_run,
        )
    elif args.command == 'init':
        commands.run_init()
    elif args.command == 'log':
        commands.run_log(
            args.message, args.duration, client_id=args.client, project_id=args.project,
            service_id=args.service, billable=not args.no_billable,
        )
    elif args.command == 'start':
        commands.run_start(
            args.message, client_id=args.client, project_id=args.project,
            service_id=args.service, billable=not args.no_billable,
        )
    elif args.command == 'stop':
        commands.run_stop(args.message)
    elif args.command == 'status':
        commands.run_status()

def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    # Load environment variables
    load_environment()

    # Parse command line arguments
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        run_command(args)
    except AuthExpiredError:
        logger.debug("Authentication failed", exc_info=True)
        print("Error: Session expired. Run `freshtime setup` to re-authenticate.", file=sys.stderr)
        sys.exit(1)
    except FreshtimeError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)

if __name__ == "__main__":
    main()
