"""The weekly command: hours per client for one work week."""
from datetime import date
from typing import Optional

from ..api import resources
from ..api.client import HttpClient
from ..config import Config
from ..errors import ValidationError
from ..reports.report_generator import ReportGenerator
from ..reports.weekly import WeeklySummary, build_summary
from ..utils.date_utils import get_week_range, parse_date
from ..utils.file_utils import write_markdown
from .common import connect

def run_weekly(week_of: Optional[str] = None, output_format: str = "table", md_path: Optional[str] = None,
               overwrite: bool = False, csv_prefix: Optional[str] = None, config: Optional[Config] = None,
               client: Optional[HttpClient] = None, today: Optional[date] = None) -> WeeklySummary:
    """Fetch the week's time entries and print the summary.

    Args:
        week_of: Any date in the week, YYYY-MM-DD (default: today)
        output_format: "table" or "json"
        md_path: Also export the summary as Markdown to this file (optional)
        overwrite: Overwrite the Markdown file instead of appending
        csv_prefix: Also export the summary to CSV with this prefix (optional)
        config: User config (default: loaded from disk)
        client: API client (default: built from the config)
        today: Reference date when week_of is not given

    Returns:
        The weekly summary
    """
    if week_of:
        try:
            ref_date = parse_date(week_of)
        except ValueError:
            raise ValidationError(f"Invalid date {week_of!r}: expected YYYY-MM-DD")
    else:
        ref_date = today or date.today()
    start_date, end_date = get_week_range(ref_date)

    config, client = connect(config, client)
    entries = resources.list_time_entries(client, config.business_id, start_date, end_date)
    client_names = resources.list_clients(client, config.account_id)

    summary = build_summary(entries, client_names, start_date)
    report_generator = ReportGenerator(summary)

    if md_path:
        write_markdown(md_path, report_generator.generate_markdown(),
                       f"Weekly time {start_date} to {end_date}", overwrite)
        print(f"[SUCCESS] Markdown output written to '{md_path}'")
    if csv_prefix:
        filename = report_generator.export_csv(csv_prefix)
        print(f"[SUCCESS] CSV output written to '{filename}'")

    print(report_generator.generate_report(output_format))
    return summary
