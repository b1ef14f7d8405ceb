"""ReportGenerator class for rendering weekly summaries."""
import json
from io import StringIO
from typing import List, Optional

from tabulate import tabulate

from .weekly import DAY_HEADERS, WeeklySummary
from ..utils.date_utils import format_date_range
from ..utils.format_utils import format_hours

NAME_WIDTH = 20
COL_WIDTH = 6

class ReportGenerator:
    """Class for rendering a WeeklySummary as text, JSON, Markdown or CSV."""

    def __init__(self, summary: WeeklySummary):
        """Initialize a ReportGenerator.

        Args:
            summary: Weekly summary to render
        """
        self.summary = summary
        self.date_range_str = format_date_range(summary.week_start, summary.week_end)

    @property
    def headers(self) -> List[str]:
        return ["Client"] + DAY_HEADERS + ["Total"]

    def rows(self) -> List[list]:
        """Client rows followed by the totals row, hours as numbers."""
        rows = [[c.name] + list(c.daily) + [c.total] for c in self.summary.clients]
        rows.append(["Total"] + self.summary.daily_totals + [self.summary.grand_total])
        return rows

    def generate_table(self) -> str:
        """Render a fixed-width text table.

        Returns:
            Table as a string
        """
        output = StringIO()
        print(f"Week of {self.date_range_str}", file=output)
        print(file=output)

        header = "Client".ljust(NAME_WIDTH) + "".join(d.rjust(COL_WIDTH) for d in DAY_HEADERS) + "  Total"
        separator = "─" * len(header)
        print(header, file=output)
        print(separator, file=output)

        for client in self.summary.clients:
            print(self._row(client.name[:NAME_WIDTH], client.daily, client.total), file=output)

        print(separator, file=output)
        output.write(self._row("Total", self.summary.daily_totals, self.summary.grand_total))
        return output.getvalue()

    def _row(self, name: str, daily: List[float], total: float) -> str:
        return (
            name.ljust(NAME_WIDTH)
            + "".join(format_hours(h).rjust(COL_WIDTH) for h in daily)
            + format_hours(total).rjust(COL_WIDTH + 1)
            + "h"
        )

    def generate_json(self) -> str:
        """Render the summary as indented JSON."""
        return json.dumps(self.summary.to_dict(), indent=2, ensure_ascii=False)

    def generate_markdown(self) -> str:
        """Render the summary as a Markdown section with a GitHub table."""
        output = StringIO()
        print(f"\n### Week of {self.date_range_str}:", file=output)
        print(tabulate(self.rows(), headers=self.headers, tablefmt="github", floatfmt=".2f"), file=output)
        print(file=output)
        return output.getvalue()

    def export_csv(self, csv_prefix: str) -> str:
        """Write the summary to ``<prefix>_weekly.csv``.

        Returns:
            Name of the written file
        """
        from ..utils.file_utils import write_csv

        filename = f"{csv_prefix}_weekly.csv"
        write_csv(filename, self.headers, self.rows())
        return filename

    def generate_report(self, fmt: str = "table", csv_prefix: Optional[str] = None) -> str:
        """Render the summary in the requested format.

        Args:
            fmt: "table", "json" or "markdown"
            csv_prefix: Also export to CSV with this prefix (optional)

        Returns:
            Report as a string
        """
        if csv_prefix:
            self.export_csv(csv_prefix)
        if fmt == "json":
            return self.generate_json()
        if fmt == "markdown":
            return self.generate_markdown()
        return self.generate_table()
