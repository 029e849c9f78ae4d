"""Output formatting for gap reports and stamp lists.

Provides unified output handling in text, JSON, and CSV formats.
"""

from __future__ import annotations

import csv
import io
import json
from abc import ABC, abstractmethod
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hinged.csvio import export_csv

if TYPE_CHECKING:
    from hinged.gaps import GapReport
    from hinged.models import Stamp
    from hinged.store import Library


console = Console()


class ReportFormatter(ABC):
    """Abstract base class for report formatting."""

    def __init__(self, output: Console | None = None) -> None:
        self.console = output or console

    @abstractmethod
    def to_json(self) -> str:
        """Convert report to JSON string."""
        pass

    @abstractmethod
    def to_csv(self) -> str:
        """Convert report to CSV string."""
        pass

    @abstractmethod
    def to_text(self, verbose: bool = False) -> None:
        """Output report as formatted text to console."""
        pass

    @abstractmethod
    def default_filename(self) -> str:
        """File name used by save_csv."""
        pass

    def save_csv(self, directory: Path | None = None) -> Path:
        """Save report as CSV file and return path."""
        filepath = (directory or Path.cwd()) / self.default_filename()
        with open(filepath, "w", newline="", encoding="utf-8") as f:
            f.write(self.to_csv())
        return filepath

    @staticmethod
    def _sanitize_filename(name: str) -> str:
        """Sanitize a string for use in a filename."""
        safe = "".join(c if c.isalnum() or c in " -_" else "_" for c in name)
        return safe.replace(" ", "_")

    @staticmethod
    def _get_score_color(score: float) -> str:
        """Get color for completion display."""
        if score >= 90:
            return "green"
        elif score >= 70:
            return "yellow"
        return "red"


class GapReportFormatter(ReportFormatter):
    """Formatter for country gap reports."""

    def __init__(
        self,
        report: GapReport,
        display_limit: int = 50,
        output: Console | None = None,
    ) -> None:
        super().__init__(output)
        self.report = report
        self.display_limit = display_limit

    def to_json(self) -> str:
        """Convert gap report to JSON string."""
        output = {
            "country": self.report.country_name,
            "start_year": self.report.start_year,
            "end_year": self.report.end_year,
            "owned": self.report.total_owned,
            "wanted": self.report.total_wanted,
            "completion_percentage": round(self.report.completion_percentage, 1),
            "potential_gaps": self.report.potential_gaps,
            "potential_gap_ranges": self.report.compressed_gaps,
            "wanted_by_year": [
                {
                    "year": group.year or None,
                    "stamps": [
                        {
                            "catalog_number": s.display_catalog_number,
                            "year": s.display_year or None,
                            "denomination": s.denomination,
                            "color": s.color,
                        }
                        for s in group.stamps
                    ],
                }
                for group in self.report.wanted_by_year
            ],
        }
        return json.dumps(output, indent=2)

    def to_csv(self) -> str:
        """Convert gap report to CSV string, one row per wanted stamp or gap."""
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")
        writer.writerow(["Kind", "Catalog Number", "Year", "Denomination", "Color"])

        for stamp in self.report.wanted_stamps:
            writer.writerow(
                ["wanted", stamp.display_catalog_number, stamp.display_year, stamp.denomination, stamp.color]
            )
        for number in self.report.potential_gaps:
            writer.writerow(["gap", number, "", "", ""])

        return output.getvalue()

    def to_text(self, verbose: bool = False) -> None:
        """Output gap report as formatted text."""
        report = self.report
        out = self.console

        out.print()
        out.print(
            f"[bold blue]Gap Analysis - {escape(report.country_name)} ({report.year_range_label})[/bold blue]"
        )
        out.print()

        score = report.completion_percentage
        score_color = self._get_score_color(score)
        out.print(f"[dim]Owned:[/dim] {report.total_owned}")
        out.print(f"[dim]Wanted:[/dim] {report.total_wanted}")
        out.print(f"[dim]Completion:[/dim] [{score_color}]{score:.1f}%[/{score_color}]")
        out.print()

        if report.potential_gaps:
            limit = report.gap_count if verbose else self.display_limit
            ranges, hidden = report.displayed_gaps(limit)
            out.print(f"[yellow]Potential gaps in numbering ({report.gap_count}):[/yellow]")
            out.print(f"  {', '.join(ranges)}")
            if hidden > 0:
                out.print(f"  [dim]...and {hidden} more potential gaps[/dim]")
            out.print()

        if not report.wanted_stamps:
            out.print("[green]Nothing on the want list for this period![/green]")
            return

        out.print("[bold]Want list by year:[/bold]")
        for group in report.wanted_by_year:
            out.print(f"  [bold]{group.label}[/bold] ({len(group.stamps)})")
            for stamp in group.stamps:
                details = " ".join(p for p in (stamp.denomination, stamp.color) if p)
                suffix = f" [dim]{escape(details)}[/dim]" if details else ""
                out.print(f"    {escape(stamp.display_catalog_number)}{suffix}")
        out.print()

    def default_filename(self) -> str:
        safe_name = self._sanitize_filename(self.report.country_name)
        return f"{safe_name}_gaps_{self.report.start_year}-{self.report.end_year}_{date.today().isoformat()}.csv"


class StampListFormatter(ReportFormatter):
    """Formatter for a filtered stamp list."""

    def __init__(
        self,
        library: Library,
        stamps: list[Stamp],
        title: str = "Stamps",
        output: Console | None = None,
    ) -> None:
        super().__init__(output)
        self.library = library
        self.stamps = stamps
        self.title = title

    def to_json(self) -> str:
        """Convert stamp list to JSON string."""
        output = []
        for stamp in self.stamps:
            country = self.library.collection_country(stamp)
            entry = stamp.model_dump(mode="json")
            entry["country"] = country.name if country else None
            entry["display_catalog_number"] = self.library.display_catalog_number(stamp)
            output.append(entry)
        return json.dumps(output, indent=2)

    def to_csv(self) -> str:
        """Convert stamp list to the import-compatible CSV layout."""
        return export_csv(self.library, self.stamps)

    def to_text(self, verbose: bool = False) -> None:
        """Output stamp list as a table."""
        if not self.stamps:
            self.console.print("[dim]No stamps found.[/dim]")
            return

        table = Table(title=f"{escape(self.title)} ({len(self.stamps)})")
        table.add_column("Catalog #", style="bold")
        table.add_column("Country")
        table.add_column("Year")
        table.add_column("Denomination")
        table.add_column("Color")
        table.add_column("Condition")
        table.add_column("Status")
        if verbose:
            table.add_column("ID", style="dim")
            table.add_column("Notes")

        status_styles = {"owned": "green", "wanted": "yellow", "notCollecting": "dim"}
        for stamp in self.stamps:
            country = self.library.collection_country(stamp)
            style = status_styles.get(stamp.collection_status.value, "")
            row = [
                escape(self.library.display_catalog_number(stamp)),
                escape(country.name) if country else "",
                stamp.display_year,
                escape(stamp.denomination),
                escape(stamp.color),
                stamp.condition_shorthand,
                f"[{style}]{stamp.collection_status.short_display_name}[/{style}]",
            ]
            if verbose:
                row.extend([stamp.id, escape(stamp.notes)])
            table.add_row(*row)

        self.console.print(table)

    def default_filename(self) -> str:
        return f"{self._sanitize_filename(self.title)}_{date.today().isoformat()}.csv"
