"""Output formatters for TechMatrix results."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.aggregator import AnalysisResult, TechnologyItem
from ..git.history import HistorySnapshot
from ..utils.logging import get_logger


class ConsoleFormatter:
    """Rich console formatter for TechMatrix output."""

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize the console formatter.

        Args:
            console: Rich console instance
        """
        self.console = console or Console()
        self.logger = get_logger("ConsoleFormatter")

    def format_analysis_result(self, result: AnalysisResult, scan_time: float) -> None:
        """Display the summary panel and both partitions.

        Args:
            result: Analysis result
            scan_time: Time taken in seconds
        """
        self.console.print(self._create_summary_panel(result, scan_time))

        if not result.adopt and not result.remove:
            self.console.print(Panel("No dependency manifests with known dependencies found", style="yellow"))
            return

        if result.adopt:
            self.console.print(self._create_items_table("Adopt", result.adopt, style="green"))
        if result.remove:
            self.console.print(self._create_items_table("Remove", result.remove, style="red"))

    def _create_summary_panel(self, result: AnalysisResult, scan_time: float) -> Panel:
        partially_removed = sum(1 for item in result.adopt if item.removed_dependencies)
        title = "Analysis cancelled" if result.cancelled else "Technology scan complete"

        content = (
            f"• Manifest files analyzed: {result.files_analyzed}\n"
            f"• Historical revisions parsed: {result.snapshots_analyzed}\n"
            f"• Technologies in use: {len(result.adopt)}"
            f" ({partially_removed} with removed packages)\n"
            f"• Technologies removed: {len(result.remove)}\n"
            f"• Branch: {result.branch or 'n/a'}\n"
            f"• Scan time: {scan_time:.2f}s"
        )

        return Panel(content, title=title, style="yellow" if result.cancelled else "blue")

    def _create_items_table(self, title: str, items: List[TechnologyItem], style: str) -> Table:
        """Create a table of technology items.

        Args:
            title: Table title
            items: Items in display order
            style: Colour of the technology column

        Returns:
            Rich table
        """
        table = Table(title=title)

        table.add_column("Category", style="cyan")
        table.add_column("Technology", style=style, no_wrap=True)
        table.add_column("Packages", style="white")
        table.add_column("Removed Packages", style="red")

        for item in items:
            table.add_row(
                item.category,
                item.name,
                ", ".join(sorted(item.dependencies)),
                ", ".join(sorted(item.removed_dependencies)),
            )

        return table

    def format_history(self, file_path: str, snapshots: List[HistorySnapshot]) -> None:
        """Display the dependency timeline of one manifest.

        Args:
            file_path: Manifest path
            snapshots: Snapshots, oldest first
        """
        if not snapshots:
            self.console.print(f"[yellow]No readable history for {file_path}[/yellow]")
            return

        table = Table(title=f"History of {file_path}")
        table.add_column("Date", style="cyan")
        table.add_column("Commit", style="dim")
        table.add_column("Count", justify="right")
        table.add_column("Added", style="green")
        table.add_column("Removed", style="red")

        previous: set = set()
        for snapshot in snapshots:
            names = set(snapshot.dependencies)
            table.add_row(
                snapshot.commit_date,
                snapshot.commit_id[:8],
                str(len(names)),
                ", ".join(sorted(names - previous)),
                ", ".join(sorted(previous - names)),
            )
            previous = names

        self.console.print(table)


class JSONFormatter:
    """JSON formatter producing the radar document."""

    def __init__(self, output_file: Optional[Path] = None) -> None:
        """Initialize the JSON formatter.

        Args:
            output_file: Optional output file path
        """
        self.output_file = output_file
        self.logger = get_logger("JSONFormatter")

    def format_analysis_result(
        self,
        result: AnalysisResult,
        scan_time: float,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Format an analysis result as JSON-ready data.

        Args:
            result: Analysis result
            scan_time: Time taken in seconds
            metadata: Optional additional metadata

        Returns:
            Radar stages plus a scan summary
        """
        data = result.to_dict()
        data["scan_summary"] = {
            "files_analyzed": result.files_analyzed,
            "snapshots_analyzed": result.snapshots_analyzed,
            "technologies_in_use": len(result.adopt),
            "technologies_removed": len(result.remove),
            "cancelled": result.cancelled,
            "scan_time_seconds": scan_time,
            "timestamp": datetime.now().isoformat(),
        }

        if metadata:
            data["metadata"] = metadata

        return data

    def dumps(self, results: Dict[str, Any]) -> str:
        return json.dumps(results, indent=2, ensure_ascii=False)

    def save_results(
        self,
        results: Dict[str, Any],
        output_file: Optional[Path] = None
    ) -> None:
        """Save results to JSON file.

        Args:
            results: Results dictionary
            output_file: Output file path (uses instance default if None)
        """
        file_path = output_file or self.output_file
        if not file_path:
            raise ValueError("No output file specified")

        try:
            with open(file_path, "w", encoding="utf-8") as f:
                f.write(self.dumps(results) + "\n")

            self.logger.info(f"Results saved to {file_path}")
        except OSError as e:
            self.logger.error(f"Failed to save results to {file_path}: {e}")
            raise
