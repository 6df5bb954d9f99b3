"""Main CLI interface for TechMatrix."""

import time
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from ..analyzer import TechRadarAnalyzer
from ..config import AnalysisConfig
from ..core.mappings import MappingError, load_mappings
from ..core.matcher import OTHER_CATEGORY, TechnologyMatcher
from ..core.parsers import ManifestRegistry
from ..output.formatters import ConsoleFormatter, JSONFormatter
from ..utils.logging import get_logger, setup_logging

app = typer.Typer(
    name="techmatrix",
    help="Map a repository's dependency manifests to technologies, past and present",
    add_completion=False
)

console = Console()
logger = get_logger("CLI")


def _build_config(
    include_history: bool,
    workers: Optional[int],
    mappings_dir: Optional[Path],
    ignore_patterns: Optional[List[str]],
    case_sensitive: bool,
) -> AnalysisConfig:
    """Environment defaults overridden by explicit command-line flags."""
    config = AnalysisConfig.from_env()
    overrides = {
        "include_history": config.include_history and include_history,
        "case_sensitive": config.case_sensitive or case_sensitive,
    }
    if workers is not None:
        overrides["max_workers"] = workers
    if mappings_dir is not None:
        overrides["mappings_dir"] = mappings_dir
    if ignore_patterns:
        overrides["ignore_patterns"] = config.ignore_patterns + list(ignore_patterns)
    return replace(config, **overrides)


@app.command()
def scan(
    path: Path = typer.Argument(
        Path("."),
        help="Path to the repository to analyze"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file for JSON results"
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print JSON to stdout instead of tables"
    ),
    history: bool = typer.Option(
        True,
        "--history/--no-history",
        help="Walk git history to find removed technologies"
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Concurrent git reads per manifest"
    ),
    mappings_dir: Optional[Path] = typer.Option(
        None,
        "--mappings",
        help="Directory of <ecosystem>.json tables overriding the built-in ones"
    ),
    ignore_patterns: Optional[List[str]] = typer.Option(
        None,
        "--ignore",
        help="Additional ignore patterns"
    ),
    case_sensitive: bool = typer.Option(
        False,
        "--case-sensitive",
        help="Match mapping patterns case-sensitively"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
    performance: bool = typer.Option(
        False,
        "--performance",
        help="Show performance summary"
    )
) -> None:
    """Analyze a repository and report adopted and removed technologies."""
    setup_logging(verbose=verbose)

    if not path.is_dir():
        console.print(f"[red]Error: Path is not a directory: {path}[/red]")
        raise typer.Exit(1)

    try:
        config = _build_config(history, workers, mappings_dir, ignore_patterns, case_sensitive)
        analyzer = TechRadarAnalyzer(config=config, on_progress=logger.debug if as_json else None)
    except (MappingError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    start_time = time.perf_counter()

    if as_json:
        result = analyzer.analyze(path)
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True
        ) as progress:
            task = progress.add_task("Analyzing dependency manifests...", total=None)
            analyzer.on_progress = lambda message: progress.update(task, description=message)
            result = analyzer.analyze(path)

    scan_time = time.perf_counter() - start_time

    json_formatter = JSONFormatter(output)
    if as_json or output:
        results = json_formatter.format_analysis_result(
            result,
            scan_time=scan_time,
            metadata={"repository": str(path.resolve())}
        )
        if as_json:
            typer.echo(json_formatter.dumps(results))
        if output:
            json_formatter.save_results(results)

    if not as_json:
        ConsoleFormatter(console).format_analysis_result(result, scan_time)

    if performance:
        analyzer.performance_monitor.print_summary()


@app.command()
def history(
    path: Path = typer.Argument(..., help="Path to the repository"),
    file: str = typer.Argument(..., help="Manifest path relative to the repository"),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Concurrent git reads"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging")
) -> None:
    """Show how a manifest's dependencies changed over its git history."""
    setup_logging(verbose=verbose)

    if not path.is_dir():
        console.print(f"[red]Error: Path is not a directory: {path}[/red]")
        raise typer.Exit(1)

    if ManifestRegistry.find_parser_for_file(file) is None:
        console.print(f"[red]Error: Not a recognised manifest file: {file}[/red]")
        raise typer.Exit(1)

    try:
        config = _build_config(True, workers, None, None, False)
        analyzer = TechRadarAnalyzer(config=config)
    except (MappingError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    snapshots = analyzer.walk_history(path, file)
    ConsoleFormatter(console).format_history(file, snapshots)


@app.command()
def resolve(
    package: str = typer.Argument(..., help="Package identifier as written in a manifest"),
    ecosystem: Optional[str] = typer.Option(
        None,
        "--ecosystem",
        "-e",
        help="Ecosystem to resolve in (all tables when omitted)"
    ),
    mappings_dir: Optional[Path] = typer.Option(
        None,
        "--mappings",
        help="Directory of <ecosystem>.json tables overriding the built-in ones"
    ),
    case_sensitive: bool = typer.Option(False, "--case-sensitive", help="Match case-sensitively")
) -> None:
    """Show the technology and category a package identifier resolves to."""
    try:
        mappings = load_mappings(mappings_dir)
    except MappingError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if ecosystem and ecosystem not in mappings.tables:
        console.print(f"[red]Error: Unknown ecosystem '{ecosystem}'. "
                      f"Known: {', '.join(mappings.ecosystems)}[/red]")
        raise typer.Exit(1)

    matcher = TechnologyMatcher(mappings, case_sensitive=case_sensitive)
    technology = matcher.resolve_name(package, ecosystem)
    category = matcher.categorize(technology)

    if technology == package and category == OTHER_CATEGORY:
        console.print(f"[yellow]{escape(package)}[/yellow] has no mapping (category: Other)")
    else:
        console.print(f"[cyan]{escape(package)}[/cyan] -> [bold]{escape(technology)}[/bold] ({escape(category)})")


@app.command()
def patterns(
    sparse: bool = typer.Option(
        False,
        "--sparse",
        help="Print git sparse-checkout patterns instead of file name rules"
    )
) -> None:
    """Print the manifest file patterns, one per line."""
    if sparse:
        lines = ManifestRegistry.get_sparse_checkout_patterns()
    else:
        lines = ManifestRegistry.get_dependency_file_patterns()

    for line in lines:
        typer.echo(line)


@app.command()
def info() -> None:
    """Show TechMatrix information."""
    console.print(Panel.fit(
        "[bold blue]TechMatrix[/bold blue]\n"
        "Resolves dependency manifests to technologies and finds\n"
        "the ones a repository has dropped over its git history",
        title="Information"
    ))

    console.print("\n[bold]Supported Ecosystems:[/bold]")
    for ecosystem in ManifestRegistry.get_supported_ecosystems():
        parser = ManifestRegistry.get_parser(ecosystem)
        console.print(f"  • {ecosystem}: {', '.join(parser.dependency_files)}")

    try:
        stats = TechnologyMatcher(load_mappings()).get_statistics()
    except MappingError as e:
        logger.error(f"Mapping tables unavailable: {e}")
        raise typer.Exit(1)
    console.print(f"\n[bold]Known technologies:[/bold] {stats['technologies']} "
                  f"in {stats['categories']} categories")


def main() -> None:
    """Main entry point for TechMatrix CLI."""
    app()


if __name__ == "__main__":
    main()
