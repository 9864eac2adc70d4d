"""Command-line interface for devrecap."""

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from devrecap.analysis import RepositoryAnalyzer
from devrecap.cache import SummaryCache
from devrecap.errors import ConfigError, DevRecapError, NoCommitsFoundError
from devrecap.log import configure_logging
from devrecap.models import AnalysisOutcome, Settings, TimeWindow
from devrecap.scanning import RepositoryScanner
from devrecap.stats import find_most_active_day

app = typer.Typer(
    name="devrecap",
    help="Summarize your commit history across local Git repositories",
    add_completion=False,
)
console = Console()

DATE_FORMATS = ["%Y-%m-%d"]


def _load_settings(config_path: Optional[Path], verbose: bool = False) -> Settings:
    try:
        settings = Settings.load(config_path)
    except ConfigError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    configure_logging("DEBUG" if verbose else settings.log_level)
    return settings


def resolve_time_window(
    days: Optional[int],
    since: Optional[datetime],
    until: Optional[datetime],
    default_days: int,
    now: Optional[datetime] = None,
) -> TimeWindow:
    """Build the time window from --days or --since/--until.

    ``until`` covers the whole given day. A missing ``since`` goes back
    ``default_days`` from ``until``; a missing ``until`` means now.
    """
    if days is not None and (since is not None or until is not None):
        raise typer.BadParameter("Cannot specify both --days and --since/--until. Choose one.")

    now = now or datetime.now(timezone.utc)
    if since is None and until is None:
        return TimeWindow.days_back(days or default_days, now=now)

    if until is not None:
        end = until.replace(tzinfo=timezone.utc) + timedelta(days=1) - timedelta(microseconds=1)
    else:
        end = now
    start = since.replace(tzinfo=timezone.utc) if since is not None else end - timedelta(days=default_days)
    return TimeWindow.from_dates(start, end)


@app.command()
def scan(
    path: Path = typer.Argument(Path("."), help="Directory to scan for Git repositories"),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", "-e", help="Directory pattern to skip (repeatable)"),
    max_depth: Optional[int] = typer.Option(None, "--max-depth", help="Maximum directory scan depth"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
) -> None:
    """List Git repositories found under a directory."""
    settings = _load_settings(config)
    patterns = exclude if exclude else settings.exclude_patterns
    depth = max_depth if max_depth is not None else settings.max_scan_depth

    repos = sorted(RepositoryScanner(patterns, depth).scan(path))

    console.print(f"[bold green]Scanning:[/bold green] {path}")
    for repo_path in repos:
        console.print(f"  • {repo_path}")
    console.print(f"\n[bold green]✓[/bold green] Found {len(repos)} repositories")


@app.command()
def analyze(
    path: Path = typer.Argument(Path("."), help="Directory to scan for Git repositories"),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="Author email to filter commits (substring)"),
    days: Optional[int] = typer.Option(None, "--days", "-d", min=1, help="Number of days to look back"),
    since: Optional[datetime] = typer.Option(None, "--since", formats=DATE_FORMATS, help="Start date (YYYY-MM-DD)"),
    until: Optional[datetime] = typer.Option(None, "--until", formats=DATE_FORMATS, help="End date (YYYY-MM-DD)"),
    max_depth: Optional[int] = typer.Option(None, "--max-depth", help="Maximum directory scan depth"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Repositories analyzed in parallel"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output JSON file"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Disable the summary cache"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Analyze commit history of every repository under a directory."""
    settings = _load_settings(config, verbose)
    time_window = resolve_time_window(days, since, until, settings.default_timespan_days)
    author_email = author or settings.default_author_email

    console.print(f"[bold green]Analyzing repositories under:[/bold green] {path}")
    console.print(f"[bold blue]Author:[/bold blue] {author_email or 'any'}")
    console.print(
        f"[bold blue]Timespan:[/bold blue] {time_window.start:%Y-%m-%d %H:%M} → {time_window.end:%Y-%m-%d %H:%M} UTC\n"
    )

    analyzer = RepositoryAnalyzer()
    outcomes = analyzer.scan_and_analyze(
        path,
        author_email,
        time_window,
        exclude_patterns=settings.exclude_patterns,
        max_depth=max_depth if max_depth is not None else settings.max_scan_depth,
        max_workers=workers or settings.max_workers,
    )

    if not outcomes:
        console.print("[yellow]No Git repositories found.[/yellow]")
        return

    cache = None
    if settings.cache_enabled and not no_cache:
        cache = SummaryCache(settings.cache_dir, settings.cache_ttl_hours)

    _print_outcomes(outcomes, cache, verbose)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w") as f:
            json.dump([_outcome_to_dict(outcome) for outcome in outcomes], f, indent=2, default=str)
        console.print(f"[bold green]✓[/bold green] Saved to {output}")


def _print_outcomes(
    outcomes: List[AnalysisOutcome], cache: Optional[SummaryCache], verbose: bool
) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Repository", style="cyan")
    table.add_column("Commits", justify="right", style="yellow")
    table.add_column("Files", justify="right")
    table.add_column("+", justify="right", style="green")
    table.add_column("-", justify="right", style="red")
    table.add_column("Net", justify="right")
    table.add_column("PRs", justify="right")
    table.add_column("Remote", style="blue")

    for outcome in outcomes:
        record = outcome.record
        if record is None:
            continue
        stats = record.stats
        table.add_row(
            record.name,
            str(stats.total_commits),
            str(stats.total_files_changed),
            str(stats.total_insertions),
            str(stats.total_deletions),
            f"{stats.net_lines:+d}",
            str(stats.pr_count),
            record.hosting_info.web_url if record.hosting_info else (record.remote_url or "-"),
        )

    successes = [outcome.record for outcome in outcomes if outcome.record is not None]
    if successes:
        console.print(table)

    for outcome in outcomes:
        if isinstance(outcome.error, NoCommitsFoundError):
            console.print(f"[dim]No commits in range:[/dim] {outcome.path}")
        elif outcome.error is not None:
            console.print(f"[bold red]Failed:[/bold red] {outcome.path}: {escape(str(outcome.error))}")

    for record in successes:
        cached = cache.get(SummaryCache.key_for(record)) if cache else None
        if cached and cached.get("work_summary"):
            console.print(f"\n[bold]{record.name}[/bold] [dim](cached summary)[/dim]")
            console.print(escape(cached["work_summary"]))

        if not verbose:
            continue

        console.print(f"\n[bold]{record.name}[/bold] [dim]{record.path}[/dim]")
        most_active = find_most_active_day(record.stats)
        if most_active:
            console.print(f"  [cyan]Most active day:[/cyan] {most_active[0]} ({most_active[1]} commits)")
        for commit in record.commits:
            line = f"  [cyan]{commit.short_hash}[/cyan] {escape(commit.summary[:60])} [dim]{commit.timestamp:%Y-%m-%d}[/dim]"
            if record.hosting_info:
                line += f" [dim]{record.hosting_info.commit_url(commit.hash)}[/dim]"
            console.print(line)

    console.print(
        f"\n[bold green]✓[/bold green] Analyzed {len(successes)} of {len(outcomes)} repositories"
    )


def _outcome_to_dict(outcome: AnalysisOutcome) -> dict:
    if outcome.record is not None:
        data = outcome.record.model_dump(mode="json")
        data["stats"]["net_lines"] = outcome.record.stats.net_lines
        return data
    return {"path": str(outcome.path), "error": str(outcome.error)}


@app.command()
def init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
) -> None:
    """Create a default configuration file."""
    try:
        written = Settings.write_default(config, force=force)
    except ConfigError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        console.print("Use --force to overwrite it.")
        raise typer.Exit(1)

    console.print(f"[bold green]✓[/bold green] Wrote config to {written}")


@app.command(name="config")
def show_config(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
) -> None:
    """Show the effective configuration."""
    settings = _load_settings(config)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for name, value in settings.model_dump().items():
        table.add_row(name, str(value))
    console.print(table)


@app.command(name="cache-stats")
def cache_stats(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
) -> None:
    """Show summary cache statistics."""
    settings = _load_settings(config)
    cache = SummaryCache(settings.cache_dir, settings.cache_ttl_hours)
    expired = cache.cleanup_expired()

    stats = cache.get_stats()
    console.print(f"[cyan]Cache directory:[/cyan] {settings.cache_dir}")
    console.print(f"[cyan]Cached summaries:[/cyan] {stats['cached_summaries']}")
    console.print(f"[cyan]Size:[/cyan] {stats['size_bytes']} bytes")
    if expired:
        console.print(f"[dim]Removed {expired} expired entries[/dim]")


@app.command(name="clear-cache")
def clear_cache(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
) -> None:
    """Clear the summary cache."""
    settings = _load_settings(config)

    if not force:
        confirm = typer.confirm(f"Clear all cached summaries in {settings.cache_dir}?")
        if not confirm:
            console.print("Cancelled")
            raise typer.Exit(0)

    SummaryCache(settings.cache_dir, settings.cache_ttl_hours).clear()
    console.print("[bold green]✓[/bold green] Cache cleared")


@app.command()
def version() -> None:
    """Show version information."""
    from devrecap import __version__

    console.print(f"[bold]devrecap[/bold] version {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    try:
        app()
    except DevRecapError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
