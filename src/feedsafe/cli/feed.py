"""Feed CLI commands: sanitize every entry of a local feed document."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from feedsafe.core.config import load_config
from feedsafe.feeds.rss import sanitize_feed
from feedsafe.rules.loader import RuleLoader
from feedsafe.utils.text import clean_html, truncate

console = Console()
feed_app = typer.Typer(name="feed", help="Sanitize RSS/Atom feed entries.")


@feed_app.command("sanitize")
def sanitize_entries(
    path: Path = typer.Argument(..., help="Local RSS/Atom file"),
    config: Optional[str] = typer.Option(None, "-c", "--config", help="YAML config file"),
    html: bool = typer.Option(False, "--html", help="Print the sanitized markup of each entry"),
) -> None:
    """Sanitize all entries of a feed file."""
    cfg = load_config(config)
    try:
        data = path.read_bytes()
    except OSError as exc:
        console.print(f"[red]Cannot read {path}:[/red] {exc}")
        raise typer.Exit(1)

    entries = sanitize_feed(data, cfg.filter, RuleLoader(cfg.rules.folders))
    if not entries:
        console.print("[dim]No entries found.[/dim]")
        return

    if html:
        for entry in entries:
            console.print(f"[bold]{entry.title}[/bold] [dim]{entry.url}[/dim]")
            print(entry.content)
            print()
        return

    table = Table(title=f"Feed Entries ({len(entries)})")
    table.add_column("Title", style="white", max_width=40)
    table.add_column("URL", style="cyan", max_width=40)
    table.add_column("Preview", style="dim", max_width=60)
    for entry in entries:
        table.add_row(entry.title, entry.url, truncate(clean_html(entry.content), 120))
    console.print(table)
