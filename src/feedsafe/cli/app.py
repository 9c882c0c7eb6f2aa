"""Root CLI application: sanitize markup files and feeds, inspect policy and rules."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from feedsafe.cli.feed import feed_app
from feedsafe.core.config import load_config
from feedsafe.filter.html import sanitize as sanitize_html
from feedsafe.rules.engine import SiteRuleEngine
from feedsafe.rules.loader import RuleLoader

console = Console()
app = typer.Typer(
    name="feedsafe",
    help="feedsafe: sanitize untrusted feed HTML into a safe-to-render subset.",
    no_args_is_help=True,
)

app.add_typer(feed_app)


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


@app.command()
def sanitize(
    path: str = typer.Argument(..., help="HTML file to sanitize, '-' for stdin"),
    site: str = typer.Option("", "-s", "--site", help="Site URL used to resolve relative URLs"),
    config: Optional[str] = typer.Option(None, "-c", "--config", help="YAML config file"),
) -> None:
    """Sanitize an HTML fragment and print the result."""
    cfg = load_config(config)
    try:
        html = _read_input(path)
    except (OSError, UnicodeDecodeError) as exc:
        console.print(f"[red]Cannot read {path}:[/red] {exc}")
        raise typer.Exit(1)

    output = sanitize_html(html, site, cfg.filter, RuleLoader(cfg.rules.folders))
    # Plain stdout: the result is markup, not rich text.
    print(output)


@app.command()
def policy(
    config: Optional[str] = typer.Option(None, "-c", "--config", help="YAML config file"),
) -> None:
    """Show the effective filter policy."""
    cfg = load_config(config).filter

    table = Table(title="Whitelisted Tags")
    table.add_column("Tag", style="cyan")
    table.add_column("Attributes", style="white")
    table.add_column("Required", style="yellow")
    table.add_column("Overrides", style="green")
    for tag in sorted(cfg.whitelisted_tags):
        overrides = cfg.attribute_overrides.get(tag, {})
        table.add_row(
            tag,
            ", ".join(sorted(cfg.whitelisted_tags[tag])),
            ", ".join(sorted(cfg.required_attributes.get(tag, ()))),
            ", ".join(f"{k}={v}" for k, v in overrides.items()),
        )
    console.print(table)

    console.print(f"Blacklisted tags: [red]{', '.join(sorted(cfg.blacklisted_tags)) or '-'}[/red]")
    console.print(f"Schemes: [cyan]{', '.join(sorted(cfg.scheme_whitelist)) or '-'}[/cyan]")
    console.print(f"Iframe hosts: [cyan]{', '.join(sorted(cfg.iframe_whitelist)) or '-'}[/cyan]")
    console.print(f"Blacklisted media: [dim]{len(cfg.media_blacklist)} patterns[/dim]")
    if cfg.image_proxy_url:
        console.print(f"Image proxy: [cyan]{cfg.image_proxy_url}[/cyan] ({cfg.image_proxy_protocol.value})")


@app.command()
def rules(
    site: str = typer.Argument(..., help="Site URL"),
    config: Optional[str] = typer.Option(None, "-c", "--config", help="YAML config file"),
) -> None:
    """List the site substitutions applied to pages of SITE."""
    cfg = load_config(config)
    substitutions = SiteRuleEngine(RuleLoader(cfg.rules.folders)).rules_for(site)

    if not substitutions:
        console.print(f"[dim]No site rules for {site}.[/dim]")
        return

    table = Table(title=f"Site Rules ({len(substitutions)})")
    table.add_column("#", style="dim", width=3)
    table.add_column("Search", style="cyan")
    table.add_column("Replace", style="white")
    for i, (pattern, replace) in enumerate(substitutions, 1):
        table.add_row(str(i), pattern.pattern, replace or "[dim](remove)[/dim]")
    console.print(table)
