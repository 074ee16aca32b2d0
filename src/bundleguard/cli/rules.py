"""CLI command: bundleguard rules — list the rules a check would run."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from bundleguard.cli.check import build_registry, resolve_profile, severities_option
from bundleguard.scanner.models import Severity

console = Console(stderr=True)


@click.command()
@click.option(
    "--severity",
    default=None,
    help="Comma-separated severities to include (default: all).",
)
@click.pass_context
def rules(ctx: click.Context, severity: str | None) -> None:
    """List registered rules for the active profile."""
    profile = resolve_profile(ctx)
    severities = severities_option(severity) or frozenset(Severity)
    registry = build_registry(profile, severities)

    table = Table(title=f"Rules ({profile.name})", show_lines=False)
    table.add_column("Rule", style="cyan")
    table.add_column("Severity", style="bold")
    table.add_column("Applies to")
    table.add_column("Description")

    for rule in registry.rules:
        table.add_row(
            rule.name,
            rule.severity.value,
            Text(", ".join(rule.applies_to)),
            Text(rule.description),
        )

    console.print(table)
