"""CLI command: bundleguard check — run every rule over the discovered bundles."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from bundleguard.config import BundleGuardConfig, parse_severities
from bundleguard.profile.loader import default_profile, load_profile
from bundleguard.profile.models import Profile
from bundleguard.report import build_renderable, exit_code, render_json
from bundleguard.scanner.engine import DiscoveryError, RuleRegistry, discover_bundles
from bundleguard.scanner.models import Severity
from bundleguard.scanner.rules import default_rules

logger = logging.getLogger(__name__)

console = Console(stderr=True)


def resolve_profile(ctx: click.Context) -> Profile:
    """Load the --profile given to the group, or the packaged default."""
    obj = ctx.obj or {}
    profile_path = obj.get("profile_path")
    try:
        return load_profile(profile_path) if profile_path else default_profile()
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Failed to load profile: {e}") from e


def build_registry(profile: Profile, severities: Iterable[Severity]) -> RuleRegistry:
    """A registry holding the default rules whose severity is included."""
    registry = RuleRegistry(include_severities=severities)
    for rule in default_rules(profile):
        registry.register(rule)
    logger.info("Registered %d rules", len(registry.rules))
    return registry


def severities_option(value: str | None) -> frozenset[Severity] | None:
    if value is None:
        return None
    try:
        return parse_severities(value)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'--severity'") from e


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Emit the JSON report instead of text.")
@click.option("--no-parallel", is_flag=True, help="Process bundles sequentially.")
@click.option(
    "--max-workers",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of bundles processed concurrently (default: 4).",
)
@click.option(
    "--severity",
    default=None,
    help="Comma-separated severities to include: high,medium,low,warning (default: all).",
)
@click.option(
    "--dist-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory containing the built bundles (default: dist).",
)
@click.option("--strict", is_flag=True, help="Treat warnings as failures.")
@click.pass_context
def check(
    ctx: click.Context,
    as_json: bool,
    no_parallel: bool,
    max_workers: int | None,
    severity: str | None,
    dist_dir: str | None,
    strict: bool,
) -> None:
    """Run static assertions over built bundles."""
    try:
        config = BundleGuardConfig.load()
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e
    if dist_dir:
        config.dist_dir = Path(dist_dir)
    if no_parallel:
        config.parallel = False
    if max_workers:
        config.max_workers = max_workers
    severities = severities_option(severity)
    if severities is not None:
        config.severities = severities
    config.strict = strict
    if as_json:
        config.output_format = "json"

    profile = resolve_profile(ctx)
    registry = build_registry(profile, config.severities)

    try:
        bundles = discover_bundles(
            config.dist_dir,
            marker=profile.bundle_marker,
            extension=profile.bundle_extension,
        )
    except DiscoveryError as e:
        console.print(f"[red]Fatal:[/red] {escape(str(e))}")
        sys.exit(1)

    if config.output_format == "text":
        console.print(
            f"[bold]bundleguard[/bold] checking [cyan]{escape(str(config.dist_dir))}[/cyan] "
            f"with profile [cyan]{escape(profile.name)}[/cyan] "
            f"({len(bundles)} bundles, {len(registry.rules)} rules)\n"
        )

    report = registry.run_paths(
        bundles,
        parallel=config.parallel,
        max_workers=config.max_workers,
    )

    if config.output_format == "json":
        click.echo(render_json(report, strict=config.strict))
    else:
        console.print(build_renderable(report, strict=config.strict))

    code = exit_code(report, strict=config.strict)
    if code:
        sys.exit(code)
