"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging

import click

from bundleguard import __version__

_LOG_LEVELS = {
    "silent": logging.CRITICAL + 1,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "verbose": logging.DEBUG,
}


@click.group()
@click.version_option(version=__version__, prog_name="bundleguard")
@click.option(
    "--profile",
    "-p",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a YAML rule profile.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option(
    "--log-level",
    type=click.Choice(list(_LOG_LEVELS)),
    default=None,
    help="Logging level (default: warn).",
)
@click.pass_context
def main(
    ctx: click.Context,
    profile: str | None,
    verbose: bool,
    log_level: str | None,
) -> None:
    """bundleguard — static assertions for packaged JavaScript bundles."""
    ctx.ensure_object(dict)
    ctx.obj["profile_path"] = profile
    ctx.obj["verbose"] = verbose

    if verbose:
        level = logging.DEBUG
    else:
        level = _LOG_LEVELS[log_level or "warn"]
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("bundleguard").setLevel(level)


def _register_commands() -> None:
    from bundleguard.cli.check import check  # noqa: F811
    from bundleguard.cli.rules import rules  # noqa: F811

    main.add_command(check)
    main.add_command(rules)


_register_commands()
