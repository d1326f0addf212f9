"""Command-line interface for shelterqueue."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import click

from shelterqueue.config import Config, DEFAULT_CONFIG_TOML
from shelterqueue.models import CATEGORIES, ShelterError
from shelterqueue.session import DEMO_SCRIPT, Outcome, ShelterSession


def _load_config(path: str | None) -> Config:
    root = Path(path).resolve() if path else None
    return Config.load(root) if root else Config.load_from_cwd()


def _configure_logging(config: Config, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _echo_outcome(outcome: Outcome, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(outcome.to_dict()))
        return
    click.echo(f"{outcome.command:<6}  {outcome.message}")
    for animal in outcome.animals:
        click.echo(f"        {animal.category:<6}  {animal.name:<20}  {animal.arrival.isoformat()}")


def _run_lines(session: ShelterSession, lines, as_json: bool) -> None:
    try:
        for outcome in session.run(lines):
            _echo_outcome(outcome, as_json)
    except ShelterError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log queue activity at DEBUG level")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """shelterqueue: first-in-first-out adoption queue for dogs and cats."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# --------------------------------------------------------------------------- #
# init
# --------------------------------------------------------------------------- #

@main.command()
@click.option("--path", default=".", help="Project root directory")
def init(path: str):
    """Initialise .shelterqueue/ in the project root."""
    root = Path(path).resolve()
    config_dir = root / ".shelterqueue"
    config_file = config_dir / "config.toml"

    if config_dir.exists():
        click.echo(f"Already initialised at {config_dir}")
    else:
        config_dir.mkdir(parents=True)
        click.echo(f"Created {config_dir}")

    if not config_file.exists():
        config_file.write_text(DEFAULT_CONFIG_TOML)
        click.echo(f"Created {config_file}")
    else:
        click.echo(f"Config already exists: {config_file}")


# --------------------------------------------------------------------------- #
# demo / run
# --------------------------------------------------------------------------- #

@main.command()
@click.option("--json", "as_json", is_flag=True, help="Print one JSON object per command")
@click.option("--path", default=None, help="Project root (default: auto-detect)")
@click.pass_context
def demo(ctx: click.Context, as_json: bool, path: str | None):
    """Run a short admission and adoption scenario."""
    config = _load_config(path)
    _configure_logging(config, ctx.obj["verbose"])

    # The scenario admits dogs and cats even if the config names other categories.
    categories = dict.fromkeys([*config.categories, *CATEGORIES])
    session = ShelterSession(categories=categories)
    if not as_json:
        click.echo(f"{config.shelter_name}: demo")
        click.echo("-" * 60)
    _run_lines(session, DEMO_SCRIPT.splitlines(), as_json)


@main.command()
@click.argument("script", type=click.File("r"), default="-")
@click.option("--json", "as_json", is_flag=True, help="Print one JSON object per command")
@click.option("--path", default=None, help="Project root (default: auto-detect)")
@click.pass_context
def run(ctx: click.Context, script, as_json: bool, path: str | None):
    """Execute shelter commands from SCRIPT (or stdin), one per line.

    \b
    Commands:
      admit <category> <name>
      adopt [category]
      peek
      list
    """
    config = _load_config(path)
    _configure_logging(config, ctx.obj["verbose"])

    session = ShelterSession(categories=config.categories)
    _run_lines(session, script, as_json)
    if not as_json:
        click.echo(f"\n{len(session.queue)} animal(s) still waiting.")


# --------------------------------------------------------------------------- #
# serve
# --------------------------------------------------------------------------- #

@main.command()
@click.option("--path", default=None, help="Project root")
@click.pass_context
def serve(ctx: click.Context, path: str | None):
    """Start the MCP server on stdio."""
    config = _load_config(path)
    _configure_logging(config, ctx.obj["verbose"])

    from shelterqueue.mcp_server import run_server

    asyncio.run(run_server(config))
