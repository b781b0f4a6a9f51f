"""Command line interface for ccAnnounce."""

from __future__ import annotations

import asyncio
import logging

import click
from rich.console import Console
from rich.markup import escape

from ccannounce.config import init_config
from ccannounce.models import LogLevel, PeerEvent
from ccannounce.tracker import (
    AlreadyRunning,
    AnnounceFailure,
    AnnounceOutcome,
    Tracker,
    create_tracker,
)
from ccannounce.utils.exceptions import CCAnnounceError
from ccannounce.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

INFO_HASH_LENGTH = 20


def _parse_info_hash(info_hash: str) -> bytes:
    try:
        buffer = bytes.fromhex(info_hash)
    except ValueError:
        buffer = b""
    if len(buffer) != INFO_HASH_LENGTH:
        msg = "Info hash must be 40 hex characters"
        raise click.ClickException(msg)
    return buffer


def _print_outcome(console: Console, index: int, outcome: AnnounceOutcome) -> None:
    if isinstance(outcome, AnnounceFailure):
        cause = escape(str(outcome.error.error))
        console.print(f"[red]#{index} failed:[/red] {cause}")
    elif isinstance(outcome, AlreadyRunning):
        console.print(f"[yellow]#{index} tracker already running[/yellow]")
    else:
        console.print(f"[green]#{index} ok[/green] {_describe(outcome.result)}")


def _describe(result: object) -> str:
    if not isinstance(result, PeerEvent):
        return escape(repr(result))
    parts = [
        f"interval={result.interval}",
        f"min_interval={result.min_interval}",
        f"seeders={result.complete}",
        f"leechers={result.incomplete}",
    ]
    if result.warning_message:
        parts.append(f"warning={escape(result.warning_message)}")
    return " ".join(parts)


async def _run_announces(
    tracker: Tracker, cycles: int, force_stop: bool, console: Console
) -> int:
    """Print ``cycles`` outcomes, stop the tracker, return the failure count."""
    failures = 0
    seen = 0
    channel = tracker.start()
    try:
        async for outcome in channel:
            seen += 1
            _print_outcome(console, seen, outcome)
            if not outcome.ok:
                failures += 1
            if seen >= cycles:
                break
    finally:
        try:
            result = await tracker.stop(force_stop)
        except Exception as e:
            logger.debug("Stop announce failed", exc_info=True)
            console.print(f"[red]Stop announce failed:[/red] {escape(str(e))}")
        else:
            console.print(f"Stopped: {_describe(result)}")
    return failures


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Configuration file path",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v: info, -vv: debug)",
)
@click.pass_context
def cli(ctx, config, verbose):
    """ccAnnounce - BitTorrent tracker announce scheduler."""
    ctx.ensure_object(dict)
    try:
        config_manager = init_config(config)
    except CCAnnounceError as e:
        raise click.ClickException(str(e)) from e

    if verbose:
        observability = config_manager.config.observability
        observability.log_level = LogLevel.DEBUG if verbose > 1 else LogLevel.INFO
        setup_logging(observability)

    ctx.obj["config_manager"] = config_manager


@cli.command()
@click.argument("announce_url")
@click.argument("info_hash")
@click.option(
    "--cycles",
    "-n",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of announce outcomes to wait for",
)
@click.option(
    "--force-stop",
    is_flag=True,
    help="Stop without sending a 'stopped' announce",
)
@click.pass_context
def announce(ctx, announce_url, info_hash, cycles, force_stop):
    """Announce INFO_HASH (hex) to ANNOUNCE_URL and print the results."""
    console = Console()
    buffer = _parse_info_hash(info_hash)
    try:
        tracker = create_tracker(announce_url, buffer)
    except CCAnnounceError as e:
        raise click.ClickException(str(e)) from e

    failures = asyncio.run(_run_announces(tracker, cycles, force_stop, console))
    if failures >= cycles:
        ctx.exit(1)


def main():
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
