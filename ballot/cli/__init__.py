"""
BALLOT CLI - Package init.

Re-exports the main CLI group and shared utilities.
"""

from __future__ import annotations

import logging
import sys

import click
from rich.console import Console

from ballot import __version__, config
from ballot.engine import BallotEngine
from ballot.exceptions import BallotError
from ballot.storage import get_store

console = Console()
DEFAULT_DB = str(config.DB_PATH)


def get_engine(db: str = DEFAULT_DB) -> BallotEngine:
    """Create an engine over the store selected by BALLOT_STORAGE.

    ``db`` is the database path used by the sqlite store.
    """
    return BallotEngine(get_store(db_path=db))


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )


def fail(exc: BallotError) -> None:
    """Report a rejected call and exit non-zero."""
    console.print(f"[red]✗ {exc}[/] [dim]({exc.code})[/]")
    sys.exit(1)


# ─── Main Group ──────────────────────────────────────────────────

@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.version_option(__version__, prog_name="ballot")
def cli(verbose) -> None:
    """BALLOT - Weighted delegated voting."""
    setup_logging(verbose)


# ─── Register all sub-modules ───────────────────────────────────
from ballot.cli import core  # noqa: E402, F401
from ballot.cli import ledger_cmds  # noqa: E402, F401

from ballot.cli.ledger_cmds import ledger  # noqa: E402

cli.add_command(ledger)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
