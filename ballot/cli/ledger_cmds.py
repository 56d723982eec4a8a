"""CLI commands: ledger verify, ledger log."""

from __future__ import annotations

import sys

import click
from rich.table import Table

from ballot.cli import DEFAULT_DB, console, fail, get_engine
from ballot.exceptions import BallotError


@click.group()
def ledger():
    """Inspect the audit ledger of committed calls."""
    pass


@ledger.command("verify")
@click.option("--db", default=DEFAULT_DB, help="Database path")
def ledger_verify(db):
    """Verify the hash chain of the audit ledger."""
    engine = get_engine(db)
    try:
        with console.status("[bold blue]Verifying ledger hash chain...[/]"):
            report = engine.ledger.verify_integrity()

        if report["valid"]:
            console.print(
                f"[green]✅ Hash chain integrity: OK[/] ({report['transactions_checked']} transactions)"
            )
            return

        console.print("[red]❌ Hash chain integrity: FAILED[/]")
        for v in report["violations"]:
            console.print(f"  [red]✗[/] {v['type']} at transaction #{v['tx_id']}")
        sys.exit(1)
    except BallotError as e:
        fail(e)
    finally:
        engine.store.close()


@ledger.command("log")
@click.option(
    "--limit", "-n", default=20, type=click.IntRange(min=1), help="Number of most recent entries"
)
@click.option("--db", default=DEFAULT_DB, help="Database path")
def ledger_log(limit, db):
    """List the most recent audit ledger entries."""
    engine = get_engine(db)
    try:
        entries = list(engine.store.iter_transactions())[-limit:]
        if not entries:
            console.print("[yellow]Ledger is empty.[/]")
            return
        table = Table(title="📜 Audit Ledger")
        table.add_column("#", style="dim", width=5)
        table.add_column("Action", style="cyan", width=12)
        table.add_column("Detail")
        table.add_column("Hash", style="magenta", width=18)
        for tx in entries:
            table.add_row(str(tx.id), tx.action, tx.detail, tx.hash[:16])
        console.print(table)
    except BallotError as e:
        fail(e)
    finally:
        engine.store.close()
