"""CLI commands: init, give-right, delegate, vote, winner, status, voter."""

from __future__ import annotations

import click
from rich.panel import Panel
from rich.table import Table

from ballot import __version__, config
from ballot.cli import DEFAULT_DB, cli, console, fail, get_engine
from ballot.exceptions import BallotError

caller_option = click.option(
    "--as", "caller", default=None, help="Caller account (default: BALLOT_CALLER or $USER)"
)
db_option = click.option("--db", default=DEFAULT_DB, help="Database path")


def _caller(caller: str | None) -> str:
    return caller or config.default_caller()


@cli.command()
@click.argument("proposals", nargs=-1)
@caller_option
@db_option
def init(proposals, caller, db) -> None:
    """Initialize a ballot; the caller becomes chairperson."""
    engine = get_engine(db)
    try:
        chair = _caller(caller)
        engine.construct(chair, proposals)
        console.print(
            Panel(
                f"[bold green]✓ BALLOT v{__version__} initialized[/]\n"
                f"Chairperson: [bold]{chair}[/]\n"
                f"Proposals: {len(proposals)}\n"
                f"Database: {getattr(engine.store, 'db_path', 'in-memory')}",
                title="🗳  BALLOT",
                border_style="green",
            )
        )
    except BallotError as e:
        fail(e)
    finally:
        engine.store.close()


@cli.command("give-right")
@click.argument("target")
@caller_option
@db_option
def give_right(target, caller, db) -> None:
    """Give TARGET the right to vote (chairperson only)."""
    engine = get_engine(db)
    try:
        engine.give_right_to_vote(_caller(caller), target)
        console.print(f"[green]✓[/] [bold]{target}[/] may now vote.")
    except BallotError as e:
        fail(e)
    finally:
        engine.store.close()


@cli.command()
@click.argument("target")
@caller_option
@db_option
def delegate(target, caller, db) -> None:
    """Delegate the caller's vote to TARGET."""
    engine = get_engine(db)
    try:
        sender = _caller(caller)
        resolved = engine.delegate(sender, target)
        suffix = f" (via {target})" if resolved != target else ""
        console.print(f"[green]✓[/] [bold]{sender}[/] delegated to [bold]{resolved}[/]{suffix}.")
    except BallotError as e:
        fail(e)
    finally:
        engine.store.close()


# Negative indices reach the engine and are rejected as out of range.
@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("index", type=int)
@caller_option
@db_option
def vote(index, caller, db) -> None:
    """Vote for the proposal at INDEX."""
    engine = get_engine(db)
    try:
        sender = _caller(caller)
        engine.vote(sender, index)
        proposal = engine.store.get_proposal(index)
        console.print(
            f"[green]✓[/] [bold]{sender}[/] voted for [bold]#{index} {proposal.name}[/]."
        )
    except BallotError as e:
        fail(e)
    finally:
        engine.store.close()


@cli.command()
@db_option
def winner(db) -> None:
    """Show the winning proposal."""
    engine = get_engine(db)
    try:
        name = engine.winner_name()
        if name is None:
            console.print("[yellow]No winner yet.[/]")
            return
        console.print(f"🏆 Winner: [bold green]{name}[/]")
    except BallotError as e:
        fail(e)
    finally:
        engine.store.close()


@cli.command()
@db_option
def status(db) -> None:
    """Show ballot state and the current tally."""
    engine = get_engine(db)
    try:
        info = engine.status()
        if not info["initialized"]:
            console.print("[yellow]Ballot not initialized.[/]")
            return

        console.print(
            Panel(
                f"[bold cyan]Chairperson:[/] {info['chairperson']}\n"
                f"[bold cyan]Voters:[/] {info['voters']} ({info['voted']} voted)\n"
                f"[bold cyan]Total votes:[/] {info['total_votes']}\n"
                f"[bold cyan]Winner:[/] {info['winner'] or '-'}",
                title="📊 Ballot Status",
                border_style="cyan",
            )
        )
        table = Table(title="Tally")
        table.add_column("#", style="dim", width=4)
        table.add_column("Proposal", style="cyan")
        table.add_column("Votes", style="green", justify="right")
        for index, name, count in engine.tally():
            table.add_row(str(index), name, str(count))
        console.print(table)
    except BallotError as e:
        fail(e)
    finally:
        engine.store.close()


@cli.command()
@click.argument("account")
@db_option
def voter(account, db) -> None:
    """Show the voter record of ACCOUNT."""
    engine = get_engine(db)
    try:
        record = engine.get_voter(account)
        if record is None:
            console.print(f"[yellow]No voter record for '{account}'[/]")
            return
        if record.delegate is not None:
            choice = f"delegated to {record.delegate}"
        elif record.vote is not None:
            choice = f"voted for #{record.vote}"
        else:
            choice = "not voted"
        console.print(f"[bold]{account}[/]: weight {record.weight}, {choice}")
    except BallotError as e:
        fail(e)
    finally:
        engine.store.close()


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", default=8000, type=int, help="Bind port")
@db_option
def serve(host, port, db) -> None:
    """Serve the HTTP API over the ballot at DB."""
    import os

    import uvicorn

    os.environ["BALLOT_DB"] = db
    config.reload()
    from ballot.api import app

    uvicorn.run(app, host=host, port=port)
