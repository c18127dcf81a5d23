"""CLI: replbook session show|new"""

import click
from rich.console import Console

console = Console()


def _get_client():
    from replbook.cli.main import _get_client
    return _get_client()


def _run(coro):
    from replbook.cli.main import _run
    return _run(coro)


@click.group()
def session():
    """Persisted repl session."""


@session.command("show")
def session_show():
    """Show the stored repl id without contacting the server."""
    client = _get_client()
    repl_id = client.binder.load_persisted()
    _run(client.close())
    if repl_id is None:
        console.print("[yellow]none[/yellow]")
    else:
        click.echo(str(repl_id))


@session.command("new")
def session_new():
    """Resolve the session, creating one on the server if none is stored."""

    async def _resolve():
        client = _get_client()
        try:
            with console.status("Resolving session..."):
                return await client.resolve_session()
        finally:
            await client.close()

    repl_id = _run(_resolve())
    if repl_id is None:
        console.print("[red]Session unavailable.[/red]")
        raise SystemExit(1)
    console.print(f"[green]Repl session: {repl_id}[/green]")
