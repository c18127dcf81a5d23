"""CLI: replbook notebook, replbook eval"""

import json
from pathlib import Path
from typing import Optional

import click
import httpx
from rich.console import Console
from rich.markup import escape

from replbook.errors import HttpError, ReplbookError
from replbook.models.cell import Cell
from replbook.notebook import NotebookEngine, server_error_text

console = Console()


def _get_client():
    from replbook.cli.main import _get_client
    return _get_client()


def _run(coro):
    from replbook.cli.main import _run
    return _run(coro)


def _print_cell(number: int, cell: Cell) -> None:
    console.print(f"[cyan]In [{number}]:[/cyan] {escape(cell.input)}")
    if cell.resolved:
        console.print(f"[green]Out[{number}]:[/green] {escape(cell.output_text)}\n")


@click.command("notebook")
@click.option("--transcript", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write the cells to this JSON file on exit")
@click.option("--resume", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None,
              help="Start from a transcript written by --transcript")
def notebook_cmd(transcript: Optional[Path], resume: Optional[Path]):
    """Interactive notebook. Type /quit to exit."""

    async def _notebook() -> int:
        client = _get_client()
        repl_id = await client.resolve_session()
        if repl_id is None:
            console.print(f"[red]No repl session available at {client.settings.api_base}.[/red]")
            await client.close()
            return 1
        if resume is not None:
            engine = NotebookEngine.from_transcript(client.repl, repl_id, json.loads(resume.read_text()))
            for number, cell in enumerate(engine.cells[:-1], start=1):
                _print_cell(number, cell)
        else:
            engine = client.notebook()
        console.print(f"[dim]Repl {repl_id}, type /quit to exit[/dim]\n")
        try:
            while True:
                index = len(engine.cells) - 1
                try:
                    text = click.prompt(f"In [{index + 1}]", prompt_suffix=": ")
                except click.Abort:
                    break
                if text.strip() in ("/quit", "/exit"):
                    break
                engine.update_input(index, text)
                with console.status("Evaluating..."):
                    cell = await engine.run_cell(index)
                if cell is not None:
                    console.print(f"[green]Out[{index + 1}]:[/green] {escape(cell.output_text)}\n")
            return 0
        finally:
            if transcript is not None:
                transcript.parent.mkdir(parents=True, exist_ok=True)
                transcript.write_text(json.dumps(engine.transcript(), indent=2))
                console.print(f"[dim]Transcript saved to {transcript}[/dim]")
            engine.close()
            await client.close()

    raise SystemExit(_run(_notebook()))


@click.command("eval")
@click.argument("text")
@click.option("--json-output", "--json", is_flag=True)
def eval_cmd(text: str, json_output: bool):
    """Evaluate one expression in the persisted session."""

    async def _eval() -> int:
        client = _get_client()
        try:
            result = await client.eval(text)
        except HttpError as e:
            result, code = server_error_text(e.status_code, e.body), 1
        except (ReplbookError, httpx.HTTPError, ValueError) as e:
            result, code = str(e), 1
        else:
            code = 0
        finally:
            await client.close()
        if json_output:
            click.echo(json.dumps({"repl_id": client.repl_id, "text": text, "result": result}))
        elif code:
            console.print(f"[red]{escape(result)}[/red]")
        else:
            click.echo(result)
        return code

    raise SystemExit(_run(_eval()))
