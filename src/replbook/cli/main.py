"""
replbook CLI — `replbook` command.

Commands:
  replbook notebook             Interactive notebook in the persisted session
  replbook eval <text>          One-shot evaluation
  replbook session show|new     Inspect or create the persisted session
  replbook config show|set-api-base
"""

import asyncio
import logging
from typing import Optional

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise SystemExit("CLI requires extras: pip install replbook[cli]")

from replbook import __version__
from replbook.client import AsyncReplbook

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _get_client() -> AsyncReplbook:
    ctx = click.get_current_context()
    obj = ctx.find_root().obj or {}
    return AsyncReplbook(api_base=obj.get("api_base"))


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option(__version__)
@click.option("--api-base", default=None, help="Evaluator base URL (overrides REPLBOOK_API_BASE)")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.pass_context
def main(ctx: click.Context, api_base: Optional[str], verbose: bool):
    """replbook — notebook client for a remote REPL evaluator."""
    _setup_logging(verbose)
    ctx.obj = {"api_base": api_base}


# Register subcommands from separate modules
from replbook.cli.notebook import notebook_cmd, eval_cmd
from replbook.cli.sessions import session
from replbook.cli.config import config

main.add_command(notebook_cmd)
main.add_command(eval_cmd)
main.add_command(session)
main.add_command(config)


if __name__ == "__main__":
    main()
