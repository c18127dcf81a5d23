"""CLI: replbook config show|set-api-base"""

import click
from rich.console import Console
from rich.table import Table

from replbook.config import Settings, config_path, load_config, save_config

console = Console()


@click.group()
def config():
    """Client configuration."""


@config.command("show")
def config_show():
    """Show effective settings."""
    api_base = click.get_current_context().find_root().obj.get("api_base")
    settings = Settings.resolve(api_base=api_base)
    table = Table(title=str(config_path()))
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_row("api_base", settings.api_base)
    table.add_row("timeout", str(settings.timeout))
    table.add_row("state_file", str(settings.state_file))
    console.print(table)


@config.command("set-api-base")
@click.argument("url")
def config_set_api_base(url: str):
    """Persist the evaluator base URL."""
    cfg = load_config()
    save_config({**cfg, "api_base": url.rstrip("/")})
    console.print(f"[green]api_base set to {url.rstrip('/')}[/green]")
