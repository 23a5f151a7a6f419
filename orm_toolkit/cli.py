#!/usr/bin/env python3
"""
Command-line interface for the ORM Learning Toolkit.

Provides configuration inspection and a walkthrough of soft deletion.
"""

import logging
import sys
from typing import Any, Dict, List, Optional, Tuple

import click
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .config import ToolkitConfig, get_config
from .db import Database
from .demo import run_demo
from .soft_delete import SoftDeleteRegistry

console = Console()


def _rows_table(title: str, rows: List[Dict[str, Any]]) -> Table:
    """Render a list of row dictionaries as a rich table."""
    table = Table(title=title, show_header=True)
    columns = list(rows[0]) if rows else ["id"]
    for column in columns:
        table.add_column(column, style="cyan" if column == "id" else None)

    for row in rows:
        cells = []
        for column in columns:
            value = row.get(column)
            if value is None:
                cells.append("[dim]-[/dim]")
            elif isinstance(value, bool):
                cells.append("[red]✓[/red]" if value else "✗")
            else:
                cells.append(str(value))
        table.add_row(*cells)

    return table


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level (defaults to the configured level)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str]) -> None:
    """ORM Learning Toolkit - soft deletion for SQLAlchemy models."""
    try:
        level = log_level or get_config().log_level
    except ValidationError as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        sys.exit(1)

    logging.basicConfig(
        level=level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    if ctx.invoked_subcommand is None:
        console.print(
            Panel.fit(
                f"[bold blue]ORM Learning Toolkit[/bold blue] v{__version__}\n"
                "[dim]Soft deletion for SQLAlchemy models[/dim]\n\n"
                "Use [bold]orm-toolkit --help[/bold] to see available commands.",
                border_style="blue",
            )
        )


@cli.group()
def config() -> None:
    """Inspect toolkit configuration."""
    pass


@config.command("show")
@click.option("--format", type=click.Choice(["table", "json", "yaml"]), default="table")
def config_show(format: str) -> None:
    """Display current configuration."""
    try:
        config_dict = get_config().to_dict()

        if format == "json":
            console.print_json(data=config_dict)
        elif format == "yaml":
            import yaml

            console.print(yaml.dump(config_dict, default_flow_style=False))
        else:
            table = Table(title="Toolkit Configuration", show_header=True)
            table.add_column("Setting", style="cyan")
            table.add_column("Value", style="green")

            categories = {
                "General": ["application_name", "environment", "log_level"],
                "Database": ["database_url", "echo_sql"],
                "Soft Delete": ["soft_delete_enabled", "include_deleted_option"],
            }

            for category, settings in categories.items():
                table.add_row(f"[bold]{category}[/bold]", "")
                for setting in settings:
                    value = config_dict.get(setting)
                    if value is None:
                        value = "[dim]Not configured[/dim]"
                    elif isinstance(value, bool):
                        value = "✓" if value else "✗"
                    table.add_row(f"  {setting}", str(value))

            console.print(table)

    except Exception as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        sys.exit(1)


@cli.command("demo")
@click.option(
    "--database-url",
    default=None,
    help="SQLAlchemy database URL (defaults to the configured URL)",
)
@click.option(
    "--name",
    "names",
    multiple=True,
    help="Person name to create; the first one is removed (repeatable)",
)
def demo(database_url: Optional[str], names: Tuple[str, ...]) -> None:
    """Create persons, remove the first and show both table views."""
    try:
        config = get_config()
        if database_url:
            config = ToolkitConfig(**{**config.to_dict(), "database_url": database_url})

        db = Database(config, registry=SoftDeleteRegistry())
        try:
            result = run_demo(db, list(names) or None)
        finally:
            db.dispose()

        console.print(f"[green]✓[/green] Removed person {result.removed_id}")
        console.print(_rows_table("Default view", result.visible))
        console.print(_rows_table("Unfiltered view", result.unfiltered))

    except Exception as e:
        console.print(f"[red]Error running demo: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    cli()
