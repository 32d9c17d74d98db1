"""Admin commands for config initialization and limiter presets."""

import sys

from rich.console import Console
from rich.table import Table

from finboard.config import create_default_config, get_config_path, get_limiter_preset, load_config_or_default

console = Console()


def init_command(force: bool = False) -> None:
    """Write the default configuration file."""
    config_path = get_config_path()

    if config_path.exists() and not force:
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
        console.print("[dim]Use --force to overwrite[/dim]")
        return

    try:
        create_default_config(config_path)
    except OSError as e:
        console.print(f"[red]Could not write config: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Config written to {config_path}")


def limits_command() -> None:
    """List configured rate limiter presets."""
    try:
        config = load_config_or_default()
    except ValueError as e:
        console.print(f"[red]Invalid config: {e}[/red]", style="bold")
        sys.exit(1)

    limiters = config.get("limiters", {})
    if not limiters:
        console.print("[dim]No rate limiters configured[/dim]")
        return

    table = Table(title="Rate limiters")
    table.add_column("Name", style="cyan")
    table.add_column("Limit", justify="right")
    table.add_column("Window", justify="right")

    for name in sorted(limiters):
        try:
            preset = get_limiter_preset(name, config)
        except KeyError as e:
            console.print(f"[red]Invalid config: {e.args[0]}[/red]", style="bold")
            sys.exit(1)
        table.add_row(name, str(preset["limit"]), f"{preset['window_seconds']:g}s")

    console.print(table)
