"""Planning commands: salary split, FIRE projection and item merging."""

import math
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from finboard.commands.report import format_eur
from finboard.config import get_salary_split, load_config_or_default
from finboard.domain.allocation import merge_by_name, salary_allocation
from finboard.domain.fire import simulate_fire, split_duration
from finboard.domain.summary import latest_monthly_totals
from finboard.ledger import LedgerError, load_expense_csv, load_income_csv, load_items_csv

console = Console()


def format_duration(months: float | None) -> str:
    """Format a month count as years and months."""
    if months is None or math.isinf(months):
        return "[red]not reachable[/red]"
    if months == 0:
        return "[green]already there[/green]"

    years, rest = split_duration(int(months))
    return f"{years} y {rest} m"


def salary_command(salary: float | None = None) -> None:
    """Show how a salary splits into the configured buckets."""
    try:
        config = load_config_or_default()
    except ValueError as e:
        console.print(f"[red]Invalid config: {e}[/red]", style="bold")
        sys.exit(1)

    amount = salary if salary is not None else float(config["base_salary"])
    split = get_salary_split(config)

    total_percent = sum(split.values())
    if total_percent != 100:
        console.print(f"[yellow]Split adds up to {total_percent:g}%, not 100%[/yellow]")

    table = Table(title=f"Salary split of {format_eur(amount)}")
    table.add_column("Bucket", style="cyan")
    table.add_column("%", justify="right")
    table.add_column("Amount", justify="right", style="green")

    for allocation in salary_allocation(amount, split):
        table.add_row(allocation.name, f"{allocation.percent:g}", format_eur(allocation.amount))

    console.print(table)


def ledger_monthly_totals(income_path: str | None, expenses_path: str | None) -> tuple[float, float] | None:
    """Get latest monthly expenses and savings from ledger files.

    Returns:
        Tuple of (monthly_expenses, monthly_savings), or None when no ledger is given.
    """
    if income_path is None and expenses_path is None:
        return None

    try:
        income = load_income_csv(Path(income_path).expanduser()) if income_path else []
        expenses = load_expense_csv(Path(expenses_path).expanduser()) if expenses_path else []
    except (FileNotFoundError, LedgerError) as e:
        console.print(f"[red]Could not load ledger: {e}[/red]", style="bold")
        sys.exit(1)

    latest_income, latest_expenses = latest_monthly_totals(income, expenses)
    return latest_expenses, latest_income - latest_expenses


def fire_command(
    net_worth: float,
    monthly_expenses: float | None = None,
    monthly_savings: float | None = None,
    swr: float | None = None,
    annual_return: float | None = None,
    income_path: str | None = None,
    expenses_path: str | None = None,
) -> None:
    """Show the FIRE target, time to reach it and a yearly projection.

    Expenses and savings not given explicitly come from the latest months of
    the income and expense ledgers.
    """
    try:
        config = load_config_or_default()
    except ValueError as e:
        console.print(f"[red]Invalid config: {e}[/red]", style="bold")
        sys.exit(1)

    if monthly_expenses is None or monthly_savings is None:
        totals = ledger_monthly_totals(income_path, expenses_path)
        if totals is None:
            console.print(
                "[red]Pass --monthly-expenses and --monthly-savings, or ledgers to read them from[/red]",
                style="bold",
            )
            sys.exit(1)
        if monthly_expenses is None:
            monthly_expenses = totals[0]
        if monthly_savings is None:
            monthly_savings = totals[1]

    fire_config = config["fire"]
    swr_percent = swr if swr is not None else float(fire_config["swr_percent"])
    return_percent = annual_return if annual_return is not None else float(fire_config["annual_return_percent"])

    simulation = simulate_fire(
        net_worth,
        monthly_expenses,
        monthly_savings,
        swr_percent=swr_percent,
        annual_return_percent=return_percent,
    )

    console.print(f"[bold cyan]FIRE target:[/bold cyan] {format_eur(simulation.fire_target)}")
    console.print(f"[dim]Annual expenses {format_eur(simulation.annual_expenses)} at {swr_percent:g}% SWR[/dim]")
    console.print(f"[dim]Monthly savings {format_eur(simulation.monthly_savings)}[/dim]")
    console.print(f"[bold]Time to FIRE:[/bold] {format_duration(simulation.months_to_fire)}\n")

    table = Table(title="Projection")
    table.add_column("Year", justify="right", style="cyan")
    table.add_column("Net worth", justify="right")
    table.add_column("Progress", justify="right")

    for point in simulation.projection[::5]:
        progress = point.net_worth / point.target * 100 if point.target > 0 else 0.0
        table.add_row(str(point.year), format_eur(point.net_worth), f"{min(progress, 100):.0f}%")

    console.print(table)


def merge_command(items_path: str, name_field: str = "accountName") -> None:
    """Merge duplicated item rows by name and show the totals."""
    try:
        items = load_items_csv(Path(items_path).expanduser(), name_field)
    except (FileNotFoundError, LedgerError) as e:
        console.print(f"[red]Could not load items: {e}[/red]", style="bold")
        sys.exit(1)

    merged = merge_by_name(items, name_field)
    if not merged:
        console.print("[dim]No named items found[/dim]")
        return

    table = Table(title=f"Merged by {name_field} ({len(items)} rows → {len(merged)})")
    table.add_column("Name", style="cyan")
    table.add_column("Amount", justify="right", style="green")
    table.add_column("Currency", style="dim")

    for row in merged:
        table.add_row(row[name_field], f"{row['amount']:,.2f}", row["currency"])

    console.print(table)
