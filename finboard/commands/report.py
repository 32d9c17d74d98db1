"""Report and wealth commands for viewing ledger summaries."""

import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from finboard.dates import month_label
from finboard.domain.fire import latest_account_balances
from finboard.domain.summary import (
    MonthlyData,
    SpendingInsight,
    aggregate_monthly_data,
    percentage_change,
    spending_insight,
    wealth_growth,
)
from finboard.ledger import LedgerError, load_expense_csv, load_income_csv, load_wealth_csv

console = Console()


def format_eur(amount: float) -> str:
    """Format an amount in EUR for display."""
    return f"€{amount:,.2f}"


def format_change(change: float) -> str:
    """Format a percentage change with color."""
    text = f"{change:+.1f}%"
    if change > 0:
        return f"[green]{text}[/green]"
    elif change < 0:
        return f"[red]{text}[/red]"
    else:
        return f"[dim]{text}[/dim]"


def render_insight(insight: SpendingInsight | None) -> None:
    """Render a spending insight line."""
    if insight is None:
        console.print("[dim]No notable change since last month[/dim]")
        return

    color = "yellow" if insight.type == "warning" else "green"
    console.print(f"[{color}]{insight.text}[/{color}]")


def build_monthly_table(months: list[MonthlyData]) -> Table:
    """Build the monthly overview table."""
    table = Table(title="Monthly overview")
    table.add_column("Month", style="cyan")
    table.add_column("Income", justify="right", style="green")
    table.add_column("Expenses", justify="right", style="red")
    table.add_column("Saved", justify="right")
    table.add_column("Top category", style="dim")

    for data in months:
        saved = data.income - data.expenses
        top = max(data.categories.items(), key=lambda x: x[1])[0] if data.categories else "-"
        table.add_row(
            month_label(data.month),
            format_eur(data.income),
            format_eur(data.expenses),
            format_eur(saved),
            top,
        )

    return table


def report_command(income_path: str, expenses_path: str) -> None:
    """Show monthly income and expense totals with an insight for the latest month."""
    try:
        income = load_income_csv(Path(income_path).expanduser())
        expenses = load_expense_csv(Path(expenses_path).expanduser())
    except (FileNotFoundError, LedgerError) as e:
        console.print(f"[red]Could not load ledger: {e}[/red]", style="bold")
        sys.exit(1)

    months = aggregate_monthly_data(income, expenses)
    if not months:
        console.print("[dim]No records yet[/dim]")
        return

    console.print(build_monthly_table(months))

    if len(months) > 1:
        latest, previous = months[-1], months[-2]
        change = percentage_change(latest.expenses, previous.expenses)
        console.print(f"\n[bold]Expenses vs. last month:[/bold] {format_change(change)}")
        render_insight(spending_insight(latest, previous))


def wealth_command(wealth_path: str) -> None:
    """Show total assets at the latest snapshot and growth since the previous one."""
    try:
        records = load_wealth_csv(Path(wealth_path).expanduser())
    except (FileNotFoundError, LedgerError) as e:
        console.print(f"[red]Could not load ledger: {e}[/red]", style="bold")
        sys.exit(1)

    growth = wealth_growth(records)

    console.print(f"[bold cyan]Total assets:[/bold cyan] {format_eur(growth.total_assets)}")
    console.print(f"[bold]Growth:[/bold] {format_change(growth.growth)}")

    if any("account_id" in record for record in records):
        balances = latest_account_balances(records)
        console.print(f"[dim]Latest balance per account: {format_eur(balances)}[/dim]")
