"""CLI entry point for finboard."""

import logging

import typer
from rich.logging import RichHandler

from finboard.commands.admin import init_command, limits_command
from finboard.commands.plan import fire_command, merge_command, salary_command
from finboard.commands.report import report_command, wealth_command

app = typer.Typer(
    name="finboard",
    help="finboard - Family finance summaries, salary splits and FIRE planning",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """finboard - Family finance summaries, salary splits and FIRE planning."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """Write the default finboard configuration."""
    init_command(force)


@app.command()
def report(
    income_csv: str = typer.Argument(..., help="CSV with record_month, amount_eur"),
    expenses_csv: str = typer.Argument(..., help="CSV with record_date, amount_eur, category"),
) -> None:
    """Show your monthly income and expenses with a spending insight."""
    report_command(income_csv, expenses_csv)


@app.command()
def wealth(
    wealth_csv: str = typer.Argument(..., help="CSV with record_date, amount_eur, account_id"),
) -> None:
    """Show your total assets and growth since the previous snapshot."""
    wealth_command(wealth_csv)


@app.command()
def salary(
    amount: float = typer.Option(None, "--salary", help="Salary to split (default: base_salary from config)"),
) -> None:
    """Split your salary into fixed costs, investments, savings and fun."""
    salary_command(amount)


@app.command()
def merge(
    items_csv: str = typer.Argument(..., help="CSV with the name field, amount, currency"),
    field: str = typer.Option("accountName", "--field", help="Column to merge rows by"),
) -> None:
    """Merge duplicated asset or income rows by name."""
    merge_command(items_csv, field)


@app.command()
def fire(
    net_worth: float = typer.Option(..., "--net-worth", help="Current net worth (€)"),
    monthly_expenses: float = typer.Option(
        None, "--monthly-expenses", help="Monthly expenses (€) (default: latest month in --expenses-csv)"
    ),
    monthly_savings: float = typer.Option(
        None, "--monthly-savings", help="Monthly savings (€) (default: latest income minus expenses)"
    ),
    swr: float = typer.Option(None, "--swr", help="Safe withdrawal rate in % (default from config)"),
    annual_return: float = typer.Option(None, "--return", help="Expected annual return in % (default from config)"),
    income_csv: str = typer.Option(None, "--income-csv", help="Income ledger to read monthly savings from"),
    expenses_csv: str = typer.Option(None, "--expenses-csv", help="Expense ledger to read monthly expenses from"),
) -> None:
    """Show your FIRE target and how long it takes to get there."""
    fire_command(net_worth, monthly_expenses, monthly_savings, swr, annual_return, income_csv, expenses_csv)


@app.command()
def limits() -> None:
    """List the configured rate limiter presets."""
    limits_command()


if __name__ == "__main__":
    app()
