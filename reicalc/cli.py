"""CLI interface for REICalc."""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from reicalc.config import AppConfig, DisplayConfig, load_config
from reicalc.db.repository import Repository
from reicalc.errors import InvalidInput
from reicalc.models import ComparedProperty, CustomExpense, LoanInputs, revise

app = typer.Typer(
    name="reicalc",
    help="Real estate investment calculators: rental financing, flips, MAO and comparisons.",
    no_args_is_help=True,
)
console = Console()


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _overrides(**options: Any) -> dict[str, Any]:
    """Options the user actually passed; the rest keep their saved values."""
    return {k: v for k, v in options.items() if v is not None}


def _money(value: float, display: DisplayConfig) -> str:
    if not math.isfinite(value):
        return "n/a"
    sign = "-" if value < 0 else ""
    return f"{sign}{display.currency_symbol}{abs(value):,.{display.currency_decimals}f}"


def _pct(value: float, display: DisplayConfig) -> str:
    if not math.isfinite(value):
        return "n/a"
    return f"{value:.{display.percent_decimals}f}%"


def _show(title: str, rows: list[tuple[str, str]]) -> None:
    table = Table(title=title, show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="bold", justify="right")
    for label, value in rows:
        table.add_row(label, value)
    console.print(table)


def _fail(message: str) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {message}")
    raise typer.Exit(code=1)


def _invalid(e: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
    )


def _open(cfg: AppConfig, name: str):
    from reicalc.analysis.engine import get_session

    return get_session(name)(Repository(cfg.storage.url), cfg.defaults)


@app.command()
def financing(
    price: float = typer.Option(None, "--price", "-p", help="Purchase price"),
    rent: float = typer.Option(None, "--rent", "-r", help="Monthly rent"),
    tax: float = typer.Option(None, "--tax", help="Annual property tax"),
    insurance: float = typer.Option(None, "--insurance", help="Annual insurance"),
    hoa: float = typer.Option(None, "--hoa", help="Monthly HOA fees"),
    maintenance: float = typer.Option(None, "--maintenance", help="Monthly maintenance"),
    vacancy: float = typer.Option(None, "--vacancy", help="Vacancy rate, percent of rent"),
    management: float = typer.Option(None, "--management", help="Management fee, percent of rent"),
    down: float = typer.Option(None, "--down", help="Down payment percent"),
    rate: float = typer.Option(None, "--rate", help="Annual interest rate percent"),
    term: int = typer.Option(None, "--term", help="Loan term in years"),
    closing: float = typer.Option(None, "--closing", help="Closing costs"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config TOML file"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Analyze a financed rental property."""
    setup_logging(verbose)
    cfg = load_config(config_path)
    session = _open(cfg, "financing")

    try:
        session.update_property(**_overrides(
            purchase_price=price,
            monthly_rent=rent,
            property_tax=tax,
            insurance=insurance,
            hoa_fees=hoa,
            maintenance=maintenance,
            vacancy_rate_percent=vacancy,
            property_management_rate_percent=management,
        ))
        session.update(**_overrides(
            down_payment_percent=down,
            interest_rate_percent=rate,
            loan_term_years=term,
            closing_costs=closing,
        ))
    except ValidationError as e:
        _fail(_invalid(e))

    r = session.calculate()
    if r is None:
        _fail(session.error)

    d = cfg.display
    _show("Rental Financing", [
        ("Monthly P&I", _money(r.monthly_principal_and_interest, d)),
        ("Monthly Expenses", _money(r.monthly_expenses, d)),
        ("Monthly Cash Flow", _money(r.monthly_cash_flow, d)),
        ("Annual Cash Flow", _money(r.annual_cash_flow, d)),
        ("Cap Rate", _pct(r.cap_rate_percent, d)),
        ("Cash-on-Cash Return", _pct(r.cash_on_cash_return_percent, d)),
        ("Total Investment", _money(r.total_investment, d)),
    ])


@app.command()
def loan(
    price: float = typer.Option(..., "--price", "-p", help="Purchase price"),
    arv: float = typer.Option(None, "--arv", help="After repair value"),
    repairs: float = typer.Option(None, "--repairs"),
    closing: float = typer.Option(None, "--closing"),
    holding: float = typer.Option(None, "--holding"),
    tax: float = typer.Option(None, "--tax", help="Property taxes over the project"),
    insurance: float = typer.Option(None, "--insurance", help="Insurance over the project"),
    expense: list[str] = typer.Option(
        [], "--expense", "-e", help="Extra expense as NAME=AMOUNT, repeatable"
    ),
    down: float = typer.Option(None, "--down", help="Down payment percent"),
    down_amount: float = typer.Option(
        None, "--down-amount", help="Down payment in dollars (overrides --down)"
    ),
    rate: float = typer.Option(None, "--rate", help="Annual interest rate percent"),
    term: int = typer.Option(None, "--term", help="Loan term in years"),
    points: float = typer.Option(None, "--points", help="Loan points, percent of loan"),
    fees: float = typer.Option(None, "--fees", help="Other lender fees"),
    config_path: Path = typer.Option(None, "--config", "-c"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Total the cost of a financed project and its return at resale.

    Not saved between runs; omitted options come from the configured defaults.
    """
    from reicalc.analysis.loan import LoanAnalyzer

    setup_logging(verbose)
    cfg = load_config(config_path)
    custom: list[CustomExpense] = []
    for item in expense:
        name, sep, amount = item.partition("=")
        if not sep:
            _fail(f"Expected NAME=AMOUNT, got {item!r}")
        try:
            custom.append(CustomExpense(name=name.strip(), amount=float(amount)))
        except ValueError:
            _fail(f"Invalid amount in {item!r}")

    overrides = _overrides(
        purchase_price=price,
        after_repair_value=arv,
        repair_costs=repairs,
        closing_costs=closing,
        holding_costs=holding,
        property_taxes=tax,
        insurance=insurance,
        down_payment_percent=down,
        interest_rate_percent=rate,
        loan_term_years=term,
        points_percent=points,
        other_fees=fees,
    )
    if custom:
        overrides["custom_expenses"] = tuple(custom)
    if down_amount is not None:
        overrides.update(down_payment_amount=down_amount, down_payment_is_percent=False)
    try:
        inputs: LoanInputs = revise(cfg.defaults.loan, **overrides)
    except ValidationError as e:
        _fail(_invalid(e))

    try:
        r = LoanAnalyzer().evaluate(inputs)
    except InvalidInput as e:
        _fail(e.message)

    d = cfg.display
    _show("Loan Cost", [
        ("Loan Amount", _money(r.loan_amount, d)),
        ("Monthly Payment", _money(r.monthly_payment, d)),
        ("Total Interest", _money(r.total_interest, d)),
        ("Total Cost", _money(r.total_cost, d)),
        ("Cash-on-Cash Return", _pct(r.cash_on_cash_return_percent, d)),
        ("Return on Investment", _pct(r.return_on_investment_percent, d)),
    ])


@app.command()
def flip(
    price: float = typer.Option(None, "--price", "-p", help="Purchase price"),
    repairs: float = typer.Option(None, "--repairs"),
    holding: float = typer.Option(None, "--holding"),
    sale: float = typer.Option(None, "--sale", help="Selling price"),
    selling_costs: float = typer.Option(None, "--selling-costs"),
    config_path: Path = typer.Option(None, "--config", "-c"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Analyze a fix-and-flip."""
    setup_logging(verbose)
    cfg = load_config(config_path)
    session = _open(cfg, "flip")
    try:
        session.update(**_overrides(
            purchase_price=price,
            repair_costs=repairs,
            holding_costs=holding,
            selling_price=sale,
            selling_costs=selling_costs,
        ))
    except ValidationError as e:
        _fail(_invalid(e))

    r = session.calculate()
    if r is None:
        _fail(session.error)

    d = cfg.display
    _show("Fix and Flip", [
        ("Total Investment", _money(r.total_investment, d)),
        ("Total Revenue", _money(r.total_revenue, d)),
        ("Profit", _money(r.profit, d)),
        ("ROI", _pct(r.roi_percent, d)),
    ])


@app.command()
def mao(
    arv: float = typer.Option(None, "--arv", help="After repair value"),
    repairs: float = typer.Option(None, "--repairs"),
    profit: float = typer.Option(None, "--profit", help="Desired profit"),
    holding: float = typer.Option(None, "--holding"),
    selling_costs: float = typer.Option(None, "--selling-costs"),
    config_path: Path = typer.Option(None, "--config", "-c"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Maximum allowable offer for a target profit."""
    setup_logging(verbose)
    cfg = load_config(config_path)
    session = _open(cfg, "mao")
    try:
        session.update(**_overrides(
            after_repair_value=arv,
            repair_costs=repairs,
            desired_profit=profit,
            holding_costs=holding,
            selling_costs=selling_costs,
        ))
    except ValidationError as e:
        _fail(_invalid(e))

    r = session.calculate()
    if r is None:
        _fail(session.error)

    d = cfg.display
    offer = _money(r.maximum_allowable_offer, d)
    if r.maximum_allowable_offer < 0:
        offer = f"[red]{offer}[/red]"
    _show("Maximum Allowable Offer", [
        ("MAO", offer),
        ("Total Costs", _money(r.total_costs, d)),
        ("Profit", _money(r.profit, d)),
    ])


@app.command()
def compare(
    name1: str = typer.Option(None, "--name1"),
    price1: float = typer.Option(None, "--price1"),
    rent1: float = typer.Option(None, "--rent1", help="Monthly rent"),
    expenses1: float = typer.Option(None, "--expenses1", help="Monthly expenses"),
    name2: str = typer.Option(None, "--name2"),
    price2: float = typer.Option(None, "--price2"),
    rent2: float = typer.Option(None, "--rent2", help="Monthly rent"),
    expenses2: float = typer.Option(None, "--expenses2", help="Monthly expenses"),
    config_path: Path = typer.Option(None, "--config", "-c"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Compare two rental properties side by side."""
    setup_logging(verbose)
    cfg = load_config(config_path)
    session = _open(cfg, "comparison")

    try:
        p1: ComparedProperty = revise(session.inputs.property1, **_overrides(
            name=name1, price=price1, monthly_rent=rent1, monthly_expenses=expenses1,
        ))
        p2: ComparedProperty = revise(session.inputs.property2, **_overrides(
            name=name2, price=price2, monthly_rent=rent2, monthly_expenses=expenses2,
        ))
    except ValidationError as e:
        _fail(_invalid(e))
    session.update(property1=p1, property2=p2)

    r = session.calculate()
    if r is None:
        _fail(session.error)

    d = cfg.display
    table = Table(title="Property Comparison", show_lines=True)
    table.add_column("Metric", style="cyan")
    table.add_column(p1.name or "Property 1", justify="right")
    table.add_column(p2.name or "Property 2", justify="right")
    table.add_row(
        "Monthly Cash Flow",
        _money(r.property1.monthly_cash_flow, d),
        _money(r.property2.monthly_cash_flow, d),
    )
    table.add_row("Cap Rate", _pct(r.property1.cap_rate_percent, d), _pct(r.property2.cap_rate_percent, d))
    table.add_row("ROI", _pct(r.property1.roi_percent, d), _pct(r.property2.roi_percent, d))
    console.print(table)


@app.command()
def reset(
    calculator: str = typer.Argument(None, help="financing, flip, mao or comparison"),
    all_: bool = typer.Option(False, "--all", help="Clear saved inputs for every calculator"),
    config_path: Path = typer.Option(None, "--config", "-c"),
):
    """Reset a calculator to its defaults, or clear all saved inputs."""
    from reicalc.analysis.engine import reset_all_saved

    cfg = load_config(config_path)
    if all_:
        reset_all_saved(Repository(cfg.storage.url))
        console.print("[green]Cleared saved inputs for all calculators[/green]")
        return
    if not calculator:
        _fail("Name a calculator or pass --all")

    try:
        session = _open(cfg, calculator)
    except ValueError as e:
        _fail(str(e))
    session.reset()
    console.print(f"[green]Reset {calculator} to defaults[/green]")


@app.command()
def config_show(
    config_path: Path = typer.Option(None, "--config", "-c"),
):
    """Display current configuration."""
    cfg = load_config(config_path)
    console.print_json(json.dumps(cfg.model_dump(), indent=2, default=str))


@app.command()
def serve(
    config_path: Path = typer.Option(None, "--config", "-c"),
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
):
    """Start the JSON API server."""
    import uvicorn

    cfg = load_config(config_path)

    from reicalc.api.server import create_app

    web_app = create_app(cfg)
    console.print(f"[bold]Starting REICalc API at http://{host}:{port}[/bold]")
    uvicorn.run(web_app, host=host, port=port)


if __name__ == "__main__":
    app()
