"""Typer console interface for ``inventory_dashboard``.

Every command loads the inventory once (from ``--source`` or
``INVENTORY_API_URL``), drives an :class:`InventoryDashboard` through the same
events a UI would, and renders the resulting views with rich. Environment
variables are read from a local ``.env`` (python-dotenv) before settings are
resolved. Errors go to stderr and exit with status 1. Table colours follow the
persisted light/dark theme preference.
"""

from __future__ import annotations

import locale
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from rich.theme import Theme as RichTheme
from typer.models import OptionInfo

from .config import Settings
from .cost_centers import load_cost_centers
from .dashboard import InventoryDashboard
from .logging_setup import configure_logging
from .models import DashboardTransaction, MaterialSummary, Theme, Transaction
from .source import load_inventory
from .theme import ThemeStore, toggled

console = Console()
err_console = Console(stderr=True)

# Named styles used by the tables, tuned for light and dark terminal backgrounds.
RICH_THEMES: dict[str, RichTheme] = {
    "light": RichTheme(
        {
            "material": "bold blue",
            "balance.low": "bold red3",
            "balance.ok": "dark_green",
            "received": "dark_green",
            "issued": "red3",
        }
    ),
    "dark": RichTheme(
        {
            "material": "bold cyan",
            "balance.low": "bold bright_red",
            "balance.ok": "bright_green",
            "received": "bright_green",
            "issued": "bright_red",
        }
    ),
}

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Inventory reconciliation dashboard: per-material receipts (101), "
        "issues (201) and balances from a header/row inventory export."
    ),
)

# Typer mutates OptionInfo objects used in Annotated, so each parameter gets a
# fresh one.
def source_option() -> OptionInfo:
    return typer.Option(
        "--source",
        help="Data source URL or local .json/.csv export (defaults to INVENTORY_API_URL).",
    )


def cost_centers_option() -> OptionInfo:
    return typer.Option(
        "--cost-centers",
        help="Cost-center table (.json or .csv); defaults to INVENTORY_COST_CENTERS.",
        dir_okay=False,
    )


def out_dir_option() -> OptionInfo:
    return typer.Option(
        "--out-dir", help="Export directory (defaults to INVENTORY_EXPORT_DIR or CWD)."
    )


# ---- Helpers -------------------------------------------------------------------


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {message}")
    return typer.Exit(1)


def _apply_theme(theme: Theme) -> None:
    console.push_theme(RICH_THEMES[theme])


def _use_system_collation() -> None:
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        # Unsupported locale settings in the environment; keep "C" ordering.
        pass


def _fmt(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return f"{value:.3f}".rstrip("0").rstrip(".")


def _build_dashboard(source: str | None, cost_centers: Path | None) -> InventoryDashboard:
    try:
        settings = Settings.from_env()
    except ValueError as e:
        raise _fail(str(e)) from e

    src = source or settings.api_url
    if not src:
        raise _fail("No data source: pass --source or set INVENTORY_API_URL.")

    table_path = cost_centers or settings.cost_centers_path
    try:
        centers = load_cost_centers(table_path) if table_path else {}
    except (OSError, ValueError) as e:
        raise _fail(f"Failed to load cost centers: {e}") from e

    dashboard = InventoryDashboard(
        lambda: load_inventory(src, timeout=settings.fetch_timeout),
        cost_centers=centers,
        page_size=settings.page_size,
        low_stock_threshold=settings.low_stock_threshold,
        theme_store=ThemeStore(settings.theme_file),
    )
    if not dashboard.load():
        raise _fail(dashboard.error or "An unknown error occurred.")
    _apply_theme(dashboard.theme)
    return dashboard


def _apply_table_filters(
    dashboard: InventoryDashboard,
    *,
    search: str,
    movement: str,
    sort: str,
    low_stock: bool,
) -> None:
    try:
        dashboard.on_search(search)
        dashboard.on_movement_type_change(movement)
        dashboard.on_sort_change(sort)
    except ValueError as e:
        raise _fail(str(e)) from e
    dashboard.on_show_low_stock_only_change(low_stock)


def _select(dashboard: InventoryDashboard, material: str) -> MaterialSummary:
    dashboard.show_item_dashboard(material)
    selected = dashboard.selected_material
    if selected is None:
        raise _fail(f"Unknown material: {material}")
    return selected


def _inventory_table(items: list[MaterialSummary], threshold: float) -> Table:
    table = Table(show_lines=False)
    table.add_column("Material", style="material", no_wrap=True)
    table.add_column("Description")
    table.add_column("Total In", justify="right")
    table.add_column("Total Out", justify="right")
    table.add_column("Balance", justify="right")
    table.add_column("Unit")
    for item in items:
        balance_style = "balance.low" if item.balance <= threshold else "balance.ok"
        table.add_row(
            item.material,
            item.material_description,
            _fmt(item.total_in),
            _fmt(item.total_out),
            f"[{balance_style}]{_fmt(item.balance)}[/{balance_style}]",
            item.unit,
        )
    return table


def _transaction_row(tx: Transaction) -> list[str]:
    return [
        tx.posting_date,
        _fmt(tx.quantity),
        tx.user,
        tx.cost_center,
        tx.document,
        tx.reservation,
        tx.header_text,
        tx.text,
    ]


def _transactions_table(
    transactions: tuple[Transaction, ...] | tuple[DashboardTransaction, ...], *, title: str
) -> Table:
    tagged = bool(transactions) and isinstance(transactions[0], DashboardTransaction)
    table = Table(title=title)
    table.add_column("Posting Date", no_wrap=True)
    if tagged:
        table.add_column("Type")
    for name in ("Quantity", "User", "Cost Center", "Document", "Reservation", "Header", "Text"):
        table.add_column(name, justify="right" if name == "Quantity" else "left")
    for entry in transactions:
        if isinstance(entry, DashboardTransaction):
            row = _transaction_row(entry.transaction)
            label = "[received]in[/received]" if entry.direction == "in" else "[issued]out[/issued]"
            row.insert(1, label)
        else:
            row = _transaction_row(entry)
        table.add_row(*row)
    return table


def _check_direction(direction: str) -> str:
    if direction not in ("in", "out"):
        raise _fail(f"direction must be 'in' or 'out', got {direction!r}")
    return direction


def _open_detail(
    dashboard: InventoryDashboard,
    material: str,
    direction: str,
    date_from: str | None,
    date_to: str | None,
) -> None:
    _select(dashboard, material)
    if not dashboard.show_detailed_view(_check_direction(direction)):  # type: ignore[arg-type]
        raise _fail(f"No {direction} transactions for {material}")
    if date_from is not None:
        dashboard.on_date_change("from", date_from)
    if date_to is not None:
        dashboard.on_date_change("to", date_to)


# ---- Commands ------------------------------------------------------------------


@app.command("summary")
def summary_cmd(
    source: Annotated[str | None, source_option()] = None,
    cost_centers: Annotated[Path | None, cost_centers_option()] = None,
    search: Annotated[str, typer.Option(help="Substring of material id or description.")] = "",
    movement: Annotated[str, typer.Option(help="all, 101 (receipts) or 201 (issues).")] = "all",
    sort: Annotated[
        str, typer.Option(help="material_description|balance followed by -asc|-desc.")
    ] = "material_description-asc",
    low_stock: Annotated[bool, typer.Option(help="Only show low-stock items.")] = False,
    page: Annotated[int, typer.Option(help="1-indexed page to show.")] = 1,
) -> None:
    """Show one page of the filtered, sorted inventory."""

    dashboard = _build_dashboard(source, cost_centers)
    _apply_table_filters(
        dashboard, search=search, movement=movement, sort=sort, low_stock=low_stock
    )
    if page != 1 and not dashboard.go_to_page(page):
        raise _fail(f"Page {page} is out of range (1..{dashboard.total_pages})")

    stats = dashboard.inventory_stats
    console.print(
        f"[bold]{stats.total_items}[/bold] materials, "
        f"[received]{_fmt(stats.total_received)}[/received] received, "
        f"[issued]{_fmt(stats.total_issued)}[/issued] issued"
    )
    console.print(_inventory_table(dashboard.paginated_inventory, dashboard.low_stock_threshold))
    console.print(f"Page {dashboard.current_page} of {max(dashboard.total_pages, 1)}")


@app.command("item")
def item_cmd(
    material: Annotated[str, typer.Argument(help="Material id.")],
    source: Annotated[str | None, source_option()] = None,
    cost_centers: Annotated[Path | None, cost_centers_option()] = None,
    movement: Annotated[str, typer.Option(help="all, in or out.")] = "all",
    date: Annotated[str, typer.Option("--date", help="Substring of e.g. 'Jan 5, 2024'.")] = "",
    user: Annotated[str, typer.Option(help="Substring of the user name.")] = "",
    cost_center: Annotated[str, typer.Option(help="Substring of the cost center.")] = "",
    details: Annotated[
        str, typer.Option(help="Substring of header text, text, document or reservation.")
    ] = "",
) -> None:
    """Show a material's merged receipt/issue history."""

    dashboard = _build_dashboard(source, cost_centers)
    selected = _select(dashboard, material)
    try:
        for name, value in (
            ("movement", movement),
            ("date", date),
            ("user", user),
            ("cost_center", cost_center),
            ("details", details),
        ):
            dashboard.on_dashboard_filter_change(name, value)
    except ValueError as e:
        raise _fail(str(e)) from e

    view = dashboard.item_dashboard
    assert view is not None
    console.print(
        f"[material]{selected.material}[/material] {selected.material_description} "
        f"(in {_fmt(selected.total_in)}, out {_fmt(selected.total_out)}, "
        f"balance {_fmt(selected.balance)} {selected.unit})"
    )
    console.print(_transactions_table(view.all_transactions, title="Transactions"))


@app.command("detail")
def detail_cmd(
    material: Annotated[str, typer.Argument(help="Material id.")],
    direction: Annotated[str, typer.Argument(help="in (receipts) or out (issues).")],
    source: Annotated[str | None, source_option()] = None,
    cost_centers: Annotated[Path | None, cost_centers_option()] = None,
    date_from: Annotated[
        str | None, typer.Option("--from", help="YYYY-MM-DD; default oldest transaction.")
    ] = None,
    date_to: Annotated[str | None, typer.Option("--to", help="YYYY-MM-DD; default today.")] = None,
) -> None:
    """Show one direction's transactions within an inclusive date range."""

    dashboard = _build_dashboard(source, cost_centers)
    _open_detail(dashboard, material, direction, date_from, date_to)
    try:
        view = dashboard.detailed_transactions_view
    except ValueError as e:
        raise _fail(str(e)) from e
    assert view is not None
    console.print(_transactions_table(view.transactions, title=view.title))
    console.print(
        f"{dashboard.date_from or '…'} to {dashboard.date_to or '…'}: "
        f"total [bold]{_fmt(view.total_quantity)}[/bold]"
    )


@app.command("export-inventory")
def export_inventory_cmd(
    source: Annotated[str | None, source_option()] = None,
    cost_centers: Annotated[Path | None, cost_centers_option()] = None,
    out_dir: Annotated[Path | None, out_dir_option()] = None,
    search: Annotated[str, typer.Option(help="Substring of material id or description.")] = "",
    movement: Annotated[str, typer.Option(help="all, 101 or 201.")] = "all",
    sort: Annotated[
        str, typer.Option(help="Sort, e.g. balance-desc.")
    ] = "material_description-asc",
    low_stock: Annotated[bool, typer.Option(help="Only export low-stock items.")] = False,
) -> None:
    """Export the filtered, sorted inventory (all pages) to CSV."""

    dashboard = _build_dashboard(source, cost_centers)
    _apply_table_filters(
        dashboard, search=search, movement=movement, sort=sort, low_stock=low_stock
    )
    path = dashboard.export_inventory_csv(out_dir or Settings.from_env().export_dir)
    if path is None:
        console.print("[yellow]Nothing to export.[/yellow]")
        return
    console.print(f"Wrote [bold]{path}[/bold]")


@app.command("export-transactions")
def export_transactions_cmd(
    material: Annotated[str, typer.Argument(help="Material id.")],
    direction: Annotated[str, typer.Argument(help="in or out.")],
    source: Annotated[str | None, source_option()] = None,
    cost_centers: Annotated[Path | None, cost_centers_option()] = None,
    out_dir: Annotated[Path | None, out_dir_option()] = None,
    date_from: Annotated[str | None, typer.Option("--from", help="YYYY-MM-DD.")] = None,
    date_to: Annotated[str | None, typer.Option("--to", help="YYYY-MM-DD.")] = None,
) -> None:
    """Export one direction's transactions for a material to CSV."""

    dashboard = _build_dashboard(source, cost_centers)
    _open_detail(dashboard, material, direction, date_from, date_to)
    try:
        path = dashboard.export_transactions_csv(out_dir or Settings.from_env().export_dir)
    except ValueError as e:
        raise _fail(str(e)) from e
    if path is None:
        console.print("[yellow]Nothing to export.[/yellow]")
        return
    console.print(f"Wrote [bold]{path}[/bold]")


@app.command("browse")
def browse_cmd(
    source: Annotated[str | None, source_option()] = None,
    cost_centers: Annotated[Path | None, cost_centers_option()] = None,
) -> None:
    """Pick materials interactively and show their history."""

    from .term_ui import select_material

    dashboard = _build_dashboard(source, cost_centers)
    while True:
        try:
            picked = select_material(dashboard.sorted_inventory)
        except (EOFError, KeyboardInterrupt):
            break
        if picked is None:
            break
        dashboard.show_item_dashboard(picked)
        view = dashboard.item_dashboard
        if view is not None:
            console.print(_transactions_table(view.all_transactions, title=picked.material))
        dashboard.handle_escape_key()


@app.command("theme")
def theme_cmd(
    toggle: Annotated[bool, typer.Option(help="Switch between light and dark.")] = False,
) -> None:
    """Show (or toggle) the persisted theme preference."""

    store = ThemeStore(Settings.from_env().theme_file)
    theme = store.load()
    if toggle:
        theme = toggled(theme)
        store.save(theme)
    _apply_theme(theme)
    console.print(theme)


@app.callback()
def _root() -> None:
    """Load ``.env`` from the CWD (without overriding the environment), set up
    logging, and collate descriptions with the user's locale."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()
    _use_system_collation()


if __name__ == "__main__":  # pragma: no cover
    app()
