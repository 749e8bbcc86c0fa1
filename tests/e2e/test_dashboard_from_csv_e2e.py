# ruff: noqa: E402, I001
from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

# Make sure the workspace `packages/` dir is on sys.path so `inventory_dashboard` is importable
_ROOT = Path(__file__).resolve().parents[2]
_PKG_DIR = _ROOT / "packages"
sys.path[:0] = [p for p in [str(_PKG_DIR), str(_ROOT)] if p not in sys.path]

from inventory_dashboard import InventoryDashboard, load_inventory
from inventory_dashboard.cost_centers import load_cost_centers
from inventory_dashboard.theme import ThemeStore

from tests.helpers.tables import COST_CENTERS_CSV, SAMPLE_CSV


def test_full_session_over_csv_export(tmp_path: Path) -> None:
    """Load an export, browse it the way a user would, and export both views."""

    board = InventoryDashboard(
        lambda: load_inventory(str(SAMPLE_CSV)),
        cost_centers=load_cost_centers(COST_CENTERS_CSV),
        page_size=2,
        theme_store=ThemeStore(tmp_path / "theme.json", prefers_dark=lambda: False),
        today=lambda: date(2024, 3, 31),
    )
    assert board.load()

    # Header stats cover everything that survived row admission.
    stats = board.inventory_stats
    assert (stats.total_items, stats.total_received, stats.total_issued) == (3, 113.5, 55)
    bolt = next(i for i in board.inventory_data if i.material == "B-100")
    assert (bolt.total_in, bolt.total_out, bolt.balance, bolt.unit) == (100, 55, 45, "EA")

    # Two pages at page size 2; the second holds the last description.
    assert board.total_pages == 2
    assert [i.material for i in board.paginated_inventory] == ["B-100", "W-300"]
    assert board.next_page()
    assert [i.material for i in board.paginated_inventory] == ["N-200"]

    # Searching resets to page 1 and narrows the table.
    board.on_search("m8")
    assert board.current_page == 1
    assert [i.material for i in board.sorted_inventory] == ["B-100", "N-200"]

    # Drill into the bolt: merged history is newest first, names resolved.
    board.show_item_dashboard("B-100")
    history = board.item_dashboard.all_transactions
    assert [(t.direction, t.transaction.posting_date) for t in history] == [
        ("out", "03/15/2024"),
        ("out", "2024-02-10"),
        ("in", "2024-01-05"),
    ]
    board.on_dashboard_filter_change("details", "night")
    (only,) = board.item_dashboard.all_transactions
    assert only.transaction.cost_center == "Production"
    board.on_dashboard_filter_change("details", "")
    board.on_dashboard_filter_change("date", "mar 15")
    assert len(board.item_dashboard.all_transactions) == 1

    # Issue detail view starts at the oldest issue and ends today.
    assert board.show_detailed_view("out")
    assert (board.date_from, board.date_to) == ("2024-02-10", "2024-03-31")
    assert board.detailed_transactions_view.total_quantity == 55

    tx_path = board.export_transactions_csv(tmp_path / "exports")
    assert tx_path is not None
    assert tx_path.read_text(encoding="utf-8").count("\n") == 2

    board.handle_escape_key()
    board.handle_escape_key()
    assert board.selected_material is None

    inv_path = board.export_inventory_csv(tmp_path / "exports")
    assert inv_path is not None and inv_path.name == "inventory_export_2024-03-31.csv"
    assert inv_path.read_text(encoding="utf-8").splitlines()[1:] == [
        '"B-100","Hex bolt M8",100,55,45,"EA"',
        '"N-200","Nut M8",8,0,8,"EA"',
    ]

    assert board.toggle_theme() == "dark"
