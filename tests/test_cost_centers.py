import json
from pathlib import Path

import pytest

from inventory_dashboard.aggregate import process_inventory
from inventory_dashboard.cost_centers import load_cost_centers, resolve_cost_center

from tests.helpers.tables import COST_CENTERS_CSV, row, table


def test_load_csv_skips_header_row():
    assert load_cost_centers(COST_CENTERS_CSV) == {"4100": "Maintenance", "4200": "Production"}


def test_load_json_trims_codes_and_names(tmp_path: Path):
    path = tmp_path / "centers.json"
    path.write_text(json.dumps({" 4100 ": " Maintenance ", "4300": 7, "": "blank"}), encoding="utf-8")

    assert load_cost_centers(path) == {"4100": "Maintenance", "4300": "7"}


@pytest.mark.parametrize("content", ['["4100", "Maintenance"]', '{"4100": {"name": "x"}}'])
def test_load_json_rejects_non_string_tables(tmp_path: Path, content):
    path = tmp_path / "centers.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ValueError):
        load_cost_centers(path)


def test_load_csv_ignores_short_and_blank_rows(tmp_path: Path):
    path = tmp_path / "centers.csv"
    path.write_text("code,name\n4100,Maintenance\n4200\n,Nobody\n\n", encoding="utf-8")

    assert load_cost_centers(path) == {"4100": "Maintenance"}


def test_resolve_cost_center_maps_known_codes_and_passes_through_others():
    table_ = {"4100": "Maintenance"}

    assert resolve_cost_center("4100", table_) == "Maintenance"
    assert resolve_cost_center(" 4100 ", table_) == "Maintenance"
    assert resolve_cost_center("9999", table_) == "9999"
    assert resolve_cost_center("", table_) == ""


def test_aggregation_resolves_cost_centers_on_transactions():
    data = table(
        [
            row("M1", "Bolt", 5, cost_center="4100"),
            row("M1", "Bolt", 2, movement="201", cost_center="7777"),
        ]
    )

    (item,) = process_inventory(data, {"4100": "Maintenance"})

    assert item.in_transactions[0].cost_center == "Maintenance"
    assert item.out_transactions[0].cost_center == "7777"
