from datetime import date

import pytest

from inventory_dashboard.aggregate import (
    NO_DESCRIPTION,
    NO_UNIT,
    aggregate_inventory,
    inventory_stats,
    parse_quantity,
    process_inventory,
)
from inventory_dashboard.errors import SchemaError

from tests.helpers.tables import HEADERS, REQUIRED_ONLY, row, table


def test_bolt_example_drops_malformed_row():
    data = table(
        [["M1", "Bolt", 10, "EA", "101"], ["M1", "Bolt", 4, "EA", "201"], ["M1", "Bolt", "x", "EA", "101"]],
        headers=REQUIRED_ONLY,
    )

    summaries = aggregate_inventory(data)

    assert list(summaries) == ["M1"]
    m1 = summaries["M1"]
    assert m1.total_in == 10
    assert m1.total_out == 4
    assert m1.balance == 6
    assert [tx.quantity for tx in m1.in_transactions] == [10]
    assert [tx.quantity for tx in m1.out_transactions] == [4]
    assert m1.unit == "EA"
    assert m1.material_description == "Bolt"


def test_missing_required_column_aborts_aggregation():
    headers = [h for h in HEADERS if h != "Quantity"]

    with pytest.raises(SchemaError):
        aggregate_inventory(table([["M1", "Bolt", "EA", "101"]], headers=headers))


@pytest.mark.parametrize(
    "bad_row",
    [
        row("M1", "Bolt", 5, movement="261"),
        row("M1", "Bolt", 5, movement=""),
        row("M1", "Bolt", 5, movement=None),
        row("", "Bolt", 5),
        row(None, "Bolt", 5),
        row("M1", "Bolt", "abc"),
        row("M1", "Bolt", None),
        row("M1", "Bolt", "NaN"),
        row("M1", "Bolt", float("inf")),
    ],
)
def test_invalid_rows_never_reach_a_summary(bad_row):
    summaries = aggregate_inventory(table([bad_row, row("M2", "Nut", 1)]))

    assert list(summaries) == ["M2"]


def test_movement_type_is_trimmed_and_numeric_cells_accepted():
    summaries = aggregate_inventory(
        table([row("M1", "Bolt", 3, movement=" 101 "), row("M1", "Bolt", "2", movement=201)])
    )

    assert summaries["M1"].total_in == 3
    assert summaries["M1"].total_out == 2


def test_asymmetric_normalization_of_signed_quantities():
    summaries = aggregate_inventory(
        table([row("M1", "Bolt", -3, movement="101"), row("M1", "Bolt", -7, movement="201")])
    )
    m1 = summaries["M1"]

    # Receipts add the raw quantity; issues add the absolute value.
    assert m1.total_in == -3
    assert m1.total_out == 7
    assert m1.balance == -10
    assert m1.in_transactions[0].quantity == 3
    assert m1.out_transactions[0].quantity == 7


def test_empty_quantity_string_counts_as_zero():
    summaries = aggregate_inventory(table([row("M1", "Bolt", "  ")]))

    assert summaries["M1"].total_in == 0
    assert len(summaries["M1"].in_transactions) == 1


def test_first_seen_description_and_unit_win():
    summaries = aggregate_inventory(
        table(
            [
                row("M1", "", 1, unit=""),
                row("M1", "Hex bolt", 1, unit="PC"),
                row("M1", "Other text", 1, unit="KG"),
            ]
        )
    )
    m1 = summaries["M1"]

    assert m1.material_description == "Hex bolt"
    assert m1.unit == NO_UNIT


def test_placeholder_description_when_never_present():
    summaries = aggregate_inventory(table([row("M1", None, 1, unit=None)]))

    assert summaries["M1"].material_description == NO_DESCRIPTION
    assert summaries["M1"].unit == NO_UNIT


def test_summaries_keep_first_appearance_order():
    rows = [row("B", "b", 1), row("A", "a", 1), row("C", "c", 1), row("B", "b", 1)]

    assert [s.material for s in process_inventory(table(rows))] == ["B", "A", "C"]


def test_transactions_sorted_newest_first_with_stable_ties():
    rows = [
        row("M1", "Bolt", 1, date="2024-01-05", document="a"),
        row("M1", "Bolt", 2, date="2024-03-01", document="b"),
        row("M1", "Bolt", 3, date="2024-01-05", document="c"),
        row("M1", "Bolt", 4, date="not a date", document="d"),
        row("M1", "Bolt", 5, date="02/10/2024", document="e"),
    ]

    m1 = aggregate_inventory(table(rows))["M1"]

    assert [tx.document for tx in m1.in_transactions] == ["b", "e", "a", "c", "d"]
    assert m1.in_transactions[1].posted_on == date(2024, 2, 10)
    assert m1.in_transactions[-1].posted_on is None


def test_transaction_fields_and_cost_center_resolution():
    rows = [
        row(
            "M1",
            "Bolt",
            -4,
            movement="201",
            user="jdoe",
            date="2024-05-02T08:30:00Z",
            cost_center=" 4100 ",
            reservation=991,
            document="4900001",
            header_text="Line 3",
            text="Weekly issue",
        ),
        row("M1", "Bolt", 1, movement="201", cost_center="9999"),
    ]

    m1 = aggregate_inventory(table(rows), cost_centers={"4100": "Maintenance"})["M1"]
    first, second = m1.out_transactions

    assert first.posting_date == "2024-05-02T08:30:00Z"
    assert first.posted_on == date(2024, 5, 2)
    assert first.quantity == 4
    assert first.user == "jdoe"
    assert first.cost_center == "Maintenance"
    assert first.reservation == "991"
    assert first.document == "4900001"
    assert first.header_text == "Line 3"
    assert first.text == "Weekly issue"
    # Unmapped codes pass through unchanged.
    assert second.cost_center == "9999"


def test_balance_and_partition_invariants_hold_for_every_material():
    rows = [
        row("M1", "Bolt", 10, movement="101"),
        row("M2", "Nut", 3, movement="201"),
        row("M1", "Bolt", 2.5, movement="201"),
        row("M2", "Nut", 8, movement="101"),
        row("M1", "Bolt", 1, movement="311"),
        row("M3", "Washer", 0, movement="101"),
    ]
    valid_counts = {"M1": 2, "M2": 2, "M3": 1}

    for summary in process_inventory(table(rows)):
        assert summary.balance == summary.total_in - summary.total_out
        assert summary.total_in >= 0 and summary.total_out >= 0
        assert len(summary.in_transactions) + len(summary.out_transactions) == valid_counts[
            summary.material
        ]


def test_inventory_stats_totals():
    items = process_inventory(
        table([row("M1", "Bolt", 10), row("M1", "Bolt", 4, movement="201"), row("M2", "Nut", 6)])
    )

    stats = inventory_stats(items)

    assert stats.total_items == 2
    assert stats.total_received == 16
    assert stats.total_issued == 4


@pytest.mark.parametrize(
    ("value", "expected"),
    [(7, 7.0), ("  12.5 ", 12.5), ("", 0.0), ("1_000", None), ("x", None), (True, None), (None, None)],
)
def test_parse_quantity(value, expected):
    assert parse_quantity(value) == expected
