"""Fold a validated source table into per-material summaries.

Row admission
-------------
A row is valid iff its trimmed Movement Type is ``"101"`` (receipt) or
``"201"`` (issue), its Material cell is non-empty, and its Quantity parses to
a finite number. Every other row is dropped without error.

Accumulation
------------
- Stored transaction quantities are ``abs(quantity)``.
- ``total_in`` adds the raw quantity for 101 rows; ``total_out`` adds
  ``abs(quantity)`` for 201 rows. Source sign conventions are unknown, so the
  two totals intentionally normalize differently.
- The description is the first non-empty one seen for the material (else
  ``"No Description"``); the unit comes from the material's first valid row
  (else ``"N/A"``).
- ``balance`` is computed once after all rows are folded, and each
  transaction list is stably sorted newest first (undated entries last).

The returned mapping iterates in order of first appearance of each material.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date

from .cost_centers import CostCenterMap, resolve_cost_center
from .dates import parse_posting_date
from .logging_setup import get_logger
from .models import (
    ALLOWED_MOVEMENTS,
    RECEIPT_MOVEMENT,
    Cell,
    InventoryResponse,
    InventoryStats,
    MaterialSummary,
    Transaction,
)
from .schema import ColumnIndex, cell_text, resolve_columns

NO_DESCRIPTION = "No Description"
NO_UNIT = "N/A"

_logger = get_logger("inventory_dashboard.aggregate")


@dataclass(slots=True)
class _Running:
    description: str
    unit: str
    total_in: float = 0.0
    total_out: float = 0.0
    in_transactions: list[Transaction] = field(default_factory=list)
    out_transactions: list[Transaction] = field(default_factory=list)


def parse_quantity(value: Cell) -> float | None:
    """Parse a Quantity cell; ``None`` marks the row as malformed.

    Numbers pass through. Strings are trimmed, with the empty string reading
    as ``0``. Booleans, blanks from missing cells and non-finite values are
    rejected.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    else:
        s = value.strip()
        if not s:
            return 0.0
        if "_" in s:
            return None
        try:
            number = float(s)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def movement_type(value: Cell) -> str:
    if value is None or isinstance(value, bool):
        return ""
    return cell_text(value).strip()


def _newest_first(transactions: Iterable[Transaction]) -> tuple[Transaction, ...]:
    def key(tx: Transaction) -> tuple[bool, date]:
        return (tx.posted_on is not None, tx.posted_on or date.min)

    # reverse=True keeps equal keys in input order.
    return tuple(sorted(transactions, key=key, reverse=True))


def _build_transaction(
    row: Sequence[Cell], cols: ColumnIndex, quantity: float, cost_centers: CostCenterMap
) -> Transaction:
    posting_date = cols.text_at(row, cols.posting_date)
    return Transaction(
        posting_date=posting_date,
        posted_on=parse_posting_date(posting_date),
        quantity=abs(quantity),
        user=cols.text_at(row, cols.user),
        cost_center=resolve_cost_center(cols.text_at(row, cols.cost_center), cost_centers),
        reservation=cols.text_at(row, cols.reservation),
        document=cols.text_at(row, cols.document),
        header_text=cols.text_at(row, cols.header_text),
        text=cols.text_at(row, cols.text),
    )


def aggregate_inventory(
    table: InventoryResponse, cost_centers: CostCenterMap | None = None
) -> dict[str, MaterialSummary]:
    """Aggregate ``table`` into a ``material -> MaterialSummary`` mapping.

    Raises :class:`~inventory_dashboard.errors.SchemaError` when a required
    column is missing; in that case nothing is aggregated.
    """

    cols = resolve_columns(table.headers)
    centers: CostCenterMap = cost_centers or {}
    running: dict[str, _Running] = {}
    skipped = 0

    for row in table.rows:
        movement = movement_type(cols.cell(row, cols.movement_type))
        if movement not in ALLOWED_MOVEMENTS:
            skipped += 1
            continue
        material = cols.text_at(row, cols.material)
        quantity = parse_quantity(cols.cell(row, cols.quantity))
        if not material or quantity is None:
            skipped += 1
            continue

        description = cols.text_at(row, cols.material_description)
        current = running.get(material)
        if current is None:
            current = running[material] = _Running(
                description=description,
                unit=cols.text_at(row, cols.unit) or NO_UNIT,
            )
        elif not current.description:
            current.description = description

        tx = _build_transaction(row, cols, quantity, centers)
        if movement == RECEIPT_MOVEMENT:
            current.total_in += quantity
            current.in_transactions.append(tx)
        else:
            current.total_out += abs(quantity)
            current.out_transactions.append(tx)

    summaries = {
        material: MaterialSummary(
            material=material,
            material_description=acc.description or NO_DESCRIPTION,
            total_in=acc.total_in,
            total_out=acc.total_out,
            balance=acc.total_in - acc.total_out,
            unit=acc.unit,
            in_transactions=_newest_first(acc.in_transactions),
            out_transactions=_newest_first(acc.out_transactions),
        )
        for material, acc in running.items()
    }
    _logger.info(
        "Aggregated %d materials from %d rows (%d skipped)",
        len(summaries),
        len(table.rows),
        skipped,
    )
    return summaries


def process_inventory(
    table: InventoryResponse, cost_centers: CostCenterMap | None = None
) -> list[MaterialSummary]:
    """Aggregate ``table`` and return the summaries in first-appearance order."""

    return list(aggregate_inventory(table, cost_centers).values())


def inventory_stats(items: Iterable[MaterialSummary]) -> InventoryStats:
    """Header statistics over the whole (unfiltered) collection."""

    total_items = 0
    total_received = 0.0
    total_issued = 0.0
    for item in items:
        total_items += 1
        total_received += item.total_in
        total_issued += item.total_out
    return InventoryStats(total_items, total_received, total_issued)


__all__ = [
    "NO_DESCRIPTION",
    "NO_UNIT",
    "aggregate_inventory",
    "inventory_stats",
    "parse_quantity",
    "process_inventory",
]
