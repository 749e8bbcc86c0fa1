"""Column resolution for the inbound header/row table.

All name-based ("stringly typed") access to source rows goes through
:class:`ColumnIndex`. It is resolved once per load from the header row; the
aggregator then reads cells positionally.

Required columns (exact, case-sensitive):
    Material, Material Description, Quantity, Unit of Entry, Movement Type

Optional columns resolve to ``-1`` when absent and read as ``""``:
    User Name, Posting Date, Cost Center, Reservation, Material Document,
    Document Header Text, Text
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from .errors import SchemaError
from .models import Cell

REQUIRED_COLUMNS: tuple[str, ...] = (
    "Material",
    "Material Description",
    "Quantity",
    "Unit of Entry",
    "Movement Type",
)

OPTIONAL_COLUMNS: tuple[str, ...] = (
    "User Name",
    "Posting Date",
    "Cost Center",
    "Reservation",
    "Material Document",
    "Document Header Text",
    "Text",
)

MISSING = -1


def cell_text(value: Cell) -> str:
    """Render a raw cell as text: ``None`` is empty, integral floats drop ``.0``."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True, slots=True)
class ColumnIndex:
    """Positional layout of one source table."""

    material: int
    material_description: int
    quantity: int
    unit: int
    movement_type: int
    user: int = MISSING
    posting_date: int = MISSING
    cost_center: int = MISSING
    reservation: int = MISSING
    document: int = MISSING
    header_text: int = MISSING
    text: int = MISSING

    @staticmethod
    def cell(row: Sequence[Cell], index: int) -> Cell:
        """Return the cell at ``index``; absent columns and short rows give ``None``."""

        if index < 0 or index >= len(row):
            return None
        return row[index]

    def text_at(self, row: Sequence[Cell], index: int) -> str:
        return cell_text(self.cell(row, index))


def resolve_columns(headers: Sequence[str]) -> ColumnIndex:
    """Locate every required and optional column in ``headers``.

    Raises :class:`SchemaError` listing the required columns when any is
    absent; no partial layout is ever returned. When a header repeats, the
    first occurrence wins.
    """

    positions: dict[str, int] = {}
    for i, name in enumerate(headers):
        positions.setdefault(name, i)

    missing = [name for name in REQUIRED_COLUMNS if name not in positions]
    if missing:
        raise SchemaError(missing, REQUIRED_COLUMNS)

    def opt(name: str) -> int:
        return positions.get(name, MISSING)

    return ColumnIndex(
        material=positions["Material"],
        material_description=positions["Material Description"],
        quantity=positions["Quantity"],
        unit=positions["Unit of Entry"],
        movement_type=positions["Movement Type"],
        user=opt("User Name"),
        posting_date=opt("Posting Date"),
        cost_center=opt("Cost Center"),
        reservation=opt("Reservation"),
        document=opt("Material Document"),
        header_text=opt("Document Header Text"),
        text=opt("Text"),
    )


__all__ = ["OPTIONAL_COLUMNS", "REQUIRED_COLUMNS", "ColumnIndex", "cell_text", "resolve_columns"]
