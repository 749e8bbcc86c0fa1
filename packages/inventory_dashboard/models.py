"""Data models and type aliases for ``inventory_dashboard``.

The inbound payload (``InventoryResponse``) is validated with pydantic at the
fetch boundary. Everything produced after that point is a frozen dataclass:
the aggregator builds ``MaterialSummary`` records once per load and the view
pipeline only ever derives new sequences from them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Literal, TypeAlias

from pydantic import BaseModel, ConfigDict

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

Cell: TypeAlias = str | int | float | bool | None
"""A raw table cell as delivered by the source (JSON string, number or null)."""

Direction: TypeAlias = Literal["in", "out"]
"""Movement direction: ``in`` for receipts (101), ``out`` for issues (201)."""

MovementFilter: TypeAlias = Literal["all", "101", "201"]
DashboardMovement: TypeAlias = Literal["all", "in", "out"]
SortColumn: TypeAlias = Literal["material_description", "balance"]
SortDirection: TypeAlias = Literal["asc", "desc"]
Theme: TypeAlias = Literal["light", "dark"]

RECEIPT_MOVEMENT = "101"
ISSUE_MOVEMENT = "201"
ALLOWED_MOVEMENTS = frozenset({RECEIPT_MOVEMENT, ISSUE_MOVEMENT})
SORT_COLUMNS: tuple[str, ...] = ("material_description", "balance")


# ---------------------------------------------------------------------------
# Inbound payload
# ---------------------------------------------------------------------------


class InventoryResponse(BaseModel):
    """The header/row table returned by the data source.

    No invariant beyond positional correspondence between a row's cells and
    ``headers``. Rows may be short, and cells may hold anything JSON allows
    for a scalar.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    headers: list[str]
    rows: list[list[str | int | float | bool | None]]


# ---------------------------------------------------------------------------
# Aggregated records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Transaction:
    """One movement event for a material.

    ``posting_date`` is the raw source string (used for display and export);
    ``posted_on`` is its parsed calendar value, or ``None`` when it did not parse.
    ``quantity`` is always the absolute value of the source quantity.
    """

    posting_date: str
    posted_on: date | None
    quantity: float
    user: str = ""
    cost_center: str = ""
    reservation: str = ""
    document: str = ""
    header_text: str = ""
    text: str = ""


@dataclass(frozen=True, slots=True)
class DashboardTransaction:
    """A transaction tagged with its direction for the merged item dashboard."""

    transaction: Transaction
    direction: Direction


@dataclass(frozen=True, slots=True)
class MaterialSummary:
    """Running totals and movement history for a single material.

    ``balance`` always equals ``total_in - total_out``; both transaction
    tuples are ordered newest first.
    """

    material: str
    material_description: str
    total_in: float
    total_out: float
    balance: float
    unit: str
    in_transactions: tuple[Transaction, ...] = ()
    out_transactions: tuple[Transaction, ...] = ()

    def transactions(self, direction: Direction) -> tuple[Transaction, ...]:
        return self.in_transactions if direction == "in" else self.out_transactions


@dataclass(frozen=True, slots=True)
class InventoryStats:
    total_items: int
    total_received: float
    total_issued: float


# ---------------------------------------------------------------------------
# View state and projections
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SortConfig:
    column: SortColumn = "material_description"
    direction: SortDirection = "asc"

    @classmethod
    def parse(cls, value: str) -> SortConfig:
        """Parse ``"<column>-<direction>"`` (e.g. ``"balance-desc"``)."""

        column, sep, direction = value.strip().rpartition("-")
        if not sep or column not in SORT_COLUMNS or direction not in ("asc", "desc"):
            raise ValueError(
                f"invalid sort {value!r}; expected <{'|'.join(SORT_COLUMNS)}>-<asc|desc>"
            )
        return cls(column=column, direction=direction)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class DashboardFilters:
    """Per-material dashboard filters; all but ``movement`` are substrings."""

    date: str = ""
    movement: DashboardMovement = "all"
    user: str = ""
    cost_center: str = ""
    details: str = ""


@dataclass(frozen=True, slots=True)
class ItemDashboard:
    material: MaterialSummary
    all_transactions: tuple[DashboardTransaction, ...] = ()


@dataclass(frozen=True, slots=True)
class DetailedTransactionsView:
    direction: Direction
    title: str
    transactions: tuple[Transaction, ...]
    total_quantity: float


__all__ = [
    "ALLOWED_MOVEMENTS",
    "ISSUE_MOVEMENT",
    "RECEIPT_MOVEMENT",
    "SORT_COLUMNS",
    "Cell",
    "DashboardFilters",
    "DashboardMovement",
    "DashboardTransaction",
    "DetailedTransactionsView",
    "Direction",
    "InventoryResponse",
    "InventoryStats",
    "ItemDashboard",
    "MaterialSummary",
    "MovementFilter",
    "SortColumn",
    "SortConfig",
    "SortDirection",
    "Theme",
    "Transaction",
]
