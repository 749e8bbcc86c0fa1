"""Derived views over the aggregated inventory.

Every function here is pure: it takes the current summaries plus the current
filter/sort/page state and returns a fresh sequence. Nothing is patched
incrementally; callers simply recompute when any input changes.

Pipeline for the inventory table::

    filter_inventory -> sort_inventory -> paginate

Per-material projections::

    item_dashboard               merged in/out history with dashboard filters
    detailed_transactions_view   one direction, bounded by an inclusive date range
"""

from __future__ import annotations

import locale
import math
import unicodedata
from collections.abc import Iterable, Sequence
from datetime import date

from .dates import format_medium_date, parse_date_bound
from .models import (
    ISSUE_MOVEMENT,
    RECEIPT_MOVEMENT,
    DashboardFilters,
    DashboardTransaction,
    DetailedTransactionsView,
    Direction,
    ItemDashboard,
    MaterialSummary,
    MovementFilter,
    SortConfig,
    Transaction,
)

PAGE_SIZE = 12
LOW_STOCK_THRESHOLD = 10

DETAIL_TITLES: dict[str, str] = {"in": "Receipt Details", "out": "Issue Details"}


# ---------------------------------------------------------------------------
# Inventory table: filter -> sort -> paginate
# ---------------------------------------------------------------------------


def filter_inventory(
    items: Iterable[MaterialSummary],
    *,
    search_term: str = "",
    movement_filter: MovementFilter = "all",
    low_stock_only: bool = False,
    low_stock_threshold: float = LOW_STOCK_THRESHOLD,
) -> list[MaterialSummary]:
    """Apply the low-stock, movement-type and search predicates (ANDed).

    - ``low_stock_only`` keeps balances at or below ``low_stock_threshold``.
    - ``movement_filter`` ``"101"`` keeps items with receipts, ``"201"`` items
      with issues; ``"all"`` keeps everything.
    - ``search_term`` is a case-insensitive substring match on the material
      id or its description.
    """

    filtered = list(items)
    if low_stock_only:
        filtered = [item for item in filtered if item.balance <= low_stock_threshold]

    if movement_filter == RECEIPT_MOVEMENT:
        filtered = [item for item in filtered if item.total_in > 0]
    elif movement_filter == ISSUE_MOVEMENT:
        filtered = [item for item in filtered if item.total_out > 0]

    term = search_term.lower()
    if not term:
        return filtered
    return [
        item
        for item in filtered
        if term in item.material.lower() or term in item.material_description.lower()
    ]


def _base_letters(value: str) -> str:
    # "Écrou" -> "ecrou": accents and case only break ties.
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def _text_key(value: str) -> tuple[str, str, str]:
    return (
        locale.strxfrm(_base_letters(value)),
        locale.strxfrm(value.casefold()),
        locale.strxfrm(value),
    )


def sort_inventory(items: Iterable[MaterialSummary], sort: SortConfig) -> list[MaterialSummary]:
    """Stable sort by ``sort.column`` in ``sort.direction``.

    Descriptions compare on their base letters first (ignoring accents and
    case), then with the active locale's collation; balances compare
    numerically. Equal keys keep their incoming order in both directions.
    """

    reverse = sort.direction == "desc"
    if sort.column == "balance":
        return sorted(items, key=lambda item: item.balance, reverse=reverse)
    return sorted(items, key=lambda item: _text_key(item.material_description), reverse=reverse)


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    return math.ceil(count / page_size)


def paginate(
    items: Sequence[MaterialSummary], page: int, page_size: int = PAGE_SIZE
) -> list[MaterialSummary]:
    """Return the 1-indexed ``page`` of ``items``; pages past the end are empty."""

    start = (page - 1) * page_size
    if start < 0:
        return []
    return list(items[start : start + page_size])


# ---------------------------------------------------------------------------
# Per-material dashboard
# ---------------------------------------------------------------------------


def _newest_first_key(tx: DashboardTransaction) -> tuple[bool, date]:
    posted_on = tx.transaction.posted_on
    return (posted_on is not None, posted_on or date.min)


def merge_transactions(material: MaterialSummary) -> tuple[DashboardTransaction, ...]:
    """Merge receipts and issues into one newest-first history.

    On equal dates receipts come before issues, each in their own order.
    """

    merged = [DashboardTransaction(tx, "in") for tx in material.in_transactions]
    merged.extend(DashboardTransaction(tx, "out") for tx in material.out_transactions)
    return tuple(sorted(merged, key=_newest_first_key, reverse=True))


def _contains(haystack: str, needle: str) -> bool:
    return needle in (haystack or "").lower()


def _display_date(tx: Transaction) -> str:
    if tx.posted_on is None:
        return tx.posting_date
    return format_medium_date(tx.posted_on)


def filter_dashboard_transactions(
    transactions: Iterable[DashboardTransaction], filters: DashboardFilters
) -> tuple[DashboardTransaction, ...]:
    """Apply the dashboard filters; all are ANDed.

    ``movement`` is an exact direction match (``"all"`` disables it). The
    others are case-insensitive substring matches: ``date`` against the
    medium-formatted posting date, ``user``, ``cost_center``, and ``details``
    against header text, text, document or reservation.
    """

    result = list(transactions)
    if filters.movement != "all":
        result = [tx for tx in result if tx.direction == filters.movement]

    f_date = filters.date.lower()
    if f_date:
        result = [tx for tx in result if _contains(_display_date(tx.transaction), f_date)]

    f_user = filters.user.lower()
    if f_user:
        result = [tx for tx in result if _contains(tx.transaction.user, f_user)]

    f_cost_center = filters.cost_center.lower()
    if f_cost_center:
        result = [tx for tx in result if _contains(tx.transaction.cost_center, f_cost_center)]

    f_details = filters.details.lower()
    if f_details:
        result = [
            tx
            for tx in result
            if _contains(tx.transaction.header_text, f_details)
            or _contains(tx.transaction.text, f_details)
            or _contains(tx.transaction.document, f_details)
            or _contains(tx.transaction.reservation, f_details)
        ]
    return tuple(result)


def item_dashboard(
    material: MaterialSummary | None, filters: DashboardFilters | None = None
) -> ItemDashboard | None:
    if material is None:
        return None
    merged = merge_transactions(material)
    return ItemDashboard(
        material=material,
        all_transactions=filter_dashboard_transactions(merged, filters or DashboardFilters()),
    )


# ---------------------------------------------------------------------------
# Bounded date-range view
# ---------------------------------------------------------------------------


def detailed_transactions_view(
    material: MaterialSummary | None,
    direction: Direction | None,
    date_from: str | date | None = None,
    date_to: str | date | None = None,
) -> DetailedTransactionsView | None:
    """Transactions of one direction within ``[date_from, date_to]``.

    Both bounds are inclusive whole days and either may be open (``None`` or
    ``""``). With a bound set, transactions whose date did not parse are
    excluded rather than kept, so a bounded range never lists a transaction
    it cannot place. ``total_quantity`` sums the filtered quantities.
    """

    if material is None or direction is None:
        return None

    start = parse_date_bound(date_from)
    end = parse_date_bound(date_to)

    def in_range(tx: Transaction) -> bool:
        if start is None and end is None:
            return True
        if tx.posted_on is None:
            return False
        if start is not None and tx.posted_on < start:
            return False
        return not (end is not None and tx.posted_on > end)

    transactions = tuple(tx for tx in material.transactions(direction) if in_range(tx))
    return DetailedTransactionsView(
        direction=direction,
        title=DETAIL_TITLES[direction],
        transactions=transactions,
        total_quantity=sum(tx.quantity for tx in transactions),
    )


def default_date_range(
    material: MaterialSummary, direction: Direction, today: date | None = None
) -> tuple[date | None, date] | None:
    """Initial range for the detailed view: ``[oldest transaction, today]``.

    Relies on the aggregator's newest-first ordering: the oldest dated entry
    is the last one that has a date. Returns ``None`` when the direction has
    no transactions; the lower bound is open when none of them is dated.
    """

    transactions = material.transactions(direction)
    if not transactions:
        return None
    oldest = next(
        (tx.posted_on for tx in reversed(transactions) if tx.posted_on is not None), None
    )
    return oldest, today or date.today()


__all__ = [
    "DETAIL_TITLES",
    "LOW_STOCK_THRESHOLD",
    "PAGE_SIZE",
    "default_date_range",
    "detailed_transactions_view",
    "filter_dashboard_transactions",
    "filter_inventory",
    "item_dashboard",
    "merge_transactions",
    "paginate",
    "sort_inventory",
    "total_pages",
]
