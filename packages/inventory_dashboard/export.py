r'''CSV serialization of inventory and transaction views.

Output format
-------------
- A bare header row, then one line per record; lines join with ``\n`` and
  there is no trailing newline.
- Text fields are always double-quoted with internal quotes doubled
  (``He said "hi"`` -> ``"He said ""hi"""``). Numeric fields are unquoted,
  and integral values are written without a decimal point.
- Issue (outbound) quantities are negated in transaction exports so that
  receipts and issues read with consistent sign semantics.

An empty view produces no CSV text (``None``) and therefore no file.
'''

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence
from datetime import date
from os import PathLike
from pathlib import Path

from .logging_setup import get_logger
from .models import Direction, MaterialSummary, Transaction

INVENTORY_HEADERS: tuple[str, ...] = (
    "Material",
    "MaterialDescription",
    "TotalIn",
    "TotalOut",
    "Balance",
    "Unit",
)
TRANSACTION_HEADERS: tuple[str, ...] = (
    "PostingDate",
    "Quantity",
    "User",
    "CostCenter",
    "Document",
    "Reservation",
    "HeaderText",
    "Text",
)

_logger = get_logger("inventory_dashboard.export")


def _number(value: float) -> int | float:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _to_csv(headers: Sequence[str], records: Iterable[Sequence[str | int | float]]) -> str:
    buf = io.StringIO()
    buf.write(",".join(headers) + "\n")
    writer = csv.writer(buf, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerows(records)
    # Every line ends with the terminator; records are joined, not terminated.
    return buf.getvalue()[:-1]


def inventory_to_csv(items: Sequence[MaterialSummary]) -> str | None:
    """Serialize inventory summaries; ``None`` when ``items`` is empty."""

    if not items:
        return None
    return _to_csv(
        INVENTORY_HEADERS,
        (
            (
                item.material,
                item.material_description,
                _number(item.total_in),
                _number(item.total_out),
                _number(item.balance),
                item.unit,
            )
            for item in items
        ),
    )


def transactions_to_csv(transactions: Sequence[Transaction], direction: Direction) -> str | None:
    """Serialize one direction's transactions; ``None`` when there are none."""

    if not transactions:
        return None
    sign = 1 if direction == "in" else -1
    return _to_csv(
        TRANSACTION_HEADERS,
        (
            (
                tx.posting_date,
                _number(sign * tx.quantity),
                tx.user,
                tx.cost_center,
                tx.document,
                tx.reservation,
                tx.header_text,
                tx.text,
            )
            for tx in transactions
        ),
    )


def inventory_export_filename(today: date | None = None) -> str:
    return f"inventory_export_{(today or date.today()).isoformat()}.csv"


def transactions_export_filename(material: str | None, direction: Direction) -> str:
    return f"{material or 'export'}_{direction}_transactions.csv"


def write_export(
    directory: str | PathLike[str], filename: str, csv_text: str | None
) -> Path | None:
    """Write ``csv_text`` to ``directory/filename`` as UTF-8.

    Returns the written path, or ``None`` (writing nothing) when there is no
    CSV text to export.
    """

    if csv_text is None:
        _logger.info("Nothing to export for %s", filename)
        return None
    path = Path(directory) / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(csv_text)
    _logger.info("Exported %s", path)
    return path


__all__ = [
    "INVENTORY_HEADERS",
    "TRANSACTION_HEADERS",
    "inventory_export_filename",
    "inventory_to_csv",
    "transactions_export_filename",
    "transactions_to_csv",
    "write_export",
]
