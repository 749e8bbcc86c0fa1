"""Cost-center code → display-name lookup table.

The table is static configuration injected into the aggregator; nothing in
this package hardcodes codes. It loads from either a JSON object
(``{"4100": "Maintenance", ...}``) or a CSV file whose first two columns are
the code and the name (a header row is expected and skipped).
"""

from __future__ import annotations

import csv
import json
from collections.abc import Mapping
from os import PathLike
from pathlib import Path
from typing import TypeAlias

from .logging_setup import get_logger

CostCenterMap: TypeAlias = Mapping[str, str]

_logger = get_logger("inventory_dashboard.cost_centers")


def resolve_cost_center(code: str, table: CostCenterMap) -> str:
    """Return the display name for ``code``; unmapped codes pass through unchanged."""

    return table.get(code.strip()) or code


def load_cost_centers(path: str | PathLike[str]) -> dict[str, str]:
    """Load a cost-center table from a ``.json`` or ``.csv`` file.

    Codes and names are trimmed; rows with an empty code are ignored. Raises
    ``ValueError`` when a JSON file is not an object of strings.
    """

    p = Path(path)
    if p.suffix.lower() == ".json":
        with p.open(encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"cost-center table must be a JSON object: {p}")
        table: dict[str, str] = {}
        for code, name in data.items():
            if not isinstance(name, str | int):
                raise ValueError(f"cost-center name for {code!r} must be a string")
            table[str(code).strip()] = str(name).strip()
    else:
        with p.open(encoding="utf-8", newline="") as f:
            reader = csv.reader(f)
            next(reader, None)
            table = {
                row[0].strip(): row[1].strip()
                for row in reader
                if len(row) >= 2 and row[0].strip()
            }

    table.pop("", None)
    _logger.debug("Loaded %d cost centers from %s", len(table), p)
    return table


__all__ = ["CostCenterMap", "load_cost_centers", "resolve_cost_center"]
