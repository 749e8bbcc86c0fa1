"""Inventory data sources: the remote JSON endpoint and local export files.

``fetch_inventory`` issues a single non-streaming GET and validates the body
as an :class:`~inventory_dashboard.models.InventoryResponse`. There is no
retry and no backoff; a timeout applies only when the caller passes one. Any
transport, HTTP, decoding or shape failure becomes a :class:`FetchError`
carrying a generic user-facing message, with the cause chained.
"""

from __future__ import annotations

import csv
import json
import urllib.error
import urllib.request
from os import PathLike
from pathlib import Path

from pydantic import ValidationError

from .errors import FetchError
from .logging_setup import get_logger
from .models import InventoryResponse

_logger = get_logger("inventory_dashboard.source")


def fetch_inventory(url: str, *, timeout: float | None = None) -> InventoryResponse:
    """GET ``url`` and return the validated header/row table."""

    req = urllib.request.Request(url, method="GET")
    req.add_header("Accept", "application/json")
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            body = resp.read()
    except urllib.error.HTTPError as e:
        _logger.error("Error fetching inventory data: HTTP %s %s", e.code, e.reason)
        raise FetchError() from e
    except (urllib.error.URLError, OSError) as e:
        _logger.error("Error fetching inventory data: %s", e)
        raise FetchError() from e

    try:
        return InventoryResponse.model_validate(json.loads(body.decode("utf-8")))
    except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        _logger.error("Unexpected inventory payload from %s: %s", url, e)
        raise FetchError() from e


def load_inventory_file(path: str | PathLike[str]) -> InventoryResponse:
    """Read a local export: a ``.json`` payload or a ``.csv`` with a header row."""

    p = Path(path)
    try:
        if p.suffix.lower() == ".json":
            return InventoryResponse.model_validate_json(p.read_bytes())
        with p.open(encoding="utf-8-sig", newline="") as f:
            reader = csv.reader(f)
            headers = next(reader, None)
            if headers is None:
                raise csv.Error(f"CSV appears to have no header row: {p}")
            rows = [row for row in reader if any(cell.strip() for cell in row)]
    except (OSError, UnicodeDecodeError, csv.Error, ValidationError) as e:
        _logger.error("Error reading inventory file %s: %s", p, e)
        raise FetchError(f"Failed to read inventory file: {p}") from e
    return InventoryResponse(headers=headers, rows=rows)


def load_inventory(source: str, *, timeout: float | None = None) -> InventoryResponse:
    """Dispatch on ``source``: ``http(s)://`` URLs are fetched, anything else is a path."""

    if source.startswith(("http://", "https://")):
        return fetch_inventory(source, timeout=timeout)
    return load_inventory_file(source)


__all__ = ["fetch_inventory", "load_inventory", "load_inventory_file"]
