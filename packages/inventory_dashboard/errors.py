"""Exceptions raised while loading inventory data.

Only two failure kinds are surfaced to users. Per-row malformation in the
source table is not an error: the aggregator drops such rows silently.
"""

from __future__ import annotations

from collections.abc import Sequence

FETCH_ERROR_MESSAGE = (
    "Failed to load inventory data. Please check the API endpoint and network connection."
)


class InventoryDashboardError(Exception):
    """Base class for load failures that the dashboard turns into an error state."""


class SchemaError(InventoryDashboardError):
    """The source table lacks one or more required columns.

    ``missing`` lists the absent names in their required order; ``required``
    is the full required set. Fatal for the current load.
    """

    def __init__(self, missing: Sequence[str], required: Sequence[str]) -> None:
        self.missing = tuple(missing)
        self.required = tuple(required)
        super().__init__(
            "Data format is incorrect. Missing columns: "
            f"{', '.join(self.missing)}. Required: {', '.join(self.required)}."
        )


class FetchError(InventoryDashboardError):
    """The remote source could not be reached or returned an unusable payload."""

    def __init__(self, message: str = FETCH_ERROR_MESSAGE) -> None:
        super().__init__(message)


__all__ = ["FETCH_ERROR_MESSAGE", "FetchError", "InventoryDashboardError", "SchemaError"]
