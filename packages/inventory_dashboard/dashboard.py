"""The dashboard state store.

:class:`InventoryDashboard` owns every piece of mutable UI state (filters,
sort, page, selections, theme) plus the current aggregated inventory. Each
derived view is a property that recomputes from scratch on access via the
pure functions in :mod:`inventory_dashboard.views`, so a view can never be
stale relative to the state it depends on.

Loading is a single synchronous attempt. Concurrent callers are not
coordinated: whichever ``load()`` finishes last wins.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import fields, replace
from datetime import date, datetime
from os import PathLike
from pathlib import Path

from . import views
from .aggregate import inventory_stats, process_inventory
from .cost_centers import CostCenterMap
from .errors import InventoryDashboardError, SchemaError
from .export import (
    inventory_export_filename,
    inventory_to_csv,
    transactions_export_filename,
    transactions_to_csv,
    write_export,
)
from .logging_setup import get_logger
from .models import (
    DashboardFilters,
    DetailedTransactionsView,
    Direction,
    InventoryResponse,
    InventoryStats,
    ItemDashboard,
    MaterialSummary,
    MovementFilter,
    SortConfig,
    Theme,
)
from .theme import ThemeStore, toggled

MOVEMENT_FILTERS: tuple[str, ...] = ("all", "101", "201")
DASHBOARD_MOVEMENTS: tuple[str, ...] = ("all", "in", "out")
DASHBOARD_FILTER_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(DashboardFilters))

_logger = get_logger("inventory_dashboard.dashboard")


class InventoryDashboard:
    """Single-user reactive store over one inventory data source."""

    def __init__(
        self,
        loader: Callable[[], InventoryResponse],
        *,
        cost_centers: CostCenterMap | None = None,
        page_size: int = views.PAGE_SIZE,
        low_stock_threshold: float = views.LOW_STOCK_THRESHOLD,
        theme_store: ThemeStore | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._loader = loader
        self._cost_centers: Mapping[str, str] = cost_centers or {}
        self._theme_store = theme_store
        self._today = today
        self.page_size = page_size
        self.low_stock_threshold = low_stock_threshold

        # Core state
        self.inventory_data: list[MaterialSummary] = []
        self.loading = False
        self.error: str | None = None
        self.last_updated: datetime | None = None
        self.theme: Theme = theme_store.load() if theme_store else "light"

        # Filtering, sorting and pagination
        self.search_term = ""
        self.movement_filter: MovementFilter = "all"
        self.sort_config = SortConfig()
        self.show_low_stock_only = False
        self.current_page = 1

        # Item dashboard and detail view
        self._selected_material: str | None = None
        self.detailed_view_type: Direction | None = None
        self.date_from = ""
        self.date_to = ""
        self.dashboard_filters = DashboardFilters()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> bool:
        """Fetch and aggregate; on failure keep the previous data and set ``error``.

        Returns ``True`` when new data was installed.
        """

        self.loading = True
        self.error = None
        try:
            data = process_inventory(self._loader(), self._cost_centers)
        except SchemaError as e:
            _logger.warning("Rejected inventory payload: %s", e)
            self.error = str(e)
            return False
        except InventoryDashboardError as e:
            self.error = str(e) or "An unknown error occurred."
            return False
        finally:
            self.loading = False

        self.inventory_data = data
        self.last_updated = datetime.now()
        _logger.info("Loaded %d materials", len(data))
        return True

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def base_filtered_inventory(self) -> list[MaterialSummary]:
        return views.filter_inventory(
            self.inventory_data,
            search_term=self.search_term,
            movement_filter=self.movement_filter,
            low_stock_only=self.show_low_stock_only,
            low_stock_threshold=self.low_stock_threshold,
        )

    @property
    def sorted_inventory(self) -> list[MaterialSummary]:
        return views.sort_inventory(self.base_filtered_inventory, self.sort_config)

    @property
    def paginated_inventory(self) -> list[MaterialSummary]:
        return views.paginate(self.sorted_inventory, self.current_page, self.page_size)

    @property
    def total_pages(self) -> int:
        return views.total_pages(len(self.base_filtered_inventory), self.page_size)

    @property
    def inventory_stats(self) -> InventoryStats:
        return inventory_stats(self.inventory_data)

    @property
    def selected_material(self) -> MaterialSummary | None:
        if self._selected_material is None:
            return None
        for item in self.inventory_data:
            if item.material == self._selected_material:
                return item
        return None

    @property
    def item_dashboard(self) -> ItemDashboard | None:
        return views.item_dashboard(self.selected_material, self.dashboard_filters)

    @property
    def detailed_transactions_view(self) -> DetailedTransactionsView | None:
        return views.detailed_transactions_view(
            self.selected_material, self.detailed_view_type, self.date_from, self.date_to
        )

    # ------------------------------------------------------------------
    # Inventory table events
    # ------------------------------------------------------------------

    def on_search(self, term: str) -> None:
        self.search_term = term
        self.current_page = 1

    def on_movement_type_change(self, value: str) -> None:
        if value not in MOVEMENT_FILTERS:
            raise ValueError(f"movement filter must be one of {MOVEMENT_FILTERS}, got {value!r}")
        self.movement_filter = value  # type: ignore[assignment]
        self.current_page = 1

    def on_sort_change(self, value: str | SortConfig) -> None:
        self.sort_config = value if isinstance(value, SortConfig) else SortConfig.parse(value)
        self.current_page = 1

    def on_show_low_stock_only_change(self, checked: bool) -> None:
        self.show_low_stock_only = checked
        self.current_page = 1

    def go_to_page(self, page: int) -> bool:
        """Move to ``page`` when ``1 <= page <= total_pages``; otherwise do nothing."""

        if 0 < page <= self.total_pages:
            self.current_page = page
            return True
        return False

    def next_page(self) -> bool:
        return self.go_to_page(self.current_page + 1)

    def prev_page(self) -> bool:
        return self.go_to_page(self.current_page - 1)

    # ------------------------------------------------------------------
    # Item dashboard and detailed view
    # ------------------------------------------------------------------

    def show_item_dashboard(self, material: MaterialSummary | str) -> None:
        self._selected_material = (
            material.material if isinstance(material, MaterialSummary) else material
        )

    def close_dashboard(self) -> None:
        self._selected_material = None
        self.close_detailed_view()
        self.reset_dashboard_filters()

    def reset_dashboard_filters(self) -> None:
        self.dashboard_filters = DashboardFilters()

    def on_dashboard_filter_change(self, field_name: str, value: str) -> None:
        if field_name not in DASHBOARD_FILTER_FIELDS:
            raise ValueError(f"unknown dashboard filter: {field_name!r}")
        if field_name == "movement" and value not in DASHBOARD_MOVEMENTS:
            raise ValueError(f"movement must be one of {DASHBOARD_MOVEMENTS}, got {value!r}")
        self.dashboard_filters = replace(self.dashboard_filters, **{field_name: value})

    def show_detailed_view(self, direction: Direction) -> bool:
        """Open the detail view with the default ``[oldest, today]`` range.

        A no-op when nothing is selected or the direction has no transactions.
        """

        material = self.selected_material
        if material is None:
            return False
        bounds = views.default_date_range(material, direction, self._today())
        if bounds is None:
            return False
        oldest, today = bounds
        self.date_from = oldest.isoformat() if oldest else ""
        self.date_to = today.isoformat()
        self.detailed_view_type = direction
        return True

    def close_detailed_view(self) -> None:
        self.detailed_view_type = None
        self.date_from = ""
        self.date_to = ""

    def on_date_change(self, bound: str, value: str) -> None:
        if bound == "from":
            self.date_from = value
        elif bound == "to":
            self.date_to = value
        else:
            raise ValueError(f"bound must be 'from' or 'to', got {bound!r}")

    def handle_escape_key(self) -> None:
        if self.detailed_view_type:
            self.close_detailed_view()
        elif self._selected_material is not None:
            self.close_dashboard()

    # ------------------------------------------------------------------
    # Theme and exports
    # ------------------------------------------------------------------

    def toggle_theme(self) -> Theme:
        self.theme = toggled(self.theme)
        if self._theme_store is not None:
            self._theme_store.save(self.theme)
        return self.theme

    def export_inventory_csv(self, directory: str | PathLike[str]) -> Path | None:
        """Write the sorted, filtered inventory (all pages); ``None`` when empty."""

        return write_export(
            directory,
            inventory_export_filename(self._today()),
            inventory_to_csv(self.sorted_inventory),
        )

    def export_transactions_csv(self, directory: str | PathLike[str]) -> Path | None:
        """Write the current detailed view; ``None`` when closed or empty."""

        details = self.detailed_transactions_view
        if details is None:
            return None
        return write_export(
            directory,
            transactions_export_filename(self._selected_material, details.direction),
            transactions_to_csv(details.transactions, details.direction),
        )


__all__ = ["DASHBOARD_FILTER_FIELDS", "InventoryDashboard"]
