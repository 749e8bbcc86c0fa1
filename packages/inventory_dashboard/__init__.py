"""Public interface for the ``inventory_dashboard`` package.

Symbol re-exports only: the aggregation and view functions, the dashboard
store, the CSV export helpers, and the public models and exceptions.
"""

from .aggregate import aggregate_inventory, inventory_stats, process_inventory
from .dashboard import InventoryDashboard
from .errors import FetchError, InventoryDashboardError, SchemaError
from .export import (
    inventory_export_filename,
    inventory_to_csv,
    transactions_export_filename,
    transactions_to_csv,
    write_export,
)
from .models import (
    DashboardFilters,
    DashboardTransaction,
    DetailedTransactionsView,
    InventoryResponse,
    InventoryStats,
    ItemDashboard,
    MaterialSummary,
    SortConfig,
    Transaction,
)
from .schema import REQUIRED_COLUMNS, ColumnIndex, resolve_columns
from .source import fetch_inventory, load_inventory, load_inventory_file
from .views import (
    default_date_range,
    detailed_transactions_view,
    filter_inventory,
    item_dashboard,
    paginate,
    sort_inventory,
    total_pages,
)

__all__ = [
    # Pipeline
    "aggregate_inventory",
    "process_inventory",
    "inventory_stats",
    "resolve_columns",
    "filter_inventory",
    "sort_inventory",
    "paginate",
    "total_pages",
    "item_dashboard",
    "detailed_transactions_view",
    "default_date_range",
    # Export
    "inventory_to_csv",
    "transactions_to_csv",
    "inventory_export_filename",
    "transactions_export_filename",
    "write_export",
    # Sources and store
    "fetch_inventory",
    "load_inventory",
    "load_inventory_file",
    "InventoryDashboard",
    # Models / errors
    "REQUIRED_COLUMNS",
    "ColumnIndex",
    "DashboardFilters",
    "DashboardTransaction",
    "DetailedTransactionsView",
    "InventoryResponse",
    "InventoryStats",
    "ItemDashboard",
    "MaterialSummary",
    "SortConfig",
    "Transaction",
    "InventoryDashboardError",
    "SchemaError",
    "FetchError",
]
