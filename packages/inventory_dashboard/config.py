"""Runtime settings resolved from environment variables.

The CLI loads a local ``.env`` (python-dotenv, never overriding variables
already set) before calling :meth:`Settings.from_env`.

Variables
---------
- ``INVENTORY_API_URL``: remote data source (JSON ``{headers, rows}``).
- ``INVENTORY_COST_CENTERS``: optional path to the cost-center table.
- ``INVENTORY_LOW_STOCK_THRESHOLD``: low-stock balance ceiling (default 10).
- ``INVENTORY_PAGE_SIZE``: rows per inventory page (default 12).
- ``INVENTORY_FETCH_TIMEOUT``: seconds; unset means no timeout.
- ``INVENTORY_THEME_FILE``: theme preference file
  (default ``~/.config/inventory-dashboard/theme.json``).
- ``INVENTORY_EXPORT_DIR``: directory for CSV exports (default: CWD).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .views import LOW_STOCK_THRESHOLD, PAGE_SIZE

DEFAULT_THEME_FILE = Path("~/.config/inventory-dashboard/theme.json")


def _number(env: Mapping[str, str], name: str, default: float | None) -> float | None:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    if not raw.isdigit() or int(raw) <= 0:
        raise ValueError(f"{name} must be a positive integer, got {raw!r}")
    return int(raw)


def _path(env: Mapping[str, str], name: str) -> Path | None:
    raw = (env.get(name) or "").strip()
    return Path(raw).expanduser() if raw else None


@dataclass(frozen=True, slots=True)
class Settings:
    api_url: str | None = None
    cost_centers_path: Path | None = None
    low_stock_threshold: float = LOW_STOCK_THRESHOLD
    page_size: int = PAGE_SIZE
    fetch_timeout: float | None = None
    theme_file: Path = field(default_factory=lambda: DEFAULT_THEME_FILE.expanduser())
    export_dir: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``env`` (defaults to ``os.environ``).

        Raises ``ValueError`` naming the variable when a numeric value is invalid.
        """

        env = os.environ if env is None else env
        threshold = _number(env, "INVENTORY_LOW_STOCK_THRESHOLD", LOW_STOCK_THRESHOLD)
        assert threshold is not None
        return cls(
            api_url=(env.get("INVENTORY_API_URL") or "").strip() or None,
            cost_centers_path=_path(env, "INVENTORY_COST_CENTERS"),
            low_stock_threshold=threshold,
            page_size=_positive_int(env, "INVENTORY_PAGE_SIZE", PAGE_SIZE),
            fetch_timeout=_number(env, "INVENTORY_FETCH_TIMEOUT", None),
            theme_file=_path(env, "INVENTORY_THEME_FILE") or DEFAULT_THEME_FILE.expanduser(),
            export_dir=_path(env, "INVENTORY_EXPORT_DIR") or Path.cwd(),
        )


__all__ = ["DEFAULT_THEME_FILE", "Settings"]
