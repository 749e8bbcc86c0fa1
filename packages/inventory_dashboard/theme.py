"""Theme preference persistence.

The only state this package persists: ``"light"`` or ``"dark"`` stored under
the ``inventory-theme`` key of a small JSON file. When nothing valid is
stored, the terminal's own colour scheme decides (``COLORFGBG`` with a dark
background colour means dark).
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable
from os import PathLike
from pathlib import Path

from .logging_setup import get_logger
from .models import Theme

STORAGE_KEY = "inventory-theme"
THEMES: tuple[str, ...] = ("light", "dark")

# ANSI colour indices that render as a dark background.
_DARK_BACKGROUNDS = frozenset({"0", "1", "2", "3", "4", "5", "6", "8"})

_logger = get_logger("inventory_dashboard.theme")


def system_prefers_dark() -> bool:
    """Best-effort OS/terminal dark-mode detection from ``COLORFGBG``."""

    value = os.getenv("COLORFGBG", "")
    if not value:
        return False
    return value.split(";")[-1].strip() in _DARK_BACKGROUNDS


class ThemeStore:
    """Read and write the persisted theme preference."""

    def __init__(
        self,
        path: str | PathLike[str],
        *,
        prefers_dark: Callable[[], bool] = system_prefers_dark,
    ) -> None:
        self.path = Path(path)
        self._prefers_dark = prefers_dark

    def _read(self) -> dict[str, object]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as e:
            _logger.warning("Ignoring unreadable theme file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def stored(self) -> Theme | None:
        value = self._read().get(STORAGE_KEY)
        return value if value in THEMES else None  # type: ignore[return-value]

    def load(self) -> Theme:
        """Stored preference, else the system preference, else ``"light"``."""

        stored = self.stored()
        if stored is not None:
            return stored
        return "dark" if self._prefers_dark() else "light"

    def save(self, theme: Theme) -> None:
        if theme not in THEMES:
            raise ValueError(f"unknown theme: {theme!r}")
        data = self._read()
        data[STORAGE_KEY] = theme
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        os.replace(tmp, self.path)


def toggled(theme: Theme) -> Theme:
    return "dark" if theme == "light" else "light"


__all__ = ["STORAGE_KEY", "ThemeStore", "system_prefers_dark", "toggled"]
