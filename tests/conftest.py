"""Pytest configuration shared by the suite.

Puts the workspace ``packages/`` directory on ``sys.path`` so
``inventory_dashboard`` imports without installation, and isolates every
piece of on-disk or environment state the package reads: the theme file, the
export directory and the ``INVENTORY_*`` variables a developer may have set
locally (or in a ``.env``) would otherwise leak into assertions.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
sys.path[:0] = [p for p in [str(_PKG_DIR), str(_ROOT)] if p not in sys.path]


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("INVENTORY_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("COLORFGBG", raising=False)
    monkeypatch.setenv("INVENTORY_THEME_FILE", os.fspath(tmp_path / "theme.json"))
    monkeypatch.setenv("INVENTORY_EXPORT_DIR", os.fspath(tmp_path / "exports"))
    # Keep python-dotenv from picking up a developer's .env in the CWD.
    monkeypatch.chdir(tmp_path)
