from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def isolated_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Keep submission stores and the HTTP cache out of the user's data directory."""

    data_dir = tmp_path / "locatorsync-data"
    monkeypatch.setenv("LOCATORSYNC_DATA_DIR", str(data_dir))
    return data_dir
