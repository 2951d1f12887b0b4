from __future__ import annotations

from pathlib import Path

import pytest

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def data_dir() -> Path:
    return DATA_DIR


@pytest.fixture
def three_days_grace_text() -> str:
    return (DATA_DIR / "three_days_grace.txt").read_text(encoding="utf-8")
