"""Pytest configuration and fixtures."""

import gc
import shutil
import tempfile
import time
from collections.abc import Callable, Generator, Sequence
from pathlib import Path

import pytest

from embedsearch.config import Settings
from embedsearch.core.vector import QuantizedVector


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir)
    finally:
        # Force garbage collection to release any SQLite handles
        gc.collect()
        time.sleep(0.05)
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def override_settings(temp_dir: Path) -> Generator[Settings, None, None]:
    """Provide isolated embedsearch settings scoped to tests."""

    import embedsearch.config as config_module

    original_settings = getattr(config_module, "_settings", None)

    data_dir = temp_dir / "appdata"
    data_dir.mkdir(parents=True, exist_ok=True)

    settings = config_module.Settings(
        data_dir=data_dir,
        dimension=64,
        embedder="hashing",
        online=False,
    )

    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings


@pytest.fixture
def vec() -> Callable[[Sequence[int]], QuantizedVector]:
    """Shorthand for building a vector from literal int8 values."""

    def _build(values: Sequence[int]) -> QuantizedVector:
        return QuantizedVector.from_values(values)

    return _build
