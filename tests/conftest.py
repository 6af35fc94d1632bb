"""Pytest configuration and fixtures for iolauncher tests.

This module ensures the iolauncher package is importable during tests
without requiring installation.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

# Add src directory to path for development testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

DEVICE_ID = "2f1c6a4e-8b8f-4a51-9f0e-3b6f4e2d9a11"
USER_ID = "7d9e0c52-1a3b-4c4d-8e5f-6a7b8c9d0e1f"


@pytest.fixture
def cache_file(tmp_path: Path) -> Path:
    """An empty but valid device cache."""
    path = tmp_path / "ionet_device_cache.txt"
    path.write_text(json.dumps({}), encoding="utf-8")
    return path
