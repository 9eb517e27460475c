"""Test configuration for local imports without installing the package."""
from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest


def pytest_configure():
    """Ensure the src/ directory is importable for tests."""
    root = Path(__file__).resolve().parents[1] / "src"
    sys.path.insert(0, str(root))


def pytest_collection_modifyitems(config, items):
    """Full-scale evolution runs only execute when GRNEVO_RUN_SLOW is set."""
    if os.environ.get("GRNEVO_RUN_SLOW"):
        return
    skip_slow = pytest.mark.skip(reason="set GRNEVO_RUN_SLOW=1 for full-scale runs")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)
