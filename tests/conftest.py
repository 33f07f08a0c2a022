# tests/conftest.py
"""
Pytest configuration and fixtures.
Adds the project root to sys.path so the top-level modules import directly.
"""

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture(autouse=True)
def no_config_env(monkeypatch):
    """Keeps a developer's HYPERPAGE_CONFIG from leaking into tests."""
    monkeypatch.delenv("HYPERPAGE_CONFIG", raising=False)


@pytest.fixture
def project_dir() -> Path:
    return project_root
