"""
Test configuration - repo root on sys.path and an isolated Dayflow home.

No test touches ~/.dayflow: DAYFLOW_HOME points at a per-test temp
directory and the process-wide store singleton is reset around each test.
"""

import sys
from pathlib import Path

import pytest

# Add repo root to sys.path so tests can import dayflow.* and tests.fixtures
REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dayflow import state_store  # noqa: E402
from dayflow.state_store import StateStore  # noqa: E402


@pytest.fixture(autouse=True)
def dayflow_home(tmp_path, monkeypatch):
    """Point DAYFLOW_HOME at a temp dir for every test."""
    home = tmp_path / "dayflow-home"
    monkeypatch.setenv("DAYFLOW_HOME", str(home))
    monkeypatch.delenv("DAYFLOW_DB", raising=False)
    monkeypatch.setattr(state_store, "_store", None)
    return home


@pytest.fixture
def store(tmp_path):
    """Fresh StateStore on a temp database."""
    return StateStore(tmp_path / "state.db")
