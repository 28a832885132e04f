"""Root test configuration: isolate tests from TRYDOCS_* environment settings"""

import os

import pytest


@pytest.fixture(autouse=True)
def clear_trydocs_env(monkeypatch):
    """Remove TRYDOCS_* env vars so each test sees only what it sets."""
    for name in list(os.environ):
        if name.startswith("TRYDOCS_"):
            monkeypatch.delenv(name, raising=False)
