"""Pytest configuration and shared fixtures."""

import json
import os

import pytest

# Keep the app's engine off the network; must run before livecounter.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest.fixture
def count_message():
    """Build the JSON text the server pushes for a given value."""

    def _make(value: int) -> str:
        return json.dumps({"type": "count", "value": value})

    return _make


@pytest.fixture
def increment_message():
    return json.dumps({"type": "increment"})
