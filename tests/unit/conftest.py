"""Shared fixtures for unit tests."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from factories import NAMESPACE, FakeStore


@pytest.fixture
def store() -> FakeStore:
    """Fake store with the test namespace present and active."""
    fake = FakeStore()
    fake.add_namespace(NAMESPACE)
    return fake


@pytest.fixture(autouse=True)
def mock_kopf_event():
    """kopf.event needs a running operator; capture the calls instead."""
    with patch("environment_operator.utils.events.kopf.event") as mock_event:
        yield mock_event
