"""Tests for namespace lifecycle checks."""

from __future__ import annotations

from unittest.mock import Mock

import pytest
from kubernetes.client.exceptions import ApiException

from environment_operator.utils.namespaces import is_namespace_being_deleted

from factories import NAMESPACE


def test_active_namespace(store):
    """Test an active namespace."""
    assert is_namespace_being_deleted(store, NAMESPACE) is False


def test_terminating_namespace(store):
    """Test a Terminating namespace."""
    store.add_namespace(NAMESPACE, status={"phase": "Terminating"})
    assert is_namespace_being_deleted(store, NAMESPACE) is True


def test_namespace_with_deletion_timestamp(store):
    """Test a namespace with a deletion timestamp."""
    store.add_namespace(NAMESPACE, metadata={"name": NAMESPACE, "deletionTimestamp": "2024-01-01T00:00:00Z"})
    assert is_namespace_being_deleted(store, NAMESPACE) is True


def test_missing_namespace(store):
    """Test a namespace that does not exist."""
    assert is_namespace_being_deleted(store, "gone") is True


def test_other_errors_propagate():
    """Test that other errors propagate."""
    store = Mock()
    store.get_namespace.side_effect = ApiException(status=500)

    with pytest.raises(ApiException):
        is_namespace_being_deleted(store, NAMESPACE)
