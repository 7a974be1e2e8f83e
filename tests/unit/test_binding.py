"""Tests for SnapshotEnvironmentBinding condition updates."""

from __future__ import annotations

from unittest.mock import Mock, patch

import pytest
from kubernetes.client.exceptions import ApiException

from environment_operator.constants import (
    API_GROUP_VERSION,
    COND_BINDING_ERROR_OCCURRED,
    COND_STATUS_FALSE,
    COND_STATUS_TRUE,
    KIND_SNAPSHOT_ENVIRONMENT_BINDING,
    REASON_BINDING_ERROR_OCCURRED,
)
from environment_operator.handlers.binding import update_binding_status_condition

from factories import NAMESPACE


def make_binding(conditions=None):
    binding = {
        "apiVersion": API_GROUP_VERSION,
        "kind": KIND_SNAPSHOT_ENVIRONMENT_BINDING,
        "metadata": {"name": "app-staging-binding", "namespace": NAMESPACE, "resourceVersion": "7"},
        "spec": {"application": "app", "environment": "staging", "snapshot": "snap-1"},
    }
    if conditions is not None:
        binding["status"] = {"bindingConditions": conditions}
    return binding


def _upsert(store, binding, message, status=COND_STATUS_TRUE):
    return update_binding_status_condition(
        store, binding, COND_BINDING_ERROR_OCCURRED, status, REASON_BINDING_ERROR_OCCURRED, message
    )


class TestUpdateBindingStatusCondition:
    """Test cases for update_binding_status_condition."""

    def test_appends_condition_and_persists_status(self, store):
        """Test adding a new condition and writing the status."""
        binding = make_binding()

        _upsert(store, binding, "Component 'web' failed")

        op, written = store.writes[0]
        assert op == "update_status"
        conditions = written["status"]["bindingConditions"]
        assert len(conditions) == 1
        assert conditions[0]["type"] == COND_BINDING_ERROR_OCCURRED
        assert conditions[0]["message"] == "Component 'web' failed"
        assert conditions[0]["lastTransitionTime"]

    def test_null_status_is_tolerated(self, store):
        """Test a binding without status."""
        binding = make_binding()
        binding["status"] = None

        _upsert(store, binding, "boom")

        assert len(binding["status"]["bindingConditions"]) == 1

    def test_identical_call_keeps_transition_time(self, store):
        """Test that repeating the same condition keeps its transition time."""
        binding = make_binding()
        with patch("environment_operator.utils.conditions.now_timestamp", return_value="2024-01-01T00:00:00Z"):
            _upsert(store, binding, "boom")
        with patch("environment_operator.utils.conditions.now_timestamp", return_value="2024-02-01T00:00:00Z"):
            _upsert(store, binding, "boom")

        conditions = binding["status"]["bindingConditions"]
        assert len(conditions) == 1
        assert conditions[0]["lastTransitionTime"] == "2024-01-01T00:00:00Z"

    def test_changed_message_advances_transition_time(self, store):
        """Test that a new message moves the transition time."""
        binding = make_binding()
        with patch("environment_operator.utils.conditions.now_timestamp", return_value="2024-01-01T00:00:00Z"):
            _upsert(store, binding, "boom")
        with patch("environment_operator.utils.conditions.now_timestamp", return_value="2024-02-01T00:00:00Z"):
            _upsert(store, binding, "bang")

        condition = binding["status"]["bindingConditions"][0]
        assert condition["message"] == "bang"
        assert condition["lastTransitionTime"] == "2024-02-01T00:00:00Z"

    def test_other_conditions_untouched(self, store):
        """Test that other conditions are left alone."""
        other = {"type": "Ready", "status": COND_STATUS_FALSE, "reason": "x", "message": "y",
                 "lastTransitionTime": "2023-01-01T00:00:00Z"}
        binding = make_binding(conditions=[dict(other)])

        _upsert(store, binding, "boom")

        conditions = binding["status"]["bindingConditions"]
        assert conditions[0] == other
        assert conditions[1]["type"] == COND_BINDING_ERROR_OCCURRED

    def test_store_error_propagates(self):
        """Test that status write errors propagate."""
        store = Mock()
        error = ApiException(status=409, reason="Conflict")
        store.update_status.side_effect = error

        with pytest.raises(ApiException) as exc_info:
            _upsert(store, make_binding(), "boom")

        assert exc_info.value is error
