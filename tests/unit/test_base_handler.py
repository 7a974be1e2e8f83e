"""Tests for base handler functionality."""

from __future__ import annotations

import json
import logging
from unittest.mock import Mock, patch

import pytest

from environment_operator.handlers.base import BaseHandler

BODY = {"kind": "Environment", "metadata": {"name": "test-resource", "namespace": "default", "uid": "u1"}}


class TestBaseHandler:
    """Test cases for BaseHandler class."""

    def test_init(self):
        """Test handler initialization."""
        handler = BaseHandler(kind="TestKind")
        assert handler.kind == "TestKind"
        assert handler.logger is not None

    def test_log_error_sanitizes(self, caplog):
        """Test that logged errors carry the sanitized message and type."""
        handler = BaseHandler(kind="TestKind")
        with caplog.at_level(logging.ERROR):
            handler.log_error(BODY["metadata"], "failed", error=ValueError("token=abc123"))

        record = json.loads(caplog.records[-1].getMessage())
        assert record["error_type"] == "ValueError"
        assert "abc123" not in record["error"]
        assert record["resource"] == "TestKind"

    def test_log_warning_level(self, caplog):
        """Test that warnings are logged at WARNING level."""
        handler = BaseHandler(kind="TestKind")
        with caplog.at_level(logging.WARNING):
            handler.log_warning(BODY["metadata"], "careful")

        assert caplog.records[-1].levelno == logging.WARNING

    @patch("environment_operator.handlers.base.emit_validate_failed")
    @patch("environment_operator.handlers.base.metrics")
    def test_handle_validation_error_reraises(self, mock_metrics, mock_emit):
        """Test that validation errors are reported and re-raised."""
        handler = BaseHandler(kind="TestKind")
        error = ValueError("both set")

        with pytest.raises(ValueError) as exc_info:
            handler.handle_validation_error(BODY, error)

        assert exc_info.value is error
        mock_emit.assert_called_once_with(BODY, "both set")
        mock_metrics.reconcile_total.labels.assert_called_with(kind="TestKind", result="invalid")

    @patch("environment_operator.handlers.base.emit_reconcile_started")
    @patch("environment_operator.handlers.base.metrics")
    def test_reconcile_with_metrics_success(self, mock_metrics, mock_emit_started):
        """Test successful reconciliation metrics and events."""
        handler = BaseHandler(kind="TestKind")
        reconcile_fn = Mock(return_value="done")

        assert handler.reconcile_with_metrics(BODY, reconcile_fn) == "done"

        reconcile_fn.assert_called_once()
        mock_emit_started.assert_called_once_with(BODY)
        mock_metrics.reconcile_total.labels.assert_any_call(kind="TestKind", result="started")
        mock_metrics.reconcile_total.labels.assert_any_call(kind="TestKind", result="success")
        assert mock_metrics.reconcile_duration_seconds.labels.called

    @patch("environment_operator.handlers.base.emit_reconcile_failed")
    @patch("environment_operator.handlers.base.emit_reconcile_started")
    @patch("environment_operator.handlers.base.metrics")
    def test_reconcile_with_metrics_failure(self, mock_metrics, mock_emit_started, mock_emit_failed):
        """Test failed reconciliation metrics and events."""
        handler = BaseHandler(kind="TestKind")
        reconcile_fn = Mock(side_effect=RuntimeError("API unavailable"))

        with pytest.raises(RuntimeError, match="API unavailable"):
            handler.reconcile_with_metrics(BODY, reconcile_fn)

        mock_emit_failed.assert_called_once()
        assert "API unavailable" in mock_emit_failed.call_args[0][1]
        mock_metrics.error_total.labels.assert_called_once_with(kind="TestKind", error_type="RuntimeError")
        mock_metrics.reconcile_total.labels.assert_any_call(kind="TestKind", result="error")
        assert mock_metrics.reconcile_duration_seconds.labels.called

    @patch("environment_operator.handlers.base.emit_reconcile_failed")
    @patch("environment_operator.handlers.base.emit_reconcile_started")
    @patch("environment_operator.handlers.base.metrics")
    def test_reconcile_with_metrics_validation_error(self, mock_metrics, mock_emit_started, mock_emit_failed):
        """Validation errors are re-raised without a second failure report."""
        handler = BaseHandler(kind="TestKind")
        handler.validation_errors = (ValueError,)
        reconcile_fn = Mock(side_effect=ValueError("both set"))

        with pytest.raises(ValueError, match="both set"):
            handler.reconcile_with_metrics(BODY, reconcile_fn)

        mock_emit_failed.assert_not_called()
        mock_metrics.error_total.labels.assert_not_called()
        assert mock_metrics.reconcile_duration_seconds.labels.called
