"""Tests for health check endpoints."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from environment_operator import health, metrics  # noqa: F401  registers collectors


def _environ(path: str) -> dict:
    return {
        "REQUEST_METHOD": "GET",
        "PATH_INFO": path,
        "SCRIPT_NAME": "",
        "SERVER_NAME": "localhost",
        "SERVER_PORT": "8080",
        "wsgi.url_scheme": "http",
    }


def _call(app, path: str) -> tuple[str, bytes]:
    start_response = MagicMock()
    body = b"".join(app(_environ(path), start_response))
    return start_response.call_args[0][0], body


@pytest.fixture(autouse=True)
def reset_readiness():
    health.mark_not_ready()
    yield
    health.mark_not_ready()


class TestCombinedWsgiApp:
    """Test cases for create_combined_wsgi_app."""

    def test_healthz(self):
        """Test the liveness endpoint."""
        status, body = _call(health.create_combined_wsgi_app(), "/healthz")

        assert status.startswith("200")
        assert b'"status":"ok"' in body

    def test_readyz_before_startup(self):
        """Test readiness before startup completes."""
        status, body = _call(health.create_combined_wsgi_app(), "/readyz")

        assert status.startswith("503")
        assert b'"status":"starting"' in body

    def test_readyz_after_startup(self):
        """Test readiness after startup."""
        health.mark_ready()

        status, body = _call(health.create_combined_wsgi_app(), "/readyz")

        assert status.startswith("200")
        assert b'"status":"ready"' in body

    def test_metrics_delegated_to_prometheus(self):
        """Test that other paths serve metrics."""
        status, body = _call(health.create_combined_wsgi_app(), "/metrics")

        assert status.startswith("200")
        assert b"environment_operator_reconcile" in body


@patch("environment_operator.health.threading.Thread")
@patch("environment_operator.health.make_server")
def test_start_http_server(mock_make_server, mock_thread):
    """Test starting the server thread."""
    thread = health.start_http_server(9090)

    assert mock_make_server.call_args[0][:2] == ("", 9090)
    mock_thread.return_value.start.assert_called_once()
    assert thread is mock_thread.return_value
