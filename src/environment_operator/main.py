"""Main entry point for the Environment Operator.

Run with ``kopf run -m environment_operator.main`` or ``python -m environment_operator``.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import kopf

from . import health
from . import logging as structured_logging
from . import handlers  # noqa: F401
from .services.store import get_resource_store
from .tracing import initialize_tracing

logger = logging.getLogger(__name__)


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, memo: kopf.Memo, **_: Any) -> None:
    """Configure the operator."""
    structured_logging.setup_structured_logging()
    initialize_tracing()

    # Use annotations for kopf's own bookkeeping so status stays ours
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage()
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage()

    settings.posting.level = logging.INFO
    request_timeout = float(os.getenv("K8S_REQUEST_TIMEOUT_SECONDS", "30"))
    settings.networking.request_timeout = request_timeout
    settings.execution.max_workers = int(os.getenv("MAX_WORKERS", "4"))
    settings.networking.error_backoffs = [1, 2, 4, 8, 16, 32, 60]

    memo.store = get_resource_store(request_timeout=request_timeout)

    metrics_port = int(os.getenv("METRICS_PORT", "8080"))
    health.start_http_server(metrics_port)
    health.mark_ready()
    logger.info(f"Environment operator started, serving metrics and health checks on port {metrics_port}")


@kopf.on.cleanup()
def shutdown(**_: Any) -> None:
    """Flag the operator as not ready while it shuts down."""
    health.mark_not_ready()


def main() -> None:
    """Run the operator in the current process."""
    kopf.run(clusterwide=os.getenv("WATCH_NAMESPACE") is None, namespaces=_watched_namespaces())


def _watched_namespaces() -> list[str]:
    watch_namespace = os.getenv("WATCH_NAMESPACE")
    if not watch_namespace:
        return []
    return [ns.strip() for ns in watch_namespace.split(",") if ns.strip()]
