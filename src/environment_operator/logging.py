"""Structured logging configuration for the Environment Operator."""

import json
import logging
import sys
from typing import Any

SECRET_FIELDS = {"token", "password", "bearerToken", "kubeconfig", "data", "stringData"}


def setup_structured_logging(level: int = logging.INFO) -> None:
    """Configure structured JSON logging."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def log_resource_event(
    logger: logging.Logger,
    controller: str,
    resource_kind: str,
    resource_name: str,
    namespace: str,
    uid: str,
    event: str,
    reason: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """Log a structured resource event."""
    log_data = {
        "controller": controller,
        "resource": resource_kind,
        "name": resource_name,
        "namespace": namespace,
        "uid": uid,
        "event": event,
        "reason": reason,
        "message": message,
    }
    log_data.update(kwargs)
    logger.log(level, json.dumps(log_data, default=str))


def log_resource_change(
    logger: logging.Logger,
    operation: str,
    obj: dict[str, Any],
) -> None:
    """Emit the audit record for a create or update of an API resource.

    Args:
        logger: Logger to write to
        operation: RESOURCE_CREATED or RESOURCE_MODIFIED
        obj: The object as it was written to the API server
    """
    metadata = obj.get("metadata", {})
    log_data = {
        "audit": "resource-change",
        "operation": operation,
        "apiVersion": obj.get("apiVersion"),
        "kind": obj.get("kind"),
        "name": metadata.get("name"),
        "namespace": metadata.get("namespace"),
        "object": sanitize_secrets(obj),
    }
    logger.info(json.dumps(log_data, default=str))


def sanitize_secrets(log_data: dict[str, Any]) -> dict[str, Any]:
    """Remove secret fields from log data, recursing into nested dicts."""
    sanitized: dict[str, Any] = {}
    for key, value in log_data.items():
        if key in SECRET_FIELDS:
            sanitized[key] = "***REDACTED***"
        elif isinstance(value, dict):
            sanitized[key] = sanitize_secrets(value)
        else:
            sanitized[key] = value
    return sanitized
