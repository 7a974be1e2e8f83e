"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import (
    EVENT_REASON_MANAGED_ENV_CREATED,
    EVENT_REASON_MANAGED_ENV_UPDATED,
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_RECONCILE_STARTED,
    EVENT_REASON_VALIDATE_FAILED,
)


def emit_event(
    body: dict[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Resource body (or anything kopf can derive an object reference from)
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=message,
        type=type_,
    )


def emit_reconcile_started(body: dict[str, Any]) -> None:
    """Emit reconcile started event."""
    emit_event(body, EVENT_REASON_RECONCILE_STARTED, "Reconciliation started")


def emit_reconcile_failed(body: dict[str, Any], message: str) -> None:
    """Emit reconcile failed event."""
    emit_event(body, EVENT_REASON_RECONCILE_FAILED, message, type_="Warning")


def emit_validate_failed(body: dict[str, Any], message: str) -> None:
    """Emit validation failed event."""
    emit_event(body, EVENT_REASON_VALIDATE_FAILED, message, type_="Warning")


def emit_managed_environment_created(body: dict[str, Any], managed_env_name: str) -> None:
    emit_event(
        body,
        EVENT_REASON_MANAGED_ENV_CREATED,
        f"GitOpsDeploymentManagedEnvironment {managed_env_name} created",
    )


def emit_managed_environment_updated(body: dict[str, Any], managed_env_name: str) -> None:
    emit_event(
        body,
        EVENT_REASON_MANAGED_ENV_UPDATED,
        f"GitOpsDeploymentManagedEnvironment {managed_env_name} updated",
    )
