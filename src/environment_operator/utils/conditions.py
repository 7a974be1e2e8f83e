"""Utilities for managing Kubernetes status conditions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


def now_timestamp() -> str:
    """Current time in the RFC 3339 form the API server uses for metav1.Time."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def find_condition(conditions: list[dict[str, Any]], condition_type: str) -> int | None:
    """Return the index of the condition with the given type, or None."""
    for idx, cond in enumerate(conditions):
        if cond.get("type") == condition_type:
            return idx
    return None


def update_condition(
    conditions: list[dict[str, Any]],
    condition_type: str,
    status: str,
    reason: str,
    message: str,
    now: str | None = None,
) -> list[dict[str, Any]]:
    """Update or add a condition to the conditions list, in place.

    A new condition is appended with the current time. An existing condition
    always takes the new status, reason and message, but its lastTransitionTime
    only moves forward when one of those three values differs from what was
    stored.

    Args:
        conditions: List of existing conditions
        condition_type: Type of condition, unique within the list
        status: Status of condition ("True", "False", "Unknown")
        reason: Reason for the condition
        message: Human-readable message
        now: Timestamp to use (defaults to the current time)

    Returns:
        The updated list of conditions
    """
    now = now or now_timestamp()

    existing_idx = find_condition(conditions, condition_type)
    if existing_idx is None:
        conditions.append({
            "type": condition_type,
            "status": status,
            "reason": reason,
            "message": message,
            "lastTransitionTime": now,
        })
        return conditions

    existing = conditions[existing_idx]
    changed = (
        existing.get("message") != message
        or existing.get("reason") != reason
        or existing.get("status") != status
    )
    if changed or not existing.get("lastTransitionTime"):
        existing["lastTransitionTime"] = now
    existing["reason"] = reason
    existing["message"] = message
    existing["status"] = status

    return conditions
