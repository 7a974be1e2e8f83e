"""Status condition updates on SnapshotEnvironmentBinding resources."""

from __future__ import annotations

from typing import Any

from ..services.store import ResourceStore
from ..utils.conditions import update_condition


def update_binding_status_condition(
    store: ResourceStore,
    binding: dict[str, Any],
    condition_type: str,
    status: str,
    reason: str,
    message: str,
) -> dict[str, Any]:
    """Upsert one condition in status.bindingConditions and persist it.

    Args:
        store: Resource store
        binding: SnapshotEnvironmentBinding body; modified in place
        condition_type: Condition type, unique within the list
        status: "True", "False" or "Unknown"
        reason: Machine-readable reason
        message: Human-readable message

    Returns:
        The binding as returned by the status update

    Raises:
        ApiException: Any store error, unchanged
    """
    binding_status = binding.get("status") or {}
    conditions = binding_status.get("bindingConditions") or []
    binding_status["bindingConditions"] = conditions
    binding["status"] = binding_status
    update_condition(conditions, condition_type, status, reason, message)
    return store.update_status(binding)
