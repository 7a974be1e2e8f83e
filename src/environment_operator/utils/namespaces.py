"""Namespace lifecycle checks."""

from __future__ import annotations

import logging

from ..exceptions import ResourceNotFoundError
from ..services.store import ResourceStore

logger = logging.getLogger(__name__)

NAMESPACE_PHASE_TERMINATING = "Terminating"


def is_namespace_being_deleted(store: ResourceStore, namespace: str) -> bool:
    """Return True if the namespace is gone or on its way out.

    Args:
        store: Resource store
        namespace: Namespace name

    Raises:
        kubernetes.client.exceptions.ApiException: On any error other than not-found
    """
    try:
        ns = store.get_namespace(namespace)
    except ResourceNotFoundError:
        logger.info(f"Namespace {namespace} no longer exists")
        return True

    metadata = ns.get("metadata") or {}
    status = ns.get("status") or {}
    if metadata.get("deletionTimestamp") or status.get("phase") == NAMESPACE_PHASE_TERMINATING:
        logger.info(f"Namespace {namespace} is being deleted, skipping request")
        return True
    return False
