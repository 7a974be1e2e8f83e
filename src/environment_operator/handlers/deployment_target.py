"""Watches on DeploymentTargetClaim and DeploymentTarget.

Changes to claims and targets are turned into reconcile requests for the
Environments that depend on them. Both kinds are only read: the handlers are
raw event handlers, so kopf stores no progress or diff-base annotations on them.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

import kopf

from .. import metrics
from ..constants import API_GROUP_VERSION, KIND_DEPLOYMENT_TARGET, KIND_DEPLOYMENT_TARGET_CLAIM
from ..exceptions import ResourceNotFoundError
from ..services.store import ObjectKey, ResourceStore
from ..utils.errors import sanitize_exception
from .mappers import map_claim_to_environments, map_target_to_environments

logger = logging.getLogger(__name__)

WATCHED_EVENT_TYPES = frozenset({"ADDED", "MODIFIED", "DELETED"})


def enqueue_environment_reconciles(
    store: ResourceStore,
    keys: Iterable[ObjectKey],
    source_kind: str,
) -> int:
    """Request a reconcile of each Environment.

    Failures are logged and counted but never raised, so a watch handler is
    not retried because of an Environment it merely pointed at.

    Returns:
        Number of Environments that were successfully enqueued
    """
    enqueued = 0
    for key in sorted(keys):
        try:
            store.request_reconcile(key)
        except ResourceNotFoundError:
            logger.info(f"Environment {key} disappeared before it could be enqueued")
            continue
        except Exception as e:
            logger.error(f"Failed to enqueue reconcile of Environment {key}: {sanitize_exception(e)}")
            metrics.mapped_requests_total.labels(source_kind=source_kind, result="enqueue_failed").inc()
            continue
        enqueued += 1
        metrics.mapped_requests_total.labels(source_kind=source_kind, result="enqueued").inc()
    return enqueued


def _is_change_event(event: kopf.RawEvent) -> bool:
    # The initial listing arrives with no type; Environments are resumed on their own.
    return event.get("type") in WATCHED_EVENT_TYPES


@kopf.on.event(API_GROUP_VERSION, KIND_DEPLOYMENT_TARGET_CLAIM)
def handle_deployment_target_claim(
    event: kopf.RawEvent,
    body: kopf.Body,
    memo: kopf.Memo,
    **kwargs: Any,
) -> None:
    """Reconcile the Environments that reference a changed DeploymentTargetClaim."""
    if not _is_change_event(event):
        return
    store: ResourceStore = memo.store
    keys = map_claim_to_environments(dict(body), store)
    enqueue_environment_reconciles(store, keys, KIND_DEPLOYMENT_TARGET_CLAIM)


@kopf.on.event(API_GROUP_VERSION, KIND_DEPLOYMENT_TARGET)
def handle_deployment_target(
    event: kopf.RawEvent,
    body: kopf.Body,
    memo: kopf.Memo,
    **kwargs: Any,
) -> None:
    """Reconcile the Environments whose claim is bound to a changed DeploymentTarget."""
    if not _is_change_event(event):
        return
    store: ResourceStore = memo.store
    keys = map_target_to_environments(dict(body), store)
    enqueue_environment_reconciles(store, keys, KIND_DEPLOYMENT_TARGET)
