"""Mapping of DeploymentTargetClaim/DeploymentTarget changes to Environment keys.

Environments reference claims (and, through them, targets) by name only, so
there is no owner reference kopf could follow. These functions work out which
Environments are affected by a change. They only need something with a
``list(kind, namespace)`` method, and they never raise: a failed listing is
logged and yields no keys, leaving the periodic resync to catch up.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from .. import metrics
from ..builders.environment import get_deployment_target_claim_name
from ..constants import KIND_DEPLOYMENT_TARGET, KIND_DEPLOYMENT_TARGET_CLAIM, KIND_ENVIRONMENT
from ..services.store import ObjectKey, object_key
from ..tracing import trace_span
from ..utils.errors import sanitize_exception

logger = logging.getLogger(__name__)


class ResourceLister(Protocol):
    def list(self, kind: str, namespace: str) -> list[dict[str, Any]]: ...


def _list_or_none(lister: ResourceLister, kind: str, namespace: str, source_kind: str) -> list[dict[str, Any]] | None:
    try:
        return lister.list(kind, namespace)
    except Exception as e:
        logger.error(f"Failed to list {kind} in namespace {namespace} while mapping a {source_kind} event: "
                     f"{sanitize_exception(e)}")
        metrics.mapped_requests_total.labels(source_kind=source_kind, result="list_failed").inc()
        return None


def _environments_for_claims(environments: list[dict[str, Any]], claim_names: set[str]) -> set[ObjectKey]:
    return {
        object_key(env)
        for env in environments
        if get_deployment_target_claim_name(env) in claim_names
    }


def map_claim_to_environments(claim: dict[str, Any], lister: ResourceLister) -> set[ObjectKey]:
    """Return the Environments in the claim's namespace that reference the claim.

    Args:
        claim: The DeploymentTargetClaim that changed
        lister: Source of Environment listings

    Returns:
        Keys of the Environments to reconcile (possibly empty)
    """
    if claim.get("kind") != KIND_DEPLOYMENT_TARGET_CLAIM:
        logger.error(f"Incompatible object in the Environment mapping function, "
                     f"expected a {KIND_DEPLOYMENT_TARGET_CLAIM}, got {claim.get('kind')}")
        metrics.mapped_requests_total.labels(source_kind=KIND_DEPLOYMENT_TARGET_CLAIM, result="wrong_kind").inc()
        return set()

    claim_key = object_key(claim)
    with trace_span("map_claim_to_environments", kind=KIND_DEPLOYMENT_TARGET_CLAIM, attributes={"claim.key": str(claim_key)}):
        environments = _list_or_none(lister, KIND_ENVIRONMENT, claim_key.namespace, KIND_DEPLOYMENT_TARGET_CLAIM)
        if environments is None:
            return set()

        keys = _environments_for_claims(environments, {claim_key.name})
        metrics.mapped_requests_total.labels(source_kind=KIND_DEPLOYMENT_TARGET_CLAIM, result="mapped").inc(len(keys))
        return keys


def map_target_to_environments(target: dict[str, Any], lister: ResourceLister) -> set[ObjectKey]:
    """Return the Environments whose claim is bound to the target.

    A claim is considered associated with the target when the claim names the
    target in spec.targetName, or when the target names the claim in
    spec.claimRef. Both conventions are honoured.

    Args:
        target: The DeploymentTarget that changed
        lister: Source of claim and Environment listings

    Returns:
        Keys of the Environments to reconcile (possibly empty)
    """
    if target.get("kind") != KIND_DEPLOYMENT_TARGET:
        logger.error(f"Incompatible object in the Environment mapping function, "
                     f"expected a {KIND_DEPLOYMENT_TARGET}, got {target.get('kind')}")
        metrics.mapped_requests_total.labels(source_kind=KIND_DEPLOYMENT_TARGET, result="wrong_kind").inc()
        return set()

    target_key = object_key(target)
    claim_ref = (target.get("spec") or {}).get("claimRef")

    with trace_span("map_target_to_environments", kind=KIND_DEPLOYMENT_TARGET, attributes={"target.key": str(target_key)}):
        claims = _list_or_none(lister, KIND_DEPLOYMENT_TARGET_CLAIM, target_key.namespace, KIND_DEPLOYMENT_TARGET)
        if claims is None:
            return set()

        claim_names = set()
        for claim in claims:
            claim_name = claim.get("metadata", {}).get("name")
            if (claim.get("spec") or {}).get("targetName") == target_key.name or (claim_ref and claim_ref == claim_name):
                claim_names.add(claim_name)
        if not claim_names:
            return set()

        environments = _list_or_none(lister, KIND_ENVIRONMENT, target_key.namespace, KIND_DEPLOYMENT_TARGET)
        if environments is None:
            return set()

        keys = _environments_for_claims(environments, claim_names)
        metrics.mapped_requests_total.labels(source_kind=KIND_DEPLOYMENT_TARGET, result="mapped").inc(len(keys))
        return keys
