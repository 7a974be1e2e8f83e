"""Handler for Environment CRD.

Keeps a GitOpsDeploymentManagedEnvironment in line with every Environment
that resolves to cluster credentials, either directly or through a bound
DeploymentTargetClaim.
"""

from __future__ import annotations

import enum
import os
from typing import Any

import kopf

from .. import metrics
from ..builders.managed_environment import managed_environment_name, managed_environment_spec_equal
from ..constants import (
    API_GROUP_VERSION,
    KIND_ENVIRONMENT,
    KIND_MANAGED_ENVIRONMENT,
    RESOURCE_CREATED,
    RESOURCE_MODIFIED,
)
from ..exceptions import DependencyNotFoundError, InvalidConfigurationError, ResourceNotFoundError
from ..logging import log_resource_change
from ..services.store import ObjectKey, ResourceStore
from ..tracing import trace_span
from ..utils.errors import sanitize_exception
from ..utils.events import emit_managed_environment_created, emit_managed_environment_updated
from ..utils.namespaces import is_namespace_being_deleted
from .base import BaseHandler
from .desired_state import resolve_desired_managed_environment

RESYNC_INTERVAL_SECONDS = float(os.getenv("RESYNC_INTERVAL_SECONDS", "300"))
DEPENDENCY_RETRY_DELAY_SECONDS = float(os.getenv("DEPENDENCY_RETRY_DELAY_SECONDS", "30"))


class ReconcileResult(enum.Enum):
    """Outcome of a single Environment reconciliation."""

    SKIPPED_NAMESPACE_DELETING = "skipped_namespace_deleting"
    ENVIRONMENT_NOT_FOUND = "environment_not_found"
    NOT_READY = "not_ready"
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class EnvironmentHandler(BaseHandler):
    """Handler for Environment resources."""

    validation_errors = (InvalidConfigurationError,)

    def __init__(self):
        """Initialize environment handler."""
        super().__init__(KIND_ENVIRONMENT)

    def reconcile(self, store: ResourceStore, key: ObjectKey) -> ReconcileResult:
        """Reconcile the managed environment of one Environment.

        Every call re-reads the Environment, its dependencies and the current
        managed environment from the store, so it is safe to repeat.

        Args:
            store: Resource store
            key: Namespace and name of the Environment

        Returns:
            What the reconciliation did

        Raises:
            InvalidConfigurationError: The Environment cannot be resolved as configured
            DependencyNotFoundError: A referenced claim or secret is missing
            ApiException: Any other API error, including 409 Conflict on update
        """
        with trace_span("reconcile_environment", kind=KIND_ENVIRONMENT, attributes={"environment.key": str(key)}):
            if is_namespace_being_deleted(store, key.namespace):
                return ReconcileResult.SKIPPED_NAMESPACE_DELETING

            try:
                environment = store.get(KIND_ENVIRONMENT, key.namespace, key.name)
            except ResourceNotFoundError:
                # The owner reference on the managed environment takes care of cleanup.
                self.log_info(
                    {"name": key.name, "namespace": key.namespace},
                    "Environment resource no longer exists",
                    reason="NotFound",
                )
                return ReconcileResult.ENVIRONMENT_NOT_FOUND

            meta = environment.get("metadata", {})

            try:
                desired = resolve_desired_managed_environment(store, environment)
            except InvalidConfigurationError as e:
                self.handle_validation_error(environment, e)

            if desired is None:
                return ReconcileResult.NOT_READY

            managed_name = managed_environment_name(key.name)
            try:
                current = store.get(KIND_MANAGED_ENVIRONMENT, key.namespace, managed_name)
            except ResourceNotFoundError:
                return self._create(store, environment, desired)

            if managed_environment_spec_equal(current.get("spec"), desired["spec"]):
                return ReconcileResult.UNCHANGED

            metrics.drift_detected_total.labels(kind=KIND_MANAGED_ENVIRONMENT).inc()
            self.log_info(
                meta,
                f"Updating {KIND_MANAGED_ENVIRONMENT} {managed_name} as a change was detected",
                reason="DriftDetected",
                managed_environment=managed_name,
            )
            current["spec"] = desired["spec"]
            return self._update(store, environment, current)

    def _create(
        self,
        store: ResourceStore,
        environment: dict[str, Any],
        desired: dict[str, Any],
    ) -> ReconcileResult:
        managed_name = desired["metadata"]["name"]
        try:
            store.create(desired)
        except Exception:
            metrics.managed_environment_operations_total.labels(operation="create", result="failed").inc()
            raise
        metrics.managed_environment_operations_total.labels(operation="create", result="success").inc()
        log_resource_change(self.logger, RESOURCE_CREATED, desired)
        self.log_info(
            environment.get("metadata", {}),
            f"Created {KIND_MANAGED_ENVIRONMENT} {managed_name}",
            reason="ManagedEnvironmentCreated",
            managed_environment=managed_name,
        )
        emit_managed_environment_created(environment, managed_name)
        return ReconcileResult.CREATED

    def _update(
        self,
        store: ResourceStore,
        environment: dict[str, Any],
        current: dict[str, Any],
    ) -> ReconcileResult:
        managed_name = current["metadata"]["name"]
        try:
            store.update(current)
        except Exception:
            metrics.managed_environment_operations_total.labels(operation="update", result="failed").inc()
            raise
        metrics.managed_environment_operations_total.labels(operation="update", result="success").inc()
        log_resource_change(self.logger, RESOURCE_MODIFIED, current)
        emit_managed_environment_updated(environment, managed_name)
        return ReconcileResult.UPDATED


def reconcile_environment(
    handler: EnvironmentHandler,
    store: ResourceStore,
    body: dict[str, Any],
) -> ReconcileResult:
    """Run a reconciliation and translate its errors for kopf.

    Invalid configuration becomes a permanent error: only an edit of the
    Environment (which triggers a new run) can fix it. Missing dependencies are
    retried after a delay, anything else propagates and kopf retries it with
    backoff.
    """
    meta = body.get("metadata", {})
    key = ObjectKey(meta.get("namespace", ""), meta.get("name", ""))
    try:
        result = handler.reconcile_with_metrics(body, lambda: handler.reconcile(store, key))
    except InvalidConfigurationError as e:
        raise kopf.PermanentError(sanitize_exception(e)) from e
    except DependencyNotFoundError as e:
        raise kopf.TemporaryError(sanitize_exception(e), delay=DEPENDENCY_RETRY_DELAY_SECONDS) from e

    metrics.reconcile_outcome_total.labels(kind=KIND_ENVIRONMENT, outcome=result.value).inc()
    return result


# Global handler instance
_handler = EnvironmentHandler()


@kopf.on.create(API_GROUP_VERSION, KIND_ENVIRONMENT)
@kopf.on.update(API_GROUP_VERSION, KIND_ENVIRONMENT)
@kopf.on.resume(API_GROUP_VERSION, KIND_ENVIRONMENT)
@kopf.timer(API_GROUP_VERSION, KIND_ENVIRONMENT, interval=RESYNC_INTERVAL_SECONDS, initial_delay=RESYNC_INTERVAL_SECONDS)
def handle_environment(
    body: kopf.Body,
    memo: kopf.Memo,
    **kwargs: Any,
) -> None:
    """Handle Environment resource reconciliation."""
    reconcile_environment(_handler, memo.store, dict(body))
