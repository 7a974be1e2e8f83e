"""Kubernetes-backed resource store.

Thin wrapper around ``CustomObjectsApi`` and ``CoreV1Api`` that speaks plain
dicts, turns HTTP 404 into :class:`ResourceNotFoundError` and records API call
metrics. Nothing is cached: every call goes to the API server.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, NamedTuple

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException

from .. import metrics
from ..constants import ANNOTATION_RECONCILE_REQUESTED, FIELD_MANAGER, KIND_ENVIRONMENT, RESOURCE_PLURALS
from ..exceptions import ResourceNotFoundError

logger = logging.getLogger(__name__)


class ObjectKey(NamedTuple):
    """Namespace/name identity of a namespaced object."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


def object_key(obj: dict[str, Any]) -> ObjectKey:
    """Build the key of an object from its metadata."""
    metadata = obj.get("metadata", {})
    return ObjectKey(metadata.get("namespace", ""), metadata.get("name", ""))


def _resource_coordinates(kind: str) -> tuple[str, str, str]:
    try:
        return RESOURCE_PLURALS[kind]
    except KeyError:
        raise ValueError(f"Unsupported resource kind: {kind}") from None


class ResourceStore:
    """Get/list/create/update access to the resources the operator works with."""

    def __init__(
        self,
        custom_api: client.CustomObjectsApi,
        core_api: client.CoreV1Api,
        request_timeout: float | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            custom_api: Client for custom resources
            core_api: Client for core resources (secrets, namespaces)
            request_timeout: Per-request timeout in seconds
        """
        self.custom_api = custom_api
        self.core_api = core_api
        self.request_timeout = request_timeout
        self._serializer = client.ApiClient()

    def _call(self, operation: str, func: Callable[..., Any], **kwargs: Any) -> Any:
        if self.request_timeout is not None:
            kwargs["_request_timeout"] = self.request_timeout
        start_time = time.time()
        try:
            result = func(**kwargs)
            metrics.api_call_total.labels(operation=operation, result="success").inc()
            return result
        except ApiException as e:
            result_label = "not_found" if e.status == 404 else "error"
            metrics.api_call_total.labels(operation=operation, result=result_label).inc()
            raise
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(operation=operation).observe(duration)

    def get(self, kind: str, namespace: str, name: str) -> dict[str, Any]:
        """Fetch a custom resource.

        Raises:
            ResourceNotFoundError: If the object does not exist
            ApiException: On any other API error
        """
        group, version, plural = _resource_coordinates(kind)
        try:
            return self._call(
                f"get_{plural}",
                self.custom_api.get_namespaced_custom_object,
                group=group,
                version=version,
                namespace=namespace,
                plural=plural,
                name=name,
            )
        except ApiException as e:
            if e.status == 404:
                raise ResourceNotFoundError(kind, namespace, name) from e
            raise

    def list(self, kind: str, namespace: str) -> list[dict[str, Any]]:
        """List the custom resources of a kind in a namespace."""
        group, version, plural = _resource_coordinates(kind)
        result = self._call(
            f"list_{plural}",
            self.custom_api.list_namespaced_custom_object,
            group=group,
            version=version,
            namespace=namespace,
            plural=plural,
        )
        return result.get("items", [])

    def create(self, obj: dict[str, Any]) -> dict[str, Any]:
        group, version, plural = _resource_coordinates(obj["kind"])
        return self._call(
            f"create_{plural}",
            self.custom_api.create_namespaced_custom_object,
            group=group,
            version=version,
            namespace=obj["metadata"]["namespace"],
            plural=plural,
            body=obj,
            field_manager=FIELD_MANAGER,
        )

    def update(self, obj: dict[str, Any]) -> dict[str, Any]:
        """Replace an object.

        The body must carry the ``metadata.resourceVersion`` it was read with, so
        a concurrent write is rejected by the API server with 409 Conflict.
        """
        group, version, plural = _resource_coordinates(obj["kind"])
        metadata = obj["metadata"]
        return self._call(
            f"update_{plural}",
            self.custom_api.replace_namespaced_custom_object,
            group=group,
            version=version,
            namespace=metadata["namespace"],
            plural=plural,
            name=metadata["name"],
            body=obj,
            field_manager=FIELD_MANAGER,
        )

    def update_status(self, obj: dict[str, Any]) -> dict[str, Any]:
        """Replace the status subresource of an object."""
        group, version, plural = _resource_coordinates(obj["kind"])
        metadata = obj["metadata"]
        return self._call(
            f"update_{plural}_status",
            self.custom_api.replace_namespaced_custom_object_status,
            group=group,
            version=version,
            namespace=metadata["namespace"],
            plural=plural,
            name=metadata["name"],
            body=obj,
            field_manager=FIELD_MANAGER,
        )

    def get_secret(self, namespace: str, name: str) -> dict[str, Any]:
        """Fetch a Secret.

        Raises:
            ResourceNotFoundError: If the secret does not exist
        """
        try:
            secret = self._call(
                "get_secret",
                self.core_api.read_namespaced_secret,
                name=name,
                namespace=namespace,
            )
        except ApiException as e:
            if e.status == 404:
                raise ResourceNotFoundError("Secret", namespace, name) from e
            raise
        return self._serializer.sanitize_for_serialization(secret)

    def get_namespace(self, name: str) -> dict[str, Any]:
        """Fetch a Namespace.

        Raises:
            ResourceNotFoundError: If the namespace does not exist
        """
        try:
            ns = self._call("get_namespace", self.core_api.read_namespace, name=name)
        except ApiException as e:
            if e.status == 404:
                raise ResourceNotFoundError("Namespace", "", name) from e
            raise
        return self._serializer.sanitize_for_serialization(ns)

    def request_reconcile(self, key: ObjectKey) -> None:
        """Ask for an Environment to be reconciled.

        Stamps an annotation on the Environment; the resulting update event is
        picked up by the Environment handlers like any other change.
        """
        group, version, plural = _resource_coordinates(KIND_ENVIRONMENT)
        body = {
            "metadata": {
                "annotations": {
                    ANNOTATION_RECONCILE_REQUESTED: datetime.now(timezone.utc).isoformat(),
                },
            },
        }
        self._call(
            f"patch_{plural}",
            self.custom_api.patch_namespaced_custom_object,
            group=group,
            version=version,
            namespace=key.namespace,
            plural=plural,
            name=key.name,
            body=body,
            field_manager=FIELD_MANAGER,
        )


def get_resource_store(request_timeout: float | None = None) -> ResourceStore:
    """Build a ResourceStore from in-cluster config, falling back to kubeconfig."""
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()

    return ResourceStore(client.CustomObjectsApi(), client.CoreV1Api(), request_timeout=request_timeout)
