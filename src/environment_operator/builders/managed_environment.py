"""Builder for GitOpsDeploymentManagedEnvironment resources."""

from __future__ import annotations

from typing import Any

from ..constants import (
    API_GROUP_VERSION,
    KIND_ENVIRONMENT,
    KIND_MANAGED_ENVIRONMENT,
    MANAGED_ENVIRONMENT_PREFIX,
    MANAGED_GITOPS_GROUP_VERSION,
)


def managed_environment_name(environment_name: str) -> str:
    return MANAGED_ENVIRONMENT_PREFIX + environment_name


def create_managed_environment_spec(
    api_url: str,
    credentials_secret: str,
    allow_insecure_skip_tls_verify: bool = False,
) -> dict[str, Any]:
    """Create the spec of a managed environment.

    Args:
        api_url: API server URL of the target cluster
        credentials_secret: Name of the Secret holding the cluster credentials
        allow_insecure_skip_tls_verify: Skip TLS verification of the API server

    Returns:
        Spec dict in the GitOpsDeploymentManagedEnvironment wire format
    """
    return {
        "apiURL": api_url,
        "credentialsSecret": credentials_secret,
        "allowInsecureSkipTLSVerify": allow_insecure_skip_tls_verify,
    }


def create_empty_managed_environment(environment_name: str, namespace: str) -> dict[str, Any]:
    """Create a managed environment carrying only its identity."""
    return {
        "apiVersion": MANAGED_GITOPS_GROUP_VERSION,
        "kind": KIND_MANAGED_ENVIRONMENT,
        "metadata": {
            "name": managed_environment_name(environment_name),
            "namespace": namespace,
        },
    }


def create_desired_managed_environment(
    environment: dict[str, Any],
    spec: dict[str, Any],
) -> dict[str, Any]:
    """Create the managed environment an Environment should own.

    The Environment is set as owner so the garbage collector removes the
    managed environment along with it.

    Args:
        environment: Owning Environment resource body
        spec: Managed environment spec (see create_managed_environment_spec)

    Returns:
        Complete GitOpsDeploymentManagedEnvironment body
    """
    metadata = environment.get("metadata", {})
    managed_env = create_empty_managed_environment(metadata["name"], metadata["namespace"])
    managed_env["metadata"]["ownerReferences"] = [
        {
            "apiVersion": API_GROUP_VERSION,
            "kind": KIND_ENVIRONMENT,
            "name": metadata["name"],
            "uid": metadata.get("uid", ""),
        }
    ]
    managed_env["spec"] = spec
    return managed_env


SPEC_DEFAULTS = {
    "apiURL": "",
    "credentialsSecret": "",
    "allowInsecureSkipTLSVerify": False,
}


def managed_environment_spec_equal(current: dict[str, Any] | None, desired: dict[str, Any] | None) -> bool:
    """Compare two managed environment specs.

    Fields the API server drops when they hold their zero value are treated
    as equal to that zero value; any other difference counts.
    """
    return {**SPEC_DEFAULTS, **(current or {})} == {**SPEC_DEFAULTS, **(desired or {})}
