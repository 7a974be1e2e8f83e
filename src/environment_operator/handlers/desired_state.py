"""Resolution of the managed environment an Environment should own."""

from __future__ import annotations

import logging
from typing import Any

from ..builders.environment import (
    ClaimConfiguration,
    CredentialsConfiguration,
    parse_environment_configuration,
)
from ..builders.managed_environment import (
    create_desired_managed_environment,
    create_managed_environment_spec,
)
from ..constants import DTC_PHASE_BOUND, KIND_DEPLOYMENT_TARGET, KIND_DEPLOYMENT_TARGET_CLAIM
from ..exceptions import DependencyNotFoundError, InvalidConfigurationError, ResourceNotFoundError
from ..services.store import ResourceStore
from ..tracing import trace_span

logger = logging.getLogger(__name__)


def get_deployment_target_bound_to_claim(
    store: ResourceStore,
    claim: dict[str, Any],
) -> dict[str, Any] | None:
    """Find the DeploymentTarget bound to a DeploymentTargetClaim.

    The claim's spec.targetName wins when set. Otherwise the target whose
    spec.claimRef points back at the claim is used.

    Returns:
        The DeploymentTarget, or None if no target is bound to the claim
    """
    metadata = claim.get("metadata", {})
    namespace = metadata.get("namespace", "")
    claim_name = metadata.get("name", "")

    target_name = (claim.get("spec") or {}).get("targetName")
    if target_name:
        try:
            return store.get(KIND_DEPLOYMENT_TARGET, namespace, target_name)
        except ResourceNotFoundError:
            return None

    for target in store.list(KIND_DEPLOYMENT_TARGET, namespace):
        if (target.get("spec") or {}).get("claimRef") == claim_name:
            return target
    return None


def _spec_from_claim(store: ResourceStore, namespace: str, claim_name: str) -> dict[str, Any] | None:
    try:
        claim = store.get(KIND_DEPLOYMENT_TARGET_CLAIM, namespace, claim_name)
    except ResourceNotFoundError as e:
        raise DependencyNotFoundError(
            f"DeploymentTargetClaim '{claim_name}' referenced by the Environment was not found",
            KIND_DEPLOYMENT_TARGET_CLAIM,
            namespace,
            claim_name,
        ) from e

    phase = (claim.get("status") or {}).get("phase")
    if phase != DTC_PHASE_BOUND:
        logger.info(
            f"Waiting until DeploymentTargetClaim {namespace}/{claim_name} reaches the "
            f"{DTC_PHASE_BOUND} phase (current phase: {phase or 'unset'})"
        )
        return None

    target = get_deployment_target_bound_to_claim(store, claim)
    if target is None:
        raise InvalidConfigurationError(f"DeploymentTarget not found for DeploymentTargetClaim: {claim_name}")

    logger.info(f"Using the cluster credentials from DeploymentTarget {target['metadata']['name']}")
    credentials = (target.get("spec") or {}).get("kubernetesCredentials") or {}
    return create_managed_environment_spec(
        api_url=credentials.get("apiURL", ""),
        credentials_secret=credentials.get("clusterCredentialsSecret", ""),
        allow_insecure_skip_tls_verify=bool(credentials.get("allowInsecureSkipTLSVerify", False)),
    )


def resolve_desired_managed_environment(
    store: ResourceStore,
    environment: dict[str, Any],
) -> dict[str, Any] | None:
    """Compute the GitOpsDeploymentManagedEnvironment an Environment should own.

    Args:
        store: Resource store
        environment: Environment resource body, as fetched

    Returns:
        The desired managed environment, or None when there is nothing to
        manage yet (no configuration, or the claim is not bound)

    Raises:
        InvalidConfigurationError: Both claim and credentials are set, no target
            is bound to a bound claim, or no credentials secret is named
        DependencyNotFoundError: The claim or the credentials secret is missing
    """
    metadata = environment.get("metadata", {})
    namespace = metadata.get("namespace", "")
    name = metadata.get("name", "")

    with trace_span("resolve_desired_managed_environment", attributes={"environment.name": name}):
        configuration = parse_environment_configuration(environment)

        if isinstance(configuration, ClaimConfiguration):
            logger.info(f"Environment {namespace}/{name} is configured with a DeploymentTargetClaim")
            spec = _spec_from_claim(store, namespace, configuration.claim_name)
            if spec is None:
                return None
        elif isinstance(configuration, CredentialsConfiguration):
            logger.info(f"Using the cluster credentials specified in Environment {namespace}/{name}")
            spec = create_managed_environment_spec(
                api_url=configuration.api_url,
                credentials_secret=configuration.cluster_credentials_secret,
                allow_insecure_skip_tls_verify=configuration.allow_insecure_skip_tls_verify,
            )
        else:
            logger.info(
                f"Environment {namespace}/{name} has neither cluster credentials nor a "
                "DeploymentTargetClaim configured"
            )
            return None

        secret_name = spec["credentialsSecret"]
        if not secret_name:
            raise InvalidConfigurationError(f"environment {name} does not name a cluster credentials secret")
        try:
            store.get_secret(namespace, secret_name)
        except ResourceNotFoundError as e:
            raise DependencyNotFoundError(
                f"the secret '{secret_name}' referenced by the Environment resource was not found",
                "Secret",
                namespace,
                secret_name,
            ) from e

        return create_desired_managed_environment(environment, spec)
