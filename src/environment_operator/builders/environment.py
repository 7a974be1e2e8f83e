"""Parsing of the Environment spec into a configuration variant.

An Environment targets a cluster in one of two ways: it names a
DeploymentTargetClaim, or it embeds cluster credentials directly. The raw spec
allows both to be set; this module turns that shape into exactly one of the
variants below and rejects the ambiguous case.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from ..exceptions import InvalidConfigurationError


@dataclass(frozen=True)
class ClaimConfiguration:
    """The Environment deploys to whatever target is bound to a claim."""

    claim_name: str


@dataclass(frozen=True)
class CredentialsConfiguration:
    """The Environment carries its own cluster credentials."""

    api_url: str
    cluster_credentials_secret: str
    allow_insecure_skip_tls_verify: bool = False


@dataclass(frozen=True)
class NoConfiguration:
    """Neither a claim nor credentials are configured."""


EnvironmentConfiguration = Union[ClaimConfiguration, CredentialsConfiguration, NoConfiguration]


def get_deployment_target_claim_name(environment: dict[str, Any]) -> str:
    """Return spec.configuration.target.deploymentTargetClaim.claimName, or ""."""
    spec = environment.get("spec") or {}
    target = (spec.get("configuration") or {}).get("target") or {}
    claim = target.get("deploymentTargetClaim") or {}
    return claim.get("claimName") or ""


def parse_environment_configuration(environment: dict[str, Any]) -> EnvironmentConfiguration:
    """Determine how an Environment reaches its cluster.

    Args:
        environment: Environment resource body

    Returns:
        One of ClaimConfiguration, CredentialsConfiguration or NoConfiguration

    Raises:
        InvalidConfigurationError: If both a claim and credentials are set
    """
    spec = environment.get("spec") or {}
    claim_name = get_deployment_target_claim_name(environment)
    unstable_fields = spec.get("unstableConfigurationFields")

    if claim_name and unstable_fields is not None:
        name = environment.get("metadata", {}).get("name", "unknown")
        raise InvalidConfigurationError(
            f"environment {name} is invalid since it cannot have both "
            "DeploymentTargetClaim and credentials configuration set"
        )

    if claim_name:
        return ClaimConfiguration(claim_name=claim_name)

    if unstable_fields is not None:
        credentials = unstable_fields.get("kubernetesCredentials") or {}
        return CredentialsConfiguration(
            api_url=credentials.get("apiURL", ""),
            cluster_credentials_secret=credentials.get("clusterCredentialsSecret", ""),
            allow_insecure_skip_tls_verify=bool(credentials.get("allowInsecureSkipTLSVerify", False)),
        )

    return NoConfiguration()
