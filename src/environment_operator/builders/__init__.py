"""Builders that turn CRD specs into operator configuration objects."""

from .environment import (
    ClaimConfiguration,
    CredentialsConfiguration,
    EnvironmentConfiguration,
    NoConfiguration,
    get_deployment_target_claim_name,
    parse_environment_configuration,
)
from .managed_environment import (
    create_desired_managed_environment,
    create_empty_managed_environment,
    create_managed_environment_spec,
    managed_environment_name,
    managed_environment_spec_equal,
)

__all__ = [
    "ClaimConfiguration",
    "CredentialsConfiguration",
    "EnvironmentConfiguration",
    "NoConfiguration",
    "get_deployment_target_claim_name",
    "parse_environment_configuration",
    "create_desired_managed_environment",
    "create_empty_managed_environment",
    "create_managed_environment_spec",
    "managed_environment_name",
    "managed_environment_spec_equal",
]
