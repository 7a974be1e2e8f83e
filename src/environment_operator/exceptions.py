"""Exception hierarchy for the Environment Operator."""

from __future__ import annotations


class EnvironmentOperatorError(Exception):
    """Base class for all operator errors."""


class ResourceNotFoundError(EnvironmentOperatorError):
    """Raised by the resource store when a requested object does not exist."""

    def __init__(self, kind: str, namespace: str, name: str):
        self.kind = kind
        self.namespace = namespace
        self.name = name
        super().__init__(f"{kind} '{name}' not found in namespace '{namespace}'")


class InvalidConfigurationError(EnvironmentOperatorError):
    """The Environment (or its claim/target binding) is misconfigured.

    Retrying cannot fix this; an external actor has to edit the resources.
    """


class DependencyNotFoundError(EnvironmentOperatorError):
    """A resource the Environment depends on (claim, secret) does not exist."""

    def __init__(self, message: str, kind: str, namespace: str, name: str):
        self.kind = kind
        self.namespace = namespace
        self.name = name
        super().__init__(message)
