"""Environment Operator: keeps GitOpsDeploymentManagedEnvironments in sync with Environments."""

__version__ = "0.1.0"
