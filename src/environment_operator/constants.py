"""Constants for the Environment Operator."""

# API Groups
API_GROUP = "appstudio.redhat.com"
API_VERSION = "v1alpha1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

MANAGED_GITOPS_GROUP = "managed-gitops.redhat.com"
MANAGED_GITOPS_VERSION = "v1alpha1"
MANAGED_GITOPS_GROUP_VERSION = f"{MANAGED_GITOPS_GROUP}/{MANAGED_GITOPS_VERSION}"

# Resource Kinds
KIND_ENVIRONMENT = "Environment"
KIND_DEPLOYMENT_TARGET_CLAIM = "DeploymentTargetClaim"
KIND_DEPLOYMENT_TARGET = "DeploymentTarget"
KIND_SNAPSHOT_ENVIRONMENT_BINDING = "SnapshotEnvironmentBinding"
KIND_MANAGED_ENVIRONMENT = "GitOpsDeploymentManagedEnvironment"

# kind -> (group, version, plural)
RESOURCE_PLURALS = {
    KIND_ENVIRONMENT: (API_GROUP, API_VERSION, "environments"),
    KIND_DEPLOYMENT_TARGET_CLAIM: (API_GROUP, API_VERSION, "deploymenttargetclaims"),
    KIND_DEPLOYMENT_TARGET: (API_GROUP, API_VERSION, "deploymenttargets"),
    KIND_SNAPSHOT_ENVIRONMENT_BINDING: (API_GROUP, API_VERSION, "snapshotenvironmentbindings"),
    KIND_MANAGED_ENVIRONMENT: (MANAGED_GITOPS_GROUP, MANAGED_GITOPS_VERSION, "gitopsdeploymentmanagedenvironments"),
}

# Managed environment naming
MANAGED_ENVIRONMENT_PREFIX = "managed-environment-"

# DeploymentTargetClaim phases
DTC_PHASE_PENDING = "Pending"
DTC_PHASE_BOUND = "Bound"
DTC_PHASE_LOST = "Lost"

# Annotations
ANNOTATION_RECONCILE_REQUESTED = f"environment-operator.{API_GROUP}/reconcile-requested-at"

# Field Manager
FIELD_MANAGER = "environment-operator"
CONTROLLER_NAME = "environment-operator"

# SnapshotEnvironmentBinding condition types and reasons
COND_BINDING_ERROR_OCCURRED = "ErrorOccurred"
REASON_BINDING_ERROR_OCCURRED = "ErrorOccurred"

# Condition statuses
COND_STATUS_TRUE = "True"
COND_STATUS_FALSE = "False"
COND_STATUS_UNKNOWN = "Unknown"

# Audit operations
RESOURCE_CREATED = "Created"
RESOURCE_MODIFIED = "Modified"

# Event Reasons
EVENT_REASON_RECONCILE_STARTED = "ReconcileStarted"
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_VALIDATE_FAILED = "ValidateFailed"
EVENT_REASON_MANAGED_ENV_CREATED = "ManagedEnvironmentCreated"
EVENT_REASON_MANAGED_ENV_UPDATED = "ManagedEnvironmentUpdated"
