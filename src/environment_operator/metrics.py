"""Prometheus metrics for the Environment Operator."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "environment_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_outcome_total = Counter(
    "environment_operator_reconcile_outcome_total",
    "Total number of completed reconciliations by what they did",
    ["kind", "outcome"],
)

reconcile_duration_seconds = Histogram(
    "environment_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
)

error_total = Counter(
    "environment_operator_error_total",
    "Total number of reconciliation errors",
    ["kind", "error_type"],
)

# Managed environment writes
managed_environment_operations_total = Counter(
    "environment_operator_managed_environment_operations_total",
    "Total number of GitOpsDeploymentManagedEnvironment writes",
    ["operation", "result"],
)

# Spec drift between stored and desired managed environments
drift_detected_total = Counter(
    "environment_operator_drift_detected_total",
    "Total number of configuration drift detections",
    ["kind"],
)

# Event mapping
mapped_requests_total = Counter(
    "environment_operator_mapped_requests_total",
    "Reconcile requests produced from DeploymentTargetClaim/DeploymentTarget events",
    ["source_kind", "result"],
)

# API call metrics
api_call_total = Counter(
    "environment_operator_api_call_total",
    "Total number of Kubernetes API calls",
    ["operation", "result"],
)

api_call_duration_seconds = Histogram(
    "environment_operator_api_call_duration_seconds",
    "Duration of Kubernetes API calls in seconds",
    ["operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)
