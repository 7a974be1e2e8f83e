"""Handler modules for CRD resources."""

# Import handlers to register them - all handlers register themselves via @kopf decorators
from . import deployment_target  # noqa: F401
from . import environment  # noqa: F401
