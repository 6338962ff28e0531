"""Services for the delivery app."""

from delivery.services.retry import RetryController, with_retry
from delivery.services.transport import RuntimeEnvironment, decide

# Note: services that touch models (orchestrator, notification_service,
# template_resolver, delivery_log_store) are not exported here to avoid
# importing models before the app registry is ready. Import directly from
# the module.

__all__ = [
    "RetryController",
    "RuntimeEnvironment",
    "decide",
    "with_retry",
]
