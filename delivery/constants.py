"""Constants used throughout the notification engine."""

# HTTP Headers
REQUEST_ID_HEADER = "X-Request-ID"
SERVICE_KEY_HEADER = "X-Service-Key"
SENDGRID_MESSAGE_ID_HEADER = "X-Message-Id"

# Provider names recorded in the delivery log
PROVIDER_SENDGRID = "sendgrid"
PROVIDER_FCM = "fcm"
PROVIDER_RELAY = "relay"

# Retry defaults
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_BASE_DELAY = 1.0  # seconds, multiplied by the attempt number

# Per-HTTP-call timeout in seconds
DEFAULT_HTTP_TIMEOUT = 10.0

# Error text that marks a direct call as blocked by the calling environment
TRANSPORT_FALLBACK_SIGNATURES = (
    "cors",
    "cross-origin",
    "access-control",
    "failed to fetch",
    "networkerror",
)
