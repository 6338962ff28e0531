"""Delivery channel, status and error classification enumerations."""

from enum import Enum


class Channel(str, Enum):
    """Notification delivery channels supported by the engine."""

    EMAIL = "email"
    PUSH = "push"


class DeliveryStatus(str, Enum):
    """Final status written to a delivery log row."""

    SENT = "sent"
    FAILED = "failed"


class ErrorKind(str, Enum):
    """Failure classification for a delivery outcome.

    CONFIG and RESOLUTION are detected before any network call and are
    never retried. TRANSPORT and PROVIDER come from the network path and
    are retryable.
    """

    CONFIG = "config"
    RESOLUTION = "resolution"
    TRANSPORT = "transport"
    PROVIDER = "provider"

    @property
    def retryable(self) -> bool:
        """Whether an outcome of this kind may be attempted again."""
        return self in (ErrorKind.TRANSPORT, ErrorKind.PROVIDER)


class RuntimeKind(str, Enum):
    """Calling environments the transport detector distinguishes."""

    SERVER = "server"
    BROWSER = "browser"
    NATIVE = "native"
