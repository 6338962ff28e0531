"""Enumerations for the delivery app."""

from delivery.enums.channel import Channel, DeliveryStatus, ErrorKind, RuntimeKind

__all__ = ["Channel", "DeliveryStatus", "ErrorKind", "RuntimeKind"]
