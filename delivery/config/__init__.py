"""Configuration objects for the delivery app."""

from delivery.config.providers import DeliveryConfig, RelayConfig

__all__ = ["DeliveryConfig", "RelayConfig"]
