"""
Event Types for the Tracker

Defines the closed set of event type codes sent as the ``e`` field and the
platforms the collector accepts as the ``p`` field.
"""

from enum import Enum


class EventType(Enum):
    """Allowed event types for tracking."""

    PAGE_VIEW = "pv"
    STRUCTURED = "se"
    UNSTRUCTURED = "ue"

    # E-commerce events
    TRANSACTION = "tr"
    TRANSACTION_ITEM = "ti"

    @classmethod
    def is_valid(cls, event_type: str) -> bool:
        """Check if an event type string is valid."""
        try:
            cls(event_type)
            return True
        except ValueError:
            return False

    @classmethod
    def get_allowed_types(cls) -> set[str]:
        """Get all allowed event type strings."""
        return {e.value for e in cls}


class Platform(Enum):
    """Platforms supported by the collector."""

    PC = "pc"
    TV = "tv"
    MOBILE = "mob"
    CONSOLE = "cnsl"
    IOT = "iot"

    @classmethod
    def is_supported(cls, platform: str) -> bool:
        try:
            cls(platform)
            return True
        except ValueError:
            return False

    @classmethod
    def get_supported(cls) -> set[str]:
        return {p.value for p in cls}
