"""
Precondition checks for tracker inputs.

A failed check raises ``ContractError`` before any payload is built or sent.
Checks can be switched off per tracker instance.
"""

from numbers import Number
from typing import Any, Mapping, Optional

from .constants import RESERVED_KEYS
from .event_types import Platform


class ContractError(ValueError):
    """Raised when a tracker input violates a precondition."""


class ContractManager:
    """Runs input checks for one tracker instance."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def _fail(self, message: str) -> None:
        if self.enabled:
            raise ContractError(message)

    def non_empty_string(self, value: Optional[str], name: str) -> None:
        if not isinstance(value, str) or not value:
            self._fail(f"'{name}' must be a non-empty string, got {value!r}")

    def non_empty_dict(self, value: Optional[Mapping[str, Any]], name: str) -> None:
        if not isinstance(value, Mapping) or not value:
            self._fail(f"'{name}' must be a non-empty mapping, got {value!r}")

    def required_number(self, value: Any, name: str) -> None:
        # bool is a Number subclass but never a meaningful event value
        if isinstance(value, bool) or not isinstance(value, Number):
            self._fail(f"'{name}' must be a number, got {value!r}")

    def positive_number(self, value: Any, name: str, allow_zero: bool = False) -> None:
        self.required_number(value, name)
        if isinstance(value, Number) and not isinstance(value, bool):
            if value < 0 or (value == 0 and not allow_zero):
                self._fail(f"'{name}' must be positive, got {value!r}")

    def supported_platform(self, platform: Optional[str]) -> None:
        if not Platform.is_supported(platform):
            supported = ", ".join(sorted(Platform.get_supported()))
            self._fail(f"Unsupported platform {platform!r}, expected one of: {supported}")

    def non_reserved_key(self, key: Optional[str]) -> None:
        """Reject wire schema keys. Enforced even when checks are disabled."""
        if not isinstance(key, str) or not key:
            raise ContractError(f"Parameter key must be a non-empty string, got {key!r}")
        if key in RESERVED_KEYS:
            raise ContractError(f"'{key}' is a reserved payload key")
