"""Exception types raised by a11ylocate."""

from __future__ import annotations


class A11yLocateError(Exception):
    """Base class for all a11ylocate errors."""


class ConfigError(A11yLocateError):
    """Raised when a11ylocate.toml holds an invalid value."""


class InputError(A11yLocateError):
    """Raised when a findings file cannot be loaded."""


class DetectionInProgressError(A11yLocateError):
    """Raised when a detection is started twice for the same finding."""

    def __init__(self, finding_id: str):
        super().__init__(f"Detection already running for finding {finding_id!r}")
        self.finding_id = finding_id


class ChangeMetadataError(A11yLocateError):
    """Raised when change metadata cannot be assembled for an item."""
