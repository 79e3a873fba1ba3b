"""Error kinds raised by the harness.

Mismatch errors derive from ``AssertionError`` so a test runner reports them
as failures rather than errors.
"""

from __future__ import annotations

from typing import Any


class DeviceIndexError(IndexError):
    """A device index outside the range of detected devices."""

    def __init__(self, index: int, count: int):
        self.index = index
        self.count = count
        super().__init__(f"Device index {index} is out of range: {count} device(s) detected")


class ShapeMismatchError(AssertionError):
    """Two buffers differ in size or element type."""


class ValueMismatchError(AssertionError):
    """Two values differ by more than the allowed tolerance."""

    def __init__(self, message: str, location: Any = None, channel: int | None = None,
                 diff: float = 0.0, eps: float = 0.0):
        super().__init__(message)
        self.location = location
        self.channel = channel
        self.diff = diff
        self.eps = eps


class UnsupportedFeatureError(Exception):
    """A device lacks a feature, or the build lacks support for it.

    Not a failure: the affected test case should be skipped.
    """

    def __init__(self, feature: Any, device: Any = None):
        self.feature = feature
        self.device = device
        where = f" on {device}" if device is not None else ""
        super().__init__(f"Feature {feature!s} is not supported{where}")


class KeypointMismatchError(AssertionError):
    """Keypoint sets without a full bidirectional correspondence."""

    def __init__(self, message: str, missing_in_actual: list | None = None,
                 missing_in_gold: list | None = None):
        super().__init__(message)
        self.missing_in_actual = missing_in_actual or []
        self.missing_in_gold = missing_in_gold or []


__all__ = [
    'DeviceIndexError',
    'ShapeMismatchError',
    'ValueMismatchError',
    'UnsupportedFeatureError',
    'KeypointMismatchError',
]
