# gputest - Test Parameters
"""
Value lists and wrapper types for parameterized tests.

Parameters carry a display label so generated test names stay readable,
e.g. ``Resize/0 (CV_8UC3, sub matrix, INTER_LINEAR)``. Wrappers never
convert implicitly: read ``.value`` explicitly.

Algorithm codes (norm kinds, interpolation, border modes, warp flags) are
opaque integers here. They are only labelled for display and passed
through unchanged to the code under test.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Any, Generic, Iterable, TypeVar

import cv2

from .constants import DIFFERENT_SIZE_VALUES
from .mat_type import Size

T = TypeVar('T')


@dataclass(frozen=True)
class NamedValue(Generic[T]):
    """A primitive parameter with a display label."""
    value: T
    label: str

    def __bool__(self) -> bool:
        raise TypeError(f"{self.label!r} has no truth value; read .value explicitly")

    def __str__(self) -> str:
        return self.label


def named(name: str, value: T) -> NamedValue[T]:
    """Wrap a value displayed as ``name(value)``, e.g. ``Channels(3)``."""
    return NamedValue(value, f"{name}({value!r})")


def use_roi(flag: bool = False) -> NamedValue[bool]:
    """Whether a test runs on a ROI view or a whole buffer."""
    return NamedValue(flag, "sub matrix" if flag else "whole matrix")


def inverse(flag: bool = False) -> NamedValue[bool]:
    """Direction of a transform."""
    return NamedValue(flag, "inverse" if flag else "direct")


def channels(count: int) -> NamedValue[int]:
    return named("Channels", count)


WHOLE_SUBMAT = [use_roi(False), use_roi(True)]
DIRECT_INVERSE = [inverse(False), inverse(True)]
ALL_CHANNELS = [channels(cn) for cn in (1, 2, 3, 4)]
IMAGE_CHANNELS = [channels(cn) for cn in (1, 3, 4)]
DIFFERENT_SIZES = [Size(w, h) for w, h in DIFFERENT_SIZE_VALUES]


@dataclass(frozen=True)
class CodeTag:
    """An opaque integer code with its symbolic name."""
    value: int
    name: str

    def __str__(self) -> str:
        return self.name


class CodeFamily:
    """A named set of opaque codes, e.g. all border modes.

    Args:
        name: Family name
        members: Mapping of code name to value, in display order
        flags: Values combine bitwise; unknown values display as the
            ``|``-joined names of their set flags
    """

    def __init__(self, name: str, members: dict[str, int], flags: bool = False):
        self.name = name
        self.flags = flags
        self._members = [CodeTag(int(value), key) for key, value in members.items()]

    def __call__(self, value: int) -> CodeTag:
        """Tag a code value of this family."""
        value = int(value)
        for tag in self._members:
            if tag.value == value:
                return tag
        if self.flags:
            return CodeTag(value, self._flag_name(value))
        raise ValueError(f"Unknown {self.name} code: {value}")

    def _flag_name(self, value: int) -> str:
        names = []
        remaining = value
        for tag in sorted(self._members, key=lambda t: t.value, reverse=True):
            if tag.value and remaining & tag.value == tag.value:
                names.append(tag.name)
                remaining &= ~tag.value
        if not names:
            zero = [tag.name for tag in self._members if tag.value == 0]
            names = zero[:1]
        names.reverse()
        if remaining:
            names.append(hex(remaining))
        return "|".join(names)

    def all(self) -> list[CodeTag]:
        return list(self._members)

    def __iter__(self):
        return iter(self._members)

    def __repr__(self) -> str:
        return f"CodeFamily({self.name!r}, {len(self._members)} codes)"


NormCode = CodeFamily("NormCode", {
    "NORM_INF": cv2.NORM_INF,
    "NORM_L1": cv2.NORM_L1,
    "NORM_L2": cv2.NORM_L2,
    "NORM_TYPE_MASK": cv2.NORM_TYPE_MASK,
    "NORM_RELATIVE": cv2.NORM_RELATIVE,
    "NORM_MINMAX": cv2.NORM_MINMAX,
})

Interpolation = CodeFamily("Interpolation", {
    "INTER_NEAREST": cv2.INTER_NEAREST,
    "INTER_LINEAR": cv2.INTER_LINEAR,
    "INTER_CUBIC": cv2.INTER_CUBIC,
    "INTER_AREA": cv2.INTER_AREA,
})

BorderType = CodeFamily("BorderType", {
    "BORDER_REFLECT101": cv2.BORDER_REFLECT101,
    "BORDER_REPLICATE": cv2.BORDER_REPLICATE,
    "BORDER_CONSTANT": cv2.BORDER_CONSTANT,
    "BORDER_REFLECT": cv2.BORDER_REFLECT,
    "BORDER_WRAP": cv2.BORDER_WRAP,
})

WarpFlags = CodeFamily("WarpFlags", {
    "INTER_NEAREST": cv2.INTER_NEAREST,
    "INTER_LINEAR": cv2.INTER_LINEAR,
    "INTER_CUBIC": cv2.INTER_CUBIC,
    "WARP_INVERSE_MAP": cv2.WARP_INVERSE_MAP,
}, flags=True)

ALL_BORDER_TYPES = BorderType.all()


class ParamTuple(tuple):
    """Parameter tuple of one test instance.

    Compares like a tuple; displays its elements by label.
    """

    def __new__(cls, *values: Any):
        return super().__new__(cls, values)

    def __str__(self) -> str:
        return "(" + ", ".join(param_id(v) for v in self) + ")"

    def __repr__(self) -> str:
        return f"ParamTuple{tuple.__repr__(self)}"


def combine(*value_lists: Iterable[Any]) -> list[ParamTuple]:
    """Cross product of value lists; the first list varies slowest."""
    return [ParamTuple(*values) for values in itertools.product(*value_lists)]


def param_id(value: Any) -> str:
    """Display label of a parameter, usable as a pytest id."""
    if isinstance(value, tuple) and not isinstance(value, (ParamTuple, Size)):
        return "(" + ", ".join(param_id(v) for v in value) + ")"
    return str(value)


__all__ = [
    'NamedValue',
    'named',
    'use_roi',
    'inverse',
    'channels',
    'WHOLE_SUBMAT',
    'DIRECT_INVERSE',
    'ALL_CHANNELS',
    'IMAGE_CHANNELS',
    'DIFFERENT_SIZES',
    'CodeTag',
    'CodeFamily',
    'NormCode',
    'Interpolation',
    'BorderType',
    'WarpFlags',
    'ALL_BORDER_TYPES',
    'ParamTuple',
    'combine',
    'param_id',
]
