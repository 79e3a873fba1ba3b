# gputest - Element Types
"""
Element types and the type grid used for parameterized coverage.

An element type pairs an element kind (``Depth``) with a channel count
(1-4). The numbering follows OpenCV, so ``MatType.code`` is the value
``cv2.CV_8UC3`` and friends carry.

Example:
    from gputest.mat_type import Depth, MatType, all_types, types

    # All 28 (depth, channels) combinations, depth-major
    grid = all_types()

    # Only the 8-bit kinds with 1 or 3 channels
    subset = types(Depth.U8, Depth.S8, 1, 3)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from functools import lru_cache
from typing import NamedTuple

import numpy as np


class Depth(IntEnum):
    """Element kinds, numbered like OpenCV's depth codes."""
    U8 = 0
    S8 = 1
    U16 = 2
    S16 = 3
    S32 = 4
    F32 = 5
    F64 = 6

    @property
    def dtype(self) -> np.dtype:
        """numpy dtype storing one element of this kind."""
        return np.dtype(_DEPTH_DTYPES[self])

    @property
    def is_integer(self) -> bool:
        return self < Depth.F32

    @property
    def label(self) -> str:
        """OpenCV style label, e.g. ``8U`` or ``32F``."""
        return _DEPTH_LABELS[self]

    def __str__(self) -> str:
        return f"CV_{self.label}"

    @classmethod
    def from_dtype(cls, dtype) -> Depth:
        """Look up the depth storing ``dtype``.

        Raises:
            ValueError: If the dtype has no matching element kind
        """
        dt = np.dtype(dtype)
        for depth, name in _DEPTH_DTYPES.items():
            if dt == np.dtype(name):
                return depth
        raise ValueError(f"Unsupported dtype for a buffer: {dt}")


_DEPTH_DTYPES = {
    Depth.U8: 'uint8',
    Depth.S8: 'int8',
    Depth.U16: 'uint16',
    Depth.S16: 'int16',
    Depth.S32: 'int32',
    Depth.F32: 'float32',
    Depth.F64: 'float64',
}

_DEPTH_LABELS = {
    Depth.U8: '8U',
    Depth.S8: '8S',
    Depth.U16: '16U',
    Depth.S16: '16S',
    Depth.S32: '32S',
    Depth.F32: '32F',
    Depth.F64: '64F',
}

MAX_CHANNELS = 4


@dataclass(frozen=True)
class MatType:
    """An element type: element kind plus channel count."""
    depth: Depth
    channels: int = 1

    def __post_init__(self):
        if not 1 <= self.channels <= MAX_CHANNELS:
            raise ValueError(f"Channel count must be in [1, {MAX_CHANNELS}], got {self.channels}")
        # Accept plain ints for the depth
        object.__setattr__(self, 'depth', Depth(self.depth))

    @property
    def code(self) -> int:
        """Packed OpenCV type code (``CV_MAKETYPE``)."""
        return int(self.depth) + ((self.channels - 1) << 3)

    @property
    def dtype(self) -> np.dtype:
        return self.depth.dtype

    @property
    def elem_size(self) -> int:
        """Bytes per element including all channels."""
        return self.dtype.itemsize * self.channels

    def shape(self, width: int, height: int) -> tuple[int, ...]:
        """numpy shape of a buffer with this type.

        Single-channel buffers are 2D, as in OpenCV's Python bindings.
        """
        if self.channels == 1:
            return (height, width)
        return (height, width, self.channels)

    @classmethod
    def from_code(cls, code: int) -> MatType:
        """Unpack an OpenCV type code."""
        return cls(Depth(code & 7), (code >> 3) + 1)

    def __str__(self) -> str:
        return f"CV_{self.depth.label}C{self.channels}"


class Size(NamedTuple):
    """Buffer size in elements."""
    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


def mat_type_of(array: np.ndarray) -> MatType:
    """Get the element type of a buffer.

    Args:
        array: 2D (single channel) or 3D (H, W, C) numpy array

    Returns:
        MatType of the buffer

    Raises:
        ValueError: For unsupported dtypes, ranks or channel counts
    """
    if array.ndim == 2:
        channels = 1
    elif array.ndim == 3:
        channels = array.shape[2]
    else:
        raise ValueError(f"Expected buffer (H, W) or (H, W, C), got shape {array.shape}")
    return MatType(Depth.from_dtype(array.dtype), channels)


def types(depth_start: int, depth_end: int, cn_start: int, cn_end: int) -> list[MatType]:
    """Get the element types in the given inclusive ranges.

    Entries are ordered depth-major, channel-minor.

    Args:
        depth_start: First depth (e.g. ``Depth.U8``)
        depth_end: Last depth, inclusive
        cn_start: First channel count
        cn_end: Last channel count, inclusive

    Returns:
        List of MatType
    """
    return [
        MatType(Depth(depth), cn)
        for depth in range(depth_start, depth_end + 1)
        for cn in range(cn_start, cn_end + 1)
    ]


@lru_cache(maxsize=None)
def _all_types() -> tuple[MatType, ...]:
    return tuple(types(Depth.U8, Depth.F64, 1, MAX_CHANNELS))


def all_types() -> list[MatType]:
    """Get all 28 element types (depth 8U-64F, channels 1-4)."""
    return list(_all_types())


ALL_DEPTHS = list(Depth)

# (source, destination) depth pairs for conversions that never narrow
_WIDENING = {
    Depth.U8: (Depth.U8, Depth.U16, Depth.S16, Depth.S32, Depth.F32, Depth.F64),
    Depth.U16: (Depth.U16, Depth.S32, Depth.F32, Depth.F64),
    Depth.S16: (Depth.S16, Depth.S32, Depth.F32, Depth.F64),
    Depth.S32: (Depth.S32, Depth.F32, Depth.F64),
    Depth.F32: (Depth.F32, Depth.F64),
    Depth.F64: (Depth.F64,),
}
DEPTH_PAIRS = [(src, dst) for src, dsts in _WIDENING.items() for dst in dsts]


__all__ = [
    'Depth',
    'MatType',
    'Size',
    'MAX_CHANNELS',
    'mat_type_of',
    'types',
    'all_types',
    'ALL_DEPTHS',
    'DEPTH_PAIRS',
]
