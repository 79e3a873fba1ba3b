# gputest - Buffer Factory
"""
Buffer allocation with controllable memory layout.

Buffers are numpy arrays. With ``use_roi=True`` the returned array is a
view into a larger backing array: its row stride exceeds the tight row
size and its origin is not at the start of the backing memory. This
catches kernels that assume tightly packed rows.

Device-resident results (anything with a ``download()`` method, such as
``cv2.cuda_GpuMat``) are brought back to the host with ``get_mat``.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from .config import settings
from .mat_type import MatType, Size, mat_type_of
from .sampling import RandomSource, get_random_source

logger = logging.getLogger(__name__)


def create_mat(
    size: Size | tuple[int, int],
    mat_type: MatType,
    use_roi: bool = False,
    rng: RandomSource | None = None,
) -> np.ndarray:
    """Allocate an uninitialized buffer.

    Args:
        size: (width, height) of the buffer
        mat_type: Element type
        use_roi: Return a view into a larger backing buffer
        rng: Random source for the margins (default source if None)

    Returns:
        numpy array of shape ``mat_type.shape(width, height)``
    """
    width, height = size
    if not use_roi:
        return np.empty(mat_type.shape(width, height), dtype=mat_type.dtype)

    rng = rng or get_random_source()
    margin_x = rng.random_int(settings.ROI_MARGIN_MIN, settings.ROI_MARGIN_MAX)
    margin_y = rng.random_int(settings.ROI_MARGIN_MIN, settings.ROI_MARGIN_MAX)

    backing = np.empty(mat_type.shape(width + margin_x, height + margin_y), dtype=mat_type.dtype)
    x0 = margin_x // 2
    y0 = margin_y // 2
    view = backing[y0:y0 + height, x0:x0 + width]
    logger.debug(
        f"ROI {width}x{height} at ({x0}, {y0}) in {width + margin_x}x{height + margin_y} backing"
    )
    return view


def load_mat(host: Any, use_roi: bool = False, rng: RandomSource | None = None) -> np.ndarray:
    """Copy host values into a buffer allocated with ``create_mat``.

    Args:
        host: Source buffer (numpy array or device object)
        use_roi: Return a view into a larger backing buffer
        rng: Random source for the margins

    Returns:
        New buffer with the same type, size and values as ``host``
    """
    src = get_mat(host)
    buffer = create_mat(size_of(src), mat_type_of(src), use_roi, rng)
    np.copyto(buffer, src)
    return buffer


def get_mat(obj: Any) -> np.ndarray:
    """Get a host numpy array for a buffer, downloading device buffers."""
    if isinstance(obj, np.ndarray):
        return obj
    if hasattr(obj, 'download'):
        return obj.download()
    return np.asarray(obj)


def size_of(array: np.ndarray) -> Size:
    return Size(array.shape[1], array.shape[0])


def row_stride(array: np.ndarray) -> int:
    """Bytes between the starts of two consecutive rows."""
    return array.strides[0]


def tight_row_size(array: np.ndarray) -> int:
    """Bytes one row occupies when packed without padding."""
    return array.shape[1] * mat_type_of(array).elem_size


def locate_roi(array: np.ndarray) -> tuple[Size, tuple[int, int]]:
    """Find a view's position inside its backing buffer.

    Returns:
        Tuple of (whole_size, (x, y) offset); a buffer that owns its memory
        reports its own size and offset (0, 0)
    """
    base = array.base
    if not isinstance(base, np.ndarray) or base.ndim != array.ndim:
        return size_of(array), (0, 0)

    delta = array.__array_interface__['data'][0] - base.__array_interface__['data'][0]
    y, rest = divmod(delta, base.strides[0])
    x = rest // mat_type_of(array).elem_size
    return size_of(base), (x, y)


__all__ = [
    'create_mat',
    'load_mat',
    'get_mat',
    'size_of',
    'row_stride',
    'tight_row_size',
    'locate_roi',
]
