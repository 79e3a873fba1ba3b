"""Comparison utilities for judging kernel outputs.

Provides near-equality checks, a trusted min/max oracle, a structural
similarity score and visual diff reports.

Comparisons are done per element and per channel in float64, so integer
and floating point buffers are judged the same way.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, NamedTuple, Sequence

import cv2
import numpy as np
from PIL import Image

from .buffers import get_mat, size_of
from .config import get_dump_dir
from .constants import DBL_MAX
from .errors import ShapeMismatchError, ValueMismatchError
from .mat_type import Depth, mat_type_of

logger = logging.getLogger(__name__)


class Point(NamedTuple):
    """Buffer coordinate: x is the column, y the row."""
    x: int
    y: int


class MatComparison(NamedTuple):
    """Result of comparing two buffers."""
    match: bool
    message: str
    location: Point | None = None  # First element exceeding the tolerance
    channel: int | None = None
    expected: float = 0.0
    actual: float = 0.0
    diff: float = 0.0
    max_diff: float = 0.0
    max_location: Point | None = None


class MinMaxLoc(NamedTuple):
    """Extremes of a buffer and where they first occur."""
    min_val: float
    max_val: float
    min_loc: Point
    max_loc: Point


def _check_shapes(m1: np.ndarray, m2: np.ndarray, names: tuple[str, str]) -> None:
    expr1, expr2 = names
    size1, size2 = size_of(m1), size_of(m2)
    if size1 != size2:
        raise ShapeMismatchError(
            f'Matrices "{expr1}" and "{expr2}" have different sizes : '
            f'"{expr1}" [{size1}] vs "{expr2}" [{size2}]'
        )
    type1, type2 = mat_type_of(m1), mat_type_of(m2)
    if type1 != type2:
        raise ShapeMismatchError(
            f'Matrices "{expr1}" and "{expr2}" have different types : '
            f'"{expr1}" [{type1}] vs "{expr2}" [{type2}]'
        )


def compare_mats(
    m1: Any,
    m2: Any,
    eps: float,
    names: tuple[str, str] = ("m1", "m2"),
) -> MatComparison:
    """Compare two buffers element by element.

    A difference equal to ``eps`` still matches. NaN never matches.

    Args:
        m1: Expected buffer (numpy array or device object)
        m2: Actual buffer
        eps: Maximum allowed absolute difference
        names: Labels used in the message

    Returns:
        MatComparison with match status and details

    Raises:
        ShapeMismatchError: If sizes or types differ
    """
    m1 = get_mat(m1)
    m2 = get_mat(m2)
    _check_shapes(m1, m2, names)

    channels = mat_type_of(m1).channels
    height, width = m1.shape[:2]
    # One row per buffer row, channels interleaved
    a = m1.reshape(height, width * channels).astype(np.float64)
    b = m2.reshape(height, width * channels).astype(np.float64)
    with np.errstate(invalid='ignore'):
        diff = np.abs(a - b)
        exceeded = ~(diff <= eps)

    if diff.size == 0:
        return MatComparison(True, "PASS: empty buffers")

    # NaN differences rank above every finite one
    ranked = np.where(np.isnan(diff), np.inf, diff)
    max_row, max_col = np.unravel_index(int(np.argmax(ranked)), ranked.shape)
    max_diff = float(diff[max_row, max_col])
    max_location = Point(int(max_col) // channels, int(max_row))

    if not exceeded.any():
        return MatComparison(
            match=True,
            message=f"PASS: max_diff={max_diff:g} at {max_location} within eps={eps:g}",
            max_diff=max_diff,
            max_location=max_location,
        )

    row, col = np.unravel_index(int(np.argmax(exceeded)), exceeded.shape)
    location = Point(int(col) // channels, int(row))
    channel = int(col) % channels
    expected = float(a[row, col])
    actual = float(b[row, col])
    first_diff = float(diff[row, col])
    expr1, expr2 = names
    message = (
        f'The max difference between matrices "{expr1}" and "{expr2}" is {max_diff:g} '
        f'at (x={max_location.x}, y={max_location.y}), which exceeds eps={eps:g}; '
        f'first mismatch at (x={location.x}, y={location.y}) channel {channel}: '
        f'expected {expected:g}, actual {actual:g}, |diff| = {first_diff:g}'
    )
    return MatComparison(
        match=False,
        message=message,
        location=location,
        channel=channel,
        expected=expected,
        actual=actual,
        diff=first_diff,
        max_diff=max_diff,
        max_location=max_location,
    )


def assert_mat_near(
    m1: Any,
    m2: Any,
    eps: float,
    names: tuple[str, str] = ("m1", "m2"),
) -> None:
    """Assert two buffers agree within ``eps`` per element and channel.

    Raises:
        ShapeMismatchError: If sizes or types differ
        ValueMismatchError: If any element differs by more than eps
    """
    result = compare_mats(m1, m2, eps, names)
    if not result.match:
        raise ValueMismatchError(
            result.message,
            location=result.location,
            channel=result.channel,
            diff=result.diff,
            eps=eps,
        )


def check_similarity(m1: Any, m2: Any) -> float:
    """Structural similarity score of two same-shaped buffers.

    Uses normalized cross-correlation (``cv2.TM_CCORR_NORMED``) and returns
    its distance from 1, so 0.0 means identical structure.

    Returns:
        Score in [0, 1]
    """
    m1 = get_mat(m1)
    m2 = get_mat(m2)
    _check_shapes(m1, m2, ("m1", "m2"))

    if np.array_equal(m1, m2):
        return 0.0

    depth = mat_type_of(m1).depth
    if depth not in (Depth.U8, Depth.F32):
        # matchTemplate only takes 8U or 32F
        m1 = m1.astype(np.float32)
        m2 = m2.astype(np.float32)

    result = cv2.matchTemplate(
        np.ascontiguousarray(m1), np.ascontiguousarray(m2), cv2.TM_CCORR_NORMED
    )
    return float(abs(result[0, 0] - 1.0))


def assert_mat_similar(m1: Any, m2: Any, eps: float) -> None:
    """Assert two buffers have the same shape and a similarity score <= eps.

    Raises:
        ShapeMismatchError: If sizes or types differ
        ValueMismatchError: If the score exceeds eps
    """
    score = check_similarity(m1, m2)
    if score > eps:
        raise ValueMismatchError(
            f"Similarity score {score:g} exceeds eps={eps:g}",
            diff=score,
            eps=eps,
        )


def min_max_loc_gold(src: Any, mask: Any = None) -> MinMaxLoc:
    """Reference min/max search by plain linear scan.

    Elements are visited in row-major order and only a strictly smaller
    (larger) value replaces the current minimum (maximum), so the first
    occurrence wins. Elements where the mask is zero are skipped.

    Args:
        src: Single-channel buffer
        mask: Optional single-channel mask of the same size

    Returns:
        MinMaxLoc; with no element considered, the extremes stay at
        (DBL_MAX, -DBL_MAX) and both locations at (-1, -1)

    Raises:
        ValueError: If src has more than one channel
        ShapeMismatchError: If the mask size differs from src
    """
    src = get_mat(src)
    if mat_type_of(src).channels != 1:
        raise ValueError(f"min_max_loc_gold expects a single-channel buffer, got {mat_type_of(src)}")
    if mask is not None:
        mask = get_mat(mask)
        if mask.shape[:2] != src.shape[:2]:
            raise ShapeMismatchError(
                f"Mask size {size_of(mask)} does not match buffer size {size_of(src)}"
            )
        if mask.ndim == 3:
            mask = mask[:, :, 0]
    if src.ndim == 3:
        src = src[:, :, 0]

    min_val, max_val = DBL_MAX, -DBL_MAX
    min_loc = max_loc = Point(-1, -1)

    for y in range(src.shape[0]):
        row = src[y].tolist()
        mask_row = mask[y].tolist() if mask is not None else None
        for x, value in enumerate(row):
            if mask_row is not None and not mask_row[x]:
                continue
            if value < min_val:
                min_val = value
                min_loc = Point(x, y)
            if value > max_val:
                max_val = value
                max_loc = Point(x, y)

    return MinMaxLoc(float(min_val), float(max_val), min_loc, max_loc)


def assert_scalar_near(s1: Sequence[float], s2: Sequence[float], eps: float) -> None:
    """Assert all four components of two scalars agree within eps."""
    _assert_components_near(s1, s2, eps, 4, "Scalar")


def assert_point_near(p1: Sequence[float], p2: Sequence[float], eps: float) -> None:
    """Assert two 2D or 3D points agree per coordinate within eps."""
    if len(p1) != len(p2) or len(p1) not in (2, 3):
        raise ShapeMismatchError(f"Points {tuple(p1)} and {tuple(p2)} are not both 2D or 3D")
    _assert_components_near(p1, p2, eps, len(p1), "Point")


def _assert_components_near(v1, v2, eps: float, count: int, kind: str) -> None:
    for i in range(count):
        diff = abs(float(v1[i]) - float(v2[i]))
        if not diff <= eps:
            raise ValueMismatchError(
                f"{kind} component {i} differs: expected {v1[i]:g}, actual {v2[i]:g}, "
                f"|diff| = {diff:g} exceeds eps={eps:g}",
                channel=i,
                diff=diff,
                eps=eps,
            )


def show_diff(gold: Any, actual: Any, eps: float) -> np.ndarray:
    """Build a mask of elements differing by more than eps.

    Returns:
        uint8 buffer shaped like the inputs, 255 where the channel differs
        by more than eps or either value is NaN
    """
    gold = get_mat(gold)
    actual = get_mat(actual)
    _check_shapes(gold, actual, ("gold", "actual"))
    with np.errstate(invalid='ignore'):
        diff = np.abs(gold.astype(np.float64) - actual.astype(np.float64))
        exceeded = ~(diff <= eps)
    return np.where(exceeded, 255, 0).astype(np.uint8)


def _to_display(image: np.ndarray) -> np.ndarray:
    """Convert a buffer to 8-bit RGB for viewing."""
    if image.dtype != np.uint8:
        image = cv2.normalize(image.astype(np.float64), None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)
    if image.ndim == 2:
        return np.stack([image] * 3, axis=2)
    channels = image.shape[2]
    if channels == 1:
        return np.repeat(image, 3, axis=2)
    if channels == 2:
        return np.dstack([image, np.zeros(image.shape[:2], dtype=np.uint8)])
    # BGR(A) buffers, as produced by cv2
    return image[:, :, 2::-1]


def save_diff_image(gold: Any, actual: Any, eps: float, file_name: str) -> Path:
    """Save a visual comparison: gold | actual | diff.

    Differing pixels are drawn red in the diff panel.

    Args:
        gold: Expected buffer
        actual: Actual buffer
        eps: Minimum difference to highlight
        file_name: File name inside the dump directory

    Returns:
        Path to the saved PNG
    """
    gold = get_mat(gold)
    actual = get_mat(actual)
    mask = show_diff(gold, actual, eps)
    if mask.ndim == 3:
        mask = mask.max(axis=2)

    h, w = gold.shape[:2]
    gap = 10
    combined = np.full((h, w * 3 + gap * 2, 3), 64, dtype=np.uint8)
    combined[:, 0:w] = _to_display(gold)
    combined[:, w + gap:2 * w + gap] = _to_display(actual)

    diff_view = np.zeros((h, w, 3), dtype=np.uint8)
    diff_view[mask > 0] = [255, 0, 0]
    combined[:, 2 * w + 2 * gap:] = diff_view

    path = get_dump_dir() / file_name
    Image.fromarray(combined).save(path, format='PNG')
    logger.info(f"Saved diff image ({int(np.count_nonzero(mask))} differing pixels) to {path}")
    return path


__all__ = [
    'Point',
    'MatComparison',
    'MinMaxLoc',
    'compare_mats',
    'assert_mat_near',
    'check_similarity',
    'assert_mat_similar',
    'min_max_loc_gold',
    'assert_scalar_near',
    'assert_point_near',
    'show_diff',
    'save_diff_image',
]
