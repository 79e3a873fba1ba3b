# gputest - Keypoint Matching
"""
Order-independent comparison of sparse feature points.

Detectors running on different devices report the same keypoints in
different orders, so keypoints are paired by proximity instead of by
index. ``cv2.KeyPoint`` and ``cv2.DMatch`` objects are accepted directly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, NamedTuple, Sequence

from .constants import (
    KEYPOINT_MAX_POINT_DIFF,
    KEYPOINT_MAX_SIZE_DIFF,
    KEYPOINT_MAX_ANGLE_DIFF,
    KEYPOINT_MAX_RESPONSE_DIFF,
    KEYPOINT_REPORT_LIMIT,
)
from .errors import KeypointMismatchError


@dataclass(frozen=True)
class KeyPoint:
    """A feature point: location plus descriptor attributes."""
    x: float
    y: float
    size: float = 1.0
    angle: float = -1.0
    response: float = 0.0
    octave: int = 0
    class_id: int = -1

    @classmethod
    def from_cv2(cls, kp: Any) -> KeyPoint:
        """Convert a ``cv2.KeyPoint``."""
        x, y = kp.pt
        return cls(
            x=float(x),
            y=float(y),
            size=float(kp.size),
            angle=float(kp.angle),
            response=float(kp.response),
            octave=int(kp.octave),
            class_id=int(kp.class_id),
        )

    def distance(self, other: KeyPoint) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def __str__(self) -> str:
        return (
            f"KeyPoint(pt=({self.x:.2f}, {self.y:.2f}), size={self.size:.2f}, "
            f"angle={self.angle:.2f}, response={self.response:.4f}, "
            f"octave={self.octave}, class_id={self.class_id})"
        )


class Match(NamedTuple):
    """A proposed correspondence between two keypoint lists."""
    query_idx: int
    train_idx: int


def _as_keypoint(kp: Any) -> KeyPoint:
    if isinstance(kp, KeyPoint):
        return kp
    return KeyPoint.from_cv2(kp)


def _as_keypoints(keypoints: Iterable[Any]) -> list[KeyPoint]:
    return [_as_keypoint(kp) for kp in keypoints]


def _as_match(match: Any) -> Match:
    if hasattr(match, 'queryIdx'):
        return Match(int(match.queryIdx), int(match.trainIdx))
    query_idx, train_idx = match
    return Match(int(query_idx), int(train_idx))


def keypoints_equal(kp1: KeyPoint, kp2: KeyPoint) -> bool:
    """Check whether two keypoints correspond.

    Location, size, angle and response must be within tolerance; octave
    and class id must be equal.
    """
    return (
        kp1.distance(kp2) < KEYPOINT_MAX_POINT_DIFF
        and abs(kp1.size - kp2.size) < KEYPOINT_MAX_SIZE_DIFF
        and abs(kp1.angle - kp2.angle) < KEYPOINT_MAX_ANGLE_DIFF
        and abs(kp1.response - kp2.response) < KEYPOINT_MAX_RESPONSE_DIFF
        and kp1.octave == kp2.octave
        and kp1.class_id == kp2.class_id
    )


def _unmatched(source: list[KeyPoint], target: list[KeyPoint]) -> list[KeyPoint]:
    return [kp for kp in source if not any(keypoints_equal(kp, other) for other in target)]


def _format_missing(label: str, keypoints: list[KeyPoint]) -> str:
    lines = [f"{len(keypoints)} keypoint(s) of {label} without a counterpart:"]
    lines += [f"  {kp}" for kp in keypoints[:KEYPOINT_REPORT_LIMIT]]
    if len(keypoints) > KEYPOINT_REPORT_LIMIT:
        lines.append(f"  ... and {len(keypoints) - KEYPOINT_REPORT_LIMIT} more")
    return "\n".join(lines)


def assert_keypoints_equal(
    gold: Sequence[Any],
    actual: Sequence[Any],
    names: tuple[str, str] = ("gold", "actual"),
) -> None:
    """Assert two keypoint sets correspond in both directions.

    Every gold keypoint must have a counterpart in actual and vice versa,
    regardless of order.

    Raises:
        KeypointMismatchError: On a count mismatch or unmatched keypoints
    """
    gold_expr, actual_expr = names
    gold = _as_keypoints(gold)
    actual = _as_keypoints(actual)

    if len(gold) != len(actual):
        raise KeypointMismatchError(
            f'KeyPoints size mismatch: "{gold_expr}" has {len(gold)}, '
            f'"{actual_expr}" has {len(actual)}'
        )

    missing_in_actual = _unmatched(gold, actual)
    missing_in_gold = _unmatched(actual, gold)
    if missing_in_actual or missing_in_gold:
        parts = []
        if missing_in_actual:
            parts.append(_format_missing(f'"{gold_expr}"', missing_in_actual))
        if missing_in_gold:
            parts.append(_format_missing(f'"{actual_expr}"', missing_in_gold))
        raise KeypointMismatchError(
            "\n".join(parts),
            missing_in_actual=missing_in_actual,
            missing_in_gold=missing_in_gold,
        )


def get_matched_points_count(
    gold: Sequence[Any],
    actual: Sequence[Any],
    matches: Sequence[Any] | None = None,
) -> int:
    """Count corresponding keypoints.

    Without ``matches``, pairs gold and actual keypoints one-to-one,
    greedily taking the spatially closest corresponding pair first.

    With ``matches`` (``Match``, ``cv2.DMatch`` or (query, train) tuples),
    counts the proposed pairs ``gold[query] <-> actual[train]`` that
    correspond, validating a matcher's output.

    Raises:
        IndexError: If a proposed match refers to a missing keypoint
    """
    gold = _as_keypoints(gold)
    actual = _as_keypoints(actual)

    if matches is not None:
        count = 0
        for match in matches:
            query_idx, train_idx = _as_match(match)
            if not 0 <= query_idx < len(gold) or not 0 <= train_idx < len(actual):
                raise IndexError(
                    f"Match {query_idx} -> {train_idx} is out of range "
                    f"({len(gold)} query, {len(actual)} train keypoints)"
                )
            if keypoints_equal(gold[query_idx], actual[train_idx]):
                count += 1
        return count

    candidates = sorted(
        (g.distance(a), i, j)
        for i, g in enumerate(gold)
        for j, a in enumerate(actual)
        if keypoints_equal(g, a)
    )
    used_gold: set[int] = set()
    used_actual: set[int] = set()
    for _, i, j in candidates:
        if i in used_gold or j in used_actual:
            continue
        used_gold.add(i)
        used_actual.add(j)
    return len(used_gold)


__all__ = [
    'KeyPoint',
    'Match',
    'keypoints_equal',
    'assert_keypoints_equal',
    'get_matched_points_count',
]
