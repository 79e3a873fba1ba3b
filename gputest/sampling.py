# gputest - Sample Generation
"""
Random scalars, sizes and buffers for test inputs.

All draws come from a ``RandomSource``. A process-wide default source is
seeded once with a fixed seed so runs reproduce the same inputs; tests that
run in parallel should each create their own source and pass it as ``rng``.

Example:
    from gputest.sampling import RandomSource, random_mat, seed_random
    from gputest.mat_type import Depth, MatType, Size

    seed_random()  # back to the configured seed
    src = random_mat(Size(64, 48), MatType(Depth.U8, 3))

    # Thread-confined source
    rng = RandomSource(42)
    src = rng.random_mat(Size(64, 48), MatType(Depth.F32, 1), -1.0, 1.0)
"""

from __future__ import annotations

import logging
import math

import numpy as np

from .config import settings
from .constants import DEFAULT_MIN_VALUE, DEFAULT_MAX_VALUE
from .mat_type import MatType, Size

logger = logging.getLogger(__name__)

Scalar = tuple[float, float, float, float]


class RandomSource:
    """A seeded random source for sample generation.

    Not thread-safe: share one instance per execution context only.
    """

    def __init__(self, seed: int | None = None):
        self.seed = settings.SEED if seed is None else seed
        self._generator = np.random.default_rng(self.seed)

    def reseed(self, seed: int | None = None) -> None:
        """Restart the sequence, from ``seed`` or the current seed."""
        if seed is not None:
            self.seed = seed
        self._generator = np.random.default_rng(self.seed)

    @property
    def generator(self) -> np.random.Generator:
        return self._generator

    def random_int(self, min_val: int, max_val: int) -> int:
        """Uniform integer in [min_val, max_val]."""
        return int(self._generator.integers(min_val, max_val, endpoint=True))

    def random_double(self, min_val: float, max_val: float) -> float:
        """Uniform float in [min_val, max_val)."""
        return float(self._generator.uniform(min_val, max_val))

    def random_size(self, min_val: int, max_val: int) -> Size:
        """Size with width and height drawn independently from [min_val, max_val]."""
        width = self.random_int(min_val, max_val)
        height = self.random_int(min_val, max_val)
        return Size(width, height)

    def random_scalar(self, min_val: float, max_val: float) -> Scalar:
        """Four independent components, one per channel."""
        return tuple(self.random_double(min_val, max_val) for _ in range(4))

    def random_mat(
        self,
        size: Size | tuple[int, int],
        mat_type: MatType,
        min_val: float = DEFAULT_MIN_VALUE,
        max_val: float = DEFAULT_MAX_VALUE,
    ) -> np.ndarray:
        """Allocate a buffer and fill every element with an independent draw.

        The range is clamped to what the element kind can represent, and
        integer kinds draw integers only, so every value is saturated.

        Args:
            size: (width, height) of the buffer
            mat_type: Element type
            min_val: Lower bound, inclusive
            max_val: Upper bound (inclusive for integer kinds)

        Returns:
            Tightly packed numpy array of the requested type
        """
        width, height = size
        shape = mat_type.shape(width, height)
        dtype = mat_type.dtype

        if mat_type.depth.is_integer:
            info = np.iinfo(dtype)
            lo = max(math.ceil(min_val), int(info.min))
            hi = min(math.floor(max_val), int(info.max))
            if lo > hi:
                # Range lies outside the kind (or between two integers)
                fill = np.clip(np.trunc(min_val), info.min, info.max)
                return np.full(shape, fill, dtype=dtype)
            data = self._generator.integers(lo, hi, size=shape, endpoint=True, dtype=np.int64)
            return data.astype(dtype)

        info = np.finfo(dtype)
        lo = max(float(min_val), float(info.min))
        hi = min(float(max_val), float(info.max))
        # Interpolate instead of scaling by hi - lo, which overflows for wide ranges
        u = self._generator.random(size=shape)
        data = np.clip(lo * (1.0 - u) + hi * u, lo, hi)
        return data.astype(dtype)


_default_source = RandomSource()


def get_random_source() -> RandomSource:
    """Get the process-wide default random source."""
    return _default_source


def seed_random(seed: int | None = None, randomize: bool | None = None) -> int:
    """Reset the default random source.

    Args:
        seed: Explicit seed; defaults to ``settings.SEED``
        randomize: Draw a fresh seed from OS entropy instead (defaults to
            ``settings.RANDOM_SEED``). The drawn seed is logged so a failing
            run can be reproduced with ``GPUTEST_SEED``.

    Returns:
        The seed now in use
    """
    if randomize is None:
        randomize = settings.RANDOM_SEED and seed is None
    if randomize:
        seed = int(np.random.SeedSequence().entropy % (1 << 32))
        logger.info(f"Using randomized seed {seed} (set GPUTEST_SEED={seed} to reproduce)")
    elif seed is None:
        seed = settings.SEED
    _default_source.reseed(seed)
    logger.debug(f"Random source seeded with {seed:#x}")
    return seed


def _source(rng: RandomSource | None) -> RandomSource:
    return _default_source if rng is None else rng


def random_int(min_val: int, max_val: int, rng: RandomSource | None = None) -> int:
    return _source(rng).random_int(min_val, max_val)


def random_double(min_val: float, max_val: float, rng: RandomSource | None = None) -> float:
    return _source(rng).random_double(min_val, max_val)


def random_size(min_val: int, max_val: int, rng: RandomSource | None = None) -> Size:
    return _source(rng).random_size(min_val, max_val)


def random_scalar(min_val: float, max_val: float, rng: RandomSource | None = None) -> Scalar:
    return _source(rng).random_scalar(min_val, max_val)


def random_mat(
    size: Size | tuple[int, int],
    mat_type: MatType,
    min_val: float = DEFAULT_MIN_VALUE,
    max_val: float = DEFAULT_MAX_VALUE,
    rng: RandomSource | None = None,
) -> np.ndarray:
    """Random buffer from the default source (see ``RandomSource.random_mat``)."""
    return _source(rng).random_mat(size, mat_type, min_val, max_val)


__all__ = [
    'Scalar',
    'RandomSource',
    'get_random_source',
    'seed_random',
    'random_int',
    'random_double',
    'random_size',
    'random_scalar',
    'random_mat',
]
