# gputest - Image Assets
"""
Loading reference images and dumping buffers for inspection.

Reference images live under ``settings.DATA_DIR`` (``GPUTEST_DATA_DIR``);
dumps go to ``settings.DUMP_DIR`` (``GPUTEST_DUMP_DIR``). Decoding and
encoding is left to OpenCV, so channel order is BGR(A).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import cv2
import numpy as np

from .buffers import get_mat
from .config import settings, get_dump_dir
from .mat_type import Depth, MatType

logger = logging.getLogger(__name__)


def read_image(file_name: str, flags: int = cv2.IMREAD_COLOR) -> np.ndarray:
    """Read an image from the test data folder.

    Args:
        file_name: Path relative to the test data folder
        flags: ``cv2.IMREAD_*`` flags

    Returns:
        Decoded image

    Raises:
        FileNotFoundError: If the file is missing or cannot be decoded
    """
    path = Path(settings.DATA_DIR) / file_name
    image = cv2.imread(str(path), flags)
    if image is None:
        raise FileNotFoundError(f"Test image not found or not decodable: {path}")
    return image


def read_image_type(file_name: str, mat_type: MatType) -> np.ndarray:
    """Read an image from the test data folder and convert it to a type.

    One channel reads grayscale, three read BGR and four read BGR with an
    opaque alpha channel. Float kinds are scaled to [0, 1]; integer kinds
    keep 8-bit values, saturated to the target range.

    Raises:
        ValueError: For two-channel types, which images cannot provide
    """
    if mat_type.channels == 2:
        raise ValueError(f"Cannot read an image as {mat_type}")

    flags = cv2.IMREAD_GRAYSCALE if mat_type.channels == 1 else cv2.IMREAD_COLOR
    src = read_image(file_name, flags)
    if mat_type.channels == 4:
        src = cv2.cvtColor(src, cv2.COLOR_BGR2BGRA)

    if mat_type.depth == Depth.U8:
        return src

    if mat_type.depth.is_integer:
        info = np.iinfo(mat_type.dtype)
        return np.clip(src.astype(np.int32), info.min, info.max).astype(mat_type.dtype)

    scale = 1.0 / 255.0 if mat_type.depth == Depth.F32 else 1.0
    return (src.astype(np.float64) * scale).astype(mat_type.dtype)


def dump_image(file_name: str, image: Any) -> Path:
    """Write a buffer to the dump folder for post-mortem inspection.

    Args:
        file_name: File name; the extension selects the encoder
        image: Buffer to write (numpy array or device object)

    Returns:
        Path of the written file

    Raises:
        OSError: If the image could not be encoded
    """
    path = get_dump_dir() / file_name
    path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(path), get_mat(image)):
        raise OSError(f"Failed to write image: {path}")
    logger.info(f"Dumped image to {path}")
    return path


__all__ = [
    'read_image',
    'read_image_type',
    'dump_image',
]
