"""Host and device information for triage."""

from __future__ import annotations

import logging
import platform

import cv2
import numpy as np

from .devices import CudaBackend, DeviceCatalog, DeviceInfo

logger = logging.getLogger(__name__)


def format_device(info: DeviceInfo) -> str:
    """One-line description of a device."""
    memory_mb = info.total_memory // (1024 * 1024)
    features = ", ".join(sorted(f.name for f in info.features)) or "none"
    compat = "" if info.compatible else " [INCOMPATIBLE WITH BUILD]"
    return (
        f"{info}: compute {info.major_version}.{info.minor_version}, "
        f"{info.multiprocessor_count} multiprocessors, {memory_mb} MB, "
        f"features: {features}{compat}"
    )


def print_device_info(catalog: DeviceCatalog) -> None:
    """Log host versions and every device of the catalog."""
    logger.info(
        f"Host: Python {platform.python_version()}, OpenCV {cv2.__version__}, "
        f"numpy {np.__version__}, {platform.platform()}"
    )
    logger.info(f"Detected devices: {catalog.backend.device_count()}, selected: {len(catalog)}")

    for info in catalog.values():
        logger.info(format_device(info))
        if isinstance(catalog.backend, CudaBackend):
            catalog.backend.print_native(info.device_id)

    if len(catalog) == 0:
        logger.warning("No devices selected; device tests will not run")


__all__ = [
    'format_device',
    'print_device_info',
]
