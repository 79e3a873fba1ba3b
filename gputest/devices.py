# gputest - Device Catalog
"""
Compute device enumeration and capability checks.

A ``DeviceCatalog`` holds the devices a test session runs on. Devices are
discovered through a backend:

- ``CudaBackend`` asks OpenCV's CUDA module. On an OpenCV build without
  CUDA it simply reports no devices.
- ``StaticBackend`` serves a fixed device list, for host-only runs and
  for tests of the harness itself.

A feature counts as supported only if the device reports it AND the build
was compiled with it. Unsupported features are a reason to skip a test,
not to fail it.

Example:
    from gputest.devices import DeviceCatalog, FeatureSet

    catalog = DeviceCatalog()
    catalog.load_all()
    for info in catalog.values():
        if catalog.supports_feature(info, FeatureSet.NATIVE_DOUBLE):
            ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Protocol

import cv2

from .errors import DeviceIndexError, UnsupportedFeatureError

logger = logging.getLogger(__name__)


class FeatureSet(IntEnum):
    """Device capability flags (values of ``cv2.cuda.FEATURE_SET_*``)."""
    FEATURE_SET_COMPUTE_10 = 10
    FEATURE_SET_COMPUTE_11 = 11
    FEATURE_SET_COMPUTE_12 = 12
    FEATURE_SET_COMPUTE_13 = 13
    FEATURE_SET_COMPUTE_20 = 20
    FEATURE_SET_COMPUTE_21 = 21
    FEATURE_SET_COMPUTE_30 = 30
    FEATURE_SET_COMPUTE_32 = 32
    FEATURE_SET_COMPUTE_35 = 35
    FEATURE_SET_COMPUTE_50 = 50
    GLOBAL_ATOMICS = 11
    SHARED_ATOMICS = 12
    NATIVE_DOUBLE = 13
    WARP_SHUFFLE_FUNCTIONS = 30
    DYNAMIC_PARALLELISM = 35


@dataclass(frozen=True)
class DeviceInfo:
    """Descriptor of one compute device."""
    device_id: int
    name: str
    features: frozenset[FeatureSet] = field(default_factory=frozenset)
    major_version: int = 0
    minor_version: int = 0
    multiprocessor_count: int = 0
    total_memory: int = 0  # Bytes
    compatible: bool = True  # Build has code for this device's architecture

    def has_feature(self, feature: FeatureSet) -> bool:
        return FeatureSet(feature) in self.features

    def __str__(self) -> str:
        return f"Device {self.device_id}: {self.name}"


class DeviceBackend(Protocol):
    """Source of device descriptors."""

    def device_count(self) -> int: ...

    def describe(self, index: int) -> DeviceInfo: ...

    def built_with(self, feature: FeatureSet) -> bool: ...

    def reset(self) -> None: ...


class CudaBackend:
    """Devices visible to OpenCV's CUDA module."""

    def __init__(self):
        self._cuda = cv2.cuda

    def device_count(self) -> int:
        return int(self._cuda.getCudaEnabledDeviceCount())

    def describe(self, index: int) -> DeviceInfo:
        info = self._cuda.DeviceInfo(index)
        features = frozenset(f for f in FeatureSet if info.supports(int(f)))
        return DeviceInfo(
            device_id=index,
            name=info.name(),
            features=features,
            major_version=info.majorVersion(),
            minor_version=info.minorVersion(),
            multiprocessor_count=info.multiProcessorCount(),
            total_memory=info.totalMemory(),
            compatible=info.isCompatible(),
        )

    def built_with(self, feature: FeatureSet) -> bool:
        target_archs = self._cuda.TargetArchs
        if hasattr(target_archs, 'builtWith'):
            return bool(target_archs.builtWith(int(feature)))
        # Older bindings expose static methods as module functions
        return bool(self._cuda.TargetArchs_builtWith(int(feature)))

    def reset(self) -> None:
        if self.device_count() > 0:
            self._cuda.resetDevice()

    def print_native(self, index: int) -> None:
        """Print the driver's own short description of a device."""
        self._cuda.printShortCudaDeviceInfo(index)


class StaticBackend:
    """A fixed list of devices.

    Args:
        devices: Device descriptors, indexed by position
        built_features: Features the build supports (None = all)
    """

    def __init__(self, devices: Iterable[DeviceInfo] = (), built_features: Iterable[FeatureSet] | None = None):
        self._devices = list(devices)
        self._built = None if built_features is None else frozenset(built_features)
        self.reset_count = 0

    def device_count(self) -> int:
        return len(self._devices)

    def describe(self, index: int) -> DeviceInfo:
        return self._devices[index]

    def built_with(self, feature: FeatureSet) -> bool:
        return self._built is None or FeatureSet(feature) in self._built

    def reset(self) -> None:
        self.reset_count += 1


class DeviceCatalog:
    """Ordered, duplicate-free list of the devices a session tests on.

    Population is not thread-safe; load devices before running tests.
    """

    def __init__(self, backend: DeviceBackend | None = None):
        self.backend = backend if backend is not None else CudaBackend()
        self._devices: list[DeviceInfo] = []

    def load(self, index: int) -> DeviceInfo:
        """Append the device with the given index.

        Loading a device already in the catalog leaves it unchanged.

        Raises:
            DeviceIndexError: If the index is not a detected device
        """
        count = self.backend.device_count()
        if not 0 <= index < count:
            raise DeviceIndexError(index, count)

        info = self.backend.describe(index)
        for loaded in self._devices:
            if loaded.device_id == info.device_id:
                logger.debug(f"Device {info.device_id} already loaded")
                return loaded

        if not info.compatible:
            logger.warning(f"{info} is not compatible with this build")
        self._devices.append(info)
        logger.debug(f"Loaded {info}")
        return info

    def load_all(self) -> list[DeviceInfo]:
        """Append every detected device in enumeration order."""
        for index in range(self.backend.device_count()):
            self.load(index)
        return self.values()

    def load_selection(self, device: int | None) -> list[DeviceInfo]:
        """Load one device by index, or all of them for None or a negative index."""
        if device is None or device < 0:
            return self.load_all()
        self.load(device)
        return self.values()

    def values(self) -> list[DeviceInfo]:
        """Get the loaded devices (a copy)."""
        return list(self._devices)

    def clear(self) -> None:
        self._devices.clear()

    def supports_feature(self, info: DeviceInfo, feature: FeatureSet) -> bool:
        """Check the device reports the feature and the build supports it."""
        return support_feature(info, feature, self.backend)

    def require_feature(self, info: DeviceInfo, feature: FeatureSet) -> None:
        """Raise UnsupportedFeatureError unless the feature is supported."""
        if not self.supports_feature(info, feature):
            raise UnsupportedFeatureError(FeatureSet(feature).name, info)

    def reset_device(self) -> None:
        """Reset the active device, e.g. after a failing test body."""
        self.backend.reset()

    def __len__(self) -> int:
        return len(self._devices)

    def __iter__(self):
        return iter(self.values())


def support_feature(info: DeviceInfo, feature: FeatureSet, backend: DeviceBackend | None = None) -> bool:
    """Check a device feature against both the device and the build.

    Args:
        info: Device descriptor
        feature: Capability to check
        backend: Backend that knows the build flags (CUDA if None)

    Returns:
        True only if both the device and the build support the feature
    """
    if not info.has_feature(feature):
        return False
    backend = backend if backend is not None else CudaBackend()
    return backend.built_with(feature)


__all__ = [
    'FeatureSet',
    'DeviceInfo',
    'DeviceBackend',
    'CudaBackend',
    'StaticBackend',
    'DeviceCatalog',
    'support_feature',
]
