# gputest - Test Session
"""
Session context: the device catalog, random source and case registry of
one test run.

Example:
    from gputest.session import Session

    with Session() as session:
        for device in session.devices:
            ...
        results = session.registry.run_all()
"""

from __future__ import annotations

import logging

from .config import settings
from .devices import DeviceBackend, DeviceCatalog, DeviceInfo
from .diagnostics import print_device_info
from .registry import CaseRegistry
from .sampling import RandomSource

logger = logging.getLogger(__name__)


class Session:
    """Resources shared by the test cases of one run.

    Args:
        backend: Device backend (CUDA if None)
        seed: Seed of the session's random source (``settings.SEED`` if None)
    """

    def __init__(self, backend: DeviceBackend | None = None, seed: int | None = None):
        self.catalog = DeviceCatalog(backend)
        self.random = RandomSource(seed)
        self.registry = CaseRegistry(self.catalog)
        self.started = False

    def start(self, device: int | None = None, verbose: bool = True) -> Session:
        """Load the selected devices.

        Args:
            device: Device index; None uses ``settings.DEVICE``, a negative
                index loads all devices
            verbose: Log host and device information
        """
        if device is None:
            device = settings.DEVICE
        self.catalog.load_selection(device)
        self.started = True
        logger.debug(f"Session started with {len(self.catalog)} device(s), seed {self.random.seed:#x}")
        if verbose:
            print_device_info(self.catalog)
        return self

    def close(self) -> None:
        """Release the device selection."""
        self.catalog.clear()
        self.started = False
        logger.debug("Session closed")

    @property
    def devices(self) -> list[DeviceInfo]:
        return self.catalog.values()

    def __enter__(self) -> Session:
        if not self.started:
            self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ['Session']
