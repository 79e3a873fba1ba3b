"""
Pytest fixtures for gputest tests
"""

import pytest

from gputest import (
    DeviceCatalog,
    DeviceInfo,
    FeatureSet,
    RandomSource,
    StaticBackend,
    seed_random,
    settings,
)
from gputest.constants import DEFAULT_SEED


@pytest.fixture(autouse=True)
def reset_default_seed():
    """Every test starts from the configured seed."""
    seed_random()
    yield


@pytest.fixture
def rng() -> RandomSource:
    """A thread-confined random source with the default seed."""
    return RandomSource(DEFAULT_SEED)


@pytest.fixture
def devices() -> list[DeviceInfo]:
    """Two fake devices: a modern one and an old one without doubles."""
    return [
        DeviceInfo(
            device_id=0,
            name="Fake GPU 3.5",
            features=frozenset({
                FeatureSet.FEATURE_SET_COMPUTE_13,
                FeatureSet.FEATURE_SET_COMPUTE_20,
                FeatureSet.FEATURE_SET_COMPUTE_30,
                FeatureSet.FEATURE_SET_COMPUTE_35,
            }),
            major_version=3,
            minor_version=5,
            multiprocessor_count=13,
            total_memory=4 * 1024 ** 3,
        ),
        DeviceInfo(
            device_id=1,
            name="Fake GPU 1.2",
            features=frozenset({FeatureSet.FEATURE_SET_COMPUTE_11, FeatureSet.FEATURE_SET_COMPUTE_12}),
            major_version=1,
            minor_version=2,
            multiprocessor_count=2,
            total_memory=512 * 1024 ** 2,
        ),
    ]


@pytest.fixture
def backend(devices) -> StaticBackend:
    """Backend built with everything except dynamic parallelism."""
    built = [f for f in FeatureSet if f != FeatureSet.DYNAMIC_PARALLELISM]
    return StaticBackend(devices, built_features=built)


@pytest.fixture
def catalog(backend) -> DeviceCatalog:
    return DeviceCatalog(backend)


@pytest.fixture
def dump_dir(tmp_path, monkeypatch):
    """Redirect dumps into a temporary directory."""
    path = tmp_path / "dumps"
    monkeypatch.setattr(settings, "DUMP_DIR", path)
    return path


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Redirect test data lookups into a temporary directory."""
    path = tmp_path / "testdata"
    path.mkdir()
    monkeypatch.setattr(settings, "DATA_DIR", path)
    return path
