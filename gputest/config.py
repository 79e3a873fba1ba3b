"""Harness configuration.

Settings are read from the environment with the ``GPUTEST_`` prefix, e.g.
``GPUTEST_DATA_DIR=/data/opencv_extra/testdata/gpu`` or ``GPUTEST_DEVICE=0``.
Modules read ``settings`` at call time, so tests may patch its attributes.
"""

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from .constants import DEFAULT_SEED, ROI_MARGIN_MIN, ROI_MARGIN_MAX

_PROJECT_ROOT = Path(__file__).parent.parent


class Settings(BaseSettings):
    """Harness settings."""

    # Paths
    DATA_DIR: Path = _PROJECT_ROOT / "testdata"  # Reference assets for read_image
    DUMP_DIR: Path = _PROJECT_ROOT / "tmp" / "dumps"  # Post-mortem dumps

    # Random source
    SEED: int = DEFAULT_SEED
    RANDOM_SEED: bool = False  # Draw a fresh seed per run instead of SEED

    # Device selection (-1 loads every detected device)
    DEVICE: int = -1

    # ROI emulation; a margin of 2 keeps at least one padding column or row per side
    ROI_MARGIN_MIN: int = Field(default=ROI_MARGIN_MIN, ge=2)
    ROI_MARGIN_MAX: int = Field(default=ROI_MARGIN_MAX, ge=2)

    model_config = {"env_prefix": "GPUTEST_", "validate_assignment": True}

    @model_validator(mode='after')
    def _check_margin_range(self) -> 'Settings':
        if self.ROI_MARGIN_MIN > self.ROI_MARGIN_MAX:
            raise ValueError(
                f"ROI_MARGIN_MIN ({self.ROI_MARGIN_MIN}) exceeds ROI_MARGIN_MAX ({self.ROI_MARGIN_MAX})"
            )
        return self


settings = Settings()


def get_dump_dir() -> Path:
    """Get the dump directory, creating it if needed.

    Returns:
        Path to the dump directory
    """
    settings.DUMP_DIR.mkdir(parents=True, exist_ok=True)
    return settings.DUMP_DIR


__all__ = [
    'Settings',
    'settings',
    'get_dump_dir',
]
