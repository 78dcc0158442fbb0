# beaconmap/config.py
"""Centralized configuration for the beaconmap reconstruction toolkit.

All constants, settings, and configuration dataclasses are defined here.
Modules should import from this single source of truth.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Final, Iterable, Tuple

import numpy as np
import numpy.typing as npt

# ============================================================================
# PROJECT PATHS
# ============================================================================

BASE_DIR: Final[Path] = Path(__file__).resolve().parent.parent


def _env_path(key: str, default: Path) -> Path:
    """Resolve path from environment variable with fallback."""
    value = os.getenv(key)
    return Path(value).expanduser() if value else default


def _env_str(key: str, default: str) -> str:
    """Resolve string from environment variable with fallback."""
    value = os.getenv(key)
    return value if value is not None else default


def _env_int(key: str, default: int) -> int:
    """Resolve integer from environment variable with fallback."""
    value = os.getenv(key)
    return int(value) if value is not None else default


def _env_bool(key: str, default: bool) -> bool:
    """Resolve boolean from environment variable with fallback."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


# ============================================================================
# REGISTRATION CONSTANTS
# ============================================================================

OVERLAP_THRESHOLD: Final[int] = 12
ANCHOR_SCAN_INDEX: Final[int] = 0
ORIENTATION_COUNT: Final[int] = 24

# ============================================================================
# FILE NAMING CONSTANTS
# ============================================================================

FILENAME_REPORT_JSON: Final[str] = "reconstruction.json"
SCANNER_HEADER_PREFIX: Final[str] = "---"

# ============================================================================
# ENUMS
# ============================================================================


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# ============================================================================
# DATACLASSES - Core Data Types
# ============================================================================

Beacon = Tuple[int, int, int]


@dataclass(frozen=True)
class Scan:
    """Beacons reported by one scanner, in that scanner's local frame.

    Attributes:
        index: Position of the scanner in the input report
        beacons: Integer coordinate triples in input order
    """

    index: int
    beacons: Tuple[Beacon, ...]

    def __post_init__(self) -> None:
        """Normalize beacons to integer tuples."""
        beacons = tuple(tuple(int(c) for c in beacon) for beacon in self.beacons)
        for beacon in beacons:
            if len(beacon) != 3:
                raise ValueError(f"Beacon must have 3 coordinates, got {beacon}")
        object.__setattr__(self, "beacons", beacons)

    def __len__(self) -> int:
        return len(self.beacons)

    def distinct(self) -> Tuple[Beacon, ...]:
        """Return beacons with duplicates removed, keeping first occurrences."""
        return tuple(dict.fromkeys(self.beacons))

    def as_array(self) -> npt.NDArray[np.int64]:
        """Return distinct beacons as an (N, 3) integer array."""
        return as_points(self.distinct())


def as_points(beacons: Iterable[Beacon]) -> npt.NDArray[np.int64]:
    """Stack beacons into an (N, 3) int64 array; empty input gives shape (0, 3)."""
    points = np.array(list(beacons), dtype=np.int64)
    return points.reshape(-1, 3)


# ============================================================================
# DATACLASSES - Configuration Sections
# ============================================================================


@dataclass(frozen=True)
class PathsConfig:
    """File system paths configuration."""

    data_root: Path
    saves_root: Path
    logs_root: Path


@dataclass(frozen=True)
class RegistrationConfig:
    """Pairwise registration configuration."""

    overlap_threshold: int = OVERLAP_THRESHOLD

    def __post_init__(self) -> None:
        """Validate threshold."""
        if self.overlap_threshold < 1:
            raise ValueError(
                f"overlap_threshold must be positive, got {self.overlap_threshold}"
            )


@dataclass(frozen=True)
class ReconstructionConfig:
    """Global map builder configuration."""

    show_progress: bool = True


@dataclass(frozen=True)
class LoggingConfig:
    """Logging sinks configuration."""

    level: str = LogLevel.INFO.value
    log_to_file: bool = False


DEFAULT_REGISTRATION_CONFIG: Final[RegistrationConfig] = RegistrationConfig()
DEFAULT_RECONSTRUCTION_CONFIG: Final[ReconstructionConfig] = ReconstructionConfig()


# ============================================================================
# MAIN CONFIGURATION
# ============================================================================


@dataclass(frozen=True)
class Settings:
    """Main application configuration.

    All subsystem configurations are aggregated here.
    Instances are immutable (frozen=True) to prevent accidental mutation.
    """

    paths: PathsConfig
    registration: RegistrationConfig = field(default_factory=RegistrationConfig)
    reconstruction: ReconstructionConfig = field(default_factory=ReconstructionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_settings() -> Settings:
    """Build settings from defaults and ``BEACONMAP_*`` environment overrides."""
    data_root = _env_path("BEACONMAP_DATA_ROOT", BASE_DIR / "data")
    paths = PathsConfig(
        data_root=data_root,
        saves_root=data_root / "saves",
        logs_root=_env_path("BEACONMAP_LOG_DIR", BASE_DIR / "logs"),
    )
    return Settings(
        paths=paths,
        registration=RegistrationConfig(
            overlap_threshold=_env_int("BEACONMAP_OVERLAP_THRESHOLD", OVERLAP_THRESHOLD),
        ),
        reconstruction=ReconstructionConfig(
            show_progress=_env_bool("BEACONMAP_PROGRESS", True),
        ),
        logging=LoggingConfig(
            level=_env_str("BEACONMAP_LOG_LEVEL", LogLevel.INFO.value).upper(),
            log_to_file=_env_bool("BEACONMAP_LOG_FILE", False),
        ),
    )


__all__ = [
    "ANCHOR_SCAN_INDEX",
    "BASE_DIR",
    "Beacon",
    "DEFAULT_RECONSTRUCTION_CONFIG",
    "DEFAULT_REGISTRATION_CONFIG",
    "FILENAME_REPORT_JSON",
    "LogLevel",
    "LoggingConfig",
    "ORIENTATION_COUNT",
    "OVERLAP_THRESHOLD",
    "PathsConfig",
    "ReconstructionConfig",
    "RegistrationConfig",
    "SCANNER_HEADER_PREFIX",
    "Scan",
    "Settings",
    "as_points",
    "get_settings",
]
