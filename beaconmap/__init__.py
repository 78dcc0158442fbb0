"""Beacon map reconstruction from overlapping scanner reports."""

from __future__ import annotations

from beaconmap.builder import (
    MapBuilder,
    Reconstruction,
    ReconstructionError,
    ReconstructionStatus,
    reconstruct,
)
from beaconmap.config import Scan, Settings, get_settings
from beaconmap.io import ScanParseError, load_scans, parse_scans
from beaconmap.registration import GlobalMap, register_scan

__all__ = [
    "GlobalMap",
    "MapBuilder",
    "Reconstruction",
    "ReconstructionError",
    "ReconstructionStatus",
    "Scan",
    "ScanParseError",
    "Settings",
    "get_settings",
    "load_scans",
    "parse_scans",
    "reconstruct",
    "register_scan",
]
