# utils/__init__.py
"""Utility package re-exporting shared helpers for beaconmap."""

from utils.error_tracker import ErrorTracker
from utils.io import (
    atomic_write_json,
    atomic_write_report,
    atomic_write_yaml,
    ensure_directory,
    load_json,
    load_report,
    load_yaml,
    read_text,
)
from utils.logger import configure, get_logger
from utils.progress import track

__all__ = [
    "ErrorTracker",
    "atomic_write_json",
    "atomic_write_report",
    "atomic_write_yaml",
    "configure",
    "ensure_directory",
    "get_logger",
    "load_json",
    "load_report",
    "load_yaml",
    "read_text",
    "track",
]
