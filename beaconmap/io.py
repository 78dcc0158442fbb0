# beaconmap/io.py
"""Scan report parsing and reconstruction report export."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from beaconmap.builder import Reconstruction
from beaconmap.config import SCANNER_HEADER_PREFIX, Beacon, Scan
from utils.io import atomic_write_report, read_text
from utils.logger import get_logger

LOGGER = get_logger(__name__)

_HEADER_NUMBER = re.compile(r"scanner\s+(-?\d+)", re.IGNORECASE)


class ScanParseError(ValueError):
    """Raised for report lines that are neither headers nor ``x,y,z``."""

    def __init__(self, line_number: int, line: str, reason: str) -> None:
        self.line_number = line_number
        self.line = line
        super().__init__(f"line {line_number}: {reason}: {line!r}")


def _parse_beacon(line: str, line_number: int) -> Beacon:
    parts = [part.strip() for part in line.split(",")]
    if len(parts) != 3:
        raise ScanParseError(line_number, line, "expected 3 comma-separated values")
    try:
        x, y, z = (int(part) for part in parts)
    except ValueError:
        raise ScanParseError(line_number, line, "coordinates must be integers") from None
    return (x, y, z)


def parse_scans(text: str) -> List[Scan]:
    """Parse ``--- scanner N ---`` sections into scans indexed by position."""
    sections: List[List[Beacon]] = []
    current: Optional[List[Beacon]] = None
    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        if line.startswith(SCANNER_HEADER_PREFIX):
            current = []
            sections.append(current)
            match = _HEADER_NUMBER.search(line)
            if match and int(match.group(1)) != len(sections) - 1:
                LOGGER.warning(
                    "Header {!r} on line {} is section {}; using position",
                    line,
                    line_number,
                    len(sections) - 1,
                )
            continue
        if current is None:
            raise ScanParseError(line_number, raw, "beacon before first scanner header")
        current.append(_parse_beacon(line, line_number))

    scans = [Scan(index=i, beacons=tuple(beacons)) for i, beacons in enumerate(sections)]
    LOGGER.debug(
        "Parsed {} scans with {} beacons", len(scans), sum(len(s) for s in scans)
    )
    return scans


def load_scans(path: Path) -> List[Scan]:
    scans = parse_scans(read_text(path))
    LOGGER.info("Loaded {} scans from {}", len(scans), path.name)
    return scans


def write_report(path: Path, reconstruction: Reconstruction) -> Path:
    """Write the reconstruction as JSON, or YAML for ``.yaml``/``.yml``."""
    atomic_write_report(path, reconstruction.as_dict())
    LOGGER.info("Saved reconstruction report to {}", path)
    return path


__all__ = ["ScanParseError", "load_scans", "parse_scans", "write_report"]
