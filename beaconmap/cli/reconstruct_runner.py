# beaconmap/cli/reconstruct_runner.py
"""Reconstruction CLI entry point.

Reads a scanner report, rebuilds the global beacon map and prints the
number of distinct beacons and the largest distance between scanners.

Usage:
    beaconmap-reconstruct INPUT [--threshold N] [--output report.json]
"""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from beaconmap.builder import ReconstructionError, reconstruct
from beaconmap.config import FILENAME_REPORT_JSON, LogLevel, get_settings
from beaconmap.io import ScanParseError, load_scans, write_report
from utils.error_tracker import ErrorTracker
from utils.logger import configure, get_logger

LOGGER = get_logger(__name__)

EXIT_OK = 0
EXIT_STUCK = 1
EXIT_BAD_INPUT = 2


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="beaconmap-reconstruct",
        description="Reconstruct a global beacon map from overlapping scanner reports",
    )
    parser.add_argument("input", type=Path, help="scanner report file")
    parser.add_argument(
        "--threshold",
        type=_positive_int,
        default=None,
        help="minimum shared beacons to accept a registration (default: 12)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="write offsets and orientations to a .json or .yaml report",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help=f"write the report to the saves directory as {FILENAME_REPORT_JSON}",
    )
    parser.add_argument(
        "--log-level",
        choices=[level.value for level in LogLevel],
        default=None,
        help="console log level",
    )
    parser.add_argument(
        "--no-progress", action="store_true", help="disable progress bars"
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run a reconstruction and return the process exit code."""
    args = parse_args(argv)
    tracker = ErrorTracker(context="beaconmap.reconstruct")
    try:
        settings = get_settings()
    except ValueError as exc:
        tracker.record_exception("settings", exc)
        tracker.summary()
        return EXIT_BAD_INPUT
    configure(
        level=args.log_level or settings.logging.level,
        log_to_file=settings.logging.log_to_file,
        log_dir=settings.paths.logs_root,
    )

    registration = settings.registration
    if args.threshold is not None:
        registration = replace(registration, overlap_threshold=args.threshold)
    reconstruction_cfg = settings.reconstruction
    if args.no_progress:
        reconstruction_cfg = replace(reconstruction_cfg, show_progress=False)

    LOGGER.tag("START", f"input={args.input} threshold={registration.overlap_threshold}")

    t0 = time.perf_counter()
    try:
        scans = load_scans(args.input)
    except (OSError, ScanParseError) as exc:
        tracker.record_exception("parse", exc, path=str(args.input))
        tracker.summary()
        return EXIT_BAD_INPUT
    parse_time = time.perf_counter() - t0
    LOGGER.info("Parsing the input took {:.6f}s", parse_time)

    t1 = time.perf_counter()
    try:
        result = reconstruct(scans, registration=registration, config=reconstruction_cfg)
    except ReconstructionError as exc:
        tracker.record_exception(
            "reconstruct", exc, unresolved=list(exc.unresolved), rounds=exc.rounds
        )
        tracker.summary()
        return EXIT_STUCK
    except ValueError as exc:
        tracker.record_exception("reconstruct", exc)
        tracker.summary()
        return EXIT_BAD_INPUT
    LOGGER.info("Reconstruction took {:.6f}s", time.perf_counter() - t1)

    beacon_count, max_distance = result.summary()
    print(f"Number of beacons: {beacon_count}")
    print(f"Max distance between scanners: {max_distance}")

    output = args.output
    if output is None and args.save:
        output = settings.paths.saves_root / FILENAME_REPORT_JSON
    if output is not None:
        try:
            write_report(output, result)
        except OSError as exc:
            tracker.record_exception("report", exc, path=str(output))
            tracker.summary()
            return EXIT_BAD_INPUT
    LOGGER.tag("DONE", f"beacons={beacon_count} max_distance={max_distance}")
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())


__all__ = ["main", "parse_args"]
