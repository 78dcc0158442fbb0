# beaconmap/registration.py
"""Exact registration of a scan against the global beacon map.

A scan is accepted when some orientation and integer translation make at
least ``overlap_threshold`` of its beacons coincide with beacons already in
the map. Candidate translations come from pairing every map beacon with
every rotated scan beacon; the first candidate (in orientation order, then
map order, then scan order) that reaches the threshold wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Tuple

import numpy as np
import numpy.typing as npt

from beaconmap.config import (
    DEFAULT_REGISTRATION_CONFIG,
    Beacon,
    RegistrationConfig,
    Scan,
    as_points,
)
from beaconmap.orientations import ORIENTATIONS, Orientation
from utils.logger import get_logger

LOGGER = get_logger(__name__)


class GlobalMap:
    """Insertion-ordered set of beacons in the global frame.

    The map only grows; beacons are never removed or moved. Iteration
    follows insertion order so that registration is deterministic.
    """

    def __init__(self, beacons: Iterable[Beacon] = ()) -> None:
        self._beacons: Dict[Beacon, None] = {}
        self._points: Optional[npt.NDArray[np.int64]] = None
        self.merge(beacons)

    def __len__(self) -> int:
        return len(self._beacons)

    def __contains__(self, beacon: object) -> bool:
        return beacon in self._beacons

    def __iter__(self) -> Iterator[Beacon]:
        return iter(self._beacons)

    def beacons(self) -> Tuple[Beacon, ...]:
        return tuple(self._beacons)

    def as_array(self) -> npt.NDArray[np.int64]:
        """Return the map as an (N, 3) int64 array, cached until the next merge."""
        if self._points is None:
            self._points = as_points(self._beacons)
        return self._points

    def count_overlap(self, points: npt.NDArray[np.int64]) -> int:
        """Count how many of ``points`` are already in the map."""
        return sum(1 for p in points.tolist() if tuple(p) in self._beacons)

    def merge(self, beacons: Iterable[Beacon] | npt.NDArray[np.int64]) -> int:
        """Union beacons into the map and return how many were new."""
        if isinstance(beacons, np.ndarray):
            beacons = beacons.tolist()
        before = len(self._beacons)
        for beacon in beacons:
            x, y, z = beacon
            self._beacons.setdefault((int(x), int(y), int(z)), None)
        added = len(self._beacons) - before
        if added:
            self._points = None
        return added


@dataclass(frozen=True)
class RegistrationResult:
    """Accepted alignment of one scan into the global frame."""

    scan_index: int
    orientation: Orientation
    translation: Beacon
    overlap: int
    added: int


def candidate_translations(
    reference: npt.NDArray[np.int64], rotated: npt.NDArray[np.int64]
) -> npt.NDArray[np.int64]:
    """All ``reference - rotated`` differences, reference-major, as (N*M, 3)."""
    return (reference[:, None, :] - rotated[None, :, :]).reshape(-1, 3)


def find_translation(
    reference: npt.NDArray[np.int64],
    rotated: npt.NDArray[np.int64],
    threshold: int,
) -> Optional[Tuple[Beacon, int]]:
    """Return the first translation shared by ``threshold`` point pairs.

    Both inputs must hold distinct points; then the number of pairs giving
    a translation equals the overlap that translation produces.
    """
    if reference.shape[0] == 0 or rotated.shape[0] < threshold:
        return None
    candidates = candidate_translations(reference, rotated)
    unique, first_seen, counts = np.unique(
        candidates, axis=0, return_index=True, return_counts=True
    )
    hits = np.flatnonzero(counts >= threshold)
    if hits.size == 0:
        return None
    best = hits[np.argmin(first_seen[hits])]
    x, y, z = (int(v) for v in unique[best])
    return (x, y, z), int(counts[best])


def register_scan(
    reference: GlobalMap,
    candidate: Scan,
    *,
    config: RegistrationConfig | None = None,
) -> Optional[RegistrationResult]:
    """Try to align ``candidate`` with ``reference``; merge it on success.

    Returns ``None`` when no orientation and translation reach the overlap
    threshold, in which case ``reference`` is left untouched.
    """
    cfg = config or DEFAULT_REGISTRATION_CONFIG
    if len(reference) == 0:
        raise ValueError("Reference map is empty")

    threshold = cfg.overlap_threshold
    points = candidate.as_array()
    if points.shape[0] < threshold:
        LOGGER.debug(
            "Scan {} has {} distinct beacons, below threshold {}",
            candidate.index,
            points.shape[0],
            threshold,
        )
        return None

    ref_points = reference.as_array()
    for orientation in ORIENTATIONS:
        rotated = orientation.apply(points)
        match = find_translation(ref_points, rotated, threshold)
        if match is None:
            continue
        translation, _ = match
        translated = rotated + np.asarray(translation, dtype=np.int64)
        overlap = reference.count_overlap(translated)
        added = reference.merge(translated)
        LOGGER.debug(
            "Scan {} matched orientation {} at {} ({} shared, {} new)",
            candidate.index,
            orientation.index,
            translation,
            overlap,
            added,
        )
        return RegistrationResult(
            scan_index=candidate.index,
            orientation=orientation,
            translation=translation,
            overlap=overlap,
            added=added,
        )

    LOGGER.debug("Scan {} not registrable against {} beacons yet", candidate.index, len(reference))
    return None


__all__ = [
    "GlobalMap",
    "RegistrationResult",
    "candidate_translations",
    "find_translation",
    "register_scan",
]
