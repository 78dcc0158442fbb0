# beaconmap/distance.py
"""Distance aggregation over resolved scanner offsets."""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from beaconmap.config import Beacon, as_points


def manhattan_distance(a: Beacon, b: Beacon) -> int:
    return sum(abs(int(u) - int(v)) for u, v in zip(a, b))


def max_pairwise_distance(offsets: Sequence[Beacon]) -> int:
    """Largest Manhattan distance over unordered pairs; 0 for fewer than two."""
    if len(offsets) < 2:
        return 0
    points = as_points(offsets)
    distances = np.abs(points[:, None, :] - points[None, :, :]).sum(axis=2)
    return int(distances.max())


def summarize(beacons: Sequence[Beacon], offsets: Sequence[Beacon]) -> Tuple[int, int]:
    """Return distinct beacon count and the maximum scanner separation."""
    return len(set(beacons)), max_pairwise_distance(offsets)


__all__ = ["manhattan_distance", "max_pairwise_distance", "summarize"]
