# tests/conftest.py
"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Sequence, Set, Tuple

import numpy as np
import pytest

from beaconmap.config import Beacon, ReconstructionConfig, Scan
from beaconmap.io import load_scans
from beaconmap.orientations import get_orientation

DATA_DIR = Path(__file__).parent / "data"

EXAMPLE_OFFSETS: Tuple[Beacon, ...] = (
    (0, 0, 0),
    (68, -1246, -43),
    (1105, -1205, 1229),
    (-92, -2380, -20),
    (-20, -1133, 1061),
)


@dataclass(frozen=True)
class Scene:
    """Synthetic scanners with known ground truth."""

    scans: List[Scan]
    offsets: Tuple[Beacon, ...]
    orientations: Tuple[int, ...]
    beacons: Set[Beacon]


def to_local(points: np.ndarray, orientation_index: int, offset: Sequence[int]) -> np.ndarray:
    """Express global points in a scanner frame (inverse of ``M @ p + t``)."""
    matrix = get_orientation(orientation_index).matrix
    return (points - np.asarray(offset, dtype=np.int64)) @ matrix


def build_scene(
    seed: int,
    offsets: Sequence[Beacon],
    orientations: Sequence[int],
    chain: Sequence[int],
    *,
    shared: int = 12,
    private: int = 8,
) -> Scene:
    """Link consecutive scanners of ``chain`` by ``shared`` common beacons."""
    rng = np.random.default_rng(seed)
    seen: Set[Beacon] = set()

    def fresh(count: int) -> List[Beacon]:
        out: List[Beacon] = []
        while len(out) < count:
            x, y, z = (int(v) for v in rng.integers(-20000, 20000, size=3))
            if (x, y, z) not in seen:
                seen.add((x, y, z))
                out.append((x, y, z))
        return out

    visible: Dict[int, List[Beacon]] = {i: fresh(private) for i in range(len(offsets))}
    for a, b in zip(chain, chain[1:]):
        common = fresh(shared)
        visible[a].extend(common)
        visible[b].extend(common)

    scans: List[Scan] = []
    for index in range(len(offsets)):
        points = np.array(visible[index], dtype=np.int64)
        points = points[rng.permutation(points.shape[0])]
        local = to_local(points, orientations[index], offsets[index])
        scans.append(Scan(index=index, beacons=tuple(map(tuple, local.tolist()))))
    return Scene(
        scans=scans,
        offsets=tuple(offsets),
        orientations=tuple(orientations),
        beacons=set(seen),
    )


@pytest.fixture
def example_scans_path() -> Path:
    """Five-scanner example report."""
    return DATA_DIR / "example_scans.txt"


@pytest.fixture
def example_scans(example_scans_path: Path) -> List[Scan]:
    return load_scans(example_scans_path)


@pytest.fixture
def quiet() -> ReconstructionConfig:
    """Reconstruction config without progress bars."""
    return ReconstructionConfig(show_progress=False)


@pytest.fixture
def scene_factory() -> Callable[..., Scene]:
    return build_scene


@pytest.fixture
def disjoint_scans() -> List[Scan]:
    """Two scanners that share no beacon at all."""
    rng = np.random.default_rng(7)
    first = rng.integers(-1000, 1000, size=(20, 3))
    second = rng.integers(5000, 7000, size=(20, 3))
    return [
        Scan(index=0, beacons=tuple(map(tuple, first.tolist()))),
        Scan(index=1, beacons=tuple(map(tuple, second.tolist()))),
    ]
