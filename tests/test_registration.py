# tests/test_registration.py
"""Tests for pairwise registration against the global map."""

from __future__ import annotations

from typing import List

import numpy as np
import pytest

from beaconmap.config import RegistrationConfig, Scan
from beaconmap.orientations import IDENTITY
from beaconmap.registration import (
    GlobalMap,
    candidate_translations,
    find_translation,
    register_scan,
)

from .conftest import to_local


def _scan(index: int, points: np.ndarray) -> Scan:
    return Scan(index=index, beacons=tuple(map(tuple, points.tolist())))


def test_global_map_is_an_ordered_set() -> None:
    """Duplicates collapse and insertion order is kept."""
    gmap = GlobalMap([(1, 2, 3), (4, 5, 6), (1, 2, 3)])
    assert len(gmap) == 2
    assert (4, 5, 6) in gmap
    assert gmap.beacons() == ((1, 2, 3), (4, 5, 6))

    added = gmap.merge(np.array([[4, 5, 6], [7, 8, 9]], dtype=np.int64))
    assert added == 1
    assert list(gmap) == [(1, 2, 3), (4, 5, 6), (7, 8, 9)]
    assert gmap.as_array().shape == (3, 3)


def test_identical_scan_registers_with_full_overlap(example_scans: List[Scan]) -> None:
    """A scan matches a copy of itself at zero translation, identity rotation."""
    anchor = example_scans[0]
    gmap = GlobalMap(anchor.beacons)

    result = register_scan(gmap, anchor)

    assert result is not None
    assert result.translation == (0, 0, 0)
    assert result.orientation == IDENTITY
    assert result.overlap == len(anchor) == 25
    assert result.added == 0
    assert len(gmap) == 25


def test_recovers_rotation_and_translation(example_scans: List[Scan]) -> None:
    """A rotated, shifted copy of a scan is placed back exactly."""
    anchor = example_scans[0]
    points = anchor.as_array()
    offset = (150, -275, 1010)
    moved = _scan(1, to_local(points, 17, offset))
    gmap = GlobalMap(anchor.beacons)

    result = register_scan(gmap, moved)

    assert result is not None
    assert result.orientation.index == 17
    assert result.translation == offset
    # copy is identical in the global frame, so nothing new is merged
    assert len(gmap) == 25


def test_example_scanner_one_against_anchor(example_scans: List[Scan]) -> None:
    """Scanner 1 of the example sits at 68,-1246,-43 facing (-x, y, -z)."""
    gmap = GlobalMap(example_scans[0].beacons)

    result = register_scan(gmap, example_scans[1])

    assert result is not None
    assert result.translation == (68, -1246, -43)
    assert result.overlap == 12
    assert np.array_equal(result.orientation.matrix, np.diag([-1, 1, -1]))
    assert len(gmap) == 25 + 25 - 12
    assert (-618, -824, -621) in gmap


def test_below_threshold_leaves_reference_untouched() -> None:
    """Eleven shared beacons are not enough and raise nothing."""
    rng = np.random.default_rng(11)
    reference = rng.integers(-1000, 1000, size=(25, 3))
    far = rng.integers(30000, 40000, size=(14, 3))
    candidate = _scan(1, np.vstack([reference[:11], far]))
    gmap = GlobalMap(map(tuple, reference.tolist()))
    before = gmap.beacons()

    assert register_scan(gmap, candidate) is None
    assert gmap.beacons() == before


def test_threshold_is_configurable() -> None:
    """Lowering the threshold accepts the same eleven-beacon overlap."""
    rng = np.random.default_rng(11)
    reference = rng.integers(-1000, 1000, size=(25, 3))
    far = rng.integers(30000, 40000, size=(14, 3))
    candidate = _scan(1, np.vstack([reference[:11], far]))
    gmap = GlobalMap(map(tuple, reference.tolist()))

    result = register_scan(gmap, candidate, config=RegistrationConfig(overlap_threshold=11))

    assert result is not None
    assert result.translation == (0, 0, 0)
    assert result.overlap == 11
    assert result.added == 14
    assert len(gmap) == 39


def test_small_scan_is_rejected_early() -> None:
    """Scans with fewer distinct beacons than the threshold cannot match."""
    gmap = GlobalMap([(i, i, i) for i in range(20)])
    tiny = Scan(index=1, beacons=tuple((i, i, i) for i in range(11)))
    assert register_scan(gmap, tiny) is None
    assert len(gmap) == 20


def test_duplicate_beacons_in_candidate_collapse(example_scans: List[Scan]) -> None:
    """Repeated beacons in a scan do not inflate the overlap."""
    anchor = example_scans[0]
    doubled = Scan(index=1, beacons=anchor.beacons + anchor.beacons[:5])
    gmap = GlobalMap(anchor.beacons)

    result = register_scan(gmap, doubled)

    assert result is not None
    assert result.overlap == 25


def test_empty_reference_is_rejected(example_scans: List[Scan]) -> None:
    """Registration needs at least one reference beacon."""
    with pytest.raises(ValueError, match="empty"):
        register_scan(GlobalMap(), example_scans[0])


def test_map_size_never_decreases(example_scans: List[Scan]) -> None:
    """Repeated attempts, successful or not, only grow the map."""
    gmap = GlobalMap(example_scans[0].beacons)
    sizes = [len(gmap)]
    for scan in example_scans[1:] + example_scans[1:]:
        register_scan(gmap, scan)
        sizes.append(len(gmap))
    assert sizes == sorted(sizes)
    assert sizes[-1] == 79


def test_candidate_translations_are_reference_major() -> None:
    """Pairs are enumerated reference point first, rotated point second."""
    reference = np.array([[0, 0, 0], [5, 5, 5]], dtype=np.int64)
    rotated = np.array([[1, 0, 0], [0, 1, 0], [0, 0, 1]], dtype=np.int64)
    candidates = candidate_translations(reference, rotated)
    assert candidates.shape == (6, 3)
    assert candidates[0].tolist() == [-1, 0, 0]
    assert candidates[3].tolist() == [4, 5, 5]


def test_first_translation_wins_ties() -> None:
    """When two translations reach the threshold, the earlier one is used."""
    rotated = np.array([[0, 0, 0], [1, 0, 0]], dtype=np.int64)
    near_first = np.array([[0, 0, 0], [1, 0, 0], [10, 0, 0], [11, 0, 0]], dtype=np.int64)
    far_first = near_first[[2, 3, 0, 1]]

    assert find_translation(near_first, rotated, 2) == ((0, 0, 0), 2)
    assert find_translation(far_first, rotated, 2) == ((10, 0, 0), 2)
    assert find_translation(near_first, rotated, 3) is None
