# beaconmap/orientations.py
"""The 24 proper rotations of a cube as signed permutation matrices."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import permutations, product
from typing import Final, Iterator, Tuple

import numpy as np
import numpy.typing as npt

from beaconmap.config import ORIENTATION_COUNT


@dataclass(frozen=True, eq=False)
class Orientation:
    """One axis-aligned rotation, applied as ``matrix @ point``."""

    index: int
    matrix: npt.NDArray[np.int64]

    def apply(self, points: npt.NDArray[np.int64]) -> npt.NDArray[np.int64]:
        """Rotate an (N, 3) integer array of points."""
        return points @ self.matrix.T

    def apply_one(self, point: Tuple[int, int, int]) -> Tuple[int, int, int]:
        x, y, z = (int(v) for v in self.matrix @ np.asarray(point, dtype=np.int64))
        return (x, y, z)

    @property
    def is_identity(self) -> bool:
        return bool(np.array_equal(self.matrix, np.eye(3, dtype=np.int64)))

    def as_tuple(self) -> Tuple[Tuple[int, int, int], ...]:
        """Return the matrix rows as nested tuples."""
        return tuple(tuple(int(v) for v in row) for row in self.matrix)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Orientation):
            return NotImplemented
        return np.array_equal(self.matrix, other.matrix)

    def __hash__(self) -> int:
        return hash(self.as_tuple())

    def __repr__(self) -> str:
        return f"Orientation(index={self.index}, rows={self.as_tuple()})"


def _permutation_parity(perm: Tuple[int, ...]) -> int:
    inversions = sum(
        1 for i in range(len(perm)) for j in range(i + 1, len(perm)) if perm[i] > perm[j]
    )
    return -1 if inversions % 2 else 1


def _build_orientations() -> Tuple[Orientation, ...]:
    # det(signed permutation) = parity(perm) * product(signs); keep det == +1
    matrices = []
    for perm in permutations(range(3)):
        parity = _permutation_parity(perm)
        for signs in product((1, -1), repeat=3):
            if parity * signs[0] * signs[1] * signs[2] != 1:
                continue
            matrix = np.zeros((3, 3), dtype=np.int64)
            for row, (axis, sign) in enumerate(zip(perm, signs)):
                matrix[row, axis] = sign
            matrix.setflags(write=False)
            matrices.append(matrix)
    orientations = tuple(Orientation(index=i, matrix=m) for i, m in enumerate(matrices))
    if len(orientations) != ORIENTATION_COUNT:
        raise RuntimeError(
            f"Expected {ORIENTATION_COUNT} proper rotations, built {len(orientations)}"
        )
    return orientations


ORIENTATIONS: Final[Tuple[Orientation, ...]] = _build_orientations()
IDENTITY: Final[Orientation] = ORIENTATIONS[0]


def iter_orientations() -> Iterator[Orientation]:
    """Yield all orientations in their stable order, identity first."""
    return iter(ORIENTATIONS)


def get_orientation(index: int) -> Orientation:
    if not 0 <= index < len(ORIENTATIONS):
        raise IndexError(f"Orientation index out of range: {index}")
    return ORIENTATIONS[index]


__all__ = [
    "IDENTITY",
    "ORIENTATIONS",
    "Orientation",
    "get_orientation",
    "iter_orientations",
]
