# beaconmap/builder.py
"""Round-based reconstruction of the global beacon map."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Sequence, Tuple

from beaconmap.config import (
    ANCHOR_SCAN_INDEX,
    DEFAULT_RECONSTRUCTION_CONFIG,
    DEFAULT_REGISTRATION_CONFIG,
    Beacon,
    ReconstructionConfig,
    RegistrationConfig,
    Scan,
)
from beaconmap.distance import max_pairwise_distance, summarize
from beaconmap.orientations import IDENTITY, Orientation
from beaconmap.registration import GlobalMap, RegistrationResult, register_scan
from utils.logger import get_logger
from utils.progress import track

LOGGER = get_logger(__name__)

ORIGIN: Beacon = (0, 0, 0)


class ReconstructionStatus(str, Enum):
    """Builder state."""

    RECONSTRUCTING = "reconstructing"
    DONE = "done"
    STUCK = "stuck"


class ReconstructionError(RuntimeError):
    """Raised when a full round registers no scan while some remain."""

    def __init__(self, unresolved: Sequence[int], rounds: int) -> None:
        self.unresolved: Tuple[int, ...] = tuple(unresolved)
        self.rounds = rounds
        super().__init__(
            f"Reconstruction stuck after {rounds} round(s); "
            f"unresolved scans: {list(self.unresolved)}"
        )


@dataclass
class ReconstructionState:
    """Mutable state owned by one ``MapBuilder``."""

    global_map: GlobalMap
    offsets: Dict[int, Beacon] = field(default_factory=dict)
    orientations: Dict[int, Orientation] = field(default_factory=dict)
    remaining: List[int] = field(default_factory=list)
    status: ReconstructionStatus = ReconstructionStatus.RECONSTRUCTING
    rounds: int = 0


@dataclass(frozen=True)
class Reconstruction:
    """Result of a successful reconstruction, indexed by scan index."""

    beacons: Tuple[Beacon, ...]
    offsets: Tuple[Beacon, ...]
    orientations: Tuple[Orientation, ...]
    rounds: int

    @property
    def beacon_count(self) -> int:
        return len(self.beacons)

    @property
    def max_scanner_distance(self) -> int:
        return max_pairwise_distance(self.offsets)

    def summary(self) -> Tuple[int, int]:
        """Return ``(distinct_beacon_count, max_scanner_pair_distance)``."""
        return summarize(self.beacons, self.offsets)

    def as_dict(self) -> dict:
        return {
            "beacon_count": self.beacon_count,
            "max_scanner_distance": self.max_scanner_distance,
            "rounds": self.rounds,
            "scanners": [
                {
                    "index": index,
                    "offset": list(offset),
                    "orientation": orientation.index,
                    "rotation": [list(row) for row in orientation.as_tuple()],
                }
                for index, (offset, orientation) in enumerate(
                    zip(self.offsets, self.orientations)
                )
            ],
        }


class MapBuilder:
    """Merge scans into scan 0's frame, one registration round at a time."""

    def __init__(
        self,
        scans: Sequence[Scan],
        *,
        registration: RegistrationConfig | None = None,
        config: ReconstructionConfig | None = None,
    ) -> None:
        if not scans:
            raise ValueError("No scans provided")
        anchor = scans[ANCHOR_SCAN_INDEX]
        if len(anchor) == 0:
            raise ValueError(f"Anchor scan {ANCHOR_SCAN_INDEX} has no beacons")
        self.scans = list(scans)
        self.registration = registration or DEFAULT_REGISTRATION_CONFIG
        self.config = config or DEFAULT_RECONSTRUCTION_CONFIG
        self.state = ReconstructionState(
            global_map=GlobalMap(anchor.beacons),
            offsets={ANCHOR_SCAN_INDEX: ORIGIN},
            orientations={ANCHOR_SCAN_INDEX: IDENTITY},
            remaining=[i for i in range(len(self.scans)) if i != ANCHOR_SCAN_INDEX],
        )
        if not self.state.remaining:
            self.state.status = ReconstructionStatus.DONE
        LOGGER.info(
            "Seeded global map with {} beacons from scan {}; {} scans remaining",
            len(self.state.global_map),
            ANCHOR_SCAN_INDEX,
            len(self.state.remaining),
        )

    @property
    def status(self) -> ReconstructionStatus:
        return self.state.status

    def step(self) -> List[RegistrationResult]:
        """Run one round over the remaining scans and return the successes.

        Scans registered earlier in the round enlarge the map seen by later
        ones. A round without progress moves the builder to STUCK.
        """
        state = self.state
        if state.status is not ReconstructionStatus.RECONSTRUCTING:
            return []

        state.rounds += 1
        accepted: List[RegistrationResult] = []
        still_remaining: List[int] = []
        pending = list(state.remaining)
        for index in track(
            pending,
            description=f"Round {state.rounds}",
            total=len(pending),
            unit="scan",
            disable=not self.config.show_progress,
        ):
            result = register_scan(
                state.global_map, self.scans[index], config=self.registration
            )
            if result is None:
                still_remaining.append(index)
                continue
            state.offsets[index] = result.translation
            state.orientations[index] = result.orientation
            accepted.append(result)
            LOGGER.info(
                "Registered scan {} at {} (orientation {}, overlap {}, +{} beacons)",
                index,
                result.translation,
                result.orientation.index,
                result.overlap,
                result.added,
            )
        state.remaining = still_remaining

        if not state.remaining:
            state.status = ReconstructionStatus.DONE
        elif not accepted:
            state.status = ReconstructionStatus.STUCK
        LOGGER.debug(
            "Round {}: {} registered, {} remaining, map has {} beacons",
            state.rounds,
            len(accepted),
            len(state.remaining),
            len(state.global_map),
        )
        return accepted

    def run(self) -> Reconstruction:
        """Step until DONE; raise ``ReconstructionError`` if STUCK."""
        while self.state.status is ReconstructionStatus.RECONSTRUCTING:
            self.step()
        if self.state.status is ReconstructionStatus.STUCK:
            LOGGER.error("Unable to register scans {}", self.state.remaining)
            raise ReconstructionError(self.state.remaining, self.state.rounds)
        return self.result()

    def result(self) -> Reconstruction:
        state = self.state
        if state.status is not ReconstructionStatus.DONE:
            raise RuntimeError(f"Reconstruction is not complete ({state.status.value})")
        count = len(self.scans)
        reconstruction = Reconstruction(
            beacons=state.global_map.beacons(),
            offsets=tuple(state.offsets[i] for i in range(count)),
            orientations=tuple(state.orientations[i] for i in range(count)),
            rounds=state.rounds,
        )
        LOGGER.info(
            "Reconstructed {} beacons from {} scans in {} round(s)",
            reconstruction.beacon_count,
            count,
            state.rounds,
        )
        return reconstruction


def reconstruct(
    scans: Sequence[Scan],
    *,
    registration: RegistrationConfig | None = None,
    config: ReconstructionConfig | None = None,
) -> Reconstruction:
    """Build the global map from ``scans``; scan 0 defines the frame."""
    return MapBuilder(scans, registration=registration, config=config).run()


__all__ = [
    "MapBuilder",
    "Reconstruction",
    "ReconstructionError",
    "ReconstructionState",
    "ReconstructionStatus",
    "reconstruct",
]
