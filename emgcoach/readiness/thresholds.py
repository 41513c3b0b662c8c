"""Drop-percentage zone boundaries - single source of truth.

Boundaries are keyed by movement class and load bucket. Exercise profiles may
override individual buckets; overrides always win over class defaults.
Unknown exercises are treated as multi-joint free-weight movements.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum


class MovementClass(StrEnum):
    """Coarse movement family used to pick drop thresholds."""

    SINGLE_JOINT_STABLE = "single_joint_stable"
    MULTI_JOINT_FREE = "multi_joint_free"


class LoadBucket(StrEnum):
    """Relative load bucket derived from the fraction of estimated 1RM."""

    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"


class ReadinessZone(StrEnum):
    """Set-level drop zone."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


@dataclass(frozen=True)
class Thresholds:
    """Drop-percentage boundaries (fractions).

    Attributes:
        green: Inclusive productive window
        yellow: Window between the green upper bound and red
        red: Drops above this are excessive
    """

    green: tuple[float, float]
    yellow: tuple[float, float]
    red: float


@dataclass(frozen=True)
class ExerciseProfile:
    """Static reference data for one exercise."""

    id: str
    movement_class: MovementClass
    custom_thresholds: Mapping[LoadBucket, Thresholds] = field(default_factory=dict)


DEFAULT_THRESHOLDS: Mapping[MovementClass, Mapping[LoadBucket, Thresholds]] = {
    MovementClass.SINGLE_JOINT_STABLE: {
        LoadBucket.HEAVY: Thresholds(green=(0.08, 0.15), yellow=(0.15, 0.25), red=0.25),
        LoadBucket.MODERATE: Thresholds(green=(0.10, 0.20), yellow=(0.20, 0.30), red=0.30),
        LoadBucket.LIGHT: Thresholds(green=(0.12, 0.25), yellow=(0.25, 0.35), red=0.35),
    },
    MovementClass.MULTI_JOINT_FREE: {
        LoadBucket.HEAVY: Thresholds(green=(0.10, 0.18), yellow=(0.18, 0.28), red=0.28),
        LoadBucket.MODERATE: Thresholds(green=(0.12, 0.22), yellow=(0.22, 0.32), red=0.32),
        LoadBucket.LIGHT: Thresholds(green=(0.15, 0.28), yellow=(0.28, 0.38), red=0.38),
    },
}

EXERCISE_LIBRARY: Mapping[str, ExerciseProfile] = {
    "back_squat": ExerciseProfile(id="back_squat", movement_class=MovementClass.MULTI_JOINT_FREE),
    "split_squat": ExerciseProfile(id="split_squat", movement_class=MovementClass.MULTI_JOINT_FREE),
    "knee_extension": ExerciseProfile(id="knee_extension", movement_class=MovementClass.SINGLE_JOINT_STABLE),
}

ZONE_SCORES: Mapping[ReadinessZone, int] = {
    ReadinessZone.GREEN: 82,
    ReadinessZone.YELLOW: 62,
    ReadinessZone.RED: 37,
}

HEAVY_LOAD_PCT = 0.80
MODERATE_LOAD_PCT = 0.60


def bucket_load(load_pct: float | None) -> LoadBucket:
    """Map a fraction of 1RM to a load bucket (moderate when unknown)."""
    if load_pct is None or math.isnan(load_pct):
        return LoadBucket.MODERATE
    if load_pct >= HEAVY_LOAD_PCT:
        return LoadBucket.HEAVY
    if load_pct >= MODERATE_LOAD_PCT:
        return LoadBucket.MODERATE
    return LoadBucket.LIGHT


def map_drop_to_zone(drop_pct: float, thresholds: Thresholds) -> ReadinessZone:
    if drop_pct <= thresholds.green[1]:
        return ReadinessZone.GREEN
    if drop_pct <= thresholds.yellow[1]:
        return ReadinessZone.YELLOW
    return ReadinessZone.RED


def zone_to_score(zone: ReadinessZone) -> int:
    return ZONE_SCORES[zone]


@dataclass(frozen=True)
class ThresholdTable:
    """Read-only lookup of thresholds by exercise and relative load.

    Attributes:
        defaults: Class defaults per movement class and load bucket
        library: Known exercise profiles keyed by id
        fallback_movement: Movement class assumed for unknown exercises
    """

    defaults: Mapping[MovementClass, Mapping[LoadBucket, Thresholds]] = field(
        default_factory=lambda: DEFAULT_THRESHOLDS
    )
    library: Mapping[str, ExerciseProfile] = field(default_factory=lambda: EXERCISE_LIBRARY)
    fallback_movement: MovementClass = MovementClass.MULTI_JOINT_FREE

    def profile(self, exercise_id: str | None) -> ExerciseProfile:
        """Look up an exercise profile, synthesizing one for unknown ids."""
        if exercise_id and exercise_id in self.library:
            return self.library[exercise_id]
        return ExerciseProfile(id=exercise_id or "unknown", movement_class=self.fallback_movement)

    def lookup(self, exercise_id: str | None, load_pct: float | None) -> Thresholds:
        """Resolve thresholds for an exercise at a relative load.

        Args:
            exercise_id: Exercise identifier (None or unknown falls back)
            load_pct: Fraction of estimated 1RM (None means unknown)

        Returns:
            Exercise override for the bucket if present, else the class default
        """
        profile = self.profile(exercise_id)
        bucket = bucket_load(load_pct)
        custom = profile.custom_thresholds.get(bucket)
        if custom is not None:
            return custom
        return self.defaults[profile.movement_class][bucket]


DEFAULT_THRESHOLD_TABLE = ThresholdTable()
