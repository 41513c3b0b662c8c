"""Set readiness: drop computation, thresholds and plan cost projection."""

from emgcoach.readiness.engine import READINESS_FLOOR, compute_readiness, compute_readiness_drop_from_rms
from emgcoach.readiness.plan_cost import (
    LoadStrategy,
    PlanBlock,
    PlanProjection,
    estimate_plan_cost,
    project_plan_readiness,
)
from emgcoach.readiness.thresholds import (
    DEFAULT_THRESHOLD_TABLE,
    DEFAULT_THRESHOLDS,
    EXERCISE_LIBRARY,
    ExerciseProfile,
    LoadBucket,
    MovementClass,
    ReadinessZone,
    ThresholdTable,
    Thresholds,
    bucket_load,
    map_drop_to_zone,
    zone_to_score,
)
from emgcoach.readiness.types import (
    DEFAULT_READINESS_CONFIG,
    BaselineMode,
    ReadinessConfig,
    ReadinessInputs,
    ReadinessOutputs,
    RepWindow,
)

__all__ = [
    "DEFAULT_READINESS_CONFIG",
    "DEFAULT_THRESHOLDS",
    "DEFAULT_THRESHOLD_TABLE",
    "EXERCISE_LIBRARY",
    "READINESS_FLOOR",
    "BaselineMode",
    "ExerciseProfile",
    "LoadBucket",
    "LoadStrategy",
    "MovementClass",
    "PlanBlock",
    "PlanProjection",
    "ReadinessConfig",
    "ReadinessInputs",
    "ReadinessOutputs",
    "ReadinessZone",
    "RepWindow",
    "ThresholdTable",
    "Thresholds",
    "bucket_load",
    "compute_readiness",
    "compute_readiness_drop_from_rms",
    "estimate_plan_cost",
    "map_drop_to_zone",
    "project_plan_readiness",
    "zone_to_score",
]
