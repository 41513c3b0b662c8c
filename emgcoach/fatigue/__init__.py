"""Rep-by-rep fatigue zone classification."""

from emgcoach.fatigue.engine import classify_zone, determine_zone, find_fatigue_rep
from emgcoach.fatigue.thresholds import (
    DEFAULT_REP_ZONE_THRESHOLDS,
    DEFAULT_TARGET_RANGE,
    RepZoneThresholds,
    TargetRange,
)
from emgcoach.fatigue.types import RepFeature, RepZone

__all__ = [
    "DEFAULT_REP_ZONE_THRESHOLDS",
    "DEFAULT_TARGET_RANGE",
    "RepFeature",
    "RepZone",
    "RepZoneThresholds",
    "TargetRange",
    "classify_zone",
    "determine_zone",
    "find_fatigue_rep",
]
