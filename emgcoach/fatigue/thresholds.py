"""Rep-zone thresholds and target window.

Values are fractions of the first rep's amplitude. The early-surge margins are
added on top of the in-zone minimums, so a too-heavy call needs a rise of at
least 18% and a rep-to-rep step of at least 3%.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TargetRange:
    """Inclusive rep window in which fatigue onset is expected."""

    min: int = 7
    max: int = 10


@dataclass(frozen=True)
class RepZoneThresholds:
    """Immutable rep-zone classification constants.

    Attributes:
        early_window_max_rep: Last rep index that still counts as early
        in_zone_drms_min: Minimum rise over baseline for a confirmed rep
        in_zone_slope_min: Minimum rep-to-rep rise for a confirmed rep
        drop_after_peak: Drop below the running peak that invalidates a candidate
        too_light_drms_max: Total rise below which a finished set is too light
        low_signal: Confidence gate for the latest rep
        confirm_reps: Reps needed to confirm a trend
        early_surge_rise_margin: Added to ``in_zone_drms_min`` for the early surge
        early_surge_slope_margin: Added to ``in_zone_slope_min`` for the early surge
    """

    early_window_max_rep: int = 3
    in_zone_drms_min: float = 0.1
    in_zone_slope_min: float = 0.02
    drop_after_peak: float = 0.1
    too_light_drms_max: float = 0.06
    low_signal: float = 0.7
    confirm_reps: int = 2
    early_surge_rise_margin: float = 0.08
    early_surge_slope_margin: float = 0.01


DEFAULT_TARGET_RANGE = TargetRange()
DEFAULT_REP_ZONE_THRESHOLDS = RepZoneThresholds()
