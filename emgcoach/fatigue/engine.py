"""Rep-by-rep fatigue zone classification (RMS only).

Both functions are pure and O(n) in the number of reps. Rises are measured
relative to the first rep of the set, which serves as the baseline.

Rules, in evaluation order:
- low_signal: latest rep confidence below the gate (always wins)
- too_heavy_early: sharp, confirmed surge within the first reps
- in_zone: last two reps confirm a sustained rise inside the target window
- too_light: target window finished without a meaningful rise
- building: everything else, including ambiguous or invalidating drops
"""

from collections.abc import Sequence

from loguru import logger

from emgcoach.fatigue.thresholds import (
    DEFAULT_REP_ZONE_THRESHOLDS,
    DEFAULT_TARGET_RANGE,
    RepZoneThresholds,
    TargetRange,
)
from emgcoach.fatigue.types import RepFeature, RepZone


def _pct(a: float, b: float) -> float:
    """Fractional change from ``a`` to ``b``."""
    return (b - a) / max(1e-6, a)


def _is_confirmed(
    reps: Sequence[RepFeature],
    position: int,
    baseline: float,
    thresholds: RepZoneThresholds,
) -> bool:
    """Check whether the rep at ``position`` confirms fatigue onset.

    Both the rep and its predecessor must sit above baseline by the in-zone
    minimum, the step between them must still be rising, and the rep must not
    have dropped away from the peak of the prefix ending at it.
    """
    previous = reps[position - 1]
    current = reps[position]
    rise_previous = _pct(baseline, previous.rms_norm)
    rise_current = _pct(baseline, current.rms_norm)
    step = _pct(previous.rms_norm, current.rms_norm)
    peak = max(rep.rms_norm for rep in reps[: position + 1])
    dropped_after_peak = _pct(peak, current.rms_norm) <= -thresholds.drop_after_peak

    return (
        rise_previous >= thresholds.in_zone_drms_min
        and rise_current >= thresholds.in_zone_drms_min
        and step >= thresholds.in_zone_slope_min
        and not dropped_after_peak
    )


def classify_zone(
    reps: Sequence[RepFeature],
    target: TargetRange = DEFAULT_TARGET_RANGE,
    thresholds: RepZoneThresholds = DEFAULT_REP_ZONE_THRESHOLDS,
) -> RepZone:
    """Classify the set's fatigue zone from the reps collected so far.

    Args:
        reps: Rep features in order of completion
        target: Rep window in which fatigue onset is expected
        thresholds: Classification constants

    Returns:
        One of the five ``RepZone`` values
    """
    n = len(reps)
    if n == 0:
        return RepZone.BUILDING

    last = reps[-1]
    if last.signal_confidence < thresholds.low_signal:
        logger.debug(
            "[ZONES] Low signal on latest rep",
            rep_idx=last.idx,
            signal_confidence=last.signal_confidence,
        )
        return RepZone.LOW_SIGNAL

    baseline = reps[0].rms_norm

    if last.idx <= thresholds.early_window_max_rep and n >= thresholds.confirm_reps:
        previous = reps[-2]
        rise = _pct(baseline, last.rms_norm)
        step = _pct(previous.rms_norm, last.rms_norm)
        surge_rise = thresholds.in_zone_drms_min + thresholds.early_surge_rise_margin
        surge_step = thresholds.in_zone_slope_min + thresholds.early_surge_slope_margin
        if rise >= surge_rise and step >= surge_step:
            return RepZone.TOO_HEAVY_EARLY

    within_target = target.min <= last.idx <= target.max
    if within_target and n >= thresholds.confirm_reps and _is_confirmed(reps, n - 1, baseline, thresholds):
        return RepZone.IN_ZONE

    if last.idx >= target.max and _pct(baseline, last.rms_norm) < thresholds.too_light_drms_max:
        return RepZone.TOO_LIGHT

    return RepZone.BUILDING


def find_fatigue_rep(
    reps: Sequence[RepFeature],
    target: TargetRange = DEFAULT_TARGET_RANGE,
    thresholds: RepZoneThresholds = DEFAULT_REP_ZONE_THRESHOLDS,
) -> int | None:
    """Locate the earliest rep at which fatigue onset is confirmed.

    Candidates are scanned across the target window. Whether a candidate is
    confirmed depends only on the reps up to and including it, so appending
    reps never changes an index that was already returned.

    Args:
        reps: Rep features in order of completion
        target: Rep window in which fatigue onset is expected
        thresholds: Classification constants

    Returns:
        The ``idx`` of the confirming rep, or None if no rep confirms
    """
    if len(reps) < thresholds.confirm_reps:
        return None

    baseline = reps[0].rms_norm
    last_candidate = min(target.max, len(reps))
    for rep_number in range(max(target.min, 2), last_candidate + 1):
        position = rep_number - 1
        if _is_confirmed(reps, position, baseline, thresholds):
            logger.debug("[ZONES] Fatigue rep confirmed", rep_idx=reps[position].idx)
            return reps[position].idx

    return None


determine_zone = classify_zone
