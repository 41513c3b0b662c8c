"""Readiness computation from a completed set's rep-peak RMS trace.

Pipeline:
1. Per-rep peaks (given directly, or the max of each rep window in a stream)
2. Baseline amplitude from the early reps (optionally pooled with history)
3. Raw fractional drop per rep, noise-floored, EMA-smoothed
4. Set-level drop = mean of the smoothed tail
5. Zone from load-aware thresholds, fixed zone score
6. Readiness blended against the prior value, clamped and floored

Only missing inputs raise. Degenerate numerics fall back to defined values.
"""

import math
from collections.abc import Mapping, Sequence
from typing import Any

from loguru import logger
from pydantic import ValidationError

from emgcoach.core.errors import InvalidInputError
from emgcoach.readiness.thresholds import (
    DEFAULT_THRESHOLD_TABLE,
    ThresholdTable,
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

# Readiness never reports below this after a single set
READINESS_FLOOR = 49.0


def _ema(previous: float | None, value: float, alpha: float) -> float:
    if previous is None:
        return value
    return alpha * value + (1 - alpha) * previous


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _rep_peaks_from_windows(rms_stream: Sequence[float], windows: Sequence[RepWindow]) -> list[float]:
    peaks: list[float] = []
    for window in windows:
        peak = 0.0
        for value in rms_stream[window.start_idx : window.end_idx + 1]:
            if value > peak:
                peak = value
        peaks.append(peak)
    return peaks


def _rep_drop(peak: float, baseline: float) -> float:
    """Fractional drop of one rep below baseline. Non-finite peaks count as no drop."""
    if not math.isfinite(peak):
        return 0.0
    return max(0.0, (baseline - peak) / baseline)


def _session_top3(early_peaks: Sequence[float]) -> float:
    pool = [value for value in early_peaks if math.isfinite(value)]
    if not pool:
        return 0.0
    return _mean(sorted(pool, reverse=True)[:3])


def _rolling_top3_of5(historical: Sequence[float], early_peaks: Sequence[float]) -> float:
    pool = [value for value in [*historical, *early_peaks] if math.isfinite(value)]
    if not pool:
        return 0.0
    top5 = sorted(pool, reverse=True)[:5]
    return _mean(top5[:3])


def _estimate_load_pct(weight_kg: float | None, est_1rm_kg: float | None) -> float | None:
    if not weight_kg or not est_1rm_kg or est_1rm_kg <= 0:
        return None
    return max(0.0, min(1.0, weight_kg / est_1rm_kg))


def _coerce_inputs(inputs: ReadinessInputs | Mapping[str, Any]) -> ReadinessInputs:
    if isinstance(inputs, ReadinessInputs):
        return inputs
    try:
        return ReadinessInputs.model_validate(inputs)
    except ValidationError as e:
        details = [f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise InvalidInputError("INVALID_READINESS_INPUTS", details) from e


def _resolve_rep_peaks(inputs: ReadinessInputs) -> list[float]:
    if inputs.rep_peaks_rms:
        return list(inputs.rep_peaks_rms)
    if inputs.rms_stream is not None and inputs.rep_windows:
        return _rep_peaks_from_windows(inputs.rms_stream, inputs.rep_windows)
    raise InvalidInputError(
        "MISSING_REP_PEAKS",
        ["Provide rep_peaks_rms, or rms_stream together with rep_windows"],
    )


def _select_baseline(rep_peaks: Sequence[float], inputs: ReadinessInputs, config: ReadinessConfig) -> float:
    early = rep_peaks[: config.early_reps_for_baseline]
    if config.baseline_mode == BaselineMode.ROLLING_TOP3_OF5:
        baseline = _rolling_top3_of5(inputs.historical_top_peaks or [], early)
    else:
        baseline = _session_top3(early)

    if math.isfinite(baseline) and baseline > 0:
        return baseline

    seed = [value for value in rep_peaks[:2] if math.isfinite(value)]
    fallback = max(seed) if seed else 0.0
    logger.debug("[READINESS] Baseline unusable, falling back", baseline=baseline, fallback=fallback)
    return fallback if fallback > 0 else 1.0


def compute_readiness_drop_from_rms(
    inputs: ReadinessInputs | Mapping[str, Any],
    config: ReadinessConfig = DEFAULT_READINESS_CONFIG,
    table: ThresholdTable = DEFAULT_THRESHOLD_TABLE,
) -> ReadinessOutputs:
    """Compute the set-level drop and the updated readiness score.

    Args:
        inputs: Set inputs, as a model or a plain mapping
        config: Readiness tunables
        table: Threshold lookup used to zone the drop

    Returns:
        ReadinessOutputs for the set

    Raises:
        InvalidInputError: If neither rep peaks nor stream + windows are given,
            or a mapping fails validation
    """
    inputs = _coerce_inputs(inputs)
    rep_peaks = _resolve_rep_peaks(inputs)

    baseline_rms = _select_baseline(rep_peaks, inputs, config)

    raw_drops = [_rep_drop(peak, baseline_rms) for peak in rep_peaks]

    smoothed: list[float] = []
    previous: float | None = None
    for drop in raw_drops:
        floored = 0.0 if drop < config.noise_floor_pct else drop
        previous = _ema(previous, floored, config.ema_alpha)
        smoothed.append(previous)

    tail_count = min(config.last_reps_weight_count, len(smoothed))
    tail = smoothed[-tail_count:] if tail_count > 0 else smoothed
    set_drop_pct = _mean(tail)

    load_pct = _estimate_load_pct(inputs.weight_kg, inputs.est_1rm_kg)
    thresholds = table.lookup(inputs.exercise_id, load_pct)
    zone = map_drop_to_zone(set_drop_pct, thresholds)
    zone_score = zone_to_score(zone)

    blended = inputs.prev_readiness * (1 - config.set_impact) + zone_score * config.set_impact
    readiness_after = max(READINESS_FLOOR, max(0.0, min(100.0, blended)))

    logger.info(
        "[READINESS] Set readiness computed",
        exercise_id=inputs.exercise_id,
        reps=len(rep_peaks),
        drop_pct=round(set_drop_pct, 4),
        zone=str(zone),
        readiness_after=round(readiness_after, 2),
    )

    return ReadinessOutputs(
        baseline_rms=baseline_rms,
        per_rep_drop_pct_raw=raw_drops,
        per_rep_drop_pct_smoothed=smoothed,
        set_readiness_drop_pct=set_drop_pct,
        zone=zone,
        set_zone_score=zone_score,
        readiness_after=readiness_after,
        load_pct_used=load_pct,
    )


compute_readiness = compute_readiness_drop_from_rms
