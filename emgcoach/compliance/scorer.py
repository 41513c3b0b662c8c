"""Compliance scoring: did the athlete listen to the coach's ask?

Compares the set after an ask against the set before it. Pure and
deterministic: identical inputs always give identical results.

Facets:
- weight: load change vs the asked delta, with equipment-aware tolerance
- target: reps/RIR landing in the productive window (always scored)
- emg: RMS or rate-of-rise drop corroborating productive fatigue
- rest: actual rest vs asked rest

N/A facets (-1) are dropped and the remaining weights rescaled to sum to 1.
"""

import math
from collections.abc import Sequence
from typing import TypeVar

from loguru import logger

from emgcoach.compliance.types import (
    DEFAULT_FACET_WEIGHTS,
    FACET_NOT_APPLICABLE,
    CoachAsk,
    ComplianceFacets,
    ComplianceResult,
    FacetWeights,
    RepsAsk,
    RestAsk,
    SetSnapshot,
    WeightAsk,
)

DEFAULT_TARGET_RANGE: tuple[int, int] = (5, 6)
DEFAULT_RIR_THRESHOLD = 2
MISSING_RIR = 3

WEIGHT_TOLERANCE_PCT = 1.5
BARBELL_PLATE_STEP_KG = 0.5
DUMBBELL_SIZE_STEP_KG = 2.5
REST_TOLERANCE_PCT = 20
RMS_DROP_RANGE: tuple[float, float] = (20, 30)
ROR_DROP_RANGE: tuple[float, float] = (25, 40)

LISTENED_THRESHOLD = 70

T = TypeVar("T")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _falloff(delta: float, tolerance: float) -> int:
    """Partial credit outside tolerance: 50 points lost per tolerance width."""
    return _round_half_up(max(0.0, 100 - (delta / tolerance) * 50))


def _signed(value: float) -> str:
    return f"+{value:g}" if value > 0 else f"{value:g}"


def _first_ask(asks: Sequence[CoachAsk], kind: type[T]) -> T | None:
    for ask in asks:
        if isinstance(ask, kind):
            return ask
    return None


def score_weight_adherence(ask: WeightAsk, before: SetSnapshot, after: SetSnapshot, reasons: list[str]) -> int:
    """Score the load change against the asked percentage change.

    Tolerance is the larger of the equipment step (2.5 kg for fixed
    dumbbells, 0.5 kg otherwise) and 1.5% of the expected load.
    """
    expected_kg = before.load_kg * (1 + ask.delta_pct / 100)
    actual_kg = after.load_kg
    delta_kg = abs(actual_kg - expected_kg)

    step = DUMBBELL_SIZE_STEP_KG if after.implement_is_fixed_dumbbell else BARBELL_PLATE_STEP_KG
    tolerance = max(step, WEIGHT_TOLERANCE_PCT / 100 * expected_kg)

    change_pct = (actual_kg - before.load_kg) / before.load_kg * 100 if before.load_kg else 0.0
    applied = (
        f"Weight: Applied {_signed(round(change_pct, 1))}% "
        f"({before.load_kg:g}→{actual_kg:g}kg), asked {_signed(ask.delta_pct)}%"
    )

    if delta_kg <= tolerance:
        reasons.append(f"{applied} ✓")
        return 100

    reasons.append(f"{applied} ✗ (off by {delta_kg:.1f}kg)")
    return _falloff(delta_kg, tolerance)


def score_target_window(after: SetSnapshot, target_range: tuple[int, int], reasons: list[str]) -> int:
    """Score the rep/RIR outcome against the target window.

    A missing RIR counts as 3, which never hits the window.
    """
    min_reps, max_reps = target_range
    rir = after.rir if after.rir is not None else MISSING_RIR

    reps_in_range = min_reps <= after.reps <= max_reps
    rir_ok = rir <= DEFAULT_RIR_THRESHOLD

    if reps_in_range and rir_ok:
        reasons.append(f"Target: Hit the pocket with {after.reps} reps @ RIR {rir:g} ✓")
        return 100
    if reps_in_range:
        reasons.append(f"Target: {after.reps} reps in range but RIR {rir:g} > {DEFAULT_RIR_THRESHOLD} (partial)")
        return 70
    if after.reps < min_reps:
        reasons.append(f"Target: Only {after.reps} reps, needed {min_reps}+ ✗")
        return 30
    reasons.append(f"Target: {after.reps} reps past ideal window ({min_reps}-{max_reps}) ✗")
    return 50


def score_emg_corroboration(after: SetSnapshot, reasons: list[str]) -> int:
    """Score EMG evidence; both ranges are closed intervals."""
    rms = after.rms_drop_pct
    ror = after.ror_drop_pct
    rms_ok = rms is not None and RMS_DROP_RANGE[0] <= rms <= RMS_DROP_RANGE[1]
    ror_ok = ror is not None and ROR_DROP_RANGE[0] <= ror <= ROR_DROP_RANGE[1]

    if rms_ok or ror_ok:
        metrics = []
        if rms_ok:
            metrics.append(f"RMS {rms:.0f}%")
        if ror_ok:
            metrics.append(f"RoR {ror:.0f}%")
        reasons.append(f"EMG: {', '.join(metrics)} in productive window ✓")
        return 100

    metrics = []
    if rms is not None:
        metrics.append(f"RMS {rms:.0f}%")
    if ror is not None:
        metrics.append(f"RoR {ror:.0f}%")
    reasons.append(f"EMG: {', '.join(metrics)} outside productive window ✗")
    return 40


def score_rest_adherence(ask: RestAsk, rest_sec: float, reasons: list[str]) -> int:
    tolerance = REST_TOLERANCE_PCT / 100 * ask.seconds
    delta = abs(rest_sec - ask.seconds)

    if delta <= tolerance:
        reasons.append(f"Rest: {rest_sec:g}s vs asked {ask.seconds:g}s ✓")
        return 100

    reasons.append(f"Rest: {rest_sec:g}s vs asked {ask.seconds:g}s ✗ (off by {_round_half_up(delta)}s)")
    return _falloff(delta, tolerance)


def weighted_score(facets: ComplianceFacets, weights: FacetWeights = DEFAULT_FACET_WEIGHTS) -> float:
    """Weighted mean over applicable facets, weights rescaled to sum to 1."""
    active = {
        name: getattr(weights, name)
        for name, value in facets.model_dump().items()
        if value != FACET_NOT_APPLICABLE
    }
    total_weight = sum(active.values())
    if total_weight <= 0:
        return 0.0
    return sum(getattr(facets, name) * weight / total_weight for name, weight in active.items())


def score_compliance(
    asks: Sequence[CoachAsk],
    before: SetSnapshot,
    after: SetSnapshot,
    weights: FacetWeights = DEFAULT_FACET_WEIGHTS,
) -> ComplianceResult:
    """Score how faithfully ``after`` follows the asks issued after ``before``.

    When several asks share a kind, the first one is used.

    Args:
        asks: Coach asks issued before the set
        before: Snapshot of the set the asks were based on
        after: Snapshot of the set performed after the asks
        weights: Base facet weights

    Returns:
        ComplianceResult with the verdict, integer score, reasons and facets
    """
    reasons: list[str] = []

    weight_ask = _first_ask(asks, WeightAsk)
    rest_ask = _first_ask(asks, RestAsk)
    reps_ask = _first_ask(asks, RepsAsk)

    weight = FACET_NOT_APPLICABLE
    if weight_ask is not None:
        weight = score_weight_adherence(weight_ask, before, after, reasons)

    target_range = reps_ask.target_range if reps_ask is not None else DEFAULT_TARGET_RANGE
    target = score_target_window(after, target_range, reasons)

    emg = FACET_NOT_APPLICABLE
    if after.rms_drop_pct is not None or after.ror_drop_pct is not None:
        emg = score_emg_corroboration(after, reasons)

    rest = FACET_NOT_APPLICABLE
    if rest_ask is not None and after.rest_sec is not None:
        rest = score_rest_adherence(rest_ask, after.rest_sec, reasons)

    facets = ComplianceFacets(weight=weight, target=target, emg=emg, rest=rest)
    score = weighted_score(facets, weights)

    # Self-adjust success: ignored the literal weight ask but landed the target
    self_adjusted = target == 100 and 0 <= weight < LISTENED_THRESHOLD
    listened = score >= LISTENED_THRESHOLD or self_adjusted

    logger.debug(
        "[COMPLIANCE] Compliance scored",
        score=round(score, 2),
        listened=listened,
        self_adjusted=self_adjusted,
    )

    return ComplianceResult(
        listened=listened,
        score=_round_half_up(score),
        reasons=reasons,
        facets=facets,
    )
