"""Surface EMG set simulator for strength sets.

Models the per-rep RMS trend with fatigue dynamics, AR(1) noise that grows
with fatigue, electrode confidence drift, and optional hand-shaped curves for
demos and tests. Randomness comes from a seeded ``numpy`` generator, so the
same seed and options always produce the same set.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field, replace
from enum import StrEnum

import numpy as np
from loguru import logger

from emgcoach.fatigue.thresholds import TargetRange
from emgcoach.fatigue.types import RepFeature


class SimScenario(StrEnum):
    JUST_RIGHT = "just_right"
    EARLY_HEAVY = "early_heavy"
    TOO_LIGHT = "too_light"
    LOW_SIGNAL = "low_signal"
    CUSTOM = "custom"


class SimExercise(StrEnum):
    BARBELL_SQUAT = "barbell_squat"
    LEG_PRESS = "leg_press"
    DB_STEPUP = "db_stepup"
    GENERIC = "generic"


EXERCISE_CEILING: dict[SimExercise, float] = {
    SimExercise.BARBELL_SQUAT: 1.75,
    SimExercise.LEG_PRESS: 1.6,
    SimExercise.DB_STEPUP: 1.55,
    SimExercise.GENERIC: 1.65,
}


@dataclass(frozen=True)
class LowSignalWindow:
    """Force confidence to ``confidence`` for reps ``from_rep..to_rep`` inclusive."""

    from_rep: int
    to_rep: int
    confidence: float


@dataclass(frozen=True)
class SetSimOptions:
    """Simulator tunables.

    ``custom_curve`` holds ``(at_rep, rms)`` anchors; when present the RMS of
    each rep is linearly interpolated between anchors instead of simulated.
    """

    reps_target: int = 12
    baseline_rms: float = 1.0
    scenario: SimScenario = SimScenario.JUST_RIGHT
    exercise: SimExercise = SimExercise.GENERIC
    target_range: TargetRange = field(default_factory=TargetRange)

    effort0: float = 0.65
    effort_step: float = 0.035
    fatigue_gain: float = 0.85
    fatigue_ceil: float = 1.0
    failure_drop_pct: float = 0.12
    failure_trigger_fatigue: float = 0.78

    ar1_rho: float = 0.65
    base_noise_std: float = 0.015
    late_noise_gain: float = 0.025

    start_confidence: float = 0.9
    conf_drift_per_rep: float = 0.015
    conf_event_chance: float = 0.12
    conf_event_depth: float = 0.25
    conf_floor: float = 0.35
    conf_ceil: float = 0.98

    custom_curve: tuple[tuple[int, float], ...] = ()
    force_low_signal_windows: tuple[LowSignalWindow, ...] = ()


DEFAULT_SIM_OPTIONS = SetSimOptions()


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _scenario_effort_boost(scenario: SimScenario, rep: int) -> float:
    if scenario == SimScenario.EARLY_HEAVY:
        return 0.12 if rep <= 3 else 0.02
    if scenario == SimScenario.TOO_LIGHT:
        return -0.1
    return 0.0


def _shaped_rms(rep: int, curve: Sequence[tuple[int, float]], base: float) -> float:
    """Interpolate the RMS for ``rep`` from sorted ``(at_rep, rms)`` anchors."""
    anchors = sorted(curve)
    reps = np.array([at for at, _ in anchors], dtype=float)
    values = np.array([rms for _, rms in anchors], dtype=float)
    if rep < reps[0]:
        # Before the first anchor, ramp from the base at rep 1
        reps = np.insert(reps, 0, 1.0)
        values = np.insert(values, 0, base)
    return float(np.interp(rep, reps, values))


def iter_rep_set(options: SetSimOptions = DEFAULT_SIM_OPTIONS, seed: int | None = None) -> Iterator[RepFeature]:
    """Yield simulated reps one at a time.

    Args:
        options: Simulator tunables
        seed: Seed for the random generator (None draws fresh entropy)

    Yields:
        RepFeature for reps 1..``options.reps_target``
    """
    rng = np.random.default_rng(seed)
    ceiling = EXERCISE_CEILING[options.exercise]
    baseline = options.baseline_rms

    fatigue = 0.0
    effort = options.effort0
    ar_noise = 0.0
    confidence = options.start_confidence
    peak_rms = baseline

    for rep in range(1, options.reps_target + 1):
        effort = _clamp(effort + options.effort_step + _scenario_effort_boost(options.scenario, rep), 0.4, 1.0)
        fatigue = _clamp(fatigue + options.fatigue_gain * effort * (1 - fatigue), 0.0, options.fatigue_ceil)

        velocity = _clamp(1 - fatigue * 0.6 - max(0, rep - options.target_range.min) * 0.02, 0.25, 1.0)
        strength_rise = 0.12 + 0.55 * fatigue + 0.18 * (1 - velocity)
        rms = baseline * _clamp(1 + strength_rise, 0.9, ceiling)

        if fatigue >= options.failure_trigger_fatigue and rep >= options.target_range.min:
            if options.scenario == SimScenario.EARLY_HEAVY:
                drop_event = rep >= 6
            else:
                drop_event = rng.standard_normal() > 2.0
            if drop_event:
                rms = peak_rms * (1 - options.failure_drop_pct)

        peak_rms = max(peak_rms, rms)

        noise_std = options.base_noise_std + options.late_noise_gain * fatigue
        ar_noise = options.ar1_rho * ar_noise + noise_std * rng.standard_normal()
        rms_with_noise = _clamp(rms * (1 + ar_noise), baseline * 0.85, ceiling * 1.02)

        confidence = _clamp(
            confidence - options.conf_drift_per_rep * (0.6 + 0.8 * fatigue),
            options.conf_floor,
            options.conf_ceil,
        )
        if options.scenario == SimScenario.LOW_SIGNAL and rng.random() < options.conf_event_chance:
            depth = options.conf_event_depth * (0.7 + 0.6 * rng.random())
            confidence = _clamp(confidence - depth, options.conf_floor, options.conf_ceil)

        for window in options.force_low_signal_windows:
            if window.from_rep <= rep <= window.to_rep:
                confidence = _clamp(window.confidence, 0.0, 1.0)
                break

        rms_norm = rms_with_noise
        if options.custom_curve:
            rms_norm = _shaped_rms(rep, options.custom_curve, baseline)

        yield RepFeature(
            idx=rep,
            rms_norm=rms_norm,
            signal_confidence=confidence,
            rep_velocity=velocity,
            rep_tempo_ok=velocity >= 0.35,
        )


def simulate_rep_set(options: SetSimOptions = DEFAULT_SIM_OPTIONS, seed: int | None = None) -> list[RepFeature]:
    """Simulate a full set. Equal seeds and options give equal sets."""
    reps = list(iter_rep_set(options, seed))
    logger.debug(
        "[SIM] Simulated set",
        scenario=str(options.scenario),
        reps=len(reps),
        seed=seed,
    )
    return reps


def make_symmetric_pair(
    options: SetSimOptions = DEFAULT_SIM_OPTIONS,
    left_bias: float = 1.0,
    right_bias: float = 1.0,
    seed: int | None = None,
) -> tuple[list[RepFeature], list[RepFeature]]:
    """Simulate one set and scale it into left and right limb traces."""
    base = simulate_rep_set(options, seed)
    left = [rep.model_copy(update={"rms_norm": rep.rms_norm * left_bias}) for rep in base]
    right = [rep.model_copy(update={"rms_norm": rep.rms_norm * right_bias}) for rep in base]
    return left, right


def with_scenario(scenario: SimScenario, options: SetSimOptions = DEFAULT_SIM_OPTIONS) -> SetSimOptions:
    return replace(options, scenario=scenario)
