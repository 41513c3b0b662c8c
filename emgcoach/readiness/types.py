"""Readiness input/output models.

This module defines the data structures for:
- Readiness tunables (immutable, passed explicitly)
- Set inputs (rep peaks, or a raw RMS stream with rep windows)
- The computed readiness result
"""

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from emgcoach.readiness.thresholds import ReadinessZone


class BaselineMode(StrEnum):
    """How the reference amplitude for drop computation is chosen."""

    SESSION_TOP3 = "session_top3"
    ROLLING_TOP3_OF5 = "rolling_top3_of5"


@dataclass(frozen=True)
class ReadinessConfig:
    """Immutable readiness tunables.

    Attributes:
        baseline_mode: Baseline selection strategy
        early_reps_for_baseline: Early reps of the set that seed the baseline
        noise_floor_pct: Raw drops below this fraction count as zero
        ema_alpha: Smoothing factor for the per-rep drop sequence
        last_reps_weight_count: Tail reps averaged into the set-level drop
        set_impact: Weight of this set's zone score against prior readiness
    """

    baseline_mode: BaselineMode = BaselineMode.SESSION_TOP3
    early_reps_for_baseline: int = 5
    noise_floor_pct: float = 0.07
    ema_alpha: float = 0.35
    last_reps_weight_count: int = 3
    set_impact: float = 0.6


DEFAULT_READINESS_CONFIG = ReadinessConfig()


class RepWindow(BaseModel):
    """Inclusive sample-index range of one rep inside an RMS stream."""

    start_idx: int = Field(..., ge=0)
    end_idx: int = Field(..., ge=0)


class ReadinessInputs(BaseModel):
    """Inputs for one completed set.

    Either ``rep_peaks_rms`` or ``rms_stream`` together with ``rep_windows``
    must be supplied. Exercise and load fields are optional context.
    """

    rep_peaks_rms: list[float] | None = None
    rms_stream: list[float] | None = None
    rep_windows: list[RepWindow] | None = None

    exercise_id: str | None = None
    weight_kg: float | None = None
    est_1rm_kg: float | None = None

    historical_top_peaks: list[float] | None = None
    prev_readiness: float


class ReadinessOutputs(BaseModel):
    """Readiness result for one set. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    baseline_rms: float
    per_rep_drop_pct_raw: list[float]
    per_rep_drop_pct_smoothed: list[float]
    set_readiness_drop_pct: float
    zone: ReadinessZone
    set_zone_score: int
    readiness_after: float
    load_pct_used: float | None = None
