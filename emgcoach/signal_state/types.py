"""Signal state machine data models.

This module defines the immutable value types exchanged with the streaming
classifier: its tunables, its input samples, and the events it emits.
Slopes are expressed in percent of normalized amplitude per second.
"""

from dataclasses import dataclass
from enum import StrEnum


class SignalState(StrEnum):
    """Fatigue-relevant regime of the amplitude signal."""

    BASELINE = "baseline"
    RISE = "rise"
    PLATEAU = "plateau"
    FALL = "fall"


@dataclass(frozen=True)
class SignalStateMachineConfig:
    """Immutable tunables for one state machine instance.

    Attributes:
        ewma_alpha: Smoothing factor; 1.0 passes samples through unsmoothed
        slope_lookback_sec: Trailing window used for the slope
        curvature_lookback_sec: Longer trailing window used for the curvature
        history_window_sec: How much smoothed history is retained
        noise_threshold: Absolute amplitude floor and minimum meaningful change
        rise_slope_threshold: Slope at or above which rise time accumulates
        rise_min_duration_sec: Dwell required before entering rise
        plateau_slope_threshold: Max |slope| counted as flat
        plateau_curvature_threshold: Max |curvature| counted as flat
        plateau_min_duration_sec: Dwell required before entering plateau
        fall_slope_threshold: Slope at or below which fall time accumulates
        fall_min_duration_sec: Dwell required before entering fall
        mdf_slope_lookback_sec: Trailing window for the median-frequency slope
        mdf_fall_slope_threshold: MDF slope at or below which fall is corroborated
        require_mdf_confirmation: Withhold fall until MDF corroborates it
    """

    ewma_alpha: float = 0.25
    slope_lookback_sec: float = 3.0
    curvature_lookback_sec: float = 6.0
    history_window_sec: float = 12.0
    noise_threshold: float = 0.07
    rise_slope_threshold: float = 1.0
    rise_min_duration_sec: float = 3.0
    plateau_slope_threshold: float = 0.25
    plateau_curvature_threshold: float = 0.15
    plateau_min_duration_sec: float = 6.0
    fall_slope_threshold: float = -0.8
    fall_min_duration_sec: float = 3.0
    mdf_slope_lookback_sec: float = 8.0
    mdf_fall_slope_threshold: float = -0.5
    require_mdf_confirmation: bool = True


DEFAULT_SIGNAL_CONFIG = SignalStateMachineConfig()


@dataclass(frozen=True)
class SignalSample:
    """One amplitude reading.

    Attributes:
        at_seconds: Sample timestamp in seconds
        rms_norm: Normalized RMS amplitude
        mdf_norm: Optional normalized median frequency from a spectral collaborator
    """

    at_seconds: float
    rms_norm: float
    mdf_norm: float | None = None


@dataclass(frozen=True)
class StateChangeEvent:
    """Emitted exactly once per state transition."""

    state: SignalState
    at_seconds: float
    previous_state: SignalState
    time_in_previous_state: float
    confidence: float


@dataclass(frozen=True)
class SignalDebugEvent:
    """Per-sample diagnostics for tuning and charts."""

    at_seconds: float
    slope: float
    curvature: float
    mdf_slope: float | None = None
