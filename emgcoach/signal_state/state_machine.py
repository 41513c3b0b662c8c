"""Streaming rise / plateau / fall classifier for normalized EMG amplitude.

The machine smooths incoming samples with an EWMA, derives a slope over a
short trailing window and a curvature over a longer one, and only changes
state once a condition has held for its minimum dwell time. Hysteresis comes
from those dwell accumulators: a single noisy sample resets an accumulator but
can never flip the state on its own.

One instance belongs to one active set. Calls to ``update`` must be serialized
by the owner.
"""

import math
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from emgcoach.signal_state.types import (
    DEFAULT_SIGNAL_CONFIG,
    SignalDebugEvent,
    SignalSample,
    SignalState,
    SignalStateMachineConfig,
    StateChangeEvent,
)

StateListener = Callable[[StateChangeEvent], None]
DebugListener = Callable[[SignalDebugEvent], None]

STATE_CONFIDENCE: dict[SignalState, float] = {
    SignalState.RISE: 0.75,
    SignalState.PLATEAU: 0.7,
    SignalState.FALL: 0.8,
}

# Allowed targets per source state
_TRANSITIONS: dict[SignalState, frozenset[SignalState]] = {
    SignalState.BASELINE: frozenset({SignalState.RISE}),
    SignalState.RISE: frozenset({SignalState.PLATEAU, SignalState.FALL}),
    SignalState.PLATEAU: frozenset({SignalState.FALL}),
    SignalState.FALL: frozenset({SignalState.RISE}),
}

_MIN_DT = 1e-3


@dataclass(slots=True)
class _HistoryPoint:
    t: float
    value: float
    smoothed: float
    mdf: float | None = None
    slope: float | None = None


class SignalStateMachine:
    """Hysteresis state machine over a stream of ``SignalSample``s."""

    def __init__(self, config: SignalStateMachineConfig = DEFAULT_SIGNAL_CONFIG) -> None:
        self.config = config
        self._state_listeners: list[StateListener] = []
        self._debug_listeners: list[DebugListener] = []
        self.reset()

    def reset(self) -> None:
        """Drop all history and return to baseline. Listeners stay registered."""
        self._history: deque[_HistoryPoint] = deque()
        self._state = SignalState.BASELINE
        self._state_entered_at: float | None = None
        self._last_update_sec: float | None = None
        self._rise_accum = 0.0
        self._plateau_accum = 0.0
        self._fall_accum = 0.0

    def get_state(self) -> SignalState:
        return self._state

    def get_time_in_state(self, now_sec: float) -> float:
        if self._state_entered_at is None:
            return 0.0
        return max(0.0, now_sec - self._state_entered_at)

    def on_state(self, listener: StateListener) -> Callable[[], None]:
        """Register a transition listener.

        Returns:
            Callable that unregisters the listener
        """
        self._state_listeners.append(listener)
        return lambda: self._remove(self._state_listeners, listener)

    def on_debug(self, listener: DebugListener) -> Callable[[], None]:
        """Register a per-sample diagnostics listener.

        Returns:
            Callable that unregisters the listener
        """
        self._debug_listeners.append(listener)
        return lambda: self._remove(self._debug_listeners, listener)

    @staticmethod
    def _remove(listeners: list, listener: Callable) -> None:
        if listener in listeners:
            listeners.remove(listener)

    def update(self, sample: SignalSample) -> None:
        """Feed one sample.

        Non-finite and out-of-order samples are ignored; this never raises for
        bad input, it simply does not advance.

        Args:
            sample: Amplitude reading, optionally with median frequency
        """
        now = sample.at_seconds
        rms = sample.rms_norm
        if not (math.isfinite(now) and math.isfinite(rms)):
            logger.warning(
                "[SIGNAL] Ignoring non-finite sample",
                at_seconds=now,
                rms_norm=rms,
            )
            return

        mdf = sample.mdf_norm
        if mdf is not None and not math.isfinite(mdf):
            logger.debug("[SIGNAL] Dropping non-finite MDF value", at_seconds=now)
            mdf = None

        if self._last_update_sec is not None and now < self._last_update_sec:
            logger.debug(
                "[SIGNAL] Ignoring out-of-order sample",
                at_seconds=now,
                last_update_sec=self._last_update_sec,
            )
            return
        self._last_update_sec = now

        cfg = self.config
        prev_smoothed = self._history[-1].smoothed if self._history else rms
        smoothed = prev_smoothed + cfg.ewma_alpha * (rms - prev_smoothed)
        self._history.append(_HistoryPoint(t=now, value=rms, smoothed=smoothed, mdf=mdf))

        while self._history and now - self._history[0].t > cfg.history_window_sec:
            self._history.popleft()

        if len(self._history) < 2:
            return

        slope = self._compute_slope(now)
        curvature = self._compute_curvature(now)
        mdf_slope = self._compute_mdf_slope(now)

        # Below the absolute floor the sample is kept for history only
        if abs(rms) < cfg.noise_threshold:
            return

        reference = self._smoothed_at(now - cfg.slope_lookback_sec)
        effective_slope = 0.0 if abs(smoothed - reference) < cfg.noise_threshold else slope

        self._update_accumulators(now, effective_slope, curvature)
        next_state = self._evaluate_state(mdf_slope)

        self._emit_debug(SignalDebugEvent(at_seconds=now, slope=effective_slope, curvature=curvature, mdf_slope=mdf_slope))

        if next_state != self._state:
            self._transition(next_state, now)

    def _transition(self, next_state: SignalState, now: float) -> None:
        previous = self._state
        time_in_previous = now - self._state_entered_at if self._state_entered_at is not None else 0.0
        self._state = next_state
        self._state_entered_at = now

        event = StateChangeEvent(
            state=next_state,
            at_seconds=now,
            previous_state=previous,
            time_in_previous_state=time_in_previous,
            confidence=STATE_CONFIDENCE[next_state],
        )
        logger.info(
            f"[SIGNAL] {previous} -> {next_state}",
            at_seconds=now,
            time_in_previous_state=time_in_previous,
        )
        for listener in list(self._state_listeners):
            listener(event)

    def _emit_debug(self, event: SignalDebugEvent) -> None:
        for listener in list(self._debug_listeners):
            listener(event)

    def _point_at(self, target_time: float) -> _HistoryPoint:
        """Latest retained point at or before ``target_time``, else the oldest."""
        for point in reversed(self._history):
            if point.t <= target_time:
                return point
        return self._history[0]

    def _smoothed_at(self, target_time: float) -> float:
        return self._point_at(target_time).smoothed

    def _compute_slope(self, now: float) -> float:
        latest = self._history[-1]
        earlier = self._point_at(now - self.config.slope_lookback_sec)
        delta_time = max(_MIN_DT, latest.t - earlier.t)
        slope = (latest.smoothed - earlier.smoothed) / delta_time * 100
        latest.slope = slope
        return slope

    def _compute_curvature(self, now: float) -> float:
        latest = self._history[-1]
        span = self.config.curvature_lookback_sec - self.config.slope_lookback_sec
        earlier = self._point_at(now - span) if span > 0 else self._history[-2]
        if earlier is latest:
            earlier = self._history[-2]
        if earlier.slope is None or latest.slope is None:
            return 0.0
        delta_time = max(_MIN_DT, latest.t - earlier.t)
        return (latest.slope - earlier.slope) / delta_time

    def _compute_mdf_slope(self, now: float) -> float | None:
        latest = self._history[-1]
        if latest.mdf is None:
            return None
        earlier = self._point_at(now - self.config.mdf_slope_lookback_sec)
        if earlier is latest or earlier.mdf is None:
            return None
        delta_time = max(_MIN_DT, latest.t - earlier.t)
        return (latest.mdf - earlier.mdf) / delta_time * 100

    def _update_accumulators(self, now: float, slope: float, curvature: float) -> None:
        cfg = self.config
        delta_time = now - self._history[-2].t

        if slope >= cfg.rise_slope_threshold:
            self._rise_accum += delta_time
        else:
            self._rise_accum = 0.0

        if abs(slope) <= cfg.plateau_slope_threshold and abs(curvature) <= cfg.plateau_curvature_threshold:
            self._plateau_accum += delta_time
        else:
            self._plateau_accum = 0.0

        if slope <= cfg.fall_slope_threshold:
            self._fall_accum += delta_time
        else:
            self._fall_accum = 0.0

    def _evaluate_state(self, mdf_slope: float | None) -> SignalState:
        cfg = self.config
        allowed = _TRANSITIONS[self._state]

        total_delta = abs(self._history[-1].smoothed - self._history[0].smoothed)
        if total_delta < cfg.noise_threshold:
            return self._state

        if SignalState.FALL in allowed and self._fall_accum >= cfg.fall_min_duration_sec:
            corroborated = mdf_slope is not None and mdf_slope <= cfg.mdf_fall_slope_threshold
            if not cfg.require_mdf_confirmation or corroborated:
                return SignalState.FALL
            logger.debug("[SIGNAL] Fall withheld pending MDF confirmation", mdf_slope=mdf_slope)

        if SignalState.RISE in allowed and self._rise_accum >= cfg.rise_min_duration_sec:
            return SignalState.RISE

        if SignalState.PLATEAU in allowed and self._plateau_accum >= cfg.plateau_min_duration_sec:
            return SignalState.PLATEAU

        return self._state
