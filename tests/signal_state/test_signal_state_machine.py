"""Tests for the streaming signal state machine.

Scenarios use an EWMA alpha of 1 (no smoothing) and one-second lookbacks so
slopes and dwell times can be checked by hand.
"""

import math
from dataclasses import replace

import pytest

from emgcoach.signal_state import (
    SignalDebugEvent,
    SignalSample,
    SignalState,
    SignalStateMachine,
    SignalStateMachineConfig,
    StateChangeEvent,
)

RISE_CONFIG = SignalStateMachineConfig(
    ewma_alpha=1,
    slope_lookback_sec=1,
    curvature_lookback_sec=2,
    plateau_curvature_threshold=10,
    plateau_slope_threshold=1,
    rise_min_duration_sec=1,
    plateau_min_duration_sec=0.1,
    fall_min_duration_sec=1,
    require_mdf_confirmation=False,
)

SHAPE_CONFIG = SignalStateMachineConfig(
    ewma_alpha=1,
    slope_lookback_sec=1,
    curvature_lookback_sec=2,
    plateau_curvature_threshold=1,
    plateau_slope_threshold=0.5,
    rise_min_duration_sec=1,
    plateau_min_duration_sec=1,
    fall_min_duration_sec=1,
    require_mdf_confirmation=False,
    noise_threshold=0.01,
)


def _feed(machine: SignalStateMachine, samples: list[tuple[float, float]]) -> None:
    for at_seconds, value in samples:
        machine.update(SignalSample(at_seconds=at_seconds, rms_norm=value))


def _ramp() -> list[tuple[float, float]]:
    return [(float(t), t * 0.2) for t in range(6)]


def _rise_plateau_fall(mdf: bool = False, mdf_decay: float = 0.05) -> list[SignalSample]:
    samples = []
    for i in range(6):
        samples.append(SignalSample(at_seconds=i, rms_norm=i * 0.05, mdf_norm=1.0 if mdf else None))
    for i in range(6, 14):
        samples.append(SignalSample(at_seconds=i, rms_norm=0.35, mdf_norm=1.0 if mdf else None))
    for i in range(14, 18):
        samples.append(
            SignalSample(
                at_seconds=i,
                rms_norm=0.35 - (i - 13) * 0.06,
                mdf_norm=1.0 - (i - 13) * mdf_decay if mdf else None,
            )
        )
    return samples


def test_starts_in_baseline():
    """Test that a new machine starts in baseline with no time in state."""
    machine = SignalStateMachine()
    assert machine.get_state() == SignalState.BASELINE
    assert machine.get_time_in_state(10.0) == 0.0


def test_rise_transition():
    """Test that a steady ramp moves baseline to rise once."""
    machine = SignalStateMachine(RISE_CONFIG)
    events: list[StateChangeEvent] = []
    machine.on_state(events.append)

    _feed(machine, _ramp())

    assert machine.get_state() == SignalState.RISE
    assert [event.state for event in events] == [SignalState.RISE]
    event = events[0]
    assert event.previous_state == SignalState.BASELINE
    assert event.at_seconds == 1.0
    assert event.confidence == pytest.approx(0.75)
    assert machine.get_time_in_state(5.0) == pytest.approx(4.0)


def test_plateau_transition():
    """Test that a ramp followed by a flat wobble settles into plateau."""
    machine = SignalStateMachine(SHAPE_CONFIG)
    events: list[StateChangeEvent] = []
    machine.on_state(events.append)

    _feed(machine, [(float(i), i * 0.08) for i in range(6)])
    _feed(machine, [(float(i), 0.48 + math.sin(i) * 0.003) for i in range(6, 30)])

    assert machine.get_state() == SignalState.PLATEAU
    assert [event.state for event in events] == [SignalState.RISE, SignalState.PLATEAU]
    plateau = events[1]
    assert plateau.previous_state == SignalState.RISE
    assert plateau.at_seconds == 8.0
    assert plateau.time_in_previous_state == pytest.approx(7.0)


def test_fall_transition():
    """Test the full rise, plateau, fall sequence without MDF gating."""
    machine = SignalStateMachine(SHAPE_CONFIG)
    events: list[StateChangeEvent] = []
    machine.on_state(events.append)

    for sample in _rise_plateau_fall():
        machine.update(sample)

    assert [event.state for event in events] == [SignalState.RISE, SignalState.PLATEAU, SignalState.FALL]
    assert events[-1].at_seconds == 14.0
    assert events[-1].confidence == pytest.approx(0.8)


def test_below_floor_sample_does_not_reset_rise():
    """Test that a dropout below the noise floor is skipped mid-rise."""
    machine = SignalStateMachine(replace(RISE_CONFIG, rise_min_duration_sec=2))
    debug: list[SignalDebugEvent] = []
    machine.on_debug(debug.append)

    _feed(machine, [(0.0, 0.0), (1.0, 0.2), (2.0, 0.03), (3.0, 0.6)])

    assert machine.get_state() == SignalState.RISE
    assert [event.at_seconds for event in debug] == [1.0, 3.0]


def test_fall_then_rise_again():
    """Test that a renewed ramp after a fall re-enters rise."""
    machine = SignalStateMachine(SHAPE_CONFIG)
    events: list[StateChangeEvent] = []
    machine.on_state(events.append)

    for sample in _rise_plateau_fall():
        machine.update(sample)
    _feed(machine, [(18.0, 0.2), (19.0, 0.3)])

    assert [event.state for event in events] == [
        SignalState.RISE,
        SignalState.PLATEAU,
        SignalState.FALL,
        SignalState.RISE,
    ]
    assert events[-1].previous_state == SignalState.FALL
    assert events[-1].at_seconds == 18.0
    assert events[-1].time_in_previous_state == pytest.approx(4.0)


def test_noise_never_changes_state():
    """Test that amplitude below the noise floor never triggers a transition."""
    machine = SignalStateMachine(
        SignalStateMachineConfig(
            ewma_alpha=1,
            slope_lookback_sec=1,
            curvature_lookback_sec=2,
            rise_min_duration_sec=1,
            plateau_min_duration_sec=1,
            fall_min_duration_sec=1,
            require_mdf_confirmation=False,
            noise_threshold=0.01,
        )
    )
    events: list[StateChangeEvent] = []
    machine.on_state(events.append)

    _feed(machine, [(i * 0.5, 0.002 * math.sin(i)) for i in range(20)])

    assert events == []
    assert machine.get_state() == SignalState.BASELINE


def test_fall_withheld_without_mdf():
    """Test that fall needs MDF evidence when confirmation is required."""
    config = replace(SHAPE_CONFIG, require_mdf_confirmation=True)
    machine = SignalStateMachine(config)

    for sample in _rise_plateau_fall(mdf=False):
        machine.update(sample)

    assert machine.get_state() == SignalState.PLATEAU


def test_fall_withheld_when_mdf_flat():
    """Test that a flat median frequency does not corroborate a fall."""
    config = replace(SHAPE_CONFIG, require_mdf_confirmation=True)
    machine = SignalStateMachine(config)

    for sample in _rise_plateau_fall(mdf=True, mdf_decay=0.0):
        machine.update(sample)

    assert machine.get_state() == SignalState.PLATEAU


def test_fall_confirmed_by_falling_mdf():
    """Test that a falling median frequency lets the fall through."""
    config = replace(SHAPE_CONFIG, require_mdf_confirmation=True)
    machine = SignalStateMachine(config)
    events: list[StateChangeEvent] = []
    machine.on_state(events.append)

    for sample in _rise_plateau_fall(mdf=True):
        machine.update(sample)

    assert machine.get_state() == SignalState.FALL
    assert events[-1].at_seconds == 14.0


def test_exactly_one_event_per_transition():
    """Test that staying in a state emits nothing further."""
    machine = SignalStateMachine(RISE_CONFIG)
    events: list[StateChangeEvent] = []
    machine.on_state(events.append)

    _feed(machine, [(float(t), t * 0.2) for t in range(12)])

    assert len(events) == 1


def test_unsubscribe_stops_notifications():
    """Test that the returned callable removes the listener."""
    machine = SignalStateMachine(RISE_CONFIG)
    events: list[StateChangeEvent] = []
    unsubscribe = machine.on_state(events.append)
    unsubscribe()
    unsubscribe()

    _feed(machine, _ramp())

    assert events == []
    assert machine.get_state() == SignalState.RISE


def test_debug_events_per_evaluated_sample():
    """Test that every evaluated sample produces a debug event."""
    machine = SignalStateMachine(RISE_CONFIG)
    debug: list[SignalDebugEvent] = []
    machine.on_debug(debug.append)

    _feed(machine, _ramp())

    assert [event.at_seconds for event in debug] == [1.0, 2.0, 3.0, 4.0, 5.0]
    assert debug[0].slope == pytest.approx(20.0)
    assert debug[0].mdf_slope is None


def test_out_of_order_sample_is_ignored():
    """Test that a sample older than the last one is dropped."""
    machine = SignalStateMachine(RISE_CONFIG)
    debug: list[SignalDebugEvent] = []
    machine.on_debug(debug.append)
    _feed(machine, _ramp())

    machine.update(SignalSample(at_seconds=3.0, rms_norm=0.0))

    assert len(debug) == 5
    assert machine.get_state() == SignalState.RISE


@pytest.mark.parametrize(
    "sample",
    [
        SignalSample(at_seconds=6.0, rms_norm=math.nan),
        SignalSample(at_seconds=6.0, rms_norm=math.inf),
        SignalSample(at_seconds=math.nan, rms_norm=1.2),
    ],
)
def test_non_finite_sample_is_dropped(sample: SignalSample):
    """Test that non-finite samples are dropped without raising."""
    machine = SignalStateMachine(RISE_CONFIG)
    debug: list[SignalDebugEvent] = []
    machine.on_debug(debug.append)
    _feed(machine, _ramp())

    machine.update(sample)
    assert len(debug) == 5

    machine.update(SignalSample(at_seconds=6.0, rms_norm=1.2))
    assert len(debug) == 6
    assert machine.get_state() == SignalState.RISE


def test_non_finite_mdf_is_treated_as_missing():
    """Test that a NaN median frequency does not break the update."""
    machine = SignalStateMachine(RISE_CONFIG)
    debug: list[SignalDebugEvent] = []
    machine.on_debug(debug.append)

    machine.update(SignalSample(at_seconds=0.0, rms_norm=0.0, mdf_norm=1.0))
    machine.update(SignalSample(at_seconds=1.0, rms_norm=0.2, mdf_norm=math.nan))

    assert debug[-1].mdf_slope is None
    assert machine.get_state() == SignalState.RISE


def test_reset_keeps_listeners():
    """Test that reset clears state but keeps registered listeners."""
    machine = SignalStateMachine(RISE_CONFIG)
    events: list[StateChangeEvent] = []
    machine.on_state(events.append)
    _feed(machine, _ramp())

    machine.reset()
    assert machine.get_state() == SignalState.BASELINE
    assert machine.get_time_in_state(10.0) == 0.0

    _feed(machine, _ramp())
    assert [event.state for event in events] == [SignalState.RISE, SignalState.RISE]


def test_instances_do_not_share_state():
    """Test that two machines with the same config are independent."""
    first = SignalStateMachine(RISE_CONFIG)
    second = SignalStateMachine(RISE_CONFIG)

    _feed(first, _ramp())

    assert first.get_state() == SignalState.RISE
    assert second.get_state() == SignalState.BASELINE


def test_transition_is_logged(log_messages):
    """Test that transitions are logged under the signal tag."""
    machine = SignalStateMachine(RISE_CONFIG)
    _feed(machine, _ramp())
    assert any(message.startswith("[SIGNAL] baseline -> rise") for message in log_messages)
