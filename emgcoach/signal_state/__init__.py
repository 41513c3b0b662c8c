"""Real-time rise / plateau / fall classification of the amplitude signal."""

from emgcoach.signal_state.state_machine import STATE_CONFIDENCE, SignalStateMachine
from emgcoach.signal_state.types import (
    DEFAULT_SIGNAL_CONFIG,
    SignalDebugEvent,
    SignalSample,
    SignalState,
    SignalStateMachineConfig,
    StateChangeEvent,
)

__all__ = [
    "DEFAULT_SIGNAL_CONFIG",
    "STATE_CONFIDENCE",
    "SignalDebugEvent",
    "SignalSample",
    "SignalState",
    "SignalStateMachine",
    "SignalStateMachineConfig",
    "StateChangeEvent",
]
