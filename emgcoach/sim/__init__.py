"""Seeded EMG set simulator for tests and demos."""

from emgcoach.sim.emg_simulator import (
    DEFAULT_SIM_OPTIONS,
    EXERCISE_CEILING,
    LowSignalWindow,
    SetSimOptions,
    SimExercise,
    SimScenario,
    iter_rep_set,
    make_symmetric_pair,
    simulate_rep_set,
    with_scenario,
)

__all__ = [
    "DEFAULT_SIM_OPTIONS",
    "EXERCISE_CEILING",
    "LowSignalWindow",
    "SetSimOptions",
    "SimExercise",
    "SimScenario",
    "iter_rep_set",
    "make_symmetric_pair",
    "simulate_rep_set",
    "with_scenario",
]
