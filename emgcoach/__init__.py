"""emgcoach: decision core for EMG-guided resistance-training coaching.

Four call surfaces:
- ``SignalStateMachine``: streaming rise / plateau / fall classification
- ``classify_zone`` / ``find_fatigue_rep``: rep-by-rep fatigue zones
- ``compute_readiness``: set readiness from rep-peak RMS
- ``score_compliance``: did the athlete follow the coach's ask
"""

from emgcoach.compliance import ComplianceResult, SetSnapshot, score_compliance
from emgcoach.core.errors import InvalidInputError
from emgcoach.fatigue import RepFeature, RepZone, classify_zone, find_fatigue_rep
from emgcoach.readiness import ReadinessConfig, ReadinessInputs, ReadinessOutputs, compute_readiness
from emgcoach.signal_state import SignalSample, SignalState, SignalStateMachine, SignalStateMachineConfig

__version__ = "0.1.0"

__all__ = [
    "ComplianceResult",
    "InvalidInputError",
    "ReadinessConfig",
    "ReadinessInputs",
    "ReadinessOutputs",
    "RepFeature",
    "RepZone",
    "SetSnapshot",
    "SignalSample",
    "SignalState",
    "SignalStateMachine",
    "SignalStateMachineConfig",
    "classify_zone",
    "compute_readiness",
    "find_fatigue_rep",
    "score_compliance",
]
