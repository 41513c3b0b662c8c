"""Deterministic scoring of next-set compliance with coach asks."""

from emgcoach.compliance.scorer import (
    DEFAULT_TARGET_RANGE,
    LISTENED_THRESHOLD,
    score_compliance,
    weighted_score,
)
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
    coach_asks_adapter,
)

__all__ = [
    "DEFAULT_FACET_WEIGHTS",
    "DEFAULT_TARGET_RANGE",
    "FACET_NOT_APPLICABLE",
    "LISTENED_THRESHOLD",
    "CoachAsk",
    "ComplianceFacets",
    "ComplianceResult",
    "FacetWeights",
    "RepsAsk",
    "RestAsk",
    "SetSnapshot",
    "WeightAsk",
    "coach_asks_adapter",
    "score_compliance",
    "weighted_score",
]
