"""Rep-level fatigue data models."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class RepZone(StrEnum):
    """Overall fatigue zone of a set, judged rep by rep."""

    BUILDING = "building"
    IN_ZONE = "in_zone"
    TOO_HEAVY_EARLY = "too_heavy_early"
    TOO_LIGHT = "too_light"
    LOW_SIGNAL = "low_signal"


class RepFeature(BaseModel):
    """Features of one completed repetition.

    Created as reps are detected and never modified afterwards.
    """

    model_config = ConfigDict(frozen=True)

    idx: int = Field(..., ge=1, description="Rep number within the set (1-based)")
    rms_norm: float = Field(..., ge=0, description="Peak RMS amplitude normalized to the session baseline")
    signal_confidence: float = Field(..., ge=0, le=1, description="Electrode signal quality (0-1)")
    rep_tempo_ok: bool | None = Field(None, description="Tempo within prescription, when known")
    rep_velocity: float | None = Field(None, description="Normalized concentric velocity (0-1), when known")
