"""Compliance input/output models.

A coach ask is a tagged union discriminated on ``kind``. Snapshots describe
the set before and after the ask. Facet scores use -1 for "not applicable".
"""

from dataclasses import dataclass
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

FACET_NOT_APPLICABLE = -1


class WeightAsk(BaseModel):
    """Change the load by ``delta_pct`` percent."""

    kind: Literal["weight"] = "weight"
    delta_pct: float


class RestAsk(BaseModel):
    """Rest for ``seconds`` before the next set."""

    kind: Literal["rest"] = "rest"
    seconds: float = Field(..., gt=0)


class RepsAsk(BaseModel):
    """Land the next set inside ``target_range`` reps."""

    kind: Literal["reps"] = "reps"
    target_range: tuple[int, int]

    @field_validator("target_range")
    @classmethod
    def validate_target_range(cls, value: tuple[int, int]) -> tuple[int, int]:
        """Validate that the range is ordered."""
        if value[0] > value[1]:
            raise ValueError(f"target_range must be (min, max), got {value}")
        return value


CoachAsk = Annotated[WeightAsk | RestAsk | RepsAsk, Field(discriminator="kind")]

coach_asks_adapter: TypeAdapter[list[CoachAsk]] = TypeAdapter(list[CoachAsk])


class SetSnapshot(BaseModel):
    """Outcome of one completed set."""

    load_kg: float = Field(..., ge=0)
    reps: int = Field(..., ge=0)
    rir: float | None = Field(None, ge=0, description="Reps in reserve")
    rest_sec: float | None = Field(None, ge=0)
    rms_drop_pct: float | None = Field(None, description="RMS drop across the set, in percent")
    ror_drop_pct: float | None = Field(None, description="Rate-of-rise drop across the set, in percent")
    implement_is_fixed_dumbbell: bool = False


@dataclass(frozen=True)
class FacetWeights:
    """Base facet weights; rescaled over the applicable facets."""

    weight: float = 0.4
    target: float = 0.4
    emg: float = 0.1
    rest: float = 0.1


DEFAULT_FACET_WEIGHTS = FacetWeights()


class ComplianceFacets(BaseModel):
    model_config = ConfigDict(frozen=True)

    weight: int = FACET_NOT_APPLICABLE
    target: int
    emg: int = FACET_NOT_APPLICABLE
    rest: int = FACET_NOT_APPLICABLE


class ComplianceResult(BaseModel):
    """Verdict on whether the athlete listened to the ask."""

    model_config = ConfigDict(frozen=True)

    listened: bool
    score: int = Field(..., ge=0, le=100)
    reasons: list[str]
    facets: ComplianceFacets
