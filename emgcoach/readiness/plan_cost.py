"""Readiness cost projection for a planned block list.

Each block costs ``sets * base * reps multiplier * drop-band multiplier``.
The projected readiness is the starting readiness minus the total cost.
"""

import math
import re
from collections.abc import Sequence
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class LoadStrategy(StrEnum):
    HEAVY = "heavy"
    MODERATE = "moderate"
    LIGHT = "light"
    TECHNIQUE = "technique"
    ISOMETRIC = "isometric"
    AEROBIC_LOW = "aerobic_low"


SET_COST: dict[LoadStrategy, float] = {
    LoadStrategy.HEAVY: 2.5,
    LoadStrategy.MODERATE: 1.6,
    LoadStrategy.LIGHT: 1.0,
    LoadStrategy.TECHNIQUE: 0.3,
    LoadStrategy.ISOMETRIC: 0.6,
    LoadStrategy.AEROBIC_LOW: 0.8,
}
DEFAULT_SET_COST = 1.2
DEFAULT_READINESS_BEFORE = 60.0
DEFAULT_PARSED_REPS = 4

_RANGE_RE = re.compile(r"(\d+)\s*[-–]\s*(\d+)")
_SINGLE_RE = re.compile(r"\b(\d+)\b")


def _round_half_up(value: float, digits: int = 0) -> float:
    """Round halves toward positive infinity, at ``digits`` decimals."""
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


class PlanBlock(BaseModel):
    """One prescribed exercise block."""

    exercise_id: str
    load_strategy: LoadStrategy | str
    sets: int = Field(..., ge=0)
    reps: int | str
    rest_sec: int = Field(0, ge=0)
    rms_drop_band: tuple[float, float] | None = Field(
        None, description="Target RMS drop band in percent, e.g. (20, 30)"
    )


class PlanProjection(BaseModel):
    model_config = ConfigDict(frozen=True)

    readiness_before: float
    readiness_after: float
    delta: float
    cost: float


def parse_reps(reps: int | str) -> int:
    """Parse a rep prescription such as ``8``, ``"8-10"`` or ``"5 reps"``."""
    if isinstance(reps, int):
        return reps
    match = _RANGE_RE.search(reps)
    if match:
        return int(_round_half_up((int(match.group(1)) + int(match.group(2))) / 2))
    single = _SINGLE_RE.search(reps)
    return int(single.group(1)) if single else DEFAULT_PARSED_REPS


def reps_multiplier(reps: int) -> float:
    if reps <= 2:
        return 0.7
    if reps <= 6:
        return 1.0
    if reps <= 10:
        return 1.15
    return 1.3


def rms_drop_multiplier(band: tuple[float, float] | None) -> float:
    if band is None:
        return 1.0
    average = (band[0] + band[1]) / 2
    if average < 12:
        return 0.9
    if average <= 20:
        return 1.0
    if average <= 28:
        return 1.12
    return 1.25


def estimate_plan_cost(blocks: Sequence[PlanBlock]) -> float:
    """Total readiness cost of a plan, rounded to one decimal."""
    total = 0.0
    for block in blocks:
        base = SET_COST.get(block.load_strategy, DEFAULT_SET_COST)
        total += block.sets * base * reps_multiplier(parse_reps(block.reps)) * rms_drop_multiplier(block.rms_drop_band)
    return _round_half_up(total, 1)


def project_plan_readiness(
    blocks: Sequence[PlanBlock],
    readiness_before: float = DEFAULT_READINESS_BEFORE,
) -> PlanProjection:
    """Project readiness after performing ``blocks``.

    Args:
        blocks: Planned exercise blocks
        readiness_before: Readiness at the start of the plan

    Returns:
        PlanProjection with the cost and the non-negative projected readiness
    """
    cost = estimate_plan_cost(blocks)
    after = max(0.0, _round_half_up(readiness_before - cost, 1))
    return PlanProjection(
        readiness_before=readiness_before,
        readiness_after=after,
        delta=_round_half_up(after - readiness_before, 1),
        cost=cost,
    )
