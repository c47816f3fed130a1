"""
Pydantic schemas for progression API.
"""

from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class CompleteUnitRequest(BaseModel):
    """
    Completion payload.

    Quizzes send score_earned and max_score (and optionally streak); other
    units send an empty body.
    """

    score_earned: Optional[int] = None
    max_score: Optional[int] = None
    streak: int = 0
    completed: bool = True


class GrantResponse(BaseModel):
    """Points and items granted for one completion."""

    unit_id: str
    kind: str
    points: int
    items: Dict[str, int] = {}
    percentage: Optional[int] = None
    rules: List[str] = []


class LedgerResponse(BaseModel):
    """Current progress snapshot for a profile."""

    profile_id: str
    completed: Dict[str, List[str]]
    inventory: Dict[str, int]
    total_points: int
    level: int
    points_to_next_level: int
    growth_stage: str
    learning_streak: int
    last_active_date: Optional[date] = None
    version: int


class CompletionResponse(BaseModel):
    """Result of a completion request."""

    status: str
    grant: Optional[GrantResponse] = None
    stage_before: str
    stage_after: str
    stage_changed: bool
    ledger: LedgerResponse


class AccessResponse(BaseModel):
    """Access decision for one unit or group."""

    target_id: str
    accessible: bool
    bypassed: bool = False
    unmet: List[str] = []


class AccessibleChildrenResponse(BaseModel):
    group_id: str
    accessible: List[str]


class GroupProgressResponse(BaseModel):
    """Completion rollup for one group."""

    group_id: str
    completed_count: int = Field(ge=0)
    total_count: int = Field(ge=0)
    percent: int = Field(ge=0, le=100)
    is_completed: bool
    boss_completed: bool


class StageRow(BaseModel):
    stage: str
    required: Dict[str, int]
    collected: Dict[str, int]
    is_complete: bool


class StageResponse(BaseModel):
    """Growth stage with per-stage breakdown."""

    growth_stage: str
    next_stage: Optional[str] = None
    shortfall: Optional[Dict[str, int]] = None
    stages: List[StageRow]


class CompletionHistoryItem(BaseModel):
    unit_id: str
    unit_kind: str
    points: int
    items: Dict[str, int]
    percentage: Optional[int] = None
    ledger_version: int
