"""
Pydantic schemas for catalog API.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel


class CompletionGateResponse(BaseModel):
    """Minimum count of completed units of one kind."""

    kind: str
    count: int


class UnitResponse(BaseModel):
    """One unit definition."""

    id: str
    kind: str
    title: str
    prerequisites: List[str] = []
    points: int
    rewards: Dict[str, int] = {}
    reward_mode: str
    max_score: Optional[int] = None
    question_count: Optional[int] = None
    required_level: Optional[int] = None
    required_completed: Optional[CompletionGateResponse] = None
    required_items: Dict[str, int] = {}
    cadence: Optional[str] = None
    parent_id: Optional[str] = None


class GroupResponse(BaseModel):
    """One group definition with its derived leaf count."""

    id: str
    kind: str
    title: str
    order: int
    children: List[str] = []
    prerequisites: List[str] = []
    boss_id: Optional[str] = None
    parent_id: Optional[str] = None
    total_count: int


class GroupDetailResponse(GroupResponse):
    """Group with its leaf unit ids expanded."""

    leaf_unit_ids: List[str] = []
    boss_ids: List[str] = []
