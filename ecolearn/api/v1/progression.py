"""
Progression endpoints - ledger, access checks, completions, rollups and growth.

All routes act on one learner profile. ?bypass=true skips unlock checks and is
honored only when developer mode is enabled.
"""

from typing import List, Optional

from fastapi import APIRouter

from ecolearn.api.deps import Bypass, CatalogDep, ProfileId, ProgressServiceDep
from ecolearn.engines.progression.errors import InvalidOutcome
from ecolearn.engines.progression.growth_stage import next_stage, next_stage_shortfall, stage_progress
from ecolearn.engines.progression.ledger import ProgressLedger
from ecolearn.engines.progression.reward_calculator import CompletionOutcome, Outcome, QuizOutcome
from ecolearn.engines.progression.rollup import GroupProgress, all_group_progress, group_progress
from ecolearn.engines.progression.unlock_resolver import BypassMode, UnlockResolver
from ecolearn.schemas.progression import (
    AccessibleChildrenResponse,
    AccessResponse,
    CompleteUnitRequest,
    CompletionHistoryItem,
    CompletionResponse,
    GrantResponse,
    GroupProgressResponse,
    LedgerResponse,
    StageResponse,
    StageRow,
)

router = APIRouter()


def _ledger_to_response(profile_id: str, ledger: ProgressLedger) -> LedgerResponse:
    snapshot = ledger.to_snapshot()
    return LedgerResponse(
        profile_id=profile_id,
        completed=snapshot["completed"],
        inventory=snapshot["inventory"],
        total_points=ledger.total_points,
        level=ledger.level,
        points_to_next_level=ledger.points_to_next_level,
        growth_stage=ledger.growth_stage.value,
        learning_streak=ledger.learning_streak,
        last_active_date=ledger.last_active_date,
        version=ledger.version,
    )


def _progress_to_response(progress: GroupProgress) -> GroupProgressResponse:
    return GroupProgressResponse(**progress.model_dump())


def _outcome_from_request(unit_id: str, body: Optional[CompleteUnitRequest]) -> Optional[Outcome]:
    if body is None:
        return None
    if body.score_earned is None and body.max_score is None:
        return CompletionOutcome(completed=body.completed)
    if body.score_earned is None or body.max_score is None:
        raise InvalidOutcome(unit_id, "score_earned and max_score must be sent together")
    return QuizOutcome(score_earned=body.score_earned, max_score=body.max_score, streak=body.streak)


@router.get("/profiles/{profile_id}/ledger", response_model=LedgerResponse)
async def get_ledger(profile_id: ProfileId, service: ProgressServiceDep):
    """Get the learner's ledger, creating an empty one on first use."""
    ledger = await service.get_ledger(profile_id)
    return _ledger_to_response(profile_id, ledger)


@router.get("/profiles/{profile_id}/access/{target_id}", response_model=AccessResponse)
async def check_access(
    profile_id: ProfileId,
    target_id: str,
    service: ProgressServiceDep,
    catalog: CatalogDep,
    bypass: Bypass,
):
    """Can the learner start this unit or group? Lists what still blocks it."""
    ledger = await service.get_ledger(profile_id)
    resolver = UnlockResolver(catalog)
    accessible = resolver.can_access(target_id, ledger, bypass)
    return AccessResponse(
        target_id=target_id,
        accessible=accessible,
        bypassed=bypass == BypassMode.ON,
        unmet=resolver.unmet_prerequisites(target_id, ledger),
    )


@router.post("/profiles/{profile_id}/units/{unit_id}/complete", response_model=CompletionResponse)
async def complete_unit(
    profile_id: ProfileId,
    unit_id: str,
    service: ProgressServiceDep,
    bypass: Bypass,
    body: Optional[CompleteUnitRequest] = None,
):
    """
    Complete a unit and apply its reward.

    A repeated completion returns status "already_completed" with the
    originally recorded grant and leaves the ledger unchanged.
    """
    outcome = _outcome_from_request(unit_id, body)
    result = await service.complete_unit(profile_id, unit_id, outcome, bypass=bypass)
    grant = None
    if result.grant is not None:
        grant = GrantResponse(
            unit_id=result.grant.unit_id,
            kind=result.grant.kind.value,
            points=result.grant.points,
            items=result.grant.items.as_dict(),
            percentage=result.grant.percentage,
            rules=list(result.grant.rules),
        )
    return CompletionResponse(
        status=result.status.value,
        grant=grant,
        stage_before=result.stage_before.value,
        stage_after=result.stage_after.value,
        stage_changed=result.stage_changed,
        ledger=_ledger_to_response(profile_id, result.ledger),
    )


@router.get("/profiles/{profile_id}/groups/{group_id}/progress", response_model=GroupProgressResponse)
async def get_group_progress(
    profile_id: ProfileId,
    group_id: str,
    service: ProgressServiceDep,
    catalog: CatalogDep,
):
    ledger = await service.get_ledger(profile_id)
    return _progress_to_response(group_progress(group_id, ledger, catalog))


@router.get("/profiles/{profile_id}/groups/{group_id}/accessible", response_model=AccessibleChildrenResponse)
async def get_accessible_children(
    profile_id: ProfileId,
    group_id: str,
    service: ProgressServiceDep,
    catalog: CatalogDep,
    bypass: Bypass,
):
    """Children of the group (and its boss) the learner can start now."""
    ledger = await service.get_ledger(profile_id)
    children = UnlockResolver(catalog).accessible_children(group_id, ledger, bypass)
    return AccessibleChildrenResponse(group_id=group_id, accessible=children)


@router.get("/profiles/{profile_id}/stage", response_model=StageResponse)
async def get_stage(profile_id: ProfileId, service: ProgressServiceDep):
    """Tree growth stage with the per-stage requirement breakdown."""
    ledger = await service.get_ledger(profile_id)
    stage = ledger.growth_stage
    upcoming = next_stage(stage)
    shortfall = next_stage_shortfall(ledger.inventory)
    return StageResponse(
        growth_stage=stage.value,
        next_stage=upcoming.value if upcoming else None,
        shortfall=shortfall.as_dict() if shortfall is not None else None,
        stages=[StageRow(**row.model_dump(mode="json")) for row in stage_progress(ledger.inventory)],
    )


@router.get("/profiles/{profile_id}/progress", response_model=List[GroupProgressResponse])
async def get_all_progress(profile_id: ProfileId, service: ProgressServiceDep, catalog: CatalogDep):
    """Rollups for every group."""
    ledger = await service.get_ledger(profile_id)
    return [_progress_to_response(p) for p in all_group_progress(ledger, catalog)]


@router.get("/profiles/{profile_id}/history", response_model=List[CompletionHistoryItem])
async def get_history(profile_id: ProfileId, service: ProgressServiceDep):
    """Granted completions, oldest first."""
    records = await service.history(profile_id)
    return [
        CompletionHistoryItem(
            unit_id=r.unit_id,
            unit_kind=r.unit_kind,
            points=r.points,
            items=r.items,
            percentage=r.percentage,
            ledger_version=r.ledger_version,
        )
        for r in records
    ]
