"""Catalog endpoints - read-only content definitions."""

from typing import List, Optional

from fastapi import APIRouter

from ecolearn.api.deps import CatalogDep
from ecolearn.engines.progression.catalog import Catalog, Group, Unit, UnitKind
from ecolearn.schemas.catalog import CompletionGateResponse, GroupDetailResponse, GroupResponse, UnitResponse

router = APIRouter()


def _parent_id(catalog: Catalog, node_id: str) -> Optional[str]:
    parent = catalog.parent_of(node_id)
    return parent.id if parent else None


def _gate_to_response(unit: Unit) -> Optional[CompletionGateResponse]:
    gate = unit.required_completed
    if gate is None:
        return None
    return CompletionGateResponse(kind=gate.kind.value, count=gate.count)


def _unit_to_response(catalog: Catalog, unit: Unit) -> UnitResponse:
    scored = unit.kind == UnitKind.QUIZ
    return UnitResponse(
        id=unit.id,
        kind=unit.kind.value,
        title=unit.title,
        prerequisites=list(unit.prerequisites),
        points=unit.points,
        rewards=unit.rewards.as_dict(),
        reward_mode=unit.reward_mode.value,
        max_score=unit.max_score if scored else None,
        question_count=unit.question_count if scored else None,
        required_level=unit.required_level,
        required_completed=_gate_to_response(unit),
        required_items=unit.required_items.as_dict(),
        cadence=unit.cadence.value if unit.cadence else None,
        parent_id=_parent_id(catalog, unit.id),
    )


def _group_fields(catalog: Catalog, group: Group) -> dict:
    return {
        "id": group.id,
        "kind": group.kind.value,
        "title": group.title,
        "order": group.order,
        "children": list(group.children),
        "prerequisites": list(group.prerequisites),
        "boss_id": group.boss_id,
        "parent_id": _parent_id(catalog, group.id),
        "total_count": catalog.total_count(group.id),
    }


@router.get("/units", response_model=List[UnitResponse])
async def list_units(catalog: CatalogDep, kind: Optional[UnitKind] = None):
    """List unit definitions, optionally filtered by kind."""
    units = catalog.units_of_kind(kind) if kind else catalog.units
    return [_unit_to_response(catalog, u) for u in units]


@router.get("/units/{unit_id}", response_model=UnitResponse)
async def get_unit(unit_id: str, catalog: CatalogDep):
    return _unit_to_response(catalog, catalog.get_unit(unit_id))


@router.get("/groups", response_model=List[GroupResponse])
async def list_groups(catalog: CatalogDep):
    """List all groups, top-level groups first in display order."""
    top = catalog.top_level_groups()
    top_ids = {g.id for g in top}
    nested = [g for g in catalog.groups if g.id not in top_ids]
    return [GroupResponse(**_group_fields(catalog, g)) for g in top + nested]


@router.get("/groups/{group_id}", response_model=GroupDetailResponse)
async def get_group(group_id: str, catalog: CatalogDep):
    """Get one group with its leaf units and bosses."""
    group = catalog.get_group(group_id)
    return GroupDetailResponse(
        **_group_fields(catalog, group),
        leaf_unit_ids=list(catalog.leaf_unit_ids(group_id)),
        boss_ids=list(catalog.boss_ids(group_id)),
    )
