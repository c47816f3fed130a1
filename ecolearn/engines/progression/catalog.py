"""
Catalog - immutable unit and group definitions.

Units are the completable pieces of content (lessons, quizzes, challenges,
mini-games, bosses). Groups are ordered containers of units and nested groups
(modules, sub-levels, major levels, quest lines), optionally closed by a
terminal boss.

The catalog is validated once on construction:
- ids are unique across units and groups
- every prerequisite, child and boss reference resolves
- a node belongs to at most one parent group
- the dependency graph is acyclic

A group "depends on" its own prerequisites plus everything it contains, since
a prerequisite naming a group is satisfied only once that group is completed.
"""

import json
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ecolearn.engines.progression.errors import CatalogError, NotFound
from ecolearn.engines.progression.items import EMPTY_BUNDLE, RewardBundle
from ecolearn.logging_config import get_logger

logger = get_logger(__name__)


class UnitKind(str, Enum):
    """Kinds of completable content."""

    LESSON = "lesson"
    QUIZ = "quiz"
    CHALLENGE = "challenge"
    GAME = "game"
    BOSS = "boss"


class GroupKind(str, Enum):
    """Kinds of unit containers."""

    MODULE = "module"
    SUB_LEVEL = "sub_level"
    MAJOR_LEVEL = "major_level"
    QUEST_LINE = "quest_line"


class RewardMode(str, Enum):
    FIXED = "fixed"
    SCORED = "scored"


class ChallengeCadence(str, Enum):
    """How often a challenge is offered. Descriptive only; completion is once per account."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    SPECIAL = "special"


class CompletionGate(BaseModel):
    """Minimum number of completed units of one kind."""

    model_config = ConfigDict(frozen=True)

    kind: UnitKind
    count: int = Field(ge=1)


class Unit(BaseModel):
    """One completable piece of content."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    kind: UnitKind
    title: str = ""
    prerequisites: Tuple[str, ...] = ()
    points: int = Field(default=0, ge=0)
    rewards: RewardBundle = EMPTY_BUNDLE

    # Quizzes: point value of each question. max_score is their sum.
    question_points: Tuple[int, ...] = ()

    # Extra gates carried over from challenge requirements
    required_level: Optional[int] = Field(default=None, ge=1)
    required_items: RewardBundle = EMPTY_BUNDLE
    # When set alongside required_level, meeting either one opens the unit
    required_completed: Optional[CompletionGate] = None

    cadence: Optional[ChallengeCadence] = None

    @model_validator(mode="after")
    def _check_kind_fields(self) -> "Unit":
        if self.kind == UnitKind.QUIZ:
            if not self.question_points:
                raise ValueError(f"quiz {self.id!r} defines no questions")
            if any(p <= 0 for p in self.question_points):
                raise ValueError(f"quiz {self.id!r} has a non-positive question value")
            if not self.rewards.is_empty:
                raise ValueError(f"quiz {self.id!r} is scored and cannot carry a fixed reward bundle")
        elif self.question_points:
            raise ValueError(f"{self.kind.value} {self.id!r} cannot define questions")
        if self.cadence is not None and self.kind != UnitKind.CHALLENGE:
            raise ValueError(f"only challenges have a cadence ({self.id!r})")
        if self.id in self.prerequisites:
            raise ValueError(f"unit {self.id!r} lists itself as a prerequisite")
        return self

    @property
    def reward_mode(self) -> RewardMode:
        return RewardMode.SCORED if self.kind == UnitKind.QUIZ else RewardMode.FIXED

    @property
    def max_score(self) -> int:
        return sum(self.question_points)

    @property
    def question_count(self) -> int:
        return len(self.question_points)


class Group(BaseModel):
    """Ordered container of units and nested groups."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    kind: GroupKind
    title: str = ""
    order: int = 0
    children: Tuple[str, ...] = ()
    prerequisites: Tuple[str, ...] = ()
    boss_id: Optional[str] = None


Node = Union[Unit, Group]


class Catalog:
    """
    Validated, read-only index over units and groups.

    Derived lookups (leaf ids, parents) are computed once at construction.
    """

    def __init__(self, units: Iterable[Unit], groups: Iterable[Group] = ()):
        self._units: Dict[str, Unit] = {}
        self._groups: Dict[str, Group] = {}
        for unit in units:
            self._register(unit, self._units)
        for group in groups:
            self._register(group, self._groups)

        self._parents: Dict[str, str] = {}
        self._validate_references()
        self._validate_acyclic()

        self._leaves: Dict[str, Tuple[str, ...]] = {}
        self._bosses: Dict[str, Tuple[str, ...]] = {}
        for group_id in self._groups:
            self._leaves[group_id] = tuple(self._collect_leaves(group_id))
            self._bosses[group_id] = tuple(self._collect_bosses(group_id))

        logger.debug(
            "Catalog built",
            extra={"unit_count": len(self._units), "group_count": len(self._groups)},
        )

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    def _register(self, node: Node, bucket: Dict[str, Any]) -> None:
        if node.id in self._units or node.id in self._groups:
            raise CatalogError(f"Duplicate catalog id: {node.id}")
        bucket[node.id] = node

    def _exists(self, node_id: str) -> bool:
        return node_id in self._units or node_id in self._groups

    def _validate_references(self) -> None:
        for node in self.nodes():
            for prerequisite in node.prerequisites:
                if not self._exists(prerequisite):
                    raise CatalogError(f"{node.id!r} has unknown prerequisite {prerequisite!r}")

        for group in self._groups.values():
            contained = list(group.children)
            if group.boss_id is not None:
                if group.boss_id not in self._units:
                    raise CatalogError(f"Group {group.id!r} has unknown boss {group.boss_id!r}")
                if self._units[group.boss_id].kind != UnitKind.BOSS:
                    raise CatalogError(f"Group {group.id!r} boss {group.boss_id!r} is not a boss unit")
                contained.append(group.boss_id)
            for child in contained:
                if child == group.id:
                    raise CatalogError(f"Group {group.id!r} contains itself")
                if not self._exists(child):
                    raise CatalogError(f"Group {group.id!r} has unknown child {child!r}")
                previous = self._parents.get(child)
                if previous is not None:
                    raise CatalogError(f"{child!r} belongs to both {previous!r} and {group.id!r}")
                self._parents[child] = group.id

    def _dependencies(self, node_id: str) -> List[str]:
        node = self.get(node_id)
        deps = list(node.prerequisites)
        if isinstance(node, Group):
            deps.extend(node.children)
            if node.boss_id is not None:
                deps.append(node.boss_id)
        return deps

    def _validate_acyclic(self) -> None:
        visiting: set = set()
        visited: set = set()

        def visit(node_id: str, path: List[str]) -> None:
            if node_id in visited:
                return
            if node_id in visiting:
                cycle = path[path.index(node_id):] + [node_id]
                raise CatalogError(f"Circular prerequisite chain: {' -> '.join(cycle)}")
            visiting.add(node_id)
            path.append(node_id)
            for dep in self._dependencies(node_id):
                visit(dep, path)
            path.pop()
            visiting.remove(node_id)
            visited.add(node_id)

        for node_id in list(self._units) + list(self._groups):
            visit(node_id, [])

    def _collect_leaves(self, group_id: str) -> Iterator[str]:
        group = self._groups[group_id]
        for child in group.children:
            if child in self._units:
                yield child
            else:
                yield from self._collect_leaves(child)

    def _collect_bosses(self, group_id: str) -> Iterator[str]:
        group = self._groups[group_id]
        for child in group.children:
            if child in self._groups:
                yield from self._collect_bosses(child)
        if group.boss_id is not None:
            yield group.boss_id

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def nodes(self) -> Iterator[Node]:
        yield from self._units.values()
        yield from self._groups.values()

    @property
    def units(self) -> List[Unit]:
        return list(self._units.values())

    @property
    def groups(self) -> List[Group]:
        return list(self._groups.values())

    def __contains__(self, node_id: object) -> bool:
        return isinstance(node_id, str) and self._exists(node_id)

    def is_unit(self, node_id: str) -> bool:
        return node_id in self._units

    def is_group(self, node_id: str) -> bool:
        return node_id in self._groups

    def get(self, node_id: str) -> Node:
        """Get a unit or group by id, raising NotFound."""
        if node_id in self._units:
            return self._units[node_id]
        if node_id in self._groups:
            return self._groups[node_id]
        raise NotFound(node_id)

    def get_unit(self, unit_id: str) -> Unit:
        try:
            return self._units[unit_id]
        except KeyError:
            raise NotFound(unit_id, "unit") from None

    def get_group(self, group_id: str) -> Group:
        try:
            return self._groups[group_id]
        except KeyError:
            raise NotFound(group_id, "group") from None

    def units_of_kind(self, kind: UnitKind) -> List[Unit]:
        return [u for u in self._units.values() if u.kind == kind]

    def parent_of(self, node_id: str) -> Optional[Group]:
        self.get(node_id)
        parent_id = self._parents.get(node_id)
        return self._groups[parent_id] if parent_id else None

    def top_level_groups(self) -> List[Group]:
        """Groups without a parent, ordered by their order field then id."""
        roots = [g for g in self._groups.values() if g.id not in self._parents]
        return sorted(roots, key=lambda g: (g.order, g.id))

    def child_ids(self, group_id: str) -> List[str]:
        """Direct children in display order, followed by the terminal boss."""
        group = self.get_group(group_id)
        ordered = list(group.children)
        if group.boss_id is not None:
            ordered.append(group.boss_id)
        return ordered

    def leaf_unit_ids(self, group_id: str) -> Tuple[str, ...]:
        """Units transitively contained in a group, bosses excluded."""
        self.get_group(group_id)
        return self._leaves[group_id]

    def boss_ids(self, group_id: str) -> Tuple[str, ...]:
        """Terminal bosses of the group and of every nested group."""
        self.get_group(group_id)
        return self._bosses[group_id]

    def total_count(self, group_id: str) -> int:
        return len(self.leaf_unit_ids(group_id))

    # ------------------------------------------------------------------
    # Construction from data
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Catalog":
        """Build from {"units": [...], "groups": [...]}."""
        if not isinstance(raw, Mapping):
            raise CatalogError("Catalog document root must be an object")
        try:
            units = [Unit.model_validate(item) for item in raw.get("units", [])]
            groups = [Group.model_validate(item) for item in raw.get("groups", [])]
        except ValidationError as exc:
            raise CatalogError(f"Invalid catalog entry: {exc}") from exc
        return cls(units, groups)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "units": [u.model_dump(mode="json") for u in self._units.values()],
            "groups": [g.model_dump(mode="json") for g in self._groups.values()],
        }


def load_catalog(path: Union[str, Path]) -> Catalog:
    """Load a catalog from a JSON document."""
    file_path = Path(path)
    raw = json.loads(file_path.read_text(encoding="utf-8-sig"))
    catalog = Catalog.from_dict(raw)
    logger.info(
        "Catalog loaded from %s",
        file_path,
        extra={"unit_count": len(catalog.units), "group_count": len(catalog.groups)},
    )
    return catalog


@lru_cache
def default_catalog() -> Catalog:
    """The bundled EcoLearn content."""
    from ecolearn.pedagogy.content import catalog_document

    return Catalog.from_dict(catalog_document())
