"""
Pytest fixtures for EcoLearn progression tests.
"""

from typing import Any, Dict

import pytest

from ecolearn.engines.progression.catalog import Catalog
from ecolearn.engines.progression.ledger import ProgressLedger


def small_catalog_document() -> Dict[str, Any]:
    """
    A compact catalog exercising every kind of unit and group.

    - climate: module of five chained lessons (l1..l5)
    - q1: ten-question quiz (10 points each) unlocked by l1
    - ch-a -> ch-b: challenge chain; ch-level / ch-items carry extra gates
    - ch-either: opens at level 2 or after two completed challenges
    - arena: major level of two sub-levels (g1, g2) closed by boss1
    - l6: lesson gated on the whole arena group
    - empty-module: group with no children and no boss
    """
    return {
        "units": [
            {"id": "l1", "kind": "lesson", "title": "Lesson 1", "points": 50},
            {"id": "l2", "kind": "lesson", "title": "Lesson 2", "points": 60, "prerequisites": ["l1"]},
            {"id": "l3", "kind": "lesson", "title": "Lesson 3", "points": 70, "prerequisites": ["l2"]},
            {"id": "l4", "kind": "lesson", "title": "Lesson 4", "points": 80, "prerequisites": ["l3"]},
            {"id": "l5", "kind": "lesson", "title": "Lesson 5", "points": 100, "prerequisites": ["l4"]},
            {
                "id": "q1",
                "kind": "quiz",
                "title": "Quiz 1",
                "prerequisites": ["l1"],
                "question_points": [10] * 10,
            },
            {
                "id": "q2",
                "kind": "quiz",
                "title": "Quiz 2",
                "question_points": [10] * 5,
            },
            {
                "id": "ch-a",
                "kind": "challenge",
                "title": "Challenge A",
                "cadence": "daily",
                "points": 30,
                "rewards": {"water": 1},
            },
            {
                "id": "ch-b",
                "kind": "challenge",
                "title": "Challenge B",
                "cadence": "weekly",
                "points": 40,
                "rewards": {"sunlight": 1},
                "prerequisites": ["ch-a"],
            },
            {
                "id": "ch-level",
                "kind": "challenge",
                "title": "Level-gated challenge",
                "points": 10,
                "required_level": 2,
            },
            {
                "id": "ch-items",
                "kind": "challenge",
                "title": "Item-gated challenge",
                "points": 10,
                "required_items": {"seed": 2},
            },
            {
                "id": "ch-either",
                "kind": "challenge",
                "title": "Level or two challenges",
                "points": 10,
                "required_level": 2,
                "required_completed": {"kind": "challenge", "count": 2},
            },
            {"id": "g1", "kind": "game", "title": "Game 1", "points": 50, "rewards": {"seed": 1, "water": 1}},
            {
                "id": "g2",
                "kind": "game",
                "title": "Game 2",
                "points": 40,
                "rewards": {"sunlight": 1, "nutrients": 1},
                "prerequisites": ["g1"],
            },
            {
                "id": "boss1",
                "kind": "boss",
                "title": "Arena Boss",
                "points": 150,
                "rewards": {"seed": 5, "water": 3, "sunlight": 3, "nutrients": 2, "fertilizer": 1},
                "prerequisites": ["g1", "g2"],
            },
            {"id": "l6", "kind": "lesson", "title": "After the arena", "points": 20, "prerequisites": ["arena"]},
        ],
        "groups": [
            {
                "id": "climate",
                "kind": "module",
                "title": "Climate",
                "order": 1,
                "children": ["l1", "l2", "l3", "l4", "l5"],
            },
            {"id": "arena-1", "kind": "sub_level", "title": "Arena 1", "order": 1, "children": ["g1"]},
            {
                "id": "arena-2",
                "kind": "sub_level",
                "title": "Arena 2",
                "order": 2,
                "children": ["g2"],
                "prerequisites": ["arena-1"],
            },
            {
                "id": "arena",
                "kind": "major_level",
                "title": "Arena",
                "order": 2,
                "children": ["arena-1", "arena-2"],
                "boss_id": "boss1",
            },
            {"id": "empty-module", "kind": "module", "title": "Coming soon", "order": 3},
        ],
    }


@pytest.fixture
def catalog_document() -> Dict[str, Any]:
    return small_catalog_document()


@pytest.fixture
def catalog() -> Catalog:
    return Catalog.from_dict(small_catalog_document())


@pytest.fixture
def empty_ledger() -> ProgressLedger:
    return ProgressLedger.empty()
