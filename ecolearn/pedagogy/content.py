"""
Bundled EcoLearn content - lessons, quizzes, challenges, quests and RPG levels.

Content is static and consumed read-only. catalog_document() assembles it into
the {"units": [...], "groups": [...]} form accepted by Catalog.from_dict.

RPG sub-levels are namespaced under their major level (climate-kingdom-1, ...)
so they never collide with lesson ids.
"""

from typing import Any, Dict, List, Optional, Tuple

QUESTION_POINTS = 10
QUESTIONS_PER_QUIZ = 5

# Quiz difficulty -> (minimum learner level, completed quizzes); either one unlocks
QUIZ_DIFFICULTY_GATES: Dict[str, Optional[Tuple[int, int]]] = {
    "beginner": None,
    "intermediate": (2, 2),
    "advanced": (3, 5),
}

# (module id, title, [(lesson id, title, points), ...]); modules unlock in order
LESSON_MODULES: List[Tuple[str, str, List[Tuple[str, str, int]]]] = [
    (
        "climate-change",
        "Climate Change",
        [
            ("climate-1", "Introduction to Climate Change", 50),
            ("climate-2", "Greenhouse Effect Explained", 60),
            ("climate-3", "Climate Change Impacts", 70),
            ("climate-4", "Climate Solutions", 80),
            ("climate-5", "Climate Change Review", 100),
        ],
    ),
    (
        "waste-management",
        "Waste Management",
        [
            ("waste-1", "Understanding Waste", 40),
            ("waste-2", "The 3 R's: Reduce, Reuse, Recycle", 50),
            ("waste-3", "Composting Basics", 60),
            ("waste-4", "Waste Management Review", 70),
            ("waste-5", "Zero Waste Living", 70),
        ],
    ),
    (
        "renewable-energy",
        "Renewable Energy",
        [
            ("energy-1", "Introduction to Renewable Energy", 50),
            ("energy-2", "Solar Power", 60),
            ("energy-3", "Wind Energy", 65),
            ("energy-4", "Hydroelectric Power", 55),
            ("energy-5", "Energy Storage Solutions", 75),
        ],
    ),
    (
        "conservation",
        "Conservation",
        [
            ("conservation-1", "Why Biodiversity Matters", 50),
            ("conservation-2", "Protecting Habitats", 60),
            ("conservation-3", "Water Conservation", 60),
            ("conservation-4", "Endangered Species", 70),
            ("conservation-5", "Becoming a Conservation Champion", 90),
        ],
    ),
]

# (quest line id, unlocking lesson, title, quests, boss)
# quests: [(id, title, points, rewards)], boss: (id, title, points, rewards)
LESSON_QUEST_LINES: List[Tuple[str, str, str, List[Tuple[str, str, int, Dict[str, int]]], Tuple[str, str, int, Dict[str, int]]]] = [
    (
        "climate-lesson-quests",
        "climate-1",
        "Climate Change Quest",
        [
            ("climate-quest-1", "Temperature Rising Challenge", 50, {"seed": 1, "water": 1}),
            ("climate-quest-2", "Greenhouse Gas Puzzle", 40, {"sunlight": 1, "nutrients": 1}),
            ("climate-quest-3", "Climate Impact Simulator", 70, {"seed": 2, "water": 2, "sunlight": 1}),
        ],
        (
            "climate-lesson-boss",
            "The Climate Guardian",
            150,
            {"seed": 5, "water": 3, "sunlight": 3, "nutrients": 2, "fertilizer": 1},
        ),
    ),
    (
        "waste-lesson-quests",
        "waste-1",
        "Waste Management Quest",
        [
            ("waste-quest-1", "Waste Sorting Master", 40, {"seed": 1, "water": 1}),
            ("waste-quest-2", "Recycling Process Puzzle", 60, {"sunlight": 1, "nutrients": 2}),
            ("waste-quest-3", "Composting Simulator", 80, {"seed": 3, "water": 2, "nutrients": 3}),
        ],
        (
            "waste-lesson-boss",
            "The Waste Wizard",
            120,
            {"seed": 4, "water": 2, "sunlight": 2, "nutrients": 3, "fertilizer": 1},
        ),
    ),
    (
        "energy-lesson-quests",
        "energy-1",
        "Renewable Energy Quest",
        [
            ("energy-quest-1", "Solar City Builder", 100, {"seed": 2, "water": 1, "sunlight": 4}),
            ("energy-quest-2", "Wind Farm Simulator", 90, {"seed": 1, "water": 2, "sunlight": 2}),
            ("energy-quest-3", "Energy Storage Challenge", 120, {"seed": 3, "water": 3, "sunlight": 3, "nutrients": 2}),
            ("energy-quest-4", "Renewable Energy Showdown", 80, {"seed": 2, "water": 2, "sunlight": 2, "nutrients": 1}),
        ],
        (
            "energy-lesson-boss",
            "The Energy Master",
            200,
            {"seed": 8, "water": 4, "sunlight": 6, "nutrients": 4, "fertilizer": 2, "love": 1},
        ),
    ),
]

# (id, title, difficulty)
QUIZ_MODULES: List[Tuple[str, str, str]] = [
    ("our-planet-our-home", "Our Planet, Our Home", "beginner"),
    ("green-friends", "Green Friends", "beginner"),
    ("balance-in-nature", "Balance in Nature", "intermediate"),
    ("three-rs-in-action", "Three R's in Action", "beginner"),
    ("pollution-around-us", "Pollution Around Us", "intermediate"),
    ("my-footprint", "My Footprint", "intermediate"),
    ("waste-and-compost", "Waste and Compost", "beginner"),
    ("powering-our-world", "Powering Our World", "intermediate"),
    ("life-around-us", "Life Around Us", "intermediate"),
    ("protecting-our-friends", "Protecting Our Friends", "advanced"),
    ("climate-change-basics", "Climate Change Basics", "advanced"),
    ("sustainable-choices", "Sustainable Choices", "intermediate"),
    ("global-goals-sdgs", "Global Goals (SDGs)", "advanced"),
    ("innovation-for-the-future", "Innovation for the Future", "advanced"),
]

# (id, title, cadence, points, rewards, required level, required challenges)
CHALLENGES: List[Tuple[str, str, str, int, Dict[str, int], Optional[int], List[str]]] = [
    ("daily-water-bottle", "Reusable Water Bottle Day", "daily", 50, {"water": 2, "love": 1}, None, []),
    ("daily-lights-off", "Lights Off Challenge", "daily", 30, {"sunlight": 1}, None, []),
    ("daily-walk", "Green Commute", "daily", 40, {"seed": 1, "water": 1}, None, []),
    ("weekly-meat-free", "Meat-Free Week", "weekly", 200, {"seed": 3, "water": 2, "nutrients": 2}, 2, []),
    (
        "weekly-waste-audit",
        "Zero Waste Week",
        "weekly",
        300,
        {"seed": 2, "water": 3, "nutrients": 1, "fertilizer": 1},
        3,
        ["daily-water-bottle"],
    ),
    ("weekly-garden", "Plant Care Week", "weekly", 150, {"seed": 2, "water": 2, "sunlight": 1, "love": 2}, 2, []),
    (
        "monthly-energy-audit",
        "Energy Audit Month",
        "monthly",
        500,
        {"seed": 5, "water": 3, "sunlight": 4, "nutrients": 2},
        5,
        ["daily-lights-off", "weekly-meat-free"],
    ),
    (
        "monthly-community-cleanup",
        "Community Cleanup",
        "monthly",
        400,
        {"seed": 3, "water": 2, "nutrients": 3, "love": 4},
        4,
        [],
    ),
    ("special-earth-hour", "Earth Hour Challenge", "special", 100, {"seed": 2, "water": 1, "sunlight": 2}, None, []),
    (
        "special-plastic-free-month",
        "Plastic-Free Month",
        "special",
        800,
        {"seed": 8, "water": 5, "nutrients": 4, "fertilizer": 3, "love": 5},
        6,
        ["weekly-waste-audit"],
    ),
    ("game-eco-simulator", "Eco City Simulator", "daily", 100, {"seed": 2, "water": 1, "nutrients": 2}, 3, []),
    ("game-waste-sorting", "Waste Sorting Master", "daily", 60, {"water": 1, "nutrients": 1}, None, []),
    ("game-carbon-calculator", "Carbon Footprint Calculator", "weekly", 120, {"seed": 2, "water": 2, "nutrients": 1}, 2, []),
]

# RPG map: major levels hold sub-levels of mini-games and close with a boss.
RPG_MAJOR_LEVELS: List[Dict[str, Any]] = [
    {
        "id": "climate-kingdom",
        "title": "Climate Kingdom",
        "sub_levels": [
            (
                "The Warming Forest",
                [
                    ("warming-forest-game", "Temperature Rising", 50, {"seed": 1, "water": 1}),
                    ("greenhouse-puzzle", "Greenhouse Gas Puzzle", 40, {"sunlight": 1, "nutrients": 1}),
                ],
            ),
            (
                "The Melting Glaciers",
                [
                    ("glacier-simulator", "Glacier Melt Simulator", 70, {"seed": 2, "water": 2}),
                    ("sea-level-action", "Rising Seas Action", 60, {"sunlight": 2, "nutrients": 1}),
                ],
            ),
        ],
        "boss": (
            "climate-boss",
            "The Climate Guardian",
            150,
            {"seed": 5, "water": 3, "sunlight": 3, "nutrients": 2, "fertilizer": 1},
        ),
    },
    {
        "id": "waste-realm",
        "title": "Waste Realm",
        "sub_levels": [
            (
                "The Sorting Valley",
                [
                    ("waste-sorting-game", "Waste Sorting Master", 40, {"seed": 1, "water": 1}),
                    ("recycling-puzzle", "Recycling Process Puzzle", 60, {"sunlight": 1, "nutrients": 2}),
                ],
            ),
            (
                "The Composting Garden",
                [
                    ("composting-simulator", "Composting Simulator", 80, {"seed": 3, "water": 2, "nutrients": 3}),
                ],
            ),
        ],
        "boss": (
            "waste-boss",
            "The Waste Wizard",
            120,
            {"seed": 4, "water": 2, "sunlight": 2, "nutrients": 3, "fertilizer": 1},
        ),
    },
    {
        "id": "energy-empire",
        "title": "Energy Empire",
        "sub_levels": [
            (
                "Solar City",
                [
                    ("solar-city-builder", "Solar City Builder", 100, {"seed": 2, "water": 1, "sunlight": 4}),
                    ("wind-farm-simulator", "Wind Farm Simulator", 90, {"seed": 1, "water": 2, "sunlight": 2}),
                ],
            ),
        ],
        "boss": (
            "energy-boss",
            "The Energy Master",
            200,
            {"seed": 8, "water": 4, "sunlight": 6, "nutrients": 4, "fertilizer": 2, "love": 1},
        ),
    },
]


def _lessons(units: List[dict], groups: List[dict]) -> None:
    previous_lesson: Optional[str] = None
    previous_module: Optional[str] = None
    for order, (module_id, title, lessons) in enumerate(LESSON_MODULES, start=1):
        for lesson_id, lesson_title, points in lessons:
            units.append(
                {
                    "id": lesson_id,
                    "kind": "lesson",
                    "title": lesson_title,
                    "points": points,
                    "prerequisites": [previous_lesson] if previous_lesson else [],
                }
            )
            previous_lesson = lesson_id
        groups.append(
            {
                "id": module_id,
                "kind": "module",
                "title": title,
                "order": order,
                "children": [lesson_id for lesson_id, _, _ in lessons],
                "prerequisites": [previous_module] if previous_module else [],
            }
        )
        previous_module = module_id


def _quest_lines(units: List[dict], groups: List[dict]) -> None:
    for order, (line_id, lesson_id, title, quests, boss) in enumerate(LESSON_QUEST_LINES, start=1):
        previous: Optional[str] = None
        for quest_id, quest_title, points, rewards in quests:
            units.append(
                {
                    "id": quest_id,
                    "kind": "game",
                    "title": quest_title,
                    "points": points,
                    "rewards": rewards,
                    "prerequisites": [lesson_id] + ([previous] if previous else []),
                }
            )
            previous = quest_id
        boss_id, boss_title, boss_points, boss_rewards = boss
        units.append(
            {
                "id": boss_id,
                "kind": "boss",
                "title": boss_title,
                "points": boss_points,
                "rewards": boss_rewards,
                "prerequisites": [quest_id for quest_id, _, _, _ in quests],
            }
        )
        groups.append(
            {
                "id": line_id,
                "kind": "quest_line",
                "title": title,
                "order": 100 + order,
                "children": [quest_id for quest_id, _, _, _ in quests],
                "prerequisites": [lesson_id],
                "boss_id": boss_id,
            }
        )


def _quizzes(units: List[dict]) -> None:
    for quiz_id, title, difficulty in QUIZ_MODULES:
        unit: Dict[str, Any] = {
            "id": f"quiz-{quiz_id}",
            "kind": "quiz",
            "title": title,
            "question_points": [QUESTION_POINTS] * QUESTIONS_PER_QUIZ,
        }
        gate = QUIZ_DIFFICULTY_GATES[difficulty]
        if gate is not None:
            level, quizzes = gate
            unit["required_level"] = level
            unit["required_completed"] = {"kind": "quiz", "count": quizzes}
        units.append(unit)


def _challenges(units: List[dict]) -> None:
    for challenge_id, title, cadence, points, rewards, level, requires in CHALLENGES:
        unit: Dict[str, Any] = {
            "id": challenge_id,
            "kind": "challenge",
            "title": title,
            "cadence": cadence,
            "points": points,
            "rewards": rewards,
            "prerequisites": list(requires),
        }
        if level is not None:
            unit["required_level"] = level
        units.append(unit)


def _rpg(units: List[dict], groups: List[dict]) -> None:
    previous_major: Optional[str] = None
    for order, major in enumerate(RPG_MAJOR_LEVELS, start=1):
        major_id = major["id"]
        sub_level_ids = []
        previous_sub: Optional[str] = None
        for sub_order, (sub_title, games) in enumerate(major["sub_levels"], start=1):
            sub_id = f"{major_id}-{sub_order}"
            sub_prerequisites = [previous_sub] if previous_sub else ([previous_major] if previous_major else [])
            # First game inherits the sub-level gate, the rest chain in order
            previous_game: Optional[str] = None
            for game_id, game_title, points, rewards in games:
                units.append(
                    {
                        "id": game_id,
                        "kind": "game",
                        "title": game_title,
                        "points": points,
                        "rewards": rewards,
                        "prerequisites": [previous_game] if previous_game else sub_prerequisites,
                    }
                )
                previous_game = game_id
            groups.append(
                {
                    "id": sub_id,
                    "kind": "sub_level",
                    "title": sub_title,
                    "order": sub_order,
                    "children": [game_id for game_id, _, _, _ in games],
                    "prerequisites": sub_prerequisites,
                }
            )
            sub_level_ids.append(sub_id)
            previous_sub = sub_id

        boss_id, boss_title, boss_points, boss_rewards = major["boss"]
        last_sub_games = [game_id for game_id, _, _, _ in major["sub_levels"][-1][1]]
        units.append(
            {
                "id": boss_id,
                "kind": "boss",
                "title": boss_title,
                "points": boss_points,
                "rewards": boss_rewards,
                "prerequisites": last_sub_games,
            }
        )
        groups.append(
            {
                "id": major_id,
                "kind": "major_level",
                "title": major["title"],
                "order": 200 + order,
                "children": sub_level_ids,
                "prerequisites": [previous_major] if previous_major else [],
                "boss_id": boss_id,
            }
        )
        previous_major = major_id


def catalog_document() -> Dict[str, List[dict]]:
    """Assemble the bundled content into a catalog document."""
    units: List[dict] = []
    groups: List[dict] = []
    _lessons(units, groups)
    _quest_lines(units, groups)
    _quizzes(units)
    _challenges(units)
    _rpg(units, groups)
    return {"units": units, "groups": groups}
