"""
Reward Calculator - turns a completion event into a reward grant.

Fixed-reward units (lessons, challenges, games, bosses) grant exactly their
configured points and bundle.

Quizzes are scored. Base points are the points actually earned, and items come
from ordered, non-exclusive threshold rules (every rule that qualifies fires):

- first quiz ever completed on the account -> 1 seed
- percentage >= 60 -> 1 water
- percentage >= 80 -> 1 sunlight
- percentage >= 90 -> 1 nutrients
- percentage >= 90 and streak >= 3 -> 1 fertilizer
- percentage == 100 -> 1 love

The calculator is pure. Malformed outcomes raise InvalidOutcome and produce
no grant.
"""

from typing import Callable, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from ecolearn.engines.progression.catalog import RewardMode, Unit, UnitKind
from ecolearn.engines.progression.errors import InvalidOutcome
from ecolearn.engines.progression.items import EMPTY_BUNDLE, ItemName, RewardBundle
from ecolearn.engines.progression.rounding import percentage


class CompletionOutcome(BaseModel):
    """Outcome of a fixed-reward unit. Only the completion flag matters."""

    model_config = ConfigDict(frozen=True)

    completed: bool = True


class QuizOutcome(BaseModel):
    """
    Outcome of one quiz attempt.

    score_earned is the sum of point values of correctly answered questions;
    streak is the longest run of consecutive correct answers in the attempt.
    Range checks happen in compute_reward so they surface as InvalidOutcome.
    """

    model_config = ConfigDict(frozen=True)

    score_earned: int
    max_score: int
    streak: int = 0


Outcome = Union[CompletionOutcome, QuizOutcome]


class QuizRule(BaseModel):
    """One threshold rule for scored units."""

    model_config = ConfigDict(frozen=True)

    name: str
    item: ItemName
    applies: Callable[[int, int, bool], bool] = Field(exclude=True)


# Evaluated in order; all that qualify are granted.
QUIZ_RULES: Tuple[QuizRule, ...] = (
    QuizRule(name="first_quiz", item=ItemName.SEED, applies=lambda pct, streak, first: first),
    QuizRule(name="good", item=ItemName.WATER, applies=lambda pct, streak, first: pct >= 60),
    QuizRule(name="better", item=ItemName.SUNLIGHT, applies=lambda pct, streak, first: pct >= 80),
    QuizRule(name="best", item=ItemName.NUTRIENTS, applies=lambda pct, streak, first: pct >= 90),
    QuizRule(
        name="streak_bonus",
        item=ItemName.FERTILIZER,
        applies=lambda pct, streak, first: pct >= 90 and streak >= 3,
    ),
    QuizRule(name="perfect", item=ItemName.LOVE, applies=lambda pct, streak, first: pct == 100),
)


class RewardGrant(BaseModel):
    """Points and items granted for one completion."""

    model_config = ConfigDict(frozen=True)

    unit_id: str
    kind: UnitKind
    points: int = Field(ge=0)
    items: RewardBundle = EMPTY_BUNDLE
    percentage: Optional[int] = None
    rules: Tuple[str, ...] = ()


def compute_reward(unit: Unit, outcome: Optional[Outcome] = None, *, first_quiz: bool = False) -> RewardGrant:
    """
    Compute the grant for completing a unit.

    Args:
        unit: The unit being completed
        outcome: CompletionOutcome (or None) for fixed units, QuizOutcome for quizzes
        first_quiz: True when the account has never completed a quiz before

    Returns:
        RewardGrant

    Raises:
        InvalidOutcome: outcome missing, of the wrong type, or out of range
    """
    if unit.reward_mode == RewardMode.FIXED:
        return _fixed_reward(unit, outcome)
    return _scored_reward(unit, outcome, first_quiz)


def _fixed_reward(unit: Unit, outcome: Optional[Outcome]) -> RewardGrant:
    if isinstance(outcome, QuizOutcome):
        raise InvalidOutcome(unit.id, f"{unit.kind.value} units are not scored")
    if outcome is not None and not outcome.completed:
        raise InvalidOutcome(unit.id, "completion flag is false")
    return RewardGrant(unit_id=unit.id, kind=unit.kind, points=unit.points, items=unit.rewards)


def _scored_reward(unit: Unit, outcome: Optional[Outcome], first_quiz: bool) -> RewardGrant:
    if not isinstance(outcome, QuizOutcome):
        raise InvalidOutcome(unit.id, "a quiz completion needs score_earned and max_score")
    _validate_quiz_outcome(unit, outcome)

    pct = percentage(outcome.score_earned, outcome.max_score)
    fired: List[QuizRule] = [rule for rule in QUIZ_RULES if rule.applies(pct, outcome.streak, first_quiz)]
    items = RewardBundle(items={rule.item: 1 for rule in fired})
    return RewardGrant(
        unit_id=unit.id,
        kind=unit.kind,
        points=outcome.score_earned,
        items=items,
        percentage=pct,
        rules=tuple(rule.name for rule in fired),
    )


def _validate_quiz_outcome(unit: Unit, outcome: QuizOutcome) -> None:
    if outcome.max_score <= 0:
        raise InvalidOutcome(unit.id, "max_score must be positive")
    if outcome.score_earned < 0:
        raise InvalidOutcome(unit.id, "score_earned cannot be negative")
    if outcome.streak < 0:
        raise InvalidOutcome(unit.id, "streak cannot be negative")
    if outcome.score_earned > outcome.max_score:
        raise InvalidOutcome(unit.id, "score_earned exceeds max_score")
    if outcome.max_score != unit.max_score:
        raise InvalidOutcome(
            unit.id, f"max_score {outcome.max_score} does not match the quiz total {unit.max_score}"
        )
    if outcome.streak > unit.question_count:
        raise InvalidOutcome(
            unit.id, f"streak {outcome.streak} exceeds the {unit.question_count} questions in the quiz"
        )
