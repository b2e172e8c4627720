"""Random workout plans drawn from a user's exercise catalog."""
from __future__ import annotations

import random
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Sequence

DEFAULT_TYPES = ("main",)


class NoAlternativeError(ValueError):
    pass


class PlanItemNotFound(ValueError):
    pass


@dataclass(slots=True)
class GroupRequest:
    muscle_group: str
    exercise_types: Sequence[str] = DEFAULT_TYPES
    count: int = 1

    def allowed_types(self) -> tuple[str, ...]:
        return tuple(self.exercise_types) or DEFAULT_TYPES

    def wanted(self) -> int:
        return max(1, self.count)


@dataclass(slots=True)
class PlannedExercise:
    exercise: Any  # anything exposing id, muscle_group, exercise_type, sets, reps
    sets: int
    reps: int
    rest_seconds: int
    position: int
    key: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def exercise_id(self):
        return self.exercise.id


def _type_of(exercise) -> str:
    # ORM rows carry the enum, plain objects may carry the raw string
    return getattr(exercise.exercise_type, "value", exercise.exercise_type)


def generate_plan(
    catalog: Iterable[Any],
    requests: Sequence[GroupRequest],
    *,
    rng: random.Random | None = None,
    rest_seconds: int = 60,
) -> list[PlannedExercise]:
    """
    Pick up to ``count`` random exercises of the allowed types for every
    requested muscle group, in request order. Groups without enough
    candidates contribute what they have.
    """
    rng = rng or random.Random()
    catalog = list(catalog)
    plan: list[PlannedExercise] = []
    for req in requests:
        allowed = req.allowed_types()
        candidates = [
            ex for ex in catalog
            if ex.muscle_group == req.muscle_group and _type_of(ex) in allowed
        ]
        rng.shuffle(candidates)
        for ex in candidates[:req.wanted()]:
            plan.append(PlannedExercise(
                exercise=ex,
                sets=ex.sets,
                reps=ex.reps,
                rest_seconds=rest_seconds,
                position=len(plan) + 1,
            ))
    return plan


def replace_exercise(
    plan: Sequence[PlannedExercise],
    key: str,
    catalog: Iterable[Any],
    *,
    rng: random.Random | None = None,
) -> list[PlannedExercise]:
    """Swap one item for another exercise of the same muscle group and type."""
    rng = rng or random.Random()
    target = next((item for item in plan if item.key == key), None)
    if target is None:
        raise PlanItemNotFound("plan_item_not_found")

    in_use = {item.exercise_id for item in plan}
    alternatives = [
        ex for ex in catalog
        if ex.muscle_group == target.exercise.muscle_group
        and _type_of(ex) == _type_of(target.exercise)
        and ex.id not in in_use
    ]
    if not alternatives:
        raise NoAlternativeError("no_alternative_exercise")

    pick = rng.choice(alternatives)
    return [
        replace(item, exercise=pick, sets=pick.sets, reps=pick.reps) if item.key == key else item
        for item in plan
    ]
