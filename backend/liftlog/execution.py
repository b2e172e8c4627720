"""
Set-by-set walk through an active workout.

Functions mutate the ORM ``Workout`` in place; the caller commits. The
cursor (``current_exercise_index``/``current_set_index``) lives on the
workout row so a session can be resumed from any client.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from liftlog.models import Workout, WorkoutExercise, WorkoutSet, WorkoutStatus


class ExecutionError(ValueError):
    pass


@dataclass(slots=True)
class SetOutcome:
    # rest interval the client should count down, None when no rest is due
    rest_seconds: int | None


def _require_active(workout: Workout) -> None:
    if workout.status != WorkoutStatus.active:
        raise ExecutionError("workout_not_active")


def materialize_sets(workout: Workout) -> bool:
    """Create the set rows of every exercise that has none yet."""
    created = False
    for we in workout.exercises:
        if we.sets:
            continue
        we.sets.extend(
            WorkoutSet(
                set_number=n,
                target_reps=we.target_reps,
                weight=0,
                completed=False,
                rest_seconds=we.rest_seconds,
            )
            for n in range(1, we.planned_sets + 1)
        )
        created = True
    return created


def current_exercise(workout: Workout) -> WorkoutExercise | None:
    idx = workout.current_exercise_index or 0
    if idx >= len(workout.exercises):
        return None
    return workout.exercises[idx]


def current_set(workout: Workout) -> WorkoutSet | None:
    we = current_exercise(workout)
    idx = workout.current_set_index or 0
    if we is None or idx >= len(we.sets):
        return None
    return we.sets[idx]


def complete_set(workout: Workout, weight: float, completed: bool) -> SetOutcome:
    _require_active(workout)
    we = current_exercise(workout)
    s = current_set(workout)
    if we is None or s is None:
        raise ExecutionError("no_current_set")

    s.weight = weight
    s.completed = completed

    ex_idx = workout.current_exercise_index or 0
    set_idx = workout.current_set_index or 0
    last_set = set_idx >= len(we.sets) - 1
    outcome = SetOutcome(rest_seconds=s.rest_seconds if completed and not last_set else None)

    if not last_set:
        workout.current_set_index = set_idx + 1
    elif ex_idx < len(workout.exercises) - 1:
        workout.current_exercise_index = ex_idx + 1
        workout.current_set_index = 0
    return outcome


def mark_exercise_complete(workout: Workout) -> WorkoutExercise:
    _require_active(workout)
    we = current_exercise(workout)
    if we is None:
        raise ExecutionError("no_current_exercise")
    we.completed = True
    we.weight_achieved = bool(we.sets) and all(s.completed for s in we.sets)
    return we


def move_to_exercise(workout: Workout, index: int) -> None:
    _require_active(workout)
    if not 0 <= index < len(workout.exercises):
        raise ExecutionError("exercise_index_out_of_range")
    workout.current_exercise_index = index
    workout.current_set_index = 0


def finish(workout: Workout, now: datetime | None = None) -> None:
    _require_active(workout)
    workout.status = WorkoutStatus.completed
    workout.completed_at = now or datetime.now(timezone.utc)


def completion_percent(workout: Workout) -> float:
    total = sum(len(we.sets) for we in workout.exercises)
    done = sum(1 for we in workout.exercises for s in we.sets if s.completed)
    return done / total * 100 if total else 0.0
