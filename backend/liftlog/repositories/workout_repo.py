from __future__ import annotations
import logging
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from liftlog.models import Exercise, Workout, WorkoutExercise, WorkoutStatus
from liftlog.repositories.base import BaseRepository, Page
from liftlog.schemas.exercise import ExerciseSnapshot

log = logging.getLogger(__name__)

_FULL = (selectinload(Workout.exercises).selectinload(WorkoutExercise.sets),)

class WorkoutRepository(BaseRepository[Workout]):
    model = Workout

    # READS
    def get(self, workout_id: int) -> Optional[Workout]:
        return self.db.get(Workout, workout_id, options=_FULL)

    def get_active(self, user_id: int) -> Optional[Workout]:
        stmt = (
            select(Workout)
            .options(*_FULL)
            .where(Workout.user_id == user_id, Workout.status == WorkoutStatus.active)
        )
        return self.db.execute(stmt).scalars().first()

    def list_by_user(self, user_id: int, *, limit: int = 50, offset: int = 0) -> Page[Workout]:
        stmt = (
            select(Workout)
            .options(*_FULL)
            .where(Workout.user_id == user_id)
            .order_by(Workout.started_at.desc(), Workout.id.desc())
        )
        return self.page_from_stmt(stmt, limit=limit, offset=offset)

    def history(self, user_id: int, *, since: datetime | None = None) -> list[Workout]:
        stmt = select(Workout).options(*_FULL).where(Workout.user_id == user_id)
        if since is not None:
            stmt = stmt.where(Workout.started_at >= since)
        stmt = stmt.order_by(Workout.started_at.desc(), Workout.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    # WRITES
    def create(
        self,
        user_id: int,
        *,
        name: str,
        items: Sequence[tuple[Exercise, int, int, int]],
        started_at: datetime | None = None,
    ) -> Workout:
        """
        ``items`` are (exercise, sets, reps, rest_seconds) in plan order.
        Raises ValueError("active_workout_exists") if the user already has
        an active workout.
        """
        if self.get_active(user_id) is not None:
            log.info("user=%s rejected second active workout", user_id)
            raise ValueError("active_workout_exists")

        workout = Workout(user_id=user_id, name=name, status=WorkoutStatus.active)
        if started_at is not None:
            workout.started_at = started_at
        for position, (exercise, sets, reps, rest_seconds) in enumerate(items, start=1):
            workout.exercises.append(WorkoutExercise(
                exercise_id=exercise.id,
                exercise_snapshot=ExerciseSnapshot.model_validate(exercise).model_dump(mode="json"),
                position=position,
                planned_sets=sets,
                target_reps=reps,
                rest_seconds=rest_seconds,
                completed=False,
                weight_achieved=False,
            ))
        try:
            workout = self.save(workout)
        except IntegrityError:
            # lost a race against another request creating an active workout
            self.db.rollback()
            raise ValueError("active_workout_exists")
        log.info("user=%s started workout=%s with %d exercises", user_id, workout.id, len(items))
        return workout
