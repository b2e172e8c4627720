from __future__ import annotations
from typing import Iterable, Optional
from sqlalchemy import select, func, or_

from liftlog.models import Exercise, ExerciseType
from liftlog.repositories.base import BaseRepository, Page

class ExerciseRepository(BaseRepository[Exercise]):
    model = Exercise

    def list_by_user(
        self,
        user_id: int,
        *,
        search: str | None = None,
        muscle_group: str | None = None,
        exercise_type: ExerciseType | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Page[Exercise]:
        stmt = select(Exercise).where(Exercise.user_id == user_id)
        if search:
            term = f"%{search.lower()}%"
            stmt = stmt.where(or_(
                func.lower(Exercise.name).like(term),
                func.lower(Exercise.muscle_group).like(term),
            ))
        if muscle_group:
            stmt = stmt.where(Exercise.muscle_group == muscle_group)
        if exercise_type:
            stmt = stmt.where(Exercise.exercise_type == exercise_type)
        stmt = stmt.order_by(Exercise.created_at.desc(), Exercise.id.desc())
        return self.page_from_stmt(stmt, limit=limit, offset=offset)

    def all_for_user(self, user_id: int) -> list[Exercise]:
        stmt = select(Exercise).where(Exercise.user_id == user_id).order_by(Exercise.id.asc())
        return list(self.db.execute(stmt).scalars().all())

    def get_many(self, user_id: int, ids: Iterable[int]) -> dict[int, Exercise]:
        ids = set(ids)
        if not ids:
            return {}
        stmt = select(Exercise).where(Exercise.user_id == user_id, Exercise.id.in_(ids))
        return {ex.id: ex for ex in self.db.execute(stmt).scalars()}

    def create(self, user_id: int, **fields) -> Exercise:
        return self.save(Exercise(user_id=user_id, **fields))

    def update(self, exercise: Exercise, **fields) -> Exercise:
        for key, value in fields.items():
            setattr(exercise, key, value)
        return self.save(exercise)
