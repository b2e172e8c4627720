from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from liftlog import progress
from liftlog.db import get_db
from liftlog.deps.auth import get_current_user
from liftlog.models import Exercise, User, Workout
from liftlog.repositories.exercise_repo import ExerciseRepository
from liftlog.repositories.workout_repo import WorkoutRepository
from liftlog.schemas.progress import ProgressReportRead
from liftlog.settings import get_settings

router = APIRouter(prefix="/progress", tags=["progress"])

def to_record(workout: Workout) -> progress.WorkoutRecord:
    return progress.WorkoutRecord(
        started_at=workout.started_at,
        status=getattr(workout.status, "value", workout.status),
        exercises=tuple(
            progress.WorkoutExerciseRecord(
                exercise_id=we.exercise_id,
                # an unexecuted plan only knows how many sets it wanted
                sets=tuple(
                    progress.SetRecord(weight=float(s.weight or 0), reps=s.target_reps, completed=s.completed)
                    for s in we.sets
                ) if we.sets else we.planned_sets,
                weight_achieved=we.weight_achieved,
            )
            for we in workout.exercises
        ),
    )

def to_catalog_entry(exercise: Exercise) -> progress.CatalogEntry:
    return progress.CatalogEntry(id=exercise.id, name=exercise.name, muscle_group=exercise.muscle_group)

@router.get("", response_model=ProgressReportRead)
def get_progress(
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    period: str = Query("30", description="Trailing days: 7, 30, 90 or 365"),
    muscle_group: str = Query(progress.ALL_MUSCLE_GROUPS),
):
    s = get_settings()
    now = datetime.now(timezone.utc)
    period_days = progress.resolve_period(period, default=s.DEFAULT_PERIOD_DAYS)
    workouts = WorkoutRepository(db).history(current.id, since=progress.cutoff_for(period_days, now))
    catalog = ExerciseRepository(db).all_for_user(current.id)

    report = progress.analyze_progress(
        # oldest first, so last_performed ends on the newest session
        [to_record(w) for w in reversed(workouts)],
        [to_catalog_entry(ex) for ex in catalog],
        period=period_days,
        muscle_group=muscle_group,
        now=now,
        window=s.TREND_WINDOW,
        deadband=s.TREND_DEADBAND,
        best_limit=s.BEST_PROGRESS_LIMIT,
        best_min_sessions=s.BEST_PROGRESS_MIN_SESSIONS,
    )
    return ProgressReportRead.model_validate(report)
