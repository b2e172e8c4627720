import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from liftlog import execution, generator
from liftlog.db import get_db
from liftlog.deps.auth import get_current_user, ensure_owner
from liftlog.models import User, Workout, WorkoutStatus
from liftlog.repositories.exercise_repo import ExerciseRepository
from liftlog.repositories.workout_repo import WorkoutRepository
from liftlog.schemas.workout import (
    CursorMove,
    ExecutionRead,
    GenerateRequest,
    PlanItem,
    ReplaceRequest,
    SetResult,
    WorkoutCreate,
    WorkoutRead,
)
from liftlog.settings import get_settings

log = logging.getLogger(__name__)

router = APIRouter(prefix="/workouts", tags=["workouts"])

def _conflict(e: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

def _execution_view(workout: Workout, rest_seconds: int | None = None) -> ExecutionRead:
    return ExecutionRead(
        workout=WorkoutRead.model_validate(workout),
        current_exercise_index=workout.current_exercise_index,
        current_set_index=workout.current_set_index,
        completion_percent=round(execution.completion_percent(workout), 1),
        rest_seconds=rest_seconds,
    )

def _load_owned(db: Session, workout_id: int, current: User) -> Workout:
    return ensure_owner(WorkoutRepository(db).get(workout_id), current, "Workout")

# --- planning ---

@router.post("/generate", response_model=list[PlanItem])
def generate_workout(payload: GenerateRequest, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    catalog = ExerciseRepository(db).all_for_user(current.id)
    requests = [
        generator.GroupRequest(
            muscle_group=g.muscle_group,
            exercise_types=[t.value for t in g.exercise_types],
            count=g.count,
        )
        for g in payload.groups
    ]
    plan = generator.generate_plan(catalog, requests, rest_seconds=get_settings().DEFAULT_REST_SECONDS)
    return [PlanItem.model_validate(item) for item in plan]

@router.post("/plan/replace", response_model=list[PlanItem])
def replace_plan_item(payload: ReplaceRequest, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    repo = ExerciseRepository(db)
    catalog = repo.all_for_user(current.id)
    by_id = {ex.id: ex for ex in catalog}
    plan = []
    for item in payload.plan:
        exercise = by_id.get(item.exercise_id)
        if exercise is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Exercise {item.exercise_id} not found")
        plan.append(generator.PlannedExercise(
            exercise=exercise,
            sets=item.sets,
            reps=item.reps,
            rest_seconds=item.rest_seconds,
            position=item.position,
            key=item.key,
        ))
    try:
        plan = generator.replace_exercise(plan, payload.key, catalog)
    except generator.PlanItemNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Plan item not found")
    except generator.NoAlternativeError as e:
        raise _conflict(e)
    return [PlanItem.model_validate(item) for item in plan]

# --- workouts ---

@router.post("", response_model=WorkoutRead, status_code=status.HTTP_201_CREATED)
def create_workout(payload: WorkoutCreate, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    exercises = ExerciseRepository(db).get_many(current.id, (i.exercise_id for i in payload.items))
    missing = [i.exercise_id for i in payload.items if i.exercise_id not in exercises]
    if missing:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Exercise {missing[0]} not found")

    default_rest = get_settings().DEFAULT_REST_SECONDS
    items = []
    for i in payload.items:
        ex = exercises[i.exercise_id]
        items.append((
            ex,
            i.sets or ex.sets,
            i.reps or ex.reps,
            default_rest if i.rest_seconds is None else i.rest_seconds,
        ))
    name = payload.name or f"Тренировка {datetime.now(timezone.utc):%d.%m.%Y}"
    try:
        return WorkoutRepository(db).create(current.id, name=name, items=items)
    except ValueError as e:
        if str(e) == "active_workout_exists":
            raise _conflict(e)
        raise

@router.get("", response_model=list[WorkoutRead])
def list_my_workouts(
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    return WorkoutRepository(db).list_by_user(current.id, limit=limit, offset=offset).items

@router.get("/active", response_model=WorkoutRead)
def get_active_workout(db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    workout = WorkoutRepository(db).get_active(current.id)
    if workout is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active workout")
    return workout

@router.get("/{workout_id}", response_model=WorkoutRead)
def get_workout(workout_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return _load_owned(db, workout_id, current)

# --- execution ---

@router.get("/{workout_id}/execution", response_model=ExecutionRead)
def load_execution(workout_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    workout = _load_owned(db, workout_id, current)
    if workout.status == WorkoutStatus.active and execution.materialize_sets(workout):
        db.commit()
        db.refresh(workout)
        log.debug("workout=%s sets materialised", workout.id)
    return _execution_view(workout)

@router.post("/{workout_id}/sets/complete", response_model=ExecutionRead)
def complete_current_set(
    workout_id: int,
    payload: SetResult,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    workout = _load_owned(db, workout_id, current)
    try:
        execution.materialize_sets(workout)
        outcome = execution.complete_set(workout, payload.weight, payload.completed)
    except execution.ExecutionError as e:
        raise _conflict(e)
    db.commit()
    db.refresh(workout)
    return _execution_view(workout, rest_seconds=outcome.rest_seconds)

@router.post("/{workout_id}/exercises/current/complete", response_model=ExecutionRead)
def complete_current_exercise(workout_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    workout = _load_owned(db, workout_id, current)
    try:
        execution.materialize_sets(workout)
        execution.mark_exercise_complete(workout)
    except execution.ExecutionError as e:
        raise _conflict(e)
    db.commit()
    db.refresh(workout)
    return _execution_view(workout)

@router.put("/{workout_id}/cursor", response_model=ExecutionRead)
def move_cursor(
    workout_id: int,
    payload: CursorMove,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    workout = _load_owned(db, workout_id, current)
    try:
        execution.move_to_exercise(workout, payload.exercise_index)
    except execution.ExecutionError as e:
        if str(e) == "exercise_index_out_of_range":
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
        raise _conflict(e)
    db.commit()
    db.refresh(workout)
    return _execution_view(workout)

@router.post("/{workout_id}/finish", response_model=WorkoutRead)
def finish_workout(workout_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    workout = _load_owned(db, workout_id, current)
    try:
        execution.finish(workout)
    except execution.ExecutionError as e:
        raise _conflict(e)
    db.commit()
    db.refresh(workout)
    log.info("user=%s finished workout=%s", current.id, workout.id)
    return workout
