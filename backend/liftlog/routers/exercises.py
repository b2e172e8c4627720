from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from liftlog.db import get_db
from liftlog.deps.auth import get_current_user, ensure_owner
from liftlog.models import ExerciseType, User
from liftlog.repositories.exercise_repo import ExerciseRepository
from liftlog.schemas.exercise import ExerciseCreate, ExerciseRead

router = APIRouter(prefix="/exercises", tags=["exercises"])

@router.get("", response_model=list[ExerciseRead])
def list_exercises(
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    q: str | None = Query(None, max_length=120, description="Matches name or muscle group"),
    muscle_group: str | None = Query(None),
    exercise_type: ExerciseType | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    # "all" is what the filter dropdowns send for "no filter"
    page = ExerciseRepository(db).list_by_user(
        current.id,
        search=q.strip() if q else None,
        muscle_group=None if muscle_group in (None, "all") else muscle_group,
        exercise_type=exercise_type,
        limit=limit,
        offset=offset,
    )
    return page.items

@router.post("", response_model=ExerciseRead, status_code=status.HTTP_201_CREATED)
def create_exercise(payload: ExerciseCreate, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return ExerciseRepository(db).create(current.id, **payload.model_dump())

@router.get("/{exercise_id}", response_model=ExerciseRead)
def get_exercise(exercise_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return ensure_owner(ExerciseRepository(db).get(exercise_id), current, "Exercise")

@router.put("/{exercise_id}", response_model=ExerciseRead)
def update_exercise(
    exercise_id: int,
    payload: ExerciseCreate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    repo = ExerciseRepository(db)
    exercise = ensure_owner(repo.get(exercise_id), current, "Exercise")
    # past workouts keep their own snapshot, so edits never rewrite history
    return repo.update(exercise, **payload.model_dump())

@router.delete("/{exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_exercise(exercise_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    repo = ExerciseRepository(db)
    repo.delete(ensure_owner(repo.get(exercise_id), current, "Exercise"))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
