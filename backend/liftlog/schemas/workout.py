from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field, StringConstraints
from liftlog.models.exercise import ExerciseType
from liftlog.models.workout import WorkoutStatus
from liftlog.schemas.exercise import ExerciseSnapshot

PosInt = Annotated[int, Field(ge=1)]
RestSeconds = Annotated[int, Field(ge=0, le=3600)]
NonNegFloat = Annotated[float, Field(ge=0, le=1000)]
NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]

# --- generation ---

class GroupRequestIn(BaseModel):
    muscle_group: str
    exercise_types: list[ExerciseType] = Field(default_factory=lambda: [ExerciseType.main])
    count: PosInt = 1

class GenerateRequest(BaseModel):
    groups: Annotated[list[GroupRequestIn], Field(min_length=1)]

class PlanItem(BaseModel):
    key: str
    exercise_id: int
    exercise: ExerciseSnapshot
    sets: PosInt
    reps: PosInt
    rest_seconds: RestSeconds
    position: int

    model_config = {"from_attributes": True}

class ReplaceRequest(BaseModel):
    plan: Annotated[list[PlanItem], Field(min_length=1)]
    key: str

# --- persisted workouts ---

class WorkoutItemCreate(BaseModel):
    exercise_id: int
    sets: PosInt | None = None        # defaults to the exercise's own set count
    reps: PosInt | None = None
    rest_seconds: RestSeconds | None = None

class WorkoutCreate(BaseModel):
    name: NameStr | None = None
    items: Annotated[list[WorkoutItemCreate], Field(min_length=1)]

class WorkoutSetRead(BaseModel):
    id: int
    set_number: int
    target_reps: int
    weight: float
    completed: bool
    rest_seconds: int

    model_config = {"from_attributes": True}

class WorkoutExerciseRead(BaseModel):
    id: int
    exercise_id: int | None = None
    exercise: ExerciseSnapshot = Field(validation_alias="exercise_snapshot")
    position: int
    planned_sets: int
    target_reps: int
    rest_seconds: int
    completed: bool
    weight_achieved: bool
    sets: list[WorkoutSetRead] = []

    model_config = {"from_attributes": True}

class WorkoutRead(BaseModel):
    id: int
    user_id: int
    name: str
    started_at: datetime
    completed_at: datetime | None = None
    status: WorkoutStatus
    exercises: list[WorkoutExerciseRead] = []

    model_config = {"from_attributes": True}

# --- execution ---

class ExecutionRead(BaseModel):
    workout: WorkoutRead
    current_exercise_index: int
    current_set_index: int
    completion_percent: float
    # rest interval to count down after the last recorded set, if any
    rest_seconds: int | None = None

class SetResult(BaseModel):
    weight: NonNegFloat = 0
    completed: bool = True

class CursorMove(BaseModel):
    exercise_index: Annotated[int, Field(ge=0)]
