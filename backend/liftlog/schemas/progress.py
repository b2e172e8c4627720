from datetime import datetime
from pydantic import BaseModel
from liftlog.progress import Trend

class SessionRead(BaseModel):
    date: datetime
    max_weight: float
    total_volume: float
    sets_completed: int
    weight_taken: bool

    model_config = {"from_attributes": True}

class ExerciseProgressRead(BaseModel):
    exercise_id: int
    exercise_name: str
    muscle_group: str
    sessions: list[SessionRead]
    best_weight: float
    total_volume: float
    sessions_count: int
    last_performed: datetime | None = None
    trend: Trend

    model_config = {"from_attributes": True}

class WorkoutStatsRead(BaseModel):
    total_workouts: int
    total_exercises: int
    total_sets: int
    avg_workouts_per_week: float

    model_config = {"from_attributes": True}

class ProgressReportRead(BaseModel):
    period_days: int
    muscle_group: str
    stats: WorkoutStatsRead
    exercises: list[ExerciseProgressRead]
    best: list[ExerciseProgressRead]

    model_config = {"from_attributes": True}
