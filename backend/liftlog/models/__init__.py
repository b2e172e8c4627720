from liftlog.models.user import User
from liftlog.models.exercise import Exercise, ExerciseType, WeightType, MUSCLE_GROUPS
from liftlog.models.workout import Workout, WorkoutExercise, WorkoutSet, WorkoutStatus

__all__ = [
    "User",
    "Exercise",
    "ExerciseType",
    "WeightType",
    "MUSCLE_GROUPS",
    "Workout",
    "WorkoutExercise",
    "WorkoutSet",
    "WorkoutStatus",
]
