from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field, StringConstraints, field_validator
from liftlog.models.exercise import MUSCLE_GROUPS, ExerciseType, WeightType

NameStr = Annotated[str, Field(max_length=120)]
SetCount = Annotated[int, Field(ge=1, le=50)]
RepCount = Annotated[int, Field(ge=1, le=200)]
OptionalText = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]

class ExerciseCreate(BaseModel):
    name: NameStr
    muscle_group: str
    weight_type: WeightType = WeightType.bodyweight
    technique: Annotated[str, Field(max_length=5000)]
    sets: SetCount = 3
    reps: RepCount = 10
    exercise_type: ExerciseType = ExerciseType.main
    equipment_name: OptionalText | None = None
    equipment_settings: OptionalText | None = None
    equipment_photo: OptionalText | None = None

    @field_validator("name", "technique")
    @classmethod
    def non_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("cannot be blank")
        return v2

    @field_validator("muscle_group")
    @classmethod
    def known_muscle_group(cls, v: str) -> str:
        if v not in MUSCLE_GROUPS:
            raise ValueError(f"muscle_group must be one of: {', '.join(MUSCLE_GROUPS)}")
        return v

class ExerciseSnapshot(BaseModel):
    """Copy of an exercise as it was when a workout was generated."""
    id: int
    name: str
    muscle_group: str
    weight_type: WeightType
    technique: str
    sets: int
    reps: int
    exercise_type: ExerciseType
    equipment_name: str | None = None
    equipment_settings: str | None = None
    equipment_photo: str | None = None

    model_config = {"from_attributes": True}

class ExerciseRead(ExerciseSnapshot):
    user_id: int
    created_at: datetime
    updated_at: datetime
