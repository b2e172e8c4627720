from enum import Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, ForeignKey, String, Text, DateTime, func, Enum as SAEnum
from liftlog.db import Base

MUSCLE_GROUPS = (
    "Грудь",
    "Спина",
    "Плечи",
    "Бицепс",
    "Трицепс",
    "Ноги",
    "Ягодицы",
    "Пресс",
    "Предплечья",
    "Икры",
)

class WeightType(str, Enum):
    bodyweight = "bodyweight"
    assisted = "assisted"
    additional = "additional"

class ExerciseType(str, Enum):
    main = "main"
    auxiliary = "auxiliary"
    isolation = "isolation"

class Exercise(Base):
    __tablename__ = "exercises"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    muscle_group: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    weight_type: Mapped[WeightType] = mapped_column(SAEnum(WeightType, name="weight_type"), nullable=False)
    technique: Mapped[str] = mapped_column(Text, nullable=False)
    sets: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    reps: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    exercise_type: Mapped[ExerciseType] = mapped_column(SAEnum(ExerciseType, name="exercise_type"), nullable=False)
    equipment_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    equipment_settings: Mapped[str | None] = mapped_column(Text, nullable=True)
    equipment_photo: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user = relationship("User", back_populates="exercises")
