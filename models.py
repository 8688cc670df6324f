from __future__ import annotations
import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field, field_validator


class Category(str, Enum):
    """Closed set of exercise categories with a fallback for free text."""

    CHEST = "chest"
    BACK = "back"
    LEGS = "legs"
    SHOULDERS = "shoulders"
    ARMS = "arms"
    ABS = "abs"
    CARDIO = "cardio"
    OTHER = "other"

    @classmethod
    def from_label(cls, label: "str | Category | None") -> "Category":
        """Return the category for an English or Russian display label."""
        if isinstance(label, Category):
            return label
        if not label:
            return cls.OTHER
        return _CATEGORY_LABELS.get(label.strip().lower(), cls.OTHER)


_CATEGORY_LABELS = {
    "chest": Category.CHEST,
    "back": Category.BACK,
    "legs": Category.LEGS,
    "shoulders": Category.SHOULDERS,
    "arms": Category.ARMS,
    "abs": Category.ABS,
    "cardio": Category.CARDIO,
    "other": Category.OTHER,
    "грудь": Category.CHEST,
    "спина": Category.BACK,
    "ноги": Category.LEGS,
    "плечи": Category.SHOULDERS,
    "руки": Category.ARMS,
    "пресс": Category.ABS,
    "кардио": Category.CARDIO,
    "прочее": Category.OTHER,
}


class Period(str, Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"

    @classmethod
    def parse(cls, value: "str | Period") -> "Period":
        if isinstance(value, Period):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"unknown period: {value!r}")


class AchievementMetric(str, Enum):
    TOTAL_WORKOUTS = "total_workouts"
    TOTAL_SETS = "total_sets"
    TOTAL_REPS = "total_reps"
    MAX_STREAK_DAYS = "max_streak_days"
    TOTAL_STRENGTH_VOLUME_KG = "total_strength_volume_kg"
    WORKOUTS_LAST_7_DAYS = "workouts_last_7_days"
    WORKOUTS_CURRENT_MONTH = "workouts_current_month"
    WORKOUTS_TODAY = "workouts_today"


# Records -------------------------------------------------------------------


class User(BaseModel):
    id: int
    username: str


class Exercise(BaseModel):
    id: int
    name: str
    category: Category = Category.OTHER

    @field_validator("category", mode="before")
    @classmethod
    def _parse_category(cls, value):
        return Category.from_label(value)

    @property
    def is_cardio(self) -> bool:
        return self.category is Category.CARDIO


class WorkoutEntry(BaseModel):
    """One exercise performed in a workout.

    For cardio exercises ``reps`` holds minutes and ``weight`` is 0.
    ``exercise`` is ``None`` when the referenced exercise no longer exists.
    """

    id: Optional[int] = None
    sets: int = Field(ge=1)
    reps: int = Field(ge=1)
    weight: float = Field(default=0.0, ge=0)
    comment: Optional[str] = None
    exercise: Optional[Exercise] = None

    @property
    def is_cardio(self) -> bool:
        return self.exercise is not None and self.exercise.is_cardio

    @property
    def category(self) -> Optional[Category]:
        return self.exercise.category if self.exercise is not None else None

    @property
    def strength_volume(self) -> float:
        if self.is_cardio:
            return 0.0
        return self.weight * self.sets * self.reps

    @property
    def cardio_minutes(self) -> int:
        if self.is_cardio:
            return self.reps * self.sets
        return 0

    @property
    def performed_reps(self) -> int:
        """Repetitions across all sets; minutes times sets for cardio."""
        return self.sets * self.reps


class Workout(BaseModel):
    id: Optional[int] = None
    date: Optional[datetime.datetime] = None
    notes: Optional[str] = None
    entries: List[WorkoutEntry] = Field(default_factory=list)

    @property
    def day(self) -> Optional[datetime.date]:
        return self.date.date() if self.date is not None else None


# Derived views -------------------------------------------------------------


class PeriodDelta(BaseModel):
    sets: int = 0
    reps: int = 0
    strength_volume: float = 0.0
    cardio_minutes: int = 0


class PeriodStats(BaseModel):
    period: Period = Period.ALL
    workout_count: int = 0
    total_sets: int = 0
    total_reps: int = 0
    total_performed_reps: int = 0
    total_strength_volume: float = 0.0
    total_cardio_minutes: int = 0
    delta: PeriodDelta = Field(default_factory=PeriodDelta)


class ExerciseMaxima(BaseModel):
    exercise_id: int
    name: str
    category: Category
    max_weight: float
    total_sets: int


class StreakState(BaseModel):
    current_streak_days: int = 0
    max_streak_days: int = 0


class RecentCounts(BaseModel):
    last_7_days: int = 0
    current_month: int = 0
    today: int = 0


class AchievementRule(BaseModel):
    id: str
    metric: AchievementMetric
    threshold: int = Field(gt=0)
    title: str = ""
    description: str = ""


class AchievementStatus(BaseModel):
    id: str
    title: str
    description: str
    metric: AchievementMetric
    unlocked: bool
    progress: int
    max_progress: int

    @computed_field
    @property
    def fraction(self) -> float:
        if self.max_progress <= 0:
            return 0.0
        return self.progress / self.max_progress


class AchievementSummary(BaseModel):
    unlocked: int = 0
    total: int = 0
    percent: int = 0


class CategoryShare(BaseModel):
    category: Category
    strength_volume: float
    share: float


class PersonalRecordEstimate(BaseModel):
    exercise_id: int
    exercise_name: str
    estimated_1rm: float
    weight: float
    reps: int
    date: Optional[datetime.datetime] = None


class HeatmapCell(BaseModel):
    day: datetime.date
    score: int = 0
    intensity: float = 0.0


class DailyVolume(BaseModel):
    day: datetime.date
    strength_volume: float = 0.0


class Insight(BaseModel):
    title: str
    description: str
    type: str
    priority: str = "medium"


class ChatMessage(BaseModel):
    content: str
    is_user: bool = False
    message_type: str = "text"
    timestamp: datetime.datetime = Field(default_factory=datetime.datetime.now)
