from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from models import AchievementMetric, Period

DEFAULT_HEATMAP_DAYS = {"week": 7, "month": 30, "year": 180, "all": 365}


class ExtraAchievementSchema(BaseModel):
    id: str
    metric: AchievementMetric
    threshold: int = Field(gt=0)
    title: Optional[str] = None
    description: Optional[str] = None


class SettingsSchema(BaseModel):
    language: str = "en"
    heatmap_days: Dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_HEATMAP_DAYS)
    )
    top_exercises_limit: int = Field(default=5, ge=1)
    insight_volume_change: float = Field(default=0.1, gt=0)
    recovery_streak_days: int = Field(default=6, ge=1)
    extra_achievements: List[ExtraAchievementSchema] = Field(default_factory=list)

    @field_validator("language")
    @classmethod
    def _known_language(cls, value: str) -> str:
        if value not in {"en", "ru"}:
            raise ValueError("language must be 'en' or 'ru'")
        return value

    @field_validator("heatmap_days")
    @classmethod
    def _merge_heatmap_days(cls, value: Dict[str, int]) -> Dict[str, int]:
        merged = dict(DEFAULT_HEATMAP_DAYS)
        for key, days in value.items():
            if days <= 0:
                raise ValueError("heatmap window must be positive")
            merged[Period.parse(key).value] = days
        return merged


def validate_settings(data: dict) -> SettingsSchema:
    try:
        return SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
