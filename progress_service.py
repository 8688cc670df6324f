from __future__ import annotations
import datetime
from typing import Dict, Iterable, List, Optional

from algorithms import MathTools, PeriodTools
from models import (
    Category,
    CategoryShare,
    DailyVolume,
    HeatmapCell,
    Period,
    PersonalRecordEstimate,
    Workout,
)
from settings_schema import SettingsSchema


class ProgressService:
    """Build display-ready progress views from workout snapshots."""

    def __init__(self, settings: SettingsSchema | None = None) -> None:
        self.settings = settings or SettingsSchema()

    def category_breakdown(
        self,
        workouts: Iterable[Workout],
        period: Period | str = Period.WEEK,
        now: Optional[datetime.datetime] = None,
    ) -> List[CategoryShare]:
        """Return strength volume and its share per exercise category.

        Cardio never carries strength volume, so it never appears here.
        Shares are taken over categories with non-zero volume and the list
        is empty when nothing was lifted.
        """
        now = now or datetime.datetime.now()
        totals: Dict[Category, float] = {}
        for workout in PeriodTools.filter_workouts(workouts, period, now):
            for entry in workout.entries:
                if entry.exercise is None:
                    continue
                volume = entry.strength_volume
                if volume > 0:
                    totals[entry.exercise.category] = (
                        totals.get(entry.exercise.category, 0.0) + volume
                    )
        total = sum(totals.values())
        if total <= 0:
            return []
        items = [
            CategoryShare(
                category=cat,
                strength_volume=vol,
                share=MathTools.ratio(vol, total),
            )
            for cat, vol in totals.items()
        ]
        return sorted(items, key=lambda x: (-x.strength_volume, x.category.value))

    def estimated_one_rep_max(
        self,
        workouts: Iterable[Workout],
        period: Period | str = Period.WEEK,
        now: Optional[datetime.datetime] = None,
    ) -> List[PersonalRecordEstimate]:
        """Return the best estimated 1RM per exercise within the period.

        Uses ``MathTools.epley_1rm``, an approximation only.
        """
        now = now or datetime.datetime.now()
        records: Dict[int, PersonalRecordEstimate] = {}
        for workout in PeriodTools.filter_workouts(workouts, period, now):
            for entry in workout.entries:
                ex = entry.exercise
                if ex is None or ex.is_cardio:
                    continue
                est = MathTools.epley_1rm(entry.weight, entry.reps)
                current = records.get(ex.id)
                if current is None or est > current.estimated_1rm:
                    records[ex.id] = PersonalRecordEstimate(
                        exercise_id=ex.id,
                        exercise_name=ex.name,
                        estimated_1rm=est,
                        weight=entry.weight,
                        reps=entry.reps,
                        date=workout.date,
                    )
        return sorted(records.values(), key=lambda x: x.exercise_name)

    def heatmap_window(self, period: Period | str) -> int:
        return self.settings.heatmap_days[Period.parse(period).value]

    def activity_heatmap(
        self,
        workouts: Iterable[Workout],
        period: Period | str = Period.WEEK,
        now: Optional[datetime.datetime] = None,
    ) -> List[HeatmapCell]:
        """Return a per-day activity score for the trailing window.

        A strength entry scores sets x reps and a cardio entry its minutes
        (reps, not multiplied by sets). Intensity is the score divided by
        the busiest day in the window.
        """
        now = now or datetime.datetime.now()
        days = PeriodTools.trailing_days(now, self.heatmap_window(period))
        scores = {day: 0 for day in days}
        for workout in workouts:
            day = workout.day
            if day not in scores:
                continue
            for entry in workout.entries:
                if entry.is_cardio:
                    scores[day] += entry.reps
                else:
                    scores[day] += entry.sets * entry.reps
        values = [scores[day] for day in days]
        intensities = MathTools.normalize(values)
        return [
            HeatmapCell(day=day, score=score, intensity=intensity)
            for day, score, intensity in zip(days, values, intensities)
        ]

    def daily_volume(
        self,
        workouts: Iterable[Workout],
        period: Period | str = Period.WEEK,
        now: Optional[datetime.datetime] = None,
    ) -> List[DailyVolume]:
        """Return strength volume per training day, oldest first."""
        now = now or datetime.datetime.now()
        daily: Dict[datetime.date, float] = {}
        for workout in PeriodTools.filter_workouts(workouts, period, now):
            if workout.day is None:
                continue
            volume = sum(e.strength_volume for e in workout.entries)
            daily[workout.day] = daily.get(workout.day, 0.0) + volume
        return [
            DailyVolume(day=day, strength_volume=vol)
            for day, vol in sorted(daily.items())
        ]
