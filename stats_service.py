from __future__ import annotations
import datetime
from typing import Dict, Iterable, List, Optional

from algorithms import PeriodTools
from models import (
    ExerciseMaxima,
    Period,
    PeriodDelta,
    PeriodStats,
    Workout,
)
from settings_schema import SettingsSchema


class StatisticsService:
    """Compute period statistics from a snapshot of workout records.

    Every method is a pure function of the workouts passed in and ``now``;
    the service never reaches back into storage.
    """

    def __init__(self, settings: SettingsSchema | None = None) -> None:
        self.settings = settings or SettingsSchema()

    @staticmethod
    def _totals(workouts: Iterable[Workout]) -> Dict[str, float]:
        sets = 0
        reps = 0
        performed = 0
        volume = 0.0
        cardio = 0
        for workout in workouts:
            for entry in workout.entries:
                sets += entry.sets
                reps += entry.reps
                performed += entry.performed_reps
                volume += entry.strength_volume
                cardio += entry.cardio_minutes
        return {
            "sets": sets,
            "reps": reps,
            "performed": performed,
            "volume": volume,
            "cardio": cardio,
        }

    def compute_stats(
        self,
        workouts: Iterable[Workout],
        period: Period | str = Period.WEEK,
        now: Optional[datetime.datetime] = None,
    ) -> PeriodStats:
        """Return totals for the current window of ``period`` and deltas
        against the window of identical calendar length before it."""
        period = Period.parse(period)
        now = now or datetime.datetime.now()
        workouts = list(workouts)
        current = PeriodTools.filter_workouts(workouts, period, now)
        totals = self._totals(current)

        delta = PeriodDelta()
        bounds = PeriodTools.previous_bounds(period, now)
        if bounds is not None:
            previous = self._totals(PeriodTools.between(workouts, *bounds))
            delta = PeriodDelta(
                sets=totals["sets"] - previous["sets"],
                reps=totals["reps"] - previous["reps"],
                strength_volume=totals["volume"] - previous["volume"],
                cardio_minutes=totals["cardio"] - previous["cardio"],
            )

        return PeriodStats(
            period=period,
            workout_count=len(current),
            total_sets=totals["sets"],
            total_reps=totals["reps"],
            total_performed_reps=totals["performed"],
            total_strength_volume=totals["volume"],
            total_cardio_minutes=totals["cardio"],
            delta=delta,
        )

    def lifetime_totals(self, workouts: Iterable[Workout]) -> PeriodStats:
        """Return all-time totals, undated workouts included."""
        return self.compute_stats(workouts, Period.ALL)

    def exercise_maxima(
        self,
        workouts: Iterable[Workout],
        period: Period | str = Period.WEEK,
        now: Optional[datetime.datetime] = None,
        limit: int | None = None,
    ) -> List[ExerciseMaxima]:
        """Return heaviest weight and total sets per exercise, heaviest first.

        Entries whose exercise was deleted are skipped. ``limit`` defaults to
        the configured ``top_exercises_limit``.
        """
        if limit is None:
            limit = self.settings.top_exercises_limit
        if limit < 1:
            raise ValueError("limit must be at least 1")
        now = now or datetime.datetime.now()
        stats: Dict[int, Dict] = {}
        for workout in PeriodTools.filter_workouts(workouts, period, now):
            for entry in workout.entries:
                ex = entry.exercise
                if ex is None:
                    continue
                item = stats.setdefault(
                    ex.id,
                    {
                        "exercise_id": ex.id,
                        "name": ex.name,
                        "category": ex.category,
                        "max_weight": entry.weight,
                        "total_sets": 0,
                    },
                )
                item["max_weight"] = max(item["max_weight"], entry.weight)
                item["total_sets"] += entry.sets
        result = sorted(
            stats.values(), key=lambda x: (-x["max_weight"], x["name"])
        )[:limit]
        return [ExerciseMaxima(**item) for item in result]
