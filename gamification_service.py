from __future__ import annotations
import datetime
from typing import Dict, Iterable, List, Optional

from algorithms import MathTools
from localization import Translator
from models import (
    AchievementMetric as M,
    AchievementRule,
    AchievementStatus,
    AchievementSummary,
    PeriodStats,
    RecentCounts,
    StreakState,
    Workout,
)
from settings_schema import SettingsSchema
from stats_service import StatisticsService

_CATALOG_TABLE = (
    ("first_workout", M.TOTAL_WORKOUTS, 1, "First Workout", "Log your first workout"),
    ("five_workouts", M.TOTAL_WORKOUTS, 5, "Getting Started", "Complete 5 workouts"),
    ("ten_workouts", M.TOTAL_WORKOUTS, 10, "Regularity", "Complete 10 workouts"),
    ("twenty_workouts", M.TOTAL_WORKOUTS, 20, "Warming Up", "Complete 20 workouts"),
    ("fifty_workouts", M.TOTAL_WORKOUTS, 50, "Half a Hundred", "Complete 50 workouts"),
    ("hundred_workouts", M.TOTAL_WORKOUTS, 100, "Hundred Workouts", "Complete 100 workouts"),
    ("hundred_sets", M.TOTAL_SETS, 100, "Hundred Sets", "Perform 100 sets"),
    ("five_hundred_sets", M.TOTAL_SETS, 500, "Five Hundred", "Perform 500 sets"),
    ("thousand_sets", M.TOTAL_SETS, 1000, "Thousand Sets", "Perform 1000 sets"),
    ("two_thousand_sets", M.TOTAL_SETS, 2000, "2000 Sets", "Reach 2000 sets in total"),
    ("five_thousand_sets", M.TOTAL_SETS, 5000, "5000 Sets", "Reach 5000 sets in total"),
    ("ten_thousand_reps", M.TOTAL_REPS, 10_000, "10,000 Reps", "Perform 10,000 reps in total"),
    ("week_streak", M.MAX_STREAK_DAYS, 7, "Week Streak", "Train 7 days in a row"),
    ("two_weeks_streak", M.MAX_STREAK_DAYS, 14, "Two Week Streak", "Train 14 days in a row"),
    ("month_streak", M.MAX_STREAK_DAYS, 30, "Month Streak", "Train 30 days in a row"),
    ("heavy_lifter", M.TOTAL_STRENGTH_VOLUME_KG, 1000, "Heavy Lifter", "Lift 1000 kg in total"),
    ("mass_5k", M.TOTAL_STRENGTH_VOLUME_KG, 5000, "Iron 5000", "Lift 5000 kg in total"),
    ("mass_10k", M.TOTAL_STRENGTH_VOLUME_KG, 10_000, "Iron 10,000", "Lift 10,000 kg in total"),
    ("week_3_workouts", M.WORKOUTS_LAST_7_DAYS, 3, "Three a Week", "Complete 3 workouts in the last 7 days"),
    ("month_12_workouts", M.WORKOUTS_CURRENT_MONTH, 12, "12 a Month", "Complete 12 workouts this month"),
    ("double_day", M.WORKOUTS_TODAY, 2, "Double Session", "Complete 2 workouts in one day"),
)

ACHIEVEMENT_CATALOG: tuple[AchievementRule, ...] = tuple(
    AchievementRule(id=i, metric=m, threshold=t, title=title, description=desc)
    for i, m, t, title, desc in _CATALOG_TABLE
)


class GamificationService:
    """Compute training streaks and evaluate the achievement catalog.

    Unlock state is never stored: every call re-evaluates the catalog from
    the totals it is given, so achievements built on non-monotonic metrics
    (streaks, this week, today) can lock again.
    """

    def __init__(
        self,
        settings: SettingsSchema | None = None,
        stats: StatisticsService | None = None,
    ) -> None:
        self.settings = settings or SettingsSchema()
        self.stats = stats or StatisticsService(self.settings)
        self.translator = Translator(self.settings.language)
        self.catalog: list[AchievementRule] = list(ACHIEVEMENT_CATALOG)
        known = {rule.id for rule in self.catalog}
        for extra in self.settings.extra_achievements:
            if extra.id in known:
                raise ValueError(f"duplicate achievement id: {extra.id}")
            known.add(extra.id)
            self.catalog.append(
                AchievementRule(
                    id=extra.id,
                    metric=extra.metric,
                    threshold=extra.threshold,
                    title=extra.title or extra.id,
                    description=extra.description or "",
                )
            )

    @staticmethod
    def compute_streaks(
        workouts: Iterable[Workout], now: Optional[datetime.datetime] = None
    ) -> StreakState:
        """Return current and record streaks of consecutive training days.

        Workouts are walked newest first. A one-day gap extends the streak,
        a longer gap breaks it, and a second workout on the same day leaves
        the counter untouched. The current streak is the run containing the
        newest workout; with ``now`` it drops to 0 once more than a day has
        passed since that workout.
        """
        dates = sorted((w.date for w in workouts if w.date is not None), reverse=True)
        if not dates:
            return StreakState()
        current = 0
        record = 0
        latest_run: int | None = None
        last_day: datetime.date | None = None
        for moment in dates:
            day = moment.date()
            if last_day is None:
                current = 1
            else:
                gap = (last_day - day).days
                if gap == 1:
                    current += 1
                elif gap > 1:
                    record = max(record, current)
                    if latest_run is None:
                        latest_run = current
                    current = 1
            last_day = day
        record = max(record, current)
        if latest_run is None:
            latest_run = current
        if now is not None and (now.date() - dates[0].date()).days > 1:
            latest_run = 0
        return StreakState(current_streak_days=latest_run, max_streak_days=record)

    @staticmethod
    def recent_counts(
        workouts: Iterable[Workout], now: datetime.datetime
    ) -> RecentCounts:
        """Count workouts in the last 7 days, this calendar month and today."""
        week_ago = now - datetime.timedelta(days=7)
        counts = RecentCounts()
        for w in workouts:
            if w.date is None:
                continue
            if w.date >= week_ago:
                counts.last_7_days += 1
            if (w.date.year, w.date.month) == (now.year, now.month):
                counts.current_month += 1
            if w.date.date() == now.date():
                counts.today += 1
        return counts

    @staticmethod
    def metric_values(
        totals: PeriodStats, streaks: StreakState, recent: RecentCounts
    ) -> Dict[M, float]:
        return {
            M.TOTAL_WORKOUTS: totals.workout_count,
            M.TOTAL_SETS: totals.total_sets,
            M.TOTAL_REPS: totals.total_performed_reps,
            M.MAX_STREAK_DAYS: streaks.max_streak_days,
            M.TOTAL_STRENGTH_VOLUME_KG: totals.total_strength_volume,
            M.WORKOUTS_LAST_7_DAYS: recent.last_7_days,
            M.WORKOUTS_CURRENT_MONTH: recent.current_month,
            M.WORKOUTS_TODAY: recent.today,
        }

    def evaluate_achievements(
        self, totals: PeriodStats, streaks: StreakState, recent: RecentCounts
    ) -> List[AchievementStatus]:
        values = self.metric_values(totals, streaks, recent)
        statuses = []
        for rule in self.catalog:
            value = values.get(rule.metric)
            if value is None:
                raise ValueError(f"unknown achievement metric: {rule.metric}")
            statuses.append(
                AchievementStatus(
                    id=rule.id,
                    title=self.translator.gettext(rule.title),
                    description=self.translator.gettext(rule.description),
                    metric=rule.metric,
                    unlocked=value >= rule.threshold,
                    progress=min(int(value), rule.threshold),
                    max_progress=rule.threshold,
                )
            )
        return statuses

    def achievements(
        self, workouts: Iterable[Workout], now: Optional[datetime.datetime] = None
    ) -> List[AchievementStatus]:
        """Evaluate the catalog against lifetime totals of ``workouts``."""
        now = now or datetime.datetime.now()
        workouts = list(workouts)
        return self.evaluate_achievements(
            self.stats.lifetime_totals(workouts),
            self.compute_streaks(workouts),
            self.recent_counts(workouts, now),
        )

    @staticmethod
    def summary(statuses: Iterable[AchievementStatus]) -> AchievementSummary:
        statuses = list(statuses)
        unlocked = sum(1 for s in statuses if s.unlocked)
        return AchievementSummary(
            unlocked=unlocked,
            total=len(statuses),
            percent=MathTools.percent(unlocked, len(statuses)),
        )
