from __future__ import annotations
import datetime
from typing import Callable, Iterable, List, Optional

from algorithms import MathTools
from gamification_service import GamificationService
from models import Category, ChatMessage, Insight, Period, Workout
from progress_service import ProgressService
from settings_schema import SettingsSchema
from stats_service import StatisticsService

QUICK_ACTIONS = {
    "Weekly analysis": "Analyze my workouts for the last week",
    "Next workout": "What should I do in my next workout?",
    "Progress": "How are my personal records progressing?",
    "Motivation": "I need some motivation to train",
}

WELCOME_MESSAGE = (
    "Hi! I'm your personal trainer. Ask me about your week, your next "
    "workout, your records or just for some motivation."
)

_PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}

_STRENGTH_CATEGORIES = (
    Category.CHEST,
    Category.BACK,
    Category.LEGS,
    Category.SHOULDERS,
    Category.ARMS,
    Category.ABS,
)


class TrainerService:
    """Rule-based trainer that turns aggregated statistics into advice."""

    def __init__(
        self,
        settings: SettingsSchema | None = None,
        stats: StatisticsService | None = None,
        gamification: GamificationService | None = None,
        progress: ProgressService | None = None,
    ) -> None:
        self.settings = settings or SettingsSchema()
        self.stats = stats or StatisticsService(self.settings)
        self.gamification = gamification or GamificationService(
            self.settings, self.stats
        )
        self.progress = progress or ProgressService(self.settings)
        self._routes: list[tuple[tuple[str, ...], Callable]] = [
            (("week", "недел", "analy", "анализ"), self._weekly_analysis),
            (("next", "следующ", "plan"), self._next_workout),
            (("record", "progress", "рекорд", "прогресс", "растет"), self._records),
            (("motivat", "мотивац"), self._motivation),
            (("hello", "привет", "start"), self._welcome),
        ]

    def insights(
        self, workouts: Iterable[Workout], now: Optional[datetime.datetime] = None
    ) -> List[Insight]:
        """Return insights for the current state of training, most urgent first."""
        now = now or datetime.datetime.now()
        workouts = list(workouts)
        if not workouts:
            return [
                Insight(
                    title="Log your first workout",
                    description="Add a workout to start tracking your progress.",
                    type="recommendation",
                    priority="high",
                )
            ]
        result: list[Insight] = []

        week = self.stats.compute_stats(workouts, Period.WEEK, now)
        previous = week.total_strength_volume - week.delta.strength_volume
        if previous > 0:
            change = MathTools.relative_change(week.total_strength_volume, previous)
            threshold = self.settings.insight_volume_change
            if change >= threshold:
                result.append(
                    Insight(
                        title="Great progress!",
                        description=(
                            f"Your training volume grew by {round(change * 100)}% "
                            "compared to the previous week. Keep it up!"
                        ),
                        type="progress",
                        priority="high",
                    )
                )
            elif change <= -threshold:
                result.append(
                    Insight(
                        title="Volume is down",
                        description=(
                            f"Your training volume dropped by {round(-change * 100)}% "
                            "compared to the previous week."
                        ),
                        type="warning",
                        priority="medium",
                    )
                )

        streak = self.gamification.compute_streaks(workouts, now)
        if streak.current_streak_days >= self.settings.recovery_streak_days:
            result.append(
                Insight(
                    title="Don't forget to recover",
                    description=(
                        f"You have trained {streak.current_streak_days} days in a row. "
                        "A rest day helps you grow."
                    ),
                    type="recovery",
                    priority="high",
                )
            )

        recent = self.gamification.recent_counts(workouts, now)
        if recent.last_7_days == 0:
            result.append(
                Insight(
                    title="Time to get back",
                    description="You have not trained in the last 7 days.",
                    type="warning",
                    priority="medium",
                )
            )

        close = [
            s
            for s in self.gamification.achievements(workouts, now)
            if not s.unlocked and s.fraction >= 0.8
        ]
        if close:
            best = max(close, key=lambda s: s.fraction)
            result.append(
                Insight(
                    title="Almost there",
                    description=(
                        f"{best.title}: {best.progress} / {best.max_progress}."
                    ),
                    type="achievement",
                    priority="low",
                )
            )

        breakdown = self.progress.category_breakdown(workouts, Period.MONTH, now)
        if len(breakdown) > 1 and breakdown[0].share > 0.5:
            top = breakdown[0]
            result.append(
                Insight(
                    title="Balance your training",
                    description=(
                        f"{top.category.value.capitalize()} takes "
                        f"{round(top.share * 100)}% of your volume this month."
                    ),
                    type="recommendation",
                    priority="medium",
                )
            )
        return sorted(result, key=lambda i: _PRIORITY_ORDER.get(i.priority, 1))

    def reply(
        self,
        message: str,
        workouts: Iterable[Workout],
        now: Optional[datetime.datetime] = None,
    ) -> ChatMessage:
        """Answer a chat message by routing on keywords."""
        text = (message or "").strip().lower()
        if not text:
            raise ValueError("message must not be empty")
        now = now or datetime.datetime.now()
        workouts = list(workouts)
        for keywords, handler in self._routes:
            if any(k in text for k in keywords):
                content, kind = handler(workouts, now)
                return ChatMessage(content=content, message_type=kind, timestamp=now)
        options = ", ".join(QUICK_ACTIONS)
        return ChatMessage(
            content=f"I can help with: {options}.",
            message_type="text",
            timestamp=now,
        )

    def _weekly_analysis(self, workouts, now):
        week = self.stats.compute_stats(workouts, Period.WEEK, now)
        if week.workout_count == 0:
            return "You have no workouts in the last week.", "analysis"
        d = week.delta
        return (
            f"Last week: {week.workout_count} workouts, {week.total_sets} sets "
            f"({d.sets:+d}), {week.total_reps} reps ({d.reps:+d}), "
            f"{week.total_strength_volume:.0f} kg volume "
            f"({d.strength_volume:+.0f}), {week.total_cardio_minutes} cardio "
            f"minutes ({d.cardio_minutes:+d})."
        ), "analysis"

    def _next_workout(self, workouts, now):
        volumes = {c: 0.0 for c in _STRENGTH_CATEGORIES}
        for item in self.progress.category_breakdown(workouts, Period.MONTH, now):
            if item.category in volumes:
                volumes[item.category] = item.strength_volume
        focus = min(_STRENGTH_CATEGORIES, key=lambda c: volumes[c])
        return (
            f"Focus on {focus.value} next: it got the least volume this month."
        ), "recommendation"

    def _records(self, workouts, now):
        records = self.progress.estimated_one_rep_max(workouts, Period.MONTH, now)
        if not records:
            return "No strength records this month yet.", "analysis"
        best = sorted(records, key=lambda r: -r.estimated_1rm)[:3]
        parts = [f"{r.exercise_name} ~{r.estimated_1rm:.1f} kg" for r in best]
        return "Estimated 1RM this month: " + ", ".join(parts) + ".", "analysis"

    def _motivation(self, workouts, now):
        streak = self.gamification.compute_streaks(workouts, now)
        if streak.current_streak_days > 0:
            return (
                f"You are on a {streak.current_streak_days}-day streak "
                f"(best: {streak.max_streak_days}). Keep the chain going!"
            ), "text"
        return "Every streak starts with one workout. Today is a good day.", "text"

    def _welcome(self, workouts, now):
        return WELCOME_MESSAGE, "text"
