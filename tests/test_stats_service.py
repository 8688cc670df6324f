import os
import sys
import datetime
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from models import Exercise, Period, Workout, WorkoutEntry
from settings_schema import SettingsSchema
from stats_service import StatisticsService

NOW = datetime.datetime(2024, 3, 15, 12, 0)
BENCH = Exercise(id=1, name="Bench Press", category="Chest")
SQUAT = Exercise(id=2, name="Squat", category="Legs")
RUN = Exercise(id=3, name="Running", category="Cardio")


def entry(exercise, sets, reps, weight=0.0):
    return WorkoutEntry(sets=sets, reps=reps, weight=weight, exercise=exercise)


def workout(days_ago, *entries, wid=None):
    return Workout(id=wid, date=NOW - datetime.timedelta(days=days_ago), entries=list(entries))


class StatisticsServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.stats = StatisticsService()

    def test_strength_volume(self) -> None:
        result = self.stats.compute_stats([workout(1, entry(BENCH, 3, 10, 80))], "week", NOW)
        self.assertEqual(result.workout_count, 1)
        self.assertEqual(result.total_sets, 3)
        self.assertEqual(result.total_reps, 10)
        self.assertEqual(result.total_performed_reps, 30)
        self.assertEqual(result.total_strength_volume, 2400.0)
        self.assertEqual(result.total_cardio_minutes, 0)

    def test_cardio_minutes(self) -> None:
        result = self.stats.compute_stats([workout(1, entry(RUN, 1, 30))], Period.WEEK, NOW)
        self.assertEqual(result.total_cardio_minutes, 30)
        self.assertEqual(result.total_strength_volume, 0.0)
        self.assertEqual(result.total_sets, 1)
        self.assertEqual(result.total_reps, 30)

    def test_mixed_workout(self) -> None:
        w = workout(0, entry(BENCH, 3, 10, 80), entry(RUN, 2, 25, 10))
        result = self.stats.compute_stats([w], Period.WEEK, NOW)
        self.assertEqual(result.total_strength_volume, 2400.0)
        self.assertEqual(result.total_cardio_minutes, 50)
        self.assertEqual(result.total_reps, 35)
        self.assertEqual(result.total_performed_reps, 80)
        self.assertEqual(result.total_sets, 5)

    def test_delta_against_previous_week(self) -> None:
        workouts = [
            workout(1, entry(BENCH, 3, 10, 80)),
            workout(10, entry(SQUAT, 5, 10, 100)),
        ]
        result = self.stats.compute_stats(workouts, Period.WEEK, NOW)
        self.assertEqual(result.workout_count, 1)
        self.assertEqual(result.delta.sets, -2)
        self.assertEqual(result.delta.reps, 0)
        self.assertEqual(result.delta.strength_volume, -2600.0)
        self.assertEqual(result.delta.cardio_minutes, 0)

    def test_empty_current_window_has_negative_delta(self) -> None:
        result = self.stats.compute_stats(
            [workout(10, entry(SQUAT, 5, 10, 100))], Period.WEEK, NOW
        )
        self.assertEqual(result.workout_count, 0)
        self.assertEqual(result.total_strength_volume, 0.0)
        self.assertEqual(result.delta.sets, -5)
        self.assertEqual(result.delta.strength_volume, -5000.0)

    def test_older_workouts_do_not_affect_delta(self) -> None:
        result = self.stats.compute_stats(
            [workout(1, entry(BENCH, 3, 10, 80)), workout(20, entry(SQUAT, 5, 5, 100))],
            Period.WEEK,
            NOW,
        )
        self.assertEqual(result.delta.strength_volume, 2400.0)

    def test_no_records(self) -> None:
        result = self.stats.compute_stats([], "month", NOW)
        self.assertEqual(result.workout_count, 0)
        self.assertEqual(result.total_sets, 0)
        self.assertEqual(result.total_strength_volume, 0.0)
        self.assertEqual(result.delta.sets, 0)
        self.assertEqual(result.delta.strength_volume, 0.0)

    def test_month_window_uses_calendar_months(self) -> None:
        now = datetime.datetime(2024, 3, 31, 12, 0)
        inside = Workout(
            date=datetime.datetime(2024, 2, 29, 13, 0), entries=[entry(BENCH, 1, 10, 50)]
        )
        outside = Workout(
            date=datetime.datetime(2024, 2, 29, 11, 0), entries=[entry(BENCH, 2, 10, 50)]
        )
        result = self.stats.compute_stats([inside, outside], Period.MONTH, now)
        self.assertEqual(result.workout_count, 1)
        self.assertEqual(result.total_sets, 1)
        self.assertEqual(result.delta.sets, -1)

    def test_all_period_counts_undated_workouts(self) -> None:
        workouts = [
            workout(400, entry(BENCH, 3, 10, 80)),
            Workout(entries=[entry(SQUAT, 2, 5, 100)]),
        ]
        result = self.stats.compute_stats(workouts, Period.ALL, NOW)
        self.assertEqual(result.workout_count, 2)
        self.assertEqual(result.total_sets, 5)
        self.assertEqual(result.total_strength_volume, 3400.0)
        self.assertEqual(result.delta.sets, 0)
        self.assertEqual(result.delta.strength_volume, 0.0)

    def test_undated_workouts_skip_bounded_periods(self) -> None:
        result = self.stats.compute_stats(
            [Workout(entries=[entry(BENCH, 3, 10, 80)])], Period.YEAR, NOW
        )
        self.assertEqual(result.workout_count, 0)

    def test_entry_without_exercise_counts_as_strength(self) -> None:
        orphan = WorkoutEntry(sets=2, reps=10, weight=50)
        result = self.stats.compute_stats([workout(1, orphan)], Period.WEEK, NOW)
        self.assertEqual(result.total_sets, 2)
        self.assertEqual(result.total_reps, 10)
        self.assertEqual(result.total_strength_volume, 1000.0)

    def test_unknown_period(self) -> None:
        with self.assertRaises(ValueError):
            self.stats.compute_stats([], "decade", NOW)

    def test_lifetime_totals(self) -> None:
        workouts = [workout(1, entry(BENCH, 3, 10, 80)), workout(100, entry(RUN, 1, 30))]
        result = self.stats.lifetime_totals(workouts)
        self.assertEqual(result.period, Period.ALL)
        self.assertEqual(result.workout_count, 2)
        self.assertEqual(result.total_cardio_minutes, 30)

    def test_exercise_maxima(self) -> None:
        workouts = [
            workout(1, entry(BENCH, 3, 10, 80), entry(RUN, 1, 30)),
            workout(2, entry(BENCH, 2, 5, 100), entry(SQUAT, 5, 5, 140)),
            workout(3, WorkoutEntry(sets=1, reps=1, weight=300)),
        ]
        result = self.stats.exercise_maxima(workouts, Period.WEEK, NOW)
        self.assertEqual([m.name for m in result], ["Squat", "Bench Press", "Running"])
        bench = result[1]
        self.assertEqual(bench.max_weight, 100)
        self.assertEqual(bench.total_sets, 5)
        self.assertEqual(result[2].max_weight, 0)

        limited = self.stats.exercise_maxima(workouts, Period.WEEK, NOW, limit=2)
        self.assertEqual(len(limited), 2)

        with self.assertRaises(ValueError):
            self.stats.exercise_maxima(workouts, Period.WEEK, NOW, limit=0)
        with self.assertRaises(ValueError):
            self.stats.exercise_maxima(workouts, Period.WEEK, NOW, limit=-1)

    def test_exercise_maxima_default_limit(self) -> None:
        stats = StatisticsService(SettingsSchema(top_exercises_limit=1))
        workouts = [workout(1, entry(BENCH, 3, 10, 80), entry(SQUAT, 5, 5, 140))]
        result = stats.exercise_maxima(workouts, Period.WEEK, NOW)
        self.assertEqual([m.name for m in result], ["Squat"])

    def test_exercise_maxima_respects_period(self) -> None:
        workouts = [workout(1, entry(BENCH, 3, 10, 80)), workout(20, entry(SQUAT, 5, 5, 140))]
        result = self.stats.exercise_maxima(workouts, Period.WEEK, NOW)
        self.assertEqual([m.name for m in result], ["Bench Press"])


if __name__ == "__main__":
    unittest.main()
