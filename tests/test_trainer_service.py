import os
import sys
import datetime
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from models import Exercise, Workout, WorkoutEntry
from trainer_service import TrainerService, WELCOME_MESSAGE

D = datetime.datetime(2024, 3, 15, 18, 0)
BENCH = Exercise(id=1, name="Bench Press", category="Chest")
SQUAT = Exercise(id=2, name="Squat", category="Legs")
RUN = Exercise(id=3, name="Running", category="Cardio")


def entry(exercise, sets, reps, weight=0.0):
    return WorkoutEntry(sets=sets, reps=reps, weight=weight, exercise=exercise)


def workout(days_ago, *entries):
    return Workout(date=D - datetime.timedelta(days=days_ago), entries=list(entries))


class InsightsTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.trainer = TrainerService()

    def titles(self, workouts):
        return [i.title for i in self.trainer.insights(workouts, D)]

    def test_first_workout(self) -> None:
        self.assertEqual(self.titles([]), ["Log your first workout"])

    def test_volume_growth(self) -> None:
        workouts = [
            workout(1, entry(BENCH, 3, 10, 50)),
            workout(10, entry(BENCH, 2, 10, 50)),
        ]
        insights = self.trainer.insights(workouts, D)
        self.assertEqual([i.title for i in insights], ["Great progress!"])
        self.assertIn("50%", insights[0].description)

    def test_volume_drop(self) -> None:
        workouts = [
            workout(1, entry(BENCH, 2, 10, 50)),
            workout(10, entry(BENCH, 3, 10, 50)),
        ]
        self.assertEqual(self.titles(workouts), ["Volume is down"])

    def test_recovery_and_close_achievement(self) -> None:
        workouts = [workout(d, entry(RUN, 1, 30)) for d in range(6)]
        self.assertEqual(self.titles(workouts), ["Don't forget to recover", "Almost there"])

    def test_inactive_week(self) -> None:
        self.assertEqual(self.titles([workout(20, entry(BENCH, 1, 10, 50))]), ["Time to get back"])

    def test_unbalanced_month(self) -> None:
        workouts = [workout(1, entry(BENCH, 3, 10, 100), entry(SQUAT, 1, 10, 50))]
        insights = self.trainer.insights(workouts, D)
        balance = [i for i in insights if i.title == "Balance your training"]
        self.assertEqual(len(balance), 1)
        self.assertIn("Chest takes 86%", balance[0].description)


class ReplyTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.trainer = TrainerService()
        self.workouts = [workout(1, entry(BENCH, 3, 10, 50))]

    def test_weekly_analysis(self) -> None:
        msg = self.trainer.reply("Analyze my week", self.workouts, D)
        self.assertEqual(msg.message_type, "analysis")
        self.assertTrue(msg.content.startswith("Last week: 1 workouts, 3 sets (+3)"))
        self.assertFalse(msg.is_user)
        self.assertEqual(msg.timestamp, D)

    def test_russian_keywords(self) -> None:
        msg = self.trainer.reply("Анализ недели", self.workouts, D)
        self.assertEqual(msg.message_type, "analysis")

    def test_next_workout(self) -> None:
        msg = self.trainer.reply("What should I do next?", self.workouts, D)
        self.assertEqual(msg.message_type, "recommendation")
        self.assertTrue(msg.content.startswith("Focus on back"))

    def test_records(self) -> None:
        msg = self.trainer.reply("How are my records?", self.workouts, D)
        self.assertEqual(msg.content, "Estimated 1RM this month: Bench Press ~66.7 kg.")

    def test_motivation(self) -> None:
        msg = self.trainer.reply("I need motivation", self.workouts, D)
        self.assertIn("1-day streak", msg.content)
        msg = self.trainer.reply("I need motivation", [], D)
        self.assertTrue(msg.content.startswith("Every streak starts"))

    def test_welcome(self) -> None:
        msg = self.trainer.reply("Hello there", [], D)
        self.assertEqual(msg.content, WELCOME_MESSAGE)

    def test_fallback(self) -> None:
        msg = self.trainer.reply("thanks", self.workouts, D)
        self.assertEqual(
            msg.content, "I can help with: Weekly analysis, Next workout, Progress, Motivation."
        )

    def test_empty_message(self) -> None:
        with self.assertRaises(ValueError):
            self.trainer.reply("   ", self.workouts, D)


if __name__ == "__main__":
    unittest.main()
