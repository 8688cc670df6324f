import argparse
import datetime
import json
import logging
import random

from config import YamlConfig
from db import WorkoutRecordStore
from gamification_service import GamificationService
from progress_service import ProgressService
from stats_service import StatisticsService

SAMPLE_EXERCISES = [
    ("Bench Press", "Chest"),
    ("Squat", "Legs"),
    ("Deadlift", "Back"),
    ("Overhead Press", "Shoulders"),
    ("Pull-up", "Back"),
    ("Push-up", "Chest"),
    ("Plank", "Abs"),
    ("Running", "Cardio"),
]


def demo_data(db_path: str, username: str = "demo", days: int = 7, seed: int = 0) -> int:
    """Create a user with a week of random workouts and return its id."""
    store = WorkoutRecordStore(db_path)
    for uid, name in store.users.fetch_all_users():
        if name == username:
            print("Database already contains the demo user")
            return uid
    rng = random.Random(seed)
    uid = store.users.create(username)
    exercises = [
        (store.exercises.add(uid, name, category), category)
        for name, category in SAMPLE_EXERCISES
    ]
    today = datetime.datetime.now().replace(hour=18, minute=0, second=0, microsecond=0)
    for i in range(days):
        date = today - datetime.timedelta(days=i)
        wid = store.workouts.create(uid, date.isoformat(), f"Workout {i + 1}")
        for ex_id, category in rng.sample(exercises, rng.randint(3, 6)):
            if category == "Cardio":
                store.entries.add(wid, ex_id, 1, rng.randint(15, 40), 0.0)
            else:
                store.entries.add(
                    wid,
                    ex_id,
                    rng.randint(2, 5),
                    rng.randint(8, 15),
                    round(rng.uniform(20, 120), 1),
                    "Felt good" if i % 3 == 0 else None,
                )
    print("Demo data inserted")
    return uid


def build_report(
    db_path: str,
    yaml_path: str,
    user_id: int,
    period: str = "week",
    now: datetime.datetime | None = None,
) -> dict:
    """Return every derived view for ``user_id`` as plain JSON data."""
    settings = YamlConfig(yaml_path).settings()
    store = WorkoutRecordStore(db_path)
    if store.user(user_id) is None:
        raise ValueError(f"unknown user: {user_id}")
    now = now or datetime.datetime.now()
    workouts = store.snapshot(user_id)
    stats = StatisticsService(settings)
    game = GamificationService(settings, stats)
    progress = ProgressService(settings)
    achievements = game.achievements(workouts, now)

    def dump(items):
        return [i.model_dump(mode="json") for i in items]

    return {
        "stats": stats.compute_stats(workouts, period, now).model_dump(mode="json"),
        "top_exercises": dump(stats.exercise_maxima(workouts, period, now)),
        "streak": game.compute_streaks(workouts, now).model_dump(mode="json"),
        "achievements": game.summary(achievements).model_dump(mode="json"),
        "categories": dump(progress.category_breakdown(workouts, period, now)),
        "personal_records": dump(progress.estimated_one_rep_max(workouts, period, now)),
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Utility commands")
    parser.add_argument("--verbose", action="store_true")
    sub = parser.add_subparsers(dest="cmd", required=True)

    demo = sub.add_parser("demo")
    demo.add_argument("--db", default="workout.db")
    demo.add_argument("--user", default="demo")
    demo.add_argument("--days", type=int, default=7)

    rep = sub.add_parser("report")
    rep.add_argument("--db", default="workout.db")
    rep.add_argument("--yaml", default="settings.yaml")
    rep.add_argument("--user", type=int, required=True)
    rep.add_argument("--period", choices=["week", "month", "year", "all"], default="week")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.cmd == "demo":
        demo_data(args.db, args.user, args.days)
    elif args.cmd == "report":
        report = build_report(args.db, args.yaml, args.user, args.period)
        print(json.dumps(report, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
