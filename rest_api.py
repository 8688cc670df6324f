import datetime
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException

from config import APP_VERSION, YamlConfig
from db import WorkoutRecordStore
from gamification_service import GamificationService
from models import Period
from progress_service import ProgressService
from stats_service import StatisticsService
from trainer_service import QUICK_ACTIONS, TrainerService

logger = logging.getLogger(__name__)


class StatsAPI:
    """Provides REST endpoints for workout logging statistics."""

    def __init__(
        self,
        db_path: str = "workout.db",
        yaml_path: str = "settings.yaml",
    ) -> None:
        self.db_path = db_path
        self.config = YamlConfig(yaml_path)
        self.settings = self.config.settings()
        self.store = WorkoutRecordStore(db_path)
        self.users = self.store.users
        self.exercises = self.store.exercises
        self.workouts = self.store.workouts
        self.entries = self.store.entries
        self.statistics = StatisticsService(self.settings)
        self.gamification = GamificationService(self.settings, self.statistics)
        self.progress = ProgressService(self.settings)
        self.trainer = TrainerService(
            self.settings, self.statistics, self.gamification, self.progress
        )
        self.app = FastAPI(
            title="GymLog Stats API",
            description="REST API for workout logging statistics and achievements",
            version=APP_VERSION,
        )
        self._setup_routes()

    @staticmethod
    def _parse_now(now: Optional[str]) -> datetime.datetime:
        if not now:
            return datetime.datetime.now()
        try:
            parsed = datetime.datetime.fromisoformat(now)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"invalid timestamp: {now}")
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone().replace(tzinfo=None)
        return parsed

    @staticmethod
    def _parse_period(period: str) -> Period:
        try:
            return Period.parse(period)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    def _snapshot(self, user_id: int):
        if self.store.user(user_id) is None:
            raise HTTPException(status_code=404, detail="user not found")
        return self.store.snapshot(user_id)

    def _setup_routes(self) -> None:
        @self.app.get("/health")
        def health():
            """Return API and database connection status."""
            self.users.fetch_all_users()
            return {"status": "ok"}

        @self.app.post("/users")
        def create_user(username: str):
            try:
                uid = self.users.create(username)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"id": uid}

        @self.app.post("/users/{user_id}/exercises")
        def add_exercise(user_id: int, name: str, category: str = "other"):
            if self.store.user(user_id) is None:
                raise HTTPException(status_code=404, detail="user not found")
            try:
                eid = self.exercises.add(user_id, name, category)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"id": eid}

        @self.app.get("/users/{user_id}/exercises")
        def list_exercises(user_id: int):
            if self.store.user(user_id) is None:
                raise HTTPException(status_code=404, detail="user not found")
            return list(self.store.exercise_map(user_id).values())

        @self.app.delete("/exercises/{exercise_id}")
        def delete_exercise(exercise_id: int):
            if self.exercises.fetch_detail(exercise_id) is None:
                raise HTTPException(status_code=404, detail="exercise not found")
            self.exercises.remove(exercise_id)
            logger.info("exercise %s deleted, its entries are kept", exercise_id)
            return {"status": "deleted"}

        @self.app.post("/users/{user_id}/workouts")
        def create_workout(user_id: int, date: str = None, notes: str = None):
            if self.store.user(user_id) is None:
                raise HTTPException(status_code=404, detail="user not found")
            try:
                wid = self.workouts.create(user_id, date, notes)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"id": wid}

        @self.app.get("/users/{user_id}/workouts")
        def list_workouts(user_id: int):
            return self._snapshot(user_id)

        @self.app.delete("/workouts/{workout_id}")
        def delete_workout(workout_id: int):
            if self.workouts.fetch_detail(workout_id) is None:
                raise HTTPException(status_code=404, detail="workout not found")
            self.workouts.delete(workout_id)
            return {"status": "deleted"}

        @self.app.post("/workouts/{workout_id}/entries")
        def add_entry(
            workout_id: int,
            exercise_id: int,
            sets: int,
            reps: int,
            weight: float = 0.0,
            comment: str = None,
        ):
            workout = self.workouts.fetch_detail(workout_id)
            if workout is None:
                raise HTTPException(status_code=404, detail="workout not found")
            exercise = self.exercises.fetch_detail(exercise_id)
            if exercise is None or exercise[1] != workout[1]:
                raise HTTPException(status_code=404, detail="exercise not found")
            try:
                eid = self.entries.add(workout_id, exercise_id, sets, reps, weight, comment)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"id": eid}

        @self.app.get("/users/{user_id}/stats")
        def stats(user_id: int, period: str = "week", now: str = None):
            return self.statistics.compute_stats(
                self._snapshot(user_id),
                self._parse_period(period),
                self._parse_now(now),
            )

        @self.app.get("/users/{user_id}/stats/top_exercises")
        def top_exercises(
            user_id: int, period: str = "week", now: str = None, limit: int = None
        ):
            workouts = self._snapshot(user_id)
            try:
                return self.statistics.exercise_maxima(
                    workouts, self._parse_period(period), self._parse_now(now), limit
                )
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @self.app.get("/users/{user_id}/streak")
        def streak(user_id: int, now: str = None):
            return self.gamification.compute_streaks(
                self._snapshot(user_id), self._parse_now(now)
            )

        @self.app.get("/users/{user_id}/achievements")
        def achievements(user_id: int, now: str = None):
            statuses = self.gamification.achievements(
                self._snapshot(user_id), self._parse_now(now)
            )
            return {
                "achievements": statuses,
                "summary": self.gamification.summary(statuses),
            }

        @self.app.get("/users/{user_id}/progress/categories")
        def categories(user_id: int, period: str = "week", now: str = None):
            return self.progress.category_breakdown(
                self._snapshot(user_id),
                self._parse_period(period),
                self._parse_now(now),
            )

        @self.app.get("/users/{user_id}/progress/personal_records")
        def personal_records(user_id: int, period: str = "week", now: str = None):
            return self.progress.estimated_one_rep_max(
                self._snapshot(user_id),
                self._parse_period(period),
                self._parse_now(now),
            )

        @self.app.get("/users/{user_id}/progress/heatmap")
        def heatmap(user_id: int, period: str = "week", now: str = None):
            return self.progress.activity_heatmap(
                self._snapshot(user_id),
                self._parse_period(period),
                self._parse_now(now),
            )

        @self.app.get("/users/{user_id}/progress/daily_volume")
        def daily_volume(user_id: int, period: str = "week", now: str = None):
            return self.progress.daily_volume(
                self._snapshot(user_id),
                self._parse_period(period),
                self._parse_now(now),
            )

        @self.app.get("/users/{user_id}/insights")
        def insights(user_id: int, now: str = None):
            return self.trainer.insights(self._snapshot(user_id), self._parse_now(now))

        @self.app.get("/trainer/quick_actions")
        def quick_actions():
            return QUICK_ACTIONS

        @self.app.post("/users/{user_id}/chat")
        def chat(user_id: int, message: str, now: str = None):
            try:
                return self.trainer.reply(
                    message, self._snapshot(user_id), self._parse_now(now)
                )
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))


api = StatsAPI()
app = api.app

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app)
