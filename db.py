import sqlite3
import datetime
import logging
from contextlib import contextmanager
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError

from models import Exercise, User, Workout, WorkoutEntry

logger = logging.getLogger(__name__)


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "users": (
            """CREATE TABLE users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT NOT NULL UNIQUE
                );""",
            ["id", "username"],
        ),
        "exercises": (
            """CREATE TABLE exercises (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    category TEXT,
                    created_at TEXT
                );""",
            ["id", "user_id", "name", "category", "created_at"],
        ),
        "workouts": (
            """CREATE TABLE workouts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    date TEXT,
                    notes TEXT
                );""",
            ["id", "user_id", "date", "notes"],
        ),
        "workout_entries": (
            """CREATE TABLE workout_entries (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    workout_id INTEGER NOT NULL,
                    exercise_id INTEGER,
                    sets INTEGER NOT NULL,
                    reps INTEGER NOT NULL,
                    weight REAL NOT NULL DEFAULT 0,
                    comment TEXT
                );""",
            ["id", "workout_id", "exercise_id", "sets", "reps", "weight", "comment"],
        ),
    }

    def __init__(self, db_path: str = "workout.db") -> None:
        self._db_path = db_path
        self._ensure_schema()

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            for table, (sql, columns) in self._TABLE_DEFINITIONS.items():
                self._ensure_table(conn, table, sql, columns)

    def _ensure_table(
        self, conn: sqlite3.Connection, table: str, sql: str, columns: List[str]
    ) -> None:
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?;", (table,)
        )
        if cur.fetchone() is None:
            conn.execute(sql)
            return

        cur = conn.execute(f"PRAGMA table_info({table});")
        existing_cols = [row[1] for row in cur.fetchall()]
        if existing_cols == columns:
            return

        conn.execute(f"DROP TABLE IF EXISTS {table}_old;")
        conn.execute(f"ALTER TABLE {table} RENAME TO {table}_old;")
        conn.execute(sql)
        common = [c for c in existing_cols if c in columns]
        if common:
            cols = ", ".join(common)
            conn.execute(
                f"INSERT INTO {table} ({cols}) SELECT {cols} FROM {table}_old;"
            )
        conn.execute(f"DROP TABLE {table}_old;")


class BaseRepository(Database):
    """Base repository providing helper methods."""

    def execute(self, query: str, params: Tuple = ()) -> int:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.lastrowid

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.fetchall()


class UserRepository(BaseRepository):
    """Repository for the users table."""

    def create(self, username: str) -> int:
        name = username.strip()
        if not name:
            raise ValueError("username must not be empty")
        try:
            return self.execute("INSERT INTO users (username) VALUES (?);", (name,))
        except sqlite3.IntegrityError:
            raise ValueError(f"user already exists: {name}")

    def fetch(self, user_id: int) -> Optional[Tuple[int, str]]:
        rows = self.fetch_all(
            "SELECT id, username FROM users WHERE id = ?;", (user_id,)
        )
        return rows[0] if rows else None

    def fetch_all_users(self) -> List[Tuple[int, str]]:
        return self.fetch_all("SELECT id, username FROM users ORDER BY id;")


class ExerciseRepository(BaseRepository):
    """Repository for exercises owned by a user."""

    def add(self, user_id: int, name: str, category: str) -> int:
        if not name.strip():
            raise ValueError("exercise name must not be empty")
        return self.execute(
            "INSERT INTO exercises (user_id, name, category, created_at) VALUES (?, ?, ?, ?);",
            (user_id, name.strip(), category, datetime.datetime.now().isoformat()),
        )

    def fetch_for_user(self, user_id: int) -> List[Tuple[int, str, Optional[str]]]:
        return self.fetch_all(
            "SELECT id, name, category FROM exercises WHERE user_id = ? ORDER BY name;",
            (user_id,),
        )

    def fetch_detail(self, exercise_id: int) -> Optional[Tuple[int, int, str, Optional[str]]]:
        rows = self.fetch_all(
            "SELECT id, user_id, name, category FROM exercises WHERE id = ?;",
            (exercise_id,),
        )
        return rows[0] if rows else None

    def remove(self, exercise_id: int) -> None:
        """Delete an exercise. Entries referencing it are left in place."""
        self.execute("DELETE FROM exercises WHERE id = ?;", (exercise_id,))


class WorkoutRepository(BaseRepository):
    """Repository for workout table operations."""

    def create(
        self, user_id: int, date: Optional[str] = None, notes: Optional[str] = None
    ) -> int:
        if date is not None:
            parsed = datetime.datetime.fromisoformat(date)
            if parsed.tzinfo is not None:
                parsed = parsed.astimezone().replace(tzinfo=None)
            date = parsed.isoformat()
        return self.execute(
            "INSERT INTO workouts (user_id, date, notes) VALUES (?, ?, ?);",
            (user_id, date, notes),
        )

    def fetch_detail(self, workout_id: int) -> Optional[Tuple[int, int, Optional[str], Optional[str]]]:
        rows = self.fetch_all(
            "SELECT id, user_id, date, notes FROM workouts WHERE id = ?;",
            (workout_id,),
        )
        return rows[0] if rows else None

    def fetch_for_user(
        self,
        user_id: int,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[Tuple[int, Optional[str], Optional[str]]]:
        query = "SELECT id, date, notes FROM workouts WHERE user_id = ?"
        params: list = [user_id]
        if start_date:
            query += " AND date >= ?"
            params.append(start_date)
        if end_date:
            query += " AND date < ?"
            params.append(end_date)
        query += " ORDER BY date DESC, id DESC;"
        return self.fetch_all(query, tuple(params))

    def delete(self, workout_id: int) -> None:
        self.execute("DELETE FROM workout_entries WHERE workout_id = ?;", (workout_id,))
        self.execute("DELETE FROM workouts WHERE id = ?;", (workout_id,))


class WorkoutEntryRepository(BaseRepository):
    """Repository for exercise entries logged inside a workout."""

    def add(
        self,
        workout_id: int,
        exercise_id: int,
        sets: int,
        reps: int,
        weight: float = 0.0,
        comment: Optional[str] = None,
    ) -> int:
        if sets < 1 or reps < 1:
            raise ValueError("sets and reps must be at least 1")
        if weight < 0:
            raise ValueError("weight must be non-negative")
        return self.execute(
            "INSERT INTO workout_entries (workout_id, exercise_id, sets, reps, weight, comment) VALUES (?, ?, ?, ?, ?, ?);",
            (workout_id, exercise_id, sets, reps, weight, comment),
        )

    def fetch_for_workouts(
        self, workout_ids: List[int]
    ) -> List[Tuple[int, int, Optional[int], int, int, float, Optional[str]]]:
        if not workout_ids:
            return []
        marks = ", ".join("?" for _ in workout_ids)
        return self.fetch_all(
            f"SELECT id, workout_id, exercise_id, sets, reps, weight, comment FROM workout_entries WHERE workout_id IN ({marks}) ORDER BY id;",
            tuple(workout_ids),
        )


class WorkoutRecordStore:
    """Read side of the workout log.

    Produces typed snapshots with every relationship resolved, so the
    statistics services never see raw rows or dangling references.
    """

    def __init__(self, db_path: str = "workout.db") -> None:
        self.users = UserRepository(db_path)
        self.exercises = ExerciseRepository(db_path)
        self.workouts = WorkoutRepository(db_path)
        self.entries = WorkoutEntryRepository(db_path)

    def user(self, user_id: int) -> Optional[User]:
        row = self.users.fetch(user_id)
        if row is None:
            return None
        return User(id=row[0], username=row[1])

    def exercise_map(self, user_id: int) -> Dict[int, Exercise]:
        return {
            eid: Exercise(id=eid, name=name, category=category)
            for eid, name, category in self.exercises.fetch_for_user(user_id)
        }

    @staticmethod
    def _parse_date(value: Optional[str], workout_id: int) -> Optional[datetime.datetime]:
        if not value:
            return None
        try:
            return datetime.datetime.fromisoformat(value)
        except ValueError:
            logger.warning("workout %s has an unreadable date %r", workout_id, value)
            return None

    def snapshot(
        self,
        user_id: int,
        start: Optional[datetime.datetime] = None,
        end: Optional[datetime.datetime] = None,
    ) -> List[Workout]:
        """Return the user's workouts newest first, optionally date-bounded."""
        rows = self.workouts.fetch_for_user(
            user_id,
            start.isoformat() if start else None,
            end.isoformat() if end else None,
        )
        exercises = self.exercise_map(user_id)
        entries: Dict[int, List[WorkoutEntry]] = {}
        for eid, wid, ex_id, sets, reps, weight, comment in self.entries.fetch_for_workouts(
            [r[0] for r in rows]
        ):
            exercise = exercises.get(ex_id) if ex_id is not None else None
            if exercise is None:
                logger.debug("entry %s references missing exercise %s", eid, ex_id)
            try:
                entry = WorkoutEntry(
                    id=eid,
                    sets=sets,
                    reps=reps,
                    weight=weight,
                    comment=comment,
                    exercise=exercise,
                )
            except ValidationError as e:
                logger.warning("skipping invalid entry %s: %s", eid, e)
                continue
            entries.setdefault(wid, []).append(entry)
        return [
            Workout(
                id=wid,
                date=self._parse_date(date, wid),
                notes=notes,
                entries=entries.get(wid, []),
            )
            for wid, date, notes in rows
        ]
