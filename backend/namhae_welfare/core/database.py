"""
Namhae Welfare — SQLite Storage
Persistent store for users, survey sessions, survey responses and the welfare catalog.
Each public method is one short transaction; driver errors surface as StorageError.
"""

import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator, Optional

from namhae_welfare.config import get_settings
from namhae_welfare.core.errors import StorageError
from namhae_welfare.utils.logger import logger


SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        user_key TEXT NOT NULL UNIQUE,
        name TEXT NOT NULL,
        birth_date TEXT NOT NULL,
        address TEXT NOT NULL,
        district_code TEXT NOT NULL,
        age_group TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS welfare_services (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE,
        category TEXT NOT NULL,
        description TEXT NOT NULL,
        benefits TEXT NOT NULL,
        requirements TEXT NOT NULL,
        contact_info TEXT NOT NULL,
        is_national INTEGER NOT NULL,
        target_age_min INTEGER NOT NULL,
        target_age_max INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS survey_sessions (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL REFERENCES users (id),
        status TEXT NOT NULL CHECK (status IN ('active', 'completed')),
        created_at TEXT NOT NULL,
        completed_at TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS survey_responses (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        session_id TEXT NOT NULL REFERENCES survey_sessions (id),
        category TEXT NOT NULL,
        question_id INTEGER NOT NULL,
        question TEXT NOT NULL,
        answer TEXT NOT NULL,
        score INTEGER NOT NULL CHECK (score BETWEEN 1 AND 5),
        answered_at TEXT NOT NULL,
        UNIQUE (session_id, question_id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_survey_sessions_user ON survey_sessions(user_id, created_at)",
)


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class WelfareDatabase:
    """SQLite-backed storage for the survey backend."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path or get_settings().resolved_database_path
        self._lock = threading.Lock()
        self._initialize()
        logger.info(f"Welfare database ready at: {self.db_path}")

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path), timeout=5.0)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                conn = self._connect()
            except sqlite3.Error as exc:
                logger.error(f"Cannot open database {self.db_path}: {exc}")
                raise StorageError() from exc
            try:
                with conn:
                    yield conn
            except sqlite3.Error as exc:
                logger.error(f"Database operation failed: {exc}")
                raise StorageError() from exc
            finally:
                conn.close()

    def _initialize(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._transaction() as conn:
            for statement in SCHEMA:
                conn.execute(statement)

    # ──────────────────────────────────────────────────────────────
    # Users
    # ──────────────────────────────────────────────────────────────

    def insert_user(self, user: dict) -> None:
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO users (
                    id, user_key, name, birth_date, address,
                    district_code, age_group, created_at
                )
                VALUES (:id, :user_key, :name, :birth_date, :address,
                        :district_code, :age_group, :created_at)
                """,
                user,
            )

    def get_user_by_key(self, user_key: str) -> Optional[dict]:
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE user_key = ?", (user_key,)
            ).fetchone()
        return dict(row) if row else None

    def get_user_by_id(self, user_id: str) -> Optional[dict]:
        with self._transaction() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return dict(row) if row else None

    # ──────────────────────────────────────────────────────────────
    # Survey Sessions
    # ──────────────────────────────────────────────────────────────

    def insert_session(self, session_id: str, user_id: str) -> dict:
        created_at = utc_now()
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO survey_sessions (id, user_id, status, created_at)
                VALUES (?, ?, 'active', ?)
                """,
                (session_id, user_id, created_at),
            )
        return {
            "id": session_id,
            "user_id": user_id,
            "status": "active",
            "created_at": created_at,
            "completed_at": None,
        }

    def get_session(self, session_id: str) -> Optional[dict]:
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT * FROM survey_sessions WHERE id = ?", (session_id,)
            ).fetchone()
        return dict(row) if row else None

    def latest_session_for_user(self, user_id: str) -> Optional[dict]:
        with self._transaction() as conn:
            row = conn.execute(
                """
                SELECT * FROM survey_sessions
                WHERE user_id = ?
                ORDER BY created_at DESC, rowid DESC
                LIMIT 1
                """,
                (user_id,),
            ).fetchone()
        return dict(row) if row else None

    # ──────────────────────────────────────────────────────────────
    # Survey Responses
    # ──────────────────────────────────────────────────────────────

    def save_responses(
        self,
        session_id: str,
        responses: Iterable[dict],
        required_question_ids: Iterable[int],
    ) -> bool:
        """
        Upsert answers keyed by (session_id, question_id), then complete the
        session if every required question now has an answer.
        Both steps share one transaction. Returns True if the session moved
        to 'completed' in this call.
        """
        answered_at = utc_now()
        required = sorted(set(required_question_ids))

        with self._transaction() as conn:
            for response in responses:
                conn.execute(
                    """
                    INSERT INTO survey_responses (
                        session_id, category, question_id, question,
                        answer, score, answered_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(session_id, question_id) DO UPDATE SET
                        category = excluded.category,
                        question = excluded.question,
                        answer = excluded.answer,
                        score = excluded.score,
                        answered_at = excluded.answered_at
                    """,
                    (
                        session_id,
                        response["category"],
                        response["question_id"],
                        response["question"],
                        response["answer"],
                        response["score"],
                        answered_at,
                    ),
                )

            placeholders = ", ".join("?" for _ in required)
            cursor = conn.execute(
                f"""
                UPDATE survey_sessions
                SET status = 'completed', completed_at = ?
                WHERE id = ?
                  AND status = 'active'
                  AND (
                      SELECT COUNT(DISTINCT question_id) FROM survey_responses
                      WHERE session_id = ? AND question_id IN ({placeholders})
                  ) = ?
                """,
                (answered_at, session_id, session_id, *required, len(required)),
            )
            return cursor.rowcount == 1

    def list_responses(self, session_id: str) -> list[dict]:
        with self._transaction() as conn:
            rows = conn.execute(
                """
                SELECT * FROM survey_responses
                WHERE session_id = ?
                ORDER BY question_id
                """,
                (session_id,),
            ).fetchall()
        return [dict(row) for row in rows]

    # ──────────────────────────────────────────────────────────────
    # Welfare Catalog
    # ──────────────────────────────────────────────────────────────

    def seed_welfare_services(self, services: Iterable[dict]) -> int:
        """Insert the static catalog into an empty table. Returns rows inserted."""
        with self._transaction() as conn:
            existing = conn.execute("SELECT COUNT(*) FROM welfare_services").fetchone()[0]
            if existing:
                return 0
            inserted = 0
            for service in services:
                conn.execute(
                    """
                    INSERT INTO welfare_services (
                        name, category, description, benefits, requirements,
                        contact_info, is_national, target_age_min, target_age_max
                    )
                    VALUES (:name, :category, :description, :benefits, :requirements,
                            :contact_info, :is_national, :target_age_min, :target_age_max)
                    """,
                    service,
                )
                inserted += 1
        return inserted

    def list_welfare_services(self) -> list[dict]:
        with self._transaction() as conn:
            rows = conn.execute("SELECT * FROM welfare_services ORDER BY id").fetchall()
        return [dict(row) for row in rows]

    def ping(self) -> bool:
        try:
            with self._transaction() as conn:
                conn.execute("SELECT 1")
            return True
        except StorageError:
            return False


_database: Optional[WelfareDatabase] = None


def get_database() -> WelfareDatabase:
    """Returns a cached database instance."""
    global _database
    if _database is None:
        _database = WelfareDatabase()
    return _database


def reset_database() -> None:
    """Drop the cached instance so the next call re-reads settings."""
    global _database
    _database = None
