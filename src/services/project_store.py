"""SQLite-backed key-value storage for projects and the session user.

Projects are kept the way the browser client kept them: one JSON array under
a single key, plus a second key holding the active session's user record.
Uses aiosqlite for async database operations.
"""

import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional

import aiosqlite

from models.project import Project
from models.user import User

logger = logging.getLogger(__name__)

# Default database path
DEFAULT_DB_PATH = ".docugen/store.db"

PROJECTS_KEY = "docugen_projects"
SESSION_KEY = "docugen_session"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class KeyValueStore:
    """Async SQLite key-value table holding JSON values."""

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        """Initialize store with database path.

        Args:
            db_path: Path to SQLite database file. Parent directory
                     will be created if it doesn't exist.
        """
        self.db_path = Path(db_path)
        self.db: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open the connection and create the kv table."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self.db = await aiosqlite.connect(str(self.db_path))
        self.db.row_factory = aiosqlite.Row

        await self.db.execute("PRAGMA journal_mode=WAL")
        await self.db.execute("""
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        await self.db.commit()
        logger.info(f"Key-value store connected: {self.db_path}")

    async def close(self) -> None:
        """Close database connection."""
        if self.db:
            await self.db.close()
            self.db = None
            logger.info("Key-value store connection closed")

    def _require_db(self) -> aiosqlite.Connection:
        if self.db is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self.db

    async def get(self, key: str) -> Any:
        """Return the decoded value for a key, or None if absent or unreadable."""
        db = self._require_db()
        async with db.execute("SELECT value FROM kv WHERE key = ?", (key,)) as cursor:
            row = await cursor.fetchone()

        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError:
            logger.warning(f"Failed to parse JSON value for key {key}")
            return None

    async def set(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under a key."""
        db = self._require_db()
        await db.execute(
            "INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at",
            (key, json.dumps(value), _utc_now().isoformat()),
        )
        await db.commit()

    async def delete(self, key: str) -> bool:
        """Remove a key. Returns True if it existed."""
        db = self._require_db()
        cursor = await db.execute("DELETE FROM kv WHERE key = ?", (key,))
        await db.commit()
        return cursor.rowcount > 0


class ProjectStore:
    """Project and session persistence on top of a KeyValueStore.

    Every save is a read-modify-write of the whole project list, so writes
    are serialized with a lock.
    """

    def __init__(self, kv: KeyValueStore, clock: Callable[[], datetime] = _utc_now):
        self.kv = kv
        self.clock = clock
        self._lock = asyncio.Lock()

    async def _load_projects(self) -> list[dict]:
        data = await self.kv.get(PROJECTS_KEY)
        if not isinstance(data, list):
            return []
        return [item for item in data if isinstance(item, dict) and "id" in item]

    async def get_user_projects(self, user_id: str) -> list[Project]:
        """List a user's projects, most recently touched first."""
        projects = [
            Project.from_dict(item)
            for item in await self._load_projects()
            if str(item.get("userId")) == user_id
        ]
        projects.sort(key=lambda p: p.updated_at or p.created_at, reverse=True)
        return projects

    async def get_project(self, project_id: str) -> Optional[Project]:
        """Get a project by id, or None."""
        for item in await self._load_projects():
            if str(item["id"]) == project_id:
                return Project.from_dict(item)
        return None

    async def save_project(self, project: Project) -> Project:
        """Insert or update a project.

        An existing id is updated in place with its original ``created_at``;
        a new id is appended with ``created_at == updated_at == now``.

        Returns:
            The project as stored (timestamps filled in)
        """
        async with self._lock:
            projects = await self._load_projects()
            now = self.clock().isoformat()

            index = next(
                (i for i, item in enumerate(projects) if str(item["id"]) == project.id),
                None,
            )
            if index is not None:
                project.created_at = projects[index].get("createdAt") or project.created_at or now
                project.updated_at = now
                projects[index] = project.to_dict()
                logger.info(f"Updated project {project.id}")
            else:
                project.created_at = now
                project.updated_at = now
                projects.append(project.to_dict())
                logger.info(f"Created project {project.id}")

            await self.kv.set(PROJECTS_KEY, projects)
        return project

    async def delete_project(self, project_id: str) -> bool:
        """Delete a project. Missing ids are not an error.

        Returns:
            True if a project was removed
        """
        async with self._lock:
            projects = await self._load_projects()
            remaining = [item for item in projects if str(item["id"]) != project_id]
            if len(remaining) == len(projects):
                return False
            await self.kv.set(PROJECTS_KEY, remaining)

        logger.info(f"Deleted project {project_id}")
        return True

    async def get_current_user(self) -> Optional[User]:
        data = await self.kv.get(SESSION_KEY)
        if not isinstance(data, dict) or "id" not in data:
            return None
        return User.from_dict(data)

    async def set_current_user(self, user: User) -> None:
        await self.kv.set(SESSION_KEY, user.to_dict())

    async def clear_current_user(self) -> None:
        await self.kv.delete(SESSION_KEY)
