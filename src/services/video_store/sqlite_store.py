"""SQLite-based video store for the TubeHub API.

Uses aiosqlite for async database operations. Normalized tags are kept in a
video_tags table and their whole words in video_tag_words, so tag matches
can be scored and ranked in SQL.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

import aiosqlite

from models.video import OwnerSummary, VideoRecord
from services.tag_matcher import TagFilter, normalize_tags, tag_words
from services.video_store.base import SORT_FIELDS, SORT_TYPES, VideoStore

logger = logging.getLogger(__name__)

# Default database path
DEFAULT_DB_PATH = ".tubehub/videos.db"


def _to_iso(value: datetime) -> str:
    """Serialize a datetime as a sortable UTC ISO string."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _placeholders(count: int) -> str:
    return ", ".join("?" for _ in range(count))


class SQLiteVideoStore(VideoStore):
    """Async SQLite video store.

    One connection is shared by all requests; aiosqlite serializes access on
    its worker thread.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        """Initialize video store with database path.

        Args:
            db_path: Path to SQLite database file. Parent directory
                     will be created if it doesn't exist.
        """
        self.db_path = Path(db_path)
        self.db: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open the database connection and create the schema."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self.db = await aiosqlite.connect(str(self.db_path))
        self.db.row_factory = aiosqlite.Row

        # Enable WAL mode for better concurrent read performance
        await self.db.execute("PRAGMA journal_mode=WAL")

        await self.db.execute("""
            CREATE TABLE IF NOT EXISTS owners (
                id TEXT PRIMARY KEY,
                username TEXT NOT NULL,
                display_name TEXT NOT NULL DEFAULT '',
                avatar_url TEXT
            )
        """)

        await self.db.execute("""
            CREATE TABLE IF NOT EXISTS videos (
                id TEXT PRIMARY KEY,
                owner_id TEXT NOT NULL,
                title TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                tags JSON NOT NULL DEFAULT '[]',
                is_published INTEGER NOT NULL DEFAULT 1,
                views INTEGER NOT NULL DEFAULT 0,
                thumbnail_url TEXT,
                video_url TEXT,
                duration REAL NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        await self.db.execute("""
            CREATE TABLE IF NOT EXISTS video_tags (
                video_id TEXT NOT NULL,
                tag TEXT NOT NULL,
                PRIMARY KEY (video_id, tag)
            )
        """)

        await self.db.execute("""
            CREATE TABLE IF NOT EXISTS video_tag_words (
                video_id TEXT NOT NULL,
                word TEXT NOT NULL,
                PRIMARY KEY (video_id, word)
            )
        """)

        await self.db.execute("""
            CREATE INDEX IF NOT EXISTS idx_videos_published_created
            ON videos (is_published, created_at DESC)
        """)

        await self.db.execute("""
            CREATE INDEX IF NOT EXISTS idx_videos_owner
            ON videos (owner_id)
        """)

        await self.db.execute("""
            CREATE INDEX IF NOT EXISTS idx_video_tags_tag
            ON video_tags (tag)
        """)

        await self.db.execute("""
            CREATE INDEX IF NOT EXISTS idx_video_tag_words_word
            ON video_tag_words (word)
        """)

        await self.db.commit()
        logger.info(f"Video store connected: {self.db_path}")

    async def close(self) -> None:
        """Close database connection."""
        if self.db:
            await self.db.close()
            self.db = None
            logger.info("Video store connection closed")

    def _connection(self) -> aiosqlite.Connection:
        if self.db is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self.db

    async def get_video(self, video_id: str) -> Optional[VideoRecord]:
        db = self._connection()
        async with db.execute("SELECT * FROM videos WHERE id = ?", (video_id,)) as cursor:
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_video(row)

    async def find_published_excluding(
        self, exclude_id: str, tag_filter: TagFilter, pool_size: int
    ) -> list[VideoRecord]:
        db = self._connection()
        tokens = sorted(tag_filter.tokens)
        if not tokens or pool_size < 1:
            return []

        # Scoring and ordering happen in SQL so the LIMIT keeps the best
        # matches, not the newest ones
        query = f"""
            SELECT v.*, COUNT(w.word) AS match_score
            FROM videos v
            JOIN video_tag_words w ON w.video_id = v.id
            WHERE v.is_published = 1
              AND v.id != ?
              AND w.word IN ({_placeholders(len(tokens))})
            GROUP BY v.id
            ORDER BY match_score DESC, v.created_at DESC, v.id ASC
            LIMIT ?
        """

        async with db.execute(query, [exclude_id, *tokens, pool_size]) as cursor:
            rows = await cursor.fetchall()

        logger.debug(f"Tag matcher returned {len(rows)} videos for seed {exclude_id}")
        return [self._row_to_video(row) for row in rows]

    async def sample_random_published_excluding(
        self, exclude_id: str, pool_size: int
    ) -> list[VideoRecord]:
        db = self._connection()
        async with db.execute(
            "SELECT * FROM videos WHERE is_published = 1 AND id != ? ORDER BY RANDOM() LIMIT ?",
            (exclude_id, max(0, pool_size)),
        ) as cursor:
            rows = await cursor.fetchall()
        return [self._row_to_video(row) for row in rows]

    async def resolve_owners(self, owner_ids: Iterable[str]) -> dict[str, OwnerSummary]:
        db = self._connection()
        ids = sorted(set(owner_ids))
        if not ids:
            return {}

        async with db.execute(
            f"SELECT * FROM owners WHERE id IN ({_placeholders(len(ids))})", ids
        ) as cursor:
            rows = await cursor.fetchall()

        return {
            row["id"]: OwnerSummary(
                owner_id=row["id"],
                username=row["username"],
                display_name=row["display_name"],
                avatar_url=row["avatar_url"],
            )
            for row in rows
        }

    async def list_videos(
        self,
        page: int = 1,
        limit: int = 20,
        query: Optional[str] = None,
        sort_by: str = "created_at",
        sort_type: str = "desc",
        owner_id: Optional[str] = None,
    ) -> tuple[list[VideoRecord], int]:
        db = self._connection()
        if sort_by not in SORT_FIELDS:
            raise ValueError(f"Unsupported sort field: {sort_by}")
        if sort_type not in SORT_TYPES:
            raise ValueError(f"Unsupported sort type: {sort_type}")

        where = " WHERE 1=1"
        params: list[Any] = []

        if owner_id:
            where += " AND owner_id = ?"
            params.append(owner_id)
        if query and query.strip():
            needle = query.strip().lower()
            where += " AND (instr(lower(title), ?) > 0 OR instr(lower(description), ?) > 0)"
            params.extend([needle, needle])

        async with db.execute(f"SELECT COUNT(*) FROM videos{where}", params) as cursor:
            row = await cursor.fetchone()
            total = int(row[0]) if row else 0

        # pages past the end read nothing; also keeps OFFSET inside SQLite INTEGER range
        offset = min((max(1, page) - 1) * limit, total)
        async with db.execute(
            f"SELECT * FROM videos{where} ORDER BY {sort_by} {sort_type.upper()}, id ASC LIMIT ? OFFSET ?",
            [*params, limit, offset],
        ) as cursor:
            rows = await cursor.fetchall()

        return [self._row_to_video(row) for row in rows], total

    async def upsert_owner(self, owner: OwnerSummary) -> None:
        """Insert or replace an owner."""
        db = self._connection()
        await db.execute(
            "INSERT OR REPLACE INTO owners (id, username, display_name, avatar_url) VALUES (?, ?, ?, ?)",
            (owner.owner_id, owner.username, owner.display_name, owner.avatar_url),
        )
        await db.commit()

    async def upsert_video(self, video: VideoRecord) -> None:
        """Insert or replace a video and refresh its normalized tags and tag words."""
        db = self._connection()
        created_at = _to_iso(video.created_at)
        updated_at = _to_iso(video.updated_at) if video.updated_at else created_at

        await db.execute(
            """
            INSERT OR REPLACE INTO videos (
                id, owner_id, title, description, tags, is_published, views,
                thumbnail_url, video_url, duration, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                video.video_id,
                video.owner_id,
                video.title,
                video.description,
                json.dumps(list(video.tags)),
                1 if video.is_published else 0,
                video.views,
                video.thumbnail_url,
                video.video_url,
                video.duration,
                created_at,
                updated_at,
            ),
        )
        await db.execute("DELETE FROM video_tags WHERE video_id = ?", (video.video_id,))
        await db.executemany(
            "INSERT INTO video_tags (video_id, tag) VALUES (?, ?)",
            [(video.video_id, tag) for tag in sorted(normalize_tags(video.tags))],
        )
        await db.execute("DELETE FROM video_tag_words WHERE video_id = ?", (video.video_id,))
        await db.executemany(
            "INSERT INTO video_tag_words (video_id, word) VALUES (?, ?)",
            [(video.video_id, word) for word in sorted(tag_words(video.tags))],
        )
        await db.commit()

        logger.debug(f"Stored video {video.video_id} with {len(video.tags)} tags")

    async def get_stats(self) -> dict[str, int]:
        """Count owners, videos and published videos."""
        db = self._connection()
        stats = {}
        for key, query in (
            ("owners", "SELECT COUNT(*) FROM owners"),
            ("videos", "SELECT COUNT(*) FROM videos"),
            ("published", "SELECT COUNT(*) FROM videos WHERE is_published = 1"),
            ("tags", "SELECT COUNT(DISTINCT tag) FROM video_tags"),
        ):
            async with db.execute(query) as cursor:
                row = await cursor.fetchone()
                stats[key] = int(row[0]) if row else 0
        return stats

    def _row_to_video(self, row: aiosqlite.Row) -> VideoRecord:
        """Convert a database row to a VideoRecord."""
        try:
            tags = json.loads(row["tags"] or "[]")
        except json.JSONDecodeError:
            logger.warning(f"Failed to parse tags for video {row['id']}")
            tags = []

        return VideoRecord(
            video_id=row["id"],
            owner_id=row["owner_id"],
            title=row["title"],
            description=row["description"],
            tags=[str(tag) for tag in tags],
            is_published=bool(row["is_published"]),
            views=int(row["views"]),
            thumbnail_url=row["thumbnail_url"],
            video_url=row["video_url"],
            duration=float(row["duration"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
