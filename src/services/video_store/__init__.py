"""Video store package: read interface and the SQLite implementation."""

from services.video_store.base import SORT_FIELDS, SORT_TYPES, VideoStore
from services.video_store.sqlite_store import SQLiteVideoStore

__all__ = ["SORT_FIELDS", "SORT_TYPES", "SQLiteVideoStore", "VideoStore"]
