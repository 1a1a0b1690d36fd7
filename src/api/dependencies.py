"""Service singletons and dependency injection for the TubeHub API."""

from services.suggestion_service import SuggestionConfig, SuggestionService
from services.video_store import SQLiteVideoStore, VideoStore
from utils.config import load_config

# Service singletons
_config: dict | None = None
_video_store: SQLiteVideoStore | None = None
_suggestion_service: SuggestionService | None = None


def get_app_config() -> dict:
    """Get the application config, loaded once per process."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


async def get_video_store() -> VideoStore:
    """Get or create the global video store, connecting on first use."""
    global _video_store
    if _video_store is None:
        store = SQLiteVideoStore(get_app_config()["video_db_path"])
        await store.connect()
        _video_store = store
    return _video_store


async def get_suggestion_service() -> SuggestionService:
    """Get or create the suggestion service instance."""
    global _suggestion_service
    if _suggestion_service is None:
        store = await get_video_store()
        _suggestion_service = SuggestionService(store, SuggestionConfig.from_config(get_app_config()))
    return _suggestion_service


async def close_video_store() -> None:
    """Close the global video store connection.

    Call this during application shutdown to properly close the database.
    """
    global _video_store, _suggestion_service
    _suggestion_service = None
    if _video_store is not None:
        await _video_store.close()
        _video_store = None
