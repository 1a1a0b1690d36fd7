"""Shared pytest fixtures for tubehub tests."""

import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Dict, Generator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from models.video import OwnerSummary, VideoRecord  # noqa: E402
from services.suggestion_service import SuggestionConfig  # noqa: E402
from services.video_store import SQLiteVideoStore, VideoStore  # noqa: E402

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
OWNER_ID = "0b7f3c52-9f0e-4a7a-8a53-6f1d2a9e7c40"
OTHER_OWNER_ID = "9d2e4f10-3c1b-4e8a-b5f7-1a2b3c4d5e6f"


def vid(n: int) -> str:
    """Deterministic video ID; ordering by ID follows n."""
    return f"00000000-0000-4000-8000-{n:012d}"


@pytest.fixture(name="vid")
def vid_fixture() -> Callable[[int], str]:
    """Expose the deterministic ID helper to tests."""
    return vid


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config(temp_dir: Path) -> Dict:
    """Sample configuration for testing."""
    return {
        "video_db_path": str(temp_dir / "videos.db"),
        "suggestion_default_limit": 10,
        "suggestion_max_limit": 50,
        "suggestion_pool_multiplier": 10,
        "list_default_limit": 20,
        "log_level": "INFO",
        "log_json": False,
        "cors_origins": ["http://localhost:5173"],
    }


@pytest.fixture
def suggestion_config() -> SuggestionConfig:
    """Suggestion settings independent of the environment."""
    return SuggestionConfig(default_limit=10, max_limit=50, pool_multiplier=10)


@pytest.fixture
def make_video() -> Callable[..., VideoRecord]:
    """Factory for VideoRecord objects; higher `age` means older."""

    def _make(
        n: int,
        tags: list[str] | None = None,
        age: int = 0,
        is_published: bool = True,
        owner_id: str = OWNER_ID,
        title: str | None = None,
        **kwargs,
    ) -> VideoRecord:
        return VideoRecord(
            video_id=vid(n),
            owner_id=owner_id,
            title=title or f"Video {n}",
            tags=list(tags or []),
            is_published=is_published,
            created_at=BASE_TIME - timedelta(hours=age),
            **kwargs,
        )

    return _make


@pytest.fixture
def owners() -> list[OwnerSummary]:
    """Two owners with display metadata."""
    return [
        OwnerSummary(
            owner_id=OWNER_ID,
            username="ayaka",
            display_name="Ayaka K",
            avatar_url="https://cdn.example.com/avatars/ayaka.png",
        ),
        OwnerSummary(owner_id=OTHER_OWNER_ID, username="ren", display_name="Ren"),
    ]


@pytest.fixture
def mock_store() -> AsyncMock:
    """Mock VideoStore returning empty results by default."""
    store = AsyncMock(spec=VideoStore)
    store.get_video.return_value = None
    store.find_published_excluding.return_value = []
    store.sample_random_published_excluding.return_value = []
    store.resolve_owners.return_value = {}
    store.list_videos.return_value = ([], 0)
    return store


@pytest_asyncio.fixture
async def video_store(temp_dir: Path, owners: list[OwnerSummary]):
    """Connected SQLite store with the sample owners loaded."""
    store = SQLiteVideoStore(str(temp_dir / "videos.db"))
    await store.connect()
    for owner in owners:
        await store.upsert_owner(owner)
    yield store
    await store.close()
