"""Base abstraction for video stores."""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from models.video import OwnerSummary, VideoRecord
from services.tag_matcher import TagFilter

SORT_FIELDS = ("created_at", "views", "title", "duration")
SORT_TYPES = ("asc", "desc")


class VideoStore(ABC):
    """Read access to published videos and their owners.

    Every call is an independent point-in-time read. Implementations do not
    retry; failures propagate to the caller.
    """

    @abstractmethod
    async def get_video(self, video_id: str) -> Optional[VideoRecord]:
        """Get a video by ID, published or not.

        Args:
            video_id: Video identifier

        Returns:
            VideoRecord or None if not found
        """

    @abstractmethod
    async def find_published_excluding(
        self, exclude_id: str, tag_filter: TagFilter, pool_size: int
    ) -> list[VideoRecord]:
        """Find the best-matching published videos for the filter.

        A video matches when a filter token equals a whole word of one of its
        normalized tags. Its score is the number of distinct tokens matched.

        Args:
            exclude_id: Video to leave out (the seed)
            tag_filter: Seed tags and tokens
            pool_size: Maximum rows to return

        Returns:
            Records ordered by score desc, created_at desc, id asc
        """

    @abstractmethod
    async def sample_random_published_excluding(
        self, exclude_id: str, pool_size: int
    ) -> list[VideoRecord]:
        """Draw a uniform random sample of published videos, without replacement.

        Args:
            exclude_id: Video to leave out (the seed)
            pool_size: Maximum sample size

        Returns:
            Records in no meaningful order
        """

    @abstractmethod
    async def resolve_owners(self, owner_ids: Iterable[str]) -> dict[str, OwnerSummary]:
        """Look up display metadata for a set of owners.

        Unknown IDs are simply absent from the result.
        """

    @abstractmethod
    async def list_videos(
        self,
        page: int = 1,
        limit: int = 20,
        query: Optional[str] = None,
        sort_by: str = "created_at",
        sort_type: str = "desc",
        owner_id: Optional[str] = None,
    ) -> tuple[list[VideoRecord], int]:
        """List videos with optional text search and owner filter.

        Args:
            page: 1-based page number
            limit: Page size
            query: Case-insensitive substring matched against title or description
            sort_by: One of SORT_FIELDS
            sort_type: "asc" or "desc"
            owner_id: Only videos owned by this owner

        Returns:
            Tuple of (page of records, total matching count)
        """
