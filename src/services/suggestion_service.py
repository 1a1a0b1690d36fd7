"""Suggested-videos engine.

Given a seed video, builds one ordered, duplicate-free sequence of candidates:
tag matches first (by match count, then recency, then id), followed by a
random filler sample so that a page stays full when matches are scarce.
Seeds without usable tags get filler only.
"""

import asyncio
import logging
import os
import uuid
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, TypeVar

from models.video import Candidate, SuggestionItem, SuggestionPage, VideoRecord
from services.tag_matcher import TagFilter, rank_matches
from services.video_store.base import VideoStore
from utils.config import load_config

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SuggestionError(Exception):
    """Base error for suggestion requests the caller can correct."""

    def __init__(self, video_id: str, message: str):
        super().__init__(message)
        self.video_id = video_id


class InvalidSeedError(SuggestionError):
    """The seed identifier is not a well-formed video ID."""

    def __init__(self, video_id: str):
        super().__init__(video_id, f"Invalid video id: {video_id!r}")


class SeedNotFoundError(SuggestionError):
    """No video exists for the seed identifier."""

    def __init__(self, video_id: str):
        super().__init__(video_id, f"Video not found: {video_id}")


@dataclass
class SuggestionConfig:
    """Configuration for suggestion paging and pool sizes."""

    default_limit: int = 10
    max_limit: int = 50
    pool_multiplier: int = 10

    @classmethod
    def from_config(cls, config: Optional[dict] = None) -> "SuggestionConfig":
        """Create SuggestionConfig from application config or environment variables."""
        if config is None:
            config = load_config()

        return cls(
            default_limit=int(
                config.get("suggestion_default_limit", os.getenv("SUGGESTION_DEFAULT_LIMIT", "10"))
            ),
            max_limit=int(
                config.get("suggestion_max_limit", os.getenv("SUGGESTION_MAX_LIMIT", "50"))
            ),
            pool_multiplier=int(
                config.get(
                    "suggestion_pool_multiplier", os.getenv("SUGGESTION_POOL_MULTIPLIER", "10")
                )
            ),
        )


def parse_video_id(value: str) -> str:
    """Return the canonical form of a video ID.

    Raises:
        InvalidSeedError: If the value is not a UUID
    """
    try:
        return str(uuid.UUID(str(value).strip()))
    except (ValueError, AttributeError, TypeError):
        raise InvalidSeedError(str(value)) from None


def clamp_page(page: Optional[int]) -> int:
    return max(1, int(page or 1))


def clamp_limit(limit: Optional[int], max_limit: int = 50, default: int = 10) -> int:
    if limit is None:
        limit = default
    return min(max(1, int(limit)), max(1, max_limit))


def merge_candidates(
    matched: Iterable[Candidate], filler: Iterable[Candidate]
) -> list[Candidate]:
    """Concatenate matched then filler candidates, keeping each video's first occurrence.

    Matched candidates come first, so a video present in both pools keeps its
    matched entry and position. Pure and stable.
    """
    merged: dict[str, Candidate] = {}
    for group in (matched, filler):
        for candidate in group:
            if candidate.video_id not in merged:
                merged[candidate.video_id] = candidate
    return list(merged.values())


def paginate(sequence: Sequence[T], page: int, limit: int) -> list[T]:
    """Return the 1-based page of the sequence; empty when past the end."""
    start = (page - 1) * limit
    return list(sequence[start : start + limit])


def pool_size_for(limit: int, pool_multiplier: int) -> int:
    """Size of each candidate pool for a request.

    Does not depend on the page number; pages past the merged pool are empty.
    """
    return max(1, limit) * max(1, pool_multiplier)


def _as_filler(records: Iterable[VideoRecord]) -> list[Candidate]:
    return [Candidate(video=record) for record in records]


class SuggestionService:
    """Builds suggestion pages for a seed video from a VideoStore."""

    def __init__(self, store: VideoStore, config: Optional[SuggestionConfig] = None):
        self.store = store
        self.config = config or SuggestionConfig.from_config()

    async def get_suggestions(
        self,
        seed_id: str,
        page: Optional[int] = 1,
        limit: Optional[int] = None,
    ) -> SuggestionPage:
        """Get a page of videos similar to the seed.

        Args:
            seed_id: ID of the seed video
            page: 1-based page number, clamped to at least 1
            limit: Page size, clamped to [1, max_limit]

        Returns:
            SuggestionPage with owners attached to each item

        Raises:
            InvalidSeedError: If seed_id is malformed
            SeedNotFoundError: If no video has this ID
        """
        video_id = parse_video_id(seed_id)
        page = clamp_page(page)
        limit = clamp_limit(limit, self.config.max_limit, self.config.default_limit)

        seed = await self.store.get_video(video_id)
        if seed is None:
            raise SeedNotFoundError(video_id)

        tag_filter = TagFilter.from_tags(seed.tags)
        pool_size = pool_size_for(limit, self.config.pool_multiplier)

        if tag_filter.is_empty:
            logger.info(f"Seed {video_id} has no usable tags, serving filler only")
            filler_records = await self.store.sample_random_published_excluding(
                video_id, pool_size
            )
            matched: list[Candidate] = []
        else:
            match_records, filler_records = await asyncio.gather(
                self.store.find_published_excluding(video_id, tag_filter, pool_size),
                self.store.sample_random_published_excluding(video_id, pool_size),
            )
            matched = rank_matches(tag_filter, match_records, pool_size)

        merged = merge_candidates(matched, _as_filler(filler_records))
        page_candidates = paginate(merged, page, limit)
        owners = await self.store.resolve_owners(c.video.owner_id for c in page_candidates)

        logger.info(
            f"Suggestions for {video_id}: page={page} limit={limit} "
            f"matched={len(matched)} merged={len(merged)} returned={len(page_candidates)}"
        )

        return SuggestionPage(
            items=[
                SuggestionItem(candidate=c, owner=owners.get(c.video.owner_id))
                for c in page_candidates
            ],
            page=page,
            limit=limit,
            total=len(merged),
            matched=len(matched),
            fallback=tag_filter.is_empty,
        )
