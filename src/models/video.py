"""Video-related data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class OwnerSummary:
    """Display metadata for the owner of a video."""

    owner_id: str
    username: str
    display_name: str = ""
    avatar_url: Optional[str] = None


@dataclass
class VideoRecord:
    """A video as stored in the video store.

    Tags keep the uploader's original order and spelling; matching works on
    normalized copies and never mutates the record.
    """

    video_id: str
    owner_id: str
    title: str
    created_at: datetime
    description: str = ""
    tags: list[str] = field(default_factory=list)
    is_published: bool = True
    views: int = 0
    updated_at: Optional[datetime] = None
    thumbnail_url: Optional[str] = None
    video_url: Optional[str] = None
    duration: float = 0.0  # in seconds


@dataclass
class Candidate:
    """A video considered for a suggestion page.

    match_count is None for filler candidates drawn by random sampling.
    """

    video: VideoRecord
    match_count: Optional[int] = None

    @property
    def video_id(self) -> str:
        return self.video.video_id

    @property
    def is_match(self) -> bool:
        return self.match_count is not None


@dataclass
class SuggestionItem:
    """A candidate on a result page with its owner attached."""

    candidate: Candidate
    owner: Optional[OwnerSummary] = None


@dataclass
class SuggestionPage:
    """One page of suggestions for a seed video."""

    items: list[SuggestionItem]
    page: int
    limit: int
    total: int  # length of the merged, de-duplicated sequence
    matched: int = 0
    fallback: bool = False  # True when no seed tokens existed

    @property
    def has_next_page(self) -> bool:
        return self.page * self.limit < self.total
