"""Pydantic request/response models for the TubeHub API."""

from datetime import datetime

from pydantic import BaseModel, Field

from models.video import OwnerSummary, SuggestionItem, SuggestionPage, VideoRecord

# =============================================================================
# Core Models
# =============================================================================


class RootResponse(BaseModel):
    """Root endpoint response."""

    message: str
    version: str

    model_config = {"json_schema_extra": {"examples": [{"message": "TubeHub API", "version": "1.0.0"}]}}


class HealthResponse(BaseModel):
    """Health check response."""

    status: str

    model_config = {"json_schema_extra": {"examples": [{"status": "healthy"}]}}


# =============================================================================
# Video Models
# =============================================================================


class OwnerSummaryResponse(BaseModel):
    """Owner display metadata."""

    id: str
    username: str
    display_name: str = ""
    avatar_url: str | None = None

    @classmethod
    def from_owner(cls, owner: OwnerSummary | None) -> "OwnerSummaryResponse | None":
        if owner is None:
            return None
        return cls(
            id=owner.owner_id,
            username=owner.username,
            display_name=owner.display_name,
            avatar_url=owner.avatar_url,
        )


class VideoSummaryResponse(BaseModel):
    """A suggested video."""

    id: str
    title: str
    tags: list[str] = Field(default_factory=list)
    thumbnail_url: str | None = None
    owner: OwnerSummaryResponse | None = None
    created_at: datetime
    views: int = 0
    is_published: bool = True
    match_count: int | None = None

    @classmethod
    def from_item(cls, item: SuggestionItem) -> "VideoSummaryResponse":
        video = item.candidate.video
        return cls(
            id=video.video_id,
            title=video.title,
            tags=list(video.tags),
            thumbnail_url=video.thumbnail_url,
            owner=OwnerSummaryResponse.from_owner(item.owner),
            created_at=video.created_at,
            views=video.views,
            is_published=video.is_published,
            match_count=item.candidate.match_count,
        )


class SuggestionPageResponse(BaseModel):
    """A page of suggested videos."""

    items: list[VideoSummaryResponse]
    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total: int = Field(ge=0)
    has_next_page: bool = False
    fallback: bool = False

    @classmethod
    def from_page(cls, page: SuggestionPage) -> "SuggestionPageResponse":
        return cls(
            items=[VideoSummaryResponse.from_item(item) for item in page.items],
            page=page.page,
            limit=page.limit,
            total=page.total,
            has_next_page=page.has_next_page,
            fallback=page.fallback,
        )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {
                            "id": "5a3c8e0e-2f7b-4d7c-9a51-2b8c0f1e4d11",
                            "title": "Gojo vs Sukuna breakdown",
                            "tags": ["anime", "gojo"],
                            "thumbnail_url": "https://cdn.example.com/thumbs/gojo.jpg",
                            "owner": {"id": "0b7f3c52-9f0e-4a7a-8a53-6f1d2a9e7c40", "username": "ayaka"},
                            "created_at": "2026-02-08T12:00:00+00:00",
                            "views": 1520,
                            "is_published": True,
                            "match_count": 2,
                        }
                    ],
                    "page": 1,
                    "limit": 10,
                    "total": 1,
                    "has_next_page": False,
                    "fallback": False,
                }
            ]
        }
    }


class VideoResponse(BaseModel):
    """Full video record."""

    id: str
    title: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    thumbnail_url: str | None = None
    video_url: str | None = None
    duration: float = 0.0
    owner_id: str
    owner: OwnerSummaryResponse | None = None
    views: int = 0
    is_published: bool = True
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, video: VideoRecord, owner: OwnerSummary | None = None) -> "VideoResponse":
        return cls(
            id=video.video_id,
            title=video.title,
            description=video.description,
            tags=list(video.tags),
            thumbnail_url=video.thumbnail_url,
            video_url=video.video_url,
            duration=video.duration,
            owner_id=video.owner_id,
            owner=OwnerSummaryResponse.from_owner(owner),
            views=video.views,
            is_published=video.is_published,
            created_at=video.created_at,
            updated_at=video.updated_at,
        )


class VideoListResponse(BaseModel):
    """A page of videos."""

    items: list[VideoResponse]
    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total: int = Field(ge=0)
    has_next_page: bool = False
