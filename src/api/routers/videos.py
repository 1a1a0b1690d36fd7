"""Video routes for the TubeHub API: lookup, listing and suggestions."""

import logging

from api.dependencies import get_app_config, get_suggestion_service, get_video_store
from api.schemas import SuggestionPageResponse, VideoListResponse, VideoResponse
from fastapi import APIRouter, Depends, HTTPException, Query
from services.suggestion_service import (
    InvalidSeedError,
    SeedNotFoundError,
    SuggestionService,
    clamp_limit,
    clamp_page,
    parse_video_id,
)
from services.video_store import SORT_FIELDS, SORT_TYPES, VideoStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/videos", tags=["Videos"])

MAX_LIST_LIMIT = 100


@router.get(
    "",
    response_model=VideoListResponse,
    summary="List videos",
    description="Paginated video listing with optional text search, owner filter and sorting.",
)
async def list_videos(
    page: int = Query(1, description="1-based page number"),
    limit: int | None = Query(None, description="Page size"),
    query: str | None = Query(None, description="Case-insensitive search in title and description"),
    sort_by: str = Query("created_at", description=f"One of: {', '.join(SORT_FIELDS)}"),
    sort_type: str = Query("desc", description="asc or desc"),
    owner_id: str | None = Query(None, description="Only videos from this owner"),
    store: VideoStore = Depends(get_video_store),
    config: dict = Depends(get_app_config),
) -> VideoListResponse:
    """List videos."""
    if sort_by not in SORT_FIELDS:
        raise HTTPException(status_code=400, detail=f"sort_by must be one of: {', '.join(SORT_FIELDS)}")
    if sort_type not in SORT_TYPES:
        raise HTTPException(status_code=400, detail="sort_type must be 'asc' or 'desc'")

    page = clamp_page(page)
    limit = clamp_limit(limit, MAX_LIST_LIMIT, config["list_default_limit"])

    videos, total = await store.list_videos(
        page=page,
        limit=limit,
        query=query,
        sort_by=sort_by,
        sort_type=sort_type,
        owner_id=owner_id,
    )
    owners = await store.resolve_owners(v.owner_id for v in videos)

    return VideoListResponse(
        items=[VideoResponse.from_record(v, owners.get(v.owner_id)) for v in videos],
        page=page,
        limit=limit,
        total=total,
        has_next_page=page * limit < total,
    )


@router.get(
    "/{video_id}",
    response_model=VideoResponse,
    summary="Get video",
    description="Returns a single video with its owner.",
)
async def get_video(video_id: str, store: VideoStore = Depends(get_video_store)) -> VideoResponse:
    """Get a video by ID."""
    try:
        video_id = parse_video_id(video_id)
    except InvalidSeedError as e:
        raise HTTPException(status_code=400, detail=str(e))

    video = await store.get_video(video_id)
    if video is None:
        raise HTTPException(status_code=404, detail="Video not found")

    owners = await store.resolve_owners([video.owner_id])
    return VideoResponse.from_record(video, owners.get(video.owner_id))


@router.get(
    "/{video_id}/suggestions",
    response_model=SuggestionPageResponse,
    summary="Suggested videos",
    description=(
        "Videos similar to the given one by tag, relevant matches first and random "
        "published videos as filler. Out-of-range page and limit values are clamped."
    ),
)
async def get_suggestions(
    video_id: str,
    page: int = Query(1, description="1-based page number"),
    limit: int | None = Query(None, description="Page size (1-50)"),
    service: SuggestionService = Depends(get_suggestion_service),
) -> SuggestionPageResponse:
    """Get suggested videos for a seed video."""
    try:
        result = await service.get_suggestions(video_id, page=page, limit=limit)
    except InvalidSeedError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SeedNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception(f"Suggestion request failed for {video_id}")
        raise

    return SuggestionPageResponse.from_page(result)
