"""End-to-end suggestion tests against a real SQLite store."""

from unittest.mock import patch

import pytest

from services.suggestion_service import SeedNotFoundError, SuggestionConfig, SuggestionService


@pytest.fixture
def service(video_store, suggestion_config):
    return SuggestionService(video_store, suggestion_config)


def _ids(result):
    return [item.candidate.video_id for item in result.items]


@pytest.mark.asyncio
async def test_related_videos_rank_ahead_of_unrelated(service, video_store, make_video, vid):
    """Seed tagged anime + 'gojo saturu'; 'anime' and 'gojo' candidates lead."""
    await video_store.upsert_video(make_video(1, ["anime", "gojo saturu"]))
    await video_store.upsert_video(make_video(2, ["anime"], age=3))
    await video_store.upsert_video(make_video(3, ["gojo"], age=1))
    await video_store.upsert_video(make_video(4, ["unrelated"], age=0))

    result = await service.get_suggestions(vid(1), page=1, limit=10)

    assert _ids(result) == [vid(3), vid(2), vid(4)]
    assert [item.candidate.match_count for item in result.items] == [1, 1, None]
    assert result.matched == 2
    assert result.items[0].owner.username == "ayaka"


@pytest.mark.asyncio
async def test_word_boundary_on_real_store(service, video_store, make_video, vid):
    """A 'cat' seed must not treat 'category' as a match."""
    await video_store.upsert_video(make_video(1, ["cat"]))
    await video_store.upsert_video(make_video(2, ["category"]))
    await video_store.upsert_video(make_video(3, ["cat toys"], age=1))

    result = await service.get_suggestions(vid(1), page=1, limit=10)

    matched = [item.candidate.video_id for item in result.items if item.candidate.is_match]
    assert matched == [vid(3)]
    assert vid(2) in _ids(result)


@pytest.mark.asyncio
async def test_untagged_seed_gets_random_full_page(service, video_store, make_video, vid):
    """Seed without tags and five published videos: three distinct filler videos."""
    await video_store.upsert_video(make_video(1, []))
    for n in range(2, 7):
        await video_store.upsert_video(make_video(n, ["anime"]))

    with patch.object(
        video_store, "find_published_excluding", wraps=video_store.find_published_excluding
    ) as matcher:
        first = await service.get_suggestions(vid(1), page=1, limit=3)
        second = await service.get_suggestions(vid(1), page=1, limit=3)

    matcher.assert_not_called()
    for result in (first, second):
        ids = _ids(result)
        assert len(ids) == 3
        assert len(set(ids)) == 3
        assert vid(1) not in ids
        assert result.fallback is True
        assert all(not item.candidate.is_match for item in result.items)


@pytest.mark.asyncio
async def test_matches_backfilled_with_filler(service, video_store, make_video, vid):
    """Two matches, ten other published videos, limit 5: 2 matched then 3 filler."""
    await video_store.upsert_video(make_video(1, ["speedrun"]))
    await video_store.upsert_video(make_video(2, ["speedrun"], age=1))
    await video_store.upsert_video(make_video(3, ["any% speedrun"], age=2))
    for n in range(4, 12):
        await video_store.upsert_video(make_video(n, ["cooking"], age=n))
    await video_store.upsert_video(make_video(12, ["speedrun"], is_published=False))

    result = await service.get_suggestions(vid(1), page=1, limit=5)

    ids = _ids(result)
    assert len(ids) == 5
    assert len(set(ids)) == 5
    assert ids[:2] == [vid(2), vid(3)]
    assert all(not item.candidate.is_match for item in result.items[2:])
    assert vid(1) not in ids
    assert vid(12) not in ids
    assert result.total == 10


@pytest.mark.asyncio
async def test_unknown_seed_never_queries_candidates(service, video_store, vid):
    """A missing seed raises before the matcher or sampler run."""
    with patch.object(
        video_store, "find_published_excluding", wraps=video_store.find_published_excluding
    ) as matcher, patch.object(
        video_store,
        "sample_random_published_excluding",
        wraps=video_store.sample_random_published_excluding,
    ) as sampler:
        with pytest.raises(SeedNotFoundError):
            await service.get_suggestions(vid(1))

    matcher.assert_not_called()
    sampler.assert_not_called()


@pytest.mark.asyncio
async def test_unpublished_seed_still_gets_suggestions(service, video_store, make_video, vid):
    await video_store.upsert_video(make_video(1, ["anime"], is_published=False))
    await video_store.upsert_video(make_video(2, ["anime"]))

    result = await service.get_suggestions(vid(1))

    assert _ids(result) == [vid(2)]
    assert result.items[0].candidate.match_count == 1


@pytest.mark.asyncio
async def test_empty_store_is_empty_page(service, video_store, make_video, vid):
    await video_store.upsert_video(make_video(1, ["anime"]))

    result = await service.get_suggestions(vid(1))

    assert result.items == []
    assert result.total == 0
    assert result.has_next_page is False


@pytest.mark.asyncio
async def test_best_match_survives_small_pool(video_store, make_video, vid):
    """An old video matching every seed token outranks many newer partial matches."""
    service = SuggestionService(
        video_store, SuggestionConfig(default_limit=5, max_limit=50, pool_multiplier=1)
    )
    await video_store.upsert_video(make_video(1, ["anime", "gojo", "jjk"]))
    await video_store.upsert_video(make_video(2, ["anime", "gojo", "jjk"], age=500))
    for n in range(3, 8):
        await video_store.upsert_video(make_video(n, ["anime"], age=n))

    result = await service.get_suggestions(vid(1), page=1, limit=5)

    assert result.items[0].candidate.video_id == vid(2)
    assert result.items[0].candidate.match_count == 3
    assert result.matched == 5
    assert [item.candidate.video_id for item in result.items[1:]] == [vid(3), vid(4), vid(5), vid(6)]


@pytest.mark.asyncio
async def test_huge_page_is_empty(service, video_store, make_video, vid):
    await video_store.upsert_video(make_video(1, ["anime"]))
    await video_store.upsert_video(make_video(2, ["anime"]))

    result = await service.get_suggestions(vid(1), page=10**19, limit=10)

    assert result.items == []
    assert result.total == 1
    assert result.has_next_page is False
