"""Lexical tag matching for video suggestions.

Seed tags are normalized (trimmed, lower-cased, de-duplicated) and split into
word tokens. A candidate matches a seed token when the token appears as a
whole word in one of the candidate's tags, so "gojo saturu" on the seed
matches a candidate tagged "gojo" while "cat" never matches "category".
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from models.video import Candidate, VideoRecord

logger = logging.getLogger(__name__)

MIN_TOKEN_LENGTH = 2

_WHITESPACE_RE = re.compile(r"\s+")
_TOKEN_SPLIT_RE = re.compile(r"[\s,._\-]+")


def normalize_tags(tags: Optional[Iterable[str]]) -> frozenset[str]:
    """Return the trimmed, lower-cased, de-duplicated set of non-empty tags."""
    if not tags:
        return frozenset()
    normalized = set()
    for tag in tags:
        if not tag:
            continue
        cleaned = _WHITESPACE_RE.sub(" ", str(tag)).strip().lower()
        if cleaned:
            normalized.add(cleaned)
    return frozenset(normalized)


def _split_words(tag: str) -> list[str]:
    return [word for word in _TOKEN_SPLIT_RE.split(tag.lower()) if word]


def tokenize_tags(tags: Optional[Iterable[str]]) -> frozenset[str]:
    """Split tags into unique word tokens of at least two characters.

    Separators are whitespace, comma, period, underscore and hyphen.
    """
    tokens = set()
    for tag in tags or ():
        for word in _split_words(tag):
            if len(word) >= MIN_TOKEN_LENGTH:
                tokens.add(word)
    return frozenset(tokens)


@dataclass(frozen=True)
class TagFilter:
    """Seed-derived tags and tokens used to select and score candidates."""

    tags: frozenset[str] = field(default_factory=frozenset)
    tokens: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_tags(cls, raw_tags: Optional[Iterable[str]]) -> "TagFilter":
        tags = normalize_tags(raw_tags)
        return cls(tags=tags, tokens=tokenize_tags(tags))

    @property
    def is_empty(self) -> bool:
        """True when the seed has no usable tokens and matching must be skipped."""
        return not self.tokens


def tag_words(tags: Optional[Iterable[str]]) -> frozenset[str]:
    """Whole words of the normalized tags, as seed tokens are matched against them."""
    words = set()
    for tag in normalize_tags(tags):
        words.update(_split_words(tag))
    return frozenset(words)


def match_count(tag_filter: TagFilter, candidate_tags: Optional[Iterable[str]]) -> int:
    """Count distinct seed tokens found as a whole word in any candidate tag.

    A token counts once no matter how many of the candidate's tags contain it.
    """
    return len(tag_filter.tokens & tag_words(candidate_tags))


def _rank_key(candidate: Candidate) -> tuple:
    # created_at is negated through its timestamp so a single ascending sort
    # yields score desc, recency desc, id asc
    return (
        -(candidate.match_count or 0),
        -candidate.video.created_at.timestamp(),
        candidate.video.video_id,
    )


def rank_matches(
    tag_filter: TagFilter, records: Iterable[VideoRecord], pool_size: int
) -> list[Candidate]:
    """Score candidate records and return the top pool_size matches.

    Records scoring zero are dropped.

    Args:
        tag_filter: Seed tags and tokens
        records: Candidate videos returned by the store
        pool_size: Maximum number of matches to keep

    Returns:
        Candidates ordered by match count desc, creation time desc, id asc
    """
    scanned = 0
    matched: list[Candidate] = []
    for record in records:
        scanned += 1
        score = match_count(tag_filter, record.tags)
        if score > 0:
            matched.append(Candidate(video=record, match_count=score))

    matched.sort(key=_rank_key)
    logger.debug(
        f"Ranked {len(matched)}/{scanned} candidate videos "
        f"against {len(tag_filter.tokens)} seed tokens"
    )
    return matched[: max(0, pool_size)]
