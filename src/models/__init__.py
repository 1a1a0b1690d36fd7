# Data models for tubehub
from .video import Candidate, OwnerSummary, SuggestionItem, SuggestionPage, VideoRecord

__all__ = [
    "Candidate",
    "OwnerSummary",
    "SuggestionItem",
    "SuggestionPage",
    "VideoRecord",
]
