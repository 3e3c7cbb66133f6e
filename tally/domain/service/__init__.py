"""Domain services."""

from .base import Service
from .post_service import PostService
from .preference_service import PreferenceService
from .recommender import RecommenderClient
from .vote_service import VoteService
from .vote_state import VoteTransition, next_vote_state

__all__ = [
    "PostService",
    "PreferenceService",
    "RecommenderClient",
    "Service",
    "VoteService",
    "VoteTransition",
    "next_vote_state",
]
