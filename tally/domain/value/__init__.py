"""Domain value objects for Tally."""

from tally.domain.value.identifiers import PostId, UserId, VoteId
from tally.domain.value.types import PreferenceKind, VoteDirection, VoteState

__all__ = [
    # Identifiers
    "UserId",
    "PostId",
    "VoteId",
    # Types
    "VoteDirection",
    "VoteState",
    "PreferenceKind",
]
