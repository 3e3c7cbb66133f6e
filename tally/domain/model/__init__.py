"""Domain model entities for Tally."""

from tally.domain.model.post import Post
from tally.domain.model.vote import Vote

__all__ = [
    "Post",
    "Vote",
]
