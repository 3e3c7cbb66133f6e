"""Test configuration and fixtures."""

from datetime import datetime
from uuid import uuid4

from tally.domain.model import Post, Vote
from tally.domain.repository import PostRepository
from tally.domain.value import PostId, UserId


def make_post(
    title: str = "Test Post",
    score: int | None = 0,
    deleted: bool = False,
) -> Post:
    """Helper function to build test posts.

    Args:
        title: Post title
        score: Initial score (None for a post that was never voted on)
        deleted: Whether the post is soft-deleted

    Returns:
        Post domain model
    """
    return Post(
        id=PostId(uuid4()),
        title=title,
        author_id=UserId(uuid4()),
        score=score,
        created_at=datetime.now(),
        deleted_at=datetime.now() if deleted else None,
    )


def new_user() -> UserId:
    return UserId(uuid4())


async def seed_post(post_repo: PostRepository, **kwargs) -> Post:
    """Save a fresh post and return it."""
    return await post_repo.save(make_post(**kwargs))


def total_contribution(votes: list[Vote]) -> int:
    """Sum of vote contributions; must always equal the post score."""
    return sum(v.contribution for v in votes)
