"""Post domain service."""

import logfire

from tally.domain.error import NotFoundError
from tally.domain.model.post import Post
from tally.domain.repository import PostRepository
from tally.domain.value import PostId

from .base import Service


class PostService(Service):
    """Domain service for post operations."""

    def __init__(self, post_repository: PostRepository) -> None:
        """Initialize post service.

        Args:
            post_repository: Post repository
        """
        self.post_repository = post_repository

    async def save_post(self, post: Post) -> Post:
        """Save a post.

        Args:
            post: Post to save

        Returns:
            Saved post
        """
        with logfire.span(
            "post_service.save_post", post_id=str(post.id), title=post.title
        ):
            saved = await self.post_repository.save(post)
            logfire.info("Post saved", post_id=str(saved.id))
            return saved

    async def get_post(self, post_id: PostId) -> Post:
        """Get a live post by ID.

        Args:
            post_id: Post ID

        Returns:
            The post

        Raises:
            NotFoundError: If the post does not exist or was deleted
        """
        with logfire.span("post_service.get_post", post_id=str(post_id)):
            post = await self.post_repository.find_by_id(post_id)

            if post is None or post.is_deleted:
                logfire.warn("Post not found", post_id=str(post_id))
                raise NotFoundError("Post", str(post_id))

            return post

    async def get_posts_in_order(self, post_ids: list[PostId]) -> list[Post]:
        """Load posts in the given order, skipping missing and deleted ones."""
        if not post_ids:
            return []

        posts = await self.post_repository.find_by_ids(post_ids)
        return [p for p in posts if not p.is_deleted]
