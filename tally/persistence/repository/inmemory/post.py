"""In-memory post repository for testing."""

from typing import Optional, Sequence

from tally.domain.error import NotFoundError
from tally.domain.model.post import Post
from tally.domain.repository.post import PostRepository
from tally.domain.value import PostId

from .store import InMemoryStore


class InMemoryPostRepository(PostRepository):
    """In-memory implementation of PostRepository for testing."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID."""
        await self._store.io()
        return self._store.posts.get(post_id)

    async def find_by_ids(self, post_ids: Sequence[PostId]) -> list[Post]:
        """Find posts in the requested order."""
        return [
            self._store.posts[pid] for pid in post_ids if pid in self._store.posts
        ]

    async def save(self, post: Post) -> Post:
        """Save or update a post."""
        self._store.posts[post.id] = post
        return post

    async def apply_score_delta(self, post_id: PostId, delta: int) -> Post:
        """Add delta to the score without yielding between read and write."""
        await self._store.io()
        post = self._store.posts.get(post_id)
        if post is None:
            raise NotFoundError("Post", str(post_id))

        # Posts are immutable, so store an updated copy
        updated = post.model_copy(update={"score": post.current_score + delta})
        self._store.posts[post_id] = updated
        self._store.record(lambda: self._undo_delta(post_id, delta))
        return updated

    def _undo_delta(self, post_id: PostId, delta: int) -> None:
        post = self._store.posts.get(post_id)
        if post is not None:
            self._store.posts[post_id] = post.model_copy(
                update={"score": post.current_score - delta}
            )
