"""Post repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from tally.domain.model.post import Post
from tally.domain.value import PostId


class PostRepository(ABC):
    """Repository for Post aggregate.

    Defines the contract for post persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID.

        Args:
            post_id: The post's unique identifier

        Returns:
            The post if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_ids(self, post_ids: Sequence[PostId]) -> List[Post]:
        """Find several posts, preserving the order of ``post_ids``.

        Unknown IDs are skipped.

        Args:
            post_ids: Post IDs in the desired order

        Returns:
            Posts found, in the order requested
        """
        pass

    @abstractmethod
    async def save(self, post: Post) -> Post:
        """Save or update a post.

        Args:
            post: The post to save

        Returns:
            The saved post
        """
        pass

    @abstractmethod
    async def apply_score_delta(self, post_id: PostId, delta: int) -> Post:
        """Atomically add ``delta`` to the post score.

        An unset score is treated as zero. The increment is applied by the
        store itself, never as read-modify-write on a fetched copy.

        Args:
            post_id: Post ID
            delta: Signed score change

        Returns:
            The post with its new score

        Raises:
            NotFoundError: If the post does not exist
            StorageError: If the write fails
        """
        pass
