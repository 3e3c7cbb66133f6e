"""Vote repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from tally.domain.model.vote import Vote
from tally.domain.value import PostId, UserId


class VoteRepository(ABC):
    """Repository for Vote entity (the vote ledger).

    Defines the contract for vote persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_user_and_post(
        self, user_id: UserId, post_id: PostId
    ) -> Optional[Vote]:
        """Find a user's vote on a post.

        Args:
            user_id: The user's ID
            post_id: The post's ID

        Returns:
            The vote if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, vote: Vote) -> Vote:
        """Insert a new vote.

        Args:
            vote: The vote to insert

        Returns:
            The created vote

        Raises:
            ConflictError: If a vote already exists for this user/post pair
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def save(self, vote: Vote, expected_version: int) -> Vote:
        """Update an existing vote if nobody changed it since it was read.

        The stored version must equal ``expected_version``; the saved vote
        carries ``expected_version + 1``.

        Args:
            vote: The vote with its new direction/active state
            expected_version: Version the caller read before computing the change

        Returns:
            The saved vote with its bumped version

        Raises:
            ConflictError: If the stored version differs (stale read)
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def find_by_post(self, post_id: PostId) -> List[Vote]:
        """Find all votes on a post.

        Args:
            post_id: The post's ID

        Returns:
            List of votes on the post
        """
        pass
