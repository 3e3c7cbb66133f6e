"""In-memory vote repository for testing."""

from typing import Optional

from tally.domain.error import ConflictError
from tally.domain.model.vote import Vote
from tally.domain.repository.vote import VoteRepository
from tally.domain.value import PostId, UserId

from .store import InMemoryStore


class InMemoryVoteRepository(VoteRepository):
    """In-memory implementation of VoteRepository for testing."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    async def find_by_user_and_post(
        self, user_id: UserId, post_id: PostId
    ) -> Optional[Vote]:
        """Find a vote by user and post."""
        await self._store.io()
        return self._store.votes.get((user_id, post_id))

    async def create(self, vote: Vote) -> Vote:
        """Insert a vote.

        Raises:
            ConflictError: If a vote already exists (duplicate)
        """
        await self._store.io()
        key = (vote.user_id, vote.post_id)
        if key in self._store.votes:
            raise ConflictError("Vote already exists", key=f"{key[0]}:{key[1]}")

        self._store.votes[key] = vote
        self._store.record(lambda: self._store.votes.pop(key, None))
        return vote

    async def save(self, vote: Vote, expected_version: int) -> Vote:
        """Update a vote guarded by its version.

        Raises:
            ConflictError: If the stored version differs
        """
        await self._store.io()
        key = (vote.user_id, vote.post_id)
        stored = self._store.votes.get(key)
        if stored is None or stored.version != expected_version:
            raise ConflictError(
                f"Vote {vote.id} changed since version {expected_version}",
                key=f"{key[0]}:{key[1]}",
            )

        saved = vote.model_copy(update={"version": expected_version + 1})
        self._store.votes[key] = saved
        self._store.record(lambda: self._store.votes.__setitem__(key, stored))
        return saved

    async def find_by_post(self, post_id: PostId) -> list[Vote]:
        """Find all votes on a post."""
        return [v for v in self._store.votes.values() if v.post_id == post_id]
