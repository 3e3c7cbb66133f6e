"""Vote domain service."""

import asyncio
from datetime import datetime
from uuid import uuid4

import logfire

from tally.domain.error import ConflictError, NotFoundError, StorageError
from tally.domain.model.post import Post
from tally.domain.model.vote import Vote
from tally.domain.repository import PostRepository, TransactionManager, VoteRepository
from tally.domain.value import PostId, UserId, VoteDirection, VoteId
from tally.util.keyed_lock import KeyedLock

from .base import Service
from .preference_service import PreferenceService
from .vote_state import VoteTransition, next_vote_state


class VoteService(Service):
    """Domain service for directional votes.

    Each press runs the read-compute-write of the vote state machine as one
    transaction, serialized per (user, post) by an in-process keyed lock and
    guarded across processes by the vote's optimistic version. The preference
    signal is emitted only after the transaction committed.
    """

    def __init__(
        self,
        vote_repository: VoteRepository,
        post_repository: PostRepository,
        transaction_manager: TransactionManager,
        preference_service: PreferenceService,
        vote_locks: KeyedLock,
        max_conflict_retries: int = 3,
        transaction_timeout_seconds: float | None = None,
    ) -> None:
        """Initialize vote service.

        Args:
            vote_repository: Vote repository
            post_repository: Post repository
            transaction_manager: Groups the vote and score writes
            preference_service: Recommender signal service
            vote_locks: Shared per-key lock arena
            max_conflict_retries: Retries after a ConflictError before giving up
            transaction_timeout_seconds: Upper bound for one transition, None for no limit
        """
        self.vote_repository = vote_repository
        self.post_repository = post_repository
        self.transaction_manager = transaction_manager
        self.preference_service = preference_service
        self.vote_locks = vote_locks
        self.max_conflict_retries = max_conflict_retries
        self.transaction_timeout_seconds = transaction_timeout_seconds

    async def apply_direction(
        self, post_id: PostId, user_id: UserId, direction: VoteDirection
    ) -> tuple[Vote, Post]:
        """Apply an upvote or downvote press.

        Args:
            post_id: Post being voted on
            user_id: Voting user
            direction: Direction pressed

        Returns:
            The persisted vote and the post with its new score

        Raises:
            NotFoundError: If the post does not exist
            ConflictError: If concurrent writes kept winning after all retries
            StorageError: If the vote or score write failed (nothing was applied)
        """
        with logfire.span(
            "vote_service.apply_direction",
            post_id=str(post_id),
            user_id=str(user_id),
            direction=direction.value,
        ):
            attempt = 0
            while True:
                attempt += 1
                try:
                    async with self.vote_locks.hold((user_id, post_id)):
                        vote, post, transition = await self._with_timeout(
                            self._transition(post_id, user_id, direction)
                        )
                    break
                except ConflictError as e:
                    if attempt > self.max_conflict_retries:
                        logfire.error(
                            "Vote conflict retries exhausted",
                            post_id=str(post_id),
                            user_id=str(user_id),
                            attempts=attempt,
                        )
                        raise
                    logfire.warn(
                        "Vote conflict, retrying",
                        post_id=str(post_id),
                        user_id=str(user_id),
                        attempt=attempt,
                        error=str(e),
                    )

            logfire.info(
                "Vote applied",
                post_id=str(post_id),
                user_id=str(user_id),
                previous_state=transition.previous_state.value,
                next_state=transition.next_state.value,
                score_delta=transition.score_delta,
                score=post.current_score,
            )

            self.preference_service.emit(user_id, post_id, transition.signal)

            return vote, post

    async def _with_timeout(self, coro):
        if self.transaction_timeout_seconds is None:
            return await coro
        try:
            return await asyncio.wait_for(coro, self.transaction_timeout_seconds)
        except asyncio.TimeoutError as e:
            raise StorageError(
                f"Vote transaction timed out after {self.transaction_timeout_seconds}s"
            ) from e

    async def _transition(
        self, post_id: PostId, user_id: UserId, direction: VoteDirection
    ) -> tuple[Vote, Post, VoteTransition]:
        async with self.transaction_manager.atomic():
            post = await self.post_repository.find_by_id(post_id)
            if post is None or post.is_deleted:
                logfire.warn("Vote on non-existent post", post_id=str(post_id))
                raise NotFoundError("Post", str(post_id))

            current = await self.vote_repository.find_by_user_and_post(
                user_id, post_id
            )
            transition = next_vote_state(current, direction)
            now = datetime.now()

            if current is None:
                vote = await self.vote_repository.create(
                    Vote(
                        id=VoteId(uuid4()),
                        user_id=user_id,
                        post_id=post_id,
                        direction=transition.direction,
                        active=transition.active,
                        created_at=now,
                        updated_at=now,
                    )
                )
            else:
                vote = await self.vote_repository.save(
                    current.model_copy(
                        update={
                            "direction": transition.direction,
                            "active": transition.active,
                            "updated_at": now,
                        }
                    ),
                    expected_version=current.version,
                )

            post = await self.post_repository.apply_score_delta(
                post_id, transition.score_delta
            )

        return vote, post, transition

    async def get_user_vote(self, post_id: PostId, user_id: UserId) -> Vote | None:
        """Get a user's vote on a post, if any."""
        return await self.vote_repository.find_by_user_and_post(user_id, post_id)
