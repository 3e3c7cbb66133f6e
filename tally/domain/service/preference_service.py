"""Preference signal domain service.

Mirrors vote transitions to the recommender. Delivery is detached from the
voting request: it runs as a background task, is retried a few times, and a
final failure is logged and dropped. The recommender is allowed to lag
behind or miss a signal; the vote and score are never rolled back for it.
"""

import asyncio

import logfire

from tally.domain.error import SinkError
from tally.domain.value import PostId, PreferenceKind, UserId

from .base import Service
from .recommender import RecommenderClient


class PreferenceService(Service):
    """Domain service for recommender preference signals."""

    def __init__(
        self,
        recommender_client: RecommenderClient,
        max_attempts: int = 3,
        retry_backoff_seconds: float = 0.5,
    ) -> None:
        """Initialize preference service.

        Args:
            recommender_client: Recommender engine client
            max_attempts: Delivery attempts per signal before it is dropped
            retry_backoff_seconds: Base delay between attempts (linear backoff)
        """
        self.recommender_client = recommender_client
        self.max_attempts = max(1, max_attempts)
        self.retry_backoff_seconds = retry_backoff_seconds
        self._pending: set[asyncio.Task[bool]] = set()

    def emit(
        self, user_id: UserId, post_id: PostId, kind: PreferenceKind
    ) -> asyncio.Task[bool]:
        """Schedule delivery of a preference signal and return immediately.

        Args:
            user_id: User whose preference changed
            post_id: Post the preference is about
            kind: Signal kind

        Returns:
            The delivery task (resolves to True if delivered)
        """
        task = asyncio.get_running_loop().create_task(
            self._deliver(user_id, post_id, kind),
            name=f"preference:{kind.value}:{user_id}:{post_id}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _deliver(
        self, user_id: UserId, post_id: PostId, kind: PreferenceKind
    ) -> bool:
        for attempt in range(1, self.max_attempts + 1):
            try:
                await self.recommender_client.record_preference(user_id, post_id, kind)
            except Exception as e:
                logfire.warn(
                    "Preference delivery failed",
                    user_id=str(user_id),
                    post_id=str(post_id),
                    kind=kind.value,
                    attempt=attempt,
                    error=str(e),
                )
                if attempt < self.max_attempts:
                    await asyncio.sleep(self.retry_backoff_seconds * attempt)
                continue

            logfire.info(
                "Preference recorded",
                user_id=str(user_id),
                post_id=str(post_id),
                kind=kind.value,
            )
            return True

        error = SinkError(
            f"Dropped {kind.value} signal for user {user_id} on post {post_id} "
            f"after {self.max_attempts} attempts"
        )
        logfire.error(str(error), user_id=str(user_id), post_id=str(post_id))
        return False

    @property
    def pending(self) -> int:
        """Number of deliveries still in flight."""
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every in-flight delivery to finish.

        Used on shutdown and in tests.
        """
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def get_recommendations(self, user_id: UserId, count: int) -> list[PostId]:
        """Get ranked recommendations for a user.

        Args:
            user_id: User to recommend for
            count: Maximum number of posts

        Returns:
            Post IDs, best first

        Raises:
            SinkError: If the recommender could not be queried
        """
        with logfire.span(
            "preference_service.get_recommendations",
            user_id=str(user_id),
            count=count,
        ):
            try:
                return await self.recommender_client.get_recommendations(
                    user_id, count
                )
            except Exception as e:
                logfire.warn(
                    "Recommender query failed", user_id=str(user_id), error=str(e)
                )
                raise SinkError(f"Recommendations unavailable: {e}") from e
