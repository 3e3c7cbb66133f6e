"""Redis-backed recommender client.

Preferences are stored as sets, keyed both ways so neighbours can be found
from the posts a user rated:

    {prefix}:user:{user_id}:liked      post IDs the user likes
    {prefix}:user:{user_id}:disliked   post IDs the user dislikes
    {prefix}:item:{post_id}:liked      user IDs who like the post
    {prefix}:item:{post_id}:disliked   user IDs who dislike the post
"""

from uuid import UUID

import logfire
from redis.asyncio import Redis
from redis.exceptions import RedisError

from tally.adapter.error import RecommenderUnavailableError
from tally.domain.service.recommender import RecommenderClient
from tally.domain.value import PostId, PreferenceKind, UserId

from .similarity import Ratings, rank_candidates


class RedisRecommenderClient(RecommenderClient):
    """Recommender engine storing preferences in Redis sets."""

    def __init__(self, redis: Redis, key_prefix: str = "tally:recommender") -> None:
        """Initialize Redis recommender.

        Args:
            redis: Async Redis client (decode_responses=True)
            key_prefix: Namespace for all keys
        """
        self.redis = redis
        self.key_prefix = key_prefix

    def _user_key(self, user_id: str, bucket: str) -> str:
        return f"{self.key_prefix}:user:{user_id}:{bucket}"

    def _item_key(self, post_id: str, bucket: str) -> str:
        return f"{self.key_prefix}:item:{post_id}:{bucket}"

    async def record_preference(
        self, user_id: UserId, post_id: PostId, kind: PreferenceKind
    ) -> None:
        """Apply a preference change to the rating sets."""
        uid, pid = str(user_id), str(post_id)
        pipe = self.redis.pipeline(transaction=True)

        if kind is PreferenceKind.LIKED:
            pipe.sadd(self._user_key(uid, "liked"), pid)
            pipe.sadd(self._item_key(pid, "liked"), uid)
            pipe.srem(self._user_key(uid, "disliked"), pid)
            pipe.srem(self._item_key(pid, "disliked"), uid)
        elif kind is PreferenceKind.UNLIKED:
            pipe.srem(self._user_key(uid, "liked"), pid)
            pipe.srem(self._item_key(pid, "liked"), uid)
        elif kind is PreferenceKind.DISLIKED:
            pipe.sadd(self._user_key(uid, "disliked"), pid)
            pipe.sadd(self._item_key(pid, "disliked"), uid)
            pipe.srem(self._user_key(uid, "liked"), pid)
            pipe.srem(self._item_key(pid, "liked"), uid)
        else:  # PreferenceKind.UNDISLIKED
            pipe.srem(self._user_key(uid, "disliked"), pid)
            pipe.srem(self._item_key(pid, "disliked"), uid)

        try:
            await pipe.execute()
        except RedisError as e:
            raise RecommenderUnavailableError(f"Redis write failed: {e}") from e

    async def _ratings(self, user_id: str) -> Ratings:
        liked = await self.redis.smembers(self._user_key(user_id, "liked"))
        disliked = await self.redis.smembers(self._user_key(user_id, "disliked"))
        return Ratings(liked=set(liked), disliked=set(disliked))

    async def get_recommendations(self, user_id: UserId, count: int) -> list[PostId]:
        """Rank unrated posts by what similar users liked."""
        uid = str(user_id)
        try:
            user = await self._ratings(uid)

            neighbour_ids: set[str] = set()
            for pid in user.rated:
                neighbour_ids |= await self.redis.smembers(self._item_key(pid, "liked"))
                neighbour_ids |= await self.redis.smembers(
                    self._item_key(pid, "disliked")
                )
            neighbour_ids.discard(uid)

            neighbours = {nid: await self._ratings(nid) for nid in neighbour_ids}
        except RedisError as e:
            raise RecommenderUnavailableError(f"Redis read failed: {e}") from e

        ranked = rank_candidates(user, neighbours, count)
        logfire.info(
            "Recommendations computed",
            user_id=uid,
            neighbours=len(neighbours),
            results=len(ranked),
        )
        return [PostId(UUID(pid)) for pid in ranked]

    async def close(self) -> None:
        await self.redis.aclose()
