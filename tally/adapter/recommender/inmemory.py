"""In-memory recommender client for testing."""

from uuid import UUID

from tally.domain.service.recommender import RecommenderClient
from tally.domain.value import PostId, PreferenceKind, UserId

from .similarity import Ratings, rank_candidates


class InMemoryRecommenderClient(RecommenderClient):
    """In-memory recommender with the same semantics as the Redis client.

    Every received signal is kept in ``signals`` for assertions.
    """

    def __init__(self) -> None:
        self.signals: list[tuple[UserId, PostId, PreferenceKind]] = []
        self._ratings: dict[str, Ratings] = {}

    async def record_preference(
        self, user_id: UserId, post_id: PostId, kind: PreferenceKind
    ) -> None:
        """Record a preference change."""
        self.signals.append((user_id, post_id, kind))
        ratings = self._ratings.setdefault(str(user_id), Ratings())
        pid = str(post_id)

        if kind is PreferenceKind.LIKED:
            ratings.liked.add(pid)
            ratings.disliked.discard(pid)
        elif kind is PreferenceKind.UNLIKED:
            ratings.liked.discard(pid)
        elif kind is PreferenceKind.DISLIKED:
            ratings.disliked.add(pid)
            ratings.liked.discard(pid)
        else:  # PreferenceKind.UNDISLIKED
            ratings.disliked.discard(pid)

    async def get_recommendations(self, user_id: UserId, count: int) -> list[PostId]:
        """Rank unrated posts by what similar users liked."""
        uid = str(user_id)
        user = self._ratings.get(uid, Ratings())
        neighbours = {
            other: ratings
            for other, ratings in self._ratings.items()
            if other != uid and ratings.rated & user.rated
        }
        return [PostId(UUID(pid)) for pid in rank_candidates(user, neighbours, count)]

    def signals_for(
        self, user_id: UserId, post_id: PostId
    ) -> list[PreferenceKind]:
        return [k for u, p, k in self.signals if u == user_id and p == post_id]
