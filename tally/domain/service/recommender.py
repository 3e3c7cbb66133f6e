"""Recommender client interface.

The collaborative-filtering engine is an external collaborator; the voting
flow only consumes these two operations.
"""

from tally.domain.value import PostId, PreferenceKind, UserId


class RecommenderClient:
    """Generic recommender interface for all engines."""

    async def record_preference(
        self, user_id: UserId, post_id: PostId, kind: PreferenceKind
    ) -> None:
        """Record that a user's preference for a post changed.

        Args:
            user_id: User whose preference changed
            post_id: Post the preference is about
            kind: Liked/unliked/disliked/undisliked
        """
        raise NotImplementedError

    async def get_recommendations(self, user_id: UserId, count: int) -> list[PostId]:
        """Get ranked post recommendations for a user.

        Args:
            user_id: User to recommend for
            count: Maximum number of posts to return

        Returns:
            Post IDs, best first
        """
        raise NotImplementedError
