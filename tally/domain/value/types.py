"""Domain value objects for Tally.

Value objects are immutable and defined by their values, not identity.
"""

from enum import Enum


class VoteDirection(str, Enum):
    """Direction a user pressed on a post.

    Values match the wire names accepted by the voting endpoints.
    """

    UP = "upvote"
    DOWN = "downvote"

    @property
    def sign(self) -> int:
        """Score contribution of an active vote in this direction."""
        return 1 if self is VoteDirection.UP else -1


class VoteState(str, Enum):
    """Logical state of a (user, post) vote, derived from direction and active."""

    NO_VOTE = "no_vote"
    ACTIVE_UP = "active_up"
    INACTIVE_UP = "inactive_up"
    ACTIVE_DOWN = "active_down"
    INACTIVE_DOWN = "inactive_down"

    @classmethod
    def of(cls, direction: VoteDirection, active: bool) -> "VoteState":
        if direction is VoteDirection.UP:
            return cls.ACTIVE_UP if active else cls.INACTIVE_UP
        return cls.ACTIVE_DOWN if active else cls.INACTIVE_DOWN


class PreferenceKind(str, Enum):
    """Preference signal sent to the recommender."""

    LIKED = "liked"
    UNLIKED = "unliked"
    DISLIKED = "disliked"
    UNDISLIKED = "undisliked"

    @classmethod
    def for_transition(
        cls, direction: VoteDirection, active: bool
    ) -> "PreferenceKind":
        """Signal for a vote that ended up in (direction, active)."""
        if direction is VoteDirection.UP:
            return cls.LIKED if active else cls.UNLIKED
        return cls.DISLIKED if active else cls.UNDISLIKED
