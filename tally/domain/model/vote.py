"""Vote entity.

A vote is one user's current preference on one post. The record is created
on the user's first directional press and mutated in place afterwards; the
voting flow never deletes it.
"""

from datetime import datetime

from pydantic import Field

from tally.domain.model.common import DomainModel
from tally.domain.value import PostId, UserId, VoteDirection, VoteId, VoteState


class Vote(DomainModel):
    """Vote entity.

    Business rules:
    - One vote per user per post (enforced by database unique constraint)
    - ``direction`` is the last direction pressed, whether or not it counts
    - Only an active vote contributes to the post score
    """

    id: VoteId
    user_id: UserId
    post_id: PostId
    direction: VoteDirection
    active: bool = True
    version: int = Field(default=1, ge=1)  # Optimistic concurrency counter
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def contribution(self) -> int:
        """Current contribution of this vote to the post score (+1, -1 or 0)."""
        return self.direction.sign if self.active else 0

    @property
    def state(self) -> VoteState:
        return VoteState.of(self.direction, self.active)
