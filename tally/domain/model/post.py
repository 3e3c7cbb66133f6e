"""Post aggregate root.

Only the fields the voting flow needs are modelled here; listing, tagging
and content editing live elsewhere.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from tally.domain.model.common import DomainModel
from tally.domain.value import PostId, UserId


class Post(DomainModel):
    """Post aggregate root.

    ``score`` is a denormalized aggregate: the sum of the contributions of
    every vote on the post. It is only ever moved by deltas. Posts created
    before voting existed may carry no score at all, which reads as zero.
    """

    id: PostId
    title: str = Field(min_length=1, max_length=300)
    author_id: UserId
    score: Optional[int] = None
    created_at: datetime = Field(default_factory=datetime.now)
    deleted_at: Optional[datetime] = None

    @property
    def current_score(self) -> int:
        return self.score or 0

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
