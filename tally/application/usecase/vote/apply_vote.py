"""Apply vote use case."""

from datetime import datetime

from pydantic import BaseModel

from tally.application.usecase.common import parse_id
from tally.domain.error import ValidationError
from tally.domain.service import VoteService
from tally.domain.value import PostId, UserId, VoteDirection


class ApplyVoteRequest(BaseModel):
    """Apply vote request."""

    post_id: str  # UUID string
    user_id: str  # User ID from authenticated user
    direction: str  # "upvote" or "downvote"


class ApplyVoteResponse(BaseModel):
    """Apply vote response."""

    vote_id: str
    post_id: str
    user_id: str
    direction: VoteDirection
    active: bool
    score: int
    updated_at: datetime


class ApplyVoteUseCase:
    """Use case for pressing upvote or downvote on a post."""

    def __init__(self, vote_service: VoteService) -> None:
        """Initialize apply vote use case.

        Args:
            vote_service: Vote domain service
        """
        self.vote_service = vote_service

    async def execute(self, request: ApplyVoteRequest) -> ApplyVoteResponse:
        """Execute apply vote flow.

        Args:
            request: Apply vote request

        Returns:
            The vote's new state and the post's new score

        Raises:
            ValidationError: If the direction or ids are invalid (nothing is read)
            NotFoundError: If the post does not exist
            ConflictError: If concurrent presses kept conflicting
            StorageError: If the write failed
        """
        try:
            direction = VoteDirection(request.direction)
        except ValueError:
            raise ValidationError(
                f"direction must be 'upvote' or 'downvote', got {request.direction!r}"
            )
        post_id = parse_id(request.post_id, "post_id", PostId)
        user_id = parse_id(request.user_id, "user_id", UserId)

        vote, post = await self.vote_service.apply_direction(
            post_id, user_id, direction
        )

        return ApplyVoteResponse(
            vote_id=str(vote.id),
            post_id=str(vote.post_id),
            user_id=str(vote.user_id),
            direction=vote.direction,
            active=vote.active,
            score=post.current_score,
            updated_at=vote.updated_at,
        )
