"""Get post use case."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from tally.application.usecase.common import parse_id
from tally.domain.service import PostService, VoteService
from tally.domain.value import PostId, UserId, VoteDirection


class GetPostRequest(BaseModel):
    """Get post request."""

    post_id: str  # UUID string
    user_id: str | None = None  # Current user ID (if authenticated)


class GetPostResponse(BaseModel):
    """Get post response."""

    post_id: str
    title: str
    author_id: str
    score: int
    created_at: datetime
    my_vote: Optional[VoteDirection] = None  # Set only while the user's vote is active


class GetPostUseCase:
    """Use case for retrieving a post with its score."""

    def __init__(self, post_service: PostService, vote_service: VoteService) -> None:
        """Initialize get post use case.

        Args:
            post_service: Post domain service
            vote_service: Vote domain service
        """
        self.post_service = post_service
        self.vote_service = vote_service

    async def execute(self, request: GetPostRequest) -> GetPostResponse:
        """Execute get post flow.

        Args:
            request: Get post request with post ID and optional user ID

        Returns:
            Post details

        Raises:
            ValidationError: If an id is malformed
            NotFoundError: If the post does not exist
        """
        post_id = parse_id(request.post_id, "post_id", PostId)
        post = await self.post_service.get_post(post_id)

        my_vote = None
        if request.user_id:
            user_id = parse_id(request.user_id, "user_id", UserId)
            vote = await self.vote_service.get_user_vote(post_id, user_id)
            if vote is not None and vote.active:
                my_vote = vote.direction

        return GetPostResponse(
            post_id=str(post.id),
            title=post.title,
            author_id=str(post.author_id),
            score=post.current_score,
            created_at=post.created_at,
            my_vote=my_vote,
        )
