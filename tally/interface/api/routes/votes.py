"""Vote routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends

from tally.application.usecase.vote import (
    ApplyVoteRequest,
    ApplyVoteResponse,
    ApplyVoteUseCase,
)
from tally.domain.error import DomainError
from tally.domain.value import VoteDirection
from tally.interface.api.dependencies import require_user_id
from tally.interface.error import to_http_exception

router = APIRouter(prefix="/posts", tags=["votes"], route_class=DishkaRoute)


@router.post("/{post_id}/upvote", response_model=ApplyVoteResponse)
async def upvote_post(
    post_id: str,
    apply_vote_use_case: FromDishka[ApplyVoteUseCase],
    user_id: str = Depends(require_user_id),
) -> ApplyVoteResponse:
    """Press upvote on a post.

    Pressing again withdraws the upvote; pressing it on a downvoted post
    switches the vote to up.

    Args:
        post_id: Post UUID
        apply_vote_use_case: Apply vote use case from DI
        user_id: Authenticated user ID

    Returns:
        The vote state and the post's new score

    Raises:
        HTTPException: 401 if not authenticated, 404 if the post does not exist,
            409 on persistent conflicts, 422 on malformed ids, 503 if storage failed
    """
    try:
        return await apply_vote_use_case.execute(
            ApplyVoteRequest(
                post_id=post_id, user_id=user_id, direction=VoteDirection.UP.value
            )
        )
    except DomainError as e:
        raise to_http_exception(e) from e


@router.post("/{post_id}/downvote", response_model=ApplyVoteResponse)
async def downvote_post(
    post_id: str,
    apply_vote_use_case: FromDishka[ApplyVoteUseCase],
    user_id: str = Depends(require_user_id),
) -> ApplyVoteResponse:
    """Press downvote on a post.

    Args:
        post_id: Post UUID
        apply_vote_use_case: Apply vote use case from DI
        user_id: Authenticated user ID

    Returns:
        The vote state and the post's new score
    """
    try:
        return await apply_vote_use_case.execute(
            ApplyVoteRequest(
                post_id=post_id, user_id=user_id, direction=VoteDirection.DOWN.value
            )
        )
    except DomainError as e:
        raise to_http_exception(e) from e
