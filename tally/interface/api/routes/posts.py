"""Post routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Query

from tally.application.usecase.post import (
    GetPostRequest,
    GetPostResponse,
    GetPostUseCase,
    GetRecommendationsRequest,
    GetRecommendationsResponse,
    GetRecommendationsUseCase,
)
from tally.domain.error import DomainError
from tally.interface.api.dependencies import optional_user_id, require_user_id
from tally.interface.error import to_http_exception

router = APIRouter(tags=["posts"], route_class=DishkaRoute)


@router.get("/posts/{post_id}", response_model=GetPostResponse)
async def get_post(
    post_id: str,
    get_post_use_case: FromDishka[GetPostUseCase],
    user_id: str | None = Depends(optional_user_id),
) -> GetPostResponse:
    """Get a post with its score.

    When authenticated, ``my_vote`` shows the caller's active vote.
    """
    try:
        return await get_post_use_case.execute(
            GetPostRequest(post_id=post_id, user_id=user_id)
        )
    except DomainError as e:
        raise to_http_exception(e) from e


@router.get("/recommendations", response_model=GetRecommendationsResponse)
async def get_recommendations(
    get_recommendations_use_case: FromDishka[GetRecommendationsUseCase],
    user_id: str = Depends(require_user_id),
    count: int | None = Query(default=None, ge=1),
) -> GetRecommendationsResponse:
    """List posts recommended for the caller, best first."""
    try:
        return await get_recommendations_use_case.execute(
            GetRecommendationsRequest(user_id=user_id, count=count)
        )
    except DomainError as e:
        raise to_http_exception(e) from e
