"""Get recommendations use case."""

from pydantic import BaseModel, Field

from tally.application.usecase.common import parse_id
from tally.application.usecase.post.get_post import GetPostResponse
from tally.config import Settings
from tally.domain.service import PostService, PreferenceService
from tally.domain.value import UserId


class GetRecommendationsRequest(BaseModel):
    """Get recommendations request."""

    user_id: str
    count: int | None = Field(default=None, ge=1)


class GetRecommendationsResponse(BaseModel):
    """Get recommendations response."""

    posts: list[GetPostResponse]


class GetRecommendationsUseCase:
    """Use case for listing posts recommended to a user."""

    def __init__(
        self,
        preference_service: PreferenceService,
        post_service: PostService,
        settings: Settings,
    ) -> None:
        """Initialize get recommendations use case.

        Args:
            preference_service: Recommender-facing domain service
            post_service: Post domain service
            settings: Application settings (recommendation counts)
        """
        self.preference_service = preference_service
        self.post_service = post_service
        self.settings = settings

    async def execute(
        self, request: GetRecommendationsRequest
    ) -> GetRecommendationsResponse:
        """Execute get recommendations flow.

        Posts come back in the recommender's rank order; posts that were
        deleted since they were recommended are dropped.

        Raises:
            ValidationError: If the user id is malformed
            SinkError: If the recommender is unavailable
        """
        user_id = parse_id(request.user_id, "user_id", UserId)
        count = min(
            request.count or self.settings.recommender.default_count,
            self.settings.recommender.max_count,
        )

        post_ids = await self.preference_service.get_recommendations(user_id, count)
        posts = await self.post_service.get_posts_in_order(post_ids)

        return GetRecommendationsResponse(
            posts=[
                GetPostResponse(
                    post_id=str(post.id),
                    title=post.title,
                    author_id=str(post.author_id),
                    score=post.current_score,
                    created_at=post.created_at,
                )
                for post in posts
            ]
        )
