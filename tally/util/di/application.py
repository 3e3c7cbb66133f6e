"""Application layer DI providers."""

from dishka import Scope, provide

from tally.application.usecase.post import GetPostUseCase, GetRecommendationsUseCase
from tally.application.usecase.vote import ApplyVoteUseCase
from tally.config import Settings
from tally.domain.service import PostService, PreferenceService, VoteService
from tally.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Vote use cases
    @provide(scope=Scope.REQUEST)
    def get_apply_vote_use_case(self, vote_service: VoteService) -> ApplyVoteUseCase:
        """Provide apply vote use case."""
        return ApplyVoteUseCase(vote_service=vote_service)

    # Post use cases
    @provide(scope=Scope.REQUEST)
    def get_get_post_use_case(
        self, post_service: PostService, vote_service: VoteService
    ) -> GetPostUseCase:
        """Provide get post use case."""
        return GetPostUseCase(post_service=post_service, vote_service=vote_service)

    @provide(scope=Scope.REQUEST)
    def get_get_recommendations_use_case(
        self,
        preference_service: PreferenceService,
        post_service: PostService,
        settings: Settings,
    ) -> GetRecommendationsUseCase:
        """Provide get recommendations use case."""
        return GetRecommendationsUseCase(
            preference_service=preference_service,
            post_service=post_service,
            settings=settings,
        )
