"""Domain layer DI providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from tally.config import Settings
from tally.domain.repository import PostRepository, TransactionManager, VoteRepository
from tally.domain.service import (
    PostService,
    PreferenceService,
    RecommenderClient,
    VoteService,
)
from tally.util.di.base import ProviderBase
from tally.util.keyed_lock import KeyedLock


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Services touching repositories are REQUEST-scoped to align with the
    session lifecycle. The preference service is APP-scoped because its
    deliveries outlive the request that emitted them.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    async def get_preference_service(
        self, recommender_client: RecommenderClient, settings: Settings
    ) -> AsyncIterator[PreferenceService]:
        """Provide preference signal service; drains pending deliveries on close."""
        service = PreferenceService(
            recommender_client=recommender_client,
            max_attempts=settings.recommender.max_attempts,
            retry_backoff_seconds=settings.recommender.retry_backoff_seconds,
        )
        yield service
        await service.drain()

    @provide
    def get_post_service(self, post_repository: PostRepository) -> PostService:
        """Provide post domain service."""
        return PostService(post_repository=post_repository)

    @provide
    def get_vote_service(
        self,
        vote_repository: VoteRepository,
        post_repository: PostRepository,
        transaction_manager: TransactionManager,
        preference_service: PreferenceService,
        vote_locks: KeyedLock,
        settings: Settings,
    ) -> VoteService:
        """Provide vote domain service."""
        return VoteService(
            vote_repository=vote_repository,
            post_repository=post_repository,
            transaction_manager=transaction_manager,
            preference_service=preference_service,
            vote_locks=vote_locks,
            max_conflict_retries=settings.voting.max_conflict_retries,
            transaction_timeout_seconds=settings.voting.transaction_timeout_seconds,
        )
