"""Mock recommender providers for testing."""

from dishka import Scope, provide

from tally.adapter.recommender import InMemoryRecommenderClient
from tally.domain.service import RecommenderClient
from tally.util.di.infrastructure.recommender import RecommenderProvider


class MockRecommenderProvider(RecommenderProvider):
    """Mock recommender provider using the in-memory engine."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_recommender_client(self) -> RecommenderClient:
        """Provide in-memory recommender client."""
        return InMemoryRecommenderClient()
