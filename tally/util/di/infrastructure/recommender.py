"""Recommender infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
from redis.asyncio import Redis

from tally.adapter.recommender import RedisRecommenderClient
from tally.config import Settings
from tally.domain.service import RecommenderClient
from tally.util.di.base import ProviderBase


class RecommenderProvider(ProviderBase):
    """Recommender component base."""

    __mock_component__ = "recommender"


class ProdRecommenderProvider(RecommenderProvider):
    """Production recommender provider backed by Redis."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_recommender_client(
        self, settings: Settings
    ) -> AsyncIterator[RecommenderClient]:
        """Provide Redis recommender client; closes the connection pool on shutdown."""
        redis = Redis.from_url(settings.recommender.redis_url, decode_responses=True)
        client = RedisRecommenderClient(
            redis=redis, key_prefix=settings.recommender.key_prefix
        )
        yield client
        await client.close()
