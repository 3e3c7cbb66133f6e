"""Recommender engine adapters."""

from .inmemory import InMemoryRecommenderClient
from .redis_client import RedisRecommenderClient

__all__ = [
    "InMemoryRecommenderClient",
    "RedisRecommenderClient",
]
