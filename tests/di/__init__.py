"""Mock providers for testing."""

from .persistence import MockPersistenceProvider
from .recommender import MockRecommenderProvider
from .container import build_test_container

__all__ = [
    "MockPersistenceProvider",
    "MockRecommenderProvider",
    "build_test_container",
]
