"""Infrastructure providers."""

# Import bases
from .persistence import PersistenceProvider
from .recommender import RecommenderProvider

# Import implementations (needed for __subclasses__())
from .persistence import ProdPersistenceProvider  # noqa: F401
from .recommender import ProdRecommenderProvider  # noqa: F401

__all__ = [
    "PersistenceProvider",
    "ProdPersistenceProvider",
    "ProdRecommenderProvider",
    "RecommenderProvider",
]
