"""In-memory repository implementations for testing."""

from .post import InMemoryPostRepository
from .store import InMemoryStore
from .transaction import InMemoryTransactionManager
from .vote import InMemoryVoteRepository

__all__ = [
    "InMemoryPostRepository",
    "InMemoryStore",
    "InMemoryTransactionManager",
    "InMemoryVoteRepository",
]
