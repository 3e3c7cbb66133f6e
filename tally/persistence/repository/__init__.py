"""PostgreSQL repository implementations."""

from tally.persistence.repository.post import PostgresPostRepository
from tally.persistence.repository.transaction import PostgresTransactionManager
from tally.persistence.repository.vote import PostgresVoteRepository

__all__ = [
    "PostgresPostRepository",
    "PostgresTransactionManager",
    "PostgresVoteRepository",
]
