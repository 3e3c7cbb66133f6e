"""Repository interfaces for Tally domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from tally.domain.repository.post import PostRepository
from tally.domain.repository.transaction import TransactionManager
from tally.domain.repository.vote import VoteRepository

__all__ = [
    "PostRepository",
    "TransactionManager",
    "VoteRepository",
]
