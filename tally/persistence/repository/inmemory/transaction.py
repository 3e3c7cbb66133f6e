"""In-memory transaction manager for testing."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from tally.domain.repository.transaction import TransactionManager

from .store import InMemoryStore


class InMemoryTransactionManager(TransactionManager):
    """Undoes the writes of a failed block through the store journal."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self.commits = 0
        self.rollbacks = 0

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        """Keep writes on success, compensate them on any error."""
        token = self._store.begin()
        try:
            yield
        except BaseException:
            self._store.rollback()
            self.rollbacks += 1
            raise
        else:
            self.commits += 1
        finally:
            self._store.end(token)
