"""PostgreSQL transaction manager."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import logfire
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tally.domain.error import StorageError
from tally.domain.repository import TransactionManager


class PostgresTransactionManager(TransactionManager):
    """Commits or rolls back the request session as one unit."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize with the request-scoped session.

        Args:
            session: SQLAlchemy async session shared with the repositories
        """
        self.session = session

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        """Commit on success, roll back on any error or cancellation."""
        try:
            yield
        except BaseException:
            await self.session.rollback()
            logfire.warn("Transaction rolled back")
            raise

        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageError(f"Commit failed: {e}") from e
