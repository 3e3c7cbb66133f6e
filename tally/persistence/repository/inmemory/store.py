"""Shared in-memory storage for testing.

Repositories created from the same store see each other's writes, like
repositories sharing one database. Writes made inside an open transaction
register a compensating action in the transaction's journal; rolling back
runs the journal in reverse. Compensation (rather than restoring a snapshot)
keeps concurrent transactions on other keys intact.
"""

import asyncio
from contextvars import ContextVar
from typing import Callable, Optional

from tally.domain.model.post import Post
from tally.domain.model.vote import Vote
from tally.domain.value import PostId, UserId

Compensation = Callable[[], None]

_journal: ContextVar[Optional[list[Compensation]]] = ContextVar(
    "inmemory_journal", default=None
)


class InMemoryStore:
    """Posts and votes held in dictionaries."""

    def __init__(self) -> None:
        self.posts: dict[PostId, Post] = {}
        self.votes: dict[tuple[UserId, PostId], Vote] = {}

    @staticmethod
    async def io() -> None:
        """Yield to the event loop, as a real database round trip would."""
        await asyncio.sleep(0)

    @staticmethod
    def record(compensation: Compensation) -> None:
        """Register how to undo a write if the current transaction rolls back."""
        journal = _journal.get()
        if journal is not None:
            journal.append(compensation)

    @staticmethod
    def begin() -> object:
        return _journal.set([])

    @staticmethod
    def rollback() -> None:
        journal = _journal.get() or []
        for compensation in reversed(journal):
            compensation()
        journal.clear()

    @staticmethod
    def end(token: object) -> None:
        _journal.reset(token)  # type: ignore[arg-type]
