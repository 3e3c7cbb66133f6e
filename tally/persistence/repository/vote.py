"""PostgreSQL implementation of Vote repository."""

from typing import List, Optional

from sqlalchemy import and_, insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tally.domain.error import ConflictError, StorageError
from tally.domain.model import Vote
from tally.domain.repository import VoteRepository
from tally.domain.value import PostId, UserId
from tally.persistence.mappers import row_to_vote, vote_to_dict
from tally.persistence.tables import votes_table


class PostgresVoteRepository(VoteRepository):
    """PostgreSQL implementation of VoteRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_user_and_post(
        self, user_id: UserId, post_id: PostId
    ) -> Optional[Vote]:
        """Find a user's vote on a post."""
        stmt = select(votes_table).where(
            and_(
                votes_table.c.user_id == user_id,
                votes_table.c.post_id == post_id,
            )
        )
        try:
            result = await self.session.execute(stmt)
            row = result.fetchone()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load vote: {e}") from e
        return row_to_vote(row._asdict()) if row else None

    async def create(self, vote: Vote) -> Vote:
        """Insert a new vote."""
        stmt = insert(votes_table).values(**vote_to_dict(vote))
        try:
            await self.session.execute(stmt)
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError(
                "Vote already exists", key=f"{vote.user_id}:{vote.post_id}"
            ) from e
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to create vote: {e}") from e
        return vote

    async def save(self, vote: Vote, expected_version: int) -> Vote:
        """Update a vote guarded by its version."""
        saved = vote.model_copy(update={"version": expected_version + 1})
        stmt = (
            votes_table.update()
            .where(
                and_(
                    votes_table.c.id == vote.id,
                    votes_table.c.version == expected_version,
                )
            )
            .values(
                direction=saved.direction.value,
                active=saved.active,
                version=saved.version,
                updated_at=saved.updated_at,
            )
        )
        try:
            result = await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save vote: {e}") from e

        if result.rowcount == 0:  # type: ignore[attr-defined]
            raise ConflictError(
                f"Vote {vote.id} changed since version {expected_version}",
                key=f"{vote.user_id}:{vote.post_id}",
            )
        return saved

    async def find_by_post(self, post_id: PostId) -> List[Vote]:
        """Find all votes on a post."""
        stmt = select(votes_table).where(votes_table.c.post_id == post_id)
        try:
            result = await self.session.execute(stmt)
            rows = result.fetchall()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load votes: {e}") from e
        return [row_to_vote(row._asdict()) for row in rows]
