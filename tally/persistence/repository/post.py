"""PostgreSQL implementation of Post repository."""

from typing import List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tally.domain.error import NotFoundError, StorageError
from tally.domain.model import Post
from tally.domain.repository import PostRepository
from tally.domain.value import PostId
from tally.persistence.mappers import post_to_dict, row_to_post
from tally.persistence.tables import posts_table


class PostgresPostRepository(PostRepository):
    """PostgreSQL implementation of PostRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID."""
        stmt = select(posts_table).where(posts_table.c.id == post_id)
        try:
            result = await self.session.execute(stmt)
            row = result.fetchone()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load post: {e}") from e
        return row_to_post(row._asdict()) if row else None

    async def find_by_ids(self, post_ids: Sequence[PostId]) -> List[Post]:
        """Find several posts, preserving the requested order."""
        if not post_ids:
            return []

        stmt = select(posts_table).where(posts_table.c.id.in_(post_ids))
        try:
            result = await self.session.execute(stmt)
            rows = result.fetchall()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load posts: {e}") from e

        by_id = {
            post.id: post for post in (row_to_post(row._asdict()) for row in rows)
        }
        return [by_id[pid] for pid in post_ids if pid in by_id]

    async def save(self, post: Post) -> Post:
        """Save or update a post.

        The score column is left alone on update; it only moves by deltas.
        """
        values = post_to_dict(post)
        stmt = (
            insert(posts_table)
            .values(**values)
            .on_conflict_do_update(
                index_elements=[posts_table.c.id],
                set_={
                    "title": values["title"],
                    "deleted_at": values["deleted_at"],
                },
            )
        )
        try:
            await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save post: {e}") from e
        return post

    async def apply_score_delta(self, post_id: PostId, delta: int) -> Post:
        """Atomically add delta to the score (NULL counts as 0)."""
        stmt = (
            posts_table.update()
            .where(posts_table.c.id == post_id)
            .values(score=func.coalesce(posts_table.c.score, 0) + delta)
            .returning(*posts_table.c)
        )
        try:
            result = await self.session.execute(stmt)
            row = result.fetchone()
            await self.session.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to update score: {e}") from e

        if row is None:
            raise NotFoundError("Post", str(post_id))
        return row_to_post(row._asdict())
