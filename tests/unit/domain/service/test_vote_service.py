"""Unit tests for VoteService."""

import asyncio
import random

import pytest

from tally.domain.error import ConflictError, NotFoundError, StorageError
from tally.domain.repository import PostRepository, TransactionManager, VoteRepository
from tally.domain.service import PreferenceService, RecommenderClient, VoteService
from tally.domain.value import PreferenceKind, VoteDirection
from tally.util.keyed_lock import KeyedLock
from tests.conftest import make_post, new_user, seed_post, total_contribution
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()

UP = VoteDirection.UP
DOWN = VoteDirection.DOWN


class TestApplyDirection:
    """Tests for single-user press sequences."""

    @pytest.mark.asyncio
    async def test_first_upvote_creates_active_vote(self, unit_env):
        """First upvote should create an active vote and add one point."""
        # Arrange
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        post_repo = await unit_env.get(PostRepository)
        post = await seed_post(post_repo)
        user_id = new_user()

        # Act
        vote, updated = await vote_service.apply_direction(post.id, user_id, UP)

        # Assert
        assert vote.direction == UP
        assert vote.active is True
        assert vote.version == 1
        assert updated.score == 1
        stored = await vote_repo.find_by_user_and_post(user_id, post.id)
        assert stored == vote

    @pytest.mark.asyncio
    async def test_worked_scenario(self, unit_env):
        """UP, UP, DOWN, UP walks the score 1, 0, -1, 1."""
        # Arrange
        vote_service = await unit_env.get(VoteService)
        preference_service = await unit_env.get(PreferenceService)
        recommender = await unit_env.get(RecommenderClient)
        post_repo = await unit_env.get(PostRepository)
        post = await seed_post(post_repo)
        user_id = new_user()

        # Act
        scores = []
        for direction in [UP, UP, DOWN, UP]:
            _, updated = await vote_service.apply_direction(post.id, user_id, direction)
            scores.append(updated.score)
        await preference_service.drain()

        # Assert
        assert scores == [1, 0, -1, 1]
        assert recommender.signals_for(user_id, post.id) == [
            PreferenceKind.LIKED,
            PreferenceKind.UNLIKED,
            PreferenceKind.DISLIKED,
            PreferenceKind.LIKED,
        ]

    @pytest.mark.asyncio
    async def test_double_press_cancels(self, unit_env):
        """Pressing the same direction twice leaves the score unchanged."""
        # Arrange
        vote_service = await unit_env.get(VoteService)
        post_repo = await unit_env.get(PostRepository)
        post = await seed_post(post_repo, score=7)
        user_id = new_user()

        # Act
        await vote_service.apply_direction(post.id, user_id, DOWN)
        vote, updated = await vote_service.apply_direction(post.id, user_id, DOWN)

        # Assert
        assert updated.score == 7
        assert vote.active is False
        assert vote.direction == DOWN
        assert vote.version == 2

    @pytest.mark.asyncio
    async def test_switch_from_active_moves_score_by_two(self, unit_env):
        """Switching an active upvote to down should subtract two points."""
        # Arrange
        vote_service = await unit_env.get(VoteService)
        post_repo = await unit_env.get(PostRepository)
        post = await seed_post(post_repo)
        user_id = new_user()
        _, before = await vote_service.apply_direction(post.id, user_id, UP)

        # Act
        vote, after = await vote_service.apply_direction(post.id, user_id, DOWN)

        # Assert
        assert after.score - before.score == -2
        assert vote.direction == DOWN
        assert vote.active is True

    @pytest.mark.asyncio
    async def test_first_downvote_emits_single_dislike(self, unit_env):
        """A first downvote subtracts one point and emits exactly one DISLIKED."""
        # Arrange
        vote_service = await unit_env.get(VoteService)
        preference_service = await unit_env.get(PreferenceService)
        recommender = await unit_env.get(RecommenderClient)
        post_repo = await unit_env.get(PostRepository)
        post = await seed_post(post_repo)
        user_id = new_user()

        # Act
        _, updated = await vote_service.apply_direction(post.id, user_id, DOWN)
        await preference_service.drain()

        # Assert
        assert updated.score == -1
        assert recommender.signals == [(user_id, post.id, PreferenceKind.DISLIKED)]

    @pytest.mark.asyncio
    async def test_unset_score_reads_as_zero(self, unit_env):
        """A post that never had a score starts counting from zero."""
        # Arrange
        vote_service = await unit_env.get(VoteService)
        post_repo = await unit_env.get(PostRepository)
        post = await seed_post(post_repo, score=None)

        # Act
        _, updated = await vote_service.apply_direction(post.id, new_user(), DOWN)

        # Assert
        assert updated.score == -1

    @pytest.mark.asyncio
    async def test_signal_is_emitted_detached(self, unit_env):
        """The vote returns before the recommender has been told."""
        # Arrange
        vote_service = await unit_env.get(VoteService)
        preference_service = await unit_env.get(PreferenceService)
        recommender = await unit_env.get(RecommenderClient)
        post_repo = await unit_env.get(PostRepository)
        post = await seed_post(post_repo)

        # Act
        await vote_service.apply_direction(post.id, new_user(), UP)

        # Assert
        assert preference_service.pending == 1
        assert recommender.signals == []
        await preference_service.drain()
        assert preference_service.pending == 0
        assert len(recommender.signals) == 1


class TestMissingPost:
    """Tests for presses on posts that cannot be voted on."""

    @pytest.mark.asyncio
    async def test_unknown_post_raises_not_found(self, unit_env):
        # Arrange
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        missing = make_post()
        user_id = new_user()

        # Act & Assert
        with pytest.raises(NotFoundError):
            await vote_service.apply_direction(missing.id, user_id, UP)
        assert await vote_repo.find_by_user_and_post(user_id, missing.id) is None

    @pytest.mark.asyncio
    async def test_deleted_post_raises_not_found(self, unit_env):
        # Arrange
        vote_service = await unit_env.get(VoteService)
        preference_service = await unit_env.get(PreferenceService)
        recommender = await unit_env.get(RecommenderClient)
        post_repo = await unit_env.get(PostRepository)
        post = await seed_post(post_repo, deleted=True)

        # Act & Assert
        with pytest.raises(NotFoundError):
            await vote_service.apply_direction(post.id, new_user(), UP)
        await preference_service.drain()
        assert recommender.signals == []


class TestFailureAtomicity:
    """A failed transition leaves neither vote nor score behind."""

    @pytest.mark.asyncio
    async def test_score_write_failure_rolls_back_new_vote(self, unit_env, monkeypatch):
        """Storage failure after the vote insert should undo the insert."""
        # Arrange
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        post_repo = await unit_env.get(PostRepository)
        transaction_manager = await unit_env.get(TransactionManager)
        preference_service = await unit_env.get(PreferenceService)
        recommender = await unit_env.get(RecommenderClient)
        post = await seed_post(post_repo, score=3)
        user_id = new_user()

        async def failing_delta(post_id, delta):
            raise StorageError("score update failed")

        monkeypatch.setattr(post_repo, "apply_score_delta", failing_delta)

        # Act
        with pytest.raises(StorageError):
            await vote_service.apply_direction(post.id, user_id, UP)
        await preference_service.drain()

        # Assert
        assert await vote_repo.find_by_user_and_post(user_id, post.id) is None
        stored = await post_repo.find_by_id(post.id)
        assert stored.score == 3
        assert recommender.signals == []
        assert transaction_manager.rollbacks == 1

    @pytest.mark.asyncio
    async def test_score_write_failure_restores_previous_vote(
        self, unit_env, monkeypatch
    ):
        """Storage failure on a toggle should leave the earlier vote intact."""
        # Arrange
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        post_repo = await unit_env.get(PostRepository)
        post = await seed_post(post_repo)
        user_id = new_user()
        original, _ = await vote_service.apply_direction(post.id, user_id, UP)

        async def failing_delta(post_id, delta):
            raise StorageError("score update failed")

        monkeypatch.setattr(post_repo, "apply_score_delta", failing_delta)

        # Act
        with pytest.raises(StorageError):
            await vote_service.apply_direction(post.id, user_id, DOWN)

        # Assert
        assert await vote_repo.find_by_user_and_post(user_id, post.id) == original
        assert (await post_repo.find_by_id(post.id)).score == 1

    @pytest.mark.asyncio
    async def test_timeout_rolls_back(self, unit_env, monkeypatch):
        """A transition exceeding the timeout fails as a storage error."""
        # Arrange
        vote_repo = await unit_env.get(VoteRepository)
        post_repo = await unit_env.get(PostRepository)
        vote_service = VoteService(
            vote_repository=vote_repo,
            post_repository=post_repo,
            transaction_manager=await unit_env.get(TransactionManager),
            preference_service=await unit_env.get(PreferenceService),
            vote_locks=KeyedLock(),
            transaction_timeout_seconds=0.05,
        )
        post = await seed_post(post_repo)
        user_id = new_user()

        async def slow_delta(post_id, delta):
            await asyncio.sleep(5)

        monkeypatch.setattr(post_repo, "apply_score_delta", slow_delta)

        # Act
        with pytest.raises(StorageError):
            await vote_service.apply_direction(post.id, user_id, UP)

        # Assert
        assert await vote_repo.find_by_user_and_post(user_id, post.id) is None
        assert (await post_repo.find_by_id(post.id)).score == 0

    @pytest.mark.asyncio
    async def test_sink_failure_does_not_fail_vote(self, unit_env, monkeypatch):
        """The vote commits even when the recommender rejects every attempt."""
        # Arrange
        vote_service = await unit_env.get(VoteService)
        preference_service = await unit_env.get(PreferenceService)
        recommender = await unit_env.get(RecommenderClient)
        post_repo = await unit_env.get(PostRepository)
        post = await seed_post(post_repo)

        async def unavailable(user_id, post_id, kind):
            raise ConnectionError("recommender down")

        monkeypatch.setattr(recommender, "record_preference", unavailable)
        monkeypatch.setattr(preference_service, "retry_backoff_seconds", 0)

        # Act
        _, updated = await vote_service.apply_direction(post.id, new_user(), UP)
        await preference_service.drain()

        # Assert
        assert updated.score == 1
        assert (await post_repo.find_by_id(post.id)).score == 1


class TestConflictRetry:
    """Tests for optimistic conflict handling."""

    @pytest.mark.asyncio
    async def test_conflict_is_retried(self, unit_env, monkeypatch):
        """A lost race on the first insert is retried from a fresh read."""
        # Arrange
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        post_repo = await unit_env.get(PostRepository)
        post = await seed_post(post_repo)
        user_id = new_user()
        original_create = vote_repo.create
        calls = 0

        async def flaky_create(vote):
            nonlocal calls
            calls += 1
            if calls == 1:
                raise ConflictError("simulated race")
            return await original_create(vote)

        monkeypatch.setattr(vote_repo, "create", flaky_create)

        # Act
        vote, updated = await vote_service.apply_direction(post.id, user_id, UP)

        # Assert
        assert calls == 2
        assert vote.active is True
        assert updated.score == 1

    @pytest.mark.asyncio
    async def test_conflict_retries_are_bounded(self, unit_env, monkeypatch):
        """Persistent conflicts propagate once the retries are used up."""
        # Arrange
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        post_repo = await unit_env.get(PostRepository)
        preference_service = await unit_env.get(PreferenceService)
        recommender = await unit_env.get(RecommenderClient)
        post = await seed_post(post_repo)
        calls = 0

        async def always_conflicts(vote):
            nonlocal calls
            calls += 1
            raise ConflictError("simulated race")

        monkeypatch.setattr(vote_repo, "create", always_conflicts)

        # Act
        with pytest.raises(ConflictError):
            await vote_service.apply_direction(post.id, new_user(), UP)
        await preference_service.drain()

        # Assert
        assert calls == vote_service.max_conflict_retries + 1
        assert (await post_repo.find_by_id(post.id)).score == 0
        assert recommender.signals == []


class TestConcurrency:
    """Tests for concurrent presses."""

    @pytest.mark.asyncio
    async def test_distinct_users_all_count(self, unit_env):
        """N users upvoting concurrently end at score N."""
        # Arrange
        vote_service = await unit_env.get(VoteService)
        preference_service = await unit_env.get(PreferenceService)
        recommender = await unit_env.get(RecommenderClient)
        post_repo = await unit_env.get(PostRepository)
        post = await seed_post(post_repo)
        users = [new_user() for _ in range(50)]

        # Act
        await asyncio.gather(
            *(vote_service.apply_direction(post.id, u, UP) for u in users)
        )
        await preference_service.drain()

        # Assert
        assert (await post_repo.find_by_id(post.id)).score == 50
        assert len(recommender.signals) == 50
        assert all(kind == PreferenceKind.LIKED for _, _, kind in recommender.signals)

    @pytest.mark.asyncio
    async def test_same_user_presses_are_serialized(self, unit_env):
        """Two concurrent presses by one user behave like two sequential presses."""
        # Arrange
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        preference_service = await unit_env.get(PreferenceService)
        recommender = await unit_env.get(RecommenderClient)
        post_repo = await unit_env.get(PostRepository)
        post = await seed_post(post_repo)
        user_id = new_user()

        # Act
        await asyncio.gather(
            vote_service.apply_direction(post.id, user_id, UP),
            vote_service.apply_direction(post.id, user_id, UP),
        )
        await preference_service.drain()

        # Assert
        vote = await vote_repo.find_by_user_and_post(user_id, post.id)
        assert vote.active is False
        assert vote.version == 2
        assert (await post_repo.find_by_id(post.id)).score == 0
        assert recommender.signals_for(user_id, post.id) == [
            PreferenceKind.LIKED,
            PreferenceKind.UNLIKED,
        ]

    @pytest.mark.asyncio
    async def test_race_without_shared_lock_is_resolved_by_retry(self, unit_env):
        """Two workers with separate locks still produce one consistent vote."""
        # Arrange
        post_repo = await unit_env.get(PostRepository)
        vote_repo = await unit_env.get(VoteRepository)
        transaction_manager = await unit_env.get(TransactionManager)
        preference_service = await unit_env.get(PreferenceService)
        workers = [
            VoteService(
                vote_repository=vote_repo,
                post_repository=post_repo,
                transaction_manager=transaction_manager,
                preference_service=preference_service,
                vote_locks=KeyedLock(),
            )
            for _ in range(2)
        ]
        post = await seed_post(post_repo)
        user_id = new_user()

        # Act
        await asyncio.gather(
            *(w.apply_direction(post.id, user_id, UP) for w in workers)
        )

        # Assert
        vote = await vote_repo.find_by_user_and_post(user_id, post.id)
        stored = await post_repo.find_by_id(post.id)
        assert vote.version == 2
        assert stored.score == vote.contribution == 0


class TestScoreInvariant:
    """The score always equals the sum of active contributions."""

    @pytest.mark.asyncio
    async def test_random_press_sequences(self, unit_env):
        # Arrange
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        post_repo = await unit_env.get(PostRepository)
        posts = [await seed_post(post_repo) for _ in range(3)]
        users = [new_user() for _ in range(5)]
        rng = random.Random(20240611)

        # Act & Assert
        for _ in range(200):
            post = rng.choice(posts)
            await vote_service.apply_direction(
                post.id, rng.choice(users), rng.choice([UP, DOWN])
            )
            stored = await post_repo.find_by_id(post.id)
            votes = await vote_repo.find_by_post(post.id)
            assert stored.score == total_contribution(votes)
            assert len({v.user_id for v in votes}) == len(votes)

    @pytest.mark.asyncio
    async def test_concurrent_mixed_presses(self, unit_env):
        # Arrange
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        post_repo = await unit_env.get(PostRepository)
        post = await seed_post(post_repo)
        users = [new_user() for _ in range(10)]
        rng = random.Random(7)
        presses = [
            (rng.choice(users), rng.choice([UP, DOWN])) for _ in range(100)
        ]

        # Act
        await asyncio.gather(
            *(vote_service.apply_direction(post.id, u, d) for u, d in presses)
        )

        # Assert
        stored = await post_repo.find_by_id(post.id)
        votes = await vote_repo.find_by_post(post.id)
        assert stored.score == total_contribution(votes)
