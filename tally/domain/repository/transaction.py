"""Transaction boundary interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager


class TransactionManager(ABC):
    """Groups repository writes into one all-or-nothing unit.

    Writes made inside ``atomic()`` are committed when the block exits
    normally and rolled back when it raises (including cancellation).
    """

    @abstractmethod
    def atomic(self) -> AbstractAsyncContextManager[None]:
        """Open an atomic unit of work.

        Usage:
            async with transaction_manager.atomic():
                await vote_repository.save(...)
                await post_repository.apply_score_delta(...)
        """
        pass
