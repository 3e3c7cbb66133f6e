"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from tally.config import Settings
from tally.util.di.base import ProviderBase
from tally.util.keyed_lock import KeyedLock


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_vote_locks(self) -> KeyedLock:
        """Provide the process-wide (user, post) lock arena."""
        return KeyedLock()
