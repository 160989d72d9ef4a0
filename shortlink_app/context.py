"""
Application context: the one owner of process-wide clients.

The store, cache and background runner are built once at startup,
handed to request handlers through FastAPI dependencies, and closed
at shutdown. Nothing else holds them as module globals.
"""

import logging
from dataclasses import dataclass

from shortlink_app.background.factory import BackgroundBackend, BackgroundRunnerFactory
from shortlink_app.background.strategies import BackgroundRunner
from shortlink_app.cache.factory import CacheBackend, CacheFactory
from shortlink_app.cache.strategies import CacheStrategy
from shortlink_app.config import Settings
from shortlink_app.database.connection import create_db_engine
from shortlink_app.services.code_generator import RandomCodeGenerator
from shortlink_app.services.link_registrar import LinkRegistrar
from shortlink_app.services.redirect_resolver import RedirectResolver
from shortlink_app.storage.strategies import LinkStore, SQLAlchemyLinkStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    store: LinkStore
    cache: CacheStrategy
    runner: BackgroundRunner

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        """Build every collaborator from configuration."""
        engine = create_db_engine(settings.database_url, echo=False)
        return cls(
            settings=settings,
            store=SQLAlchemyLinkStore(engine),
            cache=CacheFactory.create(CacheBackend(settings.cache_backend), settings),
            runner=BackgroundRunnerFactory.create(
                BackgroundBackend(settings.background_backend), settings
            ),
        )

    async def start(self) -> None:
        self.store.create_schema()
        logger.info("Link store ready")

    async def close(self) -> None:
        """Let in-flight clicks and backfills finish, then release clients."""
        await self.runner.close()
        await self.cache.close()
        self.store.close()
        logger.info("Application context closed")

    def registrar(self) -> LinkRegistrar:
        return LinkRegistrar(
            store=self.store,
            generator=RandomCodeGenerator(length=self.settings.redirect_code_length),
            collision_retries=self.settings.code_collision_retries,
        )

    def resolver(self) -> RedirectResolver:
        return RedirectResolver(
            store=self.store,
            cache=self.cache,
            runner=self.runner,
            cache_ttl=self.settings.cache_ttl,
            cache_key_prefix=self.settings.cache_key_prefix,
        )
