import logging

from fastapi.concurrency import run_in_threadpool

from shortlink_app.background.strategies import BackgroundRunner
from shortlink_app.cache.strategies import CacheStrategy
from shortlink_app.exceptions import CacheError, InternalError, InvalidInputError
from shortlink_app.storage.strategies import LinkStore

logger = logging.getLogger(__name__)


class RedirectResolver:
    """
    Resolves redirect codes using the Cache-Aside pattern.

    Dependencies are injected (store, cache, runner), so the resolver can be
    exercised with fakes: an unreachable store, a failing cache, a runner
    that is drained on demand.
    """

    def __init__(
        self,
        store: LinkStore,
        cache: CacheStrategy,
        runner: BackgroundRunner,
        cache_ttl: int = 86400,
        cache_key_prefix: str = "url:"
    ):
        """
        Args:
            store: Durable link store (source of truth)
            cache: Resolution cache (disposable)
            runner: Dispatcher for fire-and-forget work
            cache_ttl: Expiry of backfilled entries, in seconds
            cache_key_prefix: Namespace for cache keys
        """
        self.store = store
        self.cache = cache
        self.runner = runner
        self.cache_ttl = cache_ttl
        self.cache_key_prefix = cache_key_prefix

    def cache_key(self, code: str) -> str:
        return f"{self.cache_key_prefix}{code}"

    async def resolve(self, code: str) -> str:
        """
        Get the destination URL for a redirect code.

        Flow:
        1. Check cache first
        2. Cache HIT: use it, the store is not read (TTL is not refreshed)
        3. Cache MISS: read the store, then backfill the cache in the background
        4. Count the click in the background, hit or miss
        5. Return the destination without waiting for 3's backfill or 4's increment

        Background work is never awaited here and its failures are only logged.

        Raises:
            InvalidInputError: empty code
            NotFoundError: code unknown to both cache and store
            InternalError: cache or store unreachable on this path
        """
        if not code:
            raise InvalidInputError("Invalid redirect code")

        key = self.cache_key(code)

        # Step 1: Try cache first
        try:
            destination = await self.cache.get(key)
        except CacheError as e:
            logger.error("Error reading cache for %s: %s", code, e)
            raise InternalError() from e

        if destination is None:
            # Step 3: Cache MISS - NotFoundError propagates, nothing is counted
            destination = await run_in_threadpool(self.store.find_by_code, code)
            self._schedule_backfill(code, key, destination)

        # Step 4: Count the click, regardless of hit or miss
        self._schedule_click(code)

        return destination

    def _schedule_backfill(self, code: str, key: str, destination: str) -> None:
        async def backfill() -> None:
            await self.cache.set(key, destination, self.cache_ttl)

        self.runner.submit(f"cache backfill for {code}", backfill)

    def _schedule_click(self, code: str) -> None:
        async def increment() -> None:
            # Single UPDATE at the store, run off the event loop
            await run_in_threadpool(self.store.increment_clicks, code)

        self.runner.submit(f"click increment for {code}", increment)
