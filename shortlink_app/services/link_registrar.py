import logging

from fastapi.concurrency import run_in_threadpool

from shortlink_app.exceptions import DuplicateKeyError, InvalidInputError
from shortlink_app.services.code_generator import CodeGenerator
from shortlink_app.storage.strategies import LinkStore

logger = logging.getLogger(__name__)


def build_short_url(base_url: str, code: str) -> str:
    """Join the public base address and a redirect code into a short URL."""
    return f"{base_url.rstrip('/')}/r/{code}"


class LinkRegistrar:
    """
    Creates new links.

    Writes to the link store only. The cache stays cold until the
    first redirect for the code backfills it.
    """

    def __init__(
        self,
        store: LinkStore,
        generator: CodeGenerator,
        collision_retries: int = 0
    ):
        """
        Args:
            store: Durable link store
            generator: Redirect code generator
            collision_retries: Extra attempts with a fresh code when the
                generated one is already taken (0 = fail on first collision)
        """
        self.store = store
        self.generator = generator
        self.collision_retries = collision_retries

    async def register(self, destination_url: str, base_url: str) -> str:
        """
        Shorten a URL.

        Process:
        1. Reject empty input before touching the store
        2. Generate a code and insert (code, destination)
        3. Return the fully qualified short URL

        Raises:
            InvalidInputError: destination_url is empty
            PersistenceError: the insert failed (DuplicateKeyError included
                once retries are exhausted)
        """
        if not destination_url:
            raise InvalidInputError("URL is required")

        attempt = 0
        while True:
            code = self.generator.generate()
            try:
                await run_in_threadpool(self.store.insert, code, destination_url)
                break
            except DuplicateKeyError:
                if attempt >= self.collision_retries:
                    logger.error("Redirect code collision on %s, giving up", code)
                    raise
                attempt += 1
                logger.warning("Redirect code collision on %s, retrying (%d)", code, attempt)

        logger.info("Created link %s -> %s", code, destination_url)
        return build_short_url(base_url, code)
