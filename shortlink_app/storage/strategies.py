"""
Link store strategies using Strategy Pattern.

The resolver and registrar only talk to the LinkStore interface,
so tests can swap in fakes (e.g. an unreachable store) without a database.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from shortlink_app.database.connection import Base
from shortlink_app.exceptions import (
    DuplicateKeyError,
    InternalError,
    NotFoundError,
    PersistenceError,
)
from shortlink_app.models.link import Link

logger = logging.getLogger(__name__)


class LinkStore(ABC):
    """
    Abstract base class for the durable link store.

    Contract required by the core:
    - keyed lookup by redirect code
    - insert with a uniqueness guarantee on the code
    - atomic click increment, race-safe under concurrent callers
    """

    @abstractmethod
    def find_by_code(self, code: str) -> str:
        """
        Get the destination URL for a redirect code.

        Raises:
            NotFoundError: the code is unknown
            InternalError: the store could not be queried
        """
        pass

    @abstractmethod
    def insert(self, code: str, destination_url: str) -> Link:
        """
        Persist a new link.

        Raises:
            DuplicateKeyError: the code is already taken
            PersistenceError: any other write failure
        """
        pass

    @abstractmethod
    def increment_clicks(self, code: str) -> None:
        """
        Add one click to the link, as a single store-level operation.

        Raises:
            InternalError: the update failed
        """
        pass

    @abstractmethod
    def list_all(self) -> List[Link]:
        """Get every link, newest first."""
        pass

    @abstractmethod
    def get(self, code: str) -> Optional[Link]:
        """Get the full link record, or None."""
        pass

    def create_schema(self) -> None:
        """Create backing tables if the store needs them."""

    def close(self) -> None:
        """Release connections held by the store."""


class SQLAlchemyLinkStore(LinkStore):
    """
    Relational link store on top of SQLAlchemy.

    Every operation opens its own short-lived session. Background jobs run
    after the request that spawned them is gone, so they must never borrow
    a request-scoped session.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.session_factory = sessionmaker(
            bind=engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    def create_schema(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def close(self) -> None:
        self.engine.dispose()

    def find_by_code(self, code: str) -> str:
        try:
            with self.session_factory() as db:
                destination = (
                    db.query(Link.destiny_url)
                    .filter(Link.redirect_code == code)
                    .scalar()
                )
        except SQLAlchemyError as e:
            logger.error("Error querying link %s: %s", code, e)
            raise InternalError() from e

        if destination is None:
            raise NotFoundError()
        return destination

    def insert(self, code: str, destination_url: str) -> Link:
        link = Link(redirect_code=code, destiny_url=destination_url)
        with self.session_factory() as db:
            try:
                db.add(link)
                db.commit()
                db.refresh(link)
            except IntegrityError as e:
                db.rollback()
                raise DuplicateKeyError(f"Redirect code already exists: {code}") from e
            except SQLAlchemyError as e:
                db.rollback()
                logger.error("Error inserting link %s: %s", code, e)
                raise PersistenceError() from e
        return link

    def increment_clicks(self, code: str) -> None:
        # UPDATE links SET clicks = clicks + 1 ... never read-modify-write
        statement = (
            update(Link)
            .where(Link.redirect_code == code)
            .values(clicks=Link.clicks + 1)
        )
        with self.session_factory() as db:
            try:
                db.execute(statement)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise InternalError(f"Error updating clicks for {code}: {e}") from e

    def list_all(self) -> List[Link]:
        try:
            with self.session_factory() as db:
                return (
                    db.query(Link)
                    .order_by(Link.created_at.desc(), Link.id.desc())
                    .all()
                )
        except SQLAlchemyError as e:
            logger.error("Error querying links: %s", e)
            raise InternalError() from e

    def get(self, code: str) -> Optional[Link]:
        try:
            with self.session_factory() as db:
                return db.query(Link).filter(Link.redirect_code == code).first()
        except SQLAlchemyError as e:
            raise InternalError() from e
