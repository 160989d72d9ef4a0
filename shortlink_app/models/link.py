from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from shortlink_app.database.connection import Base


class Link(Base):
    """
    One shortening: a redirect code pointing at a destination URL.

    Code and destination never change after insert. The only mutation
    is the click counter, which is bumped in place by the store.
    """
    __tablename__ = "links"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    # unique=True also gives us the lookup index
    redirect_code = Column(String(16), unique=True, nullable=False, index=True)
    destiny_url = Column(Text, nullable=False)
    clicks = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self) -> str:
        return f"<Link(redirect_code='{self.redirect_code}', clicks={self.clicks})>"
