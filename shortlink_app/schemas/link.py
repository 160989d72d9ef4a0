from pydantic import BaseModel, Field, ConfigDict
from typing import List
from datetime import datetime


class ShortenRequest(BaseModel):
    # Plain string: the destination is stored as given, not validated as a URL
    url: str = Field(..., description="The destination URL to be shortened")


class ShortenResponse(BaseModel):
    short_url: str


class LinkOut(BaseModel):
    """One row of the link listing"""
    redirect_code: str
    destiny_url: str
    short_url: str
    clicks: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LinksResponse(BaseModel):
    links: List[LinkOut]
