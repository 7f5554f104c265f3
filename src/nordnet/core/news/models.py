from typing import Optional

from pydantic import Field

from ..shared.models import NordnetDateTime, NordnetModel


class NewsSource(NordnetModel):
    source_id: int = Field(alias="sourceid")
    name: str
    code: str
    level: str
    image_url: Optional[str] = Field(default=None, alias="imageurl")


class NewsItem(NordnetModel):
    """A news headline, or a full article when fetched by id.

    ``body``, ``preamble`` and ``lang`` are only present on single item lookups.
    """

    item_id: int = Field(alias="itemid")
    source_id: int = Field(alias="sourceid")
    published: NordnetDateTime = Field(alias="datetime")
    headline: str
    type: str
    body: Optional[str] = None
    preamble: Optional[str] = None
    lang: Optional[str] = None
