from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _to_str(value: Any) -> Any:
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return str(value)
    return value


def _from_epoch_millis(value: Any) -> Any:
    """The API reports most instants as milliseconds since the epoch."""
    if isinstance(value, str) and value.isdigit():
        value = int(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    return value


def _from_nordnet_datetime(value: Any) -> Any:
    """Parse "2010-03-01 10:40:19 UTC" (and the same without the zone) as UTC."""
    if not isinstance(value, str):
        return value
    text = value.strip()
    if text.endswith(" UTC"):
        text = text[: -len(" UTC")]
    try:
        return datetime.strptime(text, "%Y-%m-%d %H:%M:%S").replace(tzinfo=timezone.utc)
    except ValueError:
        return value


Identifier = Annotated[str, BeforeValidator(_to_str)]
EpochMillis = Annotated[datetime, BeforeValidator(_from_epoch_millis)]
NordnetDateTime = Annotated[datetime, BeforeValidator(_from_nordnet_datetime)]


class NordnetModel(BaseModel):
    """Base for every decoded API payload.

    The API mixes camelCase and lowercase keys; fields declare the wire name
    as their alias and can be populated by either.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Price(NordnetModel):
    """Value object for a monetary amount as reported by the API.

    Attributes:
        value (Decimal): The amount, sent either as a JSON number or string
        currency (str): ISO currency code, sent as ``curr``
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    value: Decimal
    currency: str = Field(alias="curr")

    def __str__(self) -> str:
        return f"{self.currency} {self.value}"


class InstrumentId(NordnetModel):
    """The (market, identifier) pair that names a tradable instrument."""

    market_id: int = Field(alias="marketID")
    identifier: Identifier

    def to_params(self) -> dict:
        return {"identifier": self.identifier, "marketID": str(self.market_id)}
