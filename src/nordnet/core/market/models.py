from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from ..shared.models import Identifier, InstrumentId, NordnetDateTime, NordnetModel


class Instrument(NordnetModel):
    """Reference data for one instrument on one market.

    ``multiplier`` and ``ticksize_id`` are only sent on single instrument
    lookups, not on searches.
    """

    identifier: Identifier
    market_id: int = Field(alias="marketID")
    type: str
    short_name: str = Field(alias="shortname")
    long_name: str = Field(alias="longname")
    market_name: str = Field(alias="marketname")
    currency: str
    country: Optional[str] = None
    isin_code: Optional[str] = Field(default=None, alias="isinCode")
    multiplier: Optional[Decimal] = None
    ticksize_id: Optional[int] = Field(default=None, alias="ticksizeID")

    @property
    def instrument_id(self) -> InstrumentId:
        return InstrumentId(market_id=self.market_id, identifier=self.identifier)


class ChartPoint(NordnetModel):
    timestamp: str
    change: Decimal
    volume: int
    last: Decimal = Field(alias="float")


class InstrumentList(NordnetModel):
    id: Identifier
    name: str
    country: str


class ListedInstrument(NordnetModel):
    """Short form of an instrument used by lists and derivative underlyings."""

    identifier: Identifier
    market_id: int = Field(alias="marketID")
    short_name: str = Field(alias="shortname")


class OrderType(NordnetModel):
    type: str
    text: str


class Market(NordnetModel):
    market_id: int = Field(alias="marketID")
    name: str
    country: str
    order_types: List[OrderType] = Field(default_factory=list, alias="ordertypes")


class TradingDay(NordnetModel):
    trading_date: date = Field(alias="date")
    display_date: str


class Index(NordnetModel):
    id: str
    type: str
    long_name: str = Field(alias="longname")
    source: str
    country: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageurl")


class TickSize(NordnetModel):
    """One band of a tick size table: ``tick`` applies to prices above ``above``."""

    tick: Decimal
    above: Decimal
    decimals: int


class Derivative(NordnetModel):
    identifier: Identifier
    market_id: int = Field(alias="marketID")
    short_name: str = Field(alias="shortname")
    kind: str
    currency: str
    multiplier: Decimal
    strike_price: Decimal = Field(alias="strikeprice")
    expiry_date: NordnetDateTime = Field(alias="expirydate")
    expiry_type: str = Field(alias="expirytype")
    call_put: str = Field(alias="callPut")
