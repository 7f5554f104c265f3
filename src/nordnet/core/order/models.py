from datetime import date
from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, Field

from ..shared.enums import OrderSide
from ..shared.models import NordnetModel


class OrderRequest(BaseModel):
    """Parameters for entering a new order.

    Attributes:
        identifier (str): Instrument identifier within the market
        market_id (int): Market the order is routed to
        price (Decimal): Limit price
        volume (Decimal): Number of units
        side (OrderSide): Buy or sell
        currency (str): Currency the price is given in
        order_type (str): Optional order type, e.g. ``NORMAL`` or ``FAK``
        valid_until (date): Optional last day the order stays on the market
        open_volume (Decimal): Optional visible volume for iceberg orders
    """

    identifier: str
    market_id: int
    price: Decimal
    volume: Decimal
    side: OrderSide
    currency: str
    order_type: Optional[str] = None
    valid_until: Optional[date] = None
    open_volume: Optional[Decimal] = None

    def to_params(self) -> Dict[str, str]:
        params = {
            "identifier": self.identifier,
            "marketID": str(self.market_id),
            "price": str(self.price),
            "volume": str(self.volume),
            "side": self.side.value.lower(),
            "currency": self.currency,
        }
        if self.order_type is not None:
            params["orderType"] = self.order_type
        if self.valid_until is not None:
            params["validUntil"] = self.valid_until.isoformat()
        if self.open_volume is not None:
            params["openVolume"] = str(self.open_volume)
        return params


class OrderReply(NordnetModel):
    """Acknowledgement returned when an order is entered, modified or deleted."""

    order_id: int = Field(alias="orderID")
    acc_no: int = Field(alias="accNo")
    result_code: str = Field(alias="resultCode")
    order_state: str = Field(alias="orderState")
    action_state: str = Field(alias="actionState")

    @property
    def is_ok(self) -> bool:
        return self.result_code == "OK"
