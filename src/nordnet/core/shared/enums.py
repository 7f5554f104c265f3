from enum import Enum


class OrderSide(Enum):
    BUY = "BUY"
    SELL = "SELL"
