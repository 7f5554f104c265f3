from decimal import Decimal
from typing import Optional

from pydantic import AliasChoices, Field

from ..shared.enums import OrderSide
from ..shared.models import EpochMillis, Identifier, InstrumentId, NordnetModel, Price


class AccountSummary(NordnetModel):
    id: Identifier
    alias: Optional[str] = None
    default: bool = False


class Account(NordnetModel):
    """Balances for one account, all in ``account_currency``."""

    account_currency: str = Field(alias="accountCurrency")
    account_sum: Decimal = Field(alias="accountSum")
    own_capital: Decimal = Field(alias="ownCapital")
    own_capital_morning: Decimal = Field(alias="ownCapitalMorning")
    trading_power: Decimal = Field(alias="tradingPower")
    full_market_value: Decimal = Field(alias="fullMarketvalue")
    future_sum: Decimal = Field(alias="futureSum")
    forward_sum: Decimal = Field(alias="forwardSum")
    collateral: Decimal
    interest: Decimal
    pawn_value: Decimal = Field(alias="pawnValue")
    loan_limit: Decimal = Field(alias="loanLimit")


class Ledger(NordnetModel):
    currency: str
    account_sum: Decimal = Field(alias="accountSum")
    account_sum_acc: Decimal = Field(alias="accountSumAcc")
    acc_int_cred: Decimal = Field(alias="accIntCred")
    acc_int_deb: Decimal = Field(alias="accIntDeb")


class PositionInstrument(NordnetModel):
    main_market_id: int = Field(alias="mainMarketId")
    identifier: Identifier
    type: str
    # the positions endpoint has been seen sending this key misspelt
    currency: Optional[str] = Field(default=None, validation_alias=AliasChoices("currency", "currecy"))
    main_market_price: Optional[Decimal] = Field(default=None, alias="mainMarketPrice")


class Position(NordnetModel):
    instrument: PositionInstrument = Field(alias="instrumentID")
    qty: Decimal
    acq_price: Decimal = Field(alias="acqPrice")
    acq_price_acc: Decimal = Field(alias="acqPriceAcc")
    market_value: Decimal = Field(alias="marketValue")
    market_value_acc: Decimal = Field(alias="marketValueAcc")
    pawn_percent: Decimal = Field(alias="pawnPercent")


class Validity(NordnetModel):
    type: str
    valid_until: Optional[EpochMillis] = Field(default=None, alias="validUntil")


class ActivationCondition(NordnetModel):
    type: str
    trigger_value: Optional[Decimal] = Field(default=None, alias="triggerValue")
    trigger_condition: Optional[str] = Field(default=None, alias="triggerCondition")


class Order(NordnetModel):
    """An order as held in the account's order book."""

    order_id: int = Field(alias="orderID")
    accno: int
    instrument: InstrumentId = Field(alias="instrumentID")
    side: OrderSide
    price: Price
    volume: Decimal
    traded_volume: Decimal = Field(alias="tradedVolume")
    open_volume: Decimal = Field(alias="openVolume")
    price_condition: str = Field(alias="priceCondition")
    volume_condition: str = Field(alias="volumeCondition")
    validity: Validity
    activation_condition: Optional[ActivationCondition] = Field(default=None, alias="activationCondition")
    order_state: str = Field(alias="orderState")
    action_state: str = Field(alias="actionState")
    mod_date: Optional[EpochMillis] = Field(default=None, alias="modDate")

    @property
    def remaining_volume(self) -> Decimal:
        return self.volume - self.traded_volume


class SecurityTrade(NordnetModel):
    trade_id: str = Field(alias="tradeID")
    order_id: int = Field(alias="orderID")
    accno: int
    instrument: InstrumentId = Field(alias="instrumentID")
    side: OrderSide
    price: Price
    volume: Decimal
    trade_time: str = Field(alias="tradetime")
    counterparty: Optional[str] = None


class Trade(NordnetModel):
    security_trade: SecurityTrade = Field(alias="securityTrade")
