from datetime import datetime, timezone
from decimal import Decimal

import pytest

from nordnet.core.shared.enums import OrderSide
from nordnet.core.shared.models import InstrumentId, Price
from nordnet.test_utils.fake_nordnet_api import (
    ACCOUNT_JSON,
    ACCOUNT_LEDGERS_JSON,
    ACCOUNT_ORDERS_JSON,
    ACCOUNT_POSITIONS_JSON,
    ACCOUNT_TRADES_JSON,
    ACCOUNTS_JSON,
)


@pytest.mark.asyncio
async def test_accounts(client, fake_api):
    fake_api.stub("GET", "/v1/accounts", ACCOUNTS_JSON)

    accounts = await client.accounts()

    assert fake_api.last_request.basic_credentials == "SESSIONKEY:SESSIONKEY"
    assert len(accounts) == 1
    assert accounts[0].id == "1000000"
    assert accounts[0].alias is None
    assert accounts[0].default is True


@pytest.mark.asyncio
async def test_account_balances_are_decimals(client, fake_api):
    fake_api.stub("GET", "/v1/accounts/1000000", ACCOUNT_JSON)

    account = await client.account("1000000")

    assert account.account_currency == "SEK"
    assert account.trading_power == Decimal("948000.0")
    assert account.own_capital_morning == Decimal("1000000")
    assert account.full_market_value == Decimal(0)


@pytest.mark.asyncio
async def test_account_accepts_integer_account_number(client, fake_api):
    fake_api.stub("GET", "/v1/accounts/1000000", ACCOUNT_JSON)

    await client.account(1000000)

    assert fake_api.last_request.raw_path == "/v1/accounts/1000000"


@pytest.mark.asyncio
async def test_account_ledgers(client, fake_api):
    fake_api.stub("GET", "/v1/accounts/1000000/ledgers", ACCOUNT_LEDGERS_JSON)

    ledgers = await client.account_ledgers("1000000")

    assert len(ledgers) == 1
    assert ledgers[0].currency == "SEK"
    assert ledgers[0].account_sum == Decimal("1000000.0")
    assert ledgers[0].acc_int_deb == Decimal(0)


@pytest.mark.asyncio
async def test_account_positions_tolerate_misspelt_currency(client, fake_api):
    fake_api.stub("GET", "/v1/accounts/1000000/positions", ACCOUNT_POSITIONS_JSON)

    positions = await client.account_positions("1000000")

    position = positions[0]
    assert position.qty == Decimal("9.0")
    assert position.acq_price == Decimal("700.1524")
    assert position.pawn_percent == Decimal(85)
    assert position.instrument.main_market_id == 11
    assert position.instrument.identifier == "101"
    assert position.instrument.currency == "SEK"
    assert position.instrument.main_market_price == Decimal(55)


@pytest.mark.asyncio
async def test_account_orders(client, fake_api):
    fake_api.stub("GET", "/v1/accounts/1000000/orders", ACCOUNT_ORDERS_JSON)

    orders = await client.account_orders("1000000")

    order = orders[0]
    assert order.order_id == 683772
    assert order.accno == 9210370
    assert order.side == OrderSide.BUY
    assert order.price == Price(value=Decimal(65), currency="SEK")
    assert order.instrument == InstrumentId(market_id=11, identifier="101")
    assert order.volume == Decimal(100)
    assert order.remaining_volume == Decimal(100)
    assert order.validity.type == "DAY"
    assert order.validity.valid_until == datetime(2013, 6, 10, 15, 5, tzinfo=timezone.utc)
    assert order.activation_condition.type == "NONE"
    assert order.mod_date.tzinfo == timezone.utc


@pytest.mark.asyncio
async def test_account_trades_normalise_string_ids(client, fake_api):
    fake_api.stub("GET", "/v1/accounts/1000000/trades", ACCOUNT_TRADES_JSON)

    trades = await client.account_trades("1000000")

    trade = trades[0].security_trade
    assert trade.trade_id == "B8118-20130603"
    assert trade.order_id == 683168
    assert trade.accno == 9210329
    assert trade.instrument == InstrumentId(market_id=11, identifier="3966")
    assert trade.price.value == Decimal(146)
    assert trade.volume == Decimal(2)
    assert trade.side == OrderSide.BUY
    assert trade.trade_time == "12:06:06"
