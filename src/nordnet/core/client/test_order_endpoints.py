from decimal import Decimal

import pytest

from nordnet.core.order.models import OrderRequest
from nordnet.core.shared.enums import OrderSide
from nordnet.core.shared.exceptions import NordnetResponseException
from nordnet.test_utils.fake_nordnet_api import CREATE_ORDER_JSON, DELETE_ORDER_JSON, UPDATE_ORDER_JSON

CREATE_ORDER_PATH = "/v1/accounts/1000000/orders?currency=SEK&identifier=101&marketID=11&price=65&side=buy&volume=100"


@pytest.mark.asyncio
async def test_create_order_with_params(client, fake_api):
    fake_api.stub("POST", CREATE_ORDER_PATH, CREATE_ORDER_JSON)

    params = {"identifier": "101", "marketID": "11", "price": "65", "volume": "100", "side": "buy", "currency": "SEK"}
    reply = await client.create_order("1000000", params)

    assert fake_api.last_request.basic_credentials == "SESSIONKEY:SESSIONKEY"
    assert reply.order_id == 684870
    assert reply.acc_no == 1000000
    assert reply.action_state == "INS_PEND"
    assert reply.is_ok


@pytest.mark.asyncio
async def test_create_order_with_order_request(client, fake_api):
    fake_api.stub("POST", CREATE_ORDER_PATH, CREATE_ORDER_JSON)

    request = OrderRequest(
        identifier="101",
        market_id=11,
        price=Decimal("65"),
        volume=Decimal("100"),
        side=OrderSide.BUY,
        currency="SEK",
    )
    reply = await client.create_order(1000000, request)

    assert fake_api.last_request.raw_path == CREATE_ORDER_PATH
    assert reply.order_state == "LOCAL"


@pytest.mark.asyncio
async def test_update_order(client, fake_api):
    fake_api.stub("PUT", "/v1/accounts/1000000/orders/684870?price=68", UPDATE_ORDER_JSON)

    reply = await client.update_order("1000000", 684870, {"price": "68"})

    assert fake_api.last_request.method == "PUT"
    assert reply.action_state == "MOD_PEND"
    assert reply.order_state == "ON_MARKET"


@pytest.mark.asyncio
async def test_update_order_with_order_request(client, fake_api):
    path = "/v1/accounts/1000000/orders/684870?currency=SEK&identifier=101&marketID=11&price=68&side=sell&volume=50"
    fake_api.stub("PUT", path, UPDATE_ORDER_JSON)

    request = OrderRequest(
        identifier="101",
        market_id=11,
        price=Decimal("68"),
        volume=Decimal("50"),
        side=OrderSide.SELL,
        currency="SEK",
    )
    reply = await client.update_order(1000000, 684870, request)

    assert fake_api.last_request.raw_path == path
    assert reply.action_state == "MOD_PEND"


@pytest.mark.asyncio
async def test_delete_order(client, fake_api):
    fake_api.stub("DELETE", "/v1/accounts/1000000/orders/684870", DELETE_ORDER_JSON)

    reply = await client.delete_order("1000000", 684870)

    assert fake_api.last_request.method == "DELETE"
    assert reply.action_state == "DEL_PEND"
    assert reply.acc_no == 9210370


@pytest.mark.asyncio
async def test_rejected_order_raises_with_api_error_code(client, fake_api):
    fake_api.stub(
        "DELETE",
        "/v1/accounts/1000000/orders/1",
        '{"code":"NEXT_ORDER_NOT_FOUND","message":"Order not found"}',
        status=404,
    )
    with pytest.raises(NordnetResponseException) as excinfo:
        await client.delete_order("1000000", 1)
    assert excinfo.value.status == 404
    assert excinfo.value.code == "NEXT_ORDER_NOT_FOUND"
