from datetime import datetime, timezone

import pytest

from nordnet.core.client.nordnet_client import NordnetClient
from nordnet.core.shared.exceptions import NordnetResponseException, NordnetSessionException
from nordnet.test_utils.fake_nordnet_api import (
    LOGIN_JSON,
    LOGOUT_JSON,
    REALTIME_ACCESS_JSON,
    SYSTEM_STATUS_JSON,
    TOUCH_JSON,
)


@pytest.mark.asyncio
async def test_system_status_is_fetched_without_credentials(anonymous_client, fake_api):
    fake_api.stub("GET", "/v1", SYSTEM_STATUS_JSON)

    status = await anonymous_client.system_status()

    assert fake_api.last_request.authorization is None
    assert status.system_running
    assert status.valid_version
    assert status.message == ""
    assert status.timestamp == datetime(2013, 6, 15, 20, 17, 5, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_login_posts_credentials_and_stores_session_key(anonymous_client, fake_api):
    fake_api.stub("POST", "/v1/login?auth=SECRET&service=TEST", LOGIN_JSON)

    login = await anonymous_client.login()

    assert fake_api.last_request.method == "POST"
    assert fake_api.last_request.authorization is None
    assert login.session_key == "441ff696b7bd75fbe50add3e2e728eb761596f1b"
    assert login.expires_in == 300
    assert login.public_feed.hostname == "pub.api.test.nordnet.se"
    assert login.private_feed.port == 443
    assert anonymous_client.session_key == login.session_key
    assert anonymous_client.is_logged_in


@pytest.mark.asyncio
async def test_requests_after_login_carry_the_new_session_key(anonymous_client, fake_api):
    fake_api.stub("POST", "/v1/login?auth=SECRET&service=TEST", LOGIN_JSON)
    fake_api.stub("GET", "/v1/realtime_access", REALTIME_ACCESS_JSON)

    login = await anonymous_client.login()
    await anonymous_client.realtime_access()

    assert fake_api.last_request.basic_credentials == f"{login.session_key}:{login.session_key}"


@pytest.mark.asyncio
async def test_login_requires_credentials_and_service(fake_api):
    async with await NordnetClient.create(base_url=fake_api.base_url) as client:
        with pytest.raises(NordnetSessionException):
            await client.login()
    assert fake_api.requests == []


@pytest.mark.asyncio
async def test_rejected_login_keeps_client_logged_out(anonymous_client, fake_api):
    fake_api.stub(
        "POST",
        "/v1/login?auth=SECRET&service=TEST",
        '{"code":"NEXT_LOGIN_INVALID_LOGIN_PARAMETER","message":"Invalid login parameters"}',
        status=401,
    )
    with pytest.raises(NordnetResponseException) as excinfo:
        await anonymous_client.login()
    assert excinfo.value.code == "NEXT_LOGIN_INVALID_LOGIN_PARAMETER"
    assert not anonymous_client.is_logged_in


@pytest.mark.asyncio
async def test_logout_deletes_session_and_forgets_key(client, fake_api):
    fake_api.stub("DELETE", "/v1/login/SESSIONKEY", LOGOUT_JSON)

    status = await client.logout()

    assert fake_api.last_request.basic_credentials == "SESSIONKEY:SESSIONKEY"
    assert status.logged_in is False
    assert client.session_key is None


@pytest.mark.asyncio
async def test_logout_without_session_raises(anonymous_client, fake_api):
    with pytest.raises(NordnetSessionException):
        await anonymous_client.logout()
    assert fake_api.requests == []


@pytest.mark.asyncio
async def test_touch_keeps_session_alive(client, fake_api):
    fake_api.stub("PUT", "/v1/login/SESSIONKEY", TOUCH_JSON)

    status = await client.touch()

    assert fake_api.last_request.method == "PUT"
    assert fake_api.last_request.basic_credentials == "SESSIONKEY:SESSIONKEY"
    assert status.logged_in is True
    assert client.session_key == "SESSIONKEY"


@pytest.mark.asyncio
async def test_touch_without_session_raises(anonymous_client):
    with pytest.raises(NordnetSessionException):
        await anonymous_client.touch()


@pytest.mark.asyncio
async def test_realtime_access_decodes_market_levels(client, fake_api):
    fake_api.stub("GET", "/v1/realtime_access", REALTIME_ACCESS_JSON)

    access = await client.realtime_access()

    assert fake_api.last_request.basic_credentials == "SESSIONKEY:SESSIONKEY"
    assert [(a.market_id, a.level) for a in access] == [(44, 2), (11, 2), (34, 1), (12, 2)]
