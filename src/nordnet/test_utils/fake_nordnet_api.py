import asyncio
import json
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from aiohttp import BasicAuth, web
from aiohttp.test_utils import TestServer


# Payloads as documented for the v1 API. Several of them are doc examples
# rather than captured responses.

SYSTEM_STATUS_JSON = """{
    "message":"",
    "valid_version":true,
    "system_running":true,
    "skip_phrase":true,
    "timestamp":1371327425000
}"""

LOGIN_JSON = """{
    "country":"SE",
    "expires_in":300,
    "session_key":"441ff696b7bd75fbe50add3e2e728eb761596f1b",
    "environment":"test",
    "private_feed":{"port":443,"hostname":"priv.api.test.nordnet.se","encrypted":true},
    "public_feed":{"port":443,"hostname":"pub.api.test.nordnet.se","encrypted":true}
}"""

LOGOUT_JSON = """{"logged_in":false}"""

TOUCH_JSON = """{"logged_in":true}"""

REALTIME_ACCESS_JSON = """[
    {"marketID":"44","level":2},
    {"marketID":"11","level":2},
    {"marketID":"34","level":1},
    {"marketID":"12","level":2}
]"""

NEWS_SOURCES_JSON = """[
    {"name":"Dow Jones News","imageurl":"/now/images/loggaDJN.gif","code":"djn","sourceid":3,"level":"REALTIME"},
    {"name":"OMX","imageurl":"/now/images/loggaOmxnews.gif","code":"omxnews","sourceid":7,"level":"REALTIME"},
    {"name":"Thomson Reuters","imageurl":"/now/images/loggaHugin.gif","code":"hugin","sourceid":9,"level":"REALTIME"}
]"""

NEWS_ITEMS_JSON = """[
    {"datetime":"2010-03-01 10:40:19 UTC","headline":"LONDON MARKETS: BP Falls","itemid":159619003,"sourceid":3,"type":"NEWS"},
    {"datetime":"2010-03-01 10:41:02 UTC","headline":"LONDON MARKETS: BP Rises","itemid":159619004,"sourceid":3,"type":"NEWS"}
]"""

NEWS_ITEM_JSON = """{
    "datetime":"2010-03-01 10:40:19 UTC",
    "headline":"Danske Equities",
    "body":"test",
    "itemid":4711,
    "lang":"da",
    "preamble":"test",
    "sourceid":6,
    "type":"NEWS"
}"""

ACCOUNTS_JSON = """[
    {"alias":null,"default":"true","id":"1000000"}
]"""

ACCOUNT_JSON = """{
    "ownCapitalMorning":"1000000.0",
    "accountCurrency":"SEK",
    "ownCapital":"1000000.0",
    "futureSum":"0.0",
    "forwardSum":"0.0",
    "collateral":"0.0",
    "tradingPower":"948000.0",
    "interest":"0.0",
    "pawnValue":"0.0",
    "accountSum":"1000000.0",
    "loanLimit":"1000000.0",
    "fullMarketvalue":"0.0"
}"""

ACCOUNT_LEDGERS_JSON = """[
    {
        "accountSumAcc":"1000000.0",
        "accIntCred":"0.0",
        "currency":"SEK",
        "accIntDeb":"0.0",
        "accountSum":"1000000.0"
    }
]"""

ACCOUNT_POSITIONS_JSON = """[
    {
        "acqPrice":"700.1524",
        "acqPriceAcc":"700.1524",
        "pawnPercent":"85",
        "qty":"9.0",
        "marketValue":"642.6",
        "marketValueAcc":"642.6",
        "instrumentID":{
            "mainMarketId":"11",
            "identifier":"101",
            "type":"A",
            "currecy":"SEK",
            "mainMarketPrice":"55"
        }
    }
]"""

ACCOUNT_ORDERS_JSON = """[
    {
        "priceCondition":"LIMIT",
        "validity":{"validUntil":1370876700000,"type":"DAY"},
        "price":{"value":65.0,"curr":"SEK"},
        "side":"BUY",
        "orderID":683772,
        "volumeCondition":"NORMAL",
        "tradedVolume":0.0,
        "instrumentID":{"marketID":11,"identifier":"101"},
        "orderState":"LOCAL",
        "accno":9210370,
        "openVolume":0.0,
        "volume":100.0,
        "actionState":"INS_PEND",
        "activationCondition":{"type":"NONE"},
        "modDate":1370797680194
    }
]"""

ACCOUNT_TRADES_JSON = """[
    {
        "securityTrade":{
            "tradeID":"B8118-20130603",
            "price":{"value":"146","curr":"SEK"},
            "volume":"2",
            "tradetime":"12:06:06",
            "instrumentID":{"marketID":"11","identifier":"3966"},
            "accno":"9210329",
            "counterparty":"MCF",
            "orderID":"683168",
            "side":"BUY"
        }
    }
]"""

INSTRUMENTS_JSON = """[
    {
        "type":"A",
        "longname":"Ericsson A",
        "marketID":"11",
        "country":"SE",
        "shortname":"ERIC A",
        "marketname":"OMX Stockholm",
        "isinCode":"SE0000108649",
        "identifier":"100",
        "currency":"SEK"
    }
]"""

INSTRUMENT_JSON = """{
    "type":"A",
    "longname":"Ericsson B",
    "marketID":"11",
    "country":"SE",
    "shortname":"ERIC B",
    "multiplier":"1",
    "marketname":"OMX Stockholm",
    "ticksizeID":"11002",
    "isinCode":"SE0000108656",
    "identifier":"101",
    "currency":"SEK"
}"""

CHART_DATA_JSON = """[
    {"timestamp":"09:38","change":12.18,"volume":1000,"float":82.0}
]"""

LISTS_JSON = """[
    {"name":"First North SE","country":"SE","id":"6"},
    {"name":"Small Cap Copenhagen","country":"DK","id":"16"}
]"""

LIST_JSON = """[
    {"shortname":"WISE","marketID":"11","identifier":"40017"},
    {"shortname":"WINT","marketID":"11","identifier":"43370"}
]"""

MARKETS_JSON = """[
    {
        "name":"Nasdaq",
        "country":"US",
        "marketID":"19",
        "ordertypes":[
            {"text":"Normal order","type":"NORMAL"}
        ]
    }
]"""

MARKET_TRADING_DAYS_JSON = """[
    {"date":"2013-06-18","display_date":"2013-06-18"},
    {"date":"2013-06-19","display_date":"2013-06-19"}
]"""

INDICES_JSON = """[
    {
        "type":"INDEX",
        "longname":"OBX",
        "source":"OSE",
        "country":"NO",
        "imageurl":"/now/images/flaggaNoSmall.gif",
        "id":"XOBX"
    },
    {
        "type":"COMMODITY",
        "longname":"Aluminium 3M USD",
        "source":"SIX",
        "id":"B-ALUM-3M"
    }
]"""

TICKSIZES_JSON = """[
    {"tick":0.0001,"above":0.0,"decimals":4},
    {"tick":0.0005,"above":0.5,"decimals":4},
    {"tick":0.001,"above":1.0,"decimals":3}
]"""

DERIVATIVE_COUNTRIES_JSON = """["SE","FI","NO"]"""

DERIVATIVE_UNDERLYINGS_JSON = """[
    {"shortname":"OMXS30","marketID":"11","identifier":"OMXS30"},
    {"shortname":"TLSN","marketID":"11","identifier":"5095"},
    {"shortname":"ERIC B","marketID":"11","identifier":"101"},
    {"shortname":"NOKI SEK","marketID":"11","identifier":"39854"}
]"""

DERIVATIVES_JSON = """[
    {
        "shortname":"ERI1N 60SHB",
        "multiplier":"1",
        "strikeprice":"60.000000",
        "expirydate":"2011-02-18 00:00:00",
        "marketID":"11",
        "expirytype":"european",
        "kind":"WNT",
        "identifier":"76987",
        "currency":"SEK",
        "callPut":"Warrant Put"
    }
]"""

RELATED_MARKETS_JSON = """[
    {"marketID":11,"identifier":"101"},
    {"marketID":30,"identifier":"1965"}
]"""

CREATE_ORDER_JSON = """{
    "orderID":684870,
    "resultCode":"OK",
    "orderState":"LOCAL",
    "accNo":1000000,
    "actionState":"INS_PEND"
}"""

UPDATE_ORDER_JSON = """{
    "orderID":684870,
    "resultCode":"OK",
    "orderState":"ON_MARKET",
    "accNo":1000000,
    "actionState":"MOD_PEND"
}"""

DELETE_ORDER_JSON = """{
    "orderID":684870,
    "resultCode":"OK",
    "orderState":"ON_MARKET",
    "accNo":9210370,
    "actionState":"DEL_PEND"
}"""


@dataclass
class RecordedRequest:
    method: str
    raw_path: str
    authorization: Optional[str]
    accept: Optional[str]

    @property
    def basic_credentials(self) -> Optional[str]:
        """The decoded ``user:password`` of a Basic Authorization header."""
        if not self.authorization or not self.authorization.startswith("Basic "):
            return None
        auth = BasicAuth.decode(self.authorization)
        return f"{auth.login}:{auth.password}"


class FakeNordnetApi:
    """In-process stand-in for the Nordnet API.

    Responses are stubbed per (method, raw path including query string).
    Unstubbed requests get a 404 in Nordnet's error format. Every request
    is recorded so tests can assert on what was actually sent.
    """

    def __init__(self):
        self._stubs: Dict[Tuple[str, str], Tuple[int, bytes, str, float]] = {}
        self.requests: List[RecordedRequest] = []
        self.app = web.Application()
        self.app.router.add_route("*", "/{tail:.*}", self._handle)
        self._server: Optional[TestServer] = None

    def stub(
        self,
        method: str,
        raw_path: str,
        body: Union[str, bytes],
        status: int = 200,
        content_type: str = "application/json",
        delay: float = 0,
    ) -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._stubs[(method, raw_path)] = (status, body, content_type, delay)

    @property
    def base_url(self) -> str:
        return f"http://{self._server.host}:{self._server.port}"

    @property
    def last_request(self) -> RecordedRequest:
        return self.requests[-1]

    async def start(self) -> None:
        self._server = TestServer(self.app)
        await self._server.start_server()

    async def close(self) -> None:
        if self._server:
            await self._server.close()
            self._server = None

    async def _handle(self, request: web.Request) -> web.Response:
        self.requests.append(
            RecordedRequest(
                method=request.method,
                raw_path=request.raw_path,
                authorization=request.headers.get("Authorization"),
                accept=request.headers.get("Accept"),
            )
        )
        stub = self._stubs.get((request.method, request.raw_path))
        if stub is None:
            error = {"code": "NEXT_INVALID_PATH", "message": f"No such endpoint: {request.method} {request.raw_path}"}
            return web.Response(status=404, body=json.dumps(error).encode("utf-8"), content_type="application/json")
        status, body, content_type, delay = stub
        if delay:
            await asyncio.sleep(delay)
        return web.Response(status=status, body=body, content_type=content_type)
