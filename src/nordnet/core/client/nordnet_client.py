from typing import Any, List, Mapping, Optional, Union

from opentelemetry import trace

from .base_client import BaseClient
from .request import endpoint
from ..account.models import Account, AccountSummary, Ledger, Order, Position, Trade
from ..market.models import (
    ChartPoint,
    Derivative,
    Index,
    Instrument,
    InstrumentList,
    ListedInstrument,
    Market,
    TickSize,
    TradingDay,
)
from ..news.models import NewsItem, NewsSource
from ..order.models import OrderReply, OrderRequest
from ..session.models import LoggedInStatus, Login, RealtimeAccess, SystemStatus
from ..shared.exceptions import ClientInitializationException, NordnetSessionException
from ..shared.models import InstrumentId

OrderParams = Union[Mapping[str, Any], OrderRequest]


class NordnetClient(BaseClient):
    """Client for the Nordnet v1 REST API.

    One coroutine per endpoint. Each builds the endpoint path, issues a single
    request and returns the decoded payload as pydantic models.

    The client can be configured directly or via environment variables:
    - NORDNET_API_URL: API root, defaults to the public test environment
    - NORDNET_CREDENTIALS: encoded ``auth`` value used by login()
    - NORDNET_SERVICE: service name issued by Nordnet
    - NORDNET_SESSION_KEY: key of an already open session

    Example:
        ```python
        async with await NordnetClient.create(credentials=auth, service="NEXTAPI") as client:
            await client.login()
            for account in await client.accounts():
                print(await client.account(account.id))
            await client.logout()
        ```
    """

    def __init__(
        self,
        *args,
        **kwargs,
    ):
        """Disabled constructor - use NordnetClient.create() instead."""
        raise TypeError("Use NordnetClient.create() instead to create a new client")

    async def _initialize(self) -> None:
        with self._tracer.start_as_current_span("NordnetClient._initialize") as span:
            if not self._base_url.startswith(("http://", "https://")):
                e = ClientInitializationException(f"Base URL must be http(s): {self._base_url}")
                span.record_exception(e)
                span.set_status(trace.StatusCode.ERROR)
                raise e
            span.set_attribute("base_url", self._base_url)
            span.set_attribute("has_session_key", self.is_logged_in)
            span.set_status(trace.StatusCode.OK)

    # Session

    async def system_status(self) -> SystemStatus:
        with self._tracer.start_as_current_span("NordnetClient.system_status"):
            return await self._call("GET", "/v1", SystemStatus, authenticate=False)

    async def login(self) -> Login:
        """Open a session and keep its key for subsequent requests.

        Returns:
            Login: Session key, expiry and feed details

        Raises:
            NordnetSessionException: If credentials or service are not configured
        """
        with self._tracer.start_as_current_span("NordnetClient.login") as span:
            if not self._credentials or not self._service:
                e = NordnetSessionException("Credentials and service are required to log in")
                span.record_exception(e)
                span.set_status(trace.StatusCode.ERROR)
                raise e
            params = {"auth": self._credentials, "service": self._service}
            login = await self._call("POST", "/v1/login", Login, params=params, authenticate=False)
            self._session_key = login.session_key
            span.set_attribute("environment", login.environment)
            span.set_attribute("expires_in", login.expires_in)
            span.add_event("session_opened")
            return login

    async def logout(self) -> LoggedInStatus:
        with self._tracer.start_as_current_span("NordnetClient.logout") as span:
            status = await self._call("DELETE", endpoint("login", self._require_session_key()), LoggedInStatus)
            self._session_key = None
            span.add_event("session_closed")
            return status

    async def touch(self) -> LoggedInStatus:
        """Keep the session alive without doing anything else."""
        with self._tracer.start_as_current_span("NordnetClient.touch"):
            return await self._call("PUT", endpoint("login", self._require_session_key()), LoggedInStatus)

    async def realtime_access(self) -> List[RealtimeAccess]:
        with self._tracer.start_as_current_span("NordnetClient.realtime_access"):
            return await self._call("GET", endpoint("realtime_access"), List[RealtimeAccess])

    def _require_session_key(self) -> str:
        if not self._session_key:
            raise NordnetSessionException("No session key, log in first")
        return self._session_key

    # News

    async def news_sources(self) -> List[NewsSource]:
        with self._tracer.start_as_current_span("NordnetClient.news_sources"):
            return await self._call("GET", endpoint("news_sources"), List[NewsSource])

    async def news_items(self, params: Optional[Mapping[str, Any]] = None) -> List[NewsItem]:
        """Search headlines, e.g. ``{"sourceid": "3", "count": "10"}``."""
        with self._tracer.start_as_current_span("NordnetClient.news_items"):
            return await self._call("GET", endpoint("news_items"), List[NewsItem], params=params)

    async def news_item(self, item_id: int) -> NewsItem:
        with self._tracer.start_as_current_span("NordnetClient.news_item") as span:
            span.set_attribute("item_id", item_id)
            return await self._call("GET", endpoint("news_items", item_id), NewsItem)

    # Accounts

    async def accounts(self) -> List[AccountSummary]:
        with self._tracer.start_as_current_span("NordnetClient.accounts"):
            return await self._call("GET", endpoint("accounts"), List[AccountSummary])

    async def account(self, accno: Union[str, int]) -> Account:
        with self._tracer.start_as_current_span("NordnetClient.account") as span:
            span.set_attribute("accno", str(accno))
            return await self._call("GET", endpoint("accounts", accno), Account)

    async def account_ledgers(self, accno: Union[str, int]) -> List[Ledger]:
        with self._tracer.start_as_current_span("NordnetClient.account_ledgers") as span:
            span.set_attribute("accno", str(accno))
            return await self._call("GET", endpoint("accounts", accno, "ledgers"), List[Ledger])

    async def account_positions(self, accno: Union[str, int]) -> List[Position]:
        with self._tracer.start_as_current_span("NordnetClient.account_positions") as span:
            span.set_attribute("accno", str(accno))
            return await self._call("GET", endpoint("accounts", accno, "positions"), List[Position])

    async def account_orders(self, accno: Union[str, int]) -> List[Order]:
        with self._tracer.start_as_current_span("NordnetClient.account_orders") as span:
            span.set_attribute("accno", str(accno))
            return await self._call("GET", endpoint("accounts", accno, "orders"), List[Order])

    async def account_trades(self, accno: Union[str, int]) -> List[Trade]:
        with self._tracer.start_as_current_span("NordnetClient.account_trades") as span:
            span.set_attribute("accno", str(accno))
            return await self._call("GET", endpoint("accounts", accno, "trades"), List[Trade])

    # Instruments and markets

    async def instruments(self, params: Mapping[str, Any]) -> List[Instrument]:
        """Search instruments, e.g. ``{"query": "ERI", "type": "A", "country": "SE"}``."""
        with self._tracer.start_as_current_span("NordnetClient.instruments"):
            return await self._call("GET", endpoint("instruments"), List[Instrument], params=params)

    async def instrument(self, params: Union[Mapping[str, Any], InstrumentId]) -> Instrument:
        """Look up one instrument by ``identifier`` and ``marketID``."""
        if isinstance(params, InstrumentId):
            params = params.to_params()
        with self._tracer.start_as_current_span("NordnetClient.instrument"):
            return await self._call("GET", endpoint("instruments"), Instrument, params=params)

    async def chart_data(self, params: Union[Mapping[str, Any], InstrumentId]) -> List[ChartPoint]:
        if isinstance(params, InstrumentId):
            params = params.to_params()
        with self._tracer.start_as_current_span("NordnetClient.chart_data"):
            return await self._call("GET", endpoint("chart_data"), List[ChartPoint], params=params)

    async def lists(self) -> List[InstrumentList]:
        with self._tracer.start_as_current_span("NordnetClient.lists"):
            return await self._call("GET", endpoint("lists"), List[InstrumentList])

    async def instrument_list(self, list_id: Union[str, int]) -> List[ListedInstrument]:
        with self._tracer.start_as_current_span("NordnetClient.instrument_list") as span:
            span.set_attribute("list_id", str(list_id))
            return await self._call("GET", endpoint("lists", list_id), List[ListedInstrument])

    async def markets(self) -> List[Market]:
        with self._tracer.start_as_current_span("NordnetClient.markets"):
            return await self._call("GET", endpoint("markets"), List[Market])

    async def market_trading_days(self, market_id: Union[str, int]) -> List[TradingDay]:
        with self._tracer.start_as_current_span("NordnetClient.market_trading_days") as span:
            span.set_attribute("market_id", str(market_id))
            return await self._call("GET", endpoint("markets", market_id, "trading_days"), List[TradingDay])

    async def indices(self) -> List[Index]:
        with self._tracer.start_as_current_span("NordnetClient.indices"):
            return await self._call("GET", endpoint("indices"), List[Index])

    async def ticksizes(self, ticksize_id: Union[str, int]) -> List[TickSize]:
        with self._tracer.start_as_current_span("NordnetClient.ticksizes") as span:
            span.set_attribute("ticksize_id", str(ticksize_id))
            return await self._call("GET", endpoint("ticksizes", ticksize_id), List[TickSize])

    async def derivative_countries(self, derivative_type: str) -> List[str]:
        with self._tracer.start_as_current_span("NordnetClient.derivative_countries") as span:
            span.set_attribute("derivative_type", derivative_type)
            return await self._call("GET", endpoint("derivatives", derivative_type), List[str])

    async def derivative_underlyings(self, derivative_type: str, country: str) -> List[ListedInstrument]:
        with self._tracer.start_as_current_span("NordnetClient.derivative_underlyings") as span:
            span.set_attribute("derivative_type", derivative_type)
            span.set_attribute("country", country)
            path = endpoint("derivatives", derivative_type, "underlyings", country)
            return await self._call("GET", path, List[ListedInstrument])

    async def derivatives(
        self, derivative_type: str, params: Optional[Mapping[str, Any]] = None
    ) -> List[Derivative]:
        """List derivatives of one kind, optionally filtered by underlying, e.g.
        ``{"identifier": "101", "marketID": "11"}``."""
        with self._tracer.start_as_current_span("NordnetClient.derivatives") as span:
            span.set_attribute("derivative_type", derivative_type)
            path = endpoint("derivatives", derivative_type, "derivatives")
            return await self._call("GET", path, List[Derivative], params=params)

    async def related_markets(self, params: Union[Mapping[str, Any], InstrumentId]) -> List[InstrumentId]:
        if isinstance(params, InstrumentId):
            params = params.to_params()
        with self._tracer.start_as_current_span("NordnetClient.related_markets"):
            return await self._call("GET", endpoint("related_markets"), List[InstrumentId], params=params)

    # Orders

    async def create_order(self, accno: Union[str, int], params: OrderParams) -> OrderReply:
        if isinstance(params, OrderRequest):
            params = params.to_params()
        with self._tracer.start_as_current_span("NordnetClient.create_order") as span:
            span.set_attribute("accno", str(accno))
            reply = await self._call("POST", endpoint("accounts", accno, "orders"), OrderReply, params=params)
            span.set_attribute("order_id", reply.order_id)
            span.set_attribute("result_code", reply.result_code)
            return reply

    async def update_order(self, accno: Union[str, int], order_id: int, params: OrderParams) -> OrderReply:
        if isinstance(params, OrderRequest):
            params = params.to_params()
        with self._tracer.start_as_current_span("NordnetClient.update_order") as span:
            span.set_attribute("accno", str(accno))
            span.set_attribute("order_id", order_id)
            path = endpoint("accounts", accno, "orders", order_id)
            reply = await self._call("PUT", path, OrderReply, params=params)
            span.set_attribute("result_code", reply.result_code)
            return reply

    async def delete_order(self, accno: Union[str, int], order_id: int) -> OrderReply:
        with self._tracer.start_as_current_span("NordnetClient.delete_order") as span:
            span.set_attribute("accno", str(accno))
            span.set_attribute("order_id", order_id)
            reply = await self._call("DELETE", endpoint("accounts", accno, "orders", order_id), OrderReply)
            span.set_attribute("result_code", reply.result_code)
            return reply
