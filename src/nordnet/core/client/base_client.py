from abc import ABC, abstractmethod
import asyncio
import json
import os
from typing import Any, Mapping, Optional, Type, TypeVar

import aiohttp
from opentelemetry import trace
from opentelemetry.trace import NoOpTracer
from pydantic import BaseModel, TypeAdapter, ValidationError

from .request import build_url, redact, redact_path, request_url, session_auth_header
from ..shared.exceptions import (
    NordnetDecodeException,
    NordnetResponseException,
    NordnetSessionException,
    NordnetTransportException,
)

T = TypeVar("T", bound="BaseClient")

DEFAULT_BASE_URL = "https://api.test.nordnet.se/next"
DEFAULT_TIMEOUT = 30.0

Params = Optional[Mapping[str, Any]]


class BaseClient(ABC):
    """
    Abstract base class holding the HTTP plumbing shared by every endpoint.

    The client is responsible for:
    1. Owning the aiohttp session used for all requests
    2. Attaching the session key as HTTP Basic credentials
    3. Turning transport failures, error statuses and undecodable bodies
       into distinct exceptions
    4. Wrapping every request in an OpenTelemetry span

    Attributes:
        _session: HTTP client session for API communication
        _tracer: OpenTelemetry tracer for instrumentation
        _base_url: Root of the API, without the ``/v1`` prefix
        _credentials: Encoded ``auth`` value presented on login
        _service: Service name presented on login
        _session_key: Key of the current session, None when logged out
    """

    def __init__(
        self,
        base_url: Optional[str],
        credentials: Optional[str],
        service: Optional[str],
        session_key: Optional[str],
        timeout: Optional[float],
        tracer: trace.Tracer,
    ):
        """Initialize shared client state.

        Args:
            base_url: API root. Falls back to NORDNET_API_URL, then the test environment.
            credentials: Encoded login credentials. Falls back to NORDNET_CREDENTIALS.
            service: Service name issued by Nordnet. Falls back to NORDNET_SERVICE.
            session_key: Key of an existing session. Falls back to NORDNET_SESSION_KEY.
            timeout: Total request timeout in seconds.
            tracer: OpenTelemetry tracer for instrumentation
        """
        self._base_url = base_url or os.getenv("NORDNET_API_URL") or DEFAULT_BASE_URL
        self._credentials = credentials or os.getenv("NORDNET_CREDENTIALS")
        self._service = service or os.getenv("NORDNET_SERVICE")
        self._session_key = session_key or os.getenv("NORDNET_SESSION_KEY")
        self._tracer = tracer
        self._session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=timeout if timeout is not None else DEFAULT_TIMEOUT),
            headers={"Accept": "application/json"},
        )

    @classmethod
    async def create(
        cls: Type[T],
        base_url: Optional[str] = None,
        credentials: Optional[str] = None,
        service: Optional[str] = None,
        session_key: Optional[str] = None,
        timeout: Optional[float] = None,
        tracer: trace.Tracer = NoOpTracer(),
    ) -> T:
        """
        Factory method to create and initialize a client instance.

        The aiohttp session has to be opened inside a running event loop,
        which is why construction goes through this coroutine.

        Returns:
            An initialized instance of the concrete client

        Raises:
            ClientInitializationException: If the configuration is unusable
        """
        self = cls.__new__(cls)
        BaseClient.__init__(
            self,
            base_url=base_url,
            credentials=credentials,
            service=service,
            session_key=session_key,
            timeout=timeout,
            tracer=tracer,
        )
        with self._tracer.start_as_current_span(f"{cls.__name__}.create") as span:
            try:
                await self._initialize()
            except Exception as e:
                await self.close()
                span.record_exception(e)
                span.set_status(trace.StatusCode.ERROR)
                raise
            else:
                span.set_status(trace.StatusCode.OK)
        return self

    @abstractmethod
    async def _initialize(self) -> None:
        pass

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def session_key(self) -> Optional[str]:
        return self._session_key

    @property
    def is_logged_in(self) -> bool:
        return bool(self._session_key)

    async def _request(
        self,
        method: str,
        path: str,
        params: Params = None,
        authenticate: bool = True,
    ) -> Any:
        """Issue one request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Endpoint path, e.g. ``/v1/accounts``
            params: Query parameters
            authenticate: Attach the session key when one is held

        Raises:
            NordnetSessionException: The client has been closed
            NordnetTransportException: The request never produced a response
            NordnetResponseException: The API answered with a non-2xx status
            NordnetDecodeException: The body was not valid JSON
        """
        with self._tracer.start_as_current_span(f"{type(self).__name__}._request") as span:
            # The session key travels in some paths, e.g. /v1/login/<key>
            display_path = redact_path(path, self._session_key)
            span.set_attribute("http.method", method)
            span.set_attribute("http.url", build_url(self._base_url, display_path, redact(params)))

            if self._session.closed:
                e = NordnetSessionException("Client is closed")
                span.record_exception(e)
                span.set_status(trace.StatusCode.ERROR)
                raise e

            headers = {}
            if authenticate and self._session_key:
                headers["Authorization"] = session_auth_header(self._session_key)

            url = request_url(self._base_url, path, params)
            try:
                async with self._session.request(method, url, headers=headers) as response:
                    status = response.status
                    body = await response.text(errors="replace")
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                span.record_exception(e)
                span.set_status(trace.StatusCode.ERROR)
                raise NordnetTransportException(f"{method} {display_path} failed: {type(e).__name__}") from e

            span.set_attribute("http.status_code", status)
            if not 200 <= status < 300:
                e = self._response_exception(status, body)
                span.record_exception(e)
                span.set_status(trace.StatusCode.ERROR)
                raise e

            try:
                payload = json.loads(body)
            except ValueError as e:
                span.record_exception(e)
                span.set_status(trace.StatusCode.ERROR)
                raise NordnetDecodeException(f"{method} {display_path} returned a body that is not JSON: {e}") from e

            span.set_status(trace.StatusCode.OK)
            return payload

    @staticmethod
    def _response_exception(status: int, body: str) -> NordnetResponseException:
        try:
            error = json.loads(body)
        except ValueError:
            return NordnetResponseException(status, body)
        if isinstance(error, dict):
            return NordnetResponseException(status, body, code=error.get("code"), message=error.get("message"))
        return NordnetResponseException(status, body)

    def _decode(self, payload: Any, type_: Any) -> Any:
        """Validate a decoded JSON payload into ``type_`` (a model, or a List of one)."""
        with self._tracer.start_as_current_span(f"{type(self).__name__}._decode") as span:
            try:
                if isinstance(type_, type) and issubclass(type_, BaseModel):
                    result = type_.model_validate(payload)
                else:
                    result = TypeAdapter(type_).validate_python(payload)
            except ValidationError as e:
                span.record_exception(e)
                span.set_status(trace.StatusCode.ERROR)
                raise NordnetDecodeException(f"Unexpected payload for {type_}: {e}") from e
            span.set_status(trace.StatusCode.OK)
            return result

    async def _call(
        self,
        method: str,
        path: str,
        type_: Any,
        params: Params = None,
        authenticate: bool = True,
    ) -> Any:
        payload = await self._request(method, path, params=params, authenticate=authenticate)
        return self._decode(payload, type_)

    async def close(self) -> None:
        if not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """Enter the async context manager.

        Example:
            async with await NordnetClient.create() as client:
                accounts = await client.accounts()

        Returns:
            self: The client instance
        """
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Close the aiohttp session."""
        await self.close()
