import pytest
import pytest_asyncio
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from nordnet.core.client.nordnet_client import NordnetClient
from nordnet.test_utils.fake_nordnet_api import FakeNordnetApi

SESSION_KEY = "SESSIONKEY"


@pytest.fixture(autouse=True)
def clear_nordnet_env(monkeypatch):
    for name in ("NORDNET_API_URL", "NORDNET_CREDENTIALS", "NORDNET_SERVICE", "NORDNET_SESSION_KEY"):
        monkeypatch.delenv(name, raising=False)


@pytest_asyncio.fixture
async def fake_api():
    api = FakeNordnetApi()
    await api.start()
    yield api
    await api.close()


@pytest_asyncio.fixture
async def client(fake_api):
    """Client that already holds a session key, pointed at the fake API."""
    client = await NordnetClient.create(base_url=fake_api.base_url, session_key=SESSION_KEY)
    yield client
    await client.close()


@pytest_asyncio.fixture
async def anonymous_client(fake_api):
    client = await NordnetClient.create(base_url=fake_api.base_url, credentials="SECRET", service="TEST")
    yield client
    await client.close()


@pytest.fixture(scope="function")
def span_exporter():
    exporter = InMemorySpanExporter()
    yield exporter
    exporter.clear()


@pytest.fixture(scope="function")
def tracer(span_exporter):
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider.get_tracer("nordnet-tests")
