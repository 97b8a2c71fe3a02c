# conftest.py
# tests/conftest.py
#
# Подмена сети и времени для тестов.

import asyncio
import inspect
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest


BASE_URL = "http://aggregator.test/api"
PRICE_URL = "http://prices.test/api/v3"


class FakeClock:
    """Управляемые часы (секунды)"""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeResponse:
    def __init__(self, status: int = 200, payload: Any = None, text: str = ""):
        self.status = status
        self.payload = payload
        self._text = text

    async def json(self, content_type=None):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload

    async def text(self):
        return self._text


class _RequestContext:
    def __init__(self, responder: Callable[..., Any], kwargs: Dict):
        self.responder = responder
        self.kwargs = kwargs

    async def __aenter__(self) -> FakeResponse:
        result = self.responder(**self.kwargs) if callable(self.responder) else self.responder
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, BaseException):
            raise result
        return result

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, transport: "FakeTransport"):
        self.transport = transport

    async def __aenter__(self):
        self.transport.sessions_opened += 1
        return self

    async def __aexit__(self, *exc):
        self.transport.sessions_closed += 1
        return False

    def request(self, method: str, url: str, **kwargs):
        self.transport.calls.append((method, url, kwargs))
        responder = self.transport.routes.get((method, url))
        if responder is None:
            responder = FakeResponse(404, {"error": "not found"}, "not found")
        return _RequestContext(responder, kwargs)


class FakeTransport:
    """
    Маршруты (method, url) -> FakeResponse | исключение | callable(**kwargs).
    Все вызовы пишутся в calls.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.calls: List[Tuple[str, str, Dict]] = []
        self.sessions_opened = 0
        self.sessions_closed = 0

    def add(self, method: str, url: str, responder: Any):
        self.routes[(method, url)] = responder

    def session(self) -> FakeSession:
        return FakeSession(self)

    def urls(self) -> List[str]:
        return [url for _, url, _ in self.calls]


class FakeProvider:
    """Провайдер котировок без сети: отдаёт data или выбрасывает error"""

    def __init__(self, data: Optional[Dict] = None, error: Optional[Exception] = None):
        self.data = data if data is not None else {}
        self.error = error
        self.calls: List[List[str]] = []

    async def fetch_simple_prices(self, provider_ids, token=None):
        self.calls.append(list(provider_ids))
        if self.error is not None:
            raise self.error
        return {pid: self.data[pid] for pid in provider_ids if pid in self.data}


def quote(usd: float, change: float = 1.5) -> Dict[str, Any]:
    return {
        "usd": usd,
        "usd_24h_change": change,
        "usd_market_cap": usd * 1000,
        "usd_24h_vol": usd * 10,
        "last_updated_at": 1_700_000_000,
    }


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def run(coro):
    return asyncio.run(coro)
