# http_client.py
# gutasync.core.http_client

"""
JSON поверх HTTP (aiohttp).

Каждый запрос открывает свою ClientSession - между вызовами
не хранится ни соединений, ни cookies.
"""

from typing import Any, Callable, Dict, Optional

import aiohttp

from gutasync.core.cancel import CancelToken, guarded
from gutasync.core.error_handler import HTTPStatusError

SessionFactory = Callable[[], aiohttp.ClientSession]


def make_session_factory(timeout: float) -> SessionFactory:
    """Фабрика сессий с явным таймаутом на запрос"""

    def factory() -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=timeout),
            headers={"Accept": "application/json"},
        )

    return factory


class JsonHttpClient:
    """Минимальный JSON клиент: GET/POST, ошибки статуса -> HTTPStatusError"""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session_factory: Optional[SessionFactory] = None
    ):
        """
        Args:
            base_url: Базовый URL без завершающего /
            timeout: Таймаут на один запрос (секунды)
            session_factory: Фабрика сессий (подменяется в тестах)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._session_factory = session_factory or make_session_factory(timeout)

    def url_for(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def get_json(
        self,
        path: str,
        params: Optional[Dict[str, str]] = None,
        token: Optional[CancelToken] = None
    ) -> Any:
        return await guarded(self._send("GET", self.url_for(path), params=params), token)

    async def post_json(
        self,
        path: str,
        payload: Any,
        token: Optional[CancelToken] = None
    ) -> Any:
        return await guarded(self._send("POST", self.url_for(path), json=payload), token)

    async def _send(self, method: str, url: str, **kwargs) -> Any:
        async with self._session_factory() as session:
            async with session.request(method, url, **kwargs) as response:
                if response.status >= 400:
                    body = await response.text()
                    raise HTTPStatusError(response.status, url, body)
                return await response.json(content_type=None)
