# gutasync/modes/live/backend.py
"""
🔴 LIVE MODE - HTTP запросы к агрегатору.

Любая ошибка (транспорт, статус, невалидный ответ) поднимается как
AggregatorError; решение вернуть значение по умолчанию принимает SyncClient.
"""

from typing import Any, Awaitable, Callable, Optional, TypeVar
from urllib.parse import quote

from gutasync.core.cancel import CancelToken
from gutasync.core.error_handler import AggregatorError, ErrorClassifier
from gutasync.core.http_client import JsonHttpClient, SessionFactory
from gutasync.core.logger import logger
from gutasync.models.entities import GutaRoot, SubmitResponse, SyncStats, UPS
from gutasync.modes.base import SyncBackend

T = TypeVar("T")


class HttpBackend(SyncBackend):
    """
    🔴 LIVE MODE - реальный агрегатор.

    Эндпоинты:
    - GET  /guta/latest
    - POST /guta/submitUps
    - GET  /guta/checkUps/{userID}_{nonce}
    - GET  /guta/syncStatus/{userID}
    - GET  /guta/stats/{userID}
    """

    MODE_ICON = "🔴"
    MODE_NAME = "LIVE"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session_factory: Optional[SessionFactory] = None
    ):
        self.http = JsonHttpClient(base_url, timeout=timeout, session_factory=session_factory)

    async def _call(self, what: str, request: Awaitable[Any], parse: Callable[[Any], T]) -> T:
        try:
            data = await request
            return parse(data)
        except Exception as e:
            api_error = ErrorClassifier.classify(e)
            logger.debug(f"[SYNC] {what} failed: {api_error.error_type.value} - {api_error.message}")
            raise AggregatorError(api_error) from e

    async def fetch_root(self, token: Optional[CancelToken] = None) -> GutaRoot:
        return await self._call(
            "fetch root",
            self.http.get_json("/guta/latest", token=token),
            GutaRoot.from_api,
        )

    async def submit(self, ups: UPS, token: Optional[CancelToken] = None) -> SubmitResponse:
        return await self._call(
            f"submit {ups.key}",
            self.http.post_json("/guta/submitUps", ups.to_api(), token=token),
            SubmitResponse.from_api,
        )

    async def check_inclusion(self, ups: UPS, token: Optional[CancelToken] = None) -> bool:
        return await self._call(
            f"check {ups.key}",
            self.http.get_json(f"/guta/checkUps/{quote(ups.key, safe='')}", token=token),
            lambda data: data["found"] is True,
        )

    async def sync_status(self, user_id: str, token: Optional[CancelToken] = None) -> bool:
        return await self._call(
            f"sync status {user_id}",
            self.http.get_json(f"/guta/syncStatus/{quote(user_id, safe='')}", token=token),
            lambda data: data.get("synced") is True,
        )

    async def stats(self, user_id: str, token: Optional[CancelToken] = None) -> SyncStats:
        return await self._call(
            f"stats {user_id}",
            self.http.get_json(f"/guta/stats/{quote(user_id, safe='')}", token=token),
            SyncStats.from_api,
        )
