# price_refresher.py
# gutasync.core.price_refresher

import asyncio
import inspect
from typing import Any, Callable, Dict, List, Optional, Sequence

from gutasync.core.cancel import CancelToken
from gutasync.core.logger import logger
from gutasync.core.price_cache import PriceCache
from gutasync.models.entities import TokenPrice

PriceUpdateCallback = Callable[[Dict[str, Optional[TokenPrice]]], Any]

REFRESH_INTERVAL = 30.0


class PriceRefresher:
    """
    Периодическое обновление котировок.

    Работает, пока жива UI-сессия; stop() обязателен при её закрытии,
    иначе задача продолжит тикать.
    """

    def __init__(
        self,
        cache: PriceCache,
        symbols: Sequence[str],
        interval: float = REFRESH_INTERVAL,
        on_update: Optional[PriceUpdateCallback] = None
    ):
        """
        Args:
            cache: Кэш котировок
            symbols: Символы для обновления
            interval: Период (секунды)
            on_update: Вызывается с результатом каждого обновления (sync или async)
        """
        self.cache = cache
        self.symbols: List[str] = list(symbols)
        self.interval = interval
        self.on_update = on_update
        self.refresh_count = 0
        self._task: Optional[asyncio.Task] = None
        self._token: Optional[CancelToken] = None

    # ════════════════════════════════════════════════════════════════
    # ПУБЛИЧНЫЙ API
    # ════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Запустить цикл (нужен работающий event loop)"""
        if self.is_running():
            logger.warning("[PRICE] Refresher already running")
            return

        self._token = CancelToken()
        self._task = asyncio.get_running_loop().create_task(
            self._run_loop(), name="PriceRefresher"
        )
        logger.debug(f"[PRICE] Refresher started (every {self.interval}s, {len(self.symbols)} symbols)")

    async def stop(self) -> None:
        """Остановить цикл и прервать запрос в полёте"""
        if self._token is not None:
            self._token.cancel("refresher stopped")
            self._token = None

        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.debug("[PRICE] Refresher stopped")

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh_now(self) -> Dict[str, Optional[TokenPrice]]:
        """Одно принудительное обновление всех символов"""
        prices = await self.cache.get_prices(self.symbols, force=True, token=self._token)
        self.refresh_count += 1

        if self.on_update is not None:
            try:
                result = self.on_update(prices)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"[PRICE] on_update callback failed: {e}")

        return prices

    # ════════════════════════════════════════════════════════════════
    # ВНУТРЕННЕЕ
    # ════════════════════════════════════════════════════════════════

    async def _run_loop(self) -> None:
        while True:
            try:
                await self.refresh_now()
            except Exception as e:
                logger.exception(f"[PRICE] Refresh tick failed: {e}")
            await asyncio.sleep(self.interval)
