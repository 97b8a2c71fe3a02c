# cancel.py
# gutasync.core.cancel

import asyncio
from typing import Awaitable, Optional, TypeVar

from gutasync.core.error_handler import RequestCancelled

T = TypeVar("T")


class CancelToken:
    """
    Токен отмены для сетевых запросов.

    Владелец (например, закрываемая панель) вызывает cancel(),
    и все запросы, запущенные через run(), прерываются с RequestCancelled.
    """

    def __init__(self):
        self._event: Optional[asyncio.Event] = None
        self._cancelled = False
        self.reason: Optional[str] = None

    def _get_event(self) -> asyncio.Event:
        # Event создаётся лениво внутри работающего loop
        if self._event is None:
            self._event = asyncio.Event()
            if self._cancelled:
                self._event.set()
        return self._event

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self, reason: str = "cancelled") -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self.reason = reason
        if self._event is not None:
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise RequestCancelled(self.reason or "cancelled")

    async def run(self, aw: Awaitable[T]) -> T:
        """
        Выполнить awaitable, прервав его при отмене токена.

        Raises:
            RequestCancelled: токен отменён до или во время выполнения
        """
        if self._cancelled:
            # Корутину не запускали - закрыть, чтобы не было warning
            if asyncio.iscoroutine(aw):
                aw.close()
            raise RequestCancelled(self.reason or "cancelled")

        task = asyncio.ensure_future(aw)
        waiter = asyncio.ensure_future(self._get_event().wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task.done():
            return task.result()

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        raise RequestCancelled(self.reason or "cancelled")


async def guarded(aw: Awaitable[T], token: Optional[CancelToken] = None) -> T:
    """Выполнить awaitable под токеном (или напрямую без токена)"""
    if token is None:
        return await aw
    return await token.run(aw)
