# guta_sync.py
# gutasync.core.guta_sync

"""
GUTA Sync - обмен с агрегатором.

Политика ошибок намеренно асимметрична:
- fetch_latest_root поднимает ошибку (без root продолжать нельзя)
- остальные операции возвращают консервативное значение:
  SubmitResponse(status="error"), False, нулевой SyncStats
- check_* / fetch_sync_stats возвращают Confirmed | Unavailable,
  чтобы отличать "не синхронизирован" от "агрегатор недоступен"
"""

from typing import Dict, List, Optional, Sequence

from gutasync.core.cancel import CancelToken
from gutasync.core.config import Settings
from gutasync.core.error_handler import ErrorClassifier, ErrorTracker
from gutasync.core.http_client import SessionFactory
from gutasync.core.logger import logger
from gutasync.core.mode_resolver import ModeResolver
from gutasync.models.entities import (
    CheckResult, Confirmed, GutaRoot, SubmitResponse, SyncStats, Unavailable, UPS
)
from gutasync.modes.base import SyncBackend
from gutasync.modes.live import HttpBackend
from gutasync.modes.simulation import SimulatedBackend


def build_backend(
    resolver: ModeResolver,
    settings: Settings,
    session_factory: Optional[SessionFactory] = None
) -> SyncBackend:
    """Выбрать бэкенд по текущему режиму"""
    if resolver.is_demo_mode():
        return SimulatedBackend()
    return HttpBackend(
        settings.aggregator_url,
        timeout=settings.request_timeout,
        session_factory=session_factory,
    )


class SyncClient:
    """Клиент агрегатора поверх выбранного бэкенда"""

    def __init__(self, backend: SyncBackend):
        self.backend = backend
        backend.log_selected()

    @classmethod
    def from_resolver(
        cls,
        resolver: ModeResolver,
        settings: Settings,
        session_factory: Optional[SessionFactory] = None
    ) -> "SyncClient":
        return cls(build_backend(resolver, settings, session_factory))

    def use_backend(self, backend: SyncBackend) -> None:
        """Явно заменить бэкенд (например, после переключения режима)"""
        self.backend = backend
        backend.log_selected()

    @property
    def mode_name(self) -> str:
        return self.backend.MODE_NAME

    @property
    def is_demo(self) -> bool:
        return isinstance(self.backend, SimulatedBackend)

    # ═══════════════════════════════════════════════════════════════
    # ROOT
    # ═══════════════════════════════════════════════════════════════

    async def fetch_latest_root(self, token: Optional[CancelToken] = None) -> GutaRoot:
        """
        Получить последний GUTA root.

        Raises:
            AggregatorError: агрегатор недоступен или ответ невалиден
        """
        try:
            root = await self.backend.fetch_root(token)
        except Exception as e:
            logger.error(f"[SYNC] Failed to fetch latest root: {e}")
            raise
        logger.debug(f"[SYNC] Latest root {root.root[:12]}... block {root.block_number}")
        return root

    # ═══════════════════════════════════════════════════════════════
    # SUBMIT
    # ═══════════════════════════════════════════════════════════════

    async def submit_ups(self, ups: UPS, token: Optional[CancelToken] = None) -> SubmitResponse:
        """Отправить UPS. Никогда не выбрасывает - ошибка возвращается как status="error"."""
        return await self._submit_with(self.backend, ups, token)

    async def submit_batch(
        self,
        ups_list: Sequence[UPS],
        token: Optional[CancelToken] = None
    ) -> List[SubmitResponse]:
        """
        Отправить пакет UPS строго последовательно.

        Ошибка одного элемента не прерывает пакет; результат той же длины
        и в том же порядке, что и вход. После отмены токена оставшиеся
        элементы получают status="error" без сетевых вызовов.
        """
        # Бэкенд фиксируется на весь пакет
        backend = self.backend
        tracker = ErrorTracker()
        results: List[SubmitResponse] = []
        last_nonce: Dict[str, int] = {}

        logger.info(f"[SYNC] {backend.label} batch of {len(ups_list)} UPS started")

        for ups in ups_list:
            # Монотонность nonce проверяет агрегатор, здесь только предупреждение
            previous = last_nonce.get(ups.user_id)
            if previous is not None and ups.nonce <= previous:
                logger.warning(
                    f"[SYNC] Non-increasing nonce for {ups.user_id}: {ups.nonce} after {previous}"
                )
            last_nonce[ups.user_id] = ups.nonce

            if token is not None and token.cancelled:
                response = SubmitResponse.error(token.reason or "cancelled")
            else:
                response = await self._submit_with(backend, ups, token)

            if response.is_ok:
                tracker.add_success()
            else:
                tracker.add_error(response.message or "Unknown error")
            results.append(response)

        tracker.log_summary(f"[SYNC] {backend.label} batch done:")
        return results

    async def _submit_with(
        self,
        backend: SyncBackend,
        ups: UPS,
        token: Optional[CancelToken]
    ) -> SubmitResponse:
        try:
            response = await backend.submit(ups, token)
        except Exception as e:
            api_error = ErrorClassifier.classify(e)
            logger.error(f"[SYNC] Failed to submit UPS {ups.key}: {api_error.message}")
            return SubmitResponse.error(api_error.message)

        if response.is_ok:
            logger.info(f"[SYNC] UPS {ups.key} accepted (id={response.id})")
        else:
            logger.warning(f"[SYNC] UPS {ups.key} rejected: {response.message}")
        return response

    # ═══════════════════════════════════════════════════════════════
    # ПРОВЕРКИ
    # ═══════════════════════════════════════════════════════════════

    async def check_ups_in_root(
        self,
        ups: UPS,
        token: Optional[CancelToken] = None
    ) -> CheckResult[bool]:
        try:
            return Confirmed(await self.backend.check_inclusion(ups, token))
        except Exception as e:
            api_error = ErrorClassifier.classify(e)
            logger.error(f"[SYNC] Failed to check UPS {ups.key}: {api_error.message}")
            return Unavailable(api_error.message)

    async def is_ups_in_root(self, ups: UPS, token: Optional[CancelToken] = None) -> bool:
        """True только при подтверждении агрегатора; ошибка = False"""
        result = await self.check_ups_in_root(ups, token)
        return isinstance(result, Confirmed) and result.value is True

    async def check_synced(
        self,
        user_id: str,
        token: Optional[CancelToken] = None
    ) -> CheckResult[bool]:
        try:
            return Confirmed(await self.backend.sync_status(user_id, token))
        except Exception as e:
            api_error = ErrorClassifier.classify(e)
            logger.error(f"[SYNC] Failed to check sync status for {user_id}: {api_error.message}")
            return Unavailable(api_error.message)

    async def is_synced(self, user_id: str, token: Optional[CancelToken] = None) -> bool:
        result = await self.check_synced(user_id, token)
        return isinstance(result, Confirmed) and result.value is True

    # ═══════════════════════════════════════════════════════════════
    # СТАТИСТИКА
    # ═══════════════════════════════════════════════════════════════

    async def fetch_sync_stats(
        self,
        user_id: str,
        token: Optional[CancelToken] = None
    ) -> CheckResult[SyncStats]:
        try:
            return Confirmed(await self.backend.stats(user_id, token))
        except Exception as e:
            api_error = ErrorClassifier.classify(e)
            logger.error(f"[SYNC] Failed to fetch sync stats for {user_id}: {api_error.message}")
            return Unavailable(api_error.message)

    async def get_sync_stats(self, user_id: str, token: Optional[CancelToken] = None) -> SyncStats:
        """Статистика или нулевой SyncStats при ошибке"""
        result = await self.fetch_sync_stats(user_id, token)
        if isinstance(result, Confirmed):
            return result.value
        return SyncStats.zero()
