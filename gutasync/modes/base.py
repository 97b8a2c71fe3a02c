# gutasync/modes/base.py
"""
Базовый класс для бэкендов агрегатора.
"""

from abc import ABC, abstractmethod
from typing import Optional

from gutasync.core.cancel import CancelToken
from gutasync.core.logger import logger
from gutasync.models.entities import GutaRoot, SubmitResponse, SyncStats, UPS


class SyncBackend(ABC):
    """
    Абстрактный бэкенд агрегатора.

    Выбирается один раз при создании SyncClient, поэтому пакет
    не может начаться в LIVE и закончиться в DEMO.
    """

    # Иконка и название режима (переопределяются в наследниках)
    MODE_ICON = "❓"
    MODE_NAME = "UNKNOWN"

    @abstractmethod
    async def fetch_root(self, token: Optional[CancelToken] = None) -> GutaRoot:
        """Текущий GUTA root"""

    @abstractmethod
    async def submit(self, ups: UPS, token: Optional[CancelToken] = None) -> SubmitResponse:
        """Отправить UPS"""

    @abstractmethod
    async def check_inclusion(self, ups: UPS, token: Optional[CancelToken] = None) -> bool:
        """Включён ли UPS в root"""

    @abstractmethod
    async def sync_status(self, user_id: str, token: Optional[CancelToken] = None) -> bool:
        """Синхронизирован ли пользователь"""

    @abstractmethod
    async def stats(self, user_id: str, token: Optional[CancelToken] = None) -> SyncStats:
        """Статистика синхронизации пользователя"""

    @property
    def label(self) -> str:
        return f"{self.MODE_ICON} {self.MODE_NAME}"

    def log_selected(self):
        logger.info(f"[SYNC] Backend selected: {self.label}")
