# gutasync/modes/simulation/backend.py
"""
🔶 DEMO MODE - Детерминированная симуляция агрегатора.

Особенности:
- Ни одного сетевого вызова
- Root выводится из текущего времени (0x + 64 hex)
- Отправка всегда успешна, accepted_root = state_root из UPS
- Включение и синхронизация всегда подтверждены
"""

import hashlib
import random
import string
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from gutasync.core.cancel import CancelToken
from gutasync.core.logger import logger
from gutasync.models.entities import GutaRoot, SubmitResponse, SyncStats, UPS
from gutasync.modes.base import SyncBackend

DEMO_TOTAL_USERS = 1000
DEMO_TOTAL_UPS = 10

_ID_ALPHABET = string.ascii_lowercase + string.digits


class SimulatedBackend(SyncBackend):
    """
    🔶 DEMO MODE - ответы синтезируются локально.
    """

    MODE_ICON = "🔶"
    MODE_NAME = "DEMO"

    def __init__(self, clock: Callable[[], float] = time.time, rng: Optional[random.Random] = None):
        """
        Args:
            clock: Источник времени (unix seconds)
            rng: Генератор для суффикса id
        """
        self.clock = clock
        self.rng = rng or random.Random()

    def _now_iso(self, now: float) -> str:
        return datetime.fromtimestamp(now, tz=timezone.utc).isoformat()

    def _make_id(self, now: float) -> str:
        suffix = ''.join(self.rng.choice(_ID_ALPHABET) for _ in range(9))
        return f"ups_{int(now * 1000)}_{suffix}"

    async def fetch_root(self, token: Optional[CancelToken] = None) -> GutaRoot:
        now = self.clock()
        block_number = int(now)
        root = "0x" + hashlib.sha256(str(block_number).encode()).hexdigest()
        return GutaRoot(
            root=root,
            block_number=block_number,
            timestamp=self._now_iso(now),
            total_users=DEMO_TOTAL_USERS,
        )

    async def submit(self, ups: UPS, token: Optional[CancelToken] = None) -> SubmitResponse:
        logger.debug(f"[SYNC] Demo mode: simulating UPS submission {ups.key}")
        return SubmitResponse.ok(id=self._make_id(self.clock()), accepted_root=ups.state_root)

    async def check_inclusion(self, ups: UPS, token: Optional[CancelToken] = None) -> bool:
        return True

    async def sync_status(self, user_id: str, token: Optional[CancelToken] = None) -> bool:
        return True

    async def stats(self, user_id: str, token: Optional[CancelToken] = None) -> SyncStats:
        return SyncStats(
            total_ups=DEMO_TOTAL_UPS,
            synced_ups=DEMO_TOTAL_UPS,
            pending_ups=0,
            last_synced_at=self._now_iso(self.clock()),
        )
