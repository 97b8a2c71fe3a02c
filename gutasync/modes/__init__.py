# gutasync/modes/__init__.py
"""
Бэкенды агрегатора.

2 режима:
- simulation: 🔶 DEMO - детерминированная симуляция без сети
- live: 🔴 LIVE - HTTP запросы к агрегатору
"""

from gutasync.modes.base import SyncBackend

__all__ = ['SyncBackend']
