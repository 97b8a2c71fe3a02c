# gutasync/modes/live/__init__.py
"""
🔴 LIVE MODE - Реальный агрегатор.

Файлы:
- backend.py: HttpBackend класс
"""

from gutasync.modes.live.backend import HttpBackend

__all__ = ['HttpBackend']
