# gutasync/modes/simulation/__init__.py
"""
🔶 DEMO MODE - Симуляция агрегатора без сети.

Файлы:
- backend.py: SimulatedBackend класс
"""

from gutasync.modes.simulation.backend import SimulatedBackend

__all__ = ['SimulatedBackend']
