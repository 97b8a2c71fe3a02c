# mode_resolver.py
# gutasync.core.mode_resolver

"""
Флаг DEMO / LIVE.

Порядок определения:
1. Сохранённый override в config/general_settings.json (ключ demo_mode)
2. Значение по умолчанию из .env (DEMO_MODE / APP_ENV)

Кэша нет - каждый вызов перечитывает файл, поэтому переключение
действует со следующего вызова без перезапуска.
"""

from pathlib import Path
from typing import Optional, Union

from gutasync.core.json_utils import load_json, update_json, remove_json_key
from gutasync.core.logger import logger
from gutasync.core.paths import GENERAL_SETTINGS_FILE

DEMO_MODE_KEY = 'demo_mode'


class ModeStore:
    """Хранилище override флага в JSON файле настроек"""

    def __init__(self, file_path: Union[str, Path] = GENERAL_SETTINGS_FILE):
        self.file_path = Path(file_path)

    def get(self) -> Optional[bool]:
        """Сохранённый override или None"""
        settings = load_json(self.file_path, default={})
        value = settings.get(DEMO_MODE_KEY) if isinstance(settings, dict) else None
        # Только настоящий bool считается override
        return value if isinstance(value, bool) else None

    def set(self, demo: bool) -> None:
        update_json(self.file_path, {DEMO_MODE_KEY: bool(demo)})

    def reset(self) -> None:
        """Удалить override (вернуться к значению из .env)"""
        if remove_json_key(self.file_path, DEMO_MODE_KEY):
            logger.debug("Demo mode override removed")


class ModeResolver:
    """Решает, работать через симуляцию или через сеть"""

    def __init__(self, store: ModeStore, default: bool = False):
        """
        Args:
            store: Хранилище override
            default: Значение из .env, если override нет
        """
        self.store = store
        self.default = default

    def is_demo_mode(self) -> bool:
        override = self.store.get()
        if override is not None:
            return override
        return self.default

    def set_mode(self, demo: bool) -> None:
        self.store.set(demo)
        logger.info(f"Mode set to {'DEMO' if demo else 'LIVE'}")

    def reset(self) -> None:
        self.store.reset()
