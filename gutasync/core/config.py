# config.py
# gutasync.core.config

import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv
from gutasync.core.logger import logger
from gutasync.core.paths import ENV_FILE

# Загрузить .env
load_dotenv(ENV_FILE)

DEFAULT_AGGREGATOR_URL = 'http://localhost:3000/api'
DEFAULT_PRICE_API_URL = 'https://api.coingecko.com/api/v3'


@dataclass(frozen=True)
class Settings:
    """Настройки из окружения (.env)"""
    aggregator_url: str = DEFAULT_AGGREGATOR_URL
    price_api_url: str = DEFAULT_PRICE_API_URL
    demo_mode_default: bool = False
    request_timeout: float = 10.0
    price_refresh_interval: float = 30.0
    price_cache_ttl: float = 30.0
    log_level: str = "INFO"


def _env_bool(name: str) -> Optional[bool]:
    """Прочитать булевый флаг из окружения (None если не задан)"""
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return None
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}, using {default}")
        return default
    if value <= 0:
        logger.warning(f"{name} must be positive, using {default}")
        return default
    return value


def get_settings() -> Settings:
    """
    Собрать Settings из переменных окружения.

    DEMO_MODE имеет приоритет; если не задан - demo включён
    только при APP_ENV=development.
    """
    demo_default = _env_bool('DEMO_MODE')
    if demo_default is None:
        demo_default = os.getenv('APP_ENV', '').lower() == 'development'

    return Settings(
        aggregator_url=os.getenv('AGGREGATOR_URL', DEFAULT_AGGREGATOR_URL).rstrip('/'),
        price_api_url=os.getenv('PRICE_API_URL', DEFAULT_PRICE_API_URL).rstrip('/'),
        demo_mode_default=demo_default,
        request_timeout=_env_float('REQUEST_TIMEOUT', 10.0),
        price_refresh_interval=_env_float('PRICE_REFRESH_INTERVAL', 30.0),
        price_cache_ttl=_env_float('PRICE_CACHE_TTL', 30.0),
        log_level=os.getenv('LOG_LEVEL', 'INFO'),
    )
