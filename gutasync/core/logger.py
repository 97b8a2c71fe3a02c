# logger.py
# gutasync.core.logger

import sys
import logging
from loguru import logger
from gutasync.core.paths import (
    LOGS_DIR, MAIN_LOG_FILE, SYNC_LOG_FILE, PRICES_LOG_FILE, ERRORS_LOG_FILE
)

# Сторонние логгеры, которые уходят в loguru
INTERCEPTED_LOGGERS = ("aiohttp.client", "aiohttp.internal", "asyncio")

# Отдельные файлы по префиксу сообщения
PREFIX_SINKS = (
    ("[SYNC]", SYNC_LOG_FILE),
    ("[PRICE]", PRICES_LOG_FILE),
)

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"


class InterceptHandler(logging.Handler):
    """stdlib logging -> loguru"""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1
        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _prefix_filter(prefix: str):
    return lambda record: prefix in record["message"]


def setup_logger(level: str = "INFO", console: bool = False) -> None:
    """
    Настройка логера.

    Файлы в logs/: gutasync.log (всё), sync.log ([SYNC]),
    prices.log ([PRICE]), errors.log (ERROR и выше).
    """
    logger.remove()
    LOGS_DIR.mkdir(exist_ok=True)

    for name in INTERCEPTED_LOGGERS:
        py_logger = logging.getLogger(name)
        py_logger.setLevel(logging.WARNING)
        py_logger.handlers = [InterceptHandler()]
        py_logger.propagate = False

    if console:
        logger.add(sys.stderr, level=level.upper(), colorize=True, diagnose=False)

    file_options = dict(rotation="1 week", compression="zip", format=LOG_FORMAT, encoding="utf-8")

    logger.add(MAIN_LOG_FILE, level=level.upper(), retention=4, **file_options)

    for prefix, path in PREFIX_SINKS:
        logger.add(path, level="INFO", retention="4 weeks", filter=_prefix_filter(prefix), **file_options)

    logger.add(ERRORS_LOG_FILE, level="ERROR", retention="4 weeks", **file_options)


__all__ = ["logger", "setup_logger"]
