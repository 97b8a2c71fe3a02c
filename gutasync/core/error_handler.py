# error_handler.py
# gutasync.core.error_handler

import asyncio
import json
from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

import aiohttp

from gutasync.core.logger import logger


class ErrorType(Enum):
    """Типы ошибок сетевых вызовов"""
    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit"
    SERVER_ERROR = "server_error"
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    INVALID_RESPONSE = "invalid_response"
    NETWORK_ERROR = "network_error"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Серьёзность ошибки"""
    LOW = "low"            # Можно продолжать
    MEDIUM = "medium"      # Предупреждение
    HIGH = "high"          # Сервис недоступен


@dataclass
class APIError:
    """Структура ошибки сетевого вызова"""
    error_type: ErrorType
    severity: ErrorSeverity
    message: str
    code: Optional[str] = None
    retryable: bool = False
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict:
        return {
            "error_type": self.error_type.value,
            "severity": self.severity.value,
            "message": self.message,
            "code": self.code,
            "retryable": self.retryable,
            "timestamp": self.timestamp
        }


# ═══════════════════════════════════════════════════════════════
# ИСКЛЮЧЕНИЯ
# ═══════════════════════════════════════════════════════════════

class HTTPStatusError(Exception):
    """Ответ с неуспешным HTTP статусом"""

    def __init__(self, status: int, url: str, body: str = ""):
        super().__init__(f"HTTP error! status: {status}")
        self.status = status
        self.url = url
        self.body = body


class RequestCancelled(Exception):
    """Запрос отменён через CancelToken"""


class SyncServiceError(Exception):
    """Базовая ошибка внешнего сервиса (несёт классифицированный APIError)"""

    def __init__(self, error: APIError):
        super().__init__(error.message)
        self.error = error


class AggregatorError(SyncServiceError):
    """Ошибка агрегатора"""


class PriceProviderError(SyncServiceError):
    """Ошибка провайдера котировок"""


class EngineError(Exception):
    """Ошибка криптографического движка сессий"""


class ErrorClassifier:
    """Классификатор ошибок сетевых вызовов"""

    @staticmethod
    def classify(exception: BaseException) -> APIError:
        """
        Классифицировать исключение и вернуть структурированный объект.
        """
        if isinstance(exception, SyncServiceError):
            return exception.error

        if isinstance(exception, HTTPStatusError):
            return ErrorClassifier._classify_by_status(exception.status, exception.body)

        if isinstance(exception, RequestCancelled):
            return APIError(
                error_type=ErrorType.CANCELLED,
                severity=ErrorSeverity.LOW,
                message=str(exception) or "cancelled",
                retryable=False
            )

        if isinstance(exception, asyncio.TimeoutError):
            return APIError(
                error_type=ErrorType.TIMEOUT,
                severity=ErrorSeverity.MEDIUM,
                message="Request timed out",
                retryable=True
            )

        # ContentTypeError - наследник ClientResponseError, проверять раньше
        if isinstance(exception, (aiohttp.ContentTypeError, json.JSONDecodeError,
                                  KeyError, TypeError, ValueError)):
            return APIError(
                error_type=ErrorType.INVALID_RESPONSE,
                severity=ErrorSeverity.MEDIUM,
                message=f"Invalid response: {str(exception)[:150]}",
                retryable=False
            )

        if isinstance(exception, aiohttp.ClientResponseError):
            return ErrorClassifier._classify_by_status(exception.status, exception.message or "")

        if isinstance(exception, aiohttp.ClientError):
            return APIError(
                error_type=ErrorType.NETWORK_ERROR,
                severity=ErrorSeverity.HIGH,
                message=f"Network connection error: {str(exception)[:150]}",
                retryable=True
            )

        return ErrorClassifier._classify_by_message(str(exception).lower())

    @staticmethod
    def _classify_by_status(status_code: int, response_text: str = "") -> APIError:
        """Классификация по HTTP статус коду"""

        if status_code == 404:
            return APIError(
                error_type=ErrorType.NOT_FOUND,
                severity=ErrorSeverity.LOW,
                message=f"HTTP error! status: {status_code}",
                code=str(status_code),
                retryable=False
            )

        if status_code == 429:
            return APIError(
                error_type=ErrorType.RATE_LIMIT,
                severity=ErrorSeverity.MEDIUM,
                message=f"HTTP error! status: {status_code} (rate limit exceeded)",
                code=str(status_code),
                retryable=True
            )

        if status_code >= 500:
            return APIError(
                error_type=ErrorType.SERVER_ERROR,
                severity=ErrorSeverity.HIGH,
                message=f"HTTP error! status: {status_code}",
                code=str(status_code),
                retryable=True
            )

        if 400 <= status_code < 500:
            detail = f": {response_text[:100]}" if response_text else ""
            return APIError(
                error_type=ErrorType.BAD_REQUEST,
                severity=ErrorSeverity.MEDIUM,
                message=f"HTTP error! status: {status_code}{detail}",
                code=str(status_code),
                retryable=False
            )

        return APIError(
            error_type=ErrorType.UNKNOWN,
            severity=ErrorSeverity.MEDIUM,
            message=f"HTTP error! status: {status_code}",
            code=str(status_code),
            retryable=False
        )

    @staticmethod
    def _classify_by_message(error_msg: str) -> APIError:
        """Классификация по тексту ошибки"""

        if 'timeout' in error_msg or 'timed out' in error_msg:
            return APIError(
                error_type=ErrorType.TIMEOUT,
                severity=ErrorSeverity.MEDIUM,
                message="Request timed out",
                retryable=True
            )

        if 'connection' in error_msg or 'network' in error_msg:
            return APIError(
                error_type=ErrorType.NETWORK_ERROR,
                severity=ErrorSeverity.HIGH,
                message="Network connection error",
                retryable=True
            )

        return APIError(
            error_type=ErrorType.UNKNOWN,
            severity=ErrorSeverity.MEDIUM,
            message=error_msg[:200] or "Unknown error",
            retryable=False
        )


class ErrorTracker:
    """Учёт ошибок внутри одной пакетной операции"""

    def __init__(self):
        self.errors: List[str] = []
        self.successes = 0
        self.consecutive_errors = 0

    def add_error(self, message: str):
        self.errors.append(message)
        self.consecutive_errors += 1

    def add_success(self):
        """Сбросить счётчик последовательных ошибок при успехе"""
        self.successes += 1
        self.consecutive_errors = 0

    def get_summary(self) -> dict:
        return {
            "total": self.successes + len(self.errors),
            "succeeded": self.successes,
            "failed": len(self.errors),
            "consecutive_errors": self.consecutive_errors,
            "errors": list(self.errors)
        }

    def log_summary(self, prefix: str):
        summary = self.get_summary()
        if summary["failed"]:
            logger.warning(
                f"{prefix} {summary['failed']}/{summary['total']} failed "
                f"(last: {summary['errors'][-1]})"
            )
        else:
            logger.info(f"{prefix} all {summary['total']} succeeded")

    def reset(self):
        self.errors = []
        self.successes = 0
        self.consecutive_errors = 0
