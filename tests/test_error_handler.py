# test_error_handler.py
# tests/test_error_handler.py
#
# Запуск: python -m pytest tests/test_error_handler.py -v

import asyncio

import aiohttp

from gutasync.core.error_handler import (
    AggregatorError, APIError, ErrorClassifier, ErrorSeverity, ErrorTracker,
    ErrorType, HTTPStatusError, RequestCancelled,
)


# ════════════════════════════════════════════════════════════════
# КЛАССИФИКАЦИЯ ПО ИСКЛЮЧЕНИЮ
# ════════════════════════════════════════════════════════════════

def test_classify_timeout():
    """asyncio.TimeoutError → TIMEOUT, retryable"""
    result = ErrorClassifier.classify(asyncio.TimeoutError())

    assert result.error_type == ErrorType.TIMEOUT
    assert result.retryable is True


def test_classify_connection_error():
    """ClientConnectionError → NETWORK_ERROR"""
    result = ErrorClassifier.classify(aiohttp.ClientConnectionError("refused"))

    assert result.error_type == ErrorType.NETWORK_ERROR
    assert result.severity == ErrorSeverity.HIGH


def test_classify_invalid_payload():
    """KeyError при разборе ответа → INVALID_RESPONSE"""
    result = ErrorClassifier.classify(KeyError("root"))

    assert result.error_type == ErrorType.INVALID_RESPONSE
    assert result.retryable is False


def test_classify_cancelled():
    result = ErrorClassifier.classify(RequestCancelled("panel closed"))

    assert result.error_type == ErrorType.CANCELLED
    assert result.message == "panel closed"


def test_classify_unknown_message():
    result = ErrorClassifier.classify(RuntimeError("something odd"))

    assert result.error_type == ErrorType.UNKNOWN
    assert result.message == "something odd"


def test_classify_message_mentions_connection():
    result = ErrorClassifier.classify(RuntimeError("Connection reset by peer"))

    assert result.error_type == ErrorType.NETWORK_ERROR


def test_classify_service_error_passthrough():
    """AggregatorError несёт уже классифицированную ошибку"""
    inner = APIError(ErrorType.SERVER_ERROR, ErrorSeverity.HIGH, "HTTP error! status: 503")
    result = ErrorClassifier.classify(AggregatorError(inner))

    assert result is inner


# ════════════════════════════════════════════════════════════════
# КЛАССИФИКАЦИЯ ПО HTTP СТАТУСУ
# ════════════════════════════════════════════════════════════════

def test_classify_404():
    result = ErrorClassifier.classify(HTTPStatusError(404, "http://x/guta/latest"))

    assert result.error_type == ErrorType.NOT_FOUND
    assert result.code == "404"


def test_classify_429():
    result = ErrorClassifier.classify(HTTPStatusError(429, "http://x"))

    assert result.error_type == ErrorType.RATE_LIMIT
    assert result.retryable is True


def test_classify_500():
    result = ErrorClassifier.classify(HTTPStatusError(500, "http://x"))

    assert result.error_type == ErrorType.SERVER_ERROR
    assert result.message == "HTTP error! status: 500"


def test_classify_400_includes_body():
    result = ErrorClassifier.classify(HTTPStatusError(400, "http://x", "nonce too low"))

    assert result.error_type == ErrorType.BAD_REQUEST
    assert "nonce too low" in result.message


def test_api_error_to_dict():
    error = APIError(ErrorType.TIMEOUT, ErrorSeverity.MEDIUM, "Request timed out", retryable=True)
    data = error.to_dict()

    assert data["error_type"] == "timeout"
    assert data["severity"] == "medium"
    assert data["retryable"] is True
    assert "timestamp" in data


# ════════════════════════════════════════════════════════════════
# ERROR TRACKER
# ════════════════════════════════════════════════════════════════

def test_tracker_counts():
    tracker = ErrorTracker()
    tracker.add_success()
    tracker.add_error("HTTP error! status: 500")
    tracker.add_error("Request timed out")

    summary = tracker.get_summary()
    assert summary["total"] == 3
    assert summary["succeeded"] == 1
    assert summary["failed"] == 2
    assert summary["consecutive_errors"] == 2


def test_tracker_success_resets_consecutive():
    tracker = ErrorTracker()
    tracker.add_error("x")
    tracker.add_success()

    assert tracker.consecutive_errors == 0


def test_tracker_reset():
    tracker = ErrorTracker()
    tracker.add_error("x")
    tracker.reset()

    assert tracker.get_summary()["total"] == 0
