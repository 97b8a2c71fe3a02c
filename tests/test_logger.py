# test_logger.py
# tests/test_logger.py

import logging

from gutasync.core import logger as logger_module
from gutasync.core.logger import logger, setup_logger


def test_prefix_sinks_split_by_message(tmp_path, monkeypatch):
    sync_log = tmp_path / "sync.log"
    prices_log = tmp_path / "prices.log"
    errors_log = tmp_path / "errors.log"
    monkeypatch.setattr(logger_module, "LOGS_DIR", tmp_path)
    monkeypatch.setattr(logger_module, "MAIN_LOG_FILE", tmp_path / "gutasync.log")
    monkeypatch.setattr(logger_module, "ERRORS_LOG_FILE", errors_log)
    monkeypatch.setattr(logger_module, "PREFIX_SINKS", (("[SYNC]", sync_log), ("[PRICE]", prices_log)))

    setup_logger(level="DEBUG")
    logger.info("[SYNC] root fetched")
    logger.info("[PRICE] 2 prices refreshed")
    logger.error("[PRICE] provider down")
    logging.getLogger("aiohttp.client").warning("connection reset")
    logger.remove()

    main = (tmp_path / "gutasync.log").read_text(encoding="utf-8")
    assert "root fetched" in main
    assert "connection reset" in main
    assert "root fetched" in sync_log.read_text(encoding="utf-8")
    assert "prices refreshed" not in sync_log.read_text(encoding="utf-8")
    assert "prices refreshed" in prices_log.read_text(encoding="utf-8")
    assert errors_log.read_text(encoding="utf-8").strip().endswith("[PRICE] provider down")
