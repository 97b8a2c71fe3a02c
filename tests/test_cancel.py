# test_cancel.py
# tests/test_cancel.py

import asyncio

import pytest
from conftest import run

from gutasync.core.cancel import CancelToken, guarded
from gutasync.core.error_handler import RequestCancelled


async def value_after(delay: float, value):
    await asyncio.sleep(delay)
    return value


def test_run_returns_result():
    token = CancelToken()

    assert run(token.run(value_after(0, 42))) == 42


def test_guarded_without_token():
    assert run(guarded(value_after(0, "ok"))) == "ok"


def test_pre_cancelled_raises():
    token = CancelToken()
    token.cancel("closed")

    with pytest.raises(RequestCancelled, match="closed"):
        run(token.run(value_after(0, 1)))


def test_cancel_interrupts_in_flight():
    token = CancelToken()
    state = {"finished": False}

    async def slow():
        await asyncio.sleep(10)
        state["finished"] = True

    async def scenario():
        loop = asyncio.get_running_loop()
        loop.call_later(0.01, token.cancel, "teardown")
        await token.run(slow())

    with pytest.raises(RequestCancelled, match="teardown"):
        run(scenario())
    assert state["finished"] is False


def test_cancel_is_idempotent():
    token = CancelToken()
    token.cancel("first")
    token.cancel("second")

    assert token.cancelled
    assert token.reason == "first"


def test_raise_if_cancelled():
    token = CancelToken()
    token.raise_if_cancelled()
    token.cancel()

    with pytest.raises(RequestCancelled):
        token.raise_if_cancelled()
