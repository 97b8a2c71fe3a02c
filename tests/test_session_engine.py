# test_session_engine.py
# tests/test_session_engine.py

import json

import pytest

from gutasync.core.error_handler import EngineError
from gutasync.core.session_engine import EngineGateway, SessionInfo


class FakeSession:
    def __init__(self, user_id: str, fail: bool = False):
        self.user_id = user_id
        self.fail = fail
        self.calls = []

    def get_session_info(self):
        return {
            "user_id": self.user_id, "balance": 1000, "session_id": "ups_1",
            "nonce": 3, "block_number": 12, "step_count": 2,
        }

    def exec_contract_call(self, contract_id, function_name, args_json):
        self.calls.append((contract_id, function_name, args_json))
        if self.fail:
            raise RuntimeError("proof generation failed")
        return {"ok": True}

    def submit_finalization(self, policy_json):
        if self.fail:
            raise RuntimeError("policy rejected")
        return {"receipt_id": "r1", "policy": json.loads(policy_json)}


class FakeEngine:
    def __init__(self, fail_create: bool = False):
        self.fail_create = fail_create

    def create_session(self, user_id):
        if self.fail_create:
            raise RuntimeError("engine not ready")
        return FakeSession(user_id)


def test_engine_created_lazily_once():
    created = []

    def factory():
        created.append(1)
        return FakeEngine()

    gateway = EngineGateway(factory)
    assert created == []

    gateway.create_session("alice")
    gateway.create_session("bob")
    assert created == [1]

    gateway.reset()
    gateway.create_session("alice")
    assert created == [1, 1]


def test_factory_failure_propagates():
    def factory():
        raise OSError("module missing")

    with pytest.raises(EngineError) as exc_info:
        EngineGateway(factory).create_session("alice")

    assert isinstance(exc_info.value.__cause__, OSError)


def test_create_session_failure_propagates():
    gateway = EngineGateway(lambda: FakeEngine(fail_create=True))

    with pytest.raises(EngineError) as exc_info:
        gateway.create_session("alice")

    assert "engine not ready" in str(exc_info.value)


def test_session_info():
    gateway = EngineGateway(FakeEngine)
    session = gateway.create_session("alice")

    info = gateway.session_info(session)

    assert info == SessionInfo("alice", 1000, "ups_1", 3, 12, 2)


def test_session_info_camel_case():
    info = SessionInfo.from_engine({
        "userID": "bob", "balance": 5, "sessionID": "s", "nonce": 1, "blockNumber": 2, "stepCount": 3
    })

    assert (info.user_id, info.block_number, info.step_count) == ("bob", 2, 3)


def test_exec_call_serialises_args():
    gateway = EngineGateway(FakeEngine)
    session = gateway.create_session("alice")

    gateway.exec_call(session, "token", "transfer", {"to": "bob", "amount": 5})

    assert session.calls == [("token", "transfer", '{"to": "bob", "amount": 5}')]


def test_exec_call_failure_propagates():
    gateway = EngineGateway(FakeEngine)
    session = FakeSession("alice", fail=True)

    with pytest.raises(EngineError) as exc_info:
        gateway.exec_call(session, "token", "transfer", "{}")

    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_finalize():
    gateway = EngineGateway(FakeEngine)
    session = gateway.create_session("alice")

    receipt = gateway.finalize(session, {"max_amount": 10})

    assert receipt == {"receipt_id": "r1", "policy": {"max_amount": 10}}


def test_finalize_failure_propagates():
    with pytest.raises(EngineError):
        EngineGateway(FakeEngine).finalize(FakeSession("alice", fail=True), "{}")
