# session_engine.py
# gutasync.core.session_engine

"""
Граница с криптографическим движком сессий.

Сам движок (доказательства, nonce, выполнение контрактов, финализация)
внешний. Здесь только вызовы через фиксированный интерфейс; любая ошибка
движка логируется и поднимается как EngineError без повторов.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol, Union

from gutasync.core.error_handler import EngineError
from gutasync.core.logger import logger


class SessionHandle(Protocol):
    def get_session_info(self) -> Dict[str, Any]: ...

    def exec_contract_call(self, contract_id: str, function_name: str, args_json: str) -> Any: ...

    def submit_finalization(self, policy_json: str) -> Any: ...


class SessionEngine(Protocol):
    def create_session(self, user_id: str) -> SessionHandle: ...


@dataclass(frozen=True)
class SessionInfo:
    """Снимок состояния сессии"""

    user_id: str
    balance: int
    session_id: str
    nonce: int
    block_number: int
    step_count: int

    @classmethod
    def from_engine(cls, data: Dict[str, Any]) -> SessionInfo:
        """Движок отдаёт snake_case; camelCase принимается тоже"""
        def pick(snake: str, camel: str, default: Any = None) -> Any:
            if snake in data:
                return data[snake]
            return data.get(camel, default)

        return cls(
            user_id=str(pick("user_id", "userID", "")),
            balance=int(pick("balance", "balance", 0)),
            session_id=str(pick("session_id", "sessionID", "")),
            nonce=int(pick("nonce", "nonce", 0)),
            block_number=int(pick("block_number", "blockNumber", 0)),
            step_count=int(pick("step_count", "stepCount", 0)),
        )


JsonArg = Union[str, Dict[str, Any], list]


def _as_json(value: JsonArg) -> str:
    return value if isinstance(value, str) else json.dumps(value)


class EngineGateway:
    """
    Доступ к движку сессий.

    Движок создаётся фабрикой при первом обращении и сбрасывается reset().
    """

    def __init__(self, engine_factory: Callable[[], SessionEngine]):
        self._engine_factory = engine_factory
        self._engine: Optional[SessionEngine] = None

    @property
    def engine(self) -> SessionEngine:
        if self._engine is None:
            try:
                self._engine = self._engine_factory()
            except Exception as e:
                logger.error(f"[ENGINE] Failed to initialise session engine: {e}")
                raise EngineError(f"Session engine unavailable: {e}") from e
            logger.info("[ENGINE] Session engine initialised")
        return self._engine

    def reset(self) -> None:
        self._engine = None
        logger.debug("[ENGINE] Session engine reset")

    def create_session(self, user_id: str) -> SessionHandle:
        engine = self.engine
        try:
            session = engine.create_session(user_id)
        except Exception as e:
            logger.error(f"[ENGINE] create_session({user_id}) failed: {e}")
            raise EngineError(f"create_session failed: {e}") from e
        logger.info(f"[ENGINE] Session created for {user_id}")
        return session

    def session_info(self, session: SessionHandle) -> SessionInfo:
        try:
            return SessionInfo.from_engine(session.get_session_info())
        except Exception as e:
            logger.error(f"[ENGINE] get_session_info failed: {e}")
            raise EngineError(f"get_session_info failed: {e}") from e

    def exec_call(
        self,
        session: SessionHandle,
        contract_id: str,
        function_name: str,
        args: JsonArg
    ) -> Any:
        try:
            result = session.exec_contract_call(contract_id, function_name, _as_json(args))
        except Exception as e:
            logger.error(f"[ENGINE] {contract_id}.{function_name} failed: {e}")
            raise EngineError(f"exec_contract_call failed: {e}") from e
        logger.info(f"[ENGINE] {contract_id}.{function_name} executed")
        return result

    def finalize(self, session: SessionHandle, policy: JsonArg) -> Any:
        try:
            receipt = session.submit_finalization(_as_json(policy))
        except Exception as e:
            logger.error(f"[ENGINE] submit_finalization failed: {e}")
            raise EngineError(f"submit_finalization failed: {e}") from e
        logger.info("[ENGINE] Finalization submitted")
        return receipt
