# entities.py
# gutasync.models.entities

from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Generic, Literal, Optional, TypeVar, Union

T = TypeVar("T")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------- UPS ----------------

@dataclass(frozen=True)
class UPS:
    """
    Запись пользователя (state transition + nonce + state root + proof).
    Создаётся движком сессий, здесь только передаётся агрегатору.
    """

    user_id: str
    nonce: int
    state_root: str
    proof: Any = None

    @property
    def key(self) -> str:
        """Ключ для /guta/checkUps/{userID}_{nonce}"""
        return f"{self.user_id}_{self.nonce}"

    def to_api(self) -> Dict[str, Any]:
        return {
            "userID": self.user_id,
            "nonce": self.nonce,
            "stateRoot": self.state_root,
            "proof": self.proof,
        }

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> UPS:
        return cls(
            user_id=str(data["userID"]),
            nonce=int(data["nonce"]),
            state_root=str(data["stateRoot"]),
            proof=data.get("proof"),
        )


# ---------------- GutaRoot ----------------

@dataclass(frozen=True)
class GutaRoot:
    """Текущий глобальный коммит агрегатора"""

    root: str
    block_number: int
    timestamp: str
    total_users: int

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> GutaRoot:
        return cls(
            root=str(data["root"]),
            block_number=int(data["blockNumber"]),
            timestamp=str(data.get("timestamp", "")),
            total_users=int(data.get("totalUsers", 0) or 0),
        )

    def to_api(self) -> Dict[str, Any]:
        return {
            "root": self.root,
            "blockNumber": self.block_number,
            "timestamp": self.timestamp,
            "totalUsers": self.total_users,
        }


# ---------------- SubmitResponse ----------------

@dataclass(frozen=True)
class SubmitResponse:
    """
    Результат отправки UPS. Никогда не выбрасывается как исключение.
    status="error" никогда не несёт accepted_root.
    """

    status: Literal["ok", "error"]
    id: Optional[str] = None
    accepted_root: Optional[str] = None
    message: Optional[str] = None

    def __post_init__(self):
        if self.status == "error" and self.accepted_root is not None:
            raise ValueError("error response cannot carry accepted_root")

    @property
    def is_ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def ok(cls, id: Optional[str] = None, accepted_root: Optional[str] = None) -> SubmitResponse:
        return cls(status="ok", id=id, accepted_root=accepted_root)

    @classmethod
    def error(cls, message: str) -> SubmitResponse:
        return cls(status="error", message=message)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> SubmitResponse:
        if data.get("status") == "ok":
            return cls.ok(id=data.get("id"), accepted_root=data.get("acceptedRoot"))
        return cls.error(str(data.get("message") or "Unknown error"))

    def to_api(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"status": self.status}
        if self.id is not None:
            result["id"] = self.id
        if self.accepted_root is not None:
            result["acceptedRoot"] = self.accepted_root
        if self.message is not None:
            result["message"] = self.message
        return result


# ---------------- SyncStats ----------------

@dataclass(frozen=True)
class SyncStats:
    """Сводка синхронизации пользователя"""

    total_ups: int = 0
    synced_ups: int = 0
    pending_ups: int = 0
    last_synced_at: Optional[str] = None

    @classmethod
    def zero(cls) -> SyncStats:
        return cls()

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> SyncStats:
        return cls(
            total_ups=int(data.get("totalUPS", 0) or 0),
            synced_ups=int(data.get("syncedUPS", 0) or 0),
            pending_ups=int(data.get("pendingUPS", 0) or 0),
            last_synced_at=data.get("lastSyncedAt"),
        )


# ---------------- TokenPrice ----------------

@dataclass(frozen=True)
class TokenPrice:
    """Котировка одного токена (USD)"""

    symbol: str
    name: str                # id у провайдера: "ethereum", "bitcoin", ...
    current_price: float
    price_change_24h: float  # проценты
    market_cap: float
    volume_24h: float
    last_updated: str        # ISO-8601 UTC

    @classmethod
    def from_provider(cls, symbol: str, provider_id: str, data: Dict[str, Any]) -> TokenPrice:
        """
        data - значение из ответа /simple/price для одного id.
        """
        updated_at = data.get("last_updated_at")
        if updated_at:
            last_updated = datetime.fromtimestamp(float(updated_at), tz=timezone.utc).isoformat()
        else:
            last_updated = utc_now_iso()

        return cls(
            symbol=symbol.upper(),
            name=provider_id,
            current_price=float(data["usd"]),
            price_change_24h=float(data.get("usd_24h_change") or 0),
            market_cap=float(data.get("usd_market_cap") or 0),
            volume_24h=float(data.get("usd_24h_vol") or 0),
            last_updated=last_updated,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------- CacheEntry ----------------

@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """Значение кэша и момент записи (секунды). Заменяется целиком."""

    value: T
    timestamp: float

    def is_fresh(self, now: float, ttl: float) -> bool:
        return now - self.timestamp < ttl


# ---------------- Confirmed / Unavailable ----------------

@dataclass(frozen=True)
class Confirmed(Generic[T]):
    """Агрегатор ответил - значение подтверждено"""

    value: T


@dataclass(frozen=True)
class Unavailable:
    """Агрегатор не ответил - значение неизвестно"""

    reason: str


CheckResult = Union[Confirmed[T], Unavailable]
