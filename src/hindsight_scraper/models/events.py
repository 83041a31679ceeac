"""MEV-Share event hint models deserialized from the history API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def _lower(value: str | None) -> str | None:
    return value.lower() if isinstance(value, str) else value


@dataclass(frozen=True)
class EventLog:
    """A log entry leaked in an event hint. topics[0] is the event signature."""

    address: str | None
    topics: tuple[str, ...]
    data: str | None = None

    @property
    def signature(self) -> str | None:
        return self.topics[0] if self.topics else None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> EventLog:
        return cls(
            address=_lower(d.get("address")),
            topics=tuple(t.lower() for t in d.get("topics") or []),
            data=d.get("data"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"address": self.address, "topics": list(self.topics)}
        if self.data is not None:
            out["data"] = self.data
        return out


@dataclass(frozen=True)
class HintTransaction:
    """Partial transaction info leaked in an event hint."""

    to: str | None = None
    call_data: str | None = None
    function_selector: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> HintTransaction:
        return cls(
            to=_lower(d.get("to")),
            call_data=d.get("callData"),
            function_selector=d.get("functionSelector"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.to is not None:
            out["to"] = self.to
        if self.call_data is not None:
            out["callData"] = self.call_data
        if self.function_selector is not None:
            out["functionSelector"] = self.function_selector
        return out


@dataclass(frozen=True)
class EventHistoryEntry:
    """One historical event hint (``GET /api/v1/history``).

    The API nests hint fields under ``hint``; they are flattened here.
    ``hash`` identifies the transaction (or bundle) the hint was built from.
    """

    block: int
    timestamp: int
    hash: str | None
    logs: tuple[EventLog, ...] = ()
    txs: tuple[HintTransaction, ...] | None = None
    gas_used: str | None = None
    mev_gas_price: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> EventHistoryEntry:
        hint = d.get("hint") or {}
        raw_txs = hint.get("txs")
        return cls(
            block=int(d["block"]),
            timestamp=int(d.get("timestamp") or 0),
            hash=_lower(hint.get("hash")),
            logs=tuple(EventLog.from_dict(log) for log in hint.get("logs") or []),
            txs=(
                tuple(HintTransaction.from_dict(tx) for tx in raw_txs)
                if raw_txs is not None
                else None
            ),
            gas_used=hint.get("gasUsed"),
            mev_gas_price=hint.get("mevGasPrice"),
        )

    def to_dict(self) -> dict[str, Any]:
        hint: dict[str, Any] = {
            "hash": self.hash,
            "logs": [log.to_dict() for log in self.logs],
        }
        if self.txs is not None:
            hint["txs"] = [tx.to_dict() for tx in self.txs]
        if self.gas_used is not None:
            hint["gasUsed"] = self.gas_used
        if self.mev_gas_price is not None:
            hint["mevGasPrice"] = self.mev_gas_price
        return {"block": self.block, "timestamp": self.timestamp, "hint": hint}


@dataclass(frozen=True)
class EventHistoryInfo:
    """Response of ``GET /api/v1/history/info``."""

    count: int
    min_block: int
    max_block: int
    min_timestamp: int
    max_timestamp: int
    max_limit: int

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> EventHistoryInfo:
        return cls(
            count=int(d.get("count", 0)),
            min_block=int(d.get("minBlock", 0)),
            max_block=int(d.get("maxBlock", 0)),
            min_timestamp=int(d.get("minTimestamp", 0)),
            max_timestamp=int(d.get("maxTimestamp", 0)),
            max_limit=int(d["maxLimit"]),
        )
