"""Flat-file implementation of the CacheStore protocol, plus snapshot codec."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from hindsight_scraper.errors import CacheCorrupt, CacheNotFound, CacheWriteFailed
from hindsight_scraper.models.events import EventHistoryEntry
from hindsight_scraper.models.records import CacheSnapshot

log = logging.getLogger(__name__)


class FileEventCache:
    """Stores one snapshot as a JSON file.

    Writes go to a temp file in the same directory which is then renamed
    over the target, so readers see either the old file or the new one.
    Blocking file I/O runs in a worker thread.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    async def exists(self) -> bool:
        return await asyncio.to_thread(self._path.is_file)

    async def read(self) -> bytes:
        try:
            return await asyncio.to_thread(self._path.read_bytes)
        except FileNotFoundError:
            raise CacheNotFound(f"no cache file at {self._path}") from None

    async def write(self, data: str) -> None:
        try:
            await asyncio.to_thread(self._write_atomic, data)
        except OSError as exc:
            raise CacheWriteFailed(f"could not write cache {self._path}: {exc}") from exc
        log.info("Wrote cache file %s (%d bytes)", self._path, len(data))

    async def delete(self) -> None:
        try:
            await asyncio.to_thread(self._path.unlink)
        except FileNotFoundError:
            raise CacheNotFound(f"no cache file at {self._path}") from None
        log.info("Deleted cache file %s", self._path)

    def _write_atomic(self, data: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=str(self._path.parent),
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self._path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()


def encode_snapshot(snapshot: CacheSnapshot) -> str:
    """Serialize a snapshot to JSON text. Integers keep full precision."""
    return json.dumps(
        {
            "events": [e.to_dict() for e in snapshot.events],
            "transactions": snapshot.transactions,
        },
        indent=2,
    )


def decode_snapshot(raw: bytes) -> CacheSnapshot:
    """Parse cache file content. Raises CacheCorrupt on any malformed input."""
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CacheCorrupt(f"cache is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise CacheCorrupt("cache root is not an object")
    events = data.get("events")
    transactions = data.get("transactions")
    if not isinstance(events, list) or not isinstance(transactions, list):
        raise CacheCorrupt("cache is missing 'events' or 'transactions'")

    try:
        parsed = [EventHistoryEntry.from_dict(e) for e in events]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise CacheCorrupt(f"cache holds a malformed event: {exc}") from exc
    if not all(isinstance(tx, dict) for tx in transactions):
        raise CacheCorrupt("cache holds a malformed transaction")

    return CacheSnapshot(events=parsed, transactions=transactions)
