from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .models import LedgerRecord, utcnow

logger = logging.getLogger(__name__)

PROGRESS_RECORD = "progress"
HISTORY_RECORD = "history"
LEDGER_RECORDS = (PROGRESS_RECORD, HISTORY_RECORD)


class LedgerStore:
    """Durable home of the ledger records.

    Each save replaces the whole record inside one transaction. Writes are
    serialised so the snapshot of the latest mutation is always committed last.
    """

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]):
        self._sessionmaker = sessionmaker
        self._write_lock = asyncio.Lock()

    async def load(self, name: str) -> Any:
        async with self._sessionmaker() as s:
            rec = await s.get(LedgerRecord, name)
        if rec is None or not rec.payload_json:
            return None
        try:
            return json.loads(rec.payload_json)
        except ValueError as exc:
            logger.warning("ledger_record_corrupt name=%s err=%s", name, exc)
            return None

    async def save(self, name: str, payload: Any) -> bool:
        """Write the full snapshot; False when the write failed.

        A failed write is logged and the caller keeps its in-memory state; the
        next save rewrites the whole record anyway.
        """
        payload_json = json.dumps(payload, ensure_ascii=False)
        async with self._write_lock:
            try:
                async with self._sessionmaker() as s:
                    rec = await s.get(LedgerRecord, name)
                    if rec is None:
                        s.add(LedgerRecord(name=name, payload_json=payload_json, updated_at=utcnow()))
                    else:
                        rec.payload_json = payload_json
                        rec.updated_at = utcnow()
                    await s.commit()
            except (SQLAlchemyError, OSError) as exc:
                logger.error("ledger_save_failed name=%s err=%s", name, exc)
                return False
        return True

    async def clear(self) -> bool:
        async with self._write_lock:
            try:
                async with self._sessionmaker() as s:
                    await s.execute(delete(LedgerRecord).where(LedgerRecord.name.in_(LEDGER_RECORDS)))
                    await s.commit()
            except (SQLAlchemyError, OSError) as exc:
                logger.error("ledger_save_failed name=%s err=%s", ",".join(LEDGER_RECORDS), exc)
                return False
        return True


def _parse_progress(raw: Any) -> dict[str, int] | None:
    if not isinstance(raw, dict):
        return None
    out: dict[str, int] = {}
    for key, val in raw.items():
        if not isinstance(key, str) or isinstance(val, bool) or not isinstance(val, int) or val < 0:
            return None
        out[key] = val
    return out


def _parse_history(raw: Any) -> dict[str, list[str]] | None:
    if not isinstance(raw, dict):
        return None
    out: dict[str, list[str]] = {}
    for key, texts in raw.items():
        if not isinstance(key, str) or not isinstance(texts, list):
            return None
        seen: list[str] = []
        for text in texts:
            if not isinstance(text, str):
                return None
            if text not in seen:
                seen.append(text)
        out[key] = seen
    return out


class ProgressLedger:
    """Completed-challenge count per skill key."""

    def __init__(self, store: LedgerStore):
        self._store = store
        self._counts: dict[str, int] = {}

    async def load(self) -> None:
        raw = await self._store.load(PROGRESS_RECORD)
        parsed = _parse_progress(raw) if raw is not None else {}
        if parsed is None:
            logger.warning("ledger_record_corrupt name=%s reason=shape", PROGRESS_RECORD)
            parsed = {}
        self._counts = parsed

    def count(self, key: str) -> int:
        return self._counts.get(key, 0)

    def snapshot(self) -> dict[str, int]:
        return dict(self._counts)

    async def increment(self, key: str) -> int:
        self._counts[key] = self._counts.get(key, 0) + 1
        await self._store.save(PROGRESS_RECORD, self.snapshot())
        return self._counts[key]

    def forget(self) -> None:
        self._counts = {}


class HistoryLedger:
    """Previously issued prompt texts per skill key, first-seen order, no duplicates."""

    def __init__(self, store: LedgerStore):
        self._store = store
        self._texts: dict[str, list[str]] = {}

    async def load(self) -> None:
        raw = await self._store.load(HISTORY_RECORD)
        parsed = _parse_history(raw) if raw is not None else {}
        if parsed is None:
            logger.warning("ledger_record_corrupt name=%s reason=shape", HISTORY_RECORD)
            parsed = {}
        self._texts = parsed

    def entries(self, key: str) -> tuple[str, ...]:
        return tuple(self._texts.get(key, ()))

    def snapshot(self) -> dict[str, list[str]]:
        return {key: list(texts) for key, texts in self._texts.items()}

    async def append(self, key: str, text: str) -> bool:
        texts = self._texts.setdefault(key, [])
        if text in texts:
            return False
        texts.append(text)
        await self._store.save(HISTORY_RECORD, self.snapshot())
        return True

    def forget(self) -> None:
        self._texts = {}


async def reset_ledgers(store: LedgerStore, progress: ProgressLedger, history: HistoryLedger) -> None:
    # in-memory state is cleared before the first await
    progress.forget()
    history.forget()
    await store.clear()
