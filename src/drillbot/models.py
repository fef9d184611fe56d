from __future__ import annotations
import datetime as dt
from sqlalchemy import String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from .db import Base

UTC = dt.timezone.utc
def utcnow() -> dt.datetime:
    return dt.datetime.now(tz=UTC)

class LedgerRecord(Base):
    __tablename__ = "ledger_records"
    name: Mapped[str] = mapped_column(String(32), primary_key=True)  # progress | history
    payload_json: Mapped[str] = mapped_column(Text, default="{}")   # full snapshot, replaced on every save
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
