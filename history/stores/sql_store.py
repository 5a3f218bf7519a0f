"""SQLite SQLAlchemy key-value store."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

from sqlalchemy import DateTime, String, Text, create_engine, select
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from history.stores.base_store import KeyValueStore


def utc_now() -> datetime:
    """Return UTC datetime for default timestamps."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Declarative base."""


class SlotRecord(Base):
    """One named text slot."""

    __tablename__ = "kv_slots"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )


class SQLiteStore(KeyValueStore):
    """Provides slot persistence on a SQLite database file."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.engine = create_engine(f"sqlite+pysqlite:///{self.db_path}", future=True)
        self._session_factory = sessionmaker(bind=self.engine, future=True)
        self._schema_ready = False

    def _ensure_schema(self) -> None:
        # Created on first access; a corrupt file raises from get/set/delete.
        if not self._schema_ready:
            Base.metadata.create_all(self.engine)
            self._schema_ready = True

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Context manager that commits on success and rolls back on error."""
        sess = self._session_factory()
        try:
            yield sess
            sess.commit()
        except Exception:
            sess.rollback()
            raise
        finally:
            sess.close()

    def get(self, key: str) -> str | None:
        self._ensure_schema()
        with self.session() as sess:
            return sess.scalar(select(SlotRecord.value).where(SlotRecord.key == key))

    def set(self, key: str, value: str) -> None:
        self._ensure_schema()
        with self.session() as sess:
            row = sess.get(SlotRecord, key)
            if row is None:
                sess.add(SlotRecord(key=key, value=value))
            else:
                row.value = value

    def delete(self, key: str) -> None:
        self._ensure_schema()
        with self.session() as sess:
            row = sess.get(SlotRecord, key)
            if row is not None:
                sess.delete(row)

    def close(self) -> None:
        self.engine.dispose()
