from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String, Text, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from taskmaster.errors import StorageError


class Base(DeclarativeBase):
    pass


class KeyValueRow(Base):
    __tablename__ = "kv_items"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class SQLiteKeyValueStorage:
    def __init__(self, engine, sessionmaker):
        self.sessionmaker = sessionmaker
        try:
            Base.metadata.create_all(engine)
        except SQLAlchemyError as e:
            raise StorageError(f"cannot prepare kv_items table: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        try:
            with self.sessionmaker() as session:
                row = session.get(KeyValueRow, key)
                return row.value if row else None
        except SQLAlchemyError as e:
            raise StorageError(f"read {key!r} failed: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc)
        try:
            with self.sessionmaker() as session:
                # merge = insert or update by primary key
                session.merge(KeyValueRow(key=key, value=value, updated_at=now))
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"write {key!r} failed: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            with self.sessionmaker() as session:
                session.execute(delete(KeyValueRow).where(KeyValueRow.key == key))
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"remove {key!r} failed: {e}") from e
