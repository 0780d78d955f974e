"""
SQLAlchemy-backed snapshot store.

Maintains the same interface as the in-memory store. Every `commit` runs in a
single transaction, so the profile, the trip history and the task list are
replaced together or not at all.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from greentransit.core.database import check_connection, create_all_tables, get_db_session, kv_store
from greentransit.features.storage.store import StoreError, copy_json

logger = logging.getLogger("greentransit")


class SqlStore:
    def __init__(self, engine):
        self._engine = engine
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        create_all_tables(engine)

    def get(self, key: str) -> Optional[Any]:
        try:
            with get_db_session(self._session_factory) as session:
                row = session.execute(
                    select(kv_store.c.value).where(kv_store.c.key == key)
                ).first()
        except SQLAlchemyError as e:
            raise StoreError(f"failed to read {key!r}: {e}") from e
        return None if row is None else row[0]

    def commit(self, values: Mapping[str, Any]) -> None:
        staged = {k: copy_json(v) for k, v in values.items()}
        try:
            with get_db_session(self._session_factory) as session:
                for key, value in staged.items():
                    exists = session.execute(
                        select(kv_store.c.key).where(kv_store.c.key == key)
                    ).first()
                    if exists:
                        session.execute(
                            update(kv_store).where(kv_store.c.key == key).values(value=value)
                        )
                    else:
                        session.execute(insert(kv_store).values(key=key, value=value))
        except SQLAlchemyError as e:
            raise StoreError(f"failed to commit {sorted(staged)}: {e}") from e

    def clear(self) -> None:
        """Remove every key. FOR TESTING ONLY."""
        try:
            with get_db_session(self._session_factory) as session:
                session.execute(delete(kv_store))
        except SQLAlchemyError as e:
            raise StoreError(f"failed to clear store: {e}") from e

    def ping(self) -> bool:
        return check_connection(self._engine)
