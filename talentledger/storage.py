"""
Record store.

Responsibilities:
- CRUD operations for candidates, hour_log_entries and work_records.
- One session (one commit) per write.

Non-Responsibilities:
- No billing logic.
- No cross-record consistency; callers sequence multi-record writes.

Invariant:
Store methods return plain dicts and never encode domain decisions.
"""

from pathlib import Path
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError

from .database import OWNER_COLUMNS, TABLES, get_session, init_database
from .errors import PersistenceError, RecordNotFoundError
from .logger import get_logger


class RecordStore:
    """SQLite-backed record store reached through create/read/update/delete calls."""

    def __init__(self, db_path: Path, create: bool = True):
        self.db_path = Path(db_path)
        if create:
            init_database(self.db_path)

    def _model(self, table: str):
        try:
            return TABLES[table]
        except KeyError:
            raise PersistenceError(f"Unknown table: {table}") from None

    def _columns(self, model, fields: Dict[str, Any]) -> Dict[str, Any]:
        known = {c.name for c in model.__table__.columns}
        unknown = sorted(set(fields) - known)
        if unknown:
            get_logger().debug("Ignoring unknown fields", table=model.__tablename__, fields=unknown)
        return {k: v for k, v in fields.items() if k in known}

    # Reads

    def select_all(self, table: str) -> List[Dict[str, Any]]:
        model = self._model(table)
        session = get_session(self.db_path)
        try:
            return [row.to_dict() for row in session.query(model).all()]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read {table}: {e}") from e
        finally:
            session.close()

    def select_by_owner(self, table: str, owner_id: str) -> List[Dict[str, Any]]:
        model = self._model(table)
        owner_column = getattr(model, OWNER_COLUMNS[table])
        session = get_session(self.db_path)
        try:
            rows = session.query(model).filter(owner_column == owner_id).all()
            return [row.to_dict() for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read {table} for owner {owner_id}: {e}") from e
        finally:
            session.close()

    def get_by_id(self, table: str, record_id: str) -> Dict[str, Any]:
        model = self._model(table)
        session = get_session(self.db_path)
        try:
            row = session.get(model, record_id)
            if row is None:
                raise RecordNotFoundError(table, record_id)
            return row.to_dict()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read {table} record {record_id}: {e}") from e
        finally:
            session.close()

    # Writes

    def insert_one(self, table: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        model = self._model(table)
        logger = get_logger()
        logger.record_write()
        session = get_session(self.db_path)
        try:
            row = model(**self._columns(model, fields))
            session.add(row)
            session.commit()
            return row.to_dict()
        except SQLAlchemyError as e:
            session.rollback()
            logger.record_write_failure(type(e).__name__)
            raise PersistenceError(f"Failed to insert into {table}: {e}") from e
        finally:
            session.close()

    def update_fields(self, table: str, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        model = self._model(table)
        logger = get_logger()
        logger.record_write()
        session = get_session(self.db_path)
        try:
            row = session.get(model, record_id)
            if row is None:
                logger.record_write_failure(RecordNotFoundError.__name__)
                raise RecordNotFoundError(table, record_id)
            for key, value in self._columns(model, fields).items():
                setattr(row, key, value)
            session.commit()
            return row.to_dict()
        except SQLAlchemyError as e:
            session.rollback()
            logger.record_write_failure(type(e).__name__)
            raise PersistenceError(f"Failed to update {table} record {record_id}: {e}") from e
        finally:
            session.close()

    def delete_by_id(self, table: str, record_id: str) -> None:
        model = self._model(table)
        logger = get_logger()
        logger.record_write()
        session = get_session(self.db_path)
        try:
            row = session.get(model, record_id)
            if row is None:
                logger.record_write_failure(RecordNotFoundError.__name__)
                raise RecordNotFoundError(table, record_id)
            session.delete(row)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.record_write_failure(type(e).__name__)
            raise PersistenceError(f"Failed to delete {table} record {record_id}: {e}") from e
        finally:
            session.close()
