"""Persistence of each calculator's last inputs.

Saving is best effort and loading never fails: a missing row, an
undecodable payload or a database error all read back as "no saved inputs".
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Protocol, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from reicalc.db.tables import SavedInputsRow, init_db
from reicalc.models import StorageKey

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class InputStore(Protocol):
    """Key-value capability the calculator sessions persist through."""

    def load(self, key: StorageKey, model_type: type[M]) -> M | None: ...

    def save(self, key: StorageKey, inputs: BaseModel) -> None: ...

    def clear(self, keys: Iterable[StorageKey]) -> None: ...


class Repository:
    """SQLAlchemy-backed input store."""

    def __init__(self, db_url: str = "sqlite:///reicalc.db"):
        self._session_factory = init_db(db_url)

    def _session(self) -> Session:
        return self._session_factory()

    def load(self, key: StorageKey, model_type: type[M]) -> M | None:
        """Return the saved inputs for ``key``, or None if absent or corrupt."""
        try:
            with self._session() as session:
                row = session.get(SavedInputsRow, StorageKey(key).value)
                payload = row.payload if row else None
        except SQLAlchemyError as e:
            logger.warning("Could not read saved inputs for %s: %s", key, e)
            return None

        if payload is None:
            return None

        try:
            return model_type.model_validate_json(payload)
        except ValidationError as e:
            logger.warning("Discarding corrupt saved inputs for %s: %s", key, e)
            return None

    def save(self, key: StorageKey, inputs: BaseModel) -> None:
        """Store ``inputs`` under ``key``, replacing any previous value."""
        key = StorageKey(key).value
        try:
            payload = inputs.model_dump_json()
            with self._session() as session:
                row = session.get(SavedInputsRow, key)
                if row:
                    row.payload = payload
                    row.updated_at = datetime.utcnow()
                else:
                    session.add(SavedInputsRow(key=key, payload=payload))
                session.commit()
        except (SQLAlchemyError, ValueError) as e:
            logger.warning("Could not save inputs for %s: %s", key, e)

    def clear(self, keys: Iterable[StorageKey]) -> None:
        """Delete the saved inputs for every key given."""
        values = [StorageKey(k).value for k in keys]
        try:
            with self._session() as session:
                session.query(SavedInputsRow).filter(SavedInputsRow.key.in_(values)).delete(
                    synchronize_session=False
                )
                session.commit()
        except SQLAlchemyError as e:
            logger.warning("Could not clear saved inputs: %s", e)

    def saved_keys(self) -> list[str]:
        """Keys that currently hold saved inputs."""
        try:
            with self._session() as session:
                return [row.key for row in session.query(SavedInputsRow).order_by(SavedInputsRow.key)]
        except SQLAlchemyError as e:
            logger.warning("Could not list saved inputs: %s", e)
            return []
