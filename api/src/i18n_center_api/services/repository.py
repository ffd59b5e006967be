"""Entity store access for TranslationVersion rows.

Every SQLAlchemy failure leaves this module as PersistenceError. A violation of
the slot uniqueness constraint becomes DuplicateSlotError so the store can
retry the write as an update; any other integrity error is a plain
PersistenceError.
"""

import logging
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from i18n_center_api.errors import DuplicateSlotError, PersistenceError
from i18n_models import TranslationVersion

logger = logging.getLogger(__name__)

MAX_SLOT = 2
SLOT_CONSTRAINT = "uq_translation_slot"


def is_slot_conflict(exc: IntegrityError) -> bool:
    """True when the violated constraint is the per-key slot uniqueness one."""
    diag = getattr(exc.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint:
        return constraint == SLOT_CONSTRAINT
    # SQLite reports the columns instead of the constraint name
    message = str(exc.orig)
    if SLOT_CONSTRAINT in message:
        return True
    return message.startswith("UNIQUE constraint failed") and "translation_versions.version" in message


class TranslationRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except IntegrityError as exc:
            self.session.rollback()
            if is_slot_conflict(exc):
                raise DuplicateSlotError(f"{operation}: slot already exists") from exc
            logger.error("Integrity violation", extra={"operation": operation, "error": str(exc.orig)})
            raise PersistenceError(f"{operation} failed") from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Entity store failure", extra={"operation": operation, "error": str(exc)})
            raise PersistenceError(f"{operation} failed") from exc

    def find_slot(
        self,
        component_id: uuid.UUID,
        locale: str,
        stage: str,
        slot: int,
        active_only: bool = True,
    ) -> Optional[TranslationVersion]:
        stmt = select(TranslationVersion).where(
            TranslationVersion.component_id == component_id,
            TranslationVersion.locale == locale,
            TranslationVersion.stage == stage,
            TranslationVersion.version == slot,
        )
        if active_only:
            stmt = stmt.where(TranslationVersion.is_active == True)  # noqa: E712
        with self._guard("find_slot"):
            return self.session.exec(stmt).first()

    def find_slot_many(
        self,
        component_ids: Sequence[uuid.UUID],
        locale: str,
        stage: str,
        slot: int,
    ) -> List[TranslationVersion]:
        if not component_ids:
            return []
        stmt = select(TranslationVersion).where(
            TranslationVersion.component_id.in_(list(component_ids)),
            TranslationVersion.locale == locale,
            TranslationVersion.stage == stage,
            TranslationVersion.is_active == True,  # noqa: E712
            TranslationVersion.version == slot,
        )
        with self._guard("find_slot_many"):
            return list(self.session.exec(stmt).all())

    def list_current(self, component_id: uuid.UUID, stage: str) -> List[TranslationVersion]:
        stmt = (
            select(TranslationVersion)
            .where(
                TranslationVersion.component_id == component_id,
                TranslationVersion.stage == stage,
                TranslationVersion.is_active == True,  # noqa: E712
                TranslationVersion.version == MAX_SLOT,
            )
            .order_by(TranslationVersion.locale)
        )
        with self._guard("list_current"):
            return list(self.session.exec(stmt).all())

    def insert(
        self,
        component_id: uuid.UUID,
        locale: str,
        stage: str,
        slot: int,
        data: Dict[str, Any],
        actor: Optional[str] = None,
    ) -> TranslationVersion:
        row = TranslationVersion(
            component_id=component_id,
            locale=locale,
            stage=stage,
            version=slot,
            data=data,
            is_active=True,
            created_by=actor,
            updated_by=actor,
        )
        with self._guard("insert"):
            self.session.add(row)
            self.session.flush()
        return row

    def update(self, row: TranslationVersion, data: Dict[str, Any], actor: Optional[str] = None) -> TranslationVersion:
        row.data = data
        row.is_active = True
        if actor is not None:
            row.updated_by = actor
        with self._guard("update"):
            self.session.add(row)
            self.session.flush()
        return row

    def commit(self) -> None:
        with self._guard("commit"):
            self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    def refresh(self, row: TranslationVersion) -> TranslationVersion:
        with self._guard("refresh"):
            self.session.refresh(row)
        return row

    def purge_extra_slots(self) -> int:
        """Delete every row whose slot is above 2, for all keys."""
        with self._guard("purge_extra_slots"):
            result = self.session.exec(delete(TranslationVersion).where(TranslationVersion.version > MAX_SLOT))
            self.session.commit()
        return result.rowcount or 0
