"""Versioned translation store: two-slot history with a cache-aside read path.

For every (component, locale, stage) key there is at most one slot-1 row and
one slot-2 row. Slot 1 is written exactly once, on the first save ever made
for the key, with the same payload as that save; later saves only overwrite
slot 2. Revert therefore restores the payload of the first save, not the one
before the latest edit.
"""

import copy
import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError
from sqlmodel import Session

from i18n_center_api.cache import ResilientCache, component_key, translation_key
from i18n_center_api.errors import DuplicateSlotError, PersistenceError, TranslationNotFoundError
from i18n_center_api.services.catalog import ComponentCatalog
from i18n_center_api.services.locks import KeyedLock, translation_write_locks
from i18n_center_api.services.repository import TranslationRepository
from i18n_center_api.services.sweeper import SlotSweeper
from i18n_models import TranslationSlot, TranslationVersion

logger = logging.getLogger(__name__)

StageLike = Union[str, Enum]


def stage_label(stage: StageLike) -> str:
    """Normalize a stage to its opaque string label. No ordering is implied."""
    value = stage.value if isinstance(stage, Enum) else stage
    if not isinstance(value, str) or not value.strip():
        raise ValueError("stage must be a non-empty label")
    return value.strip()


@dataclass
class VersionPair:
    original: Optional[TranslationVersion]
    current: Optional[TranslationVersion]


class TranslationStore:
    def __init__(
        self,
        session: Session,
        cache: Optional[ResilientCache] = None,
        sweeper: Optional[SlotSweeper] = None,
        locks: KeyedLock = translation_write_locks,
    ) -> None:
        self.cache = cache if cache is not None else ResilientCache()
        self.repository = TranslationRepository(session)
        self.catalog = ComponentCatalog(session, self.cache)
        self.sweeper = sweeper
        self._locks = locks

    # --- reads --------------------------------------------------------

    def _from_cache(self, key: str) -> Optional[TranslationVersion]:
        cached = self.cache.get(key)
        if cached is None:
            return None
        try:
            return TranslationVersion.model_validate(cached)
        except ValidationError:
            logger.warning("Discarding malformed cached translation", extra={"cache_key": key})
            self.cache.delete(key)
            return None

    def _remember(self, row: TranslationVersion) -> None:
        self.cache.set(
            translation_key(row.component_id, row.locale, row.stage),
            row.model_dump(mode="json"),
        )

    def get(self, component_id: uuid.UUID, locale: str, stage: StageLike) -> TranslationVersion:
        """Effective translation: slot 2 if present, else slot 1."""
        stage = stage_label(stage)
        key = translation_key(component_id, locale, stage)
        cached = self._from_cache(key)
        if cached is not None:
            return cached

        row = self.repository.find_slot(component_id, locale, stage, TranslationSlot.CURRENT)
        if row is None:
            row = self.repository.find_slot(component_id, locale, stage, TranslationSlot.ORIGINAL)
        if row is None:
            raise TranslationNotFoundError(component_id, locale, stage)

        self._remember(row)
        return row

    def effective_payload(self, component_id: uuid.UUID, locale: str, stage: StageLike) -> Dict[str, Any]:
        return copy.deepcopy(self.get(component_id, locale, stage).data)

    def get_many(
        self,
        component_ids: Iterable[uuid.UUID],
        locale: str,
        stage: StageLike,
    ) -> Dict[uuid.UUID, TranslationVersion]:
        """Bulk read for one locale/stage.

        Components with nothing saved are left out of the result.
        """
        stage = stage_label(stage)
        requested = list(dict.fromkeys(component_ids))
        results: Dict[uuid.UUID, TranslationVersion] = {}
        missing: List[uuid.UUID] = []

        for component_id in requested:
            cached = self._from_cache(translation_key(component_id, locale, stage))
            if cached is not None:
                results[component_id] = cached
            else:
                missing.append(component_id)

        if missing:
            for row in self.repository.find_slot_many(missing, locale, stage, TranslationSlot.CURRENT):
                results[row.component_id] = row
                self._remember(row)

            still_missing = [cid for cid in missing if cid not in results]
            if still_missing:
                for row in self.repository.find_slot_many(still_missing, locale, stage, TranslationSlot.ORIGINAL):
                    results[row.component_id] = row
                    self._remember(row)

        logger.info(
            "Bulk translations fetched",
            extra={
                "requested": len(requested),
                "cache_hits": len(requested) - len(missing),
                "found": len(results),
                "locale": locale,
                "stage": stage,
            },
        )
        return results

    def get_many_by_codes(
        self,
        application_code: str,
        component_codes: Iterable[str],
        locale: str,
        stage: StageLike,
    ) -> Dict[str, TranslationVersion]:
        """Same as get_many, addressed by component code within one application.

        Raises UnknownComponentCodesError if any code does not resolve.
        """
        by_code = self.catalog.resolve_codes(application_code, list(component_codes))
        code_by_id = {component.id: code for code, component in by_code.items()}
        rows = self.get_many(list(code_by_id), locale, stage)
        return {code_by_id[component_id]: row for component_id, row in rows.items()}

    def compare(self, component_id: uuid.UUID, locale: str, stage: StageLike) -> VersionPair:
        stage = stage_label(stage)
        return VersionPair(
            original=self.repository.find_slot(component_id, locale, stage, TranslationSlot.ORIGINAL),
            current=self.repository.find_slot(component_id, locale, stage, TranslationSlot.CURRENT),
        )

    # --- writes -------------------------------------------------------

    def _put_current(
        self,
        component_id: uuid.UUID,
        locale: str,
        stage: str,
        data: Dict[str, Any],
        actor: Optional[str],
    ) -> TranslationVersion:
        """Create or overwrite the slot-2 row in the open transaction."""
        repo = self.repository
        current = repo.find_slot(component_id, locale, stage, TranslationSlot.CURRENT, active_only=False)
        if current is None:
            return repo.insert(component_id, locale, stage, TranslationSlot.CURRENT, copy.deepcopy(data), actor)
        return repo.update(current, copy.deepcopy(data), actor)

    def _write_slots(
        self,
        component_id: uuid.UUID,
        locale: str,
        stage: str,
        data: Dict[str, Any],
        actor: Optional[str],
    ) -> TranslationVersion:
        repo = self.repository
        current = self._put_current(component_id, locale, stage, data, actor)

        original = repo.find_slot(component_id, locale, stage, TranslationSlot.ORIGINAL, active_only=False)
        if original is None:
            # First save of this key: freeze the same payload as the baseline
            repo.insert(component_id, locale, stage, TranslationSlot.ORIGINAL, copy.deepcopy(data), actor)

        repo.commit()
        return repo.refresh(current)

    def _restore_original(
        self,
        component_id: uuid.UUID,
        locale: str,
        stage: str,
        actor: Optional[str],
    ) -> TranslationVersion:
        repo = self.repository
        original = repo.find_slot(component_id, locale, stage, TranslationSlot.ORIGINAL)
        if original is None:
            raise TranslationNotFoundError(component_id, locale, stage, detail="no previous version found")

        current = self._put_current(component_id, locale, stage, original.data, actor)
        repo.commit()
        return repo.refresh(current)

    def _retry_on_slot_race(
        self,
        write: Callable[[], TranslationVersion],
        component_id: uuid.UUID,
        locale: str,
        stage: str,
    ) -> TranslationVersion:
        """Run a slot write, and once more if another process inserted the same slot first."""
        try:
            return write()
        except DuplicateSlotError:
            # The transaction was rolled back; the competing row is now visible
            logger.warning(
                "Concurrent insert on translation key, retrying as update",
                extra={"component_id": str(component_id), "locale": locale, "stage": stage},
            )
            return write()

    def _invalidate(self, component_id: uuid.UUID, locale: str, stage: str, include_component: bool = False) -> None:
        keys = [translation_key(component_id, locale, stage)]
        if include_component:
            keys.append(component_key(component_id))
        self.cache.delete(*keys)

    def _request_sweep(self) -> None:
        if self.sweeper is None:
            return
        try:
            self.sweeper.request()
        except PersistenceError:
            logger.exception("Slot sweep after save failed")

    def save(
        self,
        component_id: uuid.UUID,
        locale: str,
        stage: StageLike,
        data: Dict[str, Any],
        actor: Optional[str] = None,
    ) -> TranslationVersion:
        """Create or overwrite slot 2, create slot 1 once, return slot 2."""
        stage = stage_label(stage)
        with self._locks.hold((component_id, locale, stage)):
            current = self._retry_on_slot_race(
                lambda: self._write_slots(component_id, locale, stage, data, actor),
                component_id,
                locale,
                stage,
            )
            self._invalidate(component_id, locale, stage, include_component=True)

        self._request_sweep()
        logger.info(
            "Translation saved",
            extra={"component_id": str(component_id), "locale": locale, "stage": stage, "actor": actor},
        )
        return current

    def revert(
        self,
        component_id: uuid.UUID,
        locale: str,
        stage: StageLike,
        actor: Optional[str] = None,
    ) -> TranslationVersion:
        """Overwrite slot 2 with the frozen slot-1 payload."""
        stage = stage_label(stage)
        with self._locks.hold((component_id, locale, stage)):
            current = self._retry_on_slot_race(
                lambda: self._restore_original(component_id, locale, stage, actor),
                component_id,
                locale,
                stage,
            )
            self._invalidate(component_id, locale, stage)

        logger.info(
            "Translation reverted",
            extra={"component_id": str(component_id), "locale": locale, "stage": stage, "actor": actor},
        )
        return current

    def list_current(self, component_id: uuid.UUID, stage: StageLike) -> List[TranslationVersion]:
        """Slot-2 rows of a component for every locale of one stage."""
        return self.repository.list_current(component_id, stage_label(stage))
