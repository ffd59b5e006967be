import pytest
from sqlalchemy.exc import IntegrityError

from i18n_center_api.errors import DuplicateSlotError, PersistenceError
from i18n_center_api.services.repository import TranslationRepository, is_slot_conflict


class DriverError(Exception):
    def __init__(self, message, constraint_name=None):
        super().__init__(message)
        self.diag = type("Diag", (), {"constraint_name": constraint_name})()


def _integrity_error(orig) -> IntegrityError:
    return IntegrityError("INSERT INTO translation_versions ...", {}, orig)


def test_slot_constraint_by_name() -> None:
    assert is_slot_conflict(_integrity_error(DriverError("duplicate key", "uq_translation_slot")))
    assert not is_slot_conflict(
        _integrity_error(DriverError("violates foreign key", "translation_versions_component_id_fkey"))
    )


def test_slot_constraint_from_sqlite_message() -> None:
    message = (
        "UNIQUE constraint failed: translation_versions.component_id, translation_versions.locale, "
        "translation_versions.stage, translation_versions.version"
    )
    assert is_slot_conflict(_integrity_error(Exception(message)))
    assert not is_slot_conflict(_integrity_error(Exception("FOREIGN KEY constraint failed")))


def test_foreign_key_violation_is_not_a_slot_race(session) -> None:
    repo = TranslationRepository(session)
    orig = DriverError("violates foreign key", "translation_versions_component_id_fkey")

    with pytest.raises(PersistenceError) as exc_info:
        with repo._guard("insert"):
            raise _integrity_error(orig)

    assert not isinstance(exc_info.value, DuplicateSlotError)


def test_slot_violation_becomes_duplicate_slot(session) -> None:
    repo = TranslationRepository(session)

    with pytest.raises(DuplicateSlotError):
        with repo._guard("insert"):
            raise _integrity_error(DriverError("duplicate key", "uq_translation_slot"))


def test_real_duplicate_insert_is_detected(store, component) -> None:
    store.save(component.id, "en", "draft", {"title": "A"})

    with pytest.raises(DuplicateSlotError):
        store.repository.insert(component.id, "en", "draft", 2, {"title": "B"})
