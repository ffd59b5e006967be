import pytest

from i18n_center_api.errors import BackfillError, ExternalServiceError, PersistenceError, TranslationNotFoundError
from i18n_center_api.services.backfill import BackfillOrchestrator, application_translator_provider
from i18n_center_api.services.translator import TemplatePreservingTranslator

from conftest import FakeEngine


def _orchestrator(store, engine):
    return BackfillOrchestrator(store, lambda component_id: TemplatePreservingTranslator(engine))


def test_auto_translate_saves_target_locale(store, component) -> None:
    store.save(component.id, "en", "draft", {"greeting": "Hi [name]!", "count": 2})

    saved = _orchestrator(store, FakeEngine()).auto_translate(component.id, "en", "es", "draft", actor="bot")

    assert saved.locale == "es"
    assert saved.data == {"greeting": "es:Hi [name]!", "count": 2}
    assert store.get(component.id, "es", "draft").data == saved.data


def test_auto_translate_requires_source(store, component) -> None:
    with pytest.raises(TranslationNotFoundError):
        _orchestrator(store, FakeEngine()).auto_translate(component.id, "en", "es", "draft")


def test_auto_translate_failure_leaves_target_untouched(store, component) -> None:
    store.save(component.id, "en", "draft", {"title": "Hello"})
    store.save(component.id, "es", "draft", {"title": "Hola"})

    with pytest.raises(ExternalServiceError):
        _orchestrator(store, FakeEngine(fail_locales={"es"})).auto_translate(component.id, "en", "es", "draft")

    assert store.get(component.id, "es", "draft").data == {"title": "Hola"}


def test_backfill_translates_each_locale_in_order(store, component) -> None:
    store.save(component.id, "en", "draft", {"title": "Hello"})
    engine = FakeEngine()

    rows = _orchestrator(store, engine).backfill(component.id, "en", ["id", "es", "fr"], "draft")

    assert [r.locale for r in rows] == ["id", "es", "fr"]
    assert [call[2] for call in engine.calls] == ["id", "es", "fr"]
    assert store.get(component.id, "fr", "draft").data == {"title": "fr:Hello"}


def test_backfill_stops_at_first_failure_and_keeps_earlier_locales(store, component) -> None:
    store.save(component.id, "en", "draft", {"title": "Hello"})
    engine = FakeEngine(fail_locales={"es"})

    with pytest.raises(BackfillError) as exc_info:
        _orchestrator(store, engine).backfill(component.id, "en", ["id", "es", "fr"], "draft")

    error = exc_info.value
    assert error.failed_locale == "es"
    assert error.completed_locales == ["id"]
    assert isinstance(error.cause, ExternalServiceError)
    assert store.get(component.id, "id", "draft").data == {"title": "id:Hello"}
    with pytest.raises(TranslationNotFoundError):
        store.get(component.id, "fr", "draft")
    assert "fr" not in [call[2] for call in engine.calls]


def test_translator_uses_application_engine_key(store, component) -> None:
    engine = FakeEngine()
    provide = application_translator_provider(store.catalog, engine.factory)

    translator = provide(component.id)

    assert translator.engine is engine
    assert engine.keys == ["sk-shop"]


def test_backfill_stops_when_a_save_fails(store, component, monkeypatch) -> None:
    store.save(component.id, "en", "draft", {"title": "Hello"})
    engine = FakeEngine()
    save = store.save

    def failing_save(component_id, locale, stage, data, actor=None):
        if locale == "es":
            raise PersistenceError("save failed")
        return save(component_id, locale, stage, data, actor)

    monkeypatch.setattr(store, "save", failing_save)

    with pytest.raises(BackfillError) as exc_info:
        _orchestrator(store, engine).backfill(component.id, "en", ["id", "es", "fr"], "draft")

    error = exc_info.value
    assert error.failed_locale == "es"
    assert error.completed_locales == ["id"]
    assert isinstance(error.cause, PersistenceError)
    assert store.get(component.id, "id", "draft").data == {"title": "id:Hello"}
    assert [call[2] for call in engine.calls] == ["id", "es"]
