import uuid

import pytest

from i18n_center_api.cache import translation_key
from i18n_center_api.errors import ApplicationNotFoundError, UnknownComponentCodesError
from i18n_models import Component, TranslationSlot


@pytest.fixture
def components(catalog, application):
    return [
        catalog.create_component(Component(application_id=application.id, code=code, name=code.title()))
        for code in ("header", "footer", "sidebar")
    ]


def test_get_many_mixes_slots_and_omits_missing(store, components) -> None:
    header, footer, sidebar = components
    store.save(header.id, "en", "production", {"title": "Header"})
    store.repository.insert(footer.id, "en", "production", TranslationSlot.ORIGINAL, {"title": "Footer"})
    store.repository.commit()

    rows = store.get_many([header.id, footer.id, sidebar.id, uuid.uuid4()], "en", "production")

    assert set(rows) == {header.id, footer.id}
    assert rows[header.id].version == TranslationSlot.CURRENT
    assert rows[footer.id].version == TranslationSlot.ORIGINAL
    assert rows[footer.id].data == {"title": "Footer"}


def test_get_many_populates_cache(store, cache, components) -> None:
    header, footer, _ = components
    store.save(header.id, "en", "production", {"title": "Header"})
    store.save(footer.id, "en", "production", {"title": "Footer"})

    store.get_many([header.id, footer.id], "en", "production")

    assert translation_key(header.id, "en", "production") in cache.backend
    assert translation_key(footer.id, "en", "production") in cache.backend


def test_get_many_fully_cached_skips_entity_store(store, components, monkeypatch) -> None:
    header, footer, _ = components
    store.save(header.id, "en", "production", {"title": "Header"})
    store.save(footer.id, "en", "production", {"title": "Footer"})
    store.get_many([header.id, footer.id], "en", "production")

    def fail(*args, **kwargs):
        raise AssertionError("entity store should not be queried")

    monkeypatch.setattr(store.repository, "find_slot_many", fail)
    rows = store.get_many([header.id, footer.id], "en", "production")
    assert rows[footer.id].data == {"title": "Footer"}


def test_get_many_queries_only_cache_misses(store, components, monkeypatch) -> None:
    header, footer, sidebar = components
    store.save(header.id, "en", "production", {"title": "Header"})
    store.save(footer.id, "en", "production", {"title": "Footer"})
    store.get(header.id, "en", "production")

    queried = []
    original = store.repository.find_slot_many

    def spy(ids, locale, stage, slot):
        queried.append((sorted(str(i) for i in ids), slot))
        return original(ids, locale, stage, slot)

    monkeypatch.setattr(store.repository, "find_slot_many", spy)
    rows = store.get_many([header.id, footer.id, sidebar.id], "en", "production")

    assert set(rows) == {header.id, footer.id}
    assert queried == [
        (sorted([str(footer.id), str(sidebar.id)]), TranslationSlot.CURRENT),
        ([str(sidebar.id)], TranslationSlot.ORIGINAL),
    ]


def test_get_many_by_codes_keys_by_code(store, components) -> None:
    header, footer, _ = components
    store.save(header.id, "es", "production", {"title": "Cabecera"})

    rows = store.get_many_by_codes("shop", ["header", "footer"], "es", "production")

    assert list(rows) == ["header"]
    assert rows["header"].data == {"title": "Cabecera"}


def test_get_many_by_codes_rejects_unknown_codes(store, components) -> None:
    with pytest.raises(UnknownComponentCodesError) as exc_info:
        store.get_many_by_codes("shop", ["header", "nope", "gone"], "en", "production")
    assert exc_info.value.missing_codes == ["nope", "gone"]


def test_get_many_by_codes_unknown_application(store, components) -> None:
    with pytest.raises(ApplicationNotFoundError):
        store.get_many_by_codes("missing-app", ["header"], "en", "production")
