import pytest

from i18n_center_api.errors import ComponentNotFoundError
from i18n_center_api.services.transfer import export_application, export_component, import_component
from i18n_models import Component


def test_export_component_single_locale(store, component) -> None:
    store.save(component.id, "en", "production", {"title": "Hello"})
    assert export_component(store, component.id, "production", "en") == {"title": "Hello"}


def test_export_component_all_locales(store, component) -> None:
    store.save(component.id, "en", "production", {"title": "Hello"})
    store.save(component.id, "es", "production", {"title": "Hola"})
    store.save(component.id, "es", "draft", {"title": "Borrador"})

    assert export_component(store, component.id, "production") == {
        "en": {"title": "Hello"},
        "es": {"title": "Hola"},
    }


def test_export_application_keyed_by_code(store, catalog, application, component) -> None:
    footer = catalog.create_component(Component(application_id=application.id, code="footer", name="Footer"))
    store.save(component.id, "en", "production", {"title": "Header"})

    assert export_application(store, application.id, "production", "en") == {"header": {"title": "Header"}}
    assert export_application(store, application.id, "production") == {
        "footer": {},
        "header": {"en": {"title": "Header"}},
    }
    assert footer.code == "footer"


def test_import_component_saves_payload(store, component) -> None:
    saved = import_component(store, component.id, "fr", "draft", {"title": "Bonjour"}, actor="ops")

    assert saved.locale == "fr"
    assert saved.created_by == "ops"
    assert store.get(component.id, "fr", "draft").data == {"title": "Bonjour"}


def test_import_into_unknown_component(store, component) -> None:
    catalog = store.catalog
    catalog.delete_component(component.id)
    with pytest.raises(ComponentNotFoundError):
        import_component(store, component.id, "fr", "draft", {"title": "Bonjour"})
