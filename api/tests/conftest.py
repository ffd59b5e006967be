"""Common pytest fixtures for API and service tests.

Tests run against an in-memory SQLite database shared through a single
connection. Tables are created from SQLModel metadata; production schemas
are owned by the Alembic migrations.
"""

import os
from collections.abc import Iterator

# Configure the service BEFORE importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SLOT_SWEEP_MODE"] = "inline"
os.environ.setdefault("LOG_JSON", "false")
os.environ.pop("REDIS_URL", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete
from sqlmodel import Session, SQLModel

from i18n_center_api.cache import Cache, MemoryCache, ResilientCache
from i18n_center_api.db import engine
from i18n_center_api.deps import get_cache, get_engine_factory, get_sweeper
from i18n_center_api.errors import CacheDegradedError, ExternalServiceError
from i18n_center_api.main import app
from i18n_center_api.services.catalog import ComponentCatalog
from i18n_center_api.services.locks import KeyedLock
from i18n_center_api.services.repository import TranslationRepository
from i18n_center_api.services.sweeper import SlotSweeper
from i18n_center_api.services.translation_store import TranslationStore
from i18n_center_api.services.translator import TranslationEngine
from i18n_models import Application, Component, TranslationVersion

SQLModel.metadata.create_all(engine)


class FakeEngine(TranslationEngine):
    """Prefixes text with the target locale; brackets pass through untouched."""

    def __init__(self, fail_locales=(), fail_on=None) -> None:
        self.fail_locales = set(fail_locales)
        self.fail_on = fail_on
        self.calls = []
        self.keys = []

    def translate(self, text: str, source_locale: str, target_locale: str) -> str:
        self.calls.append((text, source_locale, target_locale))
        if target_locale in self.fail_locales or (self.fail_on is not None and text == self.fail_on):
            raise ExternalServiceError("engine unavailable", locale=target_locale)
        return f"{target_locale}:{text}"

    def factory(self, api_key=None) -> "FakeEngine":
        self.keys.append(api_key)
        return self


class FlakyCache(Cache):
    """Backend that is always down."""

    def get(self, key):
        raise CacheDegradedError("cache down")

    def set(self, key, value, ttl_seconds):
        raise CacheDegradedError("cache down")

    def delete(self, key):
        raise CacheDegradedError("cache down")


@pytest.fixture(autouse=True)
def _clean_db() -> Iterator[None]:
    with Session(engine) as session:
        # Respect FKs: translation rows first, then components, then applications
        session.exec(delete(TranslationVersion))
        session.exec(delete(Component))
        session.exec(delete(Application))
        session.commit()
    yield


@pytest.fixture
def session() -> Iterator[Session]:
    with Session(engine) as s:
        yield s


@pytest.fixture
def cache() -> ResilientCache:
    return ResilientCache(MemoryCache(), ttl_seconds=3600)


@pytest.fixture
def sweeper() -> SlotSweeper:
    def purge() -> int:
        with Session(engine) as s:
            return TranslationRepository(s).purge_extra_slots()

    return SlotSweeper(purge, mode="inline")


@pytest.fixture
def store(session, cache, sweeper) -> TranslationStore:
    return TranslationStore(session, cache, sweeper, locks=KeyedLock())


@pytest.fixture
def catalog(store) -> ComponentCatalog:
    return store.catalog


@pytest.fixture
def application(catalog) -> Application:
    return catalog.create_application(
        Application(code="shop", name="Shop", enabled_languages=["en", "es", "fr"], openai_key="sk-shop"),
        actor="admin",
    )


@pytest.fixture
def component(catalog, application) -> Component:
    return catalog.create_component(
        Component(application_id=application.id, code="header", name="Header"),
        actor="admin",
    )


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def client(cache, sweeper, fake_engine) -> Iterator[TestClient]:
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_sweeper] = lambda: sweeper
    app.dependency_overrides[get_engine_factory] = lambda: fake_engine.factory
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
