"""FastAPI dependency wiring for the store and its collaborators."""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header
from sqlmodel import Session

from i18n_center_api.cache import ResilientCache, build_cache
from i18n_center_api.db import engine, get_session
from i18n_center_api.services.backfill import BackfillOrchestrator, application_translator_provider
from i18n_center_api.services.catalog import ComponentCatalog
from i18n_center_api.services.repository import TranslationRepository
from i18n_center_api.services.stage_pipeline import StagePipeline
from i18n_center_api.services.sweeper import SlotSweeper
from i18n_center_api.services.translation_store import TranslationStore
from i18n_center_api.services.translator import EngineFactory, openai_engine_factory
from i18n_center_api.settings import get_settings


def _purge_extra_slots() -> int:
    with Session(engine) as session:
        return TranslationRepository(session).purge_extra_slots()


@lru_cache(maxsize=1)
def get_cache() -> ResilientCache:
    settings = get_settings()
    return build_cache(settings.redis_url, settings.cache_ttl_seconds)


@lru_cache(maxsize=1)
def get_sweeper() -> SlotSweeper:
    return SlotSweeper(_purge_extra_slots, mode=get_settings().slot_sweep_mode)


def get_engine_factory() -> EngineFactory:
    return openai_engine_factory(get_settings())


def get_actor(x_actor: Optional[str] = Header(default=None)) -> Optional[str]:
    """Opaque actor id supplied by the (external) auth layer."""
    return x_actor or None


def get_catalog(
    session: Session = Depends(get_session),  # noqa: B008
    cache: ResilientCache = Depends(get_cache),  # noqa: B008
) -> ComponentCatalog:
    return ComponentCatalog(session, cache)


def get_store(
    session: Session = Depends(get_session),  # noqa: B008
    cache: ResilientCache = Depends(get_cache),  # noqa: B008
    sweeper: SlotSweeper = Depends(get_sweeper),  # noqa: B008
) -> TranslationStore:
    return TranslationStore(session, cache, sweeper)


def get_pipeline(store: TranslationStore = Depends(get_store)) -> StagePipeline:  # noqa: B008
    return StagePipeline(store)


def get_backfill(
    store: TranslationStore = Depends(get_store),  # noqa: B008
    engine_factory: EngineFactory = Depends(get_engine_factory),  # noqa: B008
) -> BackfillOrchestrator:
    provider = application_translator_provider(
        store.catalog,
        engine_factory,
        get_settings().placeholder_policy,
    )
    return BackfillOrchestrator(store, provider)
