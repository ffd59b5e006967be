import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from i18n_center_api.deps import get_actor, get_backfill, get_pipeline, get_store
from i18n_center_api.services.backfill import BackfillOrchestrator
from i18n_center_api.services.stage_pipeline import StagePipeline
from i18n_center_api.services.translation_store import TranslationStore
from i18n_models import DeploymentStage, TranslationVersion

router = APIRouter(tags=["translations"])
logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"
READ_STAGE = DeploymentStage.PRODUCTION.value
EDIT_STAGE = DeploymentStage.DRAFT.value


class SaveTranslationRequest(BaseModel):
    locale: str = Field(min_length=1)
    stage: str = Field(default=EDIT_STAGE, min_length=1)
    data: Dict[str, Any]


class DeployRequest(BaseModel):
    locale: str = Field(min_length=1)
    from_stage: str = Field(min_length=1)
    to_stage: str = Field(min_length=1)


class AutoTranslateRequest(BaseModel):
    source_locale: str = Field(min_length=1)
    target_locale: str = Field(min_length=1)
    stage: str = Field(default=EDIT_STAGE, min_length=1)


class BackfillRequest(BaseModel):
    source_locale: str = Field(min_length=1)
    target_locales: List[str] = Field(min_length=1)
    stage: str = Field(default=EDIT_STAGE, min_length=1)


class VersionSnapshot(BaseModel):
    data: Dict[str, Any]
    created_at: datetime
    updated_at: datetime


class CompareResponse(BaseModel):
    version1: Optional[VersionSnapshot] = None
    version2: Optional[VersionSnapshot] = None


def _snapshot(row: Optional[TranslationVersion]) -> Optional[VersionSnapshot]:
    if row is None:
        return None
    return VersionSnapshot(data=row.data, created_at=row.created_at, updated_at=row.updated_at)


@router.get("/components/{component_id}/translations", response_model=TranslationVersion)
def get_translation(
    component_id: uuid.UUID,
    locale: str = DEFAULT_LOCALE,
    stage: str = READ_STAGE,
    store: TranslationStore = Depends(get_store),  # noqa: B008
) -> TranslationVersion:
    return store.get(component_id, locale, stage)


@router.post("/components/{component_id}/translations", response_model=TranslationVersion)
def save_translation(
    component_id: uuid.UUID,
    body: SaveTranslationRequest,
    store: TranslationStore = Depends(get_store),  # noqa: B008
    actor: Optional[str] = Depends(get_actor),  # noqa: B008
) -> TranslationVersion:
    store.catalog.get_component(component_id)
    return store.save(component_id, body.locale, body.stage, body.data, actor)


@router.get("/components/{component_id}/translations/current", response_model=List[TranslationVersion])
def list_current_translations(
    component_id: uuid.UUID,
    stage: str = EDIT_STAGE,
    store: TranslationStore = Depends(get_store),  # noqa: B008
) -> List[TranslationVersion]:
    store.catalog.get_component(component_id)
    return store.list_current(component_id, stage)


@router.post("/components/{component_id}/translations/revert", response_model=TranslationVersion)
def revert_translation(
    component_id: uuid.UUID,
    locale: str = DEFAULT_LOCALE,
    stage: str = EDIT_STAGE,
    pipeline: StagePipeline = Depends(get_pipeline),  # noqa: B008
    actor: Optional[str] = Depends(get_actor),  # noqa: B008
) -> TranslationVersion:
    return pipeline.revert(component_id, locale, stage, actor)


@router.post("/components/{component_id}/translations/deploy", response_model=TranslationVersion)
def deploy_translation(
    component_id: uuid.UUID,
    body: DeployRequest,
    pipeline: StagePipeline = Depends(get_pipeline),  # noqa: B008
    actor: Optional[str] = Depends(get_actor),  # noqa: B008
) -> TranslationVersion:
    return pipeline.deploy(component_id, body.locale, body.from_stage, body.to_stage, actor)


@router.get("/components/{component_id}/translations/compare", response_model=CompareResponse)
def compare_translation(
    component_id: uuid.UUID,
    locale: str = DEFAULT_LOCALE,
    stage: str = EDIT_STAGE,
    store: TranslationStore = Depends(get_store),  # noqa: B008
) -> CompareResponse:
    pair = store.compare(component_id, locale, stage)
    return CompareResponse(version1=_snapshot(pair.original), version2=_snapshot(pair.current))


@router.post("/components/{component_id}/translations/auto-translate", response_model=TranslationVersion)
def auto_translate(
    component_id: uuid.UUID,
    body: AutoTranslateRequest,
    orchestrator: BackfillOrchestrator = Depends(get_backfill),  # noqa: B008
    actor: Optional[str] = Depends(get_actor),  # noqa: B008
) -> TranslationVersion:
    return orchestrator.auto_translate(component_id, body.source_locale, body.target_locale, body.stage, actor)


@router.post("/components/{component_id}/translations/backfill", response_model=List[TranslationVersion])
def backfill_translations(
    component_id: uuid.UUID,
    body: BackfillRequest,
    orchestrator: BackfillOrchestrator = Depends(get_backfill),  # noqa: B008
    actor: Optional[str] = Depends(get_actor),  # noqa: B008
) -> List[TranslationVersion]:
    return orchestrator.backfill(component_id, body.source_locale, body.target_locales, body.stage, actor)


def _split_values(values: Optional[List[str]]) -> List[str]:
    """Accept both repeated params and one comma-separated value."""
    items: List[str] = []
    for value in values or []:
        items.extend(part.strip() for part in value.split(",") if part.strip())
    return items


def _parse_component_ids(values: List[str]) -> List[uuid.UUID]:
    try:
        return [uuid.UUID(value) for value in values]
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid component id") from exc


@router.get("/translations/bulk")
def bulk_translations(
    component_ids: Optional[List[str]] = Query(default=None),  # noqa: B008
    application_code: Optional[str] = None,
    component_codes: Optional[List[str]] = Query(default=None),  # noqa: B008
    locale: str = DEFAULT_LOCALE,
    stage: str = READ_STAGE,
    store: TranslationStore = Depends(get_store),  # noqa: B008
) -> Dict[str, Any]:
    """Effective payloads keyed by component id, or by code when addressed by codes."""
    codes = _split_values(component_codes)
    if codes:
        if not application_code:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="application_code is required with component_codes",
            )
        rows_by_code = store.get_many_by_codes(application_code, codes, locale, stage)
        return {code: row.data for code, row in rows_by_code.items()}

    ids = _parse_component_ids(_split_values(component_ids))
    if not ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="component_ids or component_codes is required",
        )
    rows = store.get_many(ids, locale, stage)
    return {str(component_id): row.data for component_id, row in rows.items()}
