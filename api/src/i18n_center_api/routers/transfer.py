import json
import uuid
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from pydantic import BaseModel

from i18n_center_api.deps import get_actor, get_store
from i18n_center_api.services.transfer import export_application, export_component, import_component
from i18n_center_api.services.translation_store import TranslationStore
from i18n_models import DeploymentStage, TranslationVersion

router = APIRouter(tags=["transfer"])


class ImportRequest(BaseModel):
    data: Dict[str, Any]


def _json_attachment(payload: Dict[str, Any], filename: str) -> Response:
    return Response(
        content=json.dumps(payload, ensure_ascii=False, indent=2),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/components/{component_id}/export")
def export_component_translations(
    component_id: uuid.UUID,
    locale: Optional[str] = None,
    stage: str = DeploymentStage.PRODUCTION.value,
    store: TranslationStore = Depends(get_store),  # noqa: B008
) -> Response:
    component = store.catalog.get_component(component_id)
    payload = export_component(store, component_id, stage, locale)
    suffix = f"_{locale}" if locale else ""
    return _json_attachment(payload, f"{component.code}{suffix}_{stage}.json")


@router.post("/components/{component_id}/import", response_model=TranslationVersion)
def import_component_translations(
    component_id: uuid.UUID,
    body: ImportRequest,
    locale: str = "en",
    stage: str = DeploymentStage.DRAFT.value,
    store: TranslationStore = Depends(get_store),  # noqa: B008
    actor: Optional[str] = Depends(get_actor),  # noqa: B008
) -> TranslationVersion:
    return import_component(store, component_id, locale, stage, body.data, actor)


@router.get("/applications/{application_id}/export")
def export_application_translations(
    application_id: uuid.UUID,
    locale: Optional[str] = None,
    stage: str = DeploymentStage.PRODUCTION.value,
    store: TranslationStore = Depends(get_store),  # noqa: B008
) -> Response:
    application = store.catalog.get_application(application_id)
    payload = export_application(store, application_id, stage, locale)
    suffix = f"_{locale}" if locale else ""
    return _json_attachment(payload, f"{application.code}{suffix}_{stage}.json")
