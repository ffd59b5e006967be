import logging
import uuid
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from i18n_center_api.deps import get_actor, get_catalog
from i18n_center_api.services.catalog import ComponentCatalog
from i18n_models import Application, Component

router = APIRouter(tags=["catalog"])
logger = logging.getLogger(__name__)


class ApplicationCreate(BaseModel):
    code: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = ""
    enabled_languages: List[str] = Field(default_factory=list)
    openai_key: Optional[str] = None


class ApplicationUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    enabled_languages: Optional[List[str]] = None
    openai_key: Optional[str] = None


class ComponentCreate(BaseModel):
    application_id: uuid.UUID
    code: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = ""
    structure: Optional[Dict[str, Any]] = None
    default_locale: str = "en"


class ComponentUpdate(BaseModel):
    code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    structure: Optional[Dict[str, Any]] = None
    default_locale: Optional[str] = None


@router.post("/applications", response_model=Application, status_code=status.HTTP_201_CREATED)
def create_application(
    body: ApplicationCreate,
    catalog: ComponentCatalog = Depends(get_catalog),  # noqa: B008
    actor: Optional[str] = Depends(get_actor),  # noqa: B008
) -> Application:
    return catalog.create_application(Application(**body.model_dump()), actor)


@router.get("/applications", response_model=List[Application])
def list_applications(catalog: ComponentCatalog = Depends(get_catalog)) -> List[Application]:  # noqa: B008
    applications = catalog.list_applications()
    logger.info("Applications listed", extra={"count": len(applications)})
    return applications


@router.get("/applications/{application_id}", response_model=Application)
def get_application(application_id: uuid.UUID, catalog: ComponentCatalog = Depends(get_catalog)) -> Application:  # noqa: B008
    return catalog.get_application(application_id)


@router.put("/applications/{application_id}", response_model=Application)
def update_application(
    application_id: uuid.UUID,
    body: ApplicationUpdate,
    catalog: ComponentCatalog = Depends(get_catalog),  # noqa: B008
    actor: Optional[str] = Depends(get_actor),  # noqa: B008
) -> Application:
    return catalog.update_application(application_id, body.model_dump(exclude_unset=True), actor)


@router.delete("/applications/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_application(
    application_id: uuid.UUID,
    catalog: ComponentCatalog = Depends(get_catalog),  # noqa: B008
    actor: Optional[str] = Depends(get_actor),  # noqa: B008
) -> None:
    catalog.delete_application(application_id, actor)
    return None


@router.post("/components", response_model=Component, status_code=status.HTTP_201_CREATED)
def create_component(
    body: ComponentCreate,
    catalog: ComponentCatalog = Depends(get_catalog),  # noqa: B008
    actor: Optional[str] = Depends(get_actor),  # noqa: B008
) -> Component:
    return catalog.create_component(Component(**body.model_dump()), actor)


@router.get("/components", response_model=List[Component])
def list_components(
    application_id: Optional[uuid.UUID] = None,
    catalog: ComponentCatalog = Depends(get_catalog),  # noqa: B008
) -> List[Component]:
    components = catalog.list_components(application_id)
    logger.info("Components listed", extra={"count": len(components)})
    return components


@router.get("/components/{component_id}", response_model=Component)
def get_component(component_id: uuid.UUID, catalog: ComponentCatalog = Depends(get_catalog)) -> Component:  # noqa: B008
    return catalog.get_component(component_id)


@router.put("/components/{component_id}", response_model=Component)
def update_component(
    component_id: uuid.UUID,
    body: ComponentUpdate,
    catalog: ComponentCatalog = Depends(get_catalog),  # noqa: B008
    actor: Optional[str] = Depends(get_actor),  # noqa: B008
) -> Component:
    return catalog.update_component(component_id, body.model_dump(exclude_unset=True), actor)


@router.delete("/components/{component_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_component(
    component_id: uuid.UUID,
    catalog: ComponentCatalog = Depends(get_catalog),  # noqa: B008
    actor: Optional[str] = Depends(get_actor),  # noqa: B008
) -> None:
    catalog.delete_component(component_id, actor)
    return None
