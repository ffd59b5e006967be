"""Administrative CRUD for applications and components."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from i18n_center_api.cache import ResilientCache, component_key
from i18n_center_api.errors import (
    ApplicationNotFoundError,
    ComponentNotFoundError,
    ConflictError,
    PersistenceError,
    UnknownComponentCodesError,
)
from i18n_models import Application, Component

logger = logging.getLogger(__name__)

COMPONENT_FIELDS = ("name", "code", "description", "structure", "default_locale")
APPLICATION_FIELDS = ("name", "description", "enabled_languages", "openai_key")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ComponentCatalog:
    def __init__(self, session: Session, cache: Optional[ResilientCache] = None) -> None:
        self.session = session
        self.cache = cache if cache is not None else ResilientCache()

    def _commit(self, operation: str, conflict_message: str) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise ConflictError(conflict_message) from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Catalog write failed", extra={"operation": operation, "error": str(exc)})
            raise PersistenceError(f"{operation} failed") from exc

    # --- applications -------------------------------------------------

    def create_application(self, application: Application, actor: Optional[str] = None) -> Application:
        application.created_by = actor
        application.updated_by = actor
        self.session.add(application)
        self._commit("create_application", f"Application code already exists: {application.code}")
        self.session.refresh(application)
        logger.info("Application created", extra={"application_id": str(application.id), "code": application.code})
        return application

    def get_application(self, application_id: uuid.UUID) -> Application:
        application = self.session.get(Application, application_id)
        if application is None or application.is_deleted:
            raise ApplicationNotFoundError(f"Application not found: {application_id}")
        return application

    def get_application_by_code(self, code: str) -> Application:
        application = self.session.exec(
            select(Application).where(Application.code == code, Application.deleted_at == None)  # noqa: E711
        ).first()
        if application is None:
            raise ApplicationNotFoundError(f"application not found: {code}")
        return application

    def list_applications(self) -> List[Application]:
        return list(
            self.session.exec(
                select(Application).where(Application.deleted_at == None).order_by(Application.code)  # noqa: E711
            ).all()
        )

    def update_application(
        self, application_id: uuid.UUID, changes: Dict[str, Any], actor: Optional[str] = None
    ) -> Application:
        application = self.get_application(application_id)
        for field in APPLICATION_FIELDS:
            if field in changes:
                setattr(application, field, changes[field])
        application.updated_by = actor
        self.session.add(application)
        self._commit("update_application", "Application update conflicts with an existing row")
        self.session.refresh(application)
        logger.info("Application updated", extra={"application_id": str(application_id)})
        return application

    def delete_application(self, application_id: uuid.UUID, actor: Optional[str] = None) -> None:
        application = self.get_application(application_id)
        application.deleted_at = _utcnow()
        application.updated_by = actor
        self.session.add(application)
        self._commit("delete_application", "Application delete failed")
        logger.info("Application deleted", extra={"application_id": str(application_id)})

    # --- components ---------------------------------------------------

    def create_component(self, component: Component, actor: Optional[str] = None) -> Component:
        self.get_application(component.application_id)
        component.created_by = actor
        component.updated_by = actor
        self.session.add(component)
        self._commit("create_component", "Component code already exists for this application")
        self.session.refresh(component)
        logger.info("Component created", extra={"component_id": str(component.id), "code": component.code})
        return component

    def get_component(self, component_id: uuid.UUID) -> Component:
        key = component_key(component_id)
        cached = self.cache.get(key)
        if cached is not None:
            try:
                return Component.model_validate(cached)
            except ValidationError:
                logger.warning("Discarding malformed cached component", extra={"cache_key": key})
                self.cache.delete(key)

        component = self.session.get(Component, component_id)
        if component is None or component.is_deleted:
            raise ComponentNotFoundError(f"Component not found: {component_id}")
        self.cache.set(key, component.model_dump(mode="json"))
        return component

    def get_component_by_code(self, application_id: uuid.UUID, code: str) -> Component:
        component = self.session.exec(
            select(Component).where(
                Component.application_id == application_id,
                Component.code == code,
                Component.deleted_at == None,  # noqa: E711
            )
        ).first()
        if component is None:
            raise ComponentNotFoundError(f"Component not found: {code}")
        return component

    def list_components(self, application_id: Optional[uuid.UUID] = None) -> List[Component]:
        stmt = select(Component).where(Component.deleted_at == None)  # noqa: E711
        if application_id is not None:
            stmt = stmt.where(Component.application_id == application_id)
        return list(self.session.exec(stmt.order_by(Component.code)).all())

    def resolve_codes(self, application_code: str, codes: Sequence[str]) -> Dict[str, Component]:
        """Map component codes to components of one application; all must resolve."""
        application = self.get_application_by_code(application_code)
        wanted = list(dict.fromkeys(codes))
        rows = self.session.exec(
            select(Component).where(
                Component.application_id == application.id,
                Component.code.in_(wanted),
                Component.deleted_at == None,  # noqa: E711
            )
        ).all()
        by_code = {c.code: c for c in rows}
        missing = [code for code in wanted if code not in by_code]
        if missing:
            raise UnknownComponentCodesError(missing)
        return by_code

    def update_component(self, component_id: uuid.UUID, changes: Dict[str, Any], actor: Optional[str] = None) -> Component:
        component = self.session.get(Component, component_id)
        if component is None or component.is_deleted:
            raise ComponentNotFoundError(f"Component not found: {component_id}")
        for field in COMPONENT_FIELDS:
            if field in changes:
                setattr(component, field, changes[field])
        component.updated_by = actor
        self.session.add(component)
        self._commit("update_component", "Component code already exists for this application")
        self.session.refresh(component)
        self.cache.delete(component_key(component_id))
        logger.info("Component updated", extra={"component_id": str(component_id)})
        return component

    def delete_component(self, component_id: uuid.UUID, actor: Optional[str] = None) -> None:
        component = self.session.get(Component, component_id)
        if component is None or component.is_deleted:
            raise ComponentNotFoundError(f"Component not found: {component_id}")
        component.deleted_at = _utcnow()
        component.updated_by = actor
        self.session.add(component)
        self._commit("delete_component", "Component delete failed")
        self.cache.delete(component_key(component_id))
        logger.info("Component deleted", extra={"component_id": str(component_id)})
