import logging
import uuid
from typing import Any, Dict, Optional

from i18n_center_api.services.translation_store import StageLike, TranslationStore, stage_label
from i18n_models import TranslationVersion

logger = logging.getLogger(__name__)


def export_component(
    store: TranslationStore,
    component_id: uuid.UUID,
    stage: StageLike,
    locale: Optional[str] = None,
) -> Dict[str, Any]:
    """Payload of one locale, or {locale: payload} of every current row."""
    if locale:
        return store.effective_payload(component_id, locale, stage)
    return {row.locale: row.data for row in store.list_current(component_id, stage)}


def export_application(
    store: TranslationStore,
    application_id: uuid.UUID,
    stage: StageLike,
    locale: Optional[str] = None,
) -> Dict[str, Any]:
    """Export every live component of an application, keyed by component code.

    With a locale, components that have nothing saved for it are skipped.
    """
    stage = stage_label(stage)
    store.catalog.get_application(application_id)
    components = store.catalog.list_components(application_id)

    if locale:
        rows = store.get_many([c.id for c in components], locale, stage)
        return {c.code: rows[c.id].data for c in components if c.id in rows}

    exported: Dict[str, Any] = {}
    for component in components:
        exported[component.code] = export_component(store, component.id, stage)
    return exported


def import_component(
    store: TranslationStore,
    component_id: uuid.UUID,
    locale: str,
    stage: StageLike,
    data: Dict[str, Any],
    actor: Optional[str] = None,
) -> TranslationVersion:
    store.catalog.get_component(component_id)
    saved = store.save(component_id, locale, stage, data, actor)
    logger.info("Translation imported", extra={"component_id": str(component_id), "locale": locale})
    return saved

